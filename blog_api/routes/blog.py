"""
Blog post routes.
List, fetch, create and update blog posts, with optional image upload on
create/update. All responses use the {error, message?, data?, id?} envelope.
"""
from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import datetime, timezone
import logging

from blog_api.database import get_db
from blog_api.context import get_image_store
from blog_api.schemas import (
    BlogPostResponse,
    BlogListResponse,
    BlogDetailResponse,
    BlogCreatedResponse,
    BlogUpdatedResponse,
    ErrorResponse,
)
from blog_api.services.blog_store import BlogStore
from blog_api.services.image_store import ImageStore
from blog_api.utils.forms import read_blog_form, to_bool, to_optional_int
from blog_api.utils.slug import make_slug

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/blog", tags=["blog"])

NOT_FOUND_MESSAGE = "Blog post not found"
GENERIC_ERROR_MESSAGE = "Something went wrong"

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


def not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"error": True, "message": NOT_FOUND_MESSAGE}
    )


def server_error() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"error": True, "message": GENERIC_ERROR_MESSAGE}
    )


def build_record(fields: dict) -> dict:
    """Column values shared by create and update (image columns excluded)."""
    return {
        "category_id": to_optional_int(fields.get("category_id")),
        "name": fields.get("name"),
        "slug": make_slug(fields.get("name")),
        "image_alt": fields.get("image_alt"),
        "description": fields.get("description"),
        "bdate": fields.get("bdate"),
        "meta_title": fields.get("meta_title"),
        "meta_keywords": fields.get("meta_keywords"),
        "meta_description": fields.get("meta_description"),
        "publish": to_bool(fields.get("publish")),
    }


@router.get("", response_model=BlogListResponse, responses=ERROR_RESPONSES)
async def list_blog_posts(db: AsyncSession = Depends(get_db)):
    """
    Get all blog posts, newest first.

    Returns:
        BlogListResponse: {error: false, data: [...]}

    Raises:
        HTTPException: 500 if the query fails
    """
    try:
        posts = await BlogStore(db).list_all()
        logger.info(f"Retrieved {len(posts)} blog posts")
        return BlogListResponse(
            data=[BlogPostResponse.model_validate(post) for post in posts]
        )
    except Exception as e:
        logger.error(f"Failed to retrieve blog posts: {str(e)}", exc_info=True)
        raise server_error()


@router.get("/{post_id}", response_model=BlogDetailResponse, responses=ERROR_RESPONSES)
async def get_blog_post(post_id: int, db: AsyncSession = Depends(get_db)):
    """
    Get a single blog post.

    Raises:
        HTTPException: 404 if no post has post_id, 500 if the query fails
    """
    try:
        post = await BlogStore(db).get_by_id(post_id)
        if post is None:
            raise not_found()
        return BlogDetailResponse(data=BlogPostResponse.model_validate(post))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to retrieve blog post {post_id}: {str(e)}", exc_info=True)
        raise server_error()


@router.post("", response_model=BlogCreatedResponse, responses=ERROR_RESPONSES)
async def create_blog_post(
    request: Request,
    db: AsyncSession = Depends(get_db),
    images: ImageStore = Depends(get_image_store)
):
    """
    Create a blog post from a multipart form.

    An optional "image" file is stored as {image_name}{ext} (image_name
    defaults to "default") and its public path saved in the image column.
    If the insert fails the stored file is removed again, unless the upload
    overwrote a file that was already there.

    Returns:
        BlogCreatedResponse: {error: false, message, id}

    Raises:
        HTTPException: 400 if the body cannot be parsed, 500 if storing the
        file or inserting the row fails
    """
    image_path = ""
    created_file = False
    try:
        fields, upload = await read_blog_form(request)

        if upload is not None:
            created_file = not images.exists(fields.get("image_name"), upload.filename)
            image_path = images.save(upload.file, fields.get("image_name"), upload.filename)

        now = datetime.now(timezone.utc)
        record = build_record(fields)
        record.update({
            "image": image_path,
            "image_name": fields.get("image_name"),
            "created_at": now,
            "updated_at": now,
        })

        post_id = await BlogStore(db).insert(record)
        await db.commit()

        logger.info(f"Created blog post ID {post_id} (image: {image_path or 'none'})")
        return BlogCreatedResponse(id=post_id)

    except HTTPException:
        await db.rollback()
        raise
    except Exception as e:
        logger.error(f"Error creating blog post: {str(e)}", exc_info=True)
        await db.rollback()
        if image_path and created_file:
            try:
                images.delete(image_path)
            except OSError as cleanup_error:
                logger.error(f"Failed to remove orphaned image {image_path}: {str(cleanup_error)}")
        raise server_error()


@router.put("/{post_id}", response_model=BlogUpdatedResponse, responses=ERROR_RESPONSES)
async def update_blog_post(
    post_id: int,
    request: Request,
    db: AsyncSession = Depends(get_db),
    images: ImageStore = Depends(get_image_store)
):
    """
    Update a blog post, reconciling its image file.

    - New file uploaded: stored under image_name (or the post's current
      image_name) with the new extension; the old file is deleted unless
      it resolves to the same path.
    - Only image_name supplied: the existing file is renamed to match.
    - Neither: the image column is left as is.

    The read of the current image and the row update are not atomic.

    Raises:
        HTTPException: 404 if no post has post_id, 500 on store or file errors
    """
    try:
        store = BlogStore(db)
        post = await store.get_by_id(post_id)
        if post is None:
            raise not_found()

        fields, upload = await read_blog_form(request)
        old_image = post.image or ""
        new_image_name = fields.get("image_name") or None

        if upload is not None:
            image_path = images.replace(
                old_image,
                upload.file,
                new_image_name or post.image_name,
                upload.filename,
            )
        elif new_image_name:
            image_path = images.rename(old_image, new_image_name)
        else:
            image_path = old_image

        record = build_record(fields)
        record.update({
            "image": image_path,
            "image_name": new_image_name or post.image_name,
            "updated_at": datetime.now(timezone.utc),
        })

        affected = await store.update_by_id(post_id, record)
        if affected == 0:
            raise not_found()
        await db.commit()

        logger.info(f"Updated blog post ID {post_id} (image: {old_image or 'none'} -> {image_path or 'none'})")
        return BlogUpdatedResponse()

    except HTTPException:
        await db.rollback()
        raise
    except Exception as e:
        # File operations already applied are not undone here
        logger.error(f"Error updating blog post {post_id}: {str(e)}", exc_info=True)
        await db.rollback()
        raise server_error()
