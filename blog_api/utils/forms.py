"""
Request body helpers for the blog endpoints.
Reads multipart, urlencoded or JSON bodies into a plain field mapping and
applies the loose coercions the blog table needs.
"""
from typing import Any, Dict, Optional, Tuple

from fastapi import HTTPException, Request, status
from starlette.datastructures import UploadFile


BLOG_FIELDS = (
    "category_id",
    "name",
    "image_name",
    "image_alt",
    "description",
    "bdate",
    "meta_title",
    "meta_keywords",
    "meta_description",
    "publish",
)

# Columns stored as text; JSON numbers etc. are converted with str()
TEXT_FIELDS = tuple(name for name in BLOG_FIELDS if name not in ("category_id", "publish"))

TRUTHY_VALUES = {"1", "true", "on", "yes"}


async def read_blog_form(request: Request) -> Tuple[Dict[str, Any], Optional[UploadFile]]:
    """
    Parse the request body.

    Returns:
        Tuple of (fields, image) where fields holds every known blog field
        (missing ones as None) and image is the uploaded file, if any.

    Raises:
        HTTPException: 400 if a JSON body is malformed
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"error": True, "message": "Invalid JSON body"}
            )
        if not isinstance(body, dict):
            body = {}
        fields = {name: body.get(name) for name in BLOG_FIELDS}
        for name in TEXT_FIELDS:
            fields[name] = to_optional_str(fields[name])
        return fields, None

    form = await request.form()
    fields = {}
    for name in BLOG_FIELDS:
        value = form.get(name)
        fields[name] = None if isinstance(value, UploadFile) else value

    image = form.get("image")
    if not isinstance(image, UploadFile) or not image.filename:
        # Browsers send an empty part when the file input is left blank
        image = None

    return fields, image


def to_optional_str(value: Any) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    return str(value)


def to_optional_int(value: Any) -> Optional[int]:
    """Blank or missing -> None; anything else goes through int()."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return int(value)


def to_bool(value: Any) -> bool:
    """Checkbox-style truthiness: 1/true/on/yes are true."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in TRUTHY_VALUES
