"""
Record store for blog posts.
Thin query layer over the categories table; callers own the transaction.
"""
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, Dict, List, Optional
import logging

from blog_api.models import BlogPost

logger = logging.getLogger(__name__)


class BlogStore:
    """Queries against the blog post table for a single session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_all(self) -> List[BlogPost]:
        """All posts, newest first. No pagination."""
        result = await self.db.execute(
            select(BlogPost).order_by(BlogPost.created_at.desc(), BlogPost.id.desc())
        )
        return list(result.scalars().all())

    async def get_by_id(self, post_id: int) -> Optional[BlogPost]:
        result = await self.db.execute(
            select(BlogPost).where(BlogPost.id == post_id)
        )
        return result.scalar_one_or_none()

    async def insert(self, fields: Dict[str, Any]) -> int:
        """
        Insert a new post.

        Returns:
            int: Generated id
        """
        post = BlogPost(**fields)
        self.db.add(post)
        await self.db.flush()
        logger.info(f"Inserted blog post ID {post.id}")
        return post.id

    async def update_by_id(self, post_id: int, fields: Dict[str, Any]) -> int:
        """
        Overwrite the given columns of one post.

        Returns:
            int: Affected row count (0 when the id does not exist)
        """
        result = await self.db.execute(
            update(BlogPost)
            .where(BlogPost.id == post_id)
            .values(**fields)
            .execution_options(synchronize_session=False)
        )
        logger.info(f"Updated blog post ID {post_id} ({result.rowcount} row(s))")
        return result.rowcount
