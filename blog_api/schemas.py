"""
Pydantic schemas for API responses.
Every response shares the {error, message?, data?, id?} envelope.
"""
from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Optional, List


class BlogPostResponse(BaseModel):
    """
    Response schema for a blog post row.
    Used by GET /api/blog and GET /api/blog/{id}.
    """
    id: int
    category_id: Optional[int] = None
    name: Optional[str] = None
    slug: Optional[str] = None
    image: str = ""
    image_name: Optional[str] = None
    image_alt: Optional[str] = None
    description: Optional[str] = None
    bdate: Optional[str] = None
    meta_title: Optional[str] = None
    meta_keywords: Optional[str] = None
    meta_description: Optional[str] = None
    publish: bool = False
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(
        from_attributes=True  # Enable conversion from SQLAlchemy models
    )


class BlogListResponse(BaseModel):
    error: bool = False
    data: List[BlogPostResponse]


class BlogDetailResponse(BaseModel):
    error: bool = False
    data: BlogPostResponse


class BlogCreatedResponse(BaseModel):
    error: bool = False
    message: str = "Successfully created"
    id: int


class BlogUpdatedResponse(BaseModel):
    error: bool = False
    message: str = "Successfully updated"


class ErrorResponse(BaseModel):
    """Body returned for every 4xx/5xx response."""
    error: bool = True
    message: str
