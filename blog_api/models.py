"""
SQLAlchemy models for the application.
All database models inherit from Base (declarative base).
"""
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime
from blog_api.database import Base


class BlogPost(Base):
    """
    Blog post record.
    Lives in the legacy "categories" table; image holds the public path of
    the uploaded file (e.g. /uploads/cover.jpg) or an empty string.
    """
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    category_id = Column(Integer, nullable=True)
    name = Column(String(255), nullable=True)
    slug = Column(String(255), nullable=True)
    image = Column(String(255), nullable=False, default="")
    image_name = Column(String(255), nullable=True)
    image_alt = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    bdate = Column(String(50), nullable=True)
    meta_title = Column(String(255), nullable=True)
    meta_keywords = Column(String(255), nullable=True)
    meta_description = Column(Text, nullable=True)
    publish = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False)
