"""
Process-wide service context.
Built once by the application factory and stored on app.state.context.
"""
from dataclasses import dataclass

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from blog_api.config import Settings
from blog_api.database import build_engine, build_session_factory
from blog_api.services.image_store import ImageStore


@dataclass
class ServiceContext:
    settings: Settings
    engine: AsyncEngine
    session_factory: async_sessionmaker
    image_store: ImageStore

    @classmethod
    def from_settings(cls, settings: Settings) -> "ServiceContext":
        engine = build_engine(settings)
        return cls(
            settings=settings,
            engine=engine,
            session_factory=build_session_factory(engine),
            image_store=ImageStore(
                settings.UPLOAD_DIR,
                url_prefix=settings.UPLOAD_URL_PREFIX,
                default_name=settings.DEFAULT_IMAGE_NAME,
            ),
        )


def get_image_store(request: Request) -> ImageStore:
    """FastAPI dependency returning the image store."""
    return request.app.state.context.image_store
