"""Route modules."""

from .blog import router as blog_router
from .content import router as content_router
from .custom_codes import router as custom_codes_router
from .health import router as health_router
from .media import router as media_router
from .taxonomy import categories_router, tags_router
from .uploads import router as uploads_router
from .users import router as users_router

__all__ = [
    "blog_router",
    "categories_router",
    "content_router",
    "custom_codes_router",
    "health_router",
    "media_router",
    "tags_router",
    "uploads_router",
    "users_router",
]
