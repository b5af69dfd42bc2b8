# Routes package
from db_demo.api.routes.health import router as health_router

__all__ = [
    "health_router",
]
