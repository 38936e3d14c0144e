from poolbuilder.api.admin import router as admin_router
from poolbuilder.api.health import router as health_router
from poolbuilder.api.pools import router as pools_router
from poolbuilder.api.submissions import router as submissions_router

__all__ = [
    "admin_router",
    "health_router",
    "pools_router",
    "submissions_router",
]
