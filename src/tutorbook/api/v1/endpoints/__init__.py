"""API endpoint modules for version 1."""

from .movements import router as movements_router
from .reports import router as reports_router
from .sessions import router as sessions_router
from .students import router as students_router
from .system import router as system_router

__all__ = [
    "sessions_router",
    "movements_router",
    "reports_router",
    "students_router",
    "system_router",
]
