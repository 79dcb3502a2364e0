"""Version 1 API endpoints."""

from .endpoints import (
    movements_router,
    reports_router,
    sessions_router,
    students_router,
    system_router,
)

__all__ = [
    "sessions_router",
    "movements_router",
    "reports_router",
    "students_router",
    "system_router",
]
