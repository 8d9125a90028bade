"""FastAPI routers for the employee records service."""

from .auth import router as auth_router
from .documents import router as documents_router
from .employees import router as employees_router

__all__ = [
    "auth_router",
    "documents_router",
    "employees_router",
]
