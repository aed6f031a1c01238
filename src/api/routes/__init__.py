"""API route modules."""

from .calendar import router as calendar_router
from .events import router as events_router
from .health import router as health_router
from .tasks import router as tasks_router

__all__ = ["health_router", "events_router", "calendar_router", "tasks_router"]
