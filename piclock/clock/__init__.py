"""Clock face layout and the main render loop."""

from .layout import compose_frame
from .service import ClockService, build_service, main

__all__ = ["ClockService", "build_service", "compose_frame", "main"]
