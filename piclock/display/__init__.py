"""Display backends sharing one frame contract."""

from .models import DisplayFrame, DisplayGeometry
from .protocol import DisplayProtocol
from .text import abbreviate, fit_row, fit_rows

__all__ = [
    "DisplayFrame",
    "DisplayGeometry",
    "DisplayProtocol",
    "abbreviate",
    "fit_row",
    "fit_rows",
]
