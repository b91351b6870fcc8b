"""Text fitting shared by every display backend.

All backends truncate the same way: left-aligned, cut at the display
width, padded with spaces, never wrapped.
"""

from piclock.display.models import DisplayGeometry


def fit_row(text: str, width: int) -> str:
    """Fit a single row to exactly ``width`` characters."""
    flat = text.replace("\r", " ").replace("\n", " ")
    return flat[:width].ljust(width)


def fit_rows(rows: tuple[str, ...] | list[str], geometry: DisplayGeometry) -> tuple[str, ...]:
    """Fit rows to a geometry, dropping extra rows and padding missing ones."""
    fitted = [fit_row(row, geometry.cols) for row in rows[: geometry.rows]]
    fitted.extend(" " * geometry.cols for _ in range(geometry.rows - len(fitted)))
    return tuple(fitted)


def abbreviate(text: str, width: int) -> str:
    """Shorten a word to ``width`` keeping its first letter and its ending.

    ``abbreviate("Thunderstorm", 7) == "T'storm"``. Widths too small to hold
    the apostrophe fall back to plain truncation.
    """
    if len(text) <= width:
        return text
    if width <= 2:
        return text[: max(width, 0)]
    return f"{text[0]}'{text[len(text) - width + 2 :]}"
