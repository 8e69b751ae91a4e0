"""Conversion between percent-of-page placements and absolute page boxes.

Placements are anchored at the top-left corner of the page (screen layout),
while PDF page space has its origin at the bottom-left. All functions here are
pure: the same input always yields the same box.
"""

import math
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Box:
    """Axis-aligned rectangle in page space (origin bottom-left)."""

    x: float
    y: float
    width: float
    height: float

    @property
    def center(self) -> tuple[float, float]:
        return self.x + self.width / 2, self.y + self.height / 2

    def is_empty(self) -> bool:
        """True when the box has no area to draw into."""
        return not self.width or not self.height


def to_number(value: Any) -> float:
    """Coerce a loosely typed percent value to float, defaulting to 0."""
    if isinstance(value, bool) or value is None:
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def percent_box_to_page(
    x_percent: float,
    y_percent: float,
    width_percent: float,
    height_percent: float,
    page_width: float,
    page_height: float,
) -> Box:
    """Convert a top-left anchored percent rectangle to a page-space box.

    Percentages outside [0, 100] are accepted and produce boxes partially or
    fully outside the page.
    """
    box_width = (width_percent / 100) * page_width
    box_height = (height_percent / 100) * page_height
    box_x = (x_percent / 100) * page_width
    top_y = (y_percent / 100) * page_height
    box_y = page_height - top_y - box_height
    return Box(box_x, box_y, box_width, box_height)


def page_box_to_percent(
    box: Box, page_width: float, page_height: float
) -> tuple[float, float, float, float]:
    """Inverse of :func:`percent_box_to_page`.

    Returns ``(x_percent, y_percent, width_percent, height_percent)``.
    """
    if not page_width or not page_height:
        raise ValueError("Page size must be non-zero")
    top_y = page_height - box.y - box.height
    return (
        box.x / page_width * 100,
        top_y / page_height * 100,
        box.width / page_width * 100,
        box.height / page_height * 100,
    )
