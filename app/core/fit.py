"""Aspect-ratio preserving fit of an image inside a target box."""

from app.core.geometry import Box
from app.utils.exceptions import InvalidAssetError


def fit_within(image_width: float, image_height: float, box: Box) -> Box:
    """Return the largest centred box with the image's aspect ratio inside ``box``.

    Raises:
        InvalidAssetError: If the image has a zero or negative dimension.
    """
    if image_width <= 0 or image_height <= 0:
        raise InvalidAssetError(
            f"Image has degenerate intrinsic size {image_width}x{image_height}"
        )

    draw_width = box.width
    draw_height = (image_height / image_width) * draw_width
    if draw_height > box.height:
        draw_height = box.height
        draw_width = (image_width / image_height) * draw_height

    draw_x = box.x + (box.width - draw_width) / 2
    draw_y = box.y + (box.height - draw_height) / 2
    return Box(draw_x, draw_y, draw_width, draw_height)
