"""Geometry helpers for face boxes (margin expansion, normalization)."""

from __future__ import annotations

from .types import Box, InvalidInputError, NormalizedBox


def _check_image_size(image_w: int, image_h: int) -> None:
    if image_w <= 0 or image_h <= 0:
        raise InvalidInputError(f"Image size must be positive, got {image_w}x{image_h}")


def adjust_face_box(raw: Box, image_w: int, image_h: int) -> Box:
    """Enlarge a detected face box and clamp it to the image.

    Half the box width is added as a margin on every side (so the box grows
    to twice its width and height plus the detector's own slack), then the
    origin is clamped at 0 and the size at the image edge.

    Args:
        raw: Face box as returned by the detector, in pixels.
        image_w: Source image width in pixels.
        image_h: Source image height in pixels.

    Returns:
        The adjusted box, fully inside ``[0, image_w] x [0, image_h]``.
    """
    _check_image_size(image_w, image_h)
    offset = raw.width // 2
    x = max(0, raw.x1 - offset)
    y = max(0, raw.y1 - offset)
    w = min(raw.width + 2 * offset, image_w - x)
    h = min(raw.height + 2 * offset, image_h - y)
    return Box.from_xywh(x, y, w, h)


def to_normalized(box: Box, image_w: int, image_h: int) -> NormalizedBox:
    """Convert a pixel box to [0, 1] coordinates (for reporting, not cropping)."""
    _check_image_size(image_w, image_h)
    return NormalizedBox(
        left=box.x1 / float(image_w),
        top=box.y1 / float(image_h),
        right=box.x2 / float(image_w),
        bottom=box.y2 / float(image_h),
    )


def to_pixels(box: NormalizedBox, image_w: int, image_h: int) -> Box:
    """Map a normalized box back onto an image of the given size."""
    _check_image_size(image_w, image_h)
    return Box(
        x1=round(box.left * image_w),
        y1=round(box.top * image_h),
        x2=round(box.right * image_w),
        y2=round(box.bottom * image_h),
    )
