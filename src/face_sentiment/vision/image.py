"""Image I/O and transforms."""

from __future__ import annotations

from pathlib import Path

from PIL import Image

from .types import Box, InvalidInputError


def ensure_dir(p: Path) -> None:
    """Create `p` if it doesn't exist."""
    p.mkdir(parents=True, exist_ok=True)


def read_image(path: Path) -> Image.Image:
    """Read an image from disk and convert it to RGB."""
    return Image.open(path).convert("RGB")


def check_image(img: Image.Image) -> tuple[int, int]:
    """Return ``(w, h)``, rejecting empty images."""
    w, h = img.size
    if w <= 0 or h <= 0:
        raise InvalidInputError(f"Image must be non-empty, got {w}x{h}")
    return w, h


def crop_with_box(img: Image.Image, b: Box) -> Image.Image:
    """Crop an image to a pixel box, clipped to the image bounds."""
    w, h = img.size
    roi = b.clip(w, h)
    if roi.area() == 0:
        raise InvalidInputError(f"Region of interest is empty: {b}")
    return img.crop((roi.x1, roi.y1, roi.x2, roi.y2))
