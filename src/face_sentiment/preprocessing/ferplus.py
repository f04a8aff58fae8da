"""FER+ input preparation.

The FER+ network expects a single 64x64 grayscale channel with raw pixel
values (0-255), laid out as NCHW.
"""

import numpy as np
from PIL import Image

from face_sentiment.vision.image import crop_with_box
from face_sentiment.vision.types import Box


def to_ferplus_tensor(img: Image.Image, roi: Box, *, size: int = 64) -> np.ndarray:
    """Crop `roi` out of `img` and return a ``(1, 1, size, size)`` float32 tensor.

    Raises:
        InvalidInputError: If the ROI is empty once clipped to the image.
    """
    face = crop_with_box(img, roi).convert("L")
    face = face.resize((size, size), Image.Resampling.BILINEAR)
    arr = np.asarray(face, dtype=np.float32)
    return arr[np.newaxis, np.newaxis, :, :]
