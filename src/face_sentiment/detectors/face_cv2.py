"""OpenCV Haar cascade face detector."""

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

import cv2
import numpy as np
from PIL import Image

from face_sentiment.vision.types import Box

LOG = logging.getLogger(__name__)

DEFAULT_CASCADE = "haarcascade_frontalface_default.xml"


def default_cascade_path() -> str:
    """Path of the frontal-face cascade bundled with opencv-python."""
    return str(Path(cv2.data.haarcascades) / DEFAULT_CASCADE)


class HaarFaceDetector:
    """Thin wrapper around `cv2.CascadeClassifier` returning pixel boxes."""

    def __init__(
        self,
        cascade_path: str | Path | None = None,
        *,
        scale_factor: float = 1.2,
        min_neighbors: int = 5,
        min_size: tuple[int, int] = (30, 30),
        cascade_factory: Callable[[str], Any] = cv2.CascadeClassifier,
    ) -> None:
        """Initialize the detector.

        Args:
            cascade_path: Cascade XML file. Defaults to the OpenCV frontal-face model.
            scale_factor: Image pyramid step passed to ``detectMultiScale``.
            min_neighbors: Neighbor count required to keep a candidate.
            min_size: Smallest face size, in pixels.
            cascade_factory: Factory building the classifier from a path.

        Raises:
            RuntimeError: If the cascade could not be loaded.
        """
        path = str(cascade_path) if cascade_path is not None else default_cascade_path()
        self.cascade = cascade_factory(path)
        if self.cascade.empty():
            raise RuntimeError(f"Could not load Haar cascade from {path}")
        self.scale_factor = scale_factor
        self.min_neighbors = min_neighbors
        self.min_size = min_size
        LOG.info("Loaded face cascade: %s", path)

    def detect(self, img: Image.Image) -> list[Box]:
        """Detect faces on `img`, in the order reported by OpenCV."""
        w, h = img.size
        gray = np.asarray(img.convert("L"))
        faces = self.cascade.detectMultiScale(
            gray,
            scaleFactor=self.scale_factor,
            minNeighbors=self.min_neighbors,
            minSize=self.min_size,
        )
        out = [Box.from_xywh(int(x), int(y), int(fw), int(fh)).clip(w, h) for x, y, fw, fh in faces]
        LOG.debug("Detected %d face(s) on %dx%d image", len(out), w, h)
        return out
