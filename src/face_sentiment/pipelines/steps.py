"""Service protocols and the individual pipeline steps."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from PIL import Image

from face_sentiment.sentiment import softmax
from face_sentiment.vision.geometry import adjust_face_box
from face_sentiment.vision.types import Box, SentimentScores

LOG = logging.getLogger(__name__)


class SupportsFaceDetection(Protocol):
    """Protocol for a face detector."""

    def detect(self, img: Image.Image) -> list[Box]:
        """Return candidate face boxes in pixel coordinates (possibly empty)."""
        ...


class SupportsSentimentModel(Protocol):
    """Protocol for an emotion classifier taking a full frame plus a region of interest."""

    def run(self, img: Image.Image, roi: Box) -> Sequence[float]:
        """Return 8 raw logits in `SentimentLabel` order."""
        ...


def locate_face(img: Image.Image, detector: SupportsFaceDetection) -> Box | None:
    """Detect faces and return the first one, expanded and clamped to the image.

    A first candidate that is empty once adjusted counts as no face, so its
    normalized box can never collide with the all-zero "no face" box.
    """
    faces = detector.detect(img)
    if not faces:
        return None
    w, h = img.size
    face = adjust_face_box(faces[0], w, h)
    if face.area() == 0:
        LOG.debug("Ignoring empty face candidate %s", faces[0])
        return None
    return face


def score_face(img: Image.Image, roi: Box, model: SupportsSentimentModel) -> SentimentScores:
    """Run the classifier on `roi` and normalize its logits."""
    return softmax(model.run(img, roi))
