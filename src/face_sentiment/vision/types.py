"""Core data types shared across the face sentiment pipeline."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import IntEnum
from typing import Final


class InvalidInputError(ValueError):
    """Raised when an input violates a precondition (empty image, wrong vector length)."""


class SentimentLabel(IntEnum):
    """FER+ emotion classes, in model output order."""

    NEUTRAL = 0
    HAPPINESS = 1
    SURPRISE = 2
    SADNESS = 3
    ANGER = 4
    DISGUST = 5
    FEAR = 6
    CONTEMPT = 7

    @property
    def label(self) -> str:
        """Lower-case label name (e.g. "happiness")."""
        return self.name.lower()


NUM_SENTIMENTS: Final[int] = len(SentimentLabel)


@dataclass(frozen=True, slots=True)
class Box:
    """Axis-aligned face box in absolute pixel coordinates.

    Attributes:
        x1, y1: Top-left corner (inclusive).
        x2, y2: Bottom-right corner (exclusive), so ``x2 - x1`` is the width.
    """

    x1: int
    y1: int
    x2: int
    y2: int

    @classmethod
    def from_xywh(cls, x: int, y: int, w: int, h: int) -> Box:
        """Build a box from an origin and a size."""
        return cls(x1=int(x), y1=int(y), x2=int(x) + int(w), y2=int(y) + int(h))

    @property
    def width(self) -> int:
        return self.x2 - self.x1

    @property
    def height(self) -> int:
        return self.y2 - self.y1

    def area(self) -> int:
        """Return the box area in pixels squared."""
        return max(0, self.width) * max(0, self.height)

    def clip(self, w: int, h: int) -> Box:
        """Clip coordinates to image bounds and normalize (x1<=x2, y1<=y2)."""
        x1 = max(0, min(self.x1, w))
        y1 = max(0, min(self.y1, h))
        x2 = max(0, min(self.x2, w))
        y2 = max(0, min(self.y2, h))
        if x2 < x1:
            x1, x2 = x2, x1
        if y2 < y1:
            y1, y2 = y2, y1
        return Box(x1=x1, y1=y1, x2=x2, y2=y2)


@dataclass(frozen=True, slots=True)
class NormalizedBox:
    """Face box in relative coordinates, each value in [0, 1]."""

    left: float
    top: float
    right: float
    bottom: float

    def as_list(self) -> list[float]:
        return [self.left, self.top, self.right, self.bottom]


# Reserved "no face" value; a real detection always has left < right.
NO_FACE_BOX: Final[NormalizedBox] = NormalizedBox(0.0, 0.0, 0.0, 0.0)


@dataclass(frozen=True, slots=True)
class SentimentScores:
    """One score per `SentimentLabel`, in label order."""

    values: tuple[float, ...]

    def __post_init__(self) -> None:
        if len(self.values) != NUM_SENTIMENTS:
            raise InvalidInputError(
                f"Expected {NUM_SENTIMENTS} sentiment scores, got {len(self.values)}"
            )
        object.__setattr__(self, "values", tuple(float(v) for v in self.values))

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> SentimentScores:
        return cls(tuple(values))

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[float]:
        return iter(self.values)

    def __getitem__(self, label: int) -> float:
        return self.values[int(label)]

    @property
    def predominant(self) -> SentimentLabel:
        """Highest-scoring label; the earliest label wins ties."""
        from face_sentiment.sentiment import predominant

        return predominant(self.values)

    def as_dict(self) -> dict[str, float]:
        """Map label names to scores."""
        return {lab.label: self.values[lab] for lab in SentimentLabel}


# Reserved "no face" scores; a real softmax output sums to 1.
NO_FACE_SCORES: Final[SentimentScores] = SentimentScores((0.0,) * NUM_SENTIMENTS)


@dataclass(frozen=True, slots=True)
class FaceSentimentResult:
    """Output of one inference call.

    Attributes:
        box: Face box in normalized coordinates, or `NO_FACE_BOX`.
        scores: Softmax scores, or `NO_FACE_SCORES`.
        face: Expanded face box in pixel coordinates, None when no face was found.
    """

    box: NormalizedBox
    scores: SentimentScores
    face: Box | None = None

    @property
    def is_face_found(self) -> bool:
        return self.box != NO_FACE_BOX

    @property
    def predominant(self) -> SentimentLabel:
        return self.scores.predominant
