"""Score normalization and predominant-sentiment selection."""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

from face_sentiment.vision.types import (
    NUM_SENTIMENTS,
    InvalidInputError,
    SentimentLabel,
    SentimentScores,
)


def softmax(logits: Sequence[float]) -> SentimentScores:
    """Turn raw FER+ logits into a probability distribution.

    The max logit is subtracted before exponentiation when it is finite, which
    keeps large logits from overflowing. A +inf logit takes all the mass
    (shared evenly when several are +inf). If every exponential underflows to 0
    (all logits are -inf) the sum is replaced by 1, so the output is all zeros
    and does not sum to 1. Callers see that as a boundary case, not an error.

    Raises:
        InvalidInputError: If `logits` does not hold exactly 8 values.
    """
    if len(logits) != NUM_SENTIMENTS:
        raise InvalidInputError(f"Expected {NUM_SENTIMENTS} logits, got {len(logits)}")

    x = np.asarray(logits, dtype=np.float64)
    pos_inf = np.isposinf(x)
    if pos_inf.any():
        # Limit of softmax: the mass is split evenly over the +inf entries.
        return SentimentScores(tuple(float(v) for v in pos_inf / pos_inf.sum()))

    peak = float(np.max(x))
    if math.isfinite(peak):
        x = x - peak
    exps = np.exp(x)
    total = float(exps.sum())
    if total == 0.0:
        total = 1.0
    return SentimentScores(tuple(float(v) for v in exps / total))


def predominant(scores: Sequence[float] | SentimentScores) -> SentimentLabel:
    """Return the label with the highest score.

    Uses a strict ``>`` against a running max, so the earliest label wins a
    tie. The all-zero "no face" scores therefore map to NEUTRAL.
    """
    best = SentimentLabel.NEUTRAL
    best_score = -math.inf
    for i, score in enumerate(scores):
        if score > best_score:
            best = SentimentLabel(i)
            best_score = score
    return best


def format_scores(scores: SentimentScores) -> list[str]:
    """Render one "label : score" line per class, marking the predominant one."""
    top = scores.predominant
    lines: list[str] = []
    for lab in SentimentLabel:
        marker = " <<------" if lab == top else ""
        lines.append(f"{lab.label} : {scores[lab]:.4f}{marker}")
    return lines
