from __future__ import annotations

import math

import numpy as np
import pytest

from face_sentiment.sentiment import format_scores, predominant, softmax
from face_sentiment.vision.types import InvalidInputError, SentimentLabel, SentimentScores


def test_softmax_sums_to_one() -> None:
    rng = np.random.default_rng(42)
    for scale in (0.1, 1.0, 10.0, 1000.0):
        logits = (rng.standard_normal(8) * scale).tolist()
        scores = softmax(logits)
        assert sum(scores) == pytest.approx(1.0, abs=1e-5)
        assert all(0.0 <= s <= 1.0 for s in scores)


def test_softmax_neutral_logit_dominates() -> None:
    scores = softmax([1, 0, 0, 0, 0, 0, 0, 0])
    expected = math.e / (math.e + 7)
    assert scores[SentimentLabel.NEUTRAL] == pytest.approx(expected)
    assert scores.predominant is SentimentLabel.NEUTRAL


def test_softmax_uniform_for_equal_logits() -> None:
    scores = softmax([0.0] * 8)
    assert list(scores) == pytest.approx([0.125] * 8)
    assert predominant(scores) is SentimentLabel.NEUTRAL


def test_softmax_handles_large_logits() -> None:
    scores = softmax([1000.0, 999.0, 0, 0, 0, 0, 0, 0])
    assert sum(scores) == pytest.approx(1.0)
    assert scores[0] == pytest.approx(1 / (1 + math.exp(-1)))


def test_softmax_all_negative_infinity_gives_zeros() -> None:
    scores = softmax([-math.inf] * 8)
    assert list(scores) == [0.0] * 8


def test_softmax_rejects_wrong_length() -> None:
    with pytest.raises(InvalidInputError):
        softmax([0.0] * 7)
    with pytest.raises(InvalidInputError):
        softmax([])


def test_predominant_first_index_wins_ties() -> None:
    assert predominant([0.1, 0.4, 0.4, 0.1, 0, 0, 0, 0]) is SentimentLabel.HAPPINESS
    assert predominant([0, 0, 0, 0, 0, 0, 0.5, 0.5]) is SentimentLabel.FEAR
    assert predominant([0.0] * 8) is SentimentLabel.NEUTRAL


def test_predominant_ignores_permutations_of_other_scores() -> None:
    base = [0.05, 0.1, 0.15, 0.5, 0.02, 0.08, 0.06, 0.04]
    rng = np.random.default_rng(1)
    others = [i for i in range(8) if i != 3]
    for _ in range(20):
        perm = rng.permutation(others).tolist()
        shuffled = list(base)
        for dst, src in zip(others, perm, strict=True):
            shuffled[dst] = base[src]
        assert predominant(shuffled) is SentimentLabel.SADNESS


def test_format_scores_marks_predominant() -> None:
    lines = format_scores(SentimentScores((0.1, 0.6, 0.3, 0, 0, 0, 0, 0)))
    assert len(lines) == 8
    assert lines[1] == "happiness : 0.6000 <<------"
    assert lines[0] == "neutral : 0.1000"


def test_softmax_positive_infinity_takes_all_mass() -> None:
    scores = softmax([math.inf, 0, 0, 0, 0, 0, 0, 0])
    assert list(scores) == [1.0] + [0.0] * 7
    assert scores.predominant is SentimentLabel.NEUTRAL

    shared = softmax([0, 0, math.inf, 0, 3.0, math.inf, -math.inf, 0])
    assert list(shared) == [0.0, 0.0, 0.5, 0.0, 0.0, 0.5, 0.0, 0.0]
    assert shared.predominant is SentimentLabel.SURPRISE
