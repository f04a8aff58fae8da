from __future__ import annotations

import json
from pathlib import Path

import yaml
from PIL import Image

from face_sentiment.pipelines.analyzer import FaceSentimentAnalyzer
from face_sentiment.pipelines.batch import (
    FaceSentimentRun,
    run_face_sentiment,
    run_face_sentiment_batch,
)
from face_sentiment.vision.types import Box


class _SizeDetector:
    """Finds a face only on images wider than 100px."""

    def detect(self, img: Image.Image) -> list[Box]:
        w, _ = img.size
        return [Box.from_xywh(40, 40, 20, 20)] if w > 100 else []


class _CountingModel:
    def __init__(self) -> None:
        self.calls = 0

    def run(self, img: Image.Image, roi: Box) -> list[float]:
        self.calls += 1
        return [0, 0, 4.0, 0, 0, 0, 0, 0]


def _analyzer(model: _CountingModel) -> FaceSentimentAnalyzer:
    return FaceSentimentAnalyzer(_SizeDetector(), model)


def test_run_face_sentiment_writes_json_and_vis(tmp_path: Path) -> None:
    img_path = tmp_path / "face.jpg"
    Image.new("RGB", (200, 100), color=(90, 90, 90)).save(img_path)
    outdir = tmp_path / "out"
    model = _CountingModel()

    payload = run_face_sentiment(
        FaceSentimentRun(image_path=img_path, outdir=outdir, save_vis=True),
        analyzer=_analyzer(model),
    )

    assert payload["face_found"] is True
    assert payload["predominant"] == "surprise"
    assert payload["emoji"] == "😲"
    assert payload["face_px"] == {"x1": 30, "y1": 30, "x2": 70, "y2": 70}
    assert (outdir / "face.vis.jpg").is_file()

    data = json.loads((outdir / "face.json").read_text(encoding="utf-8"))
    assert data["image_w"] == 200
    assert data["box"] == [30 / 200, 30 / 100, 70 / 200, 70 / 100]
    assert abs(sum(data["scores"].values()) - 1.0) < 1e-6
    assert data["emoji"] == "😲"

    # Existing output is reused unless overwrite is set.
    again = run_face_sentiment(
        FaceSentimentRun(image_path=img_path, outdir=outdir),
        analyzer=_analyzer(model),
    )
    assert again == payload
    assert model.calls == 1

    run_face_sentiment(
        FaceSentimentRun(image_path=img_path, outdir=outdir, overwrite=True),
        analyzer=_analyzer(model),
    )
    assert model.calls == 2


def test_run_face_sentiment_no_face(tmp_path: Path) -> None:
    img_path = tmp_path / "empty.png"
    Image.new("RGB", (80, 60)).save(img_path)
    model = _CountingModel()

    payload = run_face_sentiment(
        FaceSentimentRun(image_path=img_path, outdir=tmp_path / "out", save_vis=True),
        analyzer=_analyzer(model),
    )

    assert payload["face_found"] is False
    assert payload["face_px"] is None
    assert payload["box"] == [0.0, 0.0, 0.0, 0.0]
    assert set(payload["scores"].values()) == {0.0}  # type: ignore[union-attr]
    assert payload["predominant"] == "neutral"
    assert payload["emoji"] == "😒"
    assert model.calls == 0


def test_batch_records_failures_and_writes_summary(tmp_path: Path) -> None:
    good = tmp_path / "a.jpg"
    Image.new("RGB", (200, 100)).save(good)
    none = tmp_path / "b.jpg"
    Image.new("RGB", (50, 50)).save(none)
    broken = tmp_path / "c.jpg"
    broken.write_bytes(b"not an image")
    out_root = tmp_path / "out"

    summary, failures = run_face_sentiment_batch(
        images=[good, none, broken],
        out_root=out_root,
        analyzer=_analyzer(_CountingModel()),
    )

    assert failures == 1
    assert [s["image"] for s in summary] == [str(good), str(none), str(broken)]
    assert summary[0]["face_found"] is True
    assert summary[0]["predominant"] == "surprise"
    assert summary[0]["emoji"] == "😲"
    assert summary[1]["face_found"] is False
    assert "error" in summary[2]

    on_disk = yaml.safe_load((out_root / "summary.yaml").read_text(encoding="utf-8"))
    assert len(on_disk["images"]) == 3
