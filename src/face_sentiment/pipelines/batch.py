"""Batch runner: face sentiment analysis over a set of image files."""

import logging
from dataclasses import dataclass
from pathlib import Path
from time import perf_counter

import yaml
from pydantic import BaseModel, ConfigDict

from face_sentiment.pipelines.analyzer import FaceSentimentAnalyzer
from face_sentiment.vision.image import ensure_dir, read_image
from face_sentiment.vision.types import FaceSentimentResult
from face_sentiment.vision.vis import draw_result, emoji_for

LOG = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class FaceSentimentRun:
    """Run configuration for a single image."""

    image_path: Path
    outdir: Path
    save_vis: bool = False
    overwrite: bool = False
    verbose: bool = False


class _FaceBoxJson(BaseModel):
    model_config = ConfigDict(extra="ignore")

    x1: int
    y1: int
    x2: int
    y2: int


class _ResultJson(BaseModel):
    model_config = ConfigDict(extra="ignore")

    image: str
    image_w: int
    image_h: int
    face_found: bool
    box: list[float]
    face_px: _FaceBoxJson | None = None
    scores: dict[str, float]
    predominant: str
    emoji: str = ""


def _to_json(image_path: Path, w: int, h: int, result: FaceSentimentResult) -> _ResultJson:
    face = result.face
    return _ResultJson(
        image=str(image_path),
        image_w=int(w),
        image_h=int(h),
        face_found=result.is_face_found,
        box=result.box.as_list(),
        face_px=(
            _FaceBoxJson(x1=face.x1, y1=face.y1, x2=face.x2, y2=face.y2)
            if face is not None
            else None
        ),
        scores=result.scores.as_dict(),
        predominant=result.predominant.label,
        emoji=emoji_for(result.predominant),
    )


def run_face_sentiment(
    cfg: FaceSentimentRun,
    *,
    analyzer: FaceSentimentAnalyzer,
) -> dict[str, object]:
    """Analyze one image and write its outputs.

    Outputs (under `cfg.outdir`):
      - `<image_stem>.json`: box, per-label scores, predominant label and its emoji
      - `<image_stem>.vis.jpg`: face box and label drawn on the image (if `save_vis`)

    Returns:
        The dict that is written to the JSON file.
    """
    if cfg.verbose:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(levelname)s | %(message)s")

    ensure_dir(cfg.outdir)
    out_json = cfg.outdir / f"{cfg.image_path.stem}.json"
    if out_json.exists() and not cfg.overwrite:
        LOG.info("Skipping %s: %s already exists", cfg.image_path, out_json)
        return _ResultJson.model_validate_json(out_json.read_text(encoding="utf-8")).model_dump()

    img = read_image(cfg.image_path)
    w, h = img.size

    t0 = perf_counter()
    result = analyzer.infer(img)
    LOG.info(
        "Analyzed image=%s size=%sx%s face_found=%s predominant=%s took=%.3fs",
        cfg.image_path,
        w,
        h,
        result.is_face_found,
        result.predominant.label,
        perf_counter() - t0,
    )

    if cfg.save_vis:
        draw_result(img, result, cfg.outdir / f"{cfg.image_path.stem}.vis.jpg")

    payload = _to_json(cfg.image_path, w, h, result)
    out_json.write_text(payload.model_dump_json(indent=2), encoding="utf-8")
    return payload.model_dump()


def run_face_sentiment_batch(
    *,
    images: list[Path],
    out_root: Path,
    analyzer: FaceSentimentAnalyzer,
    save_vis: bool = False,
    overwrite: bool = False,
    verbose: bool = False,
) -> tuple[list[dict[str, object]], int]:
    """Run `analyzer` over `images` and write `summary.yaml` in `out_root`.

    A failure on one image is logged and recorded in the summary; the other
    images are still processed.

    Returns:
        (summary_images, failures)
    """
    ensure_dir(out_root)
    summary: list[dict[str, object]] = []
    failures = 0

    for image_path in images:
        try:
            payload = run_face_sentiment(
                FaceSentimentRun(
                    image_path=image_path,
                    outdir=out_root,
                    save_vis=save_vis,
                    overwrite=overwrite,
                    verbose=verbose,
                ),
                analyzer=analyzer,
            )
            summary.append(
                {
                    "image": str(image_path),
                    "face_found": bool(payload["face_found"]),
                    "predominant": str(payload["predominant"]),
                    "emoji": str(payload["emoji"]),
                    "box": list(payload["box"]),  # type: ignore[call-overload]
                }
            )
        except Exception as e:
            failures += 1
            LOG.exception("Face sentiment failed for image=%s", image_path)
            summary.append(
                {
                    "image": str(image_path),
                    "error": f"{type(e).__name__}: {e}",
                }
            )

    dumped = yaml.safe_dump({"images": summary}, sort_keys=False, allow_unicode=True)
    (out_root / "summary.yaml").write_text(dumped, encoding="utf-8")
    return summary, failures
