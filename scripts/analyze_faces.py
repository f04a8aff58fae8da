#!/usr/bin/env python3
"""Batch runner: face detection → FER+ emotion scores for a folder of images.

Core logic lives in `face_sentiment.pipelines.batch`. Model and detector settings
come from environment variables; run options come from the command line.
"""

import argparse
import os
import sys
from pathlib import Path

from face_sentiment.pipelines.analyzer import AnalyzerConfig, build_analyzer, parse_providers
from face_sentiment.pipelines.batch import run_face_sentiment_batch

DEFAULT_MODEL = "models/emotion_ferplus.onnx"
DEFAULT_SCALE_FACTOR = 1.2
DEFAULT_MIN_NEIGHBORS = 5
DEFAULT_MIN_FACE_SIZE = 30

IMAGE_EXTS = {".jpg", ".jpeg", ".png", ".bmp"}


def _iter_images(images_dir: Path) -> list[Path]:
    return sorted(p for p in images_dir.iterdir() if p.is_file() and p.suffix.lower() in IMAGE_EXTS)


def main(argv: list[str]) -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--images_dir", type=str, default="assets/images")
    ap.add_argument("--out_root", type=str, default="outputs/face_sentiment")
    ap.add_argument("--save_vis", action="store_true")
    ap.add_argument("--overwrite", action="store_true")
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args(argv)

    images_dir = Path(args.images_dir).expanduser().resolve()
    if not images_dir.is_dir():
        raise SystemExit(f"--images_dir is not a directory: {images_dir}")

    images = _iter_images(images_dir)
    if not images:
        raise SystemExit(f"No images found under: {images_dir}")

    cascade = os.environ.get("FACE_CASCADE")
    cfg = AnalyzerConfig(
        model_path=Path(os.environ.get("FER_MODEL", DEFAULT_MODEL)),
        providers=parse_providers(os.environ.get("ORT_PROVIDERS")),
        cascade_path=Path(cascade) if cascade else None,
        scale_factor=float(os.environ.get("FACE_SCALE_FACTOR", str(DEFAULT_SCALE_FACTOR))),
        min_neighbors=int(os.environ.get("FACE_MIN_NEIGHBORS", str(DEFAULT_MIN_NEIGHBORS))),
        min_face_size=int(os.environ.get("FACE_MIN_SIZE", str(DEFAULT_MIN_FACE_SIZE))),
    )
    analyzer = build_analyzer(cfg)

    summary, failures = run_face_sentiment_batch(
        images=images,
        out_root=Path(args.out_root).expanduser().resolve(),
        analyzer=analyzer,
        save_vis=bool(args.save_vis),
        overwrite=bool(args.overwrite),
        verbose=bool(args.verbose),
    )
    for item in summary:
        if "error" in item:
            status = f"error ({item['error']})"
        elif item.get("face_found"):
            status = f"{item['predominant']} {item['emoji']}"
        else:
            status = "no face"
        print(f"{item['image']}: {status}")
    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
