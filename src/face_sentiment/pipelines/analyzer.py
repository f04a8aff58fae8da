"""Frame-to-prediction orchestrator (face detection → FER+ → softmax)."""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from PIL import Image

from face_sentiment.detectors.face_cv2 import HaarFaceDetector
from face_sentiment.detectors.ferplus_onnx import (
    MODEL_FILENAME,
    MODEL_INPUT_NAME,
    MODEL_OUTPUT_NAME,
    FerPlusOnnx,
)
from face_sentiment.pipelines.steps import (
    SupportsFaceDetection,
    SupportsSentimentModel,
    locate_face,
    score_face,
)
from face_sentiment.vision.geometry import to_normalized
from face_sentiment.vision.image import check_image
from face_sentiment.vision.types import NO_FACE_BOX, NO_FACE_SCORES, FaceSentimentResult

LOG = logging.getLogger(__name__)


class FaceSentimentAnalyzer:
    """Finds the first face in a frame and scores its emotion.

    The analyzer holds no per-call state, but the model session behind it is
    not assumed to be reentrant: use one analyzer per concurrent caller.
    """

    def __init__(self, detector: SupportsFaceDetection, model: SupportsSentimentModel) -> None:
        self.detector = detector
        self.model = model

    def infer(self, img: Image.Image) -> FaceSentimentResult:
        """Run detection and classification on `img`.

        When no face is detected the model is not called and the result holds
        the all-zero box and scores. Errors raised by the detector or the
        model are not caught.

        Raises:
            InvalidInputError: If the image is empty.
        """
        w, h = check_image(img)
        face = locate_face(img, self.detector)
        if face is None:
            LOG.debug("No face found on %dx%d image", w, h)
            return FaceSentimentResult(box=NO_FACE_BOX, scores=NO_FACE_SCORES, face=None)

        scores = score_face(img, face, self.model)
        result = FaceSentimentResult(box=to_normalized(face, w, h), scores=scores, face=face)
        LOG.debug("Face %s on %dx%d image: %s", face, w, h, result.predominant.label)
        return result


@dataclass(frozen=True, slots=True, kw_only=True)
class AnalyzerConfig:
    """Settings for the default OpenCV + ONNX Runtime analyzer."""

    model_path: Path = Path(MODEL_FILENAME)
    providers: tuple[str, ...] = ("CPUExecutionProvider",)
    input_name: str = MODEL_INPUT_NAME
    output_name: str = MODEL_OUTPUT_NAME
    input_size: int = 64
    cascade_path: Path | None = None
    scale_factor: float = 1.2
    min_neighbors: int = 5
    min_face_size: int = 30


def _default_detector(cfg: AnalyzerConfig) -> SupportsFaceDetection:
    return HaarFaceDetector(
        cfg.cascade_path,
        scale_factor=cfg.scale_factor,
        min_neighbors=cfg.min_neighbors,
        min_size=(cfg.min_face_size, cfg.min_face_size),
    )


def _default_model(cfg: AnalyzerConfig) -> SupportsSentimentModel:
    return FerPlusOnnx(
        cfg.model_path,
        providers=cfg.providers,
        input_name=cfg.input_name,
        output_name=cfg.output_name,
        input_size=cfg.input_size,
    )


def build_analyzer(
    cfg: AnalyzerConfig,
    *,
    detector_factory: Callable[[AnalyzerConfig], SupportsFaceDetection] = _default_detector,
    model_factory: Callable[[AnalyzerConfig], SupportsSentimentModel] = _default_model,
) -> FaceSentimentAnalyzer:
    """Build an analyzer from `cfg`; factories can be swapped for tests."""
    LOG.info("Building analyzer: model=%s providers=%s", cfg.model_path, list(cfg.providers))
    return FaceSentimentAnalyzer(detector=detector_factory(cfg), model=model_factory(cfg))


def parse_providers(
    raw: str | None,
    default: Sequence[str] = ("CPUExecutionProvider",),
) -> tuple[str, ...]:
    """Parse a comma-separated execution provider list (e.g. from an env var)."""
    if not raw:
        return tuple(default)
    return tuple(p.strip() for p in raw.split(",") if p.strip())
