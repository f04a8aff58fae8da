"""ONNX Runtime wrapper for the FER+ emotion classifier."""

import logging
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any, Final

import numpy as np
import onnxruntime as ort
from PIL import Image

from face_sentiment.preprocessing.ferplus import to_ferplus_tensor
from face_sentiment.vision.types import NUM_SENTIMENTS, Box

LOG = logging.getLogger(__name__)

MODEL_FILENAME: Final[str] = "emotion_ferplus.onnx"
MODEL_INPUT_NAME: Final[str] = "Input3"
MODEL_OUTPUT_NAME: Final[str] = "Plus692_Output_0"


class FerPlusOnnx:
    """Runs FER+ on a face region and returns its 8 raw logits.

    The execution providers are passed through to ONNX Runtime unchanged; picking
    them is left to the caller.
    """

    def __init__(
        self,
        model_path: str | Path,
        *,
        providers: Sequence[str] = ("CPUExecutionProvider",),
        input_name: str = MODEL_INPUT_NAME,
        output_name: str = MODEL_OUTPUT_NAME,
        input_size: int = 64,
        session_factory: Callable[..., Any] = ort.InferenceSession,
    ) -> None:
        self.model_path = Path(model_path).expanduser().resolve()
        if not self.model_path.is_file():
            raise FileNotFoundError(f"FER+ model not found: {self.model_path}")

        self.input_name = input_name
        self.output_name = output_name
        self.input_size = input_size
        LOG.info("Loading FER+ model: %s (providers=%s)", self.model_path, list(providers))
        self.session = session_factory(str(self.model_path), providers=list(providers))

    def run(self, img: Image.Image, roi: Box) -> list[float]:
        """Classify the face inside `roi` on the full frame `img`.

        Returns:
            Unnormalized scores, one per `SentimentLabel`.

        Raises:
            RuntimeError: If the model output does not hold 8 values.
        """
        tensor = to_ferplus_tensor(img, roi, size=self.input_size)
        outputs = self.session.run([self.output_name], {self.input_name: tensor})
        logits = np.asarray(outputs[0], dtype=np.float32).reshape(-1)
        if logits.size != NUM_SENTIMENTS:
            raise RuntimeError(
                f"FER+ model returned {logits.size} values, expected {NUM_SENTIMENTS}"
            )
        return [float(v) for v in logits]
