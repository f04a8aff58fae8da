"""Drop-if-busy admission control for live frame sources.

At most one inference runs at a time. A frame arriving while an inference is
in flight is dropped rather than queued, so a slow model never builds up a
backlog of stale frames.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from concurrent.futures import Future, ThreadPoolExecutor

from PIL import Image

from face_sentiment.pipelines.analyzer import FaceSentimentAnalyzer
from face_sentiment.vision.types import FaceSentimentResult

LOG = logging.getLogger(__name__)


class DropIfBusy:
    """Single-slot gate in front of a `FaceSentimentAnalyzer`.

    Call `submit` from a producer callback (e.g. a camera "frame arrived"
    handler) or `submit_nowait` from a loop that must keep pulling frames.
    """

    def __init__(self, analyzer: FaceSentimentAnalyzer) -> None:
        self.analyzer = analyzer
        self._lock = threading.Lock()
        self._stats_lock = threading.Lock()
        self._processed = 0
        self._dropped = 0
        self._failed = 0

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    def stats(self) -> tuple[int, int, int]:
        """Return ``(processed, dropped, failed)`` frame counts."""
        with self._stats_lock:
            return self._processed, self._dropped, self._failed

    def _admit(self) -> bool:
        if self._lock.acquire(blocking=False):
            return True
        with self._stats_lock:
            self._dropped += 1
        LOG.debug("Dropping frame: inference in progress")
        return False

    def _run_admitted(self, img: Image.Image) -> FaceSentimentResult:
        # Runs with the gate held; the lock may be released from another thread.
        try:
            result = self.analyzer.infer(img)
        except Exception:
            with self._stats_lock:
                self._failed += 1
            raise
        finally:
            self._lock.release()
        with self._stats_lock:
            self._processed += 1
        return result

    def submit(self, img: Image.Image) -> FaceSentimentResult | None:
        """Run inference on `img` in the calling thread unless the gate is busy.

        Returns:
            The result, or None if the frame was dropped.
        """
        if not self._admit():
            return None
        return self._run_admitted(img)

    def submit_nowait(
        self,
        img: Image.Image,
        executor: ThreadPoolExecutor,
    ) -> Future[FaceSentimentResult] | None:
        """Hand `img` to `executor` without waiting for the result.

        Returns:
            A future for the result, or None if the frame was dropped.
        """
        if not self._admit():
            return None
        try:
            return executor.submit(self._run_admitted, img)
        except BaseException:
            self._lock.release()
            raise


def process_frames(
    frames: Iterable[Image.Image],
    gate: DropIfBusy,
    on_result: Callable[[FaceSentimentResult], None],
) -> tuple[int, int, int]:
    """Feed `frames` through `gate` with inference on a single worker thread.

    Frames are pulled from `frames` as fast as the source yields them; any
    frame that arrives while the worker is busy is dropped. `on_result` is
    called from the worker thread for every successful inference.

    Returns:
        The gate's ``(processed, dropped, failed)`` counts once `frames` is exhausted.

    Raises:
        Exception: The first error raised by an inference, after all admitted
            frames have finished.
    """
    errors: list[BaseException] = []

    def _deliver(fut: Future[FaceSentimentResult]) -> None:
        exc = fut.exception()
        if exc is not None:
            LOG.error("Frame inference failed: %s", exc)
            errors.append(exc)
            return
        try:
            on_result(fut.result())
        except Exception as e:
            LOG.exception("Result callback failed")
            errors.append(e)

    with ThreadPoolExecutor(max_workers=1, thread_name_prefix="face-sentiment") as pool:
        for frame in frames:
            fut = gate.submit_nowait(frame, pool)
            if fut is not None:
                fut.add_done_callback(_deliver)

    processed, dropped, failed = gate.stats()
    LOG.info(
        "Frame stream done: processed=%d dropped=%d failed=%d", processed, dropped, failed
    )
    if errors:
        raise errors[0]
    return processed, dropped, failed
