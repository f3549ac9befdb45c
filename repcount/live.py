"""
Live pipeline: capture, preprocess, pose inference, elbow angle, rep counting, overlay window.
One frame is fully processed before the next is read. q=quit.
"""
from __future__ import annotations

import logging
import threading
import time
from contextlib import closing
from typing import Any, Callable, Iterable, Optional

import cv2
import numpy as np

from .angles import elbow_angle
from .io_stream import video_frames, webcam_frames
from .keypoints import decode_keypoints
from .overlay import draw_keypoints, draw_status
from .pose import DEFAULT_MODEL_PATH, PoseEstimator
from .preprocess import FrameError, preprocess_frame
from .reps import RepCounter

logger = logging.getLogger(__name__)

# Fixed pause after each loop iteration
FRAME_DELAY_MS = 80
WINDOW_NAME = "Rep Counter (q=quit)"

FrameCallback = Callable[[np.ndarray, dict[str, Any], "CancellationToken"], None]
PollCallback = Callable[["CancellationToken"], None]


class CancellationToken:
    """Cooperative stop flag, polled once per loop iteration."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


def analyze_frame(
    frame_bgr: np.ndarray,
    estimator: PoseEstimator,
    counter: RepCounter,
    timestamp: float,
) -> dict[str, Any]:
    """
    Run one frame through the whole pipeline and update the counter.
    Returns the counter state plus the decoded keypoints.
    """
    h, w = frame_bgr.shape[:2]
    tensor = preprocess_frame(frame_bgr, estimator.input_size, estimator.input_dtype)
    raw = estimator.infer(tensor)
    keypoints = decode_keypoints(raw, h, w)
    angle = elbow_angle(keypoints)
    result = counter.push(angle, timestamp)
    result["keypoints"] = keypoints
    result["timestamp"] = timestamp
    return result


def run_loop(
    frames: Iterable[tuple[Optional[np.ndarray], int, float]],
    estimator: PoseEstimator,
    counter: RepCounter,
    token: CancellationToken,
    on_frame: Optional[FrameCallback] = None,
    on_skip: Optional[PollCallback] = None,
) -> int:
    """
    Process frames until the source ends or the token is cancelled.
    Unreadable frames are skipped without touching the counter; on_skip still runs
    for them so quit keys and pacing keep working while the source stalls.
    Returns the number of frames processed.
    """
    processed = 0
    for frame_bgr, frame_idx, timestamp in frames:
        if token.cancelled:
            break
        result = None
        if frame_bgr is None:
            logger.debug("live: frame %s not read, skipping", frame_idx)
        else:
            try:
                result = analyze_frame(frame_bgr, estimator, counter, timestamp)
            except FrameError as exc:
                logger.debug("live: frame %s skipped (%s)", frame_idx, exc)
        if result is None:
            if on_skip is not None:
                on_skip(token)
        else:
            processed += 1
            if on_frame is not None:
                on_frame(frame_bgr, result, token)
        if token.cancelled:
            break
    return processed


class WindowRenderer:
    """Shows the annotated frame; poll() handles keys, window close and the frame delay."""

    def __init__(self, delay_ms: int = FRAME_DELAY_MS, win_name: str = WINDOW_NAME):
        self.delay_ms = delay_ms
        self.win_name = win_name
        cv2.namedWindow(self.win_name, cv2.WINDOW_NORMAL)

    def __call__(self, frame_bgr: np.ndarray, result: dict[str, Any], token: CancellationToken) -> None:
        out_frame = frame_bgr.copy()
        draw_keypoints(out_frame, result.get("keypoints"))
        draw_status(out_frame, result["status"])
        cv2.imshow(self.win_name, out_frame)
        self.poll(token)

    def poll(self, token: CancellationToken) -> None:
        key = cv2.waitKey(max(1, self.delay_ms)) & 0xFF
        if key == ord("q"):
            logger.info("live: q pressed, exiting")
            token.cancel()
        elif cv2.getWindowProperty(self.win_name, cv2.WND_PROP_VISIBLE) < 1:
            logger.info("live: window closed, exiting")
            token.cancel()

    def close(self) -> None:
        cv2.destroyAllWindows()


class HeadlessRenderer:
    """No window: logs status periodically and sleeps the frame delay."""

    def __init__(self, delay_ms: int = FRAME_DELAY_MS, log_every: int = 30):
        self.delay_ms = delay_ms
        self.log_every = log_every
        self._frames = 0

    def __call__(self, frame_bgr: np.ndarray, result: dict[str, Any], token: CancellationToken) -> None:
        self._frames += 1
        if self.log_every and self._frames % self.log_every == 0:
            logger.info("live: %s", result["status"])
        self.poll(token)

    def poll(self, token: CancellationToken) -> None:
        if self.delay_ms > 0:
            time.sleep(self.delay_ms / 1000.0)

    def close(self) -> None:
        pass


def run_live_pipeline(
    model_path: str = DEFAULT_MODEL_PATH,
    camera_id: int = 0,
    video_path: Optional[str] = None,
    frame_delay_ms: int = FRAME_DELAY_MS,
    display: bool = True,
    token: Optional[CancellationToken] = None,
) -> int:
    """
    Run the capture loop until q, window close, end of video, or token cancel.
    Model and camera failures propagate to the caller before any window opens.
    Capture, window and session are released on every exit path. Returns the final rep count.
    """
    token = token or CancellationToken()
    estimator: Optional[PoseEstimator] = None
    renderer = None
    try:
        estimator = PoseEstimator(model_path)
        counter = RepCounter()
        frames = video_frames(video_path) if video_path else webcam_frames(camera_id)
        with closing(frames):
            renderer = (
                WindowRenderer(delay_ms=frame_delay_ms)
                if display
                else HeadlessRenderer(delay_ms=frame_delay_ms)
            )
            logger.info("live: starting (q=quit)")
            processed = run_loop(
                frames, estimator, counter, token, on_frame=renderer, on_skip=renderer.poll,
            )
        logger.info("live: processed %s frames, reps=%s", processed, counter.rep_count)
        return counter.rep_count
    finally:
        if renderer is not None:
            renderer.close()
        if estimator is not None:
            estimator.close()
        logger.info("live: shutdown complete")
