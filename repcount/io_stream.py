"""
Frame sources for webcam or video file.
The capture is opened when the source is created, so open failures surface before the loop.
Iterating yields (frame_bgr, frame_idx, timestamp_sec); frame_bgr is None when a camera read fails.
"""
from __future__ import annotations

import logging
import time
from typing import Iterator, Optional

import cv2
import numpy as np

logger = logging.getLogger(__name__)


class CaptureError(RuntimeError):
    """Raised when a camera cannot be opened."""


class CaptureFrames:
    """
    An opened cv2.VideoCapture. With fps set (video file) timestamps are idx / fps and
    iteration stops at the first failed read; without it (camera) timestamps are wall
    time and failed reads yield None.
    """

    def __init__(self, cap: cv2.VideoCapture, fps: Optional[float] = None):
        self._cap = cap
        self.fps = fps

    def __iter__(self) -> Iterator[tuple[Optional[np.ndarray], int, float]]:
        try:
            idx = 0
            while True:
                ret, frame = self._cap.read()
                if self.fps is not None:
                    if not ret:
                        break
                    yield (frame, idx, idx / self.fps)
                else:
                    yield (frame if ret else None, idx, time.perf_counter())
                idx += 1
        finally:
            self.close()

    def close(self) -> None:
        self._cap.release()


def video_frames(video_path: str) -> CaptureFrames:
    """Open a video file. Timestamps come from the file's fps, not wall time."""
    cap = cv2.VideoCapture(video_path)
    if not cap.isOpened():
        cap.release()
        raise FileNotFoundError(f"Cannot open video: {video_path}")
    fps = cap.get(cv2.CAP_PROP_FPS) or 30.0
    logger.info(
        "io: video %s %sx%s @ %.1f fps",
        video_path,
        int(cap.get(cv2.CAP_PROP_FRAME_WIDTH)),
        int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT)),
        fps,
    )
    return CaptureFrames(cap, fps=fps)


def webcam_frames(camera_id: int = 0) -> CaptureFrames:
    """Open a camera at its default resolution. Reads continue until the consumer stops."""
    cap = cv2.VideoCapture(camera_id)
    if not cap.isOpened():
        cap.release()
        raise CaptureError(f"Cannot open camera {camera_id}. Check permissions and that no other app is using it.")
    logger.info(
        "io: camera %s resolution %sx%s",
        camera_id,
        int(cap.get(cv2.CAP_PROP_FRAME_WIDTH)),
        int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT)),
    )
    return CaptureFrames(cap)
