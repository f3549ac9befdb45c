"""
Draw keypoints and the rep status line on frames (in-place).
"""
from __future__ import annotations

from typing import Optional, Sequence

import cv2
import numpy as np

from .angles import MIN_KEYPOINT_SCORE
from .keypoints import Keypoint

KEYPOINT_COLOR = (0, 0, 255)
STATUS_COLOR = (0, 255, 0)


def _pt(kp: Keypoint) -> tuple[int, int]:
    return (int(round(kp.x)), int(round(kp.y)))


def draw_keypoints(
    frame: np.ndarray,
    keypoints: Optional[Sequence[Keypoint]],
    min_score: float = MIN_KEYPOINT_SCORE,
    radius: int = 4,
) -> None:
    """Filled circle at every keypoint scored above min_score."""
    if not keypoints:
        return
    for kp in keypoints:
        if kp.score > min_score:
            cv2.circle(frame, _pt(kp), radius, KEYPOINT_COLOR, -1, cv2.LINE_AA)


def draw_status(frame: np.ndarray, status: str) -> None:
    """Status line top-left."""
    cv2.putText(frame, status, (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.8, STATUS_COLOR, 2, cv2.LINE_AA)
