"""
Decode raw pose-model output into 17 keypoints in camera-frame pixel coordinates.
Model output is (y, x, score) per keypoint, with y/x normalized to the model input.
"""
from __future__ import annotations

from typing import Any, NamedTuple

import numpy as np

NUM_KEYPOINTS = 17
KEYPOINT_FIELDS = 3


# MoveNet / COCO keypoint order (odd = left, even = right)
class KeypointIdx:
    NOSE = 0
    LEFT_EYE = 1
    RIGHT_EYE = 2
    LEFT_EAR = 3
    RIGHT_EAR = 4
    LEFT_SHOULDER = 5
    RIGHT_SHOULDER = 6
    LEFT_ELBOW = 7
    RIGHT_ELBOW = 8
    LEFT_WRIST = 9
    RIGHT_WRIST = 10
    LEFT_HIP = 11
    RIGHT_HIP = 12
    LEFT_KNEE = 13
    RIGHT_KNEE = 14
    LEFT_ANKLE = 15
    RIGHT_ANKLE = 16


class Keypoint(NamedTuple):
    """One body landmark: pixel row, pixel column, model confidence."""

    y: float
    x: float
    score: float


class KeypointDecodeError(ValueError):
    """Raised when model output cannot be read as a [17, 3] keypoint array."""


def normalize_output(raw: Any) -> np.ndarray:
    """
    Reduce model output of rank 2, 3 or 4 to the single-pose (17, 3) array.
    Leading batch / person dimensions are dropped by taking index 0.
    """
    try:
        arr = np.asarray(raw, dtype=np.float32)
    except (TypeError, ValueError) as exc:
        raise KeypointDecodeError(f"model output is not numeric: {exc}") from exc
    if arr.ndim not in (2, 3, 4) or arr.shape[-2:] != (NUM_KEYPOINTS, KEYPOINT_FIELDS):
        raise KeypointDecodeError(
            f"expected output shaped [..., {NUM_KEYPOINTS}, {KEYPOINT_FIELDS}], got {arr.shape}"
        )
    if arr.size == 0:
        raise KeypointDecodeError(f"model output has an empty leading dimension: {arr.shape}")
    return arr.reshape(-1, NUM_KEYPOINTS, KEYPOINT_FIELDS)[0]


def decode_keypoints(raw: Any, frame_height: int, frame_width: int) -> list[Keypoint]:
    """Map normalized model output onto the camera frame. Scores pass through unchanged."""
    pose = normalize_output(raw)
    return [
        Keypoint(
            y=float(ny) * frame_height,
            x=float(nx) * frame_width,
            score=float(score),
        )
        for ny, nx, score in pose
    ]
