"""
Joint-angle geometry on decoded keypoints (pixel space).
"""
from __future__ import annotations

import math
from typing import Optional, Sequence

from .keypoints import Keypoint, KeypointIdx

# Keypoints below this score disqualify the measurement.
MIN_KEYPOINT_SCORE = 0.2

LEFT_ELBOW_JOINT = (KeypointIdx.LEFT_SHOULDER, KeypointIdx.LEFT_ELBOW, KeypointIdx.LEFT_WRIST)
RIGHT_ELBOW_JOINT = (KeypointIdx.RIGHT_SHOULDER, KeypointIdx.RIGHT_ELBOW, KeypointIdx.RIGHT_WRIST)


def angle_at(
    keypoints: Sequence[Keypoint],
    a: int,
    b: int,
    c: int,
    min_score: float = MIN_KEYPOINT_SCORE,
) -> Optional[float]:
    """Interior angle at b for triangle a-b-c, in degrees. None when not measurable."""
    ka, kb, kc = keypoints[a], keypoints[b], keypoints[c]
    if ka.score < min_score or kb.score < min_score or kc.score < min_score:
        return None
    ba = (ka.x - kb.x, ka.y - kb.y)
    bc = (kc.x - kb.x, kc.y - kb.y)
    norm_ba = math.hypot(ba[0], ba[1])
    norm_bc = math.hypot(bc[0], bc[1])
    denom = norm_ba * norm_bc
    if denom < 1e-6:
        return None
    cos_val = (ba[0] * bc[0] + ba[1] * bc[1]) / denom
    cos_val = max(-1.0, min(1.0, cos_val))
    return math.degrees(math.acos(cos_val))


def elbow_angle(keypoints: Sequence[Keypoint]) -> Optional[float]:
    """Average of left and right elbow angles, or whichever side is measurable."""
    left = angle_at(keypoints, *LEFT_ELBOW_JOINT)
    right = angle_at(keypoints, *RIGHT_ELBOW_JOINT)
    if left is None and right is None:
        return None
    if left is None:
        return right
    if right is None:
        return left
    return (left + right) / 2.0
