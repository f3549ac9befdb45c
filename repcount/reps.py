"""
Rep counting from a stream of elbow angles.
Two positions (up/down) with a hysteresis band and a debounce between counted reps.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Optional

logger = logging.getLogger(__name__)

# Elbow angle (deg) below which the arms count as bent (bottom of the rep).
DOWN_ANGLE_DEG = 70.0
# Elbow angle (deg) above which the arms count as extended (top of the rep).
UP_ANGLE_DEG = 140.0
# Minimum time (s) between two counted reps.
DEBOUNCE_SEC = 0.5

NO_POSE_STATUS = "Pose not detected properly."


class Position:
    UP = "up"
    DOWN = "down"


@dataclass(frozen=True)
class RepState:
    """Counter state carried from one frame to the next."""

    position: str = Position.UP
    rep_count: int = 0
    last_transition_time: float = float("-inf")


def _candidate_position(angle: float, current: str, down_deg: float, up_deg: float) -> str:
    if angle < down_deg:
        return Position.DOWN
    if angle > up_deg:
        return Position.UP
    return current


def advance(
    state: RepState,
    angle: Optional[float],
    now: float,
    down_deg: float = DOWN_ANGLE_DEG,
    up_deg: float = UP_ANGLE_DEG,
    debounce_sec: float = DEBOUNCE_SEC,
) -> RepState:
    """
    Apply one frame to the state and return the new state.
    A rep is counted on a down -> up change more than debounce_sec after the last one.
    A missing angle leaves the state untouched.
    """
    if angle is None:
        return state
    position = _candidate_position(angle, state.position, down_deg, up_deg)
    rep_count = state.rep_count
    last_time = state.last_transition_time
    if (
        state.position == Position.DOWN
        and position == Position.UP
        and now - last_time > debounce_sec
    ):
        rep_count += 1
        last_time = now
    return replace(state, position=position, rep_count=rep_count, last_transition_time=last_time)


def status_text(state: RepState, angle: Optional[float]) -> str:
    if angle is None:
        return NO_POSE_STATUS
    return f"Elbow: {angle:.1f} | Pos: {state.position} | Reps: {state.rep_count}"


class RepCounter:
    """
    Holds the RepState for the frame loop, created once per run. Only the loop
    thread should call push(); rep_count never goes down.
    """

    def __init__(
        self,
        down_deg: float = DOWN_ANGLE_DEG,
        up_deg: float = UP_ANGLE_DEG,
        debounce_sec: float = DEBOUNCE_SEC,
    ):
        if down_deg >= up_deg:
            raise ValueError(f"down_deg ({down_deg}) must be below up_deg ({up_deg})")
        if debounce_sec < 0:
            raise ValueError("debounce_sec must be non-negative")
        self.down_deg = down_deg
        self.up_deg = up_deg
        self.debounce_sec = debounce_sec
        self.state = RepState()

    @property
    def rep_count(self) -> int:
        return self.state.rep_count

    def push(self, angle: Optional[float], now: float) -> dict[str, Any]:
        """
        Push one frame's combined elbow angle. Returns current state for overlay:
        rep_count, angle, position, status, counted.
        """
        previous = self.state
        self.state = advance(
            previous,
            angle,
            now,
            down_deg=self.down_deg,
            up_deg=self.up_deg,
            debounce_sec=self.debounce_sec,
        )
        counted = self.state.rep_count > previous.rep_count
        if counted:
            logger.info("live_rep: rep %s (elbow=%.1f t=%.3f)", self.state.rep_count, angle, now)
        elif previous.position != self.state.position:
            logger.debug("live_rep: position %s -> %s (elbow=%.1f)", previous.position, self.state.position, angle)
        return {
            "rep_count": self.state.rep_count,
            "angle": angle,
            "position": self.state.position,
            "status": status_text(self.state, angle),
            "counted": counted,
        }
