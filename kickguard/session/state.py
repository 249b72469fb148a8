"""
Kick-counting session data.

Lifecycle:
    IDLE → COUNTING → READY_TO_SUBMIT → IDLE   (submit)
    COUNTING / READY_TO_SUBMIT → IDLE          (cancel)

There is no persistent "completed" state: a finished session waits in
READY_TO_SUBMIT until it is submitted or cancelled.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from kickguard.config import SESSION
from kickguard.features import SensorMode


class CountingMethod(str, Enum):
    """How a session decides it is complete."""

    COUNT_TO_TARGET = "count_to_target"  # stop at 10 kicks
    FIXED_DURATION = "fixed_duration"    # stop when the timer runs out


class SessionState(str, Enum):
    """Controller state."""

    IDLE = "idle"
    COUNTING = "counting"
    READY_TO_SUBMIT = "ready_to_submit"


@dataclass
class Session:
    """
    One kick-counting session.

    Attributes:
        method: Completion rule.
        start_time: When counting started.
        sensor_mode: Manual tapping or phone on abdomen.
        target_duration: Minutes, FIXED_DURATION only.
        target_kicks: Kick target, COUNT_TO_TARGET only.
        kick_count: Kicks recorded so far.
        end_time: Set once, when the completion rule first holds.
        id: Unique session identifier.
    """

    method: CountingMethod
    start_time: datetime
    sensor_mode: SensorMode = SensorMode.MANUAL
    target_duration: Optional[int] = None
    target_kicks: Optional[int] = None
    kick_count: int = 0
    end_time: Optional[datetime] = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def __post_init__(self) -> None:
        if self.method is CountingMethod.COUNT_TO_TARGET and self.target_kicks is None:
            self.target_kicks = SESSION.TARGET_KICKS

    @property
    def is_complete(self) -> bool:
        return self.end_time is not None
