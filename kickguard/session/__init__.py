"""
Kick-counting sessions for KickGuard.

Modules:
    state: Session dataclass, CountingMethod, SessionState
    scheduler: Cancellable repeating tasks (thread-based and virtual-time)
    controller: SessionController state machine
    history: In-memory record of submitted sessions

Usage:
    >>> from kickguard.session import SessionController, CountingMethod
    >>> with SessionController(service) as controller:
    ...     controller.start(CountingMethod.COUNT_TO_TARGET)
    ...     controller.record_event()
"""

from .state import CountingMethod, Session, SessionState
from .scheduler import ManualScheduler, ScheduledTask, Scheduler, ThreadScheduler
from .history import SessionHistory, SessionRecord
from .controller import InvalidSessionState, SessionController, SessionError

__all__ = [
    # State
    "CountingMethod",
    "Session",
    "SessionState",
    # Scheduling
    "ManualScheduler",
    "ScheduledTask",
    "Scheduler",
    "ThreadScheduler",
    # History
    "SessionHistory",
    "SessionRecord",
    # Controller
    "SessionController",
    "SessionError",
    "InvalidSessionState",
]
