"""
Kick-Counting Session Controller.

Drives one counting session at a time:

    start() ─► COUNTING ─► record_event() × N
                  │
                  ├─ COUNT_TO_TARGET: 10th kick  ─► READY_TO_SUBMIT
                  └─ FIXED_DURATION: clock tick ≥ target ─► READY_TO_SUBMIT

    submit()  READY_TO_SUBMIT ─► assessment ─► IDLE
    cancel()  COUNTING / READY_TO_SUBMIT ─► IDLE (no assessment)

A 1 Hz clock runs only while COUNTING. It updates the elapsed time and
completes fixed-duration sessions; it never records kicks. Every path that
leaves COUNTING cancels the clock.

Transitions requested from the wrong state raise InvalidSessionState and
leave the session untouched.
"""

from __future__ import annotations

import logging
import math
import threading
from datetime import datetime
from typing import Callable, Optional

from kickguard.config import FEATURES, SESSION
from kickguard.features import MalformedInputError, SensorMode
from kickguard.analysis import AnalysisMethod, AssessmentResult, FetalHealthService
from kickguard.session.history import SessionHistory, SessionRecord
from kickguard.session.scheduler import ScheduledTask, Scheduler, ThreadScheduler
from kickguard.session.state import CountingMethod, Session, SessionState

logger = logging.getLogger(__name__)


class SessionError(Exception):
    """Base exception for session errors."""
    pass


class InvalidSessionState(SessionError):
    """Raised when an operation is not allowed in the current state."""

    def __init__(self, operation: str, state: SessionState, detail: str = ""):
        self.operation = operation
        self.state = state
        message = f"Cannot {operation} while {state.value}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class SessionController:
    """
    State machine for a kick-counting session.

    Example:
        >>> controller = SessionController(service)
        >>> controller.start(CountingMethod.COUNT_TO_TARGET)
        >>> for _ in range(10):
        ...     controller.record_event()
        >>> controller.state
        <SessionState.READY_TO_SUBMIT: 'ready_to_submit'>
        >>> result = controller.submit()
    """

    def __init__(
        self,
        service: FetalHealthService,
        scheduler: Optional[Scheduler] = None,
        clock: Optional[Callable[[], datetime]] = None,
        history: Optional[SessionHistory] = None,
        on_complete: Optional[Callable[[SessionRecord, AssessmentResult], None]] = None,
        gestational_week: int = FEATURES.DEFAULT_GESTATIONAL_WEEK,
        analysis_method: AnalysisMethod = AnalysisMethod.MODEL,
    ):
        """
        Args:
            service: Assessment pipeline used by submit().
            scheduler: Source of the 1 Hz clock. ThreadScheduler if None.
            clock: Wall-clock function. datetime.now if None.
            history: Receives a record for every submitted session.
            on_complete: Called with (record, result) after each submit.
            gestational_week: Passed to the assessment. Must be 1-45.
            analysis_method: MODEL or RULES.

        Raises:
            MalformedInputError: If gestational_week is outside 1-45.
        """
        if not FEATURES.MIN_GESTATIONAL_WEEK <= gestational_week <= FEATURES.MAX_GESTATIONAL_WEEK:
            raise MalformedInputError(
                f"Gestational week must be {FEATURES.MIN_GESTATIONAL_WEEK}-"
                f"{FEATURES.MAX_GESTATIONAL_WEEK}, got {gestational_week}"
            )

        self._service = service
        self._scheduler = scheduler or ThreadScheduler()
        self._clock = clock or datetime.now
        self.history = history
        self._on_complete = on_complete
        self.gestational_week = gestational_week
        self.analysis_method = analysis_method

        self._lock = threading.RLock()
        self._state = SessionState.IDLE
        self._session: Optional[Session] = None
        self._clock_task: Optional[ScheduledTask] = None
        self._elapsed_seconds = 0.0
        self._submitting = False

    # -------------------------------------------------------------------------
    # Read-only views
    # -------------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def kick_count(self) -> int:
        return self._session.kick_count if self._session else 0

    @property
    def elapsed_seconds(self) -> float:
        """Elapsed time as of the last clock tick (or completion)."""
        return self._elapsed_seconds

    @property
    def clock_running(self) -> bool:
        return self._clock_task is not None and not self._clock_task.cancelled

    @property
    def can_submit(self) -> bool:
        return self._state is SessionState.READY_TO_SUBMIT and not self._submitting

    @property
    def progress(self) -> float:
        """Completion fraction, 0.0 to 1.0."""
        session = self._session
        if session is None:
            return 0.0
        if session.method is CountingMethod.COUNT_TO_TARGET:
            return min(session.kick_count / session.target_kicks, 1.0)
        return min(self._elapsed_seconds / 60 / session.target_duration, 1.0)

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def start(
        self,
        method: CountingMethod,
        target_duration: Optional[int] = None,
        sensor_mode: SensorMode = SensorMode.MANUAL,
    ) -> Session:
        """
        Begin a new session.

        Args:
            method: COUNT_TO_TARGET or FIXED_DURATION.
            target_duration: Minutes, FIXED_DURATION only. Defaults to
                SESSION.DEFAULT_TARGET_DURATION_MINUTES.
            sensor_mode: Manual tapping or phone on abdomen.

        Returns:
            The new Session.

        Raises:
            InvalidSessionState: If not IDLE.
            MalformedInputError: If target_duration is not positive.
        """
        with self._lock:
            if self._state is not SessionState.IDLE:
                raise InvalidSessionState("start", self._state)

            if method is CountingMethod.FIXED_DURATION:
                if target_duration is None:
                    target_duration = SESSION.DEFAULT_TARGET_DURATION_MINUTES
                if target_duration <= 0:
                    raise MalformedInputError(
                        f"Target duration must be > 0 minutes, got {target_duration}"
                    )
            else:
                target_duration = None

            self._session = Session(
                method=method,
                start_time=self._clock(),
                sensor_mode=sensor_mode,
                target_duration=target_duration,
            )
            self._elapsed_seconds = 0.0
            self._state = SessionState.COUNTING
            self._clock_task = self._scheduler.schedule_repeating(
                SESSION.TICK_INTERVAL_SECONDS, self.tick
            )

            logger.info(
                f"Session {self._session.id} started "
                f"(method={method.value}, target_duration={target_duration})"
            )
            return self._session

    def record_event(self) -> int:
        """
        Record one kick.

        Returns:
            The new kick count.

        Raises:
            InvalidSessionState: If not COUNTING.
        """
        with self._lock:
            if self._state is not SessionState.COUNTING:
                raise InvalidSessionState("record a kick", self._state)

            session = self._session
            session.kick_count += 1

            if (
                session.method is CountingMethod.COUNT_TO_TARGET
                and session.kick_count >= session.target_kicks
            ):
                self._complete()

            return session.kick_count

    def tick(self) -> None:
        """
        Clock callback: refresh elapsed time, complete timed sessions.

        Ticks arriving outside COUNTING are ignored.
        """
        with self._lock:
            if self._state is not SessionState.COUNTING:
                return

            session = self._session
            self._elapsed_seconds = (self._clock() - session.start_time).total_seconds()

            if (
                session.method is CountingMethod.FIXED_DURATION
                and self._elapsed_seconds >= session.target_duration * 60
            ):
                self._complete()

    def submit(self) -> AssessmentResult:
        """
        Assess the finished session and return to IDLE.

        Returns:
            AssessmentResult for the session.

        Raises:
            InvalidSessionState: If not READY_TO_SUBMIT, or an assessment
                for this session is already running.
        """
        with self._lock:
            if self._state is not SessionState.READY_TO_SUBMIT:
                raise InvalidSessionState("submit", self._state)
            if self._submitting:
                raise InvalidSessionState("submit", self._state, "assessment already in progress")

            self._submitting = True
            session = self._session
            duration = self._duration_minutes(session)

        try:
            result = self._service.assess(
                kick_count=session.kick_count,
                duration_minutes=duration,
                gestational_week=self.gestational_week,
                sensor_mode=session.sensor_mode,
                method=self.analysis_method,
            )
        except Exception:
            # Keep the session so it can be resubmitted or cancelled
            with self._lock:
                self._submitting = False
            logger.exception(f"Assessment failed for session {session.id}")
            raise

        with self._lock:
            self._reset()

        record = SessionRecord.from_session(session, duration, result, self._clock())
        # Listener failures are logged; the result is still returned
        if self.history is not None:
            try:
                self.history.add(record)
            except Exception:
                logger.exception(f"Could not record history for session {session.id}")
        if self._on_complete is not None:
            try:
                self._on_complete(record, result)
            except Exception:
                logger.exception(f"on_complete callback failed for session {session.id}")

        logger.info(
            f"Session {session.id} submitted: {session.kick_count} kicks in "
            f"{duration} min → {result.status_tier.value}"
        )
        return result

    def cancel(self) -> None:
        """
        Discard the current session without an assessment.

        Raises:
            InvalidSessionState: If IDLE, or an assessment is running.
        """
        with self._lock:
            if self._state is SessionState.IDLE:
                raise InvalidSessionState("cancel", self._state)
            if self._submitting:
                raise InvalidSessionState("cancel", self._state, "assessment in progress")

            logger.info(f"Session {self._session.id} cancelled")
            self._reset()

    def close(self) -> None:
        """Tear down: stop the clock and drop any session. Safe in any state."""
        with self._lock:
            if self._session is not None:
                logger.debug(f"Session {self._session.id} discarded on close")
            self._reset()

    def __enter__(self) -> "SessionController":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # Internals (call with lock held)
    # -------------------------------------------------------------------------

    def _complete(self) -> None:
        session = self._session
        session.end_time = self._clock()
        self._elapsed_seconds = (session.end_time - session.start_time).total_seconds()
        self._state = SessionState.READY_TO_SUBMIT
        self._stop_clock()
        logger.info(
            f"Session {session.id} ready to submit "
            f"({session.kick_count} kicks in {self._elapsed_seconds:.0f}s)"
        )

    def _duration_minutes(self, session: Session) -> int:
        end = session.end_time or self._clock()
        minutes = math.floor((end - session.start_time).total_seconds() / 60)
        return max(minutes, SESSION.MIN_DURATION_MINUTES)

    def _stop_clock(self) -> None:
        if self._clock_task is not None:
            self._clock_task.cancel()
            self._clock_task = None

    def _reset(self) -> None:
        self._stop_clock()
        self._session = None
        self._state = SessionState.IDLE
        self._elapsed_seconds = 0.0
        self._submitting = False
