"""
Session History.

Keeps completed kick-counting sessions in memory and summarizes them with
pandas for trend display ("recent sessions"). Durable storage is the job of
an external collaborator; it can consume ``SessionRecord.to_dict()``.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

import pandas as pd

from kickguard.config import SESSION
from kickguard.analysis import AssessmentResult
from kickguard.session.state import CountingMethod, Session

logger = logging.getLogger(__name__)


RECORD_COLUMNS = [
    'id',
    'date',
    'count',
    'duration_minutes',
    'method',
    'target_duration',
    'sensor_mode',
    'analysis_method',
    'status_tier',
    'confidence',
    'kicks_per_hour',
    'weights_source',
]


@dataclass(frozen=True)
class SessionRecord:
    """A submitted session together with its assessment outcome."""

    id: str
    date: datetime
    count: int
    duration_minutes: int
    method: str
    target_duration: Optional[int]
    sensor_mode: str
    analysis_method: str
    status_tier: str
    confidence: float
    kicks_per_hour: float
    weights_source: Optional[str] = None

    @classmethod
    def from_session(
        cls,
        session: Session,
        duration_minutes: int,
        result: AssessmentResult,
        completed_at: datetime,
    ) -> "SessionRecord":
        return cls(
            id=session.id,
            date=completed_at,
            count=session.kick_count,
            duration_minutes=duration_minutes,
            method=session.method.value,
            target_duration=(
                session.target_duration
                if session.method is CountingMethod.FIXED_DURATION
                else None
            ),
            sensor_mode=session.sensor_mode.value,
            analysis_method=result.analysis_method.value,
            status_tier=result.status_tier.value,
            confidence=result.confidence,
            kicks_per_hour=result.kicks_per_hour,
            weights_source=result.weights_source,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class SessionHistory:
    """
    In-memory list of submitted sessions.

    Example:
        >>> history = SessionHistory()
        >>> history.add(record)
        >>> history.recent(5)
        >>> history.to_frame()
    """

    def __init__(self) -> None:
        self._records: List[SessionRecord] = []

    def __len__(self) -> int:
        return len(self._records)

    def add(self, record: SessionRecord) -> None:
        self._records.append(record)
        logger.debug(f"Recorded session {record.id} ({record.status_tier})")

    def recent(self, limit: int = SESSION.RECENT_SESSIONS_LIMIT) -> List[SessionRecord]:
        """Most recent sessions first."""
        ordered = sorted(self._records, key=lambda r: r.date, reverse=True)
        return ordered[:limit]

    def to_frame(self) -> pd.DataFrame:
        """
        All sessions as a DataFrame, oldest first.

        Returns:
            DataFrame with one row per session and columns RECORD_COLUMNS.
        """
        if not self._records:
            return pd.DataFrame(columns=RECORD_COLUMNS)

        df = pd.DataFrame([r.to_dict() for r in self._records], columns=RECORD_COLUMNS)
        return df.sort_values('date').reset_index(drop=True)

    def summary(self) -> Dict[str, Any]:
        """
        Aggregate statistics for display.

        Returns:
            Dictionary with session count, mean/min kicks per hour, tier
            counts, and the latest tier.
        """
        df = self.to_frame()
        if df.empty:
            return {
                'n_sessions': 0,
                'mean_kicks_per_hour': None,
                'min_kicks_per_hour': None,
                'tier_counts': {},
                'latest_tier': None,
            }

        return {
            'n_sessions': int(len(df)),
            'mean_kicks_per_hour': float(df['kicks_per_hour'].mean()),
            'min_kicks_per_hour': float(df['kicks_per_hour'].min()),
            'tier_counts': {k: int(v) for k, v in df['status_tier'].value_counts().items()},
            'latest_tier': df['status_tier'].iloc[-1],
        }
