"""
Fetal health intent detection for chat messages.

Recognizes messages about fetal movement and pulls a kick count and a
duration out of them, e.g. "I felt 8 kicks in 2 hours" → (8, 120).
Messages without both numbers are routed to a guidance topic instead;
nothing is guessed from partial data.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

FETAL_HEALTH_KEYWORDS: Tuple[str, ...] = (
    'kick', 'kicks', 'movement', 'movements', 'fetal', 'baby moving',
    'counting kicks', 'kick count', 'fetal movement', 'baby kicks',
    'how many kicks', 'kick pattern', 'reduced kicks', 'fewer kicks',
)

_KICK_PATTERN = re.compile(r'(\d+)\s*kicks?\b')
_DURATION_PATTERN = re.compile(r'(\d+)\s*(hours?|hrs?|minutes?|mins?)\b')

# Guidance topic triggers, checked in order
_HOW_MANY_TRIGGERS = ('how many', 'how often', 'normal')
_REDUCED_TRIGGERS = ('reduced', 'fewer', 'less')


class GuidanceTopic(Enum):
    """Canned guidance buckets for messages without usable numbers."""

    HOW_MANY = "how_many"
    REDUCED = "reduced"
    GENERAL = "general"


@dataclass(frozen=True)
class KickData:
    """Numbers found in a message. Either may be missing."""

    kick_count: Optional[int] = None
    duration_minutes: Optional[int] = None

    @property
    def is_complete(self) -> bool:
        """
        Both numbers present and the duration usable.

        A kick count of 0 is complete: "0 kicks in 2 hours" is exactly the
        report that most needs an assessment, so it is not treated as
        missing data. Only a missing or zero duration routes to guidance,
        since no rate can be computed from it.
        """
        return (
            self.kick_count is not None
            and self.duration_minutes is not None
            and self.duration_minutes > 0
        )


def is_fetal_health_intent(text: str) -> bool:
    """True if the message mentions fetal movement or kicks."""
    lower = text.lower()
    return any(keyword in lower for keyword in FETAL_HEALTH_KEYWORDS)


def extract_kick_data(text: str) -> KickData:
    """
    Find the first kick count and the first duration in a message.

    Hour units are converted to minutes.

    Example:
        >>> extract_kick_data("I felt 8 kicks in 2 hours")
        KickData(kick_count=8, duration_minutes=120)
    """
    lower = text.lower()

    kick_count = None
    kick_match = _KICK_PATTERN.search(lower)
    if kick_match:
        kick_count = int(kick_match.group(1))

    duration = None
    duration_match = _DURATION_PATTERN.search(lower)
    if duration_match:
        value = int(duration_match.group(1))
        unit = duration_match.group(2)
        if unit.startswith('h'):
            duration = value * 60
        else:
            duration = value

    return KickData(kick_count=kick_count, duration_minutes=duration)


def select_guidance(text: str) -> GuidanceTopic:
    """Pick the guidance bucket for a message."""
    lower = text.lower()
    if any(trigger in lower for trigger in _HOW_MANY_TRIGGERS):
        return GuidanceTopic.HOW_MANY
    if any(trigger in lower for trigger in _REDUCED_TRIGGERS):
        return GuidanceTopic.REDUCED
    return GuidanceTopic.GENERAL
