"""
Chat support for KickGuard.

Detects fetal-movement questions in free text, extracts kick counts and
durations, and answers with an assessment report or guidance.

Usage:
    >>> from kickguard.chat import is_fetal_health_intent, FetalHealthResponder
    >>> if is_fetal_health_intent(message):
    ...     reply = FetalHealthResponder(service).respond(message)
"""

from .intent import (
    is_fetal_health_intent,
    extract_kick_data,
    select_guidance,
    GuidanceTopic,
    KickData,
    FETAL_HEALTH_KEYWORDS,
)
from .responder import (
    FetalHealthResponder,
    format_report,
    get_guidance,
    GUIDANCE_TEXTS,
)

__all__ = [
    # Intent
    'is_fetal_health_intent',
    'extract_kick_data',
    'select_guidance',
    'GuidanceTopic',
    'KickData',
    'FETAL_HEALTH_KEYWORDS',
    # Responder
    'FetalHealthResponder',
    'format_report',
    'get_guidance',
    'GUIDANCE_TEXTS',
]
