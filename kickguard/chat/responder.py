"""
Chat responses for fetal health messages.

A message carrying both a kick count and a duration is assessed and
answered with a formatted report. Anything else gets one of three fixed
guidance texts. The responder never raises; pipeline failures fall back to
the general guidance text.
"""

from __future__ import annotations

import logging
from typing import Dict

from kickguard.config import TEXT
from kickguard.analysis import (
    AssessmentResult,
    FetalHealthService,
    StatusTier,
    get_tier_emoji,
)
from kickguard.chat.intent import (
    GuidanceTopic,
    KickData,
    extract_kick_data,
    select_guidance,
)

logger = logging.getLogger(__name__)


GUIDANCE_TEXTS: Dict[GuidanceTopic, str] = {
    GuidanceTopic.HOW_MANY: """🤰 **Fetal Movement Monitoring Guide**

**Normal fetal activity typically includes:**
• 10+ kicks within 2 hours when you're active
• Movements should be felt regularly throughout the day
• Patterns may vary but should be consistent

**When to be concerned:**
• Fewer than 10 kicks in 2 hours
• Sudden decrease in movement
• No movement for 12+ hours

**Kick Counter:** Start a kick counting session to get an assessment of your baby's movement pattern.

Would you like to start a kick counting session?""",

    GuidanceTopic.REDUCED: """⚠️ **Reduced Fetal Movement**

If you're experiencing reduced fetal movements, please:

1. **Try the "Kick Count Test":**
   • Lie down on your left side
   • Count kicks for 2 hours
   • Normal: 10+ kicks

2. **Contact your healthcare provider immediately if:**
   • Fewer than 10 kicks in 2 hours
   • No movement for 12+ hours
   • Sudden change in movement pattern

**Remember:** When in doubt, always contact your healthcare provider. Better safe than sorry!

Would you like me to guide you through a kick counting session?""",

    GuidanceTopic.GENERAL: """👶 **Fetal Health & Movement**

Fetal movements are an important indicator of your baby's well-being.

**Key points about fetal movement:**
• Usually felt around 18-20 weeks
• Should increase in frequency and strength
• Each baby has their own unique pattern
• Regular monitoring is recommended

Tell me how many kicks you felt and over how long (for example "I felt 8 kicks in 2 hours") and I can assess the pattern for you.""",
}

_REPORT_LABELS = {
    StatusTier.NORMAL: TEXT.REPORT_LABEL_NORMAL,
    StatusTier.SUSPECT: TEXT.REPORT_LABEL_SUSPECT,
    StatusTier.CONCERNING: TEXT.REPORT_LABEL_CONCERNING,
}


def get_guidance(topic: GuidanceTopic) -> str:
    return GUIDANCE_TEXTS[topic]


def format_report(result: AssessmentResult, kick_data: KickData) -> str:
    """
    Render an assessment as a chat message.

    Args:
        result: Assessment for the reported numbers.
        kick_data: The numbers as the user reported them.

    Returns:
        Markdown text with tier, confidence, message, recommendation and
        the medical disclaimer.
    """
    emoji = get_tier_emoji(result.status_tier)
    label = _REPORT_LABELS.get(result.status_tier, TEXT.REPORT_LABEL_UNKNOWN)
    confidence = f"{result.confidence * 100:.1f}"

    sections = [
        f"{emoji} **Fetal Health Analysis**",
        f"You reported: {kick_data.kick_count} kicks in {kick_data.duration_minutes} minutes "
        f"({result.kicks_per_hour:.1f} kicks/hour)",
        f"**Assessment:** {label}\n**Confidence:** {confidence}%",
        result.message,
        f"**Recommendation:** {result.recommendation}",
    ]
    if not result.is_clinical:
        sections.append(TEXT.NON_CLINICAL_NOTICE)
    sections.append(TEXT.DISCLAIMER)

    return "\n\n".join(sections)


class FetalHealthResponder:
    """
    Answers fetal health chat messages.

    Example:
        >>> responder = FetalHealthResponder(service)
        >>> print(responder.respond("I felt 8 kicks in 2 hours"))
    """

    def __init__(self, service: FetalHealthService):
        self._service = service

    def respond(self, text: str) -> str:
        """
        Build the reply for a fetal health message.

        Returns:
            A formatted assessment report, or a guidance text.
        """
        kick_data = extract_kick_data(text)

        if not kick_data.is_complete:
            topic = select_guidance(text)
            logger.debug(f"No usable kick data in message; guidance topic: {topic.value}")
            return get_guidance(topic)

        try:
            result = self._service.assess(
                kick_count=kick_data.kick_count,
                duration_minutes=kick_data.duration_minutes,
            )
        except Exception as e:
            logger.error(f"Error getting fetal health response: {e}")
            return get_guidance(GuidanceTopic.GENERAL)

        return format_report(result, kick_data)
