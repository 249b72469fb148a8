"""
Assessment Generator for KickGuard.

Turns a classifier output (predicted class + confidence) and the raw kick
data into a human-readable assessment.

Class → tier mapping:
    0 → Normal      (continue daily monitoring)
    1 → Suspect     (discuss with provider)
    2 → Concerning  (contact provider immediately)
    * → Unknown     (continue monitoring, consult provider)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from kickguard.config import MODEL, TEXT
from kickguard.features import MalformedInputError, SensorMode


class StatusTier(str, Enum):
    """Qualitative assessment tier."""

    NORMAL = "Normal"
    SUSPECT = "Suspect"
    CONCERNING = "Concerning"
    UNKNOWN = "Unknown"


class AnalysisMethod(str, Enum):
    """Which engine produced an assessment."""

    MODEL = "model"
    RULES = "rules"


_CLASS_TIERS = {
    0: StatusTier.NORMAL,
    1: StatusTier.SUSPECT,
    2: StatusTier.CONCERNING,
}


@dataclass(frozen=True)
class AssessmentResult:
    """
    Explainable fetal health assessment.

    Attributes:
        predicted_class: Classifier output (0, 1, or 2).
        confidence: Probability of the predicted class (0-1).
        status_tier: Normal / Suspect / Concerning / Unknown.
        message: What the pattern means.
        recommendation: What to do next.
        kicks_per_hour: Observed kick rate, for display context.
        weights_source: 'pretrained' or 'fallback-untrained'; None for rules.
        analysis_method: MODEL or RULES.
    """

    predicted_class: int
    confidence: float
    status_tier: StatusTier
    message: str
    recommendation: str
    kicks_per_hour: float
    weights_source: Optional[str] = None
    analysis_method: AnalysisMethod = AnalysisMethod.MODEL

    def __post_init__(self):
        """Validate confidence is a probability."""
        if not 0 <= self.confidence <= 1:
            raise ValueError(f"Confidence must be 0-1, got {self.confidence}")

    @property
    def is_clinical(self) -> bool:
        """False when produced by the untrained fallback network."""
        return self.weights_source != MODEL.SOURCE_FALLBACK

    def to_dict(self) -> Dict[str, Any]:
        """Wire schema consumed by display layers."""
        return {
            'predictedClass': self.predicted_class,
            'confidence': self.confidence,
            'statusTier': self.status_tier.value,
            'message': self.message,
            'recommendation': self.recommendation,
            'kicksPerHour': self.kicks_per_hour,
            'weightsSource': self.weights_source,
            'analysisMethod': self.analysis_method.value,
        }


def compute_kicks_per_hour(kick_count: int, duration_minutes: float) -> float:
    """
    Kick rate normalized to one hour.

    Raises:
        MalformedInputError: If duration is not positive.
    """
    if not duration_minutes > 0:
        raise MalformedInputError(f"Duration must be > 0 minutes, got {duration_minutes}")
    return kick_count / duration_minutes * 60


def generate_assessment(
    predicted_class: int,
    confidence: float,
    kick_count: int,
    duration_minutes: float,
    sensor_mode: SensorMode = SensorMode.MANUAL,
    weights_source: str = MODEL.SOURCE_PRETRAINED,
    analysis_method: AnalysisMethod = AnalysisMethod.MODEL,
) -> AssessmentResult:
    """
    Build the assessment for a classifier output.

    Args:
        predicted_class: Classifier output. Values outside 0-2 map to Unknown.
        confidence: Probability of the predicted class (0-1).
        kick_count: Kicks counted in the session.
        duration_minutes: Session length in minutes (> 0).
        sensor_mode: Selects the phone-on-abdomen wording for known classes.
        weights_source: Carried through from the model handle.
        analysis_method: Carried through from the pipeline.

    Returns:
        AssessmentResult.

    Example:
        >>> result = generate_assessment(0, 0.91, 10, 42)
        >>> result.status_tier, round(result.kicks_per_hour, 1)
        (<StatusTier.NORMAL: 'Normal'>, 14.3)
    """
    kicks_per_hour = compute_kicks_per_hour(kick_count, duration_minutes)

    tier = _CLASS_TIERS.get(predicted_class, StatusTier.UNKNOWN)
    if tier is StatusTier.UNKNOWN:
        message = TEXT.MESSAGE_UNKNOWN
        recommendation = TEXT.REC_UNKNOWN
    else:
        manual_msg, on_abdomen_msg = TEXT.tier_messages[predicted_class]
        message = on_abdomen_msg if sensor_mode is SensorMode.ON_ABDOMEN else manual_msg
        recommendation = TEXT.tier_recommendations[predicted_class]

    return AssessmentResult(
        predicted_class=predicted_class,
        confidence=confidence,
        status_tier=tier,
        message=message,
        recommendation=recommendation,
        kicks_per_hour=kicks_per_hour,
        weights_source=weights_source,
        analysis_method=analysis_method,
    )


def get_tier_color(tier: StatusTier) -> str:
    """
    Get the display color for a tier.

    Returns:
        Hex color string.
    """
    colors = {
        StatusTier.NORMAL: '#48BB78',
        StatusTier.SUSPECT: '#FFA500',
        StatusTier.CONCERNING: '#FF6B6B',
    }
    return colors.get(tier, '#A0AEC0')


def get_tier_emoji(tier: StatusTier) -> str:
    """
    Get the emoji indicator for a tier.

    Returns:
        Emoji string.
    """
    emojis = {
        StatusTier.NORMAL: '✅',
        StatusTier.SUSPECT: '⚠️',
        StatusTier.CONCERNING: '🚨',
    }
    return emojis.get(tier, 'ℹ️')
