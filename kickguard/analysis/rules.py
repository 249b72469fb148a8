"""
Rule-Based Kick Count Assessment.

Deterministic assessment from kick counts alone, following the common
"10 kicks in 2 hours" guideline. Used when the rules method is selected
explicitly and as the safety net when model inference fails.

RULES:
1. Session ≥ 2 hours:
       adjusted kicks ≥ 10 → Normal
       adjusted kicks ≥ 6  → Suspect
       otherwise           → Concerning
2. Shorter session: expected = minutes / 60 × 5 × adjustment, rounded half up
       kicks ≥ expected → Normal
       otherwise        → Suspect

Phone-on-abdomen sessions use an adjustment factor of 1.2, since the phone
may detect movements the mother would not count by hand.
"""

from __future__ import annotations

import logging
import math

from kickguard.config import RULES, TEXT
from kickguard.features import SensorMode
from kickguard.analysis.assessment import (
    AnalysisMethod,
    AssessmentResult,
    StatusTier,
    compute_kicks_per_hour,
)

logger = logging.getLogger(__name__)


def assess_with_rules(
    kick_count: int,
    duration_minutes: float,
    sensor_mode: SensorMode = SensorMode.MANUAL,
) -> AssessmentResult:
    """
    Assess a kick count without the classifier.

    Args:
        kick_count: Kicks counted in the session.
        duration_minutes: Session length in minutes (> 0).
        sensor_mode: Detection mode; ON_ABDOMEN applies the 1.2 adjustment.

    Returns:
        AssessmentResult with analysis_method RULES.
    """
    kicks_per_hour = compute_kicks_per_hour(kick_count, duration_minutes)
    on_abdomen = sensor_mode is SensorMode.ON_ABDOMEN
    adjustment = RULES.ON_ABDOMEN_ADJUSTMENT if on_abdomen else 1.0

    if duration_minutes >= RULES.FULL_WINDOW_MINUTES:
        adjusted = kick_count * adjustment
        if adjusted >= RULES.NORMAL_MIN_KICKS:
            predicted_class, tier, confidence = 0, StatusTier.NORMAL, RULES.CONFIDENCE_FULL_NORMAL
            message = TEXT.RULE_FULL_NORMAL_ON_ABDOMEN if on_abdomen else TEXT.RULE_FULL_NORMAL
            recommendation = TEXT.RULE_FULL_NORMAL_REC
        elif adjusted >= RULES.SUSPECT_MIN_KICKS:
            predicted_class, tier, confidence = 1, StatusTier.SUSPECT, RULES.CONFIDENCE_FULL_SUSPECT
            message = TEXT.RULE_FULL_SUSPECT
            recommendation = TEXT.RULE_FULL_SUSPECT_REC
        else:
            predicted_class, tier, confidence = 2, StatusTier.CONCERNING, RULES.CONFIDENCE_FULL_CONCERNING
            message = TEXT.RULE_FULL_CONCERNING
            recommendation = TEXT.RULE_FULL_CONCERNING_REC
    else:
        expected = math.floor(duration_minutes / 60 * RULES.EXPECTED_KICKS_PER_HOUR * adjustment + 0.5)
        if kick_count >= expected:
            predicted_class, tier, confidence = 0, StatusTier.NORMAL, RULES.CONFIDENCE_SHORT_NORMAL
            message = TEXT.RULE_SHORT_NORMAL_ON_ABDOMEN if on_abdomen else TEXT.RULE_SHORT_NORMAL
            recommendation = TEXT.RULE_SHORT_NORMAL_REC
        else:
            predicted_class, tier, confidence = 1, StatusTier.SUSPECT, RULES.CONFIDENCE_SHORT_SUSPECT
            message = TEXT.RULE_SHORT_SUSPECT
            recommendation = TEXT.RULE_SHORT_SUSPECT_REC

    logger.info(f"Rule-based assessment: {tier.value} (confidence: {confidence})")

    return AssessmentResult(
        predicted_class=predicted_class,
        confidence=confidence,
        status_tier=tier,
        message=message,
        recommendation=recommendation,
        kicks_per_hour=kicks_per_hour,
        analysis_method=AnalysisMethod.RULES,
    )
