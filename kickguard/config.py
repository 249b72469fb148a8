"""
Centralized configuration for KickGuard.

This module contains all hardcoded constants used by the kick-counting
session engine and the fetal-health assessment pipeline.

Usage:
    from kickguard.config import SESSION, FEATURES, MODEL

    target = SESSION.TARGET_KICKS
    layers = MODEL.LAYER_SIZES
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Final, Tuple


# =============================================================================
# Session Configuration
# =============================================================================

@dataclass(frozen=True)
class SessionConfig:
    """Kick-counting session constants."""

    # Clock
    TICK_INTERVAL_SECONDS: float = 1.0

    # Count-to-target method
    TARGET_KICKS: int = 10

    # Fixed-duration method
    DEFAULT_TARGET_DURATION_MINUTES: int = 60

    # Submitted durations are whole minutes, never below this
    MIN_DURATION_MINUTES: int = 1

    # History
    RECENT_SESSIONS_LIMIT: int = 5


SESSION: Final[SessionConfig] = SessionConfig()


# =============================================================================
# Feature Extraction Configuration
# =============================================================================

@dataclass(frozen=True)
class FeatureConfig:
    """Constants for mapping kick data onto the 21-feature CTG vector."""

    DIM: int = 21

    # Rate thresholds (kicks per minute)
    ACCELERATION_RATE_THRESHOLD: float = 0.5
    LOW_ACTIVITY_RATE_THRESHOLD: float = 0.3

    # Phone on abdomen picks up subtler movements
    ON_ABDOMEN_SENSITIVITY: float = 1.3

    # Gestational age
    DEFAULT_GESTATIONAL_WEEK: int = 28
    MIN_GESTATIONAL_WEEK: int = 1
    MAX_GESTATIONAL_WEEK: int = 45

    # Rate-derived values
    ACCELERATION_ACTIVE: float = 0.1
    ACCELERATION_QUIET: float = 0.0
    ABNORMAL_STV_LOW_ACTIVITY: float = 50.0
    ABNORMAL_STV_NORMAL: float = 20.0
    ABNORMAL_LTV_PCT_LOW_ACTIVITY: float = 30.0
    ABNORMAL_LTV_PCT_NORMAL: float = 5.0
    STV_RATE_SCALE: float = 10.0
    LTV_RATE_SCALE: float = 15.0

    # Population-level constants
    BASELINE_VALUE: float = 140.0
    UTERINE_CONTRACTIONS: float = 0.5
    LIGHT_DECELERATIONS: float = 0.0
    SEVERE_DECELERATIONS: float = 0.0
    PROLONGUED_DECELERATIONS: float = 0.0
    HISTOGRAM_WIDTH: float = 50.0
    HISTOGRAM_MIN: float = 120.0
    HISTOGRAM_MAX: float = 170.0
    HISTOGRAM_NUMBER_OF_PEAKS: float = 3.0
    HISTOGRAM_NUMBER_OF_ZEROES: float = 0.0
    HISTOGRAM_MODE: float = 140.0
    HISTOGRAM_MEAN: float = 145.0
    HISTOGRAM_MEDIAN: float = 143.0
    HISTOGRAM_VARIANCE: float = 25.0
    HISTOGRAM_TENDENCY: float = 0.0


FEATURES: Final[FeatureConfig] = FeatureConfig()


# =============================================================================
# Model Configuration
# =============================================================================

@dataclass(frozen=True)
class ModelConfig:
    """Feed-forward classifier configuration."""

    # Architecture: input -> hidden... -> output
    INPUT_DIM: int = 21
    HIDDEN_DIMS: Tuple[int, ...] = (64, 32, 16)
    OUTPUT_DIM: int = 3
    DROPOUT: float = 0.2
    # Hidden layers followed by dropout (the last hidden layer has none)
    DROPOUT_LAYERS: int = 2

    # Classification
    NUM_CLASSES: int = 3
    CLASS_NAMES: Tuple[str, ...] = ('Normal', 'Suspect', 'Pathological')

    # Artifact layout
    TOPOLOGY_FILENAME: str = 'topology.json'
    WEIGHTS_FILENAME: str = 'weights.pt'

    # Weight sources
    SOURCE_PRETRAINED: str = 'pretrained'
    SOURCE_FALLBACK: str = 'fallback-untrained'

    # Probability sum tolerance
    PROBABILITY_TOLERANCE: float = 1e-4

    @property
    def layer_sizes(self) -> Tuple[int, ...]:
        """Full layer size sequence, e.g. (21, 64, 32, 16, 3)."""
        return (self.INPUT_DIM, *self.HIDDEN_DIMS, self.OUTPUT_DIM)


MODEL: Final[ModelConfig] = ModelConfig()


# =============================================================================
# Paths
# =============================================================================

@dataclass(frozen=True)
class ModelPaths:
    """Default artifact paths."""

    MODELS_DIR: str = 'models'
    DEFAULT_MODEL_DIR: str = 'models/fetal_health_model'


PATHS: Final[ModelPaths] = ModelPaths()


# =============================================================================
# Rule-Based Assessment Thresholds
# =============================================================================

@dataclass(frozen=True)
class RuleThresholds:
    """Thresholds for the deterministic kick-count assessment."""

    # Standard "10 kicks in 2 hours" window
    FULL_WINDOW_MINUTES: int = 120
    NORMAL_MIN_KICKS: float = 10.0
    SUSPECT_MIN_KICKS: float = 6.0

    # Shorter sessions scale an expected hourly rate
    EXPECTED_KICKS_PER_HOUR: float = 5.0

    ON_ABDOMEN_ADJUSTMENT: float = 1.2

    # Confidence reported by each rule
    CONFIDENCE_FULL_NORMAL: float = 0.85
    CONFIDENCE_FULL_SUSPECT: float = 0.70
    CONFIDENCE_FULL_CONCERNING: float = 0.90
    CONFIDENCE_SHORT_NORMAL: float = 0.80
    CONFIDENCE_SHORT_SUSPECT: float = 0.75


RULES: Final[RuleThresholds] = RuleThresholds()


# =============================================================================
# User-Facing Strings
# =============================================================================

@dataclass(frozen=True)
class AssessmentStrings:
    """Messages and recommendations shown alongside an assessment."""

    # Tier messages
    MESSAGE_NORMAL: str = "Your baby's movement patterns appear normal."
    MESSAGE_NORMAL_ON_ABDOMEN: str = (
        "Your baby's movement patterns appear normal based on "
        "phone-on-abdomen monitoring."
    )
    MESSAGE_SUSPECT: str = (
        "Your baby's movement patterns show some variations that may need attention."
    )
    MESSAGE_SUSPECT_ON_ABDOMEN: str = (
        "Your baby's movement patterns show some variations detected by "
        "phone-on-abdomen monitoring."
    )
    MESSAGE_CONCERNING: str = "Your baby's movement patterns suggest potential concerns."
    MESSAGE_CONCERNING_ON_ABDOMEN: str = (
        "Your baby's movement patterns detected by phone-on-abdomen "
        "monitoring suggest potential concerns."
    )
    MESSAGE_UNKNOWN: str = "Unable to assess fetal health from current data."

    # Tier recommendations
    REC_NORMAL: str = "Continue monitoring daily. Great job tracking your baby's activity!"
    REC_SUSPECT: str = (
        "Consider discussing these patterns with your healthcare provider "
        "for additional monitoring."
    )
    REC_CONCERNING: str = (
        "Please contact your healthcare provider immediately to discuss these results."
    )
    REC_UNKNOWN: str = (
        "Continue regular monitoring and consult with your healthcare provider."
    )

    # Rule-based messages
    RULE_FULL_NORMAL: str = "Your fetal movement pattern appears normal based on standard monitoring."
    RULE_FULL_NORMAL_ON_ABDOMEN: str = (
        "Your fetal movement pattern appears normal based on phone-on-abdomen monitoring."
    )
    RULE_FULL_NORMAL_REC: str = (
        "Continue monitoring regularly. This is a good sign of fetal well-being!"
    )
    RULE_FULL_SUSPECT: str = (
        "Your fetal movement count is below the typical range and should be "
        "monitored closely."
    )
    RULE_FULL_SUSPECT_REC: str = (
        "Consider repeating the count test and consult your healthcare "
        "provider for additional monitoring."
    )
    RULE_FULL_CONCERNING: str = "Your fetal movement count is significantly below normal ranges."
    RULE_FULL_CONCERNING_REC: str = (
        "Please contact your healthcare provider immediately for urgent evaluation."
    )
    RULE_SHORT_NORMAL: str = (
        "Fetal movements detected within expected ranges for this time period."
    )
    RULE_SHORT_NORMAL_ON_ABDOMEN: str = (
        "Fetal movements detected within expected ranges using "
        "phone-on-abdomen monitoring."
    )
    RULE_SHORT_NORMAL_REC: str = (
        "Continue monitoring. Consider a longer counting session for more "
        "comprehensive assessment."
    )
    RULE_SHORT_SUSPECT: str = "Fewer movements than expected for this time period."
    RULE_SHORT_SUSPECT_REC: str = (
        "Extend your counting session and consult your healthcare provider "
        "if concerned."
    )

    # Chat report
    REPORT_LABEL_NORMAL: str = "Normal fetal activity detected"
    REPORT_LABEL_SUSPECT: str = "Suspect fetal activity - monitor closely"
    REPORT_LABEL_CONCERNING: str = (
        "Concerning fetal activity - contact healthcare provider"
    )
    REPORT_LABEL_UNKNOWN: str = "Fetal activity assessment completed"
    NON_CLINICAL_NOTICE: str = (
        "Note: the trained model is currently unavailable, so this result "
        "comes from an untrained fallback network and must not be used "
        "for clinical decisions."
    )
    DISCLAIMER: str = (
        "⚠️ **IMPORTANT:** This is general information only and not a "
        "substitute for professional medical advice. Please consult your "
        "healthcare provider for personalized guidance."
    )

    @property
    def tier_messages(self) -> Dict[int, Tuple[str, str]]:
        """Class -> (manual message, on-abdomen message)."""
        return {
            0: (self.MESSAGE_NORMAL, self.MESSAGE_NORMAL_ON_ABDOMEN),
            1: (self.MESSAGE_SUSPECT, self.MESSAGE_SUSPECT_ON_ABDOMEN),
            2: (self.MESSAGE_CONCERNING, self.MESSAGE_CONCERNING_ON_ABDOMEN),
        }

    @property
    def tier_recommendations(self) -> Dict[int, str]:
        """Class -> recommendation."""
        return {
            0: self.REC_NORMAL,
            1: self.REC_SUSPECT,
            2: self.REC_CONCERNING,
        }


TEXT: Final[AssessmentStrings] = AssessmentStrings()


# =============================================================================
# Convenience Exports
# =============================================================================

__all__ = [
    'SESSION',
    'FEATURES',
    'MODEL',
    'PATHS',
    'RULES',
    'TEXT',
    'SessionConfig',
    'FeatureConfig',
    'ModelConfig',
    'ModelPaths',
    'RuleThresholds',
    'AssessmentStrings',
]
