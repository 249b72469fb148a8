"""
Analysis module for KickGuard.

This module provides:
    - Assessment generation (classifier output → tiered, explained result)
    - Rule-based kick count assessment
    - FetalHealthService, the end-to-end assessment pipeline

Usage:
    >>> from kickguard.analysis import FetalHealthService, generate_assessment
    >>> result = generate_assessment(predicted_class=0, confidence=0.9,
    ...                              kick_count=10, duration_minutes=42)
    >>> service = FetalHealthService()
    >>> result = service.assess(kick_count=8, duration_minutes=120)
"""

from .assessment import (
    generate_assessment,
    compute_kicks_per_hour,
    get_tier_color,
    get_tier_emoji,
    AssessmentResult,
    AnalysisMethod,
    StatusTier,
)
from .rules import assess_with_rules
from .service import FetalHealthService

__all__ = [
    # Assessment
    'generate_assessment',
    'compute_kicks_per_hour',
    'get_tier_color',
    'get_tier_emoji',
    'AssessmentResult',
    'AnalysisMethod',
    'StatusTier',
    # Rules
    'assess_with_rules',
    # Service
    'FetalHealthService',
]
