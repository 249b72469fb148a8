"""
Fetal Health Assessment Service.

Application-scoped entry point for the assessment pipeline:

    kick data → extract_features → AssessmentModel.predict → generate_assessment

The service owns one AssessmentModel, shared by every kick-counting session
and chat request. Model problems never reach the caller: a missing or
broken artifact yields the untrained fallback network (flagged through
``weights_source``), and an inference failure switches to the rule-based
assessment.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from kickguard.config import FEATURES
from kickguard.features import SensorMode, extract_features
from kickguard.models import AssessmentModel, InferenceError
from kickguard.analysis.assessment import (
    AnalysisMethod,
    AssessmentResult,
    generate_assessment,
)
from kickguard.analysis.rules import assess_with_rules

logger = logging.getLogger(__name__)


class FetalHealthService:
    """
    Runs kick-count assessments.

    Example:
        >>> service = FetalHealthService(AssessmentModel("models/fetal_health_model"))
        >>> result = service.assess(kick_count=10, duration_minutes=42)
        >>> result.status_tier.value
        'Normal'
    """

    def __init__(
        self,
        model: Optional[AssessmentModel] = None,
        model_dir: Optional[Union[str, Path]] = None,
    ):
        """
        Args:
            model: Shared model. Created from model_dir on first use if None.
            model_dir: Artifact directory for a service-owned model.
        """
        self._model = model
        self._model_dir = model_dir

    @property
    def model(self) -> AssessmentModel:
        if self._model is None:
            self._model = AssessmentModel(self._model_dir)
        return self._model

    def assess(
        self,
        kick_count: int,
        duration_minutes: float,
        gestational_week: int = FEATURES.DEFAULT_GESTATIONAL_WEEK,
        sensor_mode: SensorMode = SensorMode.MANUAL,
        method: AnalysisMethod = AnalysisMethod.MODEL,
    ) -> AssessmentResult:
        """
        Assess one kick count.

        Args:
            kick_count: Kicks counted.
            duration_minutes: Session length in minutes (> 0).
            gestational_week: Week of pregnancy.
            sensor_mode: Detection mode.
            method: MODEL (classifier) or RULES (deterministic thresholds).

        Returns:
            AssessmentResult.

        Raises:
            MalformedInputError: If the kick data is invalid. Callers are
                expected to validate beforehand.
        """
        logger.info(
            f"Assessing {kick_count} kicks in {duration_minutes} minutes "
            f"(method={method.value}, sensor={sensor_mode.value})"
        )

        vector = extract_features(kick_count, duration_minutes, gestational_week, sensor_mode)

        if method is AnalysisMethod.RULES:
            return assess_with_rules(kick_count, duration_minutes, sensor_mode)

        try:
            prediction = self.model.predict(vector)
        except InferenceError as e:
            logger.warning(f"Model assessment failed, falling back to rules: {e}")
            return assess_with_rules(kick_count, duration_minutes, sensor_mode)

        result = generate_assessment(
            predicted_class=prediction.predicted_class,
            confidence=prediction.confidence,
            kick_count=kick_count,
            duration_minutes=duration_minutes,
            sensor_mode=sensor_mode,
            weights_source=prediction.weights_source,
            analysis_method=AnalysisMethod.MODEL,
        )

        if not result.is_clinical:
            logger.warning(
                "Assessment produced by untrained fallback network; "
                "result is not clinically meaningful"
            )
        logger.info(
            f"Assessment: {result.status_tier.value} "
            f"(confidence: {result.confidence:.3f}, {result.kicks_per_hour:.1f} kicks/hour)"
        )
        return result
