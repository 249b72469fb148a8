"""
Tests for Assessment Generation, Rules and the Assessment Service.

This module tests:
1. Class → tier table and kicks-per-hour context
2. Rule-based kick count assessment
3. FetalHealthService pipeline, including model and inference fallbacks
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
import torch
import torch.nn as nn

# Add repository root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from kickguard.config import MODEL, TEXT
from kickguard.features import MalformedInputError, SensorMode
from kickguard.models import AssessmentModel, FetalHealthNet, ModelHandle, save_model
from kickguard.analysis import (
    AnalysisMethod,
    AssessmentResult,
    FetalHealthService,
    StatusTier,
    assess_with_rules,
    generate_assessment,
    get_tier_color,
    get_tier_emoji,
)


# ==============================================================================
# Test Fixtures
# ==============================================================================

@pytest.fixture
def fallback_service(tmp_path: Path) -> FetalHealthService:
    """Service whose model has no artifact to load."""
    return FetalHealthService(AssessmentModel(tmp_path / "missing"))


@pytest.fixture
def pretrained_service(tmp_path: Path) -> FetalHealthService:
    """Service with a saved artifact."""
    torch.manual_seed(1)
    model_dir = save_model(FetalHealthNet(), tmp_path / "model")
    return FetalHealthService(AssessmentModel(model_dir))


class _BrokenNet(nn.Module):
    def forward(self, x):
        raise RuntimeError("forward failed")


# ==============================================================================
# Assessment Generator
# ==============================================================================

class TestGenerateAssessment:
    """Tests for the class → tier mapping."""

    def test_normal_with_kicks_per_hour(self):
        result = generate_assessment(0, 0.91, 10, 42)

        assert result.status_tier == StatusTier.NORMAL
        assert result.status_tier.value == "Normal"
        assert result.kicks_per_hour == pytest.approx(14.3, abs=0.1)
        assert result.message == TEXT.MESSAGE_NORMAL
        assert "daily" in result.recommendation

    def test_suspect(self):
        result = generate_assessment(1, 0.6, 6, 120)
        assert result.status_tier == StatusTier.SUSPECT
        assert "attention" in result.message
        assert "healthcare provider" in result.recommendation
        assert result.kicks_per_hour == pytest.approx(3.0)

    def test_concerning(self):
        result = generate_assessment(2, 0.8, 2, 120)
        assert result.status_tier == StatusTier.CONCERNING
        assert "concerns" in result.message
        assert "immediately" in result.recommendation

    @pytest.mark.parametrize("predicted_class", [-1, 3, 7])
    def test_unknown_class(self, predicted_class):
        result = generate_assessment(predicted_class, 0.5, 10, 60)
        assert result.status_tier == StatusTier.UNKNOWN
        assert result.message == TEXT.MESSAGE_UNKNOWN
        assert result.recommendation == TEXT.REC_UNKNOWN
        assert result.kicks_per_hour == pytest.approx(10.0)

    def test_on_abdomen_wording(self):
        result = generate_assessment(0, 0.9, 10, 42, sensor_mode=SensorMode.ON_ABDOMEN)
        assert result.message == TEXT.MESSAGE_NORMAL_ON_ABDOMEN
        assert result.recommendation == TEXT.REC_NORMAL

    def test_confidence_out_of_range(self):
        with pytest.raises(ValueError):
            generate_assessment(0, 1.5, 10, 42)

    def test_zero_duration_rejected(self):
        with pytest.raises(MalformedInputError):
            generate_assessment(0, 0.9, 10, 0)

    def test_result_is_immutable(self):
        result = generate_assessment(0, 0.9, 10, 42)
        with pytest.raises(AttributeError):
            result.confidence = 0.1

    def test_to_dict_schema(self):
        data = generate_assessment(1, 0.75, 8, 120).to_dict()
        assert data['predictedClass'] == 1
        assert data['confidence'] == 0.75
        assert data['statusTier'] == "Suspect"
        assert data['kicksPerHour'] == pytest.approx(4.0)
        assert {'message', 'recommendation', 'weightsSource', 'analysisMethod'} <= data.keys()

    def test_fallback_is_not_clinical(self):
        result = generate_assessment(0, 0.4, 10, 42, weights_source=MODEL.SOURCE_FALLBACK)
        assert not result.is_clinical
        assert generate_assessment(0, 0.4, 10, 42).is_clinical

    def test_display_helpers(self):
        assert get_tier_emoji(StatusTier.NORMAL) == '✅'
        assert get_tier_emoji(StatusTier.CONCERNING) == '🚨'
        assert get_tier_emoji(StatusTier.UNKNOWN) == 'ℹ️'
        assert get_tier_color(StatusTier.SUSPECT) == '#FFA500'


# ==============================================================================
# Rule-Based Assessment
# ==============================================================================

class TestRules:
    """Tests for the deterministic thresholds."""

    def test_full_window_normal(self):
        result = assess_with_rules(10, 120)
        assert result.status_tier == StatusTier.NORMAL
        assert result.confidence == 0.85
        assert result.analysis_method == AnalysisMethod.RULES
        assert result.weights_source is None

    def test_full_window_suspect(self):
        result = assess_with_rules(6, 150)
        assert result.status_tier == StatusTier.SUSPECT
        assert result.confidence == 0.70

    def test_full_window_concerning(self):
        result = assess_with_rules(3, 120)
        assert result.status_tier == StatusTier.CONCERNING
        assert result.predicted_class == 2
        assert result.confidence == 0.90

    def test_on_abdomen_adjustment(self):
        # 9 × 1.2 = 10.8 adjusted kicks
        assert assess_with_rules(9, 120).status_tier == StatusTier.SUSPECT
        on_abdomen = assess_with_rules(9, 120, SensorMode.ON_ABDOMEN)
        assert on_abdomen.status_tier == StatusTier.NORMAL
        assert on_abdomen.message == TEXT.RULE_FULL_NORMAL_ON_ABDOMEN

    def test_short_session_expected_rate(self):
        # 60 minutes → 5 kicks expected
        assert assess_with_rules(5, 60).status_tier == StatusTier.NORMAL
        assert assess_with_rules(5, 60).confidence == 0.80
        assert assess_with_rules(4, 60).status_tier == StatusTier.SUSPECT
        assert assess_with_rules(4, 60).confidence == 0.75

    def test_short_session_rounds_half_up(self):
        # 30 minutes → 2.5 kicks, rounded to 3
        assert assess_with_rules(2, 30).status_tier == StatusTier.SUSPECT
        assert assess_with_rules(3, 30).status_tier == StatusTier.NORMAL

    def test_short_session_never_concerning(self):
        assert assess_with_rules(0, 90).status_tier == StatusTier.SUSPECT


# ==============================================================================
# Assessment Service
# ==============================================================================

class TestFetalHealthService:
    """Tests for the end-to-end pipeline."""

    def test_model_assessment(self, pretrained_service):
        result = pretrained_service.assess(10, 42)

        assert isinstance(result, AssessmentResult)
        assert result.analysis_method == AnalysisMethod.MODEL
        assert result.weights_source == MODEL.SOURCE_PRETRAINED
        assert result.predicted_class in (0, 1, 2)
        assert 0.0 <= result.confidence <= 1.0
        assert result.kicks_per_hour == pytest.approx(14.29, abs=0.01)

    def test_fallback_model_still_assesses(self, fallback_service):
        result = fallback_service.assess(8, 120)

        assert result.weights_source == "fallback-untrained"
        assert not result.is_clinical
        assert result.status_tier in (StatusTier.NORMAL, StatusTier.SUSPECT, StatusTier.CONCERNING)

    def test_unbuildable_artifact_still_assesses(self, tmp_path):
        model_dir = save_model(FetalHealthNet(), tmp_path / "model")
        (model_dir / MODEL.TOPOLOGY_FILENAME).write_text(
            '{"input_dim": 21, "hidden_dims": [64, 32, 16], "output_dim": 3, "dropout": 1.5}'
        )
        service = FetalHealthService(AssessmentModel(model_dir))

        result = service.assess(10, 42)
        assert result.weights_source == MODEL.SOURCE_FALLBACK
        assert not result.is_clinical

    def test_rules_method(self, fallback_service):
        result = fallback_service.assess(10, 120, method=AnalysisMethod.RULES)
        assert result.analysis_method == AnalysisMethod.RULES
        assert result.status_tier == StatusTier.NORMAL
        assert fallback_service.model.handle is None  # model never touched

    def test_inference_failure_uses_rules(self, fallback_service):
        fallback_service.model._handle = ModelHandle(
            network=_BrokenNet(),
            architecture=MODEL.layer_sizes,
            weights_source=MODEL.SOURCE_PRETRAINED,
        )

        result = fallback_service.assess(3, 120)
        assert result.analysis_method == AnalysisMethod.RULES
        assert result.status_tier == StatusTier.CONCERNING

    def test_malformed_input_propagates(self, fallback_service):
        with pytest.raises(MalformedInputError):
            fallback_service.assess(10, 0)

    def test_lazy_model_creation(self, tmp_path):
        service = FetalHealthService(model_dir=tmp_path / "missing")
        assert service.model is service.model
        assert service.model.model_dir == tmp_path / "missing"
