"""
Tests for Chat Intent Detection and Responses.

This module tests:
1. Keyword-based intent detection
2. Kick count and duration extraction
3. Guidance topic selection
4. Assessment report formatting and responder fallbacks
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Add repository root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from kickguard.config import MODEL, TEXT
from kickguard.features import MalformedInputError, SensorMode
from kickguard.analysis import AnalysisMethod, generate_assessment
from kickguard.chat import (
    FetalHealthResponder,
    GUIDANCE_TEXTS,
    GuidanceTopic,
    KickData,
    extract_kick_data,
    format_report,
    get_guidance,
    is_fetal_health_intent,
    select_guidance,
)


# ==============================================================================
# Test Fixtures
# ==============================================================================

class StubService:
    """Returns a fixed-class assessment and records calls."""

    def __init__(self, predicted_class=0, weights_source=MODEL.SOURCE_PRETRAINED, error=None):
        self.predicted_class = predicted_class
        self.weights_source = weights_source
        self.error = error
        self.calls = []

    def assess(self, kick_count, duration_minutes, gestational_week=28,
               sensor_mode=SensorMode.MANUAL, method=AnalysisMethod.MODEL):
        self.calls.append((kick_count, duration_minutes))
        if self.error is not None:
            raise self.error
        return generate_assessment(
            self.predicted_class, 0.873, kick_count, duration_minutes,
            weights_source=self.weights_source,
        )


# ==============================================================================
# Intent
# ==============================================================================

class TestIntent:
    """Tests for keyword matching."""

    @pytest.mark.parametrize("text", [
        "I felt 8 kicks in 2 hours",
        "Is my baby moving enough?",
        "Worried about REDUCED KICKS today",
        "question about fetal movement",
        "How do I do a kick count?",
    ])
    def test_fetal_health_messages(self, text):
        assert is_fetal_health_intent(text)

    @pytest.mark.parametrize("text", [
        "What should I eat in the third trimester?",
        "Is coffee safe?",
        "",
    ])
    def test_other_messages(self, text):
        assert not is_fetal_health_intent(text)


# ==============================================================================
# Extraction
# ==============================================================================

class TestExtraction:
    """Tests for pulling numbers out of messages."""

    def test_kicks_in_hours(self):
        assert extract_kick_data("I felt 8 kicks in 2 hours") == KickData(8, 120)

    @pytest.mark.parametrize("text,expected", [
        ("12 kicks over 45 minutes", KickData(12, 45)),
        ("1 kick in 10 mins", KickData(1, 10)),
        ("counted 6kicks in 1hr", KickData(6, 60)),
        ("5 KICKS IN 3 HRS", KickData(5, 180)),
        ("after 30 min I had 4 kicks", KickData(4, 30)),
    ])
    def test_units_and_forms(self, text, expected):
        assert extract_kick_data(text) == expected

    def test_question_without_numbers(self):
        data = extract_kick_data("How often should I feel my baby move?")
        assert data.kick_count is None
        assert data.duration_minutes is None
        assert not data.is_complete

    def test_partial_data_is_incomplete(self):
        assert extract_kick_data("I felt 8 kicks today") == KickData(8, None)
        assert not extract_kick_data("I felt 8 kicks today").is_complete
        assert not extract_kick_data("counted for 2 hours").is_complete

    def test_zero_kicks_is_usable(self):
        data = extract_kick_data("0 kicks in 1 hour")
        assert data == KickData(0, 60)
        assert data.is_complete

    def test_zero_duration_is_not_usable(self):
        assert not extract_kick_data("5 kicks in 0 minutes").is_complete


# ==============================================================================
# Guidance Topics
# ==============================================================================

class TestGuidanceTopic:
    """Tests for bucket selection."""

    @pytest.mark.parametrize("text,topic", [
        ("How often should I feel my baby move?", GuidanceTopic.HOW_MANY),
        ("How many kicks are normal?", GuidanceTopic.HOW_MANY),
        ("I've noticed reduced movement", GuidanceTopic.REDUCED),
        ("baby kicks less than yesterday", GuidanceTopic.REDUCED),
        ("Tell me about fetal movement", GuidanceTopic.GENERAL),
    ])
    def test_select(self, text, topic):
        assert select_guidance(text) == topic

    def test_every_topic_has_text(self):
        assert set(GUIDANCE_TEXTS) == set(GuidanceTopic)
        assert "10+ kicks within 2 hours" in get_guidance(GuidanceTopic.HOW_MANY)
        assert "Kick Count Test" in get_guidance(GuidanceTopic.REDUCED)


# ==============================================================================
# Report and Responder
# ==============================================================================

class TestReport:
    """Tests for report formatting."""

    def test_report_sections(self):
        result = generate_assessment(0, 0.873, 8, 120)
        report = format_report(result, KickData(8, 120))

        assert report.startswith("✅ **Fetal Health Analysis**")
        assert "You reported: 8 kicks in 120 minutes (4.0 kicks/hour)" in report
        assert f"**Assessment:** {TEXT.REPORT_LABEL_NORMAL}" in report
        assert "**Confidence:** 87.3%" in report
        assert result.message in report
        assert f"**Recommendation:** {result.recommendation}" in report
        assert report.endswith(TEXT.DISCLAIMER)
        assert TEXT.NON_CLINICAL_NOTICE not in report

    def test_fallback_report_carries_notice(self):
        result = generate_assessment(2, 0.5, 2, 120, weights_source=MODEL.SOURCE_FALLBACK)
        report = format_report(result, KickData(2, 120))

        assert report.startswith("🚨")
        assert TEXT.NON_CLINICAL_NOTICE in report
        assert report.endswith(TEXT.DISCLAIMER)

    def test_unknown_class_label(self):
        result = generate_assessment(9, 0.5, 10, 60)
        report = format_report(result, KickData(10, 60))
        assert TEXT.REPORT_LABEL_UNKNOWN in report


class TestResponder:
    """Tests for the end-to-end chat reply."""

    def test_assesses_complete_data(self):
        service = StubService(predicted_class=1)
        reply = FetalHealthResponder(service).respond("I felt 8 kicks in 2 hours")

        assert service.calls == [(8, 120)]
        assert "⚠️ **Fetal Health Analysis**" in reply
        assert TEXT.REPORT_LABEL_SUSPECT in reply

    def test_zero_kicks_are_assessed(self):
        service = StubService(predicted_class=2)
        reply = FetalHealthResponder(service).respond("0 kicks in 2 hours")

        assert service.calls == [(0, 120)]
        assert "You reported: 0 kicks in 120 minutes (0.0 kicks/hour)" in reply
        assert TEXT.REPORT_LABEL_CONCERNING in reply

    def test_question_gets_guidance(self):
        service = StubService()
        reply = FetalHealthResponder(service).respond("How often should I feel my baby move?")

        assert reply == GUIDANCE_TEXTS[GuidanceTopic.HOW_MANY]
        assert service.calls == []

    def test_zero_minutes_gets_guidance(self):
        service = StubService()
        reply = FetalHealthResponder(service).respond("I had fewer kicks, 3 kicks in 0 minutes")

        assert reply == GUIDANCE_TEXTS[GuidanceTopic.REDUCED]
        assert service.calls == []

    @pytest.mark.parametrize("error", [
        RuntimeError("model exploded"),
        MalformedInputError("bad input"),
    ])
    def test_pipeline_failure_gets_general_guidance(self, error):
        service = StubService(error=error)
        reply = FetalHealthResponder(service).respond("I felt 8 kicks in 2 hours")
        assert reply == GUIDANCE_TEXTS[GuidanceTopic.GENERAL]

    def test_fallback_model_reply(self, tmp_path):
        from kickguard.analysis import FetalHealthService
        from kickguard.models import AssessmentModel

        service = FetalHealthService(AssessmentModel(tmp_path / "missing"))
        reply = FetalHealthResponder(service).respond("I felt 10 kicks in 42 minutes")

        assert "(14.3 kicks/hour)" in reply
        assert TEXT.NON_CLINICAL_NOTICE in reply
