"""
Tests for the command-line interface.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest
import torch

# Add repository root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from kickguard.cli import main
from kickguard.config import MODEL, TEXT
from kickguard.models import FetalHealthNet, save_model


@pytest.fixture
def missing_dir(tmp_path: Path) -> str:
    return str(tmp_path / "missing")


class TestAssessCommand:

    def test_rules_assessment_json(self, missing_dir, capsys):
        code = main(["--model-dir", missing_dir, "assess", "--kicks", "10", "--minutes", "120", "--rules"])

        assert code == 0
        data = json.loads(capsys.readouterr().out)
        assert data['statusTier'] == "Normal"
        assert data['analysisMethod'] == "rules"
        assert data['kicksPerHour'] == pytest.approx(5.0)
        assert data['weightsSource'] is None

    def test_on_abdomen_flag(self, missing_dir, capsys):
        main(["--model-dir", missing_dir, "assess", "--kicks", "9", "--minutes", "120",
              "--rules", "--on-abdomen"])
        data = json.loads(capsys.readouterr().out)
        assert data['statusTier'] == "Normal"

    def test_model_assessment_reports_source(self, missing_dir, capsys):
        main(["--model-dir", missing_dir, "assess", "--kicks", "10", "--minutes", "42"])
        data = json.loads(capsys.readouterr().out)
        assert data['weightsSource'] == MODEL.SOURCE_FALLBACK
        assert data['analysisMethod'] == "model"
        assert data['predictedClass'] in (0, 1, 2)

    def test_zero_minutes_rejected(self, missing_dir, capsys):
        code = main(["--model-dir", missing_dir, "assess", "--kicks", "10", "--minutes", "0"])
        assert code == 2
        assert capsys.readouterr().out == ""


class TestChatCommand:

    def test_guidance(self, missing_dir, capsys):
        main(["--model-dir", missing_dir, "chat", "How often should I feel my baby move?"])
        assert "Fetal Movement Monitoring Guide" in capsys.readouterr().out

    def test_report(self, missing_dir, capsys):
        main(["--model-dir", missing_dir, "chat", "I felt 8 kicks in 2 hours"])
        out = capsys.readouterr().out
        assert "**Fetal Health Analysis**" in out
        assert TEXT.NON_CLINICAL_NOTICE in out


class TestModelInfoCommand:

    def test_fallback(self, missing_dir, capsys):
        main(["--model-dir", missing_dir, "model-info"])
        info = json.loads(capsys.readouterr().out)
        assert info['weights_source'] == MODEL.SOURCE_FALLBACK
        assert info['architecture'] == [21, 64, 32, 16, 3]
        assert "not found" in info['load_error']

    def test_pretrained(self, tmp_path, capsys):
        torch.manual_seed(0)
        model_dir = save_model(FetalHealthNet(), tmp_path / "model")

        main(["--model-dir", str(model_dir), "model-info"])
        info = json.loads(capsys.readouterr().out)
        assert info['weights_source'] == MODEL.SOURCE_PRETRAINED
        assert info['load_error'] is None
