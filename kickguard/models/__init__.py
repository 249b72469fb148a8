"""
KickGuard Models Module.

Contains:
    - FetalHealthNet: 21 → 64 → 32 → 16 → 3 feed-forward classifier
    - AssessmentModel: lazy single-flight loader with untrained fallback

Usage:
    >>> from kickguard.models import AssessmentModel
    >>> model = AssessmentModel("models/fetal_health_model")
    >>> prediction = model.predict(vector)
"""

from .network import (
    FetalHealthNet,
    NetworkTopology,
    DEFAULT_TOPOLOGY,
)
from .assessment_model import (
    AssessmentModel,
    ModelHandle,
    Prediction,
    ModelError,
    ModelLoadError,
    InferenceError,
    save_model,
)

__all__ = [
    # Network
    "FetalHealthNet",
    "NetworkTopology",
    "DEFAULT_TOPOLOGY",
    # Assessment model
    "AssessmentModel",
    "ModelHandle",
    "Prediction",
    "ModelError",
    "ModelLoadError",
    "InferenceError",
    "save_model",
]
