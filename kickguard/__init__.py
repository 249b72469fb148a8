"""
KickGuard - Fetal Movement Session and Health-Risk Assessment Engine.

Runs timed kick-counting sessions, maps kick data onto a CTG-style feature
vector, classifies it with a small feed-forward network, and turns the
result into a tiered, explained assessment:
- Session controller with count-to-10 and fixed-duration methods
- Feature extraction (21 features, fixed order)
- Neural classifier with untrained fallback when no artifact loads
- Rule-based assessment as the inference safety net
- Chat intent detection ("I felt 8 kicks in 2 hours")

Modules:
    config: Centralized configuration constants
    features: Kick data → feature vector
    models: Classifier network and loader
    analysis: Assessment generation, rules, FetalHealthService
    session: Session state machine, clock scheduling, history
    chat: Intent detection and chat replies
    cli: Command-line interface

Quick Start:
    >>> from kickguard.analysis import FetalHealthService
    >>> from kickguard.session import SessionController, CountingMethod
    >>> service = FetalHealthService(model_dir="models/fetal_health_model")
    >>> controller = SessionController(service)
    >>> controller.start(CountingMethod.COUNT_TO_TARGET)
"""

__version__ = "1.0.0"

# Expose main configuration
from kickguard.config import SESSION, FEATURES, MODEL, PATHS, RULES

__all__ = [
    '__version__',
    'SESSION',
    'FEATURES',
    'MODEL',
    'PATHS',
    'RULES',
]
