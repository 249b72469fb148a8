"""
Feature extraction for KickGuard.

Turns a kick count and session length into the fixed-order 21-feature
vector consumed by the fetal health classifier.

Usage:
    >>> from kickguard.features import extract_features, SensorMode
    >>> vector = extract_features(10, 42, sensor_mode=SensorMode.MANUAL)
    >>> vector.to_array().shape
    (21,)
"""

from .extractor import (
    extract_features,
    build_feature_matrix,
    get_feature_names,
    FeatureVector,
    SensorMode,
    MalformedInputError,
    FEATURE_NAMES,
    FEATURE_VECTOR_DIM,
)

__all__ = [
    "extract_features",
    "build_feature_matrix",
    "get_feature_names",
    "FeatureVector",
    "SensorMode",
    "MalformedInputError",
    "FEATURE_NAMES",
    "FEATURE_VECTOR_DIM",
]
