"""
Kick Data Feature Extraction.

Maps a kick-counting result onto the 21-dimensional CTG-style feature
vector expected by the fetal health classifier.

Feature Vector Structure (21 dimensions, fixed wire order):
    Index 0:   baseline value                  (constant)
    Index 1:   accelerations                   (rate > 0.5 → 0.1, else 0.0)
    Index 2:   fetal_movement                  (rate × sensitivity)
    Index 3:   uterine_contractions            (constant)
    Index 4-6: light/severe/prolongued decels  (constant)
    Index 7:   abnormal_short_term_variability (rate < 0.3 → 50, else 20)
    Index 8:   mean_value_of_short_term_variability (rate × 10 × sensitivity)
    Index 9:   percentage_of_time_with_abnormal_long_term_variability
               (rate < 0.3 → 30, else 5)
    Index 10:  mean_value_of_long_term_variability  (rate × 15 × sensitivity)
    Index 11-20: histogram statistics           (constants)

where rate is kicks per minute. Kick counting is a coarse proxy for a real
cardiotocography trace: only the rate-derived fields carry information.
"""

from __future__ import annotations

import logging
import math
from dataclasses import astuple, dataclass, fields
from enum import Enum
from typing import List, Tuple

import numpy as np

from kickguard.config import FEATURES

logger = logging.getLogger(__name__)


FEATURE_VECTOR_DIM = FEATURES.DIM

# Column names as they appear in the fetal_health training data
FEATURE_NAMES: Tuple[str, ...] = (
    'baseline value',
    'accelerations',
    'fetal_movement',
    'uterine_contractions',
    'light_decelerations',
    'severe_decelerations',
    'prolongued_decelerations',
    'abnormal_short_term_variability',
    'mean_value_of_short_term_variability',
    'percentage_of_time_with_abnormal_long_term_variability',
    'mean_value_of_long_term_variability',
    'histogram_width',
    'histogram_min',
    'histogram_max',
    'histogram_number_of_peaks',
    'histogram_number_of_zeroes',
    'histogram_mode',
    'histogram_mean',
    'histogram_median',
    'histogram_variance',
    'histogram_tendency',
)


class MalformedInputError(ValueError):
    """Raised when kick data cannot be turned into a feature vector."""
    pass


class SensorMode(Enum):
    """How kicks were detected."""

    MANUAL = "manual"
    ON_ABDOMEN = "on_abdomen"


@dataclass(frozen=True)
class FeatureVector:
    """
    The 21 classifier inputs, in wire order.

    Field order is the contract: ``to_array()`` and ``FEATURE_NAMES`` follow
    the declaration order below.
    """

    baseline_value: float
    accelerations: float
    fetal_movement: float
    uterine_contractions: float
    light_decelerations: float
    severe_decelerations: float
    prolongued_decelerations: float
    abnormal_short_term_variability: float
    mean_value_of_short_term_variability: float
    percentage_of_time_with_abnormal_long_term_variability: float
    mean_value_of_long_term_variability: float
    histogram_width: float
    histogram_min: float
    histogram_max: float
    histogram_number_of_peaks: float
    histogram_number_of_zeroes: float
    histogram_mode: float
    histogram_mean: float
    histogram_median: float
    histogram_variance: float
    histogram_tendency: float

    def __post_init__(self) -> None:
        """Validate that every feature is a finite number."""
        for f in fields(self):
            value = getattr(self, f.name)
            if not math.isfinite(value):
                raise MalformedInputError(f"Feature '{f.name}' is not finite: {value}")

    def __len__(self) -> int:
        return FEATURE_VECTOR_DIM

    def to_array(self) -> np.ndarray:
        """
        Convert to a numpy vector.

        Returns:
            float32 array of shape (21,).
        """
        return np.asarray(astuple(self), dtype=np.float32)

    def as_dict(self) -> dict:
        """Map wire names to values."""
        return dict(zip(FEATURE_NAMES, astuple(self)))


def _validate_inputs(
    kick_count: int,
    duration_minutes: float,
    gestational_week: int,
    sensor_mode: SensorMode,
) -> None:
    if kick_count is None or kick_count < 0:
        raise MalformedInputError(f"Kick count must be >= 0, got {kick_count}")
    if duration_minutes is None or not duration_minutes > 0:
        raise MalformedInputError(f"Duration must be > 0 minutes, got {duration_minutes}")
    if not math.isfinite(duration_minutes):
        raise MalformedInputError(f"Duration must be finite, got {duration_minutes}")
    if not FEATURES.MIN_GESTATIONAL_WEEK <= gestational_week <= FEATURES.MAX_GESTATIONAL_WEEK:
        raise MalformedInputError(
            f"Gestational week must be {FEATURES.MIN_GESTATIONAL_WEEK}-"
            f"{FEATURES.MAX_GESTATIONAL_WEEK}, got {gestational_week}"
        )
    if not isinstance(sensor_mode, SensorMode):
        raise MalformedInputError(f"Unknown sensor mode: {sensor_mode!r}")


def extract_features(
    kick_count: int,
    duration_minutes: float,
    gestational_week: int = FEATURES.DEFAULT_GESTATIONAL_WEEK,
    sensor_mode: SensorMode = SensorMode.MANUAL,
) -> FeatureVector:
    """
    Build the classifier feature vector from a kick count.

    Args:
        kick_count: Number of kicks counted (>= 0).
        duration_minutes: Session length in minutes (> 0).
        gestational_week: Week of pregnancy. Validated but does not yet
            change any feature.
        sensor_mode: Detection mode. ON_ABDOMEN scales the rate-derived
            features by the on-abdomen sensitivity factor.

    Returns:
        FeatureVector with 21 finite values.

    Raises:
        MalformedInputError: If any input is out of range.

    Example:
        >>> vec = extract_features(10, 42)
        >>> vec.to_array().shape
        (21,)
    """
    _validate_inputs(kick_count, duration_minutes, gestational_week, sensor_mode)

    rate = kick_count / duration_minutes
    sensitivity = (
        FEATURES.ON_ABDOMEN_SENSITIVITY
        if sensor_mode is SensorMode.ON_ABDOMEN
        else 1.0
    )
    low_activity = rate < FEATURES.LOW_ACTIVITY_RATE_THRESHOLD

    vector = FeatureVector(
        baseline_value=FEATURES.BASELINE_VALUE,
        accelerations=(
            FEATURES.ACCELERATION_ACTIVE
            if rate > FEATURES.ACCELERATION_RATE_THRESHOLD
            else FEATURES.ACCELERATION_QUIET
        ),
        fetal_movement=rate * sensitivity,
        uterine_contractions=FEATURES.UTERINE_CONTRACTIONS,
        light_decelerations=FEATURES.LIGHT_DECELERATIONS,
        severe_decelerations=FEATURES.SEVERE_DECELERATIONS,
        prolongued_decelerations=FEATURES.PROLONGUED_DECELERATIONS,
        abnormal_short_term_variability=(
            FEATURES.ABNORMAL_STV_LOW_ACTIVITY if low_activity
            else FEATURES.ABNORMAL_STV_NORMAL
        ),
        mean_value_of_short_term_variability=rate * FEATURES.STV_RATE_SCALE * sensitivity,
        percentage_of_time_with_abnormal_long_term_variability=(
            FEATURES.ABNORMAL_LTV_PCT_LOW_ACTIVITY if low_activity
            else FEATURES.ABNORMAL_LTV_PCT_NORMAL
        ),
        mean_value_of_long_term_variability=rate * FEATURES.LTV_RATE_SCALE * sensitivity,
        histogram_width=FEATURES.HISTOGRAM_WIDTH,
        histogram_min=FEATURES.HISTOGRAM_MIN,
        histogram_max=FEATURES.HISTOGRAM_MAX,
        histogram_number_of_peaks=FEATURES.HISTOGRAM_NUMBER_OF_PEAKS,
        histogram_number_of_zeroes=FEATURES.HISTOGRAM_NUMBER_OF_ZEROES,
        histogram_mode=FEATURES.HISTOGRAM_MODE,
        histogram_mean=FEATURES.HISTOGRAM_MEAN,
        histogram_median=FEATURES.HISTOGRAM_MEDIAN,
        histogram_variance=FEATURES.HISTOGRAM_VARIANCE,
        histogram_tendency=FEATURES.HISTOGRAM_TENDENCY,
    )

    logger.debug(
        f"Built feature vector: kicks={kick_count}, duration={duration_minutes}min, "
        f"rate={rate:.3f}/min, sensor={sensor_mode.value}"
    )

    return vector


def build_feature_matrix(vectors: List[FeatureVector]) -> np.ndarray:
    """
    Stack feature vectors into a matrix for batch inference.

    Args:
        vectors: List of FeatureVector objects.

    Returns:
        numpy array of shape (N, 21).
    """
    if not vectors:
        return np.empty((0, FEATURE_VECTOR_DIM), dtype=np.float32)

    return np.vstack([v.to_array() for v in vectors])


def get_feature_names() -> List[str]:
    """Wire names for all 21 features, in order."""
    return list(FEATURE_NAMES)
