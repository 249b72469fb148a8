"""
Assessment Model for KickGuard.

Owns the fetal health classifier: loads a pretrained artifact (topology
descriptor + torch weights) from a model directory, or falls back to an
untrained network of identical architecture when the artifact cannot be
used. The fallback is never an error for the caller, but the resulting
``weights_source`` is kept on the handle and on every prediction.

Artifact layout:
    <model_dir>/topology.json   NetworkTopology descriptor (must equal DEFAULT_TOPOLOGY)
    <model_dir>/weights.pt      torch state_dict

Example:
    >>> model = AssessmentModel("models/fetal_health_model")
    >>> handle = model.load()
    >>> handle.weights_source
    'pretrained'
    >>> prediction = model.predict(extract_features(10, 42))
    >>> prediction.predicted_class, prediction.confidence
"""

from __future__ import annotations

import json
import logging
import math
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union

import numpy as np
import torch

from kickguard.config import MODEL, PATHS
from kickguard.features import FeatureVector, FEATURE_VECTOR_DIM
from kickguard.models.network import FetalHealthNet, NetworkTopology, DEFAULT_TOPOLOGY

logger = logging.getLogger(__name__)


class ModelError(Exception):
    """Base exception for model errors."""
    pass


class ModelLoadError(ModelError):
    """Raised when a pretrained artifact is missing, corrupt, or incompatible."""
    pass


class InferenceError(ModelError):
    """Raised when a forward pass fails or yields unusable probabilities."""
    pass


@dataclass(frozen=True)
class ModelHandle:
    """
    A loaded (or fallback) classifier.

    Attributes:
        network: The torch module, in eval mode.
        architecture: Layer sizes, e.g. (21, 64, 32, 16, 3).
        weights_source: 'pretrained' or 'fallback-untrained'.
        loaded: Always True once a handle exists.
        load_error: Why the pretrained artifact was rejected, if it was.
    """

    network: FetalHealthNet
    architecture: Tuple[int, ...]
    weights_source: str
    loaded: bool = True
    load_error: Optional[str] = None

    @property
    def is_fallback(self) -> bool:
        return self.weights_source == MODEL.SOURCE_FALLBACK


@dataclass(frozen=True)
class Prediction:
    """Result of one forward pass."""

    predicted_class: int
    confidence: float
    probabilities: Tuple[float, float, float]
    weights_source: str = MODEL.SOURCE_PRETRAINED

    @property
    def class_name(self) -> str:
        return MODEL.CLASS_NAMES[self.predicted_class]


def save_model(network: FetalHealthNet, model_dir: Union[str, Path]) -> Path:
    """
    Write a model artifact (topology descriptor + weights).

    Args:
        network: Network to serialize.
        model_dir: Directory to write into. Created if missing.

    Returns:
        The artifact directory.
    """
    model_dir = Path(model_dir)
    model_dir.mkdir(parents=True, exist_ok=True)

    topology_path = model_dir / MODEL.TOPOLOGY_FILENAME
    with open(topology_path, 'w') as f:
        json.dump(network.topology.to_dict(), f, indent=2)

    weights_path = model_dir / MODEL.WEIGHTS_FILENAME
    torch.save(network.state_dict(), weights_path)

    logger.info(f"Model saved to {model_dir}")
    return model_dir


def _read_artifact(model_dir: Path) -> FetalHealthNet:
    """
    Deserialize a pretrained network.

    Raises:
        ModelLoadError: On any problem with the artifact.
    """
    topology_path = model_dir / MODEL.TOPOLOGY_FILENAME
    weights_path = model_dir / MODEL.WEIGHTS_FILENAME

    if not topology_path.exists():
        raise ModelLoadError(f"Topology descriptor not found: {topology_path}")
    if not weights_path.exists():
        raise ModelLoadError(f"Weights file not found: {weights_path}")

    try:
        with open(topology_path, 'r') as f:
            topology = NetworkTopology.from_dict(json.load(f))
    except (OSError, ValueError, KeyError, TypeError) as e:
        raise ModelLoadError(f"Corrupt topology descriptor {topology_path}: {e}") from e

    if topology != DEFAULT_TOPOLOGY:
        raise ModelLoadError(
            f"Incompatible topology: expected {DEFAULT_TOPOLOGY.to_dict()}, "
            f"got {topology.to_dict()}"
        )

    try:
        network = FetalHealthNet(topology)
        state_dict = torch.load(weights_path, map_location='cpu', weights_only=True)
        network.load_state_dict(state_dict)
    except Exception as e:
        raise ModelLoadError(f"Cannot load weights {weights_path}: {e}") from e

    return network


class AssessmentModel:
    """
    Lazily loaded, shared fetal health classifier.

    The first call to ``load()`` (or ``predict()``) builds the handle under a
    lock; concurrent first callers wait for that single load and receive the
    same handle. After that the handle is read-only.
    """

    def __init__(self, model_dir: Optional[Union[str, Path]] = None):
        """
        Args:
            model_dir: Artifact directory. Uses PATHS.DEFAULT_MODEL_DIR if None.
        """
        self.model_dir = Path(model_dir) if model_dir is not None else Path(PATHS.DEFAULT_MODEL_DIR)
        self._handle: Optional[ModelHandle] = None
        self._lock = threading.Lock()
        self.load_count = 0

    @property
    def handle(self) -> Optional[ModelHandle]:
        """Current handle, or None before the first load."""
        return self._handle

    def _build_handle(self) -> ModelHandle:
        self.load_count += 1
        try:
            network = _read_artifact(self.model_dir)
            source = MODEL.SOURCE_PRETRAINED
            error = None
            logger.info(f"Loaded pretrained fetal health model from {self.model_dir}")
        except ModelLoadError as e:
            logger.warning(
                f"Pretrained model unavailable ({e}); using untrained fallback network"
            )
            network = FetalHealthNet(DEFAULT_TOPOLOGY)
            source = MODEL.SOURCE_FALLBACK
            error = str(e)

        network.eval()
        return ModelHandle(
            network=network,
            architecture=network.topology.layer_sizes,
            weights_source=source,
            load_error=error,
        )

    def load(self) -> ModelHandle:
        """
        Return the model handle, loading it on first use.

        Never raises for artifact problems; check ``weights_source``.
        """
        handle = self._handle
        if handle is not None:
            return handle

        with self._lock:
            if self._handle is None:
                self._handle = self._build_handle()
            return self._handle

    def reload(self) -> ModelHandle:
        """Rebuild the handle from disk and swap it in as a whole."""
        with self._lock:
            handle = self._build_handle()
            self._handle = handle
        return handle

    def predict(self, vector: Union[FeatureVector, np.ndarray]) -> Prediction:
        """
        Classify one feature vector.

        Args:
            vector: FeatureVector or array of shape (21,).

        Returns:
            Prediction with argmax class, its probability, and all three
            probabilities.

        Raises:
            InferenceError: If the forward pass fails or the probabilities
                are not a valid distribution.
        """
        handle = self.load()

        x = vector.to_array() if isinstance(vector, FeatureVector) else np.asarray(vector, dtype=np.float32)
        if x.shape != (FEATURE_VECTOR_DIM,):
            raise InferenceError(
                f"Feature vector must be {FEATURE_VECTOR_DIM}-dimensional, got {x.shape}"
            )

        try:
            with torch.no_grad():
                inputs = torch.from_numpy(x).unsqueeze(0)
                logits = handle.network(inputs)
                probs = torch.softmax(logits.double(), dim=1)[0].tolist()
        except Exception as e:
            raise InferenceError(f"Forward pass failed: {e}") from e

        if len(probs) != MODEL.NUM_CLASSES or not all(math.isfinite(p) for p in probs):
            raise InferenceError(f"Invalid model output: {probs}")
        if abs(sum(probs) - 1.0) > MODEL.PROBABILITY_TOLERANCE:
            raise InferenceError(f"Probabilities do not sum to 1: {probs}")

        predicted_class = int(np.argmax(probs))
        prediction = Prediction(
            predicted_class=predicted_class,
            confidence=float(probs[predicted_class]),
            probabilities=tuple(float(p) for p in probs),
            weights_source=handle.weights_source,
        )

        logger.debug(
            f"Prediction: class={prediction.predicted_class} "
            f"confidence={prediction.confidence:.3f} source={handle.weights_source}"
        )
        return prediction
