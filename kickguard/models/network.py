"""
Feed-forward fetal health network.

The classifier is a small multilayer perceptron over the 21 CTG-style
features:

    21 → 64 (ReLU, Dropout 0.2) → 32 (ReLU, Dropout 0.2) → 16 (ReLU) → 3

The forward pass returns logits; softmax is applied at inference time.
Classes:
    0: Normal
    1: Suspect
    2: Pathological
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Tuple

import torch
import torch.nn as nn

from kickguard.config import MODEL


@dataclass(frozen=True)
class NetworkTopology:
    """
    Serializable description of the network layout.

    This is the "topology descriptor" half of a model artifact; the other
    half is the torch state_dict.
    """

    input_dim: int = MODEL.INPUT_DIM
    hidden_dims: Tuple[int, ...] = field(default=MODEL.HIDDEN_DIMS)
    output_dim: int = MODEL.OUTPUT_DIM
    dropout: float = MODEL.DROPOUT
    dropout_layers: int = MODEL.DROPOUT_LAYERS

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['hidden_dims'] = list(self.hidden_dims)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NetworkTopology":
        """
        Build a topology from a parsed descriptor.

        Raises:
            KeyError: If a required key is missing.
            TypeError, ValueError: If a value has the wrong type.
        """
        return cls(
            input_dim=int(data['input_dim']),
            hidden_dims=tuple(int(h) for h in data['hidden_dims']),
            output_dim=int(data['output_dim']),
            dropout=float(data.get('dropout', MODEL.DROPOUT)),
            dropout_layers=int(data.get('dropout_layers', MODEL.DROPOUT_LAYERS)),
        )

    @property
    def layer_sizes(self) -> Tuple[int, ...]:
        return (self.input_dim, *self.hidden_dims, self.output_dim)


DEFAULT_TOPOLOGY = NetworkTopology()


class FetalHealthNet(nn.Module):
    """3-class feed-forward classifier for fetal health."""

    def __init__(self, topology: NetworkTopology = DEFAULT_TOPOLOGY):
        super().__init__()
        self.topology = topology

        layers = []
        prev_dim = topology.input_dim
        for i, hidden_dim in enumerate(topology.hidden_dims):
            layers.append(nn.Linear(prev_dim, hidden_dim))
            layers.append(nn.ReLU())
            if i < topology.dropout_layers:
                layers.append(nn.Dropout(topology.dropout))
            prev_dim = hidden_dim
        layers.append(nn.Linear(prev_dim, topology.output_dim))

        self.layers = nn.Sequential(*layers)

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        # x shape: (B, input_dim) -> logits (B, output_dim)
        return self.layers(x)
