"""Composite type registry: one entry per capability category.

A pipeline is a single class carrying a capability tag. The registry maps
that tag to the name the composite presents itself under and to the graph
outputs it serves.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from .protocol import Capability
from .traits import abstract_type


@dataclass(frozen=True)
class CompositeType:
    name: str
    capability: Capability
    outputs: frozenset[str]

    def serves(self, output: str) -> bool:
        return output in self.outputs


_SUPERVISED_OUTPUTS = frozenset({"predict", "transform", "inverse_transform"})

COMPOSITE_TYPES: MappingProxyType = MappingProxyType(
    {
        Capability.DETERMINISTIC: CompositeType(
            "DeterministicPipeline", Capability.DETERMINISTIC, _SUPERVISED_OUTPUTS
        ),
        Capability.PROBABILISTIC: CompositeType(
            "ProbabilisticPipeline",
            Capability.PROBABILISTIC,
            _SUPERVISED_OUTPUTS
            | {"predict_mean", "predict_median", "predict_mode"},
        ),
        Capability.INTERVAL: CompositeType(
            "IntervalPipeline", Capability.INTERVAL, _SUPERVISED_OUTPUTS
        ),
        Capability.UNSUPERVISED: CompositeType(
            "UnsupervisedPipeline",
            Capability.UNSUPERVISED,
            frozenset({"transform", "inverse_transform", "predict"}),
        ),
        Capability.STATIC: CompositeType(
            "StaticPipeline",
            Capability.STATIC,
            frozenset({"transform", "inverse_transform"}),
        ),
    }
)


def composite_type(capability: Capability) -> CompositeType:
    """Registry entry for ``capability``.

    Raises:
        KeyError: For ``Capability.ANY``, which no composite can have.
    """
    try:
        return COMPOSITE_TYPES[capability]
    except KeyError:
        raise KeyError(f"no composite type for capability {capability}") from None


def implements(component: Any, capability: Capability) -> bool:
    """Trait-dispatch query: does ``component`` belong to ``capability``?

    ``Capability.UNSUPERVISED`` also admits static components, mirroring
    ``Static`` being a kind of ``Unsupervised`` model.
    """
    actual = abstract_type(component)
    if capability is Capability.UNSUPERVISED:
        return actual in (Capability.UNSUPERVISED, Capability.STATIC)
    return actual is capability
