"""Capability-trait queries used for every kind-based decision in the package.

Nothing outside this module inspects component classes directly. A pipeline
carries its capability as an instance-level tag, so dispatching on
``abstract_type`` treats a ``DeterministicPipeline`` exactly like any other
deterministic model.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any

from .protocol import Capability, Kind, Model


def is_model(component: Any) -> bool:
    return isinstance(component, Model)


def instance(component: Any) -> Any:
    """Instantiate a bare model class with default hyperparameters."""
    if isinstance(component, type) and issubclass(component, Model):
        return component()
    return component


def abstract_type(component: Any) -> Capability:
    """The capability supertype recorded for ``component`` in a pipeline."""
    if is_model(component):
        return component.capability
    return Capability.ANY


def classify(component: Any) -> Kind:
    return abstract_type(component).kind


def native_capability(component: Any) -> Capability:
    """Prediction type of a supervised component.

    Raises:
        TypeError: If ``component`` is not supervised.
    """
    if classify(component) is not Kind.SUPERVISED:
        raise TypeError(f"{component!r} is not a supervised model")
    return abstract_type(component)


def type_name(component: Any) -> str:
    if is_model(component):
        return component.type_name
    return getattr(component, "__name__", type(component).__name__)


def snapshot(value: Any) -> Any:
    """Comparable, detached copy of a model's hyperparameters.

    Nested models are expanded recursively so that mutating a hyperparameter
    anywhere below ``value`` changes the snapshot.
    """
    if is_model(value):
        return (
            value.type_name,
            tuple((k, snapshot(v)) for k, v in value.params().items()),
        )
    if isinstance(value, (list, tuple)):
        return type(value).__name__, tuple(snapshot(v) for v in value)
    if isinstance(value, Mapping):
        return "dict", tuple((k, snapshot(v)) for k, v in value.items())
    if callable(value):
        return value
    return copy.deepcopy(value)
