"""Pipeline composition engine: compose models into learning networks and train them.

Public surface::

    from learnet import (
        Pipeline,
        Machine,
        Model, Deterministic, Probabilistic, Interval, Unsupervised, Static,
        Capability, Kind,
        source, node,
    )
"""

from .components import NamedComponent, named_components
from .config import LearnetConfig, get_config
from .errors import (
    CapabilityMismatchError,
    EmptyPipelineError,
    InvalidOperationError,
    InvalidPredictionTypeError,
    InversionNotSupportedError,
    MixedSpecificationError,
    NotTrainedError,
    PredictionTypeConflictError,
    ReservedNameError,
    TooManySupervisedError,
    UnknownPropertyError,
)
from .graph import ErrorNode, Node, Source, machines, node, source
from .machine import Machine
from .naming import generate_names, individuate
from .network import Front, LearningNetwork, extend, pipeline_network
from .pipeline import Pipeline, PipelineCache, construct
from .protocol import (
    Capability,
    Deterministic,
    Interval,
    Kind,
    Model,
    Probabilistic,
    Static,
    Supervised,
    Unsupervised,
)
from .registry import COMPOSITE_TYPES, CompositeType, composite_type, implements
from .report import NetworkReport
from .resolver import PREDICT_OPERATIONS, resolve_capability
from .traits import abstract_type, classify, native_capability

__all__ = [
    "Pipeline",
    "PipelineCache",
    "construct",
    "Machine",
    "Model",
    "Supervised",
    "Deterministic",
    "Probabilistic",
    "Interval",
    "Unsupervised",
    "Static",
    "Capability",
    "Kind",
    "NamedComponent",
    "named_components",
    "individuate",
    "generate_names",
    "resolve_capability",
    "PREDICT_OPERATIONS",
    "CompositeType",
    "COMPOSITE_TYPES",
    "composite_type",
    "implements",
    "abstract_type",
    "classify",
    "native_capability",
    "Front",
    "extend",
    "pipeline_network",
    "LearningNetwork",
    "NetworkReport",
    "Source",
    "Node",
    "ErrorNode",
    "source",
    "node",
    "machines",
    "LearnetConfig",
    "get_config",
    "EmptyPipelineError",
    "TooManySupervisedError",
    "MixedSpecificationError",
    "InvalidOperationError",
    "InvalidPredictionTypeError",
    "PredictionTypeConflictError",
    "UnknownPropertyError",
    "InversionNotSupportedError",
    "CapabilityMismatchError",
    "ReservedNameError",
    "NotTrainedError",
]
