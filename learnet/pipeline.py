"""Pipeline: sequential composition of models and callables into one model."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from .components import NamedComponent, named_components
from .config import get_config
from .errors import CapabilityMismatchError, MixedSpecificationError, UnknownPropertyError
from .graph import source
from .naming import generate_names
from .network import LearningNetwork, pipeline_network
from .protocol import CallableComponent, Capability, Model, point_estimates
from .registry import CompositeType, composite_type
from .report import NetworkReport
from .resolver import as_capability, check_operation, resolve_capability
from .traits import abstract_type, instance, is_model

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineCache:
    """What ``Pipeline.update`` needs to decide whether a network is reusable."""

    components: tuple
    cache: bool


class Pipeline(Model):
    """Sequential composite of models and plain callables.

    ``component1`` receives the inputs, its output is passed to
    ``component2``, and so on. A component is a ``Model`` instance, a model
    class (instantiated with default hyperparameters) or any callable::

        Pipeline(Standardizer, LinearRegressor(), lambda y: [max(v, 0) for v in y])
        Pipeline(scale=Standardizer(), model=LinearRegressor())

    At most one component may be supervised, in any position. The pipeline is
    itself a model whose capability (``DeterministicPipeline``,
    ``ProbabilisticPipeline``, ``IntervalPipeline``, ``UnsupervisedPipeline``
    or ``StaticPipeline``) is inferred once, at construction.

    Keyword options:

    - ``prediction_type`` - ``"deterministic"``, ``"probabilistic"`` or
      ``"interval"``; overrides the inferred prediction type of a supervised
      pipeline (default: inferred). A supervised component that is not last
      makes the pipeline deterministic; the notice saying so is an INFO record
      on the ``learnet.resolver`` logger, shown only once INFO is enabled
      there (``logging.getLogger("learnet.resolver").setLevel(logging.INFO)``
      with a handler configured).
    - ``operation`` - operation applied to the supervised component:
      ``"predict"``, ``"predict_mean"``, ``"predict_median"`` or
      ``"predict_mode"`` (default ``"predict"``).
    - ``cache`` - whether component machines keep their training data between
      training calls (default from ``get_config()``, normally ``True``). Set
      ``cache=False`` to guarantee data is not retained after training.

    Components are read and replaced as attributes, ``pipe.scale``. A
    replacement must have the same abstract type as the component it
    replaces; ``pipe.cache`` may be set freely. The shape of a pipeline never
    changes after construction.
    """

    def __init__(
        self,
        *components: Any,
        prediction_type: Any = None,
        operation: str = "predict",
        cache: bool | None = None,
        **named: Any,
    ) -> None:
        # components appear either positionally (names generated) or as
        # keywords, never both
        if components and named:
            raise MixedSpecificationError()
        check_operation(operation)
        as_capability(prediction_type)

        if named:
            names = list(named)
            instances = [instance(c) for c in named.values()]
        else:
            instances = [instance(c) for c in components]
            names = generate_names(instances, reserved=RESERVED_NAMES)

        validated = named_components(names, instances, reserved=RESERVED_NAMES)
        capability = resolve_capability(instances, prediction_type, operation)
        if cache is None:
            cache = get_config().cache

        self._assemble(composite_type(capability), operation, validated, bool(cache))

    @classmethod
    def construct(
        cls,
        capability: Capability,
        operation: str,
        named_components: Sequence[NamedComponent],
        cache: bool,
    ) -> "Pipeline":
        """Build a pipeline of the given category from validated parts.

        No inference or validation happens here; callers are responsible for
        handing over components that ``Pipeline(...)`` would have accepted.
        """
        pipe = cls.__new__(cls)
        pipe._assemble(composite_type(capability), operation, named_components, cache)
        return pipe

    def _assemble(
        self,
        ctype: CompositeType,
        operation: str,
        components: Sequence[NamedComponent],
        cache: bool,
    ) -> None:
        object.__setattr__(self, "_composite_type", ctype)
        object.__setattr__(self, "_operation", operation)
        object.__setattr__(self, "_named_components", tuple(components))
        object.__setattr__(self, "_cache", cache)

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    @property
    def capability(self) -> Capability:
        return self._composite_type.capability

    @property
    def composite_type(self) -> CompositeType:
        return self._composite_type

    @property
    def type_name(self) -> str:
        return self._composite_type.name

    @property
    def operation(self) -> str:
        return self._operation

    @property
    def cache(self) -> bool:
        return self._cache

    @property
    def named_components(self) -> MappingProxyType:
        return MappingProxyType({nc.name: nc.component for nc in self._named_components})

    @property
    def components(self) -> tuple:
        return tuple(nc.component for nc in self._named_components)

    def propertynames(self) -> tuple[str, ...]:
        return (*(nc.name for nc in self._named_components), "cache")

    def params(self) -> dict[str, Any]:
        params: dict[str, Any] = {nc.name: nc.component for nc in self._named_components}
        params["cache"] = self._cache
        return params

    def clone(self) -> "Pipeline":
        cloned = [
            nc.replace(nc.component.clone() if is_model(nc.component) else nc.component)
            for nc in self._named_components
        ]
        return Pipeline.construct(self.capability, self._operation, cloned, self._cache)

    # ------------------------------------------------------------------
    # Property access
    # ------------------------------------------------------------------

    def __getattr__(self, name: str) -> Any:
        # only reached when normal attribute lookup fails
        components = self.__dict__.get("_named_components")
        if components is not None:
            for nc in components:
                if nc.name == name:
                    return nc.component
        raise UnknownPropertyError(self._display_name(), name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "cache":
            object.__setattr__(self, "_cache", bool(value))
            return
        self._replace_component(name, value)

    def __dir__(self) -> list[str]:
        return sorted({*super().__dir__(), *self.propertynames()})

    def _display_name(self) -> str:
        ctype = self.__dict__.get("_composite_type")
        return type(self).__name__ if ctype is None else ctype.name

    def _replace_component(self, name: str, value: Any) -> None:
        value = instance(value)
        for i, nc in enumerate(self._named_components):
            if nc.name != name:
                continue
            got = abstract_type(value)
            if got is not nc.abstract_type:
                raise CapabilityMismatchError(name, nc.abstract_type, got)
            if not (is_model(value) or isinstance(value, CallableComponent)):
                raise TypeError(f"{value!r} is neither a model nor callable")
            components = list(self._named_components)
            components[i] = nc.replace(value)
            object.__setattr__(self, "_named_components", tuple(components))
            return
        raise UnknownPropertyError(self._display_name(), name)

    # ------------------------------------------------------------------
    # Training
    # ------------------------------------------------------------------

    def fit(
        self, verbosity: int, X: Any = None, *args: Any
    ) -> tuple[LearningNetwork, PipelineCache, NetworkReport]:
        """Build the pipeline's learning network and train it.

        ``X`` is the input data; ``args`` holds the target (and any further
        training arguments) of a supervised component. Returns the network as
        fitted state, a ``PipelineCache`` and a ``NetworkReport``.
        """
        network = pipeline_network(
            self.capability,
            self._cache,
            self._operation,
            self._named_components,
            source(X),
            *(source(a) for a in args),
        )
        report = network.fit(verbosity)
        return self._finish(network, report)

    def update(
        self,
        verbosity: int,
        fitresult: LearningNetwork,
        cache: PipelineCache,
        X: Any = None,
        *args: Any,
    ) -> tuple[LearningNetwork, PipelineCache, NetworkReport]:
        """Retrain after hyperparameter changes, reusing the network if possible.

        The network is reused when every component is the same object as at
        the last training and the cache flag is unchanged; only machines whose
        hyperparameters changed, and machines downstream of them, retrain.
        Otherwise this is a cold ``fit``.
        """
        current = self.components
        reusable = (
            cache is not None
            and cache.cache == self._cache
            and len(cache.components) == len(current)
            and all(old is new for old, new in zip(cache.components, current))
        )
        if not reusable:
            logger.debug("%s changed shape or cache flag; refitting", self.type_name)
            return self.fit(verbosity, X, *args)

        fitresult.rebind(X, *args, fresh=False)
        report = fitresult.fit(verbosity)
        return self._finish(fitresult, report)

    def _finish(
        self, network: LearningNetwork, report: NetworkReport
    ) -> tuple[LearningNetwork, PipelineCache, NetworkReport]:
        if not self._cache:
            network.anonymize()
            report.anonymized = True
        return network, PipelineCache(self.components, self._cache), report

    def fitted_params(self, fitresult: LearningNetwork) -> dict[str, Any]:
        return fitresult.fitted_params()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def _check_serves(self, output: str) -> None:
        if not self._composite_type.serves(output):
            raise NotImplementedError(f"{self.type_name} does not support {output}")

    def _evaluate(self, output: str, fitresult: LearningNetwork, *args: Any) -> Any:
        self._check_serves(output)
        return fitresult.evaluate(output, *args)

    def predict(self, fitresult: LearningNetwork, *args: Any) -> Any:
        return self._evaluate("predict", fitresult, *args)

    def transform(self, fitresult: LearningNetwork, *args: Any) -> Any:
        return self._evaluate("transform", fitresult, *args)

    def inverse_transform(self, fitresult: LearningNetwork, *args: Any) -> Any:
        return self._evaluate("inverse_transform", fitresult, *args)

    def predict_mean(self, fitresult: LearningNetwork, *args: Any) -> list:
        self._check_serves("predict_mean")
        return point_estimates(self.predict(fitresult, *args), "mean")

    def predict_median(self, fitresult: LearningNetwork, *args: Any) -> list:
        self._check_serves("predict_median")
        return point_estimates(self.predict(fitresult, *args), "median")

    def predict_mode(self, fitresult: LearningNetwork, *args: Any) -> list:
        self._check_serves("predict_mode")
        return point_estimates(self.predict(fitresult, *args), "mode")

    def __repr__(self) -> str:
        parts = [f"{nc.name}={nc.component!r}" for nc in self._named_components]
        parts.append(f"cache={self._cache}")
        return f"{self.type_name}({', '.join(parts)})"


RESERVED_NAMES = frozenset(
    name for name in dir(Pipeline) if not name.startswith("_")
) | {"cache"}

construct = Pipeline.construct
