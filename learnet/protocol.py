"""Model kinds, capability tags and the interface every component satisfies."""

from __future__ import annotations

import copy
import dataclasses
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, ClassVar, Protocol, runtime_checkable


class Kind(Enum):
    """How a component takes part in a pipeline network."""

    SUPERVISED = "supervised"
    UNSUPERVISED = "unsupervised"
    STATIC = "static"
    CALLABLE = "callable"


class Capability(Enum):
    """Abstract supertype of a component, and category of a composite."""

    DETERMINISTIC = "deterministic"
    PROBABILISTIC = "probabilistic"
    INTERVAL = "interval"
    UNSUPERVISED = "unsupervised"
    STATIC = "static"
    ANY = "any"

    @property
    def kind(self) -> Kind:
        if self in _SUPERVISED_CAPABILITIES:
            return Kind.SUPERVISED
        if self is Capability.UNSUPERVISED:
            return Kind.UNSUPERVISED
        if self is Capability.STATIC:
            return Kind.STATIC
        return Kind.CALLABLE


_SUPERVISED_CAPABILITIES = frozenset(
    {Capability.DETERMINISTIC, Capability.PROBABILISTIC, Capability.INTERVAL}
)


@runtime_checkable
class CallableComponent(Protocol):
    """Structural protocol for plain-function pipeline stages.

    Anything that is not a ``Model`` but can be called on the output of the
    previous stage qualifies: functions, lambdas, ``functools.partial``
    objects and instances defining ``__call__``.
    """

    def __call__(self, data: Any) -> Any: ...


# ---------------------------------------------------------------------------
# Model base classes
# ---------------------------------------------------------------------------


class Model(ABC):
    """Base class of every learning algorithm that a pipeline can wrap.

    A model is a bag of hyperparameters plus three methods in the
    ``fit(verbosity, *data) -> (fitresult, cache, report)`` style. Learned
    state never lives on the model itself; it lives in the ``fitresult``
    returned by ``fit`` and handed back to every operation.

    Hyperparameters are read by :meth:`params`, which understands dataclass
    fields and falls back to public instance attributes.
    """

    capability: ClassVar[Capability] = Capability.ANY

    @abstractmethod
    def fit(self, verbosity: int, *args: Any) -> tuple[Any, Any, Any]:
        """Train on ``args`` and return ``(fitresult, cache, report)``."""

    def update(
        self, verbosity: int, fitresult: Any, cache: Any, *args: Any
    ) -> tuple[Any, Any, Any]:
        """Retrain after a hyperparameter change; defaults to a cold ``fit``."""
        return self.fit(verbosity, *args)

    def fitted_params(self, fitresult: Any) -> Any:
        return fitresult

    def transform(self, fitresult: Any, *args: Any) -> Any:
        raise NotImplementedError(f"{self.type_name} does not implement transform")

    def inverse_transform(self, fitresult: Any, *args: Any) -> Any:
        raise NotImplementedError(
            f"{self.type_name} does not implement inverse_transform"
        )

    def predict(self, fitresult: Any, *args: Any) -> Any:
        raise NotImplementedError(f"{self.type_name} does not implement predict")

    # ------------------------------------------------------------------
    # Hyperparameters
    # ------------------------------------------------------------------

    @property
    def type_name(self) -> str:
        return type(self).__name__

    def params(self) -> dict[str, Any]:
        if dataclasses.is_dataclass(self):
            return {f.name: getattr(self, f.name) for f in dataclasses.fields(self)}
        return {k: v for k, v in vars(self).items() if not k.startswith("_")}

    def clone(self) -> "Model":
        """Return an independent copy with identical hyperparameters."""
        return copy.deepcopy(self)

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in self.params().items())
        return f"{self.type_name}({fields})"


class Supervised(Model):
    """Models trained on inputs *and* a target."""

    @abstractmethod
    def predict(self, fitresult: Any, *args: Any) -> Any: ...


class Deterministic(Supervised):
    """Supervised models whose predictions are point values."""

    capability = Capability.DETERMINISTIC


class Probabilistic(Supervised):
    """Supervised models whose predictions are distributions.

    Distributions need only expose ``mean``, ``median`` and ``mode``, either as
    methods or as properties (``statistics.NormalDist`` qualifies).
    """

    capability = Capability.PROBABILISTIC

    def predict_mean(self, fitresult: Any, *args: Any) -> list:
        return point_estimates(self.predict(fitresult, *args), "mean")

    def predict_median(self, fitresult: Any, *args: Any) -> list:
        return point_estimates(self.predict(fitresult, *args), "median")

    def predict_mode(self, fitresult: Any, *args: Any) -> list:
        return point_estimates(self.predict(fitresult, *args), "mode")


class Interval(Supervised):
    """Supervised models whose predictions are ``(lower, upper)`` intervals."""

    capability = Capability.INTERVAL


class Unsupervised(Model):
    """Models trained on inputs alone."""

    capability = Capability.UNSUPERVISED

    @abstractmethod
    def transform(self, fitresult: Any, *args: Any) -> Any: ...


class Static(Unsupervised):
    """Unsupervised models with nothing to learn.

    Static models are never trained on data; ``fit`` receives no data
    arguments and every operation receives ``fitresult=None``.
    """

    capability = Capability.STATIC

    def fit(self, verbosity: int, *args: Any) -> tuple[Any, Any, Any]:
        return None, None, None


def point_estimates(distributions: Any, statistic: str) -> list:
    """Reduce each distribution in ``distributions`` to one ``statistic``."""
    estimates = []
    for d in distributions:
        value = getattr(d, statistic)
        estimates.append(value() if callable(value) else value)
    return estimates
