"""Machine: a model bound to training arguments, remembering its fitted state."""

from __future__ import annotations

import logging
import warnings
from typing import Any

from .config import get_config
from .errors import NotTrainedError
from .graph import AbstractNode, Node, machines, source
from .protocol import Capability, Kind
from .registry import implements
from .traits import classify, snapshot, type_name

logger = logging.getLogger(__name__)


class Machine:
    """Trained unit of a learning network.

    Training arguments are graph nodes; raw values passed to the constructor
    are wrapped in sources. ``fit`` trains every machine upstream of this one
    and then this one; ``fit_only`` trains this one alone and is a no-op when
    neither the model's hyperparameters nor anything upstream has changed
    since the last training.

    With ``cache=True`` the machine keeps the training data it last saw and
    reuses it when only hyperparameters changed. With ``cache=False`` nothing
    derived from the data is kept between calls.

    Operations given graph nodes return a new lazy ``Node``; operations given
    plain values compute the result immediately::

        mach = Machine(Standardizer(), X).fit()
        mach.transform(Xnew)            # values
        mach.transform(source(Xnew))    # a Node
    """

    def __init__(self, model: Any, *args: Any, cache: bool | None = None) -> None:
        self.model = model
        self.args: tuple[AbstractNode, ...] = tuple(source(a) for a in args)
        self.cache = get_config().cache if cache is None else cache
        self.fitresult: Any = None
        self.fit_cache: Any = None
        self.report: Any = None
        self.state = 0
        self._old_params: Any = None
        self._upstream_state: tuple | None = None
        self._data: tuple | None = None
        self._check_args()

    def _check_args(self) -> None:
        kind = classify(self.model)
        n = len(self.args)
        if kind is Kind.CALLABLE:
            raise TypeError(f"{type_name(self.model)} is not a model")
        if kind is Kind.SUPERVISED and n < 2:
            warnings.warn(
                f"Supervised model {type_name(self.model)} bound to {n} "
                "argument(s); expected at least 2 (inputs and target).",
                stacklevel=3,
            )
        elif implements(self.model, Capability.STATIC) and n > 0:
            warnings.warn(
                f"Static model {type_name(self.model)} is bound to training "
                "arguments that it will ignore.",
                stacklevel=3,
            )
        elif kind is Kind.UNSUPERVISED and n == 0:
            warnings.warn(
                f"Unsupervised model {type_name(self.model)} bound to no "
                "training arguments.",
                stacklevel=3,
            )

    # ------------------------------------------------------------------
    # Training
    # ------------------------------------------------------------------

    @property
    def is_trained(self) -> bool:
        return self.state > 0

    def _training_data(self, upstream_unchanged: bool) -> tuple:
        if upstream_unchanged and self._data is not None:
            return self._data
        if implements(self.model, Capability.STATIC):
            return ()
        return tuple(arg() for arg in self.args)

    def fit_only(self, verbosity: int = 1, force: bool = False) -> "Machine":
        """Train this machine alone, assuming upstream machines are trained."""
        upstream_state = tuple(arg.state for arg in self.args)
        params = snapshot(self.model)
        upstream_unchanged = upstream_state == self._upstream_state

        if (
            self.is_trained
            and not force
            and upstream_unchanged
            and params == self._old_params
        ):
            if verbosity > 1:
                logger.debug("Not retraining %r. Use `force=True` to force.", self)
            return self

        data = self._training_data(upstream_unchanged)
        if self.is_trained and not force and upstream_unchanged:
            if verbosity > 0:
                logger.info("Updating %r.", self)
            self.fitresult, self.fit_cache, self.report = self.model.update(
                verbosity - 1, self.fitresult, self.fit_cache, *data
            )
        else:
            if verbosity > 0:
                logger.info("Training %r.", self)
            self.fitresult, self.fit_cache, self.report = self.model.fit(
                verbosity - 1, *data
            )

        self._data = data if self.cache else None
        self._upstream_state = upstream_state
        self._old_params = params
        self.state += 1
        return self

    def fit(self, verbosity: int | None = None, force: bool = False) -> "Machine":
        """Train every machine upstream of this one, then this one."""
        if verbosity is None:
            verbosity = get_config().verbosity
        for arg in self.args:
            for mach in machines(arg):
                mach.fit_only(verbosity, force=force)
        return self.fit_only(verbosity, force=force)

    def fitted_params(self) -> Any:
        if not self.is_trained:
            raise NotTrainedError(self)
        return self.model.fitted_params(self.fitresult)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def _apply(self, operation: str, *args: Any) -> Any:
        if args and all(isinstance(a, AbstractNode) for a in args):
            return Node(operation, *args, machine=self)
        if not self.is_trained:
            raise NotTrainedError(self)
        return getattr(self.model, operation)(self.fitresult, *args)

    def predict(self, *args: Any) -> Any:
        return self._apply("predict", *args)

    def predict_mean(self, *args: Any) -> Any:
        return self._apply("predict_mean", *args)

    def predict_median(self, *args: Any) -> Any:
        return self._apply("predict_median", *args)

    def predict_mode(self, *args: Any) -> Any:
        return self._apply("predict_mode", *args)

    def transform(self, *args: Any) -> Any:
        return self._apply("transform", *args)

    def inverse_transform(self, *args: Any) -> Any:
        return self._apply("inverse_transform", *args)

    def __repr__(self) -> str:
        return f"Machine({type_name(self.model)})"
