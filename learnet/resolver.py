"""Capability category of a pipeline, inferred from its components.

The notice emitted when a supervised component that is not last forces a
``Deterministic`` pipeline is logged at INFO on ``learnet.resolver``. The
package installs no handlers, so enable INFO for that logger to see it.
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Sequence
from typing import Any

from .errors import (
    InvalidOperationError,
    InvalidPredictionTypeError,
    PredictionTypeConflictError,
    TooManySupervisedError,
)
from .protocol import Capability, Kind
from .traits import abstract_type, classify, native_capability

logger = logging.getLogger(__name__)

PREDICT_OPERATIONS: tuple[str, ...] = (
    "predict",
    "predict_mean",
    "predict_median",
    "predict_mode",
)

PREDICTION_TYPE_OPTIONS: tuple[str, ...] = (
    "deterministic",
    "probabilistic",
    "interval",
)

INFO_TREATING_AS_DETERMINISTIC = (
    "Treating pipeline as a `Deterministic` predictor. To override, use the "
    "`Pipeline` constructor with `prediction_type=...`. Options are "
    + ", ".join(repr(o) for o in PREDICTION_TYPE_OPTIONS)
    + "."
)


def check_operation(operation: Any) -> str:
    if operation not in PREDICT_OPERATIONS:
        raise InvalidOperationError(operation, PREDICT_OPERATIONS)
    return operation


def as_capability(prediction_type: Any) -> Capability | None:
    """Normalise a ``prediction_type`` declaration; ``None`` stays ``None``."""
    if prediction_type is None:
        return None
    if isinstance(prediction_type, Capability):
        value = prediction_type.value
    else:
        value = prediction_type
    if value not in PREDICTION_TYPE_OPTIONS:
        raise InvalidPredictionTypeError(prediction_type, PREDICTION_TYPE_OPTIONS)
    return Capability(value)


def resolve_capability(
    components: Sequence[Any],
    prediction_type: Any = None,
    operation: str = "predict",
) -> Capability:
    """Infer the capability category of a pipeline built from ``components``.

    With a supervised component the category is a prediction type: the
    declared one if any, else the supervised model's own when it comes last
    and is queried with ``predict``, else ``DETERMINISTIC``. Without one the
    category is ``STATIC`` when every component is static or a plain callable,
    else ``UNSUPERVISED``.

    Raises:
        InvalidOperationError: If ``operation`` is not predict-like.
        InvalidPredictionTypeError: If ``prediction_type`` is unknown.
        PredictionTypeConflictError: If the declared type contradicts a
            supervised model in last position.
    """
    check_operation(operation)
    declared = as_capability(prediction_type)

    kinds = [classify(c) for c in components]
    supervised = [c for c, k in zip(components, kinds) if k is Kind.SUPERVISED]
    is_static = all(k in (Kind.STATIC, Kind.CALLABLE) for k in kinds)

    if not supervised:
        if declared is not None:
            warnings.warn(
                "Pipeline appears to have no supervised component models. "
                f"Ignoring declaration `prediction_type={prediction_type!r}`.",
                stacklevel=3,
            )
        return Capability.STATIC if is_static else Capability.UNSUPERVISED

    if len(supervised) > 1:
        raise TooManySupervisedError()
    (model,) = supervised
    supervised_is_last = components[-1] is model

    if declared is not None:
        if supervised_is_last and native_capability(model) is not declared:
            raise PredictionTypeConflictError(model, declared.value)
        return declared

    if supervised_is_last:
        if operation != "predict":
            # point estimates of a distribution are deterministic
            return Capability.DETERMINISTIC
        return native_capability(model)

    if abstract_type(model) is not Capability.DETERMINISTIC and operation == "predict":
        logger.info(INFO_TREATING_AS_DETERMINISTIC)
    return Capability.DETERMINISTIC
