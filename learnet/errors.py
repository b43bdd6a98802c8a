"""Pipeline error types."""

from __future__ import annotations

from typing import Any


class EmptyPipelineError(ValueError):
    """A pipeline was requested with no components."""

    def __init__(self) -> None:
        super().__init__("Cannot create an empty pipeline.")


class TooManySupervisedError(ValueError):
    """More than one supervised component in the same pipeline."""

    def __init__(self) -> None:
        super().__init__(
            "More than one supervised model in a pipeline is not permitted."
        )


class MixedSpecificationError(TypeError):
    """Components given both positionally and by keyword."""

    def __init__(self) -> None:
        super().__init__(
            "Either specify all pipeline components without names, as in "
            "`Pipeline(model1, model2)`, or specify names for all components, "
            "as in `Pipeline(first=model1, second=model2)`."
        )


class InvalidOperationError(ValueError):
    """``operation`` is not one of the predict-like operations."""

    def __init__(self, operation: Any, options: tuple[str, ...]) -> None:
        self.operation = operation
        super().__init__(
            f"Invalid `operation={operation!r}`. Options are "
            + ", ".join(f"{o!r}" for o in options)
            + "."
        )


class InvalidPredictionTypeError(ValueError):
    """``prediction_type`` is not one of the supported prediction types."""

    def __init__(self, prediction_type: Any, options: tuple[str, ...]) -> None:
        self.prediction_type = prediction_type
        super().__init__(
            f"Invalid `prediction_type={prediction_type!r}`. Options are "
            + ", ".join(f"{o!r}" for o in options)
            + "."
        )


class PredictionTypeConflictError(ValueError):
    """The declared ``prediction_type`` contradicts the final supervised model."""

    def __init__(self, model: Any, prediction_type: str) -> None:
        super().__init__(
            f"The pipeline's last component model has type "
            f"`{type(model).__name__}`, which conflicts with the declaration "
            f"`prediction_type={prediction_type!r}`."
        )


class UnknownPropertyError(AttributeError):
    """Read or write of a name that is neither a component nor ``cache``."""

    def __init__(self, type_name: str, name: str) -> None:
        super().__init__(f"type {type_name} has no property {name!r}", name=name)


class CapabilityMismatchError(TypeError):
    """A replacement component does not share the original's abstract type.

    The pipeline's capability category was inferred from its components at
    construction, so a replacement must keep the same abstract supertype
    (``Deterministic`` for ``Deterministic``, callable for callable, ...).
    """

    def __init__(self, name: str, expected: Any, got: Any) -> None:
        self.name = name
        self.expected = expected
        self.got = got
        super().__init__(
            f"Component {name!r} must be replaced by a component of abstract "
            f"type {expected.name.title()}, got {got.name.title()}."
        )


class ReservedNameError(ValueError):
    """A component name shadows one of the pipeline's own attributes."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"{name!r} is reserved and cannot be used as a component name."
        )


class InversionNotSupportedError(NotImplementedError):
    """``inverse_transform`` was evaluated on a pipeline that cannot invert.

    Raised lazily, on evaluation; building and fitting such a pipeline
    always succeeds.
    """

    def __init__(self) -> None:
        super().__init__(
            "Applying `inverse_transform` to a pipeline that does not support it."
        )


class NotTrainedError(RuntimeError):
    """An operation was requested from a machine that has not been trained."""

    def __init__(self, machine: Any) -> None:
        super().__init__(f"{machine!r} has not been trained.")
