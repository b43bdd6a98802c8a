"""Validated, named pipeline components."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from .errors import EmptyPipelineError, ReservedNameError, TooManySupervisedError
from .naming import individuate
from .protocol import CallableComponent, Capability, Kind
from .traits import abstract_type, classify, is_model, type_name


@dataclass(frozen=True)
class NamedComponent:
    """One stage of a pipeline.

    ``abstract_type`` records the capability supertype of the component at
    construction, never its concrete class. Any later replacement must share
    it, which is what keeps the pipeline's own category valid.
    """

    name: str
    component: Any
    abstract_type: Capability

    @property
    def kind(self) -> Kind:
        return self.abstract_type.kind

    def replace(self, component: Any) -> "NamedComponent":
        return NamedComponent(self.name, component, self.abstract_type)


def named_components(
    names: Sequence[str],
    components: Sequence[Any],
    reserved: Iterable[str] = (),
) -> tuple[NamedComponent, ...]:
    """Check ``components`` and pair them with unique names.

    Raises:
        EmptyPipelineError: If there are no components.
        TooManySupervisedError: If more than one component is supervised.
        ReservedNameError: If a name shadows a reserved attribute or starts
            with an underscore.
        TypeError: If a component is neither a model nor callable.
    """
    if not components:
        raise EmptyPipelineError()

    reserved = frozenset(reserved)
    for name in names:
        # private names would be shadowed by the pipeline's own slots
        if name in reserved or name.startswith("_"):
            raise ReservedNameError(name)
    names = individuate(names)

    for component in components:
        if not (is_model(component) or isinstance(component, CallableComponent)):
            raise TypeError(
                f"Pipeline components must be models, model types or callables; "
                f"got {type_name(component)}."
            )

    supervised = [c for c in components if classify(c) is Kind.SUPERVISED]
    if len(supervised) > 1:
        raise TooManySupervisedError()

    return tuple(
        NamedComponent(name, component, abstract_type(component))
        for name, component in zip(names, components)
    )
