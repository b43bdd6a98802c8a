"""Learning networks for pipelines.

The "front" of a pipeline network, as it grows, consists of a ``predict`` and
a ``transform`` node. Both can change, but only the *active* one receives the
main effect of the next unsupervised, static or callable component. Initially
``transform`` is active; ``predict`` becomes active when the supervised
component is reached, and that change is permanent.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from .components import NamedComponent
from .errors import InversionNotSupportedError, TooManySupervisedError
from .graph import AbstractNode, ErrorNode, Node, Source, machines
from .machine import Machine
from .protocol import Capability, Kind
from .report import NetworkReport
from .traits import classify

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Front:
    """Growing edge of a pipeline network."""

    predict: AbstractNode
    transform: AbstractNode
    transform_active: bool = True

    @property
    def active(self) -> AbstractNode:
        return self.transform if self.transform_active else self.predict

    def replace(self, **changes: Any) -> "Front":
        return dataclasses.replace(self, **changes)

    def with_active(self, new_node: AbstractNode) -> "Front":
        """Replace the active rail only."""
        if self.transform_active:
            return self.replace(transform=new_node)
        return self.replace(predict=new_node)


def extend(
    front: Front,
    component: Any,
    cache: bool,
    operation: str,
    *sources: AbstractNode,
) -> Front:
    """Grow ``front`` by one component.

    ``sources`` are the target (and any further) sources a supervised
    component is trained on in addition to the active node.
    """
    kind = classify(component)
    a = front.active

    if kind is Kind.SUPERVISED:
        if not front.transform_active:
            raise TooManySupervisedError()
        mach = Machine(component, a, *sources, cache=cache)
        return Front(getattr(mach, operation)(a), mach.transform(a), False)

    if kind is Kind.STATIC:
        mach = Machine(component, cache=cache)
        return front.with_active(mach.transform(a))

    if kind is Kind.UNSUPERVISED:
        mach = Machine(component, a, cache=cache)
        if front.transform_active:
            return Front(mach.predict(a), mach.transform(a), True)
        return front.with_active(mach.transform(a))

    # anything else is a plain callable
    return front.with_active(Node(component, a))


@dataclass
class LearningNetwork:
    """Fitted state of a pipeline: its sources, outputs and machines.

    ``outputs`` maps ``"predict"``, ``"transform"`` and
    ``"inverse_transform"`` to graph nodes; ``machines`` maps each model
    component's name to the machine training it.
    """

    capability: Capability
    sources: tuple[AbstractNode, ...]
    outputs: Mapping[str, AbstractNode]
    machines: Mapping[str, Machine]

    def fit(self, verbosity: int = 1, force: bool = False) -> NetworkReport:
        names = {id(mach): name for name, mach in self.machines.items()}
        trained: list[str] = []
        for mach in machines(*self.outputs.values()):
            before = mach.state
            mach.fit_only(verbosity, force=force)
            if mach.state != before:
                trained.append(names.get(id(mach), repr(mach)))
        return NetworkReport(
            capability=self.capability.value,
            components={name: mach.report for name, mach in self.machines.items()},
            trained=trained,
        )

    def evaluate(self, output: str, *data: Any) -> Any:
        return self.outputs[output](*data)

    def rebind(self, *data: Any, fresh: bool = True) -> None:
        for src, value in zip(self.sources, data):
            if isinstance(src, Source):
                src.rebind(value, fresh=fresh)

    def anonymize(self) -> None:
        """Drop training data held by the sources."""
        for src in self.sources:
            if isinstance(src, Source):
                src.rebind(None, fresh=False)

    @property
    def is_anonymized(self) -> bool:
        return all(src.is_empty for src in self.sources if isinstance(src, Source))

    def fitted_params(self) -> dict[str, Any]:
        return {name: mach.fitted_params() for name, mach in self.machines.items()}


def pipeline_network(
    capability: Capability,
    cache: bool,
    operation: str,
    components: Sequence[NamedComponent],
    source0: AbstractNode,
    *sources: AbstractNode,
) -> LearningNetwork:
    """Compile ``components`` into a learning network rooted at the sources."""
    front = Front(source0, source0, True)
    network_machines: dict[str, Machine] = {}

    for named in components:
        extended = extend(front, named.component, cache, operation, *sources)
        if named.kind is not Kind.CALLABLE:
            # the new machine sits on whichever rail was active going in
            rail = extended.transform if front.transform_active else extended.predict
            network_machines[named.name] = rail.machine
        front = extended

    if all(named.kind is Kind.UNSUPERVISED for named in components):
        inverse: AbstractNode = source0
        current = front.transform
        for _ in components:
            mach = current.machine
            inverse = mach.inverse_transform(inverse)
            current = mach.args[0]
    else:
        inverse = ErrorNode(InversionNotSupportedError())

    logger.debug(
        "Built %s network with %d machine(s)", capability.value, len(network_machines)
    )
    return LearningNetwork(
        capability=capability,
        sources=(source0, *sources),
        outputs=MappingProxyType(
            {
                "predict": front.predict,
                "transform": front.transform,
                "inverse_transform": inverse,
            }
        ),
        machines=MappingProxyType(network_machines),
    )
