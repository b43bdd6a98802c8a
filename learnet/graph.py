"""Deferred-computation graph: sources, operation nodes and error nodes.

A graph is built once and evaluated many times. Calling a node with no
arguments evaluates it on the data bound to its sources; calling it with new
data substitutes that data at the sources instead::

    Xs = source([1.0, 2.0])
    doubled = node(lambda x: [2 * v for v in x], Xs)
    doubled()          # [2.0, 4.0]
    doubled([5.0])     # [10.0]
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .machine import Machine


class AbstractNode(ABC):
    """Common interface of everything that can sit in a graph."""

    args: tuple["AbstractNode", ...] = ()
    machine: "Machine | None" = None

    @abstractmethod
    def __call__(self, *data: Any) -> Any: ...

    @property
    @abstractmethod
    def state(self) -> tuple:
        """Changes whenever anything this node's value depends on changes."""

    def sources(self) -> list["Source"]:
        """All sources this node depends on, training edges included."""
        found: list[Source] = []
        seen: set[int] = set()

        def visit(n: AbstractNode) -> None:
            if id(n) in seen:
                return
            seen.add(id(n))
            if isinstance(n, Source):
                found.append(n)
            for arg in n.args:
                visit(arg)
            if n.machine is not None:
                for arg in n.machine.args:
                    visit(arg)

        visit(self)
        return found

    def fit(self, verbosity: int = 1, force: bool = False) -> "AbstractNode":
        """Train every machine this node depends on, dependencies first."""
        for mach in machines(self):
            mach.fit_only(verbosity, force=force)
        return self


class Source(AbstractNode):
    """Entry point of a graph, holding (or awaiting) data."""

    def __init__(self, data: Any = None) -> None:
        self.data = data
        self.version = 0

    def __call__(self, *data: Any) -> Any:
        if data:
            return data[0]
        return self.data

    def rebind(self, data: Any, fresh: bool = True) -> None:
        """Swap the bound data.

        ``fresh=False`` declares the new data equivalent to the old (same
        training set handed back for a retrain), so machines downstream are
        not forced to retrain.
        """
        self.data = data
        if fresh:
            self.version += 1

    @property
    def is_empty(self) -> bool:
        return self.data is None

    @property
    def state(self) -> tuple:
        return ("source", id(self), self.version)

    def __repr__(self) -> str:
        return f"Source({'empty' if self.is_empty else type(self.data).__name__})"


class Node(AbstractNode):
    """An operation applied to the values of other nodes.

    ``operation`` is either the name of a machine operation (``"predict"``,
    ``"transform"``, ...) when ``machine`` is given, or a plain callable.
    """

    def __init__(
        self,
        operation: str | Callable[..., Any],
        *args: AbstractNode,
        machine: "Machine | None" = None,
    ) -> None:
        if machine is None and not callable(operation):
            raise TypeError(f"operation {operation!r} is not callable")
        self.operation = operation
        self.args = tuple(args)
        self.machine = machine

    def __call__(self, *data: Any) -> Any:
        values = [arg(*data) for arg in self.args]
        if self.machine is not None:
            return getattr(self.machine, self.operation)(*values)
        return self.operation(*values)

    @property
    def state(self) -> tuple:
        machine_state = None if self.machine is None else (id(self.machine), self.machine.state)
        return (machine_state, *(arg.state for arg in self.args))

    def __repr__(self) -> str:
        if self.machine is not None:
            return f"Node({self.operation}, {self.machine!r})"
        name = getattr(self.operation, "__name__", type(self.operation).__name__)
        return f"Node({name})"


class ErrorNode(AbstractNode):
    """Placeholder for an output that cannot be computed.

    Building the graph around it succeeds; evaluating it raises ``error``.
    """

    def __init__(self, error: Exception) -> None:
        self.error = error

    def __call__(self, *data: Any) -> Any:
        raise self.error

    @property
    def state(self) -> tuple:
        return ("error", id(self))

    def __repr__(self) -> str:
        return f"ErrorNode({type(self.error).__name__})"


def source(data: Any = None) -> AbstractNode:
    """Wrap ``data`` in a ``Source``; nodes are returned unchanged."""
    if isinstance(data, AbstractNode):
        return data
    return Source(data)


def node(operation: Callable[..., Any], *args: Any) -> Node:
    """Apply a plain callable lazily; raw ``args`` are wrapped in sources."""
    return Node(operation, *(source(a) for a in args))


def machines(*nodes: AbstractNode) -> list["Machine"]:
    """Machines the given nodes depend on, each after its own dependencies."""
    ordered: list[Machine] = []
    seen_nodes: set[int] = set()
    seen_machines: set[int] = set()

    def visit_machine(mach: Machine) -> None:
        if id(mach) in seen_machines:
            return
        seen_machines.add(id(mach))
        for arg in mach.args:
            visit_node(arg)
        ordered.append(mach)

    def visit_node(n: AbstractNode) -> None:
        if id(n) in seen_nodes:
            return
        seen_nodes.add(id(n))
        for arg in n.args:
            visit_node(arg)
        if n.machine is not None:
            visit_machine(n.machine)

    for n in nodes:
        visit_node(n)
    return ordered
