"""Component names: defaults for positional components and disambiguation."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from typing import Any

from .traits import is_model

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def individuate(names: Sequence[str], reserved: Iterable[str] = ()) -> list[str]:
    """Make ``names`` unique, keeping order.

    The first occurrence of a name is kept as is; later occurrences get the
    smallest integer suffix, starting at 2, that collides with nothing emitted
    so far. Names in ``reserved`` count as already taken::

        individuate(["x", "y", "x", "x"]) == ["x", "y", "x2", "x3"]
    """
    taken = set(reserved)
    unique: list[str] = []
    for name in names:
        candidate = name
        n = 2
        while candidate in taken:
            candidate = f"{name}{n}"
            n += 1
        taken.add(candidate)
        unique.append(candidate)
    return unique


def snake_case(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def default_name(component: Any) -> str:
    """Candidate name of a positional component; ``f`` for plain callables."""
    if is_model(component):
        return snake_case(component.type_name)
    return "f"


def generate_names(
    components: Sequence[Any], reserved: Iterable[str] = ()
) -> list[str]:
    return individuate([default_name(c) for c in components], reserved=reserved)
