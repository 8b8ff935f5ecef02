"""Runtime support for modules written by `jsexpr.codegen`."""

from __future__ import annotations

import dataclasses
import enum
import sys
from typing import Any, Callable, List, Optional, TypeVar

T = TypeVar("T")


@dataclasses.dataclass(frozen=True)
class GeneratedCode:
    """Identifies the tool that generated a class."""

    tool: str
    version: str


class Namespace:
    """Holds the classes generated for one TypeScript module path, so that
    references like `Shapes.CircleExpr` resolve inside a generated module."""

    def __init__(self, name: str) -> None:
        self.__name__ = name

    def __repr__(self) -> str:
        return f"<namespace {self.__name__}>"


def generated_code(
    tool: str, version: str, *, namespace: str, module: Optional[str] = None
) -> Callable[[T], T]:
    """Class decorator applied to every generated type.

    Args:
        tool: Name of the generating tool.
        version: Version of the generating tool.
        namespace: The base namespace the module was generated into.
        module: Dotted TypeScript module path of the type, if any. The class
            is bound under nested :class:`Namespace` objects with this path in
            the defining module. A module-level name that is already taken,
            for example by an unqualified type with the same name, keeps its
            value; the class is then only reachable through its namespace.
    """

    def decorator(cls: T) -> T:
        setattr(cls, "__generated_code__", GeneratedCode(tool, version))
        setattr(
            cls,
            "__namespace__",
            namespace if module is None else f"{namespace}.{module}",
        )
        if module is None:
            return cls
        return _bind(cls, module)

    return decorator


def _bind(cls: Any, module: str) -> Any:
    """Bind `cls` under its namespace. Returns the value the decorated name
    should be assigned at module level."""
    scope = vars(sys.modules[cls.__module__])
    parts = module.split(".")
    container = scope.get(parts[0])
    if container is None:
        container = scope[parts[0]] = Namespace(parts[0])
    for i, part in enumerate(parts[1:], start=2):
        child = getattr(container, part, None)
        if child is None:
            child = Namespace(".".join(parts[:i]))
            setattr(container, part, child)
        container = child
    setattr(container, cls.__name__, cls)
    return scope.get(cls.__name__, cls)


class ScriptEnum(enum.IntEnum):
    """Base class for generated enums. `auto()` values follow TypeScript's
    numbering: the first member is 0, the rest count up from the previous
    value."""

    @staticmethod
    def _generate_next_value_(
        name: str, start: int, count: int, last_values: List[Any]
    ) -> int:
        del name, start, count
        return last_values[-1] + 1 if last_values else 0
