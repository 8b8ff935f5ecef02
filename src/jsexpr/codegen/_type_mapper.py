"""Maps resolved TypeScript types to surrogate type names and wrapping code.

For every type there are two questions: which Python type annotates a value
of that type (`type_name`), and which Python expression turns a plain `Expr`
into a value of that type (`wrap`).

    type_name(number)        -> "NumberExpr"
    wrap(number, "x")        -> "NumberExpr(x)"
    type_name(Array<Circle>) -> "ArrayExpr[CircleExpr]"
    wrap(Array<Circle>, "x") -> "ArrayExpr[CircleExpr](x, lambda e0: CircleExpr(e0))"
"""

from __future__ import annotations

from typing import Optional, Sequence

from ._checker import TypeFlags, TypeInfo
from ._sanitize import sanitize_identifier

EXPR = "Expr"
ARRAY_EXPR = "ArrayExpr"

# Names with dedicated handling, checked before the general reference rule.
_NAMED_TYPES = {
    "Date": "DateExpr",
    "Function": EXPR,
    "KeyboardEvent": EXPR,
}


def surrogate_class_name(name: str) -> str:
    """The name of the surrogate generated for a TypeScript class or
    interface."""
    return sanitize_identifier(name) + EXPR


def surrogate_reference(full_name: str) -> str:
    """Dotted Python reference to the surrogate of a (possibly namespaced)
    TypeScript type, eg `Shapes.Circle` -> `Shapes.CircleExpr`."""
    *module_path, leaf = full_name.split(".")
    parts = [sanitize_identifier(p, for_parameter=True) for p in module_path]
    return ".".join(parts + [surrogate_class_name(leaf)])


def _is_class_like(type_info: TypeInfo) -> bool:
    return bool(
        type_info.flags & (TypeFlags.REFERENCE | TypeFlags.INTERFACE | TypeFlags.CLASS)
    )


def _primitive_name(type_info: TypeInfo) -> Optional[str]:
    flags = type_info.flags
    if flags & TypeFlags.NUMBER_LIKE:
        return "NumberExpr"
    if flags & TypeFlags.STRING:
        return "StringExpr"
    if flags & TypeFlags.BOOLEAN:
        return "BooleanExpr"
    return None


class TypeMapper:
    """Maps types seen from inside one surrogate.

    Args:
        type_parameters: Names of the enclosing declaration's type parameters.
            References to these map to the parameter itself.
    """

    def __init__(self, type_parameters: Sequence[str] = ()) -> None:
        self.type_parameters = tuple(type_parameters)

    def _reference_name(self, type_info: TypeInfo) -> str:
        """Surrogate name of a class or interface reference, with type
        arguments."""
        assert type_info.symbol is not None
        base = surrogate_reference(type_info.symbol.full_name)
        if not type_info.type_arguments:
            return base
        inner = [self.type_name(t) for t in type_info.type_arguments]
        if base == ARRAY_EXPR and inner[0] == EXPR:
            return base
        return f"{base}[{', '.join(inner)}]"

    def type_name(self, type_info: Optional[TypeInfo]) -> str:
        """The Python type used to annotate values of `type_info`."""
        if type_info is None:
            return EXPR

        symbol = type_info.symbol
        if symbol is not None:
            if symbol.name in self.type_parameters:
                return symbol.name
            if symbol.name in _NAMED_TYPES:
                return _NAMED_TYPES[symbol.name]
            if _is_class_like(type_info):
                return self._reference_name(type_info)

        return _primitive_name(type_info) or EXPR

    def wrap(self, type_info: Optional[TypeInfo], raw: str, depth: int = 0) -> str:
        """Python source that converts the `Expr` held by `raw` into a value
        of `type_info`'s surrogate.

        Args:
            type_info: The type to convert to.
            raw: Python source of an expression evaluating to an `Expr`.
            depth: Nesting level, used to name the item parameter of array
                item lifts (`e0`, `e1`, ...).
        """
        if type_info is None:
            return raw

        symbol = type_info.symbol
        if symbol is not None:
            if symbol.name in self.type_parameters:
                return f"self.lift({symbol.name}, {raw})"
            if symbol.name in _NAMED_TYPES:
                name = _NAMED_TYPES[symbol.name]
                return raw if name == EXPR else f"{name}({raw})"
            if _is_class_like(type_info):
                typed_name = self._reference_name(type_info)
                if typed_name.startswith(ARRAY_EXPR + "[") and len(
                    type_info.type_arguments
                ) == 1:
                    item = f"e{depth}"
                    lift = self.wrap(type_info.type_arguments[0], item, depth + 1)
                    return f"{typed_name}({raw}, lambda {item}: {lift})"
                return f"{typed_name}({raw})"

        name = _primitive_name(type_info)
        return raw if name is None else f"{name}({raw})"
