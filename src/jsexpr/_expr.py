"""Composable JavaScript expressions.

An :class:`Expr` is an immutable wrapper around a fragment of JavaScript source.
Combinators build bigger fragments out of smaller ones, which lets test code
assemble scripts for a browser without string concatenation scattered around.

Example::

    log = raw("console.log").call(literal("hi"))
    assert str(log) == 'console.log("hi")'
"""

from __future__ import annotations

import dataclasses
import datetime
import enum
import inspect
import json
import math
import re
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Iterable,
    Optional,
    Tuple,
    Type,
    TypeVar,
    Union,
    overload,
)

from typing_extensions import get_args, get_origin

if TYPE_CHECKING:
    from ._array import ArrayExpr

ExprT = TypeVar("ExprT", bound="Expr")

ExprLike = Union["Expr", str, int, float, bool, None]
"""Anything that can be implicitly converted to an :class:`Expr`."""

_ALPHA_KEY = re.compile(r"^[a-zA-Z]+$")


def _default_encoder(value: Any) -> Any:
    """Fallback for values the stdlib JSON encoder doesn't understand."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, (datetime.datetime, datetime.date)):
        return value.isoformat()
    if isinstance(value, (set, frozenset)):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


@dataclasses.dataclass(frozen=True)
class JsonSettings:
    """Options used when serializing literal strings and objects to JSON."""

    ensure_ascii: bool = False
    """Escape non-ASCII characters as `\\uXXXX` sequences."""

    sort_keys: bool = False
    separators: Tuple[str, str] = (",", ":")
    indent: Optional[int] = None
    default: Optional[Callable[[Any], Any]] = _default_encoder
    """Called for objects that can't otherwise be serialized."""

    def dumps(self, value: Any) -> str:
        return json.dumps(
            value,
            ensure_ascii=self.ensure_ascii,
            sort_keys=self.sort_keys,
            separators=self.separators,
            indent=self.indent,
            default=self.default,
        )


_json_settings = JsonSettings()


def get_json_settings() -> JsonSettings:
    """Get the process-wide JSON settings."""
    return _json_settings


def set_json_settings(settings: JsonSettings) -> None:
    """Replace the process-wide JSON settings used by :func:`literal` and
    :func:`from_object`."""
    global _json_settings
    if settings is None:
        raise ValueError("settings must not be None")
    _json_settings = settings


class Expr:
    """A fragment of JavaScript source.

    Use :func:`raw`, :func:`literal`, :func:`from_object` or :func:`array` to
    create expressions. The constructor is intended for subclasses that add
    helper methods to an existing expression."""

    def __init__(self, expression: ExprLike) -> None:
        self.__fragment = to_expr(expression).fragment

    @classmethod
    def _of(cls, fragment: Optional[str]) -> Expr:
        """Internal constructor. Wraps raw source without any conversion."""
        out = object.__new__(Expr)
        out.__fragment = "null" if fragment is None else fragment
        return out

    @property
    def fragment(self) -> str:
        """The JavaScript source represented by this expression."""
        return self.__fragment

    def __str__(self) -> str:
        return self.__fragment

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.__fragment!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Expr):
            return NotImplemented
        return self.__fragment == other.__fragment

    def __hash__(self) -> int:
        return hash(self.__fragment)

    # Member access.

    def __getitem__(self, key: ExprLike) -> Expr:
        """Object/array access.

        String keys made only of ASCII letters become property access, other
        keys are quoted:

            raw("dict")["hello"]        # dict.hello
            raw("dict")["hello world"]  # dict["hello world"]
            raw("arr")[0]               # arr[0]
        """
        if isinstance(key, str):
            if _ALPHA_KEY.match(key):
                return Expr._of(self.__fragment + "." + key)
            return Expr.__getitem__(self, literal(key))
        return Expr._of(self.__fragment + "[" + str(to_expr(key)) + "]")

    def call(self, *args: ExprLike) -> Expr:
        """Call this expression as a function.

            raw("console.log").call("hello", 1)  # console.log("hello", 1)
        """
        return Expr._of(
            self.__fragment + "(" + ", ".join(str(to_expr(a)) for a in args) + ")"
        )

    # Null checks.

    @property
    def is_defined(self) -> BooleanExpr:
        """Strict check that this expression is not undefined."""
        return self.is_strictly_not_equal_to(UNDEFINED)

    @property
    def is_undefined(self) -> BooleanExpr:
        """Strict check that this expression is undefined."""
        return self.is_strictly_equal_to(UNDEFINED)

    @property
    def is_null(self) -> BooleanExpr:
        """Strict check that this expression is null."""
        return self.is_strictly_equal_to(NULL)

    @property
    def is_not_null(self) -> BooleanExpr:
        """Strict check that this expression is not null."""
        return self.is_strictly_not_equal_to(NULL)

    @property
    def is_defined_and_not_null(self) -> BooleanExpr:
        return self.is_defined.and_(self.is_not_null)

    @property
    def is_undefined_or_null(self) -> BooleanExpr:
        return self.is_undefined.or_(self.is_null)

    # Comparisons. Every binary operation is wrapped in one pair of parentheses.

    def __binary(self, operator: str, other: ExprLike) -> BooleanExpr:
        return BooleanExpr(
            Expr._of(
                "(" + self.__fragment + " " + operator + " " + str(to_expr(other)) + ")"
            )
        )

    def is_less_than(self, other: ExprLike) -> BooleanExpr:
        """`(this < other)`"""
        return self.__binary("<", other)

    def is_greater_than(self, other: ExprLike) -> BooleanExpr:
        """`(this > other)`"""
        return self.__binary(">", other)

    def is_less_than_or_equal_to(self, other: ExprLike) -> BooleanExpr:
        """`(this <= other)`"""
        return self.__binary("<=", other)

    def is_greater_than_or_equal_to(self, other: ExprLike) -> BooleanExpr:
        """`(this >= other)`"""
        return self.__binary(">=", other)

    def is_equal_to(self, other: ExprLike) -> BooleanExpr:
        """Loose equality, `(this == other)`."""
        return self.__binary("==", other)

    def is_not_equal_to(self, other: ExprLike) -> BooleanExpr:
        """Loose inequality, `(this != other)`."""
        return self.__binary("!=", other)

    def is_strictly_equal_to(self, other: ExprLike) -> BooleanExpr:
        """Strict equality, `(this === other)`."""
        return self.__binary("===", other)

    def is_strictly_not_equal_to(self, other: ExprLike) -> BooleanExpr:
        """Strict inequality, `(this !== other)`."""
        return self.__binary("!==", other)

    def and_(self, other: ExprLike) -> BooleanExpr:
        """`(this && other)`"""
        return self.__binary("&&", other)

    def or_(self, other: ExprLike) -> BooleanExpr:
        """`(this || other)`"""
        return self.__binary("||", other)

    __and__ = and_
    __or__ = or_

    # Conversions.

    def as_(self, cls: Type[ExprT]) -> ExprT:
        """Re-interpret this expression as another expression type.

        Raises:
            TypeError: if `cls` can't be constructed from a single expression.
        """
        origin = get_origin(cls) or cls
        if not (isinstance(origin, type) and issubclass(origin, Expr)):
            raise TypeError(f"{cls!r} is not an Expr type")
        try:
            inspect.signature(origin).bind(self)
        except (TypeError, ValueError) as e:
            raise TypeError(
                f"{origin.__name__} has no single-argument constructor accepting an Expr"
            ) from e
        return cls(self)  # type: ignore

    @overload
    def as_array(self) -> ArrayExpr[Expr]: ...

    @overload
    def as_array(self, create_item: Callable[[Expr], ExprT]) -> ArrayExpr[ExprT]: ...

    def as_array(self, create_item: Optional[Callable[[Expr], Any]] = None) -> Any:
        """View this expression as an array, optionally with typed items."""
        from ._array import ArrayExpr

        return ArrayExpr(self, create_item)

    def lift(self, parameter: Any, expression: Expr) -> Any:
        """Wrap `expression` in the runtime type bound to a type parameter.

        Generic surrogates don't know their type arguments when they're
        generated. When instantiated as `BoxExpr[NumberExpr](...)`, Python
        records the alias on `__orig_class__`; we look the argument up there
        and fall back to the parameter's bound otherwise."""
        return self.__type_argument(parameter)(expression)

    def __type_argument(self, parameter: Any) -> Callable[[Expr], Any]:
        name = getattr(parameter, "__name__", parameter)
        orig_class = getattr(self, "__orig_class__", None)
        if orig_class is not None:
            parameters = getattr(get_origin(orig_class), "__parameters__", ())
            for param, arg in zip(parameters, get_args(orig_class)):
                if param.__name__ == name and not isinstance(arg, TypeVar):
                    return arg
        bound = getattr(parameter, "__bound__", None)
        return bound if isinstance(bound, type) else Expr


class NullExpr(Expr):
    """The JavaScript `null` literal."""

    def __init__(self) -> None:
        super().__init__(Expr._of("null"))


class UndefinedExpr(Expr):
    """The JavaScript `undefined` literal."""

    def __init__(self) -> None:
        super().__init__(Expr._of("undefined"))


class BooleanExpr(Expr):
    """An expression that should evaluate to a boolean."""

    @property
    def is_true(self) -> BooleanExpr:
        """Strict check that this expression is `true`."""
        return self.is_strictly_equal_to(True)

    @property
    def is_false(self) -> BooleanExpr:
        """Strict check that this expression is `false`."""
        return self.is_strictly_equal_to(False)


class NumberExpr(Expr):
    """An expression that should evaluate to a number. Supports `+` and `-`."""

    def __add__(self, other: Union[NumberExpr, int, float]) -> NumberExpr:
        return NumberExpr(raw("({0} + {1})", self, to_expr(other)))

    def __radd__(self, other: Union[int, float]) -> NumberExpr:
        return NumberExpr(raw("({0} + {1})", to_expr(other), self))

    def __sub__(self, other: Union[NumberExpr, int, float]) -> NumberExpr:
        return NumberExpr(raw("({0} - {1})", self, to_expr(other)))

    def __rsub__(self, other: Union[int, float]) -> NumberExpr:
        return NumberExpr(raw("({0} - {1})", to_expr(other), self))


class StringExpr(Expr):
    """An expression that should evaluate to a string."""


class DateExpr(Expr):
    """An expression that should evaluate to a `Date` object."""

    def to_iso_string(self) -> StringExpr:
        return StringExpr(self["toISOString"].call())


class ElementExpr(Expr):
    """An expression that should evaluate to an HTML element."""


def raw(expression: str, *args: Any) -> Expr:
    """Create an expression from JavaScript source.

    With extra arguments, `expression` is treated as a `str.format()` template
    with positional placeholders:

        raw("$('body')")                      # $('body')
        raw("({0} - {1})", a, b)              # (a - b)
    """
    if args:
        expression = expression.format(*args)
    return Expr._of(expression)


@overload
def literal(value: bool) -> BooleanExpr: ...


@overload
def literal(value: int) -> NumberExpr: ...


@overload
def literal(value: float) -> NumberExpr: ...


@overload
def literal(value: str, settings: Optional[JsonSettings] = None) -> StringExpr: ...


def literal(
    value: Union[bool, int, float, str], settings: Optional[JsonSettings] = None
) -> Expr:
    """Create a JavaScript literal from a Python scalar."""
    # bool is a subclass of int, so it has to be checked first.
    if isinstance(value, bool):
        return BooleanExpr(Expr._of("true" if value else "false"))
    if isinstance(value, int):
        return NumberExpr(Expr._of(str(int(value))))
    if isinstance(value, float):
        return NumberExpr(Expr._of(_format_float(value)))
    if isinstance(value, str):
        return StringExpr(Expr._of((settings or _json_settings).dumps(value)))
    raise TypeError(f"Can't create a literal from {type(value).__name__}")


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


def from_object(value: Any, settings: Optional[JsonSettings] = None) -> Expr:
    """Serialize a value into JSON and use that as an expression.

        from_object({"id": "Organizations/1"})  # {"id":"Organizations/1"}
    """
    return Expr._of((settings or _json_settings).dumps(value))


def array(*elements: Union[ExprLike, Iterable[ExprLike]]) -> Expr:
    """Create a JavaScript array literal.

        array(1, "hello world", NULL)      # [1, "hello world", null]
        array(literal(i) for i in range(3))  # [0, 1, 2]
    """
    items: Iterable[Any] = elements
    if len(elements) == 1 and not isinstance(elements[0], (Expr, str, int, float)):
        if elements[0] is not None:
            items = elements[0]  # type: ignore
    return Expr._of("[" + ", ".join(str(to_expr(e)) for e in items) + "]")


def to_expr(value: ExprLike) -> Expr:
    """Implicitly convert a Python value to an expression. `None` becomes `null`."""
    if isinstance(value, Expr):
        return value
    if value is None:
        return NULL
    if isinstance(value, (bool, int, float, str)):
        return literal(value)
    raise TypeError(
        f"Can't convert {type(value).__name__} to an expression; use raw() or"
        " from_object()"
    )


NULL = NullExpr()
UNDEFINED = UndefinedExpr()
