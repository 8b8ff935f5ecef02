"""Tests for the runtime pieces that generated modules depend on."""

import sys
from enum import auto
from typing import Generic, TypeVar

from jsexpr import (
    Expr,
    GeneratedCode,
    Namespace,
    NumberExpr,
    ScriptEnum,
    StringExpr,
    generated_code,
    raw,
)

T = TypeVar("T", bound=Expr)
U = TypeVar("U", bound=NumberExpr)


class BoxExpr(Expr, Generic[T]):
    @property
    def Value(self) -> T:
        return self.lift(T, self["value"])


class CounterExpr(Expr, Generic[U]):
    @property
    def Count(self) -> U:
        return self.lift(U, self["count"])


def test_lift_uses_type_argument() -> None:
    box = BoxExpr[StringExpr](raw("box"))
    assert isinstance(box.Value, StringExpr)
    assert str(box.Value) == "box.value"


def test_lift_falls_back_to_bound() -> None:
    assert type(BoxExpr(raw("box")).Value) is Expr
    assert isinstance(CounterExpr(raw("c")).Count, NumberExpr)


def test_generated_code_records_tool() -> None:
    @generated_code("jsexpr", "1.0", namespace="App")
    class ThingExpr(Expr):
        pass

    assert ThingExpr.__generated_code__ == GeneratedCode("jsexpr", "1.0")  # type: ignore
    assert ThingExpr.__namespace__ == "App"  # type: ignore


@generated_code("jsexpr", "1.0", namespace="App", module="Shapes.Round")
class CircleExpr(Expr):
    pass


def test_generated_code_binds_namespace() -> None:
    module = sys.modules[__name__]
    shapes = getattr(module, "Shapes")
    assert isinstance(shapes, Namespace)
    assert shapes.Round.CircleExpr is CircleExpr
    assert shapes.Round.__name__ == "Shapes.Round"
    assert CircleExpr.__namespace__ == "App.Shapes.Round"  # type: ignore


class Color(ScriptEnum):
    Red = auto()
    Green = 5
    Blue = auto()
    Black = -10
    White = auto()


def test_script_enum_numbering() -> None:
    assert Color.Red == 0
    assert Color.Green == 5
    assert Color.Blue == 6
    assert Color.Black == -10
    assert Color.White == -9
