import pytest

from jsexpr.codegen import TypeMapper
from jsexpr.codegen._type_mapper import surrogate_class_name, surrogate_reference

from .utils import declared_type, make_checker

SOURCE = """
namespace Shapes {
    export class Circle {}
    export namespace Fancy { export interface Star {} }
}
enum Color { Red }
interface Box<T> {}
class match {}
interface Probe<T> {
    number: number;
    string: string;
    literal: "a";
    boolean: boolean;
    color: Color;
    any: any;
    void: void;
    tuple: [number, string];
    date: Date;
    fn: Function;
    key: KeyboardEvent;
    element: Element;
    circle: Shapes.Circle;
    star: Shapes.Fancy.Star;
    circles: Shapes.Circle[];
    anys: any[];
    grid: number[][];
    box: Box<Box<T>>;
    param: T;
    params: T[];
    keyword: match;
}
"""


@pytest.fixture(scope="module")
def probe():
    checker, _ = make_checker(main=SOURCE)
    return {
        p.name: p.type
        for p in checker.get_augmented_properties(declared_type(checker, "Probe"))
    }


@pytest.mark.parametrize(
    "name, type_name, wrap",
    [
        ("number", "NumberExpr", "NumberExpr(x)"),
        ("string", "StringExpr", "StringExpr(x)"),
        ("literal", "Expr", "x"),
        ("boolean", "BooleanExpr", "BooleanExpr(x)"),
        ("color", "NumberExpr", "NumberExpr(x)"),
        ("any", "Expr", "x"),
        ("void", "Expr", "x"),
        ("tuple", "Expr", "x"),
        ("date", "DateExpr", "DateExpr(x)"),
        ("fn", "Expr", "x"),
        ("key", "Expr", "x"),
        ("element", "ElementExpr", "ElementExpr(x)"),
        ("circle", "Shapes.CircleExpr", "Shapes.CircleExpr(x)"),
        ("star", "Shapes.Fancy.StarExpr", "Shapes.Fancy.StarExpr(x)"),
        (
            "circles",
            "ArrayExpr[Shapes.CircleExpr]",
            "ArrayExpr[Shapes.CircleExpr](x, lambda e0: Shapes.CircleExpr(e0))",
        ),
        ("anys", "ArrayExpr", "ArrayExpr(x)"),
        (
            "grid",
            "ArrayExpr[ArrayExpr[NumberExpr]]",
            "ArrayExpr[ArrayExpr[NumberExpr]](x, lambda e0:"
            " ArrayExpr[NumberExpr](e0, lambda e1: NumberExpr(e1)))",
        ),
        ("box", "BoxExpr[BoxExpr[T]]", "BoxExpr[BoxExpr[T]](x)"),
        ("param", "T", "self.lift(T, x)"),
        ("params", "ArrayExpr[T]", "ArrayExpr[T](x, lambda e0: self.lift(T, e0))"),
        ("keyword", "MatchExpr", "MatchExpr(x)"),
    ],
)
def test_mapping(probe, name: str, type_name: str, wrap: str) -> None:
    mapper = TypeMapper(("T",))
    assert mapper.type_name(probe[name]) == type_name
    assert mapper.wrap(probe[name], "x") == wrap


def test_type_parameters_outside_their_declaration() -> None:
    checker, _ = make_checker(main=SOURCE)
    param = {
        p.name: p.type
        for p in checker.get_augmented_properties(declared_type(checker, "Probe"))
    }["param"]
    mapper = TypeMapper()
    assert mapper.type_name(param) == "Expr"
    assert mapper.wrap(param, "x") == "x"


def test_missing_type() -> None:
    assert TypeMapper().type_name(None) == "Expr"
    assert TypeMapper().wrap(None, "x") == "x"


def test_surrogate_names() -> None:
    assert surrogate_class_name("viewModel") == "ViewModelExpr"
    assert surrogate_class_name("$item") == "ItemExpr"
    assert surrogate_reference("ui.widgets.Button") == "ui.widgets.ButtonExpr"
    assert surrogate_reference("from.Button") == "from_.ButtonExpr"
