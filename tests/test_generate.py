"""End-to-end tests: TypeScript sources in, importable surrogates out."""

from pathlib import Path

import pytest

from jsexpr import (
    BooleanExpr,
    DateExpr,
    ElementExpr,
    GeneratedCode,
    NumberExpr,
    StringExpr,
    raw,
)
from jsexpr.codegen import (
    MalformedEnumInitializerError,
    TypeScriptSyntaxError,
    filter_source_paths,
    generate_surrogates,
)

from .utils import generate_module, import_generated, write_sources

SHAPES = """
namespace Shapes {
    export interface Point { x: number; y: number; }

    export class Circle {
        center: Point;
        radius = 1;
        readonly kind = "circle";
        tags: string[] = [];
        private secret: string;
        #hidden = 0;
        constructor(public name: string, private id: number) {}
        area(): number { return Math.PI * this.radius * this.radius; }
        scale(factor: number): Circle { return this; }
        protected grow(): void {}
        onClick: (e: KeyboardEvent) => void;
        static unit(): Circle { return new Circle("unit", 0); }
    }

    class Helper {}
}
"""

VIEW_MODEL = """
enum Color { Red = 1, Green, Blue = -3 }

interface Box<T> {
    value: T;
    items: T[];
    map<U>(f: (item: T) => U): Box<U>;
}

interface Keywords {
    class: string;
    from(x: number, lambda: string): void;
}

interface ViewModel {
    circles: Shapes.Circle[];
    colorBox: Box<Shapes.Circle>;
    created: Date;
    color: Color;
    maybe?: string | null;
    flag: true | false;
    el: Element;
    keywords: Keywords;
}
"""


def test_generated_text(tmp_path: Path) -> None:
    text, _ = generate_module(tmp_path, shapes=SHAPES, view_model=VIEW_MODEL)

    assert text.startswith(
        "# AUTOMATICALLY GENERATED expression surrogates, from TypeScript"
        " declarations.\n# This file should not be manually modified.\n"
    )
    assert (
        "# namespace App.Shapes\n"
        '@generated_code("jsexpr", "1.2.3", namespace="App", module="Shapes")\n'
        "class CircleExpr(Expr):\n"
    ) in text
    assert (
        "    @property\n"
        "    def Center(self) -> Shapes.PointExpr:\n"
        '        return Shapes.PointExpr(self["center"])\n'
    ) in text
    assert (
        "    @property\n"
        "    def Tags(self) -> ArrayExpr[StringExpr]:\n"
        '        return ArrayExpr[StringExpr](self["tags"], lambda e0: StringExpr(e0))\n'
    ) in text
    assert (
        "    def OnClick(self, e: Expr) -> Expr:\n"
        '        return self["onClick"].call(e)\n'
    ) in text
    assert (
        "    def From(self, x: NumberExpr, lambda_: StringExpr) -> Expr:\n"
        '        return self["from"].call(x, lambda_)\n'
    ) in text
    assert (
        "class Color(ScriptEnum):\n"
        "    Red = 1\n"
        "    Green = auto()\n"
        "    Blue = -3\n"
    ) in text

    # Private, protected and static members are left out.
    for name in ("Secret", "Hidden", "Id", "Grow", "Unit"):
        assert f"def {name}(" not in text


def test_generated_module(tmp_path: Path) -> None:
    _, module = generate_module(tmp_path, shapes=SHAPES, view_model=VIEW_MODEL)

    vm = module.ViewModelExpr(raw("vm"))
    circle = vm.Circles[0]
    assert isinstance(circle, module.Shapes.CircleExpr)
    assert str(circle.Center.X) == "vm.circles[0].center.x"
    assert isinstance(circle.Center.X, NumberExpr)
    assert str(circle.Scale(2).Radius) == "vm.circles[0].scale(2).radius"
    assert str(circle.Area()) == "vm.circles[0].area()"
    assert isinstance(circle.Area(), NumberExpr)
    assert isinstance(circle.Name, StringExpr)
    assert str(circle.Kind) == "vm.circles[0].kind"
    assert str(circle.Tags.length) == "vm.circles[0].tags.length"

    value = vm.ColorBox.Value
    assert isinstance(value, module.Shapes.CircleExpr)
    assert str(value.Name) == "vm.colorBox.value.name"
    assert isinstance(vm.ColorBox.Items[1], module.Shapes.CircleExpr)
    assert str(vm.ColorBox.Map(raw("f"))) == "vm.colorBox.map(f)"

    assert isinstance(vm.Created, DateExpr)
    assert str(vm.Created.to_iso_string()) == "vm.created.toISOString()"
    assert isinstance(vm.Color, NumberExpr)
    assert (
        str(vm.Color.is_strictly_equal_to(module.Color.Green)) == "(vm.color === 2)"
    )
    assert isinstance(vm.Maybe, StringExpr)
    assert isinstance(vm.Flag, BooleanExpr)
    assert isinstance(vm.El, ElementExpr)
    assert str(vm.Keywords.Class) == "vm.keywords.class"


def test_namespaces_and_metadata(tmp_path: Path) -> None:
    _, module = generate_module(
        tmp_path, base_namespace="My.App", shapes=SHAPES, view_model=VIEW_MODEL
    )
    circle = module.Shapes.CircleExpr
    assert circle is module.CircleExpr
    assert circle.__namespace__ == "My.App.Shapes"
    assert circle.__generated_code__ == GeneratedCode("jsexpr", "1.2.3")
    # Declarations that aren't exported have no namespace.
    assert module.HelperExpr.__namespace__ == "My.App"
    assert not hasattr(module.Shapes, "HelperExpr")
    assert module.Color.Red == 1
    assert module.Color.Green == 2
    assert module.Color.Blue == -3


def test_declaration_files(tmp_path: Path) -> None:
    path = tmp_path / "globals.d.ts"
    path.write_text(
        "declare namespace Lib.Ui { interface Options { debug: boolean; } }\n"
        "declare global { interface Window { options: Lib.Ui.Options; } }\n"
    )
    output_path = tmp_path / "out.py"
    output_path.write_text(generate_surrogates([path], "App", "jsexpr", "1.2.3"))
    module = import_generated(output_path)

    window = module.WindowExpr(raw("window"))
    assert isinstance(window.Options, module.Lib.Ui.OptionsExpr)
    assert str(window.Options.Debug) == "window.options.debug"


def test_inherited_members(tmp_path: Path) -> None:
    _, module = generate_module(
        tmp_path,
        entities="""
        interface Named { name: string; }
        interface Entity<TId> extends Named { id: TId; }
        class User implements Entity<number> { id: number; name: string; email: string; }
        interface Admin extends Entity<string> { level: number; }
        """,
    )
    admin = module.AdminExpr(raw("a"))
    assert isinstance(admin.Id, StringExpr)
    assert isinstance(admin.Name, StringExpr)
    assert isinstance(admin.Level, NumberExpr)
    assert isinstance(module.UserExpr(raw("u")).Email, StringExpr)


def test_output_is_deterministic(tmp_path: Path) -> None:
    paths = write_sources(tmp_path, shapes=SHAPES, view_model=VIEW_MODEL)
    first = generate_surrogates(paths, "App", "jsexpr", "1.2.3")
    second = generate_surrogates(paths, "App", "jsexpr", "1.2.3")
    assert first == second


def test_unsupported_members_warn(tmp_path: Path) -> None:
    paths = write_sources(
        tmp_path, counter="class Counter { accessor count: number; total: number; }"
    )
    with pytest.warns(UserWarning, match="AutoAccessorDeclaration"):
        text = generate_surrogates(paths, "App", "jsexpr", "1.2.3")
    assert "def Total(self)" in text
    assert "def Count(self)" not in text


@pytest.mark.parametrize(
    "initializer", ["1 << 2", '"red"', "Other.Value", "0x10", "1.5"]
)
def test_malformed_enum_initializer(tmp_path: Path, initializer: str) -> None:
    paths = write_sources(tmp_path, bad=f"enum Bad {{ A = {initializer} }}")
    with pytest.raises(MalformedEnumInitializerError) as info:
        generate_surrogates(paths, "App", "jsexpr", "1.2.3")
    assert info.value.enum_name == "Bad"
    assert info.value.member_name == "A"
    assert info.value.initializer == initializer


def test_syntax_errors_name_the_file(tmp_path: Path) -> None:
    paths = write_sources(tmp_path, good="interface Good {}", bad="class Bad {")
    with pytest.raises(TypeScriptSyntaxError) as info:
        generate_surrogates(paths, "App", "jsexpr", "1.2.3")
    assert info.value.path == str(tmp_path / "bad.ts")
    assert info.value.line == 1


def test_filter_source_paths() -> None:
    paths = [
        Path("src/app.ts"),
        Path("src/appSpecs.ts"),
        Path("src/Specs.ts/other.ts"),
        "src/models.ts",
    ]
    assert filter_source_paths(paths) == [
        Path("src/app.ts"),
        Path("src/Specs.ts/other.ts"),
        Path("src/models.ts"),
    ]
    assert filter_source_paths(paths, ".ts") == []


@pytest.mark.parametrize(
    "source",
    [
        "interface Circle { radius: number; }\n"
        "interface Holder { circle: Circle; shape: Shapes.Circle; }\n"
        "namespace Shapes { export interface Circle { label: string; } }\n",
        "namespace Shapes { export interface Circle { label: string; } }\n"
        "interface Circle { radius: number; }\n"
        "interface Holder { circle: Circle; shape: Shapes.Circle; }\n",
    ],
)
def test_namespaced_types_keep_unqualified_names(tmp_path: Path, source: str) -> None:
    _, module = generate_module(tmp_path, shapes=source)
    holder = module.HolderExpr(raw("h"))

    assert type(holder.Circle) is module.CircleExpr
    assert module.CircleExpr.__namespace__ == "App"
    assert isinstance(holder.Circle.Radius, NumberExpr)

    assert type(holder.Shape) is module.Shapes.CircleExpr
    assert module.Shapes.CircleExpr is not module.CircleExpr
    assert str(holder.Shape.Label) == "h.shape.label"


def test_members_named_like_expr_internals(tmp_path: Path) -> None:
    _, module = generate_module(
        tmp_path,
        tricky="interface Tricky<T> { _binary: number; _type_argument: string; value: T; }",
    )
    tricky = module.TrickyExpr[NumberExpr](raw("t"))
    assert str(tricky.is_less_than(1)) == "(t < 1)"
    assert isinstance(tricky._binary, NumberExpr)
    assert isinstance(tricky._type_argument, StringExpr)
    assert isinstance(tricky.Value, NumberExpr)


def test_overloaded_function_properties(tmp_path: Path) -> None:
    text, module = generate_module(
        tmp_path,
        api="interface Api { fn: { (a: number): string; (a: string, b: number): number }; }",
    )
    assert text.count("    @overload\n    def Fn(") == 2

    api = module.ApiExpr(raw("api"))
    one = api.Fn(1)
    assert isinstance(one, StringExpr)
    assert str(one) == "api.fn(1)"
    two = api.Fn("x", 2)
    assert isinstance(two, NumberExpr)
    assert str(two) == 'api.fn("x", 2)'
