"""Tests for tokenizing and parsing TypeScript declarations."""

import pytest

from jsexpr.codegen import TypeScriptSyntaxError, parse_source
from jsexpr.codegen import _ast as ast
from jsexpr.codegen._tokens import Lexer, TokenType


def test_lexer_skips_comments_and_tracks_lines() -> None:
    tokens = Lexer("// comment\n/* a\n b */ x /** doc */ y\nz").tokenize()
    assert [t.value for t in tokens[:-1]] == ["x", "y", "z"]
    assert tokens[0].line == 3
    assert tokens[0].newline_before
    assert not tokens[1].newline_before
    assert tokens[2].newline_before
    assert tokens[-1].type == TokenType.EOF


def test_lexer_literals() -> None:
    tokens = Lexer(r"'it\'s' `a${b}c` 0x1F 1_000 1.5e-3 #secret").tokenize()
    assert [t.type for t in tokens[:-1]] == [
        TokenType.STRING_LITERAL,
        TokenType.TEMPLATE_LITERAL,
        TokenType.NUMBER_LITERAL,
        TokenType.NUMBER_LITERAL,
        TokenType.NUMBER_LITERAL,
        TokenType.PRIVATE_NAME,
    ]
    assert tokens[0].value == r"'it\'s'"
    assert tokens[2].value == "0x1F"


def test_lexer_keeps_angle_brackets_separate() -> None:
    tokens = Lexer("Array<Array<number>>").tokenize()
    assert [t.type for t in tokens[-3:-1]] == [
        TokenType.GREATER_THAN,
        TokenType.GREATER_THAN,
    ]


def test_lexer_regex_literal() -> None:
    tokens = Lexer("const r = /a[/]b/gi;").tokenize()
    assert TokenType.REGEX_LITERAL in [t.type for t in tokens]


def test_lexer_reports_position() -> None:
    with pytest.raises(TypeScriptSyntaxError) as info:
        Lexer("let a = 1;\n  'unterminated\n", "bad.ts").tokenize()
    assert info.value.path == "bad.ts"
    assert info.value.line == 2


def test_interface() -> None:
    (interface,) = parse_source(
        """
        export interface Person<T extends object = {}> extends Named, Aged {
            readonly name: string;
            nickname?: string
            friends: Person<T>[];
            greet(other: Person<T>, ...rest: any[]): void;
            (x: number): string;
            new (): Person<T>;
            [key: string]: any;
            get age(): number;
        }
        """
    ).statements
    assert isinstance(interface, ast.InterfaceDeclaration)
    assert interface.name == "Person"
    assert interface.modifiers == {"export"}
    assert [tp.name for tp in interface.type_parameters] == ["T"]
    assert [e.name for e in interface.extends] == [["Named"], ["Aged"]]

    kinds = [type(m) for m in interface.members]
    assert kinds == [
        ast.PropertySignature,
        ast.PropertySignature,
        ast.PropertySignature,
        ast.MethodSignature,
        ast.CallSignature,
        ast.ConstructSignature,
        ast.IndexSignature,
        ast.GetAccessor,
    ]
    name, nickname, friends, greet = interface.members[:4]
    assert name.modifiers == {"readonly"}
    assert isinstance(nickname, ast.PropertySignature) and nickname.optional
    assert isinstance(friends, ast.PropertySignature)
    assert friends.type == ast.ArrayType(
        ast.TypeReference(["Person"], [ast.TypeReference(["T"])])
    )
    assert isinstance(greet, ast.MethodSignature)
    assert [p.name for p in greet.parameters] == ["other", "rest"]
    assert greet.parameters[1].rest
    assert greet.return_type == ast.KeywordType("void")


def test_class() -> None:
    (cls,) = parse_source(
        """
        @Component({ selector: "app" })
        export abstract class Circle extends Shape<number> implements Drawable {
            static count = 0;
            #secret = 1;
            private hidden: string;
            radius = 1;
            readonly kind = "circle";
            onClick = (e: KeyboardEvent): void => { console.log(e); };
            accessor size: number;
            [key: string]: any;
            constructor(public name: string, private id: number, plain: string) {
                super();
            }
            area(): number { return Math.PI * this.radius ** 2; }
            get diameter(): number { return 2 * this.radius; }
            set diameter(value: number) { this.radius = value / 2; }
            static { Circle.count++; }
        }
        """
    ).statements
    assert isinstance(cls, ast.ClassDeclaration)
    assert cls.name == "Circle"
    assert cls.modifiers == {"export", "abstract"}
    assert cls.extends == ast.TypeReference(["Shape"], [ast.KeywordType("number")])
    assert cls.implements == [ast.TypeReference(["Drawable"])]

    members = {m.name: m for m in cls.members if m.name is not None}
    assert members["count"].is_static
    assert members["#secret"].is_private_or_protected
    assert members["hidden"].is_private_or_protected
    assert members["radius"] == ast.PropertyDeclaration(
        "radius", frozenset(), 7, None, ast.LiteralInitializer("1", "number")
    )
    onclick = members["onClick"]
    assert isinstance(onclick, ast.PropertyDeclaration)
    assert isinstance(onclick.initializer, ast.FunctionInitializer)
    assert onclick.initializer.return_type == ast.KeywordType("void")
    assert isinstance(members["size"], ast.AutoAccessorDeclaration)
    assert isinstance(members["constructor"], ast.Constructor)
    assert isinstance(members["name"], ast.ParameterProperty)
    assert isinstance(members["id"], ast.ParameterProperty)
    assert members["id"].is_private_or_protected
    assert "plain" not in members
    assert isinstance(members["area"], ast.MethodDeclaration)
    assert [type(m) for m in cls.members if m.name == "diameter"] == [
        ast.GetAccessor,
        ast.SetAccessor,
    ]


def test_namespaces() -> None:
    statements = parse_source(
        """
        namespace A.B { export class C {} }
        declare module Legacy { interface D {} }
        declare module "external" { export interface E {} }
        declare global { interface Window { app: any } }
        """
    ).statements
    assert [s.name for s in statements] == [["A", "B"], ["Legacy"], None, []]  # type: ignore
    assert all(isinstance(s, ast.ModuleDeclaration) for s in statements)
    assert statements[0].body[0].name == "C"  # type: ignore
    assert statements[3].is_global  # type: ignore


def test_enums() -> None:
    plain, const = parse_source(
        """
        enum Color { Red = 1, Green, "Light Blue" = -3, }
        const enum Empty {}
        """
    ).statements
    assert isinstance(plain, ast.EnumDeclaration)
    assert [(m.name, m.initializer) for m in plain.members] == [
        ("Red", "1"),
        ("Green", None),
        ("Light Blue", "-3"),
    ]
    assert isinstance(const, ast.EnumDeclaration)
    assert const.modifiers == {"const"}
    assert const.members == []


def test_type_alias() -> None:
    (alias,) = parse_source("type Pair<T> = [T, T] | null;").statements
    assert alias == ast.TypeAliasDeclaration(
        "Pair",
        [ast.TypeParameter("T")],
        ast.UnionType(
            [
                ast.TupleType([ast.TypeReference(["T"]), ast.TypeReference(["T"])]),
                ast.KeywordType("null"),
            ]
        ),
    )


@pytest.mark.parametrize(
    "annotation, expected",
    [
        ("number", ast.KeywordType("number")),
        ("Shapes.Circle", ast.TypeReference(["Shapes", "Circle"])),
        ("'a' | 'b'", ast.UnionType([ast.LiteralType("'a'", "string"), ast.LiteralType("'b'", "string")])),
        ("A & B", ast.IntersectionType([ast.TypeReference(["A"]), ast.TypeReference(["B"])])),
        ("(string | number)[]", ast.ArrayType(ast.ParenthesizedType(ast.UnionType([ast.KeywordType("string"), ast.KeywordType("number")])))),
        ("() => void", ast.FunctionType([], [], ast.KeywordType("void"))),
        ("new () => Foo", ast.FunctionType([], [], ast.TypeReference(["Foo"]), is_constructor=True)),
        ("typeof foo", ast.OpaqueType("typeof")),
        ("keyof T", ast.OpaqueType("keyof")),
        ("T['key']", ast.OpaqueType("indexed access")),
        ("{ [K in keyof T]: T[K] }", ast.OpaqueType("mapped")),
        ("T extends string ? A : B", ast.OpaqueType("conditional")),
        ("readonly string[]", ast.ArrayType(ast.KeywordType("string"))),
    ],
)
def test_types(annotation: str, expected: ast.TypeNode) -> None:
    (alias,) = parse_source(f"type X = {annotation};").statements
    assert isinstance(alias, ast.TypeAliasDeclaration)
    assert alias.type == expected


def test_type_predicates_are_boolean() -> None:
    (interface,) = parse_source(
        "interface Guard { isCircle(s: Shape): s is Circle; check(v: any): asserts v; }"
    ).statements
    assert isinstance(interface, ast.InterfaceDeclaration)
    is_circle, check = interface.members
    assert isinstance(is_circle, ast.MethodSignature)
    assert is_circle.return_type == ast.KeywordType("boolean")
    assert isinstance(check, ast.MethodSignature)
    assert check.return_type == ast.KeywordType("void")


def test_other_statements_are_skipped() -> None:
    statements = parse_source(
        """
        #!/usr/bin/env node
        import { a } from "./a";
        import * as b from "b";
        const x = { a: 1, b: [1, 2] }, y = a / 2 / 3;
        let re = /}/g;
        function helper<T>(value: T): T { return value; }
        if (x) { interface Inner {} }
        export default class {}
        export { helper };
        class Kept {}
        """.strip()
    ).statements
    assert [type(s) for s in statements] == [ast.ClassDeclaration]


def test_syntax_error_position() -> None:
    with pytest.raises(TypeScriptSyntaxError) as info:
        parse_source("interface Broken {\n    a: number b: string\n}\n", "broken.ts")
    assert info.value.path == "broken.ts"
    assert info.value.line == 2
    assert info.value.column == 15
    assert str(info.value).startswith("broken.ts:2:15: ")
