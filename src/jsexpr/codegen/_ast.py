"""Syntax tree for the subset of TypeScript that carries type declarations."""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, List, Optional, Union

# ==================== Types ====================


class TypeNode(ABC):
    """Base class for all type AST nodes."""

    pass


@dataclass
class KeywordType(TypeNode):
    """Built-in types like `number`, `string`, `any`, `void`, `this`."""

    name: str


@dataclass
class LiteralType(TypeNode):
    """Literal types like "hello", 42, true."""

    value: str
    literal_type: str  # 'string', 'number', 'boolean'


@dataclass
class TypeReference(TypeNode):
    """References like `Foo`, `Shapes.Circle` or `Array<number>`."""

    name: List[str]
    type_arguments: List[TypeNode] = field(default_factory=list)


@dataclass
class ArrayType(TypeNode):
    """Array types like `string[]`."""

    element_type: TypeNode


@dataclass
class TupleType(TypeNode):
    """Tuple types like [string, number]."""

    element_types: List[TypeNode]


@dataclass
class UnionType(TypeNode):
    """Union types like string | number."""

    types: List[TypeNode]


@dataclass
class IntersectionType(TypeNode):
    """Intersection types like A & B."""

    types: List[TypeNode]


@dataclass
class ParenthesizedType(TypeNode):
    """Parenthesized type like (string | number)."""

    inner_type: TypeNode


@dataclass
class FunctionType(TypeNode):
    """Function types like `(x: number) => string`, and constructor types
    like `new () => Foo`."""

    type_parameters: List[TypeParameter]
    parameters: List[Parameter]
    return_type: Optional[TypeNode]
    is_constructor: bool = False


@dataclass
class TypeLiteral(TypeNode):
    """Object type literals like `{ x: number; (): void }`."""

    members: List[Member]


@dataclass
class OpaqueType(TypeNode):
    """Types that are parsed but not modelled: `typeof x`, `keyof T`, indexed
    access, mapped, conditional and template literal types."""

    text: str


# ==================== Shared pieces ====================


@dataclass
class TypeParameter:
    name: str
    constraint: Optional[TypeNode] = None
    default: Optional[TypeNode] = None


@dataclass
class Parameter:
    """A function or constructor parameter.

    `name` is the source text of the binding, which for destructuring
    patterns is the whole pattern."""

    name: str
    type: Optional[TypeNode] = None
    optional: bool = False
    rest: bool = False
    modifiers: FrozenSet[str] = frozenset()
    initializer: Optional[Initializer] = None

    @property
    def is_parameter_property(self) -> bool:
        """Constructor parameters with an accessibility or `readonly`
        modifier also declare a property."""
        return bool(
            self.modifiers & {"public", "private", "protected", "readonly", "override"}
        )


class Initializer(ABC):
    """Base class for the initializer shapes used to infer property types."""

    pass


@dataclass
class LiteralInitializer(Initializer):
    value: str
    literal_type: str  # 'string', 'number', 'boolean', 'null', 'undefined'


@dataclass
class NewInitializer(Initializer):
    """`new Foo<T>(...)`"""

    name: List[str]
    type_arguments: List[TypeNode] = field(default_factory=list)


@dataclass
class ArrayInitializer(Initializer):
    elements: List[Initializer]


@dataclass
class FunctionInitializer(Initializer):
    """Arrow functions and function expressions."""

    type_parameters: List[TypeParameter]
    parameters: List[Parameter]
    return_type: Optional[TypeNode]


@dataclass
class OtherInitializer(Initializer):
    text: str


# ==================== Members ====================


@dataclass
class Member(ABC):
    """Base class for class, interface and type literal members.

    `name` is None for computed names like `[Symbol.iterator]` and for
    signatures."""

    name: Optional[str]
    modifiers: FrozenSet[str]
    line: int

    @property
    def is_private_name(self) -> bool:
        return self.name is not None and self.name.startswith("#")

    @property
    def is_private_or_protected(self) -> bool:
        return self.is_private_name or bool(self.modifiers & {"private", "protected"})

    @property
    def is_static(self) -> bool:
        return "static" in self.modifiers


@dataclass
class PropertySignature(Member):
    type: Optional[TypeNode]
    optional: bool = False


@dataclass
class PropertyDeclaration(Member):
    type: Optional[TypeNode]
    initializer: Optional[Initializer] = None
    optional: bool = False


@dataclass
class AutoAccessorDeclaration(Member):
    """`accessor name: T`"""

    type: Optional[TypeNode]
    initializer: Optional[Initializer] = None


@dataclass
class MethodSignature(Member):
    type_parameters: List[TypeParameter]
    parameters: List[Parameter]
    return_type: Optional[TypeNode]
    optional: bool = False


@dataclass
class MethodDeclaration(Member):
    type_parameters: List[TypeParameter]
    parameters: List[Parameter]
    return_type: Optional[TypeNode]
    optional: bool = False


@dataclass
class GetAccessor(Member):
    return_type: Optional[TypeNode]


@dataclass
class SetAccessor(Member):
    parameters: List[Parameter]


@dataclass
class Constructor(Member):
    parameters: List[Parameter]


@dataclass
class ParameterProperty(Member):
    """A property declared by a constructor parameter, like
    `constructor(public name: string)`."""

    parameter: Parameter


@dataclass
class IndexSignature(Member):
    parameters: List[Parameter]
    type: Optional[TypeNode]


@dataclass
class CallSignature(Member):
    type_parameters: List[TypeParameter]
    parameters: List[Parameter]
    return_type: Optional[TypeNode]


@dataclass
class ConstructSignature(Member):
    type_parameters: List[TypeParameter]
    parameters: List[Parameter]
    return_type: Optional[TypeNode]


SignatureLike = Union[
    MethodSignature, MethodDeclaration, CallSignature, ConstructSignature
]

# ==================== Statements ====================


class Statement(ABC):
    """Base class for top-level and namespace-level statements."""

    pass


@dataclass
class ModuleDeclaration(Statement):
    """`namespace A.B { }`, `module X { }`, `declare module "x" { }` or
    `declare global { }`.

    `name` holds the dotted path; it is empty for `declare global` and None
    for modules named by a string literal."""

    name: Optional[List[str]]
    body: List[Statement]
    modifiers: FrozenSet[str] = frozenset()

    @property
    def is_global(self) -> bool:
        return self.name == []


@dataclass
class ClassDeclaration(Statement):
    name: str
    type_parameters: List[TypeParameter]
    extends: Optional[TypeReference]
    implements: List[TypeReference]
    members: List[Member]
    modifiers: FrozenSet[str] = frozenset()


@dataclass
class InterfaceDeclaration(Statement):
    name: str
    type_parameters: List[TypeParameter]
    extends: List[TypeReference]
    members: List[Member]
    modifiers: FrozenSet[str] = frozenset()


@dataclass
class EnumMember:
    name: str
    initializer: Optional[str]
    """Source text of the initializer expression, if any."""


@dataclass
class EnumDeclaration(Statement):
    name: str
    members: List[EnumMember]
    modifiers: FrozenSet[str] = frozenset()


@dataclass
class TypeAliasDeclaration(Statement):
    name: str
    type_parameters: List[TypeParameter]
    type: TypeNode
    modifiers: FrozenSet[str] = frozenset()


Declaration = Union[
    ClassDeclaration, InterfaceDeclaration, EnumDeclaration, TypeAliasDeclaration
]


@dataclass
class SourceFile:
    path: Path
    statements: List[Statement]
