"""Semantic model for parsed TypeScript declarations.

The checker binds the declarations of every source file into one global scope,
then answers the questions surrogate generation needs: what type does a type
annotation denote, what is a symbol's fully qualified name, which properties
does a class or interface have (including inherited ones), and which call
signatures does a type have.

This is a small subset of what the TypeScript compiler does. The semantics
follow its non-strict mode: `null` and `undefined` disappear from unions, and
anything that can't be resolved is `any`.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path
from typing import (
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Set,
    Tuple,
    Union,
)

from . import _ast as ast
from ._errors import InputDiscoveryError
from ._lib import LIB_PATH, LIB_SOURCE
from ._parser import parse_source


class SymbolFlags(enum.Flag):
    NONE = 0
    CLASS = enum.auto()
    INTERFACE = enum.auto()
    ENUM = enum.auto()
    ENUM_MEMBER = enum.auto()
    NAMESPACE = enum.auto()
    TYPE_ALIAS = enum.auto()
    TYPE_PARAMETER = enum.auto()
    PROPERTY = enum.auto()
    METHOD = enum.auto()
    ACCESSOR = enum.auto()


class Symbol:
    """A named entity: a type, namespace, member or type parameter.

    Declarations that merge (interfaces with interfaces, namespaces with
    namespaces and classes) share one symbol."""

    def __init__(
        self, name: str, flags: SymbolFlags, parent: Optional[Symbol] = None
    ) -> None:
        self.name = name
        self.flags = flags
        self.parent = parent
        """The namespace or enum this symbol is exported from, if any."""

        self.declarations: List[object] = []
        self.scopes: List[Scope] = []
        """The scope each declaration's type annotations are resolved in."""

        self.exports: Dict[str, Symbol] = {}
        self.members: Dict[str, Symbol] = {}
        self.type_parameters: List[Symbol] = []
        self.call_signature_declarations: List[Tuple[ast.CallSignature, Scope]] = []

    @property
    def value_declaration(self) -> object:
        return self.declarations[0]

    @property
    def full_name(self) -> str:
        """The dotted name of this symbol, eg `Shapes.Circle`."""
        if self.parent is None:
            return self.name
        return self.parent.full_name + "." + self.name

    def add_declaration(self, declaration: object, scope: Scope) -> None:
        self.declarations.append(declaration)
        self.scopes.append(scope)

    def __repr__(self) -> str:
        return f"Symbol({self.full_name!r}, {self.flags})"


class Scope:
    """Names visible at some point in the source."""

    def __init__(
        self,
        parent: Optional[Scope] = None,
        names: Optional[Dict[str, Symbol]] = None,
        container: Optional[Symbol] = None,
    ) -> None:
        self.parent = parent
        self.names: Dict[str, Symbol] = {} if names is None else names
        self.container = container
        """A namespace whose exports are also visible in this scope."""

    def lookup(self, name: str) -> Optional[Symbol]:
        scope: Optional[Scope] = self
        while scope is not None:
            if name in scope.names:
                return scope.names[name]
            if scope.container is not None and name in scope.container.exports:
                return scope.container.exports[name]
            scope = scope.parent
        return None


class TypeFlags(enum.Flag):
    NONE = 0
    ANY = enum.auto()
    UNKNOWN = enum.auto()
    STRING = enum.auto()
    NUMBER = enum.auto()
    BOOLEAN = enum.auto()
    BIGINT = enum.auto()
    STRING_LITERAL = enum.auto()
    NUMBER_LITERAL = enum.auto()
    BOOLEAN_LITERAL = enum.auto()
    ENUM = enum.auto()
    ENUM_LITERAL = enum.auto()
    ES_SYMBOL = enum.auto()
    VOID = enum.auto()
    UNDEFINED = enum.auto()
    NULL = enum.auto()
    NEVER = enum.auto()
    NON_PRIMITIVE = enum.auto()
    TYPE_PARAMETER = enum.auto()
    UNION = enum.auto()
    INTERSECTION = enum.auto()
    # Object types.
    CLASS = enum.auto()
    INTERFACE = enum.auto()
    REFERENCE = enum.auto()
    ANONYMOUS = enum.auto()
    TUPLE = enum.auto()

    NUMBER_LIKE = NUMBER | NUMBER_LITERAL | ENUM | ENUM_LITERAL
    STRING_LIKE = STRING | STRING_LITERAL
    BOOLEAN_LIKE = BOOLEAN | BOOLEAN_LITERAL
    NULLABLE = UNDEFINED | NULL


@dataclass(frozen=True)
class ParameterInfo:
    name: str
    type: TypeInfo


@dataclass(frozen=True)
class Signature:
    type_parameters: Tuple[Symbol, ...]
    parameters: Tuple[ParameterInfo, ...]
    return_type: Optional[TypeInfo]
    """None when the declaration has no return type annotation."""

    declaration: object


SignatureSource = Union[Tuple[Signature, ...], Callable[[], Iterable[Signature]]]


class TypeInfo:
    """A resolved type.

    Call signatures are computed on first access, so that recursive types
    like `interface Callback { (next: Callback): void }` resolve."""

    def __init__(
        self,
        flags: TypeFlags,
        symbol: Optional[Symbol] = None,
        type_arguments: Tuple[TypeInfo, ...] = (),
        types: Tuple[TypeInfo, ...] = (),
        value: Optional[str] = None,
        signatures: SignatureSource = (),
    ) -> None:
        self.flags = flags
        self.symbol = symbol
        self.type_arguments = type_arguments
        self.types = types
        """Members of union, intersection and tuple types."""
        self.value = value
        """Source text of literal types."""
        self._signatures = signatures

    @property
    def call_signatures(self) -> Tuple[Signature, ...]:
        if callable(self._signatures):
            self._signatures = tuple(self._signatures())
        return self._signatures

    def __repr__(self) -> str:
        parts = [str(self.flags)]
        if self.symbol is not None:
            parts.append(self.symbol.full_name)
        if self.value is not None:
            parts.append(self.value)
        if self.type_arguments:
            parts.append(f"args={list(self.type_arguments)}")
        return f"TypeInfo({', '.join(parts)})"


ANY = TypeInfo(TypeFlags.ANY)
_INTRINSICS = {
    "any": ANY,
    "unknown": TypeInfo(TypeFlags.UNKNOWN),
    "number": TypeInfo(TypeFlags.NUMBER),
    "string": TypeInfo(TypeFlags.STRING),
    "boolean": TypeInfo(TypeFlags.BOOLEAN),
    "bigint": TypeInfo(TypeFlags.BIGINT),
    "symbol": TypeInfo(TypeFlags.ES_SYMBOL),
    "void": TypeInfo(TypeFlags.VOID),
    "undefined": TypeInfo(TypeFlags.UNDEFINED),
    "null": TypeInfo(TypeFlags.NULL),
    "never": TypeInfo(TypeFlags.NEVER),
    "object": TypeInfo(TypeFlags.NON_PRIMITIVE),
    # Polymorphic `this` isn't modelled.
    "this": ANY,
}

_LITERAL_FLAGS = {
    "string": TypeFlags.STRING_LITERAL,
    "number": TypeFlags.NUMBER_LITERAL,
    "boolean": TypeFlags.BOOLEAN_LITERAL,
}
_WIDENED = {
    "string": _INTRINSICS["string"],
    "number": _INTRINSICS["number"],
    "boolean": _INTRINSICS["boolean"],
}

_PROPERTY_LIKE = (
    ast.PropertySignature,
    ast.PropertyDeclaration,
    ast.AutoAccessorDeclaration,
    ast.ParameterProperty,
)
_METHOD_LIKE = (ast.MethodSignature, ast.MethodDeclaration)
_ACCESSORS = (ast.GetAccessor, ast.SetAccessor)


@dataclass(frozen=True)
class PropertyInfo:
    """A property of a class or interface type, as seen from that type."""

    name: str
    symbol: Symbol
    type: TypeInfo
    """The property's type, with the type arguments of the type it was found
    through substituted."""

    @property
    def value_declaration(self) -> object:
        return self.symbol.value_declaration


class TypeChecker:
    """Binds declarations and resolves types."""

    def __init__(self) -> None:
        self.globals = Scope()
        self._symbols: Dict[int, Symbol] = {}
        self._resolving_aliases: Set[Symbol] = set()

    # ==================== Binding ====================

    def bind_source_file(self, source_file: ast.SourceFile) -> None:
        ambient = source_file.path.name.endswith(".d.ts")
        for statement in source_file.statements:
            self._bind_statement(statement, self.globals, None, ambient)

    def _bind_statement(
        self,
        statement: ast.Statement,
        scope: Scope,
        container: Optional[Symbol],
        ambient: bool,
    ) -> None:
        modifiers = getattr(statement, "modifiers", frozenset())
        ambient = ambient or "declare" in modifiers
        exported = container is not None and (ambient or "export" in modifiers)
        table = container.exports if exported else scope.names
        parent = container if exported else None

        if isinstance(statement, ast.ModuleDeclaration):
            if statement.is_global:
                for child in statement.body:
                    self._bind_statement(child, self.globals, None, True)
                return
            if statement.name is None:
                body_scope = Scope(scope)
                for child in statement.body:
                    self._bind_statement(child, body_scope, None, True)
                return
            symbol = self._declare(
                table, statement.name[0], SymbolFlags.NAMESPACE, parent
            )
            body_scope = Scope(scope, container=symbol)
            for part in statement.name[1:]:
                symbol = self._declare(
                    symbol.exports, part, SymbolFlags.NAMESPACE, symbol
                )
                body_scope = Scope(body_scope, container=symbol)
            symbol.add_declaration(statement, body_scope)
            for child in statement.body:
                self._bind_statement(child, body_scope, symbol, ambient)
            return

        if isinstance(statement, (ast.ClassDeclaration, ast.InterfaceDeclaration)):
            flags = (
                SymbolFlags.CLASS
                if isinstance(statement, ast.ClassDeclaration)
                else SymbolFlags.INTERFACE
            )
            symbol = self._declare(table, statement.name, flags, parent)
            declaration_scope = self._type_parameter_scope(
                symbol, statement.type_parameters, scope
            )
            symbol.add_declaration(statement, declaration_scope)
            self._bind_members(symbol, statement.members, declaration_scope)
        elif isinstance(statement, ast.EnumDeclaration):
            symbol = self._declare(table, statement.name, SymbolFlags.ENUM, parent)
            symbol.add_declaration(statement, scope)
            for member in statement.members:
                self._declare(
                    symbol.exports, member.name, SymbolFlags.ENUM_MEMBER, symbol
                ).add_declaration(member, scope)
        elif isinstance(statement, ast.TypeAliasDeclaration):
            symbol = self._declare(
                table, statement.name, SymbolFlags.TYPE_ALIAS, parent
            )
            declaration_scope = self._type_parameter_scope(
                symbol, statement.type_parameters, scope
            )
            symbol.add_declaration(statement, declaration_scope)
        else:
            return
        self._symbols[id(statement)] = symbol

    def _declare(
        self,
        table: Dict[str, Symbol],
        name: str,
        flags: SymbolFlags,
        parent: Optional[Symbol],
    ) -> Symbol:
        symbol = table.get(name)
        if symbol is None:
            symbol = table[name] = Symbol(name, flags, parent)
        else:
            symbol.flags |= flags
        return symbol

    def _type_parameter_scope(
        self,
        symbol: Symbol,
        type_parameters: Sequence[ast.TypeParameter],
        scope: Scope,
    ) -> Scope:
        """Scope for one declaration of a generic symbol. Merged declarations
        share type parameter symbols, matched by position."""
        names: Dict[str, Symbol] = {}
        for i, type_parameter in enumerate(type_parameters):
            if i == len(symbol.type_parameters):
                tp_symbol = Symbol(type_parameter.name, SymbolFlags.TYPE_PARAMETER)
                tp_symbol.add_declaration(type_parameter, scope)
                symbol.type_parameters.append(tp_symbol)
            names[type_parameter.name] = symbol.type_parameters[i]
        return Scope(scope, names)

    def _bind_members(
        self, symbol: Symbol, members: Sequence[ast.Member], scope: Scope
    ) -> None:
        for member in members:
            if isinstance(member, ast.CallSignature):
                symbol.call_signature_declarations.append((member, scope))
                continue
            if member.name is None or member.is_static:
                continue
            if isinstance(member, _PROPERTY_LIKE):
                flags = SymbolFlags.PROPERTY
            elif isinstance(member, _METHOD_LIKE):
                flags = SymbolFlags.METHOD
            elif isinstance(member, _ACCESSORS):
                flags = SymbolFlags.ACCESSOR
            else:
                # Constructors, index and construct signatures aren't properties.
                continue
            self._declare(symbol.members, member.name, flags, None).add_declaration(
                member, scope
            )

    def get_symbol_of_declaration(self, declaration: ast.Statement) -> Symbol:
        return self._symbols[id(declaration)]

    # ==================== Types ====================

    def get_declared_type(self, symbol: Symbol) -> TypeInfo:
        """The instance type of a class or interface, generic over its own type
        parameters."""
        type_arguments = tuple(
            TypeInfo(TypeFlags.TYPE_PARAMETER, tp) for tp in symbol.type_parameters
        )
        return self._type_of_symbol_reference(symbol, type_arguments)

    def _type_of_symbol_reference(
        self, symbol: Symbol, type_arguments: Tuple[TypeInfo, ...]
    ) -> TypeInfo:
        if symbol.flags & (SymbolFlags.CLASS | SymbolFlags.INTERFACE):
            flags = TypeFlags.NONE
            if symbol.flags & SymbolFlags.CLASS:
                flags |= TypeFlags.CLASS
            if symbol.flags & SymbolFlags.INTERFACE:
                flags |= TypeFlags.INTERFACE
            expected = len(symbol.type_parameters)
            type_arguments = tuple(type_arguments[:expected]) + (ANY,) * (
                expected - len(type_arguments)
            )
            if type_arguments:
                flags |= TypeFlags.REFERENCE
            return TypeInfo(
                flags,
                symbol,
                type_arguments,
                signatures=lambda: self._interface_signatures(symbol, type_arguments),
            )
        if symbol.flags & SymbolFlags.TYPE_PARAMETER:
            return TypeInfo(TypeFlags.TYPE_PARAMETER, symbol)
        if symbol.flags & SymbolFlags.ENUM:
            return TypeInfo(TypeFlags.ENUM, symbol)
        if symbol.flags & SymbolFlags.ENUM_MEMBER:
            return TypeInfo(TypeFlags.ENUM_LITERAL, symbol)
        if symbol.flags & SymbolFlags.TYPE_ALIAS:
            return self._resolve_alias(symbol, type_arguments)
        return ANY

    def _resolve_alias(
        self, symbol: Symbol, type_arguments: Tuple[TypeInfo, ...]
    ) -> TypeInfo:
        if symbol in self._resolving_aliases:
            return ANY
        declaration = symbol.value_declaration
        assert isinstance(declaration, ast.TypeAliasDeclaration)
        self._resolving_aliases.add(symbol)
        try:
            target = self.resolve_type_node(declaration.type, symbol.scopes[0])
        finally:
            self._resolving_aliases.discard(symbol)
        mapping = dict(zip(symbol.type_parameters, type_arguments))
        return self.instantiate(target, mapping)

    def _interface_signatures(
        self, symbol: Symbol, type_arguments: Tuple[TypeInfo, ...]
    ) -> List[Signature]:
        mapping = dict(zip(symbol.type_parameters, type_arguments))
        signatures = [
            self.instantiate_signature(
                self.get_signature(
                    declaration.type_parameters,
                    declaration.parameters,
                    declaration.return_type,
                    scope,
                    declaration,
                ),
                mapping,
            )
            for declaration, scope in symbol.call_signature_declarations
        ]
        for base in self.get_base_types(symbol):
            signatures.extend(self.instantiate(base, mapping).call_signatures)
        return signatures

    def get_base_types(self, symbol: Symbol) -> List[TypeInfo]:
        """Resolved `extends` clauses. For classes, implemented interfaces
        don't contribute members and are left out."""
        bases = []
        for declaration, scope in zip(symbol.declarations, symbol.scopes):
            if isinstance(declaration, ast.ClassDeclaration):
                references = [declaration.extends] if declaration.extends else []
            elif isinstance(declaration, ast.InterfaceDeclaration):
                references = declaration.extends
            else:
                continue
            for reference in references:
                base = self.resolve_type_node(reference, scope)
                if base.symbol is not None and base.flags & (
                    TypeFlags.CLASS | TypeFlags.INTERFACE
                ):
                    bases.append(base)
        return bases

    def resolve_type_node(self, node: Optional[ast.TypeNode], scope: Scope) -> TypeInfo:
        """The type denoted by a type annotation. A missing annotation is
        `any`."""
        if node is None:
            return ANY
        if isinstance(node, ast.KeywordType):
            return _INTRINSICS[node.name]
        if isinstance(node, ast.LiteralType):
            return TypeInfo(_LITERAL_FLAGS[node.literal_type], value=node.value)
        if isinstance(node, ast.TypeReference):
            symbol = self.resolve_entity_name(node.name, scope)
            if symbol is None:
                return ANY
            type_arguments = tuple(
                self.resolve_type_node(t, scope) for t in node.type_arguments
            )
            return self._type_of_symbol_reference(symbol, type_arguments)
        if isinstance(node, ast.ArrayType):
            return self.create_array_type(self.resolve_type_node(node.element_type, scope))
        if isinstance(node, ast.TupleType):
            return TypeInfo(
                TypeFlags.TUPLE,
                types=tuple(self.resolve_type_node(t, scope) for t in node.element_types),
            )
        if isinstance(node, ast.UnionType):
            return self.get_union_type(
                [self.resolve_type_node(t, scope) for t in node.types]
            )
        if isinstance(node, ast.IntersectionType):
            types = tuple(self.resolve_type_node(t, scope) for t in node.types)
            return TypeInfo(
                TypeFlags.INTERSECTION,
                types=types,
                signatures=lambda: [s for t in types for s in t.call_signatures],
            )
        if isinstance(node, ast.ParenthesizedType):
            return self.resolve_type_node(node.inner_type, scope)
        if isinstance(node, ast.FunctionType):
            if node.is_constructor:
                return TypeInfo(TypeFlags.ANONYMOUS)
            return TypeInfo(
                TypeFlags.ANONYMOUS,
                signatures=lambda: [
                    self.get_signature(
                        node.type_parameters,
                        node.parameters,
                        node.return_type,
                        scope,
                        node,
                    )
                ],
            )
        if isinstance(node, ast.TypeLiteral):
            return TypeInfo(
                TypeFlags.ANONYMOUS,
                signatures=lambda: [
                    self.get_signature(
                        m.type_parameters, m.parameters, m.return_type, scope, m
                    )
                    for m in node.members
                    if isinstance(m, ast.CallSignature)
                ],
            )
        assert isinstance(node, ast.OpaqueType), node
        return ANY

    def resolve_entity_name(
        self, name: Sequence[str], scope: Scope
    ) -> Optional[Symbol]:
        symbol = scope.lookup(name[0])
        for part in name[1:]:
            if symbol is None:
                return None
            symbol = symbol.exports.get(part)
        return symbol

    def create_array_type(self, element_type: TypeInfo) -> TypeInfo:
        array_symbol = self.globals.lookup("Array")
        assert array_symbol is not None, "The bundled lib declares Array"
        return self._type_of_symbol_reference(array_symbol, (element_type,))

    def get_union_type(self, types: Sequence[TypeInfo]) -> TypeInfo:
        """Union of `types`, normalized the way non-strict TypeScript does."""
        flattened: List[TypeInfo] = []
        for t in types:
            flattened.extend(t.types if t.flags & TypeFlags.UNION else (t,))

        members: List[TypeInfo] = []
        for t in flattened:
            if t.flags & TypeFlags.NULLABLE:
                continue
            if any(_same_type(t, existing) for existing in members):
                continue
            members.append(t)

        if not members:
            return flattened[0] if flattened else _INTRINSICS["never"]
        if any(t.flags & TypeFlags.ANY for t in members):
            return ANY

        literal_values = {
            t.value for t in members if t.flags & TypeFlags.BOOLEAN_LITERAL
        }
        if {"true", "false"} <= literal_values:
            members = [
                t for t in members if not t.flags & TypeFlags.BOOLEAN_LITERAL
            ]
            members.append(_INTRINSICS["boolean"])

        if len(members) == 1:
            return members[0]
        return TypeInfo(TypeFlags.UNION, types=tuple(members))

    def get_signature(
        self,
        type_parameters: Sequence[ast.TypeParameter],
        parameters: Sequence[ast.Parameter],
        return_type: Optional[ast.TypeNode],
        scope: Scope,
        declaration: object,
    ) -> Signature:
        tp_symbols = []
        names: Dict[str, Symbol] = {}
        for type_parameter in type_parameters:
            tp_symbol = Symbol(type_parameter.name, SymbolFlags.TYPE_PARAMETER)
            tp_symbol.add_declaration(type_parameter, scope)
            tp_symbols.append(tp_symbol)
            names[type_parameter.name] = tp_symbol
        signature_scope = Scope(scope, names) if names else scope
        return Signature(
            tuple(tp_symbols),
            tuple(
                ParameterInfo(p.name, self.get_parameter_type(p, signature_scope))
                for p in parameters
            ),
            None
            if return_type is None
            else self.resolve_type_node(return_type, signature_scope),
            declaration,
        )

    def get_parameter_type(self, parameter: ast.Parameter, scope: Scope) -> TypeInfo:
        if parameter.type is not None:
            return self.resolve_type_node(parameter.type, scope)
        if parameter.initializer is not None:
            return self.infer_initializer_type(parameter.initializer, scope, False)
        if parameter.rest:
            return self.create_array_type(ANY)
        return ANY

    def infer_initializer_type(
        self, initializer: ast.Initializer, scope: Scope, readonly: bool
    ) -> TypeInfo:
        """The type of a property or parameter with no annotation. Literal
        types are widened unless the property is readonly."""
        if isinstance(initializer, ast.LiteralInitializer):
            if initializer.literal_type in ("null", "undefined"):
                return ANY
            if readonly:
                return TypeInfo(
                    _LITERAL_FLAGS[initializer.literal_type], value=initializer.value
                )
            return _WIDENED[initializer.literal_type]
        if isinstance(initializer, ast.NewInitializer):
            return self.resolve_type_node(
                ast.TypeReference(initializer.name, initializer.type_arguments), scope
            )
        if isinstance(initializer, ast.ArrayInitializer):
            if not initializer.elements:
                return self.create_array_type(ANY)
            return self.create_array_type(
                self.get_union_type(
                    [
                        self.infer_initializer_type(e, scope, False)
                        for e in initializer.elements
                    ]
                )
            )
        if isinstance(initializer, ast.FunctionInitializer):
            return TypeInfo(
                TypeFlags.ANONYMOUS,
                signatures=lambda: [
                    self.get_signature(
                        initializer.type_parameters,
                        initializer.parameters,
                        initializer.return_type,
                        scope,
                        initializer,
                    )
                ],
            )
        return ANY

    def get_type_of_member(self, symbol: Symbol) -> TypeInfo:
        """Declared type of a class or interface member."""
        declaration = symbol.value_declaration
        scope = symbol.scopes[0]
        if isinstance(declaration, _METHOD_LIKE):
            overloads = [
                (d, s)
                for d, s in zip(symbol.declarations, symbol.scopes)
                if isinstance(d, _METHOD_LIKE)
            ]
            return TypeInfo(
                TypeFlags.ANONYMOUS,
                signatures=lambda: [
                    self.get_signature(
                        d.type_parameters, d.parameters, d.return_type, s, d
                    )
                    for d, s in overloads
                ],
            )
        if isinstance(declaration, _ACCESSORS):
            for d, s in zip(symbol.declarations, symbol.scopes):
                if isinstance(d, ast.GetAccessor) and d.return_type is not None:
                    return self.resolve_type_node(d.return_type, s)
            for d, s in zip(symbol.declarations, symbol.scopes):
                if isinstance(d, ast.SetAccessor) and d.parameters:
                    return self.get_parameter_type(d.parameters[0], s)
            return ANY
        if isinstance(declaration, ast.ParameterProperty):
            return self.get_parameter_type(declaration.parameter, scope)
        assert isinstance(declaration, _PROPERTY_LIKE), declaration
        if declaration.type is not None:
            return self.resolve_type_node(declaration.type, scope)
        initializer = getattr(declaration, "initializer", None)
        if initializer is not None:
            return self.infer_initializer_type(
                initializer, scope, "readonly" in declaration.modifiers
            )
        return ANY

    def get_augmented_properties(self, type_info: TypeInfo) -> List[PropertyInfo]:
        """All properties of a class or interface type: its own members in
        declaration order, then those inherited from each base type."""
        properties: List[PropertyInfo] = []
        if type_info.symbol is None:
            return properties
        self._collect_properties(
            type_info.symbol, type_info.type_arguments, set(), [], properties
        )
        return properties

    def _collect_properties(
        self,
        symbol: Symbol,
        type_arguments: Tuple[TypeInfo, ...],
        seen: Set[str],
        visiting: List[Symbol],
        out: List[PropertyInfo],
    ) -> None:
        if symbol in visiting:
            return
        visiting.append(symbol)
        mapping = dict(zip(symbol.type_parameters, type_arguments))
        for name, member in symbol.members.items():
            if name in seen:
                continue
            seen.add(name)
            out.append(
                PropertyInfo(
                    name, member, self.instantiate(self.get_type_of_member(member), mapping)
                )
            )
        for base in self.get_base_types(symbol):
            base = self.instantiate(base, mapping)
            assert base.symbol is not None
            self._collect_properties(
                base.symbol, base.type_arguments, seen, visiting, out
            )
        visiting.pop()

    # ==================== Instantiation ====================

    def instantiate(
        self, type_info: TypeInfo, mapping: Mapping[Symbol, TypeInfo]
    ) -> TypeInfo:
        """Substitute type arguments for type parameters."""
        if not mapping:
            return type_info
        flags = type_info.flags
        if flags & TypeFlags.TYPE_PARAMETER:
            assert type_info.symbol is not None
            return mapping.get(type_info.symbol, type_info)
        if type_info.symbol is not None and flags & (
            TypeFlags.CLASS | TypeFlags.INTERFACE
        ):
            if not type_info.type_arguments:
                return type_info
            return self._type_of_symbol_reference(
                type_info.symbol,
                tuple(self.instantiate(t, mapping) for t in type_info.type_arguments),
            )
        if flags & TypeFlags.UNION:
            return self.get_union_type([self.instantiate(t, mapping) for t in type_info.types])
        if flags & (TypeFlags.INTERSECTION | TypeFlags.TUPLE | TypeFlags.ANONYMOUS):
            types = tuple(self.instantiate(t, mapping) for t in type_info.types)
            return TypeInfo(
                flags,
                types=types,
                signatures=lambda: [
                    self.instantiate_signature(s, mapping)
                    for s in type_info.call_signatures
                ],
            )
        return type_info

    def instantiate_signature(
        self, signature: Signature, mapping: Mapping[Symbol, TypeInfo]
    ) -> Signature:
        if not mapping:
            return signature
        return Signature(
            signature.type_parameters,
            tuple(
                ParameterInfo(p.name, self.instantiate(p.type, mapping))
                for p in signature.parameters
            ),
            None
            if signature.return_type is None
            else self.instantiate(signature.return_type, mapping),
            signature.declaration,
        )


def _same_type(a: TypeInfo, b: TypeInfo) -> bool:
    if a is b:
        return True
    if a.flags != b.flags or a.symbol is not b.symbol or a.value != b.value:
        return False
    if a.symbol is None and a.value is None:
        # Distinct object types without a symbol are never the same.
        return False
    return len(a.type_arguments) == len(b.type_arguments) and all(
        _same_type(x, y) for x, y in zip(a.type_arguments, b.type_arguments)
    )


class Program:
    """A set of parsed source files and the checker bound over them."""

    def __init__(self, source_files: List[ast.SourceFile], checker: TypeChecker):
        self.source_files = source_files
        """The input files, in the order they were given. Excludes the lib."""
        self.checker = checker


def create_program(paths: Sequence[Union[str, Path]]) -> Program:
    """Read, parse and bind TypeScript sources.

    Raises:
        InputDiscoveryError: if a file can't be read.
        TypeScriptSyntaxError: if a file can't be parsed.
    """
    checker = TypeChecker()
    checker.bind_source_file(parse_source(LIB_SOURCE, LIB_PATH))

    source_files = []
    for path in paths:
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            raise InputDiscoveryError(f"Couldn't read {path}: {e}") from e
        source_file = parse_source(text, path)
        checker.bind_source_file(source_file)
        source_files.append(source_file)
    return Program(source_files, checker)
