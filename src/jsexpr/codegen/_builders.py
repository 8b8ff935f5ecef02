"""Builders that accumulate declarations and emit surrogate source code."""

from __future__ import annotations

import dataclasses
import json
from typing import AbstractSet, Dict, List, Optional, Set, Tuple, Union

from .._expr import Expr
from ._checker import TypeInfo
from ._sanitize import sanitize_identifier
from ._type_mapper import EXPR, TypeMapper, surrogate_class_name

INDENT = "    "


@dataclasses.dataclass(frozen=True)
class PropertyDescriptor:
    name: str
    type: Optional[TypeInfo]


@dataclasses.dataclass(frozen=True)
class ParameterDescriptor:
    name: str
    type: Optional[TypeInfo]


@dataclasses.dataclass(frozen=True)
class MethodDescriptor:
    name: str
    type_parameters: Tuple[str, ...]
    """The method's own type parameters. References to them map to `Expr`,
    even where a class type parameter has the same name."""
    parameters: Tuple[ParameterDescriptor, ...]
    return_type: Optional[TypeInfo]
    """None when the declaration has no return type annotation."""


MemberDescriptor = Union[PropertyDescriptor, MethodDescriptor]


@dataclasses.dataclass(frozen=True)
class TypeDescriptor:
    """A class or interface to generate a surrogate for."""

    name: str
    type_parameters: Tuple[str, ...]
    members: Tuple[MemberDescriptor, ...]
    module_name: Optional[str] = None
    """Dotted namespace path the type is declared in, if any."""


@dataclasses.dataclass(frozen=True)
class EnumMemberDescriptor:
    name: str
    value: Optional[int] = None


@dataclasses.dataclass(frozen=True)
class EnumDescriptor:
    name: str
    members: Tuple[EnumMemberDescriptor, ...]
    module_name: Optional[str] = None


def _default_inherited_names() -> Set[str]:
    return {name for name in dir(Expr) if not name.startswith("__")}


def _string_literal(value: str) -> str:
    """A double quoted Python string literal."""
    return json.dumps(value, ensure_ascii=False)


class EnumBuilder:
    """Builds a `ScriptEnum` subclass."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.members: List[EnumMemberDescriptor] = []

    def with_name_value(self, name: str, value: Optional[int] = None) -> EnumBuilder:
        self.members.append(EnumMemberDescriptor(name, value))
        return self

    def build(self) -> str:
        out_lines = [
            f"class {sanitize_identifier(self.name, for_parameter=True)}(ScriptEnum):"
        ]
        for member in self.members:
            name = sanitize_identifier(member.name, for_parameter=True)
            value = "auto()" if member.value is None else str(member.value)
            out_lines.append(f"{INDENT}{name} = {value}")
        if not self.members:
            out_lines.append(f"{INDENT}pass")
        return "\n".join(out_lines)


class SurrogateClassBuilder:
    """Builds the surrogate class for one TypeScript class or interface.

    Args:
        class_name: The TypeScript name. The surrogate is named after its
            sanitized form, with an `Expr` suffix.
        type_parameters: Names of the type's type parameters.
        inherited_names: Attribute names that surrogates inherit. Methods
            without parameters that reuse one of these names are marked as
            intentional overrides.
    """

    def __init__(
        self,
        class_name: str,
        type_parameters: Tuple[str, ...] = (),
        inherited_names: Optional[AbstractSet[str]] = None,
    ) -> None:
        self.class_name = class_name
        self.type_parameters = tuple(type_parameters)
        self.inherited_names = (
            _default_inherited_names() if inherited_names is None else inherited_names
        )
        self.mapper = TypeMapper(self.type_parameters)
        self.properties: List[PropertyDescriptor] = []
        self.methods: List[MethodDescriptor] = []

    def with_property(self, descriptor: PropertyDescriptor) -> SurrogateClassBuilder:
        self.properties.append(descriptor)
        return self

    def with_method(self, descriptor: MethodDescriptor) -> SurrogateClassBuilder:
        self.methods.append(descriptor)
        return self

    def with_member(self, descriptor: MemberDescriptor) -> SurrogateClassBuilder:
        if isinstance(descriptor, PropertyDescriptor):
            return self.with_property(descriptor)
        return self.with_method(descriptor)

    def build(self) -> str:
        bases = [EXPR]
        if self.type_parameters:
            bases.append(f"Generic[{', '.join(self.type_parameters)}]")

        out_lines = [
            f"class {surrogate_class_name(self.class_name)}({', '.join(bases)}):",
            f"{INDENT}def __init__(self, expression: Expr) -> None:",
            f"{INDENT * 2}super().__init__(expression)",
        ]
        for prop in self.properties:
            out_lines.extend(self._build_property(prop))

        # Overloads share one Python name.
        methods_by_name: Dict[str, List[MethodDescriptor]] = {}
        for method in self.methods:
            methods_by_name.setdefault(sanitize_identifier(method.name), []).append(
                method
            )
        for name, methods in methods_by_name.items():
            if len(methods) == 1:
                out_lines.extend(self._build_method(name, methods[0]))
            else:
                out_lines.extend(self._build_overloads(name, methods))
        return "\n".join(out_lines)

    def _build_property(self, prop: PropertyDescriptor) -> List[str]:
        name = sanitize_identifier(prop.name)
        access = f"self[{_string_literal(prop.name)}]"
        return [
            "",
            f"{INDENT}@property",
            f"{INDENT}def {name}(self) -> {self.mapper.type_name(prop.type)}:",
            f"{INDENT * 2}return {self.mapper.wrap(prop.type, access)}",
        ]

    def _method_mapper(self, method: MethodDescriptor) -> TypeMapper:
        """A method's own type parameters shadow the class's."""
        if not set(method.type_parameters) & set(self.type_parameters):
            return self.mapper
        return TypeMapper(
            [p for p in self.type_parameters if p not in method.type_parameters]
        )

    def _signature(self, name: str, method: MethodDescriptor) -> Tuple[str, str]:
        """The `def` line, without a trailing colon, and the return value."""
        mapper = self._method_mapper(method)
        parameters = [
            (sanitize_identifier(p.name, for_parameter=True), mapper.type_name(p.type))
            for p in method.parameters
        ]
        signature = ", ".join(["self"] + [f"{p}: {t}" for p, t in parameters])
        return_type = mapper.type_name(method.return_type)
        call = (
            f"self[{_string_literal(method.name)}]"
            f".call({', '.join(p for p, _ in parameters)})"
        )
        body = call if return_type == EXPR else mapper.wrap(method.return_type, call)
        return f"def {name}({signature}) -> {return_type}", body

    def _override_marker(self, name: str, method: MethodDescriptor) -> str:
        if not method.parameters and name in self.inherited_names:
            return "  # type: ignore[override]"
        return ""

    def _build_method(self, name: str, method: MethodDescriptor) -> List[str]:
        definition, body = self._signature(name, method)
        return [
            "",
            f"{INDENT}{definition}:{self._override_marker(name, method)}",
            f"{INDENT * 2}return {body}",
        ]

    def _build_overloads(self, name: str, methods: List[MethodDescriptor]) -> List[str]:
        """Emit `@overload` stubs plus one implementation that dispatches on
        the argument count. The first overload taking that many arguments
        wins, as in TypeScript's overload resolution."""
        out_lines = []
        for method in methods:
            definition, _ = self._signature(name, method)
            out_lines.extend(
                [
                    "",
                    f"{INDENT}@overload",
                    f"{INDENT}{definition}: ...{self._override_marker(name, method)}",
                ]
            )

        marker = (
            "  # type: ignore[override]" if name in self.inherited_names else ""
        )
        out_lines.extend(["", f"{INDENT}def {name}(self, *args: Any) -> Any:{marker}"])
        seen_arities: Set[int] = set()
        for method in methods:
            arity = len(method.parameters)
            if arity in seen_arities:
                continue
            seen_arities.add(arity)
            mapper = self._method_mapper(method)
            call = f"self[{_string_literal(method.name)}].call(*args)"
            out_lines.extend(
                [
                    f"{INDENT * 2}if len(args) == {arity}:",
                    f"{INDENT * 3}return {mapper.wrap(method.return_type, call)}",
                ]
            )
        call = f"self[{_string_literal(methods[0].name)}].call(*args)"
        out_lines.append(f"{INDENT * 2}return {call}")
        return out_lines


_HEADER_LINES = [
    "# AUTOMATICALLY GENERATED expression surrogates, from TypeScript declarations.",
    "# This file should not be manually modified.",
    "# ruff: noqa",
    "# pyright: basic",
    "",
    "from __future__ import annotations",
    "",
    "from enum import auto",
    "from typing import Any, Generic, TypeVar, overload",
    "",
    "from jsexpr import (",
    "    ArrayExpr,",
    "    BooleanExpr,",
    "    DateExpr,",
    "    ElementExpr,",
    "    Expr,",
    "    NumberExpr,",
    "    ScriptEnum,",
    "    StringExpr,",
    "    generated_code,",
    ")",
]


class SurrogateFileBuilder:
    """Accumulates surrogates into one Python module.

    Args:
        base_namespace: Recorded on every generated type; namespaced types
            are recorded as `<base_namespace>.<module path>`.
        tool_name: Name recorded by the `generated_code` decorator.
        tool_version: Version recorded by the `generated_code` decorator.
        inherited_names: Forwarded to each `SurrogateClassBuilder`.
    """

    def __init__(
        self,
        base_namespace: str,
        tool_name: str,
        tool_version: str,
        inherited_names: Optional[AbstractSet[str]] = None,
    ) -> None:
        self.base_namespace = base_namespace
        self.tool_name = tool_name
        self.tool_version = tool_version
        self.inherited_names = inherited_names
        self.out_lines = list(_HEADER_LINES)
        self.declared_type_variables: Set[str] = set()

    def with_enum(self, descriptor: EnumDescriptor) -> SurrogateFileBuilder:
        builder = EnumBuilder(descriptor.name)
        for member in descriptor.members:
            builder.with_name_value(member.name, member.value)
        self._append_type(descriptor.module_name, (), builder.build())
        return self

    def with_class(self, descriptor: TypeDescriptor) -> SurrogateFileBuilder:
        builder = SurrogateClassBuilder(
            descriptor.name, descriptor.type_parameters, self.inherited_names
        )
        for member in descriptor.members:
            builder.with_member(member)
        self._append_type(
            descriptor.module_name, descriptor.type_parameters, builder.build()
        )
        return self

    def _append_type(
        self,
        module_name: Optional[str],
        type_parameters: Tuple[str, ...],
        type_definition: str,
    ) -> None:
        namespace = self.base_namespace
        if module_name:
            namespace += "." + module_name

        self.out_lines.extend(["", "", f"# namespace {namespace}"])
        for type_parameter in type_parameters:
            if type_parameter not in self.declared_type_variables:
                self.declared_type_variables.add(type_parameter)
                self.out_lines.append(
                    f"{type_parameter} = TypeVar({_string_literal(type_parameter)},"
                    " bound=Expr)"
                )

        arguments = [
            _string_literal(self.tool_name),
            _string_literal(self.tool_version),
            f"namespace={_string_literal(self.base_namespace)}",
        ]
        if module_name:
            arguments.append(f"module={_string_literal(module_name)}")
        self.out_lines.append(f"@generated_code({', '.join(arguments)})")
        self.out_lines.append(type_definition)

    def build(self) -> str:
        return "\n".join(self.out_lines) + "\n"
