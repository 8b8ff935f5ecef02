"""Walks parsed TypeScript sources and feeds their declarations into the
surrogate builders."""

from __future__ import annotations

import re
import warnings
from pathlib import Path
from typing import List, Optional, Sequence, Union

from . import _ast as ast
from ._builders import (
    EnumDescriptor,
    EnumMemberDescriptor,
    MemberDescriptor,
    MethodDescriptor,
    ParameterDescriptor,
    PropertyDescriptor,
    SurrogateFileBuilder,
    TypeDescriptor,
)
from ._checker import Program, PropertyInfo, Signature, Symbol, create_program
from ._errors import MalformedEnumInitializerError
from ._sanitize import sanitize_identifier

TEST_SPEC_SUFFIX = "Specs.ts"

_DECIMAL_INTEGER = re.compile(r"[+-]?[0-9]+")

_PROPERTY_LIKE = (
    ast.PropertySignature,
    ast.PropertyDeclaration,
    ast.ParameterProperty,
    ast.GetAccessor,
    ast.SetAccessor,
)
_METHOD_LIKE = (ast.MethodSignature, ast.MethodDeclaration)


def filter_source_paths(
    paths: Sequence[Union[str, Path]], exclude_suffix: str = TEST_SPEC_SUFFIX
) -> List[Path]:
    """Drop test specs: files whose base name ends with `exclude_suffix`."""
    return [Path(p) for p in paths if not Path(p).name.endswith(exclude_suffix)]


def module_name_of(symbol: Symbol) -> Optional[str]:
    """The namespace path a symbol is exported from, as a dotted Python path,
    or None for unqualified symbols."""
    if symbol.parent is None:
        return None
    return ".".join(
        sanitize_identifier(part, for_parameter=True)
        for part in symbol.parent.full_name.split(".")
    )


def _method_descriptor(name: str, signature: Signature) -> MethodDescriptor:
    return MethodDescriptor(
        name=name,
        type_parameters=tuple(tp.name for tp in signature.type_parameters),
        parameters=tuple(
            ParameterDescriptor(p.name, p.type) for p in signature.parameters
        ),
        return_type=signature.return_type,
    )


class SourceTraverser:
    """Dispatches the class, interface and enum declarations of a program to
    a file builder."""

    def __init__(self, program: Program, file_builder: SurrogateFileBuilder) -> None:
        self.program = program
        self.checker = program.checker
        self.file_builder = file_builder

    def traverse(self) -> SurrogateFileBuilder:
        for source_file in self.program.source_files:
            for statement in source_file.statements:
                self.visit(statement)
        return self.file_builder

    def visit(self, statement: ast.Statement) -> None:
        if isinstance(statement, ast.ModuleDeclaration):
            for child in statement.body:
                self.visit(child)
        elif isinstance(statement, (ast.ClassDeclaration, ast.InterfaceDeclaration)):
            self.add_class(statement)
        elif isinstance(statement, ast.EnumDeclaration):
            self.add_enum(statement)

    def add_enum(self, declaration: ast.EnumDeclaration) -> None:
        symbol = self.checker.get_symbol_of_declaration(declaration)
        members = []
        for member in declaration.members:
            value = None
            if member.initializer is not None:
                text = member.initializer.strip()
                if _DECIMAL_INTEGER.fullmatch(text) is None:
                    raise MalformedEnumInitializerError(
                        declaration.name, member.name, text
                    )
                value = int(text)
            members.append(EnumMemberDescriptor(member.name, value))
        self.file_builder.with_enum(
            EnumDescriptor(declaration.name, tuple(members), module_name_of(symbol))
        )

    def add_class(
        self, declaration: Union[ast.ClassDeclaration, ast.InterfaceDeclaration]
    ) -> None:
        symbol = self.checker.get_symbol_of_declaration(declaration)
        type_info = self.checker.get_declared_type(symbol)

        members: List[MemberDescriptor] = []
        for prop in self.checker.get_augmented_properties(type_info):
            member = prop.value_declaration
            assert isinstance(member, ast.Member)
            if member.is_private_or_protected:
                continue
            if isinstance(member, _PROPERTY_LIKE):
                members.extend(self.property_like_members(prop))
            elif isinstance(member, _METHOD_LIKE):
                members.append(_method_descriptor(prop.name, prop.type.call_signatures[0]))
            else:
                warnings.warn(
                    f"Skipping {symbol.full_name}.{prop.name}: unsupported"
                    f" declaration kind {type(member).__name__}"
                )

        self.file_builder.with_class(
            TypeDescriptor(
                name=declaration.name,
                type_parameters=tuple(tp.name for tp in symbol.type_parameters),
                members=tuple(members),
                module_name=module_name_of(symbol),
            )
        )

    def property_like_members(self, prop: PropertyInfo) -> List[MemberDescriptor]:
        """A property whose type has call signatures is exposed as one method
        per signature; anything else is a plain property."""
        signatures = prop.type.call_signatures
        if signatures:
            return [_method_descriptor(prop.name, s) for s in signatures]
        return [PropertyDescriptor(prop.name, prop.type)]


def generate_surrogates(
    paths: Sequence[Union[str, Path]],
    base_namespace: str,
    tool_name: str,
    tool_version: str,
) -> str:
    """Generate the surrogate module for a set of TypeScript sources.

    `paths` are used as given; see `filter_source_paths()` for dropping test
    specs.

    Returns:
        The Python source of the generated module.

    Raises:
        GeneratorError: if a source can't be read or parsed, or contains a
            declaration that can't be translated.
    """
    program = create_program(paths)
    file_builder = SurrogateFileBuilder(base_namespace, tool_name, tool_version)
    SourceTraverser(program, file_builder).traverse()
    return file_builder.build()
