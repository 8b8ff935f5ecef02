from __future__ import annotations

from pathlib import Path
from typing import Union


class GeneratorError(Exception):
    """Base class for errors that stop surrogate generation."""


class InputDiscoveryError(GeneratorError):
    """Raised when the input files can't be located or read."""


class TypeScriptSyntaxError(GeneratorError):
    """Raised when a TypeScript source can't be parsed."""

    def __init__(self, message: str, path: Union[str, Path], line: int, column: int):
        self.message = message
        self.path = str(path)
        self.line = line
        self.column = column
        super().__init__(f"{self.path}:{line}:{column}: {message}")


class MalformedEnumInitializerError(GeneratorError):
    """Raised when an enum member's initializer isn't a decimal integer literal."""

    def __init__(self, enum_name: str, member_name: str, initializer: str):
        self.enum_name = enum_name
        self.member_name = member_name
        self.initializer = initializer
        super().__init__(
            f"Enum member {enum_name}.{member_name} has initializer {initializer!r};"
            " only decimal integer literals are supported"
        )


class InvalidIdentifierError(GeneratorError, ValueError):
    """Raised when a TypeScript name has no characters usable in a Python
    identifier."""
