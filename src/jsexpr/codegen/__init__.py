"""Generates Python surrogates for TypeScript classes, interfaces and enums.

Each surrogate wraps an :class:`jsexpr.Expr` and exposes the TypeScript
members as typed properties and methods, so that test code can compose
expressions like `vm.Items[0].Name` with the same structure as the client
code it inspects.
"""

from ._builders import EnumBuilder as EnumBuilder
from ._builders import EnumDescriptor as EnumDescriptor
from ._builders import EnumMemberDescriptor as EnumMemberDescriptor
from ._builders import MethodDescriptor as MethodDescriptor
from ._builders import ParameterDescriptor as ParameterDescriptor
from ._builders import PropertyDescriptor as PropertyDescriptor
from ._builders import SurrogateClassBuilder as SurrogateClassBuilder
from ._builders import SurrogateFileBuilder as SurrogateFileBuilder
from ._builders import TypeDescriptor as TypeDescriptor
from ._checker import Program as Program
from ._checker import TypeChecker as TypeChecker
from ._checker import TypeFlags as TypeFlags
from ._checker import TypeInfo as TypeInfo
from ._checker import create_program as create_program
from ._cli import GeneratorConfig as GeneratorConfig
from ._errors import GeneratorError as GeneratorError
from ._errors import InputDiscoveryError as InputDiscoveryError
from ._errors import InvalidIdentifierError as InvalidIdentifierError
from ._errors import MalformedEnumInitializerError as MalformedEnumInitializerError
from ._errors import TypeScriptSyntaxError as TypeScriptSyntaxError
from ._parser import parse_source as parse_source
from ._sanitize import sanitize_identifier as sanitize_identifier
from ._traverse import SourceTraverser as SourceTraverser
from ._traverse import filter_source_paths as filter_source_paths
from ._traverse import generate_surrogates as generate_surrogates
from ._type_mapper import TypeMapper as TypeMapper
