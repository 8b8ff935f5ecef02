""":mod:`jsexpr` composes JavaScript expressions from Python.

Expressions are immutable values wrapping a fragment of JavaScript source. They
are used by integration tests to build scripts that inspect or manipulate
client-side view models, and are the runtime that code generated by
:mod:`jsexpr.codegen` targets.
"""

from ._array import ArrayExpr as ArrayExpr
from ._expr import NULL as NULL
from ._expr import UNDEFINED as UNDEFINED
from ._expr import BooleanExpr as BooleanExpr
from ._expr import DateExpr as DateExpr
from ._expr import ElementExpr as ElementExpr
from ._expr import Expr as Expr
from ._expr import ExprLike as ExprLike
from ._expr import JsonSettings as JsonSettings
from ._expr import NullExpr as NullExpr
from ._expr import NumberExpr as NumberExpr
from ._expr import StringExpr as StringExpr
from ._expr import UndefinedExpr as UndefinedExpr
from ._expr import array as array
from ._expr import from_object as from_object
from ._expr import get_json_settings as get_json_settings
from ._expr import literal as literal
from ._expr import raw as raw
from ._expr import set_json_settings as set_json_settings
from ._expr import to_expr as to_expr
from ._generated import GeneratedCode as GeneratedCode
from ._generated import Namespace as Namespace
from ._generated import ScriptEnum as ScriptEnum
from ._generated import generated_code as generated_code

__version__ = "0.1.0"
