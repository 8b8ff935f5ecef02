"""Expressions for calls made through the jQuery global (`$`).

For methods on a jQuery *object* (the result of `$("...")`), see
:class:`JQueryExpr`."""

from __future__ import annotations

from ._array import ArrayExpr
from ._expr import ElementExpr, Expr, ExprLike, raw


class JQueryExpr(ArrayExpr[ElementExpr]):
    """A jQuery object: an array of elements with helpers that apply to all of
    them.

    As you find the need to call jQuery methods that aren't here yet, please
    add them to this class."""

    def __init__(self, expression: ExprLike) -> None:
        super().__init__(expression, ElementExpr)

    def prop(self, property_name: ExprLike) -> Expr:
        """Call `.prop(...)` on the jQuery object.

            find(".submit-button").prop("disabled")  # $(".submit-button").prop("disabled")
        """
        return self["prop"].call(property_name)


def find(selector: ExprLike) -> JQueryExpr:
    """Equivalent to calling `$(selector)`.

    Args:
        selector: Which elements to query for. Usually a literal string, like
            `".submit-button"`.
    """
    return JQueryExpr(raw("$").call(selector))
