"""Expressions for calls made through the lodash/underscore global (`_`).

Helpers that return items or arrays of items reuse the input array's
`create_item`, so typed arrays stay typed."""

from __future__ import annotations

from typing import Callable, Optional, TypeVar

from ._array import ArrayExpr
from ._expr import BooleanExpr, Expr, ExprLike, NumberExpr, raw

T = TypeVar("T", bound=Expr)

_ = raw("_")


def find(array: ArrayExpr[T], criteria: ExprLike) -> T:
    return array.wrap_item(_["find"].call(array, criteria))


def find_where(array: ArrayExpr[T], properties: ExprLike) -> T:
    return array.wrap_item(_["findWhere"].call(array, properties))


def find_last(array: ArrayExpr[T], criteria: ExprLike) -> T:
    return array.wrap_item(_["findLast"].call(array, criteria))


def find_index(array: ArrayExpr, criteria: ExprLike) -> NumberExpr:
    return NumberExpr(_["findIndex"].call(array, criteria))


def any_(array: ArrayExpr, criteria: ExprLike) -> BooleanExpr:
    return _["any"].call(array, criteria).as_(BooleanExpr)


def map_(
    array: ArrayExpr,
    selector: ExprLike,
    create_item: Optional[Callable[[Expr], T]] = None,
) -> ArrayExpr[T]:
    """`_.map(array, selector)`, optionally typing the resulting items."""
    return _["map"].call(array, selector).as_array(create_item)  # type: ignore


def where(array: ArrayExpr[T], properties: ExprLike) -> ArrayExpr[T]:
    return ArrayExpr(_["where"].call(array, properties), array.create_item)


def reject(array: ArrayExpr[T], properties: ExprLike) -> ArrayExpr[T]:
    return ArrayExpr(_["reject"].call(array, properties), array.create_item)
