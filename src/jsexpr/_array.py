from __future__ import annotations

from typing import Callable, Generic, Optional, TypeVar

from typing_extensions import override

from ._expr import BooleanExpr, Expr, ExprLike, NumberExpr, raw

ItemT = TypeVar("ItemT", bound=Expr)


class ArrayExpr(Expr, Generic[ItemT]):
    """An expression representing a JavaScript array.

    `ArrayExpr(expr)` is the erased form, whose items are plain expressions.
    `ArrayExpr[T](expr, create_item)` additionally knows how to convert each
    item into a `T`; the conversion is applied lazily whenever an item is
    accessed by index."""

    def __init__(
        self,
        expression: ExprLike,
        create_item: Optional[Callable[[Expr], ItemT]] = None,
    ) -> None:
        super().__init__(expression)
        self._create_item = create_item

    @property
    def create_item(self) -> Optional[Callable[[Expr], ItemT]]:
        """The function that converts an ordinary expression into an item, or
        `None` for erased arrays."""
        return self._create_item

    def wrap_item(self, expression: Expr) -> ItemT:
        """Convert an expression into an item of this array."""
        if self._create_item is None:
            return expression  # type: ignore
        return self._create_item(expression)

    @override
    def __getitem__(self, key: ExprLike) -> ItemT:  # type: ignore[override]
        item = super().__getitem__(key)
        # Property access (`arr.length`, `arr["some key"]`) isn't an item.
        if isinstance(key, str):
            return item  # type: ignore
        return self.wrap_item(item)

    @property
    def length(self) -> NumberExpr:
        """This array's `length` property."""
        return NumberExpr(self["length"])

    @property
    def is_empty(self) -> BooleanExpr:
        return self.length.is_strictly_equal_to(0)

    def clear(self) -> Expr:
        """An expression which removes all values from this array when executed."""
        return self["splice"].call(0, self.length)

    def map(self, field: str) -> ArrayExpr[Expr]:
        """Pluck `field` from every item."""
        return ArrayExpr(
            self["map"].call(raw("function(i) {{ return i.{0};}}", field))
        )

    def push(self, expression: ExprLike) -> Expr:
        return self["push"].call(expression)

    def index_of(self, expression: ExprLike) -> NumberExpr:
        return NumberExpr(self["indexOf"].call(expression))
