"""
The cart: an ordered collection of configured cart items for one ordering
session. Only completion, quantity changes and removal mutate it.
"""

import logging
from typing import Any, Iterator

from pydantic import ValidationError

from .. import config
from ..exceptions import CartItemNotFound, NormalizationError
from .models import ConfiguredCartItem, OrderSummary
from .normalizer import validate_cart_item

logger = logging.getLogger(__name__)

# Fields the hosting UI may change without reopening a customizer
UPDATABLE_FIELDS = {"quantity", "special_instructions"}


class Cart:
    """Ordered list of ConfiguredCartItem, keyed by cart item id."""

    def __init__(self, items: list[ConfiguredCartItem] | None = None):
        self._items: list[ConfiguredCartItem] = list(items or [])

    def __iter__(self) -> Iterator[ConfiguredCartItem]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: str) -> bool:
        return self._index_of(item_id) is not None

    @property
    def items(self) -> list[ConfiguredCartItem]:
        return list(self._items)

    def _index_of(self, item_id: str) -> int | None:
        for index, item in enumerate(self._items):
            if item.id == item_id:
                return index
        return None

    def get_item(self, item_id: str) -> ConfiguredCartItem:
        index = self._index_of(item_id)
        if index is None:
            raise CartItemNotFound(item_id)
        return self._items[index]

    def add_item(self, item: ConfiguredCartItem) -> ConfiguredCartItem:
        """
        Add a cart item. An item whose id is already in the cart replaces the
        existing entry in place, which is how edited items come back.

        Raises:
            NormalizationError: the item breaks the cart item contract
        """
        validate_cart_item(item)
        index = self._index_of(item.id)
        if index is None:
            self._items.append(item)
            logger.info("Added %s to cart ($%.2f)", item.display_name, item.total_price)
        else:
            self._items[index] = item
            logger.info("Updated %s in cart ($%.2f)", item.display_name, item.total_price)
        return item

    def update_item(self, item_id: str, partial: dict[str, Any]) -> ConfiguredCartItem | None:
        """
        Apply a partial update to a cart item.

        Only quantity and special instructions can change this way. A quantity
        of zero or less removes the item.

        Returns:
            The updated item, or None if it was removed

        Raises:
            CartItemNotFound: unknown id
            NormalizationError: unsupported fields
        """
        index = self._index_of(item_id)
        if index is None:
            raise CartItemNotFound(item_id)

        unknown = set(partial) - UPDATABLE_FIELDS
        if unknown:
            raise NormalizationError(f"Cannot update cart item fields: {', '.join(sorted(unknown))}")

        quantity = partial.get("quantity")
        if quantity is not None:
            if isinstance(quantity, bool) or not isinstance(quantity, int):
                raise NormalizationError(f"Quantity must be a whole number, got {quantity!r}")
            if quantity <= 0:
                self.remove_item(item_id)
                return None

        update = {key: value for key, value in partial.items() if value is not None}
        if "special_instructions" in partial and partial["special_instructions"] is None:
            update["special_instructions"] = ""

        try:
            updated = ConfiguredCartItem.model_validate({**self._items[index].model_dump(), **update})
        except ValidationError as e:
            raise NormalizationError(f"Invalid update for cart item {item_id}: {e}") from e
        updated = validate_cart_item(updated)
        self._items[index] = updated
        return updated

    def remove_item(self, item_id: str) -> ConfiguredCartItem:
        index = self._index_of(item_id)
        if index is None:
            raise CartItemNotFound(item_id)
        item = self._items.pop(index)
        logger.info("Removed %s from cart", item.display_name)
        return item

    def clear(self) -> None:
        self._items.clear()

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self._items)

    @property
    def subtotal(self) -> float:
        return round(sum(item.line_total for item in self._items), 2)

    def summary(self, order_type: str = "pickup") -> OrderSummary:
        """Subtotal, flat tax, flat delivery fee and total for the order."""
        subtotal = self.subtotal
        tax = round(subtotal * config.TAX_RATE, 2)
        delivery_fee = config.DELIVERY_FEE if order_type == "delivery" and self._items else 0.0
        return OrderSummary(
            order_type=order_type,
            item_count=self.item_count,
            line_count=len(self._items),
            subtotal=subtotal,
            tax=tax,
            delivery_fee=delivery_fee,
            total=round(subtotal + tax + delivery_fee, 2),
        )
