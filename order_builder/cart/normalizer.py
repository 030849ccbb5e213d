"""
Cart item normalizer.

Every path into the cart (customizer completion, direct add, quick add)
goes through normalize_cart_item, which turns a priced configuration into
exactly one ConfiguredCartItem and enforces the cart item contract:

- total == round(base + toppings + modifiers, 2), floored at 0 for pizza
- total >= 0 and quantity >= 1
- editing keeps the existing id and quantity, new items get a fresh id
"""

import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from ..catalog.models import ItemFamily, MenuItem, Variant
from ..exceptions import NormalizationError
from .models import ConfiguredCartItem, new_cart_item_id

if TYPE_CHECKING:
    from ..pricing.breakdown import PriceBreakdown

logger = logging.getLogger(__name__)

PRICE_TOLERANCE = 0.005


def display_name(item: MenuItem, variant: Variant | None) -> str:
    """"<variant name> <item name>", or just the item name without a variant."""
    if variant is not None and variant.name:
        return f"{variant.name} {item.name}"
    return item.name


def expected_total(base_price: float, toppings_total: float, modifiers_total: float, floor_at_zero: bool) -> float:
    total = round(base_price + toppings_total + modifiers_total, 2)
    return max(0.0, total) if floor_at_zero else total


def validate_cart_item(cart_item: ConfiguredCartItem) -> ConfiguredCartItem:
    """
    Check a cart item built elsewhere (e.g. sent by the hosting UI) against
    the cart item contract.

    Raises:
        NormalizationError: quantity below 1, negative total or a total that
            disagrees with its components
    """
    if cart_item.quantity < 1:
        raise NormalizationError(f"Quantity must be at least 1, got {cart_item.quantity}")
    computed = expected_total(
        cart_item.base_price,
        cart_item.toppings_total,
        cart_item.modifiers_total,
        cart_item.family == ItemFamily.PIZZA,
    )
    if cart_item.total_price < 0 or abs(cart_item.total_price - computed) > PRICE_TOLERANCE:
        raise NormalizationError(
            f"Total {cart_item.total_price:.2f} for {cart_item.display_name} "
            f"does not match its components ({computed:.2f})"
        )
    return cart_item


def normalize_cart_item(
    item: MenuItem,
    variant: Variant | None,
    breakdown: "PriceBreakdown",
    special_instructions: str | None = "",
    existing: ConfiguredCartItem | None = None,
    quantity: int = 1,
) -> ConfiguredCartItem:
    """
    Build the canonical cart record for a priced configuration.

    Args:
        item: The configured menu item
        variant: Selected variant, None for variant-less items
        breakdown: Output of the family's pricing rule
        special_instructions: Free text for the kitchen, None is stored as ""
        existing: Cart item being edited, if any
        quantity: Quantity for new items (ignored when editing)

    Returns:
        ConfiguredCartItem

    Raises:
        NormalizationError: negative total, quantity below 1 or a total
            that disagrees with its components
    """
    quantity = existing.quantity if existing is not None else quantity
    if quantity < 1:
        raise NormalizationError(f"Quantity must be at least 1, got {quantity}")

    total = breakdown.total
    computed = expected_total(
        breakdown.base_price,
        sum(t.price for t in breakdown.toppings),
        sum(m.price_adjustment for m in breakdown.modifiers),
        breakdown.floor_at_zero,
    )
    if total < 0:
        raise NormalizationError(f"Negative total {total:.2f} for {item.name}")
    if abs(total - computed) > PRICE_TOLERANCE:
        raise NormalizationError(
            f"Total {total:.2f} for {item.name} does not match its components ({computed:.2f})"
        )

    try:
        cart_item = ConfiguredCartItem(
            id=existing.id if existing is not None else new_cart_item_id(),
            menu_item_id=item.id,
            menu_item_name=item.name,
            variant_id=variant.id if variant else None,
            variant_name=variant.name if variant else None,
            family=item.family,
            quantity=quantity,
            base_price=breakdown.base_price,
            selected_toppings=list(breakdown.toppings),
            selected_modifiers=list(breakdown.modifiers),
            special_instructions=special_instructions,
            total_price=total,
            display_name=display_name(item, variant),
        )
    except ValidationError as e:
        raise NormalizationError(f"Invalid cart item for {item.name}: {e}") from e

    logger.debug(
        "Normalized %s (%s) at $%.2f", cart_item.display_name, cart_item.id, cart_item.total_price
    )
    return cart_item
