"""
Cart package: cart records, the normalizer and the cart collection.
"""

from .cart import Cart
from .models import (
    ConfiguredCartItem,
    ModifierGroup,
    ModifierSelection,
    OrderSummary,
    ToppingSelection,
)
from .normalizer import normalize_cart_item

__all__ = [
    "Cart",
    "ConfiguredCartItem",
    "ModifierGroup",
    "ModifierSelection",
    "OrderSummary",
    "ToppingSelection",
    "normalize_cart_item",
]
