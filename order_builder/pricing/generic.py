"""
Direct add pricing: beverages, sides, desserts and single chicken pieces
are sold as listed, at the variant price or the item price.
"""

from ..catalog.models import MenuItem, Variant
from .breakdown import PriceBreakdown


def price_generic(item: MenuItem, variant: Variant | None = None) -> PriceBreakdown:
    base = variant.price if variant else item.base_price
    breakdown = PriceBreakdown(base_price=round(base, 2))
    breakdown.add_line(variant.name if variant else item.name, base, "base", variant.id if variant else item.id)
    return breakdown
