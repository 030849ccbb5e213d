"""
Appetizer pricing rule.

Appetizers offer condiments and preparations from the menu service. Wing
items draw condiments from the wing category (dressings, extra sauce),
everything else from the general appetizer category. Price is the variant
(or item) price plus every selected option.
"""

from typing import Iterable

from ..cart.models import ModifierGroup, ModifierSelection
from ..catalog.models import MenuItem, Modifier, Variant
from .breakdown import PriceBreakdown

WING_CONDIMENT_CATEGORY = "wing_condiment"
APPETIZER_CONDIMENT_CATEGORY = "appetizer_condiment"
APPETIZER_PREPARATION_CATEGORY = "appetizer_preparation"


def condiment_category(item: MenuItem) -> str:
    if "wing" in item.name.lower():
        return WING_CONDIMENT_CATEGORY
    return APPETIZER_CONDIMENT_CATEGORY


def option_categories(item: MenuItem) -> dict[str, ModifierGroup]:
    return {
        condiment_category(item): ModifierGroup.CONDIMENT,
        APPETIZER_PREPARATION_CATEGORY: ModifierGroup.PREPARATION,
    }


def price_appetizer(
    item: MenuItem,
    variant: Variant | None,
    selected: Iterable[Modifier] = (),
) -> PriceBreakdown:
    categories = option_categories(item)
    base = variant.price if variant else item.base_price

    breakdown = PriceBreakdown(base_price=round(base, 2))
    breakdown.add_line(variant.name if variant else item.name, base, "base", variant.id if variant else item.id)

    for modifier in selected:
        group = categories.get(modifier.category.lower(), ModifierGroup.MODIFIER)
        breakdown.modifiers.append(ModifierSelection(
            id=modifier.id,
            name=modifier.name,
            price_adjustment=modifier.price_adjustment,
            group=group,
            option_id=modifier.id,
        ))
        breakdown.add_line(modifier.name, modifier.price_adjustment, group.value, modifier.id)

    return breakdown
