"""
Family classification for menu items.

The family decides which customizer opens and which pricing rule applies.
It is resolved once while the catalog is loaded; routing afterwards only
looks at MenuItem.family.
"""

import logging

from .models import ItemFamily

logger = logging.getLogger(__name__)


# Category names used by the menu service, lowercased
CATEGORY_FAMILIES: dict[str, ItemFamily] = {
    "pizza": ItemFamily.PIZZA,
    "pizzas": ItemFamily.PIZZA,
    "specialty pizzas": ItemFamily.PIZZA,
    "chicken": ItemFamily.CHICKEN,
    "broasted chicken": ItemFamily.CHICKEN,
    "sandwich": ItemFamily.SANDWICH,
    "sandwiches": ItemFamily.SANDWICH,
    "appetizer": ItemFamily.APPETIZER,
    "appetizers": ItemFamily.APPETIZER,
}


def resolve_family(family_tag: str | None, category_name: str | None) -> ItemFamily:
    """
    Resolve the customization family of a menu item.

    An explicit family tag from the menu service wins. Otherwise the category
    name is matched against the known category names. Anything unrecognized
    (beverages, sides, desserts) is generic and goes straight to the cart.

    Args:
        family_tag: Family/item type tag from the menu service, if any
        category_name: Display name of the item's category

    Returns:
        The resolved ItemFamily
    """
    if family_tag:
        tag = family_tag.strip().lower()
        try:
            return ItemFamily(tag)
        except ValueError:
            # Tags like "stuffed_pizza" or "chicken_family" still carry the family
            for family in ItemFamily:
                if family.value in tag:
                    return family
            logger.debug("Unknown family tag '%s', falling back to category", family_tag)

    if category_name:
        family = CATEGORY_FAMILIES.get(category_name.strip().lower())
        if family:
            return family

    return ItemFamily.GENERIC
