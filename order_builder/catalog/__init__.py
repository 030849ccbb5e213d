"""
Catalog package: menu models, family classification and the menu service client.
"""

from .classifier import resolve_family
from .client import CatalogSource, MenuClient, StaticCatalogSource, parse_catalog
from .models import (
    Catalog,
    DefaultTopping,
    ItemFamily,
    MenuCategory,
    MenuItem,
    Modifier,
    Topping,
    ToppingAmount,
    Variant,
)

__all__ = [
    "Catalog",
    "CatalogSource",
    "DefaultTopping",
    "ItemFamily",
    "MenuCategory",
    "MenuClient",
    "MenuItem",
    "Modifier",
    "StaticCatalogSource",
    "Topping",
    "ToppingAmount",
    "Variant",
    "parse_catalog",
    "resolve_family",
]
