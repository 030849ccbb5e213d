"""
Menu Navigation and Routing
===========================

The order taker moves through three screens:

    categories -> category items -> (customizer open)
         ^              |    ^              |
         +--- back -----+    +-- complete / cancel

Routing:
--------
Selecting an item routes on its ItemFamily (resolved when the catalog was
loaded, see catalog.classifier):

- pizza, sandwich, appetizer: open that family's customizer
- chicken: open the chicken customizer, except single pieces (breast,
  thigh, leg, wing) which are added directly
- generic (beverages, sides, desserts, unrecognized): added directly

Active Customizer:
------------------
The open customizer is a single tagged value: NoCustomizer or one of the
*CustomizerOpen records. Opening a customizer replaces the previous value
after closing it, so two customizers can never be open at once.

Usage:
------
    navigator = MenuNavigator(catalog, cart)
    navigator.select_category("pizza")
    navigator.select_item("cheese-pizza")
    navigator.customizer.set_topping("pepperoni", "normal")
    navigator.complete()
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Union

from . import config
from .cart.cart import Cart
from .cart.models import ConfiguredCartItem
from .cart.normalizer import normalize_cart_item
from .catalog.client import CatalogSource, StaticCatalogSource
from .catalog.models import Catalog, ItemFamily, MenuItem, Variant
from .customizers.appetizer import AppetizerCustomizer
from .customizers.base import Customizer
from .customizers.chicken import ChickenCustomizer
from .customizers.pizza import PizzaCustomizer
from .customizers.sandwich import SandwichCustomizer
from .pricing.chicken import ChickenKind, classify_chicken
from .pricing.generic import price_generic
from .pricing.pizza import price_pizza_defaults
from .pricing.remote import PriceCalculationClient, PriceRequestTracker

logger = logging.getLogger(__name__)


class View(str, Enum):
    CATEGORIES = "categories"
    CATEGORY_ITEMS = "category_items"


class Route(str, Enum):
    PIZZA = "pizza"
    CHICKEN = "chicken"
    SANDWICH = "sandwich"
    APPETIZER = "appetizer"
    DIRECT_ADD = "direct_add"


_FAMILY_ROUTES = {
    ItemFamily.PIZZA: Route.PIZZA,
    ItemFamily.CHICKEN: Route.CHICKEN,
    ItemFamily.SANDWICH: Route.SANDWICH,
    ItemFamily.APPETIZER: Route.APPETIZER,
}


def route_for(item: MenuItem, variant: Variant | None = None) -> Route:
    """Where selecting this item leads. Depends only on the item and variant."""
    route = _FAMILY_ROUTES.get(item.family, Route.DIRECT_ADD)
    if route == Route.CHICKEN:
        variant = variant or item.default_variant()
        if classify_chicken(item, variant) == ChickenKind.INDIVIDUAL:
            return Route.DIRECT_ADD
    return route


# =============================================================================
# Active Customizer States
# =============================================================================

@dataclass(frozen=True)
class NoCustomizer:
    pass


@dataclass(frozen=True)
class PizzaCustomizerOpen:
    customizer: PizzaCustomizer


@dataclass(frozen=True)
class ChickenCustomizerOpen:
    customizer: ChickenCustomizer


@dataclass(frozen=True)
class SandwichCustomizerOpen:
    customizer: SandwichCustomizer


@dataclass(frozen=True)
class AppetizerCustomizerOpen:
    customizer: AppetizerCustomizer


ActiveCustomizer = Union[
    NoCustomizer,
    PizzaCustomizerOpen,
    ChickenCustomizerOpen,
    SandwichCustomizerOpen,
    AppetizerCustomizerOpen,
]

NO_CUSTOMIZER = NoCustomizer()


class MenuNavigator:
    """
    Screen state and customizer lifecycle for one ordering session.

    Args:
        catalog: The session's menu snapshot
        cart: Cart that completed items go into
        source: Reference data source for customizers (the catalog itself by default)
        price_client: Enables remote pricing for specialty pizzas. Built from
            config when REMOTE_PIZZA_PRICING is set and none is passed.
        clock: Clock for price request debouncing
    """

    def __init__(
        self,
        catalog: Catalog,
        cart: Cart,
        source: CatalogSource | None = None,
        price_client: PriceCalculationClient | None = None,
        clock: Callable[[], float] | None = None,
    ):
        self.catalog = catalog
        self.cart = cart
        self.source = source or StaticCatalogSource(catalog)
        if price_client is None and config.REMOTE_PIZZA_PRICING:
            price_client = PriceCalculationClient()
        self.price_client = price_client
        self.clock = clock
        self.view = View.CATEGORIES
        self.category_id: str | None = None
        self.active: ActiveCustomizer = NO_CUSTOMIZER

    # =========================================================================
    # Screens
    # =========================================================================

    def categories(self):
        return self.catalog.sorted_categories()

    def items(self) -> list[MenuItem]:
        if self.category_id is None:
            return []
        return self.catalog.items_in_category(self.category_id)

    def select_category(self, category_id: str) -> None:
        if not any(c.id == category_id for c in self.catalog.categories):
            raise ValueError(f"Unknown category {category_id}")
        self._close_active()
        self.category_id = category_id
        self.view = View.CATEGORY_ITEMS

    def back_to_categories(self) -> None:
        self._close_active()
        self.category_id = None
        self.view = View.CATEGORIES

    # =========================================================================
    # Customizer Lifecycle
    # =========================================================================

    @property
    def customizer(self) -> Customizer | None:
        if isinstance(self.active, NoCustomizer):
            return None
        return self.active.customizer

    def _get_item(self, item_id: str) -> MenuItem:
        item = self.catalog.get_item(item_id)
        if item is None:
            raise ValueError(f"Unknown menu item {item_id}")
        return item

    def _close_active(self) -> None:
        customizer = self.customizer
        if customizer is not None:
            customizer.close()
            logger.debug("Closed %s customizer for %s", customizer.family.value, customizer.item.name)
        self.active = NO_CUSTOMIZER

    def _open(self, route: Route, item: MenuItem, existing: ConfiguredCartItem | None) -> Customizer:
        self._close_active()

        if route == Route.PIZZA:
            tracker = PriceRequestTracker(clock=self.clock) if self.clock else None
            customizer = PizzaCustomizer(
                item, self.source, existing,
                price_client=self.price_client,
                tracker=tracker,
                restaurant_id=self.catalog.restaurant_id,
            )
            self.active = PizzaCustomizerOpen(customizer)
        elif route == Route.CHICKEN:
            customizer = ChickenCustomizer(item, self.source, existing)
            self.active = ChickenCustomizerOpen(customizer)
        elif route == Route.SANDWICH:
            customizer = SandwichCustomizer(item, self.source, existing)
            self.active = SandwichCustomizerOpen(customizer)
        elif route == Route.APPETIZER:
            customizer = AppetizerCustomizer(item, self.source, existing)
            self.active = AppetizerCustomizerOpen(customizer)
        else:
            raise ValueError(f"No customizer for route {route}")

        if item.category is not None:
            self.category_id = item.category.id
        self.view = View.CATEGORY_ITEMS
        logger.info("Opened %s customizer for %s", route.value, item.name)
        customizer.load()
        return customizer

    def select_item(self, item_id: str, variant_id: str | None = None) -> Customizer | ConfiguredCartItem:
        """
        Select a menu item from the grid.

        Returns:
            The opened customizer, or the cart item for direct adds
        """
        item = self._get_item(item_id)
        variant = item.get_variant(variant_id) if variant_id else None
        if variant_id and variant is None:
            raise ValueError(f"{item.name} has no variant {variant_id}")
        route = route_for(item, variant)

        if route == Route.DIRECT_ADD:
            self._close_active()
            return self._direct_add(item, variant or item.default_variant())

        customizer = self._open(route, item, None)
        if variant is not None and customizer.loaded:
            customizer.select_variant(variant.id)
        return customizer

    def edit_cart_item(self, cart_item_id: str) -> Customizer:
        """Reopen the customizer for a cart item, with its selections restored."""
        existing = self.cart.get_item(cart_item_id)
        item = self._get_item(existing.menu_item_id)
        route = route_for(item, item.get_variant(existing.variant_id))
        if route == Route.DIRECT_ADD:
            raise ValueError(f"{item.name} has no options to edit")
        return self._open(route, item, existing)

    def complete(self) -> ConfiguredCartItem:
        """
        Complete the open customizer and put its item in the cart.

        Raises:
            CustomizationIncomplete: the customizer stays open with its state
        """
        customizer = self.customizer
        if customizer is None:
            raise RuntimeError("No customizer is open")
        cart_item = customizer.complete()
        self.cart.add_item(cart_item)
        self.active = NO_CUSTOMIZER
        return cart_item

    def cancel(self) -> None:
        """Close the open customizer without touching the cart."""
        self._close_active()

    # =========================================================================
    # Direct Adds
    # =========================================================================

    def _direct_add(self, item: MenuItem, variant: Variant | None) -> ConfiguredCartItem:
        cart_item = normalize_cart_item(item, variant, price_generic(item, variant))
        return self.cart.add_item(cart_item)

    def quick_add(self, item_id: str, variant_id: str | None = None) -> ConfiguredCartItem:
        """Add a pizza exactly as the menu defines it, without opening a customizer."""
        item = self._get_item(item_id)
        if item.family != ItemFamily.PIZZA:
            raise ValueError(f"Quick add is only available for pizzas, not {item.name}")
        variant = item.get_variant(variant_id) if variant_id else item.default_variant()
        if item.variants and variant is None:
            raise ValueError(f"{item.name} has no variant {variant_id}")

        toppings = {t.id: t for t in self.catalog.toppings_for("pizza")}
        breakdown = price_pizza_defaults(item, variant, toppings)
        self._close_active()
        cart_item = normalize_cart_item(item, variant, breakdown)
        return self.cart.add_item(cart_item)
