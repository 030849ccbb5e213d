"""
Customizer Base
===============

A customizer holds the in-progress selections for one item instance while
the order taker configures it. Exactly one customizer is open at a time
(see navigation.MenuNavigator); it is the only writer of its own state.

Lifecycle:
----------
1. **Open**: constructed with the menu item, a reference data source and,
   in edit mode, the cart item being edited.
2. **Load**: load() fetches toppings/modifiers. While loading, or after a
   failed load, completion is blocked; retry_load() tries again.
3. **Initialize**: once loaded, state is rehydrated from the existing cart
   item, or defaults are applied for a new item. Never both, never before
   the load finished.
4. **Edit**: family specific setters change selections; price and
   validation_errors() are recomputed on every call.
5. **Complete / Close**: complete() runs the normalizer and returns the cart
   item, then closes. close() alone abandons the state.

Rehydration:
------------
Cart items carry structured selections (group, option id, tier). Items
written before that was the case only have display names; subclasses map
those back through their own name -> id tables.
"""

import logging

from ..cart.models import ConfiguredCartItem, ModifierSelection
from ..cart.normalizer import normalize_cart_item
from ..catalog.client import CatalogSource
from ..catalog.models import ItemFamily, MenuItem, Variant
from ..exceptions import CatalogLoadError, CustomizationIncomplete
from ..pricing.breakdown import PriceBreakdown

logger = logging.getLogger(__name__)


class Customizer:
    """Common state and lifecycle for all item customizers."""

    family: ItemFamily = ItemFamily.GENERIC

    def __init__(
        self,
        item: MenuItem,
        source: CatalogSource,
        existing: ConfiguredCartItem | None = None,
    ):
        if existing is not None and existing.menu_item_id != item.id:
            raise ValueError(
                f"Cart item {existing.id} is a {existing.menu_item_name}, not a {item.name}"
            )
        self.item = item
        self.source = source
        self.existing = existing
        self.variant: Variant | None = None
        self.special_instructions: str = existing.special_instructions if existing else ""
        self.loading = False
        self.loaded = False
        self.load_error: str | None = None
        self.closed = False

    @property
    def is_editing(self) -> bool:
        return self.existing is not None

    # =========================================================================
    # Loading
    # =========================================================================

    def load(self) -> bool:
        """
        Fetch reference data and initialize selections.

        Returns:
            True on success. On failure load_error is set and completion
            stays blocked until retry_load() succeeds.
        """
        if self.closed:
            return False

        self.loading = True
        self.load_error = None
        try:
            self._load_reference_data()
        except CatalogLoadError as e:
            logger.warning("Could not load options for %s: %s", self.item.name, e)
            self.load_error = str(e)
            return False
        finally:
            self.loading = False

        first_load = not self.loaded
        self.loaded = True
        if first_load:
            if self.existing is not None:
                self._rehydrate(self.existing)
            else:
                self._apply_defaults()
        return True

    def retry_load(self) -> bool:
        return self.load()

    def _load_reference_data(self) -> None:
        """Fetch whatever the family needs. Raise CatalogLoadError on failure."""

    def _apply_defaults(self) -> None:
        self.variant = self.item.default_variant()

    def _rehydrate(self, existing: ConfiguredCartItem) -> None:
        self.variant = self.item.get_variant(existing.variant_id) or self.item.default_variant()
        for selection in existing.selected_modifiers:
            if not self._restore_modifier(selection):
                logger.warning(
                    "Dropping unrecognized selection '%s' while editing %s",
                    selection.name, self.item.name,
                )

    def _restore_modifier(self, selection: ModifierSelection) -> bool:
        """Apply one stored selection to the state. Return False if unrecognized."""
        return False

    # =========================================================================
    # Editing
    # =========================================================================

    def _check_open(self) -> None:
        if self.closed:
            raise RuntimeError(f"Customizer for {self.item.name} is closed")

    def select_variant(self, variant_id: str) -> None:
        """Choose a variant. A different variant resets tier and option state."""
        self._check_open()
        variant = self.item.get_variant(variant_id)
        if variant is None:
            raise ValueError(f"{self.item.name} has no variant {variant_id}")
        if self.variant is not None and variant.id == self.variant.id:
            return
        self.variant = variant
        self._on_variant_changed()

    def _on_variant_changed(self) -> None:
        """Reset family state that depends on the variant."""

    def set_special_instructions(self, text: str | None) -> None:
        self._check_open()
        self.special_instructions = text or ""

    # =========================================================================
    # Pricing and Validation
    # =========================================================================

    def breakdown(self) -> PriceBreakdown:
        raise NotImplementedError

    @property
    def price(self) -> float:
        return self.breakdown().total

    @property
    def warnings(self) -> list[str]:
        return list(self.breakdown().warnings)

    def validation_errors(self) -> list[str]:
        """Human readable reasons completion is blocked. Empty when it is not."""
        if self.closed:
            return ["This customizer has been closed"]
        if self.loading:
            return ["Menu options are still loading"]
        if self.load_error:
            return [f"Menu options could not be loaded: {self.load_error}"]
        if not self.loaded:
            return ["Menu options have not been loaded"]

        errors = []
        if self.item.variants and self.variant is None:
            errors.append(f"Select a size for the {self.item.name}")
        errors.extend(self._selection_errors())
        return errors

    def _selection_errors(self) -> list[str]:
        return []

    @property
    def can_complete(self) -> bool:
        return not self.validation_errors()

    def complete(self) -> ConfiguredCartItem:
        """
        Produce the cart item and close.

        Raises:
            CustomizationIncomplete: with the same reasons validation_errors()
                reports; all entered state is kept
        """
        errors = self.validation_errors()
        if errors:
            raise CustomizationIncomplete(errors)

        cart_item = normalize_cart_item(
            self.item,
            self.variant,
            self.breakdown(),
            special_instructions=self.special_instructions,
            existing=self.existing,
        )
        self.close()
        return cart_item

    def close(self) -> None:
        self.closed = True
