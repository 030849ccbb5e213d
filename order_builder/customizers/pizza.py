"""
Pizza customizer.

State is a (size, crust) variant, a topping id -> amount map, optional
half/quarter placements for add-ons and a set of binary pizza options.
Specialty defaults start at their default amount; a default that is missing
from a reopened cart item was removed and comes back as amount none.

When a PriceCalculationClient is given, specialty pizzas are priced by the
menu service. Selection changes are submitted to a PriceRequestTracker and
the hosting UI calls poll() on its tick; complete() flushes any request
still waiting for its quiet period. A failed calculation falls back to the
local rule, is reported in price_error and blocks completion until the
selection changes or a retry succeeds.
"""

import logging

from .. import config
from ..cart.models import ConfiguredCartItem, ModifierSelection
from ..catalog.client import CatalogSource
from ..catalog.models import ItemFamily, MenuItem, Modifier, Topping, ToppingAmount
from ..exceptions import PriceCalculationError
from ..pricing.breakdown import PriceBreakdown
from ..pricing.pizza import default_sauce, estimated_prep_minutes, price_pizza
from ..pricing.remote import (
    PriceCalculationClient,
    PriceQuote,
    PriceRequest,
    PriceRequestTracker,
    pricing_fingerprint,
)
from ..pricing.tiers import Placement, PricingMode
from .base import Customizer

logger = logging.getLogger(__name__)

STUFFED_CRUST = "stuffed"
PRICE_MISMATCH_TOLERANCE = 0.01


class PizzaCustomizer(Customizer):
    family = ItemFamily.PIZZA

    def __init__(
        self,
        item: MenuItem,
        source: CatalogSource,
        existing: ConfiguredCartItem | None = None,
        price_client: PriceCalculationClient | None = None,
        tracker: PriceRequestTracker | None = None,
        mode: PricingMode | None = None,
        restaurant_id: str | None = None,
    ):
        super().__init__(item, source, existing)
        self.mode = PricingMode(mode or config.PIZZA_PRICING_MODE)
        self.price_client = price_client
        self.tracker = tracker or PriceRequestTracker()
        self.restaurant_id = restaurant_id or config.RESTAURANT_ID

        self.toppings: dict[str, Topping] = {}
        self.available_modifiers: list[Modifier] = []
        self.amounts: dict[str, ToppingAmount] = {}
        self.placements: dict[str, Placement] = {}
        self.selected_modifier_ids: list[str] = []

        self.remote_quote: tuple[tuple, PriceQuote] | None = None
        self.price_error: str | None = None
        self._failing_fingerprint: tuple | None = None

    # =========================================================================
    # Loading and Initialization
    # =========================================================================

    def _load_reference_data(self) -> None:
        toppings = self.source.get_toppings()
        self.toppings = {t.id: t for t in toppings if "pizza" in t.applies_to}
        self.available_modifiers = self.source.get_modifiers("pizza")

    def _default_amounts(self) -> dict[str, ToppingAmount]:
        amounts = {d.topping_id: d.amount for d in self.item.default_toppings}
        if not self.item.is_specialty:
            sauce = default_sauce(self.toppings.values())
            if sauce is not None:
                amounts[sauce.id] = ToppingAmount.NORMAL
        return amounts

    def _apply_defaults(self) -> None:
        super()._apply_defaults()
        self.amounts = self._default_amounts()
        self._schedule_price()

    def _rehydrate(self, existing: ConfiguredCartItem) -> None:
        # Defaults not on the cart item were taken off
        self.amounts = {topping_id: ToppingAmount.NONE for topping_id in self.item.default_topping_ids}
        for selection in existing.selected_toppings:
            self.amounts[selection.topping_id] = selection.amount
            if selection.placement != Placement.WHOLE:
                self.placements[selection.topping_id] = selection.placement
        super()._rehydrate(existing)
        self._schedule_price()

    def _restore_modifier(self, selection: ModifierSelection) -> bool:
        modifier_id = selection.option_id
        if modifier_id is None:
            modifier_id = next(
                (m.id for m in self.available_modifiers if m.name == selection.name),
                selection.id if self._modifier(selection.id) else None,
            )
        if modifier_id is None or self._modifier(modifier_id) is None:
            return False
        if modifier_id not in self.selected_modifier_ids:
            self.selected_modifier_ids.append(modifier_id)
        return True

    def _on_variant_changed(self) -> None:
        self.amounts = self._default_amounts()
        self.placements = {}
        self._schedule_price()

    def _modifier(self, modifier_id: str) -> Modifier | None:
        for modifier in self.available_modifiers:
            if modifier.id == modifier_id:
                return modifier
        return None

    # =========================================================================
    # Editing
    # =========================================================================

    def select_size(self, size_code: str) -> None:
        crust = self.variant.crust_code if self.variant else None
        variant = self.item.find_variant(size_code, crust)
        if variant is None:
            variant = next((v for v in self.item.variants if v.size_code == size_code), None)
        if variant is None:
            raise ValueError(f"{self.item.name} is not available in size {size_code}")
        self.select_variant(variant.id)

    def select_crust(self, crust_code: str) -> None:
        size = self.variant.size_code if self.variant else None
        variant = self.item.find_variant(size, crust_code)
        if variant is None:
            raise ValueError(f"{self.item.name} has no {crust_code} crust in size {size}")
        self.select_variant(variant.id)

    def set_topping(
        self,
        topping_id: str,
        amount: ToppingAmount | str,
        placement: Placement | str | None = None,
    ) -> None:
        self._check_open()
        if topping_id not in self.toppings and topping_id not in self.item.default_topping_ids:
            raise ValueError(f"Unknown topping {topping_id}")
        self.amounts[topping_id] = ToppingAmount(amount)
        if placement is not None:
            self.placements[topping_id] = Placement(placement)
        self._schedule_price()

    def remove_topping(self, topping_id: str) -> None:
        self.set_topping(topping_id, ToppingAmount.NONE)

    def toggle_modifier(self, modifier_id: str) -> bool:
        """Select or deselect a binary pizza option. Returns the new state."""
        self._check_open()
        if self._modifier(modifier_id) is None:
            raise ValueError(f"Unknown pizza option {modifier_id}")
        if modifier_id in self.selected_modifier_ids:
            self.selected_modifier_ids.remove(modifier_id)
            return False
        self.selected_modifier_ids.append(modifier_id)
        return True

    @property
    def active_topping_count(self) -> int:
        return sum(1 for amount in self.amounts.values() if amount != ToppingAmount.NONE)

    @property
    def estimated_prep_minutes(self) -> float:
        return estimated_prep_minutes(self.active_topping_count)

    # =========================================================================
    # Remote Pricing
    # =========================================================================

    def fingerprint(self) -> tuple:
        size = self.variant.size_code if self.variant else None
        crust = self.variant.crust_code if self.variant else None
        return pricing_fingerprint(size, crust, self.amounts)

    @property
    def uses_remote_pricing(self) -> bool:
        return (
            self.price_client is not None
            and self.item.is_specialty
            and self.variant is not None
            and (self.variant.crust_code or "").lower() != STUFFED_CRUST
        )

    def _schedule_price(self, force: bool = False) -> None:
        if not self.loaded or not self.uses_remote_pricing:
            return
        payload = {
            "restaurant_id": self.restaurant_id,
            "menu_item_id": self.item.id,
            "size_code": self.variant.size_code,
            "crust_type": self.variant.crust_code,
            "toppings": [
                (topping_id, amount.value)
                for topping_id, amount in self.amounts.items()
                if amount != ToppingAmount.NONE
            ],
            "defaults": self.item.default_topping_ids,
        }
        self.tracker.submit(self.fingerprint(), payload, force=force)

    def poll(self, now: float | None = None) -> bool:
        """Issue and resolve a price request whose quiet period is over."""
        request = self.tracker.due(now)
        if request is None:
            return False
        self._resolve(request)
        return True

    def refresh_price(self) -> bool:
        """Issue the pending price request now, or retry the current selection."""
        request = self.tracker.flush()
        if request is None and self._failing_fingerprint == self.fingerprint():
            self._schedule_price(force=True)
            request = self.tracker.flush()
        if request is None:
            return False
        self._resolve(request)
        return True

    def _resolve(self, request: PriceRequest) -> None:
        try:
            quote = self.price_client.calculate(**request.payload)
        except PriceCalculationError as e:
            if self.tracker.accept(request):
                logger.warning("Using local price for %s: %s", self.item.name, e)
                self.price_error = str(e)
                self._failing_fingerprint = request.fingerprint
            return

        if not self.tracker.accept(request):
            return
        self.remote_quote = (request.fingerprint, quote)
        self.price_error = None
        self._failing_fingerprint = None

        local = self._local_breakdown()
        expected = round(quote.final_price + local.modifiers_total, 2)
        if abs(local.total - expected) > PRICE_MISMATCH_TOLERANCE:
            logger.warning(
                "Price for %s differs: local $%.2f, menu service $%.2f",
                self.item.name, local.total, expected,
            )

    # =========================================================================
    # Pricing and Validation
    # =========================================================================

    def _selected_modifiers(self) -> list[Modifier]:
        return [m for m in (self._modifier(mid) for mid in self.selected_modifier_ids) if m]

    def _local_breakdown(self) -> PriceBreakdown:
        return price_pizza(
            self.item,
            self.variant,
            self.amounts,
            self.toppings,
            modifiers=self._selected_modifiers(),
            placements=self.placements,
            mode=self.mode,
        )

    def breakdown(self) -> PriceBreakdown:
        breakdown = self._local_breakdown()
        if self.remote_quote is None or not self.uses_remote_pricing:
            return breakdown

        fingerprint, quote = self.remote_quote
        if fingerprint != self.fingerprint():
            return breakdown

        remote_prices = quote.topping_prices()
        breakdown.base_price = round(quote.base_price + quote.crust_upcharge, 2)
        breakdown.toppings = [
            t.model_copy(update={"price": remote_prices[t.name]}) if t.name in remote_prices else t
            for t in breakdown.toppings
        ]
        breakdown.warnings.extend(quote.warnings)
        return breakdown

    def _selection_errors(self) -> list[str]:
        errors = []
        if self.variant is not None and not self.variant.allows_xxtra:
            for topping_id, amount in self.amounts.items():
                if amount == ToppingAmount.XXTRA:
                    topping = self.toppings.get(topping_id)
                    name = topping.name if topping else topping_id
                    errors.append(f"{name} cannot be ordered xxtra on a {self.variant.name}")
        if self.price_error and self._failing_fingerprint == self.fingerprint():
            errors.append(f"Price could not be calculated: {self.price_error}")
        return errors

    def complete(self) -> ConfiguredCartItem:
        if self.uses_remote_pricing and self.tracker.has_pending:
            request = self.tracker.flush()
            if request is not None:
                self._resolve(request)
        return super().complete()

    def close(self) -> None:
        self.tracker.cancel()
        super().close()
