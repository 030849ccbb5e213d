"""
Chicken customizer.

The pack kind (bulk, family, regular, individual) decides which option
groups are shown; it is re-derived whenever the variant changes, and a
variant change drops the white meat tier and all options before the new
pack's default sides are applied.
"""

import logging

from ..cart.models import ConfiguredCartItem, ModifierGroup, ModifierSelection
from ..catalog.models import ItemFamily, Modifier
from ..pricing.breakdown import PriceBreakdown
from ..pricing.chicken import (
    EXTRA_CRISPY,
    ChickenKind,
    available_options,
    chicken_warnings,
    classify_chicken,
    default_sides,
    price_chicken,
    tier_warnings,
    white_meat_category,
)
from .base import Customizer

logger = logging.getLogger(__name__)


class ChickenCustomizer(Customizer):
    family = ItemFamily.CHICKEN

    def __init__(self, item, source, existing: ConfiguredCartItem | None = None):
        super().__init__(item, source, existing)
        self.modifiers: list[Modifier] = []
        self.tier_id: str | None = None
        self.selected_ids: list[str] = []

    @property
    def kind(self) -> ChickenKind:
        return classify_chicken(self.item, self.variant)

    def _load_reference_data(self) -> None:
        self.modifiers = self.source.get_modifiers("chicken")

    def options(self) -> dict[ModifierGroup, list[Modifier]]:
        """Option groups offered for the current pack."""
        return available_options(self.kind, self.variant, self.modifiers)

    def available_tiers(self) -> list[Modifier]:
        return self.options().get(ModifierGroup.WHITE_MEAT, [])

    def available_sides(self) -> list[Modifier]:
        return self.options().get(ModifierGroup.SIDE, [])

    def available_preparations(self) -> list[Modifier]:
        return self.options().get(ModifierGroup.PREPARATION, [])

    def available_condiments(self) -> list[Modifier]:
        return self.options().get(ModifierGroup.CONDIMENT, [])

    def _option(self, modifier_id: str) -> Modifier | None:
        for modifiers in self.options().values():
            for modifier in modifiers:
                if modifier.id == modifier_id:
                    return modifier
        return None

    # =========================================================================
    # Defaults and Rehydration
    # =========================================================================

    def _apply_defaults(self) -> None:
        super()._apply_defaults()
        self._reset_selections()

    def _reset_selections(self) -> None:
        self.tier_id = None
        self.selected_ids = [
            side.id for side in default_sides(self.kind, self.variant, self.available_sides())
        ]

    def _on_variant_changed(self) -> None:
        self._reset_selections()

    def _restore_modifier(self, selection: ModifierSelection) -> bool:
        if selection.option_id is not None:
            modifier = self._option(selection.option_id)
        else:
            # Older cart items only carry the modifier id and name
            modifier = self._option(selection.id) or next(
                (m for group in self.options().values() for m in group if m.name == selection.name),
                None,
            )
        if modifier is None:
            return False

        if modifier in self.available_tiers():
            self.tier_id = modifier.id
        elif modifier.id not in self.selected_ids:
            self.selected_ids.append(modifier.id)
        return True

    # =========================================================================
    # Editing
    # =========================================================================

    def select_tier(self, tier_id: str | None) -> None:
        """Choose a white meat tier, None for no tier."""
        self._check_open()
        if tier_id is not None and tier_id not in {t.id for t in self.available_tiers()}:
            raise ValueError(f"White meat tier {tier_id} is not offered for this pack")
        self.tier_id = tier_id

    def toggle(self, modifier_id: str) -> bool:
        """Select or deselect a side, preparation or condiment. Returns the new state."""
        self._check_open()
        modifier = self._option(modifier_id)
        if modifier is None or modifier in self.available_tiers():
            raise ValueError(f"Option {modifier_id} is not offered for this pack")
        if modifier_id in self.selected_ids:
            self.selected_ids.remove(modifier_id)
            return False
        self.selected_ids.append(modifier_id)
        return True

    def set_extra_crispy(self, enabled: bool) -> None:
        crispy = next(
            (p for p in self.available_preparations() if p.name.lower() == EXTRA_CRISPY), None
        )
        if crispy is None:
            raise ValueError(f"Extra crispy is not offered for {self.item.name}")
        if (crispy.id in self.selected_ids) != enabled:
            self.toggle(crispy.id)

    @property
    def extra_crispy(self) -> bool:
        return any(
            p.id in self.selected_ids and p.name.lower() == EXTRA_CRISPY
            for p in self.available_preparations()
        )

    # =========================================================================
    # Pricing and Validation
    # =========================================================================

    def _tier(self) -> Modifier | None:
        if self.tier_id is None:
            return None
        for modifier in self.modifiers:
            if modifier.id == self.tier_id:
                return modifier
        return None

    def breakdown(self) -> PriceBreakdown:
        selected = [m for m in (self._option(mid) for mid in self.selected_ids) if m is not None]
        breakdown = price_chicken(self.item, self.variant, self._tier(), selected)
        breakdown.warnings.extend(chicken_warnings(self.kind, breakdown.modifiers))
        breakdown.warnings.extend(tier_warnings(self.available_tiers()))
        return breakdown

    def _selection_errors(self) -> list[str]:
        errors = []
        kind = self.kind
        if kind == ChickenKind.INDIVIDUAL:
            errors.append(f"{self.item.name} is added without customization")

        tier = self._tier()
        if self.tier_id is not None and (
            tier is None or tier.category.lower() != white_meat_category(kind, self.variant)
        ):
            errors.append("White meat selection does not match the selected pack")

        if any(self._option(mid) is None for mid in self.selected_ids):
            errors.append("Some selections are not offered for the selected pack")
        return errors
