"""
Sandwich customizer.

Style, bread, deluxe, ingredients, side sauces and preparations are house
rules (pricing.sandwich). The menu service may add further sandwich
options, which are offered as plain binary modifiers.
"""

import logging

from ..cart.models import ConfiguredCartItem, ModifierGroup, ModifierSelection
from ..catalog.models import ItemFamily, Modifier
from ..pricing.breakdown import PriceBreakdown
from ..pricing.sandwich import (
    BREADS,
    INGREDIENTS,
    PREPARATIONS,
    SIDE_SAUCES,
    STYLES,
    default_bread,
    parse_legacy_modifier,
    price_sandwich,
    requires_style,
    sandwich_errors,
)
from ..pricing.tiers import IngredientTier, SideSauceTier
from .base import Customizer

logger = logging.getLogger(__name__)


class SandwichCustomizer(Customizer):
    family = ItemFamily.SANDWICH

    def __init__(self, item, source, existing: ConfiguredCartItem | None = None):
        super().__init__(item, source, existing)
        self.style: str | None = None
        self.bread: str = default_bread(item)
        self.deluxe = False
        self.ingredients: dict[str, IngredientTier] = {}
        self.side_sauces: dict[str, SideSauceTier] = {}
        self.preparations: list[str] = []
        self.extra_options: list[Modifier] = []
        self.selected_option_ids: list[str] = []

    @property
    def requires_style(self) -> bool:
        return requires_style(self.item)

    def _load_reference_data(self) -> None:
        self.extra_options = self.source.get_modifiers("sandwich")

    def _apply_defaults(self) -> None:
        super()._apply_defaults()
        self.bread = default_bread(self.item)

    def _on_variant_changed(self) -> None:
        self.ingredients = {}
        self.side_sauces = {}

    def _restore_modifier(self, selection: ModifierSelection) -> bool:
        if selection.option_id is not None and selection.group != ModifierGroup.MODIFIER:
            parsed = (selection.group, selection.option_id, selection.tier)
        else:
            parsed = parse_legacy_modifier(selection.name)

        if parsed is None:
            option_id = selection.option_id or selection.id
            if any(m.id == option_id for m in self.extra_options):
                self.selected_option_ids.append(option_id)
                return True
            return False

        group, option_id, tier = parsed
        if group == ModifierGroup.STYLE:
            self.style = option_id
        elif group == ModifierGroup.BREAD:
            self.bread = option_id
        elif group == ModifierGroup.DELUXE:
            self.deluxe = True
        elif group == ModifierGroup.INGREDIENT:
            self.ingredients[option_id] = IngredientTier(tier or IngredientTier.STANDARD)
        elif group == ModifierGroup.SIDE_SAUCE:
            self.side_sauces[option_id] = SideSauceTier(tier or SideSauceTier.STANDARD)
        elif group == ModifierGroup.PREPARATION:
            if option_id not in self.preparations:
                self.preparations.append(option_id)
        else:
            return False
        return True

    # =========================================================================
    # Editing
    # =========================================================================

    def select_style(self, style_id: str | None) -> None:
        self._check_open()
        if style_id is not None and style_id not in STYLES:
            raise ValueError(f"Unknown sandwich style {style_id}")
        self.style = style_id

    def select_bread(self, bread_id: str) -> None:
        self._check_open()
        if bread_id not in BREADS:
            raise ValueError(f"Unknown bread {bread_id}")
        self.bread = bread_id

    def set_deluxe(self, enabled: bool) -> None:
        self._check_open()
        self.deluxe = enabled

    def set_ingredient(self, ingredient_id: str, tier: IngredientTier | str | None) -> None:
        """Add an ingredient at a tier, change its tier, or remove it with None."""
        self._check_open()
        if ingredient_id not in INGREDIENTS:
            raise ValueError(f"Unknown ingredient {ingredient_id}")
        if tier is None:
            self.ingredients.pop(ingredient_id, None)
        else:
            self.ingredients[ingredient_id] = IngredientTier(tier)

    def set_side_sauce(self, sauce_id: str, tier: SideSauceTier | str | None) -> None:
        self._check_open()
        if sauce_id not in SIDE_SAUCES:
            raise ValueError(f"Unknown side sauce {sauce_id}")
        if tier is None:
            self.side_sauces.pop(sauce_id, None)
        else:
            self.side_sauces[sauce_id] = SideSauceTier(tier)

    def toggle_preparation(self, prep_id: str) -> bool:
        self._check_open()
        if prep_id not in PREPARATIONS:
            raise ValueError(f"Unknown preparation {prep_id}")
        if prep_id in self.preparations:
            self.preparations.remove(prep_id)
            return False
        self.preparations.append(prep_id)
        return True

    def toggle_option(self, modifier_id: str) -> bool:
        self._check_open()
        if not any(m.id == modifier_id for m in self.extra_options):
            raise ValueError(f"Unknown sandwich option {modifier_id}")
        if modifier_id in self.selected_option_ids:
            self.selected_option_ids.remove(modifier_id)
            return False
        self.selected_option_ids.append(modifier_id)
        return True

    # =========================================================================
    # Pricing and Validation
    # =========================================================================

    def breakdown(self) -> PriceBreakdown:
        breakdown = price_sandwich(
            self.item,
            self.variant,
            style=self.style,
            bread=self.bread,
            deluxe=self.deluxe,
            ingredients=self.ingredients,
            side_sauces=self.side_sauces,
            preparations=self.preparations,
        )
        for option in self.extra_options:
            if option.id in self.selected_option_ids:
                breakdown.modifiers.append(ModifierSelection(
                    id=option.id,
                    name=option.name,
                    price_adjustment=option.price_adjustment,
                    group=ModifierGroup.MODIFIER,
                    option_id=option.id,
                ))
                breakdown.add_line(option.name, option.price_adjustment, "modifier", option.id)
        return breakdown

    def _selection_errors(self) -> list[str]:
        return sandwich_errors(self.item, self.style, self.ingredients, self.side_sauces)
