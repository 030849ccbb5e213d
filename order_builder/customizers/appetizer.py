"""
Appetizer customizer: a variant (wing counts, basket sizes) plus condiment
and preparation toggles from the menu service.
"""

from ..cart.models import ConfiguredCartItem, ModifierSelection
from ..catalog.models import ItemFamily, Modifier
from ..pricing.appetizer import option_categories, price_appetizer
from ..pricing.breakdown import PriceBreakdown
from .base import Customizer


class AppetizerCustomizer(Customizer):
    family = ItemFamily.APPETIZER

    def __init__(self, item, source, existing: ConfiguredCartItem | None = None):
        super().__init__(item, source, existing)
        self.options: list[Modifier] = []
        self.selected_ids: list[str] = []

    def _load_reference_data(self) -> None:
        categories = option_categories(self.item)
        self.options = [m for m in self.source.get_modifiers() if m.category.lower() in categories]

    def _option(self, modifier_id: str) -> Modifier | None:
        return next((m for m in self.options if m.id == modifier_id), None)

    def _restore_modifier(self, selection: ModifierSelection) -> bool:
        modifier = self._option(selection.option_id or selection.id) or next(
            (m for m in self.options if m.name == selection.name), None
        )
        if modifier is None:
            return False
        if modifier.id not in self.selected_ids:
            self.selected_ids.append(modifier.id)
        return True

    def toggle(self, modifier_id: str) -> bool:
        self._check_open()
        if self._option(modifier_id) is None:
            raise ValueError(f"Option {modifier_id} is not offered for {self.item.name}")
        if modifier_id in self.selected_ids:
            self.selected_ids.remove(modifier_id)
            return False
        self.selected_ids.append(modifier_id)
        return True

    def breakdown(self) -> PriceBreakdown:
        selected = [m for m in self.options if m.id in self.selected_ids]
        return price_appetizer(self.item, self.variant, selected)
