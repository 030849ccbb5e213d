"""
Pydantic models for cart records.

A ConfiguredCartItem is the one canonical output of every customizer and of
the direct add path. Selections are stored structurally (group, option id,
tier) so a customizer can be reopened on the item without parsing display
names. Display names are derived from that structure when a selection is
built.
"""

import uuid
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from ..catalog.models import ItemFamily, ToppingAmount
from ..pricing.tiers import Placement


def new_cart_item_id() -> str:
    """Mint a unique cart item id."""
    return f"cart-{uuid.uuid4().hex}"


class ModifierGroup(str, Enum):
    """What kind of choice a ModifierSelection records."""
    STYLE = "style"
    BREAD = "bread"
    DELUXE = "deluxe"
    INGREDIENT = "ingredient"
    SIDE_SAUCE = "side_sauce"
    PREPARATION = "preparation"
    WHITE_MEAT = "white_meat"
    SIDE = "side"
    CONDIMENT = "condiment"
    MODIFIER = "modifier"


class ToppingSelection(BaseModel):
    """A topping on one configured pizza, with its computed price."""

    topping_id: str
    name: str
    amount: ToppingAmount
    price: float = 0.0
    is_default: bool = False
    category: str = "other"
    placement: Placement = Placement.WHOLE

    @model_validator(mode="after")
    def _none_is_free(self) -> "ToppingSelection":
        if self.amount == ToppingAmount.NONE and self.price != 0:
            raise ValueError(f"Topping '{self.name}' has amount none but price {self.price}")
        return self


class ModifierSelection(BaseModel):
    """
    A binary selection (sides, condiments, styles, ingredient tiers, ...).

    id and name are what the hosting UI and older cart items know about.
    group/option_id/tier carry the structure used to reopen the item; they
    are None on cart items created before structured selections existed.
    """

    id: str
    name: str
    price_adjustment: float = 0.0  # May be negative
    group: ModifierGroup = ModifierGroup.MODIFIER
    option_id: str | None = None
    tier: str | None = None


class ConfiguredCartItem(BaseModel):
    """One line of the cart."""

    id: str = Field(default_factory=new_cart_item_id)
    menu_item_id: str
    menu_item_name: str
    variant_id: str | None = None
    variant_name: str | None = None
    family: ItemFamily = ItemFamily.GENERIC
    quantity: int = Field(default=1, ge=1)
    base_price: float
    selected_toppings: list[ToppingSelection] = Field(default_factory=list)
    selected_modifiers: list[ModifierSelection] = Field(default_factory=list)
    special_instructions: str = ""
    total_price: float = Field(ge=0)
    display_name: str

    @field_validator("special_instructions", mode="before")
    @classmethod
    def _coerce_instructions(cls, value):
        return "" if value is None else value

    @property
    def toppings_total(self) -> float:
        return sum(t.price for t in self.selected_toppings)

    @property
    def modifiers_total(self) -> float:
        return sum(m.price_adjustment for m in self.selected_modifiers)

    @property
    def line_total(self) -> float:
        """Unit price times quantity."""
        return round(self.total_price * self.quantity, 2)

    def modifiers_in(self, group: ModifierGroup) -> list[ModifierSelection]:
        return [m for m in self.selected_modifiers if m.group == group]


class OrderSummary(BaseModel):
    """Running totals shown next to the cart."""

    order_type: Literal["pickup", "delivery", "dine_in"] = "pickup"
    item_count: int = 0
    line_count: int = 0
    subtotal: float = 0.0
    tax: float = 0.0
    delivery_fee: float = 0.0
    total: float = 0.0
