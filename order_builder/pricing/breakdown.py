"""
Price breakdown returned by every pricing rule.

A breakdown carries the priced selections that end up on the cart item and
the itemized lines shown on the receipt preview. The total is always
computed from the components, never entered separately.
"""

from dataclasses import dataclass, field

from ..cart.models import ModifierSelection, ToppingSelection


@dataclass
class PriceLine:
    """One itemized line of a price breakdown."""
    name: str
    amount: float
    kind: str  # base, crust, topping, modifier, tier, ...
    ref_id: str | None = None


@dataclass
class PriceBreakdown:
    """Result of a pricing rule for one configured item."""
    base_price: float
    toppings: list[ToppingSelection] = field(default_factory=list)
    modifiers: list[ModifierSelection] = field(default_factory=list)
    lines: list[PriceLine] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    floor_at_zero: bool = False

    @property
    def toppings_total(self) -> float:
        return sum(t.price for t in self.toppings)

    @property
    def modifiers_total(self) -> float:
        return sum(m.price_adjustment for m in self.modifiers)

    @property
    def total(self) -> float:
        total = round(self.base_price + self.toppings_total + self.modifiers_total, 2)
        if self.floor_at_zero:
            total = max(0.0, total)
        return total

    def add_line(self, name: str, amount: float, kind: str, ref_id: str | None = None) -> None:
        self.lines.append(PriceLine(name=name, amount=round(amount, 2), kind=kind, ref_id=ref_id))

    def lines_of(self, kind: str) -> list[PriceLine]:
        return [line for line in self.lines if line.kind == kind]
