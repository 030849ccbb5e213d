"""
Pizza Pricing Rule
==================

Turns a pizza variant plus topping amounts into a PriceBreakdown.

Pricing Rules:
--------------
1. **Base**: the variant price for the chosen (size, crust) pair. A crust
   upcharge, when the variant carries one, is its own breakdown line and is
   folded into the cart item's base price.

2. **Specialty defaults**: toppings listed in the item's default toppings
   are included in the price. They cost nothing up to the normal amount;
   extra costs half the topping price and xxtra the full topping price.

3. **Add-ons**: every other topping follows the amount schedule
   light 0.75x, normal 1.0x, extra 1.5x, xxtra 2.0x (xxtra only on variants
   that allow it). Add-ons on half or a quarter of the pizza are charged
   the matching fraction.

4. **Size scaling (deprecated)**: in PricingMode.SIZE_SCALED add-on prices
   are also multiplied by the size table. Medium scales by 1.0, so both
   modes agree at medium. Defaults are never size scaled.

5. **Modifiers**: binary options (Well Done, Extra Sauce, ...) add their
   price adjustment, which may be negative.

The total is floored at zero and rounded to cents.

Usage:
------
    breakdown = price_pizza(item, variant, {"pepperoni": ToppingAmount.NORMAL}, toppings_by_id)
    breakdown.total  # 14.0 for a $12 medium with $2 pepperoni
"""

import logging
from typing import Iterable, Mapping

from ..cart.models import ModifierGroup, ModifierSelection, ToppingSelection
from ..catalog.models import MenuItem, Modifier, Topping, ToppingAmount, Variant
from .breakdown import PriceBreakdown
from .tiers import (
    ADDON_MULTIPLIERS,
    DEFAULT_UPGRADE_MULTIPLIERS,
    Placement,
    PricingMode,
    size_multiplier,
)

logger = logging.getLogger(__name__)

BASE_PREP_MINUTES = 15
PREP_MINUTES_PER_TOPPING = 1.5
MAX_TOPPING_PREP_MINUTES = 10

SAUCE_CATEGORIES = ("sauce", "sauces", "topping_sauce")


def topping_price(
    topping: Topping,
    amount: ToppingAmount,
    is_default: bool,
    size_code: str | None = None,
    mode: PricingMode = PricingMode.FLAT,
    placement: Placement = Placement.WHOLE,
) -> float:
    """
    Price of one topping at one amount.

    Args:
        topping: Topping reference data (base_price is the normal amount price)
        amount: Chosen amount
        is_default: Whether the topping is one of the item's specialty defaults
        size_code: Variant size, only used in size-scaled mode
        mode: Pricing mode for add-ons
        placement: Portion of the pizza an add-on covers

    Returns:
        Price rounded to cents, 0 for amount none
    """
    if amount == ToppingAmount.NONE:
        return 0.0

    if is_default:
        return round(topping.base_price * DEFAULT_UPGRADE_MULTIPLIERS[amount], 2)

    price = topping.base_price * ADDON_MULTIPLIERS[amount] * placement.fraction
    if mode == PricingMode.SIZE_SCALED:
        price *= size_multiplier(size_code)
    return round(price, 2)


def _fallback_topping(topping_id: str) -> Topping:
    # Default toppings missing from the reference data are priced as free
    return Topping(id=topping_id, name=topping_id.replace("_", " ").title())


def price_pizza(
    item: MenuItem,
    variant: Variant | None,
    amounts: Mapping[str, ToppingAmount],
    toppings: Mapping[str, Topping],
    modifiers: Iterable[Modifier] = (),
    placements: Mapping[str, Placement] | None = None,
    mode: PricingMode = PricingMode.FLAT,
) -> PriceBreakdown:
    """
    Price a configured pizza.

    Args:
        item: The pizza menu item
        variant: Chosen variant, or None for pizzas sold without variants
        amounts: Topping id -> amount. Missing ids count as none.
        toppings: Topping id -> reference data
        modifiers: Selected binary pizza options
        placements: Topping id -> placement, whole when missing
        mode: Add-on pricing mode

    Returns:
        PriceBreakdown with one ToppingSelection per active topping
    """
    placements = placements or {}
    defaults = set(item.default_topping_ids)
    size_code = variant.size_code if variant else None

    base = variant.price if variant else item.base_price
    crust_upcharge = variant.crust_upcharge if variant else 0.0
    breakdown = PriceBreakdown(base_price=round(base + crust_upcharge, 2), floor_at_zero=True)
    breakdown.add_line(variant.name if variant else item.name, base, "base", variant.id if variant else item.id)
    if crust_upcharge:
        breakdown.add_line(f"{variant.crust_code or 'Crust'} crust", crust_upcharge, "crust", variant.id)

    for topping_id, amount in amounts.items():
        amount = ToppingAmount(amount)
        if amount == ToppingAmount.NONE:
            continue

        topping = toppings.get(topping_id)
        if topping is None:
            if topping_id not in defaults:
                logger.warning("Unknown topping '%s' on %s, skipping", topping_id, item.name)
                continue
            topping = _fallback_topping(topping_id)

        is_default = topping_id in defaults
        placement = Placement.WHOLE if is_default else placements.get(topping_id, Placement.WHOLE)
        price = topping_price(topping, amount, is_default, size_code, mode, placement)

        breakdown.toppings.append(ToppingSelection(
            topping_id=topping.id,
            name=topping.name,
            amount=amount,
            price=price,
            is_default=is_default,
            category=topping.category,
            placement=placement,
        ))
        label = topping.name if amount == ToppingAmount.NORMAL else f"{topping.name} ({amount.value})"
        breakdown.add_line(label, price, "topping", topping.id)

    for modifier in modifiers:
        breakdown.modifiers.append(ModifierSelection(
            id=modifier.id,
            name=modifier.name,
            price_adjustment=modifier.price_adjustment,
            group=ModifierGroup.MODIFIER,
            option_id=modifier.id,
        ))
        breakdown.add_line(modifier.name, modifier.price_adjustment, "modifier", modifier.id)

    breakdown.warnings.extend(pizza_warnings(breakdown.toppings, toppings.values()))
    return breakdown


def price_pizza_defaults(
    item: MenuItem,
    variant: Variant | None,
    toppings: Mapping[str, Topping],
    mode: PricingMode = PricingMode.FLAT,
) -> PriceBreakdown:
    """Price a pizza exactly as the menu defines it (specialty defaults only)."""
    amounts = {d.topping_id: d.amount for d in item.default_toppings}
    return price_pizza(item, variant, amounts, toppings, mode=mode)


def is_sauce(topping: Topping) -> bool:
    return topping.category.lower() in SAUCE_CATEGORIES


def default_sauce(toppings: Iterable[Topping]) -> Topping | None:
    """The sauce preselected on build-your-own pizzas: marinara or a red sauce."""
    for topping in toppings:
        name = topping.name.lower()
        if is_sauce(topping) and ("marinara" in name or "red" in name):
            return topping
    return None


def pizza_warnings(selected: list[ToppingSelection], available: Iterable[Topping]) -> list[str]:
    """Non-blocking hints for the order taker."""
    warnings = []
    if not selected:
        warnings.append("Consider adding some toppings")
    sauce_ids = {t.id for t in available if is_sauce(t)}
    if sauce_ids and not any(s.topping_id in sauce_ids for s in selected):
        warnings.append("Consider selecting a sauce")
    return warnings


def estimated_prep_minutes(topping_count: int) -> float:
    """Kitchen estimate: base time plus a little per topping, capped."""
    return BASE_PREP_MINUTES + min(topping_count * PREP_MINUTES_PER_TOPPING, MAX_TOPPING_PREP_MINUTES)
