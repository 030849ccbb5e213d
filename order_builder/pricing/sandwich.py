"""
Sandwich Pricing Rule
=====================

Sandwich options are fixed house rules rather than menu service data:

- **Style**: Italian Beef, Italian Sausage and Combo must be prepared with
  red sauce, natural gravy or dry. No price effect, but required.
- **Bread**: plain by default; Danwich and Chicken Parm come on garlic
  bread. Garlic bread costs $0.50 only when it is not the sandwich's
  default.
- **Deluxe**: adds fries for a flat $2.00.
- **Ingredients**: each with its own tier (standard 1x, extra 2x,
  XXL extra 3x, on the side 1x) over the ingredient price.
- **Side sauces**: $0.30 each, tiered standard/extra/XXL extra at 1/2/3x.
- **Preparations**: free toggles (cut in half, toasted, ...).

Final price = base + bread upcharge + deluxe + ingredients + side sauces,
rounded to cents.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Mapping

from .. import config
from ..cart.models import ModifierGroup, ModifierSelection
from ..catalog.models import MenuItem, Variant
from .breakdown import PriceBreakdown
from .tiers import TIER_BY_LABEL, IngredientTier, SideSauceTier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SandwichOption:
    id: str
    name: str
    price: float = 0.0
    tiered: bool = True
    standard_label: str | None = None  # Display name when only the standard tier exists


SANDWICHES_WITH_STYLE = ("Italian Beef", "Italian Sausage", "Combo")
GARLIC_BREAD_DEFAULTS = ("Danwich", "Chicken Parm")

STYLES: dict[str, SandwichOption] = {
    "red_sauce": SandwichOption("red_sauce", "Red Sauce"),
    "natural_gravy": SandwichOption("natural_gravy", "Natural Gravy"),
    "dry": SandwichOption("dry", "Dry (No Sauce)"),
}

BREADS: dict[str, SandwichOption] = {
    "plain": SandwichOption("plain", "Plain Bread", 0.0),
    "garlic": SandwichOption("garlic", "Garlic Bread", 0.50),
}

DELUXE = SandwichOption("deluxe", "Make it Deluxe (Add Fries)", 2.00)

INGREDIENTS: dict[str, SandwichOption] = {
    "mozzarella": SandwichOption("mozzarella", "Mozzarella", 1.00),
    "sweet_peppers": SandwichOption("sweet_peppers", "Sweet Peppers", 0.50),
    "hot_giardiniera": SandwichOption("hot_giardiniera", "Hot Giardiniera", 0.50),
    "juicy": SandwichOption("juicy", "Juicy (Extra Juice)", 0.0, tiered=False, standard_label="Add Juicy"),
    "onions": SandwichOption("onions", "Onions", 0.50),
    "mushrooms": SandwichOption("mushrooms", "Mushrooms", 0.50),
}

SIDE_SAUCES: dict[str, SandwichOption] = {
    "side_natural_gravy": SandwichOption("side_natural_gravy", "Side of Natural Gravy", 0.30),
    "side_red_sauce": SandwichOption("side_red_sauce", "Side of Red Sauce", 0.30),
    "side_wing_sauce": SandwichOption("side_wing_sauce", "Side of Wing Sauce", 0.30),
    "side_bbq_sauce": SandwichOption("side_bbq_sauce", "Side of BBQ Sauce", 0.30),
}

PREPARATIONS: dict[str, SandwichOption] = {
    "cut_in_half": SandwichOption("cut_in_half", "Cut in Half"),
    "well_done": SandwichOption("well_done", "Well Done"),
    "toasted": SandwichOption("toasted", "Toasted"),
    "cold": SandwichOption("cold", "Cold"),
    "do_not_cut": SandwichOption("do_not_cut", "Do Not Cut"),
    "cut_in_thirds": SandwichOption("cut_in_thirds", "Cut in Thirds"),
}

STYLE_PREFIX = "Prepared with "


def requires_style(item: MenuItem) -> bool:
    return item.name in SANDWICHES_WITH_STYLE


def default_bread(item: MenuItem) -> str:
    return "garlic" if item.name in GARLIC_BREAD_DEFAULTS else "plain"


def ingredient_tiers(ingredient_id: str) -> list[IngredientTier]:
    """Tiers an ingredient can be ordered at."""
    if not INGREDIENTS[ingredient_id].tiered:
        return [IngredientTier.STANDARD]
    return list(IngredientTier)


# =============================================================================
# Selection Builders
# =============================================================================

def _tier_name(option: SandwichOption, tier_label: str, is_standard: bool) -> str:
    if is_standard and option.standard_label:
        return option.standard_label
    return f"{option.name} ({tier_label})"


def style_selection(style_id: str) -> ModifierSelection:
    style = STYLES[style_id]
    return ModifierSelection(
        id=style.id,
        name=f"{STYLE_PREFIX}{style.name}",
        price_adjustment=style.price,
        group=ModifierGroup.STYLE,
        option_id=style.id,
    )


def bread_selection(bread_id: str) -> ModifierSelection:
    bread = BREADS[bread_id]
    return ModifierSelection(
        id=bread.id, name=bread.name, price_adjustment=bread.price,
        group=ModifierGroup.BREAD, option_id=bread.id,
    )


def deluxe_selection() -> ModifierSelection:
    return ModifierSelection(
        id=DELUXE.id, name=DELUXE.name, price_adjustment=DELUXE.price,
        group=ModifierGroup.DELUXE, option_id=DELUXE.id,
    )


def ingredient_selection(ingredient_id: str, tier: IngredientTier) -> ModifierSelection:
    ingredient = INGREDIENTS[ingredient_id]
    return ModifierSelection(
        id=f"{ingredient.id}_{tier.value}",
        name=_tier_name(ingredient, tier.label, tier == IngredientTier.STANDARD),
        price_adjustment=round(ingredient.price * tier.multiplier, 2),
        group=ModifierGroup.INGREDIENT,
        option_id=ingredient.id,
        tier=tier.value,
    )


def side_sauce_selection(sauce_id: str, tier: SideSauceTier) -> ModifierSelection:
    sauce = SIDE_SAUCES[sauce_id]
    return ModifierSelection(
        id=f"{sauce.id}_{tier.value}",
        name=_tier_name(sauce, tier.label, False),
        price_adjustment=round(sauce.price * tier.multiplier, 2),
        group=ModifierGroup.SIDE_SAUCE,
        option_id=sauce.id,
        tier=tier.value,
    )


def preparation_selection(prep_id: str) -> ModifierSelection:
    prep = PREPARATIONS[prep_id]
    return ModifierSelection(
        id=prep.id, name=prep.name, price_adjustment=prep.price,
        group=ModifierGroup.PREPARATION, option_id=prep.id,
    )


# =============================================================================
# Legacy Name Parsing
# =============================================================================

_TIERED_NAME = re.compile(r"^(.*?)\s*\((.*?)\)$")

_INGREDIENT_IDS = {option.name: option.id for option in INGREDIENTS.values()}
_INGREDIENT_IDS["Juicy"] = "juicy"
_SIDE_SAUCE_IDS = {option.name: option.id for option in SIDE_SAUCES.values()}
_PREPARATION_IDS = {option.name: option.id for option in PREPARATIONS.values()}
_BREAD_IDS = {option.name: option.id for option in BREADS.values()}
_STYLE_IDS = {option.name: option.id for option in STYLES.values()}


def parse_legacy_modifier(name: str) -> tuple[ModifierGroup, str, str | None] | None:
    """
    Recover (group, option id, tier) from a display name written by an older
    sandwich customizer, e.g. "Mozzarella (Extra)" -> (INGREDIENT, "mozzarella", "extra").

    Returns None for names this customizer never produces.
    """
    name = name.strip()

    if name.startswith(STYLE_PREFIX):
        style_id = _STYLE_IDS.get(name[len(STYLE_PREFIX):].strip())
        return (ModifierGroup.STYLE, style_id, None) if style_id else None
    if name in _BREAD_IDS:
        return ModifierGroup.BREAD, _BREAD_IDS[name], None
    if name == DELUXE.name:
        return ModifierGroup.DELUXE, DELUXE.id, None
    if name in _PREPARATION_IDS:
        return ModifierGroup.PREPARATION, _PREPARATION_IDS[name], None
    if name == INGREDIENTS["juicy"].standard_label:
        return ModifierGroup.INGREDIENT, "juicy", IngredientTier.STANDARD.value

    # "Juicy (Extra Juice)" is a full ingredient name, not name + tier
    if name in _INGREDIENT_IDS:
        return ModifierGroup.INGREDIENT, _INGREDIENT_IDS[name], IngredientTier.STANDARD.value

    match = _TIERED_NAME.match(name)
    if not match:
        return None
    base_name, tier_label = match.group(1).strip(), match.group(2).strip()
    tier = TIER_BY_LABEL.get(tier_label.lower())
    if tier is None:
        return None
    if base_name in _INGREDIENT_IDS:
        return ModifierGroup.INGREDIENT, _INGREDIENT_IDS[base_name], tier
    if base_name in _SIDE_SAUCE_IDS and tier in {t.value for t in SideSauceTier}:
        return ModifierGroup.SIDE_SAUCE, _SIDE_SAUCE_IDS[base_name], tier
    return None


# =============================================================================
# Pricing
# =============================================================================

def price_sandwich(
    item: MenuItem,
    variant: Variant | None = None,
    style: str | None = None,
    bread: str | None = None,
    deluxe: bool = False,
    ingredients: Mapping[str, IngredientTier] | None = None,
    side_sauces: Mapping[str, SideSauceTier] | None = None,
    preparations: Iterable[str] = (),
) -> PriceBreakdown:
    """
    Price a configured sandwich.

    Args:
        item: Sandwich menu item
        variant: Optional variant; the item base price is used without one
        style: Style id (red_sauce, natural_gravy, dry)
        bread: Bread id, the item's default bread when None
        deluxe: Whether fries were added
        ingredients: Ingredient id -> tier
        side_sauces: Side sauce id -> tier
        preparations: Preparation ids

    Returns:
        PriceBreakdown whose modifiers list is in display order
    """
    ingredients = ingredients or {}
    side_sauces = side_sauces or {}
    bread = bread or default_bread(item)
    base = variant.price if variant else item.base_price

    breakdown = PriceBreakdown(base_price=round(base, 2))
    breakdown.add_line(item.name, base, "base", item.id)

    selections: list[ModifierSelection] = []
    if style and requires_style(item):
        selections.append(style_selection(style))

    # Only a deviation from the default bread is recorded
    if bread != default_bread(item):
        selections.append(bread_selection(bread))

    if deluxe:
        selections.append(deluxe_selection())

    for ingredient_id, tier in ingredients.items():
        selections.append(ingredient_selection(ingredient_id, IngredientTier(tier)))

    for sauce_id, tier in side_sauces.items():
        selections.append(side_sauce_selection(sauce_id, SideSauceTier(tier)))

    for prep_id in preparations:
        selections.append(preparation_selection(prep_id))

    for selection in selections:
        breakdown.modifiers.append(selection)
        breakdown.add_line(selection.name, selection.price_adjustment, selection.group.value, selection.id)

    return breakdown


def sandwich_errors(
    item: MenuItem,
    style: str | None,
    ingredients: Mapping[str, IngredientTier],
    side_sauces: Mapping[str, SideSauceTier],
) -> list[str]:
    """Reasons a sandwich cannot be completed yet."""
    errors = []
    if requires_style(item) and not style:
        errors.append(f"Select a style for the {item.name}")
    if len(ingredients) > config.MAX_SANDWICH_INGREDIENTS:
        errors.append(f"Choose at most {config.MAX_SANDWICH_INGREDIENTS} ingredients")
    if len(side_sauces) > config.MAX_SIDE_SAUCES:
        errors.append(f"Choose at most {config.MAX_SIDE_SAUCES} side sauces")
    for ingredient_id, tier in ingredients.items():
        if IngredientTier(tier) not in ingredient_tiers(ingredient_id):
            errors.append(f"{INGREDIENTS[ingredient_id].name} is only available as standard")
    return errors
