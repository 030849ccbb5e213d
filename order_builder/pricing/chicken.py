"""
Chicken Pricing Rule
====================

Broasted chicken is sold in four kinds of pack, told apart by name and
price heuristics:

- **bulk**: "bulk" in the item name or a variant priced over $40. Only a
  preparation choice is offered ("Regular Cooking" is implied).
- **family_pack**: "family" in the item or variant name. White meat tier,
  sides (garlic bread and coleslaw by default, never potatoes),
  preparation and condiments.
- **regular_piece**: 8 PC, 12 PC, ... packs. Same options as family packs;
  the 8 piece pack defaults to its broasted potatoes side.
- **individual**: single breasts, thighs, legs and wings. No options, the
  item is added to the cart directly.

White meat tiers live in a modifier category keyed by piece count and pack
kind (chicken_white_meat_16pc_family, chicken_white_meat_8pc). Sides and the
"Extra Crispy" preparation are free; condiments carry their price.

Final price = variant price + tier price + sum of selected customizations.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from ..cart.models import ModifierGroup, ModifierSelection
from ..catalog.models import MenuItem, Modifier, Variant
from .breakdown import PriceBreakdown
from .tiers import WhiteMeatLevel, white_meat_level

logger = logging.getLogger(__name__)

BULK_PRICE_THRESHOLD = 40.0
DEFAULT_PIECE_COUNT = 8
INDIVIDUAL_PIECE_WORDS = ("breast", "thigh", "leg", "wing")

FAMILY_SIDES_CATEGORY = "chicken_family_sides"
REGULAR_SIDES_CATEGORY = "chicken_8pc_sides"
PREPARATION_CATEGORY = "chicken_preparation"
CONDIMENT_CATEGORY = "chicken_condiment"
REGULAR_COOKING = "regular cooking"
EXTRA_CRISPY = "extra crispy"

_PIECE_COUNT_PATTERN = re.compile(r"(\d+)\s*pc", re.IGNORECASE)


class ChickenKind(str, Enum):
    BULK = "bulk"
    FAMILY_PACK = "family_pack"
    REGULAR_PIECE = "regular_piece"
    INDIVIDUAL = "individual"


@dataclass(frozen=True)
class ChickenCapabilities:
    """Which option groups a chicken pack offers."""
    white_meat: bool
    sides: bool
    preparation: bool
    condiments: bool

    @property
    def direct_add(self) -> bool:
        return not (self.white_meat or self.sides or self.preparation or self.condiments)


_CAPABILITIES = {
    ChickenKind.BULK: ChickenCapabilities(white_meat=False, sides=False, preparation=True, condiments=False),
    ChickenKind.FAMILY_PACK: ChickenCapabilities(white_meat=True, sides=True, preparation=True, condiments=True),
    ChickenKind.REGULAR_PIECE: ChickenCapabilities(white_meat=True, sides=True, preparation=True, condiments=True),
    ChickenKind.INDIVIDUAL: ChickenCapabilities(white_meat=False, sides=False, preparation=False, condiments=False),
}


def classify_chicken(item: MenuItem, variant: Variant | None) -> ChickenKind:
    """Classify a chicken item/variant into its pack kind."""
    item_name = item.name.lower()
    variant_name = variant.name.lower() if variant else ""
    price = variant.price if variant else item.base_price

    if "bulk" in item_name or price > BULK_PRICE_THRESHOLD:
        return ChickenKind.BULK
    if "family" in item_name or "family" in variant_name:
        return ChickenKind.FAMILY_PACK
    if any(word in item_name for word in INDIVIDUAL_PIECE_WORDS):
        return ChickenKind.INDIVIDUAL
    return ChickenKind.REGULAR_PIECE


def chicken_capabilities(kind: ChickenKind) -> ChickenCapabilities:
    return _CAPABILITIES[kind]


def piece_count(variant: Variant | None) -> int:
    """Number of pieces in a pack, read from the variant name ("16pc Family" -> 16)."""
    if variant is None:
        return DEFAULT_PIECE_COUNT
    match = _PIECE_COUNT_PATTERN.search(variant.name)
    return int(match.group(1)) if match else DEFAULT_PIECE_COUNT


def white_meat_category(kind: ChickenKind, variant: Variant | None) -> str | None:
    """Modifier category holding the white meat tiers for this pack, if it has any."""
    if not chicken_capabilities(kind).white_meat:
        return None
    count = piece_count(variant)
    if kind == ChickenKind.FAMILY_PACK:
        return f"chicken_white_meat_{count}pc_family"
    return f"chicken_white_meat_{count}pc"


def sides_category(kind: ChickenKind) -> str | None:
    if not chicken_capabilities(kind).sides:
        return None
    return FAMILY_SIDES_CATEGORY if kind == ChickenKind.FAMILY_PACK else REGULAR_SIDES_CATEGORY


def option_categories(kind: ChickenKind, variant: Variant | None) -> dict[str, ModifierGroup]:
    """Modifier category -> selection group for everything this pack offers."""
    capabilities = chicken_capabilities(kind)
    categories: dict[str, ModifierGroup] = {}
    tier_category = white_meat_category(kind, variant)
    if tier_category:
        categories[tier_category] = ModifierGroup.WHITE_MEAT
    side_category = sides_category(kind)
    if side_category:
        categories[side_category] = ModifierGroup.SIDE
    if capabilities.preparation:
        categories[PREPARATION_CATEGORY] = ModifierGroup.PREPARATION
    if capabilities.condiments:
        categories[CONDIMENT_CATEGORY] = ModifierGroup.CONDIMENT
    return categories


def available_options(
    kind: ChickenKind,
    variant: Variant | None,
    modifiers: Iterable[Modifier],
) -> dict[ModifierGroup, list[Modifier]]:
    """Group the chicken modifiers this pack may use."""
    categories = option_categories(kind, variant)
    grouped: dict[ModifierGroup, list[Modifier]] = {group: [] for group in categories.values()}
    for modifier in modifiers:
        group = categories.get(modifier.category.lower())
        if group is None:
            continue
        if kind == ChickenKind.BULK and modifier.name.lower() == REGULAR_COOKING:
            continue
        grouped[group].append(modifier)
    return grouped


def tier_warnings(tiers: Iterable[Modifier]) -> list[str]:
    """Report white meat tiers whose prices do not rise with the tier level."""
    ranked = sorted(tiers, key=lambda m: white_meat_level(m.name).rank)
    warnings = []
    for lower, higher in zip(ranked, ranked[1:]):
        if higher.price_adjustment < lower.price_adjustment:
            logger.warning(
                "White meat tier '%s' ($%.2f) is cheaper than '%s' ($%.2f)",
                higher.name, higher.price_adjustment, lower.name, lower.price_adjustment,
            )
            warnings.append(f"{higher.name} is priced below {lower.name}")
    return warnings


def default_sides(kind: ChickenKind, variant: Variant | None, sides: Iterable[Modifier]) -> list[Modifier]:
    """Sides preselected for a new pack."""
    if kind == ChickenKind.FAMILY_PACK:
        return [
            side for side in sides
            if ("garlic bread" in side.name.lower() or "coleslaw" in side.name.lower())
            and "potato" not in side.name.lower()
        ]
    if kind == ChickenKind.REGULAR_PIECE and piece_count(variant) == 8:
        for side in sides:
            name = side.name.lower()
            if "broasted potatoes" in name and "default" in name:
                return [side]
    return []


def price_chicken(
    item: MenuItem,
    variant: Variant | None,
    tier: Modifier | None,
    customizations: Iterable[Modifier] = (),
) -> PriceBreakdown:
    """
    Price a configured chicken pack.

    Args:
        item: Chicken menu item
        variant: Selected pack
        tier: Selected white meat tier modifier, None for no tier
        customizations: Selected sides, preparation and condiment modifiers

    Returns:
        PriceBreakdown with the tier and each customization as a ModifierSelection
    """
    kind = classify_chicken(item, variant)
    categories = option_categories(kind, variant)
    base = variant.price if variant else item.base_price

    breakdown = PriceBreakdown(base_price=round(base, 2))
    breakdown.add_line(variant.name if variant else item.name, base, "base", variant.id if variant else item.id)

    if tier is not None:
        level = white_meat_level(tier.name)
        price = 0.0 if level == WhiteMeatLevel.NONE else tier.price_adjustment
        breakdown.modifiers.append(ModifierSelection(
            id=tier.id,
            name=tier.name,
            price_adjustment=price,
            group=ModifierGroup.WHITE_MEAT,
            option_id=tier.id,
            tier=level.value,
        ))
        breakdown.add_line(tier.name, price, "tier", tier.id)

    for modifier in customizations:
        group = categories.get(modifier.category.lower(), ModifierGroup.MODIFIER)
        # Sides and preparation come with the pack
        free = group in (ModifierGroup.SIDE, ModifierGroup.PREPARATION)
        price = 0.0 if free else modifier.price_adjustment
        breakdown.modifiers.append(ModifierSelection(
            id=modifier.id,
            name=modifier.name,
            price_adjustment=price,
            group=group,
            option_id=modifier.id,
        ))
        breakdown.add_line(modifier.name, price, group.value, modifier.id)

    return breakdown


def chicken_warnings(kind: ChickenKind, selected: Iterable[ModifierSelection]) -> list[str]:
    """Non-blocking hints for the order taker."""
    selected = list(selected)
    warnings = []
    if kind == ChickenKind.FAMILY_PACK and not any(s.group == ModifierGroup.SIDE for s in selected):
        warnings.append("Family packs include sides at no extra charge")
    if chicken_capabilities(kind).preparation and not any(
        s.group == ModifierGroup.PREPARATION for s in selected
    ):
        warnings.append("Consider selecting a preparation style")
    return warnings
