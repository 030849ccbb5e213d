"""
Tier tables shared by the pricing rules.

Every tier table here is monotonic: a higher level never costs less than a
lower one. tests/test_pricing_tiers.py checks that for each table.
"""

import re
from enum import Enum

from ..catalog.models import ToppingAmount


class PricingMode(str, Enum):
    """How add-on pizza toppings are priced."""
    FLAT = "flat"
    SIZE_SCALED = "size_scaled"  # Deprecated, kept for older size-priced menus


# =============================================================================
# Pizza Topping Amounts
# =============================================================================

# Toppings added beyond the specialty defaults
ADDON_MULTIPLIERS: dict[ToppingAmount, float] = {
    ToppingAmount.NONE: 0.0,
    ToppingAmount.LIGHT: 0.75,
    ToppingAmount.NORMAL: 1.0,
    ToppingAmount.EXTRA: 1.5,
    ToppingAmount.XXTRA: 2.0,
}

# Specialty defaults are included in the price up to the normal amount
DEFAULT_UPGRADE_MULTIPLIERS: dict[ToppingAmount, float] = {
    ToppingAmount.NONE: 0.0,
    ToppingAmount.LIGHT: 0.0,
    ToppingAmount.NORMAL: 0.0,
    ToppingAmount.EXTRA: 0.5,
    ToppingAmount.XXTRA: 1.0,
}

AMOUNT_ORDER: list[ToppingAmount] = [
    ToppingAmount.NONE,
    ToppingAmount.LIGHT,
    ToppingAmount.NORMAL,
    ToppingAmount.EXTRA,
    ToppingAmount.XXTRA,
]

SIZE_MULTIPLIERS: dict[str, float] = {
    "small": 0.8,
    "medium": 1.0,
    "large": 1.3,
    "xlarge": 1.6,
}

_SIZE_ALIASES = {
    "sm": "small",
    "med": "medium",
    "lg": "large",
    "x-large": "xlarge",
    "x_large": "xlarge",
    "extra_large": "xlarge",
    "extra large": "xlarge",
    "xl": "xlarge",
}


def size_multiplier(size_code: str | None) -> float:
    """Size multiplier for the deprecated size-scaled mode. Unknown sizes scale by 1."""
    if not size_code:
        return 1.0
    code = size_code.strip().lower()
    code = _SIZE_ALIASES.get(code, code)
    return SIZE_MULTIPLIERS.get(code, 1.0)


class Placement(str, Enum):
    """Where on the pizza an add-on topping goes."""
    WHOLE = "whole"
    LEFT = "left"
    RIGHT = "right"
    QUARTER_1 = "quarter_1"
    QUARTER_2 = "quarter_2"
    QUARTER_3 = "quarter_3"
    QUARTER_4 = "quarter_4"

    @property
    def fraction(self) -> float:
        if self is Placement.WHOLE:
            return 1.0
        if self in (Placement.LEFT, Placement.RIGHT):
            return 0.5
        return 0.25


# =============================================================================
# Sandwich Tiers
# =============================================================================

class IngredientTier(str, Enum):
    STANDARD = "standard"
    EXTRA = "extra"
    XXL_EXTRA = "xxl_extra"
    ON_SIDE = "on_side"

    @property
    def multiplier(self) -> int:
        return _INGREDIENT_MULTIPLIERS[self]

    @property
    def label(self) -> str:
        return _TIER_LABELS[self.value]


class SideSauceTier(str, Enum):
    STANDARD = "standard"
    EXTRA = "extra"
    XXL_EXTRA = "xxl_extra"

    @property
    def multiplier(self) -> int:
        return _SIDE_SAUCE_MULTIPLIERS[self]

    @property
    def label(self) -> str:
        return _TIER_LABELS[self.value]


_INGREDIENT_MULTIPLIERS = {
    IngredientTier.STANDARD: 1,
    IngredientTier.EXTRA: 2,
    IngredientTier.XXL_EXTRA: 3,
    IngredientTier.ON_SIDE: 1,
}

_SIDE_SAUCE_MULTIPLIERS = {
    SideSauceTier.STANDARD: 1,
    SideSauceTier.EXTRA: 2,
    SideSauceTier.XXL_EXTRA: 3,
}

_TIER_LABELS = {
    "standard": "Standard",
    "extra": "Extra",
    "xxl_extra": "XXL Extra",
    "on_side": "On the Side",
}

TIER_BY_LABEL: dict[str, str] = {label.lower(): value for value, label in _TIER_LABELS.items()}


# =============================================================================
# Chicken White Meat Tiers
# =============================================================================

class WhiteMeatLevel(str, Enum):
    NONE = "none"
    NORMAL = "normal"
    EXTRA = "extra"
    XXTRA = "xxtra"

    @property
    def rank(self) -> int:
        return list(WhiteMeatLevel).index(self)


_NONE_PATTERN = re.compile(r"\bdark meat\b|\bno white\b|^\s*none\s*$", re.IGNORECASE)
_XXTRA_PATTERN = re.compile(r"\bxx+tra\b", re.IGNORECASE)
_EXTRA_PATTERN = re.compile(r"\bextra\b", re.IGNORECASE)


def white_meat_level(modifier_name: str) -> WhiteMeatLevel:
    """Tier level of a white meat modifier, read from its name."""
    if _NONE_PATTERN.search(modifier_name):
        return WhiteMeatLevel.NONE
    if _XXTRA_PATTERN.search(modifier_name):
        return WhiteMeatLevel.XXTRA
    if _EXTRA_PATTERN.search(modifier_name):
        return WhiteMeatLevel.EXTRA
    return WhiteMeatLevel.NORMAL
