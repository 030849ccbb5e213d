"""
Catalog Models for the Order Builder
====================================

Pydantic models describing the menu as delivered by the menu service. A
catalog is a read-only snapshot for one ordering session: customizers and
pricing rules read it, nothing in the core ever writes to it.

Catalog Concepts:
-----------------
1. **Family**: Which customizer and pricing rule an item uses (pizza, chicken,
   sandwich, appetizer, generic). Resolved once when the catalog is loaded,
   see catalog.classifier.resolve_family.

2. **Variants**: Priced (size, crust/type) combinations of an item, e.g.
   "Medium Thin" pizza or "8 PC" chicken. Within one item the
   (size_code, crust_code) pair is unique.

3. **Default Toppings**: Specialty pizzas list the toppings already included
   in their price. Those toppings are free unless upgraded.

4. **Toppings and Modifiers**: Reference data for add-ons. Toppings have an
   amount (light/normal/extra); modifiers are either selected or not. Both
   carry an applies_to list used to filter them per family.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ItemFamily(str, Enum):
    """Customization family of a menu item."""
    PIZZA = "pizza"
    CHICKEN = "chicken"
    SANDWICH = "sandwich"
    APPETIZER = "appetizer"
    GENERIC = "generic"


class ToppingAmount(str, Enum):
    """How much of a topping goes on the item."""
    NONE = "none"
    LIGHT = "light"
    NORMAL = "normal"
    EXTRA = "extra"
    XXTRA = "xxtra"


class MenuCategory(BaseModel):
    """A category tile on the ordering grid."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    sort_order: int = 0


class DefaultTopping(BaseModel):
    """A topping included in a specialty item's base price."""
    model_config = ConfigDict(frozen=True)

    topping_id: str
    amount: ToppingAmount = ToppingAmount.NORMAL


class Variant(BaseModel):
    """A priced size/crust (or size/type) combination of a menu item."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    size_code: str | None = None  # small, medium, large, xlarge, 8pc, 16pc-fam, ...
    crust_code: str | None = None  # thin, double_dough, gluten_free, stuffed, ...
    price: float
    crust_upcharge: float = 0.0  # Size independent crust premium
    serves: str | None = None
    allows_xxtra: bool = False  # Whether toppings may go up to the xxtra amount


class MenuItem(BaseModel):
    """A menu item with its nested variants."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    family: ItemFamily = ItemFamily.GENERIC
    base_price: float
    category: MenuCategory | None = None
    prep_time_minutes: int = 15
    allows_custom_toppings: bool = False
    default_toppings: list[DefaultTopping] = Field(default_factory=list)
    variants: list[Variant] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_unique_variant_codes(self) -> "MenuItem":
        # Variants without any codes (plain named sizes) are not part of the pair check
        seen: set[tuple[str | None, str | None]] = set()
        for variant in self.variants:
            if variant.size_code is None and variant.crust_code is None:
                continue
            pair = (variant.size_code, variant.crust_code)
            if pair in seen:
                raise ValueError(
                    f"Duplicate variant size/crust pair {pair} on menu item '{self.name}'"
                )
            seen.add(pair)
        return self

    @property
    def is_specialty(self) -> bool:
        """Specialty items come with default toppings included in the price."""
        return bool(self.default_toppings)

    @property
    def default_topping_ids(self) -> list[str]:
        return [d.topping_id for d in self.default_toppings]

    def get_variant(self, variant_id: str | None) -> Variant | None:
        if variant_id is None:
            return None
        for variant in self.variants:
            if variant.id == variant_id:
                return variant
        return None

    def find_variant(self, size_code: str | None, crust_code: str | None) -> Variant | None:
        """Find the variant for a (size, crust) pair."""
        for variant in self.variants:
            if variant.size_code == size_code and variant.crust_code == crust_code:
                return variant
        return None

    def default_variant(self) -> Variant | None:
        """The variant preselected when the item is opened: medium if present, else the first."""
        if not self.variants:
            return None
        for variant in self.variants:
            if (variant.size_code or "").lower() == "medium" or "medium" in variant.name.lower():
                return variant
        return self.variants[0]


class Topping(BaseModel):
    """Reference data for a topping with amount tiers."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: str = "other"  # meats, vegetables, cheese, sauces, ...
    base_price: float = 0.0
    is_premium: bool = False
    applies_to: list[str] = Field(default_factory=lambda: ["pizza"])


class Modifier(BaseModel):
    """Reference data for a binary add-on (sides, condiments, preparation, tiers)."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: str
    price_adjustment: float = 0.0  # May be negative
    applies_to: list[str] = Field(default_factory=list)


class Catalog(BaseModel):
    """The whole menu for one restaurant, as loaded for an ordering session."""
    model_config = ConfigDict(frozen=True)

    restaurant_id: str = "default"
    categories: list[MenuCategory] = Field(default_factory=list)
    items: list[MenuItem] = Field(default_factory=list)
    toppings: list[Topping] = Field(default_factory=list)
    modifiers: list[Modifier] = Field(default_factory=list)

    def get_item(self, item_id: str) -> MenuItem | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def get_topping(self, topping_id: str) -> Topping | None:
        for topping in self.toppings:
            if topping.id == topping_id:
                return topping
        return None

    def get_modifier(self, modifier_id: str) -> Modifier | None:
        for modifier in self.modifiers:
            if modifier.id == modifier_id:
                return modifier
        return None

    def toppings_for(self, applies_to: str) -> list[Topping]:
        return [t for t in self.toppings if applies_to in t.applies_to]

    def modifiers_in(self, category: str) -> list[Modifier]:
        """Modifiers of one category, compared case-insensitively."""
        category = category.lower()
        return [m for m in self.modifiers if m.category.lower() == category]

    def modifiers_for(self, applies_to: str) -> list[Modifier]:
        return [m for m in self.modifiers if applies_to in m.applies_to]

    def sorted_categories(self) -> list[MenuCategory]:
        """Categories in grid order. Categories without items are hidden."""
        used = {item.category.id for item in self.items if item.category}
        return sorted(
            (c for c in self.categories if c.id in used),
            key=lambda c: (c.sort_order, c.name),
        )

    def items_in_category(self, category_id: str) -> list[MenuItem]:
        return [item for item in self.items if item.category and item.category.id == category_id]
