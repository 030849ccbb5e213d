import copy

import pytest
from fastapi.testclient import TestClient

from order_builder.cart.cart import Cart
from order_builder.catalog.client import StaticCatalogSource, parse_catalog
from order_builder.main import app
from order_builder.navigation import MenuNavigator
from order_builder.services.session import clear_cache

RESTAURANT_ID = "test-restaurant"

PIZZA = {"id": "cat-pizza", "name": "Pizza", "sort_order": 1}
CHICKEN = {"id": "cat-chicken", "name": "Chicken", "sort_order": 2}
SANDWICHES = {"id": "cat-sandwiches", "name": "Sandwiches", "sort_order": 3}
APPETIZERS = {"id": "cat-appetizers", "name": "Appetizers", "sort_order": 4}
BEVERAGES = {"id": "cat-beverages", "name": "Beverages", "sort_order": 5}
DESSERTS = {"id": "cat-desserts", "name": "Desserts", "sort_order": 6}

# Full menu document in the menu service's format
MENU_PAYLOAD = {
    "categories": [BEVERAGES, PIZZA, CHICKEN, SANDWICHES, APPETIZERS, DESSERTS],
    "items": [
        {
            "id": "byo-pizza",
            "name": "Build Your Own Pizza",
            "base_price": 12.00,
            "category": PIZZA,
            "allows_custom_toppings": True,
            "variants": [
                {"id": "byo-sm-thin", "name": "Small Thin", "size_code": "small", "crust_type": "thin", "price": 10.00},
                {"id": "byo-md-thin", "name": "Medium Thin", "size_code": "medium", "crust_type": "thin", "price": 12.00},
                {"id": "byo-lg-thin", "name": "Large Thin", "size_code": "large", "crust_type": "thin", "price": 15.00},
                {"id": "byo-xl-thin", "name": "X-Large Thin", "size_code": "xlarge", "crust_type": "thin",
                 "price": 18.00, "allows_xxtra": True},
                {"id": "byo-md-stuffed", "name": "Medium Stuffed", "size_code": "medium", "crust_type": "stuffed",
                 "price": 14.00, "crust_upcharge": 2.00},
            ],
        },
        {
            "id": "margherita",
            "name": "Margherita",
            "base_price": 14.00,
            "category": PIZZA,
            "item_type": "pizza",
            "default_toppings_json": {
                "toppings": [
                    {"id": "mozzarella", "amount": "normal"},
                    {"id": "basil", "amount": "normal"},
                ]
            },
            "variants": [
                {"id": "mg-md-thin", "name": "Medium Thin", "size_code": "medium", "crust_type": "thin", "price": 14.00},
                {"id": "mg-lg-thin", "name": "Large Thin", "size_code": "large", "crust_type": "thin", "price": 17.00},
                {"id": "mg-md-stuffed", "name": "Medium Stuffed", "size_code": "medium", "crust_type": "stuffed",
                 "price": 18.00},
            ],
        },
        {
            "id": "broasted-chicken",
            "name": "Broasted Chicken",
            "base_price": 15.00,
            "category": CHICKEN,
            "variants": [
                {"id": "ch-8pc", "name": "8 PC", "size_code": "8pc", "price": 15.00},
                {"id": "ch-12pc", "name": "12 PC", "size_code": "12pc", "price": 21.00},
                {"id": "ch-fam16", "name": "Family 16pc", "size_code": "16pc-fam", "price": 32.00},
            ],
        },
        {
            "id": "bulk-chicken",
            "name": "Bulk Chicken",
            "base_price": 85.00,
            "category": CHICKEN,
            "variants": [
                {"id": "bulk-50pc", "name": "50 PC", "size_code": "50pc", "price": 85.00},
            ],
        },
        {
            "id": "chicken-breast",
            "name": "Chicken Breast",
            "base_price": 3.49,
            "category": CHICKEN,
        },
        {
            "id": "italian-beef",
            "name": "Italian Beef",
            "base_price": 9.99,
            "category": SANDWICHES,
        },
        {
            "id": "danwich",
            "name": "Danwich",
            "base_price": 10.49,
            "category": SANDWICHES,
        },
        {
            "id": "meatball",
            "name": "Meatball",
            "base_price": 8.99,
            "category": SANDWICHES,
        },
        {
            "id": "buffalo-wings",
            "name": "Buffalo Wings",
            "base_price": 7.99,
            "category": APPETIZERS,
            "variants": [
                {"id": "wings-6", "name": "6 PC", "size_code": "6pc", "price": 7.99},
                {"id": "wings-12", "name": "12 PC", "size_code": "12pc", "price": 13.99},
            ],
        },
        {
            "id": "mozzarella-sticks",
            "name": "Mozzarella Sticks",
            "base_price": 6.99,
            "category": APPETIZERS,
        },
        {
            "id": "fountain-soda",
            "name": "Fountain Soda",
            "base_price": 1.99,
            "category": BEVERAGES,
            "variants": [
                {"id": "soda-sm", "name": "Small", "price": 1.99},
                {"id": "soda-lg", "name": "Large", "price": 2.99},
            ],
        },
    ],
    "toppings": [
        {"id": "pepperoni", "name": "Pepperoni", "category": "meats", "base_price": 2.00},
        {"id": "sausage", "name": "Italian Sausage", "category": "meats", "base_price": 2.00},
        {"id": "mushrooms", "name": "Mushrooms", "category": "vegetables", "base_price": 1.50},
        {"id": "mozzarella", "name": "Mozzarella", "category": "cheese", "base_price": 2.00},
        {"id": "basil", "name": "Basil", "category": "vegetables", "base_price": 2.00},
        {"id": "marinara", "name": "Marinara Sauce", "category": "sauces", "base_price": 0.00},
    ],
    "modifiers": [
        {"id": "well-done", "name": "Well Done", "category": "preparation", "price_adjustment": 0.0,
         "applies_to": ["pizza"]},
        {"id": "extra-sauce", "name": "Extra Sauce", "category": "pizza_extra", "price_adjustment": 1.00,
         "applies_to": ["pizza"]},
        {"id": "wm8-all", "name": "All White Meat", "category": "chicken_white_meat_8pc",
         "price_adjustment": 2.00, "applies_to": ["chicken"]},
        {"id": "wm8-extra", "name": "Extra White Meat", "category": "chicken_white_meat_8pc",
         "price_adjustment": 3.00, "applies_to": ["chicken"]},
        {"id": "wm8-xxtra", "name": "XXtra White Meat", "category": "chicken_white_meat_8pc",
         "price_adjustment": 4.50, "applies_to": ["chicken"]},
        {"id": "wm16-fam-all", "name": "All White Meat", "category": "chicken_white_meat_16pc_family",
         "price_adjustment": 4.00, "applies_to": ["chicken"]},
        {"id": "wm16-fam-extra", "name": "Extra White Meat", "category": "chicken_white_meat_16pc_family",
         "price_adjustment": 6.00, "applies_to": ["chicken"]},
        {"id": "side-8pc-potatoes", "name": "Broasted Potatoes (8 PC Default)", "category": "chicken_8pc_sides",
         "price_adjustment": 0.0, "applies_to": ["chicken"]},
        {"id": "side-8pc-slaw", "name": "Coleslaw", "category": "chicken_8pc_sides",
         "price_adjustment": 1.50, "applies_to": ["chicken"]},
        {"id": "fam-garlic-bread", "name": "Garlic Bread (Included)", "category": "chicken_family_sides",
         "price_adjustment": 0.0, "applies_to": ["chicken"]},
        {"id": "fam-coleslaw", "name": "Coleslaw (Included)", "category": "chicken_family_sides",
         "price_adjustment": 0.0, "applies_to": ["chicken"]},
        {"id": "fam-potatoes", "name": "Broasted Potatoes (Included)", "category": "chicken_family_sides",
         "price_adjustment": 0.0, "applies_to": ["chicken"]},
        {"id": "prep-crispy", "name": "Extra Crispy", "category": "chicken_preparation",
         "price_adjustment": 0.0, "applies_to": ["chicken"]},
        {"id": "prep-regular", "name": "Regular Cooking", "category": "chicken_preparation",
         "price_adjustment": 0.0, "applies_to": ["chicken"]},
        {"id": "cond-honey", "name": "Honey", "category": "chicken_condiment",
         "price_adjustment": 0.50, "applies_to": ["chicken"]},
        {"id": "cond-hot", "name": "Hot Sauce", "category": "chicken_condiment",
         "price_adjustment": 0.25, "applies_to": ["chicken"]},
        {"id": "wc-ranch", "name": "Ranch", "category": "wing_condiment",
         "price_adjustment": 0.75, "applies_to": ["appetizer"]},
        {"id": "wc-bleu", "name": "Bleu Cheese", "category": "wing_condiment",
         "price_adjustment": 0.75, "applies_to": ["appetizer"]},
        {"id": "ac-marinara", "name": "Marinara Cup", "category": "appetizer_condiment",
         "price_adjustment": 0.50, "applies_to": ["appetizer"]},
        {"id": "ap-crispy", "name": "Extra Crispy", "category": "appetizer_preparation",
         "price_adjustment": 0.0, "applies_to": ["appetizer"]},
        {"id": "sw-pepper-jack", "name": "Add Pepper Jack", "category": "sandwich_extra",
         "price_adjustment": 1.25, "applies_to": ["sandwich"]},
    ],
}


@pytest.fixture
def menu_payload():
    """A fresh copy of the menu document, safe to modify per test."""
    return copy.deepcopy(MENU_PAYLOAD)


@pytest.fixture
def catalog():
    return parse_catalog(copy.deepcopy(MENU_PAYLOAD), RESTAURANT_ID)


@pytest.fixture
def source(catalog):
    return StaticCatalogSource(catalog)


@pytest.fixture
def toppings(catalog):
    """Pizza toppings keyed by id, as pricing rules take them."""
    return {t.id: t for t in catalog.toppings_for("pizza")}


@pytest.fixture
def cart():
    return Cart()


@pytest.fixture
def navigator(catalog, cart):
    return MenuNavigator(catalog, cart)


class FakeClock:
    """Manually advanced clock for debounce tests."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def client():
    """Shared FastAPI TestClient with an empty session store."""
    clear_cache()
    with TestClient(app) as c:
        yield c
    clear_cache()
