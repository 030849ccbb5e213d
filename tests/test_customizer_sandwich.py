"""
Tests for the sandwich and appetizer customizers.
"""
import logging

import pytest

from order_builder.cart.models import ConfiguredCartItem, ModifierGroup, ModifierSelection
from order_builder.customizers.appetizer import AppetizerCustomizer
from order_builder.customizers.sandwich import SandwichCustomizer
from order_builder.exceptions import CustomizationIncomplete
from order_builder.pricing.tiers import IngredientTier


def _open_sandwich(catalog, source, item_id, existing=None):
    customizer = SandwichCustomizer(catalog.get_item(item_id), source, existing)
    customizer.load()
    return customizer


class TestSandwichCustomizer:
    """Test sandwich selections and the style requirement."""

    def test_italian_beef_requires_style(self, catalog, source):
        """Test that Italian Beef is blocked until a style is chosen, at the same price."""
        customizer = _open_sandwich(catalog, source, "italian-beef")
        assert customizer.requires_style
        assert customizer.validation_errors() == ["Select a style for the Italian Beef"]
        with pytest.raises(CustomizationIncomplete) as exc:
            customizer.complete()
        assert exc.value.reasons == ["Select a style for the Italian Beef"]
        assert not customizer.closed

        customizer.select_style("dry")

        assert customizer.can_complete
        cart_item = customizer.complete()
        assert cart_item.total_price == 9.99
        assert cart_item.modifiers_in(ModifierGroup.STYLE)[0].option_id == "dry"

    def test_mozzarella_extra_and_onions(self, catalog, source):
        """Test ingredient tier pricing through the customizer."""
        customizer = _open_sandwich(catalog, source, "meatball")
        customizer.set_ingredient("mozzarella", IngredientTier.EXTRA)
        customizer.set_ingredient("onions", "standard")
        assert customizer.price == 11.49

        customizer.set_ingredient("onions", None)
        assert customizer.price == 10.99

    def test_danwich_plain_bread_is_free(self, catalog, source):
        """Test that switching away from the default bread costs nothing."""
        customizer = _open_sandwich(catalog, source, "danwich")
        assert customizer.bread == "garlic"
        customizer.select_bread("plain")
        assert customizer.price == 10.49

    def test_menu_service_options(self, catalog, source):
        """Test extra sandwich options from the menu service."""
        customizer = _open_sandwich(catalog, source, "meatball")
        customizer.toggle_option("sw-pepper-jack")
        customizer.set_deluxe(True)
        assert customizer.price == 12.24

    def test_unknown_ingredient_rejected(self, catalog, source):
        """Test that only house ingredients are accepted."""
        customizer = _open_sandwich(catalog, source, "meatball")
        with pytest.raises(ValueError):
            customizer.set_ingredient("pickles", "standard")


class TestSandwichReopen:
    """Test editing sandwiches already in the cart."""

    def test_reopen_structured(self, catalog, source):
        """Test that reopening restores every group and yields the same item."""
        customizer = _open_sandwich(catalog, source, "italian-beef")
        customizer.select_style("natural_gravy")
        customizer.set_ingredient("mozzarella", "extra")
        customizer.set_ingredient("onions", "standard")
        customizer.set_side_sauce("side_red_sauce", "xxl_extra")
        customizer.toggle_preparation("cut_in_half")
        customizer.select_bread("garlic")
        customizer.set_deluxe(True)
        customizer.toggle_option("sw-pepper-jack")
        original = customizer.complete()

        reopened = _open_sandwich(catalog, source, "italian-beef", original)

        assert reopened.style == "natural_gravy"
        assert reopened.ingredients == {"mozzarella": IngredientTier.EXTRA, "onions": IngredientTier.STANDARD}
        assert reopened.bread == "garlic"
        assert reopened.deluxe
        assert reopened.complete() == original

    def test_reopen_from_legacy_names(self, catalog, source):
        """Test that items carrying only display names reopen with the same price."""
        existing = ConfiguredCartItem(
            menu_item_id="meatball",
            menu_item_name="Meatball",
            family="sandwich",
            base_price=8.99,
            selected_modifiers=[
                ModifierSelection(id="mozzarella_extra", name="Mozzarella (Extra)", price_adjustment=2.00),
                ModifierSelection(id="onions", name="Onions", price_adjustment=0.50),
            ],
            total_price=11.49,
            display_name="Meatball",
        )

        reopened = _open_sandwich(catalog, source, "meatball", existing)

        assert reopened.ingredients == {"mozzarella": IngredientTier.EXTRA, "onions": IngredientTier.STANDARD}
        assert reopened.price == 11.49
        cart_item = reopened.complete()
        assert cart_item.id == existing.id
        assert [m.option_id for m in cart_item.selected_modifiers] == ["mozzarella", "onions"]

    def test_unrecognized_legacy_name_dropped(self, catalog, source, caplog):
        """Test that names the customizer never wrote are dropped with a warning."""
        existing = ConfiguredCartItem(
            menu_item_id="meatball",
            menu_item_name="Meatball",
            family="sandwich",
            base_price=8.99,
            selected_modifiers=[ModifierSelection(id="x", name="Extra Pickles", price_adjustment=0.0)],
            total_price=8.99,
            display_name="Meatball",
        )

        with caplog.at_level(logging.WARNING, logger="order_builder"):
            reopened = _open_sandwich(catalog, source, "meatball", existing)

        assert reopened.price == 8.99
        assert "Extra Pickles" in caplog.text


class TestAppetizerCustomizer:
    """Test appetizer condiments and preparations."""

    def test_wings_use_wing_condiments(self, catalog, source):
        """Test that wings offer wing condiments, not appetizer ones."""
        customizer = AppetizerCustomizer(catalog.get_item("buffalo-wings"), source)
        customizer.load()
        assert {m.id for m in customizer.options} == {"wc-ranch", "wc-bleu", "ap-crispy"}

    def test_wings_price(self, catalog, source):
        """Test variant and condiment pricing."""
        customizer = AppetizerCustomizer(catalog.get_item("buffalo-wings"), source)
        customizer.load()
        customizer.toggle("wc-ranch")
        assert customizer.price == 8.74

        customizer.select_variant("wings-12")
        assert customizer.price == 14.74

    def test_other_appetizers_use_appetizer_condiments(self, catalog, source):
        """Test the condiment category of non-wing appetizers."""
        customizer = AppetizerCustomizer(catalog.get_item("mozzarella-sticks"), source)
        customizer.load()
        assert {m.id for m in customizer.options} == {"ac-marinara", "ap-crispy"}

    def test_reopen(self, catalog, source):
        """Test that appetizers reopen with their selections."""
        item = catalog.get_item("buffalo-wings")
        customizer = AppetizerCustomizer(item, source)
        customizer.load()
        customizer.select_variant("wings-12")
        customizer.toggle("wc-bleu")
        original = customizer.complete()

        reopened = AppetizerCustomizer(item, source, original)
        reopened.load()

        assert reopened.variant.id == "wings-12"
        assert reopened.complete() == original
