"""
Tests for the chicken customizer.
"""
import pytest

from order_builder.cart.models import ConfiguredCartItem, ModifierGroup, ModifierSelection
from order_builder.customizers.chicken import ChickenCustomizer
from order_builder.pricing.chicken import ChickenKind


@pytest.fixture
def broasted(catalog):
    return catalog.get_item("broasted-chicken")


@pytest.fixture
def customizer(broasted, source):
    customizer = ChickenCustomizer(broasted, source)
    customizer.load()
    return customizer


class TestChickenSelections:
    """Test tier, sides and preparation handling."""

    def test_opens_on_eight_piece_with_potatoes(self, customizer):
        """Test the initial pack and its default side."""
        assert customizer.variant.id == "ch-8pc"
        assert customizer.kind == ChickenKind.REGULAR_PIECE
        assert customizer.selected_ids == ["side-8pc-potatoes"]
        assert customizer.price == 15.00

    def test_extra_white_meat_then_family_pack(self, customizer):
        """Test that a pack change drops the tier and applies family default sides."""
        customizer.select_tier("wm8-extra")
        assert customizer.price == 18.00

        customizer.select_variant("ch-fam16")

        assert customizer.kind == ChickenKind.FAMILY_PACK
        assert customizer.tier_id is None
        assert customizer.selected_ids == ["fam-garlic-bread", "fam-coleslaw"]
        assert customizer.price == 32.00
        assert [t.id for t in customizer.available_tiers()] == ["wm16-fam-all", "wm16-fam-extra"]

    def test_tier_from_other_pack_rejected(self, customizer):
        """Test that a family tier cannot be chosen on an 8 piece."""
        with pytest.raises(ValueError):
            customizer.select_tier("wm16-fam-extra")

    def test_sides_are_free(self, customizer):
        """Test that adding a priced side does not raise the total."""
        customizer.toggle("side-8pc-slaw")
        assert customizer.price == 15.00

    def test_condiments_are_charged(self, customizer):
        """Test condiment pricing."""
        customizer.toggle("cond-honey")
        assert customizer.price == 15.50

    def test_extra_crispy_toggle(self, customizer):
        """Test the extra crispy shortcut."""
        customizer.set_extra_crispy(True)
        assert customizer.extra_crispy
        assert "Consider selecting a preparation style" not in customizer.warnings
        customizer.set_extra_crispy(False)
        assert not customizer.extra_crispy

    def test_family_pack_without_sides_warns(self, customizer):
        """Test the family pack hint once every side is removed."""
        customizer.select_variant("ch-fam16")
        customizer.toggle("fam-garlic-bread")
        customizer.toggle("fam-coleslaw")
        assert "Family packs include sides at no extra charge" in customizer.warnings
        assert customizer.can_complete

    def test_bulk_offers_preparation_only(self, catalog, source):
        """Test the options of a bulk pack."""
        customizer = ChickenCustomizer(catalog.get_item("bulk-chicken"), source)
        customizer.load()
        assert customizer.kind == ChickenKind.BULK
        assert customizer.available_tiers() == []
        assert [p.name for p in customizer.available_preparations()] == ["Extra Crispy"]
        assert customizer.price == 85.00

    def test_individual_piece_cannot_complete(self, catalog, source):
        """Test that single pieces are not customized."""
        customizer = ChickenCustomizer(catalog.get_item("chicken-breast"), source)
        customizer.load()
        assert customizer.validation_errors() == ["Chicken Breast is added without customization"]


class TestChickenReopen:
    """Test editing chicken already in the cart."""

    def test_reopen_restores_tier_and_options(self, broasted, source, customizer):
        """Test that reopening restores the same selections and price."""
        customizer.select_tier("wm8-extra")
        customizer.toggle("cond-hot")
        original = customizer.complete()

        reopened = ChickenCustomizer(broasted, source, original)
        reopened.load()

        assert reopened.tier_id == "wm8-extra"
        assert reopened.selected_ids == ["side-8pc-potatoes", "cond-hot"]
        assert reopened.complete() == original

    def test_reopen_from_names_only(self, broasted, source):
        """Test that items stored without option ids are restored by id or name."""
        existing = ConfiguredCartItem(
            menu_item_id="broasted-chicken",
            menu_item_name="Broasted Chicken",
            variant_id="ch-fam16",
            variant_name="Family 16pc",
            family="chicken",
            base_price=32.00,
            selected_modifiers=[
                ModifierSelection(id="old-id", name="Extra White Meat", price_adjustment=6.00),
                ModifierSelection(id="fam-garlic-bread", name="Garlic Bread", price_adjustment=0.0),
            ],
            total_price=38.00,
            display_name="Family 16pc Broasted Chicken",
        )

        reopened = ChickenCustomizer(broasted, source, existing)
        reopened.load()

        assert reopened.tier_id == "wm16-fam-extra"
        assert reopened.selected_ids == ["fam-garlic-bread"]
        assert reopened.price == 38.00
        tier = reopened.complete().modifiers_in(ModifierGroup.WHITE_MEAT)[0]
        assert tier.option_id == "wm16-fam-extra"
        assert tier.tier == "extra"
