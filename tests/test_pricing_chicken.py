"""
Tests for chicken pack classification and pricing.
"""
import logging

import pytest

from order_builder.cart.models import ModifierGroup
from order_builder.catalog.models import MenuItem, Modifier, Variant
from order_builder.pricing.chicken import (
    ChickenKind,
    available_options,
    chicken_capabilities,
    chicken_warnings,
    classify_chicken,
    default_sides,
    piece_count,
    price_chicken,
    tier_warnings,
    white_meat_category,
)
from order_builder.pricing.tiers import WhiteMeatLevel


@pytest.fixture
def broasted(catalog):
    return catalog.get_item("broasted-chicken")


@pytest.fixture
def chicken_modifiers(catalog):
    return catalog.modifiers_for("chicken")


class TestClassification:
    """Test pack kind heuristics."""

    def test_regular_pack(self, broasted):
        """Test that numbered packs are regular pieces."""
        assert classify_chicken(broasted, broasted.get_variant("ch-8pc")) == ChickenKind.REGULAR_PIECE

    def test_family_pack_from_variant_name(self, broasted):
        """Test that 'family' in the variant name makes a family pack."""
        assert classify_chicken(broasted, broasted.get_variant("ch-fam16")) == ChickenKind.FAMILY_PACK

    def test_bulk_from_item_name(self, catalog):
        """Test that 'bulk' in the item name makes a bulk pack."""
        bulk = catalog.get_item("bulk-chicken")
        assert classify_chicken(bulk, bulk.variants[0]) == ChickenKind.BULK

    def test_bulk_from_price(self, broasted):
        """Test that any pack priced over $40 is bulk."""
        big = Variant(id="ch-100", name="100 PC", price=120.0)
        assert classify_chicken(broasted, big) == ChickenKind.BULK

    def test_bulk_name_is_case_insensitive(self):
        """Test that classification ignores name case."""
        item = MenuItem(id="b", name="BULK Wings Party", base_price=10.0)
        assert classify_chicken(item, None) == ChickenKind.BULK

    def test_individual_piece(self, catalog):
        """Test that single breasts are individual and add directly."""
        breast = catalog.get_item("chicken-breast")
        kind = classify_chicken(breast, None)
        assert kind == ChickenKind.INDIVIDUAL
        assert chicken_capabilities(kind).direct_add

    def test_piece_count_from_variant_name(self, broasted):
        """Test piece counts read from names, defaulting to 8."""
        assert piece_count(broasted.get_variant("ch-fam16")) == 16
        assert piece_count(broasted.get_variant("ch-12pc")) == 12
        assert piece_count(Variant(id="x", name="Bucket", price=10)) == 8
        assert piece_count(None) == 8

    def test_white_meat_category_per_pack(self, broasted):
        """Test the tier category key for regular and family packs."""
        assert white_meat_category(ChickenKind.REGULAR_PIECE, broasted.get_variant("ch-8pc")) == "chicken_white_meat_8pc"
        assert (
            white_meat_category(ChickenKind.FAMILY_PACK, broasted.get_variant("ch-fam16"))
            == "chicken_white_meat_16pc_family"
        )
        assert white_meat_category(ChickenKind.BULK, None) is None


class TestAvailableOptions:
    """Test which modifiers each pack offers."""

    def test_regular_pack_groups(self, broasted, chicken_modifiers):
        """Test that an 8 piece pack sees its own tiers, sides, preparation and condiments."""
        options = available_options(ChickenKind.REGULAR_PIECE, broasted.get_variant("ch-8pc"), chicken_modifiers)
        assert [m.id for m in options[ModifierGroup.WHITE_MEAT]] == ["wm8-all", "wm8-extra", "wm8-xxtra"]
        assert [m.id for m in options[ModifierGroup.SIDE]] == ["side-8pc-potatoes", "side-8pc-slaw"]
        assert len(options[ModifierGroup.PREPARATION]) == 2
        assert len(options[ModifierGroup.CONDIMENT]) == 2

    def test_bulk_offers_preparation_only(self, catalog, chicken_modifiers):
        """Test that bulk packs only offer preparation, without regular cooking."""
        bulk = catalog.get_item("bulk-chicken")
        options = available_options(ChickenKind.BULK, bulk.variants[0], chicken_modifiers)
        assert list(options) == [ModifierGroup.PREPARATION]
        assert [m.name for m in options[ModifierGroup.PREPARATION]] == ["Extra Crispy"]

    def test_family_default_sides_exclude_potatoes(self, broasted, chicken_modifiers):
        """Test that family packs default to garlic bread and coleslaw."""
        variant = broasted.get_variant("ch-fam16")
        sides = available_options(ChickenKind.FAMILY_PACK, variant, chicken_modifiers)[ModifierGroup.SIDE]
        defaults = default_sides(ChickenKind.FAMILY_PACK, variant, sides)
        assert [s.id for s in defaults] == ["fam-garlic-bread", "fam-coleslaw"]

    def test_eight_piece_defaults_to_potatoes(self, broasted, chicken_modifiers):
        """Test that the 8 piece pack preselects its default potatoes."""
        variant = broasted.get_variant("ch-8pc")
        sides = available_options(ChickenKind.REGULAR_PIECE, variant, chicken_modifiers)[ModifierGroup.SIDE]
        assert [s.id for s in default_sides(ChickenKind.REGULAR_PIECE, variant, sides)] == ["side-8pc-potatoes"]

    def test_twelve_piece_has_no_default_side(self, broasted, chicken_modifiers):
        """Test that larger regular packs start without sides."""
        variant = broasted.get_variant("ch-12pc")
        sides = available_options(ChickenKind.REGULAR_PIECE, variant, chicken_modifiers)[ModifierGroup.SIDE]
        assert default_sides(ChickenKind.REGULAR_PIECE, variant, sides) == []


class TestPriceChicken:
    """Test chicken pack totals."""

    def test_eight_piece_with_extra_white_meat(self, broasted, catalog):
        """Test that an $15 8 PC with the $3 extra tier totals $18."""
        breakdown = price_chicken(broasted, broasted.get_variant("ch-8pc"), catalog.get_modifier("wm8-extra"))
        assert breakdown.total == 18.00
        tier = breakdown.modifiers[0]
        assert tier.group == ModifierGroup.WHITE_MEAT
        assert tier.tier == WhiteMeatLevel.EXTRA.value

    def test_dark_meat_tier_is_free(self, broasted):
        """Test that choosing all dark meat adds nothing to the price."""
        dark = Modifier(id="wm8-dark", name="All Dark Meat", category="chicken_white_meat_8pc", price_adjustment=1.0)
        breakdown = price_chicken(broasted, broasted.get_variant("ch-8pc"), dark)
        assert breakdown.total == 15.00
        assert breakdown.modifiers[0].tier == WhiteMeatLevel.NONE.value

    def test_sides_and_preparation_are_free(self, broasted, catalog):
        """Test that sides and preparation never add to the price."""
        breakdown = price_chicken(
            broasted, broasted.get_variant("ch-8pc"), None,
            [catalog.get_modifier("side-8pc-slaw"), catalog.get_modifier("prep-crispy")],
        )
        assert breakdown.total == 15.00
        assert [m.group for m in breakdown.modifiers] == [ModifierGroup.SIDE, ModifierGroup.PREPARATION]

    def test_condiments_keep_their_price(self, broasted, catalog):
        """Test that condiments are charged."""
        breakdown = price_chicken(
            broasted, broasted.get_variant("ch-8pc"), None,
            [catalog.get_modifier("cond-honey"), catalog.get_modifier("cond-hot")],
        )
        assert breakdown.total == 15.75

    def test_family_warning_without_sides(self):
        """Test the family pack hint when every side was removed."""
        warnings = chicken_warnings(ChickenKind.FAMILY_PACK, [])
        assert "Family packs include sides at no extra charge" in warnings
        assert "Consider selecting a preparation style" in warnings


class TestTierWarnings:
    """Test the monotonic tier price check."""

    def test_monotonic_tiers_pass(self, catalog):
        """Test that the sample 8 piece tiers rise with the level."""
        assert tier_warnings(catalog.modifiers_in("chicken_white_meat_8pc")) == []

    def test_cheaper_higher_tier_is_reported(self, caplog):
        """Test that a higher tier priced below a lower one is logged."""
        tiers = [
            Modifier(id="a", name="All White Meat", category="t", price_adjustment=3.0),
            Modifier(id="b", name="Extra White Meat", category="t", price_adjustment=2.0),
        ]
        with caplog.at_level(logging.WARNING, logger="order_builder"):
            warnings = tier_warnings(tiers)
        assert warnings == ["Extra White Meat is priced below All White Meat"]
        assert "cheaper than" in caplog.text
    def test_dark_meat_ranks_below_white_meat(self):
        """Test that the free dark meat tier sits below the paid tiers."""
        tiers = [
            Modifier(id="normal", name="White Meat", category="t", price_adjustment=2.0),
            Modifier(id="none", name="All Dark Meat", category="t", price_adjustment=0.0),
        ]
        assert tier_warnings(tiers) == []
