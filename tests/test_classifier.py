"""
Tests for item family classification.
"""
import pytest

from order_builder.catalog.classifier import resolve_family
from order_builder.catalog.models import ItemFamily


class TestResolveFamily:
    """Test family resolution from tags and category names."""

    @pytest.mark.parametrize("tag,category,expected", [
        ("pizza", None, ItemFamily.PIZZA),
        ("Chicken", "Sides", ItemFamily.CHICKEN),
        ("stuffed_pizza", None, ItemFamily.PIZZA),
        (None, "Specialty Pizzas", ItemFamily.PIZZA),
        (None, "Broasted Chicken", ItemFamily.CHICKEN),
        (None, " sandwiches ", ItemFamily.SANDWICH),
        (None, "Appetizers", ItemFamily.APPETIZER),
        (None, "Beverages", ItemFamily.GENERIC),
        ("combo_meal", "Desserts", ItemFamily.GENERIC),
        (None, None, ItemFamily.GENERIC),
    ])
    def test_resolve_family(self, tag, category, expected):
        """Test that tags win over categories and unknowns are generic."""
        assert resolve_family(tag, category) == expected
