"""
Exception types for the order builder.

Load and pricing failures are recovered inside the customizer that hit them.
Validation failures block completion but keep the entered state.
Normalization failures are contract violations and must never reach the cart.
"""


class OrderBuilderError(Exception):
    """Base class for all order builder errors."""


class CatalogLoadError(OrderBuilderError):
    """Menu or reference data could not be fetched from the menu service."""


class PriceCalculationError(OrderBuilderError):
    """The external price calculation failed or returned an error payload."""


class CustomizationIncomplete(OrderBuilderError):
    """A customizer was asked to complete while required selections are missing."""

    def __init__(self, reasons: list[str]):
        self.reasons = list(reasons)
        super().__init__("; ".join(self.reasons) or "Customization is incomplete")


class NormalizationError(OrderBuilderError, ValueError):
    """A cart item would violate the cart item contract (negative price, bad quantity)."""


class CartItemNotFound(OrderBuilderError, KeyError):
    """No cart item with the given id."""

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(item_id)

    def __str__(self) -> str:
        return f"Cart item not found: {self.item_id}"
