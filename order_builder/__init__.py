"""
Restaurant POS order builder: item customization, pricing and cart.

Subpackages:
- catalog: menu models and the menu service client
- pricing: pricing rules per item family and remote pizza pricing
- customizers: per-family customization state with edit rehydration
- cart: cart records, the normalizer and the cart
- navigation: screen state and customizer routing
- routes/services/schemas: the HTTP cart surface
"""

__version__ = "1.0.0"
