"""
Pricing rules, one module per item family.

Each rule is a pure function from (item, variant, selections) to a
PriceBreakdown. Import the rule modules directly, e.g.
``from order_builder.pricing.pizza import price_pizza``.
"""
