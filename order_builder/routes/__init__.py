"""
Routes Package for the Order Builder
====================================

- cart.py: Ordering sessions and cart mutations

All routers are registered in main.create_app() under two prefixes:
1. /api/v1/* - Versioned API (recommended)
2. /* - Unversioned paths for older POS terminals
"""

from .cart import cart_router

__all__ = ["cart_router"]
