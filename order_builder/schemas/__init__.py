"""
Pydantic request/response models for the HTTP surface.

Naming Conventions:
-------------------
- *Out: Response models - what the API returns
- *Create: Request models for POST
- *Update: Request models for PATCH
"""

from .cart import CartItemUpdate, CartOut, SessionCreate

__all__ = ["CartItemUpdate", "CartOut", "SessionCreate"]
