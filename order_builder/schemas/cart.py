"""
Cart Schemas for the Order Builder
==================================

Request and response models for the ordering session endpoints.

Endpoint Coverage:
------------------
- POST /sessions: Start an ordering session (SessionCreate -> CartOut)
- GET /sessions/{id}/cart: Cart and running totals (CartOut)
- POST /sessions/{id}/items: Add or replace a cart item (ConfiguredCartItem -> CartOut)
- PATCH /sessions/{id}/items/{item_id}: Quantity / instructions (CartItemUpdate -> CartOut)
- DELETE /sessions/{id}/items/{item_id}: Remove a cart item (CartOut)
- DELETE /sessions/{id}: End the session

Cart items themselves use cart.models.ConfiguredCartItem for both request
and response, so the hosting UI sends back exactly what it received.
"""

from typing import Literal

from pydantic import BaseModel, Field

from ..cart.models import ConfiguredCartItem, OrderSummary

OrderType = Literal["pickup", "delivery", "dine_in"]


class SessionCreate(BaseModel):
    """Request body to start an ordering session."""
    restaurant_id: str | None = None
    order_type: OrderType = "pickup"


class CartItemUpdate(BaseModel):
    """Partial update of a cart item. A quantity of 0 removes the item."""
    quantity: int | None = Field(default=None, ge=0)
    special_instructions: str | None = None


class CartOut(BaseModel):
    """Cart contents with running totals."""
    session_id: str
    restaurant_id: str
    items: list[ConfiguredCartItem]
    summary: OrderSummary
