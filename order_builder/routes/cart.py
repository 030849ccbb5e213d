"""
Cart Routes for the Order Builder
=================================

The cart mutation surface exposed to the hosting POS UI. Each ordering
session owns one cart; items are ConfiguredCartItem records produced by a
customizer.

Endpoints:
----------
- POST /sessions: Start an ordering session
- GET /sessions/{session_id}/cart: Cart contents and order summary
- POST /sessions/{session_id}/items: Add an item (an existing id replaces it)
- PATCH /sessions/{session_id}/items/{item_id}: Change quantity or instructions
- DELETE /sessions/{session_id}/items/{item_id}: Remove an item
- DELETE /sessions/{session_id}: End the session

Error Mapping:
--------------
- Unknown session or cart item: 404
- Cart item breaking the cart item contract: 422

Usage:
------
    POST /api/v1/sessions {"restaurant_id": "tonys", "order_type": "delivery"}
    POST /api/v1/sessions/{id}/items {...ConfiguredCartItem...}
    PATCH /api/v1/sessions/{id}/items/cart-1f2e... {"quantity": 2}
"""

import logging

from fastapi import APIRouter, HTTPException

from ..cart.models import ConfiguredCartItem
from ..exceptions import CartItemNotFound, NormalizationError
from ..schemas.cart import CartItemUpdate, CartOut, SessionCreate
from ..services.session import OrderingSession, create_session, delete_session, get_session

logger = logging.getLogger(__name__)

cart_router = APIRouter(prefix="/sessions", tags=["Cart"])


# =============================================================================
# Helper Functions
# =============================================================================

def _get_session_or_404(session_id: str) -> OrderingSession:
    session = get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def _cart_out(session: OrderingSession) -> CartOut:
    return CartOut(
        session_id=session.session_id,
        restaurant_id=session.restaurant_id,
        items=session.cart.items,
        summary=session.cart.summary(session.order_type),
    )


# =============================================================================
# Session Endpoints
# =============================================================================

@cart_router.post("", response_model=CartOut, status_code=201)
def start_session(req: SessionCreate | None = None) -> CartOut:
    """Start an ordering session with an empty cart."""
    req = req or SessionCreate()
    session = create_session(req.restaurant_id, req.order_type)
    return _cart_out(session)


@cart_router.delete("/{session_id}", status_code=204)
def end_session(session_id: str) -> None:
    if not delete_session(session_id):
        raise HTTPException(status_code=404, detail="Session not found")


# =============================================================================
# Cart Endpoints
# =============================================================================

@cart_router.get("/{session_id}/cart", response_model=CartOut)
def get_cart(session_id: str) -> CartOut:
    session = _get_session_or_404(session_id)
    return _cart_out(session)


@cart_router.post("/{session_id}/items", response_model=CartOut)
def add_cart_item(session_id: str, item: ConfiguredCartItem) -> CartOut:
    """
    Add a configured item to the cart.

    An item whose id is already in the cart replaces it (edit completion).
    """
    session = _get_session_or_404(session_id)
    try:
        session.cart.add_item(item)
    except NormalizationError as e:
        logger.warning("Rejected cart item for session %s: %s", session_id, e)
        raise HTTPException(status_code=422, detail=str(e))
    return _cart_out(session)


@cart_router.patch("/{session_id}/items/{item_id}", response_model=CartOut)
def update_cart_item(session_id: str, item_id: str, req: CartItemUpdate) -> CartOut:
    """Change quantity or special instructions. Quantity 0 removes the item."""
    session = _get_session_or_404(session_id)
    try:
        session.cart.update_item(item_id, req.model_dump(exclude_unset=True))
    except CartItemNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except NormalizationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _cart_out(session)


@cart_router.delete("/{session_id}/items/{item_id}", response_model=CartOut)
def remove_cart_item(session_id: str, item_id: str) -> CartOut:
    session = _get_session_or_404(session_id)
    try:
        session.cart.remove_item(item_id)
    except CartItemNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _cart_out(session)
