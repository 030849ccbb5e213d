"""
Configuration Module for the Order Builder
==========================================

This module centralizes all configuration settings, environment variables, and
constants used throughout the order builder. Values are parsed once at import
time so that a bad value fails loudly at startup instead of in the middle of a
dinner rush.

Configuration Categories:
-------------------------
- **Menu Service**: Where the catalog and the pizza price calculation live.
  The restaurant identifier selects which menu is loaded for a session.

- **Pricing**: Which pizza topping pricing mode is canonical, whether the
  remote price calculation is consulted, and how long the customizer waits
  for selection changes to settle before asking for a price.

- **Order Summary**: Flat tax rate and delivery fee used for the running
  order total shown next to the cart.

- **Sandwich Limits**: Upper bounds on ingredients and side sauces per
  sandwich.

- **Session Management**: TTL and cache size for in-memory ordering sessions.

- **CORS Settings**: Allowed origins for the hosting POS frontend.

Environment Variables:
----------------------
- MENU_SERVICE_URL: Base URL of the menu service (default: http://localhost:3000/api)
- RESTAURANT_ID: Default restaurant identifier (default: "default")
- REQUEST_TIMEOUT: HTTP timeout in seconds (default: 10)
- PIZZA_PRICING_MODE: "flat" or "size_scaled" (default: "flat")
- REMOTE_PIZZA_PRICING: Consult the price calculation service (default: "false")
- PRICE_DEBOUNCE_SECONDS: Quiet period before a price request (default: 0.5)
- TAX_RATE: Flat tax rate (default: 0.08)
- DELIVERY_FEE: Flat delivery fee (default: 3.99)
- MAX_SANDWICH_INGREDIENTS: Max ingredients per sandwich (default: 6)
- MAX_SIDE_SAUCES: Max side sauces per sandwich (default: 4)
- SESSION_TTL_SECONDS: Session cache TTL (default: 3600)
- SESSION_MAX_CACHE_SIZE: Max cached sessions (default: 1000)
- CORS_ORIGINS: Comma-separated allowed origins (default: "*")

Usage:
------
    from order_builder.config import (
        PIZZA_PRICING_MODE,
        PRICE_DEBOUNCE_SECONDS,
        TAX_RATE,
    )
"""

import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


# =============================================================================
# Menu Service Configuration
# =============================================================================
# The catalog (items, variants, toppings, modifiers) is owned by an external
# menu service. It is read once per ordering session.

MENU_SERVICE_URL: str = os.getenv("MENU_SERVICE_URL", "http://localhost:3000/api").rstrip("/")

# Restaurant whose menu is loaded when none is given explicitly
RESTAURANT_ID: str = os.getenv("RESTAURANT_ID", "default")

# Request timeout in seconds for menu and pricing calls
REQUEST_TIMEOUT: float = float(os.getenv("REQUEST_TIMEOUT", "10"))


# =============================================================================
# Pricing Configuration
# =============================================================================

# "flat" is the canonical topping rule. "size_scaled" multiplies add-on
# topping prices by the size table and is kept only for older menus.
PIZZA_PRICING_MODE: str = os.getenv("PIZZA_PRICING_MODE", "flat").lower()

# When enabled, the pizza customizer asks the price calculation service for
# the final price of specialty pizzas and uses the local rule as a fallback.
REMOTE_PIZZA_PRICING: bool = os.getenv("REMOTE_PIZZA_PRICING", "false").lower() == "true"

# Bursts of topping clicks collapse into one request after this quiet period
PRICE_DEBOUNCE_SECONDS: float = float(os.getenv("PRICE_DEBOUNCE_SECONDS", "0.5"))


# =============================================================================
# Order Summary Configuration
# =============================================================================
# Flat multipliers only. Real tax and delivery zones are handled at checkout.

TAX_RATE: float = float(os.getenv("TAX_RATE", "0.08"))
DELIVERY_FEE: float = float(os.getenv("DELIVERY_FEE", "3.99"))


# =============================================================================
# Sandwich Limits
# =============================================================================

MAX_SANDWICH_INGREDIENTS: int = int(os.getenv("MAX_SANDWICH_INGREDIENTS", "6"))
MAX_SIDE_SAUCES: int = int(os.getenv("MAX_SIDE_SAUCES", "4"))


# =============================================================================
# Session Management Configuration
# =============================================================================
# Ordering sessions (one cart each) live only in memory.

# How long an idle session stays in the cache (seconds)
SESSION_TTL_SECONDS: int = int(os.getenv("SESSION_TTL_SECONDS", "3600"))  # 1 hour

# Maximum number of sessions to keep in memory
# When exceeded, oldest sessions (by last access) are evicted
SESSION_MAX_CACHE_SIZE: int = int(os.getenv("SESSION_MAX_CACHE_SIZE", "1000"))


# =============================================================================
# CORS Configuration
# =============================================================================

# Format: comma-separated list of origins, e.g., "https://pos.example.com"
# Default "*" allows all origins (suitable for development only)
_cors_origins_env = os.getenv("CORS_ORIGINS", "")
CORS_ORIGINS: List[str] = [
    origin.strip()
    for origin in _cors_origins_env.split(",")
    if origin.strip()
] or ["*"]
