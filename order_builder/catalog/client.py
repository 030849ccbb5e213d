"""
Menu service client.

Reads the catalog (items with nested variants, categories, toppings and
modifiers) from the external menu service over HTTP. The menu service wraps
every response in a {"data": ...} envelope and reports failures as
{"error": "..."}.

Two sources implement the same reference data protocol used by customizers:
- MenuClient: live HTTP reads, one restaurant per client
- StaticCatalogSource: serves an already loaded Catalog (tests, preloaded menus)
"""

import logging
from typing import Any, Callable, Protocol, TypeVar

import requests

from .. import config
from ..exceptions import CatalogLoadError
from .classifier import resolve_family
from .models import (
    Catalog,
    DefaultTopping,
    MenuCategory,
    MenuItem,
    Modifier,
    Topping,
    ToppingAmount,
    Variant,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CatalogSource(Protocol):
    """Reference data a customizer loads when it opens."""

    def get_toppings(self) -> list[Topping]:
        ...

    def get_modifiers(self, applies_to: str | None = None) -> list[Modifier]:
        ...


class StaticCatalogSource:
    """Serve reference data from a catalog that is already in memory."""

    def __init__(self, catalog: Catalog):
        self.catalog = catalog

    def get_toppings(self) -> list[Topping]:
        return list(self.catalog.toppings)

    def get_modifiers(self, applies_to: str | None = None) -> list[Modifier]:
        if applies_to is None:
            return list(self.catalog.modifiers)
        return self.catalog.modifiers_for(applies_to)


# =============================================================================
# Payload Parsing
# =============================================================================

def _parse_category(raw: dict | None) -> MenuCategory | None:
    if not raw:
        return None
    return MenuCategory(
        id=str(raw["id"]),
        name=raw.get("name", ""),
        sort_order=raw.get("sort_order", 0) or 0,
    )


def _parse_default_toppings(raw: Any) -> list[DefaultTopping]:
    """Accept either a plain list or the {"toppings": [...]} document."""
    if not raw:
        return []
    if isinstance(raw, dict):
        raw = raw.get("toppings", [])
    defaults = []
    for entry in raw:
        topping_id = entry.get("topping_id") or entry.get("id")
        if not topping_id:
            continue
        amount = entry.get("amount") or entry.get("default_amount") or "normal"
        defaults.append(DefaultTopping(topping_id=str(topping_id), amount=ToppingAmount(amount)))
    return defaults


def _parse_variant(raw: dict) -> Variant:
    return Variant(
        id=str(raw["id"]),
        name=raw.get("name", ""),
        size_code=raw.get("size_code"),
        crust_code=raw.get("crust_code") or raw.get("crust_type"),
        price=float(raw.get("price", 0.0)),
        crust_upcharge=float(raw.get("crust_upcharge", 0.0) or 0.0),
        serves=raw.get("serves"),
        allows_xxtra=bool(raw.get("allows_xxtra", False)),
    )


def parse_menu_item(raw: dict) -> MenuItem:
    """Build a MenuItem from a menu service record, resolving its family."""
    category = _parse_category(raw.get("category"))
    family = resolve_family(
        raw.get("family") or raw.get("item_type"),
        category.name if category else None,
    )
    return MenuItem(
        id=str(raw["id"]),
        name=raw["name"],
        family=family,
        base_price=float(raw.get("base_price", 0.0)),
        category=category,
        prep_time_minutes=raw.get("prep_time_minutes", 15) or 15,
        allows_custom_toppings=bool(raw.get("allows_custom_toppings", False)),
        default_toppings=_parse_default_toppings(
            raw.get("default_toppings") or raw.get("default_toppings_json")
        ),
        variants=[_parse_variant(v) for v in raw.get("variants") or []],
    )


def parse_topping(raw: dict) -> Topping:
    return Topping(
        id=str(raw["id"]),
        name=raw["name"],
        category=raw.get("category", "other"),
        base_price=float(raw.get("base_price", 0.0)),
        is_premium=bool(raw.get("is_premium", False)),
        applies_to=raw.get("applies_to") or ["pizza"],
    )


def parse_modifier(raw: dict) -> Modifier:
    return Modifier(
        id=str(raw["id"]),
        name=raw["name"],
        category=raw.get("category", ""),
        price_adjustment=float(raw.get("price_adjustment", raw.get("base_price", 0.0)) or 0.0),
        applies_to=raw.get("applies_to") or [],
    )


def parse_catalog(payload: dict, restaurant_id: str) -> Catalog:
    """
    Build a Catalog from the menu service's full menu document.

    Categories are collected from the items when the document has no separate
    category list.
    """
    items = [parse_menu_item(raw) for raw in payload.get("items") or payload.get("menu_items") or []]

    categories: dict[str, MenuCategory] = {}
    for raw in payload.get("categories") or []:
        category = _parse_category(raw)
        categories[category.id] = category
    for item in items:
        if item.category and item.category.id not in categories:
            categories[item.category.id] = item.category

    return Catalog(
        restaurant_id=restaurant_id,
        categories=list(categories.values()),
        items=items,
        toppings=[parse_topping(raw) for raw in payload.get("toppings") or []],
        modifiers=[
            parse_modifier(raw)
            for raw in (payload.get("modifiers") or []) + (payload.get("customizations") or [])
        ],
    )


# =============================================================================
# HTTP Client
# =============================================================================

class MenuClient:
    """
    HTTP client for the menu service.

    All reads go through _get, which turns transport errors, HTTP errors and
    error payloads into CatalogLoadError so callers only handle one type.
    """

    def __init__(
        self,
        restaurant_id: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ):
        self.restaurant_id = restaurant_id or config.RESTAURANT_ID
        self.base_url = (base_url or config.MENU_SERVICE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else config.REQUEST_TIMEOUT
        self._session = session or requests.Session()

    def _get(self, path: str, params: dict | None = None) -> Any:
        url = f"{self.base_url}{path}"
        query = {"restaurant_id": self.restaurant_id}
        if params:
            query.update(params)

        try:
            response = self._session.get(url, params=query, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            logger.error("Menu service request to %s failed: %s", path, e)
            raise CatalogLoadError(f"Could not load {path}: {e}") from e
        except ValueError as e:
            logger.error("Menu service returned invalid JSON for %s", path)
            raise CatalogLoadError(f"Invalid response from {path}") from e

        if isinstance(payload, dict) and payload.get("error"):
            logger.error("Menu service error for %s: %s", path, payload["error"])
            raise CatalogLoadError(str(payload["error"]))

        return payload.get("data") if isinstance(payload, dict) else payload

    def _parse(self, path: str, parser: Callable[[Any], T], data: Any) -> T:
        """Run a payload parser, reporting malformed records as CatalogLoadError."""
        try:
            return parser(data)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.error("Menu service returned a malformed record for %s: %s", path, e)
            raise CatalogLoadError(f"Malformed data from {path}: {e}") from e

    def fetch_catalog(self) -> Catalog:
        """Load the full menu for this client's restaurant."""
        data = self._get("/menu/full") or {}
        catalog = self._parse("/menu/full", lambda d: parse_catalog(d, self.restaurant_id), data)
        logger.info(
            "Loaded catalog for %s: %d items, %d toppings, %d modifiers",
            self.restaurant_id, len(catalog.items), len(catalog.toppings), len(catalog.modifiers),
        )
        return catalog

    def get_toppings(self) -> list[Topping]:
        data = self._get("/menu/toppings") or []
        return self._parse("/menu/toppings", lambda d: [parse_topping(raw) for raw in d], data)

    def get_modifiers(self, applies_to: str | None = None) -> list[Modifier]:
        params = {"applies_to": applies_to} if applies_to else None
        data = self._get("/menu/modifiers", params) or []
        modifiers = self._parse("/menu/modifiers", lambda d: [parse_modifier(raw) for raw in d], data)
        if applies_to:
            # Older menu service versions ignore the filter parameter
            modifiers = [m for m in modifiers if not m.applies_to or applies_to in m.applies_to]
        return modifiers
