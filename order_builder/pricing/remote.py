"""
Remote Pizza Price Calculation
==============================

The menu service can price a specialty pizza server side from its crust
pricing table. The pizza customizer uses that quote in place of the local
rule when remote pricing is enabled.

Selection changes arrive in bursts (a topping clicked up to extra, then
back), so requests go through a PriceRequestTracker:

1. **Debounce**: a request is only issued after the fingerprint has been
   quiet for PRICE_DEBOUNCE_SECONDS.
2. **Dedup**: a fingerprint equal to the pending or last issued one is
   not submitted again.
3. **Staleness**: a quote is accepted only if its request is the latest one
   issued and its fingerprint still matches the current selection.
4. **Cancel**: after cancel() nothing is ever accepted, so no quote lands
   on a closed customizer.

Time is read through an injectable clock so the debounce can be tested
without sleeping.
"""

import itertools
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Hashable, Iterable, Mapping

import requests

from .. import config
from ..catalog.models import ToppingAmount
from ..exceptions import PriceCalculationError
from .breakdown import PriceLine

logger = logging.getLogger(__name__)

PRICE_PATH = "/menu/pizza/calculate-price"


@dataclass
class PriceQuote:
    """Result of a remote price calculation."""
    base_price: float
    final_price: float
    crust_upcharge: float = 0.0
    topping_cost: float = 0.0
    breakdown: list[PriceLine] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    estimated_prep_minutes: float | None = None

    def topping_prices(self) -> dict[str, float]:
        """Topping name -> price from the itemized breakdown."""
        return {
            line.name: line.amount
            for line in self.breakdown
            if line.kind in ("topping", "template_default")
        }


def pricing_fingerprint(
    size_code: str | None,
    crust_code: str | None,
    amounts: Mapping[str, ToppingAmount],
) -> tuple:
    """Value identifying one priceable pizza configuration."""
    active = tuple(sorted(
        (topping_id, ToppingAmount(amount).value)
        for topping_id, amount in amounts.items()
        if ToppingAmount(amount) != ToppingAmount.NONE
    ))
    return (size_code, crust_code, active)


class PriceCalculationClient:
    """HTTP client for the pizza price calculation endpoint."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ):
        self.base_url = (base_url or config.MENU_SERVICE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else config.REQUEST_TIMEOUT
        self._session = session or requests.Session()

    def calculate(
        self,
        restaurant_id: str,
        menu_item_id: str,
        size_code: str,
        crust_type: str,
        toppings: Iterable[tuple[str, str]] = (),
        defaults: Iterable[str] = (),
    ) -> PriceQuote:
        """
        Ask the menu service for the price of a pizza.

        Args:
            restaurant_id: Restaurant whose crust pricing applies
            menu_item_id: Specialty pizza (template) being priced
            size_code: Variant size code
            crust_type: Variant crust code
            toppings: (topping id, amount) pairs for every active topping
            defaults: Topping ids that are the pizza's specialty defaults

        Returns:
            PriceQuote

        Raises:
            PriceCalculationError: transport failure, HTTP error or error payload
        """
        defaults = set(defaults)
        body = {
            "restaurant_id": restaurant_id,
            "template_id": menu_item_id,
            "size_code": size_code,
            "crust_type": crust_type,
            "toppings": [
                {
                    "customization_id": topping_id,
                    "amount": amount,
                    "is_template_default": topping_id in defaults,
                }
                for topping_id, amount in toppings
            ],
        }

        try:
            response = self._session.post(
                f"{self.base_url}{PRICE_PATH}", json=body, timeout=self.timeout
            )
            payload = response.json()
        except requests.RequestException as e:
            logger.error("Price calculation request failed: %s", e)
            raise PriceCalculationError(f"Price calculation failed: {e}") from e
        except ValueError as e:
            logger.error("Price calculation returned invalid JSON (HTTP %s)", response.status_code)
            raise PriceCalculationError("Invalid price calculation response") from e

        if not response.ok or (isinstance(payload, dict) and payload.get("error")):
            message = payload.get("error") if isinstance(payload, dict) else None
            logger.warning(
                "Price calculation rejected for %s %s/%s: %s",
                menu_item_id, size_code, crust_type, message or response.status_code,
            )
            raise PriceCalculationError(message or f"HTTP {response.status_code}")

        return parse_quote(payload.get("data") or {})


def parse_quote(data: dict) -> PriceQuote:
    try:
        return PriceQuote(
            base_price=float(data["basePrice"]),
            final_price=float(data["finalPrice"]),
            crust_upcharge=float(data.get("crustUpcharge", 0.0) or 0.0),
            topping_cost=float(data.get("toppingCost", 0.0) or 0.0),
            breakdown=[
                PriceLine(name=line["name"], amount=float(line["price"]), kind=line.get("type", "topping"))
                for line in data.get("breakdown") or []
            ],
            warnings=list(data.get("warnings") or []),
            estimated_prep_minutes=data.get("estimatedPrepTime"),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise PriceCalculationError(f"Malformed price calculation response: {e}") from e


# =============================================================================
# Request Tracking
# =============================================================================

@dataclass(frozen=True)
class PriceRequest:
    """A price request that has been issued."""
    token: int
    fingerprint: Hashable
    payload: Any = None


class PriceRequestTracker:
    """
    Debounces, deduplicates and invalidates remote price requests.

    Usage:
        tracker.submit(fingerprint, payload)   # on every selection change
        request = tracker.due()                # on each tick
        if request:
            quote = client.calculate(**request.payload)
            if tracker.accept(request):
                apply(quote)
    """

    def __init__(
        self,
        debounce_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.debounce_seconds = (
            config.PRICE_DEBOUNCE_SECONDS if debounce_seconds is None else debounce_seconds
        )
        self._clock = clock
        self._tokens = itertools.count(1)
        self._current: Hashable | None = None
        self._pending: tuple[Hashable, Any] | None = None
        self._pending_since: float = 0.0
        self._issued: PriceRequest | None = None
        self._cancelled = False

    @property
    def current_fingerprint(self) -> Hashable | None:
        """Fingerprint of the latest submitted selection."""
        return self._current

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def submit(
        self,
        fingerprint: Hashable,
        payload: Any = None,
        now: float | None = None,
        force: bool = False,
    ) -> bool:
        """
        Record a selection change.

        Args:
            fingerprint: Value identifying the selection
            payload: Whatever the caller needs to run the request
            now: Current clock reading, read from the clock when None
            force: Schedule even if the fingerprint was already issued (retry)

        Returns:
            True if a new request was scheduled, False if it was deduplicated
            or the tracker is cancelled
        """
        if self._cancelled:
            return False
        self._current = fingerprint

        if self._pending is not None and self._pending[0] == fingerprint:
            return False
        if not force and self._issued is not None and self._issued.fingerprint == fingerprint:
            # Back to the selection already asked for
            self._pending = None
            return False

        self._pending = (fingerprint, payload)
        self._pending_since = self._clock() if now is None else now
        return True

    def due(self, now: float | None = None) -> PriceRequest | None:
        """Issue the pending request once it has been quiet long enough."""
        if self._pending is None or self._cancelled:
            return None
        now = self._clock() if now is None else now
        if now - self._pending_since < self.debounce_seconds:
            return None
        return self._issue()

    def flush(self) -> PriceRequest | None:
        """Issue the pending request immediately, ignoring the quiet period."""
        if self._pending is None or self._cancelled:
            return None
        return self._issue()

    def _issue(self) -> PriceRequest:
        fingerprint, payload = self._pending
        self._pending = None
        self._issued = PriceRequest(token=next(self._tokens), fingerprint=fingerprint, payload=payload)
        logger.debug("Issuing price request %d", self._issued.token)
        return self._issued

    def accept(self, request: PriceRequest) -> bool:
        """Whether the result of a request may still be applied."""
        if self._cancelled:
            logger.debug("Dropping price response %d after cancel", request.token)
            return False
        if self._issued is None or request.token != self._issued.token:
            logger.debug("Dropping superseded price response %d", request.token)
            return False
        if request.fingerprint != self._current:
            logger.debug("Dropping stale price response %d", request.token)
            return False
        return True

    def cancel(self) -> None:
        """Abandon all pending and in-flight requests."""
        self._cancelled = True
        self._pending = None
