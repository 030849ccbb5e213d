"""
Ordering Session Store
======================

Each ordering session owns one cart. Sessions live only in memory; there
is no persisted order format in the order builder.

Cache Eviction Strategy:
------------------------
1. **TTL-based**: Sessions not accessed within SESSION_TTL_SECONDS are
   dropped. Checked probabilistically (~1% of lookups) to avoid overhead.

2. **LRU-based**: When the store reaches SESSION_MAX_CACHE_SIZE, the oldest
   10% of sessions (by last access time) are evicted to make room.

Thread Safety:
--------------
All store operations are protected by a threading.Lock because FastAPI runs
sync endpoints in a thread pool. The carts themselves are only mutated by
the request that looked them up.

Configuration:
--------------
See config.py for these settings:
- SESSION_TTL_SECONDS: How long idle sessions are kept (default: 1 hour)
- SESSION_MAX_CACHE_SIZE: Maximum stored sessions (default: 1000)

Usage:
------
    from order_builder.services.session import create_session, get_session

    session = create_session(restaurant_id="tonys")
    session.cart.add_item(cart_item)

    session = get_session(session_id)
    if session is None:
        raise HTTPException(404, "Session not found")
"""

import logging
import random
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .. import config
from ..cart.cart import Cart

logger = logging.getLogger(__name__)


@dataclass
class OrderingSession:
    """One order being built at a terminal."""
    session_id: str
    restaurant_id: str
    cart: Cart = field(default_factory=Cart)
    order_type: str = "pickup"
    created_at: float = field(default_factory=time.time)


# =============================================================================
# Session Cache
# =============================================================================
# {session_id: {"data": OrderingSession, "last_access": timestamp}}

SESSION_CACHE: Dict[str, Dict[str, Any]] = {}
_cache_lock = threading.Lock()


# =============================================================================
# Cache Maintenance Functions
# =============================================================================

def _cleanup_expired_sessions() -> int:
    """
    Remove sessions not accessed within SESSION_TTL_SECONDS.

    Returns:
        int: Number of sessions removed
    """
    now = time.time()

    with _cache_lock:
        expired = [
            sid for sid, entry in SESSION_CACHE.items()
            if now - entry.get("last_access", 0) > config.SESSION_TTL_SECONDS
        ]
        for sid in expired:
            del SESSION_CACHE[sid]

    if expired:
        logger.debug("Cleaned up %d expired sessions", len(expired))

    return len(expired)


def _evict_oldest_sessions_locked(count: int) -> None:
    """
    Evict the least recently used sessions. Caller must hold _cache_lock.

    Args:
        count: Number of sessions to evict
    """
    sorted_sessions = sorted(
        SESSION_CACHE.items(),
        key=lambda x: x[1].get("last_access", 0)
    )

    to_remove = sorted_sessions[:max(count, 1)]
    for sid, _ in to_remove:
        del SESSION_CACHE[sid]

    logger.debug("Evicted %d oldest sessions", len(to_remove))


# =============================================================================
# Public Session Management Functions
# =============================================================================

def create_session(restaurant_id: str | None = None, order_type: str = "pickup") -> OrderingSession:
    """
    Start a new ordering session with an empty cart.

    Args:
        restaurant_id: Restaurant whose menu the session uses
        order_type: pickup, delivery or dine_in

    Returns:
        The new OrderingSession
    """
    session = OrderingSession(
        session_id=str(uuid.uuid4()),
        restaurant_id=restaurant_id or config.RESTAURANT_ID,
        order_type=order_type,
    )

    with _cache_lock:
        if len(SESSION_CACHE) >= config.SESSION_MAX_CACHE_SIZE:
            _evict_oldest_sessions_locked(config.SESSION_MAX_CACHE_SIZE // 10)

        SESSION_CACHE[session.session_id] = {
            "data": session,
            "last_access": time.time(),
        }

    logger.info("Created ordering session %s for %s", session.session_id, session.restaurant_id)
    return session


def get_session(session_id: str) -> Optional[OrderingSession]:
    """
    Look up a session and refresh its last access time.

    Returns:
        The OrderingSession, or None if unknown or expired

    Side Effects:
        May trigger probabilistic cleanup of expired sessions (~1% of calls)
    """
    if random.randint(1, 100) == 1:
        _cleanup_expired_sessions()

    with _cache_lock:
        entry = SESSION_CACHE.get(session_id)
        if entry is None:
            return None
        if time.time() - entry["last_access"] > config.SESSION_TTL_SECONDS:
            del SESSION_CACHE[session_id]
            return None
        entry["last_access"] = time.time()
        return entry["data"]


def delete_session(session_id: str) -> bool:
    """Drop a session. Returns False if it did not exist."""
    with _cache_lock:
        return SESSION_CACHE.pop(session_id, None) is not None


def clear_cache() -> int:
    """
    Drop all sessions. Useful for testing and maintenance.

    Returns:
        int: Number of sessions that were stored before clearing
    """
    with _cache_lock:
        count = len(SESSION_CACHE)
        SESSION_CACHE.clear()
        logger.info("Cleared %d sessions from cache", count)
        return count


def get_cache_stats() -> Dict[str, Any]:
    """
    Get statistics about the session store.

    Returns:
        Dict with size, max_size, ttl_seconds, oldest_access and newest_access
    """
    with _cache_lock:
        if not SESSION_CACHE:
            return {
                "size": 0,
                "max_size": config.SESSION_MAX_CACHE_SIZE,
                "ttl_seconds": config.SESSION_TTL_SECONDS,
                "oldest_access": None,
                "newest_access": None,
            }

        access_times = [entry["last_access"] for entry in SESSION_CACHE.values()]
        return {
            "size": len(SESSION_CACHE),
            "max_size": config.SESSION_MAX_CACHE_SIZE,
            "ttl_seconds": config.SESSION_TTL_SECONDS,
            "oldest_access": min(access_times),
            "newest_access": max(access_times),
        }
