"""
db/redis_client.py
-------------------
redis-py client — singleton plus helpers for the itinerary key schema.

Key schema:

  itinerary:{itinerary_id}
       Type : String (JSON document, see schemas.itinerary.itinerary_to_dict)
       TTL  : ITINERARY_TTL (default 7,776,000 s = 90 days; 0 = no expiry)

Environment variables (set in config.py):
    REDIS_HOST        default: localhost
    REDIS_PORT        default: 6379
    REDIS_DB          default: 0
    REDIS_PASSWORD    default: ""  (empty = no auth)
    ITINERARY_TTL     default: 7776000
"""

from __future__ import annotations

from typing import Any

import redis

from racetrip import config

# Module-level singleton; initialised lazily on first call to get_redis()
_client: redis.Redis | None = None


def get_redis() -> redis.Redis:
    """Return the singleton Redis client, creating it on first call."""
    global _client
    if _client is None:
        kwargs: dict[str, Any] = {
            "host":             config.REDIS_HOST,
            "port":             config.REDIS_PORT,
            "db":               config.REDIS_DB,
            "decode_responses": True,   # return str, not bytes
        }
        if config.REDIS_PASSWORD:
            kwargs["password"] = config.REDIS_PASSWORD
        _client = redis.Redis(**kwargs)
    return _client


def itinerary_key(itinerary_id: str) -> str:
    return f"itinerary:{itinerary_id}"


def claim_itinerary(r: redis.Redis, itinerary_id: str, document: str) -> bool:
    """
    Write ``document`` under a fresh itinerary key.

    Uses SET NX so two writers can never share a key.  Returns False when
    the key already exists (identifier collision).
    """
    ttl = config.ITINERARY_TTL
    result = r.set(
        itinerary_key(itinerary_id),
        document,
        nx=True,
        ex=ttl if ttl > 0 else None,
    )
    return bool(result)


def load_itinerary(r: redis.Redis, itinerary_id: str) -> str | None:
    """Return the stored JSON document, or None if missing / expired."""
    return r.get(itinerary_key(itinerary_id))
