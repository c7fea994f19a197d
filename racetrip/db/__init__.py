"""
db/
----
Storage adapters for the itinerary engine.

  PostgreSQL (psycopg2) — read-only event catalog
    tables: races, sessions, experiences
    access: db.repositories.catalog_repo via db.connection.get_conn()

  Redis (redis-py) — generated itineraries
    itinerary:{id}   TTL = ITINERARY_TTL (90 days)
    access: db.itinerary_store.RedisItineraryStore
"""

from racetrip.db.connection import close_pool, get_conn
from racetrip.db.redis_client import get_redis

__all__ = ["get_conn", "close_pool", "get_redis"]
