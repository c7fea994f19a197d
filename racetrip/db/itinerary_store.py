"""
db/itinerary_store.py
---------------------
Itinerary Store — persists assembled itineraries under fresh identifiers.

    put(itinerary) -> identifier
    get(identifier) -> Itinerary | None

Identifiers are minted here, never by the caller:
``secrets.token_urlsafe(ITINERARY_ID_BYTES)`` (12 URL-safe characters by
default).  ``put`` claims the key atomically and draws a new identifier on
collision, up to ITINERARY_ID_MAX_ATTEMPTS times.

Both backends keep the serialized JSON document, so every ``get`` returns an
independent copy.  Backend failures surface as StorageError; an unknown or
expired identifier is a normal ``None``.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import secrets
import threading
from abc import ABC, abstractmethod
from typing import Callable, Optional

import redis

from racetrip import config
from racetrip.db import redis_client
from racetrip.errors import StorageError
from racetrip.schemas.itinerary import Itinerary, itinerary_from_dict, itinerary_to_dict

logger = logging.getLogger(__name__)


def new_itinerary_id() -> str:
    return secrets.token_urlsafe(config.ITINERARY_ID_BYTES)


def _encode(itinerary: Itinerary) -> str:
    return json.dumps(itinerary_to_dict(itinerary), ensure_ascii=False)


def _decode(document: str) -> Itinerary:
    return itinerary_from_dict(json.loads(document))


class ItineraryStore(ABC):
    """Keyed store for generated itineraries."""

    def __init__(self, id_factory: Callable[[], str] | None = None) -> None:
        self._new_id = id_factory or new_itinerary_id

    def put(self, itinerary: Itinerary) -> str:
        """Persist ``itinerary`` under a newly minted identifier and return it."""
        for attempt in range(1, config.ITINERARY_ID_MAX_ATTEMPTS + 1):
            try:
                itinerary_id = self._new_id()
            except Exception as exc:
                raise StorageError(f"Identifier generation failed: {exc}") from exc
            stored = dataclasses.replace(itinerary, itinerary_id=itinerary_id)
            if self._claim(itinerary_id, _encode(stored)):
                return itinerary_id
            logger.warning("Itinerary id collision on attempt %d; drawing a new id", attempt)
        raise StorageError(
            f"Could not mint a unique itinerary id after {config.ITINERARY_ID_MAX_ATTEMPTS} attempts"
        )

    def get(self, itinerary_id: str) -> Optional[Itinerary]:
        """Return the stored itinerary, or None if unknown / expired."""
        if not itinerary_id:
            return None
        document = self._load(itinerary_id)
        if document is None:
            return None
        try:
            return _decode(document)
        except (ValueError, KeyError, TypeError) as exc:
            raise StorageError(f"Stored itinerary {itinerary_id} is corrupt: {exc}") from exc

    @abstractmethod
    def _claim(self, itinerary_id: str, document: str) -> bool:
        """Store ``document`` iff ``itinerary_id`` is unused; False on collision."""

    @abstractmethod
    def _load(self, itinerary_id: str) -> Optional[str]:
        """Return the stored document or None."""


class InMemoryItineraryStore(ItineraryStore):
    """Process-local store (single worker / tests)."""

    def __init__(self, id_factory: Callable[[], str] | None = None) -> None:
        super().__init__(id_factory)
        self._lock = threading.Lock()
        self._documents: dict[str, str] = {}

    def _claim(self, itinerary_id: str, document: str) -> bool:
        with self._lock:
            if itinerary_id in self._documents:
                return False
            self._documents[itinerary_id] = document
            return True

    def _load(self, itinerary_id: str) -> Optional[str]:
        with self._lock:
            return self._documents.get(itinerary_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._documents)


class RedisItineraryStore(ItineraryStore):
    """Redis-backed store; see db/redis_client.py for the key schema."""

    def __init__(
        self,
        client: redis.Redis | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        super().__init__(id_factory)
        self._client = client

    @property
    def client(self) -> redis.Redis:
        return self._client or redis_client.get_redis()

    def _claim(self, itinerary_id: str, document: str) -> bool:
        try:
            return redis_client.claim_itinerary(self.client, itinerary_id, document)
        except redis.RedisError as exc:
            logger.error("Redis write failed for itinerary %s: %s", itinerary_id, exc)
            raise StorageError(f"Could not persist itinerary: {exc}") from exc

    def _load(self, itinerary_id: str) -> Optional[str]:
        try:
            return redis_client.load_itinerary(self.client, itinerary_id)
        except redis.RedisError as exc:
            logger.error("Redis read failed for itinerary %s: %s", itinerary_id, exc)
            raise StorageError(f"Could not read itinerary: {exc}") from exc


def get_itinerary_store() -> ItineraryStore:
    """Store selected by STORE_BACKEND ("memory" | "redis")."""
    if config.STORE_BACKEND == "redis":
        return RedisItineraryStore()
    if config.STORE_BACKEND == "memory":
        return InMemoryItineraryStore()
    raise ValueError(f"Unknown STORE_BACKEND: {config.STORE_BACKEND!r}")
