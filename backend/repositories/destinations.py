"""
repositories/destinations.py
────────────────────────────
Read-only gateways over the travel-time store.

Two MongoDB layouts are supported behind the same interface:

  • denormalized — one ``destinations`` document per (place, origin) pair
  • split        — ``places`` joined with ``travel_times`` by cluster

Callers only see ``Destination`` models; every pymongo failure is re-raised
as ``StoreUnavailableError`` so a failed sub-query aborts the whole request.
"""

from __future__ import annotations

import functools
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, TYPE_CHECKING

from pydantic import ValidationError
from pymongo.errors import PyMongoError

from core.config import Settings
from core.errors import StoreUnavailableError
from models.destination import Destination, resolve_cluster

if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorDatabase

logger = logging.getLogger("randomtrip.repository")

_BY_ID = [("id", 1), ("_id", 1)]
_BY_INSERTION = [("_id", 1)]


def key_variants(value: Any) -> List[Any]:
    """
    Return the stored forms a key may take.

    Identifiers and cluster keys arrive as strings from the HTTP boundary but
    are frequently stored as integers, so ``"42"`` matches both ``"42"`` and ``42``.
    """
    variants: List[Any] = [value]
    if isinstance(value, bool):
        return variants
    if isinstance(value, int):
        variants.append(str(value))
    elif isinstance(value, str):
        text = value.strip()
        if text != value:
            variants.append(text)
        if text.lstrip("-").isdigit():
            variants.append(int(text))
    return variants


def _time_range(time_field: str, min_time: float, max_time: float) -> Dict[str, Any]:
    # Range operators only match numeric values; the seed script stores floats.
    return {time_field: {"$ne": None, "$gte": min_time, "$lte": max_time}}


def _store_call(operation: str):
    """Translate pymongo failures raised by *operation* into ``StoreUnavailableError``."""

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except PyMongoError as exc:
                logger.exception("Store query failed during %s", operation)
                raise StoreUnavailableError(f"{operation} failed: {exc}") from exc

        return wrapper

    return decorator


# ═══════════════════════════════════════════════════════════════════════════
# Interface
# ═══════════════════════════════════════════════════════════════════════════

class DestinationRepository(ABC):
    """Storage contract used by the selection core."""

    def __init__(self, db: "AsyncIOMotorDatabase", settings: Settings) -> None:
        self._db = db
        self._settings = settings

    @abstractmethod
    async def find_matching(
        self,
        origin: str,
        time_field: str,
        min_time: float,
        max_time: float,
        exclude_id: Any = None,
    ) -> List[Destination]:
        """
        Return destinations measured from *origin* whose *time_field* is
        non-null and inside ``[min_time, max_time]``, ordered by id.
        """

    @abstractmethod
    async def get_by_id(self, identifier: Any) -> Optional[Destination]:
        """Return the destination with *identifier*, or ``None``."""

    @abstractmethod
    async def list_departure_locations(self) -> List[str]:
        """Return every origin that has travel-time data."""

    def _assemble(
        self,
        place: Mapping[str, Any],
        travel_time: Optional[Mapping[str, Any]],
    ) -> Optional[Destination]:
        try:
            destination = Destination.from_records(
                place,
                travel_time,
                island_cluster=self._settings.ISLAND_CLUSTER,
                island_region_name=self._settings.ISLAND_REGION_NAME,
            )
        except ValidationError as exc:
            logger.warning(
                "Skipping record %r: invalid fields (%s)",
                place.get("id", place.get("_id")),
                exc.errors(include_url=False),
            )
            return None
        if destination is None:
            logger.warning(
                "Skipping record %r: missing id or unresolvable cluster",
                place.get("id", place.get("_id")),
            )
        return destination


# ═══════════════════════════════════════════════════════════════════════════
# Single collection
# ═══════════════════════════════════════════════════════════════════════════

class DenormalizedDestinationRepository(DestinationRepository):
    """Every document carries place facts and one origin's travel times."""

    @property
    def _collection(self):
        return self._db[self._settings.DESTINATIONS_COLLECTION]

    @_store_call("candidate query")
    async def find_matching(
        self,
        origin: str,
        time_field: str,
        min_time: float,
        max_time: float,
        exclude_id: Any = None,
    ) -> List[Destination]:
        query: Dict[str, Any] = {"departure_location": origin}
        query.update(_time_range(time_field, min_time, max_time))
        if exclude_id is not None:
            query["id"] = {"$nin": key_variants(exclude_id)}

        results: List[Destination] = []
        async for doc in self._collection.find(query, sort=_BY_ID):
            destination = self._assemble(doc, doc)
            if destination is not None:
                results.append(destination)
        return results

    @_store_call("destination lookup")
    async def get_by_id(self, identifier: Any) -> Optional[Destination]:
        doc = await self._collection.find_one(
            {"id": {"$in": key_variants(identifier)}},
            sort=_BY_INSERTION,
        )
        if doc is None:
            return None
        return self._assemble(doc, doc)

    @_store_call("departure location listing")
    async def list_departure_locations(self) -> List[str]:
        values = await self._collection.distinct("departure_location")
        return sorted(v for v in values if v)


# ═══════════════════════════════════════════════════════════════════════════
# Places + travel times
# ═══════════════════════════════════════════════════════════════════════════

class SplitDestinationRepository(DestinationRepository):
    """Place facts and per-origin travel times live in separate collections."""

    @property
    def _places(self):
        return self._db[self._settings.PLACES_COLLECTION]

    @property
    def _travel_times(self):
        return self._db[self._settings.TRAVEL_TIMES_COLLECTION]

    @_store_call("candidate query")
    async def find_matching(
        self,
        origin: str,
        time_field: str,
        min_time: float,
        max_time: float,
        exclude_id: Any = None,
    ) -> List[Destination]:
        time_query: Dict[str, Any] = {"departure_location": origin}
        time_query.update(_time_range(time_field, min_time, max_time))

        # First matching row wins when a cluster has several for one origin.
        rows_by_cluster: Dict[str, Mapping[str, Any]] = {}
        raw_clusters: List[Any] = []
        async for row in self._travel_times.find(time_query, sort=_BY_INSERTION):
            if row.get("cluster") is None:
                continue
            key = str(row["cluster"]).strip()
            if key not in rows_by_cluster:
                rows_by_cluster[key] = row
                raw_clusters.extend(key_variants(row["cluster"]))

        if not rows_by_cluster:
            return []

        place_query: Dict[str, Any] = {
            "$or": [
                {"cluster": {"$in": raw_clusters}},
                # Blank clusters resolve from the address; padded ones need trimming.
                {"cluster": {"$in": [None, ""]}},
                {"cluster": {"$regex": r"^\s|\s$"}},
            ],
        }
        if exclude_id is not None:
            place_query["id"] = {"$nin": key_variants(exclude_id)}

        results: List[Destination] = []
        async for place in self._places.find(place_query, sort=_BY_ID):
            cluster = resolve_cluster(place.get("cluster"), place.get("address"))
            row = rows_by_cluster.get(cluster) if cluster is not None else None
            if row is None:
                continue
            destination = self._assemble(place, row)
            if destination is not None:
                results.append(destination)
        return results

    @_store_call("destination lookup")
    async def get_by_id(self, identifier: Any) -> Optional[Destination]:
        place = await self._places.find_one(
            {"id": {"$in": key_variants(identifier)}},
            sort=_BY_INSERTION,
        )
        if place is None:
            return None

        cluster = resolve_cluster(place.get("cluster"), place.get("address"))
        row = None
        if cluster is not None:
            row = await self._travel_times.find_one(
                {"cluster": {"$in": key_variants(cluster)}},
                sort=_BY_INSERTION,
            )
            if row is None:
                logger.info("No travel-time row for cluster %r; returning place only", cluster)
        return self._assemble(place, row)

    @_store_call("departure location listing")
    async def list_departure_locations(self) -> List[str]:
        values = await self._travel_times.distinct("departure_location")
        return sorted(v for v in values if v)


# ═══════════════════════════════════════════════════════════════════════════
# Factory
# ═══════════════════════════════════════════════════════════════════════════

_LAYOUTS = {
    "denormalized": DenormalizedDestinationRepository,
    "split": SplitDestinationRepository,
}


def build_repository(db: "AsyncIOMotorDatabase", settings: Settings) -> DestinationRepository:
    """Instantiate the repository matching ``settings.STORE_LAYOUT``."""
    return _LAYOUTS[settings.STORE_LAYOUT](db, settings)
