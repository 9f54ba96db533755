"""
core/database.py
────────────────
Database initialization utilities.

Called once during application startup (via the lifespan).
Ensures the indexes backing candidate queries and direct lookups exist for
the configured store layout.
"""

import logging
from typing import TYPE_CHECKING, Dict, List, Tuple

import pymongo

from core.config import Settings

if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorDatabase

logger = logging.getLogger("randomtrip.database")

IndexSpec = List[Tuple[str, int]]


def _origin_time_indexes() -> Dict[str, IndexSpec]:
    return {
        "origin_drive_time": [
            ("departure_location", pymongo.ASCENDING),
            ("drive_time", pymongo.ASCENDING),
        ],
        "origin_transit_time": [
            ("departure_location", pymongo.ASCENDING),
            ("transit_time", pymongo.ASCENDING),
        ],
    }


def required_indexes(settings: Settings) -> Dict[str, Dict[str, IndexSpec]]:
    """Map collection name → {index name → key spec} for the active layout."""
    if settings.STORE_LAYOUT == "split":
        travel_time_indexes = _origin_time_indexes()
        travel_time_indexes["cluster"] = [("cluster", pymongo.ASCENDING)]
        return {
            settings.PLACES_COLLECTION: {
                "place_id": [("id", pymongo.ASCENDING)],
                "place_cluster": [("cluster", pymongo.ASCENDING)],
            },
            settings.TRAVEL_TIMES_COLLECTION: travel_time_indexes,
        }

    destination_indexes = _origin_time_indexes()
    destination_indexes["destination_id"] = [("id", pymongo.ASCENDING)]
    return {settings.DESTINATIONS_COLLECTION: destination_indexes}


async def initialize_db(db: "AsyncIOMotorDatabase", settings: Settings) -> None:
    """
    Run one-time database bootstrapping: create every missing index from
    ``required_indexes``. Existing indexes are left untouched.
    """
    for collection_name, indexes in required_indexes(settings).items():
        collection = db[collection_name]
        existing_indexes = await collection.index_information()

        for index_name, keys in indexes.items():
            if index_name in existing_indexes:
                logger.info(
                    "Index '%s' already exists on '%s' — skipping creation.",
                    index_name,
                    collection_name,
                )
                continue

            logger.info("Creating index '%s' on '%s' …", index_name, collection_name)
            await collection.create_index(keys, name=index_name)
            logger.info("Index '%s' created ✓", index_name)
