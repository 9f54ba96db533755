"""
scripts/seed_destinations.py
────────────────────────────
Load destination rows from a JSON or CSV export into MongoDB, using the
collections of the configured STORE_LAYOUT.

Usage:
    python -m scripts.seed_destinations data/destinations.json     # from backend/
    python scripts/seed_destinations.py data/destinations.csv      # direct

Each input row carries place facts and one origin's travel times:

    id, name, address, image, cluster, description, is_jeju,
    departure_location, drive_time, transit_time

denormalized → rows go to DESTINATIONS_COLLECTION as-is
split        → place facts go to PLACES_COLLECTION (one per id), travel
               times to TRAVEL_TIMES_COLLECTION (one per cluster + origin)

Rows whose key is already present are skipped, so re-running is safe.
Travel times are stored as floats: the candidate query compares them
numerically and never matches string values.
"""

from __future__ import annotations

import argparse
import asyncio
import csv
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from motor.motor_asyncio import AsyncIOMotorClient

# Ensure backend/ is on sys.path when run directly
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from core.config import Settings, get_settings
from core.database import initialize_db
from models.destination import resolve_cluster, to_hours

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger("randomtrip.seed")

PLACE_FIELDS = ("id", "name", "address", "image", "cluster", "description", "is_jeju")
TIME_FIELDS = ("cluster", "departure_location", "drive_time", "transit_time")


# ═══════════════════════════════════════════════════════════════════════════
# Row parsing
# ═══════════════════════════════════════════════════════════════════════════

def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _parse_id(value: Any) -> Any:
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return value


def _parse_flag(value: Any) -> Optional[bool]:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes")


def normalize_row(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Clean one exported row: blanks → None, numeric ids and hours parsed."""
    row = {key.strip(): _blank_to_none(value) for key, value in raw.items() if key}
    row["id"] = _parse_id(row.get("id"))
    row["drive_time"] = to_hours(row.get("drive_time"))
    row["transit_time"] = to_hours(row.get("transit_time"))
    row["is_jeju"] = _parse_flag(row.get("is_jeju"))
    if row.get("cluster") is not None:
        row["cluster"] = str(row["cluster"]).strip()
    return {key: value for key, value in row.items() if value is not None}


def load_rows(path: Path) -> List[Dict[str, Any]]:
    """Read a ``.json`` array or a ``.csv`` file with a header row."""
    if path.suffix.lower() == ".json":
        with path.open(encoding="utf-8") as handle:
            data = json.load(handle)
        if not isinstance(data, list):
            raise ValueError(f"{path} must contain a JSON array of rows")
        rows = data
    elif path.suffix.lower() == ".csv":
        with path.open(encoding="utf-8-sig", newline="") as handle:
            rows = list(csv.DictReader(handle))
    else:
        raise ValueError(f"Unsupported file type: {path.suffix}")
    return [normalize_row(row) for row in rows]


def split_row(row: Dict[str, Any]) -> Tuple[Dict[str, Any], Optional[Dict[str, Any]]]:
    """Separate a denormalized row into a place document and a travel-time row."""
    place = {key: row[key] for key in PLACE_FIELDS if key in row}
    cluster = resolve_cluster(row.get("cluster"), row.get("address"))
    if cluster is None or not row.get("departure_location"):
        return place, None
    timing = {key: row[key] for key in TIME_FIELDS if key in row}
    timing["cluster"] = cluster
    return place, timing


# ═══════════════════════════════════════════════════════════════════════════
# Seeding
# ═══════════════════════════════════════════════════════════════════════════

async def seed_rows(db, rows: List[Dict[str, Any]], settings: Settings) -> Dict[str, int]:
    """Insert *rows* into the layout's collections; returns inserted/skipped counts."""
    counts = {"inserted": 0, "skipped": 0}

    if settings.STORE_LAYOUT == "split":
        places = db[settings.PLACES_COLLECTION]
        travel_times = db[settings.TRAVEL_TIMES_COLLECTION]
        for row in rows:
            place, timing = split_row(row)
            if place.get("id") is not None and await places.find_one({"id": place["id"]}) is None:
                await places.insert_one(place)
                counts["inserted"] += 1
            else:
                counts["skipped"] += 1
            if timing is not None:
                key = {"cluster": timing["cluster"], "departure_location": timing["departure_location"]}
                if await travel_times.find_one(key) is None:
                    await travel_times.insert_one(timing)
        return counts

    collection = db[settings.DESTINATIONS_COLLECTION]
    for row in rows:
        key = {"id": row.get("id"), "departure_location": row.get("departure_location")}
        if row.get("id") is None or await collection.find_one(key) is not None:
            counts["skipped"] += 1
            continue
        await collection.insert_one(dict(row))
        counts["inserted"] += 1
    return counts


async def seed(path: Path) -> None:
    """Load *path* and insert it into the configured MongoDB database."""
    settings = get_settings()
    client = AsyncIOMotorClient(settings.MONGODB_URL)
    db = client[settings.MONGODB_DATABASE]

    try:
        rows = load_rows(path)
        logger.info("Loaded %d rows from %s (layout: %s)", len(rows), path, settings.STORE_LAYOUT)

        await initialize_db(db, settings)
        counts = await seed_rows(db, rows, settings)
        logger.info("Seed complete: %d inserted, %d skipped", counts["inserted"], counts["skipped"])
    finally:
        client.close()


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Seed Random Trip destinations")
    parser.add_argument("path", type=Path, help="JSON or CSV export of destination rows")
    args = parser.parse_args(argv)
    asyncio.run(seed(args.path))


if __name__ == "__main__":
    main()
