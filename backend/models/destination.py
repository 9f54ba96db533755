"""
models/destination.py
─────────────────────
Pydantic v2 models for destinations read from the travel-time store.

Covers:
  • TransportMode   — car / publicTransport and the time field each one reads
  • resolve_cluster — explicit cluster or first token of the address
  • Destination     — immutable record returned to callers
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# ═══════════════════════════════════════════════════════════════════════════
# Enums
# ═══════════════════════════════════════════════════════════════════════════

class TransportMode(str, Enum):
    """How the traveller gets to the destination."""

    CAR = "car"
    PUBLIC_TRANSPORT = "publicTransport"

    @property
    def time_field(self) -> str:
        """Store field holding the one-way duration for this mode."""
        if self is TransportMode.CAR:
            return "drive_time"
        return "transit_time"


# ═══════════════════════════════════════════════════════════════════════════
# Field helpers
# ═══════════════════════════════════════════════════════════════════════════

def resolve_cluster(cluster: Any, address: Optional[str]) -> Optional[str]:
    """
    Return the cluster key for a record.

    The explicit ``cluster`` field wins; otherwise the first
    whitespace-delimited token of ``address`` is used. ``None`` means the
    cluster cannot be resolved.
    """
    if cluster is not None and str(cluster).strip():
        return str(cluster).strip()
    if address:
        tokens = address.split()
        if tokens:
            return tokens[0]
    return None


def to_hours(value: Any) -> Optional[float]:
    """Coerce a stored duration to float hours; blanks and junk become ``None``."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).strip())
    except ValueError:
        return None


def is_island(
    cluster: Optional[str],
    address: Optional[str],
    stored_flag: Any,
    island_cluster: str,
    island_region_name: str,
) -> bool:
    """True when a record belongs to the island region by flag, cluster or address."""
    if stored_flag in (True, 1, "1", "true", "True"):
        return True
    if cluster is not None and cluster == island_cluster:
        return True
    return bool(address) and island_region_name in address


# ═══════════════════════════════════════════════════════════════════════════
# Destination
# ═══════════════════════════════════════════════════════════════════════════

class Destination(BaseModel):
    """A travel destination measured from one departure location."""

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "id": 42,
                "name": "남이섬",
                "address": "강원특별자치도 춘천시 남산면 남이섬길 1",
                "image": None,
                "cluster": "강원특별자치도",
                "departure_location": "서울특별시",
                "drive_time": 1.5,
                "transit_time": 2.0,
                "description": "메타세쿼이아 길로 유명한 강 위의 섬",
                "is_jeju": False,
            }
        },
    )

    id: Union[int, str]
    name: str
    address: str = ""
    image: Optional[str] = None
    cluster: str
    departure_location: str = ""
    drive_time: Optional[float] = None
    transit_time: Optional[float] = None
    description: Optional[str] = None
    is_jeju: bool = False

    def travel_time(self, mode: TransportMode) -> Optional[float]:
        return self.drive_time if mode is TransportMode.CAR else self.transit_time

    @classmethod
    def from_records(
        cls,
        place: Mapping[str, Any],
        travel_time: Optional[Mapping[str, Any]],
        island_cluster: str,
        island_region_name: str,
    ) -> Optional["Destination"]:
        """
        Assemble a destination from a place document and its travel-time row.

        For the denormalized layout ``place`` and ``travel_time`` are the same
        document. A ``None`` travel-time row leaves the origin empty and both
        durations null. Returns ``None`` when the record has no ``id`` or its
        cluster cannot be resolved.
        """
        address = str(place.get("address") or "")
        cluster = resolve_cluster(place.get("cluster"), address)
        if cluster is None:
            return None

        identifier = place.get("id")
        if identifier is None:
            return None

        timing: Mapping[str, Any] = travel_time or {}
        data: Dict[str, Any] = {
            "id": identifier,
            "name": place.get("name") or "",
            "address": address,
            "image": place.get("image") or None,
            "cluster": cluster,
            "departure_location": timing.get("departure_location") or "",
            "drive_time": to_hours(timing.get("drive_time")),
            "transit_time": to_hours(timing.get("transit_time")),
            "description": place.get("description"),
            "is_jeju": is_island(
                cluster,
                address,
                place.get("is_jeju"),
                island_cluster,
                island_region_name,
            ),
        }
        return cls(**data)


class DestinationEnvelope(BaseModel):
    """Response body: the selected destination, or ``null`` when none matched."""

    destination: Optional[Destination] = Field(
        default=None,
        description="Selected destination; null when nothing matched",
    )
