"""
services/recommendation.py
──────────────────────────
Destination selection entry points for Random Trip.

Pipeline:
  Direct lookup → ``destinationId`` present, fetch that record and stop
  Phase 1       → Constraint filter (origin, time window, mode, exclusions)
  Phase 2       → Cluster-fair sampling over the surviving candidates
"""

from __future__ import annotations

import logging
import random
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.config import Settings
from core.errors import MalformedRequestError
from models.destination import Destination, TransportMode
from repositories.destinations import DestinationRepository
from services.candidates import find_candidates
from services.sampler import pick_one

logger = logging.getLogger("randomtrip.recommendation")


def coerce_flag(value: Any) -> bool:
    """Normalize a boolean that callers may send as ``true`` or ``"true"``."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text == "true":
            return True
        if text in ("false", ""):
            return False
    raise ValueError(f"expected a boolean or 'true'/'false', got {value!r}")


# ═══════════════════════════════════════════════════════════════════════════
# Request model
# ═══════════════════════════════════════════════════════════════════════════

class DestinationRequest(BaseModel):
    """Body of ``POST /api/destinations``."""

    model_config = ConfigDict(populate_by_name=True)

    destination_id: Optional[str] = Field(
        default=None,
        alias="destinationId",
        description="When present, short-circuits to a direct lookup",
    )
    location: Optional[str] = Field(default=None, description="Departure region, e.g. 서울특별시")
    min_travel_time: float = Field(default=0.0, ge=0.0, alias="minTravelTime")
    max_travel_time: Optional[float] = Field(default=None, ge=0.0, alias="maxTravelTime")
    transport_mode: Optional[TransportMode] = Field(default=None, alias="transportMode")
    exclude_id: Optional[Union[int, str]] = Field(default=None, alias="excludeId")
    exclude_jeju: bool = Field(default=False, alias="excludeJeju")

    @field_validator("destination_id", mode="before")
    @classmethod
    def _stringify_id(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("exclude_jeju", mode="before")
    @classmethod
    def _normalize_exclude_jeju(cls, v: Any) -> bool:
        return coerce_flag(v)


# ═══════════════════════════════════════════════════════════════════════════
# Entry points
# ═══════════════════════════════════════════════════════════════════════════

async def get_destination_by_id(
    repository: DestinationRepository,
    destination_id: Any,
) -> Optional[Destination]:
    """Direct lookup for shared links; an unknown id yields ``None``."""
    destination = await repository.get_by_id(destination_id)
    if destination is None:
        logger.info("No destination with id %r", destination_id)
    return destination


async def select_destination(
    repository: DestinationRepository,
    request: DestinationRequest,
    settings: Settings,
    rng: Optional[random.Random] = None,
) -> Optional[Destination]:
    """
    Resolve a request to at most one destination.

    Raises ``MalformedRequestError`` before touching the store when a random
    selection is requested without location, upper bound or transport mode.
    Store failures surface as ``StoreUnavailableError``.
    """
    if request.destination_id is not None:
        return await get_destination_by_id(repository, request.destination_id)

    location = (request.location or "").strip()
    if not location:
        raise MalformedRequestError("location is required")
    if request.max_travel_time is None:
        raise MalformedRequestError("maxTravelTime is required")
    if request.transport_mode is None:
        raise MalformedRequestError("transportMode is required")

    # ── Phase 1: Constraint filter ──────────────────────────────────────
    candidates = await find_candidates(
        repository,
        origin=location,
        min_time=request.min_travel_time,
        max_time=request.max_travel_time,
        transport_mode=request.transport_mode,
        exclude_id=request.exclude_id,
        exclude_jeju=request.exclude_jeju,
        island_cap=settings.ISLAND_CANDIDATE_CAP,
    )
    if not candidates:
        logger.info("No destination matched %s within %.1f h", location, request.max_travel_time)
        return None

    # ── Phase 2: Cluster-fair sampling ──────────────────────────────────
    destination = pick_one(candidates, rng)
    logger.info("Selected destination %r (cluster %s)", destination.id, destination.cluster)
    return destination


async def list_departure_locations(repository: DestinationRepository) -> List[str]:
    """Origins that have travel-time data, sorted."""
    return await repository.list_departure_locations()
