"""
api/destinations.py
───────────────────
POST /api/destinations                  — random destination matching constraints
GET  /api/destinations/{destination_id} — direct lookup for shared links
GET  /api/locations                     — departure locations with travel-time data

"Nothing matched" is a 200 with ``{"destination": null}``; only malformed
requests (400) and store failures (500) are errors.
"""

import random
from typing import List

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from core.config import Settings, get_settings
from core.security import SELECTION_LIMIT, limiter
from models.destination import DestinationEnvelope
from repositories.destinations import DestinationRepository
from services.recommendation import (
    DestinationRequest,
    get_destination_by_id,
    list_departure_locations,
    select_destination,
)

router = APIRouter(tags=["destinations"])


class LocationsResponse(BaseModel):
    """Departure locations that have travel-time data."""

    locations: List[str]


# ── Dependencies ────────────────────────────────────────────────────────────

def get_repository(request: Request) -> DestinationRepository:
    """Repository built once in the lifespan and shared across requests."""
    return request.app.state.repository


def get_rng(request: Request) -> random.Random:
    return request.app.state.rng


# ── Endpoints ───────────────────────────────────────────────────────────────

@router.post(
    "/destinations",
    response_model=DestinationEnvelope,
    summary="Pick a random destination",
    description=(
        "Returns one destination reachable from ``location`` within the travel "
        "time window, sampled so every region cluster is equally likely. "
        "``destinationId`` short-circuits to a direct lookup."
    ),
)
@limiter.limit(SELECTION_LIMIT)
async def pick_destination(
    request: Request,
    body: DestinationRequest,
    repository: DestinationRepository = Depends(get_repository),
    rng: random.Random = Depends(get_rng),
    settings: Settings = Depends(get_settings),
) -> DestinationEnvelope:
    destination = await select_destination(repository, body, settings, rng)
    return DestinationEnvelope(destination=destination)


@router.get(
    "/destinations/{destination_id}",
    response_model=DestinationEnvelope,
    summary="Get a destination by id",
)
async def read_destination(
    destination_id: str,
    repository: DestinationRepository = Depends(get_repository),
) -> DestinationEnvelope:
    destination = await get_destination_by_id(repository, destination_id)
    return DestinationEnvelope(destination=destination)


@router.get(
    "/locations",
    response_model=LocationsResponse,
    summary="List departure locations",
)
async def read_locations(
    repository: DestinationRepository = Depends(get_repository),
) -> LocationsResponse:
    return LocationsResponse(locations=await list_departure_locations(repository))
