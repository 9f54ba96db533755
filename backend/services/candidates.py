"""
services/candidates.py
──────────────────────
Constraint filter: turns a departure location, a travel-time window and a
transport mode into the candidate destinations the sampler draws from.

Island handling:
  • exclude_jeju=True  → drop every island record (flag, cluster *and* address checks)
  • exclude_jeju=False → keep at most ``island_cap`` island records, all others uncapped
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from models.destination import Destination, TransportMode
from repositories.destinations import DestinationRepository

logger = logging.getLogger("randomtrip.candidates")

DEFAULT_ISLAND_CAP = 50


def apply_island_policy(
    candidates: List[Destination],
    exclude_jeju: bool,
    island_cap: int = DEFAULT_ISLAND_CAP,
) -> List[Destination]:
    """Drop or cap island destinations, preserving store order."""
    if exclude_jeju:
        return [c for c in candidates if not c.is_jeju]

    kept: List[Destination] = []
    islands = 0
    for candidate in candidates:
        if candidate.is_jeju:
            if islands >= island_cap:
                continue
            islands += 1
        kept.append(candidate)
    return kept


async def find_candidates(
    repository: DestinationRepository,
    origin: str,
    min_time: float,
    max_time: float,
    transport_mode: TransportMode,
    exclude_id: Optional[Any] = None,
    exclude_jeju: bool = False,
    island_cap: int = DEFAULT_ISLAND_CAP,
) -> List[Destination]:
    """
    Return every destination reachable from *origin* within
    ``[min_time, max_time]`` hours by *transport_mode*.

    Bounds are inclusive and are not reordered: ``min_time > max_time``
    simply matches nothing. An empty list is a normal outcome.
    """
    mode = TransportMode(transport_mode)
    rows = await repository.find_matching(
        origin=origin,
        time_field=mode.time_field,
        min_time=min_time,
        max_time=max_time,
        exclude_id=exclude_id,
    )

    # Re-check bounds on the assembled models; the store may hold noisy values.
    in_range: List[Destination] = []
    for row in rows:
        hours = row.travel_time(mode)
        if hours is not None and min_time <= hours <= max_time:
            in_range.append(row)

    candidates = apply_island_policy(in_range, exclude_jeju, island_cap)
    logger.info(
        "Candidates for %s (%s, %.1f–%.1f h, exclude_jeju=%s): %d of %d rows",
        origin,
        mode.value,
        min_time,
        max_time,
        exclude_jeju,
        len(candidates),
        len(rows),
    )
    return candidates
