"""
services/sampler.py
───────────────────
Cluster-fair sampling.

A flat uniform draw makes a region's exposure proportional to how many of
its spots happen to be catalogued. Instead we draw in two stages:

  1. one cluster, uniformly among the distinct cluster keys
  2. one destination, uniformly among that cluster's members
"""

from __future__ import annotations

import random
from collections import defaultdict
from typing import Dict, List, Optional, Sequence

from models.destination import Destination


def group_by_cluster(candidates: Sequence[Destination]) -> Dict[str, List[Destination]]:
    groups: Dict[str, List[Destination]] = defaultdict(list)
    for candidate in candidates:
        groups[candidate.cluster].append(candidate)
    return dict(groups)


def pick_one(
    candidates: Sequence[Destination],
    rng: Optional[random.Random] = None,
) -> Destination:
    """
    Pick one destination, giving every cluster the same chance.

    Raises ``ValueError`` on an empty sequence; callers handle "no candidates"
    before sampling.
    """
    if not candidates:
        raise ValueError("pick_one() requires at least one candidate")

    rng = rng or random.Random()
    groups = group_by_cluster(candidates)
    cluster = rng.choice(sorted(groups))
    return rng.choice(groups[cluster])
