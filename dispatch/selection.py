"""
Purpose: Decides which weight tier gets served next.
What it does:
Compares the heads of the non-empty tiers with the ordering rule and
reports the tier whose head wins.
"""

from __future__ import annotations

from typing import List, NamedTuple, Optional

from jobs.models import JobRecord, WeightTier
from jobs.ordering import rank
from jobs.pool import JobPool


class TierSelection(NamedTuple):
    tier: WeightTier
    head: Optional[JobRecord]

    @property
    def is_empty(self) -> bool:
        # sentinel: every tier was empty, tier is SINGLE but there is nothing to take
        return self.head is None

    @property
    def required_carriers(self) -> int:
        return self.tier.required_carriers


NOTHING_PENDING = TierSelection(WeightTier.SINGLE, None)


def select_tier(pool: JobPool) -> TierSelection:
    """
    Tier holding the highest-precedence pending job.

    Heads are listed lightest tier first, so on a full tie the lighter tier wins.
    """
    candidates: List[JobRecord] = []
    for tier in WeightTier:
        head = pool.head(tier)
        if head is not None:
            candidates.append(head)

    if not candidates:
        return NOTHING_PENDING

    winner = rank(candidates)[0]
    return TierSelection(winner.tier, winner)
