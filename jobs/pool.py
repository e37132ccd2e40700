"""
Purpose: Holds pending jobs in three weight tiers (SINGLE / PAIR / TRIPLE).
What it does:
- Owns the in-memory tiers, each a list of JobRecords kept sorted by the
  ordering rule after every mutation.

Provides operations:
   - enqueue(job)
   - head(tier)
   - pop_heads(tier, count)
   - withdraw(job_id)
   - stats()

Rule: The pool owns tier state, the dispatcher decides what to take from it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional
import itertools
import logging

from .models import Job, JobRecord, WeightTier
from .ordering import sort_in_place
from .policy import TierPolicy, default_tier_policy

logger = logging.getLogger(__name__)


class UnroutableJobError(Exception):
    """Raised when a job's weight falls outside every tier."""

    def __init__(self, job: Job, heaviest: float):
        self.job = job
        self.heaviest = heaviest
        super().__init__(
            f"Job {job.job_id} weighs {job.weight}; no tier accepts weights "
            f"outside (0, {heaviest}]"
        )


@dataclass
class PoolStats:
    single_count: int
    pair_count: int
    triple_count: int

    @property
    def total(self) -> int:
        return self.single_count + self.pair_count + self.triple_count


@dataclass
class JobPool:
    """
    In-memory pending-job store:

    SINGLE / PAIR / TRIPLE tiers, each sorted highest precedence first.

    Tier choice is a pure function of weight (see TierPolicy).
    Which tier gets served next lives elsewhere (dispatch/selection.py).
    """
    policy: TierPolicy = field(default_factory=default_tier_policy)

    _tiers: Dict[WeightTier, List[JobRecord]] = field(
        default_factory=lambda: {tier: [] for tier in WeightTier}
    )
    _sequence: itertools.count = field(default_factory=itertools.count)

    # --- Public API ---

    def enqueue(self, job: Job) -> JobRecord:
        """
        File a job under its weight tier and re-sort that tier.
        """
        tier = self.policy.classify(job.weight)
        if tier is None:
            logger.warning(
                "Rejecting job %s: weight %s outside every tier", job.job_id, job.weight
            )
            raise UnroutableJobError(job, self.policy.triple_max_weight)

        record = JobRecord.of(job, tier, next(self._sequence))
        records = self._tiers[tier]
        records.append(record)
        sort_in_place(records)

        logger.debug(
            "Enqueued job %s into %s (priority=%s, destination=%s, depth=%d)",
            job.job_id, tier.name, record.priority, record.destination, len(records),
        )
        return record

    def head(self, tier: WeightTier) -> Optional[JobRecord]:
        records = self._tiers[tier]
        return records[0] if records else None

    def records(self, tier: WeightTier) -> List[JobRecord]:
        return list(self._tiers[tier])

    def pop_heads(self, tier: WeightTier, count: int = 1) -> List[JobRecord]:
        """
        Remove up to `count` records from the front of a tier.
        """
        if count <= 0:
            return []

        records = self._tiers[tier]
        taken = records[:count]
        del records[:count]
        return taken

    def withdraw(self, job_id: str) -> Optional[Job]:
        """
        Remove a pending job from whichever tier holds it.
        Used by callers reacting to a capacity error (drop / re-route).
        """
        for tier, records in self._tiers.items():
            for index, record in enumerate(records):
                if record.job_id == job_id:
                    del records[index]
                    logger.info("Withdrew job %s from %s", job_id, tier.name)
                    return record.job
        return None

    def is_empty(self) -> bool:
        return not any(self._tiers.values())

    def stats(self) -> PoolStats:
        return PoolStats(
            single_count=len(self._tiers[WeightTier.SINGLE]),
            pair_count=len(self._tiers[WeightTier.PAIR]),
            triple_count=len(self._tiers[WeightTier.TRIPLE]),
        )
