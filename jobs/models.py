"""
Purpose: Domain models for the Jobs capability.
What it does:
- Defines core data structures:
- Job (job_id, weight, destination, optional priority_level, timestamps)
- JobRecord (priority, destination, tier, sequence, job) - the pool's view of a Job

Defines enums/constants:
- WeightTier = SINGLE | PAIR | TRIPLE
- DEFAULT_PRIORITY for ordinary (non-expedited) jobs

Rule: No pool logic, no dispatch logic. Models only.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
import uuid

# Ordinary jobs rank below every expedited level
DEFAULT_PRIORITY = 1


class WeightTier(Enum):
    SINGLE = 1
    PAIR = 2
    TRIPLE = 3

    @property
    def required_carriers(self) -> int:
        """How many carriers must team up to lift a job filed in this tier."""
        return self.value


@dataclass
class Job:
    """
    A single delivery job as handed to the scheduler.
    """

    job_id: str
    weight: float
    destination: int
    priority_level: Optional[int] = None  # only set on expedited jobs

    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def expedited(self) -> bool:
        return self.priority_level is not None

    @staticmethod  # Factory method so callers don't have to mint ids
    def new(weight: float, destination: int, priority_level: Optional[int] = None) -> Job:
        return Job(
            job_id=str(uuid.uuid4()),
            weight=weight,
            destination=destination,
            priority_level=priority_level,
        )


@dataclass(frozen=True)
class JobRecord:
    """
    Immutable entry held by a weight tier.

    priority and destination are captured once at enqueue time, so the
    ordering of a tier never shifts underneath it. The tier the record was
    filed under travels with it.
    """

    priority: int
    destination: int
    tier: WeightTier
    sequence: int
    job: Job

    @classmethod
    def of(cls, job: Job, tier: WeightTier, sequence: int) -> JobRecord:
        priority = job.priority_level if job.expedited else DEFAULT_PRIORITY
        return cls(
            priority=priority,
            destination=job.destination,
            tier=tier,
            sequence=sequence,
            job=job,
        )

    @property
    def job_id(self) -> str:
        return self.job.job_id
