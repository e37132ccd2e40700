"""
Purpose: Orchestrator / decision pipeline (the "glue").
What it does:
Once per tick, offers every idle carrier a job: the tier selector names the
tier to serve, light jobs go out solo (up to two per carrier), heavy jobs
wait until enough idle carriers exist to form a team.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional
import logging

from carriers.models import Carrier, CarrierContractError, carrier_label
from carriers.waiting_line import CarrierWaitingLine
from jobs.models import Job, JobRecord, WeightTier
from jobs.pool import JobPool

from .policy import DispatchPolicy
from .selection import TierSelection, select_tier

logger = logging.getLogger(__name__)


class DispatchError(Exception):
    """Base class for scheduling failures reported by the dispatcher."""
    pass


class CapacityExceededError(DispatchError):
    """
    The pending job needs a larger team than the whole fleet can ever field.
    The job is left in its tier; the caller decides whether to drop or re-route it.
    """

    def __init__(self, job: Job, required: int, fleet_size: int):
        self.job = job
        self.required = required
        self.fleet_size = fleet_size
        super().__init__(
            f"Job {job.job_id} needs {required} carriers but the fleet has only {fleet_size}"
        )


@dataclass
class Assignment:
    tier: WeightTier
    jobs: List[Job]
    carriers: List[Carrier]

    @property
    def team(self) -> bool:
        return len(self.carriers) > 1


@dataclass
class StepResult:
    """
    Outcome of one scheduling pass.
    """
    assignments: List[Assignment] = field(default_factory=list)
    deferred: List[Carrier] = field(default_factory=list)
    capacity_error: Optional[CapacityExceededError] = None

    @property
    def ok(self) -> bool:
        return self.capacity_error is None

    def raise_for_error(self) -> None:
        if self.capacity_error is not None:
            raise self.capacity_error


class Dispatcher:
    """
    Matches pending jobs against the carrier waiting line, one pass per tick.
    """

    def __init__(
        self,
        policy: DispatchPolicy,
        pool: Optional[JobPool] = None,
        waiting_line: Optional[CarrierWaitingLine] = None,
    ):
        # the fleet size must be known up front, carriers out on a trip count too
        policy.validate()
        self.policy = policy
        self.pool = pool if pool is not None else JobPool()
        self.waiting_line = waiting_line if waiting_line is not None else CarrierWaitingLine()

    @property
    def fleet_size(self) -> int:
        return self.policy.fleet_size

    # --- Public API ---

    def enqueue(self, job: Job) -> JobRecord:
        return self.pool.enqueue(job)

    def register_waiting(self, carrier: Carrier) -> None:
        # caller guarantees the carrier is not already waiting
        self.waiting_line.register(carrier)

    def step(self) -> StepResult:
        """
        Offer each carrier that was idle at the start of the tick exactly once.

        The selector is re-run for every carrier since earlier carriers in the
        same pass may have consumed jobs. Carriers pulled into a team are
        skipped when their own turn comes. A capacity error ends the pass;
        assignments already made in this pass stand.
        """
        result = StepResult()

        for carrier in self.waiting_line.snapshot():
            if carrier not in self.waiting_line:
                continue

            if not carrier.is_empty():
                raise CarrierContractError(f"Carrier {carrier_label(carrier)} offered while still loaded")

            selection = select_tier(self.pool)

            if selection.required_carriers == 1:
                assignment = self._load_solo(carrier, selection)
            else:
                try:
                    assignment = self._form_team(carrier, selection)
                except CapacityExceededError as error:
                    logger.error("%s", error)
                    result.capacity_error = error
                    break

            if assignment is None:
                result.deferred.append(carrier)
            else:
                result.assignments.append(assignment)

        return result

    # --- Loading paths ---

    def _load_solo(self, carrier: Carrier, selection: TierSelection) -> Optional[Assignment]:
        if selection.is_empty:
            return None

        records = self.pool.pop_heads(WeightTier.SINGLE, self.policy.solo_load_limit)
        jobs = [record.job for record in records]

        # primary is delivered first, so it takes the higher-ranked job
        carrier.set_team_state(False)
        carrier.set_num_team_members(1)
        carrier.add_to_primary(jobs[0])
        if len(jobs) > 1:
            carrier.add_to_secondary(jobs[1])
        carrier.dispatch()
        self.waiting_line.remove(carrier)

        logger.info(
            "Carrier %s dispatched solo with %s",
            carrier_label(carrier), [job.job_id for job in jobs],
        )
        return Assignment(tier=WeightTier.SINGLE, jobs=jobs, carriers=[carrier])

    def _form_team(self, carrier: Carrier, selection: TierSelection) -> Optional[Assignment]:
        need = selection.required_carriers
        fleet_size = self.fleet_size

        if need > fleet_size:
            raise CapacityExceededError(selection.head.job, need, fleet_size)

        if len(self.waiting_line) < need or selection.is_empty:
            logger.debug(
                "Carrier %s waits: %s needs %d carriers, %d idle",
                carrier_label(carrier), selection.tier.name, need, len(self.waiting_line),
            )
            return None

        team = [carrier] + self.waiting_line.followers(carrier, need - 1)
        if len(team) < need:
            return None
        for member in team:
            if not member.is_empty():
                raise CarrierContractError(f"Carrier {carrier_label(member)} offered while still loaded")

        record = self.pool.pop_heads(selection.tier, 1)[0]
        for member in team:
            member.set_team_state(True)
            member.set_num_team_members(need)
            member.add_to_primary(record.job)
            member.dispatch()
            self.waiting_line.remove(member)

        logger.info(
            "Team of %d dispatched with job %s: %s",
            need, record.job_id, [carrier_label(member) for member in team],
        )
        return Assignment(tier=selection.tier, jobs=[record.job], carriers=team)
