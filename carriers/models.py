"""
Purpose: Core models for the carriers domain.
What it does:
Defines the capability contract the dispatcher relies on (Carrier) and an
in-memory carrier (SimCarrier) with a guarded status lifecycle.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Protocol, runtime_checkable

from jobs.models import Job


class CarrierStateException(Exception):
    """Raised when an invalid carrier transition is attempted."""
    pass


class CarrierContractError(AssertionError):
    """
    The driver broke its side of the contract (e.g. offered a loaded carrier,
    registered the same carrier twice). A programming error, not an outcome
    of normal scheduling.
    """
    pass


@runtime_checkable
class Carrier(Protocol):
    """
    Everything the dispatcher is allowed to do with a carrier.
    """

    def is_empty(self) -> bool: ...

    def set_team_state(self, in_team: bool) -> None: ...

    def set_num_team_members(self, count: int) -> None: ...

    def add_to_primary(self, job: Job) -> None: ...

    def add_to_secondary(self, job: Job) -> None: ...

    def dispatch(self) -> None: ...


def carrier_label(carrier: Carrier) -> str:
    # the contract has no id; SimCarrier and most real carriers do
    return str(getattr(carrier, "id", hex(id(carrier))))


class CarrierStatus(str, Enum):
    WAITING = "waiting"
    LOADED = "loaded"
    DISPATCHED = "dispatched"


@dataclass(eq=False)
class SimCarrier:
    """
    A carrier with a primary slot (delivered first) and a secondary slot.
    Team members only ever use the primary slot.
    """
    id: str
    status: CarrierStatus = CarrierStatus.WAITING

    primary: Optional[Job] = None
    secondary: Optional[Job] = None

    in_team: bool = False
    team_size: int = 1

    def is_empty(self) -> bool:
        return self.primary is None and self.secondary is None

    def set_team_state(self, in_team: bool) -> None:
        self.in_team = in_team

    def set_num_team_members(self, count: int) -> None:
        if count < 1:
            raise CarrierStateException(f"Carrier {self.id}: team size must be >= 1, got {count}")
        self.team_size = count

    def add_to_primary(self, job: Job) -> None:
        self._require_loadable()
        if self.primary is not None:
            raise CarrierStateException(f"Carrier {self.id} already holds {self.primary.job_id} in primary")
        self.primary = job
        self.status = CarrierStatus.LOADED

    def add_to_secondary(self, job: Job) -> None:
        self._require_loadable()
        if self.in_team:
            raise CarrierStateException(f"Carrier {self.id} is in a team and cannot take a second job")
        if self.primary is None:
            raise CarrierStateException(f"Carrier {self.id} must be loaded in primary before secondary")
        if self.secondary is not None:
            raise CarrierStateException(f"Carrier {self.id} already holds {self.secondary.job_id} in secondary")
        self.secondary = job

    def dispatch(self) -> None:
        if self.is_empty():
            raise CarrierStateException(f"Carrier {self.id} cannot depart empty")
        if self.status != CarrierStatus.LOADED:
            raise CarrierStateException(f"Carrier {self.id} cannot depart from {self.status.value}")
        self.status = CarrierStatus.DISPATCHED

    def complete_delivery(self) -> List[Job]:
        """
        Drop off everything on board (primary first) and come back idle.
        """
        if self.status != CarrierStatus.DISPATCHED:
            raise CarrierStateException(f"Carrier {self.id} has not been dispatched")

        delivered = [job for job in (self.primary, self.secondary) if job is not None]
        self.primary = None
        self.secondary = None
        self.in_team = False
        self.team_size = 1
        self.status = CarrierStatus.WAITING
        return delivered

    def loaded_jobs(self) -> List[Job]:
        return [job for job in (self.primary, self.secondary) if job is not None]

    def _require_loadable(self) -> None:
        if self.status == CarrierStatus.DISPATCHED:
            raise CarrierStateException(f"Carrier {self.id} has already departed")
