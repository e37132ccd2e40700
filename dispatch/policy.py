"""
Purpose: Central configuration for the dispatcher.
What it does:

Stores the tunable knobs of a scheduling pass:

FLEET_SIZE (required, every carrier the fleet will ever field)
SOLO_LOAD_LIMIT = 2 (primary + secondary slot)

Values can be overridden from the environment (.env is honoured):
DISPATCH_FLEET_SIZE, DISPATCH_SOLO_LOAD_LIMIT

Rule: No logic here - just parameters so you can tune without rewriting code.
"""

from __future__ import annotations

from dataclasses import dataclass
import os

from dotenv import load_dotenv


@dataclass(frozen=True)
class DispatchPolicy:
    """
    Central configuration for the tick-driven dispatcher.
    """

    # --- Fleet capacity ---
    # Every carrier the fleet will ever field, idle or out on a trip.
    # A job needing more carriers than this is reported as a capacity error
    # instead of waiting forever.
    fleet_size: int

    # --- Solo loading ---
    # How many SINGLE-tier jobs one carrier takes per trip (primary, then secondary).
    solo_load_limit: int = 2

    def validate(self) -> None:
        """
        Basic sanity checks.
        """
        if not isinstance(self.fleet_size, int) or self.fleet_size < 1:
            raise ValueError("fleet_size must be an int >= 1")

        if self.solo_load_limit not in (1, 2):
            raise ValueError("solo_load_limit must be 1 or 2 (primary and secondary slot)")


def default_dispatch_policy(fleet_size: int) -> DispatchPolicy:
    """
    Convenience factory for the default policy of a fleet.
    """
    p = DispatchPolicy(fleet_size=fleet_size)
    p.validate()
    return p


def dispatch_policy_from_env() -> DispatchPolicy:
    """
    Build a policy from DISPATCH_* environment variables.
    DISPATCH_FLEET_SIZE is required; the solo load limit falls back to its default.
    """
    load_dotenv()
    fleet_size = os.getenv("DISPATCH_FLEET_SIZE")
    if not fleet_size:
        raise ValueError("DISPATCH_FLEET_SIZE not set. Please set it in the .env file.")

    p = DispatchPolicy(
        fleet_size=int(fleet_size),
        solo_load_limit=int(os.getenv("DISPATCH_SOLO_LOAD_LIMIT", 2)),
    )
    p.validate()
    return p
