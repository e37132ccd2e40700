#Expose the high-level pipeline pieces:
#Tier selection (which weight tier is served next)
#Dispatch policy (fleet size, solo load limit)
#Dispatcher orchestrator (the "one call per tick" entry point)

from .selection import TierSelection, select_tier
from .policy import DispatchPolicy, default_dispatch_policy, dispatch_policy_from_env
from .dispatcher import (
    Assignment,
    CapacityExceededError,
    DispatchError,
    Dispatcher,
    StepResult,
)

__all__ = [
    "TierSelection",
    "select_tier",
    "DispatchPolicy",
    "default_dispatch_policy",
    "dispatch_policy_from_env",
    "Assignment",
    "CapacityExceededError",
    "DispatchError",
    "Dispatcher",
    "StepResult",
]
