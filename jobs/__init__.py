"""
Jobs domain package.

Public API:
- Domain models: Job, JobRecord, WeightTier
- Ordering rule: rank, precedence, outranks
- Tier thresholds: TierPolicy
- Pending store: JobPool, UnroutableJobError

"""
from .models import Job, JobRecord, WeightTier, DEFAULT_PRIORITY
from .ordering import rank, precedence, outranks
from .policy import TierPolicy, default_tier_policy, tier_policy_from_env
from .pool import JobPool, PoolStats, UnroutableJobError

__all__ = ["Job",
           "JobRecord",
             "WeightTier",
               "DEFAULT_PRIORITY",
               "rank",
               "precedence",
               "outranks",
               "TierPolicy",
               "default_tier_policy",
               "tier_policy_from_env",
               "JobPool",
               "PoolStats",
               "UnroutableJobError",
               ]
