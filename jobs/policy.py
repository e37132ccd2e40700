"""
Purpose: Central configuration for weight classification (single source of truth).
What it does:

Stores the tier thresholds:

SINGLE_MAX_WEIGHT = 2000

PAIR_MAX_WEIGHT = 2600

TRIPLE_MAX_WEIGHT = 3000

Values can be overridden from the environment (.env is honoured):
DISPATCH_SINGLE_MAX_WEIGHT, DISPATCH_PAIR_MAX_WEIGHT, DISPATCH_TRIPLE_MAX_WEIGHT

Rule: Only parameters and the weight -> tier mapping live here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
import os

from dotenv import load_dotenv

from .models import WeightTier


@dataclass(frozen=True)
class TierPolicy:
    """
    Weight thresholds for the three tiers.

    Ranges are half-open on the left:
        SINGLE: w <= single_max_weight
        PAIR:   single_max_weight < w <= pair_max_weight
        TRIPLE: pair_max_weight < w <= triple_max_weight
    Anything heavier has no tier.
    """

    single_max_weight: float = 2000
    pair_max_weight: float = 2600
    triple_max_weight: float = 3000

    def validate(self) -> None:
        """
        Basic sanity checks.
        """
        if self.single_max_weight <= 0:
            raise ValueError("single_max_weight must be > 0")

        if self.pair_max_weight <= self.single_max_weight:
            raise ValueError("pair_max_weight must be > single_max_weight")

        if self.triple_max_weight <= self.pair_max_weight:
            raise ValueError("triple_max_weight must be > pair_max_weight")

    def classify(self, weight: float) -> Optional[WeightTier]:
        """
        Map a weight onto its tier, or None when no tier accepts it.
        """
        if weight <= 0:
            return None
        if weight <= self.single_max_weight:
            return WeightTier.SINGLE
        if weight <= self.pair_max_weight:
            return WeightTier.PAIR
        if weight <= self.triple_max_weight:
            return WeightTier.TRIPLE
        return None


def default_tier_policy() -> TierPolicy:
    """
    Convenience factory for the default policy.
    """
    p = TierPolicy()
    p.validate()
    return p


def tier_policy_from_env() -> TierPolicy:
    """
    Build a policy from DISPATCH_* environment variables, falling back to defaults.
    """
    load_dotenv()
    defaults = TierPolicy()
    p = TierPolicy(
        single_max_weight=float(os.getenv("DISPATCH_SINGLE_MAX_WEIGHT", defaults.single_max_weight)),
        pair_max_weight=float(os.getenv("DISPATCH_PAIR_MAX_WEIGHT", defaults.pair_max_weight)),
        triple_max_weight=float(os.getenv("DISPATCH_TRIPLE_MAX_WEIGHT", defaults.triple_max_weight)),
    )
    p.validate()
    return p
