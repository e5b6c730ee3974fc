"""
Purpose: Central configuration for nearby driver search.
What it does:

Stores all tunable thresholds/caps for finding drivers and showing offers:

BASE_RADIUS_KM = 5
RADIUS_BONUS_KM = {0: 0, 10: 2, 20: 4, 30: 6, 50: 10}  (keyed by rider bid %)
MAX_DRIVERS = 10, or 15 from a 10% bid, or 20 from a 30% bid

Rule: No logic here, just parameters so you can tune without rewriting code.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict


@dataclass(frozen=True)
class SearchPolicy:
    """
    Central configuration for driver search radius and result caps.
    """

    # --- Search radius ---
    # Drivers further than this from the pickup are never shown.
    base_radius_km: float = 5.0

    # A higher rider bid widens the search. 50% bid -> 15 km total.
    radius_bonus_km: Dict[int, float] = field(
        default_factory=lambda: {0: 0.0, 10: 2.0, 20: 4.0, 30: 6.0, 50: 10.0}
    )

    # --- Result caps ---
    default_max_drivers: int = 10
    boosted_max_drivers: int = 15 # bid >= boosted_bid_threshold
    priority_max_drivers: int = 20 # bid >= priority_bid_threshold
    boosted_bid_threshold: int = 10
    priority_bid_threshold: int = 30

    # --- Scheduled ride auto booking ---
    scheduled_booking_radius_km: float = 5.0

    def validate(self) -> None:
        """
        Basic sanity checks.
        """
        if self.base_radius_km <= 0:
            raise ValueError("base_radius_km must be > 0")

        if 0 not in self.radius_bonus_km:
            raise ValueError("radius_bonus_km must define the no-bid (0) entry")

        if any(bonus < 0 for bonus in self.radius_bonus_km.values()):
            raise ValueError("radius bonuses must be >= 0")

        if not (0 < self.default_max_drivers <= self.boosted_max_drivers <= self.priority_max_drivers):
            raise ValueError("driver caps must be positive and non-decreasing")

        if self.boosted_bid_threshold > self.priority_bid_threshold:
            raise ValueError("boosted_bid_threshold must be <= priority_bid_threshold")


def default_search_policy() -> SearchPolicy:
    """
    Convenience factory for the default policy.
    """
    p = SearchPolicy()
    p.validate()
    return p
