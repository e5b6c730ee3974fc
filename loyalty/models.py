"""
Purpose: Domain models for the loyalty programme.
What it does:
- LoyaltyTier (points band, ride discount, points multiplier)
- LoyaltyAccount (a rider's total and spendable points)
- LoyaltyReward (what points can be spent on) and RewardType
- Achievement / AchievementProgress (milestones that award bonus points)
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class RewardType(str, Enum):
    DISCOUNT_FIXED = "discount_fixed"
    DISCOUNT_PERCENTAGE = "discount_percentage"
    FREE_RIDE = "free_ride"
    PRIORITY_BOOKING = "priority_booking"


class AchievementType(str, Enum):
    RIDES_COMPLETED = "rides_completed"
    RATING = "rating" # rating * 10, so 4.5 -> 45
    REFERRALS = "referrals"
    TOTAL_SPENT = "total_spent"
    SHARED_RIDES = "shared_rides"


@dataclass(frozen=True)
class LoyaltyTier:
    name: str
    min_points: int
    max_points: Optional[int]
    discount_percentage: float
    points_multiplier: float
    is_active: bool = True


@dataclass
class LoyaltyAccount:
    user_id: str
    total_points: int = 0 # lifetime, decides the tier
    available_points: int = 0 # spendable


@dataclass
class LoyaltyReward:
    id: str
    name: str
    points_required: int
    reward_type: RewardType
    reward_value: float
    max_discount: Optional[float] = None
    is_active: bool = True
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    max_redemptions: Optional[int] = None
    current_redemptions: int = 0

    def is_available(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now()

        if not self.is_active:
            return False

        if self.valid_from is not None and self.valid_from > now:
            return False

        if self.valid_until is not None and self.valid_until < now:
            return False

        if self.max_redemptions and self.current_redemptions >= self.max_redemptions:
            return False

        return True

    def can_be_redeemed_by(self, available_points: int, now: Optional[datetime] = None) -> bool:
        return self.is_available(now) and available_points >= self.points_required


@dataclass(frozen=True)
class Achievement:
    slug: str
    name: str
    type: AchievementType
    target_value: int
    points_reward: int
    is_active: bool = True


@dataclass
class AchievementProgress:
    achievement_slug: str
    current_progress: int = 0
    is_completed: bool = False
    completed_at: Optional[datetime] = None
