"""
Loyalty domain package.

Public API:
- Domain models: LoyaltyTier, LoyaltyAccount, LoyaltyReward, Achievement
- Points: tier_for_points, points_for_fare, earn_points_for_ride, redeem
- Achievements: check_and_award, progress_percentage
"""
from .models import (
    Achievement,
    AchievementProgress,
    AchievementType,
    LoyaltyAccount,
    LoyaltyReward,
    LoyaltyTier,
    RewardType,
)
from .policy import FARE_PER_POINT, default_achievements, default_rewards, default_tiers
from .points import (
    LoyaltyError,
    apply_tier_discount,
    bonus_points,
    check_and_award,
    earn_points,
    earn_points_for_ride,
    next_tier,
    points_for_fare,
    points_to_next_tier,
    progress_percentage,
    redeem,
    reward_discount,
    tier_for_points,
)
