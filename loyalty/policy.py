"""
Purpose: Default loyalty catalogue (tiers, rewards, achievements).
What it does:

Bronze 0-499 | Silver 500-1499 (5%, 1.25x) | Gold 1500-4999 (10%, 1.5x) | Platinum 5000+ (15%, 2x)

POINTS_PER_CURRENCY_UNIT: 1 point per PKR 10 spent, before the tier multiplier

Rule: No logic here, just parameters so you can tune without rewriting code.
"""

from __future__ import annotations

from typing import List

from .models import Achievement, AchievementType, LoyaltyReward, LoyaltyTier, RewardType

FARE_PER_POINT = 10


def default_tiers() -> List[LoyaltyTier]:
    return [
        LoyaltyTier("Bronze", 0, 499, discount_percentage=0, points_multiplier=1.0),
        LoyaltyTier("Silver", 500, 1499, discount_percentage=5, points_multiplier=1.25),
        LoyaltyTier("Gold", 1500, 4999, discount_percentage=10, points_multiplier=1.5),
        LoyaltyTier("Platinum", 5000, None, discount_percentage=15, points_multiplier=2.0),
    ]


def default_rewards() -> List[LoyaltyReward]:
    return [
        LoyaltyReward("discount-50", "PKR 50 Ride Discount", 100, RewardType.DISCOUNT_FIXED, 50),
        LoyaltyReward("discount-10-percent", "10% Ride Discount", 150, RewardType.DISCOUNT_PERCENTAGE, 10, max_discount=100),
        LoyaltyReward("free-ride", "Free Ride (up to PKR 200)", 500, RewardType.FREE_RIDE, 200),
        LoyaltyReward("priority-booking", "Priority Booking for 7 Days", 300, RewardType.PRIORITY_BOOKING, 7),
    ]


def default_achievements() -> List[Achievement]:
    return [
        Achievement("first-ride", "First Ride", AchievementType.RIDES_COMPLETED, 1, 50),
        Achievement("regular-rider", "Regular Rider", AchievementType.RIDES_COMPLETED, 10, 100),
        Achievement("frequent-traveler", "Frequent Traveler", AchievementType.RIDES_COMPLETED, 50, 300),
        Achievement("road-warrior", "Road Warrior", AchievementType.RIDES_COMPLETED, 100, 500),
        Achievement("polite-passenger", "Polite Passenger", AchievementType.RATING, 45, 150),
        Achievement("social-butterfly", "Social Butterfly", AchievementType.REFERRALS, 5, 200),
        Achievement("big-spender", "Big Spender", AchievementType.TOTAL_SPENT, 10000, 250),
        Achievement("eco-warrior", "Eco Warrior", AchievementType.SHARED_RIDES, 10, 200),
    ]
