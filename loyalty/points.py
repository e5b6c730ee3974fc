#Purpose: Tier lookup, points earning, reward redemption and achievement awards.
#Tiers are decided by lifetime points (total_points); spending only touches
#available_points, so redeeming a reward never drops a rider's tier.

from datetime import datetime
from typing import Dict, List, Optional, Sequence
import logging
import math

from pricing.fare import round_half_up

from .models import (
    Achievement,
    AchievementProgress,
    AchievementType,
    LoyaltyAccount,
    LoyaltyReward,
    LoyaltyTier,
    RewardType,
)
from .policy import FARE_PER_POINT, default_tiers

logger = logging.getLogger(__name__)


class LoyaltyError(Exception):
    """Raised when a reward cannot be redeemed."""
    pass


def _active_tiers(tiers: Optional[Sequence[LoyaltyTier]]) -> List[LoyaltyTier]:
    tiers = default_tiers() if tiers is None else tiers
    return sorted((t for t in tiers if t.is_active), key=lambda t: t.min_points)


def tier_for_points(points: int, tiers: Optional[Sequence[LoyaltyTier]] = None) -> Optional[LoyaltyTier]:
    for tier in _active_tiers(tiers):
        if points >= tier.min_points and (tier.max_points is None or points <= tier.max_points):
            return tier
    return None


def next_tier(points: int, tiers: Optional[Sequence[LoyaltyTier]] = None) -> Optional[LoyaltyTier]:
    for tier in _active_tiers(tiers):
        if tier.min_points > points:
            return tier
    return None


def points_to_next_tier(points: int, tiers: Optional[Sequence[LoyaltyTier]] = None) -> int:
    """0 once the rider is in the top tier."""
    upcoming = next_tier(points, tiers)
    if upcoming is None:
        return 0
    return upcoming.min_points - points


def points_for_fare(fare: float, tier: Optional[LoyaltyTier] = None) -> int:
    multiplier = tier.points_multiplier if tier is not None else 1.0
    return math.floor(fare / FARE_PER_POINT * multiplier)


def apply_tier_discount(fare: float, tier: Optional[LoyaltyTier]) -> float:
    if tier is None or tier.discount_percentage <= 0:
        return fare
    discount = round_half_up(fare * tier.discount_percentage / 100, 2)
    return round(fare - discount, 2)


def earn_points(account: LoyaltyAccount, points: int) -> LoyaltyAccount:
    if points < 0:
        raise ValueError("points must be >= 0")
    account.total_points += points
    account.available_points += points
    return account


def bonus_points(
    account: LoyaltyAccount,
    points: int,
    tiers: Optional[Sequence[LoyaltyTier]] = None,
) -> int:
    """Flat bonus points scaled by the account's current tier multiplier."""
    tier = tier_for_points(account.total_points, tiers)
    multiplier = tier.points_multiplier if tier is not None else 1.0
    return int(round_half_up(points * multiplier))


def earn_points_for_ride(
    account: LoyaltyAccount,
    fare: float,
    tiers: Optional[Sequence[LoyaltyTier]] = None,
) -> int:
    """
    Award points for a completed ride at the rider's current tier multiplier.
    Returns the points awarded.
    """
    tier = tier_for_points(account.total_points, tiers)
    points = points_for_fare(fare, tier)
    earn_points(account, points)
    return points


def redeem(account: LoyaltyAccount, reward: LoyaltyReward, now: Optional[datetime] = None) -> LoyaltyReward:
    if not reward.is_available(now):
        raise LoyaltyError(f"Reward {reward.id} is not available")

    if account.available_points < reward.points_required:
        raise LoyaltyError(
            f"Not enough points for {reward.id}: {account.available_points} < {reward.points_required}"
        )

    account.available_points -= reward.points_required
    reward.current_redemptions += 1
    logger.info("User %s redeemed %s for %s points", account.user_id, reward.id, reward.points_required)
    return reward


def reward_discount(fare: float, reward: LoyaltyReward) -> float:
    """
    How much a redeemed reward takes off a fare. Never more than the fare.
    PRIORITY_BOOKING is not a price reward.
    """
    if reward.reward_type == RewardType.DISCOUNT_FIXED:
        discount = reward.reward_value
    elif reward.reward_type == RewardType.DISCOUNT_PERCENTAGE:
        discount = round_half_up(fare * reward.reward_value / 100, 2)
        if reward.max_discount is not None:
            discount = min(discount, reward.max_discount)
    elif reward.reward_type == RewardType.FREE_RIDE:
        discount = reward.reward_value
    else:
        return 0.0

    return float(min(discount, fare))


def progress_percentage(progress: AchievementProgress, achievement: Achievement) -> int:
    if achievement.target_value <= 0:
        return 100
    return min(100, int(round_half_up(progress.current_progress / achievement.target_value * 100)))


def check_and_award(
    account: LoyaltyAccount,
    progress: Dict[str, AchievementProgress],
    achievements: Sequence[Achievement],
    achievement_type: AchievementType,
    current_value: int,
    now: Optional[datetime] = None,
    tiers: Optional[Sequence[LoyaltyTier]] = None,
) -> List[Achievement]:
    """
    Update progress for every active achievement of this type and award points
    for the ones that are now reached. Already completed achievements are
    never awarded twice. Rewards are boosted by the rider's tier multiplier,
    the same as ride points. Progress is capped at the target.
    Returns the newly completed achievements.
    """
    now = now or datetime.now()
    completed = []

    for achievement in achievements:
        if not achievement.is_active or achievement.type != achievement_type:
            continue

        entry = progress.setdefault(achievement.slug, AchievementProgress(achievement.slug))
        if entry.is_completed:
            continue

        entry.current_progress = min(current_value, achievement.target_value)
        if current_value >= achievement.target_value:
            entry.is_completed = True
            entry.completed_at = now
            earn_points(account, bonus_points(account, achievement.points_reward, tiers))
            completed.append(achievement)
            logger.info("User %s completed achievement %s", account.user_id, achievement.slug)

    return completed
