from datetime import datetime, timedelta

import pytest

from loyalty.models import AchievementType, LoyaltyAccount, LoyaltyReward, RewardType
from loyalty.points import (
    LoyaltyError,
    apply_tier_discount,
    check_and_award,
    earn_points_for_ride,
    next_tier,
    points_for_fare,
    points_to_next_tier,
    progress_percentage,
    redeem,
    reward_discount,
    tier_for_points,
)
from loyalty.policy import default_achievements, default_rewards


@pytest.fixture
def now():
    return datetime(2026, 3, 5, 9, 0)


@pytest.fixture
def rewards():
    return {reward.id: reward for reward in default_rewards()}


@pytest.mark.parametrize(
    "points, tier",
    [(0, "Bronze"), (499, "Bronze"), (500, "Silver"), (1500, "Gold"), (5000, "Platinum"), (100000, "Platinum")],
)
def test_tier_for_points(points, tier):
    assert tier_for_points(points).name == tier


def test_next_tier():
    assert next_tier(600).name == "Gold"
    assert points_to_next_tier(600) == 900
    assert next_tier(6000) is None
    assert points_to_next_tier(6000) == 0


def test_points_for_fare():
    assert points_for_fare(250) == 25
    assert points_for_fare(250, tier_for_points(2000)) == 37   # 25 * 1.5
    assert points_for_fare(255, tier_for_points(600)) == 31    # 25.5 * 1.25


def test_tier_discount():
    assert apply_tier_discount(1000, tier_for_points(2000)) == 900
    assert apply_tier_discount(1000, tier_for_points(0)) == 1000
    assert apply_tier_discount(1000, None) == 1000


def test_earn_points_for_ride():
    account = LoyaltyAccount("rider-1", total_points=1500, available_points=200)

    earned = earn_points_for_ride(account, 200)

    assert earned == 30
    assert account.total_points == 1530
    assert account.available_points == 230


def test_redeem_spends_available_points_only(rewards, now):
    account = LoyaltyAccount("rider-1", total_points=600, available_points=150)

    redeem(account, rewards["discount-50"], now)

    assert account.available_points == 50
    assert account.total_points == 600
    assert rewards["discount-50"].current_redemptions == 1

    with pytest.raises(LoyaltyError):
        redeem(account, rewards["discount-50"], now)


def test_unavailable_rewards(now):
    expired = LoyaltyReward(
        "old", "Old promo", 10, RewardType.DISCOUNT_FIXED, 20,
        valid_until=now - timedelta(days=1),
    )
    sold_out = LoyaltyReward(
        "limited", "Limited promo", 10, RewardType.DISCOUNT_FIXED, 20,
        max_redemptions=5, current_redemptions=5,
    )
    account = LoyaltyAccount("rider-1", total_points=1000, available_points=1000)

    assert not expired.can_be_redeemed_by(1000, now)
    assert not sold_out.is_available(now)
    with pytest.raises(LoyaltyError):
        redeem(account, expired, now)
    assert account.available_points == 1000


def test_reward_discount(rewards):
    assert reward_discount(30, rewards["discount-50"]) == 30
    assert reward_discount(2000, rewards["discount-10-percent"]) == 100
    assert reward_discount(500, rewards["discount-10-percent"]) == 50
    assert reward_discount(150, rewards["free-ride"]) == 150
    assert reward_discount(500, rewards["priority-booking"]) == 0


def test_achievements_award_once(now):
    account = LoyaltyAccount("rider-1")
    progress = {}
    achievements = default_achievements()

    completed = check_and_award(account, progress, achievements, AchievementType.RIDES_COMPLETED, 10, now)

    assert {a.slug for a in completed} == {"first-ride", "regular-rider"}
    assert account.total_points == 150
    assert progress["first-ride"].completed_at == now

    again = check_and_award(account, progress, achievements, AchievementType.RIDES_COMPLETED, 10, now)
    assert again == []
    assert account.total_points == 150


def test_progress_percentage(now):
    account = LoyaltyAccount("rider-1")
    progress = {}
    achievements = {a.slug: a for a in default_achievements()}

    check_and_award(account, progress, list(achievements.values()), AchievementType.RIDES_COMPLETED, 10, now)

    assert progress_percentage(progress["frequent-traveler"], achievements["frequent-traveler"]) == 20
    assert progress_percentage(progress["regular-rider"], achievements["regular-rider"]) == 100


def test_achievement_points_use_tier_multiplier(now):
    account = LoyaltyAccount("rider-1", total_points=1500, available_points=0)

    completed = check_and_award(account, {}, default_achievements(), AchievementType.RIDES_COMPLETED, 1, now)

    assert [a.slug for a in completed] == ["first-ride"]
    assert account.total_points == 1575   # 50 * 1.5 at Gold
    assert account.available_points == 75


def test_achievement_progress_is_capped_at_target(now):
    progress = {}

    check_and_award(LoyaltyAccount("rider-1"), progress, default_achievements(), AchievementType.RIDES_COMPLETED, 10, now)

    assert progress["first-ride"].current_progress == 1
    assert progress["regular-rider"].current_progress == 10
    assert progress["frequent-traveler"].current_progress == 10
