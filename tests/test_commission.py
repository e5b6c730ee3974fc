import pytest

from pricing.commission import (
    CommissionSetting,
    calculate_commission,
    load_commission_settings,
    resolve_commission_setting,
    settle_earnings,
)


@pytest.fixture
def settings():
    return [
        CommissionSetting("Global", "percentage", 15),
        CommissionSetting("Lahore", "percentage", 12, city="Lahore"),
        CommissionSetting("Lahore bikes", "percentage", 8, city="Lahore", vehicle_type="bike"),
        CommissionSetting("Global vans", "fixed", 75, vehicle_type="van"),
        CommissionSetting("Retired", "percentage", 1, is_active=False),
    ]


def test_default_rate_without_settings():
    assert calculate_commission(1000, "Lahore", "car", []) == pytest.approx(100)


def test_most_specific_row_wins(settings):
    assert resolve_commission_setting(settings, "Lahore", "bike").name == "Lahore bikes"
    assert resolve_commission_setting(settings, "Lahore", "car").name == "Lahore"
    assert resolve_commission_setting(settings, "Karachi", "car").name == "Global"
    assert resolve_commission_setting(settings, "Karachi", "van").name == "Global vans"


def test_city_row_beats_global_vehicle_row(settings):
    # city match is ranked before vehicle match
    assert resolve_commission_setting(settings, "Lahore", "van").name == "Lahore"


def test_inactive_rows_are_ignored(settings):
    inactive_only = [s for s in settings if not s.is_active]
    assert resolve_commission_setting(inactive_only, "Lahore", "car") is None


def test_percentage_and_fixed(settings):
    assert calculate_commission(1000, "Lahore", "bike", settings) == pytest.approx(80)
    assert calculate_commission(1000, "Karachi", "car", settings) == pytest.approx(150)
    # fixed ignores the fare
    assert calculate_commission(5000, "Karachi", "van", settings) == 75


def test_volume_discount_after_ride_threshold():
    settings = [
        CommissionSetting("Loyal drivers", "percentage", 15, min_rides_for_discount=100, discounted_value=10),
    ]

    assert calculate_commission(1000, None, "car", settings, driver_ride_count=99) == pytest.approx(150)
    assert calculate_commission(1000, None, "car", settings, driver_ride_count=100) == pytest.approx(100)


def test_settle_earnings(settings):
    settlement = settle_earnings(1000, "Karachi", "car", settings)

    assert settlement.fare == 1000
    assert settlement.commission == 150
    assert settlement.driver_earning == 850


def test_load_commission_settings_from_csv(tmp_path):
    path = tmp_path / "commission.csv"
    path.write_text(
        "name,type,value,city,vehicle_type,min_rides_for_discount,discounted_value,is_active\n"
        "Global,percentage,15,,all,,,true\n"
        "Lahore bikes,percentage,8,Lahore,bike,50,5,true\n"
        "Old flat fee,fixed,30,,,,,false\n"
    )

    loaded = load_commission_settings(path)

    assert len(loaded) == 3
    assert loaded[0].city is None
    assert loaded[0].min_rides_for_discount is None
    assert loaded[1].city == "Lahore"
    assert loaded[1].min_rides_for_discount == 50
    assert loaded[1].discounted_value == 5
    assert loaded[2].vehicle_type == "all"
    assert loaded[2].is_active is False

    # 60 rides unlocks the 5% rate
    assert calculate_commission(200, "Lahore", "bike", loaded, driver_ride_count=60) == pytest.approx(10)


def test_settle_earnings_rounds_half_up():
    global_ten = [CommissionSetting("Global", "percentage", 10)]
    settlement = settle_earnings(1.05, None, "car", global_ten)

    assert settlement.commission == pytest.approx(0.11)
    assert settlement.driver_earning == pytest.approx(0.94)

    settlement = settle_earnings(2.5, None, "car", [CommissionSetting("Global", "percentage", 5)])
    assert settlement.commission == pytest.approx(0.13)
    assert settlement.driver_earning == pytest.approx(2.37)


@pytest.mark.parametrize("fare", [1.05, 1.15, 1.25, 1.35, 1.45, 2.5])
def test_settlement_parts_add_up_to_fare(fare):
    settlement = settle_earnings(fare, None, "car", [CommissionSetting("Global", "percentage", 5)])

    assert settlement.commission + settlement.driver_earning == pytest.approx(settlement.fare)
    assert settlement.fare == pytest.approx(fare)
