"""
Pricing domain package.

Public API:
- Domain models: VehicleType, FareSetting, SurgePricing, FareQuote
- Fare math: calculate_fare, estimate_fare, calculate_intercity_fare
- Commission: CommissionSetting, calculate_commission, settle_earnings
- Policy: PricingPolicy, default_pricing_policy
"""
from .models import VehicleType, FareRate, FareSetting, SurgePricing, FareBreakdown, FareQuote
from .policy import PricingPolicy, default_pricing_policy, pricing_policy_from_env
from .fare import (
    calculate_fare,
    calculate_simple_estimate,
    calculate_intercity_fare,
    estimate_fare,
    quote_all_vehicle_types,
    round_up_to_step,
    round_half_up,
)
from .commission import (
    CommissionType,
    CommissionSetting,
    Settlement,
    resolve_commission_setting,
    calculate_commission,
    settle_earnings,
    load_commission_settings,
)

__all__ = [
    "VehicleType",
    "FareRate",
    "FareSetting",
    "SurgePricing",
    "FareBreakdown",
    "FareQuote",
    "PricingPolicy",
    "default_pricing_policy",
    "pricing_policy_from_env",
    "calculate_fare",
    "calculate_simple_estimate",
    "calculate_intercity_fare",
    "estimate_fare",
    "quote_all_vehicle_types",
    "round_up_to_step",
    "round_half_up",
    "CommissionType",
    "CommissionSetting",
    "Settlement",
    "resolve_commission_setting",
    "calculate_commission",
    "settle_earnings",
    "load_commission_settings",
]
