#Run from the repo root: python -m scripts.run_pricing_simulation
#Running the file directly fails on the scripts.generate_mock_drivers import.

import os
import random
from datetime import datetime
from typing import List

import pandas as pd

from bidding.scoring import increase_bid, rank_ride_requests
from bidding.state_machines.bid_state import accept_bid, bids_for_ride, place_bid
from bidding.state_machines.ride_state import (
    complete_ride,
    create_ride_request,
    start_ride,
)
from drivers.models import Driver
from drivers.selection import search_drivers
from pricing.commission import CommissionSetting
from pricing.fare import quote_all_vehicle_types
from pricing.models import SurgePricing
from routing.geofence import ServiceZone, ZoneType
from scripts.generate_mock_drivers import generate_mock_drivers

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

PICKUP = (31.5204, 74.3587)   # Gulberg
DROPOFF = (31.4697, 74.2728)  # Johar Town

LIBERTY_ZONE = ServiceZone(
    id="zone-liberty",
    name="Liberty Market",
    city="Lahore",
    type=ZoneType.HIGH_DEMAND,
    coordinates=[
        {"lat": 31.50, "lng": 74.34},
        {"lat": 31.50, "lng": 74.38},
        {"lat": 31.54, "lng": 74.38},
        {"lat": 31.54, "lng": 74.34},
    ],
    fare_multiplier=1.2,
)

COMMISSION_SETTINGS = [
    CommissionSetting("Default", "percentage", 15),
    CommissionSetting("Lahore bikes", "percentage", 10, city="Lahore", vehicle_type="bike"),
]


def load_drivers(filepath="mock_drivers_100.csv") -> List[Driver]:
    # Resolve the correct path depending on where the user runs the script from.
    absolute_path = os.path.join(BASE_DIR, filepath)
    if not os.path.exists(absolute_path):
        generate_mock_drivers(absolute_path, seed=7)

    df = pd.read_csv(absolute_path)
    drivers = []
    for _, row in df.iterrows():
        drivers.append(
            Driver.new(
                str(row["driver_id"]),
                str(row["vehicle_type"]),
                float(row["lat"]),
                float(row["lng"]),
                status=str(row["status"]),
                is_online=bool(row["is_online"]),
                rating=float(row["rating"]),
                completed_rides=int(row["completed_rides"]),
            )
        )
    return drivers


def run_simulation():
    print("=== STARTING PRICING & NEGOTIATION SIMULATION ===")
    now = datetime.now()

    drivers = load_drivers()
    print(f"Loaded {len(drivers)} Drivers.\n")

    # 1. Quotes for every vehicle type
    print("--- Fare Quotes (Liberty zone x1.2, evening surge x1.3) ---")
    quotes = quote_all_vehicle_types(
        PICKUP,
        DROPOFF,
        zones=[LIBERTY_ZONE],
        surges=[SurgePricing(multiplier=1.3, reason="Evening rush")],
        now=now,
    )
    for quote in quotes:
        b = quote.breakdown
        print(
            f"{quote.vehicle_type:<9} {quote.distance_km:>5} km  {quote.duration_minutes:>3} min  "
            f"PKR {quote.total_fare:>6.0f}  (zone +{b.zone_amount:.0f}, surge +{b.surge_amount:.0f})"
        )

    # 2. Driver search with and without a rider bid
    print("\n--- Driver Search ---")
    for bid_percentage in (0, 20, 50):
        result = search_drivers(PICKUP, DROPOFF, drivers, vehicle_type="car", bid_percentage=bid_percentage)
        closest = result.drivers[0] if result.drivers else None
        print(
            f"+{bid_percentage:>2}% -> radius {result.search_radius:>4} km, "
            f"{result.drivers_found:>2} drivers"
            + (f", closest {closest.driver_id} at {closest.distance_away} km, fare {closest.fare:.0f}" if closest else "")
        )

    # 3. Rider side bidding and the driver feed
    print("\n--- Driver Feed (priority order) ---")
    rides = [create_ride_request(f"rider-{i}", PICKUP, DROPOFF, 300, city="Lahore") for i in range(5)]
    for ride in rides:
        for _ in range(random.randint(0, 2)):
            increase_bid(ride, random.choice((10, 20, 30, 50)), now=now)
    for ride in rank_ride_requests(rides):
        print(f"{ride.rider_id}: fare {ride.estimated_price:.0f}, +{ride.bid_percentage:.0f}% x{ride.bid_count}, score {ride.priority_score:.0f}")

    # 4. Driver bids on a negotiable ride
    print("\n--- Negotiation ---")
    ride = create_ride_request("rider-neg", PICKUP, DROPOFF, 400, city="Lahore", is_bidding_enabled=True)
    nearby = search_drivers(PICKUP, DROPOFF, drivers, vehicle_type="car").drivers[:3]
    bids = []
    for offer in nearby:
        bids.append(
            place_bid(ride, bids, offer.driver_id, offer.fare + random.choice((0, 20, 50)), offer.eta_minutes, now=now)
        )
    live = bids_for_ride(bids, ride.id, now)
    for bid in live:
        print(f"{bid.driver_id}: PKR {bid.bid_amount:.0f}, ETA {bid.eta_minutes} min")

    if not live:
        print("[FAILED] No driver bid on the ride.")
        return

    accept_bid(ride, live[0], bids, "rider-neg", now=now)
    start_ride(ride, now=now)
    complete_ride(ride, COMMISSION_SETTINGS, tip_amount=50, now=now)
    print(
        f"[SUCCESS] {ride.driver_id} drove for PKR {ride.final_fare:.0f}: "
        f"commission {ride.commission_amount:.2f}, driver earning {ride.driver_earning:.2f}"
    )

    print("\n=== SIMULATION COMPLETE ===")


if __name__ == "__main__":
    run_simulation()
