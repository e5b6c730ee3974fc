import numpy as np
import pandas as pd

VEHICLE_TYPES = ["bike", "rickshaw", "car", "ac_car"]
VEHICLE_WEIGHTS = [0.35, 0.25, 0.3, 0.1]

STATUSES = ["approved", "pending", "suspended"]
STATUS_WEIGHTS = [0.9, 0.07, 0.03]


def generate_mock_drivers(filename="mock_drivers_100.csv", count=100, seed=None):
    """
    Scatters drivers around central Lahore (roughly +/- 8km) with a realistic
    vehicle mix. About 80% are online; a few are still pending approval or suspended.
    """
    # Gulberg / Mall Road area
    base_lat = 31.5204
    base_lng = 74.3587

    rng = np.random.default_rng(seed)

    df = pd.DataFrame({
        "driver_id": [f"DRV-{str(i + 1).zfill(3)}" for i in range(count)],
        "lat": np.round(base_lat + rng.uniform(-0.075, 0.075, count), 6),
        "lng": np.round(base_lng + rng.uniform(-0.075, 0.075, count), 6),
        "vehicle_type": rng.choice(VEHICLE_TYPES, size=count, p=VEHICLE_WEIGHTS),
        "status": rng.choice(STATUSES, size=count, p=STATUS_WEIGHTS),
        "is_online": rng.random(count) < 0.8,
        # unrated newcomers get 4.5 when loaded
        "rating": np.round(rng.uniform(3.8, 5.0, count), 1),
        "completed_rides": rng.integers(0, 2500, count),
    })

    df.to_csv(filename, index=False)
    print(f"Successfully generated {count} mock drivers into '{filename}'.")
    return df


if __name__ == "__main__":
    generate_mock_drivers()
