import argparse
import csv
import logging
import os
from typing import List

from dispatch.dispatcher import Dispatcher
from dispatch.models import ErrorResult
from fleet.costs import vehicle_fuel_cost
from fleet.models import FuelType, Vehicle, now_ms
from geocoding.cache import AddressCache
from rides.models import RideRequest
from routing.navigation import NavigationApp
from tariffs.models import FlatRateRule, Tariff, TimeBasedTariff

FUEL_PRICES = {FuelType.DIESEL: 36.9, FuelType.PETROL: 38.9}


def load_fleet(filepath="sampledata/fleet.csv") -> List[Vehicle]:
    fleet = []

    # Resolve the correct path depending on where the user runs the script from.
    base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    absolute_path = os.path.join(base_dir, filepath)

    with open(absolute_path, 'r', encoding='utf-8') as file:
        reader = csv.DictReader(file)
        for row in reader:
            free_at = None
            if row['free_in_minutes']:
                free_at = now_ms() + int(row['free_in_minutes']) * 60_000

            fleet.append(
                Vehicle.new(
                    row['vehicle_id'],
                    row['name'],
                    row['location'],
                    vehicle_class=row['vehicle_class'],
                    status=row['status'],
                    license_plate=row['license_plate'],
                    free_at=free_at,
                    fuel_type=row['fuel_type'] or None,
                    fuel_consumption=float(row['fuel_consumption']) if row['fuel_consumption'] else None,
                )
            )
    return fleet


def default_tariff() -> Tariff:
    return Tariff(
        starting_fee=50,
        price_per_km_car=40,
        price_per_km_van=60,
        flat_rates=[
            FlatRateRule("V rámci Hustopečí", 80, 120, keyword="Hustopeč"),
            FlatRateRule("V rámci Mikulova", 100, 150, keyword="Mikulov"),
            FlatRateRule("Zaječí - diskotéka Retro", 200, 300, endpoints=("Zaječí", "Retro")),
        ],
        time_based_tariffs=[
            TimeBasedTariff.new("Noční", "22:00", "06:00", starting_fee=70, price_per_km_car=50, price_per_km_van=70),
        ],
    )


def main():
    parser = argparse.ArgumentParser(description="Dispatch one ride against live geocoding/routing providers.")
    parser.add_argument("stops", nargs="+", help="pickup, optional waypoints, destination")
    parser.add_argument("--passengers", type=int, default=1)
    parser.add_argument("--optimize", action="store_true", help="reorder intermediate stops")
    parser.add_argument("--locale", default="cs")
    parser.add_argument("--confirm", action="store_true", help="mark the primary vehicle busy afterwards")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    fleet = load_fleet()
    request = RideRequest.new(args.stops, passengers=args.passengers)
    dispatcher = Dispatcher.from_environment(cache=AddressCache(), locale=args.locale)

    print(f"=== Dispatching {len(request.stops)}-stop ride for {request.passengers} passenger(s) ===")
    result = dispatcher.dispatch_ride(request, fleet, default_tariff(), optimize_stops=args.optimize)

    if isinstance(result, ErrorResult):
        print(f"[FAILED] {result.kind}: {result.detail}")
        return

    print(f"Stops: {' -> '.join(result.stops)}{' (reordered)' if result.stops_reordered else ''}")
    print(f"Ride: {result.ride_distance_km:.1f} km, {result.ride_duration_min} min\n")

    for rank, alternative in enumerate(result.alternatives, start=1):
        vehicle = alternative.vehicle
        fuel = vehicle_fuel_cost(vehicle, alternative.total_distance_km, FUEL_PRICES)
        print(
            f"{rank}. {vehicle.name} ({vehicle.license_plate}) "
            f"eta {alternative.eta_min} min | {alternative.total_distance_km:.1f} km | "
            f"{alternative.price} Kč | fuel {fuel:.2f} Kč"
        )

    print(f"\nNavigation: {dispatcher.navigation_link(result, NavigationApp.GOOGLE)}")

    if args.confirm:
        busy = dispatcher.confirm_assignment(result)
        print(f"[SUCCESS] {busy.name} is busy until epoch ms {busy.free_at}, heading to {busy.location}")


if __name__ == "__main__":
    main()
