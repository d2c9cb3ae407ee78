"""
TCO Calculator - Core calculation engine.
Annualized fuel cost, total cost of ownership and amortization versus gasoline.
"""

import logging
from dataclasses import replace
from typing import Iterable, List, Optional

from .models import (
    AnnualDistance,
    ComparisonResult,
    CostResult,
    DrivingProfile,
    FuelEconomy,
    OwnershipScenario,
    PriceSheet,
    VehicleType,
)

log = logging.getLogger(__name__)

WEEKDAYS_PER_WEEK = 5
WEEKS_PER_YEAR = 52


def annual_distance(profile: DrivingProfile) -> AnnualDistance:
    """
    Derive the annual city/highway distance split.

    An explicit annual total is split directly by the route preset. Otherwise
    the weekday commute (there and back, five days a week) and the weekend
    trip are split by the preset and scaled to 52 weeks.

    Args:
        profile: Driving habits of the user

    Returns:
        AnnualDistance in km
    """
    preset = profile.route_preset

    if profile.estimated_annual_km > 0:
        total = profile.estimated_annual_km
        return AnnualDistance(
            city_km=total * preset.city_share,
            highway_km=total * preset.highway_share,
        )

    weekday_city = profile.weekday_commute_km * preset.city_share
    weekday_highway = profile.weekday_commute_km * preset.highway_share
    weekend_city = profile.weekend_trip_km * preset.city_share
    weekend_highway = profile.weekend_trip_km * preset.highway_share

    return AnnualDistance(
        city_km=(weekday_city * 2 * WEEKDAYS_PER_WEEK + weekend_city) * WEEKS_PER_YEAR,
        highway_km=(weekday_highway * 2 * WEEKDAYS_PER_WEEK + weekend_highway) * WEEKS_PER_YEAR,
    )


def annual_fuel_cost(economy: FuelEconomy, distance: AnnualDistance, prices: PriceSheet) -> float:
    """
    Annual fuel/energy cost of a variant.

    Plug-in hybrids run the city share partly on electricity with a small
    residual gasoline draw; on the highway they burn gasoline. Every other
    variant burns its own fuel everywhere, with hybrids priced as gasoline.
    """
    city_units = distance.city_km / 100
    highway_units = distance.highway_km / 100

    if economy.vehicle_type == VehicleType.PHEV:
        city_electric = city_units * economy.city_kwh_per_100km * prices.price_electricity
        city_fuel = city_units * economy.city_l_per_100km * prices.price_gasoline
        highway_fuel = highway_units * economy.highway_l_per_100km * prices.price_gasoline
        return city_electric + city_fuel + highway_fuel

    unit_price = prices.fuel_price(economy.vehicle_type)
    city_cost = city_units * economy.city_l_per_100km * unit_price
    highway_cost = highway_units * economy.highway_l_per_100km * unit_price
    return city_cost + highway_cost


def amortization_years(result: CostResult, baseline: CostResult) -> Optional[float]:
    """
    Years of fuel savings needed to recover the purchase premium over the baseline.

    Returns None when the variant is not dearer to buy than the baseline, or
    when it never saves fuel money against it.
    """
    if result.vehicle_type == baseline.vehicle_type:
        return None
    if result.purchase_price <= baseline.purchase_price:
        return None

    annual_savings = baseline.annual_fuel_cost - result.annual_fuel_cost
    if annual_savings <= 0:
        return None

    return (result.purchase_price - baseline.purchase_price) / annual_savings


class CostCalculator:
    """Calculate total cost of ownership for every powertrain variant."""

    def calculate(
        self,
        scenario: OwnershipScenario,
        economies: Iterable[FuelEconomy],
    ) -> ComparisonResult:
        """
        Calculate TCO for every variant with consumption data.

        Args:
            scenario: Driving profile, prices and ownership horizon
            economies: One consumption record per variant, in any order

        Returns:
            ComparisonResult ranked by ascending total cost
        """
        distance = annual_distance(scenario.profile)

        results = [
            self._calculate_vehicle_cost(economy, distance, scenario.prices, scenario.years)
            for economy in self._unique_by_type(economies)
        ]

        baseline = next(
            (r for r in results if r.vehicle_type == VehicleType.GASOLINE), None
        )
        if baseline is not None:
            results = [
                replace(r, amortization_years=amortization_years(r, baseline))
                for r in results
            ]
        else:
            log.debug("No gasoline record; skipping amortization")

        # sorted() is stable, ties keep provider order
        ranked = sorted(results, key=lambda r: r.total_cost)

        return ComparisonResult(results=ranked, years=scenario.years, distance=distance)

    @staticmethod
    def _unique_by_type(economies: Iterable[FuelEconomy]) -> List[FuelEconomy]:
        seen = set()
        unique = []
        for economy in economies:
            if economy.vehicle_type in seen:
                log.warning("Duplicate consumption record for %s ignored",
                            economy.vehicle_type.value)
                continue
            seen.add(economy.vehicle_type)
            unique.append(economy)
        return unique

    def _calculate_vehicle_cost(
        self,
        economy: FuelEconomy,
        distance: AnnualDistance,
        prices: PriceSheet,
        years: int,
    ) -> CostResult:
        purchase_price = prices.purchase_price(economy.vehicle_type)
        fuel_cost = annual_fuel_cost(economy, distance, prices)

        return CostResult(
            name=economy.name,
            vehicle_type=economy.vehicle_type,
            total_cost=purchase_price + fuel_cost * years,
            annual_fuel_cost=fuel_cost,
            purchase_price=purchase_price,
            annual_km=distance.total_km,
        )
