import pytest

from powertrain_tco.models import FuelEconomy, VehicleType
from powertrain_tco.providers import (
    ConsumptionDataProvider,
    ProviderError,
    RecommendationNarrator,
    RouteEstimate,
    RouteEstimator,
)


def economy(vehicle_type, city, highway, kwh=0.0, name=None):
    return FuelEconomy(
        name=name or vehicle_type.display_name,
        vehicle_type=vehicle_type,
        city_l_per_100km=city,
        highway_l_per_100km=highway,
        city_kwh_per_100km=kwh,
    )


@pytest.fixture
def economies():
    return [
        economy(VehicleType.GASOLINE, 7.0, 5.5),
        economy(VehicleType.DIESEL, 5.5, 4.5),
        economy(VehicleType.LPG, 8.5, 6.8),
        economy(VehicleType.HYBRID, 4.2, 5.2),
        economy(VehicleType.PHEV, 1.5, 5.0, kwh=15.0),
    ]


class FakeConsumption(ConsumptionDataProvider):
    def __init__(self, records=None, error=None):
        self.records = records or []
        self.error = error
        self.calls = 0

    def fetch(self):
        self.calls += 1
        if self.error:
            raise ProviderError(self.error)
        return list(self.records)


class FakeNarrator(RecommendationNarrator):
    def __init__(self, text="Buy the hybrid.", error=None):
        self.text = text
        self.error = error
        self.requests = []

    def recommend(self, request):
        self.requests.append(request)
        if self.error:
            raise ProviderError(self.error)
        return self.text


class FakeRouteEstimator(RouteEstimator):
    def __init__(self, distance_km=18.4, city_percentage=75.0):
        self.estimate_result = RouteEstimate(distance_km=distance_km, city_percentage=city_percentage)
        self.requests = []

    def estimate(self, request):
        self.requests.append(request)
        return self.estimate_result
