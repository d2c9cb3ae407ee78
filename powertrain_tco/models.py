"""
Data models for powertrain TCO calculations.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional
import pandas as pd


class VehicleType(str, Enum):
    """The five powertrains compared by the calculator."""

    GASOLINE = "gasoline"
    DIESEL = "diesel"
    LPG = "lpg"
    HYBRID = "hybrid"
    PHEV = "phev"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @classmethod
    def parse(cls, value: str) -> "VehicleType":
        """
        Resolve a vehicle type from its key or a known alias.

        Args:
            value: Key such as 'gasoline', 'glp' or 'Hybrid (HEV)'

        Returns:
            Matching VehicleType
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        if key in _ALIASES:
            return _ALIASES[key]
        raise ValueError(f"Unknown vehicle type: {value!r}")


_DISPLAY_NAMES = {
    VehicleType.GASOLINE: "Gasoline",
    VehicleType.DIESEL: "Diesel",
    VehicleType.LPG: "LPG",
    VehicleType.HYBRID: "Hybrid (HEV)",
    VehicleType.PHEV: "Plug-in Hybrid (PHEV)",
}

# Keys, display names and the Spanish identifiers some data sources still emit
_ALIASES = {vt.value: vt for vt in VehicleType}
_ALIASES.update({name.lower(): vt for vt, name in _DISPLAY_NAMES.items()})
_ALIASES.update({
    "gasolina": VehicleType.GASOLINE,
    "petrol": VehicleType.GASOLINE,
    "diésel": VehicleType.DIESEL,
    "glp": VehicleType.LPG,
    "autogas": VehicleType.LPG,
    "hibrido": VehicleType.HYBRID,
    "híbrido": VehicleType.HYBRID,
    "hev": VehicleType.HYBRID,
    "híbrido (hev)": VehicleType.HYBRID,
    "plug-in hybrid": VehicleType.PHEV,
    "híbrido enchufable (phev)": VehicleType.PHEV,
})


class RoutePreset(str, Enum):
    """Fixed city/highway split applied to the driving pattern."""

    URBAN = "urban"
    MIXED = "mixed"
    HIGHWAY = "highway"

    @property
    def city_share(self) -> float:
        return _ROUTE_SHARES[self][0]

    @property
    def highway_share(self) -> float:
        return _ROUTE_SHARES[self][1]

    @property
    def description(self) -> str:
        return f"{self.city_share:.0%} city, {self.highway_share:.0%} highway"


_ROUTE_SHARES = {
    RoutePreset.URBAN: (0.8, 0.2),
    RoutePreset.MIXED: (0.5, 0.5),
    RoutePreset.HIGHWAY: (0.2, 0.8),
}


@dataclass
class DrivingProfile:
    """How the vehicle is driven over a typical year."""

    # One-way weekday commute, driven twice a day, five days a week
    weekday_commute_km: float = 25.0
    # Total weekend distance, once a week
    weekend_trip_km: float = 150.0
    # Overrides the commute/weekend derivation when > 0
    estimated_annual_km: float = 0.0
    route_preset: RoutePreset = RoutePreset.MIXED


@dataclass
class FuelEconomy:
    """Average consumption for one vehicle variant."""

    name: str
    vehicle_type: VehicleType
    city_l_per_100km: float
    highway_l_per_100km: float
    # Only plug-in hybrids draw electricity
    city_kwh_per_100km: float = 0.0


@dataclass
class PriceSheet:
    """Energy unit prices and purchase price per variant."""

    price_gasoline: float = 1.6      # per L
    price_diesel: float = 1.5        # per L
    price_lpg: float = 0.9           # per L
    price_electricity: float = 0.2   # per kWh

    purchase_gasoline: float = 25000.0
    purchase_diesel: float = 27000.0
    purchase_lpg: float = 26000.0
    purchase_hybrid: float = 30000.0
    purchase_phev: float = 35000.0

    def fuel_price(self, vehicle_type: VehicleType) -> float:
        """Price per litre of the fuel the variant burns."""
        if vehicle_type == VehicleType.DIESEL:
            return self.price_diesel
        if vehicle_type == VehicleType.LPG:
            return self.price_lpg
        return self.price_gasoline

    def purchase_price(self, vehicle_type: VehicleType) -> float:
        return getattr(self, f"purchase_{vehicle_type.value}")


@dataclass
class OwnershipScenario:
    """Everything a single calculation request needs apart from consumption data."""

    profile: DrivingProfile = field(default_factory=DrivingProfile)
    prices: PriceSheet = field(default_factory=PriceSheet)
    years: int = 7


@dataclass(frozen=True)
class AnnualDistance:
    """Annual distance split into city and highway kilometres."""

    city_km: float
    highway_km: float

    @property
    def total_km(self) -> float:
        return self.city_km + self.highway_km


@dataclass(frozen=True)
class CostResult:
    """Cost figures for a single vehicle variant."""

    name: str
    vehicle_type: VehicleType
    total_cost: float
    annual_fuel_cost: float
    purchase_price: float
    annual_km: float
    amortization_years: Optional[float] = None

    def cost_after(self, years: float) -> float:
        """Cumulative cost after the given number of years of ownership."""
        return self.purchase_price + self.annual_fuel_cost * years


@dataclass(frozen=True)
class ComparisonResult:
    """Ranked results of one calculation request."""

    results: List[CostResult]
    years: int
    distance: AnnualDistance

    @property
    def best(self) -> Optional[CostResult]:
        return self.results[0] if self.results else None

    @property
    def baseline(self) -> Optional[CostResult]:
        """The gasoline result, if one was computed."""
        for result in self.results:
            if result.vehicle_type == VehicleType.GASOLINE:
                return result
        return None

    def get(self, vehicle_type: VehicleType) -> Optional[CostResult]:
        for result in self.results:
            if result.vehicle_type == vehicle_type:
                return result
        return None

    def summary(self) -> Dict:
        """Return summary of the comparison."""
        best = self.best
        return {
            'Years': self.years,
            'Annual km': self.distance.total_km,
            'City km': self.distance.city_km,
            'Highway km': self.distance.highway_km,
            'Best Option': best.name if best else None,
            'Best Total Cost': best.total_cost if best else None,
        }

    def to_dataframe(self) -> pd.DataFrame:
        """Convert results to pandas DataFrame, one row per variant in ranked order."""
        data = []
        for rank, r in enumerate(self.results, start=1):
            data.append({
                'Rank': rank,
                'Vehicle': r.name,
                'Type': r.vehicle_type.value,
                'Purchase Price': r.purchase_price,
                'Annual Fuel Cost': r.annual_fuel_cost,
                'Total Cost': r.total_cost,
                'Amortization Years': r.amortization_years,
                'Annual km': r.annual_km,
            })
        return pd.DataFrame(data)
