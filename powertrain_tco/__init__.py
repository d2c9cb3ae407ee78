"""
Powertrain TCO - Total Cost of Ownership comparison for private cars.

A Python package for comparing the total cost of ownership of gasoline,
diesel, LPG, hybrid and plug-in hybrid cars from driving habits and prices.
"""

from .calculator import CostCalculator
from .loader import DataLoader
from .models import (
    ComparisonResult,
    CostResult,
    DrivingProfile,
    FuelEconomy,
    OwnershipScenario,
    PriceSheet,
    RoutePreset,
    VehicleType,
)
from .pipeline import run_comparison

__version__ = "0.1.0"
__all__ = [
    "CostCalculator",
    "DataLoader",
    "ComparisonResult",
    "CostResult",
    "DrivingProfile",
    "FuelEconomy",
    "OwnershipScenario",
    "PriceSheet",
    "RoutePreset",
    "VehicleType",
    "run_comparison",
]
