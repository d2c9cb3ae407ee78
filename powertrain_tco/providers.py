"""
Interfaces for the external collaborators of the calculator.

Consumption data, route estimates and recommendations come from outside the
package. Each sits behind a small abstract class so the calculator and the
pipeline can run against in-memory fakes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List

from .models import CostResult, FuelEconomy


class ProviderError(RuntimeError):
    """An external collaborator failed; the message is shown to the user as-is."""


@dataclass(frozen=True)
class RouteRequest:
    home_address: str
    work_address: str


@dataclass(frozen=True)
class RouteEstimate:
    distance_km: float
    # Share of the route driven in town, 0-100
    city_percentage: float


@dataclass(frozen=True)
class RecommendationRequest:
    results: List[CostResult]
    years: int


class ConsumptionDataProvider(ABC):
    @abstractmethod
    def fetch(self) -> List[FuelEconomy]:
        """Return one consumption record per available variant."""


class RouteEstimator(ABC):
    @abstractmethod
    def estimate(self, request: RouteRequest) -> RouteEstimate:
        ...


class RecommendationNarrator(ABC):
    @abstractmethod
    def recommend(self, request: RecommendationRequest) -> str:
        ...
