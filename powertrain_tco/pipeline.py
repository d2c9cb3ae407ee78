"""
Submission flow: validate the request, fetch consumption data, calculate and
ask for a recommendation. Also turns a route estimate into a driving profile.
"""

import logging
import sys
from dataclasses import dataclass, field, replace
from typing import Dict, Optional

from . import config
from .calculator import CostCalculator
from .models import ComparisonResult, DrivingProfile, OwnershipScenario, RoutePreset
from .providers import (
    ConsumptionDataProvider,
    ProviderError,
    RecommendationNarrator,
    RecommendationRequest,
    RouteEstimate,
    RouteEstimator,
    RouteRequest,
)
from .validation import ensure_addresses, validate_scenario

log = logging.getLogger(__name__)

URBAN_THRESHOLD = 70
HIGHWAY_THRESHOLD = 30


@dataclass
class CalculationOutcome:
    """What the presentation layer shows after one submission."""

    comparison: Optional[ComparisonResult] = None
    recommendation: Optional[str] = None
    error: Optional[str] = None
    field_errors: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.comparison is not None and not self.error and not self.field_errors


def run_comparison(
    scenario: OwnershipScenario,
    consumption_provider: ConsumptionDataProvider,
    narrator: Optional[RecommendationNarrator] = None,
    calculator: Optional[CostCalculator] = None,
) -> CalculationOutcome:
    """
    Run one calculation request end to end.

    A failure at any stage returns an outcome without results; nothing
    computed before the failure is kept.

    Args:
        scenario: Driving profile, prices and ownership horizon
        consumption_provider: Source of consumption figures
        narrator: Optional source of the closing recommendation
        calculator: Calculator to use (a fresh CostCalculator by default)

    Returns:
        CalculationOutcome
    """
    field_errors = validate_scenario(scenario)
    if field_errors:
        log.info("Rejected request with invalid fields: %s", ", ".join(sorted(field_errors)))
        return CalculationOutcome(field_errors=field_errors)

    calculator = calculator or CostCalculator()

    try:
        log.info("Fetching consumption data")
        economies = consumption_provider.fetch()

        comparison = calculator.calculate(scenario, economies)
        log.info("Calculated %d results over %d years, best: %s",
                 len(comparison.results), comparison.years,
                 comparison.best.name if comparison.best else None)

        recommendation = None
        if narrator is not None and comparison.results:
            log.info("Requesting recommendation")
            recommendation = narrator.recommend(
                RecommendationRequest(results=comparison.results, years=scenario.years)
            )
    except ProviderError as e:
        log.error("Calculation aborted: %s", e)
        return CalculationOutcome(error=str(e))

    return CalculationOutcome(comparison=comparison, recommendation=recommendation)


def preset_for_city_percentage(city_percentage: float) -> RoutePreset:
    if city_percentage >= URBAN_THRESHOLD:
        return RoutePreset.URBAN
    if city_percentage <= HIGHWAY_THRESHOLD:
        return RoutePreset.HIGHWAY
    return RoutePreset.MIXED


def apply_route_estimate(profile: DrivingProfile, estimate: RouteEstimate) -> DrivingProfile:
    """Return a copy of the profile using the estimated commute and route mix."""
    return replace(
        profile,
        weekday_commute_km=float(round(estimate.distance_km)),
        route_preset=preset_for_city_percentage(estimate.city_percentage),
    )


def estimate_commute(
    profile: DrivingProfile,
    home_address: str,
    work_address: str,
    estimator: RouteEstimator,
) -> DrivingProfile:
    """
    Estimate the weekday commute between two addresses.

    Raises:
        InputValidationError: if either address is blank
        ProviderError: if the estimator fails
    """
    ensure_addresses(home_address, work_address)
    estimate = estimator.estimate(
        RouteRequest(home_address=home_address.strip(), work_address=work_address.strip())
    )
    log.info("Route estimate: %.1f km, %.0f%% city", estimate.distance_km, estimate.city_percentage)
    return apply_route_estimate(profile, estimate)


def format_outcome(outcome: CalculationOutcome) -> str:
    """Render an outcome as a plain-text report."""
    if outcome.field_errors:
        lines = ["Invalid input:"]
        lines += [f"  - {name}: {message}" for name, message in sorted(outcome.field_errors.items())]
        return "\n".join(lines)
    if outcome.error:
        return f"Error: {outcome.error}"

    comparison = outcome.comparison
    lines = [
        "=" * 84,
        f"TCO COMPARISON - {comparison.distance.total_km:,.0f} km/year over {comparison.years} years",
        "=" * 84,
        f"{'Vehicle':<26} {'Purchase':>12} {'Fuel/year':>12} {'Total':>14} {'Amortization':>14}",
        "-" * 84,
    ]
    for r in comparison.results:
        amortization = f"{r.amortization_years:.1f} yrs" if r.amortization_years is not None else "-"
        lines.append(
            f"{r.name:<26} €{r.purchase_price:>11,.0f} €{r.annual_fuel_cost:>11,.0f} "
            f"€{r.total_cost:>13,.0f} {amortization:>14}"
        )
    lines.append("-" * 84)
    if comparison.best:
        lines.append(f"Best option: {comparison.best.name}")
    if outcome.recommendation:
        lines += ["", outcome.recommendation]
    return "\n".join(lines)


def main(argv=None) -> int:
    """Compare the default scenario; pass a workbook/CSV path to skip the consumption lookup."""
    logging.basicConfig(level=config.LOG_LEVEL,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    argv = sys.argv[1:] if argv is None else argv

    try:
        if argv:
            from .loader import DataLoader
            provider = DataLoader(argv[0])
            narrator = None
        else:
            from .ai_client import AIConsumptionProvider, AIRecommendationNarrator
            provider = AIConsumptionProvider()
            narrator = AIRecommendationNarrator(provider.chat)
    except (ProviderError, FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    outcome = run_comparison(OwnershipScenario(), provider, narrator)
    print(format_outcome(outcome))
    return 0 if outcome.ok else 1


if __name__ == "__main__":
    sys.exit(main())
