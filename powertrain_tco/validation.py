"""
Input validation for calculation requests.
Errors are keyed by the offending field so a form can show them in place.
"""

import math
from typing import Dict

from .models import OwnershipScenario

POSITIVE_MESSAGE = "Must be a positive value."
NON_NEGATIVE_MESSAGE = "Cannot be negative."
YEARS_MESSAGE = "Must be at least 1 year."
ADDRESS_MESSAGE = "Please enter both the home and the work address."

PRICE_FIELDS = (
    "price_gasoline",
    "price_diesel",
    "price_lpg",
    "price_electricity",
    "purchase_gasoline",
    "purchase_diesel",
    "purchase_lpg",
    "purchase_hybrid",
    "purchase_phev",
)

DISTANCE_FIELDS = (
    "weekday_commute_km",
    "weekend_trip_km",
    "estimated_annual_km",
)


class InputValidationError(ValueError):
    """Raised when one or more input fields are invalid."""

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        fields = ", ".join(sorted(self.errors))
        super().__init__(f"Invalid input: {fields}")


def validate_scenario(scenario: OwnershipScenario) -> Dict[str, str]:
    """
    Validate a calculation request.

    Args:
        scenario: OwnershipScenario to check

    Returns:
        Mapping of field name to error message (empty if all OK)
    """
    errors = {}

    for name in PRICE_FIELDS:
        value = getattr(scenario.prices, name)
        if not (math.isfinite(value) and value > 0):
            errors[name] = POSITIVE_MESSAGE

    for name in DISTANCE_FIELDS:
        value = getattr(scenario.profile, name)
        if not (math.isfinite(value) and value >= 0):
            errors[name] = NON_NEGATIVE_MESSAGE

    if not scenario.years >= 1:
        errors["years"] = YEARS_MESSAGE

    return errors


def ensure_valid(scenario: OwnershipScenario) -> None:
    errors = validate_scenario(scenario)
    if errors:
        raise InputValidationError(errors)


def ensure_addresses(home_address: str, work_address: str) -> None:
    """Both route endpoints must be given before a route can be estimated."""
    errors = {}
    if not (home_address or "").strip():
        errors["home_address"] = ADDRESS_MESSAGE
    if not (work_address or "").strip():
        errors["work_address"] = ADDRESS_MESSAGE
    if errors:
        raise InputValidationError(errors)
