"""
Generative-AI collaborators: consumption averages, route estimates and the
closing recommendation, all served through an OpenAI-compatible chat API.
"""

from __future__ import annotations

import json
import math
import logging
from typing import Any, Dict, List, Optional

from openai import OpenAI, OpenAIError

from . import config
from .models import FuelEconomy, VehicleType
from .providers import (
    ConsumptionDataProvider,
    ProviderError,
    RecommendationNarrator,
    RecommendationRequest,
    RouteEstimate,
    RouteEstimator,
    RouteRequest,
)

log = logging.getLogger(__name__)

CONSUMPTION_ERROR = "Could not obtain consumption data. Please try again."
ROUTE_ERROR = "Could not estimate the route. Please check the addresses and try again."
RECOMMENDATION_ERROR = "Could not obtain a recommendation. Please try again."

SYSTEM_INSTRUCTIONS = "You are an automotive expert helping a private buyer compare running costs."

CONSUMPTION_PROMPT = """I need average consumption figures for a compact family car (C segment, such as an SUV or a saloon). Values must be realistic 2024 averages for Europe.

- gasoline: city and highway consumption in L/100km.
- diesel: city and highway consumption in L/100km.
- lpg (autogas): city and highway consumption in L/100km. LPG consumption is slightly higher than gasoline.
- hybrid (non plug-in HEV): city and highway consumption in L/100km. Savings are larger in the city.
- phev (plug-in hybrid): in the city assume most short trips are driven in electric mode, so give a combined kWh/100km figure and a very low L/100km figure. On the highway assume the battery is depleted and the car runs as a regular hybrid.

Return ONLY one JSON object of the form:
{"vehicles": [{"name": string, "vehicle_type": "gasoline" | "diesel" | "lpg" | "hybrid" | "phev", "city_l_per_100km": number, "highway_l_per_100km": number, "city_kwh_per_100km": number}]}
city_kwh_per_100km is only meaningful for phev; use 0 for every other vehicle."""

ROUTE_PROMPT = """Estimate the usual driving route between these two addresses.

Home: {home}
Work: {work}

Return ONLY one JSON object of the form:
{{"distance_km": number, "city_percentage": number}}
distance_km is the one-way driving distance. city_percentage is the share of that distance driven in urban areas, from 0 to 100."""

RECOMMENDATION_PROMPT = """Act as an expert vehicle purchase advisor. Based on the following cost calculation over an ownership period of {years} years, write a short, friendly and useful recommendation.

Data:
{lines}

The cheapest option overall is the **{best}**.

Write a concise conclusion that a non-expert can follow, explaining why the recommended option is best in this case and mentioning the savings or the amortization time where relevant."""


class ChatClient:
    """Thin wrapper over the OpenAI SDK that turns failures into ProviderError."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        client: Any = None,
    ):
        self.model = model or config.AI_MODEL
        if client is not None:
            self.client = client
            return

        api_key = api_key or config.AI_API_KEY
        if not api_key:
            raise ProviderError(
                "No API key configured. Set POWERTRAIN_TCO_API_KEY (or GEMINI_API_KEY)."
            )
        self.client = OpenAI(
            api_key=api_key,
            base_url=base_url or config.AI_BASE_URL,
            timeout=config.AI_TIMEOUT,
        )

    def complete_text(self, prompt: str, error_message: str, json_mode: bool = False) -> str:
        messages = [
            {"role": "system", "content": SYSTEM_INSTRUCTIONS},
            {"role": "user", "content": prompt},
        ]
        kwargs: Dict[str, Any] = {"model": self.model, "messages": messages}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            completion = self.client.chat.completions.create(**kwargs)
        except OpenAIError as e:
            log.error("Chat completion failed (model=%s): %s", self.model, e)
            raise ProviderError(error_message) from e

        content = completion.choices[0].message.content if completion.choices else None
        if not content or not content.strip():
            log.error("Empty chat completion (model=%s)", self.model)
            raise ProviderError(error_message)
        return content.strip()

    def complete_json(self, prompt: str, error_message: str) -> Any:
        content = self.complete_text(prompt, error_message, json_mode=True)
        try:
            return _parse_json(content)
        except json.JSONDecodeError as e:
            log.error("Model did not return valid JSON: %s", e)
            raise ProviderError(error_message) from e


def _parse_json(content: str) -> Any:
    try:
        return json.loads(content)
    except json.JSONDecodeError:
        if "```json" in content:
            chunk = content.split("```json", 1)[1].split("```")[0]
            return json.loads(chunk)
        if content.count("```") >= 2:
            return json.loads(content.split("```")[1])
        raise


def _number(record: Dict, *keys: str, default: Optional[float] = None) -> float:
    for key in keys:
        if record.get(key) is not None:
            value = float(record[key])
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"{key} is not a valid consumption: {record[key]!r}")
            return value
    if default is None:
        raise KeyError(keys[0])
    return default


def parse_fuel_economy(record: Dict) -> FuelEconomy:
    """
    Build a FuelEconomy from one model record.

    The camelCase keys of earlier prompt versions are accepted too.
    """
    vehicle_type = VehicleType.parse(record.get("vehicle_type") or record.get("fuelType") or "")
    city_kwh = _number(record, "city_kwh_per_100km", "cityConsumptionKwh", default=0.0)

    return FuelEconomy(
        name=record.get("name") or record.get("type") or vehicle_type.display_name,
        vehicle_type=vehicle_type,
        city_l_per_100km=_number(record, "city_l_per_100km", "cityConsumptionLiters"),
        highway_l_per_100km=_number(record, "highway_l_per_100km", "highwayConsumptionLiters"),
        city_kwh_per_100km=city_kwh if vehicle_type == VehicleType.PHEV else 0.0,
    )


class AIConsumptionProvider(ConsumptionDataProvider):
    """Ask the model for average consumption of each powertrain."""

    def __init__(self, chat: Optional[ChatClient] = None):
        self.chat = chat or ChatClient()

    def fetch(self) -> List[FuelEconomy]:
        data = self.chat.complete_json(CONSUMPTION_PROMPT, CONSUMPTION_ERROR)
        records = data.get("vehicles") if isinstance(data, dict) else data
        if not isinstance(records, list):
            log.error("Unexpected consumption payload: %r", data)
            raise ProviderError(CONSUMPTION_ERROR)

        economies = []
        for record in records:
            if not isinstance(record, dict):
                raise ProviderError(CONSUMPTION_ERROR)
            try:
                VehicleType.parse(record.get("vehicle_type") or record.get("fuelType") or "")
            except ValueError as e:
                log.warning("Skipping consumption record %r: %s", record, e)
                continue
            try:
                economies.append(parse_fuel_economy(record))
            except (KeyError, TypeError, ValueError) as e:
                log.error("Malformed consumption record %r: %s", record, e)
                raise ProviderError(CONSUMPTION_ERROR) from e

        log.info("Received consumption data for %d vehicles", len(economies))
        return economies


class AIRouteEstimator(RouteEstimator):
    def __init__(self, chat: Optional[ChatClient] = None):
        self.chat = chat or ChatClient()

    def estimate(self, request: RouteRequest) -> RouteEstimate:
        prompt = ROUTE_PROMPT.format(home=request.home_address, work=request.work_address)
        data = self.chat.complete_json(prompt, ROUTE_ERROR)
        try:
            distance = float(data["distance_km"])
            city_percentage = float(data["city_percentage"])
        except (KeyError, TypeError, ValueError) as e:
            log.error("Malformed route payload %r: %s", data, e)
            raise ProviderError(ROUTE_ERROR) from e

        if not math.isfinite(distance) or distance < 0 or not 0 <= city_percentage <= 100:
            log.error("Route estimate out of range: %s km, %s%% city", distance, city_percentage)
            raise ProviderError(ROUTE_ERROR)

        return RouteEstimate(distance_km=distance, city_percentage=city_percentage)


def format_amortization(years: Optional[float]) -> str:
    return f"{years:.1f} years" if years is not None else "N/A"


def build_recommendation_prompt(request: RecommendationRequest) -> str:
    best = min(request.results, key=lambda r: r.total_cost)
    lines = "\n".join(
        f"- **{r.name}**:\n"
        f"  - Total cost: {round(r.total_cost)} €\n"
        f"  - Annual fuel cost: {round(r.annual_fuel_cost)} €\n"
        f"  - Years to amortize (vs gasoline): {format_amortization(r.amortization_years)}"
        for r in request.results
    )
    return RECOMMENDATION_PROMPT.format(years=request.years, lines=lines, best=best.name)


class AIRecommendationNarrator(RecommendationNarrator):
    def __init__(self, chat: Optional[ChatClient] = None):
        self.chat = chat or ChatClient()

    def recommend(self, request: RecommendationRequest) -> str:
        if not request.results:
            raise ProviderError(RECOMMENDATION_ERROR)
        return self.chat.complete_text(build_recommendation_prompt(request), RECOMMENDATION_ERROR)
