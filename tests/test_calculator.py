import pytest

from powertrain_tco.calculator import (
    CostCalculator,
    amortization_years,
    annual_distance,
    annual_fuel_cost,
)
from powertrain_tco.models import (
    AnnualDistance,
    DrivingProfile,
    OwnershipScenario,
    PriceSheet,
    RoutePreset,
    VehicleType,
)

from conftest import economy


def _scenario(**profile_kwargs):
    return OwnershipScenario(profile=DrivingProfile(**profile_kwargs), prices=PriceSheet(), years=7)


def test_route_presets_sum_to_one():
    for preset in RoutePreset:
        assert preset.city_share + preset.highway_share == 1.0


def test_annual_distance_from_commute_and_weekend():
    d = annual_distance(DrivingProfile(weekday_commute_km=25, weekend_trip_km=150,
                                       route_preset=RoutePreset.MIXED))
    assert d.city_km == pytest.approx(10400)
    assert d.highway_km == pytest.approx(10400)
    assert d.total_km == pytest.approx(20800)


def test_annual_distance_urban_preset():
    d = annual_distance(DrivingProfile(weekday_commute_km=10, weekend_trip_km=0,
                                       route_preset=RoutePreset.URBAN))
    # 10 km x 2 x 5 x 52 = 5200 km, 80 % of it in town
    assert d.city_km == pytest.approx(4160)
    assert d.highway_km == pytest.approx(1040)


def test_explicit_annual_total_overrides_derivation():
    derived = annual_distance(DrivingProfile(weekday_commute_km=25, weekend_trip_km=150,
                                             estimated_annual_km=0))
    explicit = annual_distance(DrivingProfile(weekday_commute_km=25, weekend_trip_km=150,
                                              estimated_annual_km=15000,
                                              route_preset=RoutePreset.HIGHWAY))
    assert derived.total_km == pytest.approx(20800)
    assert explicit.city_km == pytest.approx(3000)
    assert explicit.highway_km == pytest.approx(12000)


def test_gasoline_scenario():
    scenario = _scenario()
    result = CostCalculator().calculate(scenario, [economy(VehicleType.GASOLINE, 7.0, 5.5)])

    gasoline = result.get(VehicleType.GASOLINE)
    assert gasoline.annual_km == pytest.approx(20800)
    assert gasoline.annual_fuel_cost == pytest.approx(2080)
    assert gasoline.total_cost == pytest.approx(39560)
    assert gasoline.purchase_price == 25000
    assert gasoline.amortization_years is None


def test_phev_annual_cost():
    distance = AnnualDistance(city_km=10400, highway_km=10400)
    phev = economy(VehicleType.PHEV, 1.5, 5.0, kwh=15.0)

    cost = annual_fuel_cost(phev, distance, PriceSheet(price_electricity=0.2, price_gasoline=1.6))

    # 312 electric + 249.6 city fuel + 832 highway fuel
    assert cost == pytest.approx(1393.6)


def test_hybrid_priced_as_gasoline():
    distance = AnnualDistance(city_km=10000, highway_km=0)
    prices = PriceSheet(price_gasoline=2.0, price_diesel=1.0, price_lpg=0.5)

    cost = annual_fuel_cost(economy(VehicleType.HYBRID, 4.0, 5.0), distance, prices)

    assert cost == pytest.approx(100 * 4.0 * 2.0)


def test_electric_consumption_ignored_for_conventional_variants():
    distance = AnnualDistance(city_km=1000, highway_km=1000)
    prices = PriceSheet()
    with_kwh = economy(VehicleType.DIESEL, 5.0, 4.0, kwh=20.0)
    without_kwh = economy(VehicleType.DIESEL, 5.0, 4.0)

    assert annual_fuel_cost(with_kwh, distance, prices) == annual_fuel_cost(without_kwh, distance, prices)


def test_results_ranked_by_total_cost(economies):
    result = CostCalculator().calculate(_scenario(), economies)

    totals = [r.total_cost for r in result.results]
    assert totals == sorted(totals)
    assert result.best is result.results[0]
    assert len(result.results) == 5


def test_total_cost_never_below_purchase_price(economies):
    result = CostCalculator().calculate(_scenario(estimated_annual_km=1), economies)
    for r in result.results:
        assert r.total_cost >= r.purchase_price


def test_amortization_against_gasoline(economies):
    result = CostCalculator().calculate(_scenario(), economies)

    diesel = result.get(VehicleType.DIESEL)
    # 104 x (5.5 + 4.5) x 1.5 = 1560 per year, 520 cheaper than gasoline
    assert diesel.annual_fuel_cost == pytest.approx(1560)
    assert diesel.amortization_years == pytest.approx(2000 / 520)


def test_amortization_none_when_savings_are_zero():
    scenario = _scenario()
    same_consumption = [
        economy(VehicleType.GASOLINE, 7.0, 5.5),
        economy(VehicleType.HYBRID, 7.0, 5.5),
    ]

    result = CostCalculator().calculate(scenario, same_consumption)

    hybrid = result.get(VehicleType.HYBRID)
    assert hybrid.annual_fuel_cost == pytest.approx(result.baseline.annual_fuel_cost)
    assert hybrid.amortization_years is None


def test_amortization_none_when_variant_costs_more_to_run():
    result = CostCalculator().calculate(_scenario(), [
        economy(VehicleType.GASOLINE, 7.0, 5.5),
        economy(VehicleType.LPG, 30.0, 30.0),
    ])
    assert result.get(VehicleType.LPG).amortization_years is None


def test_amortization_none_when_variant_is_cheaper_to_buy():
    scenario = OwnershipScenario(prices=PriceSheet(purchase_diesel=24000))
    result = CostCalculator().calculate(scenario, [
        economy(VehicleType.GASOLINE, 7.0, 5.5),
        economy(VehicleType.DIESEL, 5.0, 4.0),
    ])
    assert result.get(VehicleType.DIESEL).amortization_years is None


def test_amortization_helper_ignores_baseline_itself(economies):
    result = CostCalculator().calculate(_scenario(), economies)
    assert amortization_years(result.baseline, result.baseline) is None


def test_missing_baseline_skips_amortization(economies):
    without_gasoline = [e for e in economies if e.vehicle_type != VehicleType.GASOLINE]

    result = CostCalculator().calculate(_scenario(), without_gasoline)

    assert result.baseline is None
    assert len(result.results) == 4
    assert all(r.amortization_years is None for r in result.results)


def test_missing_variant_is_omitted(economies):
    partial = [e for e in economies if e.vehicle_type != VehicleType.LPG]

    result = CostCalculator().calculate(_scenario(), partial)

    assert result.get(VehicleType.LPG) is None
    assert {r.vehicle_type for r in result.results} == set(VehicleType) - {VehicleType.LPG}


def test_input_order_does_not_change_result(economies):
    forward = CostCalculator().calculate(_scenario(), economies)
    backward = CostCalculator().calculate(_scenario(), list(reversed(economies)))
    assert forward.results == backward.results


def test_duplicate_variant_keeps_first():
    result = CostCalculator().calculate(_scenario(), [
        economy(VehicleType.GASOLINE, 7.0, 5.5, name="First"),
        economy(VehicleType.GASOLINE, 9.0, 8.0, name="Second"),
    ])
    assert [r.name for r in result.results] == ["First"]


def test_summary_and_dataframe(economies):
    result = CostCalculator().calculate(_scenario(), economies)

    summary = result.summary()
    assert summary['Years'] == 7
    assert summary['Best Option'] == result.best.name

    df = result.to_dataframe()
    assert list(df['Rank']) == [1, 2, 3, 4, 5]
    assert df.loc[0, 'Vehicle'] == result.best.name


def test_results_are_immutable(economies):
    result = CostCalculator().calculate(_scenario(), economies)
    with pytest.raises(AttributeError):
        result.best.total_cost = 0
