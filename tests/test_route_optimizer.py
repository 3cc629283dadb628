from datetime import date

import pytest

from portfolio_engine.core.config import Settings
from portfolio_engine.services.geo import distance
from portfolio_engine.services.route_optimizer import RouteOptimizer

from conftest import make_property

START = (32.70, -96.80)
DEGREE_MILES = distance(0, 0, 1, 0)


@pytest.fixture
def optimizer(test_settings):
    return RouteOptimizer(test_settings)


@pytest.fixture
def stops():
    return [
        make_property("x", 33.00),
        make_property("w"),
        make_property("y", 32.80),
        make_property("z", 32.90),
    ]


def test_nearest_neighbor_order(optimizer, stops):
    result = optimizer.optimize_route(stops, *START)

    assert [p.id for p in result.order] == ["y", "z", "x"]
    assert [p.id for p in result.skipped] == ["w"]


def test_total_distance_is_sum_of_legs(optimizer, stops):
    result = optimizer.optimize_route(stops, *START)

    legs = 0.0
    lat, lng = START
    for prop in result.order:
        legs += distance(lat, lng, prop.latitude, prop.longitude)
        lat, lng = prop.latitude, prop.longitude

    assert result.total_distance == pytest.approx(legs)
    assert result.total_distance == pytest.approx(0.3 * DEGREE_MILES, rel=1e-6)


def test_estimated_minutes(optimizer, stops):
    result = optimizer.optimize_route(stops, *START)
    assert result.estimated_minutes == pytest.approx(result.total_distance / 30 * 60 + 3 * 45)


def test_estimate_uses_settings(stops):
    optimizer = RouteOptimizer(Settings(AVERAGE_TRAVEL_SPEED_MPH=60, ON_SITE_MINUTES=30))
    assert optimizer.estimate_minutes(60, 2) == pytest.approx(120)


def test_ties_go_to_first_listed(optimizer):
    properties = [make_property("first", 32.80), make_property("second", 32.80)]
    result = optimizer.optimize_route(properties, *START)
    assert [p.id for p in result.order] == ["first", "second"]


def test_empty_route(optimizer):
    result = optimizer.optimize_route([], *START)
    assert result.order == []
    assert result.total_distance == 0
    assert result.estimated_minutes == 0


def test_only_unlocated_properties(optimizer):
    result = optimizer.optimize_route([make_property("a"), make_property("b")], *START)
    assert result.order == []
    assert [p.id for p in result.skipped] == ["a", "b"]


def test_plan_route(optimizer, stops):
    plan = optimizer.plan_route("insp-1", date(2025, 6, 16), stops, *START)

    assert plan.inspector_id == "insp-1"
    assert plan.route_date == date(2025, 6, 16)
    assert plan.property_sequence == ["y", "z", "x"]
    assert plan.skipped_property_ids == ["w"]
    assert plan.estimated_travel_time == pytest.approx(0.3 * DEGREE_MILES * 2 + 135, rel=1e-6)
    assert plan.optimization_score == 100


def test_workday_fit_score(optimizer):
    assert optimizer.workday_fit_score(0) == 100
    assert optimizer.workday_fit_score(480) == 100
    assert optimizer.workday_fit_score(960) == 50.0
    assert optimizer.workday_fit_score(1440) == pytest.approx(33.3)
