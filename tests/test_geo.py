import math

import pytest

from portfolio_engine.services.geo import centroid, distance, has_coordinates, split_by_coordinates

from conftest import make_property

MILES_PER_TENTH_DEGREE = 3959 * math.radians(0.1)


def test_distance_same_point_is_zero():
    assert distance(32.7767, -96.7970, 32.7767, -96.7970) == 0


def test_distance_along_meridian():
    assert distance(32.7, -96.8, 32.8, -96.8) == pytest.approx(MILES_PER_TENTH_DEGREE)


def test_distance_dallas_to_houston():
    # ~225 miles great-circle
    assert distance(32.7767, -96.7970, 29.7604, -95.3698) == pytest.approx(224.5, abs=2)


def test_distance_is_symmetric():
    forward = distance(40.7128, -74.0060, 34.0522, -118.2437)
    backward = distance(34.0522, -118.2437, 40.7128, -74.0060)
    assert forward == pytest.approx(backward)


def test_has_coordinates_rejects_missing_and_non_finite():
    assert has_coordinates(make_property("a", 32.7))
    assert not has_coordinates(make_property("b"))
    assert not has_coordinates(make_property("c", float("nan")))
    assert not has_coordinates(make_property("d", 32.7, float("inf")))


def test_zero_coordinates_are_valid():
    assert has_coordinates(make_property("equator", 0.0, 0.0))


def test_split_keeps_input_order():
    props = [make_property("a", 32.7), make_property("b"), make_property("c", 32.9)]
    located, missing = split_by_coordinates(props)
    assert [p.id for p in located] == ["a", "c"]
    assert [p.id for p in missing] == ["b"]


def test_centroid_ignores_unlocated():
    props = [make_property("a", 32.0), make_property("b", 34.0), make_property("c")]
    assert centroid(props) == pytest.approx((33.0, -96.8))
    assert centroid([make_property("x")]) is None
