import math
from dataclasses import dataclass

import pytest

from quickcash.core.geo import (
    GeoPoint,
    distance_km,
    filter_within_radius,
    format_distance_km,
    sort_by_distance,
)


@dataclass(frozen=True)
class Place:
    name: str
    location: GeoPoint


HALIFAX = GeoPoint(lat=44.6356, lon=-63.5957)
NEAR = Place("near", GeoPoint(lat=44.6358, lon=-63.5959))
MONTREAL = Place("Montreal", GeoPoint(lat=45.5017, lon=-73.5673))


def test_distance_is_zero_for_identical_points():
    for p in [HALIFAX, GeoPoint(0.0, 0.0), GeoPoint(-89.9, 179.9), GeoPoint(90.0, -180.0)]:
        assert distance_km(p, p) == 0.0


def test_distance_is_symmetric():
    pairs = [
        (HALIFAX, MONTREAL.location),
        (GeoPoint(0.0, 0.0), GeoPoint(0.0, 180.0)),
        (GeoPoint(-33.8688, 151.2093), GeoPoint(51.5074, -0.1278)),
    ]
    for a, b in pairs:
        assert distance_km(a, b) == pytest.approx(distance_km(b, a), abs=1e-9)


def test_distance_grows_with_longitude_separation():
    origin = GeoPoint(lat=44.0, lon=0.0)
    distances = [distance_km(origin, GeoPoint(lat=44.0, lon=float(dlon))) for dlon in range(1, 30)]
    assert distances == sorted(distances)
    assert len(set(distances)) == len(distances)


def test_distance_halifax_scenario():
    assert distance_km(HALIFAX, NEAR.location) < 1.0
    assert distance_km(HALIFAX, MONTREAL.location) > 500.0
    # Halifax -> Montreal is roughly 790 km on a sphere.
    assert 780.0 < distance_km(HALIFAX, MONTREAL.location) < 800.0


def test_distance_one_degree_of_latitude():
    d = distance_km(GeoPoint(0.0, 0.0), GeoPoint(1.0, 0.0))
    assert d == pytest.approx(6371.0 * math.pi / 180, rel=1e-9)


def test_distance_antipodes_is_half_circumference():
    d = distance_km(GeoPoint(0.0, 0.0), GeoPoint(0.0, 180.0))
    assert d == pytest.approx(math.pi * 6371.0, rel=1e-9)


def test_distance_propagates_nan_for_non_finite_input():
    assert math.isnan(distance_km(GeoPoint(float("nan"), 0.0), HALIFAX))
    assert math.isnan(distance_km(HALIFAX, GeoPoint(0.0, float("inf"))))
    assert math.isnan(distance_km(GeoPoint(float("-inf"), 0.0), GeoPoint(0.0, 0.0)))


def test_distance_accepts_out_of_range_coordinates():
    d = distance_km(GeoPoint(100.0, 0.0), GeoPoint(0.0, 400.0))
    assert math.isfinite(d)
    assert d >= 0.0


def test_filter_within_radius_halifax_scenario():
    records = [NEAR, MONTREAL]
    assert filter_within_radius(records, HALIFAX, 10.0) == [NEAR]


def test_filter_within_radius_negative_radius_is_empty():
    assert filter_within_radius([NEAR, MONTREAL], HALIFAX, -0.001) == []
    assert filter_within_radius([Place("center", HALIFAX)], HALIFAX, -1) == []


def test_filter_within_radius_zero_keeps_only_coincident_points():
    center = Place("center", HALIFAX)
    assert filter_within_radius([center], HALIFAX, 0.0) == [center]
    assert filter_within_radius([NEAR, center, MONTREAL], HALIFAX, 0) == [center]


def test_filter_within_radius_is_stable_and_idempotent():
    records = [
        MONTREAL,
        Place("b", GeoPoint(44.70, -63.60)),
        NEAR,
        Place("a", GeoPoint(44.60, -63.50)),
    ]
    once = filter_within_radius(records, HALIFAX, 25.0)
    assert [r.name for r in once] == ["b", "near", "a"]
    assert filter_within_radius(once, HALIFAX, 25.0) == once


def test_filter_within_radius_does_not_mutate_input():
    records = [MONTREAL, NEAR]
    snapshot = list(records)
    filter_within_radius(records, HALIFAX, 10.0)
    assert records == snapshot


def test_filter_within_radius_accepts_generators_and_accessor():
    rows = [{"id": 1, "pt": NEAR.location}, {"id": 2, "pt": MONTREAL.location}]
    out = filter_within_radius((r for r in rows), HALIFAX, 10.0, get_location=lambda r: r["pt"])
    assert [r["id"] for r in out] == [1]


def test_filter_within_radius_excludes_nan_distances():
    bad = Place("bad", GeoPoint(float("nan"), 0.0))
    assert filter_within_radius([bad, NEAR], HALIFAX, 1e9) == [NEAR]


def test_sort_by_distance_is_stable_permutation():
    twin_a = Place("twin_a", GeoPoint(44.70, -63.5957))
    twin_b = Place("twin_b", GeoPoint(44.70, -63.5957))
    records = [MONTREAL, twin_a, NEAR, twin_b]

    ordered = sort_by_distance(records, HALIFAX)

    assert [r.name for r in ordered] == ["near", "twin_a", "twin_b", "Montreal"]
    assert sorted(r.name for r in ordered) == sorted(r.name for r in records)
    distances = [distance_km(HALIFAX, r.location) for r in ordered]
    assert distances == sorted(distances)
    # Input untouched.
    assert [r.name for r in records] == ["Montreal", "twin_a", "near", "twin_b"]


def test_sort_by_distance_empty():
    assert sort_by_distance([], HALIFAX) == []


def test_geo_point_is_immutable():
    with pytest.raises(AttributeError):
        HALIFAX.lat = 0.0  # type: ignore[misc]


def test_format_distance_km():
    assert format_distance_km(0.0) == "0.0 km"
    assert format_distance_km(12.345) == "12.3 km"
    assert format_distance_km(789.96) == "790.0 km"
