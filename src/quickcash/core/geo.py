from __future__ import annotations

from dataclasses import dataclass
from math import atan2, cos, isfinite, nan, radians, sin, sqrt
from typing import Any, Callable, Iterable, Protocol, TypeVar

"""
Geospatial helpers.

A tiny geometry layer for "jobs near me" style filtering: great-circle distance on a
spherical earth plus a stable radius filter and distance sort. Everything here is pure
(no I/O, no shared state), so it is safe to call from any thread.

Records are duck-typed: anything exposing `.lat` / `.lon` works as a point, and records
are located through `record.location` unless a `get_location` accessor is given.
"""

EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees (not range-checked)."""

    lat: float
    lon: float


class HasLatLon(Protocol):
    lat: float
    lon: float


T = TypeVar("T")
LocationGetter = Callable[[Any], HasLatLon]


def _default_location(record: Any) -> HasLatLon:
    return record.location


def distance_km(a: HasLatLon, b: HasLatLon) -> float:
    """Great-circle distance in kilometers between two points (Haversine).

    Symmetric, zero for identical points. NaN/inf coordinates yield NaN rather than raising.
    """
    if not (isfinite(a.lat) and isfinite(a.lon) and isfinite(b.lat) and isfinite(b.lon)):
        return nan

    phi1 = radians(a.lat)
    phi2 = radians(b.lat)
    dphi = phi2 - phi1
    dlambda = radians(b.lon) - radians(a.lon)

    h = sin(dphi / 2) ** 2 + cos(phi1) * cos(phi2) * sin(dlambda / 2) ** 2
    # Rounding can push h a hair past 1 near antipodes.
    h = min(max(h, 0.0), 1.0)
    return 2 * EARTH_RADIUS_KM * atan2(sqrt(h), sqrt(1 - h))


def filter_within_radius(
    records: Iterable[T],
    center: HasLatLon,
    radius_km: float,
    *,
    get_location: LocationGetter | None = None,
) -> list[T]:
    """Return records within `radius_km` of `center`, preserving input order.

    A negative radius matches nothing; a zero radius matches only exact-coincident points.
    """
    r = float(radius_km)
    if r < 0:
        return []
    locate = get_location or _default_location
    return [rec for rec in records if distance_km(center, locate(rec)) <= r]


def sort_by_distance(
    records: Iterable[T],
    center: HasLatLon,
    *,
    get_location: LocationGetter | None = None,
) -> list[T]:
    """Return a new list ordered by ascending distance from `center` (stable on ties)."""
    locate = get_location or _default_location
    return sorted(records, key=lambda rec: distance_km(center, locate(rec)))


def format_distance_km(d: float) -> str:
    return f"{d:.1f} km"
