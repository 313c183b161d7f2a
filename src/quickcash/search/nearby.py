from __future__ import annotations

# Job discovery for the three places the app lists jobs by distance:
# - dashboard "jobs found nearby" (radius filter, input order)
# - map markers (smaller radius, every status)
# - search screen (text + category filters, ranked by distance)
#
# All distance math lives in `quickcash.core.geo`; this module only decides which jobs
# are candidates and what origin/radius to use.

import logging
from datetime import datetime, timezone
from typing import Callable, Iterable

from quickcash.config.settings import Settings, get_settings
from quickcash.core.geo import distance_km, filter_within_radius, format_distance_km, sort_by_distance
from quickcash.domain.models import GeoPoint, Job, JobHit, JobListResult, NearbyQuery, Role, SearchQuery

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "All"


def effective_origin(origin: GeoPoint | None, settings: Settings) -> tuple[GeoPoint, bool]:
    """Return the origin to measure from, falling back to the configured default location."""
    if origin is not None:
        return origin, False
    loc = settings.nearby.default_location
    return GeoPoint(lat=loc.lat, lon=loc.lon), True


def is_known_category(category: str, settings: Settings) -> bool:
    return category == ALL_CATEGORIES or category in settings.search.categories


def _own_postings_email(role: Role, user_email: str | None) -> str | None:
    # Employees never see their own postings; employers manage theirs from "My Jobs".
    return user_email if role == "Employee" and user_email else None


def _matches_text(job: Job, text: str) -> bool:
    return not text or text.lower() in job.name.lower()


def _matches_category(job: Job, category: str) -> bool:
    return category == ALL_CATEGORIES or job.category == category


class _Counter:
    def __init__(self, total: int):
        self.total = total
        self.without_location = 0
        self.excluded_own = 0
        self.excluded_filters = 0

    def as_meta(self, matched: int) -> dict[str, int]:
        return {
            "total": self.total,
            "without_location": self.without_location,
            "excluded_own": self.excluded_own,
            "excluded_filters": self.excluded_filters,
            "matched": matched,
        }


def _candidates(
    jobs: Iterable[Job],
    counter: _Counter,
    *,
    exclude_email: str | None = None,
    keep: Callable[[Job], bool] | None = None,
) -> list[Job]:
    out: list[Job] = []
    for job in jobs:
        if exclude_email and job.is_posted_by(exclude_email):
            counter.excluded_own += 1
            continue
        if keep is not None and not keep(job):
            counter.excluded_filters += 1
            continue
        if not job.has_location:
            counter.without_location += 1
            continue
        out.append(job)
    return out


def _to_hits(jobs: list[Job], origin: GeoPoint) -> list[JobHit]:
    hits: list[JobHit] = []
    for job in jobs:
        d = distance_km(origin, job.location)
        hits.append(JobHit(job=job, distance_km=d, distance_text=format_distance_km(d)))
    return hits


def _result(
    hits: list[JobHit],
    *,
    origin: GeoPoint,
    origin_is_default: bool,
    radius_km: float | None,
    counter: _Counter,
) -> JobListResult:
    return JobListResult(
        generated_at=datetime.now(timezone.utc),
        origin=origin,
        origin_is_default=origin_is_default,
        radius_km=radius_km,
        results=hits,
        meta=counter.as_meta(len(hits)),
    )


def nearby_jobs(
    query: NearbyQuery,
    jobs: list[Job],
    *,
    settings: Settings | None = None,
) -> JobListResult:
    """Jobs within the query radius (or the dashboard default) of the user's location."""
    settings = settings or get_settings()
    origin, origin_is_default = effective_origin(query.origin, settings)
    radius_km = query.radius_km if query.radius_km is not None else settings.nearby.default_radius_km

    counter = _Counter(len(jobs))
    candidates = _candidates(jobs, counter, exclude_email=_own_postings_email(query.role, query.user_email))
    matched = filter_within_radius(candidates, origin, radius_km)
    if query.sort:
        matched = sort_by_distance(matched, origin)

    logger.debug(
        "Found %d nearby jobs within %.1f km of (%.4f, %.4f)", len(matched), radius_km, origin.lat, origin.lon
    )
    return _result(
        _to_hits(matched, origin),
        origin=origin,
        origin_is_default=origin_is_default,
        radius_km=radius_km,
        counter=counter,
    )


def map_jobs(
    origin: GeoPoint | None,
    jobs: list[Job],
    *,
    settings: Settings | None = None,
) -> JobListResult:
    """Jobs to mark on the map around `origin`, whatever their status."""
    settings = settings or get_settings()
    center, origin_is_default = effective_origin(origin, settings)
    radius_km = settings.nearby.map_radius_km

    counter = _Counter(len(jobs))
    candidates = _candidates(jobs, counter)
    matched = filter_within_radius(candidates, center, radius_km)
    return _result(
        _to_hits(matched, center),
        origin=center,
        origin_is_default=origin_is_default,
        radius_km=radius_km,
        counter=counter,
    )


def search_jobs(
    query: SearchQuery,
    jobs: list[Job],
    *,
    settings: Settings | None = None,
) -> JobListResult:
    """Filter jobs by name text and category, then rank by distance from the search origin.

    Raises:
        ValueError: If the category is not configured (unless unknown categories are allowed).
    """
    settings = settings or get_settings()
    if not settings.search.allow_unknown_categories and not is_known_category(query.category, settings):
        raise ValueError(f"Unknown category '{query.category}'")

    origin, origin_is_default = effective_origin(query.origin, settings)

    counter = _Counter(len(jobs))
    candidates = _candidates(
        jobs,
        counter,
        exclude_email=_own_postings_email(query.role, query.user_email),
        keep=lambda job: _matches_text(job, query.text) and _matches_category(job, query.category),
    )
    if query.radius_km is not None:
        candidates = filter_within_radius(candidates, origin, query.radius_km)
    ranked = sort_by_distance(candidates, origin)

    logger.debug("Search text=%r category=%r matched %d jobs", query.text, query.category, len(ranked))
    return _result(
        _to_hits(ranked, origin),
        origin=origin,
        origin_is_default=origin_is_default,
        radius_km=query.radius_km,
        counter=counter,
    )
