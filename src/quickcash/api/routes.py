"""
API routes.

Endpoints:
- GET  `/api/health`: liveness probe.
- GET  `/api/settings`: public settings (datastore auth redacted).
- GET  `/api/categories`: search categories.
- POST `/api/jobs/nearby`: dashboard-style radius listing.
- POST `/api/jobs/search`: text/category search ranked by distance.
- GET  `/api/jobs/map`: every job near the user, for map markers.
- GET  `/api/dashboard`: role-based dashboard view.
- POST `/api/distance`: distance between two points.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Callable

import httpx
from fastapi import APIRouter, HTTPException, Query

from quickcash.catalog.loader import load_jobs
from quickcash.config.settings import get_settings
from quickcash.core.geo import distance_km, format_distance_km
from quickcash.dashboard.state import DashboardView, build_dashboard
from quickcash.domain.models import DistanceRequest, GeoPoint, Job, JobListResult, NearbyQuery, SearchQuery
from quickcash.ingestion.jobs_client import JobsClient
from quickcash.search.nearby import map_jobs, nearby_jobs, search_jobs

logger = logging.getLogger(__name__)

router = APIRouter()


@lru_cache
def _jobs_source() -> Callable[[], list[Job]]:
    """Pick where jobs come from: the live datastore if configured, else the local catalog."""
    settings = get_settings()
    if settings.datastore.database_url:
        return JobsClient(settings).fetch_jobs
    return lambda: load_jobs(settings.catalog.path)


def _load_jobs() -> list[Job]:
    try:
        return _jobs_source()()
    except (OSError, ValueError, httpx.HTTPError) as e:
        logger.exception("Job source unavailable")
        raise HTTPException(status_code=503, detail=f"Job source unavailable: {e}") from e


def _origin(lat: float | None, lon: float | None) -> GeoPoint | None:
    if lat is None and lon is None:
        return None
    if lat is None or lon is None:
        raise HTTPException(status_code=400, detail="lat and lon must be given together")
    try:
        return GeoPoint(lat=lat, lon=lon)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.get("/api/health")
def get_health() -> dict:
    return {"status": "ok"}


@router.get("/api/settings")
def get_public_settings() -> dict:
    """Return settings safe to show in a client (secrets redacted)."""
    return get_settings().public_dict()


@router.get("/api/categories")
def get_categories() -> dict:
    return {"categories": list(get_settings().search.categories)}


@router.post("/api/jobs/nearby", response_model=JobListResult)
def post_nearby_jobs(query: NearbyQuery) -> JobListResult:
    """List jobs within a radius of the user's location (dashboard behaviour)."""
    return nearby_jobs(query, _load_jobs(), settings=get_settings())


@router.post("/api/jobs/search", response_model=JobListResult)
def post_search_jobs(query: SearchQuery) -> JobListResult:
    """Search jobs by name/category and rank them by distance."""
    jobs = _load_jobs()
    try:
        return search_jobs(query, jobs, settings=get_settings())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.get("/api/jobs/map", response_model=JobListResult)
def get_map_jobs(lat: float | None = None, lon: float | None = None) -> JobListResult:
    """Jobs within the map radius of `lat`/`lon` (or the default location)."""
    return map_jobs(_origin(lat, lon), _load_jobs(), settings=get_settings())


@router.get("/api/dashboard", response_model=DashboardView)
def get_dashboard(
    username: str = Query(..., min_length=1),
    role: str = "Employee",
    email: str | None = None,
    lat: float | None = None,
    lon: float | None = None,
) -> DashboardView:
    origin = _origin(lat, lon)
    jobs = _load_jobs()
    try:
        return build_dashboard(username, role, jobs, origin=origin, user_email=email, settings=get_settings())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.post("/api/distance")
def post_distance(req: DistanceRequest) -> dict:
    d = distance_km(req.a, req.b)
    return {"distance_km": d, "distance_text": format_distance_km(d)}
