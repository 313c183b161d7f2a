"""
Job catalog loader.

Jobs come from the realtime database `jobs` node, either fetched live (see
`quickcash.ingestion.jobs_client`) or exported to a local JSON file (default:
`data/catalogs/jobs.json`). Both routes decode through `parse_jobs_snapshot`, which
validates records into typed `Job` models so discovery code can assume a consistent shape.

Postings were written by several app versions, so coordinates may appear as
`Latitude`/`Longitude`, `latitude`/`longitude` or `lat`/`lon`, or only as a legacy
integer `location` id.
"""

from __future__ import annotations

import json
import logging
from math import isfinite
from pathlib import Path
from typing import Any, Mapping

from quickcash.core.env import resolve_project_path
from quickcash.domain.models import GeoPoint, Job

logger = logging.getLogger(__name__)

LAT_KEYS = ("Latitude", "latitude", "lat")
LON_KEYS = ("Longitude", "longitude", "lon")

# Legacy integer `location` ids written by early app builds.
LOCATION_ID_COORDINATES: dict[int, tuple[float, float]] = {
    1: (44.6488, -63.5752),  # Halifax
    2: (45.5017, -73.5673),  # Montreal
    3: (43.6532, -79.3832),  # Toronto
}


def _first_float(record: Mapping[str, Any], keys: tuple[str, ...]) -> float | None:
    for key in keys:
        value = record.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            continue
        try:
            value = float(value)
        except OverflowError:
            continue
        if isfinite(value):
            return value
    return None


def _optional_str(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _record_location(record: Mapping[str, Any]) -> GeoPoint | None:
    lat = _first_float(record, LAT_KEYS)
    lon = _first_float(record, LON_KEYS)
    if lat is None or lon is None:
        location_id = record.get("location")
        if isinstance(location_id, int) and not isinstance(location_id, bool):
            coords = LOCATION_ID_COORDINATES.get(location_id)
            if coords is not None:
                lat, lon = coords
    if lat is None or lon is None:
        return None
    if not (-90 <= lat <= 90 and -180 <= lon <= 180):
        return None
    return GeoPoint(lat=lat, lon=lon)


def parse_job_record(job_id: str, record: Mapping[str, Any]) -> Job | None:
    """Decode one `jobs/<id>` record; returns None for records that cannot be listed."""
    name = _optional_str(record.get("name"))
    if name is None:
        logger.warning("Skipping job %s: missing name", job_id)
        return None

    location = _record_location(record)
    if location is None:
        logger.debug("Job %s (%s) has no usable location", job_id, name)

    return Job(
        id=job_id,
        name=name,
        description=_optional_str(record.get("description")),
        category=_optional_str(record.get("category")),
        email=_optional_str(record.get("email")),
        employer_id=_optional_str(record.get("employerId")) or _optional_str(record.get("employer_id")),
        status=_optional_str(record.get("status")) or "open",
        location=location,
    )


def _iter_records(payload: Any) -> list[tuple[str, Any]]:
    if isinstance(payload, Mapping):
        return [(str(k), v) for k, v in payload.items()]
    if isinstance(payload, list):
        out: list[tuple[str, Any]] = []
        for i, rec in enumerate(payload):
            # Realtime DB array exports leave holes as nulls.
            if rec is None:
                continue
            rec_id = rec.get("id") if isinstance(rec, Mapping) else None
            out.append((str(rec_id) if rec_id is not None else str(i), rec))
        return out
    raise ValueError(f"Invalid jobs snapshot root: expected an object or array, got {type(payload).__name__}")


def parse_jobs_snapshot(payload: Any) -> list[Job]:
    """Decode a `jobs` node snapshot (mapping of id -> record, or an array) into jobs."""
    if payload is None:
        return []
    jobs: list[Job] = []
    for job_id, record in _iter_records(payload):
        if not isinstance(record, Mapping):
            logger.warning("Skipping job %s: record is not an object", job_id)
            continue
        job = parse_job_record(job_id, record)
        if job is not None:
            jobs.append(job)
    return jobs


def load_jobs(path: str | Path) -> list[Job]:
    """Load and validate a jobs snapshot JSON file."""
    resolved = resolve_project_path(path)
    payload = json.loads(resolved.read_text(encoding="utf-8"))
    jobs = parse_jobs_snapshot(payload)
    logger.info("Loaded %d jobs from %s", len(jobs), resolved)
    return jobs
