"""
QuickCash CLI entrypoint.

For quick local demos and debugging against a jobs snapshot, without the app or API.
Discovery logic lives in `quickcash.search.nearby` and `quickcash.dashboard.state`.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

import httpx
from pydantic import ValidationError

from quickcash.catalog.loader import load_jobs
from quickcash.config.settings import get_settings
from quickcash.core.geo import distance_km, format_distance_km
from quickcash.core.logging import configure_logging
from quickcash.dashboard.state import build_dashboard
from quickcash.domain.models import GeoPoint, Job, JobHit, JobListResult, NearbyQuery, SearchQuery
from quickcash.ingestion.jobs_client import JobsClient
from quickcash.search.nearby import nearby_jobs, search_jobs

logger = logging.getLogger(__name__)


class JobSourceError(RuntimeError):
    """The jobs snapshot could not be read (missing file, bad JSON, datastore down)."""


def _origin_from_args(args: argparse.Namespace) -> GeoPoint | None:
    if args.lat is None and args.lon is None:
        return None
    if args.lat is None or args.lon is None:
        raise ValueError("--lat and --lon must be given together")
    return GeoPoint(lat=float(args.lat), lon=float(args.lon))


def _jobs_from_args(args: argparse.Namespace) -> list[Job]:
    settings = get_settings()
    try:
        if args.catalog:
            return load_jobs(args.catalog)
        if settings.datastore.database_url:
            return JobsClient(settings).fetch_jobs()
        return load_jobs(settings.catalog.path)
    except (OSError, ValueError, httpx.HTTPError) as e:
        raise JobSourceError(str(e)) from e


def _print_hits(hits: list[JobHit]) -> None:
    for i, hit in enumerate(hits, start=1):
        category = hit.job.category or "-"
        print(f"{i:>2}. {hit.job.name} [{category}]  {hit.distance_text}")


def _print_result(result: JobListResult, args: argparse.Namespace) -> None:
    if args.json:
        print(json.dumps(result.model_dump(mode="json"), ensure_ascii=False, indent=2))
        return
    where = " (default location)" if result.origin_is_default else ""
    radius = f" within {result.radius_km:g} km" if result.radius_km is not None else ""
    print(f"{len(result.results)} jobs{radius} of ({result.origin.lat:.4f}, {result.origin.lon:.4f}){where}")
    _print_hits(result.results)


def _cmd_distance(args: argparse.Namespace) -> int:
    a = GeoPoint(lat=args.from_lat, lon=args.from_lon)
    b = GeoPoint(lat=args.to_lat, lon=args.to_lon)
    d = distance_km(a, b)
    if args.json:
        print(json.dumps({"distance_km": d, "distance_text": format_distance_km(d)}))
    else:
        print(format_distance_km(d))
    return 0


def _cmd_nearby(args: argparse.Namespace) -> int:
    query = NearbyQuery(
        origin=_origin_from_args(args),
        radius_km=args.radius_km,
        role=args.role,
        user_email=args.email,
        sort=bool(args.sort),
    )
    result = nearby_jobs(query, _jobs_from_args(args), settings=get_settings())
    _print_result(result, args)
    return 0


def _cmd_search(args: argparse.Namespace) -> int:
    query = SearchQuery(
        origin=_origin_from_args(args),
        text=args.text,
        category=args.category,
        radius_km=args.radius_km,
        role=args.role,
        user_email=args.email,
    )
    result = search_jobs(query, _jobs_from_args(args), settings=get_settings())
    _print_result(result, args)
    return 0


def _cmd_dashboard(args: argparse.Namespace) -> int:
    view = build_dashboard(
        args.username,
        args.role,
        _jobs_from_args(args),
        origin=_origin_from_args(args),
        user_email=args.email,
        settings=get_settings(),
    )
    if args.json:
        print(json.dumps(view.model_dump(mode="json"), ensure_ascii=False, indent=2))
        return 0
    print(view.welcome_text)
    print(view.role_text)
    print("Features: " + ", ".join(view.features))
    if view.show_nearby_jobs:
        print(view.nearby_count_text)
        _print_hits(view.nearby_jobs)
    return 0


def _add_listing_args(p: argparse.ArgumentParser, *, require_origin: bool) -> None:
    p.add_argument("--lat", type=float, required=require_origin, default=None)
    p.add_argument("--lon", type=float, required=require_origin, default=None)
    p.add_argument("--role", type=str, default="Employee", help="Employee or Employer")
    p.add_argument("--email", type=str, default=None, help="Current user's email (hides own postings)")
    p.add_argument("--catalog", type=str, default=None, help="Jobs snapshot JSON (overrides config)")
    p.add_argument("--json", action="store_true", help="Output machine-readable JSON")


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the QuickCash CLI."""
    parser = argparse.ArgumentParser(prog="quickcash")
    sub = parser.add_subparsers(dest="command", required=True)

    dist = sub.add_parser("distance", help="Great-circle distance between two points.")
    dist.add_argument("--from-lat", required=True, type=float)
    dist.add_argument("--from-lon", required=True, type=float)
    dist.add_argument("--to-lat", required=True, type=float)
    dist.add_argument("--to-lon", required=True, type=float)
    dist.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    dist.set_defaults(func=_cmd_distance)

    near = sub.add_parser("nearby", help="Jobs within a radius of a location.")
    _add_listing_args(near, require_origin=True)
    near.add_argument("--radius-km", type=float, default=None, help="Defaults to nearby.default_radius_km")
    near.add_argument("--sort", action="store_true", help="Order by distance instead of listing order")
    near.set_defaults(func=_cmd_nearby)

    search = sub.add_parser("search", help="Search jobs by name and category, nearest first.")
    _add_listing_args(search, require_origin=False)
    search.add_argument("--text", type=str, default="")
    search.add_argument("--category", type=str, default="All")
    search.add_argument("--radius-km", type=float, default=None)
    search.set_defaults(func=_cmd_search)

    dash = sub.add_parser("dashboard", help="Role-based dashboard view.")
    dash.add_argument("--username", required=True)
    _add_listing_args(dash, require_origin=False)
    dash.set_defaults(func=_cmd_dashboard)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m quickcash.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    try:
        return int(func(args))
    except JobSourceError as e:
        logger.error("Job source unavailable: %s", e)
        print(f"quickcash: job source unavailable: {e}", file=sys.stderr)
        return 1
    except (ValidationError, ValueError) as e:
        parser.error(str(e))


if __name__ == "__main__":
    raise SystemExit(main())
