"""
Domain models (Pydantic).

These types are the contract between layers:
- catalog entities (`Job`)
- API/CLI inputs (`NearbyQuery`, `SearchQuery`)
- discovery output (`JobListResult`)

A job's location is optional and explicit: `location=None` means "no location".
`(0, 0)` is an ordinary coordinate, never a sentinel.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from quickcash.domain.validation import is_blank, is_valid_email

Role = Literal["Employee", "Employer"]


def parse_role(value: str | None) -> Role:
    """Map free-form role text to a Role; anything other than "employee" is an Employer."""
    if value is not None and value.strip().lower() == "employee":
        return "Employee"
    return "Employer"


class GeoPoint(BaseModel):
    """A geographic point in decimal degrees."""

    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


class Job(BaseModel):
    """A job posting as stored under the `jobs` node of the datastore."""

    id: str
    name: str
    description: str | None = None
    category: str | None = None
    email: str | None = None
    employer_id: str | None = None
    status: str = "open"
    location: GeoPoint | None = None

    @property
    def has_location(self) -> bool:
        return self.location is not None

    def is_posted_by(self, email: str | None) -> bool:
        if not email or not self.email:
            return False
        return self.email.strip().lower() == email.strip().lower()


class _RoleQuery(BaseModel):
    role: Role = "Employee"
    user_email: str | None = None

    @field_validator("role", mode="before")
    @classmethod
    def _normalize_role(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_role(value)
        return value

    @field_validator("user_email")
    @classmethod
    def _check_user_email(cls, email: str | None) -> str | None:
        if is_blank(email):
            return None
        email = email.strip()
        if not is_valid_email(email):
            raise ValueError(f"invalid email address: {email!r}")
        return email


class NearbyQuery(_RoleQuery):
    """Dashboard/map style query: jobs within a radius of the user."""

    origin: GeoPoint | None = None
    radius_km: float | None = None
    sort: bool = False


class SearchQuery(_RoleQuery):
    """Search-screen query: text + category filters, ranked by distance."""

    origin: GeoPoint | None = None
    text: str = ""
    category: str = "All"
    radius_km: float | None = None

    @field_validator("text")
    @classmethod
    def _strip_text(cls, text: str) -> str:
        return text.strip()


class JobHit(BaseModel):
    """One listed job with its distance from the effective origin."""

    job: Job
    distance_km: float
    distance_text: str


class JobListResult(BaseModel):
    generated_at: datetime
    origin: GeoPoint
    origin_is_default: bool = False
    radius_km: float | None = None
    results: list[JobHit]
    meta: dict[str, Any] = Field(default_factory=dict)


class DistanceRequest(BaseModel):
    a: GeoPoint
    b: GeoPoint
