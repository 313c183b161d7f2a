"""
Role-based dashboard state.

The dashboard looks different for the two roles a user can switch between:
employees see a "jobs found nearby" section, employers do not. Each role is a
small state object; `state_for_role` picks one from the user's stored role text.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel, Field

from quickcash.config.settings import Settings, get_settings
from quickcash.domain.models import GeoPoint, Job, JobHit, JobListResult, NearbyQuery, Role, parse_role
from quickcash.domain.validation import is_blank
from quickcash.search.nearby import nearby_jobs


class DashboardView(BaseModel):
    role: Role
    welcome_text: str
    role_text: str
    features: list[str] = Field(default_factory=list)
    show_nearby_jobs: bool
    nearby_jobs: list[JobHit] = Field(default_factory=list)
    nearby_count_text: str | None = None
    origin: GeoPoint
    origin_is_default: bool = False


class DashboardState(ABC):
    role: Role
    show_nearby_jobs: bool

    def welcome_text(self, username: str) -> str:
        return f"Welcome, {username}"

    def role_text(self) -> str:
        return f"Current Role: {self.role}"

    @abstractmethod
    def features(self) -> list[str]:
        ...

    @abstractmethod
    def exclude_own_postings(self) -> bool:
        ...

    def load_jobs(
        self,
        jobs: list[Job],
        *,
        origin: GeoPoint | None,
        user_email: str | None,
        settings: Settings,
    ) -> JobListResult:
        query = NearbyQuery(
            origin=origin,
            role=self.role,
            user_email=user_email if self.exclude_own_postings() else None,
        )
        return nearby_jobs(query, jobs, settings=settings)


class EmployeeDashboardState(DashboardState):
    role: Role = "Employee"
    show_nearby_jobs = True

    def features(self) -> list[str]:
        return ["Search Jobs", "Map", "My Applications", "Settings"]

    def exclude_own_postings(self) -> bool:
        return True


class EmployerDashboardState(DashboardState):
    role: Role = "Employer"
    show_nearby_jobs = False

    def features(self) -> list[str]:
        return ["Post Job", "My Jobs", "View Applications", "Settings"]

    def exclude_own_postings(self) -> bool:
        return False


def state_for_role(role: str | None) -> DashboardState:
    if parse_role(role) == "Employee":
        return EmployeeDashboardState()
    return EmployerDashboardState()


def build_dashboard(
    username: str,
    role: str | None,
    jobs: list[Job],
    *,
    origin: GeoPoint | None = None,
    user_email: str | None = None,
    settings: Settings | None = None,
) -> DashboardView:
    """Assemble what the dashboard shows for `username` in the given role."""
    if is_blank(username):
        raise ValueError("username must not be empty")
    username = username.strip()
    settings = settings or get_settings()
    state = state_for_role(role)
    result = state.load_jobs(jobs, origin=origin, user_email=user_email, settings=settings)

    hits = result.results if state.show_nearby_jobs else []
    return DashboardView(
        role=state.role,
        welcome_text=state.welcome_text(username),
        role_text=state.role_text(),
        features=state.features(),
        show_nearby_jobs=state.show_nearby_jobs,
        nearby_jobs=hits,
        nearby_count_text=f"{len(hits)} jobs found nearby" if state.show_nearby_jobs else None,
        origin=result.origin,
        origin_is_default=result.origin_is_default,
    )
