"""
Realtime Database snapshot client.

Reads the `jobs` node through the database's REST interface
(`GET {database_url}/{jobs_path}.json`) and decodes it with the catalog parser.
Only one-shot reads are supported; listeners and writes stay with the app.
"""

from __future__ import annotations

import logging

from quickcash.catalog.loader import parse_jobs_snapshot
from quickcash.config.settings import Settings
from quickcash.core.http import get_json
from quickcash.domain.models import Job

logger = logging.getLogger(__name__)


class JobsClient:
    def __init__(self, settings: Settings):
        if not settings.datastore.database_url:
            raise ValueError("datastore.database_url is not configured")
        self._settings = settings

    @property
    def jobs_url(self) -> str:
        ds = self._settings.datastore
        base = str(ds.database_url).rstrip("/")
        path = ds.jobs_path.strip("/")
        return f"{base}/{path}.json"

    def fetch_jobs(self) -> list[Job]:
        """Fetch and decode the current jobs snapshot.

        Raises:
            httpx.HTTPError: On transport errors or non-2xx responses.
            ValueError: If the body is not JSON or not a valid snapshot root.
        """
        params = {"auth": self._settings.datastore.auth} if self._settings.datastore.auth else None
        url = self.jobs_url
        payload = get_json(url, params=params, timeout_seconds=self._settings.app.http_timeout_seconds)
        jobs = parse_jobs_snapshot(payload)
        logger.info("Fetched %d jobs from %s", len(jobs), url)
        return jobs
