from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import requests

from jobalert.config import SOURCE_TIMEOUT
from jobalert.models import JobPosting

USER_AGENT = "JobAlertBot/1.0"


def text(value: Any) -> str:
    """Coerce a payload field to a stripped string ('' for None)."""
    if value is None:
        return ""
    return str(value).strip()


class JobSource(ABC):
    """One job board: how to request it and how to map its payload.

    Subclasses set ``name`` and ``url`` and implement ``parse``; sources that
    need credentials override ``is_configured``.
    """

    name: str = ""
    url: str = ""

    def is_configured(self) -> bool:
        return True

    def params(self) -> dict[str, Any]:
        return {}

    def headers(self) -> dict[str, str]:
        return {}

    @abstractmethod
    def parse(self, payload: Any) -> list[JobPosting]:
        """Map a decoded response body to postings (may be empty)."""

    def fetch(self, session: requests.Session | None = None, timeout: float = SOURCE_TIMEOUT) -> list[JobPosting]:
        """GET, decode and parse. Errors propagate to the caller."""
        if not self.is_configured():
            return []
        http = session or requests
        r = http.get(
            self.url,
            params=self.params() or None,
            headers={"User-Agent": USER_AGENT, **self.headers()},
            timeout=timeout,
        )
        r.raise_for_status()
        jobs = self.parse(r.json())
        for job in jobs:
            if not job.source:
                job.source = self.name
        return jobs
