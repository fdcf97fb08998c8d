"""Adzuna job search: aggregator with India coverage.

Free tier: 250 requests/day.  Sign up at https://developer.adzuna.com/
Without ADZUNA_APP_ID / ADZUNA_APP_KEY the source is skipped.
"""
from __future__ import annotations

from typing import Any, Callable

from jobalert.models import JobPosting
from jobalert.sources.base import JobSource, text

COUNTRY = "in"
QUERY = "azure cloud devops security"


class AdzunaSource(JobSource):
    name = "Adzuna India"
    url = f"https://api.adzuna.com/v1/api/jobs/{COUNTRY}/search/1"

    def __init__(self, env_getter: Callable[[str], str]) -> None:
        self.app_id: str = env_getter("ADZUNA_APP_ID")
        self.app_key: str = env_getter("ADZUNA_APP_KEY")

    def is_configured(self) -> bool:
        return bool(self.app_id and self.app_key)

    def params(self) -> dict[str, Any]:
        return {
            "app_id": self.app_id,
            "app_key": self.app_key,
            "results_per_page": 50,
            "what": QUERY,
            "where": "india",
            "max_days_old": 30,
            "content-type": "application/json",
        }

    def parse(self, payload: Any) -> list[JobPosting]:
        jobs: list[JobPosting] = []
        for hit in (payload or {}).get("results", []):
            salary = None
            sal_max = hit.get("salary_max")
            if sal_max:
                salary = f"₹{hit.get('salary_min') or 0}-₹{sal_max}"
            jobs.append(
                JobPosting(
                    title=text(hit.get("title")),
                    company=text((hit.get("company") or {}).get("display_name")) or "Not specified",
                    location=text((hit.get("location") or {}).get("display_name")) or "India",
                    description=text(hit.get("description")),
                    url=text(hit.get("redirect_url") or hit.get("url")),
                    posted_at=hit.get("created"),
                    job_type=text(hit.get("contract_time")) or "Full-time",
                    salary=salary,
                    source_id=text(hit.get("id")),
                    source=self.name,
                )
            )
        return jobs
