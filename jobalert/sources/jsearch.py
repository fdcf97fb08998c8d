"""JSearch API (RapidAPI): aggregated job listings."""
from __future__ import annotations

from typing import Any, Callable

from jobalert.models import JobPosting
from jobalert.sources.base import JobSource, text


class JSearchSource(JobSource):
    name = "JSearch (RapidAPI)"
    url = "https://jsearch.p.rapidapi.com/search"

    def __init__(self, env_getter: Callable[[str], str]) -> None:
        self.api_key: str = env_getter("RAPIDAPI_KEY")

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def params(self) -> dict[str, Any]:
        return {
            "query": "azure cloud devops security india",
            "page": "1",
            "num_pages": "1",
            "date_posted": "month",
        }

    def headers(self) -> dict[str, str]:
        return {
            "X-RapidAPI-Key": self.api_key,
            "X-RapidAPI-Host": "jsearch.p.rapidapi.com",
        }

    def parse(self, payload: Any) -> list[JobPosting]:
        jobs: list[JobPosting] = []
        for hit in (payload or {}).get("data", []):
            city = text(hit.get("job_city"))
            country = text(hit.get("job_country"))
            location = f"{city}, {country}" if city else (country or "India")
            salary = None
            if hit.get("job_max_salary"):
                salary = f"{hit.get('job_min_salary') or 0}-{hit['job_max_salary']}"
            jobs.append(
                JobPosting(
                    title=text(hit.get("job_title")),
                    company=text(hit.get("employer_name")) or "Not specified",
                    location=location,
                    description=text(hit.get("job_description")),
                    url=text(hit.get("job_apply_link") or hit.get("job_google_link")),
                    posted_at=hit.get("job_posted_at_datetime_utc") or hit.get("job_posted_at_timestamp"),
                    job_type=text(hit.get("job_employment_type")) or "Full-time",
                    salary=salary,
                    source_id=text(hit.get("job_id")),
                    source=f"JSearch ({text(hit.get('job_publisher')) or 'Multi-platform'})",
                )
            )
        return jobs
