"""Remotive: free API for remote tech jobs (no API key required).

Docs: https://remotive.com/api/remote-jobs
"""
from __future__ import annotations

from typing import Any

from jobalert.models import JobPosting
from jobalert.sources.base import JobSource, text


class RemotiveSource(JobSource):
    name = "Remotive"
    url = "https://remotive.com/api/remote-jobs"

    def parse(self, payload: Any) -> list[JobPosting]:
        jobs: list[JobPosting] = []
        for hit in (payload or {}).get("jobs", []):
            jobs.append(
                JobPosting(
                    title=text(hit.get("title")),
                    company=text(hit.get("company_name")),
                    location=text(hit.get("candidate_required_location")) or "Remote",
                    description=text(hit.get("description")),
                    url=text(hit.get("url")),
                    posted_at=hit.get("publication_date") or hit.get("created_at"),
                    job_type=text(hit.get("job_type")) or "Full-time",
                    salary=text(hit.get("salary")) or None,
                    tags=list(hit.get("tags") or []),
                    source_id=text(hit.get("id")),
                    source=self.name,
                )
            )
        return jobs
