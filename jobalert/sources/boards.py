"""Public job boards with plain JSON feeds (no API key required)."""
from __future__ import annotations

from typing import Any

from jobalert.models import JobPosting
from jobalert.sources.base import JobSource, text


class ArbeitnowSource(JobSource):
    name = "Arbeitnow"
    url = "https://www.arbeitnow.com/api/job-board-api"

    def parse(self, payload: Any) -> list[JobPosting]:
        jobs: list[JobPosting] = []
        for hit in (payload or {}).get("data", []):
            types = hit.get("job_types") or []
            jobs.append(
                JobPosting(
                    title=text(hit.get("title")),
                    company=text(hit.get("company_name")),
                    location=text(hit.get("location")) or ("Remote" if hit.get("remote") else ""),
                    description=text(hit.get("description")),
                    url=text(hit.get("url")),
                    posted_at=hit.get("created_at") or hit.get("date"),
                    job_type=", ".join(str(t) for t in types),
                    tags=list(hit.get("tags") or []),
                    source_id=text(hit.get("slug")),
                    source=self.name,
                )
            )
        return jobs


class RemoteOKSource(JobSource):
    name = "RemoteOK"
    url = "https://remoteok.com/api"

    def parse(self, payload: Any) -> list[JobPosting]:
        if not isinstance(payload, list):
            return []
        jobs: list[JobPosting] = []
        # First element is the API legal notice, not a job.
        for hit in payload[1:]:
            if not isinstance(hit, dict):
                continue
            job_id = text(hit.get("id") or hit.get("slug"))
            salary = None
            if hit.get("salary_max"):
                salary = f"${hit.get('salary_min') or 0}-${hit['salary_max']}"
            jobs.append(
                JobPosting(
                    title=text(hit.get("position")),
                    company=text(hit.get("company")),
                    location=text(hit.get("location")) or "Remote",
                    description=text(hit.get("description")),
                    url=text(hit.get("url")) or f"https://remoteok.com/remote-jobs/{job_id}",
                    posted_at=hit.get("date") or hit.get("epoch"),
                    job_type=text(hit.get("type")),
                    salary=salary,
                    tags=list(hit.get("tags") or []),
                    source_id=job_id,
                    source=self.name,
                )
            )
        return jobs


class JobicySource(JobSource):
    name = "Jobicy"
    url = "https://jobicy.com/api/v2/remote-jobs"

    def parse(self, payload: Any) -> list[JobPosting]:
        jobs: list[JobPosting] = []
        for hit in (payload or {}).get("jobs", []):
            job_type = hit.get("jobType") or ""
            if isinstance(job_type, list):
                job_type = ", ".join(str(t) for t in job_type)
            jobs.append(
                JobPosting(
                    title=text(hit.get("jobTitle")),
                    company=text(hit.get("companyName")),
                    location=text(hit.get("jobGeo")) or "Remote",
                    description=text(hit.get("jobExcerpt")),
                    url=text(hit.get("url")),
                    posted_at=hit.get("jobPosted") or hit.get("pubDate"),
                    job_type=text(job_type),
                    source_id=text(hit.get("id")),
                    source=self.name,
                )
            )
        return jobs


class TheMuseSource(JobSource):
    name = "The Muse"
    url = "https://www.themuse.com/api/public/jobs"

    def params(self) -> dict[str, Any]:
        return {
            "page": 1,
            "descending": "true",
            "level": ["Entry Level", "Internship"],
            "category": ["Software Engineering", "Data Science", "IT"],
        }

    def parse(self, payload: Any) -> list[JobPosting]:
        jobs: list[JobPosting] = []
        for hit in (payload or {}).get("results", []):
            job_id = text(hit.get("id"))
            locations = hit.get("locations") or []
            location = text(locations[0].get("name")) if locations else ""
            jobs.append(
                JobPosting(
                    title=text(hit.get("name")),
                    company=text((hit.get("company") or {}).get("name")) or "Not specified",
                    location=location or "Remote",
                    description=text(hit.get("contents")),
                    url=text((hit.get("refs") or {}).get("landing_page")) or f"https://www.themuse.com/jobs/{job_id}",
                    posted_at=hit.get("publication_date"),
                    job_type=text(hit.get("type")) or "Full-time",
                    source_id=job_id,
                    source=self.name,
                )
            )
        return jobs


class FindJobSource(JobSource):
    name = "FindJob.in"
    url = "https://findjob.in/api/jobs"

    def params(self) -> dict[str, Any]:
        return {"category": "it-software", "location": "india", "limit": 50}

    def parse(self, payload: Any) -> list[JobPosting]:
        jobs: list[JobPosting] = []
        for hit in (payload or {}).get("jobs", []):
            job_id = text(hit.get("id"))
            jobs.append(
                JobPosting(
                    title=text(hit.get("title") or hit.get("job_title")),
                    company=text(hit.get("company") or hit.get("company_name")) or "Not specified",
                    location=text(hit.get("location")) or "India",
                    description=text(hit.get("description") or hit.get("job_description")),
                    url=text(hit.get("url") or hit.get("job_url")) or f"https://findjob.in/job/{job_id}",
                    posted_at=hit.get("posted_date") or hit.get("created_at"),
                    job_type=text(hit.get("job_type")) or "Full-time",
                    source_id=job_id,
                    source=self.name,
                )
            )
        return jobs


class WellfoundSource(JobSource):
    name = "Wellfound (AngelList)"
    url = "https://api.wellfound.com/jobs"

    def params(self) -> dict[str, Any]:
        return {"location": "India", "role": "Software Engineer"}

    def parse(self, payload: Any) -> list[JobPosting]:
        jobs: list[JobPosting] = []
        for hit in (payload or {}).get("jobs", []):
            job_id = text(hit.get("id"))
            jobs.append(
                JobPosting(
                    title=text(hit.get("title")),
                    company=text((hit.get("startup") or {}).get("name")) or "Startup",
                    location=text(hit.get("location_name")) or "India",
                    description=text(hit.get("description")),
                    url=text(hit.get("url")) or f"https://wellfound.com/jobs/{job_id}",
                    posted_at=hit.get("created_at") or hit.get("posted_at"),
                    job_type=text(hit.get("job_type")) or "Full-time",
                    salary=text(hit.get("salary_range")) or None,
                    source_id=job_id,
                    source=self.name,
                )
            )
        return jobs


class FreshteamSource(JobSource):
    """Freshteam postings; pre-trimmed to India/remote engineering titles."""

    name = "Freshteam (Freshworks)"
    url = "https://freshteam.com/api/job_postings"

    _TITLE_HINTS = ("engineer", "developer", "devops", "technical")

    def params(self) -> dict[str, Any]:
        return {"status": "published"}

    def parse(self, payload: Any) -> list[JobPosting]:
        if not isinstance(payload, list):
            return []
        jobs: list[JobPosting] = []
        for hit in payload:
            location = text(hit.get("location"))
            title = text(hit.get("title"))
            loc_low, title_low = location.lower(), title.lower()
            if not ("india" in loc_low or "remote" in loc_low):
                continue
            if not any(h in title_low for h in self._TITLE_HINTS):
                continue
            jobs.append(
                JobPosting(
                    title=title,
                    company=text(hit.get("company_name")) or "Freshworks",
                    location=location or "India",
                    description=text(hit.get("description") or hit.get("job_description")),
                    url=text(hit.get("job_url") or hit.get("hosted_url")),
                    posted_at=hit.get("created_at") or hit.get("posted_at"),
                    job_type=text(hit.get("job_type")) or "Full-time",
                    source_id=text(hit.get("id")),
                    source=self.name,
                )
            )
        return jobs
