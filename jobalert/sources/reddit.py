"""Reddit hiring posts from job subreddits (public JSON listing, no key).

Posts are free-form, so each one is classified as an offer of work (kept)
or a request for work (dropped) before mapping.
"""
from __future__ import annotations

import re
from typing import Any

from jobalert.log import get_logger
from jobalert.models import JobPosting
from jobalert.sources.base import JobSource, text

log = get_logger(__name__)

SUBREDDITS = ("forhire", "devopsjobs", "jobsinindia", "indiajobs", "cscareerquestionsIndia")

# Checked first: a poster calling themselves a seeker overrides hiring language.
SEEKER_PATTERNS: list[re.Pattern[str]] = [
    re.compile(p, re.IGNORECASE)
    for p in (
        r"^\[for hire\]",
        r"^for hire:",
        r"\bavailable for\b",
        r"looking for.*internship",
        r"seeking.*role",
        r"seeking.*position",
        r"open to.*opportunit",
        r"actively looking",
        r"\bi am looking\b",
        r"\bi'?m looking\b",
    )
]

HIRING_PATTERNS: list[re.Pattern[str]] = [
    re.compile(p, re.IGNORECASE)
    for p in (
        r"^\[hiring\]",
        r"^hiring:",
        r"we are hiring",
        r"we'?re hiring",
        r"join our team",
        r"looking to hire",
        r"open position",
        r"job opening",
        r"\breferral\b",
    )
]

BODY_HINTS: tuple[str, ...] = (
    "we are looking for",
    "you will be responsible",
    "responsibilities include",
    "what you will do",
    "apply now",
    "send your resume",
    "dm your resume",
)

_HIRING_TAG = re.compile(r"^\s*\[hiring\]\s*", re.IGNORECASE)


def classify_post(title: str, body: str = "", flair: str = "") -> bool:
    """True when the post offers work, False when it asks for work."""
    title = title or ""
    body = body or ""
    flair_low = (flair or "").lower()

    if "for hire" in flair_low or "available" in flair_low:
        return False
    head = body[:300]
    if any(p.search(title) or p.search(head) for p in SEEKER_PATTERNS):
        return False
    if any(p.search(title) for p in HIRING_PATTERNS):
        return True
    body_low = body[:500].lower()
    return any(hint in body_low for hint in BODY_HINTS)


class RedditSource(JobSource):
    name = "Reddit Jobs"
    url = f"https://www.reddit.com/r/{'+'.join(SUBREDDITS)}.json"

    def params(self) -> dict[str, Any]:
        return {"limit": 100}

    def parse(self, payload: Any) -> list[JobPosting]:
        posts = ((payload or {}).get("data") or {}).get("children") or []
        jobs: list[JobPosting] = []
        rejected = 0
        for post in posts:
            data = post.get("data") or {}
            title = text(data.get("title"))
            body = data.get("selftext") or ""
            if not title or not classify_post(title, body, text(data.get("link_flair_text"))):
                rejected += 1
                continue
            jobs.append(
                JobPosting(
                    title=_HIRING_TAG.sub("", title).strip(),
                    company="Via Reddit",
                    location="Check post for details",
                    location_in_text=True,
                    description=body or title,
                    url=f"https://reddit.com{text(data.get('permalink'))}",
                    posted_at=data.get("created_utc"),
                    job_type=text(data.get("link_flair_text")) or "See post",
                    source_id=text(data.get("id")),
                    source=f"Reddit r/{text(data.get('subreddit'))}",
                )
            )
        if rejected:
            log.debug("Reddit: skipped %d non-hiring post(s)", rejected)
        return jobs
