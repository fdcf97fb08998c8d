"""Additive relevance scoring for postings that passed the filter."""
from __future__ import annotations

from datetime import datetime

from jobalert.dates import days_since
from jobalert.filters import is_fresher_friendly_company
from jobalert.log import get_logger
from jobalert.models import JobPosting, ScoredJob
from jobalert.rules import PointRule, RuleSet

log = get_logger(__name__)

_LABELS: list[tuple[int, str]] = [
    (100, "⭐⭐⭐⭐⭐ Excellent Match"),
    (80, "⭐⭐⭐⭐ Great Match"),
    (60, "⭐⭐⭐ Good Match"),
    (40, "⭐⭐ Fair Match"),
]
_BASIC_LABEL = "⭐ Basic Match"


def _points(text: str, table: tuple[PointRule, ...]) -> int:
    return sum(points for terms, points in table if any(t.lower() in text for t in terms))


def _recency(days: float, rules: RuleSet) -> int:
    for max_days, points in rules.recency_points:
        if days <= max_days:
            return points
    return 0


def _has_salary(salary: str | None, rules: RuleSet) -> bool:
    if not salary or not salary.strip():
        return False
    return salary.strip().lower() not in {u.lower() for u in rules.undisclosed_salary}


def score_job(job: JobPosting, rules: RuleSet, now: datetime | None = None) -> int:
    """Relevance points (0 to ~150+, uncapped).

    Keyword, entry-level and location signals are independent checks that
    accumulate; recency is a single tier from days since posting.
    """
    text = job.text.lower()
    score = 0
    score += _points(text, rules.keyword_points)
    score += _points(text, rules.entry_level_points)

    if is_fresher_friendly_company(job.company, rules):
        score += rules.company_bonus

    score += _recency(days_since(job.posted_at, now), rules)

    if _has_salary(job.salary, rules):
        score += rules.salary_bonus

    score += _points((job.location or "").lower(), rules.location_points)

    if "full-time" in (job.job_type or "").lower():
        score += rules.full_time_bonus

    return score


def relevance_label(score: float) -> str:
    for threshold, label in _LABELS:
        if score >= threshold:
            return label
    return _BASIC_LABEL


def rank(scored: list[ScoredJob]) -> list[ScoredJob]:
    """Highest score first; ties keep fetch order."""
    ranked = sorted(scored, key=lambda s: -s.score)
    if ranked:
        log.info("Ranked %d matches (top score %d)", len(ranked), ranked[0].score)
    return ranked
