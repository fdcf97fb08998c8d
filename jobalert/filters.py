"""Multi-stage filter: location → seniority → non-technical → role → keywords → years.

Stages run in a fixed order and the first failing stage decides the reason.
Every function here is pure over the posting and the ``RuleSet``.
"""
from __future__ import annotations

import re
from functools import lru_cache
from typing import Callable, Iterable, Optional

from jobalert.models import FilterResult, JobPosting
from jobalert.rules import RuleSet

# Keywords this short are acronyms: whole-word match only ("SOC" ≠ "social").
_ACRONYM_MAX_LEN = 4

_YEARS_RE = re.compile(r"(\d+)\s*\+?\s*years?", re.IGNORECASE)

REASON_LOCATION = "Location not in India or preferred cities"
REASON_TEXT_LOCATION = "Post does not mention India"
REASON_SENIORITY = "Excluded due to senior/experience requirement"
REASON_NON_TECHNICAL = "Non-technical or support role (excluded)"
REASON_TECHNICAL_ROLE = "Not a pure technical role"
REASON_DOMAIN_KEYWORD = "Does not contain required keywords"
REASON_EXPERIENCE = "Requires more than 2 years experience"


@lru_cache(maxsize=2048)
def _word_pattern(keyword: str) -> re.Pattern[str]:
    return re.compile(rf"(?<!\w){re.escape(keyword)}(?!\w)")


@lru_cache(maxsize=256)
def _term_pattern(term: str) -> re.Pattern[str]:
    # Whole term, optional plural: "1 year" matches "1 years" but not "11 years",
    # "intern" matches "interns" but not "internal".
    return re.compile(rf"(?<!\w){re.escape(term)}s?(?!\w)")


def has_entry_level_term(text: str, rules: RuleSet) -> bool:
    low = (text or "").lower()
    return any(_term_pattern(t.lower()).search(low) for t in rules.entry_level_keywords if t)


def keyword_in(text_lower: str, keyword: str) -> bool:
    kw = keyword.lower()
    if not kw:
        return False
    if len(kw) <= _ACRONYM_MAX_LEN:
        return _word_pattern(kw).search(text_lower) is not None
    return kw in text_lower


def first_keyword(text: str, keywords: Iterable[str]) -> str | None:
    """First keyword (in list order) present in ``text``, or None."""
    if not text:
        return None
    low = text.lower()
    for kw in keywords:
        if keyword_in(low, kw):
            return kw
    return None


def contains_keyword(text: str, keywords: Iterable[str]) -> bool:
    return first_keyword(text, keywords) is not None


def is_india_location(location: str, rules: RuleSet) -> bool:
    """Foreign tokens reject first; then India, a preferred city, or remote accepts."""
    if not location:
        return False
    low = location.lower()
    if any(f.lower() in low for f in rules.foreign_locations):
        return False
    if any(kw.lower() in low for kw in rules.india_keywords):
        return True
    if any(city.lower() in low for city in rules.preferred_cities):
        return True
    return any(r.lower() in low for r in rules.remote_keywords)


def is_fresher_friendly_company(company: str, rules: RuleSet) -> bool:
    if not company:
        return False
    low = company.lower()
    return any(c.lower() in low for c in rules.fresher_friendly_companies)


# ---------------------------------------------------------------------------
# Stages: each returns a rejection reason, or None to pass
# ---------------------------------------------------------------------------


def check_location(job: JobPosting, rules: RuleSet) -> str | None:
    if job.location_in_text:
        places = rules.india_keywords + rules.preferred_cities
        return None if contains_keyword(job.text, places) else REASON_TEXT_LOCATION
    return None if is_india_location(job.location, rules) else REASON_LOCATION


def check_seniority(job: JobPosting, rules: RuleSet) -> str | None:
    return REASON_SENIORITY if contains_keyword(job.text, rules.seniority_keywords) else None


def check_non_technical(job: JobPosting, rules: RuleSet) -> str | None:
    return REASON_NON_TECHNICAL if contains_keyword(job.text, rules.non_technical_keywords) else None


def check_technical_role(job: JobPosting, rules: RuleSet) -> str | None:
    return None if contains_keyword(job.text, rules.technical_role_keywords) else REASON_TECHNICAL_ROLE


def check_domain_keyword(job: JobPosting, rules: RuleSet) -> str | None:
    return None if contains_keyword(job.text, rules.domain_keywords) else REASON_DOMAIN_KEYWORD


def years_mentioned(text: str) -> list[int]:
    return [int(m.group(1)) for m in _YEARS_RE.finditer(text or "")]


def check_experience_text(text: str, rules: RuleSet) -> str | None:
    """Reject when any "N years" exceeds the cap, unless an entry-level term appears."""
    years = years_mentioned(text)
    if not years or max(years) <= rules.max_years:
        return None
    if has_entry_level_term(text, rules):
        return None
    return REASON_EXPERIENCE


def check_experience_years(job: JobPosting, rules: RuleSet) -> str | None:
    return check_experience_text(job.text, rules)


Stage = Callable[[JobPosting, RuleSet], Optional[str]]

STAGES: tuple[tuple[str, Stage], ...] = (
    ("location", check_location),
    ("seniority", check_seniority),
    ("non_technical", check_non_technical),
    ("technical_role", check_technical_role),
    ("domain_keyword", check_domain_keyword),
    ("experience_years", check_experience_years),
)


def filter_job(job: JobPosting, rules: RuleSet) -> FilterResult:
    for name, stage in STAGES:
        reason = stage(job, rules)
        if reason is not None:
            return FilterResult.rejected(name, reason)
    return FilterResult.accepted(first_keyword(job.text, rules.domain_keywords))
