"""Keyword tables for filtering and scoring.

Everything here is immutable and handed to the filter and scorer as an
argument, so tests can build their own ``RuleSet`` with ``dataclasses.replace``.
A YAML file (``RULES_PATH``) may override any table.
"""
from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, get_args, get_origin, get_type_hints

import yaml

from jobalert.log import get_logger

log = get_logger(__name__)

# (terms, points): points are added once if any term is present.
PointRule = tuple[tuple[str, ...], int]


@dataclass(frozen=True)
class RuleSet:
    # --- location -------------------------------------------------------
    foreign_locations: tuple[str, ...]
    india_keywords: tuple[str, ...]
    preferred_cities: tuple[str, ...]
    remote_keywords: tuple[str, ...]
    # --- filter stages --------------------------------------------------
    seniority_keywords: tuple[str, ...]
    non_technical_keywords: tuple[str, ...]
    technical_role_keywords: tuple[str, ...]
    domain_keywords: tuple[str, ...]
    entry_level_keywords: tuple[str, ...]
    max_years: int
    # --- scoring --------------------------------------------------------
    fresher_friendly_companies: tuple[str, ...]
    keyword_points: tuple[PointRule, ...]
    entry_level_points: tuple[PointRule, ...]
    location_points: tuple[PointRule, ...]
    company_bonus: int
    salary_bonus: int
    full_time_bonus: int
    recency_points: tuple[tuple[float, int], ...]
    undisclosed_salary: tuple[str, ...]


DEFAULT_RULES = RuleSet(
    foreign_locations=(
        "germany", "berlin", "munich", "frankfurt", "hamburg", "dortmund",
        "united states", "usa", "u.s.", "new york", "san francisco", "seattle",
        "united kingdom", "london", "uk ", " uk,",
        "canada", "toronto", "vancouver",
        "australia", "sydney", "melbourne",
        "singapore", "netherlands", "france", "paris",
        "europe", "european union",
    ),
    india_keywords=("India", "Bharat", ", IN", "(IN)", "Indian"),
    preferred_cities=(
        "Bangalore", "Bengaluru", "Pune", "Gurgaon", "Gurugram",
        "Delhi", "NCR", "Delhi NCR", "New Delhi", "Hyderabad", "Jaipur",
        "Noida", "Mumbai", "Bombay", "Chennai", "Madras", "Kolkata",
        "Ahmedabad", "Coimbatore", "Trivandrum", "Thiruvananthapuram",
        "Kochi", "Cochin", "Indore", "Chandigarh",
        "Anywhere in India", "PAN India",
    ),
    remote_keywords=("remote", "work from home", "wfh", "anywhere"),
    seniority_keywords=(
        "3+ years", "4+ years", "5+ years", "6+ years",
        "Senior", "Lead", "Manager", "Architect", "Principal",
    ),
    non_technical_keywords=(
        # help desk / L1 support
        "Help Desk", "Helpdesk", "L1 Support", "L2 Support",
        "Desktop Support", "Service Desk",
        "Customer Support", "Customer Service", "Client Support",
        # sales and marketing
        "Sales Executive", "Business Development", "BDM", "BDE",
        "Account Manager", "Relationship Manager", "Customer Success",
        "Pre-Sales", "Presales", "Social Media",
        # admin
        "Data Entry", "Back Office", "Content Creator", "Community Manager",
        # HR
        "Recruiter", "HR Executive", "Human Resources",
        "Manual Testing",
        # generic coding roles
        "Software Developer", "Software Engineer", "Backend Developer",
        "Frontend Developer", "Full Stack Developer", "Programmer",
        "Mobile Developer", "Android Developer", "iOS Developer",
        "Machine Learning Engineer", "Data Scientist", "AI Engineer",
        "Buchhalter", "Controller",
    ),
    technical_role_keywords=(
        "Cloud Engineer", "Cloud Administrator", "Cloud Architect", "Cloud Consultant",
        "Cloud Operations", "Cloud Support Engineer", "Cloud Analyst",
        "Solutions Architect", "Infrastructure Engineer", "Infrastructure Analyst",
        "Azure Engineer", "Azure Administrator", "Azure Architect", "Azure Consultant",
        "DevOps Engineer", "DevOps Analyst", "Platform Engineer",
        "Site Reliability Engineer", "Systems Engineer", "Systems Administrator",
        "Network Administrator", "Network Engineer",
        "Security Engineer", "Security Analyst", "Cybersecurity Engineer",
        "DevSecOps Engineer", "SOC Analyst", "Vulnerability Analyst",
        "Security Operations", "Penetration Tester", "InfoSec", "AppSec",
        "Graduate Engineer Trainee", "Associate Engineer", "Trainee Engineer",
        "Technology Analyst", "Cloud Associate", "Infrastructure Associate",
    ),
    domain_keywords=(
        "Azure", "Microsoft Azure", "Azure DevOps", "Azure Cloud",
        "AWS", "GCP", "Google Cloud", "Multi-cloud", "Cloud Engineer",
        "Cloud Administrator", "Cloud Architect", "Cloud Operations",
        "Cloud Infrastructure", "Cloud Platform",
        "Security", "Cybersecurity", "DevSecOps", "AppSec", "InfoSec",
        "SOC", "VAPT", "Ethical Hacking", "Penetration Testing",
        "DevOps", "Kubernetes", "Docker", "Terraform", "Ansible",
        "Infrastructure", "Site Reliability", "Platform Engineering",
        "Network Engineer", "Network Security", "Network Infrastructure",
    ),
    entry_level_keywords=(
        "Intern", "Internship", "Junior", "Entry", "Fresher", "Graduate",
        "0-1 year", "0 year", "1 year", "1-2 year", "1-2 years", "0-2 year", "0-2 years",
        "Entry Level", "Entry-Level",
    ),
    max_years=2,
    fresher_friendly_companies=(
        "Microsoft", "Google", "Amazon", "AWS", "IBM", "Oracle", "SAP", "Adobe",
        "Apple", "Meta", "Facebook",
        "TCS", "Tata Consultancy", "Infosys", "Wipro", "HCL", "Tech Mahindra",
        "LTI", "LTIMindtree", "Mindtree", "Cognizant", "Mphasis", "Hexaware",
        "Persistent", "Coforge",
        "Accenture", "Deloitte", "Capgemini", "EY", "PwC", "KPMG", "Genpact",
        "DXC Technology",
        "Cloudflare", "Atlassian", "HashiCorp", "Red Hat", "VMware", "Nutanix", "Cisco",
        "Palo Alto Networks", "CrowdStrike", "Fortinet", "Zscaler", "McAfee",
        "Symantec", "Check Point", "Rapid7", "Qualys", "Trend Micro",
        "Zoho", "Freshworks", "Paytm", "PhonePe", "Razorpay", "Zomato", "Swiggy",
        "Flipkart", "Ola", "MakeMyTrip", "BookMyShow", "Nykaa", "CRED", "Udaan",
        "Meesho", "Dunzo", "Urban Company",
        "Walmart", "Target", "Myntra", "Shopify",
        "JP Morgan", "Goldman Sachs", "Morgan Stanley", "Barclays", "HSBC",
        "Mastercard", "Visa", "American Express", "Deutsche Bank",
        "ICICI Bank", "HDFC Bank",
        "Salesforce", "ServiceNow", "Workday", "Intuit", "PayPal", "Stripe",
        "Square", "Qualcomm", "Intel", "AMD", "NVIDIA", "Broadcom",
        "Texas Instruments",
        "Chevron", "Shell", "BP", "ExxonMobil", "Schlumberger", "Halliburton",
        "Jio", "Reliance Jio", "Airtel", "Vodafone", "Nokia", "Ericsson",
        "Boston Consulting", "BCG", "McKinsey", "Bain", "Booz Allen",
    ),
    keyword_points=(
        (("azure",), 30),
        (("cloud",), 20),
        (("security",), 20),
        (("devsecops",), 25),
        (("devops",), 15),
        (("cybersecurity",), 20),
    ),
    entry_level_points=(
        (("fresher", "intern"), 20),
        (("0-1", "entry level", "entry-level"), 15),
        (("graduate", "internship"), 15),
    ),
    location_points=(
        (("bangalore", "bengaluru"), 5),
        (("pune", "hyderabad"), 5),
        (("remote",), 8),
    ),
    company_bonus=15,
    salary_bonus=10,
    full_time_bonus=5,
    # (max days since posting, points), checked in order
    recency_points=((1, 20), (3, 10), (7, 5)),
    undisclosed_salary=("not disclosed",),
)


def _coerce(value: Any) -> Any:
    """YAML lists become tuples (recursively) so the RuleSet stays hashable."""
    if isinstance(value, list):
        return tuple(_coerce(v) for v in value)
    return value


def _matches(value: Any, hint: Any) -> bool:
    """Shape check of a YAML value against a RuleSet annotation."""
    if hint is int:
        return isinstance(value, int) and not isinstance(value, bool)
    if hint is float:
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if hint is str:
        return isinstance(value, str)
    if get_origin(hint) is tuple:
        if not isinstance(value, tuple):
            return False
        args = get_args(hint)
        if len(args) == 2 and args[1] is Ellipsis:
            return all(_matches(v, args[0]) for v in value)
        return len(value) == len(args) and all(_matches(v, a) for v, a in zip(value, args))
    return True


def load_rules(path: str | Path | None = None, base: RuleSet = DEFAULT_RULES) -> RuleSet:
    """Return ``base`` with tables overridden from a YAML mapping at ``path``."""
    if not path:
        return base
    path = Path(path)
    if not path.exists():
        msg = f"Rules file not found: {path}"
        raise FileNotFoundError(msg)
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        msg = f"Invalid YAML in {path}: {exc}"
        raise ValueError(msg) from exc
    if not isinstance(raw, dict):
        msg = f"Rules file must contain a mapping: {path}"
        raise ValueError(msg)

    known = {f.name for f in fields(RuleSet)}
    unknown = sorted(set(raw) - known)
    if unknown:
        msg = f"Unknown rule tables in {path}: {', '.join(unknown)}"
        raise ValueError(msg)

    overrides = {k: _coerce(v) for k, v in raw.items()}
    hints = get_type_hints(RuleSet)
    for name, value in overrides.items():
        if not _matches(value, hints[name]):
            msg = f"Rule table {name!r} in {path} has the wrong shape (expected {hints[name]})"
            raise ValueError(msg)
    log.info("Loaded %d rule override(s) from %s", len(overrides), path.name)
    return replace(base, **overrides)
