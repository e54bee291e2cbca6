"""Judges how current the data behind a claim is.

Pure functions only. The decision order is:

1. the verifier's extracted data date, when it parses as a real date;
2. rolling-window phrases ("trailing 12 months", "TTM", "YTD", ...);
3. quarter references ("Q4 2023"), aged from the quarter's close;
4. bare years ("in 2023");
5. month names ("March", "March 5, 2024");
6. present-tense cues ("currently", "is", "has", ...);
7. otherwise fresh, since a missing date is not evidence of staleness.
"""

import re
from datetime import date, datetime, timezone
from typing import Optional, Tuple

from pydantic import BaseModel

from ..models.verification import Freshness

FRESH_MAX_MONTHS = 3
DATED_MAX_MONTHS = 12

# Quarterly figures are reported some weeks after the quarter closes
QUARTER_REPORTING_LAG_MONTHS = 2

_DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%Y-%m",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
    "%B %Y",
    "%b %Y",
    "%Y",
)

_ROLLING_WINDOW = re.compile(
    r"\btrailing\s+(?:\d+|twelve|six|three)[\s-]+months?\b"
    r"|\b(?:last|past)\s+(?:\d+|twelve|six|three|two)\s+(?:months?|years?|quarters?)\b"
    r"|\b(?:TTM|LTM)\b"
    r"|\byear[\s-]to[\s-]date\b"
    r"|\bYTD\b",
    re.IGNORECASE,
)

_QUARTER = re.compile(
    r"\bQ([1-4])\b(?:\s*(?:of\s+)?(?:FY\s*)?(?:(\d{4})\b|['’](\d{2})\b))?",
    re.IGNORECASE,
)
_YEAR_THEN_QUARTER = re.compile(r"\b(20\d{2})\s*Q([1-4])\b", re.IGNORECASE)

_YEAR = re.compile(r"(?<![\w$.,])(20\d{2})(?![\w%]|[.,]\d)")

_MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}
_MONTH = re.compile(
    r"\b(January|February|March|April|May|June|July|August|September|October|November|December"
    r"|Jan|Feb|Mar|Apr|Jun|Jul|Aug|Sept?|Oct|Nov|Dec)\b\.?"
    r"(?:\s+\d{1,2}(?:st|nd|rd|th)?\b)?(?:,?\s+(\d{4})\b)?"
)

_PRESENT_TENSE = re.compile(
    r"\b(?:current|currently|now|today|recent|latest|as of|is|are|has|have)\b",
    re.IGNORECASE,
)


class FreshnessAssessment(BaseModel):
    """Freshness label plus a human-readable reason."""

    freshness: Freshness
    reason: str


def parse_data_date(value: Optional[str]) -> Optional[date]:
    """Parse the verifier's data date, or return None if it is not a real date."""
    if not value:
        return None
    text = value.strip()
    if not text:
        return None

    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def months_between(now: date, year: int, month: int) -> int:
    """Whole calendar months from (year, month) to ``now``; never negative."""
    return max(0, (now.year - year) * 12 + (now.month - month))


def band_by_months(months: int) -> Freshness:
    if months <= FRESH_MAX_MONTHS:
        return Freshness.FRESH
    if months <= DATED_MAX_MONTHS:
        return Freshness.DATED
    return Freshness.STALE


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def _find_quarter(text: str, current_year: int) -> Optional[Tuple[int, int]]:
    match = _YEAR_THEN_QUARTER.search(text)
    if match:
        return int(match.group(2)), int(match.group(1))

    match = _QUARTER.search(text)
    if not match:
        return None
    quarter = int(match.group(1))
    if match.group(2):
        year = int(match.group(2))
    elif match.group(3):
        year = 2000 + int(match.group(3))
    else:
        year = current_year
    return quarter, year


def analyze_freshness(
    data_date: Optional[str],
    claim_text: str,
    now: Optional[datetime] = None,
) -> FreshnessAssessment:
    """Classify the claim's data as fresh, dated or stale."""
    today = (now or datetime.now(timezone.utc)).date()

    parsed = parse_data_date(data_date)
    if parsed is not None:
        months = months_between(today, parsed.year, parsed.month)
        return FreshnessAssessment(
            freshness=band_by_months(months),
            reason=f"Data is {_plural(months, 'month')} old (as of {data_date.strip()})",
        )

    text = claim_text or ""

    if _ROLLING_WINDOW.search(text):
        return FreshnessAssessment(freshness=Freshness.FRESH, reason="Uses rolling time period")

    quarter = _find_quarter(text, today.year)
    if quarter is not None:
        number, year = quarter
        months = max(0, months_between(today, year, number * 3) - QUARTER_REPORTING_LAG_MONTHS)
        return FreshnessAssessment(
            freshness=band_by_months(months),
            reason=(
                f"References Q{number} {year}, reported about {_plural(months, 'month')} ago "
                f"(after {QUARTER_REPORTING_LAG_MONTHS}-month reporting lag)"
            ),
        )

    year_match = _YEAR.search(text)
    if year_match:
        year = int(year_match.group(1))
        years_ago = today.year - year
        if years_ago <= 0:
            freshness = Freshness.FRESH
        elif years_ago == 1:
            freshness = Freshness.DATED
        else:
            freshness = Freshness.STALE
        return FreshnessAssessment(
            freshness=freshness,
            reason=f"References {year} ({_plural(max(0, years_ago), 'year')} ago)",
        )

    month_match = _MONTH.search(text)
    if month_match:
        name = month_match.group(1)
        month = _MONTHS[name[:3].lower()]
        year = int(month_match.group(2)) if month_match.group(2) else today.year
        months = months_between(today, year, month)
        return FreshnessAssessment(
            freshness=band_by_months(months),
            reason=f"References {name} {year}, about {_plural(months, 'month')} ago",
        )

    if _PRESENT_TENSE.search(text):
        return FreshnessAssessment(freshness=Freshness.FRESH, reason="Appears to reference current state")

    return FreshnessAssessment(
        freshness=Freshness.FRESH,
        reason="No date reference found - assumed current unless stated otherwise",
    )
