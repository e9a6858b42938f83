"""
Date-range extraction for Japanese event announcements.

Listings write dates as "3月7日～8日" or "3月7日（土）～4月8日（日）" with no
year. The year is inferred from the clock: an event whose start would already
be in the past this year is taken to be next year's.
"""

import re
from datetime import date, datetime, time
from typing import Callable, Optional

from ..models import DateRange

Clock = Callable[[], datetime]

FULLWIDTH_DIGITS = str.maketrans("０１２３４５６７８９", "0123456789")

# The site mixes several dash glyphs for ranges
DASHES = r"[～〜~\-－―]"

# 3月7日（土）～4月8日（日）
CROSS_MONTH_RE = re.compile(
    r"(\d{1,2})月(\d{1,2})日[^～\d]*" + DASHES + r".*?(\d{1,2})月(\d{1,2})日"
)
# 3月7日～8日
SAME_MONTH_RE = re.compile(
    r"(\d{1,2})月(\d{1,2})日[^～\d]*" + DASHES + r"\s*(\d{1,2})日"
)
# 6月20日
SINGLE_DAY_RE = re.compile(r"(\d{1,2})月(\d{1,2})日")


def normalize_digits(text: str) -> str:
    """Convert full-width digits to ASCII."""
    return text.translate(FULLWIDTH_DIGITS)


def infer_year(month: int, day: int, now: datetime) -> int:
    """
    Return this year, or next year if month/day has already passed.

    Compares calendar fields so that 2月29日 can resolve to the next leap year
    and aware clocks work the same as naive ones.
    """
    today = (now.month, now.day)
    if (month, day) < today or ((month, day) == today and now.time() > time.min):
        return now.year + 1
    return now.year


def _cross_month(m: re.Match, now: datetime) -> DateRange:
    start_month, start_day, end_month, end_day = (int(g) for g in m.groups())
    year = infer_year(start_month, start_day, now)
    return DateRange(
        start_date=date(year, start_month, start_day),
        end_date=date(year, end_month, end_day),
    )


def _same_month(m: re.Match, now: datetime) -> DateRange:
    month, start_day, end_day = (int(g) for g in m.groups())
    year = infer_year(month, start_day, now)
    return DateRange(
        start_date=date(year, month, start_day),
        end_date=date(year, month, end_day),
    )


def _single_day(m: re.Match, now: datetime) -> DateRange:
    month, day = (int(g) for g in m.groups())
    return DateRange(start_date=date(infer_year(month, day, now), month, day))


# Tried in order; the first pattern that yields a real calendar date wins
DATE_PATTERNS = [
    (CROSS_MONTH_RE, _cross_month),
    (SAME_MONTH_RE, _same_month),
    (SINGLE_DAY_RE, _single_day),
]


def parse_date_range(
    content: str,
    title: str = "",
    clock: Clock = datetime.now,
) -> DateRange:
    """
    Extract start/end dates from an event's content and title.

    Args:
        content: Normalized block text
        title: Event title (searched after the content)
        clock: Time source for year inference

    Returns:
        DateRange; both dates are None when nothing matches
    """
    text = normalize_digits(f"{content} {title}")
    now: Optional[datetime] = None

    for pattern, build in DATE_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        if now is None:
            now = clock()
        try:
            return build(match, now)
        except ValueError:
            # 2月30日 and the like; fall through to a looser pattern
            continue

    return DateRange()
