"""Report periods and ISO date handling.

Dates arrive from the sheet as ISO strings, either plain dates (``2024-05-06``) or
timestamps (``2024-05-06T08:30:00.000Z``); only the calendar day matters here.
"""

from __future__ import annotations

import calendar
import logging
import math
import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Literal, Optional

logger = logging.getLogger(__name__)

_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")

PeriodType = Literal["weekly", "monthly"]


def round_half_up(x: float) -> int:
    # round() would send 62.5 to 62
    return int(math.floor(float(x) + 0.5))


def percent(part: float, whole: float) -> int:
    if not whole or whole <= 0:
        return 0
    return round_half_up(100.0 * float(part) / float(whole))


def parse_iso_date(value: object) -> Optional[date]:
    s = str(value or "").strip()
    if len(s) < 10:
        return None
    try:
        return date.fromisoformat(s[:10])
    except ValueError:
        return None


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date

    def contains(self, value: object, *, collection: str = "", record_id: str = "") -> bool:
        d = parse_iso_date(value)
        if d is None:
            if str(value or "").strip():
                logger.warning("Unparsable date %r in %s record id=%s", value, collection or "?", record_id or "?")
            return False
        return self.start <= d <= self.end


@dataclass(frozen=True)
class ReportPeriod:
    type: PeriodType
    range: DateRange
    label: str


def week_of(anchor: str | date) -> ReportPeriod:
    """Monday–Sunday week containing ``anchor``."""
    d = anchor if isinstance(anchor, date) else parse_iso_date(anchor)
    if d is None:
        raise ValueError(f"Invalid date: {anchor!r} (expected YYYY-MM-DD)")
    monday = d - timedelta(days=d.weekday())
    sunday = monday + timedelta(days=6)
    return ReportPeriod(
        type="weekly",
        range=DateRange(monday, sunday),
        label=f"{monday.isoformat()} to {sunday.isoformat()}",
    )


def month_of(month: str) -> ReportPeriod:
    m = _MONTH_RE.match(str(month or "").strip())
    if not m:
        raise ValueError(f"Invalid month: {month!r} (expected YYYY-MM)")
    year, mon = int(m.group(1)), int(m.group(2))
    if not 1 <= mon <= 12:
        raise ValueError(f"Invalid month: {month!r} (expected YYYY-MM)")
    last = calendar.monthrange(year, mon)[1]
    return ReportPeriod(
        type="monthly",
        range=DateRange(date(year, mon, 1), date(year, mon, last)),
        label=f"Tháng {year:04d}-{mon:02d}",
    )
