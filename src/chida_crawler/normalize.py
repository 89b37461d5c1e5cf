"""Normalization of free-text tournament fields."""

import re
from datetime import date, datetime

from chida_crawler.models import (
    STATUS_CLOSED,
    STATUS_RECRUITING,
    STATUS_UPCOMING,
    UNKNOWN_CITY,
)

FREE_TOKEN = "무료"
INQUIRE_LABEL = "문의"
UNKNOWN_PLACE = "장소 미정"

# Compound names must precede the simple names they contain.
REGIONS = [
    "경기 광주",
    "서울", "경기", "인천", "강원",
    "대전", "세종", "충북", "충남",
    "부산", "대구", "울산", "경북", "경남",
    "전북", "광주", "전남", "제주",
]

_FEE_STRIP = re.compile(r"[,원\s]")
_DIGITS = re.compile(r"\d+", re.ASCII)
_FULL_DATE = re.compile(r"(\d{4})[.-](\d{1,2})[.-](\d{1,2})")
_RANGE_END = re.compile(r"~\s*(\d{4})[.-](\d{1,2})[.-](\d{1,2})")

# A schedule month this many months before the reference month belongs
# to the following year.
_ROLLOVER_MONTHS = 6


def parse_fee(text: str | None) -> int:
    """Parse a fee string such as "54,000원" into whole won.

    Blank, "무료" and anything that is not a plain number give 0.
    """
    if not text:
        return 0
    cleaned = _FEE_STRIP.sub("", str(text))
    if not cleaned or cleaned == FREE_TOKEN:
        return 0
    if not _DIGITS.fullmatch(cleaned):
        return 0
    return int(cleaned)


def format_fee(fee: int | None) -> str:
    """Display form of a fee: "54,000원", or "문의" when unspecified."""
    if not fee or fee <= 0:
        return INQUIRE_LABEL
    return f"{fee:,}원"


def extract_location_city(text: str | None, fallback: str = UNKNOWN_CITY) -> str:
    """Return the first region name contained in text."""
    if not text:
        return fallback
    for region in REGIONS:
        if region in text:
            return region
    return fallback


def parse_location(
    location: str | None,
    location_detail: str | None = None,
) -> tuple[str, str]:
    """Split a location into (region, detail)."""
    if location_detail:
        if not location or location not in REGIONS:
            for region in REGIONS:
                if region in location_detail:
                    return region, location_detail
        return location or UNKNOWN_CITY, location_detail

    if location:
        if location in REGIONS:
            return location, ""
        for region in REGIONS:
            if region in location:
                return region, location.replace(region, "", 1).strip()
        if len(location) > 2:
            return location[:2], location[2:]
        return location, ""

    return UNKNOWN_PLACE, ""


def to_iso(year: int | str, month: int | str, day: int | str) -> str | None:
    """Build a YYYY-MM-DD string, None if the date does not exist."""
    try:
        return date(int(year), int(month), int(day)).isoformat()
    except ValueError:
        return None


def find_date(text: str | None) -> str | None:
    """First full date (YYYY.MM.DD or YYYY-MM-DD) in text as ISO."""
    if not text:
        return None
    for m in _FULL_DATE.finditer(text):
        iso = to_iso(*m.groups())
        if iso:
            return iso
    return None


def parse_date_range(text: str | None) -> tuple[str, str]:
    """Parse "2026.03.07 ~ 2026.03.08" into ISO (start, end).

    Without a range separator end equals start. Returns ("", "") when no
    date is present.
    """
    start = find_date(text)
    if not start:
        return "", ""
    end = start
    m = _RANGE_END.search(text or "")
    if m:
        end = to_iso(*m.groups()) or start
    return start, end


def resolve_schedule_date(month: int, day: int, reference: date) -> str | None:
    """Attach a year to a month/day schedule date.

    The year is the reference year, or the next one when the month lies
    well before the reference month (December listing, January games).
    """
    year = reference.year
    if reference.month - month >= _ROLLOVER_MONTHS:
        year += 1
    return to_iso(year, month, day)


def to_date(value: date | str | None) -> date | None:
    """Coerce an ISO-ish string or date to a date; None when unparsable."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    iso = find_date(str(value))
    if not iso:
        return None
    return date.fromisoformat(iso)


def infer_status(
    registration_start: date | str | None = None,
    registration_end: date | str | None = None,
    event_date: date | str | None = None,
    today: date | None = None,
) -> str:
    """Recruitment status from the registration window and event date.

    Checked in order: registration ended -> closed, registration not yet
    open -> upcoming, event passed -> closed, otherwise recruiting.
    """
    today = to_date(today) or date.today()

    end = to_date(registration_end)
    if end and today > end:
        return STATUS_CLOSED

    start = to_date(registration_start)
    if start and today < start:
        return STATUS_UPCOMING

    event = to_date(event_date)
    if event and today > event:
        return STATUS_CLOSED

    return STATUS_RECRUITING
