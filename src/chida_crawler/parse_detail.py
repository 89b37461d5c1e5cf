"""openGame detail page HTML parser."""

import logging
import re
from datetime import date

from bs4 import BeautifulSoup, Tag

from chida_crawler.fetch import absolute_url
from chida_crawler.models import (
    DEFAULT_CAPACITY,
    DEFAULT_DIVISION_NAME,
    STATUS_RECRUITING,
    CrawledDivision,
    DetailFields,
)
from chida_crawler.normalize import (
    find_date,
    infer_status,
    parse_fee,
    resolve_schedule_date,
)

logger = logging.getLogger(__name__)

_REGISTRATION = re.compile(
    r"접수기간[:\s]*(\d{4}[.-]\d{1,2}[.-]\d{1,2})\s*~\s*(\d{4}[.-]\d{1,2}[.-]\d{1,2})"
)
_DEFAULT_FEE = re.compile(r"참가비[:\s]*([0-9,]+)\s*원")
_MONTH_DAY = re.compile(r"(?<!\d)(\d{1,2})\.(\d{1,2})(?!\d)")
_TIME = re.compile(r"(\d{1,2}):(\d{2})")
_POSTER = re.compile(r"poster", re.I)


def parse_detail_page(
    html: str,
    reference: date | None = None,
    today: date | None = None,
) -> DetailFields:
    """Parse a detail page.

    reference supplies the year for month/day schedule dates (normally the
    listed start date); it defaults to today. Every field is optional.
    """
    today = today or date.today()
    reference = reference or today

    soup = BeautifulSoup(html, "html.parser")
    page_text = soup.get_text(" ", strip=True)

    location_detail = _class_text(soup, "address")
    description = _class_text(soup, "description")

    thumbnail_url = ""
    poster = soup.find("img", src=_POSTER)
    if poster:
        thumbnail_url = absolute_url(poster["src"])

    registration_start = registration_end = None
    m = _REGISTRATION.search(page_text)
    if m:
        registration_start = find_date(m.group(1))
        registration_end = find_date(m.group(2))

    default_fee = 0
    m = _DEFAULT_FEE.search(page_text)
    if m:
        default_fee = parse_fee(m.group(1))

    divisions = _parse_schedule(
        soup, reference, today,
        registration_start, registration_end, default_fee,
    )

    if not divisions:
        fallback_date = find_date(page_text) or today.isoformat()
        logger.debug("No schedule rows; default division on %s", fallback_date)
        divisions.append(CrawledDivision(
            name=DEFAULT_DIVISION_NAME,
            date_start=fallback_date,
            fee=default_fee,
            capacity=DEFAULT_CAPACITY,
            status=STATUS_RECRUITING,
        ))

    return DetailFields(
        location_detail=location_detail,
        thumbnail_url=thumbnail_url,
        description=description,
        registration_start_date=registration_start,
        registration_end_date=registration_end,
        fee=default_fee,
        divisions=divisions,
    )


def _class_text(soup: BeautifulSoup, class_name: str) -> str:
    div = soup.find("div", class_=class_name)
    if not div:
        return ""
    return div.get_text(" ", strip=True)


def _parse_schedule(
    soup: BeautifulSoup,
    reference: date,
    today: date,
    registration_start: str | None,
    registration_end: str | None,
    default_fee: int,
) -> list[CrawledDivision]:
    """Parse schedule rows: date | division | time | fee."""
    divisions: list[CrawledDivision] = []

    for tr in soup.find_all("tr"):
        cells: list[Tag] = tr.find_all("td", recursive=False)
        if len(cells) < 2:
            continue
        texts = [c.get_text(" ", strip=True) for c in cells]

        m = _MONTH_DAY.search(texts[0])
        if not m:
            continue
        date_start = resolve_schedule_date(
            int(m.group(1)), int(m.group(2)), reference,
        )
        if not date_start:
            logger.debug("Skipping row with invalid date: %s", texts[0])
            continue

        name = texts[1] or DEFAULT_DIVISION_NAME

        time_start = None
        if len(texts) > 2:
            tm = _TIME.search(texts[2])
            if tm:
                time_start = f"{int(tm.group(1)):02d}:{tm.group(2)}"

        fee = parse_fee(texts[3]) if len(texts) > 3 else 0

        divisions.append(CrawledDivision(
            name=name,
            date_start=date_start,
            time_start=time_start,
            fee=fee or default_fee,
            capacity=DEFAULT_CAPACITY,
            status=infer_status(
                registration_start, registration_end, date_start, today,
            ),
        ))

    return divisions
