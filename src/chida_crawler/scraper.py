"""List and detail crawling for KATO open tournaments."""

import logging
from datetime import date
from pathlib import Path

from chida_crawler.fetch import cache_path_for, fetch_with_cache, list_url
from chida_crawler.models import (
    DEFAULT_CAPACITY,
    DEFAULT_DIVISION_NAME,
    DEFAULT_ORGANIZER,
    STATUS_RECRUITING,
    CrawledDivision,
    CrawledTournament,
    DetailFields,
    ListItem,
)
from chida_crawler.normalize import (
    extract_location_city,
    infer_status,
    parse_date_range,
    to_date,
)
from chida_crawler.parse_detail import parse_detail_page
from chida_crawler.parse_list import parse_list_page

logger = logging.getLogger(__name__)


def fetch_detail(
    url: str,
    reference_date: date | None = None,
    today: date | None = None,
    use_cache: bool = False,
    cache_dir: Path | None = None,
) -> DetailFields:
    """Fetch and parse one detail page.

    Never raises: on any failure the error is logged and an empty
    DetailFields (no divisions) is returned.
    """
    logger.info("Fetching detail page %s", url)
    try:
        html = fetch_with_cache(url, cache_path_for(url, cache_dir), use_cache)
        return parse_detail_page(html, reference=reference_date, today=today)
    except Exception as e:
        logger.error("Detail page failed for %s: %s", url, e)
        return DetailFields()


def build_tournament(
    item: ListItem,
    detail: DetailFields,
    today: date | None = None,
) -> CrawledTournament:
    """Assemble a CrawledTournament from a list item and its detail fields."""
    today = today or date.today()
    date_start, date_end = parse_date_range(item.date_text)

    divisions = detail.divisions
    if not divisions:
        start = date_start or today.isoformat()
        divisions = [CrawledDivision(
            name=DEFAULT_DIVISION_NAME,
            date_start=start,
            date_end=date_end or start,
            fee=detail.fee,
            capacity=DEFAULT_CAPACITY,
            status=STATUS_RECRUITING,
        )]

    return CrawledTournament(
        title=item.title,
        location_city=extract_location_city(item.title),
        location_detail=detail.location_detail,
        organizer=DEFAULT_ORGANIZER,
        crawled_url=item.url,
        thumbnail_url=detail.thumbnail_url,
        registration_start_date=detail.registration_start_date,
        registration_end_date=detail.registration_end_date,
        status=infer_status(
            detail.registration_start_date,
            detail.registration_end_date,
            date_start or None,
            today,
        ),
        description=detail.description or item.title,
        divisions=list(divisions),
    )


def list_tournaments(
    today: date | None = None,
    use_cache: bool = False,
    cache_dir: Path | None = None,
) -> list[CrawledTournament]:
    """Crawl the list page and every listed detail page, one at a time.

    A list page failure is fatal for the run and yields an empty list.
    """
    today = today or date.today()
    url = list_url()
    logger.info("Fetching list page %s", url)
    try:
        html = fetch_with_cache(url, cache_path_for(url, cache_dir), use_cache)
        items = parse_list_page(html)
    except Exception as e:
        logger.error("List page failed for %s: %s", url, e)
        return []

    tournaments: list[CrawledTournament] = []
    for item in items:
        reference = to_date(parse_date_range(item.date_text)[0]) or today
        detail = fetch_detail(
            item.url, reference_date=reference, today=today,
            use_cache=use_cache, cache_dir=cache_dir,
        )
        tournament = build_tournament(item, detail, today)
        tournaments.append(tournament)
        logger.info(
            "Crawled %s (%s): %d divisions, status=%s",
            tournament.title, tournament.location_city,
            len(tournament.divisions), tournament.status,
        )

    logger.info("Crawled %d tournaments", len(tournaments))
    return tournaments
