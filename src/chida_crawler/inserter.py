"""Validation, de-duplication and parent/child insert of crawled tournaments."""

import logging
from dataclasses import dataclass, field
from typing import Any

from chida_crawler.models import (
    DEFAULT_CAPACITY,
    DEFAULT_ORGANIZER,
    STATUS_DRAFT,
    STATUS_RECRUITING,
    BatchItemResult,
    BatchReport,
    CrawledDivision,
    CrawledTournament,
    InsertResult,
    LegacyTournament,
)
from chida_crawler.store import TournamentStore
from chida_crawler.util import StoreError

logger = logging.getLogger(__name__)

DUPLICATE_MARKER = "Duplicate"


@dataclass
class ValidationResult:
    valid: bool
    errors: list[str] = field(default_factory=list)


def validate(tournament: CrawledTournament) -> ValidationResult:
    """Check required fields. Fee and capacity are never required."""
    errors: list[str] = []

    if not tournament.title or not tournament.title.strip():
        errors.append("title is empty")
    if not tournament.location_city or not tournament.location_city.strip():
        errors.append("location_city is empty")

    if not tournament.divisions:
        errors.append("divisions is empty")
    else:
        for idx, div in enumerate(tournament.divisions):
            if not div.name or not div.name.strip():
                errors.append(f"divisions[{idx}]: name is missing")
            if not div.date_start:
                errors.append(f"divisions[{idx}]: date_start is missing")

    return ValidationResult(valid=not errors, errors=errors)


def is_duplicate(store: TournamentStore, title: str, date: str) -> bool:
    """True if a parent row with exactly this title and date exists.

    Title matching is exact: whitespace or case variants are not detected.
    A failed lookup is logged and reported as not duplicate.
    """
    try:
        return bool(store.find_tournament_ids(title, date))
    except StoreError as e:
        logger.error("Duplicate check failed for %s (%s): %s", title, date, e)
        return False


def representative_fee(divisions: list[CrawledDivision]) -> int:
    """Smallest positive division fee, 0 when none is positive."""
    return min((d.fee for d in divisions if d.fee > 0), default=0)


def _parent_row(
    tournament: CrawledTournament,
    title: str,
    earliest: str,
) -> dict[str, Any]:
    city = tournament.location_city.strip()
    return {
        "title": title,
        "date": earliest,
        "location": city,
        "location_city": city,
        "location_detail": (tournament.location_detail or "").strip() or None,
        "organizer": tournament.organizer or DEFAULT_ORGANIZER,
        "thumbnail_url": tournament.thumbnail_url or None,
        "crawled_url": tournament.crawled_url,
        "registration_start_date": tournament.registration_start_date or None,
        "registration_end_date": tournament.registration_end_date or None,
        "status": STATUS_DRAFT,
        "description": tournament.description or None,
        "fee": representative_fee(tournament.divisions),
        "view_count": 0,
    }


def _division_rows(
    tournament: CrawledTournament,
    tournament_id: str,
) -> list[dict[str, Any]]:
    return [
        {
            "tournament_id": tournament_id,
            "name": div.name.strip(),
            "date_start": div.date_start,
            "date_end": div.date_end or div.date_start,
            "time_start": div.time_start or None,
            "capacity": div.capacity or DEFAULT_CAPACITY,
            "current_participants": 0,
            "fee": div.fee or 0,
            "registration_start_date": tournament.registration_start_date or None,
            "registration_end_date": tournament.registration_end_date or None,
            "status": div.status or STATUS_RECRUITING,
        }
        for div in tournament.divisions
    ]


def insert(store: TournamentStore, tournament: CrawledTournament) -> InsertResult:
    """Insert a tournament and its divisions.

    The parent row is written first; if the division insert fails the
    parent is deleted again. Readers can see the parent without divisions
    between the two writes.
    """
    validation = validate(tournament)
    if not validation.valid:
        return InsertResult(
            success=False,
            message=f"Validation failed: {', '.join(validation.errors)}",
        )

    title = tournament.title.strip()
    earliest = tournament.earliest_date

    if is_duplicate(store, title, earliest):
        return InsertResult(
            success=False,
            message=f'{DUPLICATE_MARKER}: "{title}" ({earliest}) already exists',
            duplicate=True,
        )

    try:
        tournament_id = store.insert_tournament(_parent_row(tournament, title, earliest))
    except StoreError as e:
        return InsertResult(
            success=False,
            message=f"Tournament insert failed: {e}",
        )

    try:
        store.insert_divisions(_division_rows(tournament, tournament_id))
    except StoreError as e:
        try:
            store.delete_tournament(tournament_id)
            logger.warning("Rolled back tournament %s", tournament_id)
        except StoreError as rollback_error:
            logger.error(
                "Rollback of tournament %s failed: %s",
                tournament_id, rollback_error,
            )
        return InsertResult(
            success=False,
            message=f"Division insert failed: {e}",
        )

    return InsertResult(
        success=True,
        message=f'Saved "{title}" ({len(tournament.divisions)} divisions)',
        id=tournament_id,
    )


def insert_batch(
    store: TournamentStore,
    tournaments: list[CrawledTournament],
) -> BatchReport:
    """Insert tournaments one after another; one failure never stops the rest."""
    report = BatchReport(total=len(tournaments))
    logger.info("Inserting %d tournaments", len(tournaments))

    for tournament in tournaments:
        result = insert(store, tournament)
        report.results.append(BatchItemResult(
            title=tournament.title,
            success=result.success,
            message=result.message,
            duplicate=result.duplicate,
        ))

        if result.success:
            report.success += 1
            logger.info("%s", result.message)
        elif result.duplicate:
            report.skipped += 1
            logger.info("Skipped: %s", result.message)
        else:
            report.failed += 1
            logger.error("Failed: %s", result.message)

    logger.info(
        "Batch done: total=%d success=%d skipped=%d failed=%d",
        report.total, report.success, report.skipped, report.failed,
    )
    return report


def insert_legacy(store: TournamentStore, legacy: LegacyTournament) -> InsertResult:
    return insert(store, legacy.to_crawled())


def insert_legacy_batch(
    store: TournamentStore,
    legacy: list[LegacyTournament],
) -> BatchReport:
    return insert_batch(store, [t.to_crawled() for t in legacy])
