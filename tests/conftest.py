"""Shared pytest fixtures: HTML fixtures and an in-memory store."""

from pathlib import Path
from typing import Any

import pytest

from chida_crawler.store import TournamentStore
from chida_crawler.util import StoreError

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _read(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


@pytest.fixture()
def list_sample_html() -> str:
    return _read("list_sample.html")


@pytest.fixture()
def list_mismatch_html() -> str:
    return _read("list_mismatch.html")


@pytest.fixture()
def detail_sample_html() -> str:
    return _read("detail_sample.html")


@pytest.fixture()
def detail_single_row_html() -> str:
    return _read("detail_single_row.html")


@pytest.fixture()
def detail_no_schedule_html() -> str:
    return _read("detail_no_schedule.html")


class FakeStore(TournamentStore):
    """Dict-backed store recording every call made to it."""

    def __init__(self) -> None:
        self.tournaments: dict[str, dict[str, Any]] = {}
        self.divisions: list[dict[str, Any]] = []
        self.calls: list[str] = []
        self.fail_lookup = False
        self.fail_parent = False
        self.fail_divisions = False
        self.fail_delete = False
        self._next_id = 1

    @property
    def writes(self) -> list[str]:
        return [c for c in self.calls if c not in ("find_tournament_ids", "get_tournament")]

    def find_tournament_ids(self, title: str, date: str) -> list[str]:
        self.calls.append("find_tournament_ids")
        if self.fail_lookup:
            raise StoreError("lookup unavailable")
        return [
            tid for tid, row in self.tournaments.items()
            if row["title"] == title and row["date"] == date
        ]

    def get_tournament(self, tournament_id: str) -> dict[str, Any] | None:
        self.calls.append("get_tournament")
        return self.tournaments.get(tournament_id)

    def insert_tournament(self, row: dict[str, Any]) -> str:
        self.calls.append("insert_tournament")
        if self.fail_parent:
            raise StoreError("parent rejected")
        tid = f"t-{self._next_id}"
        self._next_id += 1
        self.tournaments[tid] = dict(row, id=tid)
        return tid

    def insert_divisions(self, rows: list[dict[str, Any]]) -> None:
        self.calls.append("insert_divisions")
        if self.fail_divisions:
            raise StoreError("violates check constraint")
        self.divisions.extend(rows)

    def delete_tournament(self, tournament_id: str) -> None:
        self.calls.append("delete_tournament")
        if self.fail_delete:
            raise StoreError("delete rejected")
        self.tournaments.pop(tournament_id, None)


@pytest.fixture()
def store() -> FakeStore:
    return FakeStore()

