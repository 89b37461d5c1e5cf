"""Tournament store: parent/child table access through the Supabase client."""

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx
from postgrest.exceptions import APIError
from supabase import Client, create_client

from chida_crawler.util import StoreError

logger = logging.getLogger(__name__)

TOURNAMENTS_TABLE = "tournaments"
DIVISIONS_TABLE = "tournament_divisions"


class TournamentStore(ABC):
    """Operations the inserter needs from the persisted store.

    Every method raises StoreError when the store rejects the request.
    There is no transaction spanning several calls.
    """

    @abstractmethod
    def find_tournament_ids(self, title: str, date: str) -> list[str]:
        ...

    @abstractmethod
    def get_tournament(self, tournament_id: str) -> dict[str, Any] | None:
        ...

    @abstractmethod
    def insert_tournament(self, row: dict[str, Any]) -> str:
        """Insert one parent row and return its generated id."""

    @abstractmethod
    def insert_divisions(self, rows: list[dict[str, Any]]) -> None:
        """Insert all child rows in one request."""

    @abstractmethod
    def delete_tournament(self, tournament_id: str) -> None:
        ...

    def close(self) -> None:
        """Release connections held by the store."""

    def __enter__(self) -> "TournamentStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class SupabaseStore(TournamentStore):
    """TournamentStore backed by a Supabase project."""

    def __init__(
        self,
        url: str,
        service_key: str,
        client: Client | None = None,
    ) -> None:
        self._client = client or create_client(url, service_key)

    def _execute(self, query, action: str):
        logger.debug("Store %s", action)
        try:
            return query.execute()
        except APIError as e:
            raise StoreError(f"{action}: {e.message}") from e
        except httpx.HTTPError as e:
            raise StoreError(f"{action}: connection error: {e}") from e

    def find_tournament_ids(self, title: str, date: str) -> list[str]:
        result = self._execute(
            self._client.table(TOURNAMENTS_TABLE)
            .select("id").eq("title", title).eq("date", date).limit(1),
            f"lookup {title} ({date})",
        )
        return [str(r["id"]) for r in result.data or []]

    def get_tournament(self, tournament_id: str) -> dict[str, Any] | None:
        result = self._execute(
            self._client.table(TOURNAMENTS_TABLE)
            .select("*").eq("id", tournament_id),
            f"get tournament {tournament_id}",
        )
        return result.data[0] if result.data else None

    def insert_tournament(self, row: dict[str, Any]) -> str:
        result = self._execute(
            self._client.table(TOURNAMENTS_TABLE).insert(row),
            "insert tournament",
        )
        if not result.data:
            raise StoreError("insert tournament: no row returned")
        return str(result.data[0]["id"])

    def insert_divisions(self, rows: list[dict[str, Any]]) -> None:
        self._execute(
            self._client.table(DIVISIONS_TABLE).insert(rows),
            f"insert {len(rows)} divisions",
        )

    def delete_tournament(self, tournament_id: str) -> None:
        self._execute(
            self._client.table(TOURNAMENTS_TABLE).delete().eq("id", tournament_id),
            f"delete tournament {tournament_id}",
        )

    def close(self) -> None:
        self._client.postgrest.session.close()
