"""Tests for chida_crawler.store."""

from unittest.mock import MagicMock, patch

import httpx
import pytest
from postgrest.exceptions import APIError

from chida_crawler.store import SupabaseStore, TournamentStore
from chida_crawler.util import StoreError

URL = "https://abc.supabase.co"
KEY = "service-role-key"


def _result(data) -> MagicMock:
    return MagicMock(data=data)


@pytest.fixture()
def client() -> MagicMock:
    return MagicMock()


def _table(client: MagicMock, name: str) -> MagicMock:
    """Query builder returned for table(name); chained calls return itself."""
    builder = MagicMock()
    for method in ("select", "eq", "limit", "insert", "delete"):
        getattr(builder, method).return_value = builder
    client.table.side_effect = lambda t: builder if t == name else MagicMock()
    return builder


class TestTournamentStore:
    def test_contract_is_abstract(self) -> None:
        with pytest.raises(TypeError):
            TournamentStore()


class TestSupabaseStore:
    @patch("chida_crawler.store.create_client")
    def test_client_created_from_settings(self, mock_create: MagicMock) -> None:
        SupabaseStore(URL, KEY)
        mock_create.assert_called_once_with(URL, KEY)

    def test_find_tournament_ids(self, client: MagicMock) -> None:
        builder = _table(client, "tournaments")
        builder.execute.return_value = _result([{"id": 12}])
        store = SupabaseStore(URL, KEY, client=client)

        assert store.find_tournament_ids("2026 경북 오픈", "2026-03-07") == ["12"]
        builder.select.assert_called_once_with("id")
        builder.eq.assert_any_call("title", "2026 경북 오픈")
        builder.eq.assert_any_call("date", "2026-03-07")

    def test_find_none(self, client: MagicMock) -> None:
        _table(client, "tournaments").execute.return_value = _result([])
        store = SupabaseStore(URL, KEY, client=client)
        assert store.find_tournament_ids("x", "2026-01-01") == []

    def test_insert_tournament_returns_id(self, client: MagicMock) -> None:
        builder = _table(client, "tournaments")
        builder.execute.return_value = _result([{"id": "uuid-1", "title": "t"}])
        store = SupabaseStore(URL, KEY, client=client)

        assert store.insert_tournament({"title": "t"}) == "uuid-1"
        builder.insert.assert_called_once_with({"title": "t"})

    def test_insert_tournament_without_row(self, client: MagicMock) -> None:
        _table(client, "tournaments").execute.return_value = _result([])
        store = SupabaseStore(URL, KEY, client=client)
        with pytest.raises(StoreError, match="no row returned"):
            store.insert_tournament({"title": "t"})

    def test_insert_divisions_sends_one_batch(self, client: MagicMock) -> None:
        builder = _table(client, "tournament_divisions")
        builder.execute.return_value = _result([])
        store = SupabaseStore(URL, KEY, client=client)

        rows = [{"name": "a"}, {"name": "b"}]
        store.insert_divisions(rows)
        builder.insert.assert_called_once_with(rows)
        builder.execute.assert_called_once()

    def test_delete_tournament(self, client: MagicMock) -> None:
        builder = _table(client, "tournaments")
        builder.execute.return_value = _result([])
        store = SupabaseStore(URL, KEY, client=client)

        store.delete_tournament("uuid-1")
        builder.delete.assert_called_once_with()
        builder.eq.assert_called_once_with("id", "uuid-1")

    def test_get_tournament_missing(self, client: MagicMock) -> None:
        _table(client, "tournaments").execute.return_value = _result([])
        store = SupabaseStore(URL, KEY, client=client)
        assert store.get_tournament("missing") is None

    def test_api_error_wrapped(self, client: MagicMock) -> None:
        _table(client, "tournament_divisions").execute.side_effect = APIError({
            "message": "new row violates check constraint",
            "code": "23514",
        })
        store = SupabaseStore(URL, KEY, client=client)
        with pytest.raises(StoreError, match="violates check constraint"):
            store.insert_divisions([{"name": "a"}])

    def test_connection_error_wrapped(self, client: MagicMock) -> None:
        _table(client, "tournaments").execute.side_effect = httpx.ConnectError("down")
        store = SupabaseStore(URL, KEY, client=client)
        with pytest.raises(StoreError, match="connection error"):
            store.find_tournament_ids("x", "2026-01-01")

    def test_context_manager_closes_session(self, client: MagicMock) -> None:
        with SupabaseStore(URL, KEY, client=client):
            pass
        client.postgrest.session.close.assert_called_once()
