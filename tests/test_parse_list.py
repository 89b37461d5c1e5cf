"""Tests for chida_crawler.parse_list."""

import logging

import pytest

from chida_crawler.parse_list import parse_list_page


class TestParseListPage:
    def test_item_count(self, list_sample_html: str) -> None:
        items = parse_list_page(list_sample_html)
        assert len(items) == 2

    def test_title_and_date_text(self, list_sample_html: str) -> None:
        items = parse_list_page(list_sample_html)
        assert items[0].title == "2026 경북 오픈"
        assert items[0].date_text == "2026.03.07 ~ 2026.03.08"
        assert items[1].title == "제5회 경기 광주 시장기 테니스대회"

    def test_links_absolute_and_deduplicated(self, list_sample_html: str) -> None:
        items = parse_list_page(list_sample_html)
        assert [i.url for i in items] == [
            "https://kato.kr/openGame/101",
            "https://kato.kr/openGame/102",
        ]

    def test_paging_link_ignored(self, list_sample_html: str) -> None:
        items = parse_list_page(list_sample_html)
        assert all("openList" not in i.url for i in items)

    def test_empty_page(self) -> None:
        assert parse_list_page("<html><body></body></html>") == []


class TestCountMismatch:
    def test_truncates_to_shortest(self, list_mismatch_html: str) -> None:
        items = parse_list_page(list_mismatch_html)
        assert len(items) == 1
        assert items[0].title == "2026 서울 오픈"
        assert items[0].url == "https://kato.kr/openGame/201"

    def test_mismatch_logged(self, list_mismatch_html: str, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="chida_crawler.parse_list"):
            parse_list_page(list_mismatch_html)
        assert "counts disagree" in caplog.text
