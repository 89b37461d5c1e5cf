"""HTTP fetch with politeness sleep and optional caching."""

import logging
import random
import time
from pathlib import Path
from urllib.parse import urljoin

import requests

from chida_crawler.util import FetchError

logger = logging.getLogger(__name__)

BASE_URL = "https://kato.kr"
HEADERS = {
    "User-Agent": "chida-crawler/0.1"
}
TIMEOUT = 30  # seconds
SLEEP_MIN = 0.5
SLEEP_MAX = 1.5


def list_url() -> str:
    return f"{BASE_URL}/openList"


def detail_url(game_id: int | str) -> str:
    return f"{BASE_URL}/openGame/{game_id}"


def absolute_url(href: str) -> str:
    return urljoin(BASE_URL + "/", href)


def fetch_page(url: str) -> str:
    """Fetch a page once. No retries; any failure raises FetchError."""
    logger.debug("Fetching %s", url)
    try:
        resp = requests.get(url, headers=HEADERS, timeout=TIMEOUT)
    except requests.RequestException as e:
        raise FetchError(f"Connection error for {url}: {e}") from e
    if resp.status_code != 200:
        raise FetchError(f"HTTP {resp.status_code} for {url}")
    logger.debug("OK %s", url)
    return resp.text


def _page_sleep() -> None:
    """Random sleep between page fetches."""
    delay = random.uniform(SLEEP_MIN, SLEEP_MAX)
    time.sleep(delay)


def cache_path_for(url: str, cache_dir: Path | None) -> Path | None:
    """Cache file for a URL: openList.html, openGame_123.html, ..."""
    if cache_dir is None:
        return None
    name = url.removeprefix(BASE_URL).strip("/").replace("/", "_") or "index"
    return cache_dir / f"{name}.html"


def fetch_with_cache(
    url: str,
    cache_path: Path | None,
    use_cache: bool,
) -> str:
    """Fetch a page, optionally using/saving cache."""
    if use_cache and cache_path and cache_path.exists():
        logger.info("Cache hit: %s", cache_path)
        return cache_path.read_text(encoding="utf-8")

    html = fetch_page(url)
    _page_sleep()

    if use_cache and cache_path:
        cache_path.parent.mkdir(parents=True, exist_ok=True)
        cache_path.write_text(html, encoding="utf-8")
        logger.debug("Cached to %s", cache_path)

    return html
