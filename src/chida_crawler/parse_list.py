"""openList HTML parser."""

import logging
import re

from bs4 import BeautifulSoup

from chida_crawler.fetch import absolute_url
from chida_crawler.models import ListItem

logger = logging.getLogger(__name__)

_GAME_LINK = re.compile(r"/openGame/\d+$")


def parse_list_page(html: str) -> list[ListItem]:
    """Parse the tournament list page into (title, date text, link) items.

    Titles, dates and links are collected independently and paired by
    position; extra entries in the longer sequences are dropped.
    """
    soup = BeautifulSoup(html, "html.parser")

    titles = [
        a.get_text(strip=True)
        for a in soup.find_all("a", class_="content-title")
    ]
    dates = [
        div.get_text(strip=True)
        for div in soup.find_all("div", class_="date")
    ]
    # Title and thumbnail often link to the same game; keep first occurrence.
    links = list(dict.fromkeys(
        absolute_url(a["href"])
        for a in soup.find_all("a", href=_GAME_LINK)
    ))

    count = min(len(titles), len(dates), len(links))
    if not (len(titles) == len(dates) == len(links)):
        logger.warning(
            "List page counts disagree: titles=%d dates=%d links=%d, keeping %d",
            len(titles), len(dates), len(links), count,
        )

    items = [
        ListItem(title=titles[i], date_text=dates[i], url=links[i])
        for i in range(count)
    ]
    logger.info("Parsed %d items from list page", len(items))
    return items
