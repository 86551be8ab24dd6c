"""JSON-friendly views over aggregated items."""

from __future__ import annotations

import re
from typing import Dict, Iterable, List

from bs4 import BeautifulSoup

from .builder import format_date
from .models import FeedItem

API_ITEM_LIMIT = 50
DESCRIPTION_LENGTH = 200


def _strip_html(raw_value: str) -> str:
    """Return text content extracted from HTML fragments."""
    soup = BeautifulSoup(raw_value, "html.parser")
    text = soup.get_text(separator=" ", strip=True)
    text = re.sub(r"\s+([.,;:!?])", r"\1", text)
    text = re.sub(r"\s{2,}", " ", text)
    return text.strip()


def _first_image(raw_value: str) -> str:
    soup = BeautifulSoup(raw_value, "html.parser")
    image = soup.find("img", src=True)
    if image is None:
        return ""
    return image["src"]


def to_api_item(item: FeedItem) -> Dict[str, str]:
    return {
        "title": item.title,
        "link": item.link,
        "description": _strip_html(item.description)[:DESCRIPTION_LENGTH],
        "pubDate": format_date(item.pub_date) if item.pub_date else "",
        "source": item.source.title if item.source else "Unknown",
        "image": _first_image(item.description),
    }


def to_api_items(
    items: Iterable[FeedItem], limit: int = API_ITEM_LIMIT
) -> List[Dict[str, str]]:
    """Convert items to the compact dicts served by the news API."""
    selected = list(items)[:limit]
    return [to_api_item(item) for item in selected]
