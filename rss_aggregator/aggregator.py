"""Concurrent fetching and merging of multiple source feeds."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence

import httpx

from .exceptions import FeedFetchError
from .models import FeedItem, SourceFeed
from .parser import parse

logger = logging.getLogger(__name__)

USER_AGENT = "RSS-Feed-Aggregator/1.0"

_UNDATED = datetime.min.replace(tzinfo=timezone.utc)


def _sort_key(item: FeedItem) -> datetime:
    return item.pub_date or _UNDATED


def sort_items(items: Iterable[FeedItem]) -> List[FeedItem]:
    """Return items newest first; undated items keep their order at the end."""
    return sorted(items, key=_sort_key, reverse=True)


async def fetch_feed(client: httpx.AsyncClient, source: SourceFeed) -> List[FeedItem]:
    """Download one source feed and parse it into items."""
    logger.info("Fetching feed '%s' (%s)", source.title, source.url)
    response = await client.get(source.url, headers={"User-Agent": USER_AGENT})
    if not response.is_success:
        raise FeedFetchError(
            f"HTTP {response.status_code}: {response.reason_phrase}"
        )

    items = parse(response.text, source.url, source.title)
    logger.info("Collected %d items from feed '%s'", len(items), source.url)
    return items


async def _fetch_isolated(
    client: httpx.AsyncClient, source: SourceFeed
) -> List[FeedItem]:
    try:
        return await fetch_feed(client, source)
    except (httpx.HTTPError, FeedFetchError) as exc:
        logger.warning(
            "Failed to fetch feed '%s' (%s): %s", source.title, source.url, exc
        )
    except Exception:
        logger.exception("Failed to process feed %s", source.url)
    return []


async def aggregate(
    sources: Sequence[SourceFeed],
    max_items: Optional[int] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> List[FeedItem]:
    """Fetch all sources concurrently and merge their items by recency.

    A failing source contributes no items and never aborts the others. The
    result is sorted newest first and cut to ``max_items`` when it is set
    and positive.
    """
    if client is None:
        async with httpx.AsyncClient(follow_redirects=True) as owned_client:
            return await aggregate(sources, max_items, client=owned_client)

    results = await asyncio.gather(
        *(_fetch_isolated(client, source) for source in sources)
    )

    merged = [item for items in results for item in items]
    ordered = sort_items(merged)

    if max_items and max_items > 0:
        ordered = ordered[:max_items]

    logger.info(
        "Aggregated %d items from %d sources (%d before limit)",
        len(ordered),
        len(sources),
        len(merged),
    )
    return ordered
