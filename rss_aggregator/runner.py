"""High-level orchestration for the rss_aggregator application."""

from __future__ import annotations

import asyncio
import dataclasses
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Sequence

import httpx

from .aggregator import aggregate
from .builder import RSSFeedBuilder
from .config import parse_feeds_config
from .models import FeedConfig, FeedItem, SourceFeed
from .views import to_api_items

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("rss", "json")


@dataclass
class RunConfig:
    """Runtime options for executing the application."""

    feeds_file: str
    channel: FeedConfig
    max_items: Optional[int] = None
    output_format: str = "rss"
    output_path: Optional[str] = None


@dataclass
class RunResult:
    """Returned data after executing the app."""

    output_text: str
    items: List[FeedItem]


def render_rss(items: Sequence[FeedItem], channel: FeedConfig) -> str:
    """Serialize items under ``channel``, stamping the build time."""
    stamped = dataclasses.replace(
        channel, last_build_date=datetime.now(timezone.utc)
    )
    return RSSFeedBuilder(stamped).add_items(items).build()


async def generate_feed(
    sources: Sequence[SourceFeed],
    channel: FeedConfig,
    max_items: Optional[int] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> str:
    """Aggregate ``sources`` and return the combined RSS document."""
    items = await aggregate(sources, max_items, client=client)
    return render_rss(items, channel)


def _write_output(path: str, text: str) -> None:
    location = Path(path)
    if location.parent and not location.parent.exists():
        location.parent.mkdir(parents=True, exist_ok=True)
    location.write_text(text, encoding="utf-8")
    logger.info("Wrote %d characters to %s", len(text), location)


def execute(config: RunConfig) -> RunResult:
    """Run the application logic and return the result payload."""
    if config.output_format not in OUTPUT_FORMATS:
        raise ValueError(
            f"Unsupported output format: {config.output_format} "
            f"(expected one of {', '.join(OUTPUT_FORMATS)})"
        )

    sources = parse_feeds_config(config.feeds_file)
    if not sources:
        raise RuntimeError("No feeds found in the configuration.")

    items = asyncio.run(aggregate(sources, config.max_items))

    if config.output_format == "json":
        output_text = json.dumps(to_api_items(items), indent=2, ensure_ascii=False)
    else:
        output_text = render_rss(items, config.channel)

    if config.output_path:
        _write_output(config.output_path, output_text)

    return RunResult(output_text=output_text, items=items)
