"""RSS 2.0 document generation."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable, List

from .models import FeedConfig, FeedImage, FeedItem

logger = logging.getLogger(__name__)

DEFAULT_GENERATOR = "RSS Feed Aggregator"

_DAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
_MONTHS = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]


def escape_xml(value: str) -> str:
    """Escape the five XML metacharacters, ampersand first."""
    return (
        value.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def format_date(value: datetime) -> str:
    """Format a datetime as an RFC 822 date in GMT.

    Naive datetimes are taken as UTC. The names are fixed English
    abbreviations so the output does not depend on the process locale.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return "{}, {:02d} {} {} {:02d}:{:02d}:{:02d} GMT".format(
        _DAYS[value.weekday()],
        value.day,
        _MONTHS[value.month - 1],
        value.year,
        value.hour,
        value.minute,
        value.second,
    )


def _element(name: str, text: str) -> str:
    return f"<{name}>{escape_xml(text)}</{name}>"


class RSSFeedBuilder:
    """Accumulates items for one channel and renders them as RSS 2.0."""

    def __init__(self, config: FeedConfig) -> None:
        self.config = config
        self.items: List[FeedItem] = []

    def add_item(self, item: FeedItem) -> "RSSFeedBuilder":
        self.items.append(item)
        return self

    def add_items(self, items: Iterable[FeedItem]) -> "RSSFeedBuilder":
        self.items.extend(items)
        return self

    def build(self) -> str:
        """Return the complete XML document."""
        config = self.config
        xml: List[str] = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<rss version="2.0" xmlns:atom="http://www.w3.org/2005/Atom"'
            ' xmlns:content="http://purl.org/rss/1.0/modules/content/">',
            "<channel>",
            _element("title", config.title or ""),
            _element("link", config.link or ""),
            _element("description", config.description or ""),
        ]

        if config.language:
            xml.append(_element("language", config.language))
        if config.copyright:
            xml.append(_element("copyright", config.copyright))
        if config.managing_editor:
            xml.append(_element("managingEditor", config.managing_editor))
        if config.web_master:
            xml.append(_element("webMaster", config.web_master))
        if config.pub_date:
            xml.append(f"<pubDate>{format_date(config.pub_date)}</pubDate>")
        if config.last_build_date:
            xml.append(
                f"<lastBuildDate>{format_date(config.last_build_date)}</lastBuildDate>"
            )
        if config.category:
            xml.append(_element("category", config.category))

        xml.append(_element("generator", config.generator or DEFAULT_GENERATOR))

        if config.docs:
            xml.append(_element("docs", config.docs))
        if config.ttl:
            xml.append(f"<ttl>{config.ttl}</ttl>")
        if config.image:
            xml.extend(self._build_image(config.image))

        xml.append(
            f'<atom:link href="{escape_xml(config.link or "")}/rss" rel="self"'
            ' type="application/rss+xml" />'
        )

        for item in self.items:
            xml.append(self._build_item(item))

        xml.append("</channel>")
        xml.append("</rss>")

        logger.debug("Built RSS document with %d items", len(self.items))
        return "\n".join(xml)

    @staticmethod
    def _build_image(image: FeedImage) -> List[str]:
        xml = [
            "<image>",
            _element("url", image.url),
            _element("title", image.title),
            _element("link", image.link),
        ]
        if image.width:
            xml.append(f"<width>{image.width}</width>")
        if image.height:
            xml.append(f"<height>{image.height}</height>")
        if image.description:
            xml.append(_element("description", image.description))
        xml.append("</image>")
        return xml

    @staticmethod
    def _build_item(item: FeedItem) -> str:
        xml = [
            "<item>",
            _element("title", item.title),
            _element("link", item.link),
            # HTML bodies go out verbatim.
            f"<description><![CDATA[{item.description}]]></description>",
        ]

        if item.author:
            xml.append(_element("author", item.author))
        if item.category:
            xml.append(_element("category", item.category))
        if item.comments:
            xml.append(_element("comments", item.comments))
        if item.enclosure:
            enclosure = item.enclosure
            xml.append(
                f'<enclosure url="{escape_xml(enclosure.url)}"'
                f' length="{enclosure.length}"'
                f' type="{escape_xml(enclosure.type)}" />'
            )

        if item.guid:
            xml.append(f'<guid isPermaLink="false">{escape_xml(item.guid)}</guid>')
        else:
            xml.append(f'<guid isPermaLink="true">{escape_xml(item.link)}</guid>')

        if item.pub_date:
            xml.append(f"<pubDate>{format_date(item.pub_date)}</pubDate>")
        if item.source:
            xml.append(
                f'<source url="{escape_xml(item.source.url)}">'
                f"{escape_xml(item.source.title)}</source>"
            )

        xml.append("</item>")
        return "\n".join(xml)
