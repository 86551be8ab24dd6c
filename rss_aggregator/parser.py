"""Lenient RSS 2.0 / Atom parsing into normalized feed items.

Extraction is pattern based rather than a conformant XML parse so that the
broken markup common in real-world feeds still yields usable items. Every
lookup degrades to ``None`` instead of raising; callers apply defaults.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Dict, List, Optional

from dateutil import parser as date_parser

from .models import FeedEnclosure, FeedItem, FeedSource

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled"

# Optional attributes on an opening tag, excluding self-closing tags.
_OPEN_TAG_TAIL = r"(?:\s[^>]*)?(?<!/)>"

_ITEM_RE = re.compile(r"<item" + _OPEN_TAG_TAIL + r"(.*?)</item\s*>", re.I | re.S)
_ENTRY_RE = re.compile(r"<entry" + _OPEN_TAG_TAIL + r"(.*?)</entry\s*>", re.I | re.S)
_CHANNEL_RE = re.compile(r"<channel" + _OPEN_TAG_TAIL + r"(.*?)</channel\s*>", re.I | re.S)

_ATOM_ROOT_RE = re.compile(r"<feed[\s>]")
_ATOM_NAMESPACE_RE = re.compile(r"""xmlns=["']http://www\.w3\.org/2005/Atom["']""")

_LINK_HREF_RE = re.compile(r"""<link\b[^>]*?\bhref=["']([^"']+)["']""", re.I)
_ENCLOSURE_RE = re.compile(r"<enclosure\b([^>]*)>", re.I)
_ATTRIBUTE_RE = re.compile(r"""([\w:.-]+)\s*=\s*(?:"([^"]*)"|'([^']*)')""")

_ENTITIES = {"amp": "&", "lt": "<", "gt": ">", "quot": '"', "apos": "'"}
_ENTITY_RE = re.compile(r"&(amp|lt|gt|quot|apos);")

_HOUR = 3600
# Zone names allowed by RFC 822 in addition to numeric offsets.
_TZINFOS = {
    "GMT": 0,
    "UT": 0,
    "UTC": 0,
    "Z": 0,
    "EST": -5 * _HOUR,
    "EDT": -4 * _HOUR,
    "CST": -6 * _HOUR,
    "CDT": -5 * _HOUR,
    "MST": -7 * _HOUR,
    "MDT": -6 * _HOUR,
    "PST": -8 * _HOUR,
    "PDT": -7 * _HOUR,
}

# Two defaults that differ in every date field; a value that parses
# differently against each was missing a date component.
_DEFAULT_A = datetime(2000, 1, 1)
_DEFAULT_B = datetime(2001, 2, 2)


def decode_entities(value: str) -> str:
    """Decode the five predefined XML entities in a single pass."""
    return _ENTITY_RE.sub(lambda match: _ENTITIES[match.group(1)], value)


def _find_tag(xml: str, tag_name: str) -> Optional[str]:
    name = re.escape(tag_name)
    pattern = re.compile(
        rf"<{name}{_OPEN_TAG_TAIL}(.*?)</{name}\s*>", re.I | re.S
    )
    match = pattern.search(xml)
    if match is None and ":" not in tag_name:
        prefixed = re.compile(
            rf"<[\w.-]+:{name}{_OPEN_TAG_TAIL}(.*?)</[\w.-]+:{name}\s*>",
            re.I | re.S,
        )
        match = prefixed.search(xml)
    if match is None:
        return None
    return match.group(1)


def extract_tag(xml: str, tag_name: str) -> Optional[str]:
    """Return the trimmed, entity-decoded content of the first ``tag_name``.

    When the plain tag is missing and ``tag_name`` has no prefix, any
    namespaced variant (``dc:title``, ``media:title``...) is accepted.
    """
    raw = _find_tag(xml, tag_name)
    if raw is None:
        return None
    return decode_entities(raw.strip())


def extract_cdata(xml: str, tag_name: str) -> Optional[str]:
    """Return the trimmed CDATA body of ``tag_name`` without any decoding."""
    name = re.escape(tag_name)
    pattern = re.compile(
        rf"<{name}{_OPEN_TAG_TAIL}\s*<!\[CDATA\[(.*?)\]\]>\s*</{name}\s*>",
        re.I | re.S,
    )
    match = pattern.search(xml)
    if match is None:
        return None
    return match.group(1).strip()


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """Parse RFC 822 or ISO 8601 text into an aware UTC datetime.

    Naive values are taken as UTC. Unparseable or partial text (a bare
    weekday, a time without a date) returns ``None`` so the item sorts as
    undated.
    """
    if not value:
        return None
    try:
        parsed = date_parser.parse(value, default=_DEFAULT_A, tzinfos=_TZINFOS)
        if parsed != date_parser.parse(value, default=_DEFAULT_B, tzinfos=_TZINFOS):
            logger.debug("Ignoring incomplete date %r", value)
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        logger.debug("Ignoring unparseable date %r", value)
        return None


def _attributes(fragment: str) -> Dict[str, str]:
    attrs: Dict[str, str] = {}
    for match in _ATTRIBUTE_RE.finditer(fragment):
        value = match.group(2) if match.group(2) is not None else match.group(3)
        attrs[match.group(1).lower()] = decode_entities(value)
    return attrs


def _extract_enclosure(xml: str) -> Optional[FeedEnclosure]:
    match = _ENCLOSURE_RE.search(xml)
    if match is None:
        return None
    attrs = _attributes(match.group(1))
    url = attrs.get("url")
    if not url:
        return None
    length = attrs.get("length", "")
    return FeedEnclosure(
        url=url,
        length=int(length) if length.isdigit() else 0,
        type=attrs.get("type", ""),
    )


def _source(source_url: str, source_title: Optional[str]) -> Optional[FeedSource]:
    if not source_title:
        return None
    return FeedSource(url=source_url, title=source_title)


def is_atom(text: str) -> bool:
    """Return True when the document looks like an Atom feed.

    This is a containment check for a ``<feed`` element plus the default Atom
    namespace, not a structural test.
    """
    return bool(_ATOM_ROOT_RE.search(text) and _ATOM_NAMESPACE_RE.search(text))


def parse_rss(
    text: str, source_url: str, source_title: Optional[str] = None
) -> List[FeedItem]:
    """Extract items from an RSS 2.0 document."""
    items: List[FeedItem] = []
    for match in _ITEM_RE.finditer(text):
        block = match.group(1)
        date_text = extract_tag(block, "pubDate") or extract_tag(block, "dc:date")
        items.append(
            FeedItem(
                title=extract_tag(block, "title") or DEFAULT_TITLE,
                link=extract_tag(block, "link") or "",
                description=extract_cdata(block, "description")
                or extract_tag(block, "description")
                or "",
                author=extract_tag(block, "author")
                or extract_tag(block, "dc:creator")
                or None,
                category=extract_tag(block, "category") or None,
                comments=extract_tag(block, "comments") or None,
                enclosure=_extract_enclosure(block),
                guid=extract_tag(block, "guid") or None,
                pub_date=parse_date(date_text),
                source=_source(source_url, source_title),
            )
        )
    return items


def parse_atom(
    text: str, source_url: str, source_title: Optional[str] = None
) -> List[FeedItem]:
    """Extract entries from an Atom document."""
    items: List[FeedItem] = []
    for match in _ENTRY_RE.finditer(text):
        block = match.group(1)

        link_match = _LINK_HREF_RE.search(block)
        link = decode_entities(link_match.group(1)) if link_match else ""

        author = None
        author_block = _find_tag(block, "author")
        if author_block:
            author = extract_tag(author_block, "name") or None

        date_text = extract_tag(block, "published") or extract_tag(block, "updated")
        items.append(
            FeedItem(
                title=extract_tag(block, "title") or DEFAULT_TITLE,
                link=link,
                description=extract_cdata(block, "content")
                or extract_tag(block, "content")
                or extract_cdata(block, "summary")
                or extract_tag(block, "summary")
                or "",
                author=author,
                category=extract_tag(block, "category") or None,
                guid=extract_tag(block, "id") or None,
                pub_date=parse_date(date_text),
                source=_source(source_url, source_title),
            )
        )
    return items


def parse(
    text: str, source_url: str, source_title: Optional[str] = None
) -> List[FeedItem]:
    """Parse an RSS or Atom document into normalized items."""
    if is_atom(text):
        items = parse_atom(text, source_url, source_title)
        dialect = "Atom"
    else:
        items = parse_rss(text, source_url, source_title)
        dialect = "RSS"
    logger.debug("Parsed %d %s items from %s", len(items), dialect, source_url)
    return items


def _plain_text(pattern: str, text: str) -> Optional[str]:
    match = re.search(pattern, text, re.I)
    if match is None:
        return None
    value = decode_entities(match.group(1).strip())
    return value or None


def extract_feed_metadata(text: str) -> Dict[str, str]:
    """Return the channel-level title, description and link of a feed.

    Only plain-text values are picked up; missing values are left out.
    """
    metadata: Dict[str, str] = {}

    if is_atom(text):
        title = _plain_text(r"<title[^>]*>([^<]+)</title>", text)
        description = _plain_text(r"<subtitle[^>]*>([^<]+)</subtitle>", text)
        link_match = _LINK_HREF_RE.search(text)
        link = decode_entities(link_match.group(1).strip()) if link_match else None
    else:
        channel_match = _CHANNEL_RE.search(text)
        if channel_match is None:
            return metadata
        channel = channel_match.group(1)
        title = _plain_text(r"<title>([^<]+)</title>", channel)
        description = _plain_text(r"<description>([^<]+)</description>", channel)
        link = _plain_text(r"<link>([^<]+)</link>", channel)

    if title:
        metadata["title"] = title
    if description:
        metadata["description"] = description
    if link:
        metadata["link"] = link
    return metadata
