"""Shared data models for rss_aggregator."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class SourceFeed:
    """A single upstream feed to aggregate."""

    url: str
    title: str


@dataclass
class FeedSource:
    """Attribution back to the feed an item came from."""

    url: str
    title: str


@dataclass
class FeedEnclosure:
    url: str
    length: int
    type: str


@dataclass
class FeedItem:
    """Normalized feed item shared by RSS and Atom inputs."""

    title: str
    link: str
    description: str
    author: Optional[str] = None
    category: Optional[str] = None
    comments: Optional[str] = None
    enclosure: Optional[FeedEnclosure] = None
    guid: Optional[str] = None
    pub_date: Optional[datetime] = None
    source: Optional[FeedSource] = None


@dataclass
class FeedImage:
    url: str
    title: str
    link: str
    width: Optional[int] = None
    height: Optional[int] = None
    description: Optional[str] = None


@dataclass
class FeedConfig:
    """Channel-level metadata for a generated RSS document."""

    title: str
    description: str
    link: str
    language: Optional[str] = None
    copyright: Optional[str] = None
    managing_editor: Optional[str] = None
    web_master: Optional[str] = None
    pub_date: Optional[datetime] = None
    last_build_date: Optional[datetime] = None
    category: Optional[str] = None
    generator: Optional[str] = None
    docs: Optional[str] = None
    ttl: Optional[int] = None
    image: Optional[FeedImage] = None
