"""Merge several RSS/Atom feeds into one RSS 2.0 feed.

Pipeline: fetch (concurrently) -> parse -> merge -> sort newest first ->
limit -> serialize.
"""

from .aggregator import aggregate
from .builder import RSSFeedBuilder
from .models import FeedConfig, FeedItem, SourceFeed
from .parser import parse

__all__ = [
    "FeedConfig",
    "FeedItem",
    "RSSFeedBuilder",
    "SourceFeed",
    "aggregate",
    "parse",
]
