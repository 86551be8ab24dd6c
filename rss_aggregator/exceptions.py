"""Exceptions raised by the feed fetching layer."""


class FeedFetchError(Exception):
    """Raised when an upstream feed answers with a non-success HTTP status."""
