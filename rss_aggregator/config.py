"""Configuration loading for the aggregator."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional
from xml.etree import ElementTree as ET

from .models import FeedConfig, FeedImage, SourceFeed

logger = logging.getLogger(__name__)


@dataclass
class LoggingConfig:
    level: str = "INFO"
    file: Optional[str] = None


@dataclass
class AppConfig:
    feeds_file: str
    env_file: Optional[str]
    channel: FeedConfig
    max_items: Optional[int] = None
    output_format: str = "rss"
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def parse_feeds_config(path: str) -> List[SourceFeed]:
    """Parse the OPML feed list and return the sources to aggregate."""
    logger.info("Loading feed configuration from %s", path)
    tree = ET.parse(path)
    root = tree.getroot()
    body = root.find("body")
    sources: List[SourceFeed] = []

    def walk(outline: ET.Element) -> None:
        title = outline.attrib.get("title") or outline.attrib.get("text")
        feed_url = outline.attrib.get("xmlUrl")

        if outline.attrib.get("type") == "rss" and feed_url:
            sources.append(SourceFeed(url=feed_url, title=title or feed_url))
            logger.debug("Registered feed '%s' (%s)", sources[-1].title, feed_url)
            return

        for child in outline.findall("outline"):
            walk(child)

    if body is None:
        raise ValueError("feeds.xml is missing the <body> section.")

    for outline in body.findall("outline"):
        walk(outline)

    logger.info("Loaded %d feed endpoints from configuration", len(sources))
    return sources


def _resolve_path(base_path: Path, target_path: str) -> str:
    """Resolve a path relative to the base config file if it's not absolute."""
    target = Path(target_path)
    if target.is_absolute():
        return str(target)
    return str((base_path.parent / target).resolve())


def parse_env_config(path: Optional[str]) -> Dict[str, str]:
    """Read ``<variable name="...">`` entries for the HTTP client.

    ``httpx`` honours proxy variables such as ``HTTPS_PROXY`` from the process
    environment, which is where the CLI puts the returned mapping. Variables
    without a name or with a blank value are skipped.
    """
    if not path:
        return {}

    logger.info("Loading environment configuration from %s", path)
    try:
        root = ET.parse(path).getroot()
    except (ET.ParseError, OSError) as exc:
        logger.warning("Failed to load environment config %s: %s", path, exc)
        raise

    env_vars: Dict[str, str] = {}
    for var in root.iter("variable"):
        name = (var.get("name") or "").strip()
        value = (var.text or "").strip()
        if not name or not value:
            logger.debug("Skipping incomplete environment variable %r", name)
            continue
        env_vars[name] = value

    if env_vars:
        logger.info("Environment variables applied: %s", ", ".join(sorted(env_vars)))
    return env_vars


def _optional_int(node: ET.Element, tag: str) -> Optional[int]:
    text = node.findtext(tag)
    if text is None or not text.strip():
        return None
    return int(text)


def _optional_text(node: ET.Element, tag: str) -> Optional[str]:
    text = node.findtext(tag)
    if text is None:
        return None
    return text.strip() or None


def _parse_image(node: ET.Element) -> FeedImage:
    url = _optional_text(node, "url")
    title = _optional_text(node, "title")
    link = _optional_text(node, "link")
    if not (url and title and link):
        raise ValueError("Channel <image> requires <url>, <title> and <link>.")
    return FeedImage(
        url=url,
        title=title,
        link=link,
        width=_optional_int(node, "width"),
        height=_optional_int(node, "height"),
        description=_optional_text(node, "description"),
    )


def parse_channel_config(node: ET.Element) -> FeedConfig:
    """Build channel metadata from a <channel> element."""
    title = _optional_text(node, "title")
    description = _optional_text(node, "description")
    link = _optional_text(node, "link")
    missing = [
        name
        for name, value in (
            ("title", title),
            ("description", description),
            ("link", link),
        )
        if not value
    ]
    if missing:
        raise ValueError(f"Channel config missing: {', '.join(missing)}")

    image_node = node.find("image")
    return FeedConfig(
        title=title,
        description=description,
        link=link.rstrip("/"),
        language=_optional_text(node, "language"),
        copyright=_optional_text(node, "copyright"),
        managing_editor=_optional_text(node, "managing-editor"),
        web_master=_optional_text(node, "web-master"),
        category=_optional_text(node, "category"),
        generator=_optional_text(node, "generator"),
        docs=_optional_text(node, "docs"),
        ttl=_optional_int(node, "ttl"),
        image=_parse_image(image_node) if image_node is not None else None,
    )


def parse_app_config(path: str) -> AppConfig:
    """Parse the main application configuration XML."""
    config_path = Path(path).resolve()
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    logger.info("Loading application configuration from %s", config_path)
    tree = ET.parse(config_path)
    root = tree.getroot()

    # Feeds
    feeds_node = root.find("feeds")
    if feeds_node is None or not feeds_node.text:
        raise ValueError("Config missing <feeds> path")
    feeds_file = _resolve_path(config_path, feeds_node.text.strip())

    # Env
    env_node = root.find("env")
    env_file = (
        _resolve_path(config_path, env_node.text.strip())
        if env_node is not None and env_node.text
        else None
    )

    # Channel
    channel_node = root.find("channel")
    if channel_node is None:
        raise ValueError("Config missing <channel> section")
    channel = parse_channel_config(channel_node)

    max_items = _optional_int(root, "max-items")
    output_format = root.findtext("format", "rss").strip().lower()

    # Logging
    log_node = root.find("logging")
    logging_config = LoggingConfig()
    if log_node is not None:
        logging_config.level = log_node.findtext("level", "INFO")
        log_file = log_node.findtext("file")
        if log_file:
            logging_config.file = _resolve_path(config_path, log_file)

    return AppConfig(
        feeds_file=feeds_file,
        env_file=env_file,
        channel=channel,
        max_items=max_items,
        output_format=output_format,
        logging=logging_config,
    )
