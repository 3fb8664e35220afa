"""
Result formatting helpers: URL listings, word counts and raw JSON dumps.
"""

import json
import logging
from typing import Any, List, Optional
from urllib.parse import urlparse

from data_parser import items_from_response
from models import PocketItem

logger = logging.getLogger(__name__)


def sorted_items(items: List[PocketItem]) -> List[PocketItem]:
    return sorted(items, key=lambda item: item.sort_id)


def format_urls(items: List[PocketItem]) -> List[str]:
    return [item.resolved_url or "" for item in sorted_items(items)]


def total_word_count(items: List[PocketItem]) -> int:
    return sum(item.word_count or 0 for item in items)


def pretty_json(data: Any) -> str:
    return json.dumps(data, indent=4, sort_keys=True, ensure_ascii=False)


def find_item_id(client, url: str) -> Optional[str]:
    """
    Look up the id of a saved item by URL.

    Retrieves everything saved from the URL's host and returns the id of the
    first item whose resolved_url or given_url is exactly ``url``.

    Returns:
        The item id, or None if nothing matches
    """
    host = urlparse(url).hostname or ""
    response = client.retrieve(domain=host, state="all")
    for item in items_from_response(response):
        if item.resolved_url == url or item.given_url == url:
            logger.debug(f"Matched {url} to item {item.item_id}")
            return item.item_id
    return None
