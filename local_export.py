#!/usr/bin/env python3
"""
Local Export Module for the Pocket command-line client.
Sorts saved items into category folders of .url shortcut files and
reports how many items landed in each category.
"""

import os
import re
import logging
from collections import Counter
from datetime import datetime, timezone
from typing import Dict, List, Optional

from models import PocketItem
from pocket_client import PocketError
from storage import is_writable_dir, make_dir, write_shortcut

logger = logging.getLogger(__name__)

READ_URL = "https://getpocket.com/a/read/{item_id}"

STATUS_FOLDERS = {
    "0": "list",
    "1": "archived",
    "2": "to_be_deleted",
}

VIDEO_FOLDERS = {
    "0": None,
    "1": "has_video",
    "2": "is_video",
}

# (exclusive upper bound, folder); anything above the last bound is "huge"
SIZE_TIERS = [
    (500, "tiny"),
    (2000, "small"),
    (5000, "short"),
    (10000, "normal"),
    (15000, "large"),
]

MONTHS = [
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
]

# 255 minus the item id (17), " - " (3) and ".url" (4)
MAX_TITLE_LENGTH = 231


class CategorizationError(PocketError):
    """An item carries a field value no folder is defined for."""


def read_url(item_id: str) -> str:
    return READ_URL.format(item_id=item_id)


def status_folder(item: PocketItem) -> str:
    try:
        return STATUS_FOLDERS[item.status]
    except KeyError:
        raise CategorizationError(
            f"Item {item.item_id} has unknown status {item.status!r}"
        ) from None


def read_state_folder(item: PocketItem) -> str:
    return "unread" if item.time_read == 0 else "read"


def video_folder(item: PocketItem) -> Optional[str]:
    try:
        return VIDEO_FOLDERS[item.has_video]
    except KeyError:
        raise CategorizationError(
            f"Item {item.item_id} has unknown has_video value {item.has_video!r}"
        ) from None


def size_tier(word_count: int) -> str:
    for upper_bound, tier in SIZE_TIERS:
        if word_count < upper_bound:
            return tier
    return "huge"


def date_folder(time_added: int) -> str:
    try:
        added = datetime.fromtimestamp(time_added, tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        raise CategorizationError(f"time_added {time_added!r} is out of range") from None
    return f"by_date/{added.year}/{MONTHS[added.month - 1]}"


def categorize_item(item: PocketItem) -> List[str]:
    """
    Work out every folder an item belongs in.

    Always "all", its status folder, its read-state folder, its video
    folder if any, its size tier and its by_date/<year>/<month> folder.
    """
    folders = ["all", status_folder(item), read_state_folder(item)]
    video = video_folder(item)
    if video:
        folders.append(video)
    folders.append(size_tier(item.word_count or 0))
    folders.append(date_folder(item.time_added))
    return folders


def sanitize_title(title: Optional[str]) -> str:
    title = re.sub(r"[^a-zA-Z]", "_", title or "")
    title = title.strip("_")
    return title[:MAX_TITLE_LENGTH]


def shortcut_name(item: PocketItem) -> str:
    return f"{item.item_id} - {sanitize_title(item.resolved_title)}.url"


def format_report(counts: Dict[str, int]) -> List[str]:
    """
    Render per-category counts, largest first, as a percentage of "all".
    """
    lines = ["Number of items in each category:"]
    total = counts.get("all", 0)
    if not total:
        return lines
    for category, count in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0])):
        lines.append(f" - {category}: {count} ({count / total * 100:.2f}%)")
    return lines


class LocalExporter:
    """Write a local copy of saved items, one shortcut per item per folder."""

    def __init__(self, output_dir: Optional[str] = None):
        if is_writable_dir(output_dir):
            logger.info(f"📁 Writing output to '{output_dir}'")
            self.output_dir = output_dir
        else:
            if output_dir:
                logger.warning(
                    f"Could not write to '{output_dir}', not a writeable directory."
                )
            else:
                logger.warning("No output directory given.")
            logger.warning("Dry run: listing folders without writing files.")
            self.output_dir = None

    @property
    def dry_run(self) -> bool:
        return self.output_dir is None

    def export(self, items: List[PocketItem]) -> Counter:
        """
        Categorize every item and write (or list) its shortcuts.

        Returns:
            Counter of items per category
        """
        counts = Counter()
        for item in items:
            folders = categorize_item(item)
            for folder in folders:
                counts[folder] += 1
                if not self.dry_run:
                    self._write_item(item, folder)

            if self.dry_run:
                print(f"{read_url(item.item_id)} to be saved to folders: {', '.join(folders)}")

        logger.debug(f"Categorized {counts['all']} items")
        return counts

    def _write_item(self, item: PocketItem, folder: str) -> None:
        path = self.output_dir
        for part in folder.split("/"):
            path = os.path.join(path, part)
            make_dir(path)
        write_shortcut(os.path.join(path, shortcut_name(item)), read_url(item.item_id))
