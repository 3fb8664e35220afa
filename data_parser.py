from typing import Dict, Any, List
from models import PocketItem


def parse_pocket_item(raw: Dict[str, Any]) -> PocketItem:
    """
    Parse a raw Pocket API item dict into a PocketItem dataclass.
    The API sends every scalar as a string; numeric fields are converted
    and missing, empty or malformed numbers fall back to 0.
    """

    def get_str(field, default=None):
        val = raw.get(field)
        return str(val) if val is not None else default

    def get_int(field):
        val = raw.get(field)
        try:
            return int(val) if val not in (None, "") else 0
        except (ValueError, TypeError):
            return 0

    return PocketItem(
        item_id=get_str("item_id"),
        resolved_url=get_str("resolved_url"),
        given_url=get_str("given_url"),
        resolved_title=get_str("resolved_title"),
        given_title=get_str("given_title"),
        word_count=get_int("word_count"),
        status=get_str("status"),
        time_read=get_int("time_read"),
        time_added=get_int("time_added"),
        has_video=get_str("has_video", "0"),
        sort_id=get_int("sort_id"),
        favorite=get_str("favorite", "0"),
        original=raw.copy(),
    )


def items_from_response(response: Dict[str, Any]) -> List[PocketItem]:
    """
    Extract the items of a /v3/get response.

    Pocket answers an empty result with ``"list": []`` instead of an empty
    object, and may omit the key altogether; both mean "no items".
    """
    if not response:
        return []
    item_map = response.get("list")
    if not isinstance(item_map, dict):
        return []
    return [parse_pocket_item(raw) for raw in item_map.values()]
