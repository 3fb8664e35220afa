from dataclasses import dataclass, field
from typing import Optional, Dict, Any


@dataclass
class Credentials:
    consumer_key: str
    access_token: str
    username: str


@dataclass
class PocketItem:
    item_id: str
    resolved_url: Optional[str] = None
    given_url: Optional[str] = None
    resolved_title: Optional[str] = None
    given_title: Optional[str] = None
    word_count: int = 0
    status: Optional[str] = None  # "0" list, "1" archived, "2" to be deleted
    time_read: int = 0
    time_added: int = 0  # Unix timestamp
    has_video: str = "0"
    sort_id: int = 0
    favorite: str = "0"
    original: Dict[str, Any] = field(
        default_factory=dict
    )  # Raw API record, used by retrieve_raw style output
