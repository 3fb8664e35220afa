import os
from typing import Optional

from models import Credentials


def load_credentials(path: str) -> Optional[Credentials]:
    """Read the three-line credentials file, or None when it is absent."""
    if not os.path.exists(path):
        return None
    with open(path, "r", encoding="utf-8") as f:
        lines = f.read().splitlines()
    consumer_key, access_token, username = (lines + ["", "", ""])[:3]
    return Credentials(
        consumer_key=consumer_key,
        access_token=access_token,
        username=username,
    )


def save_credentials(path: str, credentials: Credentials) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write(credentials.consumer_key + "\n")
        f.write(credentials.access_token + "\n")
        f.write(credentials.username + "\n")


def make_dir(path: str) -> None:
    # Parents must already exist; callers create each level in turn.
    if not os.path.isdir(path):
        os.mkdir(path)


def write_shortcut(path: str, url: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write("[InternetShortcut]\n")
        f.write(f"URL={url}\n")


def is_writable_dir(path: Optional[str]) -> bool:
    return bool(path) and os.path.isdir(path) and os.access(path, os.W_OK)
