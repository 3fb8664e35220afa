"""
Configuration for the Pocket command-line client.
Values come from the environment (optionally a .env file) and can be
overridden from the command line.
"""

import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

DEFAULT_CREDENTIALS_FILE = os.path.join(os.path.expanduser("~"), ".pocket")
DEFAULT_REDIRECT_URI = "https://getpocket.com/"


@dataclass
class PocketConfig:
    consumer_key: Optional[str] = None
    credentials_file: str = DEFAULT_CREDENTIALS_FILE
    redirect_uri: str = DEFAULT_REDIRECT_URI


def load_config(
    consumer_key: Optional[str] = None, credentials_file: Optional[str] = None
) -> PocketConfig:
    """Build the configuration, explicit arguments taking precedence over the environment."""
    env_key = os.getenv("POCKET_CONSUMER_KEY")
    if env_key is not None and env_key.strip() == "":
        env_key = None

    return PocketConfig(
        consumer_key=consumer_key or env_key,
        credentials_file=os.path.expanduser(
            credentials_file
            or os.getenv("POCKET_CREDENTIALS_FILE")
            or DEFAULT_CREDENTIALS_FILE
        ),
        redirect_uri=os.getenv("POCKET_REDIRECT_URI") or DEFAULT_REDIRECT_URI,
    )
