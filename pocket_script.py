#!/usr/bin/env python3
"""
Pocket command-line client.
List, search, add, archive, favorite and delete saved Pocket links,
and download a categorized local copy of the whole list.
"""

import sys
import logging
import argparse
from typing import Callable, Dict, List, Optional

import requests

from config import PocketConfig, load_config
from data_parser import items_from_response
from formatters import find_item_id, format_urls, pretty_json, total_word_count
from local_export import LocalExporter, format_report
from models import Credentials
from pocket_client import AuthError, ItemNotFoundError, PocketClient, PocketError
from query_builder import (
    default_search_params,
    merge_params,
    raw_retrieve_options,
    raw_retrieve_parser,
    retrieve_options,
    retrieve_parser,
)
from storage import load_credentials, save_credentials

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

PROG = "pocket"

COMMAND_SUMMARY = {
    "authenticate": "Log in to Pocket and store the credentials",
    "list": "Print the URLs of saved items",
    "words": "Print the total word count of saved items",
    "search": "Print the URLs of items matching a search string",
    "favorites": "Print the URLs of favorited items",
    "add": "Save a URL, optionally with a title",
    "archive": "Archive a saved URL",
    "readd": "Move an archived URL back to the list",
    "favorite": "Mark a saved URL as favorite",
    "unfavorite": "Remove the favorite mark from a saved URL",
    "delete": "Delete a saved URL",
    "local": "Download a categorized local copy of saved items",
    "retrieve_raw": "Print the raw JSON answer of a retrieve call",
    "help": "Show this summary",
    "man": "Show the full manual",
}

MANUAL = """
Commands:
  authenticate
      Run the Pocket OAuth flow now instead of on first use. Prompts for a
      consumer key when none is configured, prints a URL to visit and waits
      for enter, then writes the credentials file.

  list [--unread|--archive|--all] [--tag TAG ...]
  words [--unread|--archive|--all] [--tag TAG ...]
  favorites [--unread|--archive|--all] [--tag TAG ...]
  search QUERY [--unread|--archive|--all] [--tag TAG ...]
      Print the resolved URL of each matching item, oldest first (list,
      search, favorites) or the total word count (words). When several of
      --unread, --archive and --all are given the last one wins.

  add URL [TITLE]
  archive URL | readd URL | favorite URL | unfavorite URL | delete URL
      Modify a saved item. The item is found by exact resolved or given URL.

  local [OUTPUT_DIR] [--unread|--archive|--all] [--tag TAG ...]
      Write one .url shortcut per item into each of its category folders:
      all, list/archived/to_be_deleted, read/unread, has_video/is_video,
      tiny/small/short/normal/large/huge and by_date/YEAR/MONTH. Without a
      writable OUTPUT_DIR only the folders are listed. Ends with a count of
      items per category.

  retrieve_raw [--state S] [--favorite|--no-favorite] [--tag T]
               [--contentType C] [--sort S] [--detailType D] [--search Q]
               [--domain D] [--since N] [--count N] [--offset N]
      Print the raw retrieve answer as sorted, indented JSON.

Environment:
  POCKET_CONSUMER_KEY      consumer key used when authenticating
  POCKET_CREDENTIALS_FILE  credentials file (default ~/.pocket)
  POCKET_REDIRECT_URI      OAuth redirect URI (default https://getpocket.com/)
"""

CONFIRMATIONS = {
    "archive": "Page archived!",
    "readd": "Page added!",
    "favorite": "Page favorited!",
    "unfavorite": "Page unfavorited!",
    "delete": "Page deleted!",
}


class UnknownCommandError(PocketError):
    """The command name is missing or not one of the known commands."""

    def __init__(self, name: Optional[str]):
        super().__init__(f"Unknown command: {name}" if name else "No command given")
        self.name = name


class PocketScript:
    """Dispatch command names to handlers sharing one lazily created client."""

    def __init__(self, config: PocketConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or requests.Session()
        self._client: Optional[PocketClient] = None
        self._client_loaded = False

        self.commands: Dict[str, Callable[[List[str]], None]] = {
            "authenticate": self.authenticate,
            "list": self.list,
            "words": self.words,
            "search": self.search,
            "favorites": self.favorites,
            "add": self.add,
            "archive": self._modify_command("archive"),
            "readd": self._modify_command("readd"),
            "favorite": self._modify_command("favorite"),
            "unfavorite": self._modify_command("unfavorite"),
            "delete": self._modify_command("delete"),
            "local": self.local,
            "retrieve_raw": self.retrieve_raw,
            "help": self.help,
            "man": self.man,
        }

    def run(self, argv: List[str]) -> None:
        name = argv[0] if argv else None
        handler = self.commands.get(name)
        if handler is None:
            raise UnknownCommandError(name)
        logger.debug(f"Running command '{name}' with {argv[1:]}")
        handler(argv[1:])

    @property
    def pocket(self) -> PocketClient:
        """The API client, loaded from stored credentials or by authenticating on first use."""
        if not self._client_loaded:
            self._client = self._load_client()
            self._client_loaded = True
        return self._client

    def _load_client(self) -> PocketClient:
        credentials = load_credentials(self.config.credentials_file)
        if credentials is None:
            logger.info("No stored credentials found, starting authentication")
            return self._authenticate()
        logger.debug(f"Loaded credentials from {self.config.credentials_file}")
        return PocketClient(
            self.session,
            consumer_key=credentials.consumer_key,
            access_token=credentials.access_token,
            username=credentials.username,
        )

    def _authenticate(self) -> PocketClient:
        consumer_key = self.config.consumer_key or self._prompt_for_consumer_key()
        client = PocketClient(self.session, consumer_key=consumer_key)

        url, code = client.start_authentication(self.config.redirect_uri)
        print(f"Visit {url} and log in. When you're done, press enter to continue.")
        self._read_line()

        access_token, username = client.finish_authentication(code)
        save_credentials(
            self.config.credentials_file,
            Credentials(
                consumer_key=consumer_key,
                access_token=access_token,
                username=username,
            ),
        )
        logger.info(f"✅ Credentials saved to {self.config.credentials_file}")
        return client

    def _prompt_for_consumer_key(self) -> str:
        print(
            "Consumer key required. You can sign up for a consumer key as a\n"
            "Pocket developer at https://getpocket.com/developer/apps/new."
        )
        return self._read_line("Enter your consumer key: ").strip()

    def _read_line(self, prompt: str = "") -> str:
        try:
            return input(prompt)
        except EOFError:
            raise AuthError("Authentication aborted: no input") from None

    def authenticate(self, argv: List[str]) -> None:
        argparse.ArgumentParser(prog=f"{PROG} authenticate").parse_args(argv)
        client = self.pocket
        logger.info(f"Using Pocket account '{client.username}'")

    def _retrieve_items(self, params: Dict):
        return items_from_response(self.pocket.retrieve(**params))

    def list(self, argv: List[str]) -> None:
        args = retrieve_parser(f"{PROG} list").parse_args(argv)
        params = merge_params(default_search_params(), retrieve_options(args))
        for url in format_urls(self._retrieve_items(params)):
            print(url)

    def words(self, argv: List[str]) -> None:
        args = retrieve_parser(f"{PROG} words").parse_args(argv)
        params = merge_params(default_search_params(), retrieve_options(args))
        print(total_word_count(self._retrieve_items(params)))

    def search(self, argv: List[str]) -> None:
        parser = retrieve_parser(f"{PROG} search")
        parser.add_argument("query")
        args = parser.parse_args(argv)
        params = merge_params(
            default_search_params(),
            retrieve_options(args),
            {"search": args.query},
        )
        for url in format_urls(self._retrieve_items(params)):
            print(url)

    def favorites(self, argv: List[str]) -> None:
        args = retrieve_parser(f"{PROG} favorites").parse_args(argv)
        params = merge_params(
            default_search_params(),
            {"state": "all"},
            retrieve_options(args),
            {"favorite": 1},
        )
        for url in format_urls(self._retrieve_items(params)):
            print(url)

    def local(self, argv: List[str]) -> None:
        parser = retrieve_parser(f"{PROG} local")
        parser.add_argument("output_dir", nargs="?")
        args = parser.parse_args(argv)

        exporter = LocalExporter(args.output_dir)
        params = merge_params(default_search_params(), retrieve_options(args))
        counts = exporter.export(self._retrieve_items(params))

        print()
        for line in format_report(counts):
            print(line)
        print()

    def retrieve_raw(self, argv: List[str]) -> None:
        args = raw_retrieve_parser(f"{PROG} retrieve_raw").parse_args(argv)
        print(pretty_json(self.pocket.retrieve(**raw_retrieve_options(args))))

    def add(self, argv: List[str]) -> None:
        parser = argparse.ArgumentParser(prog=f"{PROG} add")
        parser.add_argument("url")
        parser.add_argument("title", nargs="?")
        args = parser.parse_args(argv)

        self.pocket.add(args.url, title=args.title)
        print("Page Saved!")

    def _modify_command(self, action: str) -> Callable[[List[str]], None]:
        def handler(argv: List[str]) -> None:
            parser = argparse.ArgumentParser(prog=f"{PROG} {action}")
            parser.add_argument("url")
            args = parser.parse_args(argv)
            self._modify(action, args.url)
            print(CONFIRMATIONS[action])

        return handler

    def _modify(self, action: str, url: str) -> None:
        item_id = find_item_id(self.pocket, url)
        if item_id is None:
            raise ItemNotFoundError(f"No saved item found for {url}")
        self.pocket.modify([{"action": action, "item_id": item_id}])

    def help(self, argv: List[str]) -> None:
        print(command_summary())

    def man(self, argv: List[str]) -> None:
        build_parser().print_help()
        print(command_summary())
        print(MANUAL)


def command_summary() -> str:
    lines = ["Commands:"]
    for name, summary in COMMAND_SUMMARY.items():
        lines.append(f"  {name:<14}{summary}")
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Command-line client for the Pocket API",
        epilog=f"Run '{PROG} man' for the full manual.",
    )
    parser.add_argument("--consumer-key", help="Pocket consumer key used when authenticating")
    parser.add_argument("--credentials-file", help="Credentials file (default: ~/.pocket)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    parser.add_argument("command", nargs="?", help="Command to run, see 'help'")
    parser.add_argument("args", nargs=argparse.REMAINDER, help="Command arguments")
    return parser


def main(argv: Optional[List[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    config = load_config(
        consumer_key=args.consumer_key, credentials_file=args.credentials_file
    )
    script = PocketScript(config)
    command = [args.command] + args.args if args.command else []

    try:
        script.run(command)
    except UnknownCommandError as e:
        if e.name:
            print(f"{PROG}: unknown command '{e.name}'", file=sys.stderr)
        parser.print_usage(sys.stderr)
        print(command_summary(), file=sys.stderr)
        sys.exit(2)
    except KeyboardInterrupt:
        logger.info("⏹️  Interrupted by user")
        sys.exit(130)
    except PocketError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)
    except OSError as e:
        logger.error(f"❌ File system error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
