"""
Query Builder Module for the Pocket command-line client.
Turns command flags into /v3/get parameters.
"""

import argparse
from typing import Dict, Any


def default_search_params() -> Dict[str, Any]:
    return {
        "sort": "oldest",
        "detailType": "simple",
    }


def retrieve_parser(prog: str) -> argparse.ArgumentParser:
    """
    Parser for the filter flags shared by list, words, search, favorites and local.

    --unread, --archive and --all all write the same destination, so when
    several are given the last one wins.
    """
    parser = argparse.ArgumentParser(prog=prog)
    parser.add_argument("--unread", dest="state", action="store_const", const="unread",
                        help="Only unread items")
    parser.add_argument("--archive", dest="state", action="store_const", const="archive",
                        help="Only archived items")
    parser.add_argument("--all", dest="state", action="store_const", const="all",
                        help="Both unread and archived items")
    parser.add_argument("--tag", dest="tags", action="append", default=[],
                        help="Only items with this tag (repeatable)")
    return parser


def retrieve_options(args: argparse.Namespace) -> Dict[str, Any]:
    params = {}
    if args.state:
        params["state"] = args.state
    if args.tags:
        params["tag"] = ",".join(args.tags)
    return params


def merge_params(*layers: Dict[str, Any]) -> Dict[str, Any]:
    """Merge parameter dicts; later layers override earlier ones."""
    params = {}
    for layer in layers:
        params.update(layer)
    return params


def raw_retrieve_parser(prog: str) -> argparse.ArgumentParser:
    """Parser exposing every /v3/get parameter, for retrieve_raw."""
    parser = argparse.ArgumentParser(prog=prog)
    parser.add_argument("--state", choices=["unread", "archive", "all"])
    parser.add_argument("--favorite", dest="favorite", action="store_const", const="1")
    parser.add_argument("--no-favorite", dest="favorite", action="store_const", const="0")
    parser.add_argument("--tag")
    parser.add_argument("--contentType", choices=["article", "video", "image"])
    parser.add_argument("--sort", choices=["newest", "oldest", "title", "site"])
    parser.add_argument("--detailType", choices=["simple", "complete"])
    parser.add_argument("--search")
    parser.add_argument("--domain")
    parser.add_argument("--since", type=int)
    parser.add_argument("--count", type=int)
    parser.add_argument("--offset", type=int)
    return parser


RAW_RETRIEVE_KEYS = (
    "state", "favorite", "tag", "contentType", "sort", "detailType",
    "search", "domain", "since", "count", "offset",
)


def raw_retrieve_options(args: argparse.Namespace) -> Dict[str, Any]:
    """Only the options actually given; retrieve_raw sends no defaults."""
    return {
        key: getattr(args, key)
        for key in RAW_RETRIEVE_KEYS
        if getattr(args, key) is not None
    }
