"""Command line entry point: write the blog's posts as JSON.

The site build runs this before rendering::

    NOTION_TOKEN=... NOTION_PAGE_ID=... notionlog --output data/posts.json

``--feed`` writes only the publishable posts, reduced to id, title and date,
which is what the index page needs.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from notionlog import __version__
from notionlog.client import NotionlogClient
from notionlog.config import ENV_PAGE_ID, ENV_TOKEN, NotionlogConfig
from notionlog.observability import get_logger, set_level
from notionlog.posts import filter_posts, to_feed

log = get_logger("notionlog.cli")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="notionlog",
        description="Fetch blog posts from a Notion page and write them as JSON.",
    )
    parser.add_argument(
        "--page-id",
        default=None,
        help=f"Root page id or URL (default: ${ENV_PAGE_ID}).",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="File to write (default: stdout).",
    )
    output = parser.add_mutually_exclusive_group()
    output.add_argument(
        "--feed",
        action="store_true",
        help="Write publishable posts as {id, title, date} entries.",
    )
    output.add_argument(
        "--published",
        action="store_true",
        help="Write publishable posts only, with every field.",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default="WARNING",
        help="Log level for the JSON log on stderr (default: WARNING).",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _records(client: NotionlogClient, feed: bool, published: bool) -> list[dict[str, Any]]:
    posts = client.get_posts()
    if not (feed or published):
        return [post.to_dict() for post in posts]
    posts = filter_posts(
        posts,
        accept_status=client.config.accept_status,
        post_types=client.config.post_types,
    )
    if feed:
        return [entry.to_dict() for entry in to_feed(posts)]
    return [post.to_dict() for post in posts]


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    set_level(args.log_level)

    config = NotionlogConfig.from_env(page_id=args.page_id)
    if not config.token:
        print(f"error: ${ENV_TOKEN} is not set", file=sys.stderr)
        return 1
    if not config.page_id:
        print(f"error: pass --page-id or set ${ENV_PAGE_ID}", file=sys.stderr)
        return 1

    with NotionlogClient(config=config) as client:
        records = _records(client, args.feed, args.published)

    text = json.dumps(records, ensure_ascii=False, indent=2)
    if args.output is None:
        sys.stdout.write(text + "\n")
    else:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(text + "\n", encoding="utf-8")
        log.info(
            "Wrote posts",
            extra={"extra_fields": {"op": "cli", "path": str(args.output), "records": len(records)}},
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
