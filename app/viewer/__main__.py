"""Interactive inbox viewer.

Polls the proxy, renders the list and detail panels into an HTML page
(served by the proxy at ``/``) and accepts commands on stdin.
"""

from __future__ import annotations

import argparse
import asyncio
import shlex
from pathlib import Path
from typing import Dict, List, Optional

import httpx

from app.config import DEFAULT_LIMIT, DEFAULT_OFFSET, DEFAULT_PROXY_URL, PAGE_FILE, STATIC_DIR, logger

from .clipboard import system_clipboard
from .controller import NoSelectionError, QueryController
from .surface import HtmlPageSurface

HELP = """Commands:
  r                 refresh
  s N               select email N (0-based)
  f key=value ...   apply filters (tag, tag_prefix, timestamp_from, timestamp_to,
                    limit, offset, headers, spam_report)
  c                 clear filters
  a on|off          toggle auto-refresh
  o                 open selected HTML in browser
  y                 copy selected text
  d N               download attachment N of the selected email
  q                 quit"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="python -m app.viewer", description="Testmail inbox viewer")
    parser.add_argument("--proxy", default=DEFAULT_PROXY_URL, help="Base URL of the inbox proxy")
    parser.add_argument("--out", type=Path, default=STATIC_DIR / PAGE_FILE, help="Rendered page path")
    parser.add_argument("--downloads", type=Path, default=Path("downloads"), help="Attachment download directory")
    parser.add_argument("--auto-refresh", action="store_true", help="Start with auto-refresh enabled")
    parser.add_argument("--tag")
    parser.add_argument("--tag-prefix")
    parser.add_argument("--timestamp-from")
    parser.add_argument("--timestamp-to")
    parser.add_argument("--limit", default=str(DEFAULT_LIMIT))
    parser.add_argument("--offset", default=str(DEFAULT_OFFSET))
    parser.add_argument("--headers", action="store_true")
    parser.add_argument("--spam-report", action="store_true")
    return parser


def initial_filters(args: argparse.Namespace) -> Dict[str, object]:
    return {
        "tag": args.tag,
        "tag_prefix": args.tag_prefix,
        "timestamp_from": args.timestamp_from,
        "timestamp_to": args.timestamp_to,
        "limit": args.limit,
        "offset": args.offset,
        "headers": args.headers,
        "spam_report": args.spam_report,
    }


def parse_assignments(tokens: List[str]) -> Dict[str, str]:
    values: Dict[str, str] = {}
    for token in tokens:
        key, sep, value = token.partition("=")
        if not sep:
            raise ValueError(f"Expected key=value, got {token!r}")
        values[key.strip().replace("-", "_")] = value
    return values


async def handle_command(controller: QueryController, line: str) -> bool:
    """Run one command line; returns False when the loop should stop."""
    tokens = shlex.split(line)
    if not tokens:
        return True
    command, rest = tokens[0].lower(), tokens[1:]

    if command in {"q", "quit", "exit"}:
        return False
    if command in {"r", "refresh"}:
        inbox = await controller.query()
        print(f"{len(inbox.emails or [])} email(s)")
    elif command in {"s", "select"}:
        message = controller.select(int(rest[0]))
        print(message.subject or "(no subject)")
    elif command in {"f", "filter"}:
        inbox = await controller.submit_filters(parse_assignments(rest))
        print(f"{len(inbox.emails or [])} email(s)")
    elif command in {"c", "clear"}:
        inbox = await controller.clear_filters()
        print(f"{len(inbox.emails or [])} email(s)")
    elif command in {"a", "auto"}:
        controller.toggle_auto_refresh(bool(rest) and rest[0].lower() in {"on", "1", "true"})
        print("auto-refresh " + ("on" if controller.state.auto_refresh else "off"))
    elif command in {"o", "open"}:
        controller.open_html()
    elif command in {"y", "copy"}:
        await controller.copy_text()
        print("Copied")
    elif command in {"d", "download"}:
        saved = controller.download(int(rest[0]))
        print(f"Saved {saved.path} ({saved.size} bytes)")
    else:
        print(HELP)
    return True


async def run(args: argparse.Namespace) -> None:
    surface = HtmlPageSurface(args.out)
    async with httpx.AsyncClient(base_url=args.proxy, timeout=None) as client:
        controller = QueryController(
            client,
            surface,
            clipboard=system_clipboard(),
            downloads_dir=args.downloads,
            base_url=args.proxy,
        )
        await controller.load_meta()
        await controller.submit_filters(initial_filters(args))
        if args.auto_refresh:
            controller.toggle_auto_refresh(True)
        logger.info("Viewer page written to %s", args.out)
        print(HELP)
        try:
            while True:
                line = await asyncio.to_thread(input, "> ")
                try:
                    if not await handle_command(controller, line):
                        break
                except (IndexError, ValueError, NoSelectionError, RuntimeError) as exc:
                    print(f"error: {exc}")
        except (EOFError, KeyboardInterrupt):
            pass
        finally:
            controller.close()


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    asyncio.run(run(args))


if __name__ == "__main__":
    main()
