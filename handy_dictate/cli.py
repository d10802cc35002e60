"""
handy-dictate command-line entry point.

Usage:
    handy-dictate serve      Run the trigger-intake bridge (uvicorn)
    handy-dictate repl       Toggle dictation from the terminal (Enter = /dictate)
    handy-dictate health     Exit 0 if Handy is reachable, 1 otherwise
    handy-dictate latest     Print the newest transcription in Handy's history
    handy-dictate history    List recent transcriptions, newest first
"""

import argparse
import asyncio
import logging
import sys

from handy_dictate import __version__
from handy_dictate.core.config import get_settings
from handy_dictate.core.exceptions import DictateError
from handy_dictate.plugin import COMMAND_NAME, DictatePlugin
from handy_dictate.services.handy.client import HandyClient
from handy_dictate.services.host.console import ConsoleHost

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="handy-dictate",
        description="Speech-to-text dictation via the Handy API",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--handy-url", help="Handy API base URL (default from settings)")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="run the trigger-intake bridge")
    serve.add_argument("--host", help="bind address")
    serve.add_argument("--port", type=int, help="bind port")

    sub.add_parser("repl", help="toggle dictation interactively")
    sub.add_parser("health", help="probe the Handy API")
    sub.add_parser("latest", help="print the newest transcription")
    history = sub.add_parser("history", help="list recent transcriptions")
    history.add_argument("--limit", type=int, default=10, help="entries to show")
    return parser


async def _repl(client: HandyClient) -> int:
    plugin = DictatePlugin(host=ConsoleHost(), client=client)
    print(f"Press Enter to run /{COMMAND_NAME}, 'q' to quit.")
    loop = asyncio.get_running_loop()
    while True:
        line = await loop.run_in_executor(None, sys.stdin.readline)
        if not line or line.strip().lower() in {"q", "quit", "exit"}:
            break
        await plugin.handle(COMMAND_NAME)
    if plugin.recording:
        print("Warning: Handy is still recording.", file=sys.stderr)
    return 0


async def _health(client: HandyClient) -> int:
    try:
        status = await client.health_check()
    except DictateError as exc:
        print(f"Handy unreachable at {client.base_url}: {exc.detail}", file=sys.stderr)
        return 1
    print(f"Handy at {client.base_url}: {status.status}")
    return 0


async def _latest(client: HandyClient) -> int:
    try:
        entry = await client.latest_entry()
    except DictateError as exc:
        print(f"Error: {exc.detail}", file=sys.stderr)
        return 1
    if entry is None:
        print("No transcriptions yet.", file=sys.stderr)
        return 1
    print(entry.text)
    return 0


async def _history(client: HandyClient, limit: int) -> int:
    try:
        entries = await client.list_history()
    except DictateError as exc:
        print(f"Error: {exc.detail}", file=sys.stderr)
        return 1
    for entry in entries[: max(limit, 0)]:
        marker = "*" if entry.is_refined else " "
        print(f"{entry.id:>6}{marker} {entry.text}")
    return 0


def _serve(args: argparse.Namespace, client: HandyClient) -> int:
    import uvicorn

    from handy_dictate.api.app import create_app

    settings = get_settings()
    app = create_app(DictatePlugin(client=client))
    uvicorn.run(
        app,
        host=args.host or settings.app_host,
        port=args.port or settings.app_port,
        log_level=settings.log_level.lower(),
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    client = HandyClient(base_url=args.handy_url)

    if args.command == "serve":
        return _serve(args, client)
    if args.command == "repl":
        return asyncio.run(_repl(client))
    if args.command == "health":
        return asyncio.run(_health(client))
    if args.command == "history":
        return asyncio.run(_history(client, args.limit))
    return asyncio.run(_latest(client))


if __name__ == "__main__":
    sys.exit(main())
