import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from .client import BlueskyClient
from .config import Settings
from .errors import BlueskyError
from .manager import BlueskyListManager
from .utils import print_error

DESCRIPTION = "Create a Bluesky list from someone's follows"

EPILOG = """\
Environment variables:
  BSKY_HANDLE    Your Bluesky handle
  BSKY_APP_KEY   Your app password (Settings > App Passwords)

Example:
  BSKY_HANDLE=me.bsky.social BSKY_APP_KEY=xxxx bsky-list-copy --name "Tech Folks" techperson.bsky.social
"""


class ArgumentParser(argparse.ArgumentParser):
    """argparse parser that exits with status 1 on usage errors."""

    def error(self, message):
        self.print_usage(sys.stderr)
        print_error(message)
        self.exit(1)


class UsageAction(argparse.Action):
    """Print the full help to stderr and exit with status 1."""

    def __init__(self, option_strings, dest=argparse.SUPPRESS, default=argparse.SUPPRESS, help=None):
        super().__init__(option_strings, dest=dest, default=default, nargs=0, help=help)

    def __call__(self, parser, namespace, values, option_string=None):
        parser.print_help(sys.stderr)
        parser.exit(1)


NAME_FLAGS = ("-n", "--name")


def join_name_values(argv: List[str]) -> List[str]:
    """Glue `--name VALUE` into `--name=VALUE` so VALUE may start with a dash."""
    joined = []
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg in NAME_FLAGS and i + 1 < len(argv):
            joined.append(f"{arg}={argv[i + 1]}")
            i += 2
            continue
        joined.append(arg)
        i += 1
    return joined


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="bsky-list-copy",
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    parser.add_argument(
        "-h", "--help", action=UsageAction,
        help="Show this help message",
    )
    parser.add_argument(
        "handle",
        help="Bluesky handle to copy follows from (e.g., user.bsky.social)",
    )
    parser.add_argument(
        *NAME_FLAGS, dest="name", required=True,
        help="Custom name for the list (required)",
    )
    parser.add_argument(
        "-d", "--description", default="",
        help="Description for the new list",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Log every API request",
    )
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = build_parser()
    argv = sys.argv[1:] if argv is None else list(argv)
    args = parser.parse_args(join_name_values(argv))
    if args.name == "":
        parser.error("--name flag is required")
    return args


async def run(args: argparse.Namespace, settings: Settings) -> int:
    """Authenticate, then copy follows into a new list. Returns the exit status."""
    async with BlueskyClient(settings) as client:
        manager = BlueskyListManager(client, settings)
        try:
            await manager.login(settings.handle, settings.app_key)
            await manager.copy_follows(args.handle, args.name, args.description)
        except BlueskyError as e:
            print()
            print_error(str(e))
            return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    # httpx logs every request at INFO; keep it quiet unless asked
    logging.getLogger("httpx").setLevel(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        settings = Settings()
    except ValidationError as e:
        print_error(f"invalid configuration: {e}")
        return 1

    if not settings.handle or not settings.app_key:
        print_error("BSKY_HANDLE and BSKY_APP_KEY environment variables are required")
        return 1

    try:
        return asyncio.run(run(args, settings))
    except KeyboardInterrupt:
        print("\nInterrupted.")
        return 1


if __name__ == "__main__":
    sys.exit(main())
