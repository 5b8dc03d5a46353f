"""Command line entry point for populating an environment with converter plugins."""

from __future__ import annotations

import argparse
import sys
from importlib import metadata
from pathlib import Path
from urllib.parse import urlsplit, urlunsplit

from . import display
from .models import load_plugins
from .populate import populate
from .post import PopulationError

PROG = "epos-plugin-populator"
VERSION = "dev"


def get_version() -> str:
    """Return the release version, or "dev" when none is known."""
    if VERSION and VERSION != "dev":
        return VERSION
    try:
        return metadata.version("eposplugins")
    except metadata.PackageNotFoundError:
        return "dev"


class _Parser(argparse.ArgumentParser):
    def error(self, message: str):
        self.print_usage(sys.stderr)
        self.exit(1, f"Error: {message}\n")


def _build_parser() -> argparse.ArgumentParser:
    description = "Populate an EPOS Platform environment with plugins for the converter"
    parser = _Parser(prog=PROG, description=description)
    parser.add_argument("--version", action="version", version=f"%(prog)s version {get_version()}")
    commands = parser.add_subparsers(dest="command")
    populate_cmd = commands.add_parser(
        "populate",
        help="Populate an EPOS Platform environment with converter plugins",
        description="Populate an EPOS Platform environment with converter plugins",
    )
    populate_cmd.add_argument("gateway_url", help="gateway URL")
    populate_cmd.add_argument("plugins_file", help="path to plugins JSON file")
    populate_cmd.add_argument(
        "--plugin-version",
        default="",
        help="If set it will override all version of every plugin to the set string",
    )
    return parser


def _parse_url(raw: str) -> str:
    if any(ord(ch) < 0x20 or ord(ch) == 0x7F for ch in raw):
        raise ValueError(f"invalid control character in URL {raw!r}")
    split = urlsplit(raw)
    split.port  # raises ValueError for a malformed port
    return urlunsplit(split)


def _run_populate(gateway_url: str, plugins_file: str, plugin_version: str) -> int:
    try:
        base_url = _parse_url(gateway_url)
    except ValueError as exc:
        display.error("error parsing gateway URL: %s", exc)
        return 1

    try:
        plugins = load_plugins(Path(plugins_file).read_bytes())
    except OSError as exc:
        display.error("error reading plugins file '%s': %s", plugins_file, exc)
        return 1
    except ValueError as exc:
        display.error("error parsing plugins file '%s': %s", plugins_file, exc)
        return 1

    display.step(
        "Starting population of EPOS Platform environment at '%s', with plugins file '%s'",
        base_url,
        plugins_file,
    )

    try:
        populate(base_url, plugins, plugin_version)
    except PopulationError as exc:
        print(f"population finished with errors: {exc}")
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run the command line interface and return the exit status."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 0
    return _run_populate(args.gateway_url, args.plugins_file, args.plugin_version)


if __name__ == "__main__":
    sys.exit(main())