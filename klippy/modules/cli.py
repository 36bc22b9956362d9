# CLI argument parsing and command dispatch for klippy
# Output goes to stdout via rich; log records and errors go to stderr

import argparse
import logging
import sys
from typing import Optional

import requests
from rich.table import Table
from rich.text import Text

from klippy.config import DEFAULT_REGISTRY, log_level_from_env
from klippy.error import KlippyError
from klippy.log import init_logging, level_from_flag, stderr_console, stdout_console
from klippy.modules.formatters import format_history_date
from klippy.modules.history import format_command
from klippy.modules.registry.retrieve import (
    image_exists,
    retrieve_commands,
    retrieve_layers,
    retrieve_overview,
    retrieve_tags,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="klippy",
        description="Inspect container images on a Docker registry v2 without pulling them.",
    )
    p.add_argument(
        "--log-level", "--logLevel",
        dest="log_level",
        type=int,
        default=log_level_from_env(),
        help="Set the logging level [0=panic, 3=warning, 5=debug]",
    )
    p.add_argument(
        "--registry",
        dest="registry",
        default=DEFAULT_REGISTRY,
        help=f"Registry used when the image names no resolvable host (default: {DEFAULT_REGISTRY})",
    )

    commands = p.add_subparsers(dest="command")
    image = commands.add_parser("image", help="Lookup information about an image")
    image.add_argument(
        "--name", "-n",
        dest="image_name",
        default="",
        help="Image ([registry/]namespace/name[:tag|@digest]) to inspect",
    )

    # --name is also accepted after the lookup name
    name_flag = argparse.ArgumentParser(add_help=False)
    name_flag.add_argument("--name", "-n", dest="image_name", default=argparse.SUPPRESS, help=argparse.SUPPRESS)

    lookups = image.add_subparsers(dest="lookup")
    lookups.add_parser("tags", parents=[name_flag], help="List all tags of a specific image")
    cmd_lookup = lookups.add_parser(
        "commands", parents=[name_flag], help="List all commands used to build a specific image"
    )
    cmd_lookup.add_argument(
        "--no-color",
        action="store_true",
        help="Do not colour build commands, even on a terminal",
    )
    cmd_lookup.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Also show when each layer was created and by which Docker version",
    )
    lookups.add_parser("overview", parents=[name_flag], help="Print an overview of the details of a specific image")
    lookups.add_parser("exists", parents=[name_flag], help="Check whether an image can be located on its registry")

    p.set_defaults(image_parser=image)
    return p


# =============================================================================
# Lookups
# =============================================================================

def show_tags(args) -> int:
    for tag in retrieve_tags(args.image_name, default_registry=args.registry):
        print(f"\t{tag}")
    return 0


def show_commands(args) -> int:
    color = stdout_console.is_terminal and not args.no_color

    table = Table(box=None, show_edge=False, pad_edge=False, padding=(0, 3))
    table.add_column("Layer", justify="right")
    if args.verbose:
        table.add_column("Created")
        table.add_column("Docker")
    table.add_column("Command", overflow="fold")

    if args.verbose:
        _, layers = retrieve_layers(args.image_name, default_registry=args.registry)
        for i, layer in enumerate(layers):
            command = format_command(layer, color=color)
            table.add_row(str(i), format_history_date(layer.created), layer.docker_version, Text.from_ansi(command))
    else:
        for i, command in enumerate(retrieve_commands(args.image_name, color=color, default_registry=args.registry)):
            table.add_row(str(i), Text.from_ansi(command))

    stdout_console.print(table)
    return 0


def show_overview(args) -> int:
    manifest = retrieve_overview(args.image_name, default_registry=args.registry)
    print(f"Name:\t{manifest.name}")
    print(f"Arch:\t{manifest.architecture}")
    print(f"Tag:\t{manifest.tag}")
    print("Layers:")
    for i, digest in enumerate(manifest.layer_digests):
        print(f"\tLayer [{i}]:\t{digest}")
    return 0


def show_exists(args) -> int:
    try:
        image_exists(args.image_name, default_registry=args.registry)
    except KlippyError as e:
        print(f"[-] Image {args.image_name} could not be located: {e}")
        return 1
    print(f"[+] Image {args.image_name} exists")
    return 0


LOOKUPS = {
    "tags": show_tags,
    "commands": show_commands,
    "overview": show_overview,
    "exists": show_exists,
}


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    init_logging(level_from_flag(args.log_level))

    if args.command != "image":
        parser.print_help()
        return 0

    if not args.lookup:
        args.image_parser.print_help()
        return 0

    if not args.image_name:
        args.image_parser.print_help()
        logger.error("No image specified")
        return 1

    try:
        return LOOKUPS[args.lookup](args)
    except (KlippyError, requests.RequestException) as e:
        stderr_console.print(f"[!] {e}", style="error", markup=False, highlight=False)
        return 1


if __name__ == "__main__":
    sys.exit(main())
