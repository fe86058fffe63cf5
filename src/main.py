# src/main.py — v3
"""CLI entry point: check, list, show, delete commands.

Usage:
    checkwise check --prompt "What is 2+2?"
    checkwise check --image answer.jpg [--prompt "Only check question 3"]
    checkwise list
    checkwise show <id>
    checkwise delete <id>

Each command prints the JSON response body on stdout and exits 0 when the
response is successful, 1 otherwise.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from checkwise.logging.logger import get_logger
from checkwise.version import __version__

if TYPE_CHECKING:
    from checkwise.api.models import CheckResponse

logger = get_logger("main")


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        _setup_logging(args.verbose)
        return asyncio.run(args.func(args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="checkwise",
        description=f"checkwise v{__version__}: AI feedback on student work",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- check ---
    p_check = subparsers.add_parser(
        "check", help="Analyze a prompt and/or an image of student work",
    )
    p_check.add_argument("-p", "--prompt", default=None, help="Question, answer or instruction")
    p_check.add_argument("-i", "--image", type=Path, default=None, help="Path to image")
    p_check.set_defaults(func=_cmd_check)

    # --- list ---
    p_list = subparsers.add_parser("list", help="List stored checks")
    p_list.set_defaults(func=_cmd_list)

    # --- show ---
    p_show = subparsers.add_parser("show", help="Show one stored check")
    p_show.add_argument("id", help="Check record ID")
    p_show.set_defaults(func=_cmd_show)

    # --- delete ---
    p_delete = subparsers.add_parser("delete", help="Delete one stored check")
    p_delete.add_argument("id", help="Check record ID")
    p_delete.set_defaults(func=_cmd_delete)

    return parser


async def _cmd_check(args: argparse.Namespace) -> int:
    """Run a single check."""
    from checkwise.api.facade import check

    image_bytes = None
    image_name = None
    if args.image is not None:
        image_path: Path = args.image
        if not image_path.is_file():
            logger.error("File not found: %s", image_path)
            return 1
        image_bytes = image_path.read_bytes()
        image_name = image_path.name

    response = await check(prompt=args.prompt, image=image_bytes, image_filename=image_name)
    return _emit(response)


async def _cmd_list(args: argparse.Namespace) -> int:
    from checkwise.api.facade import list_checks

    return _emit(await list_checks())


async def _cmd_show(args: argparse.Namespace) -> int:
    from checkwise.api.facade import get_check

    return _emit(await get_check(args.id))


async def _cmd_delete(args: argparse.Namespace) -> int:
    from checkwise.api.facade import delete_check

    return _emit(await delete_check(args.id))


def _emit(response: CheckResponse) -> int:
    """Print a CheckResponse body and map it to an exit code."""
    print(json.dumps(response.to_body(), indent=2, ensure_ascii=False, default=str))
    return 0 if response.success else 1


def _setup_logging(verbose: bool) -> None:
    """Configure logging for CLI usage from settings."""
    from checkwise.config.settings import Settings
    from checkwise.logging.logger import setup_logging

    settings = Settings()
    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format="text" if verbose else settings.log_format,
        log_file=str(settings.log_file) if settings.log_file else None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )
    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("grpc").setLevel(logging.WARNING)


if __name__ == "__main__":
    sys.exit(main())
