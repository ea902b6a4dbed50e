"""CLI argument parsing and command implementations."""

import argparse
import logging
import sys

from . import __version__
from .api import DEFAULT_MAX_WORKERS, build_badge, fetch_all_badges
from .badges import DEFAULT_COLOR, DEFAULT_LABEL
from .clients import DEFAULT_TIMEOUT, create_client
from .config import DEFAULT_OUTPUT_DIR, GITHUB_TOKEN_ENV, load_batch_file
from .errors import BadgeError, UnknownRegistry, UsageError
from .export import EXPORTERS
from .logging import setup_logging
from .registry import registry_names, select_registry, validate_target
from .types import FallbackPolicy, OwnerKind, QueryTarget
from .utils import validate_name, write_badge

logger = logging.getLogger("dlbadge")

EXIT_FAILURE = 1


def cmd_badge(args: argparse.Namespace, parser: argparse.ArgumentParser) -> None:
    """Badge command: fetch one count and write its badge."""
    if not (args.registry and args.owner and args.repo):
        parser.error("registry, owner and repo are required (or use --file)")

    for kind, value in (("owner", args.owner), ("repo", args.repo), ("package", args.package)):
        if value is None:
            continue
        valid, message = validate_name(value, kind)
        if not valid:
            parser.error(message)

    try:
        registry = select_registry(args.registry, args.package, args.container)
    except UnknownRegistry as e:
        logger.error("Error: %s (expected one of: %s)", e, ", ".join(registry_names()))
        sys.exit(EXIT_FAILURE)

    target = QueryTarget(
        owner=args.owner,
        repo=args.repo,
        package=args.package,
        owner_kind=OwnerKind.USER if args.user else OwnerKind.REPOSITORY,
    )
    try:
        validate_target(registry, target)
    except UsageError as e:
        parser.error(str(e))

    with create_client(args.timeout) as client:
        try:
            result, svg = build_badge(
                client,
                registry,
                target,
                policy=FallbackPolicy(args.policy),
                label=args.label,
                color=args.color,
                compact=args.compact,
            )
        except BadgeError as e:
            logger.error("Error: %s", e)
            sys.exit(EXIT_FAILURE)

    try:
        path = write_badge(svg, args.output_dir, target)
    except OSError as e:
        logger.error("Error: cannot write badge: %s", e)
        sys.exit(EXIT_FAILURE)
    logger.info("Badge generated successfully: %s", path)
    print(result["message"])


def cmd_batch(args: argparse.Namespace, parser: argparse.ArgumentParser) -> None:
    """Batch command: build badges for every entry in a file."""
    try:
        entries = load_batch_file(args.file)
    except FileNotFoundError:
        parser.error(f"File not found: {args.file}")
    except UsageError as e:
        parser.error(str(e))

    if not entries:
        logger.info("No badges listed in %s.", args.file)
        return

    logger.info("Building %d badges...", len(entries))
    results = fetch_all_badges(
        entries,
        args.output_dir,
        policy=FallbackPolicy(args.policy),
        label=args.label,
        color=args.color,
        compact=args.compact,
        timeout=args.timeout,
        max_workers=args.max_workers,
    )

    print(EXPORTERS[args.summary](results))

    failed = [r for r in results if r["path"] is None]
    if failed:
        logger.error("%d of %d badges failed.", len(failed), len(results))
        sys.exit(EXIT_FAILURE)


def positive_int(value: str) -> int:
    """argparse type for counts that must be at least 1."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="dlbadge",
        description=(
            "Render a download-count badge for a GitHub package, release or "
            "container, a Docker Hub image, or an npm package."
        ),
        epilog=f"GitHub registries read a bearer token from ${GITHUB_TOKEN_ENV}.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "registry",
        nargs="?",
        help="Registry: github, dockerhub or npm",
    )
    parser.add_argument("owner", nargs="?", help="Repository owner or user login")
    parser.add_argument("repo", nargs="?", help="Repository name (ignored by npm)")
    parser.add_argument(
        "package",
        nargs="?",
        help="Package name (required for npm, GitHub packages and containers)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v", "--verbose", action="store_true", help="Show request and response details"
    )
    verbosity.add_argument(
        "-q", "--quiet", action="store_true", help="Only show warnings and errors"
    )

    parser.add_argument(
        "--user",
        action="store_true",
        help="Look up a GitHub package under the owner's user account",
    )
    parser.add_argument(
        "--container",
        action="store_true",
        help="Count pulls of a GitHub container package",
    )
    parser.add_argument(
        "--policy",
        choices=[p.value for p in FallbackPolicy],
        default=FallbackPolicy.ABORT.value,
        help="When no count is available: abort, show 0, or show N/A (default: abort)",
    )
    parser.add_argument(
        "--label",
        default=DEFAULT_LABEL,
        help=f"Badge label (default: {DEFAULT_LABEL})",
    )
    parser.add_argument(
        "--color",
        default=DEFAULT_COLOR,
        help=f"Badge color, hex or palette name (default: {DEFAULT_COLOR})",
    )
    parser.add_argument(
        "--compact",
        action="store_true",
        help="Abbreviate counts (1.2K, 3.4M)",
    )
    parser.add_argument(
        "-o",
        "--output-dir",
        default=DEFAULT_OUTPUT_DIR,
        help=f"Directory badges are written to (default: {DEFAULT_OUTPUT_DIR})",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help=f"Request timeout in seconds (default: {DEFAULT_TIMEOUT:g})",
    )
    parser.add_argument(
        "-f",
        "--file",
        help="Build every badge listed in a YAML or JSON file",
    )
    parser.add_argument(
        "-w",
        "--max-workers",
        type=positive_int,
        default=DEFAULT_MAX_WORKERS,
        help=f"Parallel requests in batch mode (default: {DEFAULT_MAX_WORKERS})",
    )
    parser.add_argument(
        "--summary",
        choices=list(EXPORTERS),
        default="table",
        help="Batch summary format (default: table)",
    )

    return parser


def main() -> None:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args()

    setup_logging(verbose=args.verbose, quiet=args.quiet)

    if args.file:
        cmd_batch(args, parser)
    else:
        cmd_badge(args, parser)
