"""Download count pipeline: select, fetch, extract, render."""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import httpx

from .badges import (
    DEFAULT_COLOR,
    DEFAULT_LABEL,
    NOT_AVAILABLE_COLOR,
    NOT_AVAILABLE_MESSAGE,
    downloads_message,
    render_badge,
    resolve_color,
)
from .clients import DEFAULT_TIMEOUT, create_client, fetch
from .config import get_github_token
from .errors import BadgeError, FetchFailure
from .normalize import extract
from .registry import select_registry, validate_target
from .types import BadgeResult, BatchEntry, FallbackPolicy, OwnerKind, QueryTarget, Registry
from .utils import write_badge

logger = logging.getLogger("dlbadge")

# Default number of parallel workers for batch fetches
DEFAULT_MAX_WORKERS = 5

ZERO_MESSAGE = "0"


def get_download_count(
    client: httpx.Client,
    registry: Registry,
    target: QueryTarget,
    token: str | None = None,
) -> int:
    """Fetch and normalize the download count for a target.

    The GitHub token is read from the environment when not supplied and only
    for GitHub registries.

    Raises:
        UsageError, ConfigError, NetworkError, ParseError, NoDownloads
    """
    validate_target(registry, target)
    if registry.is_github and token is None:
        token = get_github_token()

    raw = fetch(client, registry, target, token)
    count = extract(raw, registry, target)
    logger.info("Downloads: %s", count)
    return count


def apply_fallback(policy: FallbackPolicy, error: BadgeError) -> str:
    """Choose the badge message to show in place of a failed count.

    ABORT re-raises the error. ZERO and NOT_AVAILABLE substitute a sentinel
    message. Only fetch failures are eligible; anything else is re-raised.
    """
    if policy == FallbackPolicy.ABORT or not isinstance(error, FetchFailure):
        raise error
    if policy == FallbackPolicy.ZERO:
        return ZERO_MESSAGE
    return NOT_AVAILABLE_MESSAGE


def build_badge(
    client: httpx.Client,
    registry: Registry,
    target: QueryTarget,
    policy: FallbackPolicy = FallbackPolicy.ABORT,
    label: str = DEFAULT_LABEL,
    color: str = DEFAULT_COLOR,
    compact: bool = False,
    token: str | None = None,
) -> tuple[BadgeResult, str]:
    """Produce the badge for a target, applying the fallback policy.

    Returns:
        Tuple of (result, svg).
    """
    color = resolve_color(color)
    count: int | None = None
    error: str | None = None

    try:
        count = get_download_count(client, registry, target, token)
        message = downloads_message(count, compact)
    except FetchFailure as e:
        message = apply_fallback(policy, e)
        logger.warning("%s; using '%s'", e, message)
        error = str(e)
        if message == NOT_AVAILABLE_MESSAGE:
            color = NOT_AVAILABLE_COLOR

    result: BadgeResult = {
        "registry": registry.value,
        "target": target.describe(),
        "count": count,
        "message": message,
        "color": color,
        "error": error,
        "path": None,
    }
    return result, render_badge(label, message, color)


def entry_to_request(entry: BatchEntry) -> tuple[Registry, QueryTarget]:
    """Resolve a batch entry into a registry and target."""
    package = entry.get("package")
    registry = select_registry(
        entry["registry"], package=package, container=entry.get("container", False)
    )
    target = QueryTarget(
        owner=entry["owner"],
        repo=entry.get("repo") or "",
        package=package,
        owner_kind=OwnerKind.USER if entry.get("user") else OwnerKind.REPOSITORY,
    )
    return registry, target


def _failed_result(entry: BatchEntry, error: Exception) -> BadgeResult:
    return {
        "registry": entry.get("registry", ""),
        "target": "/".join(
            [entry.get("owner", ""), entry.get("repo") or "-", entry.get("package") or "-"]
        ),
        "count": None,
        "message": "",
        "color": "",
        "error": str(error),
        "path": None,
    }


def fetch_all_badges(
    entries: list[BatchEntry],
    output_dir: str | Path,
    policy: FallbackPolicy = FallbackPolicy.ABORT,
    label: str = DEFAULT_LABEL,
    color: str = DEFAULT_COLOR,
    compact: bool = False,
    timeout: float = DEFAULT_TIMEOUT,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> list[BadgeResult]:
    """Build and write badges for several targets in parallel.

    Each entry is independent. An entry whose count cannot be obtained under
    the given policy is reported with its error and no file is written.

    Args:
        entries: Badge requests, as loaded from a batch file.
        output_dir: Directory the badge files are written to.
        max_workers: Maximum number of parallel API requests.

    Returns:
        One result per entry, in input order.
    """
    token: str | None = None

    def build_one(entry: BatchEntry, client: httpx.Client) -> BadgeResult:
        try:
            registry, target = entry_to_request(entry)
            result, svg = build_badge(
                client, registry, target, policy, label, color, compact,
                token=token if registry.is_github else None,
            )
        except BadgeError as e:
            logger.error("%s", e)
            return _failed_result(entry, e)
        try:
            result["path"] = str(write_badge(svg, output_dir, target))
        except OSError as e:
            logger.error("Cannot write badge for %s: %s", target.describe(), e)
            return _failed_result(entry, e)
        return result

    # Read the token once up front; only GitHub entries fail without it
    if any(e.get("registry", "").startswith("github") for e in entries):
        try:
            token = get_github_token()
        except BadgeError as e:
            logger.warning("%s", e)

    with create_client(timeout) as client:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [executor.submit(build_one, entry, client) for entry in entries]
            return [future.result() for future in futures]
