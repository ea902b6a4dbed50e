"""Extract a download count from a registry response.

Every registry answers with a different JSON shape. Each one gets a field
path here, and the same rules decide when no count can be extracted:

- an empty or whitespace-only body
- a top-level "errors" field, even alongside "data"
- a missing path segment, a null value or an empty "nodes" list
- a terminal value that is not a non-negative integer

All of these raise NoDownloads rather than defaulting to zero, so callers can
tell "no such package" apart from a package nobody downloaded.
"""

import json
import logging
from collections.abc import Callable
from typing import Any

from .errors import NoDownloads, ParseError
from .types import MAX_DOWNLOAD_COUNT, OwnerKind, QueryTarget, RawResponse, Registry

logger = logging.getLogger("dlbadge")

# Path segments are object keys, or list indexes for ints
PathSegment = str | int

PACKAGE_PATH: tuple[PathSegment, ...] = (
    "data", "repository", "packages", "nodes", 0, "statistics", "downloadsTotalCount",
)
USER_PACKAGE_PATH: tuple[PathSegment, ...] = (
    "data", "user", "packages", "nodes", 0, "statistics", "downloadsTotalCount",
)
RELEASE_PATH: tuple[PathSegment, ...] = ("data", "repository", "releases", "totalCount")
CONTAINER_PATH: tuple[PathSegment, ...] = ("downloads",)
DOCKERHUB_PATH: tuple[PathSegment, ...] = ("pull_count",)
NPM_PATH: tuple[PathSegment, ...] = ("downloads",)


# Digits in 2**64 - 1; anything longer saturates without converting
_MAX_COUNT_DIGITS = 20


class _Missing(Exception):
    def __init__(self, reason: str) -> None:
        self.reason = reason


def format_path(path: tuple[PathSegment, ...]) -> str:
    """Render a path as "a.b[0].c"."""
    out = ""
    for segment in path:
        if isinstance(segment, int):
            out += f"[{segment}]"
        else:
            out += f".{segment}" if out else segment
    return out


def _walk(document: Any, path: tuple[PathSegment, ...]) -> Any:
    node = document
    for depth, segment in enumerate(path):
        where = format_path(path[: depth + 1])
        if isinstance(segment, int):
            if not isinstance(node, list):
                raise _Missing(f"expected a list at {where}")
            if len(node) <= segment:
                raise _Missing(f"no entry at {where}")
            node = node[segment]
        else:
            if not isinstance(node, dict) or segment not in node:
                raise _Missing(f"missing field {where}")
            node = node[segment]
        if node is None:
            raise _Missing(f"null at {where}")
    return node


def _parse_int(text: str) -> int:
    """Parse a JSON integer, saturating before int() hits its digit limit."""
    digits = text.lstrip("-")
    if len(digits) > _MAX_COUNT_DIGITS:
        return -1 if text.startswith("-") else MAX_DOWNLOAD_COUNT
    return int(text)


def to_download_count(value: Any) -> int | None:
    """Coerce a terminal JSON value into a download count.

    Only JSON integers qualify; booleans, floats and numeric strings do not.
    Returns None for anything negative or non-integral. Values beyond the
    unsigned 64-bit range saturate.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    if value < 0:
        return None
    return min(value, MAX_DOWNLOAD_COUNT)


def extract_path(
    document: Any,
    path: tuple[PathSegment, ...],
    registry: Registry,
    target: QueryTarget,
) -> int:
    """Follow path into document and return the count found there."""
    try:
        value = _walk(document, path)
    except _Missing as e:
        raise NoDownloads(registry, target, format_path(path), e.reason) from None

    count = to_download_count(value)
    if count is None:
        raise NoDownloads(
            registry,
            target,
            format_path(path),
            f"not a non-negative integer: {value!r}",
        )
    return count


def _package_path(target: QueryTarget) -> tuple[PathSegment, ...]:
    if target.owner_kind == OwnerKind.USER:
        return USER_PACKAGE_PATH
    return PACKAGE_PATH


Extractor = Callable[[Any, QueryTarget], int]

EXTRACTORS: dict[Registry, Extractor] = {
    Registry.GITHUB_PACKAGE: lambda doc, t: extract_path(
        doc, _package_path(t), Registry.GITHUB_PACKAGE, t
    ),
    Registry.GITHUB_RELEASE: lambda doc, t: extract_path(
        doc, RELEASE_PATH, Registry.GITHUB_RELEASE, t
    ),
    Registry.GITHUB_CONTAINER: lambda doc, t: extract_path(
        doc, CONTAINER_PATH, Registry.GITHUB_CONTAINER, t
    ),
    Registry.DOCKERHUB: lambda doc, t: extract_path(
        doc, DOCKERHUB_PATH, Registry.DOCKERHUB, t
    ),
    Registry.NPM: lambda doc, t: extract_path(doc, NPM_PATH, Registry.NPM, t),
}


def parse_document(raw: RawResponse, registry: Registry, target: QueryTarget) -> Any:
    """Decode a response body, refusing empty bodies and error documents."""
    if not raw.body.strip():
        raise NoDownloads(registry, target, reason="empty response body")

    try:
        document = json.loads(raw.body, parse_int=_parse_int)
    except ValueError as e:
        raise ParseError(
            f"{registry.value} {target.describe()}: invalid JSON from {raw.url or 'response'}: {e}",
            cause=e,
        ) from e

    if not isinstance(document, dict):
        raise NoDownloads(
            registry, target, reason=f"expected a JSON object, got {type(document).__name__}"
        )

    if "errors" in document:
        logger.debug("GraphQL errors: %s", document["errors"])
        raise NoDownloads(registry, target, "errors", "response contains errors")

    return document


def extract(raw: RawResponse, registry: Registry, target: QueryTarget) -> int:
    """Extract the download count from a raw registry response.

    Raises:
        NoDownloads: if no count can be extracted.
        ParseError: if the body is not valid JSON.
    """
    document = parse_document(raw, registry, target)
    return EXTRACTORS[registry](document, target)
