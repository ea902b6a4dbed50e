"""Utility functions for dlbadge."""

import re
from pathlib import Path

from .types import QueryTarget

# -----------------------------------------------------------------------------
# Name Validation Constants
# -----------------------------------------------------------------------------

# Owner, repository and package names across GitHub, Docker Hub and npm
# - Must start with alphanumeric, "@" (npm scope) or "_"
# - Can contain alphanumeric, hyphens, underscores, periods and one "/" for scopes
# - Max 214 characters (npm's limit, the loosest of the three)
_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9@_][a-zA-Z0-9._~-]*(/[a-zA-Z0-9._~-]+)?$")
_MAX_NAME_LENGTH = 214

# -----------------------------------------------------------------------------
# Badge File Constants
# -----------------------------------------------------------------------------

PLACEHOLDER_PACKAGE = "unknown"
BADGE_SUFFIX = "-downloads.svg"

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9._@-]")


def validate_name(name: str, kind: str = "name") -> tuple[bool, str]:
    """Validate an owner, repository or package name.

    Args:
        name: Name to validate.
        kind: What the name is, used in the error message.

    Returns:
        Tuple of (is_valid, error_message). If valid, error_message is empty.
    """
    if not name:
        return False, f"{kind.capitalize()} cannot be empty"

    if len(name) > _MAX_NAME_LENGTH:
        return False, f"{kind.capitalize()} exceeds {_MAX_NAME_LENGTH} characters"

    if not _NAME_PATTERN.match(name):
        return False, (
            f"{kind.capitalize()} '{name}' must start with a letter, digit, '@' or '_' "
            "and contain only letters, numbers, hyphens, underscores, periods or '~'"
        )

    return True, ""


def _safe_component(value: str) -> str:
    return _UNSAFE_FILENAME_CHARS.sub("_", value)


def badge_filename(target: QueryTarget) -> str:
    """Deterministic file name for a target's badge.

    Examples: owner-repo-pkg-downloads.svg, owner-repo-unknown-downloads.svg
    """
    parts = [
        target.owner,
        target.repo or PLACEHOLDER_PACKAGE,
        target.package or PLACEHOLDER_PACKAGE,
    ]
    return "-".join(_safe_component(p) for p in parts) + BADGE_SUFFIX


def write_badge(svg: str, output_dir: str | Path, target: QueryTarget) -> Path:
    """Write a badge into output_dir, creating it if needed."""
    directory = Path(output_dir)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / badge_filename(target)
    path.write_text(svg, encoding="utf-8")
    return path
