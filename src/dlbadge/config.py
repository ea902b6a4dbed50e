"""Configuration: credentials from the environment and batch files."""

import json
import os
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError, UsageError
from .types import BatchEntry

GITHUB_TOKEN_ENV = "GITHUB_TOKEN"
DEFAULT_OUTPUT_DIR = "badges"
DEFAULT_BATCH_FILE = "badges.yml"

_ENTRY_KEYS = {"registry", "owner", "repo", "package", "user", "container"}


def get_github_token() -> str:
    """Return the GitHub bearer token.

    Raises:
        ConfigError: if the environment variable is unset or empty.
    """
    token = os.environ.get(GITHUB_TOKEN_ENV, "").strip()
    if not token:
        raise ConfigError(f"{GITHUB_TOKEN_ENV} is not set")
    return token


def _to_entry(item: Any, index: int) -> BatchEntry:
    if not isinstance(item, dict):
        raise UsageError(f"Entry {index}: expected a mapping, got {type(item).__name__}")

    unknown = set(item) - _ENTRY_KEYS
    if unknown:
        raise UsageError(f"Entry {index}: unknown keys {', '.join(sorted(unknown))}")

    for key in ("registry", "owner"):
        if not item.get(key):
            raise UsageError(f"Entry {index}: '{key}' is required")

    entry: BatchEntry = {
        "registry": str(item["registry"]),
        "owner": str(item["owner"]),
        "repo": str(item.get("repo") or ""),
        "package": str(item["package"]) if item.get("package") else None,
        "user": bool(item.get("user", False)),
        "container": bool(item.get("container", False)),
    }
    return entry


def load_batch_file(file_path: str) -> list[BatchEntry]:
    """Load badge requests from a file (YAML or JSON).

    Supports:
    - YAML (.yml, .yaml): expects a 'badges' key with a list of entries
    - JSON (.json): expects a list of entries or an object with 'badges' key

    Each entry has 'registry' and 'owner', plus optional 'repo', 'package',
    'user' and 'container'.
    """
    path = Path(file_path)
    suffix = path.suffix.lower()

    with open(file_path) as f:
        content = f.read()

    try:
        if suffix == ".json":
            data = json.loads(content)
        else:
            data = yaml.safe_load(content)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise UsageError(f"Cannot parse {file_path}: {e}") from e

    if isinstance(data, dict):
        data = data.get("badges") or []
    if data is None:
        data = []
    if not isinstance(data, list):
        raise UsageError(f"{file_path}: expected a list of badges")

    return [_to_entry(item, i) for i, item in enumerate(data, 1)]
