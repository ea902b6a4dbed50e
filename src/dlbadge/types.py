"""Type definitions for dlbadge."""

from dataclasses import dataclass
from enum import Enum
from typing import TypedDict

# Download counts are reported as unsigned 64-bit values upstream
MAX_DOWNLOAD_COUNT = 2**64 - 1


class Registry(str, Enum):
    """Supported download-count backends."""

    GITHUB_PACKAGE = "github-package"
    GITHUB_RELEASE = "github-release"
    GITHUB_CONTAINER = "github-container"
    DOCKERHUB = "dockerhub"
    NPM = "npm"

    @property
    def is_github(self) -> bool:
        return self in (
            Registry.GITHUB_PACKAGE,
            Registry.GITHUB_RELEASE,
            Registry.GITHUB_CONTAINER,
        )


class OwnerKind(str, Enum):
    """Scope used to look up a GitHub package."""

    REPOSITORY = "repository"
    USER = "user"


class FallbackPolicy(str, Enum):
    """What the caller does when no count can be obtained."""

    ABORT = "abort"
    ZERO = "zero"
    NOT_AVAILABLE = "na"


@dataclass(frozen=True)
class QueryTarget:
    """The owner/repository/package triple to count downloads for."""

    owner: str
    repo: str = ""
    package: str | None = None
    owner_kind: OwnerKind = OwnerKind.REPOSITORY

    def describe(self) -> str:
        parts = [self.owner, self.repo or "-", self.package or "-"]
        return "/".join(parts)


@dataclass(frozen=True)
class RawResponse:
    """Undecoded response from a provider."""

    status_code: int
    body: bytes
    url: str = ""


class Badge(TypedDict):
    """Inputs to the badge renderer."""

    label: str
    message: str
    color: str


class BadgeResult(TypedDict):
    """Outcome of building one badge."""

    registry: str
    target: str
    count: int | None
    message: str
    color: str
    error: str | None
    path: str | None


class BatchEntry(TypedDict, total=False):
    """One badge request read from a batch file."""

    registry: str
    owner: str
    repo: str
    package: str | None
    user: bool
    container: bool
