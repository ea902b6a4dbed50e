"""Exception hierarchy for dlbadge.

Every failure propagates to the top-level caller; nothing here is retried.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .types import QueryTarget, Registry


class BadgeError(Exception):
    """Base class for all dlbadge errors."""


class UsageError(BadgeError):
    """Invalid arguments, detected before any network activity."""


class ConfigError(BadgeError):
    """Missing or unusable configuration, such as the GitHub token."""


class UnknownRegistry(BadgeError):
    """Requested registry name is not one of the supported backends."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown registry: {name!r}")


class NetworkError(BadgeError):
    """Transport failure or non-success HTTP status."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.status_code = status_code
        self.cause = cause
        super().__init__(message)


class ParseError(BadgeError):
    """Response body is not valid JSON."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        self.cause = cause
        super().__init__(message)


class NoDownloads(BadgeError):
    """Well-formed response with no extractable download count.

    Distinct from a count of zero: callers decide how to present it.
    """

    def __init__(
        self,
        registry: "Registry",
        target: "QueryTarget",
        path: str = "",
        reason: str = "no download data",
    ) -> None:
        self.registry = registry
        self.target = target
        self.path = path
        self.reason = reason
        where = f" at {path}" if path else ""
        super().__init__(
            f"No downloads for {registry.value} {target.describe()}: {reason}{where}"
        )


# Failures a caller may replace with a sentinel badge
FetchFailure = (NetworkError, ParseError, NoDownloads)
