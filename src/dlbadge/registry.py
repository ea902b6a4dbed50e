"""Registry selection and query target validation."""

from .errors import UnknownRegistry, UsageError
from .types import QueryTarget, Registry

# Family name accepted on the command line for the three GitHub modes
GITHUB = "github"

_NEEDS_PACKAGE = (Registry.GITHUB_PACKAGE, Registry.GITHUB_CONTAINER, Registry.NPM)
_NEEDS_REPO = (
    Registry.GITHUB_PACKAGE,
    Registry.GITHUB_RELEASE,
    Registry.GITHUB_CONTAINER,
    Registry.DOCKERHUB,
)


def select_registry(
    name: str, package: str | None = None, container: bool = False
) -> Registry:
    """Map a registry name to a Registry.

    "github" picks a mode from the optional inputs: a container path wins,
    then a package name, otherwise the release count. Any exact Registry
    value is also accepted. Matching is case-sensitive.

    Raises:
        UnknownRegistry: if the name matches nothing.
    """
    if name == GITHUB:
        if container:
            return Registry.GITHUB_CONTAINER
        if package:
            return Registry.GITHUB_PACKAGE
        return Registry.GITHUB_RELEASE

    for registry in Registry:
        if registry.value == name:
            return registry

    raise UnknownRegistry(name)


def registry_names() -> list[str]:
    """Names accepted by select_registry, for help text."""
    return [GITHUB] + [r.value for r in Registry]


def validate_target(registry: Registry, target: QueryTarget) -> None:
    """Check that the target carries what the registry needs.

    Raises:
        UsageError: if a required field is missing.
    """
    if not target.owner:
        raise UsageError(f"{registry.value}: owner is required")
    if registry in _NEEDS_PACKAGE and not target.package:
        raise UsageError(f"{registry.value}: package is required")
    if registry in _NEEDS_REPO and not target.repo:
        raise UsageError(f"{registry.value}: repo is required")
