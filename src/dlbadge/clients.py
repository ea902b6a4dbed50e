"""HTTP clients for the supported registries.

Each fetch performs exactly one request and returns the raw response; turning
the body into a count is the normalizer's job.
"""

import logging
from collections.abc import Callable
from urllib.parse import quote

import httpx

from . import __version__
from .errors import ConfigError, NetworkError
from .types import OwnerKind, QueryTarget, RawResponse, Registry

logger = logging.getLogger("dlbadge")

GITHUB_GRAPHQL_URL = "https://api.github.com/graphql"
GITHUB_API_URL = "https://api.github.com"
DOCKERHUB_API_URL = "https://hub.docker.com"
NPM_API_URL = "https://api.npmjs.org"

USER_AGENT = f"dlbadge/{__version__}"

# Seconds before a request is abandoned
DEFAULT_TIMEOUT = 30.0

_PACKAGE_FIELDS = """
      packages(first: 1, names: [$package]) {
        nodes {
          name
          statistics {
            downloadsTotalCount
          }
        }
      }"""

REPOSITORY_PACKAGE_QUERY = (
    "query($owner: String!, $repo: String!, $package: String!) {\n"
    "  repository(owner: $owner, name: $repo) {"
    + _PACKAGE_FIELDS
    + "\n  }\n}"
)

USER_PACKAGE_QUERY = (
    "query($owner: String!, $package: String!) {\n"
    "  user(login: $owner) {"
    + _PACKAGE_FIELDS
    + "\n  }\n}"
)

RELEASE_QUERY = """query($owner: String!, $repo: String!) {
  repository(owner: $owner, name: $repo) {
    releases(last: 1) {
      totalCount
      nodes {
        tagName
      }
    }
  }
}"""


def create_client(timeout: float = DEFAULT_TIMEOUT) -> httpx.Client:
    """Create the HTTP client shared by all fetches of one run."""
    return httpx.Client(
        headers={"User-Agent": USER_AGENT},
        timeout=timeout,
    )


def build_graphql_query(
    target: QueryTarget, registry: Registry | None = None
) -> tuple[str, dict[str, str]]:
    """Build the GraphQL query and variables for a GitHub target.

    With a package, asks for the package's total download statistic (first
    match only), scoped to the repository or to the user login. Without one,
    asks for the repository's latest release and total release count.
    Release mode ignores any package on the target.
    """
    if registry is None:
        registry = Registry.GITHUB_PACKAGE if target.package else Registry.GITHUB_RELEASE

    if registry != Registry.GITHUB_RELEASE:
        if target.owner_kind == OwnerKind.USER:
            return USER_PACKAGE_QUERY, {
                "owner": target.owner,
                "package": target.package,
            }
        return REPOSITORY_PACKAGE_QUERY, {
            "owner": target.owner,
            "repo": target.repo,
            "package": target.package,
        }
    return RELEASE_QUERY, {"owner": target.owner, "repo": target.repo}


def _auth_headers(token: str | None) -> dict[str, str]:
    if not token:
        raise ConfigError("GITHUB_TOKEN is not set")
    return {"Authorization": f"Bearer {token}"}


def _send(
    client: httpx.Client, registry: Registry, target: QueryTarget, request: httpx.Request
) -> RawResponse:
    """Send a request once and wrap the outcome."""
    logger.debug("%s %s", request.method, request.url)
    try:
        response = client.send(request)
    except httpx.TransportError as e:
        raise NetworkError(
            f"{registry.value} {target.describe()}: {type(e).__name__}: {e}",
            cause=e,
        ) from e

    logger.debug("Response status: %s", response.status_code)
    if not response.is_success:
        raise NetworkError(
            f"{registry.value} {target.describe()}: "
            f"HTTP {response.status_code} from {request.url}",
            status_code=response.status_code,
        )

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Response body: %s", response.text)
    return RawResponse(
        status_code=response.status_code,
        body=response.content,
        url=str(request.url),
    )


def fetch_github(
    client: httpx.Client,
    target: QueryTarget,
    token: str | None,
    url: str = GITHUB_GRAPHQL_URL,
    registry: Registry = Registry.GITHUB_PACKAGE,
) -> RawResponse:
    """POST a package or release query to the GitHub GraphQL API."""
    headers = _auth_headers(token)
    headers["Content-Type"] = "application/json"
    query, variables = build_graphql_query(target, registry)
    request = client.build_request(
        "POST", url, headers=headers, json={"query": query, "variables": variables}
    )
    return _send(client, registry, target, request)


def fetch_github_container(
    client: httpx.Client,
    target: QueryTarget,
    token: str | None,
    base_url: str = GITHUB_API_URL,
) -> RawResponse:
    """GET a container package from the GitHub REST API."""
    headers = _auth_headers(token)
    owner = quote(target.owner, safe="")
    package = quote(target.package or "", safe="")
    url = f"{base_url}/users/{owner}/packages/container/{package}"
    request = client.build_request("GET", url, headers=headers)
    return _send(client, Registry.GITHUB_CONTAINER, target, request)


def fetch_dockerhub(
    client: httpx.Client, target: QueryTarget, base_url: str = DOCKERHUB_API_URL
) -> RawResponse:
    """GET repository details from Docker Hub."""
    owner = quote(target.owner, safe="")
    repo = quote(target.repo, safe="")
    url = f"{base_url}/v2/repositories/{owner}/{repo}/"
    request = client.build_request("GET", url)
    return _send(client, Registry.DOCKERHUB, target, request)


def fetch_npm(
    client: httpx.Client, target: QueryTarget, base_url: str = NPM_API_URL
) -> RawResponse:
    """GET last-month downloads for an npm package."""
    # Scoped names keep their "@scope/" prefix in the path
    package = quote(target.package or "", safe="@/")
    url = f"{base_url}/downloads/point/last-month/{package}"
    request = client.build_request("GET", url)
    return _send(client, Registry.NPM, target, request)


_Fetcher = Callable[[httpx.Client, QueryTarget, str | None], RawResponse]

FETCHERS: dict[Registry, _Fetcher] = {
    Registry.GITHUB_PACKAGE: lambda c, t, tok: fetch_github(
        c, t, tok, registry=Registry.GITHUB_PACKAGE
    ),
    Registry.GITHUB_RELEASE: lambda c, t, tok: fetch_github(
        c, t, tok, registry=Registry.GITHUB_RELEASE
    ),
    Registry.GITHUB_CONTAINER: fetch_github_container,
    Registry.DOCKERHUB: lambda c, t, tok: fetch_dockerhub(c, t),
    Registry.NPM: lambda c, t, tok: fetch_npm(c, t),
}


def fetch(
    client: httpx.Client,
    registry: Registry,
    target: QueryTarget,
    token: str | None = None,
) -> RawResponse:
    """Fetch the raw response for a target from its registry."""
    logger.info("Fetching stats for %s %s", registry.value, target.describe())
    return FETCHERS[registry](client, target, token)
