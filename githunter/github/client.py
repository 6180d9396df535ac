"""GitHub REST and GraphQL client used by the aggregator and the sampler."""

from __future__ import annotations

import base64
import binascii
import dataclasses
import typing as typ
from urllib.parse import quote

import httpx

from githunter.common.env import (
    read_optional_str,
    read_positive_float,
    read_positive_int,
    read_str,
)

from .errors import GitHubAPIError, GitHubResponseShapeError

_HTTP_ERROR_STATUS_THRESHOLD = 400
_REPOS_PER_PAGE = 100
_ACTIVITY_PER_PAGE = 30
_PINNED_LIMIT = 6

_PINNED_QUERY = """
query($login: String!) {
  user(login: $login) {
    pinnedItems(first: %d, types: REPOSITORY) {
      nodes { ... on Repository { name } }
    }
  }
}
""" % _PINNED_LIMIT  # noqa: UP031 - GraphQL braces make f-strings awkward

type JSONObject = dict[str, typ.Any]


def _segment(value: str) -> str:
    """Escape *value* as a single URL path segment."""
    return quote(value, safe="")


def _repo_path(owner: str, name: str) -> str:
    return f"/repos/{_segment(owner)}/{_segment(name)}"


class GitHubProfileClient(typ.Protocol):
    """Interface for the GitHub reads a profile analysis needs."""

    async def get_user(self, username: str) -> JSONObject:
        """Return the public profile for *username*."""
        ...

    async def list_repositories(self, username: str) -> list[JSONObject]:
        """Return every public repository owned by *username*."""
        ...

    async def get_pinned_repository_names(self, login: str) -> list[str]:
        """Return pinned repository names in pin order."""
        ...

    async def list_commits(self, owner: str, name: str) -> list[JSONObject]:
        """Return the most recent commits on the default branch."""
        ...

    async def list_pull_requests(self, owner: str, name: str) -> list[JSONObject]:
        """Return the most recent pull requests in any state."""
        ...

    async def get_tree(self, owner: str, name: str, ref: str) -> list[JSONObject]:
        """Return the recursive git tree entries for *ref*."""
        ...

    async def get_file_content(self, owner: str, name: str, path: str) -> str | None:
        """Return decoded file contents, or ``None`` when not inline base64."""
        ...


@dataclasses.dataclass(frozen=True, slots=True)
class GitHubConfig:
    """Configuration for the GitHub API client.

    ``token`` is optional: anonymous requests work but receive a much lower
    rate-limit ceiling and cannot query pinned repositories.
    """

    token: str | None = None
    api_url: str = "https://api.github.com"
    graphql_endpoint: str = "https://api.github.com/graphql"
    timeout_s: float = 20.0
    user_agent: str = "githunter/0.1"
    max_repo_pages: int = 10

    @classmethod
    def from_env(cls) -> GitHubConfig:
        """Build configuration from ``GITHUNTER_GITHUB_*`` variables."""
        return cls(
            token=read_optional_str("GITHUNTER_GITHUB_TOKEN"),
            api_url=read_str("GITHUNTER_GITHUB_API_URL", "https://api.github.com"),
            graphql_endpoint=read_str(
                "GITHUNTER_GITHUB_GRAPHQL_URL", "https://api.github.com/graphql"
            ),
            timeout_s=read_positive_float("GITHUNTER_GITHUB_TIMEOUT", 20.0),
            max_repo_pages=read_positive_int("GITHUNTER_GITHUB_MAX_REPO_PAGES", 10),
        )


def _error_message(response: httpx.Response) -> str | None:
    """Return GitHub's ``message`` field from an error body, if any."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str):
            return message
    return None


def _as_object_list(payload: object, *, field: str) -> list[JSONObject]:
    if not isinstance(payload, list):
        raise GitHubResponseShapeError.unexpected(field, "a list")
    return [entry for entry in payload if isinstance(entry, dict)]


def _pinned_names(payload: object) -> list[str]:
    if not isinstance(payload, dict):
        raise GitHubResponseShapeError.missing("response")
    errors = payload.get("errors")
    if errors:
        raise GitHubAPIError.graphql_errors(errors)
    user = (payload.get("data") or {}).get("user") or {}
    nodes = (user.get("pinnedItems") or {}).get("nodes") or []
    return [
        node["name"]
        for node in nodes
        if isinstance(node, dict) and isinstance(node.get("name"), str)
    ]


class GitHubRestClient:
    """httpx implementation of :class:`GitHubProfileClient`."""

    def __init__(
        self,
        config: GitHubConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client, creating an owned httpx client if needed."""
        self._config = config
        self._owns_client = http_client is None
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": config.user_agent,
        }
        if config.token:
            headers["Authorization"] = f"Bearer {config.token}"
        self._client = http_client or httpx.AsyncClient(
            timeout=config.timeout_s,
            headers=headers,
        )

    @property
    def has_token(self) -> bool:
        """Return whether requests are authenticated."""
        return bool(self._config.token)

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def _send(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, typ.Any] | None = None,
        json: JSONObject | None = None,
    ) -> httpx.Response:
        try:
            return await self._client.request(method, url, params=params, json=json)
        except httpx.RequestError as exc:
            raise GitHubAPIError.network_error(str(exc)) from exc

    async def _get_secondary(
        self, path: str, params: dict[str, typ.Any] | None = None
    ) -> object:
        """GET an enrichment resource; any failure is a plain ``GitHubAPIError``."""
        url = f"{self._config.api_url}{path}"
        response = await self._send("GET", url, params=params)
        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise GitHubAPIError.http_error(response.status_code, url)
        return response.json()

    async def _get_primary(
        self,
        url: str,
        *,
        resource: str,
        params: dict[str, typ.Any] | None = None,
    ) -> httpx.Response:
        """GET a primary resource, mapping failures onto typed errors."""
        response = await self._send("GET", url, params=params)
        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise GitHubAPIError.from_status(
                response.status_code,
                url=url,
                message=_error_message(response),
                resource=resource,
            )
        return response

    async def get_user(self, username: str) -> JSONObject:
        """Return the public profile for *username*.

        Raises
        ------
        ProfileNotFoundError
            If GitHub answers 404.
        RateLimitedError
            If GitHub answers 403 or 429.

        """
        url = f"{self._config.api_url}/users/{_segment(username)}"
        response = await self._get_primary(url, resource=username)
        payload = response.json()
        if not isinstance(payload, dict) or not isinstance(payload.get("login"), str):
            raise GitHubResponseShapeError.missing("login")
        return payload

    async def list_repositories(self, username: str) -> list[JSONObject]:
        """Return every public repository of *username*, following pagination.

        At most ``max_repo_pages`` pages of 100 are read.
        """
        url: str | None = f"{self._config.api_url}/users/{_segment(username)}/repos"
        params: dict[str, typ.Any] | None = {
            "per_page": _REPOS_PER_PAGE,
            "type": "owner",
        }
        repositories: list[JSONObject] = []
        pages = 0
        while url is not None and pages < self._config.max_repo_pages:
            response = await self._get_primary(url, resource=username, params=params)
            repositories.extend(_as_object_list(response.json(), field="repos"))
            pages += 1
            # The next link already carries the query string.
            url = response.links.get("next", {}).get("url")
            params = None
        return repositories

    async def get_pinned_repository_names(self, login: str) -> list[str]:
        """Return pinned repository names in pin order.

        GraphQL requires authentication, so anonymous clients return an
        empty list without issuing a request.
        """
        if not self.has_token:
            return []
        response = await self._send(
            "POST",
            self._config.graphql_endpoint,
            json={"query": _PINNED_QUERY, "variables": {"login": login}},
        )
        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise GitHubAPIError.http_error(
                response.status_code, self._config.graphql_endpoint
            )
        return _pinned_names(response.json())

    async def list_commits(self, owner: str, name: str) -> list[JSONObject]:
        """Return up to 30 recent commits on the default branch."""
        payload = await self._get_secondary(
            f"{_repo_path(owner, name)}/commits",
            {"per_page": _ACTIVITY_PER_PAGE},
        )
        return _as_object_list(payload, field="commits")

    async def list_pull_requests(self, owner: str, name: str) -> list[JSONObject]:
        """Return up to 30 recent pull requests in any state."""
        payload = await self._get_secondary(
            f"{_repo_path(owner, name)}/pulls",
            {"state": "all", "per_page": _ACTIVITY_PER_PAGE},
        )
        return _as_object_list(payload, field="pulls")

    async def get_tree(self, owner: str, name: str, ref: str) -> list[JSONObject]:
        """Return the recursive tree for *ref*."""
        payload = await self._get_secondary(
            f"{_repo_path(owner, name)}/git/trees/{quote(ref)}",
            {"recursive": "1"},
        )
        if not isinstance(payload, dict):
            raise GitHubResponseShapeError.missing("tree")
        return _as_object_list(payload.get("tree", []), field="tree")

    async def get_file_content(self, owner: str, name: str, path: str) -> str | None:
        """Return the UTF-8 text of *path*, or ``None`` if not inline base64."""
        payload = await self._get_secondary(
            f"{_repo_path(owner, name)}/contents/{quote(path)}"
        )
        if not isinstance(payload, dict):
            return None
        if payload.get("encoding") != "base64" or not payload.get("content"):
            return None
        try:
            raw = base64.b64decode(payload["content"])
        except (binascii.Error, ValueError):
            return None
        return raw.decode("utf-8", errors="replace")


__all__ = ["GitHubConfig", "GitHubProfileClient", "GitHubRestClient", "JSONObject"]
