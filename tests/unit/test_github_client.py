"""Unit tests for the GitHub REST and GraphQL client."""

from __future__ import annotations

import json
import typing as typ

import httpx
import pytest

from githunter.github import (
    GitHubAPIError,
    GitHubConfig,
    GitHubResponseShapeError,
    GitHubRestClient,
    ProfileNotFoundError,
    RateLimitedError,
)
from tests.helpers.github_payloads import (
    contents_payload,
    repo_payload,
    tree_payload,
    user_payload,
)

_API = "https://api.github.test"
_GRAPHQL = "https://api.github.test/graphql"

type Handler = typ.Callable[[httpx.Request], httpx.Response]


def _make_client(
    handler: Handler, *, token: str | None = "ghp_test"
) -> tuple[GitHubRestClient, list[httpx.Request]]:
    requests: list[httpx.Request] = []

    def _record(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(_record))
    client = GitHubRestClient(
        GitHubConfig(token=token, api_url=_API, graphql_endpoint=_GRAPHQL),
        http_client=http_client,
    )
    return client, requests


class TestPrimaryFetches:
    """Tests for the profile and repository list reads."""

    @pytest.mark.asyncio
    async def test_get_user_returns_payload(self) -> None:
        """A 200 profile is returned as a dict."""
        client, requests = _make_client(
            lambda _r: httpx.Response(200, json=user_payload("torvalds"))
        )

        payload = await client.get_user("torvalds")

        assert payload["login"] == "torvalds", "expected the login"
        assert str(requests[0].url) == f"{_API}/users/torvalds", "wrong URL"

    @pytest.mark.asyncio
    async def test_missing_user_raises_not_found(self) -> None:
        """GitHub 404 becomes ProfileNotFoundError."""
        client, _ = _make_client(
            lambda _r: httpx.Response(404, json={"message": "Not Found"})
        )

        with pytest.raises(ProfileNotFoundError, match="ghost"):
            await client.get_user("ghost")

    @pytest.mark.asyncio
    async def test_rate_limit_message_is_passed_through(self) -> None:
        """GitHub's rate-limit message survives verbatim."""
        message = "API rate limit exceeded for 203.0.113.7."
        client, _ = _make_client(
            lambda _r: httpx.Response(403, json={"message": message})
        )

        with pytest.raises(RateLimitedError) as excinfo:
            await client.list_repositories("torvalds")

        assert str(excinfo.value) == message, "expected GitHub's message verbatim"
        assert excinfo.value.status_code == 403, "expected status 403"

    @pytest.mark.asyncio
    async def test_profile_without_login_is_a_shape_error(self) -> None:
        """A profile body without ``login`` is rejected."""
        client, _ = _make_client(lambda _r: httpx.Response(200, json={"id": 1}))

        with pytest.raises(GitHubResponseShapeError, match="login"):
            await client.get_user("torvalds")

    @pytest.mark.asyncio
    async def test_network_failure_is_wrapped(self) -> None:
        """Transport errors become GitHubAPIError."""

        def _refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        client, _ = _make_client(_refuse)

        with pytest.raises(GitHubAPIError, match="network error"):
            await client.get_user("torvalds")

    @pytest.mark.asyncio
    async def test_list_repositories_follows_next_links(self) -> None:
        """Pagination follows the Link header until exhausted."""
        page_two = f"{_API}/user/1/repos?per_page=100&type=owner&page=2"

        def _pages(request: httpx.Request) -> httpx.Response:
            if request.url.params.get("page") == "2":
                return httpx.Response(200, json=[repo_payload("b")])
            return httpx.Response(
                200,
                json=[repo_payload("a")],
                headers={"Link": f'<{page_two}>; rel="next"'},
            )

        client, requests = _make_client(_pages)

        repos = await client.list_repositories("octocat")

        assert [repo["name"] for repo in repos] == ["a", "b"], "expected both pages"
        assert requests[0].url.params["per_page"] == "100", "expected 100 per page"
        assert len(requests) == 2, "expected two page requests"


class TestPinned:
    """Tests for the GraphQL pinned repository lookup."""

    @pytest.mark.asyncio
    async def test_pinned_names_in_order(self) -> None:
        """Pinned names are returned in pin order."""
        body = {
            "data": {
                "user": {
                    "pinnedItems": {"nodes": [{"name": "linux"}, {"name": "subsurface"}]}
                }
            }
        }
        client, requests = _make_client(lambda _r: httpx.Response(200, json=body))

        names = await client.get_pinned_repository_names("torvalds")

        assert names == ["linux", "subsurface"], "expected pin order"
        sent = json.loads(requests[0].content)
        assert sent["variables"] == {"login": "torvalds"}, "expected login variable"
        assert requests[0].headers["Authorization"] == "Bearer ghp_test", (
            "expected bearer token"
        )

    @pytest.mark.asyncio
    async def test_anonymous_client_skips_graphql(self) -> None:
        """Without a token no GraphQL request is made."""
        client, requests = _make_client(
            lambda _r: httpx.Response(500), token=None
        )

        assert await client.get_pinned_repository_names("torvalds") == [], (
            "expected no pinned names"
        )
        assert requests == [], "expected no request"

    @pytest.mark.asyncio
    async def test_graphql_errors_raise(self) -> None:
        """GraphQL ``errors`` payloads raise GitHubAPIError."""
        client, _ = _make_client(
            lambda _r: httpx.Response(200, json={"errors": [{"message": "bad"}]})
        )

        with pytest.raises(GitHubAPIError, match="GraphQL"):
            await client.get_pinned_repository_names("torvalds")


class TestSecondaryFetches:
    """Tests for enrichment and sampling reads."""

    @pytest.mark.asyncio
    async def test_list_pull_requests_requests_all_states(self) -> None:
        """Pull requests are listed in every state, 30 per page."""
        client, requests = _make_client(
            lambda _r: httpx.Response(200, json=[{"number": 1}])
        )

        pulls = await client.list_pull_requests("octocat", "hello")

        assert len(pulls) == 1, "expected one pull request"
        assert requests[0].url.params["state"] == "all", "expected state=all"
        assert requests[0].url.params["per_page"] == "30", "expected 30 per page"

    @pytest.mark.asyncio
    async def test_enrichment_404_is_plain_api_error(self) -> None:
        """Secondary failures are GitHubAPIError, never ProfileNotFoundError."""
        client, _ = _make_client(lambda _r: httpx.Response(404))

        with pytest.raises(GitHubAPIError) as excinfo:
            await client.list_commits("octocat", "empty")

        assert not isinstance(excinfo.value, ProfileNotFoundError), (
            "expected a plain API error"
        )

    @pytest.mark.asyncio
    async def test_get_tree_is_recursive(self) -> None:
        """Trees are fetched recursively for the given ref."""
        client, requests = _make_client(
            lambda _r: httpx.Response(200, json={"tree": tree_payload("a.py", "src/")})
        )

        tree = await client.get_tree("octocat", "hello", "trunk")

        assert [entry["type"] for entry in tree] == ["blob", "tree"], "wrong tree"
        assert requests[0].url.path.endswith("/git/trees/trunk"), "wrong ref"
        assert requests[0].url.params["recursive"] == "1", "expected recursive"

    @pytest.mark.asyncio
    async def test_get_file_content_decodes_base64(self) -> None:
        """Inline base64 content is decoded as UTF-8."""
        client, _ = _make_client(
            lambda _r: httpx.Response(200, json=contents_payload("print('hi')\n"))
        )

        assert await client.get_file_content("o", "r", "main.py") == "print('hi')\n", (
            "expected decoded text"
        )

    @pytest.mark.asyncio
    async def test_get_file_content_without_inline_body(self) -> None:
        """Large files without inline content yield None."""
        client, _ = _make_client(
            lambda _r: httpx.Response(200, json={"encoding": "none", "content": ""})
        )

        assert await client.get_file_content("o", "r", "big.bin") is None, (
            "expected None for non-inline content"
        )


class TestPathEscaping:
    """Tests for caller-supplied values placed in URL paths."""

    @pytest.mark.asyncio
    async def test_username_cannot_inject_a_query(self) -> None:
        """A ``?`` in a username stays inside the path segment."""
        client, requests = _make_client(
            lambda _r: httpx.Response(200, json=user_payload("torvalds"))
        )

        await client.get_user("torvalds?x")

        assert requests[0].url.raw_path == b"/users/torvalds%3Fx", "wrong path"
        assert requests[0].url.query == b"", "expected no query string"

    @pytest.mark.asyncio
    async def test_file_paths_are_escaped(self) -> None:
        """``#`` and ``?`` in tree paths are escaped; slashes are kept."""
        client, requests = _make_client(
            lambda _r: httpx.Response(200, json=contents_payload("x = 1\n"))
        )

        text = await client.get_file_content("o", "r", "docs/a#b?.py")

        assert text == "x = 1\n", "expected the file text"
        assert requests[0].url.raw_path == b"/repos/o/r/contents/docs/a%23b%3F.py", (
            "wrong path"
        )
