"""Report structures produced by the profile aggregator.

The field names follow GitHub's REST vocabulary (``stargazers_count``,
``pushed_at``) so the JSON report stays familiar to clients that already
consume GitHub payloads.
"""

from __future__ import annotations

import typing as typ

import msgspec

from githunter.github.errors import GitHubResponseShapeError


class ProfileSummary(msgspec.Struct, kw_only=True, frozen=True):
    """Public profile fields carried into the report."""

    login: str
    name: str | None = None
    avatar_url: str | None = None
    html_url: str | None = None
    bio: str | None = None
    company: str | None = None
    location: str | None = None
    blog: str | None = None
    public_repos: int = 0
    followers: int = 0
    following: int = 0
    created_at: str | None = None


class Enrichment(msgspec.Struct, kw_only=True, frozen=True):
    """Best-effort activity counts for one repository.

    Only attached when both the commit and the pull request fetch succeeded;
    an item without enrichment has unknown activity, not zero activity.
    """

    commit_count: int
    pull_count: int


class Item(msgspec.Struct, kw_only=True, frozen=True):
    """A repository owned by the profile."""

    name: str
    owner: str
    language: str | None = None
    fork: bool = False
    stargazers_count: int = 0
    forks_count: int = 0
    watchers_count: int = 0
    size: int = 0
    pushed_at: str | None = None
    description: str | None = None
    default_branch: str | None = None
    html_url: str | None = None
    enrichment: Enrichment | None = None


class Enriched(msgspec.Struct, kw_only=True, frozen=True, tag="enriched"):
    """Enrichment outcome for an item whose activity was fetched."""

    item: str
    commit_count: int
    pull_count: int


class Skipped(msgspec.Struct, kw_only=True, frozen=True, tag="skipped"):
    """Enrichment outcome for an item whose activity fetch failed."""

    item: str
    reason: str


EnrichmentOutcome: typ.TypeAlias = Enriched | Skipped


class Stats(msgspec.Struct, kw_only=True, frozen=True):
    """Aggregates derived purely from the report's items.

    Attributes
    ----------
    language
        Number of items per non-null primary language.
    project_type
        Item descriptions in report order.
    fork_count
        Number of items that are themselves forks.
    user_forked_projects
        Sum of every item's ``forks_count``. Forks of the user's own forks
        are counted too, so this overstates "how often the user's work was
        forked".
    repo_size, watchers, stars
        Sums of the matching item fields.
    commits, pulls
        Sums over items that carry an enrichment only.

    """

    language: dict[str, int] = msgspec.field(default_factory=dict)
    project_type: tuple[str | None, ...] = ()
    fork_count: int = 0
    user_forked_projects: int = 0
    repo_size: int = 0
    watchers: int = 0
    stars: int = 0
    commits: int = 0
    pulls: int = 0


class Report(msgspec.Struct, kw_only=True, frozen=True):
    """Canonical profile report."""

    user: ProfileSummary
    repos: tuple[Item, ...]
    stats: Stats
    enrichment: tuple[EnrichmentOutcome, ...] = ()

    @property
    def login(self) -> str:
        """Return the canonical login as resolved by GitHub."""
        return self.user.login


class ReportEnvelope(msgspec.Struct, kw_only=True, frozen=True):
    """Wire wrapper used by the synchronous profile endpoint."""

    report: Report


def _int_field(payload: dict[str, typ.Any], key: str) -> int:
    value = payload.get(key)
    return value if isinstance(value, int) and not isinstance(value, bool) else 0


def _str_field(payload: dict[str, typ.Any], key: str) -> str | None:
    value = payload.get(key)
    return value if isinstance(value, str) else None


def item_from_github(payload: dict[str, typ.Any], *, fallback_owner: str) -> Item:
    """Build an :class:`Item` from a GitHub repository payload.

    Raises
    ------
    GitHubResponseShapeError
        If the payload has no repository name.

    """
    name = payload.get("name")
    if not isinstance(name, str) or not name:
        raise GitHubResponseShapeError.missing("repos[].name")
    raw_owner = payload.get("owner")
    owner = (
        raw_owner.get("login") if isinstance(raw_owner, dict) else None
    ) or fallback_owner
    return Item(
        name=name,
        owner=owner,
        language=_str_field(payload, "language"),
        fork=payload.get("fork") is True,
        stargazers_count=_int_field(payload, "stargazers_count"),
        forks_count=_int_field(payload, "forks_count"),
        watchers_count=_int_field(payload, "watchers_count"),
        size=_int_field(payload, "size"),
        pushed_at=_str_field(payload, "pushed_at"),
        description=_str_field(payload, "description"),
        default_branch=_str_field(payload, "default_branch"),
        html_url=_str_field(payload, "html_url"),
    )


def profile_from_github(payload: dict[str, typ.Any]) -> ProfileSummary:
    """Build a :class:`ProfileSummary` from a GitHub user payload."""
    try:
        return msgspec.convert(payload, ProfileSummary, strict=False)
    except msgspec.ValidationError as exc:
        msg = f"GitHub user payload is invalid: {exc}"
        raise GitHubResponseShapeError(msg) from exc


__all__ = [
    "Enriched",
    "Enrichment",
    "EnrichmentOutcome",
    "Item",
    "ProfileSummary",
    "Report",
    "ReportEnvelope",
    "Skipped",
    "Stats",
    "item_from_github",
    "profile_from_github",
]
