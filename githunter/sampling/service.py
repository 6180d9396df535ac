"""Gather bounded code context from GitHub for the scoring stage.

Sampling is best effort: a repository whose tree cannot be listed yields an
empty sample, and a file that cannot be fetched is dropped.
"""

from __future__ import annotations

import asyncio
import typing as typ

from githunter.github.errors import GitHubAPIError, GitHubResponseShapeError
from githunter.logging import get_logger, log_debug, log_info
from githunter.sampling.models import CodeFile, CodeSamples, RepoSample
from githunter.sampling.selection import (
    MAX_FILES_PER_REPO,
    MAX_LINES_PER_FILE,
    infer_language,
    select_paths,
    truncate_lines,
)

if typ.TYPE_CHECKING:
    from githunter.github.client import GitHubProfileClient
    from githunter.profile.models import Item

logger = get_logger(__name__)

MAX_REPOS_SAMPLED = 15
_DEFAULT_BRANCH = "main"
_SAMPLING_ERRORS = (GitHubAPIError, GitHubResponseShapeError, ValueError)


class CodeSampler:
    """Fetch prioritised file samples through the Trees and Contents APIs.

    Parameters
    ----------
    client
        GitHub client used for tree and file reads.
    max_repos
        Number of non-fork repositories sampled, by descending stars.
    max_files
        Files sampled per repository.
    max_lines
        Lines kept per file before the truncation marker.

    """

    def __init__(
        self,
        client: GitHubProfileClient,
        *,
        max_repos: int = MAX_REPOS_SAMPLED,
        max_files: int = MAX_FILES_PER_REPO,
        max_lines: int = MAX_LINES_PER_FILE,
    ) -> None:
        """Configure sampling limits."""
        self._client = client
        self._max_repos = max_repos
        self._max_files = max_files
        self._max_lines = max_lines

    async def sample(self, items: typ.Sequence[Item]) -> CodeSamples:
        """Return samples for the most starred non-fork items.

        Repositories are sampled one after another so a single job never
        holds more than one repository's file requests in flight.
        """
        candidates = sorted(
            (item for item in items if not item.fork),
            key=lambda item: item.stargazers_count,
            reverse=True,
        )[: self._max_repos]
        repos = [await self._sample_repo(item) for item in candidates]
        samples = CodeSamples(repos=tuple(repos))
        log_info(
            logger,
            "Sampled %d files across %d repositories",
            samples.file_count,
            len(repos),
        )
        return samples

    async def _sample_repo(self, item: Item) -> RepoSample:
        branch = item.default_branch or _DEFAULT_BRANCH
        try:
            tree = await self._client.get_tree(item.owner, item.name, branch)
        except _SAMPLING_ERRORS as exc:
            log_debug(logger, "Skipping tree for %s/%s: %s", item.owner, item.name, exc)
            return RepoSample(name=item.name)

        paths = select_paths(tree, self._max_files)
        results = await asyncio.gather(
            *(self._client.get_file_content(item.owner, item.name, p) for p in paths),
            return_exceptions=True,
        )
        files: list[CodeFile] = []
        for path, result in zip(paths, results, strict=True):
            if isinstance(result, _SAMPLING_ERRORS):
                log_debug(logger, "Skipping %s in %s: %s", path, item.name, result)
                continue
            if isinstance(result, BaseException):
                raise result
            if result is None:
                continue
            files.append(
                CodeFile(
                    path=path,
                    content=truncate_lines(result, self._max_lines),
                    language=infer_language(path),
                )
            )
        return RepoSample(name=item.name, files=tuple(files))


__all__ = ["MAX_REPOS_SAMPLED", "CodeSampler"]
