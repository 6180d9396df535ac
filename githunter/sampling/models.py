"""Code sample structures handed to the scoring stage."""

from __future__ import annotations

import msgspec


class CodeFile(msgspec.Struct, kw_only=True, frozen=True):
    """One sampled file, already truncated."""

    path: str
    content: str
    language: str


class RepoSample(msgspec.Struct, kw_only=True, frozen=True):
    """Sampled files for one repository, highest priority first."""

    name: str
    files: tuple[CodeFile, ...] = ()


class CodeSamples(msgspec.Struct, kw_only=True, frozen=True):
    """Samples for every repository considered by the sampler."""

    repos: tuple[RepoSample, ...] = ()

    @property
    def file_count(self) -> int:
        """Return the total number of sampled files."""
        return sum(len(repo.files) for repo in self.repos)


__all__ = ["CodeFile", "CodeSamples", "RepoSample"]
