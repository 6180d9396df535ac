"""Bounded code sampling for AI scoring."""

from __future__ import annotations

from githunter.sampling.models import CodeFile, CodeSamples, RepoSample
from githunter.sampling.selection import (
    MAX_FILES_PER_REPO,
    MAX_LINES_PER_FILE,
    infer_language,
    score_path,
    select_paths,
    truncate_lines,
)
from githunter.sampling.service import MAX_REPOS_SAMPLED, CodeSampler

__all__ = [
    "MAX_FILES_PER_REPO",
    "MAX_LINES_PER_FILE",
    "MAX_REPOS_SAMPLED",
    "CodeFile",
    "CodeSampler",
    "CodeSamples",
    "RepoSample",
    "infer_language",
    "score_path",
    "select_paths",
    "truncate_lines",
]
