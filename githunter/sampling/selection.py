"""Pure path selection rules for the code sampler.

Paths are ranked by the first matching priority pattern: manifests and
READMEs first, then entry points, tests, CI workflows, tool configuration,
source files and finally data files. Unmatched paths share the lowest weight.
"""

from __future__ import annotations

import re
import typing as typ

MAX_FILES_PER_REPO = 18
MAX_LINES_PER_FILE = 150
TRUNCATION_MARKER = "// ... truncated"
DEFAULT_WEIGHT = 10

_SOURCE = r"(js|ts|jsx|tsx|py)"

PRIORITY_PATTERNS: tuple[tuple[re.Pattern[str], int], ...] = (
    (re.compile(r"^(package\.json|pyproject\.toml)$", re.IGNORECASE), 100),
    (re.compile(r"^README\.(md|mdx|rst|txt)$", re.IGNORECASE), 95),
    (re.compile(rf"^(src/)?(index|__init__)\.{_SOURCE}$"), 90),
    (re.compile(rf"^(src/)?(main|app|__main__)\.{_SOURCE}$"), 85),
    (re.compile(r"(\.(test|spec)\.(js|ts|jsx|tsx)|(^|/)test_[^/]+\.py)$"), 80),
    (re.compile(r"^(src/)?(__tests__|tests)/"), 75),
    (re.compile(r"^\.github/workflows/"), 70),
    (re.compile(r"^(tsconfig|webpack|vite|rollup|jest|babel|setup|tox)\."), 65),
    (re.compile(r"^\.(env|eslintrc|prettierrc)"), 60),
    (re.compile(rf"\.{_SOURCE}$"), 50),
    (re.compile(r"\.(json|yaml|yml|toml)$"), 40),
)

_LANGUAGES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\.(js|jsx|mjs|cjs)$", re.IGNORECASE), "JavaScript"),
    (re.compile(r"\.(ts|tsx)$", re.IGNORECASE), "TypeScript"),
    (re.compile(r"\.json$", re.IGNORECASE), "JSON"),
    (re.compile(r"\.(md|mdx)$", re.IGNORECASE), "Markdown"),
    (re.compile(r"\.(yaml|yml)$", re.IGNORECASE), "YAML"),
    (re.compile(r"\.py$", re.IGNORECASE), "Python"),
    (re.compile(r"\.go$", re.IGNORECASE), "Go"),
    (re.compile(r"\.rs$", re.IGNORECASE), "Rust"),
)

_EXCLUDED_SEGMENTS = ("node_modules",)


def score_path(path: str) -> int:
    """Return the priority weight of *path*; higher is sampled first."""
    for pattern, weight in PRIORITY_PATTERNS:
        if pattern.search(path):
            return weight
    return DEFAULT_WEIGHT


def infer_language(path: str) -> str:
    """Return a display language for *path*, defaulting to ``Text``."""
    for pattern, language in _LANGUAGES:
        if pattern.search(path):
            return language
    return "Text"


def truncate_lines(text: str, max_lines: int = MAX_LINES_PER_FILE) -> str:
    """Keep the first *max_lines* lines of *text*, appending a marker if cut."""
    lines = re.split(r"\r?\n", text)
    if len(lines) <= max_lines:
        return text
    return "\n".join(lines[:max_lines]) + "\n" + TRUNCATION_MARKER


def select_paths(
    tree: typ.Iterable[dict[str, typ.Any]],
    limit: int = MAX_FILES_PER_REPO,
) -> list[str]:
    """Return up to *limit* blob paths from a git tree, best first.

    Ties keep tree order, and paths inside vendored dependency directories
    are never selected.
    """
    blobs = [
        entry["path"]
        for entry in tree
        if entry.get("type") == "blob"
        and isinstance(entry.get("path"), str)
        and entry["path"]
        and not any(segment in entry["path"] for segment in _EXCLUDED_SEGMENTS)
    ]
    return sorted(blobs, key=score_path, reverse=True)[:limit]


__all__ = [
    "DEFAULT_WEIGHT",
    "MAX_FILES_PER_REPO",
    "MAX_LINES_PER_FILE",
    "PRIORITY_PATTERNS",
    "TRUNCATION_MARKER",
    "infer_language",
    "score_path",
    "select_paths",
    "truncate_lines",
]
