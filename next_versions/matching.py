"""Scope and path matching used to attribute commits to packages.

Path patterns from ``dependsOn`` are emulated coarsely: every ``*`` is
stripped and the rest is treated as a directory prefix. ``packages/*``
therefore matches anything below ``packages/``, and ``packages/*/src``
becomes ``packages//src``, which matches nothing. Full glob semantics are
not supported.
"""

from __future__ import annotations

from collections.abc import Iterable

from .models import ROOT_DIRECTORY, DependencyMatch


def in_scope(scope: str, package_name: str) -> bool:
    """Compare a commit scope with a package name.

    Case-insensitive and whitespace-trimmed. An empty scope is not treated
    specially; callers decide what a root-level commit means for a package.
    """
    return scope.strip().lower() == package_name.strip().lower()


def normalize_path(path: str) -> str:
    """Use forward slashes and drop any trailing slash."""
    normalized = path.replace("\\", "/")
    return normalized.rstrip("/") or normalized


def is_under(path: str, prefix: str) -> bool:
    """Return True if path equals prefix or lies below it."""
    return path == prefix or path.startswith(prefix + "/")


def touches_directory(changed_files: Iterable[str], directory: str) -> list[str]:
    """Return the changed files that lie in a package directory.

    Every file lies in the root directory ".".
    """
    prefix = normalize_path(directory)
    files = [normalize_path(f) for f in changed_files]
    if prefix == ROOT_DIRECTORY:
        return files
    return [f for f in files if is_under(f, prefix)]


def match_pattern(changed_files: Iterable[str], pattern: str) -> list[str]:
    """Return the changed files matched by a single ``dependsOn`` pattern."""
    prefix = normalize_path(pattern.replace("*", ""))
    return [
        normalized
        for normalized in (normalize_path(f) for f in changed_files)
        if is_under(normalized, prefix)
    ]


def affected_by_dependency(
    changed_files: list[str], depends_on: list[str]
) -> DependencyMatch:
    """Check whether changed files hit any of a package's dependency patterns.

    Every pattern is tried in declaration order. A pattern counts when it
    matches at least one file.

    Args:
        changed_files: Repo-relative paths touched by a commit.
        depends_on: The package's ``dependsOn`` patterns.

    Returns:
        DependencyMatch with the first matching pattern, all matching
        patterns and the files they matched, or an unmatched result.

    Example:
        affected_by_dependency(["packages/ui/index.ts"], ["packages/*"])
        → matched=True, pattern="packages/*", patterns=["packages/*"],
          files=["packages/ui/index.ts"]
    """
    changed_files = list(changed_files)
    patterns: list[str] = []
    files: list[str] = []
    for pattern in depends_on:
        hits = match_pattern(changed_files, pattern)
        if not hits:
            continue
        patterns.append(pattern)
        files.extend(f for f in hits if f not in files)
    if not patterns:
        return DependencyMatch()
    return DependencyMatch(
        matched=True, pattern=patterns[0], patterns=patterns, files=files
    )
