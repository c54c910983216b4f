"""Version parsing, summarizing and bumping.

Versions are strict ``MAJOR.MINOR.PATCH`` triads of non-negative integers.
Prerelease and build metadata are not supported, so anything else is
rejected instead of being guessed at.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

import semver

from .errors import VersionError
from .models import AttributedCommit, Bump, VersionChangeSet

INITIAL_VERSION = "0.0.0"
TRIAD_RE = re.compile(r"^\d+\.\d+\.\d+$")


def parse_version(version_str: str) -> semver.Version:
    """Parse a ``X.Y.Z`` string into a semver.Version object.

    Raises:
        VersionError: If the string is not three dot-separated integers
                      (e.g. "1.2", "v1.2.3" or "1.2.3-rc.1").
    """
    if not TRIAD_RE.match(version_str):
        raise VersionError(f"Invalid version {version_str!r}: expected X.Y.Z")
    try:
        return semver.Version.parse(version_str)
    except ValueError as exc:
        raise VersionError(f"Invalid version {version_str!r}: {exc}") from exc


def current_version(tag: str | None, prefix: str) -> str:
    """Derive a package's current version from its last release tag.

    Args:
        tag: The last tag found for the package, or None if there is none.
        prefix: The package's tag prefix.

    Returns:
        "0.0.0" when there is no tag, otherwise the tag without its prefix.

    Raises:
        VersionError: If what remains after the prefix is not ``X.Y.Z``.
    """
    if not tag:
        return INITIAL_VERSION
    version = tag.removeprefix(prefix)
    try:
        parse_version(version)
    except VersionError as exc:
        raise VersionError(
            f"Tag {tag!r} does not hold a version after prefix {prefix!r}"
        ) from exc
    return version


def summarize(commits: Iterable[AttributedCommit]) -> VersionChangeSet:
    """Fold the bump of every attributed commit into a VersionChangeSet.

    Each commit carries the verdict of classifying its full message. Every
    commit is evaluated; a major bump does not stop the scan.
    """
    changes = VersionChangeSet()
    for commit in commits:
        if commit.bump is Bump.MAJOR:
            changes.major = True
        elif commit.bump is Bump.MINOR:
            changes.minor = True
        elif commit.bump is Bump.PATCH:
            changes.patch = True
    return changes


def bump_for(changes: VersionChangeSet) -> Bump:
    """Collapse a change set into the single bump that takes precedence."""
    if changes.major:
        return Bump.MAJOR
    if changes.minor:
        return Bump.MINOR
    if changes.patch:
        return Bump.PATCH
    return Bump.NONE


def resolve(version_str: str, changes: VersionChangeSet) -> str:
    """Compute the next version from the current one and observed changes.

    Major beats minor beats patch; only one component is ever bumped.

    Examples:
        "1.2.3" + major → "2.0.0"
        "1.2.3" + minor → "1.3.0"
        "1.2.3" + patch → "1.2.4"
        "1.2.3" + nothing → "1.2.3"
    """
    version = parse_version(version_str)
    bump = bump_for(changes)
    if bump is Bump.MAJOR:
        return str(version.bump_major())
    if bump is Bump.MINOR:
        return str(version.bump_minor())
    if bump is Bump.PATCH:
        return str(version.bump_patch())
    return version_str
