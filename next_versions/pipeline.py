"""Version check pipeline: tags → commits → attribution → next versions.

This module orchestrates a version check:
1. Find each package's last release tag and derive its current version
2. List the commits made since that tag
3. Attribute relevant commits to the package by scope, directory or
   dependency path
4. Resolve the attributed commits into the package's next version

Packages are processed one after another in configuration order. Nothing
is shared between packages except the read-only configuration and a cache
of the files each commit touched.
"""

from __future__ import annotations

import subprocess
from collections.abc import Callable, Iterable

from .commits import classify, parse_commit
from .errors import GitError
from .matching import affected_by_dependency, in_scope, touches_directory
from .models import (
    DEFAULT_TAG_PREFIX,
    AttributedCommit,
    Bump,
    Config,
    NonScopeBehavior,
    Package,
    RawCommit,
    VersionUpdate,
)
from .shell import Console, git
from .versions import current_version, resolve, summarize

FIELD_SEP = "\x1f"
RECORD_SEP = "\x1e"
LOG_FORMAT = f"--format=%H{FIELD_SEP}%s{FIELD_SEP}%b{RECORD_SEP}"

ChangedFilesLookup = Callable[[str], list[str]]


def find_last_tag(prefix: str) -> str | None:
    """Find the most recent tag reachable from HEAD with the given prefix.

    A bare "v" prefix only matches tags followed by a digit, so that tags
    such as "vendor-1.0.0" are not mistaken for root releases.

    Returns:
        The tag name, or None if no tag matches.
    """
    pattern = "v[0-9]*" if prefix == DEFAULT_TAG_PREFIX else f"{prefix}*"
    tag = git("describe", "--tags", "--match", pattern, "--abbrev=0", check=False)
    return tag or None


def commits_since(tag: str | None) -> list[RawCommit]:
    """List commits between a tag (exclusive) and HEAD, newest first.

    Without a tag the whole history of HEAD is listed.

    Raises:
        subprocess.CalledProcessError: If git log fails.
    """
    rev_range = f"{tag}..HEAD" if tag else "HEAD"
    output = git("log", rev_range, LOG_FORMAT)
    return parse_log(output)


def parse_log(output: str) -> list[RawCommit]:
    """Parse ``git log`` output produced with LOG_FORMAT."""
    commits: list[RawCommit] = []
    for record in output.split(RECORD_SEP):
        record = record.strip("\n")
        if not record:
            continue
        commit_hash, _, rest = record.partition(FIELD_SEP)
        subject, _, body = rest.partition(FIELD_SEP)
        if commit_hash.strip() and subject.strip():
            commits.append(
                RawCommit(
                    hash=commit_hash.strip(),
                    message=subject.strip(),
                    body=body.strip(),
                )
            )
    return commits


def changed_files(commit_hash: str) -> list[str]:
    """List the files touched by a single commit.

    Raises:
        subprocess.CalledProcessError: If git diff-tree fails.
    """
    output = git(
        "diff-tree", "--no-commit-id", "--name-only", "-r", "--root", commit_hash
    )
    return [line for line in output.splitlines() if line]


def aggregate(
    package: Package,
    commits: Iterable[RawCommit],
    lookup_files: ChangedFilesLookup,
    non_scope_behavior: NonScopeBehavior,
    console: Console | None = None,
) -> list[AttributedCommit]:
    """Attribute relevant commits to a package.

    A commit counts towards the package if it:
    - is a breaking change (always, for every package)
    - carries the package's own scope
    - has no scope, and the package is the root package or
      non_scope_behavior is "bump"
    - carries another scope but touches the package directory or one of
      its ``dependsOn`` paths

    Commits without a conventional header or that imply no bump are skipped.

    Args:
        package: The package to attribute commits to.
        commits: Commits since the package's last tag, in git log order.
        lookup_files: Returns the files touched by a commit hash. Only called
                      for commits scoped to another package.
        non_scope_behavior: Policy for commits without a scope.
        console: Where to report per-commit details in verbose mode.

    Returns:
        Attributed commits in input order, each with at least one reason.
    """
    console = console or Console(quiet=True)
    # The root package owns commits without a scope.
    package_scope = "" if package.is_root else package.name
    attributed: list[AttributedCommit] = []

    for commit in commits:
        console.detail(f"  Analyzing {commit.hash[:7]} - {commit.message}")

        info = parse_commit(commit.message)
        if info is None:
            continue
        bump = classify(commit.full_message)
        if bump is Bump.NONE:
            continue

        reasons: list[str] = []
        if bump is Bump.MAJOR:
            reasons.append("Major version bump")
        elif not in_scope(info.scope, package_scope) and info.scope != "":
            files = lookup_files(commit.hash)
            console.detail(f"    Changed files: {len(files)}")
            if touches_directory(files, package.directory):
                reasons.append(f"Direct changes in {package.directory}")
            dependency = affected_by_dependency(files, package.depends_on)
            for pattern in dependency.patterns:
                reasons.append(f"Affected by changes in dependent package {pattern}")
        elif info.scope != "":
            reasons.append("Changes in package scope")
        elif package.is_root:
            reasons.append("Changes in scope")
        elif non_scope_behavior == "bump":
            reasons.append("Changes in root (nonScopeBehavior is set to 'bump')")

        if not reasons:
            continue
        for reason in reasons:
            console.detail(f"    → {bump.label}: {reason}")
        attributed.append(
            AttributedCommit(
                hash=commit.hash,
                message=commit.message,
                type=info.type,
                breaking=bump is Bump.MAJOR or info.breaking,
                bump=bump,
                reasons=reasons,
            )
        )

    return attributed


def build_update(
    package: Package, current: str, changes: list[AttributedCommit]
) -> VersionUpdate:
    """Resolve a package's attributed commits into a VersionUpdate."""
    next_version = resolve(current, summarize(changes))
    return VersionUpdate(
        tag_prefix=package.tag_prefix,
        current_version=current,
        next_version=next_version,
        has_changes=next_version != current,
        changes=changes,
    )


def check_versions(
    config: Config,
    *,
    console: Console | None = None,
    strict: bool = False,
) -> dict[str, VersionUpdate]:
    """Compute the next version of every configured package.

    Args:
        config: The release configuration.
        console: Progress reporting; silent if omitted.
        strict: Escalate git failures while listing commits to a GitError
                instead of treating the package as having no commits.

    Returns:
        Map of package name → VersionUpdate, in configuration order. Every
        configured package is present, with or without changes.

    Raises:
        VersionError: If a package's last tag does not hold an X.Y.Z version.
        GitError: If strict is set and a git command fails.
    """
    console = console or Console(quiet=True)
    console.step(f"Found {len(config.versioned_packages)} packages in config")

    files_cache: dict[str, list[str]] = {}

    def lookup_files(commit_hash: str) -> list[str]:
        if commit_hash not in files_cache:
            try:
                files_cache[commit_hash] = changed_files(commit_hash)
            except subprocess.CalledProcessError as exc:
                if strict:
                    raise GitError(
                        f"Failed to list files of commit {commit_hash}: {exc.stderr}"
                    ) from exc
                console.warn(f"Could not list files of commit {commit_hash[:7]}")
                files_cache[commit_hash] = []
        return files_cache[commit_hash]

    updates: dict[str, VersionUpdate] = {}
    for package in config.versioned_packages:
        if package.default_tag_prefix:
            console.warn(
                f"No tag prefix found for package {package.name!r}, "
                f"using {DEFAULT_TAG_PREFIX!r} as default."
            )
        tag = find_last_tag(package.tag_prefix)
        current = current_version(tag, package.tag_prefix)
        console.info(f"\n  {package.name} ({current})")

        try:
            commits = commits_since(tag)
        except subprocess.CalledProcessError as exc:
            if strict:
                raise GitError(
                    f"Failed to list commits for {package.name}: {exc.stderr}"
                ) from exc
            console.warn(f"Could not list commits for {package.name}; assuming none.")
            commits = []

        changes = aggregate(
            package, commits, lookup_files, config.non_scope_behavior, console
        )
        since = f" since {tag}" if tag else ""
        console.info(f"  Found {len(changes)} relevant commits{since}")
        updates[package.name] = build_update(package, current, changes)

    return updates
