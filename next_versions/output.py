"""Rendering of version check results and release tag creation."""

from __future__ import annotations

import json
from collections.abc import Mapping

import click

from .models import VersionUpdate
from .shell import Console, git

SEPARATOR = "=" * 50


def render_json(updates: Mapping[str, VersionUpdate]) -> str:
    """Render updates as a JSON object keyed by package name.

    Example:
        {"app": {"currentVersion": "1.0.0", "nextVersion": "1.1.0",
                 "hasChanges": true}}
    """
    output = {
        name: {
            "currentVersion": update.current_version,
            "nextVersion": update.next_version,
            "hasChanges": update.has_changes,
        }
        for name, update in updates.items()
    }
    return json.dumps(output)


def format_commit(commit_hash: str, message: str) -> str:
    """Short hash in yellow followed by the commit subject."""
    return f"{click.style(commit_hash[:7], fg='yellow')} {message}"


def _section(title: str) -> str:
    return "\n" + click.style(title, bold=True, fg="blue")


def render_report(updates: Mapping[str, VersionUpdate]) -> str:
    """Render a human-readable release summary.

    Three sections: how many commits were attributed to each package, the
    version change of each package with changes, and every attributed commit
    with its reasons.
    """
    changed = {name: u for name, u in updates.items() if u.has_changes}
    if not changed:
        return click.style("✓ No version updates required!", fg="green", bold=True)

    check = click.style("✓", fg="green")
    width = max(len(name) for name in updates)
    lines = [
        click.style("Release Check Summary", bold=True, fg="magenta"),
        click.style(SEPARATOR, dim=True),
        _section("Changes Detected:"),
    ]
    for name, update in updates.items():
        count = click.style(str(len(update.changes)), fg="cyan")
        lines.append(f"{check} {name.ljust(width)}  {count} commits")

    lines.append(_section("Version Updates:"))
    for name, update in changed.items():
        current = click.style(f"{update.tag_prefix}{update.current_version}", dim=True)
        nxt = click.style(update.next_tag, bold=True)
        lines.append(f"{check} {name.ljust(width)}  {current} → {nxt}")

    lines.append(_section("Detailed Changes:"))
    for name, update in updates.items():
        if not update.changes:
            continue
        lines.append("\n" + click.style(name, fg="cyan") + ":")
        for commit in update.changes:
            bullet = click.style("•", fg="green")
            lines.append(f"  {bullet} {format_commit(commit.hash, commit.message)}")
            for reason in commit.reasons:
                lines.append("    " + click.style(f"↳ {reason}", dim=True))

    lines.append("\n" + click.style(SEPARATOR, dim=True))
    return "\n".join(lines)


def create_tags(
    updates: Mapping[str, VersionUpdate],
    *,
    push: bool = True,
    remote: str = "origin",
    console: Console | None = None,
) -> list[str]:
    """Create (and optionally push) a release tag for each changed package.

    Tags are named ``{tag_prefix}{next_version}``.

    Returns:
        The tags that were created.

    Raises:
        subprocess.CalledProcessError: If git tag or git push fails.
    """
    console = console or Console()
    console.step("Creating release tags")

    created: list[str] = []
    for name, update in updates.items():
        if not update.has_changes:
            continue
        tag = update.next_tag
        git("tag", tag)
        if push:
            git("push", remote, tag)
        created.append(tag)
        console.info(f"  {name}: {tag}")
    return created
