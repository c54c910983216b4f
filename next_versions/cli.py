"""CLI entry point for next-versions."""

from __future__ import annotations

import json
import os
import subprocess
from collections.abc import Mapping
from pathlib import Path

import click

from next_versions.config import CONFIG_FILENAME, load_config
from next_versions.errors import NextVersionsError
from next_versions.output import create_tags, render_json, render_report
from next_versions.pipeline import check_versions
from next_versions.shell import Console

CI_ENV_VARS = ("CI", "GITHUB_ACTIONS")

STARTER_CONFIG = {
    "versionedPackages": [
        {
            "name": "root",
            "tagPrefix": "v",
            "directory": ".",
            "dependsOn": [],
        }
    ],
    "nonScopeBehavior": "bump",
}


def is_ci(environ: Mapping[str, str] | None = None) -> bool:
    """Return True when running in CI (CI=true or GITHUB_ACTIONS=true)."""
    env = os.environ if environ is None else environ
    return any(env.get(var, "").lower() == "true" for var in CI_ENV_VARS)


@click.group()
@click.version_option(package_name="next-versions")
def cli() -> None:
    """Next semantic versions for monorepo packages from conventional commits."""


@cli.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help=f"Config file. [default: {CONFIG_FILENAME}, else pyproject.toml]",
)
@click.option(
    "--json", "json_output", is_flag=True, help="Print machine-readable JSON."
)
@click.option("--verbose", is_flag=True, help="Show how every commit is analyzed.")
@click.option(
    "--strict",
    is_flag=True,
    help="Fail instead of warning when git cannot list a package's commits.",
)
@click.option(
    "--create-tags",
    "tag",
    is_flag=True,
    help="Create a release tag for every package with changes.",
)
@click.option("--no-push", is_flag=True, help="Create tags without pushing them.")
@click.option("-y", "--yes", is_flag=True, help="Do not ask before creating tags.")
def check(
    config_path: Path | None,
    json_output: bool,
    verbose: bool,
    strict: bool,
    tag: bool,
    no_push: bool,
    yes: bool,
) -> None:
    """Compute the next version of every configured package.

    JSON output is used automatically in CI.
    """
    json_mode = json_output or is_ci()
    console = Console(quiet=json_mode, verbose=verbose)

    try:
        config = load_config(config_path)
        updates = check_versions(config, console=console, strict=strict)
    except NextVersionsError as exc:
        raise click.ClickException(str(exc)) from exc

    if json_mode:
        click.echo(render_json(updates))
        return

    click.echo(render_report(updates))

    if not tag or not any(u.has_changes for u in updates.values()):
        return
    if not yes and not click.confirm("Create and push release tags?", default=False):
        return
    try:
        create_tags(updates, push=not no_push, console=console)
    except subprocess.CalledProcessError as exc:
        stderr = (exc.stderr or "").strip()
        raise click.ClickException(
            f"git {' '.join(exc.cmd[1:])} failed: {stderr}"
        ) from exc


@cli.command()
@click.option("--force", is_flag=True, help="Overwrite an existing config file.")
def init(force: bool) -> None:
    """Write a starter release-config.json into your repo."""
    root = Path.cwd()

    # Sanity checks
    if not (root / ".git").exists():
        raise click.ClickException("Not a git repository. Run from the repo root.")

    dest = root / CONFIG_FILENAME
    if dest.exists() and not force:
        raise click.ClickException(
            f"{CONFIG_FILENAME} already exists. Use --force to overwrite it."
        )

    dest.write_text(json.dumps(STARTER_CONFIG, indent=2) + "\n", encoding="utf-8")

    click.echo(f"✓ Wrote {CONFIG_FILENAME}")
    click.echo()
    click.echo("Next steps:")
    click.echo("  1. List every versioned package under versionedPackages")
    click.echo("  2. Check the next versions:")
    click.echo("       next-versions check")
    click.echo("       next-versions check --json")
