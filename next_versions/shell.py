"""Git and console utilities.

Provides a thin wrapper around git subprocess calls, plus the console
used to report progress. Progress goes to stdout in report mode and is
silenced entirely in JSON mode so that stdout carries only the JSON object.
"""

from __future__ import annotations

import subprocess

import click


def git(*args: str, check: bool = True) -> str:
    """Run a git command and return stdout.

    Args:
        *args: Arguments to pass to git (e.g., "log", "--format=%H").
        check: If True (default), raise on non-zero exit. Set to False
               for commands that may legitimately fail (e.g., tag lookup).

    Returns:
        Stripped stdout from the git command.

    Raises:
        subprocess.CalledProcessError: If check is True and git fails.
    """
    result = subprocess.run(["git", *args], capture_output=True, text=True, check=check)
    return result.stdout.strip()


class Console:
    """Progress reporting for a version check.

    Args:
        quiet: Suppress everything except warnings (used for JSON output).
        verbose: Also print per-commit analysis details.
    """

    def __init__(self, *, quiet: bool = False, verbose: bool = False) -> None:
        self.quiet = quiet
        self.verbose = verbose and not quiet

    def step(self, msg: str) -> None:
        """Print a visually distinct step header."""
        if not self.quiet:
            click.echo(click.style(f"\n{msg}", bold=True, fg="cyan"))

    def info(self, msg: str) -> None:
        if not self.quiet:
            click.echo(msg)

    def detail(self, msg: str) -> None:
        """Print a dimmed line, only in verbose mode."""
        if self.verbose:
            click.echo(click.style(msg, dim=True))

    def warn(self, msg: str) -> None:
        """Print a warning to stderr. Warnings are shown even when quiet."""
        click.echo(click.style("Warning: ", fg="yellow") + msg, err=True)
