"""Exceptions raised by next-versions.

The CLI turns every NextVersionsError into a non-zero exit with the message.
"""

from __future__ import annotations


class NextVersionsError(Exception):
    """Base class for all next-versions errors."""


class ConfigError(NextVersionsError):
    """The release configuration is missing or invalid."""


class VersionError(NextVersionsError):
    """A version string is not a clean MAJOR.MINOR.PATCH triad."""


class GitError(NextVersionsError):
    """A git command failed and the failure is not recoverable."""
