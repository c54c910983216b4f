"""Data models for next-versions.

These Pydantic models represent the configuration, the commits read from
git, and the per-package results of a version check. Configuration models
accept the camelCase keys used in ``release-config.json``.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

NonScopeBehavior = Literal["bump", "ignore"]

ROOT_DIRECTORY = "."
DEFAULT_TAG_PREFIX = "v"


class Bump(IntEnum):
    """Change magnitude implied by a commit, ordered by precedence."""

    NONE = 0
    PATCH = 1
    MINOR = 2
    MAJOR = 3

    @property
    def label(self) -> str:
        return self.name.lower()


class Package(BaseModel):
    """A versioned unit of the repository.

    Attributes:
        name: Package identifier, also the conventional-commit scope it owns.
        tag_prefix: Literal prefix of the package's release tags
                    (e.g. "app-v" for "app-v1.2.0").
        directory: Repo-relative path; "." denotes the repository root.
        depends_on: Path patterns whose changes also affect this package.
        default_tag_prefix: Set when tagPrefix was missing, null or empty
                            and "v" was used instead.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    tag_prefix: str = Field(default=DEFAULT_TAG_PREFIX, alias="tagPrefix")
    directory: str = ROOT_DIRECTORY
    depends_on: list[str] = Field(default_factory=list, alias="dependsOn")
    default_tag_prefix: bool = Field(default=False, exclude=True)

    @model_validator(mode="before")
    @classmethod
    def _fill_tag_prefix(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        prefix = data.pop("tagPrefix", None)
        fallback = data.pop("tag_prefix", None)
        if prefix is None:
            prefix = fallback
        if prefix is None or prefix == "":
            data["tagPrefix"] = DEFAULT_TAG_PREFIX
            data["default_tag_prefix"] = True
        else:
            data["tagPrefix"] = prefix
            data["default_tag_prefix"] = False
        return data

    @property
    def is_root(self) -> bool:
        return self.directory == ROOT_DIRECTORY


class Config(BaseModel):
    """Top-level release configuration.

    Attributes:
        versioned_packages: Packages to compute versions for, in report order.
        non_scope_behavior: Whether commits without a scope bump every
                            package ("bump") or only the root one ("ignore").
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    versioned_packages: list[Package] = Field(alias="versionedPackages")
    non_scope_behavior: NonScopeBehavior = Field(
        default="bump", alias="nonScopeBehavior"
    )


class RawCommit(BaseModel):
    """One git log entry: full hash, subject line and the remaining body."""

    hash: str
    message: str
    body: str = ""

    @property
    def full_message(self) -> str:
        """Subject and body joined, as used for bump classification."""
        if not self.body:
            return self.message
        return f"{self.message}\n\n{self.body}"


class ParsedCommit(BaseModel):
    """Structured conventional-commit header: ``type(scope)!:``."""

    type: str
    scope: str = ""
    breaking: bool = False


class AttributedCommit(BaseModel):
    """A commit counted towards one package, with the reasons why."""

    hash: str
    message: str
    type: str
    breaking: bool
    bump: Bump
    reasons: list[str] = Field(min_length=1)


class VersionChangeSet(BaseModel):
    """Which bump magnitudes were observed across a package's commits."""

    major: bool = False
    minor: bool = False
    patch: bool = False


class VersionUpdate(BaseModel):
    """Resolved version outcome for one package."""

    tag_prefix: str
    current_version: str
    next_version: str
    has_changes: bool
    changes: list[AttributedCommit] = Field(default_factory=list)

    @property
    def next_tag(self) -> str:
        return f"{self.tag_prefix}{self.next_version}"


class DependencyMatch(BaseModel):
    """Result of matching changed files against ``dependsOn`` patterns.

    Attributes:
        matched: Whether any pattern matched at least one file.
        pattern: The first matching pattern in declaration order.
        patterns: Every matching pattern in declaration order.
        files: Changed files matched by any pattern, without duplicates.
    """

    matched: bool = False
    pattern: str | None = None
    patterns: list[str] = Field(default_factory=list)
    files: list[str] = Field(default_factory=list)
