"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from next_versions.models import Config, Package, RawCommit


@pytest.fixture
def app_package() -> Package:
    """A non-root package depending on the ui package directory."""
    return Package(
        name="app",
        tag_prefix="app-v",
        directory="apps/web",
        depends_on=["packages/ui"],
    )


@pytest.fixture
def root_package() -> Package:
    """The package living at the repository root."""
    return Package(name="root", tag_prefix="v", directory=".")


@pytest.fixture
def sample_config(app_package: Package, root_package: Package) -> Config:
    return Config(versioned_packages=[app_package, root_package])


@pytest.fixture
def make_commit():
    """Build RawCommits with predictable hashes."""
    counter = iter(range(1, 10_000))

    def _make(message: str, body: str = "") -> RawCommit:
        return RawCommit(hash=f"{next(counter):040x}", message=message, body=body)

    return _make


@pytest.fixture
def tmp_config(tmp_path: Path) -> Path:
    """Create a temporary release-config.json file."""
    content = """\
{
  "versionedPackages": [
    {
      "name": "app",
      "tagPrefix": "app-v",
      "directory": "apps/web",
      "dependsOn": ["packages/ui"]
    },
    {
      "name": "docs",
      "tagPrefix": "docs-v",
      "directory": "apps/docs",
      "dependsOn": ["packages/*"]
    }
  ]
}
"""
    config = tmp_path / "release-config.json"
    config.write_text(content)
    return config
