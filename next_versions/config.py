"""Release configuration loading.

The configuration normally lives in ``release-config.json`` at the
repository root:

    {
      "versionedPackages": [
        {"name": "app", "tagPrefix": "app-v", "directory": "apps/web",
         "dependsOn": ["packages/ui"]}
      ],
      "nonScopeBehavior": "bump"
    }

When that file is absent, the same keys are read from a
``[tool.next-versions]`` table in ``pyproject.toml``.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import tomlkit
from pydantic import ValidationError
from tomlkit.exceptions import TOMLKitError

from .errors import ConfigError
from .models import Config

CONFIG_FILENAME = "release-config.json"
PYPROJECT_FILENAME = "pyproject.toml"
PYPROJECT_TABLE = "next-versions"


def load_config(path: Path | None = None, root: Path | None = None) -> Config:
    """Load and validate the release configuration.

    Args:
        path: Explicit config file. ``.toml`` files are read as pyproject
              files, anything else as JSON. If omitted, the default
              locations under root are tried.
        root: Directory holding the default config files (defaults to cwd).

    Returns:
        The validated Config.

    Raises:
        ConfigError: If no configuration is found, it cannot be parsed,
                     fails validation, or defines no packages.
    """
    if path is None:
        path = find_config(root or Path.cwd())
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    if path.suffix == ".toml":
        config = _load_pyproject_table(path)
    else:
        config = _validate(path, _read(path))

    if not config.versioned_packages:
        raise ConfigError(f"No packages defined in {path.name}.")
    return config


def find_config(root: Path) -> Path:
    """Return the config file to use under root.

    Prefers ``release-config.json``; falls back to ``pyproject.toml`` only
    when it carries a ``[tool.next-versions]`` table.
    """
    json_path = root / CONFIG_FILENAME
    if json_path.exists():
        return json_path

    pyproject = root / PYPROJECT_FILENAME
    if pyproject.exists() and _pyproject_table(pyproject) is not None:
        return pyproject

    raise ConfigError(
        f"No {CONFIG_FILENAME} found in {root} and no "
        f"[tool.{PYPROJECT_TABLE}] table in {PYPROJECT_FILENAME}."
    )


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc


def _pyproject_table(path: Path) -> dict[str, Any] | None:
    try:
        doc = tomlkit.parse(_read(path))
    except TOMLKitError as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc
    tool = doc.get("tool")
    if not isinstance(tool, Mapping):
        return None
    table = tool.get(PYPROJECT_TABLE)
    if table is None:
        return None
    if not isinstance(table, Mapping):
        raise ConfigError(f"[tool.{PYPROJECT_TABLE}] in {path} must be a table")
    return table.unwrap()


def _load_pyproject_table(path: Path) -> Config:
    table = _pyproject_table(path)
    if table is None:
        raise ConfigError(f"No [tool.{PYPROJECT_TABLE}] table in {path}")
    try:
        return Config.model_validate(table)
    except ValidationError as exc:
        raise ConfigError(_describe(path, exc)) from exc


def _validate(path: Path, text: str) -> Config:
    try:
        return Config.model_validate_json(text)
    except ValidationError as exc:
        raise ConfigError(_describe(path, exc)) from exc


def _describe(path: Path, exc: ValidationError) -> str:
    """Turn pydantic errors into one line per problem, keyed by field."""
    lines = [f"Invalid configuration in {path}:"]
    for error in exc.errors():
        loc = ".".join(str(part) for part in error["loc"]) or "<root>"
        if loc == "nonScopeBehavior":
            lines.append("  nonScopeBehavior must be either 'ignore' or 'bump'")
        else:
            lines.append(f"  {loc}: {error['msg']}")
    return "\n".join(lines)
