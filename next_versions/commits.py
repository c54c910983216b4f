"""Conventional-commit parsing and bump classification.

Two deliberately different grammars live here:

- ``parse_commit`` reads the structured header ``type(scope)!:`` and is what
  decides whether a commit takes part in a version check at all.
- ``classify`` maps the full commit text (subject, body and footers) to a
  bump magnitude. It scans for a ``BREAKING CHANGE`` footer anywhere and
  treats ``!`` as breaking only for ``feat`` and ``fix``; feature and fix
  detection is a plain prefix test.
"""

from __future__ import annotations

import re

from .models import Bump, ParsedCommit

HEADER_RE = re.compile(r"^([a-z]+)(?:\(([^)]+)\))?(!)?:")
BREAKING_HEADER_RE = re.compile(r"^(feat|fix)(\([^)]+\))?!:")
BREAKING_FOOTER = "breaking change"


def parse_commit(message: str) -> ParsedCommit | None:
    """Parse a commit subject into type, scope and breaking flag.

    Returns None for messages without a lowercase ``type:`` header, such as
    merge commits or free-text subjects.

    Examples:
        "feat(ui)!: drop IE" → type="feat", scope="ui", breaking=True
        "fix: typo" → type="fix", scope="", breaking=False
        "Merge branch 'main'" → None
    """
    match = HEADER_RE.match(message)
    if not match:
        return None
    commit_type, scope, bang = match.groups()
    return ParsedCommit(
        type=commit_type, scope=(scope or "").strip(), breaking=bool(bang)
    )


def classify(message: str) -> Bump:
    """Classify a full commit message into the bump it implies.

    Checked in order, first match wins:
    1. "breaking change" anywhere, or a ``feat!``/``fix!`` header → MAJOR
    2. starts with "feat" → MINOR
    3. starts with "fix" → PATCH
    4. anything else → NONE (not relevant)

    Matching is case-insensitive.
    """
    text = message.lower()
    if BREAKING_FOOTER in text or BREAKING_HEADER_RE.match(text):
        return Bump.MAJOR
    if text.startswith("feat"):
        return Bump.MINOR
    if text.startswith("fix"):
        return Bump.PATCH
    return Bump.NONE
