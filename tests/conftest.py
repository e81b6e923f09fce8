"""Shared pytest fixtures for mdquery testing."""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict

import pytest

from mdquery.docs.store import DocumentStore
from mdquery.query.engine import QueryEngine
from mdquery.utils.output import output


# =============================================================================
# Test Data
# =============================================================================


@dataclass(frozen=True)
class TextInput:
    """Minimal input for the ``contains`` predicate."""

    content: str


PATTERN_FILES: Dict[str, str] = {
    "simple/basic.md": """---
query:
  always: true
---

# Basic pattern

Applies to everything.
""",
    "nested/level1/level1.md": """---
query:
  never: true
---

# Level 1
""",
    "nested/level1/pattern1.md": """---
query:
  contains: test1
---

# Pattern 1
""",
    "complex/with-query.md": """---
query:
  contains: component
---

# Component pattern
""",
    "complex/with-status.md": """---
status: blocked
query:
  contains: button
---

# Button pattern
""",
}


def write_tree(root: Path, files: Dict[str, str]) -> Path:
    """Write ``{relative path: text}`` under ``root`` and return ``root``."""
    for relative, text in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return root


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def contains_engine() -> QueryEngine:
    """Engine with a single ``contains`` predicate over ``TextInput``."""
    return QueryEngine.create(
        "contains",
        str,
        lambda text: lambda value: text in value.content,
    )


@pytest.fixture
def patterns_root(tmp_path: Path) -> Path:
    return write_tree(tmp_path / "patterns", PATTERN_FILES)


@pytest.fixture
def store(patterns_root: Path, contains_engine: QueryEngine) -> DocumentStore:
    return DocumentStore.from_root(patterns_root, query_engine=contains_engine)


@pytest.fixture
def quiet_output():
    """Reset the shared output manager after a test changes it."""
    yield output
    output.configure(quiet=False)
