"""Exception types for query validation and document loading."""

from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence


def format_errors(errors: Sequence[Dict[str, Any]]) -> str:
    """Render pydantic error dicts as an indented, human-readable listing.

    Args:
        errors: Items from ``ValidationError.errors()``

    Returns:
        One line per violation, e.g. ``  ✖ and.0: Field required``
    """
    lines = []
    for error in errors:
        loc = ".".join(str(part) for part in error.get("loc", ()))
        message = error.get("msg", "invalid value")
        lines.append(f"  ✖ {loc}: {message}" if loc else f"  ✖ {message}")
    return "\n".join(lines)


class MdQueryError(Exception):
    """Base class for all mdquery errors."""
    pass


class QueryValidationError(MdQueryError, ValueError):
    """Raised when a value does not follow the query grammar."""

    def __init__(self, errors: List[Dict[str, Any]], value: Any = None):
        self.errors = errors
        self.value = value
        super().__init__(f"Invalid query:\n{format_errors(errors)}")


class DuplicatePredicateError(MdQueryError, ValueError):
    """Raised when a predicate name is already taken in an engine."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Predicate '{name}' is already registered")


class PredicateSchemaError(MdQueryError, TypeError):
    """Raised when a predicate's config schema cannot be turned into a validator."""

    def __init__(self, name: str, config_schema: Any):
        self.name = name
        self.config_schema = config_schema
        super().__init__(
            f"Cannot build a validator for predicate '{name}' from {config_schema!r}"
        )


class EntryError(MdQueryError):
    """Base class for errors scoped to a single document file."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        super().__init__(message)


class EntryValidationError(EntryError):
    """Raised when a document's front matter fails the metadata schema."""

    def __init__(
        self,
        path: Path,
        errors: List[Dict[str, Any]],
        message: Optional[str] = None,
    ):
        self.errors = errors
        if message is None:
            message = f"Failed to parse config for {path}"
        super().__init__(f"{message}\n{format_errors(errors)}", path)


class MissingFrontmatterError(EntryValidationError):
    """Raised when a document has no header but the schema requires fields."""

    def __init__(self, path: Path, errors: List[Dict[str, Any]]):
        super().__init__(
            path,
            errors,
            f"Failed to parse config for {path}. "
            "Expected a frontmatter header but got none.",
        )


class FrontmatterReadError(EntryError):
    """Raised when a document header exists but cannot be parsed."""

    def __init__(self, path: Path):
        super().__init__(f"Failed to read markdown file header for {path}", path)


class NotAnEntryFileError(EntryError):
    """Raised when a file is outside the store root or does not match its globs."""

    def __init__(self, path: Path, root: Path, globs: Sequence[str]):
        self.root = root
        self.globs = tuple(globs)
        super().__init__(
            f"File {path} is not an entry file in this store\n"
            f"  - Root: {root}\n"
            f"  - Globs: {', '.join(globs)}",
            path,
        )
