"""Document store configuration."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional, Tuple, Type

from pydantic import BaseModel

from mdquery.docs.entry import NAME_SEPARATOR, EntryMeta
from mdquery.query.engine import QueryEngine

# Every store only ever looks at markdown files; configured globs narrow this set
BASE_GLOB = "**/*.md"


@dataclass(frozen=True)
class StoreConfig:
    """Configuration for a DocumentStore.

    Attributes:
        root: Directory holding the documents (ids are relative to it)
        query_engine: Supplies the predicates and the ``query`` field schema
        meta_schema: Pydantic model for extra front matter fields
        globs: Include patterns and ``!``-prefixed excludes, relative to root
        name_separator: Joins id segments
        cache_key: Optional ``input -> serializable``; when set, match results
            are memoized per key until the next refresh
        max_concurrent_reads: Bound on concurrent file loads (0 = unbounded)
    """

    root: Path
    query_engine: QueryEngine = field(default_factory=QueryEngine.default)
    meta_schema: Type[BaseModel] = EntryMeta
    globs: Tuple[str, ...] = (BASE_GLOB,)
    name_separator: str = NAME_SEPARATOR
    cache_key: Optional[Callable[[Any], Any]] = None
    max_concurrent_reads: int = 0
