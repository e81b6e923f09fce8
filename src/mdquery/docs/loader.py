"""Document loader: markdown files to validated entries.

Each generation reads the matching files once. The pending load is cached as
an ``asyncio.Task`` so concurrent callers share it instead of re-reading the
filesystem; ``refresh()`` drops it and the next access starts a new load.
"""

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, create_model

from mdquery.docs.config import BASE_GLOB, StoreConfig
from mdquery.docs.entry import Entry, EntryId, compute_entry_id
from mdquery.docs.frontmatter import get_body, get_header_data
from mdquery.errors import (
    EntryValidationError,
    FrontmatterReadError,
    MissingFrontmatterError,
    NotAnEntryFileError,
)
from mdquery.globs import glob_match, glob_matches
from mdquery.query.engine import QueryEngine

logger = logging.getLogger(__name__)

# Documents without a query are loaded but never match
DEFAULT_QUERY: Dict[str, Any] = {"never": True}


def build_entry_schema(meta_schema: Type[BaseModel], engine: QueryEngine) -> Type[BaseModel]:
    """Extend ``meta_schema`` with a ``query`` field validated by ``engine``.

    An existing ``query`` field on ``meta_schema`` is replaced.
    """
    return create_model(
        meta_schema.__name__,
        __base__=meta_schema,
        __module__=meta_schema.__module__,
        query=(
            engine.schema.type,
            Field(default=DEFAULT_QUERY, validate_default=True),
        ),
    )


class DocumentLoader:
    """Reads and validates the documents under a root directory."""

    def __init__(self, config: StoreConfig):
        self.config = config
        self.root = Path(config.root).resolve()
        self.entry_schema = build_entry_schema(config.meta_schema, config.query_engine)
        self._entries_task: Optional[asyncio.Task] = None

    @property
    def query(self) -> QueryEngine:
        return self.config.query_engine

    def relative_path(self, path: Path) -> str:
        return path.resolve().relative_to(self.root).as_posix()

    def is_entry_file(self, path: Union[str, Path]) -> bool:
        """Check that ``path`` is inside the root and matches the globs."""
        try:
            relative = self.relative_path(Path(path))
        except ValueError:
            return False
        return glob_match(relative, BASE_GLOB) and glob_matches(relative, self.config.globs)

    def compute_entry_id(self, path: Union[str, Path]) -> EntryId:
        return compute_entry_id(self.root, Path(path).resolve(), self.config.name_separator)

    def list_files(self) -> List[Path]:
        """Entry files under the root, sorted by relative path."""
        files = [
            path
            for path in self.root.rglob("*.md")
            if path.is_file() and self.is_entry_file(path)
        ]
        return sorted(files, key=self.relative_path)

    async def file_to_entry(self, path: Union[str, Path]) -> Entry:
        """Load a single document.

        Raises:
            NotAnEntryFileError: If the file is outside the root or the globs
            FrontmatterReadError: If the header is not valid YAML
            MissingFrontmatterError: If there is no header but the schema needs one
            EntryValidationError: If the header fails the entry schema
        """
        path = Path(path).resolve()
        if not self.is_entry_file(path):
            raise NotAnEntryFileError(path, self.root, self.config.globs)
        return await self._load_entry(path)

    async def _load_entry(self, path: Path) -> Entry:
        relative = Path(self.relative_path(path))
        text = await asyncio.to_thread(path.read_text, encoding="utf-8")

        try:
            header = get_header_data(text)
        except yaml.YAMLError as err:
            raise FrontmatterReadError(relative) from err

        try:
            meta = self.entry_schema.model_validate(header if header is not None else {})
        except ValidationError as err:
            errors = err.errors(include_url=False)
            if header is None:
                raise MissingFrontmatterError(relative, errors) from err
            raise EntryValidationError(relative, errors) from err

        name, entry_type = self.compute_entry_id(path)
        content = get_body(text).strip()

        return Entry(
            id=name,
            type=entry_type,
            content=content or None,
            path=path,
            query=self.query.schema.to_query(meta.query),
            meta=meta,
        )

    async def read_entries(self) -> List[Entry]:
        """Read every entry file. One failing document fails the whole read."""
        files = await asyncio.to_thread(self.list_files)
        logger.debug("Loading %d documents from %s", len(files), self.root)

        limit = self.config.max_concurrent_reads
        semaphore = asyncio.Semaphore(limit) if limit > 0 else None

        async def load(path: Path) -> Entry:
            if semaphore is None:
                return await self._load_entry(path)
            async with semaphore:
                return await self._load_entry(path)

        entries = list(await asyncio.gather(*[load(path) for path in files]))
        logger.debug("Loaded %d entries from %s", len(entries), self.root)
        return entries

    def _entries(self) -> asyncio.Task:
        # Assigned before any await so concurrent callers share one load
        if self._entries_task is None:
            self._entries_task = asyncio.ensure_future(self.read_entries())
        return self._entries_task

    async def get_all(self) -> List[Entry]:
        """All entries of the current generation, sorted by relative path."""
        return await asyncio.shield(self._entries())

    def refresh(self) -> None:
        """Forget the current generation; the next access reloads from disk."""
        self._entries_task = None
