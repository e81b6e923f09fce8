"""Hierarchical document store.

Entries form a tree through their ids: ``a/b/c`` sits under ``a/b`` which
sits under ``a``. An entry matches an input only if its own query and the
queries of every existing ancestor match, so a parent entry acts as a gate
for everything below it.
"""

import asyncio
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Type, Union

from pydantic import BaseModel

from mdquery.docs.config import StoreConfig
from mdquery.docs.entry import Entry
from mdquery.docs.loader import DocumentLoader
from mdquery.query.engine import QueryEngine
from mdquery.query.hash import stable_hash

logger = logging.getLogger(__name__)


class DocumentStore(DocumentLoader):
    """Loads documents once per generation and matches inputs against them.

    Example:
        store = DocumentStore.from_root("patterns", query_engine=file_query_engine())
        entries = await store.match_one(FileInput("src/button.tsx", source))
    """

    def __init__(self, config: StoreConfig):
        super().__init__(config)
        self._all_map_task: Optional[asyncio.Task] = None
        self._parents_map_task: Optional[asyncio.Task] = None
        self._match_cache: Dict[str, List[Entry]] = {}
        self._generation = 0

    @classmethod
    def from_root(
        cls,
        root: Union[str, Path],
        query_engine: Optional[QueryEngine] = None,
        **options: Any,
    ) -> "DocumentStore":
        """Store over ``root`` with default settings unless overridden."""
        if query_engine is not None:
            options["query_engine"] = query_engine
        return cls(StoreConfig(root=Path(root).resolve(), **options))

    # Functional configuration: each returns a new store with a fresh cache

    def _with(self, **changes: Any) -> "DocumentStore":
        return type(self)(replace(self.config, **changes))

    def with_query_engine(self, query_engine: QueryEngine) -> "DocumentStore":
        return self._with(query_engine=query_engine)

    def with_meta_schema(self, meta_schema: Type[BaseModel]) -> "DocumentStore":
        return self._with(meta_schema=meta_schema)

    def with_globs(self, *globs: str) -> "DocumentStore":
        return self._with(globs=tuple(globs))

    def with_name_separator(self, separator: str) -> "DocumentStore":
        return self._with(name_separator=separator)

    def with_cache_key(self, cache_key: Optional[Callable[[Any], Any]]) -> "DocumentStore":
        return self._with(cache_key=cache_key)

    @property
    def schema(self) -> Type[BaseModel]:
        """Effective metadata model (meta schema plus ``query``)."""
        return self.entry_schema

    @property
    def json_schema(self) -> Dict[str, Any]:
        return self.entry_schema.model_json_schema(mode="validation")

    # Derived maps. Each task captures the current entries task synchronously,
    # so a map always belongs to the generation it was requested in.

    def _all_map(self) -> asyncio.Task:
        if self._all_map_task is None:
            self._all_map_task = asyncio.ensure_future(self._build_all_map(self._entries()))
        return self._all_map_task

    def _parents_map(self) -> asyncio.Task:
        if self._parents_map_task is None:
            self._parents_map_task = asyncio.ensure_future(
                self._build_parents_map(self._all_map())
            )
        return self._parents_map_task

    async def _build_all_map(self, entries_task: asyncio.Task) -> Dict[str, Entry]:
        by_id: Dict[str, Entry] = {}
        for entry in await asyncio.shield(entries_task):
            if entry.id in by_id:
                logger.warning(
                    "Duplicate entry id '%s': %s replaces %s",
                    entry.id, entry.path, by_id[entry.id].path,
                )
            by_id[entry.id] = entry
        return by_id

    async def _build_parents_map(self, all_map_task: asyncio.Task) -> Dict[str, List[Entry]]:
        by_id = await asyncio.shield(all_map_task)
        separator = self.config.name_separator
        parents: Dict[str, List[Entry]] = {}
        for entry_id in by_id:
            segments = entry_id.split(separator)
            chain = []
            for depth in range(1, len(segments) + 1):
                ancestor = by_id.get(separator.join(segments[:depth]))
                if ancestor is not None:
                    chain.append(ancestor)
            parents[entry_id] = chain
        return parents

    async def get_all_map(self) -> Dict[str, Entry]:
        return await asyncio.shield(self._all_map())

    async def get_parents_map(self) -> Dict[str, List[Entry]]:
        """Ancestor chain per id, root first, the entry itself last."""
        return await asyncio.shield(self._parents_map())

    async def get_one_by_id(self, entry_id: str) -> Optional[Entry]:
        return (await self.get_all_map()).get(entry_id)

    async def get_parents_by_id(self, entry_id: str) -> List[Entry]:
        return list((await self.get_parents_map()).get(entry_id, []))

    @staticmethod
    def effective_query(entry: Entry, chain: Sequence[Entry]) -> Dict[str, Any]:
        """Conjunction of the ancestor queries and the entry's own query."""
        ancestors = [parent.query for parent in chain if parent.id != entry.id]
        if not ancestors:
            return entry.query
        return {"and": [*ancestors, entry.query]}

    async def _match(self, value: Any, entries_task: asyncio.Task, parents_task: asyncio.Task) -> List[Entry]:
        # The parents map waits on the entries, so its failure covers theirs
        parents = await asyncio.shield(parents_task)
        entries = await asyncio.shield(entries_task)
        return [
            entry
            for entry in entries
            if self.query.match(
                self.effective_query(entry, parents.get(entry.id, [])),
                value,
                skip_query_validation=True,
                use_cache=True,
            )
        ]

    async def match_one(self, value: Any, skip_empty: bool = False) -> List[Entry]:
        """Entries whose query and ancestor queries all match ``value``.

        Args:
            value: Input handed to the predicates
            skip_empty: Leave out entries without content

        Returns:
            Matching entries in load order
        """
        entries_task = self._entries()
        parents_task = self._parents_map()
        generation = self._generation

        if self.config.cache_key is None:
            matched = await self._match(value, entries_task, parents_task)
        else:
            key = stable_hash(self.config.cache_key(value))
            matched = self._match_cache.get(key)
            if matched is None:
                matched = await self._match(value, entries_task, parents_task)
                if generation == self._generation:
                    self._match_cache[key] = matched

        if skip_empty:
            return [entry for entry in matched if entry.content]
        return list(matched)

    async def match_any(self, values: Sequence[Any], skip_empty: bool = False) -> List[Entry]:
        """Entries matching at least one of ``values``, deduplicated, sorted by path."""
        results = await asyncio.gather(
            *[self.match_one(value, skip_empty=skip_empty) for value in values]
        )
        by_id: Dict[str, Entry] = {}
        for matched in results:
            for entry in matched:
                by_id[entry.id] = entry
        return sorted(by_id.values(), key=lambda entry: str(entry.path))

    async def match_ids(self, value: Any) -> List[str]:
        return [entry.id for entry in await self.match_one(value)]

    def refresh(self) -> None:
        """Start a new generation: drop loaded entries and every derived cache."""
        super().refresh()
        self._all_map_task = None
        self._parents_map_task = None
        self._match_cache = {}
        self._generation += 1
        self.query.clear_cache()
        logger.debug("Store %s refreshed (generation %d)", self.root, self._generation)
