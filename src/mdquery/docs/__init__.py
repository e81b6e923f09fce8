"""Markdown document store with hierarchical query matching."""

from .config import BASE_GLOB, StoreConfig
from .entry import NAME_SEPARATOR, Entry, EntryId, EntryMeta, compute_entry_id
from .loader import DocumentLoader, build_entry_schema
from .store import DocumentStore

__all__ = [
    "BASE_GLOB",
    "StoreConfig",
    "NAME_SEPARATOR",
    "Entry",
    "EntryId",
    "EntryMeta",
    "compute_entry_id",
    "DocumentLoader",
    "build_entry_schema",
    "DocumentStore",
]
