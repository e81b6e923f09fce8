"""mdquery: predicate queries over hierarchical markdown documents."""

from mdquery.docs import DocumentStore, Entry, EntryMeta, StoreConfig, compute_entry_id
from mdquery.errors import (
    DuplicatePredicateError,
    EntryError,
    EntryValidationError,
    FrontmatterReadError,
    MdQueryError,
    MissingFrontmatterError,
    NotAnEntryFileError,
    PredicateSchemaError,
    QueryValidationError,
)
from mdquery.query import FileInput, QueryEngine, file_query_engine, stable_hash

__version__ = "0.1.0"

__all__ = [
    "DocumentStore",
    "Entry",
    "EntryMeta",
    "StoreConfig",
    "compute_entry_id",
    "QueryEngine",
    "FileInput",
    "file_query_engine",
    "stable_hash",
    "MdQueryError",
    "QueryValidationError",
    "DuplicatePredicateError",
    "PredicateSchemaError",
    "EntryError",
    "EntryValidationError",
    "MissingFrontmatterError",
    "FrontmatterReadError",
    "NotAnEntryFileError",
]
