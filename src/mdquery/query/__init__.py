"""Predicate query engine.

Register named predicates, combine them with ``and``/``or``/``not``/
``always``/``never`` and evaluate the resulting queries against inputs.
"""

from .engine import QueryEngine
from .hash import stable_hash
from .predicate import CONNECTIVE_KEYS, Predicate
from .predicates import FileInput, file_query_engine
from .schema import ParseResult, QueryNode, QuerySchema, build_query_schema

__all__ = [
    "QueryEngine",
    "stable_hash",
    "CONNECTIVE_KEYS",
    "Predicate",
    "FileInput",
    "file_query_engine",
    "ParseResult",
    "QueryNode",
    "QuerySchema",
    "build_query_schema",
]
