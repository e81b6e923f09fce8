"""Query engine: predicate registry, schema and evaluator.

Engines are values. ``add_predicate`` returns a new engine and leaves the
receiver untouched, so a base engine can be shared and extended freely:

    engine = (
        QueryEngine.default()
        .add_predicate("contains", str, lambda text: lambda doc: text in doc.content)
        .add_predicate("extension", List[str], lambda exts: lambda doc: doc.extension in exts)
    )
    engine.match({"and": [{"contains": "button"}, {"extension": ["tsx"]}]}, doc)
"""

import logging
from typing import Any, Callable, Dict, Generic, Optional, Sequence, Tuple, TypeVar

from mdquery.errors import DuplicatePredicateError
from mdquery.query.hash import stable_hash
from mdquery.query.predicate import CONNECTIVE_KEYS, Predicate
from mdquery.query.schema import QuerySchema, build_query_schema

logger = logging.getLogger(__name__)

InputT = TypeVar("InputT")


class QueryEngine(Generic[InputT]):
    """Registry of predicates plus the validator and evaluator built from it."""

    def __init__(self, predicates: Sequence[Predicate] = ()):
        self._predicates: Tuple[Predicate, ...] = tuple(predicates)
        # Built once per engine, not on every access
        self._schema = build_query_schema(self._predicates)
        self._cache: Dict[str, bool] = {}

    @classmethod
    def default(cls) -> "QueryEngine":
        """Engine that only knows the connectives."""
        return cls()

    @classmethod
    def create(
        cls,
        name: str,
        config_schema: Any,
        handler: Callable[[Any], Callable[[InputT], bool]],
        cache_key: Optional[Callable[[Any, InputT], Any]] = None,
    ) -> "QueryEngine":
        """Engine with a single predicate."""
        return cls.default().add_predicate(name, config_schema, handler, cache_key)

    def add_predicate(
        self,
        name: str,
        config_schema: Any,
        handler: Callable[[Any], Callable[[InputT], bool]],
        cache_key: Optional[Callable[[Any, InputT], Any]] = None,
    ) -> "QueryEngine":
        """Return a new engine with one more predicate.

        Args:
            name: Query key of the predicate
            config_schema: Type validated by pydantic for the predicate's config
            handler: ``config -> (input -> bool)``
            cache_key: Optional ``(config, input) -> serializable`` for result caching

        Returns:
            A new QueryEngine; this one is unchanged

        Raises:
            DuplicatePredicateError: If ``name`` is taken by a predicate or a connective
            PredicateSchemaError: If ``config_schema`` cannot be validated by pydantic
        """
        if name in CONNECTIVE_KEYS or any(p.name == name for p in self._predicates):
            raise DuplicatePredicateError(name)
        predicate = Predicate(name, config_schema, handler, cache_key)
        logger.debug("Registering predicate '%s'", name)
        return type(self)(self._predicates + (predicate,))

    @property
    def predicates(self) -> Tuple[Predicate, ...]:
        return self._predicates

    @property
    def schema(self) -> QuerySchema:
        return self._schema

    @property
    def json_schema(self) -> Dict[str, Any]:
        return self._schema.json_schema()

    def clear_cache(self) -> None:
        """Forget memoized predicate results."""
        self._cache.clear()

    def match(
        self,
        query: Any,
        value: InputT,
        skip_query_validation: bool = False,
        use_cache: bool = False,
    ) -> bool:
        """Check whether ``value`` satisfies ``query``.

        Args:
            query: Query in plain-dict form; ``None`` never matches
            value: Input handed to predicate handlers
            skip_query_validation: Treat ``query`` as already valid (trusted callers)
            use_cache: Memoize results of predicates that define ``cache_key``

        Returns:
            True if the query matches

        Raises:
            QueryValidationError: If validation is on and ``query`` is malformed
        """
        if query is None:
            return False
        if not skip_query_validation:
            query = self._schema.parse(query)
        return self.apply(query, value, use_cache=use_cache)

    def apply(self, query: Any, value: InputT, use_cache: bool = False) -> bool:
        """Evaluate a query without validating it.

        Connective keys are checked before predicate keys. Unknown keys, empty
        ``and``/``or`` lists and a ``not`` without an object operand evaluate
        to False.
        """
        if not isinstance(query, dict):
            return False

        if "always" in query:
            return True

        if "never" in query:
            return False

        if "and" in query:
            operands = query["and"]
            if not operands:
                return False
            return all(self.apply(q, value, use_cache) for q in operands)

        if "or" in query:
            operands = query["or"]
            if not operands:
                return False
            return any(self.apply(q, value, use_cache) for q in operands)

        if "not" in query:
            operand = query["not"]
            if not isinstance(operand, dict):
                return False
            return not self.apply(operand, value, use_cache)

        for predicate in self._predicates:
            if predicate.name in query:
                return self._evaluate(predicate, query[predicate.name], value, use_cache)
        return False

    def _evaluate(self, predicate: Predicate, config: Any, value: InputT, use_cache: bool) -> bool:
        if not use_cache or predicate.cache_key is None:
            return predicate.evaluate(config, value)

        key = stable_hash([predicate.name, config, predicate.cache_key(config, value)])
        if key not in self._cache:
            self._cache[key] = predicate.evaluate(config, value)
        return self._cache[key]
