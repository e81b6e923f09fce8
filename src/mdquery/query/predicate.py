"""Predicate definitions for the query engine.

A predicate is a named boolean test parameterized by a validated config.
In a query it appears as a single-key object ``{name: config}``.
"""

from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

ConfigT = TypeVar("ConfigT")
InputT = TypeVar("InputT")


# Keys reserved by the query grammar itself
CONNECTIVE_KEYS = ("always", "never", "and", "or", "not")


@dataclass(frozen=True)
class Predicate(Generic[ConfigT, InputT]):
    """A registered predicate.

    Attributes:
        name: Key used in queries (e.g. ``"contains"``)
        config_schema: Any type pydantic can validate (``str``, ``List[str]``,
            a ``BaseModel`` subclass, ``Annotated[...]``)
        handler: ``config -> (input -> bool)``
        cache_key: Optional ``(config, input) -> serializable`` used to memoize
            handler results when matching with ``use_cache=True``
    """

    name: str
    config_schema: Any
    handler: Callable[[ConfigT], Callable[[InputT], bool]]
    cache_key: Optional[Callable[[ConfigT, InputT], Any]] = None

    def evaluate(self, config: ConfigT, value: InputT) -> bool:
        return bool(self.handler(config)(value))
