"""Query schema builder.

Builds a pydantic validator for the query grammar:

    {"and": [Query, Query, ...]}    at least two operands
    {"or": [Query, Query, ...]}     at least two operands
    {"not": Query}
    {"always": true}
    {"never": true}
    {"<predicate>": Config}         one per registered predicate

Every node is a frozen model that forbids extra keys. The union is tagged by
key presence, checked in the same order the engine evaluates keys, so an
object carrying two recognized keys (``{"and": [...], "contains": "x"}``) is
rejected instead of being silently resolved by evaluation order.
"""

import logging
import re
from dataclasses import dataclass
from typing import Annotated, Any, ClassVar, Dict, List, Literal, Optional, Sequence, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    PydanticUserError,
    Tag,
    TypeAdapter,
    ValidationError,
    create_model,
)

from mdquery.errors import PredicateSchemaError, QueryValidationError
from mdquery.query.predicate import CONNECTIVE_KEYS, Predicate

logger = logging.getLogger(__name__)


class QueryNode(BaseModel):
    """Base class of every validated query node."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    query_key: ClassVar[str]

    def to_query(self) -> Dict[str, Any]:
        """Convert the validated node back to its plain-dict form."""
        raise NotImplementedError


class AlwaysQuery(QueryNode):
    query_key: ClassVar[str] = "always"
    value: Literal[True] = Field(alias="always")

    def to_query(self) -> Dict[str, Any]:
        return {"always": True}


class NeverQuery(QueryNode):
    query_key: ClassVar[str] = "never"
    value: Literal[True] = Field(alias="never")

    def to_query(self) -> Dict[str, Any]:
        return {"never": True}


class PredicateQuery(QueryNode):
    """Leaf node ``{name: config}``; subclasses are generated per predicate."""

    config: Any = None

    def to_query(self) -> Dict[str, Any]:
        return {self.query_key: self.config}


def _model_name(name: str) -> str:
    safe = re.sub(r"\W", "_", name)
    return f"{safe[:1].upper()}{safe[1:]}Query"


def predicate_model(predicate: Predicate) -> type:
    """Create the leaf model accepting exactly ``{predicate.name: config}``."""
    try:
        model = create_model(
            _model_name(predicate.name),
            __base__=PredicateQuery,
            __module__=__name__,
            config=(predicate.config_schema, Field(alias=predicate.name)),
        )
    except (PydanticUserError, TypeError) as err:
        raise PredicateSchemaError(predicate.name, predicate.config_schema) from err
    model.query_key = predicate.name
    return model


def _discriminator(keys: Sequence[str]):
    def tag_of(value: Any) -> Optional[str]:
        if isinstance(value, dict):
            for key in keys:
                if key in value:
                    return key
            return None
        return getattr(value, "query_key", None)

    return tag_of


@dataclass
class ParseResult:
    """Outcome of :meth:`QuerySchema.safe_parse`."""

    success: bool
    data: Optional[Dict[str, Any]] = None
    error: Optional[QueryValidationError] = None


class QuerySchema:
    """Validator for one engine's query grammar.

    Attributes:
        type: The annotated, discriminated union usable as a pydantic field type
        adapter: ``TypeAdapter`` over ``type``
        keys: Accepted top-level keys in evaluation order
    """

    def __init__(self, query_type: Any, adapter: TypeAdapter, keys: Sequence[str]):
        self.type = query_type
        self.adapter = adapter
        self.keys = tuple(keys)

    def validate(self, value: Any) -> QueryNode:
        """Validate ``value`` and return the model tree."""
        try:
            return self.adapter.validate_python(value)
        except ValidationError as err:
            raise QueryValidationError(err.errors(include_url=False), value) from err

    def parse(self, value: Any) -> Dict[str, Any]:
        """Validate ``value`` and return it as a plain query dict.

        Raises:
            QueryValidationError: If ``value`` does not follow the grammar
        """
        return self.validate(value).to_query()

    def safe_parse(self, value: Any) -> ParseResult:
        try:
            return ParseResult(success=True, data=self.parse(value))
        except QueryValidationError as err:
            return ParseResult(success=False, error=err)

    def is_valid(self, value: Any) -> bool:
        return self.safe_parse(value).success

    def to_query(self, node: Any) -> Dict[str, Any]:
        """Plain-dict form of an already validated node (dicts pass through)."""
        if isinstance(node, QueryNode):
            return node.to_query()
        return node

    def json_schema(self) -> Dict[str, Any]:
        return self.adapter.json_schema()


def build_query_schema(predicates: Sequence[Predicate]) -> QuerySchema:
    """Build the recursive query validator for a list of predicates.

    The connective models refer to ``"Query"`` before it exists; the forward
    reference is resolved by ``model_rebuild()`` once the union below is bound
    in this function's namespace.

    Args:
        predicates: Registered predicates, in registration order

    Returns:
        QuerySchema accepting connectives plus one leaf shape per predicate
    """
    leaf_models = [predicate_model(p) for p in predicates]

    class AndQuery(QueryNode):
        query_key: ClassVar[str] = "and"
        operands: List["Query"] = Field(alias="and", min_length=2)

        def to_query(self) -> Dict[str, Any]:
            return {"and": [operand.to_query() for operand in self.operands]}

    class OrQuery(QueryNode):
        query_key: ClassVar[str] = "or"
        operands: List["Query"] = Field(alias="or", min_length=2)

        def to_query(self) -> Dict[str, Any]:
            return {"or": [operand.to_query() for operand in self.operands]}

    class NotQuery(QueryNode):
        query_key: ClassVar[str] = "not"
        operand: "Query" = Field(alias="not")

        def to_query(self) -> Dict[str, Any]:
            return {"not": self.operand.to_query()}

    connectives = {
        model.query_key: model
        for model in (AlwaysQuery, NeverQuery, AndQuery, OrQuery, NotQuery)
    }
    members = [connectives[key] for key in CONNECTIVE_KEYS] + leaf_models
    keys = [model.query_key for model in members]

    Query = Annotated[
        Union[tuple(Annotated[model, Tag(model.query_key)] for model in members)],
        Discriminator(
            _discriminator(keys),
            custom_error_type="invalid_query",
            custom_error_message=f"Expected an object with one of the keys: {', '.join(keys)}",
        ),
    ]

    AndQuery.model_rebuild()
    OrQuery.model_rebuild()
    NotQuery.model_rebuild()

    logger.debug("Built query schema with keys: %s", ", ".join(keys))
    return QuerySchema(Query, TypeAdapter(Query), keys)
