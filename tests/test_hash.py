"""Tests for query/hash.py - stable cache keys."""

from pydantic import BaseModel

from mdquery.query.hash import stable_hash


class Config(BaseModel):
    name: str
    tags: list


class TestStableHash:
    def test_primitives_hash_to_json_text(self):
        assert stable_hash("test") == '"test"'
        assert stable_hash(42) == "42"
        assert stable_hash(None) == "null"
        assert stable_hash(True) == "true"

    def test_object_key_order_ignored(self):
        assert stable_hash({"b": 1, "a": {"y": 2, "x": 3}}) == stable_hash({"a": {"x": 3, "y": 2}, "b": 1})

    def test_array_order_kept(self):
        assert stable_hash([1, 2]) != stable_hash([2, 1])

    def test_models_hash_by_value(self):
        assert stable_hash(Config(name="a", tags=["x"])) == stable_hash({"name": "a", "tags": ["x"]})

    def test_sets_are_order_independent(self):
        assert stable_hash({"b", "a"}) == stable_hash({"a", "b"})
