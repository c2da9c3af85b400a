"""Tests for tryout.request.inputs."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from tryout.exceptions import InvalidUsageError, MissingParameterDefinition
from tryout.models import ParameterLocation, ParsedSpec, RequestValues
from tryout.request.inputs import (
    coerce_value,
    coerce_values,
    collect_values,
    missing_required,
    parse_assignment,
    read_body,
)
from tryout.request.registry import ParameterRegistry


class TestParseAssignment:
    def test_splits_at_first_equals(self) -> None:
        assert parse_assignment("q=a=b") == ("q", "a=b")

    def test_empty_value(self) -> None:
        assert parse_assignment("q=") == ("q", "")

    @pytest.mark.parametrize("text", ["novalue", "=x", ""])
    def test_malformed(self, text: str) -> None:
        with pytest.raises(InvalidUsageError, match="NAME=VALUE"):
            parse_assignment(text)


class TestCoerceValue:
    @pytest.mark.parametrize(
        "raw, schema, expected",
        [
            ("42", {"type": "string"}, "42"),
            ("42", {"type": "integer"}, 42),
            ("", {"type": "integer"}, 0),
            ("1.5", {"type": "number"}, 1.5),
            ("", {"type": "number"}, 0.0),
            ("yes", {"type": "boolean"}, True),
            ("OFF", {"type": "boolean"}, False),
            ("anything", {"type": "null"}, None),
            ("[1, 2]", {"type": "array"}, [1, 2]),
            ('{"a": 1}', {"type": "object"}, {"a": 1}),
            ("", {"type": "object"}, None),
            ("[1]", {"oneOf": [{"type": "array"}, {"type": "string"}]}, [1]),
            ("7", {"type": ["null", "integer"]}, 7),
            ("7", {}, 7),
            ("cat", {}, "cat"),
            ("cat", None, "cat"),
        ],
    )
    def test_conversions(self, raw: str, schema: Any, expected: Any) -> None:
        assert coerce_value(raw, schema, {}) == expected

    def test_follows_refs(self) -> None:
        root = {"components": {"schemas": {"Id": {"type": "integer"}}}}
        assert coerce_value("5", {"$ref": "#/components/schemas/Id"}, root) == 5

    def test_bad_integer(self) -> None:
        with pytest.raises(InvalidUsageError, match="Expected int"):
            coerce_value("abc", {"type": "integer"}, {})

    def test_bad_boolean(self) -> None:
        with pytest.raises(InvalidUsageError, match="boolean"):
            coerce_value("maybe", {"type": "boolean"}, {})

    def test_bad_json(self) -> None:
        with pytest.raises(InvalidUsageError, match="Invalid JSON"):
            coerce_value("[1,", {"type": "array"}, {})


class TestCoerceValues:
    def test_typed_by_declared_schema(self, petstore_spec: ParsedSpec) -> None:
        op = petstore_spec.find_operation("listPets")
        registry = ParameterRegistry.from_operation(op)
        values = coerce_values(
            ["limit=5", 'tags=["a","b"]'], ParameterLocation.QUERY, registry, petstore_spec.raw_spec
        )
        assert values == {"limit": 5, "tags": ["a", "b"]}

    def test_undeclared(self, petstore_spec: ParsedSpec) -> None:
        registry = ParameterRegistry.from_operation(petstore_spec.find_operation("listPets"))
        with pytest.raises(MissingParameterDefinition):
            coerce_values(["limit=5"], ParameterLocation.HEADER, registry, {})


class TestReadBody:
    def test_none(self) -> None:
        assert read_body(None) is None

    def test_inline_json(self) -> None:
        assert read_body('{"name": "Rex"}') == {"name": "Rex"}

    def test_from_file(self, tmp_path: Path) -> None:
        body_file = tmp_path / "pet.json"
        body_file.write_text('{"name": "Rex"}', encoding="utf-8")
        assert read_body(f"@{body_file}") == {"name": "Rex"}

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidUsageError, match="Cannot read body file"):
            read_body(f"@{tmp_path / 'nope.json'}")

    def test_invalid_json(self) -> None:
        with pytest.raises(InvalidUsageError, match="not valid JSON"):
            read_body("{name: Rex}")


class TestCollectValues:
    def test_all_locations(self, petstore_spec: ParsedSpec) -> None:
        op = petstore_spec.find_operation("listPets")
        values = collect_values(
            op,
            petstore_spec.raw_spec,
            query=["limit=10"],
            header=["X-Request-Id=abc"],
            cookie=["session=s1"],
        )
        assert values == RequestValues(
            query={"limit": 10},
            header={"X-Request-Id": "abc"},
            cookie={"session": "s1"},
        )

    def test_path_and_body(self, petstore_spec: ParsedSpec) -> None:
        op = petstore_spec.find_operation("getPetById")
        values = collect_values(op, petstore_spec.raw_spec, path=["petId=7"], body={"x": 1})
        assert values.path == {"petId": 7}
        assert values.body == {"x": 1}


class TestMissingRequired:
    def test_reports_missing_path_parameter(self, petstore_spec: ParsedSpec) -> None:
        op = petstore_spec.find_operation("getPetById")
        assert missing_required(op, RequestValues()) == ["path.petId"]

    def test_nothing_missing(self, petstore_spec: ParsedSpec) -> None:
        op = petstore_spec.find_operation("getPetById")
        assert missing_required(op, RequestValues(path={"petId": 1})) == []
