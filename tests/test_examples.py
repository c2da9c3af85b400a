"""Tests for tryout.examples."""

from __future__ import annotations

import json
from typing import Any

import pytest

from tryout.examples import build_example, example_for_operation, merge_first_writer_wins
from tryout.exceptions import CyclicReferenceError
from tryout.models import ParsedSpec


PET_EXAMPLE = {
    "name": "string",
    "tag": "string",
    "status": "string",
    "id": "integer (int64)",
}


# ---------------------------------------------------------------------------
# Typed leaves
# ---------------------------------------------------------------------------


class TestStrings:
    def test_plain(self) -> None:
        assert build_example({"type": "string"}, {}) == "string"

    def test_format(self) -> None:
        assert build_example({"type": "string", "format": "date-time"}, {}) == "string (date-time)"

    def test_format_and_pattern(self) -> None:
        schema = {"type": "string", "format": "code", "pattern": "^[A-Z]+$"}
        assert build_example(schema, {}) == "string (code): matching ^[A-Z]+$"

    def test_pattern_without_format_is_ignored(self) -> None:
        assert build_example({"type": "string", "pattern": "^a$"}, {}) == "string"


class TestNumbers:
    def test_plain_integer(self) -> None:
        assert build_example({"type": "integer"}, {}) == "integer"

    def test_constraints_need_format(self) -> None:
        assert build_example({"type": "integer", "minimum": 1}, {}) == "integer"

    def test_format_without_constraints(self) -> None:
        assert build_example({"type": "integer", "format": "int64"}, {}) == "integer (int64)"

    def test_both_bounds(self) -> None:
        schema = {"type": "integer", "format": "int32", "minimum": 1, "maximum": 100}
        assert (
            build_example(schema, {})
            == "integer (int32): between 1 (inclusive) and 100 (inclusive)"
        )

    def test_exclusive_flags(self) -> None:
        schema = {
            "type": "number",
            "format": "double",
            "minimum": 0,
            "maximum": 1,
            "exclusiveMinimum": True,
            "exclusiveMaximum": True,
        }
        assert (
            build_example(schema, {})
            == "number (double): between 0 (exclusive) and 1 (exclusive)"
        )

    def test_lower_bound_only(self) -> None:
        schema = {"type": "number", "format": "double", "minimum": 0, "exclusiveMinimum": True}
        assert build_example(schema, {}) == "number (double): greater than 0 (exclusive)"

    def test_upper_bound_and_multiple(self) -> None:
        schema = {"type": "number", "format": "float", "maximum": 9.5, "multipleOf": 0.5}
        assert (
            build_example(schema, {})
            == "number (float): less than 9.5 (inclusive), multiple of 0.5"
        )

    def test_zero_bound_is_rendered(self) -> None:
        schema = {"type": "integer", "format": "int32", "maximum": 0}
        assert build_example(schema, {}) == "integer (int32): less than 0 (inclusive)"


class TestOtherTypes:
    def test_boolean(self) -> None:
        assert build_example({"type": "boolean"}, {}) == "true | false"

    def test_null(self) -> None:
        assert build_example({"type": "null"}, {}) == "<null>"

    def test_array_with_items(self) -> None:
        schema = {"type": "array", "items": {"type": "boolean"}}
        assert build_example(schema, {}) == ["true | false"]

    def test_array_without_items(self) -> None:
        assert build_example({"type": "array"}, {}) == []

    def test_type_list_uses_first_non_null(self) -> None:
        assert build_example({"type": ["null", "string"]}, {}) == "string"

    @pytest.mark.parametrize(
        "schema", [{}, {"description": "anything"}, {"type": "file"}, None, "string"]
    )
    def test_unrecognised_is_empty_mapping(self, schema: Any) -> None:
        assert build_example(schema, {}) == {}


class TestObjects:
    def test_properties(self) -> None:
        schema = {
            "type": "object",
            "properties": {"a": {"type": "string"}, "b": {"type": "integer"}},
        }
        assert build_example(schema, {}) == {"a": "string", "b": "integer"}

    def test_properties_then_additional(self) -> None:
        schema = {
            "type": "object",
            "properties": {"a": {"type": "string"}},
            "additionalProperties": {"extra": {"type": "boolean"}},
        }
        assert build_example(schema, {}) == {"a": "string", "extra": "true | false"}

    def test_boolean_additional_properties_ignored(self) -> None:
        schema = {"type": "object", "additionalProperties": True}
        assert build_example(schema, {}) == {}

    def test_property_order_kept(self) -> None:
        schema = {
            "type": "object",
            "properties": {"z": {"type": "string"}, "a": {"type": "string"}},
        }
        assert list(build_example(schema, {})) == ["z", "a"]


# ---------------------------------------------------------------------------
# References and composition
# ---------------------------------------------------------------------------


class TestRefs:
    def test_ref_is_followed(self, petstore_raw: dict[str, Any]) -> None:
        assert build_example({"$ref": "#/components/schemas/Status"}, petstore_raw) == "string"

    def test_ref_through_all_of(self, petstore_raw: dict[str, Any]) -> None:
        example = build_example({"$ref": "#/components/schemas/Pet"}, petstore_raw)
        assert example == PET_EXAMPLE

    def test_document_not_mutated(self, petstore_raw: dict[str, Any]) -> None:
        before = json.dumps(petstore_raw, sort_keys=True)
        build_example({"$ref": "#/components/schemas/Pet"}, petstore_raw)
        assert json.dumps(petstore_raw, sort_keys=True) == before

    def test_same_ref_in_siblings_is_not_a_cycle(self) -> None:
        root = {"components": {"schemas": {"S": {"type": "string"}}}}
        schema = {
            "type": "object",
            "properties": {
                "a": {"$ref": "#/components/schemas/S"},
                "b": {"$ref": "#/components/schemas/S"},
            },
        }
        assert build_example(schema, root) == {"a": "string", "b": "string"}

    def test_self_referential_schema_raises(self) -> None:
        root = {
            "components": {
                "schemas": {
                    "Node": {
                        "type": "object",
                        "properties": {"child": {"$ref": "#/components/schemas/Node"}},
                    }
                }
            }
        }
        with pytest.raises(CyclicReferenceError) as exc_info:
            build_example({"$ref": "#/components/schemas/Node"}, root)
        assert exc_info.value.pointer == "#/components/schemas/Node"

    def test_ref_loop_raises(self) -> None:
        root = {
            "components": {
                "schemas": {
                    "A": {"$ref": "#/components/schemas/B"},
                    "B": {"$ref": "#/components/schemas/A"},
                }
            }
        }
        with pytest.raises(CyclicReferenceError):
            build_example({"$ref": "#/components/schemas/A"}, root)


class TestComposition:
    def test_one_of_is_text(self) -> None:
        schema = {"oneOf": [{"type": "string"}, {"type": "integer"}]}
        assert build_example(schema, {}) == "One of the following:\nstring\ninteger"

    def test_any_of_is_text(self) -> None:
        schema = {"anyOf": [{"type": "boolean"}, {"type": "null"}]}
        assert build_example(schema, {}) == "Any of the following:\ntrue | false\n<null>"

    def test_one_of_renders_composite_members_as_json(
        self, petstore_raw: dict[str, Any]
    ) -> None:
        schema = {
            "oneOf": [
                {"$ref": "#/components/schemas/Pet"},
                {"type": "string", "format": "uuid"},
            ]
        }
        assert build_example(schema, petstore_raw) == (
            "One of the following:\n" + json.dumps(PET_EXAMPLE) + "\nstring (uuid)"
        )

    def test_all_of_first_writer_wins(self) -> None:
        schema = {
            "allOf": [
                {"type": "object", "properties": {"a": {"type": "string"}}},
                {
                    "type": "object",
                    "properties": {"a": {"type": "integer"}, "b": {"type": "boolean"}},
                },
            ]
        }
        assert build_example(schema, {}) == {"a": "string", "b": "true | false"}

    def test_all_of_skips_non_objects(self) -> None:
        schema = {
            "allOf": [
                {"type": "string"},
                {"type": "object", "properties": {"a": {"type": "string"}}},
            ]
        }
        assert build_example(schema, {}) == {"a": "string"}


class TestMergeFirstWriterWins:
    def test_first_value_kept(self) -> None:
        assert merge_first_writer_wins([{"a": 1}, {"a": 2, "b": 3}]) == {"a": 1, "b": 3}

    def test_empty(self) -> None:
        assert merge_first_writer_wins([]) == {}

    def test_inputs_not_mutated(self) -> None:
        first = {"a": 1}
        merge_first_writer_wins([first, {"b": 2}])
        assert first == {"a": 1}


# ---------------------------------------------------------------------------
# Operation bundle
# ---------------------------------------------------------------------------


class TestExampleForOperation:
    def test_parameters_grouped_by_location(self, petstore_spec: ParsedSpec) -> None:
        op = petstore_spec.find_operation("listPets")
        bundle = example_for_operation(op, petstore_spec.raw_spec)
        assert bundle["parameters"] == {
            "query": {
                "limit": "integer (int32): between 1 (inclusive) and 100 (inclusive)",
                "tags": ["string"],
            },
            "header": {"X-Request-Id": "string"},
            "cookie": {"session": "string"},
        }
        assert bundle["request_body"] == {}
        assert bundle["responses"] == {"200": {"application/json": [PET_EXAMPLE]}}

    def test_request_body_and_responses(self, petstore_spec: ParsedSpec) -> None:
        op = petstore_spec.find_operation("addPet")
        bundle = example_for_operation(op, petstore_spec.raw_spec)
        assert bundle["parameters"] == {}
        assert bundle["request_body"] == {
            "application/json": {"name": "string", "tag": "string", "status": "string"}
        }
        assert bundle["responses"]["201"] == {"application/json": PET_EXAMPLE}
        assert bundle["responses"]["default"] == {
            "application/json": {"code": "integer (int32)", "message": "string"}
        }

    def test_response_without_content(self, petstore_spec: ParsedSpec) -> None:
        op = petstore_spec.find_operation("getPetById")
        bundle = example_for_operation(op, petstore_spec.raw_spec)
        assert bundle["parameters"]["path"] == {"petId": "integer (int64)"}
        assert bundle["responses"]["404"] == {}
