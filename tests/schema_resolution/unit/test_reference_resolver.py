"""Reference resolver tests."""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path

import pytest
from json_schema_markdown import generate_markdown
from json_schema_markdown.configuration import GenerationOptions
from json_schema_markdown.schema_resolution import (
    DRAFT3_SCHEMA_URI,
    DRAFT4_SCHEMA_URI,
    Draft3Resolver,
    Draft4Resolver,
    SchemaError,
    SchemaResolutionError,
    load_schema_file,
    resolve_schema,
    select_resolver,
)


def _samples_dir(draft: str) -> Path:
    return Path(__file__).resolve().parents[3] / "samples" / draft


def _write_json(path: Path, payload: dict) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_select_resolver_matches_declared_draft() -> None:
    assert select_resolver(DRAFT3_SCHEMA_URI) == (Draft3Resolver, True)
    assert select_resolver(DRAFT4_SCHEMA_URI) == (Draft4Resolver, True)
    assert select_resolver(DRAFT4_SCHEMA_URI + "#") == (Draft4Resolver, True)


@pytest.mark.parametrize(
    "schema_uri", [None, "http://json-schema.org/draft-07/schema#", "not-a-uri"]
)
def test_select_resolver_falls_back_to_draft3(schema_uri: str | None) -> None:
    assert select_resolver(schema_uri) == (Draft3Resolver, False)


def test_draft3_sample_registers_every_titled_schema_with_its_file() -> None:
    base_path = _samples_dir("draft3")
    schema = load_schema_file(base_path / "glTF.schema.json")

    resolved = resolve_schema(schema, "glTF.schema.json", base_path)

    assert resolved.draft_supported is True
    assert {name: entry.file_name for name, entry in resolved.registry.items()} == {
        "Accessor": "accessor.schema.json",
        "AccessorSparse": "accessorSparse.schema.json",
        "Asset": "asset.schema.json",
        "glTF": "glTF.schema.json",
        "glTF Property": "glTFProperty.schema.json",
    }
    assert resolved.registry["glTF"].schema is resolved.schema


def test_draft3_references_are_inlined_and_extends_is_merged() -> None:
    base_path = _samples_dir("draft3")
    schema = load_schema_file(base_path / "glTF.schema.json")

    resolved = resolve_schema(schema, "glTF.schema.json", base_path)
    root = resolved.schema

    assert "extends" not in root
    assert list(root["properties"]) == ["extras", "accessors", "asset"]
    assert root["properties"]["accessors"]["items"] is resolved.registry["Accessor"].schema
    assert root["properties"]["asset"]["required"] is True
    assert root["properties"]["asset"]["title"] == "Asset"
    assert "$ref" not in json.dumps(resolved.registry["Accessor"].schema)


def test_ref_siblings_overlay_a_copy_of_the_target() -> None:
    base_path = _samples_dir("draft3")
    schema = load_schema_file(base_path / "glTF.schema.json")

    resolved = resolve_schema(schema, "glTF.schema.json", base_path)
    accessor = resolved.registry["Accessor"].schema
    sparse_type = resolved.registry["AccessorSparse"].schema

    assert accessor["properties"]["sparse"]["description"] == (
        "Sparse storage of attributes, see AccessorSparse."
    )
    assert sparse_type["description"].startswith("Sparse storage of attributes that deviate")


def test_draft4_allof_and_required_lists_become_property_flags() -> None:
    base_path = _samples_dir("draft4")
    schema = load_schema_file(base_path / "node.schema.json")

    resolved = resolve_schema(schema, "node.schema.json", base_path)
    properties = resolved.schema["properties"]

    assert sorted(resolved.registry) == ["Child of Root Property", "Node", "glTF Id"]
    assert "allOf" not in resolved.schema
    assert properties["name"]["required"] is True
    assert properties["mesh"]["required"] is True
    assert "required" not in properties["children"]
    assert properties["camera"]["type"] == "integer"
    assert properties["camera"]["description"].startswith("The index of the camera")
    assert "required" not in resolved.registry["glTF Id"].schema


def test_resolution_does_not_mutate_the_input_schema() -> None:
    base_path = _samples_dir("draft4")
    schema = load_schema_file(base_path / "node.schema.json")
    pristine = copy.deepcopy(schema)

    resolve_schema(schema, "node.schema.json", base_path)

    assert schema == pristine


def test_self_reference_is_inlined_as_the_same_object() -> None:
    schema = {
        "$schema": DRAFT3_SCHEMA_URI,
        "title": "Tree",
        "type": "object",
        "properties": {"children": {"type": "array", "items": {"$ref": "#"}}},
    }

    resolved = resolve_schema(schema, "tree.schema.json")

    assert resolved.schema["properties"]["children"]["items"] is resolved.schema
    assert list(resolved.registry) == ["Tree"]


def test_self_reference_with_siblings_sees_the_completed_schema() -> None:
    schema = {
        "$schema": DRAFT3_SCHEMA_URI,
        "properties": {"parent": {"$ref": "#", "description": "The parent node."}},
        "title": "Tree",
        "type": "object",
    }

    resolved = resolve_schema(schema, "tree.schema.json")
    parent = resolved.schema["properties"]["parent"]

    assert parent is not resolved.schema
    assert parent["type"] == "object"
    assert parent["title"] == "Tree"
    assert parent["description"] == "The parent node."
    assert parent["properties"]["parent"] is parent
    assert "description" not in resolved.schema


def test_self_reference_with_siblings_renders_object_type() -> None:
    schema = {
        "$schema": DRAFT3_SCHEMA_URI,
        "properties": {"parent": {"$ref": "#", "description": "The parent node."}},
        "title": "Tree",
        "type": "object",
    }

    markdown = generate_markdown(GenerationOptions(schema=schema, file_name="tree.schema.json"))

    assert "|**parent**|`object`|The parent node.|No|\n" in markdown


def test_base_still_being_resolved_is_merged_once_complete() -> None:
    schema = {
        "$schema": DRAFT4_SCHEMA_URI,
        "title": "Node",
        "properties": {
            "child": {"allOf": [{"$ref": "#"}], "description": "A child node."},
        },
        "type": "object",
        "required": ["child"],
    }

    resolved = resolve_schema(schema, "node.schema.json")
    child = resolved.schema["properties"]["child"]

    assert "allOf" not in child
    assert child["type"] == "object"
    assert child["description"] == "A child node."
    assert list(child["properties"]) == ["child"]
    assert resolved.schema["properties"]["child"]["required"] is True


def test_mutual_base_cycle_is_merged_with_a_warning(caplog: pytest.LogCaptureFixture) -> None:
    schema = {
        "$schema": DRAFT4_SCHEMA_URI,
        "definitions": {
            "a": {"allOf": [{"$ref": "#/definitions/b"}], "properties": {"x": {}}},
            "b": {"allOf": [{"$ref": "#/definitions/a"}], "properties": {"y": {}}},
        },
    }

    with caplog.at_level(logging.WARNING, logger="json_schema_markdown.schema_resolution"):
        resolved = resolve_schema(schema, "cycle.schema.json")

    definitions = resolved.schema["definitions"]
    assert "allOf" not in definitions["a"]
    assert "allOf" not in definitions["b"]
    assert {"x", "y"} <= set(definitions["a"]["properties"]) | set(
        definitions["b"]["properties"]
    )
    assert "Circular allOf chain" in caplog.text


def test_escaped_pointer_tokens_address_keys_with_slashes_and_tildes() -> None:
    schema = {
        "$schema": DRAFT4_SCHEMA_URI,
        "properties": {
            "slash": {"$ref": "#/definitions/a~1b"},
            "tilde": {"$ref": "#/definitions/c~0d"},
        },
        "definitions": {
            "a/b": {"title": "Slashed", "type": "string"},
            "c~d": {"title": "Tilded", "type": "string"},
        },
    }

    resolved = resolve_schema(schema, "escaped.schema.json")

    assert resolved.schema["properties"]["slash"]["title"] == "Slashed"
    assert resolved.schema["properties"]["tilde"]["title"] == "Tilded"


@pytest.mark.parametrize(
    "ref", ["#/definitions/list/5", "#/definitions/list/x", "#/definitions/name/0"]
)
def test_pointer_into_missing_or_scalar_values_is_rejected(ref: str) -> None:
    schema = {
        "$schema": DRAFT4_SCHEMA_URI,
        "properties": {"a": {"$ref": ref}},
        "definitions": {"list": [{"type": "string"}], "name": "plain"},
    }

    with pytest.raises(SchemaResolutionError, match="Cannot resolve pointer"):
        resolve_schema(schema, "root.schema.json")


def test_reference_only_cycle_raises_resolution_error() -> None:
    schema = {
        "$schema": DRAFT4_SCHEMA_URI,
        "definitions": {
            "a": {"$ref": "#/definitions/b"},
            "b": {"$ref": "#/definitions/a"},
        },
    }

    with pytest.raises(SchemaResolutionError, match="Circular"):
        resolve_schema(schema, "loop.schema.json")


def test_missing_referenced_file_fails_fast(tmp_path: Path) -> None:
    schema = {
        "$schema": DRAFT3_SCHEMA_URI,
        "title": "Root",
        "type": "object",
        "properties": {"missing": {"$ref": "missing.schema.json"}},
    }

    with pytest.raises(SchemaError, match="Schema file not found"):
        resolve_schema(schema, "root.schema.json", tmp_path)


def test_unresolvable_pointer_raises_resolution_error() -> None:
    schema = {"$schema": DRAFT4_SCHEMA_URI, "properties": {"a": {"$ref": "#/definitions/nope"}}}

    with pytest.raises(SchemaResolutionError, match="#/definitions/nope"):
        resolve_schema(schema, "root.schema.json")


def test_draft4_absolute_id_maps_remote_references_onto_local_files(tmp_path: Path) -> None:
    _write_json(
        tmp_path / "item.schema.json",
        {"id": "http://example.com/schemas/item.schema.json", "title": "Item", "type": "object"},
    )
    schema = {
        "$schema": DRAFT4_SCHEMA_URI,
        "id": "http://example.com/schemas/root.schema.json",
        "title": "Root",
        "type": "object",
        "properties": {
            "item": {"$ref": "item.schema.json"},
            "again": {"$ref": "http://example.com/schemas/item.schema.json#"},
        },
    }

    resolved = resolve_schema(schema, "root.schema.json", tmp_path)

    assert resolved.registry["Item"].file_name == "item.schema.json"
    assert resolved.schema["properties"]["item"] is resolved.schema["properties"]["again"]


def test_draft4_plain_name_fragment_resolves_through_id() -> None:
    schema = {
        "$schema": DRAFT4_SCHEMA_URI,
        "title": "Root",
        "type": "object",
        "properties": {"position": {"$ref": "#position"}},
        "definitions": {"pos": {"id": "#position", "title": "Position", "type": "array"}},
    }

    resolved = resolve_schema(schema, "root.schema.json")

    assert resolved.schema["properties"]["position"]["title"] == "Position"


def test_draft3_rejects_plain_name_fragments() -> None:
    schema = {"$schema": DRAFT3_SCHEMA_URI, "properties": {"a": {"$ref": "#anchor"}}}

    with pytest.raises(SchemaResolutionError, match="JSON pointers"):
        resolve_schema(schema, "root.schema.json")


def test_remote_reference_without_local_mapping_is_rejected() -> None:
    schema = {
        "$schema": DRAFT4_SCHEMA_URI,
        "properties": {"a": {"$ref": "https://example.org/other.schema.json"}},
    }

    with pytest.raises(SchemaResolutionError, match="only local schema files"):
        resolve_schema(schema, "root.schema.json")


def test_duplicate_titles_keep_the_last_resolved_schema(
    caplog: pytest.LogCaptureFixture,
) -> None:
    schema = {
        "$schema": DRAFT4_SCHEMA_URI,
        "definitions": {
            "first": {"title": "Thing", "description": "first"},
            "second": {"title": "Thing", "description": "second"},
        },
    }

    with caplog.at_level(logging.WARNING, logger="json_schema_markdown.schema_resolution"):
        resolved = resolve_schema(schema, "things.schema.json")

    assert resolved.registry["Thing"].schema["description"] == "second"
    assert "declared more than once" in caplog.text


def test_debug_flag_logs_resolution_steps(caplog: pytest.LogCaptureFixture) -> None:
    base_path = _samples_dir("draft3")
    schema = load_schema_file(base_path / "glTF.schema.json")

    with caplog.at_level(logging.DEBUG, logger="json_schema_markdown.schema_resolution"):
        quiet = resolve_schema(schema, "glTF.schema.json", base_path)
        quiet_records = len(caplog.records)
        loud = resolve_schema(schema, "glTF.schema.json", base_path, debug=True)

    assert quiet_records == 0
    assert "registered type 'Accessor'" in caplog.text
    assert sorted(quiet.registry) == sorted(loud.registry)


def test_unsupported_draft_is_reported_but_resolved(caplog: pytest.LogCaptureFixture) -> None:
    schema = {"title": "Asset", "type": "object"}

    with caplog.at_level(logging.WARNING, logger="json_schema_markdown.schema_resolution"):
        resolved = resolve_schema(schema, "asset.schema.json")

    assert resolved.draft_supported is False
    assert list(resolved.registry) == ["Asset"]
    assert "treating it as draft 3" in caplog.text
