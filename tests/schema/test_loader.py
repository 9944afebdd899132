"""Tests for snapshot loader."""

import json

import pytest

from driftgraph.graph.node_types import GraphSource
from driftgraph.schema.errors import SnapshotLoadError, SnapshotValidationError
from driftgraph.schema.loader import (
    load_document,
    parse_snapshot,
    parse_snapshot_from_string,
)


class TestLoadDocument:
    def test_load_valid_yaml(self, tmp_path):
        yaml_file = tmp_path / "test.yaml"
        yaml_file.write_text("key: value\nlist:\n  - item1\n  - item2")

        data = load_document(yaml_file)
        assert data["key"] == "value"
        assert data["list"] == ["item1", "item2"]

    def test_load_json(self, tmp_path):
        json_file = tmp_path / "snapshot.json"
        json_file.write_text(json.dumps({"components": [{"id": "a/b/c@1.0.0"}]}))

        data = load_document(json_file)
        assert data["components"][0]["id"] == "a/b/c@1.0.0"

    def test_file_not_found(self):
        with pytest.raises(SnapshotLoadError) as exc_info:
            load_document("/nonexistent/path.yaml")
        assert "not found" in str(exc_info.value).lower()
        assert exc_info.value.path == "/nonexistent/path.yaml"

    def test_directory_is_not_a_file(self, tmp_path):
        with pytest.raises(SnapshotLoadError) as exc_info:
            load_document(tmp_path)
        assert "Not a file" in str(exc_info.value)

    def test_invalid_yaml(self, tmp_path):
        yaml_file = tmp_path / "invalid.yaml"
        yaml_file.write_text("key: [unclosed bracket")

        with pytest.raises(SnapshotLoadError) as exc_info:
            load_document(yaml_file)
        assert "Invalid YAML" in str(exc_info.value)

    def test_empty_file_returns_empty_dict(self, tmp_path):
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")

        assert load_document(yaml_file) == {}

    def test_non_mapping_at_root(self, tmp_path):
        yaml_file = tmp_path / "list.yaml"
        yaml_file.write_text("- item1\n- item2")

        with pytest.raises(SnapshotLoadError) as exc_info:
            load_document(yaml_file)
        assert "mapping" in str(exc_info.value).lower()


class TestParseSnapshotFromString:
    def test_parse_minimal_snapshot(self, minimal_snapshot_yaml):
        snapshot = parse_snapshot_from_string(minimal_snapshot_yaml)

        assert len(snapshot.components) == 2
        assert snapshot.source == GraphSource.LOCAL

    def test_parse_empty_snapshot(self):
        snapshot = parse_snapshot_from_string("")
        assert snapshot.components == []

    def test_invalid_yaml_string(self):
        with pytest.raises(SnapshotLoadError):
            parse_snapshot_from_string("invalid: [yaml")

    def test_validation_errors_carry_locations(self):
        yaml_str = """
components:
  - label: Nameless
"""
        with pytest.raises(SnapshotValidationError) as exc_info:
            parse_snapshot_from_string(yaml_str)

        errors = exc_info.value.errors
        assert len(errors) == 1
        assert errors[0]["loc"].startswith("components.0")

    def test_unknown_component_type(self):
        yaml_str = """
components:
  - id: a/b/c@1.0.0
    type: spreadsheet
"""
        with pytest.raises(SnapshotValidationError):
            parse_snapshot_from_string(yaml_str)


class TestParseSnapshot:
    def test_parse_local_example(self, examples_dir):
        snapshot = parse_snapshot(examples_dir / "local_snapshot.yaml")

        assert snapshot.source == GraphSource.LOCAL
        assert len(snapshot.components) == 5

    def test_parse_runtime_example(self, examples_dir):
        snapshot = parse_snapshot(examples_dir / "runtime_snapshot.yaml")

        assert snapshot.source == GraphSource.RUNTIME
        assert snapshot.environment_id == "dev"

    def test_parse_bad_component(self, examples_dir):
        with pytest.raises(SnapshotValidationError):
            parse_snapshot(examples_dir / "invalid" / "bad_component.yaml")


class TestJsonDocuments:
    def test_invalid_json(self, tmp_path):
        json_file = tmp_path / "broken.json"
        json_file.write_text('{"components": [}')

        with pytest.raises(SnapshotLoadError) as exc_info:
            load_document(json_file)
        assert "Invalid JSON" in str(exc_info.value)

    def test_parse_json_snapshot(self, tmp_path):
        json_file = tmp_path / "snapshot.json"
        json_file.write_text(
            json.dumps({"source": "runtime", "components": [{"id": "core/sys-flows/a@1.0.0"}]})
        )

        snapshot = parse_snapshot(json_file)

        assert snapshot.source == GraphSource.RUNTIME
        assert snapshot.components[0].component_id() == "core/sys-flows/a@1.0.0"

    def test_validation_error_carries_path(self, tmp_path):
        json_file = tmp_path / "bad.json"
        json_file.write_text(json.dumps({"components": [{"label": "x"}]}))

        with pytest.raises(SnapshotValidationError) as exc_info:
            parse_snapshot(json_file)
        assert exc_info.value.path == str(json_file)
