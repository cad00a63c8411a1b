"""
Tests for the snapshot loader.
"""

from __future__ import annotations

import json

import pytest
import yaml

from stackguard.engine import SnapshotLoader, SnapshotLoadError
from stackguard.engine.loader import provider_reference_urn
from stackguard.models import AWS_PROVIDER_TYPE


class TestProviderReferenceUrn:
    """Tests for provider_reference_urn."""

    def test_strips_id(self):
        """Test the trailing provider id is dropped."""
        ref = "urn:pulumi:dev::proj::pulumi:providers:aws::default::04da6b54"

        assert provider_reference_urn(ref) == "urn:pulumi:dev::proj::pulumi:providers:aws::default"

    def test_empty(self):
        """Test empty references."""
        assert provider_reference_urn(None) is None
        assert provider_reference_urn("") is None

    def test_no_separator(self):
        """Test a reference without '::' is returned as is."""
        assert provider_reference_urn("provider") == "provider"


class TestSnapshotLoaderFromData:
    """Tests for SnapshotLoader.from_data."""

    @pytest.fixture
    def loader(self) -> SnapshotLoader:
        return SnapshotLoader()

    def test_stack_export(self, loader, stack_export):
        """Test a stack export document."""
        snapshot = loader.from_data(stack_export)

        assert len(snapshot) == 3
        stack, provider, bucket = snapshot

        assert stack.resource_type == "pulumi:pulumi:Stack"
        assert stack.name == "my-stack-dev"
        assert stack.resource_id is None

        assert provider.resource_type == AWS_PROVIDER_TYPE
        assert provider.is_provider()
        assert provider.get_property("region") == "us-east-1"

        assert bucket.name == "logs"
        assert bucket.resource_id == "logs-1234"
        assert bucket.provider_urn == provider.urn
        assert bucket.parent_urn == stack.urn

    def test_stack_export_outputs_override_inputs(self, loader, stack_export):
        """Test outputs are laid over inputs."""
        bucket = loader.from_data(stack_export)[2]

        assert bucket.get_property("tags") == {"Team": "Platform"}
        assert bucket.get_property("tagsAll") == {"Team": "Platform", "Environment": "production"}

    def test_resources_mapping(self, loader):
        """Test a mapping with a resources list."""
        snapshot = loader.from_data(
            {
                "resources": [
                    {
                        "urn": "urn:pulumi:dev::proj::aws:s3/bucket:Bucket::logs",
                        "type": "aws:s3/bucket:Bucket",
                        "props": {"tags": {"Team": "Platform"}},
                        "provider": "urn:pulumi:dev::proj::pulumi:providers:aws::default",
                    }
                ]
            }
        )

        assert snapshot[0].name == "logs"
        assert snapshot[0].provider_urn == "urn:pulumi:dev::proj::pulumi:providers:aws::default"

    def test_bare_list(self, loader):
        """Test a bare list of records."""
        snapshot = loader.from_data(
            [
                {"urn": "urn:pulumi:dev::proj::aws:s3/bucket:Bucket::a", "type": "aws:s3/bucket:Bucket"},
                {"urn": "urn:pulumi:dev::proj::aws:s3/bucket:Bucket::b", "type": "aws:s3/bucket:Bucket"},
            ]
        )

        assert [r.name for r in snapshot] == ["a", "b"]

    def test_empty_resources(self, loader):
        """Test empty documents produce empty snapshots."""
        assert len(loader.from_data({"resources": None})) == 0
        assert len(loader.from_data([])) == 0
        assert len(loader.from_data({"deployment": {}})) == 0

    def test_unrecognized(self, loader):
        """Test unknown shapes are rejected."""
        with pytest.raises(SnapshotLoadError, match="Unrecognized snapshot format"):
            loader.from_data("resources")

    def test_resources_not_list(self, loader):
        """Test a non-list resources value is rejected."""
        with pytest.raises(SnapshotLoadError, match="must be a list"):
            loader.from_data({"resources": {"urn": "x"}})

    def test_missing_urn(self, loader):
        """Test records without a URN are rejected with their index."""
        with pytest.raises(SnapshotLoadError, match="Resource #1 is missing a urn"):
            loader.from_data([{"urn": "urn:a"}, {"type": "aws:s3/bucket:Bucket"}])

    @pytest.mark.parametrize("field", ["props", "properties"])
    def test_record_properties_not_mapping(self, loader, field):
        """Test non-mapping record properties are rejected."""
        with pytest.raises(SnapshotLoadError, match=f"Resource #0 field '{field}' must be a mapping"):
            loader.from_data([{"urn": "urn:a", field: ["x"]}])

    @pytest.mark.parametrize("field", ["inputs", "outputs"])
    def test_state_properties_not_mapping(self, loader, stack_export, field):
        """Test non-mapping inputs or outputs in a stack export are rejected."""
        stack_export["deployment"]["resources"][2][field] = ["x"]

        with pytest.raises(SnapshotLoadError, match=f"Resource #2 field '{field}'"):
            loader.from_data(stack_export)

    def test_null_type(self, loader, stack_export):
        """Test a null type in a stack export becomes an empty kind."""
        stack_export["deployment"]["resources"][0]["type"] = None

        assert loader.from_data(stack_export)[0].resource_type == ""


class TestSnapshotLoaderLoad:
    """Tests for SnapshotLoader.load."""

    def test_load_json(self, tmp_path, stack_export):
        """Test loading a JSON stack export."""
        path = tmp_path / "stack.json"
        path.write_text(json.dumps(stack_export))

        snapshot = SnapshotLoader().load(str(path))

        assert len(snapshot) == 3

    def test_load_yaml(self, tmp_path, stack_export):
        """Test loading a YAML document."""
        path = tmp_path / "stack.yaml"
        path.write_text(yaml.safe_dump(stack_export))

        snapshot = SnapshotLoader().load(str(path))

        assert snapshot[2].resource_id == "logs-1234"

    def test_missing_file(self, tmp_path):
        """Test a missing file."""
        path = str(tmp_path / "missing.json")

        with pytest.raises(SnapshotLoadError, match="File not found") as exc_info:
            SnapshotLoader().load(path)

        assert exc_info.value.source_path == path

    def test_properties_list_in_file(self, tmp_path):
        """Test a file whose record props is a list raises SnapshotLoadError."""
        path = tmp_path / "stack.json"
        path.write_text(json.dumps({"resources": [{"urn": "urn:a", "props": ["x"]}]}))

        with pytest.raises(SnapshotLoadError, match="must be a mapping"):
            SnapshotLoader().load(str(path))

    def test_invalid_json(self, tmp_path):
        """Test malformed JSON."""
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        with pytest.raises(SnapshotLoadError, match="Invalid document"):
            SnapshotLoader().load(str(path))

    def test_shape_error_names_file(self, tmp_path):
        """Test shape errors carry the file path."""
        path = tmp_path / "scalar.yaml"
        path.write_text("just a string\n")

        with pytest.raises(SnapshotLoadError) as exc_info:
            SnapshotLoader().load(str(path))

        assert exc_info.value.source_path == str(path)
        assert "scalar.yaml" in str(exc_info.value)
