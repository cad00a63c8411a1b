"""
Integration tests for policy evaluation workflow.

Tests cover:
- Loading snapshots and configuration from files
- Evaluating the default pack against a stack export
- Enforcement levels from configuration
"""

from __future__ import annotations

import copy
import json
from pathlib import Path

import pytest
import yaml

from stackguard.config import PackConfiguration
from stackguard.engine import SnapshotLoader, run_evaluation
from stackguard.models import EnforcementLevel
from stackguard.rules import create_default_pack

POLICY_CONFIG = """\
all: advisory
validate-hitrust-aws-provider:
  enforcementLevel: mandatory
  requiredRegions:
    - us-east-1
    - us-west-2
  requiredTags:
    Team:
    Environment: production
validate-instance-types:
  allowedInstanceTypes:
    - t3.medium
s3-bucket-logging-enabled: advisory
"""


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    path = tmp_path / "policy-config.yaml"
    path.write_text(POLICY_CONFIG)
    return path


def write_export(tmp_path: Path, export: dict) -> str:
    path = tmp_path / "stack.json"
    path.write_text(json.dumps(export))
    return str(path)


class TestStackExportEvaluation:
    """End-to-end evaluation of stack exports."""

    def test_compliant_export(self, tmp_path, stack_export, config_path):
        """Test the HITRUST policy passes on a compliant export."""
        snapshot = SnapshotLoader().load(write_export(tmp_path, stack_export))
        config = PackConfiguration.from_file(str(config_path))

        violations, result = run_evaluation(snapshot, config)

        assert violations.filter_by_policy("validate-hitrust-aws-provider").messages() == []
        assert result.resources_evaluated == 3
        assert not result.has_errors

    def test_bucket_logging_level_from_config(self, tmp_path, stack_export, config_path):
        """Test a per-policy config level overrides the policy's own level."""
        snapshot = SnapshotLoader().load(write_export(tmp_path, stack_export))
        config = PackConfiguration.from_file(str(config_path))

        violations, result = run_evaluation(snapshot, config)

        logging_violations = violations.filter_by_policy("s3-bucket-logging-enabled")
        assert len(logging_violations) == 1
        assert logging_violations[0].enforcement_level == EnforcementLevel.ADVISORY
        assert not result.has_mandatory

    def test_unbound_bucket(self, tmp_path, stack_export, config_path):
        """Test a bucket on an explicit non-compliant provider."""
        export = copy.deepcopy(stack_export)
        resources = export["deployment"]["resources"]
        explicit = "urn:pulumi:dev::my-stack::pulumi:providers:aws::legacy"
        resources.append(
            {
                "urn": explicit,
                "type": "pulumi:providers:aws",
                "custom": True,
                "id": "1b2c",
                "inputs": {"region": "eu-west-1"},
            }
        )
        resources.append(
            {
                "urn": "urn:pulumi:dev::my-stack::aws:s3/bucket:Bucket::archive",
                "type": "aws:s3/bucket:Bucket",
                "custom": True,
                "provider": f"{explicit}::1b2c",
                "outputs": {"tagsAll": {"Team": "Platform", "Environment": "production"}},
            }
        )

        snapshot = SnapshotLoader().load(write_export(tmp_path, export))
        config = PackConfiguration.from_file(str(config_path))
        violations, result = run_evaluation(snapshot, config)

        hitrust = violations.filter_by_policy("validate-hitrust-aws-provider")
        assert hitrust.messages() == [
            "AWS Resource urn:pulumi:dev::my-stack::aws:s3/bucket:Bucket::archive "
            "is not using a HITRUST-compliant AWS provider. "
            f"Its currently configured to use provider '{explicit}'"
        ]
        assert hitrust[0].urn == "urn:pulumi:dev::my-stack::aws:s3/bucket:Bucket::archive"
        assert hitrust[0].is_mandatory()
        assert result.has_mandatory

    def test_wrong_environment_on_provider(self, tmp_path, stack_export, config_path):
        """Test provider default tags with an unknown environment."""
        export = copy.deepcopy(stack_export)
        provider = export["deployment"]["resources"][1]
        provider["outputs"]["defaultTags"] = json.dumps(
            {"tags": {"Compliance": "HITRUST", "Team": "Platform", "Environment": "qa"}}
        )

        snapshot = SnapshotLoader().load(write_export(tmp_path, export))
        config = PackConfiguration.from_file(str(config_path))
        violations, _ = run_evaluation(snapshot, config)

        assert violations.filter_by_policy("validate-hitrust-aws-provider").messages() == [
            f"AWS provider '{provider['urn']}' tag 'Environment' must be one of "
            "[production, staging, development], but got 'qa'"
        ]

    def test_yaml_snapshot_with_all_policies(self, tmp_path, stack_export):
        """Test every built-in policy runs against a YAML snapshot."""
        path = tmp_path / "stack.yaml"
        path.write_text(yaml.safe_dump(stack_export))
        snapshot = SnapshotLoader().load(str(path))

        violations, result = create_default_pack(include_all=True).evaluate(snapshot)

        assert result.policies_evaluated == 6
        assert "Bucket must be a child of a 'alphaws:resources:S3Bucket' component" in (
            violations.messages()
        )
        assert violations.filter_by_policy("validate-hitrust-aws-provider").messages() == [
            "No required regions configured for HITRUST compliance."
        ]
