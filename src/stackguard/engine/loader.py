"""
Snapshot loader for stackguard.

Loads resource graph snapshots from JSON or YAML files. Three document
shapes are understood:

- ``pulumi stack export`` output, with resources under
  ``deployment.resources``
- a mapping with a ``resources`` list of policy-SDK shaped records
- a bare list of records
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any

import yaml

from stackguard.models import ResourceGraphSnapshot, ResourceRecord

logger = logging.getLogger(__name__)


class SnapshotLoadError(Exception):
    """Exception raised when a snapshot cannot be loaded."""

    def __init__(self, message: str, source_path: str | None = None):
        self.source_path = source_path
        prefix = f"{source_path}: " if source_path else ""
        super().__init__(f"{prefix}{message}")


def provider_reference_urn(reference: str | None) -> str | None:
    """
    Reduce a state provider reference to the provider URN.

    State files reference providers as "<urn>::<id>"; the URN itself also
    contains "::", so only the last segment is dropped.
    """
    if not reference:
        return None
    urn, sep, _ = reference.rpartition("::")
    return urn if sep else reference


class SnapshotLoader:
    """Loads resource graph snapshots from files or parsed documents."""

    def load(self, path: str) -> ResourceGraphSnapshot:
        """
        Load a snapshot from a file.

        Args:
            path: Path to a .json, .yaml or .yml file

        Returns:
            Loaded ResourceGraphSnapshot

        Raises:
            SnapshotLoadError: If the file cannot be read or parsed
        """
        path = os.path.expanduser(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                content = f.read()
        except FileNotFoundError:
            raise SnapshotLoadError("File not found", path)
        except OSError as e:
            raise SnapshotLoadError(str(e), path)

        try:
            if path.endswith(".json"):
                data = json.loads(content)
            else:
                data = yaml.safe_load(content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise SnapshotLoadError(f"Invalid document: {e}", path)

        try:
            snapshot = self.from_data(data)
        except SnapshotLoadError as e:
            raise SnapshotLoadError(str(e), path) from e

        logger.info(f"Loaded {len(snapshot)} resources from {path}")
        return snapshot

    def from_data(self, data: Any) -> ResourceGraphSnapshot:
        """
        Build a snapshot from a parsed document.

        Args:
            data: Parsed JSON/YAML document

        Returns:
            ResourceGraphSnapshot in declaration order

        Raises:
            SnapshotLoadError: If the document shape is not recognized
        """
        if isinstance(data, dict) and isinstance(data.get("deployment"), dict):
            entries = data["deployment"].get("resources") or []
            return ResourceGraphSnapshot(
                [self._from_state(e, i) for i, e in enumerate(entries)]
            )

        if isinstance(data, dict) and "resources" in data:
            entries = data.get("resources") or []
        elif isinstance(data, list):
            entries = data
        else:
            raise SnapshotLoadError("Unrecognized snapshot format")

        if not isinstance(entries, list):
            raise SnapshotLoadError("'resources' must be a list")

        return ResourceGraphSnapshot(
            [self._from_record(e, i) for i, e in enumerate(entries)]
        )

    def _check_entry(self, entry: Any, index: int, fields: tuple[str, ...]) -> None:
        if not isinstance(entry, dict) or not entry.get("urn") or not isinstance(
            entry["urn"], str
        ):
            raise SnapshotLoadError(f"Resource #{index} is missing a urn")
        for key in fields:
            value = entry.get(key)
            if value is not None and not isinstance(value, dict):
                raise SnapshotLoadError(
                    f"Resource #{index} field '{key}' must be a mapping, "
                    f"got {type(value).__name__}"
                )

    def _from_record(self, entry: Any, index: int) -> ResourceRecord:
        self._check_entry(entry, index, ("props", "properties"))
        return ResourceRecord.from_dict(entry)

    def _from_state(self, entry: Any, index: int) -> ResourceRecord:
        """Convert a stack export resource entry."""
        self._check_entry(entry, index, ("inputs", "outputs"))

        urn = entry["urn"]
        properties: dict[str, Any] = {}
        properties.update(entry.get("inputs") or {})
        properties.update(entry.get("outputs") or {})

        provider = entry.get("provider")
        return ResourceRecord(
            urn=urn,
            resource_type=str(entry.get("type") or ""),
            name=urn.rsplit("::", 1)[-1],
            properties=properties,
            provider_urn=provider_reference_urn(provider if isinstance(provider, str) else None),
            parent_urn=entry.get("parent") or None,
            resource_id=entry.get("id") or None,
        )
