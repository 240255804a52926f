"""In-memory object store with time travel.

Implements ObjectStoreProtocol over an in-memory history of registrar
exports. Each object keeps an ordered list of versions, each valid from
a point in time until the next version. Used by tests and for offline
verification of exported registrar snapshots.

Snapshot file format:
    {
        "Objects": [
            {"ObjectType": "approverset", "ValidFrom": 1700000000, "Object": {...}},
            ...
        ]
    }

ValidFrom is unix seconds and may be omitted for objects with a single,
always-valid version.
"""

from __future__ import annotations

import bisect
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError
from structlog import get_logger

from registrar_trust.application.dtos.exports import (
    EXPORT_MODELS,
    ExportModel,
    RegistrarObjectExport,
    object_type_of,
)
from registrar_trust.application.ports.object_store import ObjectStoreProtocol
from registrar_trust.domain.errors.object_store import (
    ObjectNotFoundError,
    ObjectStoreError,
)
from registrar_trust.domain.models.registrar_object import ObjectType
from registrar_trust.domain.models.timestamps import unix_timestamp

logger = get_logger()

# Versions added without a start time are valid from the beginning of time
ALWAYS = 0


class InMemoryObjectStore(ObjectStoreProtocol):
    """In-memory stub implementation of ObjectStoreProtocol.

    Versions of the same object are kept sorted by their start time.
    Lookups resolve at one-second resolution, like the registrar API.
    """

    def __init__(self) -> None:
        # (object_type, object_id) -> sorted [(valid_from, export)]
        self._history: dict[tuple[ObjectType, int], list[tuple[int, ExportModel]]] = {}
        self.requests: list[tuple[ObjectType, int, Optional[int]]] = []

    def put(
        self,
        export: ExportModel,
        valid_from: Optional[datetime] = None,
    ) -> None:
        """Record a version of an object.

        A version with the same start time replaces the one recorded before.

        Args:
            export: The object export. Its kind and id key the history.
            valid_from: When this version became current. Defaults to
                the beginning of time.
        """
        object_type = object_type_of(export)
        start = ALWAYS if valid_from is None else unix_timestamp(valid_from)
        self._record(object_type, start, export)

    def _record(self, object_type: ObjectType, start: int, export: ExportModel) -> None:
        """Insert a version in start order, replacing one with the same start."""
        object_id: int = export.id  # type: ignore[attr-defined]
        versions = self._history.setdefault((object_type, object_id), [])

        starts = [version[0] for version in versions]
        index = bisect.bisect_left(starts, start)
        if index < len(versions) and versions[index][0] == start:
            versions[index] = (start, export)
        else:
            versions.insert(index, (start, export))

    def clear(self) -> None:
        """Remove all objects (for test cleanup)."""
        self._history.clear()
        self.requests.clear()

    async def get_object(
        self,
        object_type: ObjectType,
        object_id: int,
    ) -> RegistrarObjectExport:
        self.requests.append((object_type, object_id, None))
        versions = self._history.get((object_type, object_id))
        if not versions:
            raise ObjectNotFoundError(object_type.value, object_id)
        return versions[-1][1]  # type: ignore[return-value]

    async def get_object_at(
        self,
        object_type: ObjectType,
        object_id: int,
        at_time: datetime,
    ) -> RegistrarObjectExport:
        timestamp = unix_timestamp(at_time)
        self.requests.append((object_type, object_id, timestamp))
        versions = self._history.get((object_type, object_id), [])

        starts = [version[0] for version in versions]
        index = bisect.bisect_right(starts, timestamp)
        if index == 0:
            raise ObjectNotFoundError(object_type.value, object_id, timestamp)
        return versions[index - 1][1]  # type: ignore[return-value]

    # Snapshots --------------------------------------------------------------

    def load_snapshot(self, document: dict[str, Any]) -> int:
        """Load objects from a decoded snapshot document.

        Args:
            document: Snapshot with an "Objects" list.

        Returns:
            Number of snapshot entries read.

        Raises:
            ObjectStoreError: If the snapshot is malformed.
        """
        entries = document.get("Objects") if isinstance(document, dict) else None
        if not isinstance(entries, list):
            raise ObjectStoreError("Snapshot has no Objects list")

        for position, entry in enumerate(entries):
            try:
                object_type = ObjectType(entry["ObjectType"])
                export = EXPORT_MODELS[object_type].model_validate(entry["Object"])
                valid_from = int(entry.get("ValidFrom", ALWAYS))
            except (KeyError, TypeError, ValueError, ValidationError) as exc:
                raise ObjectStoreError(
                    f"Snapshot entry {position} is not a registrar object: {exc}"
                ) from exc

            self._record(object_type, valid_from, export)

        logger.info("object_snapshot_loaded", versions=len(entries))
        return len(entries)

    def dump_snapshot(self) -> dict[str, Any]:
        """Return the store contents as a snapshot document."""
        objects = [
            {
                "ObjectType": object_type.value,
                "ValidFrom": valid_from,
                "Object": export.model_dump(by_alias=True, mode="json"),
            }
            for (object_type, _), versions in sorted(self._history.items())
            for valid_from, export in versions
        ]
        return {"Objects": objects}

    @classmethod
    def from_snapshot_file(cls, path: str | Path) -> InMemoryObjectStore:
        """Build a store from a snapshot JSON file.

        Raises:
            ObjectStoreError: If the file cannot be read or is malformed.
        """
        try:
            document = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ObjectStoreError(f"Unable to read snapshot {path}: {exc}") from exc

        store = cls()
        store.load_snapshot(document)
        return store
