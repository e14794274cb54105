"""Repository for the file-backed participant store.

The store is a JSON array on disk. Every call re-reads the file, so edits
made outside the service are visible on the next request without a
restart. Writes replace the whole file; there is no locking, and two
importers running at once can lose each other's records.
"""

import json
import os
import tempfile
from collections.abc import Sequence
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from core.errors import StorageError
from schemas import Participant

_participants_adapter = TypeAdapter(list[Participant])


class ParticipantRepository:
    """Repository for participant reads and batch appends."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> list[Participant]:
        """Read and validate the whole store, in append order.

        Raises:
            StorageError: If the file is missing, unreadable or malformed.
        """
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise StorageError(f"Participant store not found: {self.path}") from e
        except OSError as e:
            raise StorageError(f"Cannot read participant store {self.path}: {e}") from e

        try:
            return _participants_adapter.validate_json(raw)
        except ValidationError as e:
            raise StorageError(
                f"Participant store {self.path} is malformed: "
                f"{e.error_count()} validation error(s)"
            ) from e

    def find(self, participant_id: str) -> Participant | None:
        """Get the first participant with the given id."""
        for participant in self.load():
            if participant.id == participant_id:
                return participant
        return None

    def recent(self, *, limit: int = 10) -> list[Participant]:
        """Get the most recently appended participants, newest first."""
        participants = self.load()
        if limit <= 0:
            return []
        return list(reversed(participants[-limit:]))

    def append(self, new_records: Sequence[Participant]) -> int:
        """Append records in order and rewrite the store.

        A missing file is treated as an empty store. A corrupt file is not
        overwritten.

        Returns:
            The total number of participants after the append.
        """
        existing = self.load() if self.path.exists() else []
        participants = [*existing, *new_records]
        self._write(participants)
        return len(participants)

    def _write(self, participants: Sequence[Participant]) -> None:
        payload = json.dumps(
            [p.to_record() for p in participants], indent=2, ensure_ascii=False
        )
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload + "\n")
            os.replace(tmp_name, self.path)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise StorageError(f"Cannot write participant store {self.path}: {e}") from e
