# ABOUTME: JSON snapshot store for ordered page record collections, with timestamped archiving
# ABOUTME: Archive-then-write is two separate, independently retried steps, not a transaction

from __future__ import annotations

import shutil
from collections.abc import Callable, Sequence
from datetime import datetime
from pathlib import Path
from typing import Generic, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_fixed

from wiki_infoboxes.extraction.base import WikiInfoboxesError
from wiki_infoboxes.utils.logging import get_logger

RecordT = TypeVar("RecordT", bound=BaseModel)

TIMESTAMP_FORMAT = "%Y-%m-%d-%H%M%S"


class SnapshotNotFoundError(WikiInfoboxesError, FileNotFoundError):
    """Raised when a named snapshot does not exist yet."""

    pass


class SnapshotCorruptError(WikiInfoboxesError, ValueError):
    """Raised when a snapshot file exists but cannot be decoded."""

    pass


# Transient filesystem hiccups get a couple more tries, anything persistent still propagates
_io_retry = retry(
    stop=stop_after_attempt(3),
    wait=wait_fixed(0.1),
    retry=retry_if_exception_type(OSError),
    reraise=True,
)


def archive_name(name: str, timestamp: datetime) -> str:
    """Insert ``_archived-<timestamp>`` before the extension of a snapshot name."""
    path = Path(name)
    return f"{path.stem}_archived-{timestamp.strftime(TIMESTAMP_FORMAT)}{path.suffix}"


class SnapshotStore(Generic[RecordT]):
    """Loads and saves named JSON snapshots of one record type.

    Canonical snapshots live in ``data_dir``; superseded versions are copied
    byte-for-byte into ``archive_dir`` before being overwritten.
    """

    def __init__(
        self,
        record_type: type[RecordT],
        data_dir: Path | str,
        archive_dir: Path | str,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.record_type = record_type
        self.data_dir = Path(data_dir)
        self.archive_dir = Path(archive_dir)
        self.clock = clock
        self.adapter = TypeAdapter(list[record_type])
        self.logger = get_logger(__name__)

    def path_for(self, name: str) -> Path:
        return self.data_dir / name

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def load(self, name: str) -> list[RecordT]:
        """Read a snapshot.

        Raises:
            SnapshotNotFoundError: If no snapshot with this name exists
            SnapshotCorruptError: If the file cannot be decoded
        """
        path = self.path_for(name)
        try:
            content = path.read_bytes()
        except FileNotFoundError as e:
            raise SnapshotNotFoundError(f"No snapshot at {path}") from e

        try:
            records = self.adapter.validate_json(content)
        except ValidationError as e:
            raise SnapshotCorruptError(f"Snapshot {path} could not be decoded: {e}") from e

        self.logger.debug("Loaded snapshot", path=str(path), record_count=len(records))
        return records

    def load_or_empty(self, name: str) -> list[RecordT]:
        """Read a snapshot, treating a missing one as an empty collection."""
        try:
            return self.load(name)
        except SnapshotNotFoundError:
            self.logger.info("No existing snapshot", path=str(self.path_for(name)))
            return []

    def dump(self, records: Sequence[RecordT]) -> bytes:
        return self.adapter.dump_json(list(records), by_alias=True, indent=2)

    @_io_retry
    def save(self, name: str, records: Sequence[RecordT]) -> Path:
        """Write records to the canonical snapshot, replacing whatever is there."""
        path = self.path_for(name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.dump(records))
        self.logger.info("Saved snapshot", path=str(path), record_count=len(records))
        return path

    @_io_retry
    def archive(self, name: str) -> Path | None:
        """Copy the current snapshot, unchanged, into the archive folder. Returns None if there is none."""
        source = self.path_for(name)
        if not source.is_file():
            return None

        target = self.archive_dir / archive_name(name, self.clock())
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, target)
        self.logger.info("Archived snapshot", source=str(source), archive=str(target))
        return target

    def replace(self, name: str, records: Sequence[RecordT]) -> Path | None:
        """Archive the existing snapshot (if any), then write the new one.

        Returns:
            Path of the archived copy, or None if nothing was archived
        """
        archived = self.archive(name)
        self.save(name, records)
        return archived
