# ABOUTME: Snapshot persistence layer
# ABOUTME: Named JSON snapshots with timestamped archiving of superseded versions

"""
Persistence Layer: Save and retrieve ordered record collections

This layer handles:
- JSON (de)serialization of raw and parsed page records
- Loading existing snapshots for incremental updates
- Archiving a superseded snapshot before it is overwritten

Data Flow: core/ pipeline output -> JSON snapshot files -> next run's core/ input
"""

from .snapshots import SnapshotCorruptError, SnapshotNotFoundError, SnapshotStore, archive_name

__all__ = [
    "SnapshotCorruptError",
    "SnapshotNotFoundError",
    "SnapshotStore",
    "archive_name",
]
