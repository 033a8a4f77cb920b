from __future__ import annotations

from typing import Mapping, Optional, Protocol, Sequence

from .model import AttendanceBucket, AttendanceRecord


class AttendanceRepository(Protocol):
    def list_buckets(self) -> Sequence[AttendanceBucket]:
        raise NotImplementedError

    def get_bucket(self, user_id: int) -> Optional[AttendanceBucket]:
        raise NotImplementedError

    def save_event_records(
        self,
        event_id: int,
        entries: Mapping[int, tuple[str, AttendanceRecord]],
    ) -> int:
        """Upsert one record per user ({user_id: (name, record)}) for `event_id`.

        All buckets are written in one transaction. Raises StorageError (and
        writes nothing) if any write fails. Returns the number of buckets written.
        """

        raise NotImplementedError

    def referenced_event_ids(self) -> set[int]:
        raise NotImplementedError
