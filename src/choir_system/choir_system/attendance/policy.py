"""Pure attendance rules: effective status, record upsert, summary fold."""

from __future__ import annotations

from typing import Iterable, List, Optional

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, AttendanceSummary


def resolve_effective_status(
    submitted: Optional[AttendanceStatus], has_active_permission: bool
) -> AttendanceStatus:
    if has_active_permission:
        return AttendanceStatus.EXCUSED
    if submitted is not None:
        return submitted
    return AttendanceStatus.ABSENT


def upsert_record(records: Iterable[AttendanceRecord], record: AttendanceRecord) -> List[AttendanceRecord]:
    """Replace the record for the same event in place, or append it.

    Any duplicates for that event collapse into the first position.
    """
    out: List[AttendanceRecord] = []
    placed = False
    for existing in records:
        if existing.event_id != record.event_id:
            out.append(existing)
        elif not placed:
            out.append(record)
            placed = True
    if not placed:
        out.append(record)
    return out


def attendance_percentage(attended: int, total: int) -> int:
    """round(100 * attended / total), halves rounded up; 0 when total is 0."""
    if total <= 0:
        return 0
    return (200 * attended + total) // (2 * total)


def summarize(records: Iterable[AttendanceRecord]) -> AttendanceSummary:
    counts = {status: 0 for status in AttendanceStatus}
    for record in records:
        counts[record.status] += 1
    total = sum(counts.values())
    # Excused counts as attended.
    attended = counts[AttendanceStatus.PRESENT] + counts[AttendanceStatus.EXCUSED]
    return AttendanceSummary(
        present=counts[AttendanceStatus.PRESENT],
        absent=counts[AttendanceStatus.ABSENT],
        excused=counts[AttendanceStatus.EXCUSED],
        total_events=total,
        percentage=attendance_percentage(attended, total),
    )
