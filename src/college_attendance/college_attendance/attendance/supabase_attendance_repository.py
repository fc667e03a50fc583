from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional, Sequence

from supabase import Client

from ..backend.base import backend_call, fetchall, fetchone
from ..common.datetime_utils import parse_backend_date, parse_backend_time, parse_backend_timestamp
from ..core.enums import AttendanceStatus
from ..students.supabase_student_repository import row_to_student
from .model import AttendanceChanges, AttendanceDraft, AttendanceRecord
from .repository import AttendanceRepository

WITH_STUDENT = "*, student:students(*)"
KEY_COLUMNS = "student_id,date"


class SupabaseAttendanceRepository(AttendanceRepository):
    def __init__(self, client: Client):
        self._client = client

    def list_all(self) -> Sequence[AttendanceRecord]:
        with backend_call("fetch attendance"):
            res = (
                self._client.table("attendance_records")
                .select(WITH_STUDENT)
                .order("created_at", desc=True)
                .execute()
            )
        return [row_to_record(r) for r in fetchall(res)]

    def get_by_key(self, student_id: str, day: date) -> Optional[AttendanceRecord]:
        with backend_call("fetch attendance"):
            res = (
                self._client.table("attendance_records")
                .select(WITH_STUDENT)
                .eq("student_id", student_id)
                .eq("date", day.isoformat())
                .limit(1)
                .execute()
            )
        rows = fetchall(res)
        return row_to_record(rows[0]) if rows else None

    def create(self, *, user_id: str, draft: AttendanceDraft, overwrite: bool = True) -> Optional[AttendanceRecord]:
        payload = {**draft.as_payload(), "user_id": user_id}
        with backend_call("mark attendance"):
            res = (
                self._client.table("attendance_records")
                .upsert(payload, on_conflict=KEY_COLUMNS, ignore_duplicates=not overwrite)
                .execute()
            )
        if not overwrite and not fetchall(res):
            # Key already taken; the backend kept its row.
            return None
        return row_to_record(fetchone(res, "mark attendance"))

    def update(self, record_id: str, changes: AttendanceChanges) -> AttendanceRecord:
        with backend_call("update attendance"):
            res = (
                self._client.table("attendance_records")
                .update(changes.as_payload())
                .eq("id", record_id)
                .execute()
            )
        return row_to_record(fetchone(res, "update attendance"))


def row_to_record(r: Mapping[str, Any]) -> AttendanceRecord:
    embedded = r.get("student")
    return AttendanceRecord(
        id=str(r["id"]),
        user_id=str(r.get("user_id") or ""),
        student_id=str(r["student_id"]),
        date=parse_backend_date(r["date"]),
        status=AttendanceStatus(r["status"]),
        time_in=parse_backend_time(r.get("time_in")),
        time_out=parse_backend_time(r.get("time_out")),
        remarks=r.get("remarks"),
        created_at=parse_backend_timestamp(r.get("created_at")),
        student=row_to_student(embedded) if embedded else None,
    )
