from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping, Sequence

from supabase import Client

from ..backend.base import backend_call, fetchall, fetchone
from ..common.datetime_utils import parse_backend_timestamp
from .model import Student, StudentDraft
from .repository import StudentRepository


class SupabaseStudentRepository(StudentRepository):
    def __init__(self, client: Client):
        self._client = client

    def list_all(self) -> Sequence[Student]:
        with backend_call("fetch students"):
            res = self._client.table("students").select("*").order("created_at", desc=True).execute()
        return [row_to_student(r) for r in fetchall(res)]

    def create(self, *, user_id: str, draft: StudentDraft) -> Student:
        with backend_call("add student"):
            res = self._client.table("students").insert({**draft.as_payload(), "user_id": user_id}).execute()
        return row_to_student(fetchone(res, "add student"))

    def update(self, student_id: str, draft: StudentDraft) -> Student:
        payload = {**draft.as_payload(), "updated_at": datetime.now(timezone.utc).isoformat()}
        with backend_call("update student"):
            res = self._client.table("students").update(payload).eq("id", student_id).execute()
        return row_to_student(fetchone(res, "update student"))

    def delete(self, student_id: str) -> None:
        with backend_call("delete student"):
            self._client.table("students").delete().eq("id", student_id).execute()


def row_to_student(r: Mapping[str, Any]) -> Student:
    return Student(
        id=str(r["id"]),
        user_id=str(r.get("user_id") or ""),
        name=r.get("name") or "",
        roll_number=r.get("roll_number") or "",
        department=r.get("department") or "",
        email=r.get("email") or "",
        phone=r.get("phone") or "",
        year=r.get("year") or "",
        created_at=parse_backend_timestamp(r.get("created_at")),
        updated_at=parse_backend_timestamp(r.get("updated_at")),
    )
