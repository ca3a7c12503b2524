from datetime import date

import pytest

from classroll.core.exceptions import (
    ConflictError,
    NotFoundError,
    StoreConstraintError,
    ValidationError,
)
from classroll.models import Attendance, AttendanceStatus, SessionStatus
from classroll.services.attendance_service import AttendanceService, normalize_mark
from classroll.services.base_service import BaseService
from classroll.services.session_service import SessionService


class TestNormalizeMark:
    def test_excused_comment_is_trimmed(self):
        assert normalize_mark("excused", "  doctor  ") == (AttendanceStatus.EXCUSED, "doctor")

    @pytest.mark.parametrize("comment", [None, "", "   "])
    def test_excused_requires_comment(self, comment):
        with pytest.raises(ValidationError) as exc:
            normalize_mark(AttendanceStatus.EXCUSED, comment)
        assert exc.value.extra == {"field": "comment"}

    @pytest.mark.parametrize("status", ["present", "absent"])
    def test_comment_dropped_for_other_statuses(self, status):
        assert normalize_mark(status, "late bus") == (AttendanceStatus(status), None)

    def test_unknown_status(self):
        with pytest.raises(ValidationError):
            normalize_mark("late", None)


class TestUpsertMark:
    async def test_records_a_mark(self, db, seed, session_a):
        mark = await AttendanceService(db).upsert_mark(seed.student_a1, session_a.id, "present")

        assert mark.student_id == seed.student_a1
        assert mark.session_id == session_a.id
        assert mark.status is AttendanceStatus.PRESENT
        assert mark.comment is None

    async def test_second_write_replaces_the_first(self, db, seed, session_a):
        service = AttendanceService(db)
        first = await service.upsert_mark(seed.student_a1, session_a.id, "excused", "flu")
        second = await service.upsert_mark(seed.student_a1, session_a.id, "absent", "ignored")

        assert second.id == first.id
        assert second.status is AttendanceStatus.ABSENT
        assert second.comment is None
        assert len(await service.list_for_session(session_a.id)) == 1

    async def test_allowed_on_extra_session(self, db, seed):
        extra = await SessionService(db).create_extra_session(seed.class_a, date(2024, 9, 7))
        mark = await AttendanceService(db).upsert_mark(seed.student_a2, extra.id, "present")
        assert mark.status is AttendanceStatus.PRESENT

    @pytest.mark.parametrize("status", [SessionStatus.CANCELLED, SessionStatus.HOLIDAY, SessionStatus.VACATION])
    async def test_refused_on_non_pointable_session(self, db, seed, session_a, status):
        session_id = session_a.id
        await SessionService(db).change_status(session_id, status)

        with pytest.raises(ConflictError):
            await AttendanceService(db).upsert_mark(seed.student_a1, session_id, "present")

        assert await AttendanceService(db).list_for_session(session_id) == []

    @pytest.mark.parametrize("student_id,status,comment", [
        ("other_class", "present", None),
        ("unknown", "present", None),
        ("own_class", "excused", None),
    ])
    async def test_closed_session_refuses_before_other_checks(
        self, db, seed, session_a, student_id, status, comment
    ):
        session_id = session_a.id
        await SessionService(db).change_status(session_id, SessionStatus.CANCELLED)
        student = {"other_class": seed.student_b, "unknown": 9999, "own_class": seed.student_a1}[student_id]

        with pytest.raises(ConflictError):
            await AttendanceService(db).upsert_mark(student, session_id, status, comment)

    async def test_student_from_another_class(self, db, seed, session_a):
        with pytest.raises(ValidationError):
            await AttendanceService(db).upsert_mark(seed.student_b, session_a.id, "present")

    async def test_unknown_student(self, db, seed, session_a):
        with pytest.raises(NotFoundError):
            await AttendanceService(db).upsert_mark(9999, session_a.id, "present")

    async def test_unknown_session(self, db, seed):
        with pytest.raises(NotFoundError):
            await AttendanceService(db).upsert_mark(seed.student_a1, 9999, "present")

    @pytest.mark.parametrize("student_id,session_id", [(0, 1), (1, -1), (True, 1), (1, "1")])
    async def test_invalid_ids(self, db, seed, student_id, session_id):
        with pytest.raises(ValidationError):
            await AttendanceService(db).upsert_mark(student_id, session_id, "present")

    async def test_store_rejects_excused_without_comment(self, db, seed, session_a):
        with pytest.raises(StoreConstraintError):
            await BaseService(Attendance, db).create({
                "student_id": seed.student_a1,
                "session_id": session_a.id,
                "status": AttendanceStatus.EXCUSED,
                "comment": None,
            })


class TestListForClass:
    async def test_ordered_by_session_date_then_student(self, db, seed):
        sessions = await SessionService(db).ensure_sessions(
            seed.class_a, [date(2024, 9, 11), date(2024, 9, 4)]
        )
        early, late = sessions
        service = AttendanceService(db)
        await service.upsert_mark(seed.student_a2, late.id, "present")
        await service.upsert_mark(seed.student_a2, early.id, "absent")
        await service.upsert_mark(seed.student_a1, early.id, "present")

        marks = await service.list_for_class(seed.class_a)

        assert [(m.session_id, m.student_id) for m in marks] == [
            (early.id, seed.student_a1),
            (early.id, seed.student_a2),
            (late.id, seed.student_a2),
        ]

    async def test_other_class_is_empty(self, db, seed, session_a):
        await AttendanceService(db).upsert_mark(seed.student_a1, session_a.id, "present")
        assert await AttendanceService(db).list_for_class(seed.class_b) == []
