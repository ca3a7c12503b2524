from datetime import date

import pytest

from classroll.core.exceptions import ConflictError, NotFoundError, ValidationError
from classroll.models import AttendanceStatus, ClassModel, SessionStatus
from classroll.services.attendance_service import AttendanceService
from classroll.services.class_service import ClassService
from classroll.services.session_service import SessionService
from classroll.utils.school_calendar import generate_school_year_dates

from .conftest import SCHOOL_YEAR


class TestEnsureSessions:
    async def test_creates_scheduled_sessions_in_date_order(self, db, seed):
        days = [date(2024, 9, 18), date(2024, 9, 4), date(2024, 9, 11)]
        sessions = await SessionService(db).ensure_sessions(seed.class_a, days)

        assert [s.date for s in sessions] == sorted(days)
        assert {s.status for s in sessions} == {SessionStatus.SCHEDULED}

    async def test_is_idempotent(self, db, seed):
        service = SessionService(db)
        days = [date(2024, 9, 4), date(2024, 9, 11)]
        first = await service.ensure_sessions(seed.class_a, days)
        second = await service.ensure_sessions(seed.class_a, days + days)

        assert [s.id for s in first] == [s.id for s in second]

    async def test_keeps_existing_session_state(self, db, seed, session_a):
        service = SessionService(db)
        await service.change_status(session_a.id, SessionStatus.HOLIDAY, note="Armistice")

        sessions = await service.ensure_sessions(seed.class_a, [session_a.date, date(2024, 9, 11)])

        kept = next(s for s in sessions if s.id == session_a.id)
        assert kept.status is SessionStatus.HOLIDAY
        assert kept.note == "Armistice"
        assert len(sessions) == 2

    async def test_unknown_class(self, db, seed):
        with pytest.raises(NotFoundError):
            await SessionService(db).ensure_sessions(999, [date(2024, 9, 4)])

    async def test_add_dates_requires_dates(self, db, seed):
        with pytest.raises(ValidationError):
            await SessionService(db).add_dates(seed.class_a, [])

    @pytest.mark.parametrize("bad_id", [0, -3, True, "10"])
    async def test_rejects_invalid_class_id(self, db, seed, bad_id):
        with pytest.raises(ValidationError):
            await SessionService(db).ensure_sessions(bad_id, [date(2024, 9, 4)])


class TestWeekdayRule:
    async def test_generate_uses_stored_weekday(self, db, seed):
        sessions = await ClassService(db).generate_sessions(seed.class_a, start_year=SCHOOL_YEAR)

        assert [s.date for s in sessions] == generate_school_year_dates(3, SCHOOL_YEAR)

    async def test_generate_requires_a_weekday(self, db, seed):
        with pytest.raises(ValidationError):
            await ClassService(db).generate_sessions(seed.class_b, start_year=SCHOOL_YEAR)

    async def test_generate_rejects_invalid_weekday(self, db, seed):
        with pytest.raises(ValidationError):
            await ClassService(db).generate_sessions(seed.class_a, weekday="someday")

    async def test_changing_weekday_adds_and_keeps(self, db, seed):
        service = ClassService(db)
        wednesdays = await service.generate_sessions(seed.class_a, start_year=SCHOOL_YEAR)

        sessions = await service.set_weekday(seed.class_a, "lundi", start_year=SCHOOL_YEAR)

        mondays = generate_school_year_dates(1, SCHOOL_YEAR)
        assert len(sessions) == len(wednesdays) + len(mondays)
        assert {s.date for s in wednesdays} <= {s.date for s in sessions}
        class_obj = await db.get(ClassModel, seed.class_a)
        assert class_obj.weekday == 1

    async def test_set_weekday_js_sunday(self, db, seed):
        sessions = await ClassService(db).set_weekday(seed.class_b, 0, start_year=SCHOOL_YEAR)

        assert sessions
        assert all(s.date.isoweekday() == 7 for s in sessions)

    async def test_set_weekday_rejects_invalid(self, db, seed):
        with pytest.raises(ValidationError):
            await ClassService(db).set_weekday(seed.class_a, 8)


class TestChangeStatus:
    async def _mark_all(self, db, seed, session):
        attendance = AttendanceService(db)
        await attendance.upsert_mark(seed.student_a1, session.id, AttendanceStatus.PRESENT)
        await attendance.upsert_mark(seed.student_a2, session.id, AttendanceStatus.ABSENT)

    async def test_cancel_without_marks(self, db, session_a):
        updated = await SessionService(db).change_status(session_a.id, "cancelled", note="Teacher sick")

        assert updated.status is SessionStatus.CANCELLED
        assert updated.note == "Teacher sick"

    @pytest.mark.parametrize("status", ["cancelled", "holiday", "vacation"])
    async def test_refused_while_marks_exist(self, db, seed, session_a, status):
        await self._mark_all(db, seed, session_a)
        service = SessionService(db)
        session_id = session_a.id

        with pytest.raises(ConflictError) as exc:
            await service.change_status(session_id, status)

        assert exc.value.extra == {"existing": 2}
        assert await service.count_attendance(session_id) == 2
        refreshed = await service.get(session_id)
        assert refreshed.status is SessionStatus.SCHEDULED

    async def test_force_deletes_marks(self, db, seed, session_a):
        await self._mark_all(db, seed, session_a)
        service = SessionService(db)

        updated = await service.change_status(session_a.id, SessionStatus.VACATION, force=True)

        assert updated.status is SessionStatus.VACATION
        assert await service.count_attendance(session_a.id) == 0

    async def test_pointable_status_keeps_marks(self, db, seed, session_a):
        await self._mark_all(db, seed, session_a)
        service = SessionService(db)

        updated = await service.change_status(session_a.id, SessionStatus.EXTRA)

        assert updated.status is SessionStatus.EXTRA
        assert await service.count_attendance(session_a.id) == 2

    async def test_reopening_a_cancelled_session(self, db, session_a):
        service = SessionService(db)
        await service.change_status(session_a.id, SessionStatus.CANCELLED, note="Strike")

        updated = await service.change_status(session_a.id, SessionStatus.SCHEDULED)

        assert updated.status is SessionStatus.SCHEDULED
        assert updated.note is None

    async def test_unknown_status(self, db, session_a):
        with pytest.raises(ValidationError):
            await SessionService(db).change_status(session_a.id, "postponed")

    async def test_unknown_session(self, db, seed):
        with pytest.raises(NotFoundError):
            await SessionService(db).change_status(9999, SessionStatus.CANCELLED)


class TestExtraSession:
    async def test_creates_extra_session(self, db, seed):
        session = await SessionService(db).create_extra_session(
            seed.class_a, date(2024, 9, 7), note="Rehearsal"
        )

        assert session.status is SessionStatus.EXTRA
        assert session.note == "Rehearsal"
        assert session.class_id == seed.class_a

    async def test_date_already_taken(self, db, seed, session_a):
        with pytest.raises(ConflictError):
            await SessionService(db).create_extra_session(seed.class_a, session_a.date)

    async def test_same_date_in_another_class(self, db, seed, session_a):
        session = await SessionService(db).create_extra_session(seed.class_b, session_a.date)
        assert session.class_id == seed.class_b

    async def test_invalid_date(self, db, seed):
        with pytest.raises(ValidationError):
            await SessionService(db).create_extra_session(seed.class_a, "2024-09-07")

    async def test_unknown_class(self, db, seed):
        with pytest.raises(NotFoundError):
            await SessionService(db).create_extra_session(999, date(2024, 9, 7))
