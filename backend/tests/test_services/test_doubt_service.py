"""Tests for the doubt lifecycle and the overdue view."""
from datetime import datetime, timedelta, timezone

import pytest

from app.errors import AlreadyAnswered, NotFound, ValidationFailed
from app.models import Doubt
from app.services.doubt_service import answer_doubt, doubts_for_teachers, overdue_doubts
from app.utils.helpers import ensure_utc

NOW = datetime(2026, 5, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_doubt(db_session, make_user, make_teacher):
    teacher = make_teacher()
    student, _ = make_user("student")

    def _make(days_old: float = 0, status: str = "open", question: str = "Why O(log n)?"):
        doubt = Doubt(
            teacher_id=teacher.id,
            student_id=student.id,
            student_name=student.name,
            question=question,
            status=status,
            created_at=NOW - timedelta(days=days_old),
        )
        db_session.add(doubt)
        db_session.commit()
        db_session.refresh(doubt)
        return doubt

    _make.teacher = teacher
    return _make


class TestAnswerDoubt:
    def test_open_to_answered(self, db_session, make_doubt):
        doubt = make_doubt()
        answered = answer_doubt(db_session, doubt.id, "  Because the range halves each step. ", now=NOW)
        assert answered.status == "answered"
        assert answered.answer == "Because the range halves each step."
        assert ensure_utc(answered.answered_at) == NOW

    def test_reanswer_rejected_and_timestamp_kept(self, db_session, make_doubt):
        doubt = make_doubt()
        answer_doubt(db_session, doubt.id, "First", now=NOW)
        with pytest.raises(AlreadyAnswered):
            answer_doubt(db_session, doubt.id, "Second", now=NOW + timedelta(days=1))

        db_session.refresh(doubt)
        assert doubt.answer == "First"
        assert ensure_utc(doubt.answered_at) == NOW

    @pytest.mark.parametrize("answer", [None, "", "   "])
    def test_answer_required(self, db_session, make_doubt, answer):
        doubt = make_doubt()
        with pytest.raises(ValidationFailed):
            answer_doubt(db_session, doubt.id, answer, now=NOW)
        db_session.refresh(doubt)
        assert doubt.status == "open"

    def test_unknown_doubt(self, db_session):
        with pytest.raises(NotFound):
            answer_doubt(db_session, "missing", "text", now=NOW)


class TestOverdueDoubts:
    def test_threshold_is_inclusive(self, db_session, make_doubt):
        exactly = make_doubt(days_old=5, question="exactly")
        older = make_doubt(days_old=9, question="older")
        make_doubt(days_old=4.9, question="fresh")
        make_doubt(days_old=20, status="answered", question="done")

        rows = overdue_doubts(db_session, 5, now=NOW)
        assert [r["id"] for r in rows] == [exactly.id, older.id]
        assert rows[0]["teacher_name"] == make_doubt.teacher.name

    def test_listing_does_not_change_state(self, db_session, make_doubt):
        doubt = make_doubt(days_old=10)
        overdue_doubts(db_session, 5, now=NOW)
        db_session.refresh(doubt)
        assert doubt.status == "open"
        assert doubt.answered_at is None

    def test_answered_doubt_leaves_overdue(self, db_session, make_doubt):
        doubt = make_doubt(days_old=10)
        answer_doubt(db_session, doubt.id, "Done", now=NOW)
        assert overdue_doubts(db_session, 5, now=NOW) == []

    def test_teacher_view(self, db_session, make_doubt):
        make_doubt()
        rows = doubts_for_teachers(db_session, make_doubt.teacher.id)
        assert len(rows) == 1
        assert rows[0]["teacher_name"] == make_doubt.teacher.name
