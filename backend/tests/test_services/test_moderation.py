"""Tests for the abuse filter, the flagged queue and admin deletion."""
import pytest

from app.errors import NotFound
from app.models import Feedback
from app.services.aggregates import recompute_teacher_aggregates
from app.services.moderation import (
    DEFAULT_ABUSIVE_WORDS,
    build_abuse_filter,
    delete_feedback,
    flagged_feedback,
)


class TestAbuseFilter:
    def test_default_list_when_unset(self):
        assert build_abuse_filter(None).words == DEFAULT_ABUSIVE_WORDS
        assert build_abuse_filter(" , ").words == DEFAULT_ABUSIVE_WORDS

    def test_override_is_normalised(self):
        f = build_abuse_filter(" Boring ,LAZY,, ")
        assert f.words == ("boring", "lazy")

    def test_substring_match(self):
        f = build_abuse_filter(None)
        assert f.matches("Dumbfounded by the Shitty slides") == ["dumb", "shit"]
        assert f.is_abusive("well structured lecture") is False
        assert f.is_abusive(None) is False


class TestFlaggedFeedback:
    def test_rescans_stored_comments(self, db_session, make_user, make_teacher, add_feedback):
        teacher = make_teacher()
        s1, _ = make_user("student")
        s2, _ = make_user("student")
        s3, _ = make_user("student")
        add_feedback(teacher, s1, 2, comment="Fine lecture")
        bad = add_feedback(teacher, s2, 1, comment="total idiot")
        add_feedback(teacher, s3, 3, comment=None)

        rows = flagged_feedback(db_session, build_abuse_filter(None))
        assert [r["id"] for r in rows] == [bad.id]
        assert rows[0]["teacher_name"] == teacher.name
        assert rows[0]["department"] == teacher.department

    def test_uses_the_given_list(self, db_session, make_user, make_teacher, add_feedback):
        teacher = make_teacher()
        student, _ = make_user("student")
        add_feedback(teacher, student, 2, comment="A bit boring")
        assert flagged_feedback(db_session, build_abuse_filter(None)) == []
        assert len(flagged_feedback(db_session, build_abuse_filter("boring"))) == 1


class TestDeleteFeedback:
    def test_deletes_and_recomputes(self, db_session, make_user, make_teacher, add_feedback):
        teacher = make_teacher()
        s1, _ = make_user("student")
        s2, _ = make_user("student")
        keep = add_feedback(teacher, s1, 4)
        drop = add_feedback(teacher, s2, 1, comment="stupid")
        recompute_teacher_aggregates(db_session, teacher.id)
        db_session.commit()

        assert delete_feedback(db_session, drop.id) == teacher.id

        db_session.refresh(teacher)
        assert (teacher.average_rating, teacher.total_feedback) == (4.0, 1)
        assert [f.id for f in db_session.query(Feedback).all()] == [keep.id]
        assert flagged_feedback(db_session, build_abuse_filter(None)) == []

    def test_missing_id(self, db_session):
        with pytest.raises(NotFound):
            delete_feedback(db_session, "does-not-exist")
