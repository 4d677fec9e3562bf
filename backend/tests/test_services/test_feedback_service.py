"""Tests for feedback submission: validation, duplicate guard, QR path."""
import pytest
from sqlalchemy.exc import IntegrityError

from app.errors import AppError, DuplicateFeedback, NotFound, ValidationFailed
from app.models import Doubt, Feedback
from app.schemas.auth import TokenUser
from app.schemas.feedback import FeedbackCreate
from app.services import feedback_service
from app.services.feedback_service import (
    ANONYMOUS_NAME,
    QR_STUDENT_NAME,
    submit_feedback,
    submit_qr_feedback,
    validate_submission,
)
from app.services.moderation import ABUSE_REJECTION_MESSAGE, build_abuse_filter

ABUSE = build_abuse_filter(None)
QR_EMAIL = "qr-feedback@internal.local"


def _token_user(user) -> TokenUser:
    return TokenUser(id=user.id, email=user.email, role=user.role, name=user.name)


def _count(db, teacher_id):
    return db.query(Feedback).filter(Feedback.teacher_id == teacher_id).count()


class TestValidateSubmission:
    @pytest.mark.parametrize("rating", [1, 3, 5])
    def test_accepts_ratings_in_range(self, rating):
        assert validate_submission(rating, None, ABUSE).rating == rating

    @pytest.mark.parametrize("rating", [0, 6, -1, 2.5, "4", None, True])
    def test_rejects_bad_ratings(self, rating):
        with pytest.raises(ValidationFailed) as exc:
            validate_submission(rating, None, ABUSE)
        assert "between 1 and 5" in exc.value.message

    def test_trims_comment_and_blank_becomes_none(self):
        assert validate_submission(4, "  clear lectures  ", ABUSE).comment == "clear lectures"
        assert validate_submission(4, "   ", ABUSE).comment is None

    def test_rejects_abusive_language_case_insensitive(self):
        with pytest.raises(ValidationFailed) as exc:
            validate_submission(2, "You are STUPID", ABUSE)
        assert exc.value.message == ABUSE_REJECTION_MESSAGE

    def test_custom_deny_list_replaces_default(self):
        custom = build_abuse_filter("boring, lazy")
        validate_submission(3, "stupid joke in class", custom)
        with pytest.raises(ValidationFailed):
            validate_submission(3, "Lazy preparation", custom)


class TestSubmitFeedback:
    def test_accepts_and_updates_aggregates(self, db_session, make_user, make_teacher):
        student, _ = make_user("student")
        teacher = make_teacher()
        fb = submit_feedback(
            db_session, _token_user(student),
            FeedbackCreate(teacher_id=teacher.id, rating=5, comment="Great explanations"),
            ABUSE,
        )
        assert fb.student_name == student.name
        assert fb.subject == teacher.subject
        db_session.refresh(teacher)
        assert teacher.total_feedback == 1
        assert teacher.average_rating == 5.0

    def test_duplicate_rejected_and_aggregates_unchanged(self, db_session, make_user, make_teacher):
        student, _ = make_user("student")
        teacher = make_teacher()
        user = _token_user(student)
        submit_feedback(db_session, user, FeedbackCreate(teacher_id=teacher.id, rating=4), ABUSE)

        with pytest.raises(DuplicateFeedback) as exc:
            submit_feedback(db_session, user, FeedbackCreate(teacher_id=teacher.id, rating=1), ABUSE)
        assert "already submitted" in exc.value.message

        db_session.refresh(teacher)
        assert (teacher.average_rating, teacher.total_feedback) == (4.0, 1)
        assert _count(db_session, teacher.id) == 1

    def test_storage_constraint_catches_race(self, db_session, make_user, make_teacher, monkeypatch):
        student, _ = make_user("student")
        teacher = make_teacher()
        user = _token_user(student)
        submit_feedback(db_session, user, FeedbackCreate(teacher_id=teacher.id, rating=4), ABUSE)

        # Both requests passed the existence check before either wrote
        monkeypatch.setattr(feedback_service, "has_feedback", lambda *a, **k: False)
        with pytest.raises(DuplicateFeedback):
            submit_feedback(db_session, user, FeedbackCreate(teacher_id=teacher.id, rating=2), ABUSE)

        db_session.refresh(teacher)
        assert (teacher.average_rating, teacher.total_feedback) == (4.0, 1)

    def test_missing_student_row_is_not_a_duplicate(self, db_session, make_teacher):
        teacher = make_teacher()
        # Token still valid but the account was removed
        ghost = TokenUser(id="deleted-user", email="gone@example.edu", role="student", name="Gone")

        with pytest.raises(IntegrityError):
            submit_feedback(db_session, ghost, FeedbackCreate(teacher_id=teacher.id, rating=4), ABUSE)

        db_session.refresh(teacher)
        assert (teacher.average_rating, teacher.total_feedback) == (0.0, 0)
        assert _count(db_session, teacher.id) == 0

    def test_anonymous_hides_name_but_keeps_identity(self, db_session, make_user, make_teacher):
        student, _ = make_user("student")
        teacher = make_teacher()
        user = _token_user(student)
        fb = submit_feedback(
            db_session, user, FeedbackCreate(teacher_id=teacher.id, rating=3, anonymous=True), ABUSE
        )
        assert fb.student_name == ANONYMOUS_NAME
        assert fb.student_id == student.id

        with pytest.raises(DuplicateFeedback):
            submit_feedback(db_session, user, FeedbackCreate(teacher_id=teacher.id, rating=5), ABUSE)

    def test_abusive_comment_creates_no_row(self, db_session, make_user, make_teacher):
        student, _ = make_user("student")
        teacher = make_teacher()
        with pytest.raises(ValidationFailed):
            submit_feedback(
                db_session, _token_user(student),
                FeedbackCreate(teacher_id=teacher.id, rating=2, comment="you are stupid"),
                ABUSE,
            )
        assert _count(db_session, teacher.id) == 0

    def test_unknown_teacher(self, db_session, make_user):
        student, _ = make_user("student")
        with pytest.raises(NotFound):
            submit_feedback(db_session, _token_user(student), FeedbackCreate(teacher_id="nope", rating=3), ABUSE)

    def test_doubt_is_created_with_feedback(self, db_session, make_user, make_teacher):
        student, _ = make_user("student")
        teacher = make_teacher()
        submit_feedback(
            db_session, _token_user(student),
            FeedbackCreate(teacher_id=teacher.id, rating=4, anonymous=True, doubt="  What is amortised cost?  "),
            ABUSE,
        )
        doubt = db_session.query(Doubt).one()
        assert doubt.question == "What is amortised cost?"
        assert doubt.status == "open"
        assert doubt.student_name == ANONYMOUS_NAME

    def test_blank_doubt_is_ignored(self, db_session, make_user, make_teacher):
        student, _ = make_user("student")
        teacher = make_teacher()
        submit_feedback(
            db_session, _token_user(student),
            FeedbackCreate(teacher_id=teacher.id, rating=4, doubt="   "),
            ABUSE,
        )
        assert db_session.query(Doubt).count() == 0


class TestQrFeedback:
    def test_repeat_submissions_allowed(self, db_session, make_teacher):
        teacher = make_teacher()
        first = submit_qr_feedback(db_session, teacher.id, 5, None, ABUSE, QR_EMAIL)
        second = submit_qr_feedback(db_session, teacher.id, 3, "Good pace", ABUSE, QR_EMAIL)

        assert first.student_id == second.student_id
        assert second.student_name == QR_STUDENT_NAME
        db_session.refresh(teacher)
        assert (teacher.average_rating, teacher.total_feedback) == (4.0, 2)

    def test_validation_still_applies(self, db_session, make_teacher):
        teacher = make_teacher()
        with pytest.raises(ValidationFailed):
            submit_qr_feedback(db_session, teacher.id, 9, None, ABUSE, QR_EMAIL)
        with pytest.raises(ValidationFailed):
            submit_qr_feedback(db_session, teacher.id, 4, "what a bloody mess", ABUSE, QR_EMAIL)
        assert _count(db_session, teacher.id) == 0

    def test_unknown_teacher(self, db_session):
        with pytest.raises(NotFound):
            submit_qr_feedback(db_session, "missing", 4, None, ABUSE, QR_EMAIL)

    def test_refuses_email_taken_by_a_real_account(self, db_session, make_user, make_teacher):
        make_user("teacher", email=QR_EMAIL)
        teacher = make_teacher()

        with pytest.raises(AppError) as exc:
            submit_qr_feedback(db_session, teacher.id, 4, "private note", ABUSE, QR_EMAIL)
        assert exc.value.status_code == 500
        assert _count(db_session, teacher.id) == 0
