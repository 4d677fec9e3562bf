"""Tests for startup seeding."""
from sqlalchemy.orm import sessionmaker

from app.config import get_settings
from app.models import Teacher, User
from app.utils.startup import SEED_DEPARTMENT, SEED_TEACHERS, seed_initial_data


class TestSeedInitialData:
    def test_seeds_once(self, engine, db_session):
        factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)

        assert seed_initial_data(factory) == len(SEED_TEACHERS) + 1
        assert seed_initial_data(factory) == 0

        teachers = db_session.query(Teacher).all()
        assert sorted(t.name for t in teachers) == sorted(name for name, _ in SEED_TEACHERS)
        assert {t.department for t in teachers} == {SEED_DEPARTMENT}
        assert all((t.average_rating, t.total_feedback) == (0.0, 0) for t in teachers)

        admins = db_session.query(User).filter(User.role == "admin").all()
        assert [a.email for a in admins] == [get_settings().ADMIN_EMAIL.strip().lower()]

    def test_keeps_existing_teacher(self, engine, make_teacher):
        make_teacher("Pratik Singh", "Mathematics", "Discrete Maths")
        factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)

        assert seed_initial_data(factory) == len(SEED_TEACHERS)
