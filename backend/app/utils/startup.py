"""Startup seeding run from the FastAPI lifespan.

``seed_initial_data()`` inserts the initial teacher list and the admin
account when they are missing. It is safe to run on every start: teachers
are matched by name, the admin by email.
"""
from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

SEED_DEPARTMENT = "Computer Science"

SEED_TEACHERS: tuple[tuple[str, str], ...] = (
    ("Shweta Kaushik", "Web Technology"),
    ("Tripti Pandey", "Machine Learning Techniques"),
    ("Ayush Aggarwal", "DBMS"),
    ("Shaili Gupta", "OOSD"),
    ("Shalini Singh", "DAA"),
    ("Bharat Bhardwaj", "COA"),
    ("Sanjeev Soni", "FSD"),
    ("Pratik Singh", "DSA"),
    ("Meenakshi Vishnoi", "OOPs with Java"),
)


def seed_initial_data(session_factory=None) -> int:
    """Insert missing seed teachers and the admin user.

    Returns the number of rows created.
    """
    from app.config import get_settings
    from app.database import SessionLocal
    from app.models import Teacher, User
    from app.services.auth_service import hash_password

    settings = get_settings()
    db = (session_factory or SessionLocal)()
    created = 0
    try:
        existing = {name for (name,) in db.query(Teacher.name).all()}
        for name, subject in SEED_TEACHERS:
            if name in existing:
                continue
            db.add(Teacher(name=name, department=SEED_DEPARTMENT, subject=subject))
            created += 1

        admin_email = settings.ADMIN_EMAIL.strip().lower()
        if not db.query(User.id).filter(User.email == admin_email).first():
            db.add(User(
                name="Administrator",
                email=admin_email,
                username=admin_email.split("@")[0],
                password_hash=hash_password(settings.ADMIN_PASSWORD),
                role="admin",
            ))
            created += 1
            logger.warning("Created default admin %s; change its password", admin_email)

        if created:
            db.commit()
            logger.info("Seeded %d row(s)", created)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Could not seed initial data: %s", exc)
        created = 0
    finally:
        db.close()
    return created
