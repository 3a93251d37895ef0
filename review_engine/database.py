from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker, declarative_base
from review_engine.core.config import settings

# Support both PostgreSQL and SQLite via centralized settings
DATABASE_URL = settings.database_url

if DATABASE_URL.startswith("postgresql"):
    engine = create_engine(DATABASE_URL)
else:
    # SQLite configuration for local development/testing
    engine = create_engine(
        DATABASE_URL, connect_args={"check_same_thread": False}
    )

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

@contextmanager
def session_scope(session_factory=SessionLocal) -> Iterator[Session]:
    """
    Session Provider: one session per unit of work (batch job, request).
    Commits and rollbacks are issued by the service layer.
    """
    db = session_factory()
    try:
        yield db
    finally:
        db.close()

def init_db(bind=None):
    """
    Registers all review models and creates the schema.
    """
    # Import all models to ensure they are registered with Base.metadata before create_all
    from review_engine.models import (  # noqa: F401
        user, review_cycle, self_review, peer_feedback, peer_nomination,
        manager_evaluation, final_score, calibration_session, score_adjustment_request
    )
    Base.metadata.create_all(bind=bind or engine)
