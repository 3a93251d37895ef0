import pytest
import os
from datetime import datetime, timedelta, timezone
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set env before importing engine components
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

from review_engine.database import Base, init_db
from review_engine.domain import CycleDeadlines, Employee, EngineerLevel, ReviewCycle, PillarScores
from review_engine.repositories import SqlRepositories

# SQLite in-memory database configuration
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Fresh schema and session for each test function."""
    init_db(bind=engine)
    session = TestingSessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def repos(db_session):
    return SqlRepositories(db_session)


def make_deadlines(start=None, offset_days=30):
    """Five strictly increasing deadlines, the first `offset_days` from `start`."""
    start = start or datetime.now(timezone.utc)
    first = start + timedelta(days=offset_days)
    return CycleDeadlines(
        self_review=first,
        peer_feedback=first + timedelta(days=7),
        manager_evaluation=first + timedelta(days=14),
        calibration=first + timedelta(days=21),
        feedback_delivery=first + timedelta(days=28),
    )


def scores(project_impact, direction, engineering_excellence, operational_ownership, people_impact):
    return PillarScores(
        project_impact=project_impact,
        direction=direction,
        engineering_excellence=engineering_excellence,
        operational_ownership=operational_ownership,
        people_impact=people_impact,
    )


@pytest.fixture(scope="function")
def cycle(repos):
    """An active cycle whose deadlines are all in the future."""
    review_cycle = ReviewCycle.create(name="2026 Annual Review", year=2026, deadlines=make_deadlines())
    review_cycle.start()
    repos.review_cycles.save(review_cycle)
    repos.commit()
    return review_cycle


@pytest.fixture(scope="function")
def expired_cycle(repos):
    """An active cycle whose deadlines have all passed."""
    start = datetime.now(timezone.utc) - timedelta(days=120)
    review_cycle = ReviewCycle.create(name="2025 Annual Review", year=2025, deadlines=make_deadlines(start))
    review_cycle.start()
    repos.review_cycles.save(review_cycle)
    repos.commit()
    return review_cycle


@pytest.fixture(scope="function")
def manager(repos):
    person = Employee(id="mgr-1", name="Grace Manager", level=EngineerLevel.MANAGER, department="Platform")
    repos.users.save(person)
    repos.commit()
    return person


@pytest.fixture(scope="function")
def employee(repos, manager):
    person = Employee(
        id="emp-1", name="Ada Engineer", level=EngineerLevel.MID, department="Platform", manager_id=manager.id
    )
    repos.users.save(person)
    repos.commit()
    return person


@pytest.fixture(scope="function")
def colleague(repos, manager):
    person = Employee(
        id="emp-2", name="Linus Peer", level=EngineerLevel.SENIOR, department="Payments", manager_id=manager.id
    )
    repos.users.save(person)
    repos.commit()
    return person


@pytest.fixture(scope="function")
def calibration_session(repos, cycle, manager):
    from review_engine.services import CalibrationService
    return CalibrationService(repos).create_session(
        cycle_id=cycle.id,
        name="Platform calibration",
        facilitator_id=manager.id,
        participant_ids=[manager.id],
        scheduled_at=datetime.now(timezone.utc) + timedelta(days=40),
    )
