import pytest
import os
import uuid
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set env before importing app components
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

from appraisal_manager.database import Base, get_db
from appraisal_manager.main import app
from fastapi.testclient import TestClient

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
    """Fresh schema per test. Services commit and roll back per item, so an
    outer rolled-back transaction cannot isolate them."""
    import appraisal_manager.models  # noqa: F401
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """Get a TestClient that uses the test database session via dependency override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

def rating_question(question_id, required=True):
    return {"id": question_id, "text": f"Question {question_id}", "type": "rating", "required": required}


def default_sections():
    """One section with a required q1 and optional q2/q3."""
    return [
        {
            "id": "s1",
            "title": "Performance",
            "weight": 100,
            "questions": [
                rating_question("q1"),
                rating_question("q2", required=False),
                {"id": "q3", "text": "Anything else?", "type": "text", "required": False},
            ],
        }
    ]


@pytest.fixture
def make_user(db_session):
    from appraisal_manager.models.user import User

    def _make_user(full_name="Test User", manager_id=None, department=None, user_id=None):
        user = User(
            id=user_id or str(uuid.uuid4()),
            email=f"{uuid.uuid4().hex[:10]}@example.com",
            full_name=full_name,
            manager_id=manager_id,
            department=department,
        )
        db_session.add(user)
        db_session.commit()
        return user
    return _make_user


@pytest.fixture
def make_team_record(db_session):
    from appraisal_manager.models.user import TeamMember

    def _make_team_record(user_id, manager):
        record = TeamMember(user_id=user_id, manager=manager)
        db_session.add(record)
        db_session.commit()
        return record
    return _make_team_record


@pytest.fixture
def cycle(db_session):
    from appraisal_manager.models.appraisal_cycle import AppraisalCycle, CycleStatus
    cycle = AppraisalCycle(name="Annual Review 2024", year=2024, status=CycleStatus.ACTIVE.value)
    db_session.add(cycle)
    db_session.commit()
    return cycle


@pytest.fixture
def make_template(db_session):
    from appraisal_manager.models.appraisal_template import AppraisalTemplate

    def _make_template(review_type="both", sections=None):
        template = AppraisalTemplate(
            name=f"{review_type} template",
            review_type=review_type,
            sections=sections if sections is not None else default_sections(),
        )
        db_session.add(template)
        db_session.commit()
        return template
    return _make_template


@pytest.fixture
def make_appraisal(db_session, cycle, make_template):
    from appraisal_manager.models.appraisal import Appraisal, AppraisalStatus

    def _make_appraisal(
        employee_id=None,
        manager_id="manager-1",
        template=None,
        review_type="both",
        status=AppraisalStatus.DRAFT.value,
        **fields,
    ):
        template = template or make_template(review_type)
        appraisal = Appraisal(
            cycle_id=fields.pop("cycle_id", cycle.id),
            employee_id=employee_id or str(uuid.uuid4()),
            manager_id=manager_id,
            template_id=template.id,
            status=status,
            goals=fields.pop("goals", []),
            competencies=fields.pop("competencies", []),
            **fields,
        )
        db_session.add(appraisal)
        db_session.commit()
        return appraisal
    return _make_appraisal


def answers(*values):
    """Review submission body answering q1, q2, ... in order."""
    return {
        "responses": [
            {"question_id": f"q{i}", "answer": value}
            for i, value in enumerate(values, start=1)
        ]
    }
