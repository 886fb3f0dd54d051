"""
Research Budget Ledger - Test Configuration and Fixtures
"""
import os
from decimal import Decimal
from typing import Generator

import pytest

# Set testing environment before the app reads its settings
os.environ['DATABASE_URL'] = 'sqlite://'
os.environ['JWT_SECRET'] = 'test-jwt-secret-key-for-testing'
os.environ['SMTP_HOST'] = ''
os.environ['SMTP_USER'] = ''
os.environ['LOG_LEVEL'] = 'WARNING'
os.environ['BCRYPT_ROUNDS'] = '4'

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from app.database import Base, SessionLocal, engine, get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models import BudgetEntry, Project, ProjectStaff, User  # noqa: E402
from app.utils.constants import Role  # noqa: E402
from app.utils.security import create_access_token, hash_password  # noqa: E402

TEST_PASSWORD = 'testpassword123'


@pytest.fixture(scope='function')
def db_session() -> Generator[Session, None, None]:
    """Create a fresh schema and session for each test"""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """Test client whose requests share the test session"""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


def make_user(db: Session, role: Role, email: str, first_name: str = 'Test') -> User:
    user = User(
        email=email,
        password_hash=hash_password(TEST_PASSWORD),
        first_name=first_name,
        last_name=role.value.title(),
        role=role.value,
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def admin_user(db_session: Session) -> User:
    return make_user(db_session, Role.ADMIN, 'admin@test.local', 'Ada')


@pytest.fixture
def supervisor(db_session: Session) -> User:
    return make_user(db_session, Role.SUPERVISOR, 'supervisor@test.local', 'Sunita')


@pytest.fixture
def project_head(db_session: Session) -> User:
    return make_user(db_session, Role.PROJECT_HEAD, 'head@test.local', 'Anil')


@pytest.fixture
def employee(db_session: Session) -> User:
    """Active staff member of ``project``"""
    return make_user(db_session, Role.EMPLOYEE, 'staff@test.local', 'Ravi')


@pytest.fixture
def outsider(db_session: Session) -> User:
    """Employee with no assignment on any project"""
    return make_user(db_session, Role.EMPLOYEE, 'outsider@test.local', 'Omar')


@pytest.fixture
def external_owner(db_session: Session) -> User:
    return make_user(db_session, Role.EXTERNAL_OWNER, 'owner@test.local', 'Eva')


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------


@pytest.fixture
def project(db_session: Session, project_head: User, employee: User) -> Project:
    """P1, headed by ``project_head`` with ``employee`` on staff"""
    p = Project(code='P1', title='Seismic retrofitting', project_head_id=project_head.id)
    db_session.add(p)
    db_session.flush()
    db_session.add(ProjectStaff(project_id=p.id, user_id=employee.id, designation='Scientist'))
    db_session.commit()
    db_session.refresh(p)
    return p


@pytest.fixture
def staff_on(db_session: Session):
    """Factory adding a user of any role as active staff on a project"""
    def _staff_on(project: Project, role: Role) -> User:
        user = make_user(db_session, role, f'{role.value.lower()}@test.local')
        db_session.add(ProjectStaff(project_id=project.id, user_id=user.id, designation='Consultant'))
        db_session.commit()
        return user

    return _staff_on


@pytest.fixture
def project2(db_session: Session) -> Project:
    """P2, no head and no staff"""
    p = Project(code='P2', title='Wind fatigue')
    db_session.add(p)
    db_session.commit()
    db_session.refresh(p)
    return p


@pytest.fixture
def add_entry(db_session: Session):
    """Factory inserting a ledger slot directly, bypassing the service layer"""
    def _add_entry(
        project: Project,
        category: str,
        fiscal_year: str,
        allocated: str | int,
        utilized: str | int = 0,
    ) -> BudgetEntry:
        entry = BudgetEntry(
            project_id=project.id,
            category=category,
            fiscal_year=fiscal_year,
            allocated_amount=Decimal(str(allocated)),
            utilized_amount=Decimal(str(utilized)),
        )
        db_session.add(entry)
        db_session.commit()
        db_session.refresh(entry)
        return entry

    return _add_entry


# ---------------------------------------------------------------------------
# Auth headers
# ---------------------------------------------------------------------------


def _auth_headers(user: User) -> dict:
    token = create_access_token({'sub': user.id, 'email': user.email, 'role': user.role})
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def headers_for():
    """Bearer headers for any user"""
    return _auth_headers


@pytest.fixture
def supervisor_headers(supervisor: User) -> dict:
    return _auth_headers(supervisor)


@pytest.fixture
def head_headers(project_head: User) -> dict:
    return _auth_headers(project_head)


@pytest.fixture
def employee_headers(employee: User) -> dict:
    return _auth_headers(employee)
