"""
Pytest configuration file for backend testing.
"""
import os
import sys
from pathlib import Path

# Add the backend directory to Python path so imports work correctly
backend_dir = Path(__file__).parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

# Test environment must be in place before core.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-testing-only")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import date  # noqa: E402
from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from core.database import Base, get_db  # noqa: E402
from core.auth import create_access_token  # noqa: E402
from core.permissions import Permission  # noqa: E402

# Import all models to register them with SQLAlchemy
from modules.staff.models import StaffMember  # noqa: E402
from modules.payroll import models as payroll_models  # noqa: E402,F401


@pytest.fixture
def db_engine():
    """Fresh in-memory database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def staff_factory(db_session):
    """Create staff members in the test database."""

    def create_staff(
        tenant_id: int = 1,
        name: str = "Priya",
        position: str = "Stylist",
        fixed_salary: Decimal = Decimal("30000.00"),
        **kwargs,
    ) -> StaffMember:
        staff = StaffMember(
            tenant_id=tenant_id,
            name=name,
            position=position,
            fixed_salary=fixed_salary,
            start_date=kwargs.pop("start_date", date(2024, 1, 1)),
            **kwargs,
        )
        db_session.add(staff)
        db_session.commit()
        db_session.refresh(staff)
        return staff

    return create_staff


@pytest.fixture
def token_factory():
    """Build bearer headers for a user in a tenant with given permissions."""

    def make_headers(tenant_id: int = 1, user_id: int = 7, permissions=None) -> dict:
        if permissions is None:
            permissions = [Permission.ALL.value]
        token = create_access_token(
            {
                "sub": user_id,
                "tenant_id": tenant_id,
                "permissions": [getattr(p, "value", p) for p in permissions],
            }
        )
        return {"Authorization": f"Bearer {token}"}

    return make_headers


@pytest.fixture
def client(db_session):
    """TestClient bound to the per-test database."""
    from fastapi.testclient import TestClient
    from app.main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
