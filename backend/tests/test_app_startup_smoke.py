"""
Smoke tests: the app imports, mounts its routers and serves health checks.
"""

import pytest

from app.main import app
from core.config import DEV_JWT_SECRET, Settings


def test_route_groups_mounted():
    paths = {route.path for route in app.routes}

    assert "/api/staff/members" in paths
    assert "/api/attendance/summary" in paths
    assert "/api/payroll/salary" in paths
    assert "/api/payroll/salary/{record_id}/pay" in paths
    assert "/api/payroll/config/target-hours/{position_name}" in paths
    assert "/api/payroll/advances" in paths
    assert "/api/payroll/incentives/payouts" in paths


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_settings_parse_cors_origins():
    settings = Settings(cors_origins="http://a.test, http://b.test")

    assert settings.cors_origins == ["http://a.test", "http://b.test"]
    assert settings.attendance_default_required_minutes == 540


def test_settings_reject_default_secret_in_production():
    with pytest.raises(ValueError):
        Settings(environment="production", jwt_secret_key=DEV_JWT_SECRET)
