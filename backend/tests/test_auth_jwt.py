"""
Test suite for JWT access tokens.

Tests cover:
- Token generation and claims
- Validation of signature, expiry, audience and issuer
- Bearer dependency behaviour through the API
"""

import pytest
from datetime import timedelta
from jose import jwt

from core.auth import CurrentUser, create_access_token, verify_token
from core.config import settings
from core.permissions import Permission


def _decode(token):
    return jwt.decode(
        token,
        settings.jwt_secret_key,
        algorithms=[settings.jwt_algorithm],
        audience=settings.jwt_audience,
        issuer=settings.jwt_issuer,
    )


class TestTokenGeneration:
    def test_create_access_token(self):
        token = create_access_token(
            {"sub": 7, "tenant_id": 3, "permissions": ["staff-salary:read"]}
        )

        payload = _decode(token)
        assert payload["sub"] == "7"
        assert payload["tenant_id"] == 3
        assert payload["type"] == "access"
        assert payload["jti"]

    def test_verify_round_trip(self):
        token = create_access_token({"sub": 7, "tenant_id": 3, "permissions": ["*"]})

        data = verify_token(token)

        assert data.user_id == 7
        assert data.tenant_id == 3
        assert data.permissions == ["*"]

    def test_each_token_has_unique_id(self):
        first = verify_token(create_access_token({"sub": 1, "tenant_id": 1}))
        second = verify_token(create_access_token({"sub": 1, "tenant_id": 1}))

        assert first.token_id != second.token_id


class TestTokenValidation:
    def test_expired_token(self):
        token = create_access_token(
            {"sub": 7, "tenant_id": 1}, expires_delta=timedelta(seconds=-1)
        )

        assert verify_token(token) is None

    def test_wrong_secret(self):
        token = jwt.encode(
            {"sub": "7", "tenant_id": 1, "type": "access"}, "other", algorithm="HS256"
        )

        assert verify_token(token) is None

    def test_missing_tenant_claim(self):
        token = create_access_token({"sub": 7})

        assert verify_token(token) is None

    def test_non_access_token(self):
        payload = _decode(create_access_token({"sub": 7, "tenant_id": 1}))
        payload["type"] = "refresh"
        token = jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)

        assert verify_token(token) is None

    def test_garbage(self):
        assert verify_token("not.a.token") is None


def test_current_user_permissions():
    user = CurrentUser(id=1, tenant_id=1, permissions=[Permission.STAFF_SALARY_READ.value])

    assert user.can(Permission.STAFF_SALARY_READ)
    assert not user.can(Permission.STAFF_SALARY_MANAGE)


@pytest.mark.parametrize(
    "headers",
    [{}, {"Authorization": "Bearer bad"}, {"Authorization": "Basic abc"}],
)
def test_protected_endpoint_rejects_bad_credentials(client, headers):
    response = client.get("/api/staff/members", headers=headers)

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"
