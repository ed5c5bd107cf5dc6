"""
Tests for bearer token authentication.
"""
import time
import uuid

import pytest

from conftest import make_token
from core.auth import decode_user_id
from core.exceptions import AuthenticationError


class TestDecodeUserId:
    """Token verification without the HTTP layer."""

    def test_valid_token_returns_subject(self):
        user_id = str(uuid.uuid4())
        assert decode_user_id(make_token(user_id)) == user_id

    def test_wrong_secret_is_rejected(self):
        token = make_token(str(uuid.uuid4()), secret="another-secret-that-is-long-enough-123")
        with pytest.raises(AuthenticationError) as exc_info:
            decode_user_id(token)
        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Token inválido"

    def test_expired_token_is_rejected(self):
        token = make_token(str(uuid.uuid4()), exp=int(time.time()) - 60)
        with pytest.raises(AuthenticationError):
            decode_user_id(token)

    def test_token_without_subject_is_rejected(self):
        from jose import jwt
        from core.config import JWT_ALGORITHM, JWT_SECRET

        token = jwt.encode({"name": "Ana"}, JWT_SECRET, algorithm=JWT_ALGORITHM)
        with pytest.raises(AuthenticationError):
            decode_user_id(token)


class TestAuthentication:
    """Authentication through the real endpoints."""

    def test_missing_token_returns_401(self, anonymous_client, user_a):
        response = anonymous_client.get(f"/user-surgeries/user/{user_a['id']}")
        assert response.status_code == 401
        assert response.json() == {"message": "Token não informado"}

    def test_non_bearer_scheme_is_treated_as_missing(self, anonymous_client, user_a):
        response = anonymous_client.get(
            f"/exams/{user_a['id']}",
            headers={"Authorization": "Basic dXNlcjpwYXNz"}
        )
        assert response.status_code == 401
        assert response.json() == {"message": "Token não informado"}

    def test_invalid_token_returns_401(self, anonymous_client, user_a):
        response = anonymous_client.get(
            f"/exams/{user_a['id']}",
            headers={"Authorization": "Bearer abc.def.ghi"}
        )
        assert response.status_code == 401
        assert response.json() == {"message": "Token inválido"}

    def test_valid_token_allows_access(self, client, user_a):
        response = client.get(f"/exams/{user_a['id']}")
        assert response.status_code == 200

    def test_authentication_runs_before_validation(self, anonymous_client):
        response = anonymous_client.request("DELETE", "/user-surgeries", json=[])
        assert response.status_code == 401

    def test_health_endpoints_need_no_token(self, anonymous_client):
        assert anonymous_client.get("/health").status_code == 200
        assert anonymous_client.get("/ready").status_code == 200
