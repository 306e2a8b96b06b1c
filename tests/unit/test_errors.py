"""Unit tests for the typed error hierarchy and JWT handling."""

import uuid
from datetime import timedelta

import pytest

from cms.kernel.errors import (
    CoreError,
    ForbiddenError,
    IllegalTransitionError,
    InvalidStatusError,
    NotFoundError,
    StorageError,
    UnauthenticatedError,
    ValidationError,
)
from cms.kernel.identity.jwt import JWTManager


class TestErrorMapping:
    @pytest.mark.parametrize(
        "error_cls,status,code",
        [
            (UnauthenticatedError, 401, "unauthenticated"),
            (ForbiddenError, 403, "forbidden"),
            (InvalidStatusError, 400, "invalid_status"),
            (IllegalTransitionError, 409, "illegal_transition"),
            (ValidationError, 400, "validation_error"),
            (StorageError, 500, "storage_error"),
        ],
    )
    def test_status_and_code(self, error_cls, status, code):
        err = error_cls("diagnostic detail")
        assert isinstance(err, CoreError)
        assert err.http_status == status
        assert err.to_payload()["code"] == code

    def test_diagnostic_message_not_in_payload(self):
        err = StorageError("connection refused on 10.0.0.5")
        assert "10.0.0.5" not in err.to_payload()["error"]
        assert str(err) == "connection refused on 10.0.0.5"

    def test_validation_message_is_returned(self):
        err = ValidationError("Unknown settings category: misc")
        assert err.to_payload() == {"error": "Unknown settings category: misc", "code": "validation_error"}

    def test_not_found_names_the_kind(self):
        err = NotFoundError("blog_post", uuid.uuid4())
        assert err.http_status == 404
        assert err.to_payload()["error"] == "Blog post not found"

    def test_default_message(self):
        assert UnauthenticatedError().message == "Unauthorized"


class TestJWTManager:
    def test_round_trip(self, jwt_manager: JWTManager):
        user_id = uuid.uuid4()
        token, expires_at, jti = jwt_manager.create_access_token(user_id, "a@example.com", "editor")
        payload = jwt_manager.verify_access_token(token)
        assert payload is not None
        assert payload.sub == str(user_id)
        assert payload.role == "editor"
        assert payload.jti == jti

    def test_expired_token_rejected(self, jwt_manager: JWTManager):
        token, _, _ = jwt_manager.create_access_token(
            uuid.uuid4(), "a@example.com", "editor", expires_delta=timedelta(seconds=-5)
        )
        assert jwt_manager.verify_access_token(token) is None

    def test_wrong_secret_rejected(self, jwt_manager: JWTManager):
        token, _, _ = jwt_manager.create_access_token(uuid.uuid4(), "a@example.com", "admin")
        other = JWTManager(secret_key="a-different-secret", algorithm="HS256", access_token_expire_minutes=5)
        assert other.verify_access_token(token) is None

    def test_garbage_rejected(self, jwt_manager: JWTManager):
        assert jwt_manager.verify_access_token("not-a-token") is None
