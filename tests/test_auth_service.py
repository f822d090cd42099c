"""
Unit tests for AuthService
"""

import threading
from unittest.mock import MagicMock

import pytest

from app.models.task import AuthUser
from app.services.auth_service import AuthService, require_auth
from app.utils.errors import AuthError
from tests.conftest import OWNER_ID, VALID_TOKEN, make_supabase_client


def _auth_response(with_session=True):
    user = MagicMock(id=OWNER_ID, email="owner@example.com")
    session = MagicMock(access_token="access", refresh_token="refresh", expires_at=1700000000, user=user)
    return MagicMock(user=user, session=session if with_session else None)


class TestRequireAuth:
    def test_missing_user_raises(self):
        with pytest.raises(AuthError) as exc:
            require_auth(None)
        assert exc.value.message == "Unauthorized"

    def test_user_passes_through(self):
        user = AuthUser(id=OWNER_ID)
        assert require_auth(user) is user


class TestSignUp:
    @pytest.mark.asyncio
    async def test_returns_session(self):
        client = MagicMock()
        client.auth.sign_up.return_value = _auth_response()

        session = await AuthService(client).sign_up("owner@example.com", "password123")

        client.auth.sign_up.assert_called_once_with({
            "email": "owner@example.com",
            "password": "password123"
        })
        assert session.access_token == "access"
        assert session.user.id == OWNER_ID

    @pytest.mark.asyncio
    async def test_confirmation_required_returns_none(self):
        client = MagicMock()
        client.auth.sign_up.return_value = _auth_response(with_session=False)

        assert await AuthService(client).sign_up("owner@example.com", "password123") is None

    @pytest.mark.asyncio
    async def test_rejection_raises_auth_error(self):
        client = MagicMock()
        client.auth.sign_up.side_effect = Exception("User already registered")

        with pytest.raises(AuthError) as exc:
            await AuthService(client).sign_up("owner@example.com", "password123")
        assert exc.value.message == "User already registered"


class TestSignIn:
    @pytest.mark.asyncio
    async def test_returns_session(self):
        client = MagicMock()
        client.auth.sign_in_with_password.return_value = _auth_response()

        session = await AuthService(client).sign_in("owner@example.com", "password123")

        assert session.refresh_token == "refresh"
        assert session.to_dict()["user"] == {"id": OWNER_ID, "email": "owner@example.com"}

    @pytest.mark.asyncio
    async def test_bad_credentials_raise(self):
        client = MagicMock()
        client.auth.sign_in_with_password.side_effect = Exception("Invalid login credentials")

        with pytest.raises(AuthError) as exc:
            await AuthService(client).sign_in("owner@example.com", "wrong-password")
        assert exc.value.message == "Invalid login credentials"


class TestSessionResolution:
    @pytest.mark.asyncio
    async def test_valid_token_resolves_user(self):
        user = await AuthService(make_supabase_client()).get_user(VALID_TOKEN)
        assert user == AuthUser(id=OWNER_ID, email="owner@example.com")

    @pytest.mark.asyncio
    async def test_invalid_or_missing_token_is_anonymous(self):
        service = AuthService(make_supabase_client())
        assert await service.get_user("expired") is None
        assert await service.get_user(None) is None

    @pytest.mark.asyncio
    async def test_refresh_failure_returns_none(self):
        assert await AuthService(make_supabase_client()).refresh("stale") is None

    @pytest.mark.asyncio
    async def test_refresh_returns_new_session(self):
        client = MagicMock()
        client.auth.refresh_session.return_value = _auth_response()

        session = await AuthService(client).refresh("refresh")

        client.auth.refresh_session.assert_called_once_with("refresh")
        assert session.access_token == "access"

    @pytest.mark.asyncio
    async def test_sign_out_reports_outcome(self):
        client = MagicMock()
        assert await AuthService(client).sign_out("access") is True
        client.auth.admin.sign_out.assert_called_once_with("access")

        client.auth.admin.sign_out.side_effect = Exception("network")
        assert await AuthService(client).sign_out("access") is False

    @pytest.mark.asyncio
    async def test_auth_calls_run_off_the_event_loop_thread(self):
        threads = []
        client = MagicMock()

        def get_user(token):
            threads.append(threading.get_ident())
            raise Exception("invalid JWT")

        client.auth.get_user.side_effect = get_user

        assert await AuthService(client).get_user("token") is None
        assert threads and threading.get_ident() not in threads
