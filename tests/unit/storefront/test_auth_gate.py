"""Unit tests for the sign-in and admin checks."""

from unittest.mock import MagicMock

import pytest
from bson.errors import InvalidId

from storefront.core.auth import AuthGate, extract_token
from storefront.core.exceptions import GateRejection
from storefront.core.security import Identity

USER_ID = "64b7f0c2a1b2c3d4e5f60718"


def _request(authorization=None):
    request = MagicMock()
    request.headers = {"Authorization": authorization} if authorization is not None else {}
    request.state = MagicMock(spec=[])
    return request


@pytest.fixture
def gate(signer, user_repo, logger) -> AuthGate:
    return AuthGate(signer, user_repo, logger)


class TestExtractToken:
    def test_raw_token(self):
        assert extract_token("abc.def.ghi") == "abc.def.ghi"

    def test_bearer_token(self):
        assert extract_token("Bearer abc.def.ghi") == "abc.def.ghi"
        assert extract_token("bearer abc.def.ghi") == "abc.def.ghi"

    def test_missing_header(self):
        assert extract_token(None) is None
        assert extract_token("") is None


class TestAuthenticate:
    def test_valid_token_returns_identity(self, gate, signer):
        identity = gate.authenticate(signer.create_access_token(USER_ID))

        assert identity.user_id == USER_ID

    def test_invalid_token_returns_none_and_logs(self, gate, logger):
        assert gate.authenticate("not-a-token") is None
        logger.warning.assert_called_once()
        assert logger.warning.call_args.args[0] == "Token verification failed"

    def test_missing_token_returns_none(self, gate, logger):
        assert gate.authenticate(None) is None
        logger.warning.assert_called_once()


class TestRequireSignIn:
    @pytest.mark.asyncio
    async def test_attaches_identity_to_request(self, gate, signer):
        request = _request(f"Bearer {signer.create_access_token(USER_ID)}")

        identity = await gate.require_sign_in(request)

        assert identity.user_id == USER_ID
        assert request.state.user is identity

    @pytest.mark.asyncio
    async def test_rejects_missing_header(self, gate):
        with pytest.raises(GateRejection) as exc:
            await gate.require_sign_in(_request())

        assert exc.value.status_code == 401
        assert exc.value.message == "Sign in required"


class TestAuthorizeAdmin:
    """Admin check: 401 with distinct messages for non-admins and failed lookups."""

    @pytest.mark.asyncio
    async def test_admin_passes(self, gate, user_repo):
        user_repo.find_by_id.return_value = {"_id": USER_ID, "role": 1}

        await gate.authorize_admin(Identity(_id=USER_ID, iat=0, exp=0))

        user_repo.find_by_id.assert_awaited_once_with(USER_ID)

    @pytest.mark.asyncio
    async def test_customer_is_rejected(self, gate, user_repo):
        user_repo.find_by_id.return_value = {"_id": USER_ID, "role": 0}

        with pytest.raises(GateRejection) as exc:
            await gate.authorize_admin(Identity(_id=USER_ID, iat=0, exp=0))

        assert exc.value.status_code == 401
        assert exc.value.message == "UnAuthorized Access"
        assert exc.value.error is None

    @pytest.mark.asyncio
    async def test_unknown_role_value_is_rejected(self, gate, user_repo):
        user_repo.find_by_id.return_value = {"_id": USER_ID, "role": 2}

        with pytest.raises(GateRejection) as exc:
            await gate.authorize_admin(Identity(_id=USER_ID, iat=0, exp=0))

        assert exc.value.message == "UnAuthorized Access"

    @pytest.mark.asyncio
    async def test_lookup_failure_is_reported(self, gate, user_repo, logger):
        user_repo.find_by_id.side_effect = InvalidId("'bad' is not a valid ObjectId")

        with pytest.raises(GateRejection) as exc:
            await gate.authorize_admin(Identity(_id="bad", iat=0, exp=0))

        assert exc.value.status_code == 401
        assert exc.value.message == "Error in admin middleware"
        assert "not a valid ObjectId" in exc.value.error
        logger.error.assert_called_once()

    @pytest.mark.asyncio
    async def test_missing_user_is_a_lookup_failure(self, gate, user_repo):
        user_repo.find_by_id.return_value = None

        with pytest.raises(GateRejection) as exc:
            await gate.authorize_admin(Identity(_id=USER_ID, iat=0, exp=0))

        assert exc.value.message == "Error in admin middleware"
        assert USER_ID in exc.value.error

    @pytest.mark.asyncio
    async def test_require_admin_reuses_identity_from_sign_in(self, gate, signer, user_repo):
        user_repo.find_by_id.return_value = {"_id": USER_ID, "role": 1}
        request = _request(signer.create_access_token(USER_ID))
        await gate.require_sign_in(request)

        identity = await gate.require_admin(request)

        assert identity.user_id == USER_ID
