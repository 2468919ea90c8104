"""Authentication gate for Storefront.

Two checks guard protected routes:

- :meth:`AuthGate.require_sign_in` verifies the token in the ``Authorization`` header and attaches
  the decoded identity to ``request.state.user``.
- :meth:`AuthGate.require_admin` resolves that identity's user record and only lets admins through.

Both are plain FastAPI dependencies, so a route opts in with
``dependencies=[Depends(gate.require_sign_in), Depends(gate.require_admin)]``.
"""

from typing import Optional

import jwt
from fastapi import Request, status
from pydantic import ValidationError

from .constants import ADMIN_CHECK_FAILED, ADMIN_ROLE, SIGN_IN_REQUIRED, UNAUTHORIZED_ACCESS
from .exceptions import DocumentNotFoundError, GateRejection
from .security import Identity, TokenSigner


def extract_token(header: Optional[str]) -> Optional[str]:
    """Return the token from an ``Authorization`` header, with or without the Bearer scheme."""
    if not header:
        return None
    scheme, _, credentials = header.partition(" ")
    if credentials and scheme.lower() == "bearer":
        return credentials.strip() or None
    return header.strip() or None


class AuthGate:
    def __init__(self, signer: TokenSigner, user_repo, logger):
        self.signer = signer
        self.user_repo = user_repo
        self.logger = logger

    def authenticate(self, token: Optional[str]) -> Optional[Identity]:
        """Verify ``token`` and return its identity, or None after logging why it was refused."""
        try:
            if not token:
                raise jwt.InvalidTokenError("Authorization header is missing")
            return self.signer.decode_token(token)
        except (jwt.InvalidTokenError, ValidationError) as e:
            self.logger.warning("Token verification failed", error=str(e))
            return None

    async def authorize_admin(self, identity: Identity) -> None:
        """Let the request continue only when the identity's user has the admin role.

        Raises:
            GateRejection: 401 "UnAuthorized Access" for non-admins, or 401
                "Error in admin middleware" when the user record cannot be resolved.
        """
        try:
            user = await self.user_repo.find_by_id(identity.user_id)
            if user is None:
                raise DocumentNotFoundError(f"User with id '{identity.user_id}' not found")
        except Exception as e:
            self.logger.error("Admin lookup failed", user_id=identity.user_id, exc_info=True)
            raise GateRejection(
                status_code=status.HTTP_401_UNAUTHORIZED,
                message=ADMIN_CHECK_FAILED,
                error=str(e),
            ) from e

        if user.get("role") != ADMIN_ROLE:
            raise GateRejection(status_code=status.HTTP_401_UNAUTHORIZED, message=UNAUTHORIZED_ACCESS)

    # -------------------------------------------------------------------------
    # FastAPI dependencies
    # -------------------------------------------------------------------------

    async def require_sign_in(self, request: Request) -> Identity:
        """FastAPI dependency ensuring the request carries a valid token."""
        identity = self.authenticate(extract_token(request.headers.get("Authorization")))
        if identity is None:
            raise GateRejection(status_code=status.HTTP_401_UNAUTHORIZED, message=SIGN_IN_REQUIRED)
        request.state.user = identity
        return identity

    async def require_admin(self, request: Request) -> Identity:
        """FastAPI dependency ensuring the signed-in user is an admin.

        Must be declared after :meth:`require_sign_in`.
        """
        identity = getattr(request.state, "user", None)
        if identity is None:
            identity = await self.require_sign_in(request)
        await self.authorize_admin(identity)
        return identity
