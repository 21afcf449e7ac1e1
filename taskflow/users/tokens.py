"""Bearer token verification shared by the HTTP API and the realtime gateway.

Both surfaces call :meth:`TokenVerifier.verify` and nothing else, so a token is
accepted or rejected identically whether it arrives in an ``Authorization``
header, a cookie, or a Socket.IO handshake.
"""

from __future__ import annotations

from typing import Any

from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken


class AuthError(Exception):
    """The credential is missing, malformed or expired."""


class TokenVerifier:
    token_class = AccessToken

    def verify(self, token: Any) -> str:
        """Return the subject user id carried by ``token``.

        Raises :class:`AuthError` if the token is absent, cannot be decoded,
        has an invalid signature, is expired, or carries no subject.
        """
        if not isinstance(token, str) or not token.strip():
            msg = "No authentication token provided"
            raise AuthError(msg)

        try:
            validated = self.token_class(token.strip())
        except TokenError as exc:
            msg = "Invalid or expired token"
            raise AuthError(msg) from exc

        user_id = validated.get(api_settings.USER_ID_CLAIM)
        if user_id is None or str(user_id) == "":
            msg = "Token has no subject"
            raise AuthError(msg)
        return str(user_id)


def issue_token(user_id: str | int) -> str:
    """Sign a fresh access token for ``user_id``."""

    token = AccessToken()
    token[api_settings.USER_ID_CLAIM] = str(user_id)
    return str(token)


default_verifier = TokenVerifier()
