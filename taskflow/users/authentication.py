from __future__ import annotations

from dataclasses import dataclass

from django.conf import settings
from rest_framework import exceptions
from rest_framework.authentication import BaseAuthentication
from rest_framework.authentication import get_authorization_header

from taskflow.users.tokens import AuthError
from taskflow.users.tokens import default_verifier


@dataclass(frozen=True)
class TokenSubject:
    """Request user resolved from a bearer token, without a database lookup."""

    id: str

    is_authenticated = True
    is_anonymous = False

    @property
    def pk(self) -> str:
        return self.id

    def __str__(self) -> str:
        return self.id


class BearerTokenAuthentication(BaseAuthentication):
    """Authenticate with ``Authorization: Bearer <token>`` or the token cookie.

    The header wins when both are present. Verification is delegated to the
    same verifier the Socket.IO handshake uses.
    """

    keyword = "Bearer"
    verifier = default_verifier

    def authenticate(self, request):
        token = self._get_raw_token(request)
        if token is None:
            return None
        try:
            user_id = self.verifier.verify(token)
        except AuthError as exc:
            raise exceptions.AuthenticationFailed(str(exc)) from exc
        return TokenSubject(id=user_id), token

    def authenticate_header(self, request) -> str:
        return self.keyword

    def _get_raw_token(self, request) -> str | None:
        auth = get_authorization_header(request).split()
        if auth and auth[0].lower() == self.keyword.lower().encode():
            if len(auth) != 2:  # noqa: PLR2004
                msg = "Invalid Authorization header."
                raise exceptions.AuthenticationFailed(msg)
            return auth[1].decode(errors="ignore")

        cookie_name = getattr(settings, "JWT_AUTH_COOKIE", "token")
        cookie = request.COOKIES.get(cookie_name)
        if cookie:
            return cookie
        return None
