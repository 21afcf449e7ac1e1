from datetime import timedelta

import pytest
from rest_framework_simplejwt.tokens import AccessToken

from taskflow.users.tokens import AuthError
from taskflow.users.tokens import TokenVerifier
from taskflow.users.tokens import issue_token


@pytest.fixture
def verifier():
    return TokenVerifier()


def test_verify_returns_subject(verifier):
    assert verifier.verify(issue_token("665f1c2a")) == "665f1c2a"


def test_integer_subject_returned_as_string(verifier):
    assert verifier.verify(issue_token(12)) == "12"


@pytest.mark.parametrize("token", [None, "", "   ", 123])
def test_missing_token(verifier, token):
    with pytest.raises(AuthError, match="No authentication token provided"):
        verifier.verify(token)


def test_malformed_token(verifier):
    with pytest.raises(AuthError, match="Invalid or expired token"):
        verifier.verify("definitely.not.ajwt")


def test_tampered_signature(verifier):
    header, payload, _ = issue_token("u1").split(".")
    forged = f"{header}.{payload}.{'A' * 43}"
    with pytest.raises(AuthError, match="Invalid or expired token"):
        verifier.verify(forged)


def test_expired_token(verifier):
    token = AccessToken()
    token["userId"] = "u1"
    token.set_exp(lifetime=-timedelta(seconds=1))
    with pytest.raises(AuthError, match="Invalid or expired token"):
        verifier.verify(str(token))


def test_token_without_subject(verifier):
    with pytest.raises(AuthError, match="no subject"):
        verifier.verify(str(AccessToken()))
