import pytest
from rest_framework import status
from rest_framework.test import APIClient

from taskflow.realtime.socketio import gateway
from taskflow.users.tokens import issue_token

PRESENCE_URL = "/api/v1/realtime/presence/"


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def online_user():
    gateway.presence.set("u-online", "sid-online")
    yield "u-online"
    gateway.presence.delete_if_matches("u-online", "sid-online")


def test_bearer_header(api_client, online_user):
    api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {issue_token('u1')}")
    response = api_client.get(PRESENCE_URL)
    assert response.status_code == status.HTTP_200_OK
    assert online_user in response.data["online"]
    assert response.data["count"] == len(response.data["online"])


def test_token_cookie(api_client):
    api_client.cookies["token"] = issue_token("u1")
    response = api_client.get(PRESENCE_URL)
    assert response.status_code == status.HTTP_200_OK


def test_no_credentials(api_client):
    response = api_client.get(PRESENCE_URL)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_invalid_token(api_client):
    api_client.credentials(HTTP_AUTHORIZATION="Bearer not-a-jwt")
    response = api_client.get(PRESENCE_URL)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.data["detail"] == "Invalid or expired token"


def test_malformed_header(api_client):
    api_client.credentials(HTTP_AUTHORIZATION="Bearer")
    response = api_client.get(PRESENCE_URL)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
