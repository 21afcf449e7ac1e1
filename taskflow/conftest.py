import pytest

from taskflow.users.tokens import issue_token


@pytest.fixture
def token_for():
    return issue_token
