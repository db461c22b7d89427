import pytest
from fastapi.testclient import TestClient

from credential_platform.credential_platform.credential_service.auth import PasswordHasher, TokenIssuer
from credential_platform.credential_platform.credential_service.config import Settings
from credential_platform.credential_platform.credential_service.db import UserStore
from credential_platform.credential_platform.credential_service.main import create_app
from credential_platform.credential_platform.credential_service.service import CredentialService

TEST_SECRET = "test-secret-key-with-at-least-32-bytes"


@pytest.fixture
def settings():
    return Settings(JWT_SECRET=TEST_SECRET, DATABASE_URL="sqlite://")


@pytest.fixture
def store():
    user_store = UserStore("sqlite://")
    user_store.connect()
    yield user_store
    user_store.close()


@pytest.fixture
def tokens():
    return TokenIssuer(TEST_SECRET)


@pytest.fixture
def service(store, tokens):
    return CredentialService(store=store, hasher=PasswordHasher(), tokens=tokens)


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c
