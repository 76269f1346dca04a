"""Special pytest fixture configuration file.

This file automatically provides all fixtures defined in it to all
pytest tests in this directory and sub directories.

See https://docs.pytest.org/en/6.2.x/fixture.html#conftest-py-sharing-fixtures-across-multiple-files
"""
import pytest

from fastapi.testclient import TestClient

from family_tree.db import Database
from family_tree.domain import VerifiedIdentity
from family_tree.main import create_app

PROJECT_ID = "family-tree-test"

EMAIL = "alice@example.com"


def firebase_claims(email=EMAIL, name="Alice Liddell", picture="https://example.com/alice.png",
                    sub="google-sub-alice", project_id=PROJECT_ID):
    """Claims like those of a verified Firebase ID token"""
    claims = {
        "iss": f"https://securetoken.google.com/{project_id}",
        "aud": project_id,
        "sub": sub,
        "email": email,
        "name": name,
        "picture": picture,
    }
    return {key: value for key, value in claims.items() if value is not None}


@pytest.fixture
def make_claims():
    return firebase_claims


@pytest.fixture
def secret():
    return "testing-secret-at-least-32-bytes-long"


@pytest.fixture
def project_id():
    return PROJECT_ID


@pytest.fixture
def database(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'pytest.db'}")
    db.create_tables()
    yield db
    db.dispose()


@pytest.fixture
def unconfigured_database():
    return Database(None)


@pytest.fixture
def identity():
    return VerifiedIdentity(
        email=EMAIL,
        name="Alice Liddell",
        avatar_url="https://example.com/alice.png",
        provider_subject_id="google-sub-alice",
    )


@pytest.fixture
def app(database, secret, project_id):
    return create_app(database=database, jwt_secret=secret,
                      firebase_project_id=project_id, configure_logging=False)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def mock_google(mocker):
    """Patches the call out to Google, set ``return_value`` or ``side_effect``."""
    return mocker.patch("family_tree.identity.verify_token",
                        return_value=firebase_claims())
