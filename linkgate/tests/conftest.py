import pytest
from fastapi.testclient import TestClient

from linkgate.core import security
from linkgate.core.config import Settings
from linkgate.core.errors import SignerError
from linkgate.db.session import Database
from linkgate.main import create_app

ADMIN_PASSWORD = "Secret123!"
ADMIN_PASSWORD_HASH = security.hash_password(ADMIN_PASSWORD)


class FakeSigner:
    def __init__(self):
        self.calls = []
        self.fail = False

    def sign(self, bucket, object_key, ttl, filename=None):
        self.calls.append((bucket, object_key, ttl, filename))
        if self.fail:
            raise SignerError("provider unavailable")
        return f"https://{bucket}.storage.example.com/{object_key}?ttl={ttl}"


@pytest.fixture()
def settings(tmp_path):
    return Settings(
        _env_file=None,
        database_url=f"sqlite:///{tmp_path / 'links.db'}",
        jwt_secret="test-secret-that-is-long-enough-for-hs256",
        jwt_issuer="linkgate-test",
        admin_username="admin",
        admin_password_hash=ADMIN_PASSWORD_HASH,
        public_base_url="https://dl.example.com/",
        download_prefix="/download/",
        default_bucket="files",
        default_expiry_seconds=3600,
        signed_url_ttl_seconds=300,
    )


@pytest.fixture()
def database(settings):
    database = Database(settings.database_url).open()
    try:
        yield database
    finally:
        database.close()


@pytest.fixture()
def db(database):
    session = database.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def signer():
    return FakeSigner()


@pytest.fixture()
def client(settings, signer, database):
    app = create_app(settings, signer=signer, database=database)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def admin_headers(client):
    response = client.post("/auth/login", json={"username": "admin", "password": ADMIN_PASSWORD})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
