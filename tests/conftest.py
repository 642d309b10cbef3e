"""Shared fixtures: a throwaway service account key on disk."""

import json
from types import SimpleNamespace
from urllib.parse import parse_qs

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from google.auth import jwt

from config import new_service_config

CLIENT_EMAIL = "svc@proj.iam.gserviceaccount.com"
PROJECT_ID = "proj-123"
DELEGATED_USER = "admin@example.com"
CUSTOMER_ID = "C03ygpcl8"


@pytest.fixture(scope="session")
def private_key_pem() -> str:
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("utf-8")


@pytest.fixture
def service_account_info(private_key_pem) -> dict:
    return {
        "type": "service_account",
        "project_id": PROJECT_ID,
        "private_key_id": "0123456789abcdef",
        "private_key": private_key_pem,
        "client_email": CLIENT_EMAIL,
        "client_id": "112233445566778899",
        "auth_uri": "https://accounts.google.com/o/oauth2/auth",
        "token_uri": "https://oauth2.googleapis.com/token",
    }


@pytest.fixture
def key_file(tmp_path, service_account_info):
    path = tmp_path / "key.json"
    path.write_text(json.dumps(service_account_info))
    return path


@pytest.fixture
def service_config(key_file):
    return new_service_config(str(key_file), DELEGATED_USER, CUSTOMER_ID)


class FakeTokenEndpoint:
    """google.auth transport request that answers the JWT bearer grant."""

    def __init__(self, status=200, payload=None):
        self.status = status
        self.payload = payload or {"access_token": "ya29.test-token", "expires_in": 3600}
        self.calls = []

    def __call__(self, url, method="GET", body=None, headers=None, **kwargs):
        self.calls.append({"url": url, "method": method, "body": body})
        return SimpleNamespace(
            status=self.status,
            data=json.dumps(self.payload).encode("utf-8"),
            headers={},
        )

    def assertion_claims(self) -> dict:
        body = self.calls[-1]["body"]
        if isinstance(body, bytes):
            body = body.decode("utf-8")
        assertion = parse_qs(body)["assertion"][0]
        return jwt.decode(assertion, verify=False)


@pytest.fixture
def token_endpoint():
    return FakeTokenEndpoint()
