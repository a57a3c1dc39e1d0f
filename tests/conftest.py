"""Pytest shared fixtures for Xero client tests."""
import json
import pathlib
import secrets
import sys
import uuid
from typing import Optional

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives import serialization


# ─────────────────────────────────────────────────────────────────────────────
# Network Guard Rails
# ─────────────────────────────────────────────────────────────────────────────
class FakeAdapter(BaseAdapter):
    """Transport adapter that replays queued responses and records requests.

    Any request made after the queue runs dry fails the test, so a test that
    queues nothing asserts that no request is sent at all.
    """

    def __init__(self, responses=None):
        super().__init__()
        self.queue = list(responses or [])
        self.requests = []

    def add(self, status: int = 200, body="", headers: Optional[dict] = None):
        self.queue.append((status, body, headers))
        return self

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        self.requests.append(request)
        if not self.queue:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        status, body, headers = self.queue.pop(0)

        if isinstance(body, (dict, list)):
            body = json.dumps(body)
            headers = {"Content-Type": "application/json", **(headers or {})}

        response = requests.Response()
        response.status_code = status
        response.reason = "OK" if status < 400 else "Error"
        response.headers = CaseInsensitiveDict(headers or {})
        response._content = body.encode("utf-8") if isinstance(body, str) else body
        response.encoding = "utf-8"
        response.url = request.url
        response.request = request
        return response

    def close(self):
        pass


@pytest.fixture
def adapter():
    return FakeAdapter()


@pytest.fixture(autouse=True)
def block_real_network(monkeypatch):
    """Fail fast if a test reaches the default HTTP adapter."""
    def fail_send(self, request, *args, **kwargs):
        raise AssertionError(f"Real network access attempted: {request.method} {request.url}")

    monkeypatch.setattr(requests.adapters.HTTPAdapter, "send", fail_send)


# ─────────────────────────────────────────────────────────────────────────────
# Credentials
# ─────────────────────────────────────────────────────────────────────────────
def random_string(length: int = 30) -> str:
    return secrets.token_urlsafe(length)[:length]


def random_guid() -> str:
    return str(uuid.uuid4())


@pytest.fixture(scope="session")
def rsa_private_pem() -> str:
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")


@pytest.fixture
def private_key_file(tmp_path, rsa_private_pem) -> pathlib.Path:
    path = tmp_path / "privatekey.pem"
    path.write_text(rsa_private_pem)
    return path


@pytest.fixture
def make_config(private_key_file):
    """Build a client configuration like a real integration would."""
    def _make(api: str = "accounting", application: str = "private", **overrides):
        base_uri = "https://api.xero.com/payroll.xro/1.0/"
        if api == "accounting":
            base_uri = "https://api.xero.com/api.xro/2.0/"

        config = {
            "base_uri": base_uri,
            "consumer_key": random_string(),
            "consumer_secret": random_string(),
            "application": application,
        }
        if application == "private":
            config["private_key"] = str(private_key_file)
        else:
            config["token"] = random_string()
            config["token_secret"] = random_string()
            config["verifier"] = random_string()
        config.update(overrides)
        return config

    return _make
