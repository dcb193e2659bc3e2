import pytest
from fastapi.testclient import TestClient

from arkham_oracle.config import OracleConfig
from arkham_oracle.keys import OracleIdentity
from arkham_oracle.server import create_app

FIXED_NOW = 1_700_000_000


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self._text = text

    def json(self):
        if self._text is not None:
            raise ValueError(f"not JSON: {self._text!r}")
        return self._payload


class FakeSession:
    """requests.Session stand-in: records every GET, answers with a canned response."""

    def __init__(self, response=None, exc=None):
        self.response = response or FakeResponse()
        self.exc = exc
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": dict(params or {}), "timeout": timeout})
        if self.exc is not None:
            raise self.exc
        return self.response


class FakePriceSource:
    def __init__(self, prices=None, exc=None):
        self.prices = prices or {}
        self.exc = exc
        self.calls = []

    def get_usd_price(self, token):
        self.calls.append(token)
        if self.exc is not None:
            raise self.exc
        return self.prices[token]


@pytest.fixture(scope="session")
def identity():
    return OracleIdentity.generate()


@pytest.fixture
def price_source():
    return FakePriceSource({"solana": 150.25, "bitcoin": 43250.67})


@pytest.fixture
def app_client(identity, price_source):
    app = create_app(OracleConfig(), identity=identity, price_source=price_source)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def gated_client(identity, price_source):
    config = OracleConfig(trusted_client_keys=("k1",))
    app = create_app(config, identity=identity, price_source=price_source)
    with TestClient(app) as client:
        yield client
