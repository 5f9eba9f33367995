import os

# must be set before paybridge reads its settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RAZORPAY_KEY_SECRET"] = "rzp_secret"
os.environ["RAZORPAY_WEBHOOK_SECRET"] = "rzp_webhook_secret"

import pytest
from fastapi.testclient import TestClient

from paybridge import models
from paybridge.config import GatewayConfig, get_gateway_config
from paybridge.database import SessionLocal
from paybridge.gateway import LgPayClient
from paybridge.main import app
from paybridge.routers.payment import get_gateway_client

SECRET = "secret"


class FakeResponse:
    def __init__(self, status_code=200, json_body=None, text=""):
        self.status_code = status_code
        self._json = json_body
        self.text = text

    def json(self):
        if self._json is None:
            raise ValueError("No JSON object could be decoded")
        return self._json


class FakeSession:
    """Stands in for requests.Session; records posts and replays a canned answer."""

    def __init__(self, response=None, exc=None):
        self.response = response or FakeResponse(json_body={"status": 1, "data": {"pay_url": "https://pay.example/abc"}})
        self.exc = exc
        self.calls = []

    def post(self, url, data=None, headers=None, timeout=None):
        self.calls.append({"url": url, "data": data, "headers": headers, "timeout": timeout})
        if self.exc is not None:
            raise self.exc
        return self.response


@pytest.fixture
def config():
    return GatewayConfig(
        merchant_id="1001",
        secret_key=SECRET,
        trade_type="INRUPI",
        notify_url="https://merchant.example/api/webhook",
    )


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.query(models.PaymentOrder).delete()
    session.commit()
    session.close()


@pytest.fixture
def client(config, fake_session, db):
    app.dependency_overrides[get_gateway_config] = lambda: config
    app.dependency_overrides[get_gateway_client] = lambda: LgPayClient(config, session=fake_session)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
