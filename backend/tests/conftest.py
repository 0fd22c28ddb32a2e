import os

import pytest

os.environ.setdefault("EMAIL_USER", "relay@example.com")
os.environ.setdefault("EMAIL_PASS", "app-password")
os.environ.setdefault("APP_ENV", "production")
os.environ.setdefault("CORS_ORIGINS", "https://portfolio.example.com,http://localhost:3000")

from contact_relay.core.rate_limit import limiter


class FakeTransport:
    configured = True

    def __init__(self, error=None):
        self.error = error
        self.sent = []

    def send(self, msg):
        if self.error is not None:
            raise self.error
        self.sent.append(msg)


@pytest.fixture(autouse=True)
def reset_limiter():
    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture
def transport(monkeypatch):
    fake = FakeTransport()
    monkeypatch.setattr("contact_relay.core.mailer._transport", fake)
    return fake
