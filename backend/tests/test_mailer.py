import pytest

from contact_relay.core import mailer
from contact_relay.core.mailer import DeliveryError, SmtpTransport, deliver, get_transport, init_transport, relay_submission
from contact_relay.lib.submission import Submission

from conftest import FakeTransport


def _submission():
    return Submission(name="Ada", email="ada@example.com", message="hi")


def test_init_transport_uses_settings(monkeypatch):
    monkeypatch.setattr("contact_relay.core.mailer._transport", None)
    monkeypatch.setattr("contact_relay.core.settings.settings.smtp_host", "smtp.example.com")
    monkeypatch.setattr("contact_relay.core.settings.settings.smtp_port", 587)
    monkeypatch.setattr("contact_relay.core.settings.settings.smtp_use_ssl", False)

    transport = init_transport()

    assert transport.host == "smtp.example.com"
    assert transport.port == 587
    assert transport.use_ssl is False
    assert transport.configured
    assert get_transport() is transport


def test_get_transport_initializes_lazily(monkeypatch):
    monkeypatch.setattr("contact_relay.core.mailer._transport", None)

    transport = get_transport()

    assert isinstance(transport, SmtpTransport)
    assert get_transport() is transport


def test_unconfigured_transport_refuses_to_send():
    transport = SmtpTransport("smtp.invalid", 465, "user@example.com", None)

    assert not transport.configured
    with pytest.raises(DeliveryError):
        transport.send(None)


@pytest.mark.asyncio
async def test_deliver_wraps_transport_errors(monkeypatch):
    fake = FakeTransport(error=TimeoutError("timed out"))
    monkeypatch.setattr("contact_relay.core.mailer._transport", fake)

    with pytest.raises(DeliveryError) as exc_info:
        await deliver(object())

    assert "timed out" in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, TimeoutError)


@pytest.mark.asyncio
async def test_relay_submission_sends_to_recipient(monkeypatch):
    fake = FakeTransport()
    monkeypatch.setattr("contact_relay.core.mailer._transport", fake)
    monkeypatch.setattr("contact_relay.core.settings.settings.email_to", "owner@example.com")

    await relay_submission(_submission())

    assert [m["To"] for m in fake.sent] == ["owner@example.com"]


@pytest.mark.asyncio
async def test_relay_submission_requires_sender(monkeypatch):
    fake = FakeTransport()
    monkeypatch.setattr(mailer, "_transport", fake)
    monkeypatch.setattr("contact_relay.core.settings.settings.email_user", None)
    monkeypatch.setattr("contact_relay.core.settings.settings.email_to", None)

    with pytest.raises(DeliveryError):
        await relay_submission(_submission())

    assert fake.sent == []


@pytest.mark.asyncio
async def test_relay_submission_reports_unbuildable_message(monkeypatch):
    fake = FakeTransport()
    monkeypatch.setattr(mailer, "_transport", fake)
    broken = Submission.model_construct(name="Ada", email="ada@example.com", message="hi \ud800")

    with pytest.raises(DeliveryError) as exc_info:
        await relay_submission(broken)

    assert "could not build message" in str(exc_info.value)
    assert fake.sent == []
