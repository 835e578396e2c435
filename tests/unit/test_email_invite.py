"""Tests for the SMTP invitation mailer."""

import smtplib

import pytest

from travel_inbox.services.trips import email_invite
from travel_inbox.services.trips.email_invite import InvitationMailer, build_invite_message, generate_trip_link


class FakeSMTP:
    """Records what SMTP_SSL was asked to do; optionally fails on login."""

    instances = []

    def __init__(self, host, port, timeout=None, error=None):
        self.timeout = timeout
        self.error = error
        self.sent = []
        self.closed = False
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.closed = True
        return False

    def login(self, user, password):
        if self.error is not None:
            raise self.error

    def sendmail(self, sender, recipients, body):
        self.sent.append((sender, recipients, body))


@pytest.fixture
def fake_smtp(monkeypatch):
    FakeSMTP.instances = []

    def install(error=None):
        monkeypatch.setattr(
            email_invite.smtplib, "SMTP_SSL",
            lambda host, port, timeout=None: FakeSMTP(host, port, timeout, error),
        )
        return FakeSMTP.instances

    return install


class TestInvitationMailer:

    @pytest.mark.asyncio
    async def test_delivers_with_socket_timeout(self, fake_smtp):
        instances = fake_smtp()
        mailer = InvitationMailer(timeout=2.5)

        assert await mailer.send_invite("new@example.com", generate_trip_link(7), "Japan 2026") is True

        (smtp,) = instances
        assert smtp.timeout == 2.5
        assert smtp.closed
        (_, recipients, body) = smtp.sent[0]
        assert recipients == ["new@example.com"]
        assert "/trip/7" in body

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        TimeoutError("timed out"),
        ConnectionRefusedError("refused"),
        smtplib.SMTPAuthenticationError(535, b"bad credentials"),
    ])
    async def test_failure_returns_false_after_connection_closes(self, fake_smtp, error):
        instances = fake_smtp(error)
        mailer = InvitationMailer(timeout=1)

        assert await mailer.send_invite("new@example.com", generate_trip_link(7)) is False

        (smtp,) = instances
        assert smtp.closed
        assert smtp.sent == []


def test_message_carries_link_and_trip_name():
    message = build_invite_message("new@example.com", "https://app.example.com/trip/3", "Lisbon")

    assert message["To"] == "new@example.com"
    body = message.as_string()
    assert "https://app.example.com/trip/3" in body
    assert "Lisbon" in body
