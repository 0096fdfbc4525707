# tests/test_mailer.py

import datetime
import pytest
from ai import gemini
from core.models import Budget, TripPreferences
from services import mailer


@pytest.fixture
def itin():
    prefs = TripPreferences("Kochi", 2, Budget(1000, 8000), start_date=datetime.date(2024, 6, 1))
    return gemini.generate_mock_itinerary(prefs)


def test_missing_smtp_settings(monkeypatch, itin):
    for var in ("SMTP_HOST", "SMTP_PORT", "SMTP_USER", "SMTP_PASS"):
        monkeypatch.delenv(var, raising=False)
    with pytest.raises(RuntimeError):
        mailer.send_itinerary_email("a@example.com", itin)


def test_message_lists_every_day(monkeypatch, itin):
    monkeypatch.setenv("EMAIL_FROM", "planner@example.com")
    msg = mailer.build_itinerary_message("a@example.com", itin, gsheet_url="https://docs.google.com/x")
    body = msg.get_content()
    assert msg["To"] == "a@example.com"
    assert msg["From"] == "planner@example.com"
    assert "Day 1 (2024-06-01)" in body
    assert "Day 2 (2024-06-02)" in body
    assert "https://docs.google.com/x" in body


def test_send_uses_starttls(monkeypatch, itin, tmp_path):
    sent = {}

    class FakeSMTP:
        def __init__(self, host, port):
            sent["addr"] = (host, port)

        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return False

        def starttls(self):
            sent["tls"] = True

        def login(self, user, password):
            sent["login"] = user

        def send_message(self, msg):
            sent["msg"] = msg

    monkeypatch.setenv("SMTP_HOST", "smtp.example.com")
    monkeypatch.setenv("SMTP_PORT", "587")
    monkeypatch.setenv("SMTP_USER", "user")
    monkeypatch.setenv("SMTP_PASS", "pass")
    monkeypatch.setattr(mailer.smtplib, "SMTP", FakeSMTP)

    attachment = tmp_path / "trip.xlsx"
    attachment.write_bytes(b"data")
    mailer.send_itinerary_email("a@example.com", itin, attachment_path=str(attachment))

    assert sent["addr"] == ("smtp.example.com", 587)
    assert sent["tls"] is True
    assert sent["login"] == "user"
    names = [p.get_filename() for p in sent["msg"].iter_attachments()]
    assert names == ["trip.xlsx"]
