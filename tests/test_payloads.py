"""Tests for outgoing payload builders."""

from peppermint.core.event import NotificationEvent
from peppermint.payloads import (
    build_chat_message_payload,
    build_photo_upload_payload,
    build_test_payload,
    preview,
    select_recipients,
)


def test_chat_message_payload():
    payload = build_chat_message_payload("Alice", "Peppermint is at the park", message_id=7)
    assert payload == {
        "data": {
            "title": "Alice sent a message",
            "body": "Peppermint is at the park",
            "link": "/chat",
            "message_id": "7",
        }
    }


def test_chat_message_defaults_and_truncation():
    payload = build_chat_message_payload(None, "x" * 150)
    assert payload["data"]["title"] == "Someone sent a message"
    assert payload["data"]["body"] == "x" * 100 + "..."
    assert build_chat_message_payload("A", "")["data"]["body"] == "New message"


def test_preview_keeps_short_text():
    assert preview("x" * 100) == "x" * 100


def test_photo_upload_payload():
    payload = build_photo_upload_payload("Bob", None)
    assert payload["data"]["title"] == "New photo from Bob!"
    assert payload["data"]["body"] == "Check out the latest Peppermint sighting!"
    assert payload["data"]["link"] == "/"
    assert "photo_id" not in payload["data"]


def test_test_payload():
    payload = build_test_payload(timestamp="10:15:00")
    assert payload["data"]["title"] == "🧪 Test Notification"
    assert payload["data"]["body"] == "Test sent at 10:15:00"
    assert payload["data"]["link"] == "/fcm-test"


def test_payloads_are_data_only():
    for payload in (
        build_chat_message_payload("A", "b"),
        build_photo_upload_payload("A", "b"),
        build_test_payload(),
    ):
        assert "notification" not in payload
        assert not NotificationEvent.from_payload(payload).has_platform_notification


def test_select_recipients_excludes_sender():
    rows = [
        {"token": "t1", "user_name": "Alice"},
        {"token": "t2", "user_name": "Bob"},
        {"token": "t2", "user_name": "Bob"},
        {"token": "", "user_name": "Carol"},
        {"token": "t3", "user_name": "Alice"},
        {"token": "t4", "user_name": "Dan"},
    ]
    assert select_recipients(rows, exclude_user="Alice") == ["t2", "t4"]
    assert select_recipients(rows) == ["t1", "t2", "t3", "t4"]
