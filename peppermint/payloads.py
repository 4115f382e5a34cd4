"""Push payloads sent when something happens in the tracker."""

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

MAX_PREVIEW_LEN = 100


def _data_payload(title: str, body: str, link: str, **extra: Any) -> Dict[str, Any]:
    # Data-only: a "notification" section would be displayed by the
    # platform before any surface could suppress it.
    data = {"title": title, "body": body, "link": link}
    data.update({k: str(v) for k, v in extra.items() if v is not None})
    return {"data": data}


def preview(text: str, limit: int = MAX_PREVIEW_LEN) -> str:
    """Truncate a message for display, marking the cut with an ellipsis."""
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def build_chat_message_payload(
    sender_name: Optional[str],
    message: Optional[str],
    message_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Payload announcing a new chat message."""
    sender = sender_name or "Someone"
    return _data_payload(
        f"{sender} sent a message",
        preview(message or "New message"),
        "/chat",
        message_id=message_id,
    )


def build_photo_upload_payload(
    uploader_name: Optional[str],
    caption: Optional[str],
    photo_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Payload announcing a new photo or video of the penguin."""
    uploader = uploader_name or "Someone"
    return _data_payload(
        f"New photo from {uploader}!",
        caption or "Check out the latest Peppermint sighting!",
        "/",
        photo_id=photo_id,
    )


def build_test_payload(
    title: Optional[str] = None,
    body: Optional[str] = None,
    timestamp: Optional[str] = None,
) -> Dict[str, Any]:
    """Payload for checking that a device receives notifications."""
    if not body:
        body = f"Test sent at {timestamp or datetime.now().strftime('%H:%M:%S')}"
    return _data_payload(title or "🧪 Test Notification", body, "/fcm-test")


def select_recipients(
    subscriptions: Iterable[Dict[str, Any]],
    exclude_user: Optional[str] = None,
) -> List[str]:
    """
    Pick the push tokens to notify.

    Args:
        subscriptions: Rows with ``token`` and ``user_name``.
        exclude_user: User whose own devices are skipped (the sender).

    Returns:
        Tokens, in input order, without duplicates.
    """
    tokens: List[str] = []
    seen = set()
    for row in subscriptions:
        token = row.get("token")
        if not token or token in seen:
            continue
        if exclude_user is not None and row.get("user_name") == exclude_user:
            continue
        seen.add(token)
        tokens.append(token)

    logger.debug(f"Selected {len(tokens)} recipient token(s)")
    return tokens
