"""SMS/WhatsApp renderer using Twilio API."""

import logging

from ..errors import RenderError
from .base import NotificationOptions, Renderer

logger = logging.getLogger(__name__)

# Twilio WhatsApp sandbox number
WHATSAPP_SANDBOX_NUMBER = "+14155238886"

MAX_TEXT_LEN = 1600
MAX_BODY_LEN = 140


class TwilioRenderer(Renderer):
    """
    Delivers notifications to a phone via SMS or WhatsApp.

    Used when the device has no display of its own; the tag is not sent,
    so suppression relies entirely on the coordinator.
    """

    def __init__(
        self,
        account_sid: str = "",
        auth_token: str = "",
        from_number: str = "",
        to_number: str = "",
        use_whatsapp: bool = False,
        client=None,
    ):
        """
        Initialize the Twilio renderer.

        Args:
            account_sid: Twilio Account SID.
            auth_token: Twilio Auth Token.
            from_number: Twilio phone number to send from (ignored for WhatsApp sandbox).
            to_number: Phone number to send to.
            use_whatsapp: Use WhatsApp instead of SMS.
            client: Preconfigured ``twilio.rest.Client``; built from the
                    credentials when omitted.
        """
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_number = from_number
        self.to_number = to_number
        self.use_whatsapp = use_whatsapp
        self._client = client

        if self._client is None and self._has_credentials():
            self._init_client()

    @property
    def name(self) -> str:
        return "TwilioRenderer"

    def _has_credentials(self) -> bool:
        """Check if all required credentials are present."""
        return bool(
            self.account_sid
            and self.auth_token
            and self.to_number
            and (self.from_number or self.use_whatsapp)
        )

    def _init_client(self) -> None:
        """Initialize the Twilio client."""
        try:
            from twilio.rest import Client

            self._client = Client(self.account_sid, self.auth_token)
            logger.info("Twilio client initialized")
        except ImportError:
            logger.error("twilio package not installed. Run: pip install twilio")
        except Exception as e:
            logger.error(f"Failed to initialize Twilio client: {e}")

    def is_available(self) -> bool:
        return self._client is not None and bool(self.to_number)

    @staticmethod
    def format_text(title: str, body: str) -> str:
        """Compose the message text, truncating long bodies."""
        if len(body) > MAX_BODY_LEN:
            body = body[:MAX_BODY_LEN] + "..."
        text = f"{title}: {body}"
        if len(text) > MAX_TEXT_LEN:
            text = text[: MAX_TEXT_LEN - 3] + "..."
        return text

    def show(self, title: str, options: NotificationOptions, surface: str = "unknown") -> None:
        if self._client is None:
            raise RenderError("Twilio client not initialized")

        if self.use_whatsapp:
            from_addr = f"whatsapp:{WHATSAPP_SANDBOX_NUMBER}"
            to_addr = f"whatsapp:{self.to_number}"
            msg_type = "WhatsApp"
        else:
            from_addr = self.from_number
            to_addr = self.to_number
            msg_type = "SMS"

        try:
            message = self._client.messages.create(
                body=self.format_text(title, options.body),
                from_=from_addr,
                to=to_addr,
            )
        except Exception as e:
            raise RenderError(f"Failed to send {msg_type}: {e}") from e

        logger.debug(f"{msg_type} sent for {options.tag}: {message.sid}")
