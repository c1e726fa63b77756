"""
Outbound SMS via Twilio.

The sender never raises: a missing configuration or any provider error is
logged and reported as ``False`` so callers can treat delivery as
best-effort.
"""

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Optional

from twilio.rest import Client

from rapidtransit.app.core.config import Settings

logger = logging.getLogger("rapidtransit.sms")

COUNTRY_CODE = "27"


@dataclass(frozen=True)
class SmsConfig:
    """Twilio credentials; any missing field means SMS is disabled."""
    account_sid: Optional[str] = None
    auth_token: Optional[str] = None
    from_number: Optional[str] = None

    @property
    def is_configured(self) -> bool:
        return bool(self.account_sid and self.auth_token and self.from_number)

    @classmethod
    def from_settings(cls, settings: Settings) -> "SmsConfig":
        return cls(
            account_sid=settings.twilio_account_sid,
            auth_token=settings.twilio_auth_token,
            from_number=settings.twilio_phone_number,
        )


def normalize_phone(phone: str) -> str:
    """
    Normalize a South African phone number to +27 international form.

    Non-digits are stripped; a leading 27 is kept, a leading trunk 0 is
    replaced, anything else gets +27 prepended.
    """
    digits = re.sub(r"\D", "", phone or "")
    if digits.startswith(COUNTRY_CODE):
        return f"+{digits}"
    if digits.startswith("0"):
        return f"+{COUNTRY_CODE}{digits[1:]}"
    return f"+{COUNTRY_CODE}{digits}"


class TextMessageSender:
    """Thin async wrapper over the Twilio messages API."""

    def __init__(self, config: SmsConfig, client: Optional[Client] = None):
        self.config = config
        self._client = client
        if self._client is None and config.is_configured:
            self._client = Client(config.account_sid, config.auth_token)

    @property
    def enabled(self) -> bool:
        return self._client is not None and self.config.is_configured

    async def send_text(self, to_phone: str, message: str) -> bool:
        """
        Send one SMS. Returns True on provider acceptance, False otherwise.
        """
        if not self.enabled:
            logger.warning("Twilio not configured - SMS notification skipped")
            return False

        formatted_phone = normalize_phone(to_phone)

        try:
            # The Twilio SDK is blocking; keep it off the event loop
            result = await asyncio.to_thread(
                self._client.messages.create,
                body=message,
                from_=self.config.from_number,
                to=formatted_phone,
            )
        except Exception:
            logger.exception("Error sending SMS to %s", formatted_phone)
            return False

        logger.info("SMS sent successfully to %s (sid=%s)", formatted_phone, getattr(result, "sid", None))
        return True
