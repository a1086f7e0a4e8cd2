"""HTTP client for the SMS provider.

Talks to a Briq-compatible ``send-instant`` endpoint: a JSON body of
``{content, recipients, sender_id}`` authenticated with an ``X-API-Key``
header. Delivery is best-effort, so :meth:`SMSClient.send` reports every
provider or network problem through :class:`SMSResult` instead of raising.
"""

import logging
import re
from dataclasses import dataclass

import httpx

from django_boxoffice.settings import SMSConfig, get_config

logger = logging.getLogger(__name__)

_SEPARATORS_RE = re.compile(r"[\s\-().]")


@dataclass(frozen=True, slots=True)
class SMSResult:
    """Outcome of one send attempt."""

    success: bool
    recipient: str
    provider_message_id: str = ""
    error: str = ""


class SMSClient:
    """Send SMS messages through the configured provider.

    Args:
        config: SMS settings. Defaults to ``get_config().sms``.
    """

    def __init__(self, config: SMSConfig | None = None) -> None:
        """Initialize the client with explicit or project-level settings."""
        self._config = config or get_config().sms

    def normalize_phone(self, phone: str) -> str:
        """Return *phone* in international format without a leading ``+``.

        Separators are dropped and a local number starting with ``0`` gets the
        configured country code in place of the ``0``, so ``0712 345 678``
        becomes ``255712345678``.
        """
        phone = _SEPARATORS_RE.sub("", phone)
        if phone.startswith("+"):
            return phone[1:]
        if phone.startswith("0"):
            return f"{self._config.country_code}{phone[1:]}"
        return phone

    def send(self, phone: str, message: str) -> SMSResult:
        """Deliver *message* to *phone*.

        Args:
            phone: Local or international phone number.
            message: The text to send.

        Returns:
            An :class:`SMSResult`. ``success`` is ``False`` when SMS is
            disabled or unconfigured, or when the provider or network fails.
        """
        recipient = self.normalize_phone(phone)
        if not self._config.enabled:
            return SMSResult(success=False, recipient=recipient, error="SMS delivery is disabled")
        if not self._config.api_key:
            logger.warning("SMS API key is not configured; not sending to %s", recipient)
            return SMSResult(success=False, recipient=recipient, error="SMS API key is not configured")

        payload = {
            "content": message,
            "recipients": [recipient],
            "sender_id": self._config.sender_id,
        }
        headers = {"X-API-Key": self._config.api_key}
        try:
            response = httpx.post(self._config.api_url, json=payload, headers=headers, timeout=self._config.timeout)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            error = _provider_error(exc.response)
            logger.warning("SMS to %s rejected (%s): %s", recipient, exc.response.status_code, error)
            return SMSResult(success=False, recipient=recipient, error=error)
        except httpx.HTTPError as exc:
            logger.warning("SMS to %s failed: %s", recipient, exc)
            return SMSResult(success=False, recipient=recipient, error=str(exc))

        data = _json_or_empty(response)
        message_id = str(data.get("message_id") or data.get("id") or "")
        logger.info("SMS sent to %s (message id %s)", recipient, message_id or "unknown")
        return SMSResult(success=True, recipient=recipient, provider_message_id=message_id)


def _json_or_empty(response: httpx.Response) -> dict[str, object]:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def _provider_error(response: httpx.Response) -> str:
    data = _json_or_empty(response)
    message = data.get("message") or data.get("error")
    if message:
        return str(message)
    return f"Provider returned HTTP {response.status_code}"
