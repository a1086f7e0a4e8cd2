"""Typed configuration for django-boxoffice.

Reads a single ``BOXOFFICE`` dict from Django settings and exposes it as
composed, frozen dataclasses with sensible defaults.

Usage::

    from django_boxoffice.settings import get_config

    config = get_config()
    config.commit_retries
    config.sms.api_key
    config.currency
"""

import functools
from collections.abc import Mapping
from dataclasses import dataclass, field

from django.conf import settings
from django.test.signals import setting_changed


@dataclass(frozen=True, slots=True)
class SMSConfig:
    """SMS provider configuration (Briq-compatible HTTP API)."""

    enabled: bool = True
    api_url: str = "https://karibu.briq.tz/v1/message/send-instant"
    api_key: str | None = None
    sender_id: str = "BRIQ"
    country_code: str = "255"
    timeout: float = 10.0


@dataclass(frozen=True, slots=True)
class BoxOfficeConfig:
    """Top-level django-boxoffice configuration."""

    sms: SMSConfig = field(default_factory=SMSConfig)
    commit_retries: int = 3
    pending_ticket_expiry_minutes: int = 30
    ticket_code_length: int = 8
    booking_reference_prefix: str = "BKG"
    currency: str = "TZS"


@functools.lru_cache(maxsize=1)
def get_config() -> BoxOfficeConfig:
    """Build and return the box office configuration.

    Reads ``settings.BOXOFFICE`` (a plain dict) and returns a frozen
    :class:`BoxOfficeConfig`.  The result is cached; the cache is cleared
    automatically when Django's ``setting_changed`` signal fires (e.g. inside
    ``override_settings``).
    """
    raw = getattr(settings, "BOXOFFICE", {})
    if not isinstance(raw, Mapping):
        msg = "BOXOFFICE must be a mapping (dict-like object)"
        raise TypeError(msg)
    raw_data = dict(raw)

    sms_data = raw_data.pop("sms", {})
    if not isinstance(sms_data, Mapping):
        msg = "BOXOFFICE['sms'] must be a mapping (dict-like object)"
        raise TypeError(msg)

    config = BoxOfficeConfig(sms=SMSConfig(**dict(sms_data)), **raw_data)
    _validate_boxoffice_config(config)
    return config


def _validate_boxoffice_config(config: BoxOfficeConfig) -> None:
    """Validate high-impact configuration values with clear error messages."""
    for name in ("commit_retries", "pending_ticket_expiry_minutes", "ticket_code_length"):
        value = getattr(config, name)
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            msg = f"BOXOFFICE['{name}'] must be a positive integer"
            raise ValueError(msg)
    if not isinstance(config.currency, str) or not config.currency.strip():
        msg = "BOXOFFICE['currency'] must be a non-empty string"
        raise ValueError(msg)
    if not isinstance(config.booking_reference_prefix, str) or not config.booking_reference_prefix.strip():
        msg = "BOXOFFICE['booking_reference_prefix'] must be a non-empty string"
        raise ValueError(msg)
    if not isinstance(config.sms.enabled, bool):
        msg = "BOXOFFICE['sms']['enabled'] must be a boolean"
        raise TypeError(msg)
    if not isinstance(config.sms.timeout, (int, float)) or config.sms.timeout <= 0:
        msg = "BOXOFFICE['sms']['timeout'] must be a positive number"
        raise ValueError(msg)


def _clear_config_cache(*, setting: str, **kwargs: object) -> None:  # noqa: ARG001
    """Clear the cached config when Django settings change during tests."""
    if setting == "BOXOFFICE":
        get_config.cache_clear()


setting_changed.connect(_clear_config_cache, dispatch_uid="django_boxoffice.settings.clear_config_cache")
