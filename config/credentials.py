"""
Startup credentials for the watchdog.

Values are taken from the environment (or .env) first. Anything missing or
malformed is asked for on the terminal until it passes validation.
"""
import logging
import re
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import config.config as cfg

logger = logging.getLogger(__name__)

CHANNELS = ("whatsapp", "telegram")

_PHONE_RE = re.compile(r"^\+[1-9]\d{1,14}$")
_AUTH_TOKEN_RE = re.compile(r"^[a-zA-Z0-9]{32}$")
_CHAT_ID_RE = re.compile(r"^-?\d+$")
_BOT_TOKEN_RE = re.compile(r"^\d+:[A-Za-z0-9_-]{30,}$")


class ConfigurationError(ValueError):
    """Raised when a startup value is missing or malformed."""


def is_valid_whatsapp_number(number: str) -> bool:
    """International format: '+' followed by country code and number (E.164)."""
    return bool(_PHONE_RE.match(number or ""))


def is_valid_account_sid(sid: str) -> bool:
    # Twilio account SIDs start with "AC" and are 34 characters long
    return bool(sid) and sid.startswith("AC") and len(sid) == 34


def is_valid_auth_token(token: str) -> bool:
    return bool(_AUTH_TOKEN_RE.match(token or ""))


def is_valid_chat_id(chat_id: str) -> bool:
    return bool(_CHAT_ID_RE.match(chat_id or ""))


def is_valid_bot_token(token: str) -> bool:
    return bool(_BOT_TOKEN_RE.match(token or ""))


@dataclass(frozen=True)
class WatchdogSettings:
    """Immutable runtime settings shared by the poll loop and inbound handlers."""
    channel: str
    recipient: str
    auth_token: str
    account_sid: Optional[str] = None
    sender: Optional[str] = None
    services: Tuple[str, ...] = ()
    check_interval_seconds: int = 300
    cooldown_seconds: int = 600
    host: str = "0.0.0.0"
    port: int = 8080
    status_keyword: str = "status"
    probe_timeout_seconds: int = 10

    def __post_init__(self):
        if self.channel not in CHANNELS:
            raise ConfigurationError(f"channel must be one of {CHANNELS}, got '{self.channel}'")
        if not self.services:
            raise ConfigurationError("at least one watched service is required")
        if self.check_interval_seconds <= 0:
            raise ConfigurationError("check interval must be greater than zero")
        if self.cooldown_seconds <= self.check_interval_seconds:
            raise ConfigurationError(
                f"alert cool-down ({self.cooldown_seconds}s) must be greater than "
                f"the check interval ({self.check_interval_seconds}s)"
            )


def prompt_until_valid(
    prompt: str,
    validator: Callable[[str], bool],
    error_message: str,
    input_func: Callable[[str], str] = input,
    output_func: Callable[[str], None] = print,
) -> str:
    """Ask for a value until the validator accepts it."""
    while True:
        value = input_func(prompt).strip()
        if validator(value):
            return value
        output_func(f"❌ {error_message}")


def _resolve(
    current: Optional[str],
    label: str,
    prompt: str,
    validator: Callable[[str], bool],
    error_message: str,
    interactive: bool,
    input_func: Callable[[str], str],
    output_func: Callable[[str], None],
) -> str:
    if current is not None and validator(current.strip()):
        return current.strip()

    if not interactive:
        raise ConfigurationError(f"{label}: {error_message}")

    if current:
        logger.warning("Configured %s is invalid, asking on the terminal", label)
    return prompt_until_valid(prompt, validator, error_message, input_func, output_func)


def load_settings(
    interactive: bool = True,
    input_func: Callable[[str], str] = input,
    output_func: Callable[[str], None] = print,
    port: Optional[int] = None,
) -> WatchdogSettings:
    """Build WatchdogSettings from config.config, prompting for bad credentials."""
    channel = cfg.MESSAGING_CHANNEL
    if channel not in CHANNELS:
        raise ConfigurationError(f"MESSAGING_CHANNEL must be one of {CHANNELS}, got '{channel}'")

    common = dict(
        services=tuple(cfg.WATCHED_SERVICES),
        check_interval_seconds=cfg.CHECK_INTERVAL_SECONDS,
        cooldown_seconds=cfg.ALERT_COOLDOWN_SECONDS,
        host=cfg.WEBHOOK_HOST,
        port=port if port is not None else cfg.WEBHOOK_PORT,
        status_keyword=cfg.STATUS_KEYWORD,
        probe_timeout_seconds=cfg.PROBE_TIMEOUT_SECONDS,
    )

    if channel == "telegram":
        recipient = _resolve(
            cfg.TELEGRAM_CHAT_ID, "TELEGRAM_CHAT_ID",
            "Telegram chat id for alerts: ",
            is_valid_chat_id,
            "The chat id must be numeric (e.g. 123456789).",
            interactive, input_func, output_func,
        )
        token = _resolve(
            cfg.TELEGRAM_BOT_TOKEN, "TELEGRAM_BOT_TOKEN",
            "Telegram bot token: ",
            is_valid_bot_token,
            "The bot token must look like '<bot id>:<secret>'.",
            interactive, input_func, output_func,
        )
        settings = WatchdogSettings(channel=channel, recipient=recipient, auth_token=token, **common)
    else:
        recipient = _resolve(
            cfg.ALERT_RECIPIENT, "ALERT_RECIPIENT",
            "WhatsApp number for alerts (e.g. +554799024829): ",
            is_valid_whatsapp_number,
            "The WhatsApp number must be in international format, starting with '+'. Example: +554799024829",
            interactive, input_func, output_func,
        )
        sid = _resolve(
            cfg.TWILIO_ACCOUNT_SID, "TWILIO_ACCOUNT_SID",
            "Twilio account SID: ",
            is_valid_account_sid,
            "The Twilio SID must start with 'AC' and be 34 characters long.",
            interactive, input_func, output_func,
        )
        token = _resolve(
            cfg.TWILIO_AUTH_TOKEN, "TWILIO_AUTH_TOKEN",
            "Twilio auth token: ",
            is_valid_auth_token,
            "The auth token must be 32 alphanumeric characters.",
            interactive, input_func, output_func,
        )
        settings = WatchdogSettings(
            channel=channel,
            recipient=recipient,
            account_sid=sid,
            auth_token=token,
            sender=cfg.TWILIO_WHATSAPP_FROM,
            **common,
        )

    logger.info("Configuration loaded: channel=%s, services=%s", settings.channel, ", ".join(settings.services))
    return settings
