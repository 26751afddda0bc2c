"""Application configuration settings"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from cloud_agent_bridge.domain.exceptions import ConfigurationError

CURSOR_API_BASE_URL = "https://api.cursor.com"
DISCORD_API_BASE_URL = "https://discord.com/api/v10"

DEFAULT_LOG_FORMAT = (
    "%(asctime)s [%(levelname)s] [%(correlation_id)s] %(name)s: %(message)s"
)

_REQUIRED = (
    "DISCORD_PUBLIC_KEY",
    "DISCORD_APPLICATION_ID",
    "DISCORD_BOT_TOKEN",
    "CURSOR_API_TOKEN",
)
_REGISTRATION_REQUIRED = ("DISCORD_APPLICATION_ID", "DISCORD_BOT_TOKEN")


def _env_bool(env: Mapping[str, str], name: str, default: str = "false") -> bool:
    return env.get(name, default).lower() in {"1", "true", "yes", "on"}


def _check_required(env: Mapping[str, str], names: tuple[str, ...]) -> None:
    missing = [name for name in names if not env.get(name, "").strip()]
    if missing:
        raise ConfigurationError(
            f"Missing or invalid environment variables: {', '.join(missing)}"
        )


def _parse_numbers(env: Mapping[str, str], specs: dict) -> dict:
    """Convert numeric variables, reporting every malformed one together.

    ``specs`` maps a variable name to (converter, default text).
    """
    values, invalid = {}, []
    for name, (convert, default) in specs.items():
        raw = env.get(name, "").strip() or default
        try:
            values[name] = convert(raw)
        except ValueError:
            invalid.append(name)
    if invalid:
        raise ConfigurationError(
            f"Missing or invalid environment variables: {', '.join(invalid)}"
        )
    return values


@dataclass(frozen=True)
class Settings:
    # Discord
    discord_public_key: str
    discord_application_id: str
    discord_bot_token: str
    discord_api_base_url: str = DISCORD_API_BASE_URL

    # Cloud agent API
    cursor_api_token: str = ""
    cursor_api_base_url: str = CURSOR_API_BASE_URL
    cursor_api_max_retries: int = 3
    cursor_api_base_delay: float = 1.0  # seconds
    cursor_api_max_delay: float = 30.0  # seconds
    cursor_api_timeout: float = 30.0  # per-attempt transport timeout, seconds

    # Logging
    log_level: str = "INFO"
    log_path: Optional[str] = None
    log_format: str = DEFAULT_LOG_FORMAT

    debug: bool = False

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from environment variables.

        Raises:
            ConfigurationError: if any required variable is missing,
                or a numeric variable does not parse
        """
        env = os.environ if env is None else env
        _check_required(env, _REQUIRED)
        numbers = _parse_numbers(
            env,
            {
                "CURSOR_API_MAX_RETRIES": (int, "3"),
                "CURSOR_API_BASE_DELAY": (float, "1.0"),
                "CURSOR_API_MAX_DELAY": (float, "30.0"),
                "CURSOR_API_TIMEOUT": (float, "30.0"),
            },
        )

        return cls(
            discord_public_key=env["DISCORD_PUBLIC_KEY"].strip(),
            discord_application_id=env["DISCORD_APPLICATION_ID"].strip(),
            discord_bot_token=env["DISCORD_BOT_TOKEN"].strip(),
            discord_api_base_url=env.get("DISCORD_API_BASE_URL", DISCORD_API_BASE_URL),
            cursor_api_token=env["CURSOR_API_TOKEN"].strip(),
            cursor_api_base_url=env.get("CURSOR_API_BASE_URL", CURSOR_API_BASE_URL),
            cursor_api_max_retries=numbers["CURSOR_API_MAX_RETRIES"],
            cursor_api_base_delay=numbers["CURSOR_API_BASE_DELAY"],
            cursor_api_max_delay=numbers["CURSOR_API_MAX_DELAY"],
            cursor_api_timeout=numbers["CURSOR_API_TIMEOUT"],
            log_level=env.get("LOG_LEVEL", "INFO"),
            log_path=env.get("LOG_PATH") or None,
            log_format=env.get("LOG_FORMAT", DEFAULT_LOG_FORMAT),
            debug=_env_bool(env, "DEBUG"),
        )


@dataclass(frozen=True)
class RegistrationSettings:
    """Only what the command registration script needs."""

    discord_application_id: str
    discord_bot_token: str
    discord_api_base_url: str = DISCORD_API_BASE_URL

    @classmethod
    def from_env(
        cls, env: Optional[Mapping[str, str]] = None
    ) -> "RegistrationSettings":
        env = os.environ if env is None else env
        _check_required(env, _REGISTRATION_REQUIRED)
        return cls(
            discord_application_id=env["DISCORD_APPLICATION_ID"].strip(),
            discord_bot_token=env["DISCORD_BOT_TOKEN"].strip(),
            discord_api_base_url=env.get("DISCORD_API_BASE_URL", DISCORD_API_BASE_URL),
        )


def load_settings() -> Settings:
    """Load .env files then read settings once at startup."""
    load_dotenv(".env.local")
    load_dotenv()
    return Settings.from_env()


def load_registration_settings() -> RegistrationSettings:
    load_dotenv(".env.local")
    load_dotenv()
    return RegistrationSettings.from_env()
