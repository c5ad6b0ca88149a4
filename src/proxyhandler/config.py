"""
=============================================================================
DISPATCHER SETTINGS
=============================================================================

Process-level settings for the dispatcher itself.

=============================================================================
TWO KINDS OF CONFIGURATION
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   DispatcherSettings (this module)                                  │
    │   ───────────────────────────────                                   │
    │   How the dispatcher behaves: CORS support, logging.                │
    │   Built once per process, usually from the environment.             │
    │                                                                      │
    │   Business configuration (opaque)                                   │
    │   ───────────────────────────────                                   │
    │   What the handlers need: table names, clients, feature flags.      │
    │   Built per INVOCATION by the configuration factory you pass to     │
    │   the dispatcher, from (request, context). The dispatcher never     │
    │   looks inside it; it only hands it to handler factories.           │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
ENVIRONMENT VARIABLES
=============================================================================

    PROXY_CORS_SUPPORT   Answer CORS preflight requests   (default: false)
    PROXY_LOG_LEVEL      DEBUG, INFO, WARNING, ERROR      (default: INFO)
    PROXY_LOG_FORMAT     Access log format: text or json  (default: text)
    PROXY_ACCESS_LOG     Emit access log lines            (default: true)

=============================================================================
"""

import logging
import os
from dataclasses import dataclass


_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("text", "json")


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw!r}")


@dataclass
class DispatcherSettings:
    """
    Settings for a ProxyDispatcher.

    Development:
        DispatcherSettings(cors_support=True, log_level="DEBUG")

    Production (from the function's environment):
        DispatcherSettings.from_env()
    """

    cors_support: bool = False
    """
    Answer OPTIONS requests with the CORS preflight protocol.
    When off, OPTIONS is dispatched like any other method.
    """

    log_level: str = "INFO"
    """Logging level for the proxyhandler loggers."""

    log_format: str = "text"
    """Access log format: 'text' or 'json'."""

    access_log: bool = True
    """Emit one access log line per dispatch."""

    @classmethod
    def from_env(cls) -> "DispatcherSettings":
        """
        Create settings from environment variables.

        Raises:
            ValueError: If a flag variable is not a recognizable boolean.
        """
        return cls(
            cors_support=_env_flag("PROXY_CORS_SUPPORT", False),
            log_level=os.getenv("PROXY_LOG_LEVEL", "INFO"),
            log_format=os.getenv("PROXY_LOG_FORMAT", "text"),
            access_log=_env_flag("PROXY_ACCESS_LOG", True),
        )

    def validate(self) -> None:
        """
        Validate settings.

        Raises:
            ValueError: On an unknown log level or log format.
        """
        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(
                f"Invalid log_level: {self.log_level}. Must be one of {', '.join(LOG_LEVELS)}."
            )

        if self.log_format not in LOG_FORMATS:
            raise ValueError(
                f"Invalid log_format: {self.log_format}. Must be 'text' or 'json'."
            )

    @property
    def level(self) -> int:
        """The log level as a logging constant."""
        return getattr(logging, self.log_level.upper(), logging.INFO)


def configure_logging(settings: DispatcherSettings) -> None:
    """
    Configure logging for a function process.

    Installs a root handler (a no-op if the host already installed one)
    and sets the proxyhandler logger level.
    """
    logging.basicConfig(
        level=settings.level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("proxyhandler").setLevel(settings.level)
