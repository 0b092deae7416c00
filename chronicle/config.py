"""Runtime settings for chronicle."""

import logging
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings

LogLevel = Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]


class ChronicleSettings(BaseSettings):
    """Settings for repositories and logging.

    All settings can be configured via environment variables with the
    CHRONICLE_ prefix. For example:
    - CHRONICLE_LOG_LEVEL=DEBUG
    - CHRONICLE_UNKNOWN_EVENTS=raise

    Attributes:
        log_level: Level applied to the ``chronicle`` logger by
            `configure_logging`. Case-insensitive; unknown names fail
            validation when the settings are built.
        unknown_events: What replay does with an event payload the aggregate
            has no applier for. "ignore" skips it, "raise" fails the load
            with UnknownEventError.

    Example:
        >>> settings = ChronicleSettings(unknown_events="raise")
        >>> repository = AggregateRepository(BankAccount, store, settings)
    """

    log_level: LogLevel = "INFO"
    unknown_events: Literal["ignore", "raise"] = "ignore"

    model_config = {"env_prefix": "CHRONICLE_"}

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value

    @property
    def strict_replay(self) -> bool:
        return self.unknown_events == "raise"


def configure_logging(settings: ChronicleSettings | None = None) -> None:
    """Apply the configured level to the package logger."""
    settings = settings or ChronicleSettings()
    logging.getLogger("chronicle").setLevel(getattr(logging, settings.log_level))
