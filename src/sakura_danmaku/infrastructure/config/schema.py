"""Pydantic configuration models with validation."""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]


class DandanplayConfig(BaseModel):
    """Configuration for the dandanplay danmaku provider.

    The upstream service is slow; the timeout and retry defaults are
    the values the player has always shipped with.
    """

    base_url: str = Field(
        default="https://api.dandanplay.net",
        description="dandanplay API root (no trailing slash).",
    )
    app_id: Optional[str] = Field(
        default=None,
        description="dandanplay open-platform AppId (sent as X-AppId).",
    )
    app_secret: Optional[str] = Field(
        default=None,
        description="dandanplay open-platform AppSecret (sent as X-AppSecret).",
    )
    user_agent: str = Field(
        default="sakura-danmaku/0.1.0",
        description="User-Agent for outgoing requests.",
    )

    request_timeout_seconds: float = Field(
        default=30.0,
        description="Total time allowed for one request attempt (seconds).",
    )
    connect_timeout_seconds: float = Field(
        default=10.0,
        description="Connection establishment timeout (seconds).",
    )
    max_retries: int = Field(
        default=1,
        description="Automatic retries after a failed attempt.",
    )
    retry_delay_seconds: float = Field(
        default=2.0,
        description="Fixed delay before each retry (seconds).",
    )

    with_related: bool = Field(
        default=True,
        description="Include comments from related third-party sources.",
    )
    ch_convert: Literal[0, 1, 2] = Field(
        default=0,
        description="Chinese conversion: 0 none, 1 simplified, 2 traditional.",
    )

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("request_timeout_seconds", "connect_timeout_seconds")
    @classmethod
    def _validate_timeouts(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeouts must be > 0")
        return v

    @field_validator("max_retries")
    @classmethod
    def _validate_retries(cls, v: int) -> int:
        if v < 0:
            raise ValueError("max_retries must be >= 0")
        return v

    @field_validator("retry_delay_seconds")
    @classmethod
    def _validate_retry_delay(cls, v: float) -> float:
        if v < 0:
            raise ValueError("retry_delay_seconds must be >= 0")
        return v

    @model_validator(mode="after")
    def _connect_within_request(self) -> "DandanplayConfig":
        if self.connect_timeout_seconds > self.request_timeout_seconds:
            raise ValueError(
                "connect_timeout_seconds must not exceed request_timeout_seconds"
            )
        return self


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (logging/dandanplay).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    app_name: str = Field(default="sakura-danmaku", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    # dandanplay provider (YAML section: dandanplay.*)
    dandanplay: DandanplayConfig = Field(default_factory=DandanplayConfig)

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    Supported env var examples (flat, explicit):
    - SAKURA_DANMAKU_LOG_LEVEL
    - SAKURA_DANMAKU_DANDANPLAY_BASE_URL
    - SAKURA_DANMAKU_DANDANPLAY_APP_ID
    - SAKURA_DANMAKU_DANDANPLAY_REQUEST_TIMEOUT_SECONDS
    """

    model_config = SettingsConfigDict(
        env_prefix="SAKURA_DANMAKU_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    dandanplay_base_url: Optional[str] = None
    dandanplay_app_id: Optional[str] = None
    dandanplay_app_secret: Optional[str] = None
    dandanplay_user_agent: Optional[str] = None
    dandanplay_request_timeout_seconds: Optional[float] = None
    dandanplay_connect_timeout_seconds: Optional[float] = None
    dandanplay_max_retries: Optional[int] = None
    dandanplay_retry_delay_seconds: Optional[float] = None

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
