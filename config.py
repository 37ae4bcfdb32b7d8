"""
Application configuration via pydantic-settings.

All settings are loaded from environment variables (and .env file).

The reCAPTCHA section is optional at the AppSettings level: it is only
populated when RECAPTCHA_API_URL is present. A missing section is not
papered over with defaults; the validator reports it as a ConfigurationError
when a protected request arrives.
"""

from __future__ import annotations

import os
from typing import Any, Mapping, Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Keys used by the "ReCaptchaSettings" configuration section
_SECTION_KEYS = {
    "ApiURL": "api_url",
    "IsActive": "is_active",
    "IsUseScore": "is_use_score",
    "MinimumScore": "minimum_score",
    "SecretKey": "secret_key",
}


class ReCaptchaSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="RECAPTCHA_", env_file=".env", extra="ignore", frozen=True
    )

    api_url: str
    is_active: bool
    is_use_score: bool = False
    minimum_score: float = Field(default=0.0, ge=0.0, le=1.0)
    secret_key: str

    @classmethod
    def from_section(cls, section: Mapping[str, Any]) -> "ReCaptchaSettings":
        """Bind a ``ReCaptchaSettings`` section keyed by its PascalCase names.

        Snake-case keys are accepted as well; unknown keys are ignored.
        """
        values = {}
        for key, value in section.items():
            name = _SECTION_KEYS.get(key, key)
            if name in cls.model_fields:
                values[name] = value
        return cls(**values)


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    log_level: str = "INFO"
    log_format: str = "console"  # "json" in production


class SentrySettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    sentry_dsn: str = ""
    sentry_send_pii: bool = False
    sentry_traces_sample_rate: float = 0.1


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    env: str = "development"
    app_name: str = "recaptcha-validator"

    # OpenAPI docs URL (None disables the docs UI in production)
    docs_url: Optional[str] = "/docs"

    # Sub-configs (composed via model_validator below)
    recaptcha: Optional[ReCaptchaSettings] = None
    logging: Optional[LoggingSettings] = None
    sentry: Optional[SentrySettings] = None

    @model_validator(mode="after")
    def _populate_sub_configs(self) -> "AppSettings":
        # reCAPTCHA is only bound when the deployment configures it
        if self.recaptcha is None and os.getenv("RECAPTCHA_API_URL"):
            self.recaptcha = ReCaptchaSettings()
        if self.logging is None:
            self.logging = LoggingSettings()
        if self.sentry is None:
            self.sentry = SentrySettings()

        return self

    @property
    def is_production(self) -> bool:
        return self.env == "production"
