"""Localizer bot configuration settings."""

from pathlib import Path
from typing import Annotated, Any, List, Optional, Union
import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_LOCALES_DIR = str(Path(__file__).resolve().parents[1] / "locales")


def _parse_string_list(v: Any, setting_name: str) -> Any:
    """Parse a list setting given as a JSON array or a comma-separated string.

    Values may arrive wrapped in an extra layer of single or double quotes
    when they come from parameter stores, so those are stripped first.
    """
    if not isinstance(v, str):
        return v

    s = v.strip()
    if (s.startswith("'") and s.endswith("'")) or (
        s.startswith('"') and s.endswith('"')
    ):
        s = s[1:-1]

    if not s:
        return []

    if s.startswith("["):
        try:
            return json.loads(s)
        except (json.JSONDecodeError, ValueError) as e:
            raise ValueError(
                f"Invalid {setting_name} JSON: {e} (value: {s[:80]}...)"
            ) from e

    return [part.strip() for part in s.split(",") if part.strip()]


class LocalizerSettings(BaseSettings):
    """Localizer configuration settings.

    Environment variables:
        LOCALIZER_LANGUAGES: Language files to load, relative to the directory
            (JSON array or comma-separated, e.g. "en-US.yml,fr-FR.yml").
        LOCALIZER_SOURCE_LANGUAGE: Tag of the ground-truth language.
        LOCALIZER_DEFAULT_LANGUAGE: Tag used when no preference is given.
        LOCALIZER_DIRECTORY: Base directory of the language files.
        LOCALIZER_DISABLE_COVERAGE_LOG: "true"/"false" to silence coverage
            diagnostics globally, or a list of tags to silence selectively.
        LOCALIZER_EXTEND_OVERRIDE: Whether extensions may overwrite keys.
    """

    LANGUAGES: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["en-US.yml", "fr-FR.yml"],
        alias="LOCALIZER_LANGUAGES",
    )
    SOURCE_LANGUAGE: Optional[str] = Field(
        default="en-US", alias="LOCALIZER_SOURCE_LANGUAGE"
    )
    DEFAULT_LANGUAGE: Optional[str] = Field(
        default=None, alias="LOCALIZER_DEFAULT_LANGUAGE"
    )
    DIRECTORY: str = Field(default=DEFAULT_LOCALES_DIR, alias="LOCALIZER_DIRECTORY")
    DISABLE_COVERAGE_LOG: Annotated[Union[bool, List[str]], NoDecode] = Field(
        default=False, alias="LOCALIZER_DISABLE_COVERAGE_LOG"
    )
    EXTEND_OVERRIDE: bool = Field(default=False, alias="LOCALIZER_EXTEND_OVERRIDE")

    @field_validator("LANGUAGES", mode="before")
    @classmethod
    def _parse_languages(cls, v: Optional[Any]) -> Any:
        if v is None:
            return []
        return _parse_string_list(v, "LOCALIZER_LANGUAGES")

    @field_validator("DISABLE_COVERAGE_LOG", mode="before")
    @classmethod
    def _parse_disable_coverage_log(cls, v: Optional[Any]) -> Any:
        """Accept booleans, boolean-like strings and tag lists."""
        if v is None:
            return False
        if isinstance(v, str) and v.strip().lower() in ("true", "false", "1", "0"):
            return v.strip().lower() in ("true", "1")
        return _parse_string_list(v, "LOCALIZER_DISABLE_COVERAGE_LOG")

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    def to_options(self, strict: bool = True):
        """Build validated engine options from these settings.

        Args:
            strict: Whether extending an unknown language should raise.

        Returns:
            LocalizerOptions instance.

        Raises:
            ConfigurationError: If the settings do not form valid options.
        """
        # Imported lazily: the i18n package logs through core.logging,
        # which itself depends on this module.
        from infrastructure.i18n.options import LocalizerOptions

        return LocalizerOptions.build(
            languages=self.LANGUAGES,
            source_language=self.SOURCE_LANGUAGE,
            default_language=self.DEFAULT_LANGUAGE,
            directory=self.DIRECTORY,
            disable_coverage_log=self.DISABLE_COVERAGE_LOG,
            extend_override=self.EXTEND_OVERRIDE,
            strict=strict,
        )


class Settings(BaseSettings):
    """Localizer bot configuration settings."""

    PREFIX: str = ""
    LOG_LEVEL: str = "INFO"
    GIT_SHA: str = "Unknown"

    # Localization settings
    localizer: LocalizerSettings

    @property
    def is_production(self) -> bool:
        """Check if the application is running in production."""
        return not bool(self.PREFIX)

    def __init__(self, **kwargs):
        settings_map = {
            "localizer": LocalizerSettings,
        }

        for setting_name, setting_class in settings_map.items():
            if setting_name not in kwargs:
                kwargs[setting_name] = setting_class()

        super().__init__(**kwargs)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


# Create the settings instance
settings = Settings()
