"""Localizer options.

Typed, validated replacement for the loosely shaped options object the
engine is constructed with. Validation runs once and reports every
violation at the same time through a single ConfigurationError.
"""

from typing import Any, List, Mapping, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    ValidationError,
    field_validator,
    model_validator,
)

from core.logging import get_module_logger
from infrastructure.i18n.exceptions import ConfigurationError
from infrastructure.i18n.loader import StringsParser

logger = get_module_logger()

_LANGUAGE_REQUIRED = "either source_language or default_language must be specified"


class LocalizerOptions(BaseModel):
    """Configuration of a LocalizationEngine.

    Attributes:
        languages: Language file identifiers, relative to directory. The file
            name without extension becomes the language tag.
        source_language: Tag whose key set is the ground truth for coverage.
        default_language: Tag used when no preference is supplied.
        directory: Base path the language identifiers are resolved against.
        disable_coverage_log: True/False to silence coverage diagnostics for
            every language, or a list of tags to silence only those.
        extend_override: Whether extensions may overwrite existing keys that
            are not reserved by the engine.
        strict: Whether extending an unregistered language raises
            UnknownLanguageError (True) or logs a warning and skips (False).
        parsers_preset: Additional file parsers registered on the loader.
    """

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    languages: List[str]
    source_language: Optional[str] = None
    default_language: Optional[str] = None
    directory: str
    disable_coverage_log: Union[bool, List[str]] = False
    extend_override: bool = False
    strict: bool = True
    parsers_preset: Optional[List[StringsParser]] = None

    @field_validator("languages")
    @classmethod
    def _validate_languages(cls, v: List[str]) -> List[str]:
        empty = [i for i, name in enumerate(v) if not name.strip()]
        if empty:
            raise ValueError(f"language entries must not be empty (positions {empty})")
        return v

    @field_validator("source_language", "default_language")
    @classmethod
    def _blank_as_missing(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def _resolve_languages(self) -> "LocalizerOptions":
        """Fill in whichever of source/default language is missing."""
        if not self.source_language:
            if not self.default_language:
                raise ValueError(_LANGUAGE_REQUIRED)
            logger.warning(
                "source_language_defaulted",
                default_language=self.default_language,
            )
            self.source_language = self.default_language
        if not self.default_language:
            self.default_language = self.source_language
        return self

    @property
    def coverage_log_disabled_globally(self) -> bool:
        return self.disable_coverage_log is True

    @classmethod
    def build(cls, **kwargs: Any) -> "LocalizerOptions":
        """Validate keyword options.

        Raises:
            ConfigurationError: Listing every violation found.
        """
        return cls.from_mapping(kwargs)

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "LocalizerOptions":
        """Validate a mapping of options.

        Args:
            options: Raw options, keyed by field name.

        Returns:
            Validated LocalizerOptions.

        Raises:
            ConfigurationError: Listing every violation found.
        """
        if isinstance(options, cls):
            return options
        if not isinstance(options, Mapping):
            raise ConfigurationError(
                [f"options must be a mapping, got {type(options).__name__}"]
            )

        errors: List[str] = []
        if not options.get("source_language") and not options.get("default_language"):
            errors.append(_LANGUAGE_REQUIRED)

        try:
            validated = cls.model_validate(dict(options))
        except ValidationError as e:
            for error in e.errors():
                message = _format_validation_error(error)
                if message not in errors:
                    errors.append(message)
        else:
            if not errors:
                return validated

        logger.error("invalid_localizer_options", errors=errors)
        raise ConfigurationError(errors)


def _format_validation_error(error: Mapping[str, Any]) -> str:
    message = str(error.get("msg", "invalid value"))
    if message.startswith("Value error, "):
        message = message[len("Value error, ") :]
    location = ".".join(str(part) for part in error.get("loc", ()))
    return f"{location}: {message}" if location else message

