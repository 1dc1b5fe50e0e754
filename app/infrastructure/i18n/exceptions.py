"""Custom exceptions for the localization system.

Provides the error taxonomy of the localization engine. Per-key problems
during extension or pruning are not represented here: those are logged and
skipped so bulk operations never abort midway.
"""

from typing import Iterable, List, Optional


class LocalizationError(Exception):
    """Base exception for all localization errors.

    Example:
        try:
            engine.get_string("fr-FR", "GREETING")
        except LocalizationError as e:
            logger.error("localization_error", error=str(e))
    """

    pass


class ConfigurationError(LocalizationError):
    """Raised when localizer options are invalid.

    All violations found during validation are collected into a single
    exception.

    Attributes:
        errors: Human readable description of every violation.
    """

    def __init__(self, errors: Iterable[str]):
        self.errors: List[str] = list(errors)
        details = "; ".join(self.errors) if self.errors else "unknown error"
        super().__init__(f"Invalid localizer configuration: {details}")


class InitializationError(LocalizationError):
    """Raised when the engine cannot complete initialization.

    Example:
        >>> engine.initialize()  # source language file failed to load
        Traceback (most recent call last):
        ...
        InitializationError: Source language ("en-US") not found
    """

    pass


class AlreadyInitializedError(InitializationError):
    """Raised when initialize() is called a second time."""

    pass


class LanguageLoadError(LocalizationError):
    """Raised when a single language file cannot be read or parsed.

    The engine logs it and skips the language rather than failing.

    Attributes:
        path: Path of the offending file, if known.
    """

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        super().__init__(message)


class DuplicateLanguageError(LocalizationError):
    """Raised when registering a language tag that is already registered.

    Example:
        >>> registry.register("en-US", {...})
        >>> registry.register("en-US", {...})
        Traceback (most recent call last):
        ...
        DuplicateLanguageError: Language "en-US" is already registered
    """

    def __init__(self, language: str):
        self.language = language
        super().__init__(f'Language "{language}" is already registered')


class UnknownLanguageError(LocalizationError):
    """Raised when an operation targets a language that is not registered."""

    def __init__(self, language: str, message: Optional[str] = None):
        self.language = language
        super().__init__(message or f'Language "{language}" not found')


class StringNotFoundError(LocalizationError):
    """Raised when a lookup exhausts its candidate languages.

    Attributes:
        key: The requested string key.
        language: The preferred language of the lookup.
        fallback: Whether default and source languages were also searched.
    """

    def __init__(self, key: str, language: str, fallback: bool):
        self.key = key
        self.language = language
        self.fallback = fallback
        if fallback:
            message = (
                f'String "{key}" not found nor in "{language}", '
                "nor in default & source languages"
            )
        else:
            message = f'String "{key}" not found in "{language}"'
        super().__init__(message)


class HumanizerNotFoundError(LocalizationError):
    """Raised when no duration humanizer is bound to a language."""

    def __init__(self, language: str):
        self.language = language
        super().__init__(f'Could not find humanizer for language "{language}"')


class MessageFormatError(LocalizationError):
    """Raised when a message template cannot be parsed."""

    pass
