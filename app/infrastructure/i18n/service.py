"""Localization service for dependency injection.

Provides a class-based interface to the localization engine for easier DI
and testing.
"""

from typing import Any, Dict, List, Mapping, Optional

from infrastructure.i18n.engine import LocalizationEngine
from infrastructure.i18n.exceptions import StringNotFoundError, UnknownLanguageError
from infrastructure.i18n.factory import create_localizer


class LocalizationService:
    """Class-based localization service.

    Thin facade over a LocalizationEngine. Command handlers and plugins
    receive it through their constructor instead of reaching for a global.

    Usage:
        class GreetCommand:
            def __init__(self, localization: LocalizationService):
                self.localization = localization

            def run(self, language: str, user: str) -> str:
                return self.localization.translate(
                    "GREETING", language, {"name": user}
                )
    """

    def __init__(self, engine: Optional[LocalizationEngine] = None):
        """Initialize localization service.

        Args:
            engine: Optional pre-configured engine. If not provided, creates
                an initialized engine from settings via the factory.
        """
        self._engine = engine or create_localizer()

    def translate(
        self,
        key: str,
        language: Optional[str] = None,
        variables: Optional[Mapping[str, Any]] = None,
        use_fallback: bool = True,
    ) -> str:
        """Retrieve and format a string.

        Raises:
            StringNotFoundError: If no language in the fallback chain has it.
        """
        return self._engine.get_formatted_string(
            language, key, variables, use_fallback
        )

    def humanize(
        self,
        duration: float,
        language: Optional[str] = None,
        unit: str = "ms",
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """Humanize a duration in a language."""
        return self._engine.humanize_duration(language, duration, unit, overrides)

    def has_string(self, key: str, language: str) -> bool:
        """Check if a language itself defines a non-empty string for key."""
        try:
            self._engine.get_string(language, key, use_fallback=False)
        except (StringNotFoundError, UnknownLanguageError):
            return False
        return True

    def get_available_languages(self) -> List[str]:
        return self._engine.list_languages()

    def get_coverages(self) -> Dict[str, float]:
        return self._engine.calculate_coverages()

    @property
    def engine(self) -> LocalizationEngine:
        """Access underlying LocalizationEngine instance.

        Provided for plugins that extend or prune strings.
        """
        return self._engine
