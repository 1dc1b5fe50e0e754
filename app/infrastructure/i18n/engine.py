"""Localization engine.

Composes the language registry, fallback resolution, coverage accounting,
key ownership and runtime extension into the public localization API used
by bot components.
"""

import os
import threading
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from core.logging import get_module_logger
from infrastructure.i18n.coverage import CoverageCalculator, CoverageLogPolicy
from infrastructure.i18n.exceptions import (
    AlreadyInitializedError,
    DuplicateLanguageError,
    HumanizerNotFoundError,
    InitializationError,
    LanguageLoadError,
    UnknownLanguageError,
)
from infrastructure.i18n.formatter import MessageFormatter
from infrastructure.i18n.humanizer import (
    Humanizer,
    HumanizerOptions,
    UnitFormatter,
)
from infrastructure.i18n.loader import (
    FileFilter,
    FileLoader,
    LangFileToCodeFunction,
    LanguageFileLoader,
    default_lang_code,
)
from infrastructure.i18n.merger import ExtensionMerger, LanguageSource
from infrastructure.i18n.models import (
    META_KEYS,
    PRUNE_BANNED_KEYS,
    DurationUnit,
    KeyOwner,
    StringTable,
    coerce_string_value,
)
from infrastructure.i18n.options import LocalizerOptions
from infrastructure.i18n.ownership import KeyOwnershipGuard
from infrastructure.i18n.registry import LanguageRegistry
from infrastructure.i18n.resolvers import FallbackResolver, build_fallback_queue

logger = get_module_logger()


class LocalizationEngine:
    """Runtime localization engine.

    Loads the configured language files, resolves strings through the
    fallback queue (preferred, default, then source language), formats ICU
    messages, humanizes durations and lets plugins extend or prune strings
    at runtime.

    Usage:
        engine = LocalizationEngine(
            LocalizerOptions.build(
                languages=["en-US.yml", "fr-FR.yml"],
                source_language="en-US",
                directory="locales",
            )
        )
        engine.initialize()
        engine.get_formatted_string("fr-FR", "GREETING", {"name": "Bob"})

    Registry mutations run under an engine-wide lock so that coverage
    calculation never observes a table that another thread is extending.
    """

    def __init__(
        self,
        options: Union[LocalizerOptions, Mapping[str, Any]],
        loader: Optional[FileLoader] = None,
        formatter: Optional[MessageFormatter] = None,
    ):
        """Initialize the engine without loading any language.

        Args:
            options: Validated options, or a mapping validated here.
            loader: File loader; defaults to the YAML/JSON loader with the
                options' parsers preset.
            formatter: Message formatter.

        Raises:
            ConfigurationError: If the options are invalid.
        """
        self.options = LocalizerOptions.from_mapping(options)

        self._source_language: str = self.options.source_language
        self._default_language: str = self.options.default_language
        self._fallback_queue = build_fallback_queue(
            self._source_language, self._default_language
        )

        self._loader = loader or LanguageFileLoader(self.options.parsers_preset)
        self._formatter = formatter or MessageFormatter()

        self._keys_ownership = KeyOwnershipGuard()
        self._keys_ownership.reserve(PRUNE_BANNED_KEYS, KeyOwner.ENGINE)

        self._registry = LanguageRegistry()
        self._resolver = FallbackResolver(self._registry, self._fallback_queue)
        self._coverage = CoverageCalculator(
            self._registry,
            self._source_language,
            CoverageLogPolicy(self.options.disable_coverage_log),
        )
        self._merger = ExtensionMerger(
            self._registry,
            self._keys_ownership,
            self._loader,
            self._coverage,
            self._source_language,
            override=self.options.extend_override,
            strict=self.options.strict,
        )

        self._humanizers: Dict[str, Humanizer] = {}
        self._loaded_languages: List[str] = []
        self._initialized = False
        self._lock = threading.RLock()

    @property
    def source_language(self) -> str:
        """Language whose keys are the ground truth for coverage."""
        return self._source_language

    @property
    def default_language(self) -> str:
        """Language used when no preference is given."""
        return self._default_language

    @property
    def fallback_queue(self) -> List[str]:
        return list(self._fallback_queue)

    @property
    def keys_ownership(self) -> KeyOwnershipGuard:
        return self._keys_ownership

    @property
    def file_loader(self) -> FileLoader:
        return self._loader

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> None:
        """Load every configured language and compute coverages.

        Languages that cannot be read or lack required metadata keys are
        logged and skipped.

        Raises:
            AlreadyInitializedError: If called more than once.
            DuplicateLanguageError: If two files map to the same tag.
            InitializationError: If the source language did not load.
        """
        with self._lock:
            if self._initialized:
                raise AlreadyInitializedError("Initialization is already done")

            try:
                self._load_languages()

                if not self._registry.exists(self._source_language):
                    raise InitializationError(
                        f'Source language ("{self._source_language}") not found'
                    )

                logger.info("calculating_coverages")
                self._coverage.coverage_all()
            except (InitializationError, DuplicateLanguageError) as e:
                logger.error("localizer_initialization_failed", error=str(e))
                raise

            self._loaded_languages = self._registry.tags()
            self._initialized = True

        logger.info(
            "localizer_initialized",
            languages=self._loaded_languages,
            source_language=self._source_language,
            default_language=self._default_language,
        )

    def _load_languages(self) -> None:
        logger.info("loading_language_files", count=len(self.options.languages))

        for file_name in self.options.languages:
            tag = default_lang_code(file_name)

            if self._registry.exists(tag):
                raise DuplicateLanguageError(tag)

            path = os.path.join(self.options.directory, file_name)
            try:
                table = self._load_table(path)
            except LanguageLoadError as e:
                logger.error(
                    "language_load_failed",
                    file=file_name,
                    language=tag,
                    error=str(e),
                )
                continue

            self._registry.register(tag, table)
            self._humanizers[tag] = self.create_custom_humanizer(tag)
            logger.info("loaded_language", language=tag, file=file_name)

    def _load_table(self, path: str) -> StringTable:
        raw = self._loader.load_strings_map(path)

        table: StringTable = {}
        for key, raw_value in raw.items():
            value = coerce_string_value(raw_value)
            if value is None:
                logger.info(
                    "invalid_value_type",
                    key=key,
                    file=path,
                    value_type=type(raw_value).__name__,
                )
                continue
            table[key] = value

        missing = [key for key in META_KEYS if not table.get(key)]
        if missing:
            raise LanguageLoadError(
                f'Cannot read "{path}": required keys {missing} are missing or empty',
                path=path,
            )
        return table

    def list_languages(self) -> List[str]:
        """Languages loaded during initialization."""
        return list(self._loaded_languages)

    def language_exists(self, tag: str) -> bool:
        return self._registry.exists(tag)

    def get_language_keys(self, tag: str) -> List[str]:
        """All keys of a language, metadata included.

        Builds a new list on every call; avoid it in hot paths.

        Raises:
            UnknownLanguageError: If the language is not registered.
        """
        keys = self._registry.keys_of(tag)
        if keys is None:
            raise UnknownLanguageError(tag)
        return keys

    def get_string(
        self,
        preferred_language: Optional[str],
        key: str,
        use_fallback: bool = True,
    ) -> str:
        """Look up a string.

        Args:
            preferred_language: Language to search first; the default
                language when None.
            key: String key.
            use_fallback: Continue with the default and source languages.

        Raises:
            UnknownLanguageError: If a scanned language is not registered.
            StringNotFoundError: If no scanned language has the string.
        """
        return self._resolver.resolve(
            preferred_language or self._default_language, key, use_fallback
        )

    def get_formatted_string(
        self,
        language: Optional[str],
        key: str,
        variables: Optional[Mapping[str, Any]] = None,
        use_fallback: bool = True,
    ) -> str:
        """Look up a string and render it with variables."""
        language = language or self._default_language
        template = self.get_string(language, key, use_fallback)
        return self.format_string(language, template, variables)

    def format_string(
        self,
        language: str,
        template: str,
        variables: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """Render an ICU message template for a language."""
        return self._formatter.format(template, variables, language)

    def humanize_duration(
        self,
        language: Optional[str],
        duration: float,
        unit: Union[str, DurationUnit] = DurationUnit.MILLISECONDS,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """Humanize a duration in a language.

        Args:
            language: Language whose humanizer renders the duration.
            duration: Amount of unit.
            unit: Unit of duration; milliseconds by default.
            overrides: Humanizer option overrides for this call.

        Raises:
            HumanizerNotFoundError: If the language has no humanizer.
        """
        language = language or self._default_language
        humanizer = self._humanizers.get(language)
        if humanizer is None:
            raise HumanizerNotFoundError(language)

        unit = DurationUnit.from_string(unit)
        if unit != DurationUnit.MILLISECONDS:
            duration = humanizer.convert_duration(duration, unit)

        return humanizer.humanize(duration, overrides)

    def create_custom_humanizer(
        self,
        language: Optional[str] = None,
        language_overrides: Optional[Mapping[Union[str, DurationUnit], UnitFormatter]] = None,
        default_options: Optional[Union[HumanizerOptions, Mapping[str, Any]]] = None,
    ) -> Humanizer:
        """Create a humanizer rendering units with a language's strings.

        Each unit renders its +HUMANIZE:DURATION:<UNIT> string with the unit
        name as variable, e.g. {minutes, plural, one {# minute} other {...}}.

        Args:
            language: Language of the unit strings; the source language
                when None.
            language_overrides: Replacement unit formatters, by unit.
            default_options: Default humanizer options.
        """
        language = language or self._source_language

        definition: Dict[DurationUnit, UnitFormatter] = {
            unit: self._unit_formatter(language, unit) for unit in DurationUnit
        }
        for unit, unit_formatter in (language_overrides or {}).items():
            definition[DurationUnit.from_string(unit)] = unit_formatter

        return Humanizer(definition, default_options)

    def _unit_formatter(self, language: str, unit: DurationUnit) -> UnitFormatter:
        def format_unit(amount: float) -> str:
            return self.get_formatted_string(
                language, unit.meta_key, {unit.variable: amount}
            )

        return format_unit

    def extend_language(
        self, language: str, source: LanguageSource
    ) -> Optional[List[str]]:
        """Add strings to a loaded language.

        Returns:
            Imported keys, or None when the language is unknown in
            non-strict mode.
        """
        with self._lock:
            return self._merger.extend(language, source)

    def extend_languages(
        self,
        languages_tree: Union[Mapping[str, LanguageSource], str, "os.PathLike[str]"],
        to_lang_code: Optional[LangFileToCodeFunction] = None,
        file_filter: Optional[FileFilter] = None,
        throw_on_error: bool = False,
    ) -> List[str]:
        """Add strings to several languages, source language first.

        Returns:
            Every key imported into at least one language.
        """
        with self._lock:
            return self._merger.extend_many(
                languages_tree,
                to_lang_code=to_lang_code,
                file_filter=file_filter,
                throw_on_error=throw_on_error,
            )

    def prune_languages(self, keys: Iterable[str]) -> List[str]:
        """Remove keys from every language, engine metadata excepted."""
        with self._lock:
            return self._merger.prune(keys)

    def calculate_coverages(
        self, languages: Optional[Iterable[str]] = None, report: bool = False
    ) -> Dict[str, float]:
        """Recalculate coverages, of every language by default."""
        with self._lock:
            return self._coverage.coverage_all(languages, report=report)

    def missing_keys(self, language: str) -> List[str]:
        """Source keys a language does not translate yet."""
        with self._lock:
            return self._coverage.missing_keys(language)
