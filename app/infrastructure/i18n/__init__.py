"""i18n system - runtime localization engine.

Loads per-language string tables, resolves lookups through a fallback
chain, tracks translation coverage, and lets plugins extend or prune
strings at runtime while protecting engine-owned keys.

Main components:
- models: metadata keys, KeyOwner, DurationUnit
- options: LocalizerOptions
- loader: FileLoader and LanguageFileLoader (YAML / JSON)
- registry: LanguageRegistry
- resolvers: FallbackResolver
- coverage: CoverageCalculator
- ownership: KeyOwnershipGuard
- merger: ExtensionMerger
- formatter: MessageFormatter (ICU-style messages)
- humanizer: Humanizer for durations
- engine: LocalizationEngine
- service: LocalizationService facade for dependency injection
"""

from infrastructure.i18n.engine import LocalizationEngine
from infrastructure.i18n.exceptions import (
    AlreadyInitializedError,
    ConfigurationError,
    DuplicateLanguageError,
    HumanizerNotFoundError,
    InitializationError,
    LanguageLoadError,
    LocalizationError,
    MessageFormatError,
    StringNotFoundError,
    UnknownLanguageError,
)
from infrastructure.i18n.formatter import MessageFormatter
from infrastructure.i18n.humanizer import Humanizer, HumanizerOptions
from infrastructure.i18n.loader import (
    FileLoader,
    JSONStringsParser,
    LanguageFileLoader,
    StringsParser,
    YAMLStringsParser,
)
from infrastructure.i18n.models import DurationUnit, KeyOwner
from infrastructure.i18n.options import LocalizerOptions

__all__ = [
    "LocalizationEngine",
    "LocalizerOptions",
    "FileLoader",
    "LanguageFileLoader",
    "StringsParser",
    "YAMLStringsParser",
    "JSONStringsParser",
    "MessageFormatter",
    "Humanizer",
    "HumanizerOptions",
    "DurationUnit",
    "KeyOwner",
    "LocalizationError",
    "ConfigurationError",
    "InitializationError",
    "AlreadyInitializedError",
    "LanguageLoadError",
    "DuplicateLanguageError",
    "StringNotFoundError",
    "UnknownLanguageError",
    "HumanizerNotFoundError",
    "MessageFormatError",
]
