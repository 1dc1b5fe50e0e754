"""Runtime extension and pruning of language string tables.

Plugins add strings to loaded languages at runtime and remove them when
they unload. Keys reserved by the engine are protected from overwrite, and
every per-key problem is logged and skipped so bulk operations always
complete.
"""

import os
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from core.logging import get_module_logger
from infrastructure.i18n.coverage import CoverageCalculator
from infrastructure.i18n.exceptions import UnknownLanguageError
from infrastructure.i18n.loader import FileFilter, FileLoader, LangFileToCodeFunction
from infrastructure.i18n.models import (
    PRUNE_BANNED_KEYS,
    RawStringTable,
    coerce_string_value,
)
from infrastructure.i18n.ownership import KeyOwnershipGuard
from infrastructure.i18n.registry import LanguageRegistry

logger = get_module_logger()

PathLike = Union[str, "os.PathLike[str]"]

# A strings map, a language file, or several files merged in order
LanguageSource = Union[RawStringTable, PathLike, Sequence[PathLike]]


class ExtensionMerger:
    """Applies additive updates and prunes to registered languages.

    Attributes:
        registry: Registry holding the string tables.
        guard: Ownership guard protecting engine keys.
        loader: Loader used when a source is given as a path.
        coverage: Calculator refreshed after a language gains keys.
        source_language: Tag of the source language.
        override: Whether existing unprotected keys may be overwritten.
        strict: Raise on unknown languages instead of warning.
    """

    def __init__(
        self,
        registry: LanguageRegistry,
        guard: KeyOwnershipGuard,
        loader: FileLoader,
        coverage: CoverageCalculator,
        source_language: str,
        override: bool = False,
        strict: bool = True,
    ):
        self.registry = registry
        self.guard = guard
        self.loader = loader
        self.coverage = coverage
        self.source_language = source_language
        self.override = override
        self.strict = strict

    def extend(self, tag: str, incoming: LanguageSource) -> Optional[List[str]]:
        """Merge strings into a registered language.

        Numbers and booleans are converted to strings; values of any other
        non-string type are skipped. Keys that already exist are kept when
        they are reserved by the engine or when override is disabled.

        Args:
            tag: Language to extend.
            incoming: Strings map, file path, or list of file paths.

        Returns:
            Keys imported into the language, or None if the language is
            not registered and strict mode is off.

        Raises:
            UnknownLanguageError: If the language is not registered and
                strict mode is on.
            LanguageLoadError: If incoming is a path that cannot be loaded.
        """
        table = self.registry.get(tag)
        if table is None:
            if self.strict:
                logger.error("language_not_loaded", language=tag)
                raise UnknownLanguageError(tag, f'Language "{tag}" is not loaded yet')
            logger.warning("language_not_loaded", language=tag, action="skipped")
            return None

        strings_map = self._resolve_source(incoming)

        source_table = (
            self.registry.get(self.source_language)
            if tag != self.source_language
            else None
        )
        imported: List[str] = []

        for key, raw_value in strings_map.items():
            value = coerce_string_value(raw_value)
            if value is None:
                logger.info(
                    "invalid_value_type",
                    key=key,
                    language=tag,
                    value_type=type(raw_value).__name__,
                )
                continue

            if source_table is not None and key not in source_table:
                logger.warning("key_not_in_source_language", key=key, language=tag)

            if key in table:
                if self.guard.is_owned(key):
                    logger.warning("key_bound_by_owner", key=key, language=tag)
                    continue

                if not self.override:
                    logger.info("key_override_disabled", key=key, language=tag)
                    continue

            table[key] = value
            imported.append(key)

        if imported:
            self.coverage.coverage(tag)

        logger.info(
            "extended_language",
            language=tag,
            imported_count=len(imported),
            offered_count=len(strings_map),
        )
        return imported

    def extend_many(
        self,
        tree: Union[Mapping[str, LanguageSource], PathLike],
        to_lang_code: Optional[LangFileToCodeFunction] = None,
        file_filter: Optional[FileFilter] = None,
        throw_on_error: bool = False,
    ) -> List[str]:
        """Extend several languages at once.

        The source language is processed first so that checks against the
        source key set see the keys added in the same batch.

        Args:
            tree: Mapping of tag to source, or a directory of language files.
            to_lang_code: Derives the tag of a directory file.
            file_filter: Glob pattern(s) or predicate selecting directory files.
            throw_on_error: Raise on unreadable directory files.

        Returns:
            Keys imported into at least one language, without duplicates.
        """
        if not isinstance(tree, Mapping):
            tree = self.loader.directory_to_languages_tree(
                tree,
                to_lang_code=to_lang_code,
                file_filter=file_filter,
                throw_on_error=throw_on_error,
            )

        tags = list(tree)
        if self.source_language in tags:
            tags.remove(self.source_language)
            tags.insert(0, self.source_language)

        imported_keys: Dict[str, None] = {}
        for tag in tags:
            keys = self.extend(tag, tree[tag])
            if not keys:
                continue
            for key in keys:
                imported_keys.setdefault(key, None)

        return list(imported_keys)

    def prune(self, keys: Iterable[str]) -> List[str]:
        """Remove keys from every registered language.

        Engine metadata keys are filtered out of the request and never
        removed. Other keys reserved by an owner are still removed, with a
        diagnostic: ownership guards against overwrite, not deletion.

        Returns:
            Keys removed from at least one language, without duplicates.
        """
        requested = [key for key in dict.fromkeys(keys) if key not in PRUNE_BANNED_KEYS]
        removed: Dict[str, None] = {}

        for tag, table in self.registry.items():
            for key in requested:
                if key not in table:
                    continue

                if self.guard.is_owned(key):
                    logger.info("removing_owned_key", key=key, language=tag)

                del table[key]
                removed.setdefault(key, None)

        logger.info(
            "pruned_languages",
            requested_count=len(requested),
            removed_count=len(removed),
        )
        return list(removed)

    def _resolve_source(self, incoming: LanguageSource) -> Mapping[str, Any]:
        if isinstance(incoming, Mapping):
            return incoming
        if isinstance(incoming, (str, os.PathLike)):
            return self.loader.load_strings_map(incoming)

        merged: Dict[str, Any] = {}
        for path in incoming:
            merged.update(self.loader.load_strings_map(path))
        return merged
