"""Translation coverage accounting.

Coverage of a language is the share of source-language keys it translates
with a non-empty string, as a percentage rounded to two decimals. The value
is written back into the language's +COVERAGE metadata key.
"""

from typing import Dict, FrozenSet, Iterable, List, Optional, Union

from core.logging import get_module_logger
from infrastructure.i18n.exceptions import UnknownLanguageError
from infrastructure.i18n.models import (
    COUNTRY_KEY,
    COVERAGE_KEY,
    DYNAMIC_META_KEYS,
    NAME_KEY,
    StringTable,
)
from infrastructure.i18n.registry import LanguageRegistry

logger = get_module_logger()

SOURCE_COVERAGE = 100


class CoverageLogPolicy:
    """Decides which languages report untranslated keys.

    Configured from a boolean (silence every language, or none) or from a
    list of tags silenced selectively.
    """

    def __init__(self, disable_coverage_log: Union[bool, Iterable[str], None] = False):
        if disable_coverage_log is None or isinstance(disable_coverage_log, bool):
            self.disabled_globally = bool(disable_coverage_log)
            self.disabled_languages: FrozenSet[str] = frozenset()
        else:
            self.disabled_globally = False
            self.disabled_languages = frozenset(disable_coverage_log)

    def is_disabled_for(self, tag: Optional[str]) -> bool:
        if self.disabled_globally:
            return True
        return tag is not None and tag in self.disabled_languages


class CoverageCalculator:
    """Computes per-language coverage against the source language.

    Attributes:
        registry: Registry holding the string tables.
        source_language: Tag whose keys form the denominator.
        log_policy: Suppression policy for untranslated-key diagnostics.
    """

    def __init__(
        self,
        registry: LanguageRegistry,
        source_language: str,
        log_policy: Optional[CoverageLogPolicy] = None,
    ):
        self.registry = registry
        self.source_language = source_language
        self.log_policy = log_policy or CoverageLogPolicy()

    def coverage(self, tag: str) -> float:
        """Calculate and store the coverage of one language.

        Raises:
            UnknownLanguageError: If the language or the source language is
                not registered.
        """
        table = self.registry.get(tag)
        if table is None:
            raise UnknownLanguageError(tag)

        if tag == self.source_language:
            table[COVERAGE_KEY] = str(SOURCE_COVERAGE)
            return float(SOURCE_COVERAGE)

        source_table = self.registry.get(self.source_language)
        if source_table is None:
            raise UnknownLanguageError(
                self.source_language,
                f'Source language "{self.source_language}" not found',
            )

        coverage = self._test_coverage(tag, table, source_table)
        table[COVERAGE_KEY] = format_coverage(coverage)
        return coverage

    def coverage_all(
        self, tags: Optional[Iterable[str]] = None, report: bool = False
    ) -> Dict[str, float]:
        """Calculate coverage for several languages.

        Args:
            tags: Languages to calculate; every registered language if None.
                Tags that are not registered are skipped.
            report: Log the resulting coverage of each language.

        Returns:
            Mapping of language tag to coverage percentage.
        """
        results: Dict[str, float] = {}
        for tag in list(tags) if tags is not None else self.registry.tags():
            table = self.registry.get(tag)
            if table is None:
                continue

            results[tag] = self.coverage(tag)

            if report:
                logger.info(
                    "language_coverage",
                    language=tag,
                    name=table.get(NAME_KEY),
                    country=table.get(COUNTRY_KEY),
                    coverage=results[tag],
                )
        return results

    def missing_keys(self, tag: str) -> List[str]:
        """Source keys the language does not translate."""
        table = self.registry.get(tag)
        source_table = self.registry.get(self.source_language)
        if table is None:
            raise UnknownLanguageError(tag)
        if source_table is None or tag == self.source_language:
            return []
        return [key for key in source_table if not _is_covered(key, table)]

    def _test_coverage(
        self, tag: str, table: StringTable, source_table: StringTable
    ) -> float:
        total = 0
        covered = 0
        log_disabled = self.log_policy.is_disabled_for(tag)

        for key in source_table:
            total += 1

            if _is_covered(key, table):
                covered += 1
                continue

            if log_disabled:
                continue

            logger.warning(
                "string_not_translated",
                key=key,
                language=tag,
                language_name=table.get(NAME_KEY),
            )

        if total == 0:
            return float(SOURCE_COVERAGE)

        return round(100 * (covered / total), 2)


def format_coverage(coverage: float) -> str:
    """String stored in +COVERAGE ("100", "66.67")."""
    if float(coverage).is_integer():
        return str(int(coverage))
    return str(coverage)


def _is_covered(key: str, table: StringTable) -> bool:
    if key in DYNAMIC_META_KEYS:
        return True
    value = table.get(key)
    return isinstance(value, str) and value != ""
