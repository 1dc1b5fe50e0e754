"""Fallback resolution of string lookups.

Walks the preferred language and then the fallback queue (default language,
then source language) until a non-empty string is found.
"""

from typing import List, Sequence

import structlog
from infrastructure.i18n.exceptions import StringNotFoundError, UnknownLanguageError
from infrastructure.i18n.registry import LanguageRegistry

logger = structlog.get_logger().bind(component="i18n.resolver")


def build_fallback_queue(source_language: str, default_language: str) -> List[str]:
    """Fallback queue for a source/default language pair.

    The default language comes first when it differs from the source; the
    source language always closes the queue.
    """
    queue = []
    if default_language and default_language != source_language:
        queue.append(default_language)
    queue.append(source_language)
    return queue


class FallbackResolver:
    """Resolves a key to the first non-empty string along the fallback chain.

    A candidate language that is not registered is an error, even when later
    candidates could have provided the string. An empty string counts as a
    missing key.
    """

    def __init__(self, registry: LanguageRegistry, fallback_queue: Sequence[str]):
        """Initialize the resolver.

        Args:
            registry: Registry holding the string tables.
            fallback_queue: Tags consulted after the preferred language.
        """
        self.registry = registry
        self.fallback_queue = list(fallback_queue)

    def candidates(self, preferred_tag: str, use_fallback: bool = True) -> List[str]:
        """Tags scanned for a lookup, in order."""
        if use_fallback:
            return [preferred_tag] + self.fallback_queue
        return [preferred_tag]

    def resolve(self, preferred_tag: str, key: str, use_fallback: bool = True) -> str:
        """Find the string for a key.

        Args:
            preferred_tag: Language to search first.
            key: String key.
            use_fallback: Whether to continue with the fallback queue.

        Returns:
            The first non-empty string found.

        Raises:
            UnknownLanguageError: If a scanned language is not registered.
            StringNotFoundError: If no candidate has a non-empty value.
        """
        for tag in self.candidates(preferred_tag, use_fallback):
            table = self.registry.get(tag)
            if table is None:
                logger.error("language_not_found", language=tag, key=key)
                raise UnknownLanguageError(tag)

            found = table.get(key)
            if found:
                if tag != preferred_tag:
                    logger.debug(
                        "used_fallback_string",
                        key=key,
                        requested_language=preferred_tag,
                        fallback_language=tag,
                    )
                return found

        error = StringNotFoundError(key, preferred_tag, use_fallback)
        logger.error(
            "string_not_found",
            key=key,
            language=preferred_tag,
            fallback=use_fallback,
        )
        raise error
