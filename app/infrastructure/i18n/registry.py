"""In-memory store of loaded languages and their string tables."""

from typing import Dict, ItemsView, List, Optional

from core.logging import get_module_logger
from infrastructure.i18n.exceptions import DuplicateLanguageError
from infrastructure.i18n.models import StringTable

logger = get_module_logger()


class LanguageRegistry:
    """Single source of truth for language string tables.

    Each language tag owns exactly one table. Tables handed out by get()
    are the live objects, so callers mutating them mutate the registry.
    """

    def __init__(self):
        self._tables: Dict[str, StringTable] = {}

    def register(self, tag: str, table: StringTable) -> None:
        """Register a string table under a new tag.

        Raises:
            DuplicateLanguageError: If the tag is already registered.
        """
        if tag in self._tables:
            raise DuplicateLanguageError(tag)
        self._tables[tag] = table
        logger.debug("registered_language", language=tag, key_count=len(table))

    def get(self, tag: str) -> Optional[StringTable]:
        """Table of a language, or None when the tag is not registered."""
        return self._tables.get(tag)

    def exists(self, tag: str) -> bool:
        return tag in self._tables

    def keys_of(self, tag: str) -> Optional[List[str]]:
        """Snapshot of every key of a language, metadata included.

        Builds a new list on every call; avoid it in hot paths.
        """
        table = self._tables.get(tag)
        if table is None:
            return None
        return list(table)

    def tags(self) -> List[str]:
        """Registered tags in registration order."""
        return list(self._tables)

    def items(self) -> ItemsView[str, StringTable]:
        return self._tables.items()

    def __contains__(self, tag: object) -> bool:
        return tag in self._tables

    def __len__(self) -> int:
        return len(self._tables)
