"""Ownership tracking for string keys.

Keys reserved by the engine cannot be overwritten through extension.
"""

from typing import Dict, FrozenSet, Iterable, Optional

from core.logging import get_module_logger
from infrastructure.i18n.models import KeyOwner

logger = get_module_logger()


class KeyOwnershipGuard:
    """Tracks which string keys are reserved and by whom.

    Only the engine reserves keys; every external mutation path checks
    is_owned() before touching a key.
    """

    def __init__(self):
        self._owners: Dict[str, KeyOwner] = {}

    def reserve(self, keys: Iterable[str], owner: KeyOwner = KeyOwner.ENGINE) -> None:
        """Mark keys as owned.

        A key already reserved by another owner keeps its first owner.
        """
        for key in keys:
            current = self._owners.get(key)
            if current is not None and current != owner:
                logger.warning(
                    "key_already_reserved",
                    key=key,
                    owner=current.value,
                    requested_owner=owner.value,
                )
                continue
            self._owners[key] = owner

    def is_owned(self, key: str) -> bool:
        """Whether the key is protected against external overwrite."""
        return self._owners.get(key) == KeyOwner.ENGINE

    def owner_of(self, key: str) -> Optional[KeyOwner]:
        return self._owners.get(key)

    def reserved_keys(self) -> FrozenSet[str]:
        return frozenset(
            key for key, owner in self._owners.items() if owner == KeyOwner.ENGINE
        )
