"""Localization models for the i18n system.

Defines the string table types, reserved metadata keys, key ownership and
duration units shared by the localization engine components.
"""

from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

# Language tag -> flat key -> translated string
StringTable = Dict[str, str]

# Raw tables as returned by file parsers or supplied by plugins
RawStringTable = Mapping[str, Any]

NAME_KEY = "+NAME"
COUNTRY_KEY = "+COUNTRY"
COVERAGE_KEY = "+COVERAGE"

# Every language file must carry these
META_KEYS: Tuple[str, ...] = (NAME_KEY, COUNTRY_KEY)

# Computed by the engine, never counted against coverage
DYNAMIC_META_KEYS: Tuple[str, ...] = (COVERAGE_KEY,)

HUMANIZER_KEY_PREFIX = "+HUMANIZE:DURATION:"


class DurationUnit(str, Enum):
    """Time units understood by the duration humanizer.

    Values are the short unit codes. Year length follows the Julian year
    (365.25 days) and a month is a twelfth of it.
    """

    YEARS = "y"
    MONTHS = "mo"
    WEEKS = "w"
    DAYS = "d"
    HOURS = "h"
    MINUTES = "m"
    SECONDS = "s"
    MILLISECONDS = "ms"

    @property
    def milliseconds(self) -> float:
        """Length of one unit in milliseconds."""
        return _UNIT_MILLISECONDS[self]

    @property
    def variable(self) -> str:
        """Variable name passed to the unit's humanizer string (e.g. "minutes")."""
        return self.name.lower()

    @property
    def meta_key(self) -> str:
        """Humanizer metadata key holding the unit's template."""
        return f"{HUMANIZER_KEY_PREFIX}{self.name}"

    @classmethod
    def from_string(cls, unit_str: str) -> "DurationUnit":
        """Convert a short code or long name to a DurationUnit.

        Args:
            unit_str: Unit code ("ms", "mo") or name ("minutes", "hours").

        Returns:
            Matching DurationUnit.

        Raises:
            ValueError: If the unit is not recognized.
        """
        if isinstance(unit_str, cls):
            return unit_str
        normalized = str(unit_str).strip()
        try:
            return cls(normalized)
        except ValueError:
            pass
        try:
            return cls[normalized.upper()]
        except KeyError as e:
            raise ValueError(f"Unsupported duration unit: {unit_str}") from e


_UNIT_MILLISECONDS: Dict[DurationUnit, float] = {
    DurationUnit.YEARS: 31557600000,
    DurationUnit.MONTHS: 31557600000 / 12,
    DurationUnit.WEEKS: 604800000,
    DurationUnit.DAYS: 86400000,
    DurationUnit.HOURS: 3600000,
    DurationUnit.MINUTES: 60000,
    DurationUnit.SECONDS: 1000,
    DurationUnit.MILLISECONDS: 1,
}

HUMANIZER_META_KEYS: Tuple[str, ...] = tuple(unit.meta_key for unit in DurationUnit)

# Keys that pruning never removes and that the engine reserves for itself
PRUNE_BANNED_KEYS: Tuple[str, ...] = (
    META_KEYS + DYNAMIC_META_KEYS + HUMANIZER_META_KEYS
)


class KeyOwner(str, Enum):
    """Owner of a string key.

    ENGINE keys are reserved by the localizer and cannot be overwritten by
    extensions. EXTERNAL keys are free for plugins to extend.
    """

    ENGINE = "engine"
    EXTERNAL = "external"


def coerce_string_value(value: Any) -> Optional[str]:
    """Convert a raw table value to a string.

    Strings pass through. Booleans and numbers are accepted from loosely
    typed sources (YAML, JSON, plugin dicts) and converted to their literal
    spelling ("true", "42", "1.5"). Every other type yields None.

    Args:
        value: Raw value.

    Returns:
        String form of the value, or None if the type is not accepted.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return str(value)
    return None
