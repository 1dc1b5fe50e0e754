"""Test data factories for i18n system testing.

Provides deterministic test data builders for:
- Source and translated string tables
- Language files written to a directory
- LocalizerOptions
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from infrastructure.i18n.models import DurationUnit
from infrastructure.i18n.options import LocalizerOptions

ENGLISH_HUMANIZER = {
    DurationUnit.YEARS.meta_key: "{years, plural, one {# year} other {# years}}",
    DurationUnit.MONTHS.meta_key: "{months, plural, one {# month} other {# months}}",
    DurationUnit.WEEKS.meta_key: "{weeks, plural, one {# week} other {# weeks}}",
    DurationUnit.DAYS.meta_key: "{days, plural, one {# day} other {# days}}",
    DurationUnit.HOURS.meta_key: "{hours, plural, one {# hour} other {# hours}}",
    DurationUnit.MINUTES.meta_key: "{minutes, plural, one {# minute} other {# minutes}}",
    DurationUnit.SECONDS.meta_key: "{seconds, plural, one {# second} other {# seconds}}",
    DurationUnit.MILLISECONDS.meta_key: (
        "{milliseconds, plural, one {# millisecond} other {# milliseconds}}"
    ),
}


def make_table(
    name: str = "English",
    country: str = "United States",
    strings: Optional[Dict[str, Any]] = None,
    humanizer: bool = False,
) -> Dict[str, Any]:
    """Create a language table with metadata keys.

    Args:
        name: Value of +NAME.
        country: Value of +COUNTRY.
        strings: Content keys.
        humanizer: Include the English humanizer unit strings.

    Returns:
        Flat key -> value mapping.
    """
    table: Dict[str, Any] = {"+NAME": name, "+COUNTRY": country}
    if humanizer:
        table.update(ENGLISH_HUMANIZER)
    table.update(strings or {})
    return table


def make_source_table(strings: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """English source table with humanizer strings."""
    if strings is None:
        strings = {"GREETING": "Hi {name}", "FAREWELL": "Bye", "PING": "Pong"}
    return make_table("English", "United States", strings, humanizer=True)


def make_translated_table(strings: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """French table translating part of the source table."""
    if strings is None:
        strings = {"GREETING": "Salut {name}", "FAREWELL": ""}
    return make_table("Français", "France", strings)


def write_language_file(
    directory: Path,
    tag: str,
    table: Dict[str, Any],
    extension: str = "yml",
) -> Path:
    """Write a language table as YAML or JSON.

    Returns:
        Path of the written file.
    """
    path = Path(directory) / f"{tag}.{extension}"
    with open(path, "w", encoding="utf-8") as f:
        if extension == "json":
            json.dump(table, f, ensure_ascii=False)
        else:
            yaml.safe_dump(table, f, allow_unicode=True)
    return path


def make_options(
    languages: Optional[List[str]] = None,
    directory: str = ".",
    **overrides: Any,
) -> LocalizerOptions:
    """Create LocalizerOptions for en-US (source) and fr-FR by default."""
    values: Dict[str, Any] = {
        "languages": languages if languages is not None else ["en-US.yml", "fr-FR.yml"],
        "source_language": "en-US",
        "directory": directory,
    }
    values.update(overrides)
    return LocalizerOptions.build(**values)
