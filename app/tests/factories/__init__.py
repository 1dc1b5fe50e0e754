"""Test data factories for deterministic test data generation."""

from tests.factories.i18n import (
    make_options,
    make_source_table,
    make_table,
    make_translated_table,
    write_language_file,
)

__all__ = [
    "make_options",
    "make_source_table",
    "make_table",
    "make_translated_table",
    "write_language_file",
]
