"""Feature-level fixtures for i18n system tests.

Provides registries, calculators and initialized engines for lookup,
coverage and extension scenarios.
"""

import pytest

from infrastructure.i18n.coverage import CoverageCalculator, CoverageLogPolicy
from infrastructure.i18n.engine import LocalizationEngine
from infrastructure.i18n.loader import LanguageFileLoader
from infrastructure.i18n.models import KeyOwner, PRUNE_BANNED_KEYS
from infrastructure.i18n.ownership import KeyOwnershipGuard
from infrastructure.i18n.registry import LanguageRegistry


@pytest.fixture
def registry():
    """Registry with an English source and a partial French translation."""
    registry = LanguageRegistry()
    registry.register(
        "en",
        {"+NAME": "English", "+COUNTRY": "US", "A": "a", "B": "b", "C": "c"},
    )
    registry.register(
        "fr",
        {"+NAME": "Français", "+COUNTRY": "FR", "A": "fa", "B": ""},
    )
    return registry


@pytest.fixture
def coverage_calculator(registry):
    return CoverageCalculator(registry, "en", CoverageLogPolicy(False))


@pytest.fixture
def ownership_guard():
    guard = KeyOwnershipGuard()
    guard.reserve(PRUNE_BANNED_KEYS, KeyOwner.ENGINE)
    return guard


@pytest.fixture
def file_loader():
    return LanguageFileLoader()


@pytest.fixture
def engine(localizer_options):
    """Initialized engine over the en-US / fr-FR locales directory."""
    engine = LocalizationEngine(localizer_options)
    engine.initialize()
    return engine
