import sys
from pathlib import Path

# Ensure the application package root is on sys.path so importing application
# modules (e.g. `core.config`) works during pytest collection regardless of
# where pytest is invoked from.
project_root = str(Path(__file__).resolve().parents[1])
if project_root not in sys.path:
    sys.path.insert(0, project_root)

import pytest
from infrastructure.services import providers
from tests.factories.i18n import (
    make_options,
    make_source_table,
    make_translated_table,
    write_language_file,
)


@pytest.fixture(autouse=True)
def clear_provider_caches():
    """Reset the application-scoped singletons between tests."""
    providers.get_settings.cache_clear()
    providers.get_localization_engine.cache_clear()
    providers.get_localization_service.cache_clear()
    yield
    providers.get_settings.cache_clear()
    providers.get_localization_engine.cache_clear()
    providers.get_localization_service.cache_clear()


@pytest.fixture
def locales_dir(tmp_path):
    """Directory holding an English source file and a partial French file.

    - en-US.yml: metadata, humanizer strings, GREETING, FAREWELL, PING
    - fr-FR.yml: metadata, GREETING, empty FAREWELL, no PING
    """
    directory = tmp_path / "locales"
    directory.mkdir()
    write_language_file(directory, "en-US", make_source_table())
    write_language_file(directory, "fr-FR", make_translated_table())
    return directory


@pytest.fixture
def localizer_options(locales_dir):
    """Options loading en-US (source and default) and fr-FR."""
    return make_options(directory=str(locales_dir))
