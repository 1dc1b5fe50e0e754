"""Factory functions for creating i18n components.

Provides convenience functions for building a localization engine from the
application settings.
"""

from typing import Optional

import structlog
from core.config import LocalizerSettings, Settings
from infrastructure.i18n.engine import LocalizationEngine
from infrastructure.i18n.loader import FileLoader
from infrastructure.i18n.options import LocalizerOptions

logger = structlog.get_logger()


def create_localizer(
    options: Optional[LocalizerOptions] = None,
    settings: Optional[Settings] = None,
    loader: Optional[FileLoader] = None,
    preload: bool = True,
) -> LocalizationEngine:
    """Create and configure a LocalizationEngine.

    When no options are given they are built from the localizer settings.
    Outside production, extending an unknown language raises so that plugin
    mistakes surface early; in production it is logged and skipped.

    Args:
        options: Explicit engine options.
        settings: Application settings (default: loaded from environment).
        loader: Custom file loader.
        preload: Whether to initialize the engine immediately.

    Returns:
        LocalizationEngine: Configured engine.

    Raises:
        ConfigurationError: If the settings do not form valid options.
        InitializationError: If preloading fails.

    Usage:
        # Use settings from the environment, load languages now
        localizer = create_localizer()

        # Lazy loading
        localizer = create_localizer(preload=False)
        localizer.initialize()
    """
    if options is None:
        if settings is None:
            settings = Settings()
        localizer_settings: LocalizerSettings = settings.localizer
        options = localizer_settings.to_options(strict=not settings.is_production)

    engine = LocalizationEngine(options, loader=loader)

    if preload:
        engine.initialize()
        logger.info(
            "localizer_created_with_preload",
            directory=options.directory,
            language_count=len(engine.list_languages()),
        )
    else:
        logger.info("localizer_created_lazy", directory=options.directory)

    return engine
