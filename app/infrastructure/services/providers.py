"""
Factory functions for dependency injection.

Provides application-scoped singleton providers for core infrastructure services.
"""

from functools import lru_cache

from core.config import Settings
from infrastructure.i18n.engine import LocalizationEngine
from infrastructure.i18n.factory import create_localizer
from infrastructure.i18n.service import LocalizationService


@lru_cache
def get_settings() -> Settings:
    """
    Get application-scoped settings singleton.

    The @lru_cache decorator ensures only ONE instance is created per process,
    even if called from multiple packages.

    Returns:
        Settings: Cached settings instance loaded from environment.
    """
    return Settings()


@lru_cache
def get_localization_engine() -> LocalizationEngine:
    """
    Get application-scoped, initialized localization engine singleton.

    Bot components receive the engine (or the service wrapping it) through
    their constructors; this provider is the only place it is created.

    Returns:
        LocalizationEngine: Cached engine built from application settings.

    Usage:
        engine = get_localization_engine()
        plugin = ReminderPlugin(localizer=engine)
    """
    return create_localizer(settings=get_settings())


@lru_cache
def get_localization_service() -> LocalizationService:
    """
    Get application-scoped localization service singleton.

    Returns:
        LocalizationService: Facade over the cached localization engine.
    """
    return LocalizationService(engine=get_localization_engine())
