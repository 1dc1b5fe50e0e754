"""Infrastructure modules for the localizer bot.

Centralized infrastructure components:
- i18n: Localization engine (LocalizationEngine, LocalizationService)
- services: Dependency injection providers (get_settings, get_localization_service)
"""
