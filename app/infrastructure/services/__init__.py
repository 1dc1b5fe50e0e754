"""
Dependency injection services.

Provides provider functions for application-scoped services.
"""

from infrastructure.services.providers import (
    get_settings,
    get_localization_engine,
    get_localization_service,
)

__all__ = [
    "get_settings",
    "get_localization_engine",
    "get_localization_service",
]
