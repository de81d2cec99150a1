"""Infrastructure layer: settings, logging and HTTP clients for external services."""

from variant_engine.infrastructure.config import Settings, settings
from variant_engine.infrastructure.logging_config import configure_logging

__all__ = ["Settings", "settings", "configure_logging"]
