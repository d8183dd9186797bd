"""Configuration schemas."""

from .app_schema import AppConfig, ClientConfig, LoggingConfig, WaitConfig
from .provider_schema import DESCRIPTIONS, PROVIDER_SCHEMA

__all__ = [
    'AppConfig',
    'ClientConfig',
    'LoggingConfig',
    'WaitConfig',
    'DESCRIPTIONS',
    'PROVIDER_SCHEMA',
]
