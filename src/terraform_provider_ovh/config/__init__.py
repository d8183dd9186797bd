"""Configuration package with clean public API."""

from .schemas import (
    AppConfig, ClientConfig, LoggingConfig, WaitConfig,
    DESCRIPTIONS, PROVIDER_SCHEMA,
)
from .credentials import CredentialStoreReader, current_user_home
from .manager import ConfigurationManager
from .merger import ConfigurationMerger

__all__ = [
    # Settings
    'AppConfig',
    'ClientConfig',
    'LoggingConfig',
    'WaitConfig',
    'ConfigurationManager',

    # Provider schema
    'DESCRIPTIONS',
    'PROVIDER_SCHEMA',

    # Credential resolution
    'ConfigurationMerger',
    'CredentialStoreReader',
    'current_user_home',
]
