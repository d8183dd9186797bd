"""Domain model of the provider: resolved configuration, schema and state."""

from .config import CredentialFileSection, ResolvedConfig
from .exceptions import (
    ConfigurationError,
    CredentialFileParseError,
    CredentialValidationError,
    DomainException,
    EndpointSectionNotFoundError,
    ValidationError,
)
from .resource_data import ResourceData
from .schema import FieldType, SchemaField, env_default

__all__ = [
    "ConfigurationError",
    "CredentialFileParseError",
    "CredentialFileSection",
    "CredentialValidationError",
    "DomainException",
    "EndpointSectionNotFoundError",
    "FieldType",
    "ResolvedConfig",
    "ResourceData",
    "SchemaField",
    "ValidationError",
    "env_default",
]
