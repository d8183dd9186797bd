# src/terraform_provider_ovh/domain/exceptions.py
from typing import Any, List, Optional


class DomainException(Exception):
    """Base exception for all domain-specific errors."""
    pass


class ValidationError(DomainException):
    """Raised when a resource or data source argument is invalid."""
    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.details = details


class ConfigurationError(DomainException):
    """Raised when the provider configuration cannot be resolved."""
    def __init__(self, message: str, missing_fields: Optional[List[str]] = None):
        super().__init__(message)
        self.missing_fields = missing_fields or []


class CredentialFileParseError(ConfigurationError):
    """Raised when the credential file exists but cannot be read or parsed."""
    def __init__(self, path: str, reason: str):
        super().__init__(f"Unable to parse OVH configuration file {path}: {reason}")
        self.path = path
        self.reason = reason


class EndpointSectionNotFoundError(ConfigurationError):
    """Raised when the credential file has no section for the endpoint."""
    def __init__(self, path: str, endpoint: str):
        super().__init__(f"No section matching endpoint '{endpoint}' in {path}")
        self.path = path
        self.endpoint = endpoint


class CredentialValidationError(ConfigurationError):
    """Raised when the resolved credentials are missing or rejected."""
    pass
