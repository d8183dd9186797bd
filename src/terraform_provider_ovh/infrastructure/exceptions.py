from typing import Optional, Any


class InfrastructureError(Exception):
    """Base exception for infrastructure-related errors."""
    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.details = details


class OVHApiError(InfrastructureError):
    """Raised when an OVH API call fails."""
    def __init__(self, method: str, path: str, message: str, details: Optional[Any] = None):
        super().__init__(f"Calling {method} {path}: {message}", details)
        self.method = method
        self.path = path


class ResourceNotFoundError(OVHApiError):
    """Raised when the OVH API answers 404 for a resource."""
    pass


class WaitTimeoutError(InfrastructureError):
    """Raised when a remote object does not reach the expected state in time."""
    pass


class RegistryError(InfrastructureError):
    """Base exception for resource registry errors."""
    pass


class DuplicateRegistrationError(RegistryError):
    """Raised when a name is registered twice in the same table."""
    pass


class UnknownResourceError(RegistryError):
    """Raised when a resource or data source name is not registered."""
    pass
