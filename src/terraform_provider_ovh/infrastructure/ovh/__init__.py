"""OVH API access."""

from .ovh_client import OVHClient
from .validation import validate_credentials

__all__ = ['OVHClient', 'validate_credentials']
