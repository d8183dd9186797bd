"""OVH Provider Plugin - Root Package.

This package implements the OVH provider plugin: it declares the provider
configuration schema, resolves OVH API credentials from the provider
configuration, the environment and the per-user ``~/.ovh.conf`` file, and
exposes the table of resource and data source handlers that wrap the OVH
REST API.

Key Components:
    - config: credential resolution and application settings
    - domain: resolved configuration, schema and state model
    - infrastructure: OVH API client wrapper and handler registry
    - providers: per-resource OVH handlers and their registration
    - cli: command line entry point

Usage:
    >>> from terraform_provider_ovh import Provider
    >>> provider = Provider()
    >>> meta = provider.configure({"endpoint": "ovh-eu"})
    >>> provider.read_data_source("ovh_domain_zone", meta, {"name": "example.com"})
"""

from ._package import PACKAGE_NAME, __version__
from .provider import Provider, ProviderMeta

__package_name__ = PACKAGE_NAME

__all__ = [
    "Provider",
    "ProviderMeta",
    "__version__",
]
