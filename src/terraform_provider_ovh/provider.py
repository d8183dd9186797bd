"""Provider bootstrap: schema, configuration entry point and handler dispatch."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from terraform_provider_ovh.config.merger import ConfigurationMerger
from terraform_provider_ovh.config.schemas.app_schema import AppConfig
from terraform_provider_ovh.config.schemas.provider_schema import PROVIDER_SCHEMA
from terraform_provider_ovh.domain.config import ResolvedConfig
from terraform_provider_ovh.domain.exceptions import ValidationError
from terraform_provider_ovh.domain.resource_data import ResourceData
from terraform_provider_ovh.infrastructure.ovh.ovh_client import OVHClient
from terraform_provider_ovh.infrastructure.ovh.validation import validate_credentials
from terraform_provider_ovh.infrastructure.registry.resource_registry import ResourceRegistry, TableKind
from terraform_provider_ovh.providers.ovh.registration import build_registry

logger = logging.getLogger(__name__)

State = Dict[str, Any]


@dataclass(frozen=True)
class ProviderMeta:
    """Per-session context handed to every handler call."""

    config: ResolvedConfig
    client: OVHClient
    settings: AppConfig


class Provider:
    """
    The OVH provider as seen by the host orchestrator.

    Exposes the provider schema, the ``configure`` entry point and the
    resource and data source tables, and drives the handler callbacks the
    way the host does: arguments are turned into :class:`ResourceData` with
    schema defaults applied, the handler runs, and the resulting state is
    returned.
    """

    def __init__(self,
                 registry: Optional[ResourceRegistry] = None,
                 settings: Optional[AppConfig] = None,
                 merger: Optional[ConfigurationMerger] = None,
                 client_factory: Callable[..., OVHClient] = OVHClient):
        """
        Initialize the provider.

        Args:
            registry: Handler tables; the OVH tables are built when omitted
            settings: Application settings
            merger: Credential resolution; validates credentials by default
            client_factory: Builds the API client from the resolved config
        """
        self.schema = PROVIDER_SCHEMA
        self.registry = registry or build_registry()
        self.settings = settings or AppConfig()
        self.merger = merger or ConfigurationMerger(validator=validate_credentials)
        self.client_factory = client_factory

    def describe(self) -> Dict[str, Any]:
        """Serializable description of the provider schema and tables."""
        return {
            "provider": {name: field.describe() for name, field in self.schema.items()},
            "resources": [entry.describe() for entry in self.registry.entries(TableKind.RESOURCE)],
            "data_sources": [entry.describe() for entry in self.registry.entries(TableKind.DATA_SOURCE)],
        }

    def configure(self, raw: Optional[Dict[str, Any]] = None, home: Optional[str] = None) -> ProviderMeta:
        """
        Configure the provider for a session.

        Args:
            raw: Provider block of the user configuration
            home: Home directory to search for ``.ovh.conf``; the current
                user's home when omitted

        Returns:
            Session context for handler calls

        Raises:
            ConfigurationError: If the configuration cannot be resolved or
                the credentials are rejected
        """
        data = ResourceData.from_config(self.schema, raw)
        config = self.merger.resolve(data, home=home)

        client = self.client_factory(config, self.settings.client, self.settings.wait)
        if self.settings.client.validate_on_configure:
            client.check_connectivity()

        logger.info(f"Provider configured for endpoint {config.endpoint}")
        return ProviderMeta(config=config, client=client, settings=self.settings)

    def _resource(self, name: str):
        return self.registry.create_resource(name)

    def create(self, name: str, meta: ProviderMeta, config: Dict[str, Any]) -> State:
        """Create a resource and return its state."""
        handler = self._resource(name)
        data = ResourceData.from_config(handler.schema, config)
        handler.create(data, meta)
        return data.state()

    def read(self, name: str, meta: ProviderMeta, resource_id: str, state: State) -> Optional[State]:
        """Refresh a resource; None when it no longer exists."""
        handler = self._resource(name)
        data = ResourceData(handler.schema, state=_without_id(state), resource_id=resource_id)
        handler.read(data, meta)
        if not data.id:
            return None
        return data.state()

    def update(self,
               name: str,
               meta: ProviderMeta,
               resource_id: str,
               state: State,
               config: Dict[str, Any]) -> State:
        """
        Update a resource in place.

        Raises:
            ValidationError: If a field that forces a new resource changed
        """
        handler = self._resource(name)
        data = ResourceData.from_config(handler.schema, config, state=_without_id(state),
                                        resource_id=resource_id)
        replaced = [key for key, field in handler.schema.items()
                    if field.force_new and data.is_set(key) and data.has_change(key)]
        if replaced:
            raise ValidationError(
                f"{name} {resource_id}: changing {', '.join(replaced)} requires a new resource"
            )
        handler.update(data, meta)
        return data.state()

    def delete(self, name: str, meta: ProviderMeta, resource_id: str, state: State) -> None:
        """Delete a resource."""
        handler = self._resource(name)
        data = ResourceData(handler.schema, state=_without_id(state), resource_id=resource_id)
        handler.delete(data, meta)

    def read_data_source(self, name: str, meta: ProviderMeta, config: Dict[str, Any]) -> State:
        """Read a data source and return its state."""
        handler = self.registry.create_data_source(name)
        data = ResourceData.from_config(handler.schema, config)
        handler.read(data, meta)
        return data.state()


def _without_id(state: Optional[State]) -> State:
    return {k: v for k, v in (state or {}).items() if k != "id"}
