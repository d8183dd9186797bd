"""Resource Registry - name to handler tables exposed to the host.

The registry holds two tables, resources and data sources, mapping the
public names used in configurations to handler factories. It is built once
when the provider is created and only read afterwards.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from terraform_provider_ovh.infrastructure.exceptions import (
    DuplicateRegistrationError,
    UnknownResourceError,
)

logger = logging.getLogger(__name__)

HandlerFactory = Callable[[], Any]


class TableKind(str, Enum):
    """Registry tables."""
    RESOURCE = "resource"
    DATA_SOURCE = "data_source"


@dataclass(frozen=True)
class HandlerEntry:
    """A handler factory tagged with an optional deprecation message."""

    factory: HandlerFactory
    deprecation_message: Optional[str] = None

    @property
    def is_deprecated(self) -> bool:
        return self.deprecation_message is not None


def deprecated(handler: Union[HandlerFactory, HandlerEntry], message: str) -> HandlerEntry:
    """
    Mark a handler as superseded.

    The handler stays fully functional; only the message changes. Wrapping
    an already deprecated entry keeps its factory and replaces the message.

    Args:
        handler: Handler factory or entry
        message: Replacement guidance shown to users

    Returns:
        New handler entry carrying the message
    """
    if isinstance(handler, HandlerEntry):
        return HandlerEntry(factory=handler.factory, deprecation_message=message)
    return HandlerEntry(factory=handler, deprecation_message=message)


@dataclass(frozen=True)
class ResourceTableEntry:
    """Binding of a public name to a handler factory."""

    name: str
    kind: TableKind
    factory: HandlerFactory
    deprecation_message: Optional[str] = None

    def create(self) -> Any:
        """Construct the handler."""
        if self.deprecation_message:
            logger.warning(f"{self.kind.value} {self.name} is deprecated: {self.deprecation_message}")
        return self.factory()

    def describe(self) -> Dict[str, Any]:
        """Return a serializable description of the entry."""
        description = {"name": self.name, "kind": self.kind.value}
        if self.deprecation_message:
            description["deprecation_message"] = self.deprecation_message
        return description


class ResourceRegistry:
    """
    Registry of resource and data source handlers.

    Unlike a process-wide singleton, a registry is created explicitly and
    passed to whatever dispatches on resource names.
    """

    def __init__(self):
        """Initialize empty tables."""
        self._tables: Dict[TableKind, Dict[str, ResourceTableEntry]] = {
            TableKind.RESOURCE: {},
            TableKind.DATA_SOURCE: {},
        }

    def register(self,
                 kind: TableKind,
                 name: str,
                 handler: Union[HandlerFactory, HandlerEntry]) -> ResourceTableEntry:
        """
        Register a handler under a public name.

        Args:
            kind: Target table
            name: Public resource or data source name
            handler: Handler factory, or an entry built by :func:`deprecated`

        Returns:
            The table entry created

        Raises:
            DuplicateRegistrationError: If the name is already in the table
        """
        table = self._tables[kind]
        if name in table:
            raise DuplicateRegistrationError(f"{kind.value} '{name}' is already registered")

        if isinstance(handler, HandlerEntry):
            entry = ResourceTableEntry(name, kind, handler.factory, handler.deprecation_message)
        else:
            entry = ResourceTableEntry(name, kind, handler)

        table[name] = entry
        logger.debug(f"Registered {kind.value}: {name}")
        return entry

    def register_resource(self, name: str, handler: Union[HandlerFactory, HandlerEntry]) -> ResourceTableEntry:
        """Register a resource handler."""
        return self.register(TableKind.RESOURCE, name, handler)

    def register_data_source(self, name: str, handler: Union[HandlerFactory, HandlerEntry]) -> ResourceTableEntry:
        """Register a data source handler."""
        return self.register(TableKind.DATA_SOURCE, name, handler)

    def entry(self, kind: TableKind, name: str) -> ResourceTableEntry:
        """
        Look up a table entry.

        Raises:
            UnknownResourceError: If the name is not registered
        """
        try:
            return self._tables[kind][name]
        except KeyError:
            raise UnknownResourceError(f"Unknown {kind.value}: {name}") from None

    def create_resource(self, name: str) -> Any:
        """Construct the handler of a resource."""
        return self.entry(TableKind.RESOURCE, name).create()

    def create_data_source(self, name: str) -> Any:
        """Construct the handler of a data source."""
        return self.entry(TableKind.DATA_SOURCE, name).create()

    def names(self, kind: TableKind) -> List[str]:
        """Sorted names registered in a table."""
        return sorted(self._tables[kind])

    def resource_names(self) -> List[str]:
        return self.names(TableKind.RESOURCE)

    def data_source_names(self) -> List[str]:
        return self.names(TableKind.DATA_SOURCE)

    def entries(self, kind: TableKind) -> List[ResourceTableEntry]:
        """Table entries sorted by name."""
        return [self._tables[kind][name] for name in self.names(kind)]

    def __contains__(self, name: str) -> bool:
        return any(name in table for table in self._tables.values())
