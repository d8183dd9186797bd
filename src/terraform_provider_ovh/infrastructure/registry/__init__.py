"""Infrastructure registry patterns."""

from .resource_registry import (
    HandlerEntry,
    ResourceRegistry,
    ResourceTableEntry,
    TableKind,
    deprecated,
)

__all__ = [
    'HandlerEntry',
    'ResourceRegistry',
    'ResourceTableEntry',
    'TableKind',
    'deprecated',
]
