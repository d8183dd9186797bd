"""Schema description exchanged with the host orchestrator.

A schema maps field names to :class:`SchemaField` records. The host uses it
to validate user configuration and to resolve defaults before any provider
code runs; :class:`~terraform_provider_ovh.domain.resource_data.ResourceData`
reproduces that resolution step.
"""
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional


class FieldType(str, Enum):
    """Value types supported by schema fields."""
    STRING = "string"
    INT = "int"
    BOOL = "bool"
    FLOAT = "float"
    LIST = "list"
    MAP = "map"

    def zero_value(self) -> Any:
        """Value reported for a field that was never set."""
        if self is FieldType.LIST:
            return []
        if self is FieldType.MAP:
            return {}
        return {
            FieldType.STRING: "",
            FieldType.INT: 0,
            FieldType.BOOL: False,
            FieldType.FLOAT: 0.0,
        }[self]


DefaultFunc = Callable[[], Any]


def env_default(variable: str, fallback: Any = None) -> DefaultFunc:
    """
    Build a default function reading an environment variable.

    Args:
        variable: Environment variable name
        fallback: Value returned when the variable is unset

    Returns:
        Callable returning the variable value or the fallback
    """
    def default_func() -> Any:
        value = os.environ.get(variable)
        if value is None:
            return fallback
        return value

    default_func.__name__ = f"env_default_{variable.lower()}"
    return default_func


@dataclass(frozen=True)
class SchemaField:
    """Description of one configuration or state field."""

    type: FieldType
    description: str = ""
    required: bool = False
    optional: bool = False
    computed: bool = False
    force_new: bool = False
    sensitive: bool = False
    default: Any = None
    default_func: Optional[DefaultFunc] = None

    def resolve_default(self) -> Any:
        """Resolve the default value, the default function taking precedence."""
        if self.default_func is not None:
            return self.default_func()
        return self.default

    def describe(self) -> Dict[str, Any]:
        """Return a serializable description of the field."""
        description = {
            "type": self.type.value,
            "required": self.required,
            "optional": self.optional,
            "computed": self.computed,
            "description": self.description,
        }
        if self.force_new:
            description["force_new"] = True
        if self.sensitive:
            description["sensitive"] = True
        if self.default is not None:
            description["default"] = self.default
        if self.default_func is not None:
            description["default_func"] = self.default_func.__name__
        return description


Schema = Dict[str, SchemaField]
