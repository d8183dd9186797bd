"""Per-call state bag handed to resource and data source handlers."""
import copy
from typing import Any, Dict, Optional, Tuple

from .exceptions import ConfigurationError
from .schema import Schema


class ResourceData:
    """
    Configuration and state of one resource instance.

    Values come from the user configuration layered over the prior state.
    Handlers read arguments with :meth:`get` / :meth:`get_ok` and record the
    observed remote state with :meth:`set` and :meth:`set_id`. Clearing the
    id tells the host the resource no longer exists.
    """

    def __init__(self,
                 schema: Schema,
                 config: Optional[Dict[str, Any]] = None,
                 state: Optional[Dict[str, Any]] = None,
                 resource_id: str = ""):
        self._schema = schema
        self._prior: Dict[str, Any] = copy.deepcopy(state or {})
        self._values: Dict[str, Any] = {**self._prior, **copy.deepcopy(config or {})}
        self._id = resource_id

    @classmethod
    def from_config(cls,
                    schema: Schema,
                    raw: Optional[Dict[str, Any]] = None,
                    state: Optional[Dict[str, Any]] = None,
                    resource_id: str = "") -> "ResourceData":
        """
        Build resource data the way the host does before calling a handler.

        Absent fields are filled from their default function or static
        default. Required fields that stay unset raise a configuration error.

        Args:
            schema: Field schema of the resource or provider
            raw: User supplied configuration
            state: Prior state, if the resource already exists
            resource_id: Current resource id

        Returns:
            ResourceData instance

        Raises:
            ConfigurationError: If a required field has no value
        """
        config = dict(raw or {})
        for name, field in schema.items():
            if config.get(name) is None:
                default = field.resolve_default()
                if default is not None:
                    config[name] = default
                else:
                    config.pop(name, None)

        missing = [
            name for name, field in schema.items()
            if field.required and config.get(name) in (None, "")
            and (state or {}).get(name) in (None, "")
        ]
        if missing:
            raise ConfigurationError(
                f"Missing required argument(s): {', '.join(sorted(missing))}",
                missing_fields=sorted(missing)
            )

        unknown = set(config) - set(schema)
        if unknown:
            raise ConfigurationError(f"Unsupported argument(s): {', '.join(sorted(unknown))}")

        return cls(schema, config=config, state=state, resource_id=resource_id)

    @property
    def id(self) -> str:
        """Resource id, empty when the resource does not exist."""
        return self._id

    def set_id(self, resource_id: str) -> None:
        """Set the resource id; an empty id marks the resource as gone."""
        self._id = str(resource_id) if resource_id else ""

    def get(self, key: str) -> Any:
        """Return the field value, or the zero value of its type when unset."""
        value = self._values.get(key)
        if value is None and key in self._schema:
            return self._schema[key].type.zero_value()
        return value

    def get_ok(self, key: str) -> Tuple[Any, bool]:
        """Return the value and whether it is set to a non-zero value."""
        value = self.get(key)
        if key not in self._schema:
            return value, value is not None
        return value, value is not None and value != self._schema[key].type.zero_value()

    def is_set(self, key: str) -> bool:
        """Whether the field holds a value, zero values included."""
        return self._values.get(key) is not None

    def set(self, key: str, value: Any) -> None:
        """Record a value in state."""
        if key not in self._schema:
            raise KeyError(f"Unknown field: {key}")
        self._values[key] = value

    def has_change(self, key: str) -> bool:
        """Whether the value differs from the prior state."""
        return self._prior.get(key) != self._values.get(key)

    def state(self) -> Dict[str, Any]:
        """Snapshot of the current state including the id."""
        snapshot = {k: copy.deepcopy(v) for k, v in self._values.items() if k in self._schema}
        snapshot["id"] = self._id
        return snapshot
