import hashlib
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Mapping
from urllib.parse import quote

from terraform_provider_ovh.domain.exceptions import ValidationError
from terraform_provider_ovh.domain.resource_data import ResourceData
from terraform_provider_ovh.domain.schema import Schema
from terraform_provider_ovh.infrastructure.exceptions import ResourceNotFoundError
from terraform_provider_ovh.infrastructure.ovh.ovh_client import OVHClient

if TYPE_CHECKING:
    from terraform_provider_ovh.provider import ProviderMeta

logger = logging.getLogger(__name__)


def path_escape(value: Any) -> str:
    """Escape a value for use as one OVH API path segment."""
    return quote(str(value), safe="")


def hash_strings(values: Iterable[str]) -> str:
    """Stable identifier for a set of strings."""
    digest = hashlib.sha1()
    for value in sorted(values):
        digest.update(value.encode("utf-8"))
    return digest.hexdigest()


def set_from_api(data: ResourceData, payload: Mapping[str, Any], field_map: Mapping[str, str]) -> None:
    """Copy API fields (camelCase) into state fields (snake_case)."""
    for state_key, api_key in field_map.items():
        if api_key in payload:
            data.set(state_key, payload[api_key])


def body_from_data(data: ResourceData,
                   field_map: Mapping[str, str],
                   skip: Iterable[str] = (),
                   keep_zero: bool = False) -> Dict[str, Any]:
    """
    Build an API body from state fields.

    Args:
        data: Resource data
        field_map: State key to API key mapping
        skip: State keys left out of the body
        keep_zero: Also send fields explicitly set to a zero value, so an
            update can switch a flag off

    Returns:
        API body
    """
    skip = set(skip)
    body = {}
    for state_key, api_key in field_map.items():
        if state_key in skip:
            continue
        if keep_zero and data.is_set(state_key):
            body[api_key] = data.get(state_key)
            continue
        value, ok = data.get_ok(state_key)
        if ok:
            body[api_key] = value
    return body


class OVHResourceHandler(ABC):
    """
    Base class for OVH resource handlers.

    Each handler declares its schema and implements the create, read, update
    and delete callbacks of the host contract against the OVH API.
    """

    schema: Schema = {}

    def client(self, meta: "ProviderMeta") -> OVHClient:
        return meta.client

    @abstractmethod
    def create(self, data: ResourceData, meta: "ProviderMeta") -> None:
        """Create the remote object and record its id and state."""
        pass

    @abstractmethod
    def read(self, data: ResourceData, meta: "ProviderMeta") -> None:
        """Refresh state from the remote object; clear the id when it is gone."""
        pass

    def update(self, data: ResourceData, meta: "ProviderMeta") -> None:
        """Update the remote object in place."""
        changed = [key for key, field in self.schema.items() if not field.computed and data.has_change(key)]
        raise ValidationError(
            f"{type(self).__name__} cannot be updated in place (changed: {', '.join(changed) or 'none'})"
        )

    @abstractmethod
    def delete(self, data: ResourceData, meta: "ProviderMeta") -> None:
        """Delete the remote object and clear the id."""
        pass

    def read_or_forget(self, data: ResourceData, meta: "ProviderMeta", path: str) -> Any:
        """
        GET the object at ``path``.

        Returns:
            The API payload, or None when the object no longer exists, in
            which case the id is cleared so the host drops it from state
        """
        try:
            return self.client(meta).get(path)
        except ResourceNotFoundError:
            logger.warning(f"{path} not found, removing {data.id} from state")
            data.set_id("")
            return None

    def delete_if_exists(self, meta: "ProviderMeta", path: str) -> Any:
        """DELETE ``path``; an object that is already gone counts as deleted."""
        try:
            return self.client(meta).delete(path)
        except ResourceNotFoundError:
            logger.info(f"{path} already deleted")
            return None


class OVHDataSourceHandler(ABC):
    """Base class for read-only OVH data sources."""

    schema: Schema = {}

    def client(self, meta: "ProviderMeta") -> OVHClient:
        return meta.client

    @abstractmethod
    def read(self, data: ResourceData, meta: "ProviderMeta") -> None:
        """Fetch the remote object and record it in state."""
        pass

    @staticmethod
    def select_one(matches: List[Dict[str, Any]], description: str) -> Dict[str, Any]:
        """
        Return the only element of ``matches``.

        Raises:
            ValidationError: If there is no match or more than one
        """
        if not matches:
            raise ValidationError(f"Your query for {description} returned no results. "
                                  "Please change your search criteria and try again.")
        if len(matches) > 1:
            raise ValidationError(f"Your query for {description} returned more than one result. "
                                  "Please try a more specific search criteria.",
                                  details=[m.get("id") for m in matches])
        return matches[0]
