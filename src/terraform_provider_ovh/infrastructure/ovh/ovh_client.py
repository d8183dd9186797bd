import logging
import time
from typing import Any, Callable, Dict, Iterable, Optional

import ovh
import ovh.exceptions

from terraform_provider_ovh.config.schemas.app_schema import ClientConfig, WaitConfig
from terraform_provider_ovh.domain.config import ResolvedConfig
from terraform_provider_ovh.domain.exceptions import CredentialValidationError
from terraform_provider_ovh.infrastructure.exceptions import (
    OVHApiError,
    ResourceNotFoundError,
    WaitTimeoutError,
)

logger = logging.getLogger(__name__)


class OVHClient:
    """
    Centralized OVH API access.

    Wraps the ``ovh`` SDK client, translates SDK exceptions into the
    provider error hierarchy and polls asynchronous OVH operations.
    """

    def __init__(self,
                 config: ResolvedConfig,
                 client_config: Optional[ClientConfig] = None,
                 wait_config: Optional[WaitConfig] = None,
                 sdk_client: Optional[ovh.Client] = None):
        """
        Initialize OVH client with configuration.

        Args:
            config: Resolved provider configuration
            client_config: Optional client settings
            wait_config: Optional polling settings
            sdk_client: Pre-built SDK client, mostly for tests

        Raises:
            CredentialValidationError: If the SDK rejects the endpoint or keys
        """
        self.endpoint = config.endpoint
        self.client_config = client_config or ClientConfig()
        self.wait_config = wait_config or WaitConfig()

        if sdk_client is not None:
            self.client = sdk_client
        else:
            try:
                self.client = ovh.Client(
                    endpoint=config.endpoint,
                    application_key=config.application_key,
                    application_secret=config.application_secret,
                    consumer_key=config.consumer_key,
                    timeout=self.client_config.timeout,
                )
            except ovh.exceptions.APIError as e:
                raise CredentialValidationError(f"Error getting ovh client: {e}") from e
        logger.debug(f"OVH client created for endpoint {self.endpoint}")

    def get(self, path: str, need_auth: bool = True, **params: Any) -> Any:
        """GET an OVH API path; keyword arguments become query parameters."""
        return self._call("GET", path, self.client.get, path, _need_auth=need_auth, **params)

    def post(self, path: str, body: Optional[Dict[str, Any]] = None) -> Any:
        """POST a JSON body to an OVH API path."""
        return self._call("POST", path, self.client.post, path, **(body or {}))

    def put(self, path: str, body: Optional[Dict[str, Any]] = None) -> Any:
        """PUT a JSON body to an OVH API path."""
        return self._call("PUT", path, self.client.put, path, **(body or {}))

    def delete(self, path: str) -> Any:
        """DELETE an OVH API path."""
        return self._call("DELETE", path, self.client.delete, path)

    def _call(self, method: str, path: str, func: Callable, *args: Any, **kwargs: Any) -> Any:
        logger.debug(f"Calling {method} {path}")
        try:
            return func(*args, **kwargs)
        except ovh.exceptions.ResourceNotFoundError as e:
            raise ResourceNotFoundError(method, path, str(e)) from e
        except ovh.exceptions.APIError as e:
            logger.error(f"OVH API call {method} {path} failed: {str(e)}")
            raise OVHApiError(method, path, str(e), details=getattr(e, "query_id", None)) from e

    def check_connectivity(self) -> int:
        """
        Verify the client can reach the API.

        Returns:
            Server time reported by ``/auth/time``

        Raises:
            CredentialValidationError: If the probe fails or returns nothing
        """
        try:
            server_time = self.get("/auth/time", need_auth=False)
        except OVHApiError as e:
            raise CredentialValidationError(f"OVH client seems to be misconfigured: {e}") from e
        if not server_time:
            raise CredentialValidationError("OVH client seems to be misconfigured: empty /auth/time answer")
        logger.debug("Logged in on OVH API")
        return server_time

    def wait_for(self,
                 refresh: Callable[[], str],
                 target: Iterable[str],
                 pending: Iterable[str],
                 description: str,
                 timeout: Optional[float] = None) -> str:
        """
        Poll until ``refresh`` reports a target state.

        Args:
            refresh: Returns the current remote state
            target: States that end the wait successfully
            pending: States that keep the wait going
            description: Human readable name used in logs and errors
            timeout: Override of the configured wait timeout

        Returns:
            The target state reached

        Raises:
            OVHApiError: If an unexpected state is reported
            WaitTimeoutError: If no target state is reached in time
        """
        target = set(target)
        pending = set(pending)
        deadline = time.monotonic() + (timeout or self.wait_config.timeout)

        while True:
            state = refresh()
            logger.debug(f"Waiting for {description}: state is {state}")
            if state in target:
                return state
            if state not in pending:
                raise OVHApiError("GET", description, f"unexpected state '{state}'")
            if time.monotonic() >= deadline:
                raise WaitTimeoutError(
                    f"Timeout while waiting for {description} to reach {sorted(target)}",
                    details={"last_state": state}
                )
            time.sleep(self.wait_config.interval)
