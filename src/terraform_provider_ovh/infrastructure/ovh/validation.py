"""Validation of resolved OVH credentials."""
import logging

from ovh.client import ENDPOINTS

from terraform_provider_ovh.domain.config import ResolvedConfig
from terraform_provider_ovh.domain.exceptions import CredentialValidationError

logger = logging.getLogger(__name__)


def validate_credentials(config: ResolvedConfig) -> None:
    """
    Check a resolved configuration before any API call.

    Args:
        config: Resolved provider configuration

    Raises:
        CredentialValidationError: If the endpoint is unknown or a credential
            field is empty
    """
    if config.endpoint not in ENDPOINTS:
        raise CredentialValidationError(
            f"{config.endpoint} must be one of {sorted(ENDPOINTS)} endpoints"
        )

    missing = config.missing_fields()
    if missing:
        raise CredentialValidationError(
            f"Missing OVH credentials for endpoint {config.endpoint}: {', '.join(missing)}",
            missing_fields=missing
        )
    logger.debug(f"Credentials for endpoint {config.endpoint} are complete")
