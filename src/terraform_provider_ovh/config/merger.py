"""Credential resolution for the provider configuration."""
import logging
from typing import Callable, Optional

from terraform_provider_ovh.config.credentials import CredentialStoreReader, current_user_home
from terraform_provider_ovh.domain.config import CREDENTIAL_FIELDS, ResolvedConfig
from terraform_provider_ovh.domain.exceptions import ConfigurationError
from terraform_provider_ovh.domain.resource_data import ResourceData

logger = logging.getLogger(__name__)

Validator = Callable[[ResolvedConfig], None]


class ConfigurationMerger:
    """
    Merge the credential sources into a :class:`ResolvedConfig`.

    Precedence, lowest first:

    1. the endpoint from the provider configuration, credentials empty;
    2. the endpoint section of ``~/.ovh.conf`` when the file exists;
    3. credentials explicitly set in the provider configuration (this
       includes the ``OVH_*`` environment variables, which the host resolves
       as field defaults before the merger runs).

    The validator, when given, runs last and its errors propagate.
    """

    def __init__(self,
                 reader: Optional[CredentialStoreReader] = None,
                 validator: Optional[Validator] = None,
                 home_resolver: Callable[[], str] = current_user_home):
        """
        Initialize the merger.

        Args:
            reader: Credential file reader
            validator: Final validation step
            home_resolver: Returns the home directory of the invoking user
        """
        self.reader = reader or CredentialStoreReader()
        self.validator = validator
        self.home_resolver = home_resolver

    def resolve(self, data: ResourceData, home: Optional[str] = None) -> ResolvedConfig:
        """
        Resolve the provider configuration.

        Args:
            data: Provider configuration with host defaults applied
            home: Home directory to search; resolved from the current user
                when not given

        Returns:
            Resolved configuration

        Raises:
            CredentialFileParseError: If the credential file cannot be parsed
            EndpointSectionNotFoundError: If the file lacks the endpoint section
            ConfigurationError: If validation fails
        """
        endpoint = (data.get("endpoint") or "").strip()
        if not endpoint:
            raise ConfigurationError("The OVH endpoint is required", missing_fields=["endpoint"])
        values = {name: "" for name in CREDENTIAL_FIELDS}

        if home is None:
            home = self.home_resolver()

        section = self.reader.read_section(home, endpoint)
        if section is not None:
            for name in CREDENTIAL_FIELDS:
                values[name] = getattr(section, name)

        for name in CREDENTIAL_FIELDS:
            value, ok = data.get_ok(name)
            if ok:
                values[name] = value

        config = ResolvedConfig(endpoint=endpoint, **values)
        logger.debug(
            f"Resolved OVH configuration for endpoint {config.endpoint}"
            f" (credential file: {'yes' if section else 'no'})"
        )

        if self.validator is not None:
            self.validator(config)
        return config
