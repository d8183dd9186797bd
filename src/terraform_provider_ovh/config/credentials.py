"""Reader for the per-user OVH credential file (``~/.ovh.conf``).

The file is INI formatted with one section per endpoint::

    [ovh-eu]
    application_key = ...
    application_secret = ...
    consumer_key = ...
"""
import configparser
import logging
import os
from typing import Optional

from terraform_provider_ovh.domain.config import CREDENTIAL_FIELDS, CredentialFileSection
from terraform_provider_ovh.domain.exceptions import (
    CredentialFileParseError,
    EndpointSectionNotFoundError,
)

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".ovh.conf"
INLINE_COMMENT_PREFIXES = ("#", ";")


def current_user_home() -> str:
    """
    Get the home directory of the current user.

    The password database is consulted first, then ``$HOME``. When neither
    gives an answer an empty string is returned: the credential file step is
    then skipped instead of failing the configuration.

    Returns:
        Home directory path, or an empty string
    """
    try:
        import pwd
        return pwd.getpwuid(os.getuid()).pw_dir
    except (ImportError, KeyError, AttributeError) as e:
        logger.debug(f"Unable to look up current user, falling back to $HOME: {e}")
    return os.environ.get("HOME", "")


def unquote(value: str) -> str:
    """Remove one pair of matching surrounding quotes."""
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("\"", "'"):
        return value[1:-1]
    return value


class CredentialStoreReader:
    """Locates and parses the credential file of a user."""

    def __init__(self, file_name: str = CONFIG_FILE_NAME):
        self.file_name = file_name

    def config_path(self, home: str) -> Optional[str]:
        """Path of the credential file for a home directory, None without a home."""
        if not home:
            return None
        return os.path.join(home, self.file_name)

    def read_section(self, home: str, endpoint: str) -> Optional[CredentialFileSection]:
        """
        Read the credentials of an endpoint from ``<home>/.ovh.conf``.

        Args:
            home: Home directory of the invoking user; empty skips the lookup
            endpoint: Endpoint name, used as the section name

        Returns:
            The matching section, or None when the file does not exist

        Raises:
            CredentialFileParseError: If the file exists but cannot be parsed
            EndpointSectionNotFoundError: If the file has no matching section
        """
        path = self.config_path(home)
        if path is None or not os.path.exists(path):
            logger.debug(f"No OVH credential file found at {path}")
            return None

        parser = configparser.ConfigParser(
            interpolation=None,
            inline_comment_prefixes=INLINE_COMMENT_PREFIXES,
        )
        try:
            with open(path, encoding="utf-8") as config_file:
                parser.read_file(config_file, source=path)
        except (OSError, UnicodeDecodeError, configparser.Error) as e:
            raise CredentialFileParseError(path, str(e)) from e

        if not parser.has_section(endpoint):
            raise EndpointSectionNotFoundError(path, endpoint)

        section = parser[endpoint]
        values = {name: unquote(section.get(name, "")) for name in CREDENTIAL_FIELDS}
        logger.debug(
            f"Loaded credentials for endpoint {endpoint} from {path} "
            f"(keys: {', '.join(k for k, v in values.items() if v) or 'none'})"
        )
        return CredentialFileSection(endpoint=endpoint, **values)
