"""Resolved provider configuration and the credential file record."""
from dataclasses import dataclass
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

CREDENTIAL_FIELDS = ("application_key", "application_secret", "consumer_key")


class ResolvedConfig(BaseModel):
    """
    Provider configuration once every credential source has been merged.

    Built once per configuration request and immutable afterwards. The
    credential fields default to empty strings; validation decides whether
    an empty value is acceptable.
    """

    model_config = ConfigDict(frozen=True)

    endpoint: str = Field(..., description="OVH API endpoint (ex: ovh-eu)")
    application_key: str = Field("", description="OVH API application key")
    application_secret: str = Field("", description="OVH API application secret")
    consumer_key: str = Field("", description="OVH API consumer key")

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        """Validate endpoint identifier."""
        if not v or not v.strip():
            raise ValueError("Endpoint cannot be empty")
        return v.strip()

    def missing_fields(self) -> List[str]:
        """Return the credential fields that are still empty."""
        return [name for name in CREDENTIAL_FIELDS if not getattr(self, name)]

    def masked(self) -> Dict[str, Any]:
        """Return a printable view with secrets reduced to their last characters."""
        def mask(value: str) -> str:
            if not value:
                return ""
            if len(value) <= 4:
                return "****"
            return "*" * (len(value) - 4) + value[-4:]

        return {
            "endpoint": self.endpoint,
            "application_key": mask(self.application_key),
            "application_secret": mask(self.application_secret),
            "consumer_key": mask(self.consumer_key),
        }


@dataclass(frozen=True)
class CredentialFileSection:
    """Credentials read from one endpoint section of ``~/.ovh.conf``."""

    endpoint: str
    application_key: str = ""
    application_secret: str = ""
    consumer_key: str = ""
