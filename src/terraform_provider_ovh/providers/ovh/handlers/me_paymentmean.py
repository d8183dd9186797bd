"""Payment means of the account: bank accounts and credit cards."""
import logging
import re
from typing import Any, Dict, List

from terraform_provider_ovh.domain.exceptions import ValidationError
from terraform_provider_ovh.domain.resource_data import ResourceData
from terraform_provider_ovh.domain.schema import FieldType, SchemaField

from .base_handler import OVHDataSourceHandler, path_escape

logger = logging.getLogger(__name__)

BANK_ACCOUNT_PATH = "/me/paymentMean/bankAccount"
CREDIT_CARD_PATH = "/me/paymentMean/creditCard"


class PaymentMeanDataSource(OVHDataSourceHandler):
    """Shared lookup of a payment mean by description, default flag and state."""

    path = ""
    label = "payment mean"

    def _compile(self, data: ResourceData):
        pattern = data.get("description_regexp")
        try:
            return re.compile(pattern)
        except re.error as e:
            raise ValidationError(f"Invalid description_regexp {pattern!r}: {e}") from e

    def fetch(self, meta, **params: Any) -> List[Dict[str, Any]]:
        client = self.client(meta)
        ids = client.get(self.path, **params) or []
        return [client.get(f"{self.path}/{path_escape(mean_id)}") for mean_id in ids]

    def filter(self, data: ResourceData, means: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        regexp = self._compile(data)
        use_default = data.get("use_default")
        return [
            mean for mean in means
            if regexp.search(mean.get("description") or "")
            and (not use_default or mean.get("defaultPaymentMean"))
        ]

    def record(self, data: ResourceData, mean: Dict[str, Any]) -> None:
        data.set_id(str(mean["id"]))
        data.set("description", mean.get("description") or "")
        data.set("default", bool(mean.get("defaultPaymentMean")))
        data.set("state", mean.get("state", ""))


def common_schema() -> Dict[str, SchemaField]:
    return {
        "description_regexp": SchemaField(
            type=FieldType.STRING, optional=True, default=".*",
            description="Regular expression matched against the description",
        ),
        "use_default": SchemaField(
            type=FieldType.BOOL, optional=True, default=False,
            description="Only consider the default payment mean",
        ),
        "description": SchemaField(type=FieldType.STRING, computed=True),
        "default": SchemaField(type=FieldType.BOOL, computed=True),
    }


class BankAccountDataSource(PaymentMeanDataSource):
    """Find a bank account of the account."""

    path = BANK_ACCOUNT_PATH
    label = "bank account"

    schema = {
        **common_schema(),
        "use_oldest": SchemaField(
            type=FieldType.BOOL, optional=True, default=False,
            description="Pick the oldest match when several bank accounts match",
        ),
        "state": SchemaField(type=FieldType.STRING, optional=True, computed=True),
    }

    def read(self, data: ResourceData, meta) -> None:
        params = {}
        state, ok = data.get_ok("state")
        if ok:
            params["state"] = state

        matches = self.filter(data, self.fetch(meta, **params))
        if data.get("use_oldest") and matches:
            matches = [min(matches, key=lambda mean: mean.get("creationDate") or "")]

        self.record(data, self.select_one(matches, self.label))


class CreditCardDataSource(PaymentMeanDataSource):
    """Find a credit card of the account."""

    path = CREDIT_CARD_PATH
    label = "credit card"

    schema = {
        **common_schema(),
        "use_last_to_expire": SchemaField(
            type=FieldType.BOOL, optional=True, default=False,
            description="Pick the card expiring last when several cards match",
        ),
        "states": SchemaField(type=FieldType.LIST, optional=True, description="Accepted card states"),
        "state": SchemaField(type=FieldType.STRING, computed=True),
    }

    def read(self, data: ResourceData, meta) -> None:
        states = data.get("states")
        matches = [
            mean for mean in self.filter(data, self.fetch(meta))
            if not states or mean.get("state") in states
        ]
        if data.get("use_last_to_expire") and matches:
            matches = [max(matches, key=lambda mean: mean.get("expirationDate") or "")]

        self.record(data, self.select_one(matches, self.label))
