"""Reverse DNS of an IP address."""
import ipaddress
import logging

from terraform_provider_ovh.domain.exceptions import ValidationError
from terraform_provider_ovh.domain.resource_data import ResourceData
from terraform_provider_ovh.domain.schema import FieldType, SchemaField

from .base_handler import OVHResourceHandler, path_escape

logger = logging.getLogger(__name__)


def reverse_path(ip_block: str, ip_reverse: str = "") -> str:
    path = f"/ip/{path_escape(ip_block)}/reverse"
    if ip_reverse:
        path += f"/{path_escape(ip_reverse)}"
    return path


class IpReverseResource(OVHResourceHandler):
    """Reverse record of one address inside an IP block."""

    schema = {
        "ip": SchemaField(
            type=FieldType.STRING, required=True, force_new=True,
            description="IP block the address belongs to (ex: 1.2.3.4/32)",
        ),
        "ipreverse": SchemaField(
            type=FieldType.STRING, optional=True, computed=True, force_new=True,
            description="Address to set the reverse of, defaults to the block address",
        ),
        "reverse": SchemaField(type=FieldType.STRING, required=True, force_new=True),
    }

    def create(self, data: ResourceData, meta) -> None:
        ip_block = data.get("ip")
        try:
            network = ipaddress.ip_network(ip_block, strict=False)
        except ValueError as e:
            raise ValidationError(f"Invalid IP block {ip_block}: {e}") from e

        ip_reverse, ok = data.get_ok("ipreverse")
        if not ok:
            ip_reverse = str(network.network_address)
            data.set("ipreverse", ip_reverse)
        else:
            try:
                in_block = ipaddress.ip_address(ip_reverse) in network
            except ValueError as e:
                raise ValidationError(f"Invalid ipreverse {ip_reverse}: {e}") from e
            if not in_block:
                raise ValidationError(f"ipreverse {ip_reverse} is not in block {ip_block}")

        logger.info(f"Setting reverse of {ip_reverse} to {data.get('reverse')}")
        result = self.client(meta).post(reverse_path(ip_block), {
            "ipReverse": ip_reverse,
            "reverse": data.get("reverse"),
        })
        data.set_id(result.get("ipReverse", ip_reverse))
        self.read(data, meta)

    def read(self, data: ResourceData, meta) -> None:
        result = self.read_or_forget(data, meta, reverse_path(data.get("ip"), data.id))
        if result is None:
            return
        data.set("ipreverse", result.get("ipReverse", data.id))
        data.set("reverse", result.get("reverse", ""))

    def delete(self, data: ResourceData, meta) -> None:
        logger.info(f"Deleting reverse of {data.id}")
        self.delete_if_exists(meta, reverse_path(data.get("ip"), data.id))
        data.set_id("")
