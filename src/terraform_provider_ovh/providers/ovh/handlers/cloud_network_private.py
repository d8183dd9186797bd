"""Public cloud private networks and their subnets."""
import ipaddress
import logging

from terraform_provider_ovh.domain.exceptions import ValidationError
from terraform_provider_ovh.domain.resource_data import ResourceData
from terraform_provider_ovh.domain.schema import FieldType, SchemaField
from terraform_provider_ovh.infrastructure.exceptions import ResourceNotFoundError

from .base_handler import OVHResourceHandler, path_escape
from .cloud_region import project_id_field

logger = logging.getLogger(__name__)

NETWORK_ACTIVE = "ACTIVE"
NETWORK_BUILDING = "BUILDING"
NETWORK_DELETED = "DELETED"


def network_path(project_id: str, network_id: str = "") -> str:
    path = f"/cloud/project/{path_escape(project_id)}/network/private"
    if network_id:
        path += f"/{path_escape(network_id)}"
    return path


class PrivateNetworkResource(OVHResourceHandler):
    """Private network of a public cloud project, spanning one or more regions."""

    schema = {
        "project_id": project_id_field(force_new=True),
        "name": SchemaField(type=FieldType.STRING, required=True, description="Name of the network"),
        "vlan_id": SchemaField(
            type=FieldType.INT, optional=True, force_new=True, default=0,
            description="VLAN id, between 0 and 4000",
        ),
        "regions": SchemaField(
            type=FieldType.LIST, optional=True, computed=True, force_new=True,
            description="Regions where the network is available",
        ),
        "regions_status": SchemaField(type=FieldType.LIST, computed=True),
        "status": SchemaField(type=FieldType.STRING, computed=True),
        "type": SchemaField(type=FieldType.STRING, computed=True),
    }

    def _validate(self, data: ResourceData) -> None:
        vlan_id = data.get("vlan_id")
        if not 0 <= vlan_id <= 4000:
            raise ValidationError(f"vlan_id must be between 0 and 4000, got {vlan_id}")

    def _network_state(self, meta, project_id: str, network_id: str) -> str:
        try:
            network = self.client(meta).get(network_path(project_id, network_id))
        except ResourceNotFoundError:
            return NETWORK_DELETED
        return network.get("status", "")

    def create(self, data: ResourceData, meta) -> None:
        self._validate(data)
        project_id = data.get("project_id")
        body = {
            "name": data.get("name"),
            "vlanId": data.get("vlan_id"),
        }
        regions = data.get("regions")
        if regions:
            body["regions"] = regions

        logger.info(f"Creating private network {body['name']} in cloud project {project_id}")
        network = self.client(meta).post(network_path(project_id), body)
        network_id = network["id"]

        self.client(meta).wait_for(
            lambda: self._network_state(meta, project_id, network_id),
            target=[NETWORK_ACTIVE],
            pending=[NETWORK_BUILDING],
            description=f"private network {network_id}",
        )
        data.set_id(network_id)
        self.read(data, meta)

    def read(self, data: ResourceData, meta) -> None:
        network = self.read_or_forget(data, meta, network_path(data.get("project_id"), data.id))
        if network is None:
            return

        regions_status = [
            {"region": region.get("region", ""), "status": region.get("status", "")}
            for region in network.get("regions") or []
        ]
        data.set("name", network.get("name", ""))
        data.set("vlan_id", network.get("vlanId", 0))
        data.set("status", network.get("status", ""))
        data.set("type", network.get("type", ""))
        data.set("regions", sorted(r["region"] for r in regions_status))
        data.set("regions_status", regions_status)

    def update(self, data: ResourceData, meta) -> None:
        if data.has_change("name"):
            self.client(meta).put(
                network_path(data.get("project_id"), data.id),
                {"name": data.get("name")}
            )
        self.read(data, meta)

    def delete(self, data: ResourceData, meta) -> None:
        project_id = data.get("project_id")
        network_id = data.id

        logger.info(f"Deleting private network {network_id} of cloud project {project_id}")
        self.delete_if_exists(meta, network_path(project_id, network_id))
        self.client(meta).wait_for(
            lambda: self._network_state(meta, project_id, network_id),
            target=[NETWORK_DELETED],
            pending=[NETWORK_ACTIVE, NETWORK_BUILDING, "DELETING"],
            description=f"deletion of private network {network_id}",
        )
        data.set_id("")


def subnet_path(project_id: str, network_id: str, subnet_id: str = "") -> str:
    path = f"{network_path(project_id, network_id)}/subnet"
    if subnet_id:
        path += f"/{path_escape(subnet_id)}"
    return path


class PrivateNetworkSubnetResource(OVHResourceHandler):
    """Subnet of a private network in one region. Every argument forces a new subnet."""

    schema = {
        "project_id": project_id_field(force_new=True),
        "network_id": SchemaField(type=FieldType.STRING, required=True, force_new=True),
        "region": SchemaField(type=FieldType.STRING, required=True, force_new=True),
        "start": SchemaField(
            type=FieldType.STRING, required=True, force_new=True,
            description="First IP of the DHCP allocation pool",
        ),
        "end": SchemaField(
            type=FieldType.STRING, required=True, force_new=True,
            description="Last IP of the DHCP allocation pool",
        ),
        "network": SchemaField(
            type=FieldType.STRING, required=True, force_new=True,
            description="Global network in CIDR format",
        ),
        "dhcp": SchemaField(type=FieldType.BOOL, optional=True, force_new=True, default=False),
        "no_gateway": SchemaField(type=FieldType.BOOL, optional=True, force_new=True, default=False),
        "gateway_ip": SchemaField(type=FieldType.STRING, computed=True),
        "cidr": SchemaField(type=FieldType.STRING, computed=True),
        "ip_pools": SchemaField(type=FieldType.LIST, computed=True),
    }

    def _validate(self, data: ResourceData) -> None:
        try:
            network = ipaddress.ip_network(data.get("network"), strict=False)
            start = ipaddress.ip_address(data.get("start"))
            end = ipaddress.ip_address(data.get("end"))
        except ValueError as e:
            raise ValidationError(f"Invalid subnet arguments: {e}") from e
        if start not in network or end not in network:
            raise ValidationError(f"start and end must belong to {network}")
        if start > end:
            raise ValidationError(f"start {start} must not be after end {end}")

    def create(self, data: ResourceData, meta) -> None:
        self._validate(data)
        project_id = data.get("project_id")
        network_id = data.get("network_id")
        body = {
            "start": data.get("start"),
            "end": data.get("end"),
            "network": data.get("network"),
            "region": data.get("region"),
            "dhcp": data.get("dhcp"),
            "noGateway": data.get("no_gateway"),
        }

        logger.info(f"Creating subnet {body['network']} in private network {network_id}")
        subnet = self.client(meta).post(subnet_path(project_id, network_id), body)
        data.set_id(subnet["id"])
        self.read(data, meta)

    def read(self, data: ResourceData, meta) -> None:
        # The API only lists subnets, there is no GET by id
        subnets = self.read_or_forget(
            data, meta, subnet_path(data.get("project_id"), data.get("network_id"))
        )
        if subnets is None:
            return

        subnet = next((s for s in subnets if s.get("id") == data.id), None)
        if subnet is None:
            logger.warning(f"Subnet {data.id} not found, removing it from state")
            data.set_id("")
            return

        ip_pools = [
            {
                "network": pool.get("network", ""),
                "region": pool.get("region", ""),
                "dhcp": pool.get("dhcp", False),
                "start": pool.get("start", ""),
                "end": pool.get("end", ""),
            }
            for pool in subnet.get("ipPools") or []
        ]
        data.set("gateway_ip", subnet.get("gatewayIp") or "")
        data.set("cidr", subnet.get("cidr", ""))
        data.set("ip_pools", ip_pools)
        if ip_pools:
            data.set("dhcp", ip_pools[0]["dhcp"])
            data.set("start", ip_pools[0]["start"])
            data.set("end", ip_pools[0]["end"])
            data.set("network", ip_pools[0]["network"])
            data.set("region", ip_pools[0]["region"])
        data.set("no_gateway", not subnet.get("gatewayIp"))

    def delete(self, data: ResourceData, meta) -> None:
        logger.info(f"Deleting subnet {data.id} of private network {data.get('network_id')}")
        self.delete_if_exists(
            meta, subnet_path(data.get("project_id"), data.get("network_id"), data.id)
        )
        data.set_id("")
