"""IP load balancing: service lookup, TCP farms, servers, frontends and HTTP routes."""
import logging
from typing import Any, Dict, Optional

from terraform_provider_ovh.domain.exceptions import ValidationError
from terraform_provider_ovh.domain.resource_data import ResourceData
from terraform_provider_ovh.domain.schema import FieldType, SchemaField

from .base_handler import (
    OVHDataSourceHandler,
    OVHResourceHandler,
    body_from_data,
    path_escape,
    set_from_api,
)

logger = logging.getLogger(__name__)

BALANCE_TYPES = ["first", "leastconn", "roundrobin", "source"]
STICKINESS_TYPES = ["sourceIp"]
SERVER_STATUSES = ["active", "inactive"]
PROXY_PROTOCOL_VERSIONS = ["v1", "v2", "v2-ssl", "v2-ssl-cn"]
ROUTE_ACTION_TYPES = ["redirect", "reject", "farm"]
RULE_MATCHES = ["contains", "endswith", "exists", "in", "internal", "is", "matches", "startswith"]

PROBE_FIELD_MAP = {
    "type": "type",
    "port": "port",
    "interval": "interval",
    "match": "match",
    "negate": "negate",
    "pattern": "pattern",
    "force_ssl": "forceSsl",
    "url": "url",
    "method": "method",
}


def service_path(service_name: str) -> str:
    return f"/ipLoadbalancing/{path_escape(service_name)}"


def check_choice(value: Any, choices, field: str) -> None:
    if value and value not in choices:
        raise ValidationError(f"{field} must be one of {choices}, got {value}")


def probe_to_api(probe: Dict[str, Any]) -> Dict[str, Any]:
    return {PROBE_FIELD_MAP[k]: v for k, v in probe.items() if k in PROBE_FIELD_MAP and v is not None}


def probe_from_api(probe: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if not probe:
        return {}
    reverse = {api_key: state_key for state_key, api_key in PROBE_FIELD_MAP.items()}
    return {reverse[k]: v for k, v in probe.items() if k in reverse and v is not None}


class IpLoadbalancingDataSource(OVHDataSourceHandler):
    """Find a single IP load balancing service from any of its attributes."""

    FIELD_MAP = {
        "service_name": "serviceName",
        "display_name": "displayName",
        "ipv4": "ipv4",
        "ipv6": "ipv6",
        "ip_loadbalancing": "ipLoadbalancing",
        "offer": "offer",
        "state": "state",
        "ssl_configuration": "sslConfiguration",
        "vrack_eligibility": "vrackEligibility",
        "vrack_name": "vrackName",
        "zone": "zone",
        "metrics_token": "metricsToken",
    }
    FILTERS = [
        "service_name", "display_name", "ipv4", "ipv6", "ip_loadbalancing",
        "offer", "state", "ssl_configuration", "vrack_eligibility", "vrack_name",
    ]

    schema = {
        "service_name": SchemaField(type=FieldType.STRING, optional=True, computed=True),
        "display_name": SchemaField(type=FieldType.STRING, optional=True, computed=True),
        "ipv4": SchemaField(type=FieldType.STRING, optional=True, computed=True),
        "ipv6": SchemaField(type=FieldType.STRING, optional=True, computed=True),
        "ip_loadbalancing": SchemaField(type=FieldType.STRING, optional=True, computed=True),
        "offer": SchemaField(type=FieldType.STRING, optional=True, computed=True),
        "state": SchemaField(type=FieldType.STRING, optional=True, computed=True),
        "ssl_configuration": SchemaField(type=FieldType.STRING, optional=True, computed=True),
        "vrack_eligibility": SchemaField(type=FieldType.BOOL, optional=True, computed=True),
        "vrack_name": SchemaField(type=FieldType.STRING, optional=True, computed=True),
        "zone": SchemaField(type=FieldType.LIST, computed=True),
        "metrics_token": SchemaField(type=FieldType.STRING, computed=True, sensitive=True),
    }

    def read(self, data: ResourceData, meta) -> None:
        client = self.client(meta)
        filters = {}
        for key in self.FILTERS:
            value, ok = data.get_ok(key)
            if ok:
                filters[self.FIELD_MAP[key]] = value

        services = []
        for service_name in client.get("/ipLoadbalancing") or []:
            service = client.get(service_path(service_name))
            if all(service.get(api_key) == value for api_key, value in filters.items()):
                services.append(service)

        service = self.select_one(services, "ip load balancing")
        data.set_id(service["serviceName"])
        set_from_api(data, service, self.FIELD_MAP)


class TcpFarmResource(OVHResourceHandler):
    """TCP backend farm of an IP load balancing service."""

    FIELD_MAP = {
        "balance": "balance",
        "display_name": "displayName",
        "port": "port",
        "stickiness": "stickiness",
        "vrack_network_id": "vrackNetworkId",
        "zone": "zone",
    }

    schema = {
        "service_name": SchemaField(type=FieldType.STRING, required=True, force_new=True),
        "zone": SchemaField(type=FieldType.STRING, required=True, force_new=True),
        "balance": SchemaField(type=FieldType.STRING, optional=True),
        "display_name": SchemaField(type=FieldType.STRING, optional=True),
        "port": SchemaField(type=FieldType.INT, optional=True),
        "stickiness": SchemaField(type=FieldType.STRING, optional=True),
        "vrack_network_id": SchemaField(type=FieldType.INT, optional=True),
        "probe": SchemaField(
            type=FieldType.MAP, optional=True,
            description="Health probe: type, port, interval, match, negate, pattern, force_ssl, url, method",
        ),
    }

    def _path(self, data: ResourceData, farm_id: str = "") -> str:
        path = f"{service_path(data.get('service_name'))}/tcp/farm"
        if farm_id:
            path += f"/{path_escape(farm_id)}"
        return path

    def _body(self, data: ResourceData, update: bool = False) -> Dict[str, Any]:
        check_choice(data.get("balance"), BALANCE_TYPES, "balance")
        check_choice(data.get("stickiness"), STICKINESS_TYPES, "stickiness")
        body = body_from_data(data, self.FIELD_MAP, skip=["zone"] if update else (), keep_zero=update)
        probe, ok = data.get_ok("probe")
        if ok:
            body["probe"] = probe_to_api(probe)
        return body

    def create(self, data: ResourceData, meta) -> None:
        farm = self.client(meta).post(self._path(data), self._body(data))
        data.set_id(str(farm["farmId"]))
        logger.info(f"Created tcp farm {data.id} on {data.get('service_name')}")
        self.read(data, meta)

    def read(self, data: ResourceData, meta) -> None:
        farm = self.read_or_forget(data, meta, self._path(data, data.id))
        if farm is None:
            return
        set_from_api(data, farm, self.FIELD_MAP)
        data.set("probe", probe_from_api(farm.get("probe")))

    def update(self, data: ResourceData, meta) -> None:
        self.client(meta).put(self._path(data, data.id), self._body(data, update=True))
        self.read(data, meta)

    def delete(self, data: ResourceData, meta) -> None:
        self.delete_if_exists(meta, self._path(data, data.id))
        data.set_id("")


class TcpFarmServerResource(OVHResourceHandler):
    """Backend server of a TCP farm."""

    FIELD_MAP = {
        "display_name": "displayName",
        "address": "address",
        "port": "port",
        "proxy_protocol_version": "proxyProtocolVersion",
        "weight": "weight",
        "probe": "probe",
        "ssl": "ssl",
        "backup": "backup",
        "status": "status",
    }

    schema = {
        "service_name": SchemaField(type=FieldType.STRING, required=True, force_new=True),
        "farm_id": SchemaField(type=FieldType.INT, required=True, force_new=True),
        "address": SchemaField(type=FieldType.STRING, required=True, force_new=True),
        "status": SchemaField(type=FieldType.STRING, required=True),
        "display_name": SchemaField(type=FieldType.STRING, optional=True),
        "port": SchemaField(type=FieldType.INT, optional=True),
        "proxy_protocol_version": SchemaField(type=FieldType.STRING, optional=True),
        "weight": SchemaField(type=FieldType.INT, optional=True, default=1),
        "probe": SchemaField(type=FieldType.BOOL, optional=True, default=False),
        "ssl": SchemaField(type=FieldType.BOOL, optional=True, default=False),
        "backup": SchemaField(type=FieldType.BOOL, optional=True, default=False),
        "cookie": SchemaField(type=FieldType.STRING, computed=True),
    }

    def _path(self, data: ResourceData, server_id: str = "") -> str:
        path = f"{service_path(data.get('service_name'))}/tcp/farm/{path_escape(data.get('farm_id'))}/server"
        if server_id:
            path += f"/{path_escape(server_id)}"
        return path

    def _validate(self, data: ResourceData) -> None:
        if data.get("status") not in SERVER_STATUSES:
            raise ValidationError(f"status must be one of {SERVER_STATUSES}, got {data.get('status')}")
        check_choice(data.get("proxy_protocol_version"), PROXY_PROTOCOL_VERSIONS, "proxy_protocol_version")
        if not 1 <= data.get("weight") <= 256:
            raise ValidationError(f"weight must be between 1 and 256, got {data.get('weight')}")

    def create(self, data: ResourceData, meta) -> None:
        self._validate(data)
        body = body_from_data(data, self.FIELD_MAP, keep_zero=True)
        server = self.client(meta).post(self._path(data), body)
        data.set_id(str(server["serverId"]))
        logger.info(f"Created server {data.id} in tcp farm {data.get('farm_id')}")
        self.read(data, meta)

    def read(self, data: ResourceData, meta) -> None:
        server = self.read_or_forget(data, meta, self._path(data, data.id))
        if server is None:
            return
        set_from_api(data, server, self.FIELD_MAP)
        data.set("cookie", server.get("cookie") or "")

    def update(self, data: ResourceData, meta) -> None:
        self._validate(data)
        body = body_from_data(data, self.FIELD_MAP, skip=["address"], keep_zero=True)
        self.client(meta).put(self._path(data, data.id), body)
        self.read(data, meta)

    def delete(self, data: ResourceData, meta) -> None:
        self.delete_if_exists(meta, self._path(data, data.id))
        data.set_id("")


class TcpFrontendResource(OVHResourceHandler):
    """TCP frontend of an IP load balancing service."""

    FIELD_MAP = {
        "display_name": "displayName",
        "port": "port",
        "zone": "zone",
        "allowed_source": "allowedSource",
        "dedicated_ipfo": "dedicatedIpfo",
        "default_farm_id": "defaultFarmId",
        "default_ssl_id": "defaultSslId",
        "disabled": "disabled",
        "ssl": "ssl",
    }

    schema = {
        "service_name": SchemaField(type=FieldType.STRING, required=True, force_new=True),
        "port": SchemaField(
            type=FieldType.STRING, required=True,
            description="Port(s) attached to the frontend, comma separated or ranges",
        ),
        "zone": SchemaField(type=FieldType.STRING, required=True, force_new=True),
        "display_name": SchemaField(type=FieldType.STRING, optional=True),
        "allowed_source": SchemaField(type=FieldType.LIST, optional=True),
        "dedicated_ipfo": SchemaField(type=FieldType.LIST, optional=True),
        "default_farm_id": SchemaField(type=FieldType.INT, optional=True, computed=True),
        "default_ssl_id": SchemaField(type=FieldType.INT, optional=True, computed=True),
        "disabled": SchemaField(type=FieldType.BOOL, optional=True, default=False),
        "ssl": SchemaField(type=FieldType.BOOL, optional=True, default=False),
    }

    def _path(self, data: ResourceData, frontend_id: str = "") -> str:
        path = f"{service_path(data.get('service_name'))}/tcp/frontend"
        if frontend_id:
            path += f"/{path_escape(frontend_id)}"
        return path

    def create(self, data: ResourceData, meta) -> None:
        body = body_from_data(data, self.FIELD_MAP)
        frontend = self.client(meta).post(self._path(data), body)
        data.set_id(str(frontend["frontendId"]))
        logger.info(f"Created tcp frontend {data.id} on {data.get('service_name')}")
        self.read(data, meta)

    def read(self, data: ResourceData, meta) -> None:
        frontend = self.read_or_forget(data, meta, self._path(data, data.id))
        if frontend is None:
            return
        set_from_api(data, frontend, self.FIELD_MAP)

    def update(self, data: ResourceData, meta) -> None:
        body = body_from_data(data, self.FIELD_MAP, skip=["zone"], keep_zero=True)
        self.client(meta).put(self._path(data, data.id), body)
        self.read(data, meta)

    def delete(self, data: ResourceData, meta) -> None:
        self.delete_if_exists(meta, self._path(data, data.id))
        data.set_id("")


class HttpRouteResource(OVHResourceHandler):
    """HTTP route of an IP load balancing service."""

    FIELD_MAP = {
        "display_name": "displayName",
        "weight": "weight",
        "frontend_id": "frontendId",
    }

    schema = {
        "service_name": SchemaField(type=FieldType.STRING, required=True, force_new=True),
        "action": SchemaField(
            type=FieldType.MAP, required=True,
            description="Action of the route: type (redirect, reject, farm), target, status",
        ),
        "display_name": SchemaField(type=FieldType.STRING, optional=True),
        "weight": SchemaField(type=FieldType.INT, optional=True, computed=True),
        "frontend_id": SchemaField(type=FieldType.INT, optional=True, computed=True),
        "status": SchemaField(type=FieldType.STRING, computed=True),
    }

    def _path(self, data: ResourceData, route_id: str = "") -> str:
        path = f"{service_path(data.get('service_name'))}/http/route"
        if route_id:
            path += f"/{path_escape(route_id)}"
        return path

    def _body(self, data: ResourceData, update: bool = False) -> Dict[str, Any]:
        action = data.get("action")
        if action.get("type") not in ROUTE_ACTION_TYPES:
            raise ValidationError(f"action type must be one of {ROUTE_ACTION_TYPES}, got {action.get('type')}")
        body = body_from_data(data, self.FIELD_MAP, keep_zero=update)
        body["action"] = {k: action[k] for k in ("type", "target", "status") if action.get(k) is not None}
        return body

    def create(self, data: ResourceData, meta) -> None:
        route = self.client(meta).post(self._path(data), self._body(data))
        data.set_id(str(route["routeId"]))
        logger.info(f"Created http route {data.id} on {data.get('service_name')}")
        self.read(data, meta)

    def read(self, data: ResourceData, meta) -> None:
        route = self.read_or_forget(data, meta, self._path(data, data.id))
        if route is None:
            return
        set_from_api(data, route, self.FIELD_MAP)
        data.set("action", {k: v for k, v in (route.get("action") or {}).items() if v is not None})
        data.set("status", route.get("status", ""))

    def update(self, data: ResourceData, meta) -> None:
        self.client(meta).put(self._path(data, data.id), self._body(data, update=True))
        self.read(data, meta)

    def delete(self, data: ResourceData, meta) -> None:
        self.delete_if_exists(meta, self._path(data, data.id))
        data.set_id("")


class HttpRouteRuleResource(OVHResourceHandler):
    """Matching rule of an HTTP route."""

    FIELD_MAP = {
        "display_name": "displayName",
        "field": "field",
        "match": "match",
        "negate": "negate",
        "pattern": "pattern",
        "sub_field": "subField",
    }

    schema = {
        "service_name": SchemaField(type=FieldType.STRING, required=True, force_new=True),
        "route_id": SchemaField(type=FieldType.STRING, required=True, force_new=True),
        "field": SchemaField(type=FieldType.STRING, required=True),
        "match": SchemaField(type=FieldType.STRING, required=True),
        "display_name": SchemaField(type=FieldType.STRING, optional=True),
        "negate": SchemaField(type=FieldType.BOOL, optional=True, default=False),
        "pattern": SchemaField(type=FieldType.STRING, optional=True),
        "sub_field": SchemaField(type=FieldType.STRING, optional=True),
    }

    def _path(self, data: ResourceData, rule_id: str = "") -> str:
        path = (f"{service_path(data.get('service_name'))}/http/route/"
                f"{path_escape(data.get('route_id'))}/rule")
        if rule_id:
            path += f"/{path_escape(rule_id)}"
        return path

    def create(self, data: ResourceData, meta) -> None:
        check_choice(data.get("match"), RULE_MATCHES, "match")
        rule = self.client(meta).post(self._path(data), body_from_data(data, self.FIELD_MAP))
        data.set_id(str(rule["ruleId"]))
        logger.info(f"Created rule {data.id} on http route {data.get('route_id')}")
        self.read(data, meta)

    def read(self, data: ResourceData, meta) -> None:
        rule = self.read_or_forget(data, meta, self._path(data, data.id))
        if rule is None:
            return
        set_from_api(data, rule, self.FIELD_MAP)

    def update(self, data: ResourceData, meta) -> None:
        check_choice(data.get("match"), RULE_MATCHES, "match")
        body = body_from_data(data, self.FIELD_MAP, keep_zero=True)
        self.client(meta).put(self._path(data, data.id), body)
        self.read(data, meta)

    def delete(self, data: ResourceData, meta) -> None:
        self.delete_if_exists(meta, self._path(data, data.id))
        data.set_id("")


class RefreshResource(OVHResourceHandler):
    """Applies pending configuration of an IP load balancing service on creation."""

    schema = {
        "service_name": SchemaField(type=FieldType.STRING, required=True, force_new=True),
        "keepers": SchemaField(
            type=FieldType.LIST, optional=True, force_new=True,
            description="Values whose change triggers a new refresh",
        ),
    }

    def create(self, data: ResourceData, meta) -> None:
        service_name = data.get("service_name")
        task = self.client(meta).post(f"{service_path(service_name)}/refresh")
        data.set_id(str(task["id"]))
        logger.info(f"Refresh task {data.id} started on {service_name}")

    def read(self, data: ResourceData, meta) -> None:
        pass

    def delete(self, data: ResourceData, meta) -> None:
        data.set_id("")
