"""DNS zones: zone data source, records and redirections."""
import logging

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

RECORD_FIELD_TYPES = [
    "A", "AAAA", "CAA", "CNAME", "DKIM", "DMARC", "DNAME", "LOC", "MX",
    "NAPTR", "NS", "PTR", "SPF", "SRV", "SSHFP", "TLSA", "TXT",
]
REDIRECTION_TYPES = ["visible", "visiblePermanent", "invisible"]
DEFAULT_TTL = 3600
MIN_TTL = 60


def zone_path(zone: str) -> str:
    return f"/domain/zone/{path_escape(zone)}"


def refresh_zone(client, zone: str) -> None:
    """Apply pending changes of a zone."""
    logger.debug(f"Refreshing zone {zone}")
    client.post(f"{zone_path(zone)}/refresh")


class DomainZoneDataSource(OVHDataSourceHandler):
    """Properties of a DNS zone."""

    schema = {
        "name": SchemaField(type=FieldType.STRING, required=True, description="Zone name"),
        "last_update": SchemaField(type=FieldType.STRING, computed=True),
        "has_dns_anycast": SchemaField(type=FieldType.BOOL, computed=True),
        "name_servers": SchemaField(type=FieldType.LIST, computed=True),
        "dnssec_supported": SchemaField(type=FieldType.BOOL, computed=True),
    }

    FIELD_MAP = {
        "last_update": "lastUpdate",
        "has_dns_anycast": "hasDnsAnycast",
        "name_servers": "nameServers",
        "dnssec_supported": "dnssecSupported",
    }

    def read(self, data: ResourceData, meta) -> None:
        name = data.get("name")
        zone = self.client(meta).get(zone_path(name))
        data.set_id(name)
        set_from_api(data, zone, self.FIELD_MAP)


class DomainZoneRecordResource(OVHResourceHandler):
    """DNS record of a zone."""

    schema = {
        "zone": SchemaField(type=FieldType.STRING, required=True, force_new=True),
        "subdomain": SchemaField(type=FieldType.STRING, optional=True, default=""),
        "fieldtype": SchemaField(
            type=FieldType.STRING, required=True, force_new=True,
            description=f"Record type, one of {', '.join(RECORD_FIELD_TYPES)}",
        ),
        "ttl": SchemaField(type=FieldType.INT, optional=True, default=DEFAULT_TTL),
        "target": SchemaField(type=FieldType.STRING, required=True),
    }

    FIELD_MAP = {
        "subdomain": "subDomain",
        "fieldtype": "fieldType",
        "ttl": "ttl",
        "target": "target",
    }

    def _validate(self, data: ResourceData) -> None:
        if data.get("fieldtype") not in RECORD_FIELD_TYPES:
            raise ValidationError(
                f"fieldtype must be one of {RECORD_FIELD_TYPES}, got {data.get('fieldtype')}"
            )
        if data.get("ttl") < MIN_TTL:
            raise ValidationError(f"ttl must be at least {MIN_TTL}, got {data.get('ttl')}")

    def _path(self, data: ResourceData) -> str:
        return f"{zone_path(data.get('zone'))}/record/{path_escape(data.id)}"

    def create(self, data: ResourceData, meta) -> None:
        self._validate(data)
        zone = data.get("zone")
        body = {
            "fieldType": data.get("fieldtype"),
            "subDomain": data.get("subdomain"),
            "target": data.get("target"),
            "ttl": data.get("ttl"),
        }

        logger.info(f"Creating {body['fieldType']} record {body['subDomain']!r} in zone {zone}")
        record = self.client(meta).post(f"{zone_path(zone)}/record", body)
        data.set_id(str(record["id"]))

        refresh_zone(self.client(meta), zone)
        self.read(data, meta)

    def read(self, data: ResourceData, meta) -> None:
        record = self.read_or_forget(data, meta, self._path(data))
        if record is None:
            return
        set_from_api(data, record, self.FIELD_MAP)

    def update(self, data: ResourceData, meta) -> None:
        self._validate(data)
        body = body_from_data(data, self.FIELD_MAP, skip=["fieldtype"], keep_zero=True)
        self.client(meta).put(self._path(data), body)
        refresh_zone(self.client(meta), data.get("zone"))
        self.read(data, meta)

    def delete(self, data: ResourceData, meta) -> None:
        logger.info(f"Deleting record {data.id} of zone {data.get('zone')}")
        self.delete_if_exists(meta, self._path(data))
        refresh_zone(self.client(meta), data.get("zone"))
        data.set_id("")


class DomainZoneRedirectionResource(OVHResourceHandler):
    """Web redirection of a zone subdomain."""

    schema = {
        "zone": SchemaField(type=FieldType.STRING, required=True, force_new=True),
        "subdomain": SchemaField(type=FieldType.STRING, optional=True, force_new=True, default=""),
        "type": SchemaField(
            type=FieldType.STRING, required=True, force_new=True,
            description=f"Redirection type, one of {', '.join(REDIRECTION_TYPES)}",
        ),
        "target": SchemaField(type=FieldType.STRING, required=True),
        "description": SchemaField(type=FieldType.STRING, optional=True),
        "keywords": SchemaField(type=FieldType.STRING, optional=True),
        "title": SchemaField(type=FieldType.STRING, optional=True),
    }

    FIELD_MAP = {
        "subdomain": "subDomain",
        "type": "type",
        "target": "target",
        "description": "description",
        "keywords": "keywords",
        "title": "title",
    }

    def _path(self, data: ResourceData) -> str:
        return f"{zone_path(data.get('zone'))}/redirection/{path_escape(data.id)}"

    def create(self, data: ResourceData, meta) -> None:
        if data.get("type") not in REDIRECTION_TYPES:
            raise ValidationError(f"type must be one of {REDIRECTION_TYPES}, got {data.get('type')}")
        zone = data.get("zone")
        body = body_from_data(data, self.FIELD_MAP)
        body["subDomain"] = data.get("subdomain")

        logger.info(f"Creating {body['type']} redirection {body['subDomain']!r} in zone {zone}")
        redirection = self.client(meta).post(f"{zone_path(zone)}/redirection", body)
        data.set_id(str(redirection["id"]))

        refresh_zone(self.client(meta), zone)
        self.read(data, meta)

    def read(self, data: ResourceData, meta) -> None:
        redirection = self.read_or_forget(data, meta, self._path(data))
        if redirection is None:
            return
        set_from_api(data, redirection, self.FIELD_MAP)

    def update(self, data: ResourceData, meta) -> None:
        body = body_from_data(data, self.FIELD_MAP, skip=["subdomain", "type"], keep_zero=True)
        self.client(meta).put(self._path(data), body)
        refresh_zone(self.client(meta), data.get("zone"))
        self.read(data, meta)

    def delete(self, data: ResourceData, meta) -> None:
        logger.info(f"Deleting redirection {data.id} of zone {data.get('zone')}")
        self.delete_if_exists(meta, self._path(data))
        refresh_zone(self.client(meta), data.get("zone"))
        data.set_id("")
