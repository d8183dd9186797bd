"""Public cloud region data sources."""
import logging

from terraform_provider_ovh.domain.resource_data import ResourceData
from terraform_provider_ovh.domain.schema import FieldType, SchemaField, env_default

from .base_handler import OVHDataSourceHandler, hash_strings, path_escape

logger = logging.getLogger(__name__)

PROJECT_ID_ENV_VAR = "OVH_PROJECT_ID"

SERVICE_STATUS_UP = "UP"


def project_id_field(**kwargs) -> SchemaField:
    """Schema field of the public cloud project id."""
    return SchemaField(
        type=FieldType.STRING,
        required=True,
        default_func=env_default(PROJECT_ID_ENV_VAR, None),
        description="Id of the cloud project",
        **kwargs
    )


def region_path(project_id: str, name: str = "") -> str:
    path = f"/cloud/project/{path_escape(project_id)}/region"
    if name:
        path += f"/{path_escape(name)}"
    return path


class CloudRegionDataSource(OVHDataSourceHandler):
    """Details and service status of one region of a cloud project."""

    schema = {
        "project_id": project_id_field(),
        "name": SchemaField(type=FieldType.STRING, required=True, description="Region name"),
        "continent_code": SchemaField(type=FieldType.STRING, computed=True),
        "datacenter_location": SchemaField(type=FieldType.STRING, computed=True),
        "services": SchemaField(
            type=FieldType.LIST, computed=True,
            description="Services of the region with their status",
        ),
    }

    def read(self, data: ResourceData, meta) -> None:
        project_id = data.get("project_id")
        name = data.get("name")

        logger.debug(f"Reading region {name} of cloud project {project_id}")
        region = self.client(meta).get(region_path(project_id, name))

        data.set_id(f"{project_id}_{name}")
        data.set("continent_code", region.get("continentCode", ""))
        data.set("datacenter_location", region.get("datacenterLocation", ""))
        data.set("services", [
            {"name": service.get("name", ""), "status": service.get("status", "")}
            for service in region.get("services") or []
        ])


class CloudRegionsDataSource(OVHDataSourceHandler):
    """Names of the regions of a cloud project, optionally filtered by service status."""

    schema = {
        "project_id": project_id_field(),
        "has_services_up": SchemaField(
            type=FieldType.LIST, optional=True,
            description="Only keep regions where all these services are UP",
        ),
        "names": SchemaField(type=FieldType.LIST, computed=True),
    }

    def read(self, data: ResourceData, meta) -> None:
        project_id = data.get("project_id")
        services_up = data.get("has_services_up")
        client = self.client(meta)

        names = client.get(region_path(project_id)) or []
        if services_up:
            selected = []
            for name in names:
                region = client.get(region_path(project_id, name))
                up = {
                    service.get("name") for service in region.get("services") or []
                    if service.get("status") == SERVICE_STATUS_UP
                }
                if all(service in up for service in services_up):
                    selected.append(name)
            names = selected

        names = sorted(names)
        data.set_id(hash_strings(names))
        data.set("names", names)
