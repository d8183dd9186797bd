"""Public cloud (OpenStack) users."""
import logging
import re
from typing import Dict

from terraform_provider_ovh.domain.resource_data import ResourceData
from terraform_provider_ovh.domain.schema import FieldType, SchemaField
from terraform_provider_ovh.infrastructure.exceptions import ResourceNotFoundError

from .base_handler import OVHResourceHandler, path_escape
from .cloud_region import project_id_field

logger = logging.getLogger(__name__)

USER_OK = "ok"
USER_CREATING = "creating"
USER_DELETING = "deleting"
USER_DELETED = "deleted"

# The openrc region is not known here; users override OS_REGION_NAME
OPENRC_REGION = "to_be_overriden"
OPENRC_EXPORT = re.compile(r"^\s*export\s+(OS_[A-Z_]+)=['\"]?([^'\"]*)['\"]?\s*$")


def user_path(project_id: str, user_id: str = "") -> str:
    path = f"/cloud/project/{path_escape(project_id)}/user"
    if user_id:
        path += f"/{path_escape(user_id)}"
    return path


def parse_openrc(content: str) -> Dict[str, str]:
    """Extract the ``export OS_*=...`` variables of an openrc script."""
    variables = {}
    for line in content.splitlines():
        match = OPENRC_EXPORT.match(line)
        if match:
            variables[match.group(1)] = match.group(2)
    return variables


class CloudUserResource(OVHResourceHandler):
    """OpenStack user of a public cloud project. The password is only known at creation."""

    schema = {
        "project_id": project_id_field(force_new=True),
        "description": SchemaField(
            type=FieldType.STRING, optional=True, force_new=True,
            description="User description",
        ),
        "username": SchemaField(type=FieldType.STRING, computed=True),
        "password": SchemaField(type=FieldType.STRING, computed=True, sensitive=True),
        "status": SchemaField(type=FieldType.STRING, computed=True),
        "creation_date": SchemaField(type=FieldType.STRING, computed=True),
        "roles": SchemaField(type=FieldType.LIST, computed=True),
        "openstack_rc": SchemaField(
            type=FieldType.MAP, computed=True,
            description="OpenStack environment variables of the user",
        ),
    }

    def _user_state(self, meta, project_id: str, user_id: str) -> str:
        try:
            user = self.client(meta).get(user_path(project_id, user_id))
        except ResourceNotFoundError:
            return USER_DELETED
        return user.get("status", "")

    def create(self, data: ResourceData, meta) -> None:
        project_id = data.get("project_id")
        body = {}
        description, ok = data.get_ok("description")
        if ok:
            body["description"] = description

        logger.info(f"Creating user in cloud project {project_id}")
        user = self.client(meta).post(user_path(project_id), body)
        user_id = str(user["id"])

        data.set_id(user_id)
        data.set("password", user.get("password", ""))

        self.client(meta).wait_for(
            lambda: self._user_state(meta, project_id, user_id),
            target=[USER_OK],
            pending=[USER_CREATING],
            description=f"cloud user {user_id}",
        )
        self.read(data, meta)

    def read(self, data: ResourceData, meta) -> None:
        project_id = data.get("project_id")
        user = self.read_or_forget(data, meta, user_path(project_id, data.id))
        if user is None:
            return

        data.set("username", user.get("username", ""))
        data.set("description", user.get("description", ""))
        data.set("status", user.get("status", ""))
        data.set("creation_date", user.get("creationDate", ""))
        data.set("roles", [role.get("name", "") for role in user.get("roles") or []])

        openrc = self.client(meta).get(
            f"{user_path(project_id, data.id)}/openrc",
            region=OPENRC_REGION,
            sdkVersion="v3",
        )
        data.set("openstack_rc", parse_openrc((openrc or {}).get("content", "")))

    def delete(self, data: ResourceData, meta) -> None:
        project_id = data.get("project_id")
        user_id = data.id

        logger.info(f"Deleting user {user_id} of cloud project {project_id}")
        self.delete_if_exists(meta, user_path(project_id, user_id))
        self.client(meta).wait_for(
            lambda: self._user_state(meta, project_id, user_id),
            target=[USER_DELETED],
            pending=[USER_OK, USER_DELETING],
            description=f"deletion of cloud user {user_id}",
        )
        data.set_id("")
