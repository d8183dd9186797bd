"""Attachment of a public cloud project to a vRack."""
import logging

from terraform_provider_ovh.domain.resource_data import ResourceData
from terraform_provider_ovh.domain.schema import FieldType, SchemaField, env_default
from terraform_provider_ovh.infrastructure.exceptions import ResourceNotFoundError

from .base_handler import OVHResourceHandler, path_escape
from .cloud_region import project_id_field

logger = logging.getLogger(__name__)

VRACK_ID_ENV_VAR = "OVH_VRACK_ID"

TASK_DONE = "done"
TASK_PENDING = ["init", "todo", "doing"]


def vrack_path(vrack_id: str) -> str:
    return f"/vrack/{path_escape(vrack_id)}"


class VRackCloudProjectResource(OVHResourceHandler):
    """Attach a cloud project to a vRack. Both arguments force a new attachment."""

    schema = {
        "vrack_id": SchemaField(
            type=FieldType.STRING, required=True, force_new=True,
            default_func=env_default(VRACK_ID_ENV_VAR, None),
            description="Service name of the vRack",
        ),
        "project_id": project_id_field(force_new=True),
    }

    def _task_state(self, meta, vrack_id: str, task_id) -> str:
        try:
            task = self.client(meta).get(f"{vrack_path(vrack_id)}/task/{path_escape(task_id)}")
        except ResourceNotFoundError:
            # Finished tasks are removed
            return TASK_DONE
        return task.get("status", "")

    def _wait_task(self, meta, vrack_id: str, task: dict) -> None:
        task_id = task["id"]
        self.client(meta).wait_for(
            lambda: self._task_state(meta, vrack_id, task_id),
            target=[TASK_DONE],
            pending=TASK_PENDING,
            description=f"vrack {vrack_id} task {task_id}",
        )

    def _attachment_path(self, vrack_id: str, project_id: str) -> str:
        return f"{vrack_path(vrack_id)}/cloudProject/{path_escape(project_id)}"

    def create(self, data: ResourceData, meta) -> None:
        vrack_id = data.get("vrack_id")
        project_id = data.get("project_id")

        logger.info(f"Attaching cloud project {project_id} to vrack {vrack_id}")
        task = self.client(meta).post(f"{vrack_path(vrack_id)}/cloudProject", {"project": project_id})
        self._wait_task(meta, vrack_id, task)

        data.set_id(f"vrack_{vrack_id}-cloudproject_{project_id}")
        self.read(data, meta)

    def read(self, data: ResourceData, meta) -> None:
        attachment = self.read_or_forget(
            data, meta, self._attachment_path(data.get("vrack_id"), data.get("project_id"))
        )
        if attachment is None:
            return
        data.set("vrack_id", attachment.get("vrack", data.get("vrack_id")))
        data.set("project_id", attachment.get("project", data.get("project_id")))

    def delete(self, data: ResourceData, meta) -> None:
        vrack_id = data.get("vrack_id")
        project_id = data.get("project_id")

        logger.info(f"Detaching cloud project {project_id} from vrack {vrack_id}")
        task = self.delete_if_exists(meta, self._attachment_path(vrack_id, project_id))
        if task:
            self._wait_task(meta, vrack_id, task)
        data.set_id("")
