"""Task API routes."""

from uuid import UUID

from fastapi import APIRouter, status

from teamspace.api.deps import CurrentUser
from teamspace.schemas.common import ErrorResponse
from teamspace.schemas.task import TaskCollaboratorsUpdate
from teamspace.services.task_service import TaskService

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.put(
    "/{task_id}/collaborators",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={403: {"model": ErrorResponse, "description": "Caller is not an active company member"}},
    summary="Set task collaborators",
    description="Replaces the list of users collaborating on a task.",
)
async def update_task_collaborators(
    task_id: UUID,
    data: TaskCollaboratorsUpdate,
    user: CurrentUser,
) -> None:
    """Replace a task's collaborators."""
    service = TaskService()
    await service.update_task_collaborators(user, task_id, data.collaborators)
