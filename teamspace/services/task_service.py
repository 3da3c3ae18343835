"""Task business logic service."""

from uuid import UUID

from teamspace.schemas.auth import UserContext
from teamspace.services.company_user_service import CompanyUserService


class TaskService:
    """Service for task fields edited outside the task editor."""

    def __init__(self) -> None:
        """Initialize task service."""
        self.members = CompanyUserService()

    async def update_task_collaborators(
        self,
        caller: UserContext | None,
        task_id: UUID,
        collaborators: list[str],
    ) -> None:
        """Replace the collaborator list of a task.

        The caller must be an active company member; the write runs under
        their token.

        Args:
            caller: The authenticated user.
            task_id: The task's UUID.
            collaborators: User IDs that collaborate on the task.
        """
        client = self.members.member_client(caller)
        client.table("tasks").update({"collaborators": collaborators}).eq(
            "id", str(task_id)
        ).execute()
