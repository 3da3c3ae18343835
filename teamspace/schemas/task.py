"""Task Pydantic schemas for API request/response models."""

from pydantic import BaseModel, ConfigDict, Field


class TaskCollaboratorsUpdate(BaseModel):
    """Schema for replacing a task's collaborator list."""

    model_config = ConfigDict(from_attributes=True)

    collaborators: list[str] = Field(default_factory=list, description="User IDs collaborating on the task")
