"""Category Pydantic schemas for API request/response models."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CategoryUpdate(BaseModel):
    """Schema for editing a category.

    The color is expected to come from the preset palette but the
    server accepts any value.
    """

    model_config = ConfigDict(from_attributes=True)

    name: str = Field(..., min_length=1, max_length=255, description="Category name")
    color: str = Field(..., min_length=1, max_length=32, description="Hex color")


class CategoryResponse(BaseModel):
    """Schema for category API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(description="Category unique identifier")
    name: str = Field(description="Category name")
    color: str = Field(description="Hex color")


class PaletteResponse(BaseModel):
    """Preset colors offered by the category picker."""

    colors: list[str] = Field(description="Hex colors in display order")
