"""
Recipe Schemas
Pydantic models for recipe input and output.
"""

import uuid
from datetime import datetime
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.recipe import RecipeCategory
from app.schemas.user import UserSummary


def _as_list(v: Any) -> Any:
    """Accept a single string where a list of strings is expected."""
    if isinstance(v, str):
        return [v]
    return v


def _clean_items(v: List[str]) -> List[str]:
    items = [item.strip() for item in v if item and item.strip()]
    if not items:
        raise ValueError("At least one entry is required")
    return items


class RecipeBase(BaseModel):
    title: str = Field(..., min_length=3, max_length=100)
    description: str = Field(..., min_length=1)
    ingredients: List[str] = Field(..., min_length=1)
    steps: List[str] = Field(..., min_length=1)
    image_url: str = Field("", max_length=1024)
    cooking_time: int = Field(..., ge=1, description="Cooking time in minutes")
    category: RecipeCategory

    @field_validator("title", "description", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("ingredients", "steps", mode="before")
    @classmethod
    def wrap_single(cls, v: Any) -> Any:
        return _as_list(v)

    @field_validator("ingredients", "steps")
    @classmethod
    def clean_items(cls, v: List[str]) -> List[str]:
        return _clean_items(v)


class RecipeCreate(RecipeBase):
    pass


class RecipeUpdate(BaseModel):
    """Partial update. The owner is not part of the payload and cannot change."""
    title: Optional[str] = Field(None, min_length=3, max_length=100)
    description: Optional[str] = Field(None, min_length=1)
    ingredients: Optional[List[str]] = None
    steps: Optional[List[str]] = None
    image_url: Optional[str] = Field(None, max_length=1024)
    cooking_time: Optional[int] = Field(None, ge=1)
    category: Optional[RecipeCategory] = None

    @field_validator("title", "description", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("ingredients", "steps", mode="before")
    @classmethod
    def wrap_single(cls, v: Any) -> Any:
        return _as_list(v)

    @field_validator("ingredients", "steps")
    @classmethod
    def clean_items(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return v
        return _clean_items(v)


class RecipeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    description: str
    ingredients: List[str]
    steps: List[str]
    image_url: str
    cooking_time: int
    category: RecipeCategory
    owner: UserSummary
    created_at: datetime
    updated_at: datetime


class CategoryStats(BaseModel):
    category: RecipeCategory
    count: int
    avg_cooking_time: float


class IngredientCount(BaseModel):
    name: str
    count: int
