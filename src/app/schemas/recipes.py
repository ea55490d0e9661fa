from __future__ import annotations

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from src.app.domain.content import validate_text_for_ai
from src.app.domain.models import Recipe, StatisticsCounter


class RecipeResponse(BaseModel):
    id: int
    name: str
    rating: Optional[int] = None
    source: Literal["manual", "AI"]
    recipe: Any = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, recipe: Recipe) -> "RecipeResponse":
        return cls(
            id=recipe.id,
            name=recipe.name,
            rating=recipe.rating,
            source=recipe.source.value,
            recipe=recipe.content,
            created_at=recipe.created_at,
            updated_at=recipe.updated_at,
        )


class PaginationMetadata(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int


class RecipeListResponse(BaseModel):
    data: list[RecipeResponse]
    pagination: PaginationMetadata


class CreateRecipeRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    rating: Optional[int] = Field(default=None, ge=1, le=10)
    source: Literal["manual", "AI"]
    recipe: Any

    @field_validator("recipe")
    @classmethod
    def _recipe_required(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("Recipe content is required")
        return value


class UpdateRecipeRequest(BaseModel):
    recipeId: int
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    rating: Optional[int] = Field(default=None, ge=1, le=10)
    recipe: Any = None


class DeleteRecipeRequest(BaseModel):
    recipeId: int


class DeleteRecipeResponse(BaseModel):
    success: bool = True


class ModifyRecipeRequest(BaseModel):
    recipe_text: str

    @field_validator("recipe_text")
    @classmethod
    def _length_within_bounds(cls, value: str) -> str:
        # bounds apply to the trimmed text; the raw value is passed on untouched
        error = validate_text_for_ai(value)
        if error:
            raise ValueError(error)
        return value


class ModifyRecipeResponse(BaseModel):
    modified_recipe: str


class StatisticsResponse(BaseModel):
    recipe_id: int
    modification_count: int
    search_count: int
    last_updated: Optional[datetime] = None

    @classmethod
    def from_domain(cls, stats: StatisticsCounter) -> "StatisticsResponse":
        return cls(
            recipe_id=stats.recipe_id,
            modification_count=stats.modification_count,
            search_count=stats.search_count,
            last_updated=stats.last_updated,
        )
