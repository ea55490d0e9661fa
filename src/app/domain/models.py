# src/app/domain/models.py
"""
Domain models for recipes, their audit trail and dietary preferences.
These are pure data structures with no infrastructure dependencies.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional

MANUAL_ACTOR = "manual"


class RecipeSource(str, Enum):
    """Where a recipe came from."""
    MANUAL = "manual"
    AI = "AI"


@dataclass
class Recipe:
    """
    A recipe owned by exactly one user.

    `content` holds the raw content envelope as stored; use
    `src.app.domain.content.content_text` to read it as text.
    """
    id: int
    name: str
    source: RecipeSource
    content: Any
    owner_id: str
    rating: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def has_rating(self) -> bool:
        """
        Display-side view of the rating.

        A stored 0 reads as "no rating" here while the store keeps it as an
        explicit value. Flagged for product clarification, do not normalize.
        """
        return bool(self.rating)


@dataclass
class CreateRecipeCommand:
    name: str
    source: RecipeSource
    content: Any
    rating: Optional[int] = None


@dataclass
class UpdateRecipeCommand:
    """Partial update. Fields left as None are not touched."""
    name: Optional[str] = None
    rating: Optional[int] = None
    content: Optional[Any] = None

    def to_fields(self) -> dict[str, Any]:
        fields: dict[str, Any] = {}
        if self.name is not None:
            fields["name"] = self.name
        if self.rating is not None:
            fields["rating"] = self.rating
        if self.content is not None:
            fields["content"] = self.content
        return fields


@dataclass
class ModificationRecord:
    """Append-only audit entry pairing content before and after a change."""
    recipe_id: int
    owner_id: str
    original_content: Any
    modified_content: Any
    ai_model: str = MANUAL_ACTOR
    timestamp: Optional[datetime] = None
    id: Optional[int] = None


@dataclass
class StatisticsCounter:
    """Derived per-recipe counters. Not authoritative."""
    recipe_id: int
    modification_count: int = 0
    search_count: int = 0
    last_updated: Optional[datetime] = None


@dataclass
class ModificationErrorLog:
    recipe_text: str
    error_code: int
    error_description: str
    ai_model: str
    timestamp: Optional[datetime] = None


@dataclass
class PreferenceProfile:
    """A user's dietary preferences. Every field is optional."""
    user_id: str
    id: Optional[int] = None
    diet_type: Optional[str] = None
    daily_calorie_requirement: Optional[int] = None
    allergies: Optional[str] = None
    food_intolerances: Optional[str] = None
    preferred_cuisines: Optional[str] = None
    excluded_ingredients: Optional[str] = None
    macro_distribution_protein: Optional[int] = None
    macro_distribution_fats: Optional[int] = None
    macro_distribution_carbohydrates: Optional[int] = None


class SortBy(str, Enum):
    NAME = "name"
    CREATED_AT = "created_at"
    RATING = "rating"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass
class RecipeQuery:
    page: int = 1
    limit: int = 10
    sort_by: SortBy = SortBy.CREATED_AT
    order: SortOrder = SortOrder.DESC
    search_term: Optional[str] = None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class RecipePage:
    recipes: list[Recipe]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        if self.limit <= 0:
            return 0
        return -(-self.total // self.limit)
