from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from src.app.domain.models import PreferenceProfile


class PreferencesRequest(BaseModel):
    diet_type: Optional[str] = Field(default=None, max_length=100)
    daily_calorie_requirement: Optional[int] = Field(default=None, ge=0, le=20000)
    allergies: Optional[str] = None
    food_intolerances: Optional[str] = None
    preferred_cuisines: Optional[str] = None
    excluded_ingredients: Optional[str] = None
    macro_distribution_protein: Optional[int] = Field(default=None, ge=0, le=100)
    macro_distribution_fats: Optional[int] = Field(default=None, ge=0, le=100)
    macro_distribution_carbohydrates: Optional[int] = Field(default=None, ge=0, le=100)


class PreferencesResponse(PreferencesRequest):
    id: Optional[int] = None
    userId: str

    @classmethod
    def from_domain(cls, profile: PreferenceProfile) -> "PreferencesResponse":
        return cls(
            id=profile.id,
            userId=profile.user_id,
            diet_type=profile.diet_type,
            daily_calorie_requirement=profile.daily_calorie_requirement,
            allergies=profile.allergies,
            food_intolerances=profile.food_intolerances,
            preferred_cuisines=profile.preferred_cuisines,
            excluded_ingredients=profile.excluded_ingredients,
            macro_distribution_protein=profile.macro_distribution_protein,
            macro_distribution_fats=profile.macro_distribution_fats,
            macro_distribution_carbohydrates=profile.macro_distribution_carbohydrates,
        )
