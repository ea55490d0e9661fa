# src/app/infra/db/base.py
"""
Abstract interfaces for the row-oriented data service.
This interface allows easy swapping between different storage backends.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from src.app.domain.models import (
    CreateRecipeCommand,
    ModificationErrorLog,
    ModificationRecord,
    PreferenceProfile,
    Recipe,
    RecipeQuery,
    StatisticsCounter,
)


class RecipeStore(ABC):
    """
    Thin data access over recipes, modification records, statistics
    counters and modification error logs. No business logic.

    Implementations:
    - SupabaseRecipeStore: PostgREST tables through supabase-py

    Write methods raise PersistenceError when the backend rejects the call.
    """

    @abstractmethod
    def get_recipe(self, recipe_id: int) -> Optional[Recipe]:
        """
        Fetch one recipe regardless of owner.

        Args:
            recipe_id: The recipe ID

        Returns:
            The recipe, or None if not found
        """
        pass

    @abstractmethod
    def find_recipe_id_by_name(
        self,
        owner_id: str,
        name: str,
        exclude_id: Optional[int] = None,
    ) -> Optional[int]:
        """
        Look up a recipe of one owner by exact name.

        Args:
            owner_id: Owner scope for the lookup
            name: Exact recipe name
            exclude_id: Recipe to ignore (the one being renamed)

        Returns:
            ID of the matching recipe, or None
        """
        pass

    @abstractmethod
    def list_recipes(
        self,
        owner_id: str,
        query: RecipeQuery,
    ) -> tuple[list[Recipe], int]:
        """
        Page through an owner's recipes.

        Args:
            owner_id: The owner
            query: Paging, sorting and name filter

        Returns:
            Tuple of (recipes on the page, total matching count)
        """
        pass

    @abstractmethod
    def insert_recipe(self, owner_id: str, command: CreateRecipeCommand) -> Recipe:
        """
        Insert a new recipe bound to `owner_id`.

        Raises:
            ConflictError: If the backend reports a name collision
            PersistenceError: On any other failure
        """
        pass

    @abstractmethod
    def update_recipe(self, recipe_id: int, fields: dict[str, Any]) -> Recipe:
        """
        Apply `fields` (domain field names) to a recipe row.

        Returns:
            The updated recipe
        """
        pass

    @abstractmethod
    def delete_recipe(self, recipe_id: int) -> None:
        pass

    @abstractmethod
    def insert_modification(self, record: ModificationRecord) -> None:
        pass

    @abstractmethod
    def delete_modifications(self, recipe_id: int) -> None:
        pass

    @abstractmethod
    def get_statistics(self, recipe_id: int) -> Optional[StatisticsCounter]:
        pass

    @abstractmethod
    def upsert_statistics(self, recipe_id: int, modification_count: int) -> None:
        """
        Create or overwrite the counter row of a recipe.

        Args:
            recipe_id: The recipe
            modification_count: New absolute value
        """
        pass

    @abstractmethod
    def delete_statistics(self, recipe_id: int) -> None:
        pass

    @abstractmethod
    def insert_modification_error(self, entry: ModificationErrorLog) -> None:
        pass


class PreferenceProvider(ABC):
    """
    Read-only access to dietary preference profiles.
    """

    @abstractmethod
    def get(self, user_id: str) -> Optional[PreferenceProfile]:
        """
        Fetch a user's profile.

        Args:
            user_id: The user

        Returns:
            The profile, or None when the user has not set one
        """
        pass


class PreferenceRepository(PreferenceProvider):
    """
    Preference access for the profile owner.
    """

    @abstractmethod
    def save(self, user_id: str, fields: dict[str, Any]) -> PreferenceProfile:
        """
        Create the user's profile or update it in place.

        Args:
            user_id: The user
            fields: Profile fields to write

        Returns:
            The stored profile
        """
        pass
