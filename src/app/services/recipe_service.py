# src/app/services/recipe_service.py
"""
Recipe mutation service.
Creates, updates and deletes recipes while keeping ownership, per-owner
name uniqueness, the modification audit trail and statistics counters.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from src.app.domain.errors import ConflictError, RecipeNotFoundError, UnauthorizedError
from src.app.domain.models import (
    MANUAL_ACTOR,
    CreateRecipeCommand,
    ModificationRecord,
    Recipe,
    RecipePage,
    RecipeQuery,
    StatisticsCounter,
    UpdateRecipeCommand,
)
from src.app.infra.db.base import RecipeStore

logger = logging.getLogger(__name__)


class RecipeMutationService:
    """
    Service for changing a user's recipe collection.

    The audit record, statistics counter and row update performed by
    `update_recipe` (and the cascade in `delete_recipe`) are separate store
    calls with no transaction around them. A failure part way through raises
    PersistenceError and leaves the earlier writes in place.
    """

    def __init__(self, store: RecipeStore):
        self._store = store

    def check_name_exists(
        self,
        name: str,
        owner_id: str,
        exclude_id: Optional[int] = None,
    ) -> bool:
        return self._store.find_recipe_id_by_name(owner_id, name, exclude_id=exclude_id) is not None

    def list_recipes(self, owner_id: str, query: RecipeQuery) -> RecipePage:
        recipes, total = self._store.list_recipes(owner_id, query)
        return RecipePage(recipes=recipes, total=total, page=query.page, limit=query.limit)

    def create_recipe(self, command: CreateRecipeCommand, owner_id: str) -> Recipe:
        """
        Create a recipe owned by `owner_id`.

        Args:
            command: Name, source, content and optional rating
            owner_id: The acting user

        Returns:
            The stored recipe

        Raises:
            ConflictError: If the owner already has a recipe with this name
        """
        if self.check_name_exists(command.name, owner_id):
            raise ConflictError(command.name)

        recipe = self._store.insert_recipe(owner_id, command)
        logger.info("Recipe created: id=%s, user=%s, source=%s", recipe.id, owner_id, recipe.source.value)
        return recipe

    def update_recipe(
        self,
        recipe_id: int,
        owner_id: str,
        patch: UpdateRecipeCommand,
        ai_model: str = MANUAL_ACTOR,
    ) -> Recipe:
        """
        Apply a partial update to a recipe.

        When the patch carries content, one modification record is written
        and the statistics counter is incremented before the row is updated.

        Args:
            recipe_id: The recipe to update
            owner_id: The acting user, must own the recipe
            patch: Fields to change
            ai_model: Actor recorded in the modification record

        Returns:
            The updated recipe

        Raises:
            RecipeNotFoundError: If the recipe does not exist
            UnauthorizedError: If the recipe belongs to someone else
            ConflictError: If the new name is taken by another recipe of the owner
            PersistenceError: If a write fails mid-chain
        """
        existing = self._get_owned(recipe_id, owner_id)

        if patch.name and patch.name != existing.name:
            if self.check_name_exists(patch.name, owner_id, exclude_id=recipe_id):
                raise ConflictError(patch.name)

        fields = patch.to_fields()
        fields["updated_at"] = datetime.now(timezone.utc)

        if patch.content is not None:
            self._store.insert_modification(
                ModificationRecord(
                    recipe_id=recipe_id,
                    owner_id=owner_id,
                    original_content=existing.content,
                    modified_content=patch.content,
                    ai_model=ai_model,
                )
            )

            stats = self._store.get_statistics(recipe_id)
            current = stats.modification_count if stats else 0
            self._store.upsert_statistics(recipe_id, current + 1)

        updated = self._store.update_recipe(recipe_id, fields)
        logger.info(
            "Recipe updated: id=%s, user=%s, fields=%s, actor=%s",
            recipe_id,
            owner_id,
            sorted(patch.to_fields()),
            ai_model,
        )
        return updated

    def delete_recipe(self, recipe_id: int, owner_id: str) -> None:
        """
        Delete a recipe with its modification records and statistics.

        Dependent rows go first, the recipe row last.

        Raises:
            RecipeNotFoundError: If the recipe does not exist
            UnauthorizedError: If the recipe belongs to someone else
            PersistenceError: If a deletion step fails
        """
        self._get_owned(recipe_id, owner_id, message="User is not the owner of this recipe")

        self._store.delete_modifications(recipe_id)
        self._store.delete_statistics(recipe_id)
        self._store.delete_recipe(recipe_id)

        logger.info("Recipe deleted: id=%s, user=%s", recipe_id, owner_id)

    def get_statistics(self, recipe_id: int, owner_id: str) -> StatisticsCounter:
        self._get_owned(recipe_id, owner_id)
        return self._store.get_statistics(recipe_id) or StatisticsCounter(recipe_id=recipe_id)

    def _get_owned(self, recipe_id: int, owner_id: str, message: Optional[str] = None) -> Recipe:
        recipe = self._store.get_recipe(recipe_id)
        if recipe is None:
            raise RecipeNotFoundError(recipe_id)
        if recipe.owner_id != owner_id:
            logger.warning("Ownership check failed: recipe=%s, user=%s", recipe_id, owner_id)
            raise UnauthorizedError(message) if message else UnauthorizedError()
        return recipe
