from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional, TypeVar

import httpx
from supabase import Client, PostgrestAPIError

from src.app.domain.errors import ConflictError, PersistenceError
from src.app.domain.models import (
    CreateRecipeCommand,
    ModificationErrorLog,
    ModificationRecord,
    Recipe,
    RecipeQuery,
    RecipeSource,
    StatisticsCounter,
)
from src.app.infra.db.base import RecipeStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

UNIQUE_VIOLATION = "23505"

_STORE_ERRORS = (PostgrestAPIError, httpx.HTTPError, ConnectionError, TimeoutError)

# domain field -> recipes column
_RECIPE_COLUMNS = {
    "name": "name",
    "rating": "rating",
    "source": "source",
    "content": "recipe",
    "owner_id": "user_id",
    "updated_at": "updated_at",
}


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _parse_datetime(value: str | datetime | None) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        return None

    try:
        normalized = value.replace("Z", "+00:00") if value.endswith("Z") else value
        return datetime.fromisoformat(normalized)
    except ValueError:
        return None


def _optional_int(value: object) -> int | None:
    # 0 is kept as a value, not collapsed into None
    return int(value) if value is not None else None


def _row_to_recipe(row: dict[str, Any]) -> Recipe:
    return Recipe(
        id=int(row["id"]),
        name=str(row["name"]),
        source=RecipeSource(str(row.get("source") or RecipeSource.MANUAL.value)),
        content=row.get("recipe"),
        owner_id=str(row["user_id"]),
        rating=_optional_int(row.get("rating")),
        created_at=_parse_datetime(row.get("created_at")),
        updated_at=_parse_datetime(row.get("updated_at")),
    )


def _row_to_statistics(row: dict[str, Any]) -> StatisticsCounter:
    return StatisticsCounter(
        recipe_id=int(row["recipe_id"]),
        modification_count=int(row.get("modification_count") or 0),
        search_count=int(row.get("search_count") or 0),
        last_updated=_parse_datetime(row.get("last_updated")),
    )


def _to_row(fields: dict[str, Any]) -> dict[str, Any]:
    row: dict[str, Any] = {}
    for key, value in fields.items():
        column = _RECIPE_COLUMNS.get(key)
        if column is None:
            raise ValueError(f"Unknown recipe field: {key}")
        if isinstance(value, RecipeSource):
            value = value.value
        elif isinstance(value, datetime):
            value = value.isoformat()
        row[column] = value
    return row


def _error_reason(error: Exception) -> str:
    message = getattr(error, "message", None)
    return str(message or error)


class SupabaseRecipeStore(RecipeStore):
    RECIPES = "recipes"
    MODIFICATIONS = "recipe_modifications"
    STATISTICS = "recipe_statistics"
    MODIFICATION_ERRORS = "recipe_modification_errors"

    def __init__(self, client: Client):
        self._client = client

    def _run(self, operation: str, call: Callable[[], T]) -> T:
        try:
            return call()
        except _STORE_ERRORS as error:
            logger.error("Store error during %s: %s", operation, error)
            raise PersistenceError(operation, _error_reason(error)) from error

    def get_recipe(self, recipe_id: int) -> Optional[Recipe]:
        result = self._run(
            "get_recipe",
            lambda: self._client.table(self.RECIPES).select("*").eq("id", recipe_id).limit(1).execute(),
        )
        if not result.data:
            return None
        return _row_to_recipe(result.data[0])

    def find_recipe_id_by_name(
        self,
        owner_id: str,
        name: str,
        exclude_id: Optional[int] = None,
    ) -> Optional[int]:
        def call():
            query = self._client.table(self.RECIPES).select("id").eq("name", name).eq("user_id", owner_id)
            if exclude_id is not None:
                query = query.neq("id", exclude_id)
            return query.limit(1).execute()

        result = self._run("find_recipe_by_name", call)
        if not result.data:
            return None
        return int(result.data[0]["id"])

    def list_recipes(self, owner_id: str, query: RecipeQuery) -> tuple[list[Recipe], int]:
        def call():
            builder = self._client.table(self.RECIPES).select("*", count="exact").eq("user_id", owner_id)
            term = (query.search_term or "").strip()
            if term:
                builder = builder.ilike("name", f"%{term}%")
            return (
                builder.order(query.sort_by.value, desc=query.order.value == "desc")
                .range(query.offset, query.offset + query.limit - 1)
                .execute()
            )

        result = self._run("list_recipes", call)
        rows = result.data or []
        total = result.count if result.count is not None else len(rows)
        return [_row_to_recipe(row) for row in rows], total

    def insert_recipe(self, owner_id: str, command: CreateRecipeCommand) -> Recipe:
        row = _to_row(
            {
                "name": command.name,
                "source": command.source,
                "rating": command.rating,
                "content": command.content,
                "owner_id": owner_id,
            }
        )
        try:
            result = self._client.table(self.RECIPES).insert(row).execute()
        except PostgrestAPIError as error:
            if getattr(error, "code", None) == UNIQUE_VIOLATION:
                raise ConflictError(command.name) from error
            logger.error("Store error during insert_recipe: %s", error)
            raise PersistenceError("insert_recipe", _error_reason(error)) from error
        except _STORE_ERRORS as error:
            logger.error("Store error during insert_recipe: %s", error)
            raise PersistenceError("insert_recipe", _error_reason(error)) from error

        if not result.data:
            raise PersistenceError("insert_recipe", "No data returned")
        return _row_to_recipe(result.data[0])

    def update_recipe(self, recipe_id: int, fields: dict[str, Any]) -> Recipe:
        row = _to_row(fields)
        result = self._run(
            "update_recipe",
            lambda: self._client.table(self.RECIPES).update(row).eq("id", recipe_id).execute(),
        )
        if not result.data:
            raise PersistenceError("update_recipe", "No data returned")
        return _row_to_recipe(result.data[0])

    def delete_recipe(self, recipe_id: int) -> None:
        self._run(
            "delete_recipe",
            lambda: self._client.table(self.RECIPES).delete().eq("id", recipe_id).execute(),
        )

    def insert_modification(self, record: ModificationRecord) -> None:
        row = {
            "recipe_id": record.recipe_id,
            "user_id": record.owner_id,
            "original_recipe": record.original_content,
            "modified_recipe": record.modified_content,
            "ai_model": record.ai_model,
            "timestamp": (record.timestamp or _now_utc()).isoformat(),
        }
        self._run(
            "insert_modification",
            lambda: self._client.table(self.MODIFICATIONS).insert(row).execute(),
        )

    def delete_modifications(self, recipe_id: int) -> None:
        self._run(
            "delete_modifications",
            lambda: self._client.table(self.MODIFICATIONS).delete().eq("recipe_id", recipe_id).execute(),
        )

    def get_statistics(self, recipe_id: int) -> Optional[StatisticsCounter]:
        result = self._run(
            "get_statistics",
            lambda: self._client.table(self.STATISTICS).select("*").eq("recipe_id", recipe_id).limit(1).execute(),
        )
        if not result.data:
            return None
        return _row_to_statistics(result.data[0])

    def upsert_statistics(self, recipe_id: int, modification_count: int) -> None:
        row = {
            "recipe_id": recipe_id,
            "modification_count": modification_count,
            "last_updated": _now_utc().isoformat(),
        }
        self._run(
            "upsert_statistics",
            lambda: self._client.table(self.STATISTICS).upsert(row, on_conflict="recipe_id").execute(),
        )

    def delete_statistics(self, recipe_id: int) -> None:
        self._run(
            "delete_statistics",
            lambda: self._client.table(self.STATISTICS).delete().eq("recipe_id", recipe_id).execute(),
        )

    def insert_modification_error(self, entry: ModificationErrorLog) -> None:
        row = {
            "recipe_text": entry.recipe_text,
            "error_code": entry.error_code,
            "error_description": entry.error_description,
            "ai_model": entry.ai_model,
            "timestamp": (entry.timestamp or _now_utc()).isoformat(),
        }
        self._run(
            "insert_modification_error",
            lambda: self._client.table(self.MODIFICATION_ERRORS).insert(row).execute(),
        )
