from __future__ import annotations

import logging
from dataclasses import fields as dataclass_fields
from datetime import datetime, timezone
from typing import Any, Optional

import httpx
from supabase import Client, PostgrestAPIError

from src.app.domain.errors import PersistenceError
from src.app.domain.models import PreferenceProfile
from src.app.infra.db.base import PreferenceRepository

logger = logging.getLogger(__name__)

NO_ROWS = "PGRST116"

PROFILE_FIELDS = tuple(
    f.name for f in dataclass_fields(PreferenceProfile) if f.name not in ("id", "user_id")
)


def _row_to_profile(row: dict[str, Any]) -> PreferenceProfile:
    return PreferenceProfile(
        user_id=str(row["user_id"]),
        id=row.get("id"),
        **{name: row.get(name) for name in PROFILE_FIELDS},
    )


class SupabasePreferencesRepository(PreferenceRepository):
    TABLE_NAME = "preferences"

    def __init__(self, client: Client):
        self._client = client

    def get(self, user_id: str) -> Optional[PreferenceProfile]:
        try:
            result = self._client.table(self.TABLE_NAME).select("*").eq("user_id", user_id).limit(1).execute()
        except PostgrestAPIError as error:
            if getattr(error, "code", None) == NO_ROWS:
                return None
            logger.error("Failed to fetch preferences for user=%s: %s", user_id, error)
            raise PersistenceError("get_preferences", str(error)) from error
        except (httpx.HTTPError, ConnectionError, TimeoutError) as error:
            logger.error("Network error fetching preferences for user=%s: %s", user_id, error)
            raise PersistenceError("get_preferences", str(error)) from error

        if not result.data:
            return None
        return _row_to_profile(result.data[0])

    def save(self, user_id: str, fields: dict[str, Any]) -> PreferenceProfile:
        data = {key: value for key, value in fields.items() if key in PROFILE_FIELDS}
        existing = self.get(user_id)

        try:
            if existing is not None:
                data["updated_at"] = datetime.now(timezone.utc).isoformat()
                result = self._client.table(self.TABLE_NAME).update(data).eq("id", existing.id).execute()
            else:
                result = self._client.table(self.TABLE_NAME).insert({"user_id": user_id, **data}).execute()
        except (PostgrestAPIError, httpx.HTTPError, ConnectionError, TimeoutError) as error:
            logger.error("Failed to save preferences for user=%s: %s", user_id, error)
            raise PersistenceError("save_preferences", str(error)) from error

        if not result.data:
            raise PersistenceError("save_preferences", "No data returned")

        logger.info("Preferences saved: user=%s, created=%s", user_id, existing is None)
        return _row_to_profile(result.data[0])
