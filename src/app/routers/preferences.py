from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from src.app.deps import CurrentUser, get_current_user, get_preferences_repo
from src.app.infra.db.base import PreferenceRepository
from src.app.schemas.preferences import PreferencesRequest, PreferencesResponse

router = APIRouter(prefix="/preferences", tags=["preferences"])


@router.get("", response_model=Optional[PreferencesResponse])
async def get_preferences(
    user: CurrentUser = Depends(get_current_user),
    repo: PreferenceRepository = Depends(get_preferences_repo),
) -> Optional[PreferencesResponse]:
    profile = await run_in_threadpool(repo.get, user.id)
    return PreferencesResponse.from_domain(profile) if profile else None


@router.post("", response_model=PreferencesResponse)
async def save_preferences(
    payload: PreferencesRequest,
    user: CurrentUser = Depends(get_current_user),
    repo: PreferenceRepository = Depends(get_preferences_repo),
) -> PreferencesResponse:
    # user id always comes from the session, never from the body
    profile = await run_in_threadpool(repo.save, user.id, payload.model_dump(exclude_unset=True))
    return PreferencesResponse.from_domain(profile)
