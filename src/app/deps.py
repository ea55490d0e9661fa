# src/app/deps.py (singletons exposed as FastAPI dependencies)

from __future__ import annotations
from supabase import create_client, Client
from src.app.config import settings
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel

from src.app.domain.errors import ExternalErrorKind, ExternalServiceError
from src.app.infra.db.base import PreferenceRepository, RecipeStore
from src.app.infra.db.supabase_preferences_repo import SupabasePreferencesRepository
from src.app.infra.db.supabase_recipe_store import SupabaseRecipeStore
from src.app.services.ai_modification_service import AiModificationOrchestrator
from src.app.services.prompt_builder import MODIFICATION_SYSTEM_PROMPT
from src.app.services.recipe_service import RecipeMutationService
from src.services.errors import GenerationConfigurationError
from src.services.gemini_client import GeminiClient
from src.services.types import GenerationParams, TextGenerator

_client: Client | None = None
_generator: TextGenerator | None = None

def get_supabase() -> Client:
    global _client
    if _client is None:
        _client = create_client(str(settings.SUPABASE_URL),
                                settings.SUPABASE_SERVICE_ROLE_KEY)
    return _client


def get_text_generator() -> TextGenerator:
    global _generator
    if _generator is None:
        try:
            _generator = GeminiClient(
                api_key=settings.GEMINI_API_KEY.get_secret_value(),
                model_name=settings.GEMINI_MODEL,
                system_instruction=MODIFICATION_SYSTEM_PROMPT,
            )
        except GenerationConfigurationError as error:
            raise ExternalServiceError(ExternalErrorKind.GENERIC, str(error)) from error
    return _generator


auth_scheme = HTTPBearer(auto_error=False)

class CurrentUser(BaseModel):
    id: str
    email: str | None = None

async def get_current_user(
    cred: HTTPAuthorizationCredentials | None = Depends(auth_scheme),
    supa: Client = Depends(get_supabase),
) -> CurrentUser:
    """
    Takes Authorization: Bearer <access_token> issued by Supabase,
    verifies it against GoTrue and returns the minimal user data.
    """
    if cred is None or cred.scheme.lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    try:
        res = supa.auth.get_user(cred.credentials)
        user = res.user if res else None
        if not user:
            raise HTTPException(status_code=401, detail="Invalid token")
        return CurrentUser(id=str(user.id), email=user.email)
    except HTTPException:
        raise
    except Exception:
        raise HTTPException(status_code=401, detail="Invalid/expired token")


def get_recipe_store(supa: Client = Depends(get_supabase)) -> RecipeStore:
    return SupabaseRecipeStore(supa)


def get_preferences_repo(supa: Client = Depends(get_supabase)) -> PreferenceRepository:
    return SupabasePreferencesRepository(supa)


def get_recipe_service(store: RecipeStore = Depends(get_recipe_store)) -> RecipeMutationService:
    return RecipeMutationService(store)


def get_modification_service(
    store: RecipeStore = Depends(get_recipe_store),
    preferences: PreferenceRepository = Depends(get_preferences_repo),
    generator: TextGenerator = Depends(get_text_generator),
) -> AiModificationOrchestrator:
    return AiModificationOrchestrator(
        preferences=preferences,
        generator=generator,
        error_log=store,
        params=GenerationParams(
            temperature=settings.AI_TEMPERATURE,
            max_output_tokens=settings.AI_MAX_OUTPUT_TOKENS,
            top_p=settings.AI_TOP_P,
        ),
    )
