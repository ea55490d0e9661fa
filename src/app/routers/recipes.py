from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from starlette.concurrency import run_in_threadpool

from src.app.deps import CurrentUser, get_current_user, get_modification_service, get_recipe_service
from src.app.domain.models import (
    CreateRecipeCommand,
    RecipeQuery,
    RecipeSource,
    SortBy,
    SortOrder,
    UpdateRecipeCommand,
)
from src.app.schemas.recipes import (
    CreateRecipeRequest,
    DeleteRecipeRequest,
    DeleteRecipeResponse,
    ModifyRecipeRequest,
    ModifyRecipeResponse,
    PaginationMetadata,
    RecipeListResponse,
    RecipeResponse,
    StatisticsResponse,
    UpdateRecipeRequest,
)
from src.app.services.ai_modification_service import AiModificationOrchestrator
from src.app.services.recipe_service import RecipeMutationService

router = APIRouter(prefix="/recipes", tags=["recipes"])


@router.get("", response_model=RecipeListResponse)
async def list_recipes(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    sort_by: SortBy = Query(default=SortBy.CREATED_AT, alias="sortBy"),
    order: SortOrder = Query(default=SortOrder.DESC),
    search_term: Optional[str] = Query(default=None, alias="searchTerm"),
    user: CurrentUser = Depends(get_current_user),
    service: RecipeMutationService = Depends(get_recipe_service),
) -> RecipeListResponse:
    query = RecipeQuery(page=page, limit=limit, sort_by=sort_by, order=order, search_term=search_term)
    result = await run_in_threadpool(service.list_recipes, user.id, query)
    return RecipeListResponse(
        data=[RecipeResponse.from_domain(recipe) for recipe in result.recipes],
        pagination=PaginationMetadata(
            page=result.page,
            limit=result.limit,
            total=result.total,
            totalPages=result.total_pages,
        ),
    )


@router.post("/create", response_model=RecipeResponse, status_code=status.HTTP_201_CREATED)
async def create_recipe(
    payload: CreateRecipeRequest,
    user: CurrentUser = Depends(get_current_user),
    service: RecipeMutationService = Depends(get_recipe_service),
) -> RecipeResponse:
    command = CreateRecipeCommand(
        name=payload.name,
        source=RecipeSource(payload.source),
        content=payload.recipe,
        rating=payload.rating,
    )
    recipe = await run_in_threadpool(service.create_recipe, command, user.id)
    return RecipeResponse.from_domain(recipe)


@router.put("/update", response_model=RecipeResponse)
async def update_recipe(
    payload: UpdateRecipeRequest,
    user: CurrentUser = Depends(get_current_user),
    service: RecipeMutationService = Depends(get_recipe_service),
) -> RecipeResponse:
    patch = UpdateRecipeCommand(name=payload.name, rating=payload.rating, content=payload.recipe)
    recipe = await run_in_threadpool(service.update_recipe, payload.recipeId, user.id, patch)
    return RecipeResponse.from_domain(recipe)


@router.delete("/delete", response_model=DeleteRecipeResponse)
async def delete_recipe(
    payload: DeleteRecipeRequest,
    user: CurrentUser = Depends(get_current_user),
    service: RecipeMutationService = Depends(get_recipe_service),
) -> DeleteRecipeResponse:
    await run_in_threadpool(service.delete_recipe, payload.recipeId, user.id)
    return DeleteRecipeResponse()


@router.get("/{recipe_id}/statistics", response_model=StatisticsResponse)
async def get_recipe_statistics(
    recipe_id: int,
    user: CurrentUser = Depends(get_current_user),
    service: RecipeMutationService = Depends(get_recipe_service),
) -> StatisticsResponse:
    stats = await run_in_threadpool(service.get_statistics, recipe_id, user.id)
    return StatisticsResponse.from_domain(stats)


@router.post("/modify", response_model=ModifyRecipeResponse)
async def modify_recipe(
    payload: ModifyRecipeRequest,
    user: CurrentUser = Depends(get_current_user),
    service: AiModificationOrchestrator = Depends(get_modification_service),
) -> ModifyRecipeResponse:
    modified = await run_in_threadpool(service.modify, payload.recipe_text, user.id)
    return ModifyRecipeResponse(modified_recipe=modified)
