# fridge/api/routes_recipes.py
# 냉장고 재료 → 최적 레시피 1개 (TheMealDB + 영양 점수)
# GET /recipes?ingredients=chicken,rice
# POST /recipes/ai {"ingredients": [...]}  → LLM 레시피

from __future__ import annotations
import asyncio
import logging
from typing import AsyncIterator, List, Optional

import openai
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from fridge.core.config import settings
from fridge.db.init import get_db
from fridge.db.models.schemas import AiRecipeRequest, AiRecipeResponse, RecipeData, RecipeResponse
from fridge.services.ai_recipe import AiRecipeError, AiRecipeNotReady, AiRecipeService
from fridge.services.mealdb import MealDBClient, MealDBError
from fridge.services.nutrition import MongoNutrientStore
from fridge.services.recipe_match import RecipeMatcher

log = logging.getLogger(__name__)

router = APIRouter(prefix="/recipes", tags=["recipes"])

INGREDIENT_SEPARATOR = ","


def parse_ingredients(raw: Optional[str]) -> List[str]:
    # "a, b,,c" → ["a", "b", "c"]
    if not raw:
        return []
    return [p.strip() for p in raw.split(INGREDIENT_SEPARATOR) if p.strip()]


async def get_recipe_matcher() -> AsyncIterator[RecipeMatcher]:
    # 요청마다 클라이언트 생성/정리 (캐시 없음)
    store = MongoNutrientStore(get_db())
    async with MealDBClient() as client:
        yield RecipeMatcher(client, store, timeout=settings.MATCH_TIMEOUT)


@router.get("", response_model=RecipeResponse)
async def get_recipe(
    ingredients: Optional[str] = Query(None, description="쉼표 구분 재료명 (예: chicken,rice)"),
    matcher: RecipeMatcher = Depends(get_recipe_matcher),
):
    names = parse_ingredients(ingredients) or matcher.default_ingredients

    try:
        recipe = await matcher.match_recipes(names)
    except MealDBError:
        log.exception("Failed to fetch recipes")
        return JSONResponse(
            status_code=503,
            content={"message": "Failed to fetch recipes from TheMealDB service."},
        )
    except asyncio.TimeoutError:
        log.warning("recipe match timed out for %s", names)
        return JSONResponse(
            status_code=504,
            content={"message": "Timed out fetching recipes from TheMealDB service."},
        )

    if recipe is None:
        log.debug("No recipes found; returning 404")
        return JSONResponse(status_code=404, content={"message": "No recipes found"})

    return RecipeResponse(
        message="Recipes fetched successfully",
        data=RecipeData(recipe=recipe),
    )


def get_ai_recipe_service() -> AiRecipeService:
    return AiRecipeService()


@router.post("/ai", response_model=AiRecipeResponse)
async def generate_ai_recipe(
    body: AiRecipeRequest,
    service: AiRecipeService = Depends(get_ai_recipe_service),
):
    try:
        data = await service.generate_recipe(body.ingredients)
    except AiRecipeNotReady as e:
        log.warning("AiRecipeNotReady: %s", e)
        return JSONResponse(status_code=503, content={"message": str(e)})
    except openai.APIConnectionError:
        log.exception("Failed to reach AI recipe service")
        return JSONResponse(status_code=502, content={"message": "Failed to connect to the AI recipe service"})
    except (openai.APIError, AiRecipeError):
        log.exception("Failed to generate AI recipe")
        return JSONResponse(status_code=502, content={"message": "Failed to generate recipe with the AI service."})

    return AiRecipeResponse(message="AI recipe generated successfully", data=data)
