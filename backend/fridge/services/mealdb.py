# fridge/services/mealdb.py
# TheMealDB 클라이언트 (비동기 httpx)
# - filter.php?i=<재료>  → (id, 이름) 목록
# - lookup.php?i=<id>    → 상세 (strIngredient1..20 / strMeasure1..20 슬롯)
# - 실패는 MealDBError 하나로 모아서 위로 던진다 (리트라이 없음)

from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

import httpx

from fridge.core.config import settings
from fridge.db.models.schemas import Ingredient, Recipe, RecipeSummary

log = logging.getLogger(__name__)

FILTER_ENDPOINT = "/filter.php"
LOOKUP_ENDPOINT = "/lookup.php"

# 상세 응답의 재료/계량 슬롯 개수
MAX_INGREDIENT_SLOTS = 20


class MealDBError(Exception):
    # 전송/HTTP/응답 파싱 실패
    pass


def _text(v: Any) -> str:
    return v.strip() if isinstance(v, str) else ""


def _optional(v: Any) -> Optional[str]:
    return _text(v) or None


def normalize_ingredients(meal: Dict[str, Any]) -> List[Ingredient]:
    """
    strIngredientN / strMeasureN (N=1..20) → [Ingredient(name, measure)]
    - 슬롯 순서 유지
    - 이름이 비었거나 공백뿐이면 버림
    - 중복 제거/대소문자 변환 없음
    """
    out: List[Ingredient] = []
    for i in range(1, MAX_INGREDIENT_SLOTS + 1):
        name = _text(meal.get(f"strIngredient{i}"))
        if not name:
            continue
        out.append(Ingredient(name=name, measure=_text(meal.get(f"strMeasure{i}"))))
    return out


def meal_to_recipe(meal: Dict[str, Any]) -> Recipe:
    return Recipe(
        id=str(meal.get("idMeal") or ""),
        name=_text(meal.get("strMeal")),
        instructions=_text(meal.get("strInstructions")),
        thumbnail=_optional(meal.get("strMealThumb")),
        youtube=_optional(meal.get("strYoutube")),
        source=_optional(meal.get("strSource")),
        image=_optional(meal.get("strImageSource")),
        ingredients=normalize_ingredients(meal),
    )


class MealDBClient:
    """
    TheMealDB 조회 클라이언트.
    client를 넘기면 그대로 쓰고(닫지 않음), 없으면 직접 만들고 aclose()에서 닫는다.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = (base_url or settings.MEALDB_BASE_URL).rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout or settings.MEALDB_TIMEOUT),
        )

    async def __aenter__(self) -> "MealDBClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _meals(self, endpoint: str, value: str) -> List[Dict[str, Any]]:
        url = f"{self.base_url}{endpoint}"
        try:
            r = await self._client.get(url, params={"i": value})
            r.raise_for_status()
            payload = r.json()
        except httpx.HTTPError as e:
            log.warning("TheMealDB request failed: %s i=%s (%s)", endpoint, value, e)
            raise MealDBError(f"{endpoint} i={value}: {e}") from e
        except ValueError as e:
            # 본문이 JSON이 아님
            raise MealDBError(f"{endpoint} i={value}: invalid JSON") from e

        # meals: null → 매칭 없음 (오류 아님)
        meals = payload.get("meals") if isinstance(payload, dict) else None
        return [m for m in (meals or []) if isinstance(m, dict)]

    async def filter_by_ingredient(self, ingredient: str) -> List[RecipeSummary]:
        meals = await self._meals(FILTER_ENDPOINT, ingredient)
        out = [
            RecipeSummary(id=str(m["idMeal"]), name=_text(m.get("strMeal")))
            for m in meals
            if m.get("idMeal")
        ]
        log.debug("filter i=%s -> %d meals", ingredient, len(out))
        return out

    async def lookup(self, recipe_id: str) -> Optional[Recipe]:
        meals = await self._meals(LOOKUP_ENDPOINT, recipe_id)
        if not meals:
            log.info("lookup i=%s returned no detail; skipping", recipe_id)
            return None
        recipe = meal_to_recipe(meals[0])
        if not recipe.id:
            recipe = recipe.model_copy(update={"id": recipe_id})
        return recipe
