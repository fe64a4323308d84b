# 테스트용 가짜 TheMealDB / 영양소 스토어
import asyncio
import unittest
from typing import Dict, List, Optional

import httpx

from fridge.services.mealdb import MealDBClient

BASE = "https://mealdb.test/api/json/v1/1"


def meal(recipe_id: str, name: str, ingredients: List[tuple]) -> Dict:
    doc = {
        "idMeal": recipe_id,
        "strMeal": name,
        "strInstructions": f"Cook {name}.",
        "strMealThumb": f"https://img.test/{recipe_id}.jpg",
        "strSource": f"https://src.test/{recipe_id}",
    }
    for i in range(1, 21):
        doc[f"strIngredient{i}"] = ""
        doc[f"strMeasure{i}"] = ""
    for i, (ing, measure) in enumerate(ingredients, start=1):
        doc[f"strIngredient{i}"] = ing
        doc[f"strMeasure{i}"] = measure
    return doc


class FakeMealDB:
    """
    filters: 재료 → recipe id 목록, details: id → meal 문서(None이면 meals: null)
    failing: 이 값(재료 또는 id)으로 요청하면 500
    delays: 재료/ id별 응답 지연(초) — 완료 순서 뒤섞기용
    """

    # 테스트가 끝나면 close_all()로 한꺼번에 닫는다
    _open: List[httpx.AsyncClient] = []

    def __init__(self, filters=None, details=None, failing=(), delays=None):
        self.filters: Dict[str, List[str]] = filters or {}
        self.details: Dict[str, Optional[Dict]] = details or {}
        self.failing = set(failing)
        self.delays: Dict[str, float] = delays or {}
        self.calls: List[tuple] = []

    async def handler(self, request: httpx.Request) -> httpx.Response:
        endpoint = request.url.path.rsplit("/", 1)[-1]
        value = request.url.params.get("i")
        self.calls.append((endpoint, value))

        if value in self.delays:
            await asyncio.sleep(self.delays[value])
        if value in self.failing:
            return httpx.Response(500, json={"error": "boom"})

        if endpoint == "filter.php":
            ids = self.filters.get(value)
            meals = [{"idMeal": rid, "strMeal": f"Meal {rid}"} for rid in ids] if ids else None
            return httpx.Response(200, json={"meals": meals})
        if endpoint == "lookup.php":
            doc = self.details.get(value)
            return httpx.Response(200, json={"meals": [doc] if doc else None})
        return httpx.Response(404)

    def calls_to(self, endpoint: str) -> List[str]:
        return [v for e, v in self.calls if e == endpoint]

    def client(self) -> MealDBClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(self.handler))
        FakeMealDB._open.append(http)
        return MealDBClient(base_url=BASE, client=http)

    @classmethod
    async def close_all(cls) -> None:
        while cls._open:
            await cls._open.pop().aclose()


class FakeNutrientStore:
    def __init__(self, profiles: Optional[Dict[str, Dict[str, str]]] = None):
        self.profiles = profiles or {}
        self.lookups: List[str] = []

    async def find_by_name(self, name: str):
        self.lookups.append(name)
        return self.profiles.get(name)


class MealDBTestCase(unittest.IsolatedAsyncioTestCase):
    """테스트마다 FakeMealDB가 만든 httpx 클라이언트를 닫는다."""

    async def asyncTearDown(self):
        await FakeMealDB.close_all()
