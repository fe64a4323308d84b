# fridge/services/recipe_match.py
# 재료 목록 → 최적 레시피 1개
#   1) 재료별 filter 동시 호출 → id별 매칭 재료 집합
#   2) 매칭 개수 최댓값인 id만 후보 (동점은 전부 통과)
#   3) 후보 상세 동시 조회 + 재료 슬롯 정규화
#   4) 후보별 영양 점수 동시 계산 → 최고점 1개 (동점이면 후보 순서상 앞선 것)
# 단계 사이에는 전부 끝날 때까지 기다린다. 한 건이라도 전송 실패하면 전체 실패.

from __future__ import annotations
import asyncio
import logging
from typing import Dict, FrozenSet, List, Optional, Sequence

from fridge.core.config import settings
from fridge.db.models.schemas import Recipe, ScoredRecipe
from fridge.services.concurrency import barrier
from fridge.services.mealdb import MealDBClient
from fridge.services.nutrition import NutrientStore, score_recipe

log = logging.getLogger(__name__)


def resolve_ingredients(
    ingredients: Optional[Sequence[str]],
    default: Optional[Sequence[str]] = None,
) -> List[str]:
    # 공백 제거 + 빈 값 제거 + 중복 제거(첫 등장 순서 유지). 비면 기본 목록
    names = [s.strip() for s in (ingredients or []) if isinstance(s, str) and s.strip()]
    if not names:
        names = list(default if default is not None else settings.DEFAULT_INGREDIENTS)
    return list(dict.fromkeys(names))


async def match_ingredients(
    client: MealDBClient,
    ingredients: Sequence[str],
) -> Dict[str, FrozenSet[str]]:
    """
    재료마다 filter 한 번씩 동시 호출.
    각 태스크는 자기 결과만 돌려주고, 병합은 배리어 이후 한 곳에서 한다.
    반환 dict의 키 순서 = (요청 재료 순서, 응답 내 순서)로 처음 본 순서.
    """
    results = await barrier(client.filter_by_ingredient(name) for name in ingredients)

    merged: Dict[str, set] = {}
    for name, summaries in zip(ingredients, results):
        for s in summaries:
            merged.setdefault(s.id, set()).add(name)

    log.info("matched %d recipes for %d ingredients", len(merged), len(ingredients))
    return {rid: frozenset(names) for rid, names in merged.items()}


def select_best_matches(matches: Dict[str, FrozenSet[str]]) -> List[str]:
    max_matches = max((len(v) for v in matches.values()), default=0)
    if max_matches == 0:
        return []
    return [rid for rid, names in matches.items() if len(names) == max_matches]


async def fetch_details(client: MealDBClient, recipe_ids: Sequence[str]) -> List[Recipe]:
    # 상세가 없는 id(meals: null)는 빠진다. 순서는 recipe_ids 순서
    details = await barrier(client.lookup(rid) for rid in recipe_ids)
    return [r for r in details if r is not None]


async def score_candidates(recipes: Sequence[Recipe], store: NutrientStore) -> List[ScoredRecipe]:
    scores = await barrier(score_recipe(r, store) for r in recipes)
    return [ScoredRecipe(recipe=r, score=s) for r, s in zip(recipes, scores)]


def pick_best(scored: Sequence[ScoredRecipe]) -> Optional[Recipe]:
    best: Optional[ScoredRecipe] = None
    for c in scored:
        # 엄격히 클 때만 교체 → 동점이면 앞선 후보 유지
        if best is None or c.score > best.score:
            best = c
    return best.recipe if best else None


class RecipeMatcher:
    """
    요청 단위 무상태 엔진. 클라이언트/스토어만 들고 있고 결과는 캐시하지 않는다.
    """

    def __init__(
        self,
        client: MealDBClient,
        store: NutrientStore,
        default_ingredients: Optional[Sequence[str]] = None,
        timeout: Optional[float] = None,
    ):
        self.client = client
        self.store = store
        self.default_ingredients = list(
            default_ingredients if default_ingredients is not None else settings.DEFAULT_INGREDIENTS
        )
        self.timeout = timeout

    async def match_recipes(
        self,
        ingredients: Optional[Sequence[str]] = None,
        timeout: Optional[float] = None,
    ) -> Optional[Recipe]:
        # timeout 초과 시 asyncio.TimeoutError, 하위 태스크는 모두 취소된다
        deadline = timeout if timeout is not None else self.timeout
        names = resolve_ingredients(ingredients, self.default_ingredients)
        if deadline is None:
            return await self._run(names)
        return await asyncio.wait_for(self._run(names), deadline)

    async def _run(self, names: List[str]) -> Optional[Recipe]:
        matches = await match_ingredients(self.client, names)
        candidates = select_best_matches(matches)
        if not candidates:
            log.info("no recipe matched %s", names)
            return None

        recipes = await fetch_details(self.client, candidates)
        if not recipes:
            log.info("no detail available for candidates %s", candidates)
            return None

        scored = await score_candidates(recipes, self.store)
        best = pick_best(scored)
        if best is not None:
            log.info(
                "best recipe %s (%s) out of %d candidates",
                best.id, best.name, len(scored),
            )
        return best


async def match_recipes(
    ingredients: Optional[Sequence[str]],
    store: NutrientStore,
    client: Optional[MealDBClient] = None,
    timeout: Optional[float] = None,
) -> Optional[Recipe]:
    # 편의 함수: 클라이언트가 없으면 만들어 쓰고 닫는다
    if client is not None:
        return await RecipeMatcher(client, store, timeout=timeout).match_recipes(ingredients)
    async with MealDBClient() as own:
        return await RecipeMatcher(own, store, timeout=timeout).match_recipes(ingredients)
