# fridge/services/nutrition.py
# 영양 점수 — 재료별 영양소(100g 기준)를 일일권장량(DV)으로 나눠 합산
# score = Σ(좋은 영양소 %DV) − Σ(나쁜 영양소 %DV)
# 주의: 저장값은 단위 확인 없이 "정수 g"으로 취급한다 (mg 값은 그대로 과대 계산됨)

from __future__ import annotations
import logging
import math
import re
from typing import Any, Dict, Mapping, Optional, Protocol

from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import ValidationError

from fridge.core.config import settings
from fridge.db.models.schemas import Nutrients, Recipe
from fridge.services.concurrency import barrier

log = logging.getLogger(__name__)

# food_types.nutrients 에 저장될 수 있는 키 전체
NUTRIENT_KEYS = tuple(Nutrients.model_fields)

GOOD_NUTRIENTS = ("fiber", "calcium", "iron", "magnesium", "zinc", "potassium")
BAD_NUTRIENTS = ("fat", "saturatedFat", "transFat", "sugars")

# 일일권장량 (g)
DAILY_VALUES: Dict[str, float] = {
    "fat": 75,
    "saturatedFat": 20,
    "transFat": 2,
    "sugars": 50,
    "cholesterol": 0.3,
    "sodium": 2.3,
    "fiber": 28,
    "calcium": 1.3,
    "iron": 0.018,
    "magnesium": 0.42,
    "zinc": 0.011,
    "potassium": 4.7,
}

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


class NutrientConfigError(RuntimeError):
    # 점수용 영양소 목록과 DAILY_VALUES가 어긋남 (설정 오류)
    pass


def _check_daily_values() -> None:
    unknown = [n for n in GOOD_NUTRIENTS + BAD_NUTRIENTS if n not in NUTRIENT_KEYS]
    if unknown:
        raise NutrientConfigError(f"scoring nutrients not in Nutrients model: {', '.join(unknown)}")
    missing = [n for n in GOOD_NUTRIENTS + BAD_NUTRIENTS if not DAILY_VALUES.get(n, 0) > 0]
    if missing:
        raise NutrientConfigError(f"no daily value registered for: {', '.join(missing)}")

_check_daily_values()


class NutrientStore(Protocol):
    # 표시 이름 완전 일치 조회. 없으면 None
    async def find_by_name(self, name: str) -> Optional[Mapping[str, Any]]: ...


class MongoNutrientStore:
    """food_types 컬렉션에서 {"name": ..., "nutrients": {...}} 문서를 읽는다."""

    def __init__(self, db: AsyncIOMotorDatabase, collection: Optional[str] = None):
        self.col = db[collection or settings.NUTRIENT_COLLECTION]

    async def find_by_name(self, name: str) -> Optional[Mapping[str, Any]]:
        doc = await self.col.find_one({"name": name}, {"nutrients": 1})
        if not doc or not isinstance(doc.get("nutrients"), Mapping):
            return None
        # 모르는 키는 버리고, 형식이 깨진 문서는 "영양 정보 없음"으로 취급
        try:
            profile = Nutrients(**doc["nutrients"]).model_dump(exclude_none=True)
        except ValidationError as e:
            log.warning("malformed nutrients for %r: %s", name, e)
            return None
        return profile or None


def parse_amount(value: Any) -> int:
    # "12.7g" → 12, "0.4" → 0, "abc"/None → 0
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, (int, float)):
        # NaN/inf 도 0
        return int(value) if math.isfinite(value) else 0
    m = _LEADING_INT_RE.match(str(value))
    return int(m.group(1)) if m else 0


def daily_value(nutrient: str) -> float:
    try:
        return DAILY_VALUES[nutrient]
    except KeyError:
        raise NutrientConfigError(f"no daily value registered for {nutrient!r}") from None


def percent_daily_value(nutrient: str, profile: Optional[Mapping[str, Any]]) -> float:
    dv = daily_value(nutrient)
    if not profile:
        return 0.0
    amount = parse_amount(profile.get(nutrient))
    if not amount:
        return 0.0
    return amount / dv


def score_profile(profile: Optional[Mapping[str, Any]]) -> float:
    good = sum(percent_daily_value(n, profile) for n in GOOD_NUTRIENTS)
    bad = sum(percent_daily_value(n, profile) for n in BAD_NUTRIENTS)
    return good - bad


async def score_recipe(recipe: Recipe, store: NutrientStore) -> float:
    # 재료별 조회는 동시에, 합산은 순서 무관
    profiles = await barrier(store.find_by_name(i.name) for i in recipe.ingredients)
    score = sum(score_profile(p) for p in profiles)
    log.debug(
        "score %s (%s): %.4f, %d/%d ingredients with nutrients",
        recipe.id, recipe.name, score, sum(1 for p in profiles if p), len(profiles),
    )
    return score
