# fridge/db/models/schemas.py
# Pydantic 모델 정의
# Nutrients: food_types 문서의 영양소 (100g 기준, 문자열 숫자)
# Recipe: TheMealDB 상세를 정규화한 레시피 (재료는 dense list)
# AiRecipe*: 재료 목록으로 LLM 레시피 생성 입출력
from __future__ import annotations
from typing import Annotated, List, Optional
from pydantic import BaseModel, ConfigDict, Field, StringConstraints

# # 100g 기준 영양소 — 모두 optional (부분 입력이 흔함)
class Nutrients(BaseModel):
    # 숫자로 저장된 값(12.5)도 문자열로 받아 parse_amount에 넘긴다
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    calories: Optional[str] = None
    energyKj: Optional[str] = None
    protein: Optional[str] = None
    fat: Optional[str] = None
    saturatedFat: Optional[str] = None
    transFat: Optional[str] = None
    monounsaturatedFat: Optional[str] = None
    polyunsaturatedFat: Optional[str] = None
    cholesterol: Optional[str] = None
    salt: Optional[str] = None
    sodium: Optional[str] = None
    carbohydrates: Optional[str] = None
    fiber: Optional[str] = None
    sugars: Optional[str] = None
    calcium: Optional[str] = None
    iron: Optional[str] = None
    magnesium: Optional[str] = None
    zinc: Optional[str] = None
    potassium: Optional[str] = None
    caffeine: Optional[str] = None

# # 레시피 재료 한 줄
class Ingredient(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    measure: str = ""

# # filter.php 결과 한 건
class RecipeSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""

# # lookup.php 결과 정규화본
class Recipe(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    instructions: str = ""
    thumbnail: Optional[str] = None
    youtube: Optional[str] = None
    source: Optional[str] = None
    image: Optional[str] = None
    ingredients: List[Ingredient] = Field(default_factory=list)

# # 점수 계산 결과 (요청 단위로만 사용)
class ScoredRecipe(BaseModel):
    recipe: Recipe
    score: float

class RecipeData(BaseModel):
    recipe: Recipe

# # API 응답 envelope
class RecipeResponse(BaseModel):
    message: str
    data: Optional[RecipeData] = None

# # AI 레시피 생성 입력 — 재료 1개 이상, 빈 문자열 불가
class AiRecipeRequest(BaseModel):
    ingredients: List[Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]] = Field(
        ..., min_length=1
    )

class AiRecipeData(BaseModel):
    ingredients: List[str]
    prompt: str
    recipe: str
    model: str

class AiRecipeResponse(BaseModel):
    message: str
    data: Optional[AiRecipeData] = None
