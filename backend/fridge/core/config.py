# 환경변수 로딩 (.env)
import logging
from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    MONGO_URI: str = "mongodb://localhost:27017"  # 필요 시 prod/staging로 분리
    MONGO_DB: str = "fridge"
    NUTRIENT_COLLECTION: str = "food_types"

    # TheMealDB (filter.php / lookup.php)
    MEALDB_BASE_URL: str = "https://www.themealdb.com/api/json/v1/1"
    MEALDB_TIMEOUT: float = 10.0

    # 한 번의 매칭 호출 전체 데드라인(초). None이면 무제한
    MATCH_TIMEOUT: Optional[float] = 30.0

    # 재료 입력이 비었을 때 쓰는 기본값
    DEFAULT_INGREDIENTS: List[str] = ["chicken_breast"]

    # AI 레시피 생성 (POST /recipes/ai)
    OPENAI_API_KEY: Optional[str] = None
    AI_RECIPE_MODEL: str = "gpt-4o-mini"
    AI_RECIPE_MAX_TOKENS: int = 800

    LOG_LEVEL: str = "INFO"

    @field_validator("MEALDB_BASE_URL")
    @classmethod
    def _strip_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("LOG_LEVEL")
    @classmethod
    def _check_level(cls, v: str) -> str:
        v = v.upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"invalid LOG_LEVEL: {v}")
        return v

    class Config:
        env_file = ".env"

settings = Settings()

def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
