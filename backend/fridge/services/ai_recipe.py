# fridge/services/ai_recipe.py
# 재료 목록 → LLM 레시피 (OpenAI Chat Completions)
# - 재료명은 "red_apple" → "Red Apple" 형태로 다듬어서 프롬프트에 넣는다
# - 키/SDK 준비 안 됨 → AiRecipeNotReady, 빈 응답 → AiRecipeError
# - 전송 오류(openai.APIError 계열)는 그대로 위로 던진다

from __future__ import annotations
import logging
import re
from typing import List, Optional, Sequence

from openai import AsyncOpenAI

from fridge.core.config import settings
from fridge.db.models.schemas import AiRecipeData

log = logging.getLogger(__name__)


class AiRecipeNotReady(Exception):
    # AI 레시피 기능 준비 미완(키 없음)
    pass


class AiRecipeError(Exception):
    # 모델이 쓸 수 있는 레시피를 돌려주지 않음
    pass


PROMPT = (
    "You are a home cook's assistant. Write one recipe that uses these ingredients: {ingredients}.\n"
    "- Reply in Markdown only.\n"
    "- Start with a '## ' title, then an '### Ingredients' list with quantities, "
    "then numbered '### Steps'.\n"
    "- You may add common pantry staples (salt, oil, water) but nothing else major.\n"
)


def format_ingredient(name: str) -> str:
    # "whole_wheat-flour" → "Whole Wheat Flour"
    words = [w for w in re.split(r"[_\-\s]+", name.strip()) if w]
    return " ".join(w[:1].upper() + w[1:].lower() for w in words)


def build_prompt(ingredients: Sequence[str]) -> str:
    return PROMPT.format(ingredients=", ".join(ingredients))


class AiRecipeService:
    """client를 넘기면 그대로 쓴다 (테스트용). 없으면 OPENAI_API_KEY로 AsyncOpenAI 생성."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.OPENAI_API_KEY
        self.model = model or settings.AI_RECIPE_MODEL
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        if self._client is not None:
            return self._client
        if not self.api_key:
            raise AiRecipeNotReady("OPENAI_API_KEY is not set")
        self._client = AsyncOpenAI(api_key=self.api_key)
        return self._client

    async def generate_recipe(self, ingredients: Sequence[str]) -> AiRecipeData:
        client = self._get_client()

        names: List[str] = [n for n in (format_ingredient(i) for i in ingredients) if n]
        prompt = build_prompt(names)

        chat = await client.chat.completions.create(
            model=self.model,
            temperature=0.7,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=settings.AI_RECIPE_MAX_TOKENS,
        )

        text = chat.choices[0].message.content if chat and chat.choices else ""
        if not text or not text.strip():
            log.warning("AI recipe returned empty text (ingredients=%s)", names)
            raise AiRecipeError("model returned an empty response")

        return AiRecipeData(
            ingredients=names,
            prompt=prompt,
            recipe=text.strip(),
            model=getattr(chat, "model", None) or self.model,
        )
