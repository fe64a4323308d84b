# fridge/main.py
# FastAPI 앱 초기화 및 라우터 설정

from __future__ import annotations

import logging
from asyncio import sleep
from fastapi import FastAPI

from fridge.core.config import configure_logging
from fridge.api.routes_recipes import router as recipes_router
from fridge.db.init import get_db, init_db, close_db
from fridge.db.indexes import ensure_indexes

configure_logging()
log = logging.getLogger(__name__)

app = FastAPI(title="Fridge Recipes - API", version="0.1.0")

# 앱 시작/종료 이벤트 핸들러
@app.on_event("startup")
async def on_startup() -> None:
    # 1) DB 먼저 붙는다 (최대 20회, 1초 간격)
    db = None
    for i in range(20):
        try:
            db = await init_db()
            log.info("[startup] db ready")
            break
        except Exception as e:
            log.warning("[startup] db init retry %d: %s", i + 1, e)
            await sleep(1.0)
    if db is None:
        log.error("[startup] db init failed after retries")
        return

    # 2) 인덱스 보장
    try:
        await ensure_indexes()
        log.info("[startup] indexes ensured")
    except Exception as e:
        log.error("[startup] ensure_indexes failed: %s", e)

@app.on_event("shutdown")
async def on_shutdown() -> None:
    await close_db()

@app.get("/")
async def root():
    return {"status": "ok"}

@app.get("/health")
async def health():
    ok = {"status": "ok", "db": "skip"}
    try:
        db = get_db()
        await db.command("ping")
        ok["db"] = "ok"
    except Exception as e:
        ok["db"] = f"error: {e}"
    return ok

app.include_router(recipes_router)
