# 컬렉션 인덱스 생성
# 앱 스타트업에서 한 번 ensure_indexes()를 await로 호출한다.

from fridge.core.config import settings
from fridge.db.init import get_db

async def ensure_indexes():
    db = get_db()

    # 영양소 조회는 표시 이름 완전 일치(find_one({"name": ...}))
    await db[settings.NUTRIENT_COLLECTION].create_index("name", unique=True)
