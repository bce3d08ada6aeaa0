# Beanie ODM 초기화 (MongoDB)
# - 실제 서비스에서는 MONGODB_URI로 AsyncIOMotorClient를 만들어 연결
# - 테스트에서는 mongomock-motor 클라이언트를 주입해서 사용

import logging
from typing import Any, Optional

from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient

from .config import settings
from ..models.user import User

logger = logging.getLogger(__name__)


async def init_db(client: Optional[Any] = None, database_name: Optional[str] = None) -> Any:
    """User Document를 Beanie에 등록하고 사용한 데이터베이스 객체를 반환합니다.

    client를 넘기지 않으면 설정값으로 새 연결을 만들고 ping으로 연결을 확인합니다.
    연결 실패는 그대로 호출자에게 전달됩니다.
    """
    if client is None:
        # serverSelectionTimeoutMS: 5초 안에 서버를 찾지 못하면 타임아웃
        client = AsyncIOMotorClient(settings.MONGODB_URI, serverSelectionTimeoutMS=5000)
        await client.admin.command("ping")
        logger.info("MongoDB connected: %s", settings.MONGODB_URI)

    database_name = database_name or settings.MONGODB_DB
    db = client[database_name] if database_name else client.get_default_database()
    # init_beanie가 users 컬렉션의 email 유니크 인덱스도 생성합니다.
    await init_beanie(database=db, document_models=[User])
    logger.info("Beanie initialized on database %s", db.name)
    return db
