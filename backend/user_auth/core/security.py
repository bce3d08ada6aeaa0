# 보안 유틸리티
# - 비밀번호 해싱/검증 (bcrypt, cost factor는 설정값 사용)
# - bcrypt 연산은 CPU를 많이 쓰므로 비동기 코드에서는 스레드로 넘겨서 실행

import asyncio
import logging

from passlib.context import CryptContext

from .config import settings
from .exceptions import HashFormatError

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError) as e:
        # passlib은 식별할 수 없는 해시에 대해 ValueError(UnknownHashError 포함)를 던집니다.
        logger.error("Stored password hash could not be verified: %s", e)
        raise HashFormatError(str(e)) from e


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


async def verify_password_async(plain_password: str, hashed_password: str) -> bool:
    # 이벤트 루프를 막지 않도록 워커 스레드에서 비교
    return await asyncio.to_thread(verify_password, plain_password, hashed_password)


async def get_password_hash_async(password: str) -> str:
    return await asyncio.to_thread(get_password_hash, password)
