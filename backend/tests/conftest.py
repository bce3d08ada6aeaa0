# 테스트 공통 설정
# - bcrypt cost를 낮춰서 해싱 속도 확보 (설정 모듈 import 전에 지정해야 함)
# - 실제 MongoDB 대신 mongomock-motor 클라이언트로 Beanie 초기화

import asyncio
import os

os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017/user_auth_test")

import pytest
from mongomock_motor import AsyncMongoMockClient

from user_auth.core.database import init_db
from user_auth.services.user_service import UserService


@pytest.fixture
def run():
    # 테스트마다 새 인메모리 DB (users 컬렉션 + email 유니크 인덱스)
    client = AsyncMongoMockClient()
    asyncio.run(init_db(client=client, database_name="user_auth_test"))
    return asyncio.run


@pytest.fixture
def service(run):
    return UserService()


@pytest.fixture
def ada(run, service):
    return run(service.register(
        name="Ada",
        email="ADA@Example.com",
        password="secret123",
        password_confirm="secret123",
    ))
