# 사용자 저장소 레이어
# - 데이터 접근(조회/생성/수정/삭제)만 담당 (서비스 로직 분리)
# - 기본 조회는 UserPublic projection (hashed_password 제외)
# - 해시가 필요하면 with_password=True로 명시적으로 요청

import logging
from typing import Optional, Union

from beanie import PydanticObjectId
from bson.errors import InvalidId
from pymongo.errors import DuplicateKeyError

from ..core.exceptions import UniquenessError
from ..models.user import User, normalize_email
from ..schemas.user_schema import UserPublic

logger = logging.getLogger(__name__)


def _object_id(user_id: Union[str, PydanticObjectId]) -> Optional[PydanticObjectId]:
    try:
        return PydanticObjectId(user_id)
    except (InvalidId, TypeError):
        return None


class UserRepository:
    async def get_by_email(self, email: str, with_password: bool = False) -> Optional[Union[User, UserPublic]]:
        query = User.find_one(User.email == normalize_email(email))
        if with_password:
            return await query
        return await query.project(UserPublic)

    async def get(self, user_id: Union[str, PydanticObjectId], with_password: bool = False) -> Optional[Union[User, UserPublic]]:
        oid = _object_id(user_id)
        if oid is None:
            return None
        query = User.find_one(User.id == oid)
        if with_password:
            return await query
        return await query.project(UserPublic)

    async def create(self, name: str, email: str, hashed_password: str, photo: Optional[str] = None) -> User:
        user = User(name=name, email=email, photo=photo, hashed_password=hashed_password)
        try:
            return await user.insert()
        except DuplicateKeyError as e:
            # 동시에 같은 이메일로 가입하면 unique 인덱스가 한 쪽을 거절합니다.
            logger.warning("Duplicate email rejected by unique index on insert")
            raise UniquenessError("email", user.email) from e

    async def save(self, user: User) -> User:
        try:
            await user.save()
        except DuplicateKeyError as e:
            logger.warning("Duplicate email rejected by unique index on save")
            raise UniquenessError("email", user.email) from e
        return user

    async def delete(self, user: User) -> None:
        await user.delete()


def to_public(user: User) -> UserPublic:
    return UserPublic(
        id=user.id,
        name=user.name,
        email=user.email,
        photo=user.photo,
        password_changed_at=user.password_changed_at,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )
