# 사용자 서비스 레이어
# - 회원가입 (입력 검증, 이메일 중복 체크, 비밀번호 해싱)
# - 자격 증명 확인 (로그인 시 비밀번호 비교)
# - 프로필 수정, 비밀번호 변경, 삭제
# - 토큰 발급 시각 기준 비밀번호 변경 여부 확인
#
# 비밀번호 재해싱은 평문 비밀번호를 받는 쓰기(가입, 비밀번호 변경)에서만 일어납니다.
# 프로필 수정은 해시와 password_changed_at을 건드리지 않습니다.

import logging
from typing import Any, Optional

from ..core.exceptions import UniquenessError, UserNotFoundError, ValidationError
from ..core.security import get_password_hash_async
from ..models.user import User
from ..repositories.user_repository import UserRepository, to_public
from ..schemas.user_schema import PasswordChange, UserCreate, UserPublic, UserUpdate, validate_input

logger = logging.getLogger(__name__)

PASSWORD_FIELDS = ("password", "password_confirm")


class UserService:
    def __init__(self, repo: Optional[UserRepository] = None):
        self.repo = repo or UserRepository()

    async def register(self, **fields: Any) -> UserPublic:
        payload = validate_input(UserCreate, fields)

        existing = await self.repo.get_by_email(payload.email)
        if existing:
            logger.warning("Registration rejected: email already registered")
            raise UniquenessError("email", payload.email)

        hashed = await get_password_hash_async(payload.password)
        user = await self.repo.create(
            name=payload.name,
            email=payload.email,
            hashed_password=hashed,
            photo=payload.photo,
        )
        logger.info("Registered user %s", user.id)
        return to_public(user)

    async def verify_credentials(self, email: str, password: str) -> Optional[User]:
        """이메일/비밀번호가 맞으면 해시를 포함한 User를, 아니면 None을 반환합니다."""
        user = await self.repo.get_by_email(email, with_password=True)
        if not user or not await user.correct_password(password, user.hashed_password):
            logger.warning("Invalid credentials")
            return None
        return user

    async def get_user(self, user_id: str) -> UserPublic:
        user = await self.repo.get(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    async def update_profile(self, user_id: str, **fields: Any) -> UserPublic:
        supplied = [name for name in PASSWORD_FIELDS if name in fields]
        if supplied:
            raise ValidationError(supplied[0], "This operation is not for password updates")

        payload = validate_input(UserUpdate, fields)
        changes = payload.model_dump(exclude_unset=True)
        # name/email은 필수 필드이므로 None으로 지울 수 없음
        changes = {k: v for k, v in changes.items() if v is not None or k == "photo"}

        user = await self._get_full(user_id)
        if "email" in changes and changes["email"] != user.email:
            existing = await self.repo.get_by_email(changes["email"])
            if existing:
                logger.warning("Profile update rejected: email already registered")
                raise UniquenessError("email", changes["email"])

        for key, value in changes.items():
            setattr(user, key, value)
        user = await self.repo.save(user)
        logger.info("Updated profile of user %s (%s)", user.id, ", ".join(sorted(changes)) or "no changes")
        return to_public(user)

    async def change_password(self, user_id: str, password: str, password_confirm: str) -> UserPublic:
        payload = validate_input(PasswordChange, {"password": password, "password_confirm": password_confirm})

        user = await self._get_full(user_id)
        hashed = await get_password_hash_async(payload.password)
        user.set_password_hash(hashed, changed=True)
        user = await self.repo.save(user)
        logger.info("Changed password of user %s", user.id)
        return to_public(user)

    async def is_token_stale(self, user_id: str, issued_at: int) -> bool:
        """issued_at(epoch 초)에 발급된 토큰이 이후 비밀번호 변경으로 무효가 되었는지 확인합니다."""
        user = await self.get_user(user_id)
        return user.changed_password_after(issued_at)

    async def delete_user(self, user_id: str) -> None:
        user = await self._get_full(user_id)
        await self.repo.delete(user)
        logger.info("Deleted user %s", user_id)

    async def _get_full(self, user_id: str) -> User:
        user = await self.repo.get(user_id, with_password=True)
        if user is None:
            raise UserNotFoundError(user_id)
        return user
