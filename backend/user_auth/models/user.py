# User 도메인 모델 (Beanie Document)
# - 이름, 이메일, 프로필 사진, 비밀번호 해시, 비밀번호 변경 시각, 생성/수정 시각
# - 이메일은 소문자로 정규화 후 unique 인덱스
# - 평문 비밀번호와 비밀번호 확인 값은 이 Document에 존재하지 않음 (schemas 참고)

import math
from datetime import datetime, timezone
from typing import Optional

from beanie import Document, Indexed, Replace, Save, SaveChanges, before_event
from pydantic import EmailStr, Field, field_validator

from ..core.security import verify_password_async


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


def normalize_email(value):
    if isinstance(value, str):
        return value.strip().lower()
    return value


class UserRecordMixin:
    """User Document와 조회용 projection이 함께 쓰는 동작 (password_changed_at 필드 필요)"""

    async def correct_password(self, candidate_password: str, user_password: str) -> bool:
        """후보 평문 비밀번호가 저장된 해시와 일치하는지 확인합니다.

        해시는 기본 조회에서 빠지므로 호출자가 명시적으로 가져와서 넘겨야 합니다.
        해시 형식이 잘못되었으면 HashFormatError가 발생합니다.
        """
        return await verify_password_async(candidate_password, user_password)

    def changed_password_after(self, jwt_timestamp: int) -> bool:
        """토큰 발급 시각(epoch 초) 이후에 비밀번호가 바뀌었는지 확인합니다."""
        if self.password_changed_at is None:
            return False

        changed_at = self.password_changed_at
        # MongoDB는 tz 정보 없이 UTC로 돌려줍니다.
        if changed_at.tzinfo is None:
            changed_at = changed_at.replace(tzinfo=timezone.utc)
        changed_timestamp = math.floor(changed_at.timestamp())

        return jwt_timestamp < changed_timestamp


class User(UserRecordMixin, Document):
    name: str
    email: Indexed(EmailStr, unique=True)  # 중복 방지 인덱스
    photo: Optional[str] = None
    hashed_password: str = Field(repr=False)
    password_changed_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @field_validator("email", mode="before")
    @classmethod
    def lowercase_email(cls, value):
        return normalize_email(value)

    @before_event(Save, Replace, SaveChanges)
    def touch_updated_at(self):
        self.updated_at = _utcnow()

    def set_password_hash(self, hashed_password: str, changed: bool = True) -> None:
        """새 해시를 기록합니다. changed=True이면 비밀번호 변경 시각도 갱신합니다."""
        self.hashed_password = hashed_password
        if changed:
            now = _utcnow()
            if self.password_changed_at is not None:
                previous = self.password_changed_at
                if previous.tzinfo is None:
                    previous = previous.replace(tzinfo=timezone.utc)
                # 시각은 뒤로 가지 않음 (변경 전 상태로 되돌릴 수 없음)
                now = max(now, previous)
            self.password_changed_at = now

    class Settings:
        name = "users"  # 컬렉션명
