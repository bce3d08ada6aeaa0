# 요청/응답 스키마 정의 (Pydantic 모델)
# - 입력 스키마: 필드 단위 검증 + 레코드 단위 검증(비밀번호 확인 일치)
# - 응답 스키마: 비밀번호 해시가 빠진 기본 조회 projection

from datetime import datetime
from typing import Any, Dict, Optional

import pydantic
from beanie import PydanticObjectId
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

from ..core.config import settings
from ..core.exceptions import ValidationError
from ..models.user import UserRecordMixin, normalize_email

PASSWORD_MISMATCH_MESSAGE = "Confirm password should be the same as the password field"

# 필수 값이 빠졌을 때 사용자에게 보여줄 메시지
REQUIRED_MESSAGES = {
    "name": "A user must have a name",
    "email": "A user must have an email",
    "password": "A user must have a password",
    "password_confirm": "A user must have a confirm password",
}


def _check_password_confirm(password: str, password_confirm: str) -> None:
    if password_confirm != password:
        raise PydanticCustomError(
            "password_mismatch",
            PASSWORD_MISMATCH_MESSAGE,
            {"field": "password_confirm"},
        )


class UserCreate(BaseModel):
    # 필드 선언 순서 = 검증 순서 (name -> email -> password -> password_confirm)
    name: str = Field(min_length=1)
    email: EmailStr
    photo: Optional[str] = None
    password: str = Field(min_length=settings.PASSWORD_MIN_LENGTH, repr=False)
    password_confirm: str = Field(repr=False)

    model_config = ConfigDict(extra="ignore")

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("email", mode="before")
    @classmethod
    def lowercase_email(cls, value):
        return normalize_email(value)

    @model_validator(mode="after")
    def passwords_match(self):
        # 모든 필드 검증을 통과한 뒤에만 실행되는 레코드 단위 검증
        _check_password_confirm(self.password, self.password_confirm)
        return self


class UserUpdate(BaseModel):
    """프로필 수정용. 비밀번호는 PasswordChange로만 바꿀 수 있습니다."""
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[EmailStr] = None
    photo: Optional[str] = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("email", mode="before")
    @classmethod
    def lowercase_email(cls, value):
        return normalize_email(value)


class PasswordChange(BaseModel):
    password: str = Field(min_length=settings.PASSWORD_MIN_LENGTH, repr=False)
    password_confirm: str = Field(repr=False)

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="after")
    def passwords_match(self):
        _check_password_confirm(self.password, self.password_confirm)
        return self


class UserPublic(UserRecordMixin, BaseModel):
    """기본 조회 projection (hashed_password 제외)"""
    id: PydanticObjectId = Field(alias="_id")
    name: str
    email: EmailStr
    photo: Optional[str] = None
    password_changed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(populate_by_name=True)


def validate_input(schema, data: Dict[str, Any]):
    """스키마 검증을 실행하고 pydantic 오류를 ValidationError로 변환합니다.

    첫 번째 오류의 필드와 메시지를 대표로 사용하고, 전체 목록은 errors에 담습니다.
    """
    try:
        return schema.model_validate(data)
    except pydantic.ValidationError as e:
        errors = []
        for err in e.errors():
            if err["loc"]:
                field = str(err["loc"][0])
            else:
                field = err.get("ctx", {}).get("field", "__root__")
            if field in REQUIRED_MESSAGES and (err["type"] == "missing" or err.get("input") in (None, "")):
                message = REQUIRED_MESSAGES[field]
            else:
                message = err["msg"]
            errors.append({"field": field, "message": message})
        first = errors[0]
        raise ValidationError(first["field"], first["message"], errors) from e
