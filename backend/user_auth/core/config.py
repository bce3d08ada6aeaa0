# 설정 모듈
# - .env 값들을 한 곳에서 관리
# - 기본값을 제공하여 로컬 실행 편의성 확보

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# 프로젝트 루트 디렉토리 경로 찾기
# 이 파일은 backend/user_auth/core/config.py에 있으므로 3단계 상위가 프로젝트 루트입니다.
PROJECT_ROOT = Path(__file__).parent.parent.parent.parent
ENV_FILE_PATH = PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    APP_NAME: str = "user-auth"
    ENV: str = "dev"

    MONGODB_URI: str = "mongodb://localhost:27017/user_auth"
    # URI에 데이터베이스 이름이 없거나 다른 DB를 쓰고 싶을 때 지정합니다.
    MONGODB_DB: Optional[str] = Field(None, description="MONGODB_URI의 기본 DB 대신 사용할 데이터베이스 이름")

    # bcrypt cost factor. 12가 일반적인 강도이며, 테스트에서는 4로 낮춰서 속도를 확보합니다.
    BCRYPT_ROUNDS: int = Field(default=12, ge=4, le=31)
    PASSWORD_MIN_LENGTH: int = 8

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE_PATH) if ENV_FILE_PATH.exists() else ".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


settings = Settings()

