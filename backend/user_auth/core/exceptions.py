# 커스텀 예외 클래스 정의
# Python 표준 예외(Exception)를 상속받아 사용자 도메인에 특화된 예외를 만듭니다.
# 호출하는 쪽(인증 컨트롤러)은 이 예외 타입으로 응답을 구분할 수 있습니다.

from typing import Any, Dict, List, Optional


class UserServiceError(Exception):
    """사용자 서비스 관련 기본 예외 클래스

    모든 사용자 관련 예외의 기본 클래스입니다.
    try-except 블록에서 이 클래스 하나로 전부 잡을 수도 있습니다.
    """
    pass


class ValidationError(UserServiceError):
    """입력값 검증 실패 시 발생하는 예외

    필드 단위 검증(이름, 이메일 형식, 비밀번호 길이)과
    레코드 단위 검증(비밀번호 확인 일치)에서 모두 사용합니다.
    사용자가 값을 고쳐서 다시 요청하면 복구 가능한 오류입니다.

    Attributes:
        field_name: 검증 실패한 첫 번째 필드 이름
        message: 에러 메시지
        errors: 전체 검증 오류 목록 (pydantic에서 변환된 경우)
    """
    def __init__(self, field_name: str, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        self.field_name = field_name
        self.message = message
        self.errors = errors or [{"field": field_name, "message": message}]
        super().__init__(f"검증 실패 [{field_name}]: {message}")


class UniquenessError(UserServiceError):
    """유니크 제약 위반 시 발생하는 예외 (예: 이미 가입된 이메일)

    Attributes:
        field_name: 중복된 필드 이름
        value: 중복된 값
    """
    def __init__(self, field_name: str, value: Any):
        self.field_name = field_name
        self.value = value
        self.message = f"{field_name} already registered"
        super().__init__(f"중복 값 [{field_name}]: {value}")


class HashFormatError(UserServiceError):
    """저장된 비밀번호 해시를 해석할 수 없을 때 발생하는 예외

    데이터 무결성 문제이므로 호출자에게는 내부 오류로 전달되어야 합니다.
    """
    def __init__(self, message: str = "stored password hash is malformed"):
        self.message = message
        super().__init__(f"해시 형식 오류: {message}")


class UserNotFoundError(UserServiceError):
    """id로 사용자를 찾지 못했을 때 발생하는 예외"""
    def __init__(self, user_id: Any):
        self.user_id = user_id
        self.message = f"User not found: {user_id}"
        super().__init__(self.message)
