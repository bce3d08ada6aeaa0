# 사용자 서비스 테스트 (mongomock-motor 기반 Beanie)
import time

import pytest

from user_auth.core.exceptions import HashFormatError, UniquenessError, UserNotFoundError, ValidationError
from user_auth.models.user import User
from user_auth.repositories.user_repository import UserRepository
from user_auth.schemas.user_schema import UserPublic


def _signup(**overrides):
    data = {
        "name": "Ada",
        "email": "ADA@Example.com",
        "password": "secret123",
        "password_confirm": "secret123",
    }
    data.update(overrides)
    return data


def test_register_stores_normalized_email_and_hides_hash(run, service, ada):
    assert isinstance(ada, UserPublic)
    assert ada.email == "ada@example.com"
    assert ada.password_changed_at is None
    dumped = ada.model_dump()
    assert "hashed_password" not in dumped
    assert "password" not in dumped
    assert "password_confirm" not in dumped
    assert "secret123" not in str(dumped)

    # 기본 조회 projection에는 해시가 없음
    fetched = run(UserRepository().get_by_email("ada@example.com"))
    assert isinstance(fetched, UserPublic)
    assert not hasattr(fetched, "hashed_password")


def test_stored_document_has_only_hash(run, ada):
    raw = run(User.get_motor_collection().find_one({"email": "ada@example.com"}))
    assert raw["hashed_password"] != "secret123"
    assert raw["hashed_password"].startswith("$2")
    assert "password" not in raw
    assert "password_confirm" not in raw


def test_hash_is_available_when_explicitly_requested(run, ada):
    user = run(UserRepository().get(str(ada.id), with_password=True))
    assert isinstance(user, User)
    assert run(user.correct_password("secret123", user.hashed_password)) is True
    assert run(user.correct_password("secret124", user.hashed_password)) is False


def test_register_confirm_mismatch_persists_nothing(run, service):
    with pytest.raises(ValidationError) as exc:
        run(service.register(**_signup(password_confirm="different")))
    assert exc.value.field_name == "password_confirm"
    assert run(User.count()) == 0


def test_register_short_password(run, service):
    with pytest.raises(ValidationError) as exc:
        run(service.register(**_signup(password="short1", password_confirm="short1")))
    assert exc.value.field_name == "password"
    assert run(User.count()) == 0


def test_register_duplicate_email(run, service, ada):
    with pytest.raises(UniquenessError) as exc:
        run(service.register(**_signup(name="Other", email="ada@EXAMPLE.com")))
    assert exc.value.field_name == "email"
    assert run(User.count()) == 1


def test_unique_index_rejects_duplicate_insert(run, ada):
    # 서비스의 사전 확인을 건너뛴 동시 가입도 인덱스에서 거절
    with pytest.raises(UniquenessError):
        run(UserRepository().create(name="Other", email="ada@example.com", hashed_password="$2b$04$x"))


def test_verify_credentials(run, service, ada):
    user = run(service.verify_credentials("ADA@example.com", "secret123"))
    assert user is not None and user.id == ada.id
    assert run(service.verify_credentials("ada@example.com", "wrong-pass")) is None
    assert run(service.verify_credentials("nobody@example.com", "secret123")) is None


def test_verify_credentials_with_malformed_hash(run, service, ada):
    user = run(UserRepository().get(str(ada.id), with_password=True))
    user.hashed_password = "garbage"
    run(user.save())
    with pytest.raises(HashFormatError):
        run(service.verify_credentials("ada@example.com", "secret123"))


def test_change_password_rehashes_and_records_time(run, service, ada):
    repo = UserRepository()
    before = run(repo.get(str(ada.id), with_password=True))

    first = run(service.change_password(str(ada.id), "secret123", "secret123"))
    after_first = run(repo.get(str(ada.id), with_password=True))
    # 같은 평문을 다시 써도 salt 때문에 해시가 바뀜
    assert after_first.hashed_password != before.hashed_password
    assert first.password_changed_at is not None

    run(service.change_password(str(ada.id), "another123", "another123"))
    after_second = run(repo.get(str(ada.id), with_password=True))
    assert after_second.hashed_password != after_first.hashed_password
    assert after_second.password_changed_at >= after_first.password_changed_at
    assert run(service.verify_credentials("ada@example.com", "another123")) is not None
    assert run(service.verify_credentials("ada@example.com", "secret123")) is None


def test_change_password_validation(run, service, ada):
    with pytest.raises(ValidationError) as exc:
        run(service.change_password(str(ada.id), "another123", "another124"))
    assert exc.value.field_name == "password_confirm"
    user = run(service.get_user(str(ada.id)))
    assert user.password_changed_at is None


def test_update_profile_leaves_password_untouched(run, service, ada):
    repo = UserRepository()
    before = run(repo.get(str(ada.id), with_password=True))

    updated = run(service.update_profile(str(ada.id), name="Ada Lovelace", email="Lovelace@Example.com", photo="ada.jpg"))
    assert updated.name == "Ada Lovelace"
    assert updated.email == "lovelace@example.com"
    assert updated.photo == "ada.jpg"
    assert updated.password_changed_at is None

    after = run(repo.get(str(ada.id), with_password=True))
    assert after.hashed_password == before.hashed_password
    assert after.updated_at >= before.updated_at


def test_update_profile_rejects_password_fields(run, service, ada):
    with pytest.raises(ValidationError) as exc:
        run(service.update_profile(str(ada.id), password="another123"))
    assert exc.value.field_name == "password"


def test_update_profile_duplicate_email(run, service, ada):
    run(service.register(**_signup(name="Grace", email="grace@example.com")))
    with pytest.raises(UniquenessError):
        run(service.update_profile(str(ada.id), email="GRACE@example.com"))


def test_token_staleness(run, service, ada):
    issued_at = int(time.time()) - 60
    assert run(service.is_token_stale(str(ada.id), issued_at)) is False

    run(service.change_password(str(ada.id), "another123", "another123"))
    assert run(service.is_token_stale(str(ada.id), issued_at)) is True
    assert run(service.is_token_stale(str(ada.id), int(time.time()) + 1)) is False


def test_get_and_delete_user(run, service, ada):
    assert run(service.get_user(str(ada.id))).email == "ada@example.com"
    run(service.delete_user(str(ada.id)))
    with pytest.raises(UserNotFoundError):
        run(service.get_user(str(ada.id)))
    with pytest.raises(UserNotFoundError):
        run(service.delete_user("not-an-object-id"))
