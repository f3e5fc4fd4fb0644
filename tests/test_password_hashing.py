import pytest
from ecampaign.encryption.password_hashing import PasswordHashingService


@pytest.fixture
def password_service():
    return PasswordHashingService()


def test_hash_and_verify_password(password_service):
    password = "StrongPass123!"
    hashed = password_service.hash_password(password)

    assert hashed != password
    assert hashed.startswith("$argon2id$")
    assert password_service.verify_password(password, hashed) is True
    assert password_service.verify_password("WrongPass456!", hashed) is False
    assert password_service.needs_rehash(hashed) is False


def test_hashes_are_salted(password_service):
    assert password_service.hash_password("pw1") != password_service.hash_password("pw1")


@pytest.mark.parametrize("bad", ["", None, 123])
def test_hash_rejects_empty_or_non_string(password_service, bad):
    with pytest.raises(ValueError):
        password_service.hash_password(bad)


def test_verify_garbage_hash_is_false(password_service):
    assert password_service.verify_password("pw1", "not-a-hash") is False
    assert password_service.verify_password("pw1", None) is False
    assert password_service.verify_password(None, password_service.hash_password("pw1")) is False
