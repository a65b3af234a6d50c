import pytest

from rvms_api import security


@pytest.fixture
def salt():
    return security.generate_salt(4)


def test_hash_validates_with_same_salt_and_password(salt):
    hashed = security.hash_password("pw1", salt)
    assert security.validate_password(salt, hashed, "pw1")


def test_wrong_password_or_salt_is_rejected(salt):
    hashed = security.hash_password("pw1", salt)
    assert not security.validate_password(salt, hashed, "wrong")
    assert not security.validate_password(security.generate_salt(4), hashed, "pw1")


def test_salts_are_random_and_change_the_hash():
    a, b = security.generate_salt(4), security.generate_salt(4)
    assert a != b
    assert security.hash_password("pw1", a) != security.hash_password("pw1", b)


def test_hash_is_bcrypt_and_hides_password(salt):
    hashed = security.hash_password("pw1", salt)
    assert hashed.startswith("$2b$04$")
    assert "pw1" not in hashed


def test_salt_carries_cost_factor():
    assert security.generate_salt(5).startswith("$2b$05$")


@pytest.mark.parametrize("stored", ["", "pw1", None, "$2b$04$short"])
def test_malformed_stored_hash_never_validates(salt, stored):
    assert not security.validate_password(salt, stored, "pw1")


@pytest.mark.parametrize("bad_salt", ["", "salt", None])
def test_malformed_salt_never_validates(salt, bad_salt):
    hashed = security.hash_password("pw1", salt)
    assert not security.validate_password(bad_salt, hashed, "pw1")
