import pytest

from blogauth.auth.passwords import burn_verify, hash_password, verify_password
from blogauth.errors import EmptyPassword, ValidationError


def test_hash_is_salted_and_both_hashes_verify():
    h1 = hash_password("Secret1!")
    h2 = hash_password("Secret1!")
    assert h1 != h2
    assert "Secret1!" not in h1
    assert verify_password("Secret1!", h1)
    assert verify_password("Secret1!", h2)


def test_single_character_change_fails_verification():
    plain = "Secret1!"
    h = hash_password(plain)
    for i in range(len(plain)):
        altered = plain[:i] + ("x" if plain[i] != "x" else "y") + plain[i + 1 :]
        assert not verify_password(altered, h)


@pytest.mark.parametrize("plain", ["", "   ", "\t\n", None])
def test_empty_password_is_rejected(plain):
    with pytest.raises(EmptyPassword):
        hash_password(plain)


def test_empty_password_is_a_validation_error():
    assert issubclass(EmptyPassword, ValidationError)


@pytest.mark.parametrize("bad_hash", [None, "", "not-a-hash", "$argon2id$v=19$broken"])
def test_verify_returns_false_for_missing_or_malformed_hash(bad_hash):
    assert verify_password("Secret1!", bad_hash) is False


def test_verify_with_empty_plaintext_is_false():
    assert verify_password("", hash_password("Secret1!")) is False


def test_burn_verify_does_not_raise():
    burn_verify("whatever")
    burn_verify("")


@pytest.mark.parametrize("bad_hash", ["$argon2id$v=19$m=65536,t=3,p=4$é", "$argon2id$é", "пароль"])
def test_verify_returns_false_for_non_ascii_hash(bad_hash):
    assert verify_password("Secret1!", bad_hash) is False
