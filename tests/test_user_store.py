import pytest

from blogauth.auth.passwords import verify_password
from blogauth.auth.users import UserStore
from blogauth.errors import DuplicateIdentity, EmptyPassword, PersistenceError, ValidationError


def test_create_stores_hash_not_plaintext(store):
    u = store.create("alice", "a@x.com", "Secret1!")
    assert u.id and u.username == "alice" and u.email == "a@x.com"
    assert u.password_hash != "Secret1!"
    assert verify_password("Secret1!", u.password_hash)

    text = store.path.read_text(encoding="utf-8")
    assert "Secret1!" not in text
    assert u.password_hash in text


def test_records_survive_a_new_store_instance(store):
    u = store.create("alice", "a@x.com", "Secret1!")
    again = UserStore(store.path)
    assert again.find_by_id(u.id) == u
    assert again.find_by_username("alice") == u
    assert again.find_by_email("a@x.com") == u


def test_hash_runs_before_persisting(tmp_path):
    calls = []

    def fake_hasher(plain):
        calls.append(plain)
        return "hashed:" + plain[::-1]

    s = UserStore(tmp_path / "users.yml", hasher=fake_hasher)
    u = s.create("bob", "b@x.com", "pw")
    assert calls == ["pw"]
    assert u.password_hash == "hashed:wp"


def test_duplicate_email_rejected_regardless_of_username(store):
    store.create("alice", "a@x.com", "Secret1!")
    with pytest.raises(DuplicateIdentity):
        store.create("someone-else", "a@x.com", "Secret1!")
    with pytest.raises(DuplicateIdentity):
        store.create("third", "A@X.com", "Secret1!")


def test_duplicate_username_rejected(store):
    store.create("alice", "a@x.com", "Secret1!")
    with pytest.raises(DuplicateIdentity):
        store.create("alice", "other@x.com", "Secret1!")


@pytest.mark.parametrize("email", ["not-an-email", "a@b", "a b@c.com", ""])
def test_malformed_email_rejected(store, email):
    with pytest.raises(ValidationError):
        store.create("alice", email, "Secret1!")
    assert store.list_users() == []


def test_empty_password_rejected(store):
    with pytest.raises(EmptyPassword):
        store.create("alice", "a@x.com", "   ")


def test_update_password_rehashes(store):
    u = store.create("alice", "a@x.com", "Secret1!")
    updated = store.update_fields(u.id, {"password": "N3wSecret"})
    assert updated.password_hash != u.password_hash
    assert verify_password("N3wSecret", updated.password_hash)
    assert not verify_password("Secret1!", updated.password_hash)


def test_update_username_keeps_hash(store):
    u = store.create("alice", "a@x.com", "Secret1!")
    updated = store.update_fields(u.id, {"username": "alice2"})
    assert updated.username == "alice2"
    assert updated.password_hash == u.password_hash
    assert store.find_by_username("alice") is None


def test_update_unknown_id_returns_none(store):
    assert store.update_fields("nope", {"username": "x"}) is None


def test_update_rejects_taken_username(store):
    store.create("alice", "a@x.com", "Secret1!")
    bob = store.create("bob", "b@x.com", "Secret1!")
    with pytest.raises(DuplicateIdentity):
        store.update_fields(bob.id, {"username": "alice"})


@pytest.mark.parametrize("fields", [{}, {"role": "admin"}, {"email": "bad"}])
def test_update_rejects_bad_fields(store, fields):
    u = store.create("alice", "a@x.com", "Secret1!")
    with pytest.raises(ValidationError):
        store.update_fields(u.id, fields)


def test_delete(store):
    u = store.create("alice", "a@x.com", "Secret1!")
    assert store.delete_by_id(u.id) is True
    assert store.find_by_id(u.id) is None
    assert store.delete_by_id(u.id) is False


@pytest.mark.parametrize("content", [b"users: [unclosed", b"users:\n  \xff\xfe: {}\n"])
def test_corrupt_file_surfaces_as_persistence_error(store, content):
    store.path.parent.mkdir(parents=True, exist_ok=True)
    store.path.write_bytes(content)
    with pytest.raises(PersistenceError) as ei:
        store.find_by_username("alice")
    assert "unclosed" not in str(ei.value)


def test_failed_write_leaves_no_temp_file(store, monkeypatch):
    def broken_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr("blogauth.auth.users.os.replace", broken_replace)
    with pytest.raises(PersistenceError):
        store.create("alice", "a@x.com", "Secret1!")
    assert list(store.path.parent.glob("*.tmp_*")) == []
    assert not store.path.exists()
