from services.password_hasher import PasswordHasher


def test_hash_and_verify():
    hasher = PasswordHasher()
    hashed = hasher.hash("Secret1!")

    assert hashed != "Secret1!"
    assert hashed.startswith("$argon2")
    assert hasher.verify("Secret1!", hashed)
    assert not hasher.verify("secret1!", hashed)


def test_hashes_are_salted():
    hasher = PasswordHasher()
    assert hasher.hash("Secret1!") != hasher.hash("Secret1!")


def test_malformed_or_empty_hash_is_a_mismatch():
    hasher = PasswordHasher()
    assert not hasher.verify("Secret1!", "not-a-hash")
    assert not hasher.verify("Secret1!", "")
    assert not hasher.verify("Secret1!", None)
