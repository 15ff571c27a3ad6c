from flashcards.services.passwords import PasswordHasher

hasher = PasswordHasher(rounds=4)


def test_hash_round_trip():
    hashed = hasher.hash("TestPass123!")

    assert hashed.startswith("$2")
    assert hashed != "TestPass123!"
    assert hasher.verify("TestPass123!", hashed)
    assert not hasher.verify("TestPass123?", hashed)


def test_hashes_are_salted():
    assert hasher.hash("TestPass123!") != hasher.hash("TestPass123!")


def test_cost_factor_is_embedded_in_hash():
    assert PasswordHasher(rounds=5).hash("TestPass123!").split("$")[2] == "05"


def test_malformed_hash_does_not_verify():
    assert hasher.verify("TestPass123!", "not-a-bcrypt-hash") is False


def test_overlong_password_does_not_verify():
    hashed = hasher.hash("x" * 72)
    assert hasher.verify("x" * 72, hashed)
    assert hasher.verify("x" * 73, hashed) is False


def test_dummy_verification_always_fails():
    assert hasher.verify_dummy("TestPass123!") is False
    assert hasher.verify_dummy("x" * 100) is False
