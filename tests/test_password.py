"""
Tests for bcrypt password hashing.
"""

from auth.password import dummy_hash, hash_password, verify_password


class TestPasswordHashing:
    def test_hash_is_not_plaintext(self):
        hashed = hash_password("Secret123", rounds=4)
        assert hashed != "Secret123"
        assert hashed.startswith("$2")

    def test_same_password_gets_fresh_salt(self):
        assert hash_password("Secret123", rounds=4) != hash_password("Secret123", rounds=4)

    def test_verify_accepts_correct_password(self):
        hashed = hash_password("Secret123", rounds=4)
        assert verify_password("Secret123", hashed) is True

    def test_verify_rejects_wrong_password(self):
        hashed = hash_password("Secret123", rounds=4)
        assert verify_password("wrong", hashed) is False

    def test_verify_treats_malformed_hash_as_mismatch(self):
        assert verify_password("Secret123", "not-a-bcrypt-hash") is False

    def test_dummy_hash_is_cached_and_never_matches_empty(self):
        assert dummy_hash(4) is dummy_hash(4)
        assert verify_password("", dummy_hash(4)) is False
