# ecampaign/encryption/password_hashing.py

from argon2 import PasswordHasher
from argon2.exceptions import VerificationError, InvalidHashError, HashingError

# Password hashing and verification using Argon2id with fixed cost parameters.
# Hashes are salted per call, so two hashes of one password never match.


class PasswordHashingService:
    def __init__(self):
        self.ph = PasswordHasher(
            time_cost=3,
            memory_cost=65536,
            parallelism=4,
            hash_len=32,
            salt_len=16,
        )

    def hash_password(self, password: str) -> str:
        if not isinstance(password, str) or not password:
            raise ValueError("Password must be a non-empty string")
        try:
            return self.ph.hash(password)
        except HashingError as e:
            raise ValueError(f"Password hashing failed: {str(e)}")

    def verify_password(self, password: str, hash_value: str) -> bool:
        if not isinstance(password, str) or not password or not hash_value:
            return False
        try:
            return self.ph.verify(hash_value, password)
        except (VerificationError, InvalidHashError):
            return False

    def needs_rehash(self, hash_value: str) -> bool:
        return self.ph.check_needs_rehash(hash_value)
