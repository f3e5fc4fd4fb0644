# ecampaign/authentication/credentials.py

from ecampaign.encryption.password_hashing import PasswordHashingService
from ecampaign.errors import AuthError, ForbiddenError

# Login gate: the password is checked first, and account status only after a
# match, so an unauthenticated caller cannot tell suspended or unverified
# accounts apart from a wrong password.

INVALID_CREDENTIALS = "Invalid email or password"
ACCOUNT_SUSPENDED = "Account is suspended"
EMAIL_NOT_VERIFIED = "Please verify your email first"


class CredentialStore:
    def __init__(self, password_service=None):
        self.passwords = password_service or PasswordHashingService()

    def hash(self, password):
        return self.passwords.hash_password(password)

    def verify(self, password, password_hash):
        return self.passwords.verify_password(password, password_hash)

    def needs_rehash(self, password_hash):
        return self.passwords.needs_rehash(password_hash)

    def authenticate(self, user, password):
        """Return `user` if it may log in with `password`, else raise AuthError/ForbiddenError."""
        if user is None:
            # burn a verification anyway so unknown emails cost the same as wrong passwords
            self.passwords.verify_password(password, _DUMMY_HASH)
            raise AuthError(INVALID_CREDENTIALS)
        if not self.verify(password, user.password_hash):
            raise AuthError(INVALID_CREDENTIALS)
        if not user.is_active:
            raise ForbiddenError(ACCOUNT_SUSPENDED)
        if not user.email_verified:
            raise ForbiddenError(EMAIL_NOT_VERIFIED)
        return user


_DUMMY_HASH = PasswordHashingService().hash_password("not-a-real-password")
