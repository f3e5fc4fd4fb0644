# ecampaign/authentication/verification_codes.py

import hmac
import re
import secrets
from datetime import timedelta

from ecampaign.operations.clock import utcnow

# Time-boxed numeric codes for email verification and password reset.
# Codes are single-use: callers clear the stored code once validate() passes.

CODE_MIN = 100000
CODE_MAX = 999999
CODE_TTL = timedelta(minutes=15)
# ASCII digits only; \d would also accept full-width and other Unicode digits
CODE_PATTERN = re.compile(r'^[0-9]{6}$')

PURPOSE_VERIFY = 'verify'
PURPOSE_RESET = 'reset'

# column names on the users table for each purpose
CODE_COLUMNS = {
    PURPOSE_VERIFY: ('verify_code', 'verify_code_expires'),
    PURPOSE_RESET: ('reset_code', 'reset_code_expires'),
}


class VerificationCodeService:
    def __init__(self, ttl=CODE_TTL):
        self.ttl = ttl

    def _now(self):
        # extracted for easier monkeypatching in tests
        return utcnow()

    def issue(self, purpose):
        """Return (code, expires_at) for `purpose`; code is uniform over [100000, 999999]."""
        if purpose not in CODE_COLUMNS:
            raise ValueError(f"Unknown code purpose: {purpose}")
        code = str(CODE_MIN + secrets.randbelow(CODE_MAX - CODE_MIN + 1))
        return code, self._now() + self.ttl

    def validate(self, stored_code, stored_expiry, supplied_code, now=None):
        """True iff the codes match and `now` is not past the expiry; no reason is given."""
        if now is None:
            now = self._now()
        if not stored_code or stored_expiry is None or supplied_code is None:
            return False
        supplied_code = str(supplied_code).strip()
        if not CODE_PATTERN.match(supplied_code):
            return False
        matches = hmac.compare_digest(str(stored_code).encode(), supplied_code.encode())
        return matches and now <= stored_expiry

    def stored_fields(self, purpose, code, expires_at):
        code_col, expiry_col = CODE_COLUMNS[purpose]
        return {code_col: code, expiry_col: expires_at}

    def cleared_fields(self, purpose):
        return self.stored_fields(purpose, None, None)
