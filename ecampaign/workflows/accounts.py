# ecampaign/workflows/accounts.py
"""Registration, email verification, login and password recovery.

Each operation validates its input, talks to the users table through the
QueryGateway inside a single transaction, and only then sends email. A
failed email send never rolls back the row that was just written.
"""

import logging

from ecampaign.authentication.credentials import CredentialStore
from ecampaign.authentication.rbac import UserRole
from ecampaign.authentication.verification_codes import (
    PURPOSE_RESET,
    PURPOSE_VERIFY,
    VerificationCodeService,
)
from ecampaign.database.models import User
from ecampaign.errors import AuthError, ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

INVALID_CODE = "Invalid or expired code"


class AccountWorkflow:
    def __init__(self, gateway, validator, mailer, audit_logger,
                 credentials=None, codes=None):
        self.gateway = gateway
        self.validator = validator
        self.mailer = mailer
        self.audit = audit_logger
        self.credentials = credentials or CredentialStore()
        self.codes = codes or VerificationCodeService()

    def register(self, data):
        username, email, password = self.validator.require_fields(
            data, ['username', 'email', 'password'])
        username = self.validator.sanitize_string(username, max_length=80)
        email = self.validator.normalize_email(email)
        role = str(data.get('role') or UserRole.VOTER.value).strip().lower()

        if not self.validator.validate_username(username):
            raise ValidationError("Invalid username")
        if role != UserRole.VOTER.value:
            # politician comes from approval, admin is assigned out of band
            raise ValidationError("Only voter accounts can be registered")

        code, expires_at = self.codes.issue(PURPOSE_VERIFY)
        with self.gateway.transaction():
            if self.gateway.find_one(User, email=email) or self.gateway.find_one(User, username=username):
                raise ConflictError("User already exists")
            user = self.gateway.insert(
                User,
                username=username,
                email=email,
                password_hash=self.credentials.hash(self.validator.validate_password(password)),
                role=role,
                is_active=True,
                email_verified=False,
                **self.codes.stored_fields(PURPOSE_VERIFY, code, expires_at),
            )
            user_id = user.id

        self.audit.log_event('user_registered', {'email': email}, user_id=user_id)
        self.mailer.send_verification_code(email, code)
        return {'success': True}

    def verify_email(self, data):
        email, code = self.validator.require_fields(data, ['email', 'code'])
        email = self.validator.normalize_email(email)

        with self.gateway.transaction():
            user = self.gateway.find_one(User, email=email)
            if user is None or not self.codes.validate(user.verify_code, user.verify_code_expires, code):
                raise ValidationError(INVALID_CODE)
            self.gateway.update(
                User,
                dict(email_verified=True, **self.codes.cleared_fields(PURPOSE_VERIFY)),
                id=user.id,
            )
            user_id = user.id

        self.audit.log_event('email_verified', {'email': email}, user_id=user_id)
        return {'success': True}

    def login(self, data, source_ip=None):
        email, password = self.validator.require_fields(
            data, ['email', 'password'], "Email and password are required")
        email = self.validator.normalize_email(email)

        user = self.gateway.find_one(User, email=email)
        try:
            self.credentials.authenticate(user, password)
        except AuthError as e:
            self.audit.log_event('failed_login', {'email': email, 'ip': source_ip, 'reason': str(e)})
            raise

        if self.credentials.needs_rehash(user.password_hash):
            # hash made with older cost parameters
            with self.gateway.transaction():
                self.gateway.update(User, {'password_hash': self.credentials.hash(password)}, id=user.id)
            logger.info("Rehashed password for user %s", user.id)

        self.audit.log_event('successful_login', {'ip': source_ip}, user_id=user.id)
        return user.to_dict(*User.PUBLIC_FIELDS)

    def forgot_password(self, data):
        (email,) = self.validator.require_fields(data, ['email'], "Email is required")
        email = self.validator.normalize_email(email)

        code, expires_at = self.codes.issue(PURPOSE_RESET)
        with self.gateway.transaction():
            user = self.gateway.find_one(User, email=email)
            if user is None:
                raise NotFoundError("Email not found")
            self.gateway.update(User, self.codes.stored_fields(PURPOSE_RESET, code, expires_at), id=user.id)
            user_id = user.id

        self.audit.log_event('password_reset_requested', {'email': email}, user_id=user_id)
        self.mailer.send_reset_code(email, code)
        return {'success': True}

    def reset_password(self, data):
        email, code, password = self.validator.require_fields(data, ['email', 'code', 'password'])
        email = self.validator.normalize_email(email)

        with self.gateway.transaction():
            user = self.gateway.find_one(User, email=email)
            if user is None or not self.codes.validate(user.reset_code, user.reset_code_expires, code):
                raise ValidationError(INVALID_CODE)
            self.gateway.update(
                User,
                dict(password_hash=self.credentials.hash(self.validator.validate_password(password)),
                     **self.codes.cleared_fields(PURPOSE_RESET)),
                id=user.id,
            )
            user_id = user.id

        self.audit.log_event('password_reset', {'email': email}, user_id=user_id)
        return {'success': True}
