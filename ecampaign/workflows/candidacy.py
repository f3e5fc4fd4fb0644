# ecampaign/workflows/candidacy.py
"""Politician applications and public politician profiles.

An application moves pending -> approved | rejected (see workflows/admin.py);
this module covers submitting it, the public listings built from
applications and profiles, and the politician-only profile extras
(promises, achievements, profile updates).
"""

import logging

from ecampaign.authentication.rbac import Permission, UserRole
from ecampaign.database.models import (
    Achievement,
    Manifesto,
    PoliticianApplication,
    PoliticianProfile,
    Promise,
    User,
)
from ecampaign.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

PRESIDENTIAL_SEAT = "President"
APPLICATION_FIELDS = ('full_name', 'seat', 'county', 'constituency', 'party', 'motivation', 'fee')
PROFILE_COPY_FIELDS = ('full_name', 'seat', 'county', 'constituency', 'party')
PROFILE_EDITABLE_FIELDS = ('bio', 'party', 'constituency', 'campaign')


def profile_values_from_application(application):
    values = {name: getattr(application, name) for name in PROFILE_COPY_FIELDS}
    values['bio'] = application.motivation
    values['is_verified'] = True
    return values


def require_politician_profile(gateway, rbac, user_id, permission, message):
    """Return the caller's profile, failing on wrong role first and missing profile second."""
    user = gateway.find_one(User, id=user_id)
    if user is None or not rbac.has_permission(user.role, permission):
        raise ForbiddenError(message)
    profile = gateway.find_one(PoliticianProfile, user_id=user_id)
    if profile is None:
        raise NotFoundError("Politician profile not found")
    return profile


class CandidacyWorkflow:
    def __init__(self, gateway, validator, rbac, audit_logger):
        self.gateway = gateway
        self.validator = validator
        self.rbac = rbac
        self.audit = audit_logger

    def apply(self, data):
        user_id, full_name, seat, motivation, fee = self.validator.require_fields(
            data, ['user_id', 'full_name', 'seat', 'motivation', 'fee'], "Missing required fields")
        user_id = self.validator.validate_id(user_id, 'user_id')
        seat = self.validator.sanitize_string(str(seat), max_length=50)
        county = data.get('county')
        if seat != PRESIDENTIAL_SEAT and not (isinstance(county, str) and county.strip()):
            raise ValidationError("County is required for this seat")

        values = {
            'full_name': self.validator.sanitize_string(str(full_name), max_length=120),
            'seat': seat,
            'county': self._optional_text(county, 80),
            'constituency': self._optional_text(data.get('constituency'), 80),
            'party': self._optional_text(data.get('party'), 80),
            'motivation': self.validator.sanitize_string(str(motivation)),
            'fee': str(fee).strip()[:40],
        }

        with self.gateway.transaction():
            user = self.gateway.find_one(User, id=user_id)
            if user is None:
                raise NotFoundError("User not found")
            if self.gateway.find_one(PoliticianApplication, user_id=user_id):
                raise ConflictError("You have already submitted an application")
            if not self.rbac.has_permission(user.role, Permission.APPLY_POLITICIAN):
                raise ForbiddenError("Only voters can apply for candidacy")
            application = self.gateway.insert(
                PoliticianApplication, user_id=user_id, status='pending', **values)
            application_id = application.id

        self.audit.log_event('application_submitted',
                             {'application_id': application_id, 'seat': seat}, user_id=user_id)
        return {'message': "Application submitted. Please wait for admin approval."}

    def _optional_text(self, value, max_length):
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        return self.validator.sanitize_string(str(value), max_length=max_length)

    def list_verified(self):
        profiles = self.gateway.find_all(PoliticianProfile, order_by='full_name', is_verified=True)
        return [p.to_dict('id', 'user_id', 'full_name', 'seat', 'county', 'constituency', 'party', 'bio')
                for p in profiles]

    def list_all(self):
        """Every application, newest first, with the profile id once approved."""
        applications = self.gateway.find_all(PoliticianApplication, order_by='created_at', descending=True)
        result = []
        for application in applications:
            row = application.to_dict('id', 'user_id', 'full_name', 'seat', 'county',
                                      'constituency', 'party', 'status')
            profile = None
            if application.status == 'approved':
                profile = self.gateway.find_one(PoliticianProfile, user_id=application.user_id)
            row['profile_id'] = profile.id if profile else None
            result.append(row)
        return result

    def profile_page(self, profile_id):
        profile_id = self.validator.validate_id(profile_id, 'profile id')
        profile = self.gateway.find_one(PoliticianProfile, id=profile_id)
        if profile is None:
            raise NotFoundError("Profile not found")

        manifestos = self.gateway.find_all(Manifesto, order_by='created_at', descending=True,
                                           politician_id=profile_id)
        achievements = self.gateway.find_all(Achievement, order_by='created_at', politician_id=profile_id)
        promises = self.gateway.find_all(Promise, order_by='created_at', politician_id=profile_id)
        return {
            'profile': profile.to_dict('id', 'user_id', 'full_name', 'seat', 'county',
                                       'constituency', 'party', 'bio', 'campaign'),
            'manifestos': [m.to_dict('id', 'category', 'content', 'created_at') for m in manifestos],
            'achievements': [a.to_dict('title', 'description', 'created_at') for a in achievements],
            'promises': [p.to_dict('content', 'created_at') for p in promises],
        }

    def my_profile(self, user_id):
        user_id = self.validator.validate_id(user_id, 'user_id')
        profile = self.gateway.find_one(PoliticianProfile, user_id=user_id)
        if profile is None:
            raise NotFoundError("Profile not found")
        return profile.to_dict()

    def add_promise(self, data):
        user_id, content = self.validator.require_fields(data, ['user_id', 'content'])
        user_id = self.validator.validate_id(user_id, 'user_id')
        with self.gateway.transaction():
            profile = require_politician_profile(self.gateway, self.rbac, user_id,
                                                 Permission.MANAGE_PROFILE, "Access denied")
            self.gateway.insert(Promise, politician_id=profile.id,
                                content=self.validator.sanitize_string(str(content)))
        return {'message': "Promise added"}

    def add_achievement(self, data):
        user_id, title = self.validator.require_fields(data, ['user_id', 'title'])
        user_id = self.validator.validate_id(user_id, 'user_id')
        with self.gateway.transaction():
            profile = require_politician_profile(self.gateway, self.rbac, user_id,
                                                 Permission.MANAGE_PROFILE, "Access denied")
            self.gateway.insert(
                Achievement,
                politician_id=profile.id,
                title=self.validator.sanitize_string(str(title), max_length=200),
                description=self._optional_text(data.get('description'), 5000),
            )
        return {'message': "Achievement added"}

    def update_profile(self, data):
        """Upsert the caller's profile.

        A politician whose approval left no profile behind gets one rebuilt
        from their approved application before the edits are applied.
        """
        (user_id,) = self.validator.require_fields(data, ['user_id'], "user_id is required")
        user_id = self.validator.validate_id(user_id, 'user_id')
        edits = {name: self._optional_text(data.get(name), 5000)
                 for name in PROFILE_EDITABLE_FIELDS if name in data}

        with self.gateway.transaction():
            user = self.gateway.find_one(User, id=user_id)
            if user is None or user.role != UserRole.POLITICIAN.value:
                raise ForbiddenError("Only politicians can update a profile")
            values = {}
            if self.gateway.find_one(PoliticianProfile, user_id=user_id) is None:
                application = self.gateway.find_one(PoliticianApplication, user_id=user_id, status='approved')
                if application is None:
                    raise NotFoundError("Politician profile not found")
                logger.warning("Rebuilding missing profile for politician %s", user_id)
                values.update(profile_values_from_application(application))
            values.update(edits)
            profile = self.gateway.upsert(PoliticianProfile, {'user_id': user_id}, values)
            result = profile.to_dict()

        return {'message': "Profile updated", 'profile': result}
