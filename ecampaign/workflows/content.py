# ecampaign/workflows/content.py
"""Manifestos, comments and ratings."""

import logging
from decimal import Decimal, ROUND_HALF_UP

from ecampaign.authentication.rbac import Permission
from ecampaign.database.models import (
    MANIFESTO_CATEGORIES,
    Comment,
    Manifesto,
    PoliticianProfile,
    Rating,
    User,
)
from ecampaign.errors import NotFoundError, ValidationError
from ecampaign.workflows.candidacy import require_politician_profile

logger = logging.getLogger(__name__)

DEFAULT_TARGET_TYPE = 'manifesto'

# rows a comment or rating may point at
TARGET_MODELS = {
    'manifesto': Manifesto,
    'politician': PoliticianProfile,
}


def mean_rating(values):
    """Arithmetic mean rounded half-up to one decimal; 0 for no ratings."""
    if not values:
        return 0
    mean = Decimal(sum(values)) / Decimal(len(values))
    return float(mean.quantize(Decimal('0.1'), rounding=ROUND_HALF_UP))


class ContentWorkflow:
    def __init__(self, gateway, validator, rbac, audit_logger):
        self.gateway = gateway
        self.validator = validator
        self.rbac = rbac
        self.audit = audit_logger

    def post_manifesto(self, data):
        user_id, category, content = self.validator.require_fields(
            data, ['user_id', 'category', 'content'])
        if category not in MANIFESTO_CATEGORIES:
            raise ValidationError("Invalid manifesto category")
        user_id = self.validator.validate_id(user_id, 'user_id')
        content = self.validator.sanitize_string(str(content))

        with self.gateway.transaction():
            profile = require_politician_profile(self.gateway, self.rbac, user_id,
                                                 Permission.POST_MANIFESTO,
                                                 "Only politicians can post manifestos")
            manifesto = self.gateway.insert(Manifesto, politician_id=profile.id,
                                            category=category, content=content)
            manifesto_id = manifesto.id

        self.audit.log_event('manifesto_posted', {'manifesto_id': manifesto_id, 'category': category},
                             user_id=user_id)
        return {'message': "Manifesto posted successfully"}

    def list_manifestos(self):
        manifestos = self.gateway.find_all(Manifesto, order_by='created_at', descending=True)
        result = []
        for manifesto in manifestos:
            row = manifesto.to_dict('id', 'category', 'content', 'created_at')
            row['politician_profiles'] = manifesto.politician.to_dict(*PoliticianProfile.SUMMARY_FIELDS)
            result.append(row)
        return result

    def _target(self, target_type, target_id):
        target_type = target_type or DEFAULT_TARGET_TYPE
        if target_type not in TARGET_MODELS:
            raise ValidationError("Invalid target type")
        return target_type, self.validator.validate_id(target_id, 'target_id')

    def _require_target(self, target_type, target_id):
        if self.gateway.find_one(TARGET_MODELS[target_type], id=target_id) is None:
            raise NotFoundError("Target not found")

    def _require_user(self, user_id):
        user_id = self.validator.validate_id(user_id, 'user_id')
        if self.gateway.find_one(User, id=user_id) is None:
            raise NotFoundError("User not found")
        return user_id

    def post_comment(self, data):
        user_id, target_id, content = self.validator.require_fields(
            data, ['user_id', 'target_id', 'content'], "All fields required")
        target_type, target_id = self._target(data.get('target_type'), target_id)
        content = self.validator.clean_comment(str(content))

        with self.gateway.transaction():
            user_id = self._require_user(user_id)
            self._require_target(target_type, target_id)
            self.gateway.insert(Comment, user_id=user_id, target_type=target_type,
                                target_id=target_id, content=content)
        return {'message': "Comment posted successfully"}

    def list_comments(self, target_id, target_type=None):
        target_type, target_id = self._target(target_type, target_id)
        comments = self.gateway.find_all(Comment, order_by='created_at',
                                         target_type=target_type, target_id=target_id)
        result = []
        for comment in comments:
            row = comment.to_dict('id', 'content', 'created_at')
            row['users'] = comment.user.to_dict('username', 'role') if comment.user else None
            result.append(row)
        return result

    def rate(self, data):
        user_id, target_id, rating = self.validator.require_fields(
            data, ['user_id', 'target_id', 'rating'], "Missing fields")
        rating = self.validator.validate_rating(rating)
        target_type, target_id = self._target(data.get('target_type'), target_id)

        with self.gateway.transaction():
            user_id = self._require_user(user_id)
            self._require_target(target_type, target_id)
            self.gateway.upsert(
                Rating,
                {'user_id': user_id, 'target_type': target_type, 'target_id': target_id},
                {'rating': rating},
            )
        return {'message': "Rating saved"}

    def rating_summary(self, target_id, target_type=None):
        target_type, target_id = self._target(target_type, target_id)
        ratings = self.gateway.find_all(Rating, target_type=target_type, target_id=target_id)
        return {'average': mean_rating([r.rating for r in ratings]), 'count': len(ratings)}
