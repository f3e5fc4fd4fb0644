# ecampaign/workflows/ground.py
"""The "ground updates" social feed: posts, likes, comments and reposts."""

import logging

from ecampaign.database.models import GroundComment, GroundLike, GroundRepost, GroundUpdate, User
from ecampaign.errors import NotFoundError

logger = logging.getLogger(__name__)

COUNTERS = {
    'likes': GroundLike,
    'comments': GroundComment,
    'reposts': GroundRepost,
}


class GroundWorkflow:
    def __init__(self, gateway, validator):
        self.gateway = gateway
        self.validator = validator

    def _require_user(self, user_id):
        user_id = self.validator.validate_id(user_id, 'user_id')
        if self.gateway.find_one(User, id=user_id) is None:
            raise NotFoundError("User not found")
        return user_id

    def _require_update(self, ground_id):
        ground_id = self.validator.validate_id(ground_id, 'ground_id')
        update = self.gateway.find_one(GroundUpdate, id=ground_id)
        if update is None:
            raise NotFoundError("Ground update not found")
        return update

    def post_update(self, data):
        user_id, location, category, content = self.validator.require_fields(
            data, ['user_id', 'location', 'category', 'content'], "All fields required")
        values = {
            'location': self.validator.sanitize_string(str(location), max_length=120),
            'category': self.validator.sanitize_string(str(category), max_length=60),
            'content': self.validator.sanitize_string(str(content)),
        }
        with self.gateway.transaction():
            user_id = self._require_user(user_id)
            self.gateway.insert(GroundUpdate, user_id=user_id, **values)
        return {'message': "Update posted"}

    def list_updates(self):
        updates = self.gateway.find_all(GroundUpdate, order_by='created_at', descending=True)
        result = []
        for update in updates:
            row = update.to_dict('id', 'location', 'category', 'content', 'repost_of', 'created_at')
            row['users'] = update.user.to_dict('username') if update.user else None
            result.append(row)
        return result

    def like(self, data):
        user_id, ground_id = self.validator.require_fields(data, ['user_id', 'ground_id'], "Missing fields")
        with self.gateway.transaction():
            user_id = self._require_user(user_id)
            update = self._require_update(ground_id)
            self.gateway.upsert(GroundLike, {'user_id': user_id, 'ground_id': update.id}, {})
        return {'message': "Liked"}

    def comment(self, data):
        user_id, ground_id, content = self.validator.require_fields(
            data, ['user_id', 'ground_id', 'content'], "All fields required")
        content = self.validator.clean_comment(str(content))
        with self.gateway.transaction():
            user_id = self._require_user(user_id)
            update = self._require_update(ground_id)
            self.gateway.insert(GroundComment, user_id=user_id, ground_id=update.id, content=content)
        return {'message': "Comment posted"}

    def list_comments(self, ground_id):
        ground_id = self.validator.validate_id(ground_id, 'ground_id')
        comments = self.gateway.find_all(GroundComment, order_by='created_at', ground_id=ground_id)
        result = []
        for comment in comments:
            row = comment.to_dict('content', 'created_at')
            row['users'] = comment.user.to_dict('username') if comment.user else None
            result.append(row)
        return result

    def repost(self, data):
        """Copy the source update into a new, independent row that remembers its origin.

        Later edits to the source never reach the copy; the GroundRepost row
        written alongside feeds the repost counter of the source.
        """
        user_id, ground_id = self.validator.require_fields(data, ['user_id', 'ground_id'], "Missing fields")
        with self.gateway.transaction():
            user_id = self._require_user(user_id)
            original = self._require_update(ground_id)
            copy = self.gateway.insert(
                GroundUpdate,
                user_id=user_id,
                location=original.location,
                category=original.category,
                content=original.content,
                repost_of=original.id,
            )
            self.gateway.insert(GroundRepost, user_id=user_id, ground_id=original.id, repost_id=copy.id)
            repost_id = copy.id
        return {'message': "Reposted", 'id': repost_id}

    def count(self, kind, ground_id):
        ground_id = self.validator.validate_id(ground_id, 'ground_id')
        return {'count': self.gateway.count(COUNTERS[kind], ground_id=ground_id)}
