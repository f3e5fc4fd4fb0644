# ecampaign/database/models.py

from ecampaign import db
from ecampaign.operations.clock import utcnow

# Database schema for the campaign platform. Ownership of every row lies with
# the database; handlers never cache these objects between requests.

MANIFESTO_CATEGORIES = (
    'Youth & Jobs',
    'Education',
    'Health',
    'Economy',
    'Governance',
)


class SerializerMixin:
    """Shape a row into a plain dict, optionally restricted to some columns."""

    def to_dict(self, *fields):
        names = fields or [c.name for c in self.__table__.columns]
        out = {}
        for name in names:
            value = getattr(self, name)
            if hasattr(value, 'isoformat'):
                value = value.isoformat()
            out[name] = value
        return out


class User(SerializerMixin, db.Model):
    __tablename__ = 'users'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    email = db.Column(db.String(254), unique=True, nullable=False)
    password_hash = db.Column(db.String(200), nullable=False)  # Argon2id
    role = db.Column(db.String(20), nullable=False, default='voter')
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    email_verified = db.Column(db.Boolean, nullable=False, default=False)
    verify_code = db.Column(db.String(6), nullable=True)
    verify_code_expires = db.Column(db.DateTime, nullable=True)
    reset_code = db.Column(db.String(6), nullable=True)
    reset_code_expires = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow)

    PUBLIC_FIELDS = ('id', 'username', 'email', 'role')

    def __repr__(self):
        return f'<User {self.id} {self.email} ({self.role})>'


class PoliticianApplication(SerializerMixin, db.Model):
    __tablename__ = 'politician_applications'
    id = db.Column(db.Integer, primary_key=True)
    # unique: at most one application per user, whatever its status
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), unique=True, nullable=False)
    full_name = db.Column(db.String(120), nullable=False)
    seat = db.Column(db.String(50), nullable=False)
    county = db.Column(db.String(80), nullable=True)
    constituency = db.Column(db.String(80), nullable=True)
    party = db.Column(db.String(80), nullable=True)
    motivation = db.Column(db.Text, nullable=False)
    fee = db.Column(db.String(40), nullable=False)
    status = db.Column(db.String(20), nullable=False, default='pending')
    created_at = db.Column(db.DateTime, default=utcnow)

    user = db.relationship('User', lazy='joined')


class PoliticianProfile(SerializerMixin, db.Model):
    __tablename__ = 'politician_profiles'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), unique=True, nullable=False)
    full_name = db.Column(db.String(120), nullable=False)
    seat = db.Column(db.String(50), nullable=False)
    county = db.Column(db.String(80), nullable=True)
    constituency = db.Column(db.String(80), nullable=True)
    party = db.Column(db.String(80), nullable=True)
    bio = db.Column(db.Text, nullable=True)
    campaign = db.Column(db.Text, nullable=True)
    is_verified = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=utcnow)

    SUMMARY_FIELDS = ('full_name', 'seat', 'county', 'constituency', 'party')


class Manifesto(SerializerMixin, db.Model):
    __tablename__ = 'manifestos'
    id = db.Column(db.Integer, primary_key=True)
    politician_id = db.Column(db.Integer, db.ForeignKey('politician_profiles.id'), nullable=False)
    category = db.Column(db.String(40), nullable=False)
    content = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)

    politician = db.relationship('PoliticianProfile', lazy='joined')


class Achievement(SerializerMixin, db.Model):
    __tablename__ = 'achievements'
    id = db.Column(db.Integer, primary_key=True)
    politician_id = db.Column(db.Integer, db.ForeignKey('politician_profiles.id'), nullable=False)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow)


class Promise(SerializerMixin, db.Model):
    __tablename__ = 'promises'
    id = db.Column(db.Integer, primary_key=True)
    politician_id = db.Column(db.Integer, db.ForeignKey('politician_profiles.id'), nullable=False)
    content = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)


class Comment(SerializerMixin, db.Model):
    __tablename__ = 'comments'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    target_type = db.Column(db.String(40), nullable=False, default='manifesto')
    target_id = db.Column(db.Integer, nullable=False)
    content = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)

    user = db.relationship('User', lazy='joined')


class Rating(SerializerMixin, db.Model):
    __tablename__ = 'ratings'
    __table_args__ = (
        db.UniqueConstraint('user_id', 'target_type', 'target_id', name='uq_rating_user_target'),
    )
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    target_type = db.Column(db.String(40), nullable=False, default='manifesto')
    target_id = db.Column(db.Integer, nullable=False)
    rating = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)


class GroundUpdate(SerializerMixin, db.Model):
    __tablename__ = 'ground_updates'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    location = db.Column(db.String(120), nullable=False)
    category = db.Column(db.String(60), nullable=False)
    content = db.Column(db.Text, nullable=False)
    repost_of = db.Column(db.Integer, db.ForeignKey('ground_updates.id'), nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow)

    user = db.relationship('User', lazy='joined')


class GroundLike(SerializerMixin, db.Model):
    __tablename__ = 'ground_likes'
    __table_args__ = (
        db.UniqueConstraint('user_id', 'ground_id', name='uq_ground_like_user'),
    )
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    ground_id = db.Column(db.Integer, db.ForeignKey('ground_updates.id'), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)


class GroundComment(SerializerMixin, db.Model):
    __tablename__ = 'ground_comments'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    ground_id = db.Column(db.Integer, db.ForeignKey('ground_updates.id'), nullable=False)
    content = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)

    user = db.relationship('User', lazy='joined')


class GroundRepost(SerializerMixin, db.Model):
    __tablename__ = 'ground_reposts'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    ground_id = db.Column(db.Integer, db.ForeignKey('ground_updates.id'), nullable=False)
    repost_id = db.Column(db.Integer, db.ForeignKey('ground_updates.id'), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)
