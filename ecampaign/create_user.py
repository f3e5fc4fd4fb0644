# ecampaign/create_user.py
# Seed an account with an explicit role. This is the only way an admin exists:
# the public /register route creates voters only.
#
#   python -m ecampaign.create_user admin@example.com admin "S3cure-passphrase" admin

import sys

from ecampaign import app, db
from ecampaign.authentication.rbac import UserRole
from ecampaign.database.models import User
from ecampaign.encryption.password_hashing import PasswordHashingService


def create_user(email, username, password, role=UserRole.ADMIN.value):
    role = UserRole(role).value
    pwhash = PasswordHashingService()
    user = User(
        email=email.strip().lower(),
        username=username,
        password_hash=pwhash.hash_password(password),
        role=role,
        is_active=True,
        email_verified=True,
    )
    db.session.add(user)
    db.session.commit()
    return user


if __name__ == "__main__":
    if len(sys.argv) not in (4, 5):
        print("usage: python -m ecampaign.create_user EMAIL USERNAME PASSWORD [ROLE]")
        sys.exit(2)
    with app.app_context():
        db.create_all()
        user = create_user(*sys.argv[1:])
        print(f"User {user.email} created with role {user.role} (id {user.id}).")
