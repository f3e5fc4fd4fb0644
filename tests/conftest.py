import os
import tempfile

# Must be set before ecampaign is imported: configuration is read once at import.
os.environ['DATABASE_URL'] = 'sqlite://'
os.environ['RATELIMIT_ENABLED'] = 'false'
os.environ['AUDIT_LOG_DIR'] = tempfile.mkdtemp(prefix='ecampaign-audit-')
os.environ['SENDGRID_API_KEY'] = ''
os.environ.setdefault('LOG_LEVEL', 'WARNING')

import pytest

from ecampaign import app as flask_app, db
from ecampaign import routes
from ecampaign.create_user import create_user
from ecampaign.database.models import User


@pytest.fixture
def app():
    flask_app.config['TESTING'] = True
    with flask_app.app_context():
        db.create_all()
        yield flask_app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture
def sent_emails(monkeypatch):
    """Capture outgoing mail instead of calling SendGrid."""
    outbox = []

    def fake_send(to, subject, html, required=False):
        outbox.append({'to': to, 'subject': subject, 'html': html})
        return True

    monkeypatch.setattr(routes.mailer, 'send', fake_send)
    return outbox


def fetch(model, **filters):
    """Read a fresh copy of a row, bypassing anything cached in the test session."""
    db.session.expire_all()
    return db.session.query(model).filter_by(**filters).first()


@pytest.fixture
def register_user(client, sent_emails):
    """Register and verify an account through the public routes; returns its id."""

    def _register(username='alice', email='a@x.com', password='pw1', verify=True):
        resp = client.post('/register', json={
            'username': username, 'email': email, 'password': password, 'role': 'voter'})
        assert resp.status_code == 200, resp.get_json()
        if verify:
            code = fetch(User, email=email).verify_code
            resp = client.post('/verify-email', json={'email': email, 'code': code})
            assert resp.status_code == 200, resp.get_json()
        return fetch(User, email=email).id

    return _register


@pytest.fixture
def admin_id(app):
    return create_user('root@x.com', 'root', 'AdminPass123!', 'admin').id


@pytest.fixture
def politician(client, register_user, admin_id):
    """A voter whose application was approved; returns (user_id, profile_id)."""
    from ecampaign.database.models import PoliticianProfile, PoliticianApplication

    user_id = register_user('bob', 'b@x.com', 'pw2')
    resp = client.post('/apply-politician', json={
        'user_id': user_id, 'full_name': 'Bob Otieno', 'seat': 'Governor',
        'county': 'Nairobi', 'constituency': 'Westlands', 'party': 'ODM',
        'motivation': 'Better roads', 'fee': 5000})
    assert resp.status_code == 200, resp.get_json()
    application = fetch(PoliticianApplication, user_id=user_id)
    resp = client.post('/admin/approve-politician', json={
        'application_id': application.id, 'admin_id': admin_id})
    assert resp.status_code == 200, resp.get_json()
    return user_id, fetch(PoliticianProfile, user_id=user_id).id
