import pytest

from conftest import fetch
from ecampaign import db
from ecampaign.database.models import GroundLike, GroundRepost, GroundUpdate


@pytest.fixture
def ground_id(client, register_user):
    user_id = register_user()
    resp = client.post('/ground-updates', json={
        'user_id': user_id, 'location': 'Kibera', 'category': 'Water', 'content': 'Taps dry since Monday'})
    assert resp.status_code == 200, resp.get_json()
    return fetch(GroundUpdate, location='Kibera').id


def test_post_and_list_updates(client, ground_id):
    data = client.get('/ground-updates').get_json()
    assert len(data) == 1
    assert data[0]['id'] == ground_id
    assert data[0]['content'] == 'Taps dry since Monday'
    assert data[0]['repost_of'] is None
    assert data[0]['users'] == {'username': 'alice'}


def test_post_update_requires_fields(client, register_user):
    user_id = register_user()
    resp = client.post('/ground-updates', json={'user_id': user_id, 'location': 'Kibera'})
    assert resp.status_code == 400
    assert resp.get_json() == {'error': 'All fields required'}


def test_like_is_idempotent(client, ground_id, register_user):
    carol = register_user('carol', 'c@x.com', 'pw3')
    for _ in range(3):
        assert client.post('/ground-like', json={'user_id': carol, 'ground_id': ground_id}).status_code == 200

    assert db.session.query(GroundLike).filter_by(user_id=carol, ground_id=ground_id).count() == 1
    assert client.get(f'/ground-likes/{ground_id}').get_json() == {'count': 1}


def test_like_unknown_update(client, register_user):
    user_id = register_user()
    resp = client.post('/ground-like', json={'user_id': user_id, 'ground_id': 404})
    assert resp.status_code == 404


def test_ground_comments(client, ground_id, register_user):
    carol = register_user('carol', 'c@x.com', 'pw3')
    resp = client.post('/ground-comment', json={'user_id': carol, 'ground_id': ground_id, 'content': 'Same here'})
    assert resp.status_code == 200

    resp = client.post('/ground-comment', json={'user_id': carol, 'ground_id': ground_id,
                                                'content': 'what an idiot'})
    assert resp.status_code == 400

    data = client.get(f'/ground-comments/{ground_id}').get_json()
    assert data == [{'content': 'Same here', 'created_at': data[0]['created_at'], 'users': {'username': 'carol'}}]
    assert client.get(f'/ground-comments-count/{ground_id}').get_json() == {'count': 1}


def test_repost_is_an_independent_copy(client, ground_id, register_user):
    carol = register_user('carol', 'c@x.com', 'pw3')
    resp = client.post('/ground-repost', json={'user_id': carol, 'ground_id': ground_id})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body['message'] == 'Reposted'

    copy = fetch(GroundUpdate, id=body['id'])
    assert copy.user_id == carol
    assert copy.repost_of == ground_id
    assert (copy.location, copy.category, copy.content) == ('Kibera', 'Water', 'Taps dry since Monday')

    original = fetch(GroundUpdate, id=ground_id)
    original.content = 'Water is back'
    db.session.commit()
    assert fetch(GroundUpdate, id=body['id']).content == 'Taps dry since Monday'

    assert db.session.query(GroundRepost).filter_by(ground_id=ground_id, repost_id=body['id']).count() == 1
    assert client.get(f'/ground-reposts-count/{ground_id}').get_json() == {'count': 1}


def test_repost_unknown_update_writes_nothing(client, register_user):
    user_id = register_user()
    resp = client.post('/ground-repost', json={'user_id': user_id, 'ground_id': 12})
    assert resp.status_code == 404
    assert db.session.query(GroundUpdate).count() == 0


def test_counters_reject_bad_ids(client):
    assert client.get('/ground-likes/abc').status_code == 400
    assert client.get('/ground-likes/5').get_json() == {'count': 0}


def test_ground_comment_filter_sees_through_markup(client, ground_id, register_user):
    from ecampaign.database.models import GroundComment

    carol = register_user('carol', 'c@x.com', 'pw3')
    resp = client.post('/ground-comment', json={'user_id': carol, 'ground_id': ground_id,
                                                'content': 'id<em></em>iot'})
    assert resp.status_code == 400
    assert resp.get_json() == {'error': 'Comment violates community rules'}
    assert db.session.query(GroundComment).count() == 0
