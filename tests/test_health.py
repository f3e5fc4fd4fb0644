from ecampaign import routes
from ecampaign.errors import DownstreamError
from ecampaign.operations import health_monitor


def test_home(client):
    resp = client.get('/')
    assert resp.status_code == 200
    assert resp.get_data(as_text=True) == 'Civic Platform Backend Running'


def test_env_test_reports_presence_only(client):
    data = client.get('/env-test').get_json()
    assert data == {'hasUrl': True, 'hasKey': False, 'hasSender': True}


def test_ready(client):
    resp = client.get('/ready')
    assert resp.status_code == 200
    assert resp.get_json()['db']['ok'] is True


def test_health_shape(client):
    resp = client.get('/health')
    data = resp.get_json()
    assert data['db']['ok'] is True
    assert set(data) == {'db', 'disk', 'config', 'overall_ok'}
    assert resp.status_code == (200 if data['overall_ok'] else 503)


def test_ready_when_database_is_down(client, monkeypatch):
    def broken_ping():
        raise DownstreamError("could not connect to server")

    monkeypatch.setattr(routes.gateway, 'ping', broken_ping)
    resp = client.get('/ready')
    assert resp.status_code == 503
    assert resp.get_json()['db'] == {'ok': False, 'error': 'could not connect to server'}


def test_check_config_hides_values():
    config = {'SQLALCHEMY_DATABASE_URI': 'postgresql://u:secret@h/db', 'SENDGRID_API_KEY': 'SG.x'}
    assert health_monitor.check_config(config) == {'hasUrl': True, 'hasKey': True, 'hasSender': False}


def test_unknown_route_is_json(client):
    resp = client.get('/nope')
    assert resp.status_code == 404
    assert 'error' in resp.get_json()


def test_cors_headers(client):
    assert client.get('/').headers['Access-Control-Allow-Origin'] == '*'
