import pytest
from sqlalchemy.exc import OperationalError

from veriweb import api


@pytest.fixture
def client():
    api.app.config['TESTING'] = True
    with api.app.test_client() as c:
        yield c


def test_health(client):
    rv = client.get('/health')
    assert rv.status_code == 200
    assert rv.get_json()['status'] == 'ok'


def test_analyze_returns_result_shape(client):
    rv = client.post('/analyze', json={'url': 'http://192.168.1.5/login'})
    assert rv.status_code == 200
    d = rv.get_json()
    assert d == {
        'score': 45,
        'status': 'MALICIOUS',
        'threats': [
            'Host is a raw IP address instead of a domain name',
            'URL contains sensitive keywords often used in phishing (login, verify, bank, ...)',
            'Connection is not secured with HTTPS',
        ],
        'recommendations': d['recommendations'],
        'explanation': d['explanation'],
    }
    assert len(d['recommendations']) == 2


def test_analyze_safe_url_has_empty_threats(client):
    rv = client.post('/analyze', json={'url': 'https://example.com'})
    assert rv.status_code == 200
    d = rv.get_json()
    assert d['status'] == 'SAFE'
    assert d['threats'] == []


def test_analyze_empty_url_is_a_result_not_an_error(client):
    rv = client.post('/analyze', json={'url': ''})
    assert rv.status_code == 200
    d = rv.get_json()
    assert d['score'] == 60
    assert d['status'] == 'SUSPICIOUS'


@pytest.mark.parametrize('body', [None, {}, {'link': 'https://example.com'}, ['https://example.com']])
def test_analyze_missing_url_is_400(client, body):
    if body is None:
        rv = client.post('/analyze', data='not json', content_type='text/plain')
    else:
        rv = client.post('/analyze', json=body)
    assert rv.status_code == 400
    assert 'error' in rv.get_json()


def test_rules_lists_active_table(client):
    rv = client.get('/rules')
    assert rv.status_code == 200
    d = rv.get_json()
    assert d['ruleset'] == 'default'
    assert [r['id'] for r in d['rules']] == [
        'LONG_URL', 'AT_SYMBOL', 'IP_HOST', 'EXCESS_HYPHENS',
        'SENSITIVE_KEYWORD', 'INSECURE_SCHEME', 'EMPTY_HOST',
    ]


def test_history_records_scans_newest_first(client):
    client.post('/analyze', json={'url': 'https://history-one.example.com'})
    client.post('/analyze', json={'url': 'http://192.168.7.7/verify'})

    rv = client.get('/history?limit=2')
    assert rv.status_code == 200
    d = rv.get_json()
    assert d['count'] == 2
    assert [row['url'] for row in d['rows']] == [
        'http://192.168.7.7/verify', 'https://history-one.example.com',
    ]
    assert d['rows'][0]['status'] == 'MALICIOUS'
    assert d['rows'][1]['score'] == 100

    item = client.get(f"/history/{d['rows'][0]['id']}").get_json()
    assert item['result']['status'] == 'MALICIOUS'
    assert item['ruleset'] == 'default'


def test_history_bad_limit(client):
    rv = client.get('/history?limit=abc')
    assert rv.status_code == 400


def test_history_unknown_id(client):
    rv = client.get('/history/999999')
    assert rv.status_code == 404
    assert rv.get_json() == {'error': 'not_found'}


def test_analyze_non_ascii_digit_host_is_classified(client):
    rv = client.post('/analyze', json={'url': 'http://1.2.3.²/login'})
    assert rv.status_code == 200
    assert rv.get_json()['status'] in ('SAFE', 'SUSPICIOUS', 'MALICIOUS')


def test_analyze_lone_surrogate_url_still_returns_result(client):
    body = '{"url": "http://a\\ud800.com/unique-surrogate"}'
    rv = client.post('/analyze', data=body, content_type='application/json')
    assert rv.status_code == 200
    assert rv.get_json()['score'] == 100 - 10

    rows = client.get('/history?limit=1').get_json()['rows']
    assert rows[0]['url'] == 'http://a?.com/unique-surrogate'


def test_storable_url():
    assert api.storable_url('http://a\ud800.com') == 'http://a?.com'
    assert api.storable_url('https://example.com') == 'https://example.com'
    assert api.storable_url(None) == ''


def _store_down(*args, **kwargs):
    raise OperationalError('SELECT', {}, Exception('database is locked'))


def test_analyze_survives_history_write_failure(client, monkeypatch):
    monkeypatch.setattr(api, 'save_scan', _store_down)
    rv = client.post('/analyze', json={'url': 'https://example.com'})
    assert rv.status_code == 200
    assert rv.get_json()['status'] == 'SAFE'


def test_history_read_failure_is_503(client, monkeypatch):
    monkeypatch.setattr(api, 'list_scans', _store_down)
    monkeypatch.setattr(api, 'get_scan', _store_down)
    rv = client.get('/history')
    assert rv.status_code == 503
    assert rv.get_json() == {'error': 'history_unavailable'}
    rv = client.get('/history/1')
    assert rv.status_code == 503
