def test_health_check(client):
    response = client.get('/health')
    assert response.status_code == 200
    json_data = response.get_json()
    assert json_data.get('status') == 'ok'


def test_api_spec_served(client):
    resp = client.get('/apispec.json')
    assert resp.status_code == 200
    assert resp.get_json()['info']['title'] == 'Shelfwise API'
