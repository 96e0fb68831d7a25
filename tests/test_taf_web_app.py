"""Tests for the Flask TAF API."""

import pytest

import taf_web_app

YPJT = (
    "YPJT 061130Z 0612/0712 02012KT 9999 SCT010 BKN015 FM061500 01015G25KT 5000 -RA BR BKN010 "
    "BECMG 0620/0622 34020G30KT PROB30 0700/0704 2000 TSRA OVC009CB"
)


@pytest.fixture
def client():
    taf_web_app.app.config['TESTING'] = True
    return taf_web_app.app.test_client()


class TestDecodeTaf:

    def test_decodes(self, client):
        response = client.post('/decode-taf', json={'taf': YPJT})
        assert response.status_code == 200
        data = response.get_json()
        assert data['success']
        assert data['decoded']['station'] == 'YPJT'
        assert data['decoded']['alternate_required'] is True
        assert len(data['decoded']['groups']) == 4
        assert 'Station: YPJT' in data['pretty']

    def test_empty_is_400(self, client):
        response = client.post('/decode-taf', json={'taf': '   '})
        assert response.status_code == 400

    def test_missing_body_is_400(self, client):
        assert client.post('/decode-taf').status_code == 400


class TestFetchTaf:

    def test_fetches_and_decodes(self, client, monkeypatch):
        monkeypatch.setattr(taf_web_app.ogimet_parser, 'get_latest_taf', lambda icao: YPJT)
        response = client.post('/fetch-taf', json={'icao': 'ypjt'})
        data = response.get_json()
        assert response.status_code == 200
        assert data['icao'] == 'YPJT'
        assert data['decoded']['flight_category'] == 'IFR'

    def test_bad_icao(self, client):
        assert client.post('/fetch-taf', json={'icao': 'YP'}).status_code == 400

    def test_not_found(self, client, monkeypatch):
        monkeypatch.setattr(taf_web_app.ogimet_parser, 'get_latest_taf', lambda icao: None)
        assert client.post('/fetch-taf', json={'icao': 'YPJT'}).status_code == 404

    def test_unexpected_error_is_500(self, client, monkeypatch):
        def boom(icao):
            raise RuntimeError('boom')
        monkeypatch.setattr(taf_web_app.ogimet_parser, 'get_latest_taf', boom)
        response = client.post('/fetch-taf', json={'icao': 'YPJT'})
        assert response.status_code == 500
        assert response.get_json()['success'] is False


class TestTafHistory:

    def test_history(self, client, monkeypatch):
        tafs = [
            {'timestamp': '202511061130', 'full_message': YPJT},
            {'timestamp': '202511060530', 'full_message': 'YPJT 060530Z 0606/0706 18010KT CAVOK'},
        ]
        monkeypatch.setattr(taf_web_app.ogimet_parser, 'get_taf_history', lambda icao, hours: tafs)
        data = client.post('/taf-history', json={'icao': 'YPJT', 'hours': 12}).get_json()
        assert data['count'] == 2
        assert data['history'][1]['decoded']['flight_category'] == 'VFR'

    def test_empty_history_is_404(self, client, monkeypatch):
        monkeypatch.setattr(taf_web_app.ogimet_parser, 'get_taf_history', lambda icao, hours: [])
        assert client.post('/taf-history', json={'icao': 'YPJT'}).status_code == 404
