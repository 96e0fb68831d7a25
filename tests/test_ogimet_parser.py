"""Tests for the OGIMET TAF client (no network access)."""

from unittest.mock import Mock

import pytest
import requests

from ogimet_parser import OgimetParser
from taf_decoder import decode

RAW = """# large TAF from YPJT
202511061130 TAF YPJT 061130Z 0612/0712 02012KT 9999 SCT010 BKN015
      FM061500 01015G25KT 5000 -RA BR BKN010=
202511060530 TAF AMD YPJT 060530Z 0606/0706 18010KT CAVOK=
202511060530 TAF YSSY 060530Z 0606/0712 18010KT CAVOK=
"""


def make_parser(text=None, error=None):
    session = Mock()
    session.headers = {}
    if error is not None:
        session.get.side_effect = error
    else:
        response = Mock()
        response.text = text
        response.raise_for_status.return_value = None
        session.get.return_value = response
    return OgimetParser(session=session), session


class TestParseTafs:

    def test_joins_continuation_lines(self):
        parser, _ = make_parser()
        tafs = parser.parse_tafs(RAW, 'ypjt')
        assert len(tafs) == 2
        assert tafs[0]['timestamp'] == '202511061130'
        assert tafs[0]['full_message'] == (
            'YPJT 061130Z 0612/0712 02012KT 9999 SCT010 BKN015 '
            'FM061500 01015G25KT 5000 -RA BR BKN010'
        )

    def test_amended_and_other_stations(self):
        parser, _ = make_parser()
        tafs = parser.parse_tafs(RAW, 'YPJT')
        assert tafs[1]['message'] == '060530Z 0606/0706 18010KT CAVOK'
        assert tafs[1]['qualifier'] == 'AMD'
        assert tafs[1]['full_message'] == 'AMD YPJT 060530Z 0606/0706 18010KT CAVOK'
        assert tafs[0]['qualifier'] == ''

    def test_amended_message_decodes_as_amendment(self):
        parser, _ = make_parser()
        bulletin = decode(parser.parse_tafs(RAW, 'YPJT')[1]['full_message'])
        assert bulletin.station == 'YPJT'
        assert bulletin.amendment
        assert bulletin.groups[0].weather == ()

    def test_empty(self):
        parser, _ = make_parser()
        assert parser.parse_tafs('', 'YPJT') == []


class TestFetch:

    def test_latest_taf(self):
        parser, session = make_parser(RAW)
        assert parser.get_latest_taf('YPJT').startswith('YPJT 061130Z')
        params = session.get.call_args.kwargs['params']
        assert params['lugar'] == 'YPJT'
        assert session.get.call_args.kwargs['timeout'] == 15

    def test_html_pre_block(self):
        parser, _ = make_parser(f'<html><body><pre>{RAW}</pre></body></html>')
        assert len(parser.get_taf_history('YPJT')) == 2

    def test_request_error_is_logged_not_raised(self, caplog):
        parser, _ = make_parser(error=requests.ConnectionError('down'))
        assert parser.get_latest_taf('YPJT') is None
        assert parser.get_taf_history('YPJT') == []
        assert 'OGIMET' in caplog.text

    @pytest.mark.parametrize('text', ['', '# nothing here\n'])
    def test_no_tafs(self, text):
        parser, _ = make_parser(text)
        assert parser.get_latest_taf('YPJT') is None
