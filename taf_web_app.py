"""
Flask веб-приложение для декодирования TAF

Отдаёт декодированный прогноз в JSON: категорию полёта по группам,
необходимость запасного аэродрома и влияние на полёт.
"""
import logging
import os

from flask import Flask, request, jsonify

from taf_decoder import TAFDecoder
from ogimet_parser import OgimetParser

HOST = os.environ.get('TAF_APP_HOST', '0.0.0.0')
PORT = int(os.environ.get('TAF_APP_PORT', '5001'))
DEBUG = os.environ.get('TAF_APP_DEBUG', '1') not in ('0', 'false', 'False')

app = Flask(__name__)
taf_decoder = TAFDecoder()
ogimet_parser = OgimetParser()


def _request_icao() -> str:
    payload = request.get_json(silent=True) or {}
    return str(payload.get('icao', '')).strip().upper()


def _decode_payload(taf_code: str) -> dict:
    decoded = taf_decoder.decode(taf_code)
    return {
        'decoded': decoded.to_dict(),
        'pretty': taf_decoder.pretty(decoded)
    }


@app.route('/decode-taf', methods=['POST'])
def decode_taf():
    """API endpoint для декодирования TAF"""
    try:
        payload = request.get_json(silent=True) or {}
        taf_code = str(payload.get('taf', '')).strip()

        if not taf_code:
            return jsonify({'error': 'TAF код не может быть пустым'}), 400

        return jsonify({'success': True, **_decode_payload(taf_code)})

    except Exception as e:
        app.logger.exception("Ошибка при декодировании TAF")
        return jsonify({
            'success': False,
            'error': f'Ошибка при декодировании: {str(e)}'
        }), 500


@app.route('/fetch-taf', methods=['POST'])
def fetch_taf():
    """API endpoint для получения свежего TAF с OGIMET и его декодирования"""
    try:
        icao = _request_icao()

        if not icao or len(icao) != 4:
            return jsonify({'error': 'Неверный код ICAO'}), 400

        taf = ogimet_parser.get_latest_taf(icao)
        if not taf:
            return jsonify({
                'success': False,
                'error': 'TAF не найден'
            }), 404

        return jsonify({'success': True, 'icao': icao, 'taf': taf, **_decode_payload(taf)})

    except Exception as e:
        app.logger.exception("Ошибка при получении TAF")
        return jsonify({
            'success': False,
            'error': f'Ошибка при получении данных: {str(e)}'
        }), 500


@app.route('/taf-history', methods=['POST'])
def get_taf_history():
    """API endpoint для получения истории TAF"""
    try:
        icao = _request_icao()
        payload = request.get_json(silent=True) or {}
        hours = int(payload.get('hours', 48))  # По умолчанию 48 часов

        if not icao or len(icao) != 4:
            return jsonify({'error': 'Неверный код ICAO'}), 400

        tafs = ogimet_parser.get_taf_history(icao, hours)

        if not tafs:
            return jsonify({
                'success': False,
                'error': 'История TAF не найдена'
            }), 404

        history = []
        for taf_data in tafs:
            history.append({
                'timestamp': taf_data['timestamp'],
                'raw': taf_data['full_message'],
                **_decode_payload(taf_data['full_message'])
            })

        return jsonify({
            'success': True,
            'icao': icao,
            'count': len(history),
            'history': history
        })

    except Exception as e:
        app.logger.exception("Ошибка при получении истории TAF")
        return jsonify({
            'success': False,
            'error': f'Ошибка при получении истории TAF: {str(e)}'
        }), 500


if __name__ == '__main__':
    logging.basicConfig(level=logging.DEBUG if DEBUG else logging.INFO)
    app.run(debug=DEBUG, host=HOST, port=PORT)
