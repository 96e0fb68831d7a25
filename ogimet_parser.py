"""
Модуль для получения TAF с OGIMET (https://ogimet.com)

Загружает сырые прогнозы для аэропорта; разбор прогнозов выполняет
taf_decoder.
"""

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import requests
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)


class OgimetParser:
    """Класс для работы с данными OGIMET"""

    BASE_URL = "https://ogimet.com/display_metars2.php"

    def __init__(self, timeout: int = 15, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            'User-Agent': 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36',
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
            'Accept-Language': 'en-US,en;q=0.5',
        })

    def fetch_raw_data(self, icao: str, hours: int = 48) -> Optional[str]:
        """
        Получает сырые данные с OGIMET для указанного аэропорта

        Args:
            icao: Код ICAO аэропорта (4 буквы)
            hours: Количество часов назад для запроса

        Returns:
            Текст ответа от OGIMET или None в случае ошибки
        """
        now = datetime.now(timezone.utc)
        start_time = now - timedelta(hours=hours)

        params = {
            'lang': 'en',
            'lugar': icao.upper(),
            'tipo': 'FT',   # только TAF
            'ord': 'REV',   # Обратный порядок (новые первыми)
            'nil': 'NO',
            'fmt': 'txt',
            'ano': start_time.year,
            'mes': f'{start_time.month:02d}',
            'day': f'{start_time.day:02d}',
            'hora': f'{start_time.hour:02d}',
            'anof': now.year,
            'mesf': f'{now.month:02d}',
            'dayf': f'{now.day:02d}',
            'horaf': f'{now.hour:02d}',
            'minf': f'{now.minute:02d}',
            'send': 'send'
        }

        try:
            response = self.session.get(self.BASE_URL, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning("Ошибка при запросе к OGIMET для %s: %s", icao, e)
            return None

        # Извлекаем текст из <pre> тега если это HTML
        text = response.text
        if '<pre>' in text and '</pre>' in text:
            soup = BeautifulSoup(text, 'html.parser')
            pre = soup.find('pre')
            if pre:
                return pre.get_text()

        return text

    def parse_tafs(self, raw_data: str, icao: str) -> List[Dict[str, str]]:
        """
        Парсит TAF сообщения из сырых данных OGIMET

        Формат: YYYYMMDDHHMM TAF [AMD|COR] ICAO DDHHMMZ ..., продолжение - строки с отступом.

        Args:
            raw_data: Сырой текст ответа от OGIMET
            icao: Код ICAO для фильтрации

        Returns:
            Список словарей с TAF данными в порядке ответа (новые первыми)
        """
        tafs = []

        if not raw_data:
            return tafs

        station = icao.upper()
        re_taf_start = re.compile(r'^(\d{12})\s+TAF\s+(?:(AMD|COR)\s+)?' + re.escape(station) + r'\s+(.+)')

        current_taf = None
        current_timestamp = None
        current_qualifier = None

        def flush():
            if current_taf and current_timestamp:
                message = current_taf.strip()
                if message.endswith('='):
                    message = message[:-1].rstrip()
                # AMD/COR стоят перед кодом станции, как в исходном заголовке
                header = f"{current_qualifier} {station}" if current_qualifier else station
                tafs.append({
                    'timestamp': current_timestamp,
                    'station': station,
                    'qualifier': current_qualifier or '',
                    'message': message,
                    'full_message': f"{header} {message}"
                })

        for line in raw_data.split('\n'):
            line_stripped = line.strip()

            if not line_stripped or line_stripped.startswith('#'):
                continue

            match = re_taf_start.match(line_stripped)
            if match:
                flush()
                current_timestamp = match.group(1)
                current_qualifier = match.group(2)
                current_taf = match.group(3).strip()
            elif current_taf is not None and line.startswith(' '):
                if current_taf.endswith('='):
                    current_taf = current_taf[:-1].rstrip()
                current_taf += ' ' + line_stripped
            else:
                flush()
                current_taf = None
                current_timestamp = None
                current_qualifier = None

        flush()
        return tafs

    def get_latest_taf(self, icao: str, hours: int = 48) -> Optional[str]:
        """
        Получает самый свежий TAF для аэропорта

        Returns:
            Строка с TAF (с кодом станции) или None
        """
        tafs = self.get_taf_history(icao, hours)
        if not tafs:
            return None
        return tafs[0]['full_message']

    def get_taf_history(self, icao: str, hours: int = 48) -> List[Dict[str, str]]:
        """Все TAF за последние hours часов, новые первыми"""
        raw_data = self.fetch_raw_data(icao, hours)
        if not raw_data:
            return []
        return self.parse_tafs(raw_data, icao)
