"""
Извлечение полей из текста одной группы TAF

Каждая функция работает независимо и при отсутствии данных возвращает
None или пустой список, ничего не угадывая.
"""

import logging
import re
from typing import List, Optional

from taf_models import CloudCoverage, CloudLayer, Visibility, WeatherPhenomenon, Wind, WindUnit
from weather_phenomena import describe_phenomenon

logger = logging.getLogger(__name__)

METERS_PER_NM = 1852
METERS_PER_SM = 1609.34

# Маркеры видимости 10 км и более
TEN_KM_MARKERS = ('CAVOK', 'P6SM')
TEN_KM_METERS = 10000
TEN_KM_DISPLAY = '10km+'

CHANGE_MARKERS = ('BECMG', 'TEMPO', 'PROB30', 'PROB40')

# Коды, по которым токен считается погодным явлением
WEATHER_INDICATORS = (
    'TS', 'SH', 'RA', 'SN', 'SG', 'DZ', 'GR', 'GS', 'PL', 'FG', 'BR',
    'HZ', 'FU', 'DU', 'SA', 'SQ', 'FC', 'SS', 'DS', 'VA',
)
MAX_WEATHER_TOKEN = 8  # токены такой длины и длиннее не явления

RE_WIND = re.compile(r'\b(?P<dir>\d{3}|VRB)(?P<speed>\d{2,3})(G(?P<gust>\d{2,3}))?(?P<unit>KT|MPS)\b')
RE_VIS_METERS = re.compile(r'^\d{4}$')
RE_VIS_SM = re.compile(
    r'(?<!\S)(?P<prefix>[MP])?(?:(?P<whole>\d{1,2})\s)?'
    r'(?:(?P<num>\d{1,2})/(?P<den>\d{1,2})|(?P<int>\d{1,2}))SM(?!\S)'
)
RE_CLOUD = re.compile(r'\b(?P<type>FEW|SCT|BKN|OVC|VV)(?P<height>\d{3})(?P<qual>CB|TCU)?\b')
RE_MARKER = re.compile(r'^(FM|BECMG|TEMPO|PROB)')
RE_TIME_PERIOD = re.compile(r'\d{4}/\d{4}')


def extract_wind(text: str) -> Optional[Wind]:
    """Первый токен ветра вида dddffGggKT / VRBffMPS"""
    m = RE_WIND.search(text)
    if not m:
        return None

    speed = int(m.group('speed'))
    gust = int(m.group('gust')) if m.group('gust') else None
    if gust is not None and gust <= speed:
        logger.debug("Порывы %s не больше средней скорости в %s, отброшены", gust, m.group(0))
        gust = None

    return Wind(
        direction=m.group('dir'),
        speed=speed,
        unit=WindUnit(m.group('unit')),
        gust=gust,
    )


def extract_visibility(text: str) -> Optional[Visibility]:
    """
    Видимость группы

    Порядок разбора:
        1. CAVOK / P6SM -> 10000 м, '10km+'
        2. сухопутные мили (2SM, 1/2SM, 1 1/2SM, M1/4SM) -> точный пересчёт в метры
        3. отдельный четырёхзначный токен в метрах после ветра
    """
    tokens = text.split()

    if any(token in TEN_KM_MARKERS for token in tokens):
        return Visibility(meters=TEN_KM_METERS, raw=TEN_KM_DISPLAY)

    sm = RE_VIS_SM.search(text)
    if sm:
        miles = _statute_miles(sm)
        if miles is not None:
            return Visibility(meters=int(round(miles * METERS_PER_SM)), raw=sm.group(0))

    return _visibility_meters(tokens)


def _statute_miles(m) -> Optional[float]:
    if m.group('int'):
        miles = float(m.group('int'))
    else:
        den = int(m.group('den'))
        if den == 0:
            return None
        miles = int(m.group('num')) / den
    if m.group('whole'):
        miles += int(m.group('whole'))
    return miles


def _visibility_meters(tokens: List[str]) -> Optional[Visibility]:
    wind_index = None
    for i, token in enumerate(tokens):
        if RE_WIND.fullmatch(token):
            wind_index = i
            break

    for i, token in enumerate(tokens):
        if not RE_VIS_METERS.match(token):
            continue
        if wind_index is not None and i < wind_index:
            continue
        # Время после маркера изменений (TEMPO 1218), а не видимость
        if i > 0 and tokens[i - 1] in CHANGE_MARKERS:
            continue
        meters = int(token)
        nm = round(meters / METERS_PER_NM, 1)
        return Visibility(meters=meters, raw=f"{nm}NM")

    return None


def extract_clouds(text: str) -> List[CloudLayer]:
    """
    Все слои облачности в порядке появления

    SKC / NSC добавляются после числовых слоёв, даже если те есть.
    """
    clouds = []
    for m in RE_CLOUD.finditer(text):
        clouds.append(CloudLayer(
            coverage=CloudCoverage(m.group('type')),
            altitude=int(m.group('height')),
            convective=m.group('qual'),
        ))

    for token in text.split():
        if token in ('SKC', 'NSC'):
            clouds.append(CloudLayer(coverage=CloudCoverage(token)))

    return clouds


def extract_weather(text: str, skip_index: Optional[int] = None) -> List[WeatherPhenomenon]:
    """
    Погодные явления группы

    Args:
        text: текст группы
        skip_index: позиция токена, который не может быть явлением (код станции в заголовке)

    Returns:
        Список явлений; нераспознанные коды сохраняются с пустой расшифровкой
    """
    weather = []
    for i, token in enumerate(text.split()):
        if i == skip_index or RE_MARKER.match(token) or RE_TIME_PERIOD.search(token):
            continue
        if len(token) >= MAX_WEATHER_TOKEN:
            continue
        if any(code in token for code in WEATHER_INDICATORS):
            weather.append(WeatherPhenomenon(code=token, description=describe_phenomenon(token)))
    return weather
