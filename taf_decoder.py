"""
Декодер TAF (Terminal Aerodrome Forecast)

Разбивает прогноз на базовую группу и группы изменений (FM, BECMG,
TEMPO, PROB30/40), извлекает из каждой ветер, видимость, облачность и
явления, определяет категорию полёта, необходимость запасного аэродрома
и влияние на полёт.

Декодер никогда не выбрасывает исключений: отсутствующие данные дают
значения по умолчанию (станция 'UNKNOWN', период 'UNKNOWN', пустые поля).
"""

import logging
import re
from typing import List, Optional

from flight_rules import aggregate_impacts, derive_group, split_impacts
from taf_fields import CHANGE_MARKERS, extract_clouds, extract_visibility, extract_weather, extract_wind
from taf_models import (
    ForecastGroup, GroupFields, GroupKind, IssueTime, ParsedBulletin, Validity, FlightCategory,
)

logger = logging.getLogger(__name__)

RE_STATION = re.compile(r'^[A-Z]{4}$')
RE_ISSUE_TIME = re.compile(r'\b(\d{2})(\d{2})(\d{2})Z\b')
RE_TIME_PERIOD = re.compile(r'\b(\d{2})(\d{2})/(\d{2})(\d{2})\b')
RE_FM = re.compile(r'^FM(\d{2})(\d{2})(\d{2})$')

HEADER_PREFIXES = ('TAF', 'AMD', 'COR')

GROUP_TITLES = {
    GroupKind.BASE: 'Base forecast',
    GroupKind.FM: 'From',
    GroupKind.BECMG: 'Becoming',
    GroupKind.TEMPO: 'Temporary',
    GroupKind.PROB30: 'Probability 30%',
    GroupKind.PROB40: 'Probability 40%',
}


def normalize(raw_text: str) -> str:
    """Одна строка, одиночные пробелы, без завершающего '='"""
    text = ' '.join(raw_text.split())
    if text.endswith('='):
        text = text[:-1].rstrip()
    return text


def is_group_marker(token: str) -> bool:
    return bool(RE_FM.match(token)) or token in CHANGE_MARKERS


def split_groups(text: str) -> List[str]:
    """
    Делит нормализованный текст на группы по маркерам

    Маркер начинает новую группу; первая группа (или весь текст, если
    маркеров нет) - базовая.
    """
    groups = []
    current = []
    for token in text.split():
        if is_group_marker(token) and current:
            groups.append(' '.join(current))
            current = []
        current.append(token)
    if current:
        groups.append(' '.join(current))
    return groups


class TAFDecoder:
    """Декодер TAF прогнозов"""

    def decode(self, taf: str) -> ParsedBulletin:
        """
        Декодирует TAF прогноз

        Args:
            taf: строка с TAF прогнозом (можно многострочную)

        Returns:
            ParsedBulletin
        """
        text = normalize(taf)
        tokens = text.split()

        station = self._parse_station(tokens)
        validity = self._parse_validity(text)
        station_index = self._header_station_index(tokens, station)

        groups = []
        for index, group_text in enumerate(split_groups(text)):
            # Базовая группа начинается с первого токена, позиции совпадают
            skip_index = station_index if index == 0 else None
            groups.append(self._parse_forecast_group(index, group_text, skip_index))

        header = tokens[:station_index] if station_index is not None else []

        return ParsedBulletin(
            station=station,
            validity=validity,
            raw_text=text,
            groups=tuple(groups),
            flight_category=self._worst_category(groups),
            alternate_required=any(g.alternate_required for g in groups),
            issue_time=self._parse_issue_time(text),
            amendment='AMD' in header,
            correction='COR' in header,
            impacts=aggregate_impacts(groups),
        )

    def _parse_station(self, tokens: List[str]) -> str:
        for token in tokens:
            if RE_STATION.match(token):
                return token
        logger.debug("Код станции не найден")
        return 'UNKNOWN'

    @staticmethod
    def _header_station_index(tokens: List[str], station: str) -> Optional[int]:
        """
        Позиция кода станции в заголовке

        Код станции стоит после TAF/AMD/COR или перед временем выпуска
        либо периодом действия. Иначе найденный токен - не станция
        заголовка (например, TSRA в прогнозе без кода станции).
        """
        if station not in tokens:
            return None
        i = tokens.index(station)
        if all(token in HEADER_PREFIXES for token in tokens[:i]):
            return i
        following = tokens[i + 1] if i + 1 < len(tokens) else ''
        if RE_ISSUE_TIME.fullmatch(following) or RE_TIME_PERIOD.fullmatch(following):
            return i
        return None

    def _parse_validity(self, text: str) -> Validity:
        """Первый период вида DDHH/DDHH"""
        m = RE_TIME_PERIOD.search(text)
        if not m:
            logger.debug("Период действия не найден")
            return Validity()
        start_day, start_hour, end_day, end_hour = (int(v) for v in m.groups())
        return Validity(start_day, start_hour, end_day, end_hour, raw=m.group(0))

    def _parse_issue_time(self, text: str) -> Optional[IssueTime]:
        m = RE_ISSUE_TIME.search(text)
        if not m:
            return None
        day, hour, minute = (int(v) for v in m.groups())
        return IssueTime(day, hour, minute)

    def _group_kind(self, index: int, marker: str) -> GroupKind:
        if index == 0:
            return GroupKind.BASE
        if RE_FM.match(marker):
            return GroupKind.FM
        return GroupKind(marker)

    def _parse_forecast_group(self, index: int, text: str, skip_index: Optional[int] = None) -> ForecastGroup:
        """Парсит группу прогноза (базовую или изменения)"""
        marker = text.split(' ', 1)[0]
        kind = self._group_kind(index, marker)

        times = {}
        probability = None
        if kind == GroupKind.FM:
            day, hour, minute = (int(v) for v in RE_FM.match(marker).groups())
            times = {'start_day': day, 'start_hour': hour, 'start_minute': minute}
        elif kind != GroupKind.BASE:
            m = RE_TIME_PERIOD.search(text)
            if m:
                start_day, start_hour, end_day, end_hour = (int(v) for v in m.groups())
                # В окне изменений только часы, минуты всегда 0
                times = {
                    'start_day': start_day, 'start_hour': start_hour, 'start_minute': 0,
                    'end_day': end_day, 'end_hour': end_hour, 'end_minute': 0,
                }
            if kind.is_probability:
                probability = int(marker[4:6])

        group_fields = GroupFields(
            kind=kind,
            raw_text=text,
            probability=probability,
            wind=extract_wind(text),
            visibility=extract_visibility(text),
            clouds=tuple(extract_clouds(text)),
            weather=tuple(extract_weather(text, skip_index)),
            **times,
        )
        return derive_group(group_fields)

    @staticmethod
    def _worst_category(groups: List[ForecastGroup]) -> FlightCategory:
        if any(g.flight_category == FlightCategory.IFR for g in groups):
            return FlightCategory.IFR
        return FlightCategory.VFR

    def pretty(self, decoded: ParsedBulletin) -> str:
        """Форматирует расшифрованный TAF в читаемый вид"""
        if not decoded.groups and decoded.station == 'UNKNOWN':
            return "Could not parse TAF"

        lines = [f"TAF: {decoded.raw_text}", ""]
        lines.append(f"Station: {decoded.station}")

        if decoded.issue_time:
            t = decoded.issue_time
            lines.append(f"Issued: day {t.day:02d}, {t.hour:02d}:{t.minute:02d} UTC")

        v = decoded.validity
        if v.known:
            lines.append(f"Valid: day {v.start_day:02d} {v.start_hour:02d}:00 to day {v.end_day:02d} {v.end_hour:02d}:00 UTC")
        else:
            lines.append("Valid: UNKNOWN")

        if decoded.amendment:
            lines.append("Amended forecast (AMD)")
        if decoded.correction:
            lines.append("Corrected forecast (COR)")

        alternate = ', ALTERNATE REQUIRED' if decoded.alternate_required else ''
        lines.append(f"Worst category: {decoded.flight_category.value}{alternate}")

        for group in decoded.groups:
            lines.append("")
            lines.append(f"=== {self._format_group_title(group)} ===")
            lines.extend('  ' + line for line in self._format_forecast(group))

        critical, cautionary = split_impacts(decoded.impacts)
        if critical:
            lines.append("")
            lines.append("Critical: " + ', '.join(critical))
        if cautionary:
            lines.append("Caution: " + ', '.join(cautionary))

        return '\n'.join(lines)

    def _format_group_title(self, group: ForecastGroup) -> str:
        title = GROUP_TITLES[group.kind]
        if group.kind == GroupKind.FM and group.start_day is not None:
            return f"{title} day {group.start_day:02d} {group.start_hour:02d}:{group.start_minute:02d} UTC"
        if group.start_day is not None and group.end_day is not None:
            return (f"{title} day {group.start_day:02d} {group.start_hour:02d}:00"
                    f" to day {group.end_day:02d} {group.end_hour:02d}:00 UTC")
        return title

    def _format_forecast(self, group: ForecastGroup) -> List[str]:
        """Форматирует данные группы"""
        lines = []

        if group.wind:
            w = group.wind
            direction = 'variable' if w.is_variable else f"{w.direction}°"
            gust = f", gusts {w.gust}" if w.gust else ''
            lines.append(f"Wind: {direction} {w.speed} {w.unit.value}{gust}")

        if group.visibility:
            lines.append(f"Visibility: {group.visibility.raw} ({group.visibility.meters} m)")

        if group.weather:
            lines.append("Weather:")
            for wx in group.weather:
                lines.append(f"  - {wx.description or 'unrecognized'} ({wx.code})")

        if group.clouds:
            lines.append("Cloud:")
            for c in group.clouds:
                parts = [c.coverage.value]
                if c.altitude_ft is not None:
                    parts.append(f"at {c.altitude_ft} ft")
                if c.convective:
                    parts.append(c.convective)
                lines.append("  - " + " ".join(parts))

        alternate = ', alternate required' if group.alternate_required else ''
        lines.append(f"Category: {group.flight_category.value}{alternate}")
        if group.impacts:
            lines.append("Impacts: " + ', '.join(group.impacts))

        return lines


def decode(raw_text: str) -> ParsedBulletin:
    """Точка входа: декодирует TAF, никогда не выбрасывает исключений"""
    return TAFDecoder().decode(raw_text)


if __name__ == "__main__":
    sample_tafs = [
        "YPJT 061130Z 0612/0712 02012KT 9999 SCT010 BKN015 FM061500 01015G25KT 5000 -RA BR BKN010 "
        "BECMG 0620/0622 34020G30KT PROB30 0700/0704 2000 TSRA OVC009CB",
        """TAF AMD KJFK 061740Z 0618/0724 VRB05KT P6SM SKC
FM062200 18015G28KT 1 1/2SM -SHSN OVC008""",
    ]

    decoder = TAFDecoder()

    for taf in sample_tafs:
        print("=" * 80)
        print(decoder.pretty(decoder.decode(taf)))
        print()
