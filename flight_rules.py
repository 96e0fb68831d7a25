"""
Категория полёта, требование запасного аэродрома и влияние на полёт

Пороговые значения - австралийские минимумы VFR / запасного аэродрома:
нижняя граница облаков 1500 ft и видимость 8 км.
"""

from dataclasses import dataclass, fields
from typing import Iterable, List, Optional, Sequence, Tuple

from taf_models import FlightCategory, ForecastGroup, GroupFields, GroupKind, Visibility, CloudLayer, WeatherPhenomenon, Wind

VFR_MIN_VISIBILITY_M = 8000
VFR_MIN_CEILING = 15  # сотни футов
DEFAULT_VISIBILITY_M = 10000
ALTERNATE_MIN_PROBABILITY = 30
STRONG_WIND_KT = 20
GUST_KT = 25

CRITICAL_IMPACT_MARKERS = ('Thunderstorm', 'Alternate', 'Freezing', 'Gusts', 'Strong', 'Below VFR')


@dataclass(frozen=True)
class CeilingVisibility:
    """
    Нижняя граница облаков и видимость одной группы

    ceiling - минимальная высота BKN/OVC/VV в сотнях футов,
    None если такого слоя нет (ограничения нет).
    """

    ceiling: Optional[int]
    visibility_m: int

    @classmethod
    def from_group(cls, visibility: Optional[Visibility], clouds: Sequence[CloudLayer]) -> 'CeilingVisibility':
        bases = [c.altitude for c in clouds if c.coverage.forms_ceiling and c.altitude is not None]
        return cls(
            ceiling=min(bases) if bases else None,
            visibility_m=visibility.meters if visibility else DEFAULT_VISIBILITY_M,
        )

    @property
    def below_ceiling_minimum(self) -> bool:
        return self.ceiling is not None and self.ceiling < VFR_MIN_CEILING

    @property
    def below_visibility_minimum(self) -> bool:
        return self.visibility_m < VFR_MIN_VISIBILITY_M


def flight_category(cv: CeilingVisibility) -> FlightCategory:
    if cv.below_visibility_minimum or cv.below_ceiling_minimum:
        return FlightCategory.IFR
    return FlightCategory.VFR


def alternate_required(
    cv: CeilingVisibility,
    kind: GroupKind,
    probability: Optional[int],
    weather: Iterable[WeatherPhenomenon],
) -> bool:
    """
    Нужен ли запасной аэродром для группы

    Любое из условий: облака ниже 1500 ft, видимость меньше 8 км,
    PROB30/40 с вероятностью не ниже 30%, гроза (TS) в явлениях.
    """
    if cv.below_ceiling_minimum:
        return True
    if cv.below_visibility_minimum:
        return True
    if kind.is_probability and (probability or 0) >= ALTERNATE_MIN_PROBABILITY:
        return True
    return any('TS' in wx.code for wx in weather)


def derive_impacts(
    category: FlightCategory,
    alternate: bool,
    wind: Optional[Wind],
    weather: Iterable[WeatherPhenomenon],
) -> List[str]:
    """Список влияний группы; повторы здесь не убираются"""
    impacts = []

    if category == FlightCategory.IFR:
        impacts.append('Below VFR Minima')
    if alternate:
        impacts.append('Alternate Required')

    if wind:
        if wind.speed_kt > STRONG_WIND_KT:
            impacts.append('Strong Winds')
        if wind.gust_kt is not None and wind.gust_kt > GUST_KT:
            impacts.append(f"Gusts {wind.gust_kt}kt")
        if wind.is_variable:
            impacts.append('Variable Winds')

    for wx in weather:
        code = wx.code
        if 'TS' in code:
            impacts.append('Thunderstorms')
        if 'FZ' in code:
            impacts.append('Freezing Precip')
        if 'GR' in code or 'GS' in code:
            impacts.append('Hail')
        if 'FG' in code:
            impacts.append('Fog')
        if 'SN' in code:
            impacts.append('Snow')
        if code.startswith('+RA'):
            impacts.append('Heavy Rain')

    return impacts


def derive_group(group_fields: GroupFields) -> ForecastGroup:
    """Вторая фаза построения группы: новый ForecastGroup с производными полями"""
    cv = CeilingVisibility.from_group(group_fields.visibility, group_fields.clouds)
    category = flight_category(cv)
    alternate = alternate_required(cv, group_fields.kind, group_fields.probability, group_fields.weather)
    impacts = derive_impacts(category, alternate, group_fields.wind, group_fields.weather)

    values = {f.name: getattr(group_fields, f.name) for f in fields(GroupFields)}
    return ForecastGroup(
        **values,
        flight_category=category,
        alternate_required=alternate,
        impacts=tuple(impacts),
    )


def aggregate_impacts(groups: Iterable[ForecastGroup]) -> Tuple[str, ...]:
    seen = []
    for group in groups:
        for impact in group.impacts:
            if impact not in seen:
                seen.append(impact)
    return tuple(seen)


def split_impacts(impacts: Iterable[str]) -> Tuple[List[str], List[str]]:
    """Делит влияния на критические и требующие внимания"""
    critical = []
    cautionary = []
    for impact in impacts:
        if any(marker in impact for marker in CRITICAL_IMPACT_MARKERS):
            critical.append(impact)
        else:
            cautionary.append(impact)
    return critical, cautionary
