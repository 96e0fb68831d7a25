"""
Модель данных декодированного TAF

Все объекты создаются один раз внутри вызова decode() и далее не меняются
(frozen dataclasses). Сводка владеет группами, группа владеет своими
ветром, видимостью, облачностью и явлениями.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Optional, Tuple

# Коэффициент пересчёта м/с в узлы
MPS_TO_KT = 1.94384

VARIABLE_DIRECTION = 'VRB'


class FlightCategory(Enum):
    """Категория полёта: только VFR и IFR, без MVFR/LIFR"""

    VFR = 'VFR'
    IFR = 'IFR'


class GroupKind(Enum):
    """Тип группы прогноза"""

    BASE = 'BASE'
    FM = 'FM'
    BECMG = 'BECMG'
    TEMPO = 'TEMPO'
    PROB30 = 'PROB30'
    PROB40 = 'PROB40'

    @property
    def is_probability(self) -> bool:
        return self in (GroupKind.PROB30, GroupKind.PROB40)


class CloudCoverage(Enum):
    FEW = 'FEW'
    SCT = 'SCT'
    BKN = 'BKN'
    OVC = 'OVC'
    VV = 'VV'
    NSC = 'NSC'
    SKC = 'SKC'

    @property
    def forms_ceiling(self) -> bool:
        """BKN, OVC и VV образуют нижнюю границу облаков"""
        return self in (CloudCoverage.BKN, CloudCoverage.OVC, CloudCoverage.VV)

    @property
    def is_clear(self) -> bool:
        return self in (CloudCoverage.NSC, CloudCoverage.SKC)


class WindUnit(Enum):
    KT = 'KT'
    MPS = 'MPS'


def _to_dict(obj) -> dict:
    """Сериализует dataclass для JSON: Enum -> значение, кортежи -> списки"""
    result = {}
    for f in fields(obj):
        result[f.name] = _plain(getattr(obj, f.name))
    return result


def _plain(value):
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (tuple, list)):
        return [_plain(v) for v in value]
    if hasattr(value, '__dataclass_fields__'):
        return _to_dict(value)
    return value


@dataclass(frozen=True)
class Wind:
    """
    Ветер у земли

    Attributes:
        direction: курс в градусах ('020') или 'VRB'
        speed: средняя скорость в единицах unit
        unit: KT или MPS
        gust: порывы (всегда больше средней скорости), если есть
    """

    direction: str
    speed: int
    unit: WindUnit = WindUnit.KT
    gust: Optional[int] = None

    def __post_init__(self):
        if self.gust is not None and self.gust <= self.speed:
            raise ValueError(f"Порывы {self.gust} не превышают среднюю скорость {self.speed}")

    @property
    def is_variable(self) -> bool:
        return self.direction == VARIABLE_DIRECTION

    @property
    def heading(self) -> Optional[int]:
        return None if self.is_variable else int(self.direction)

    @property
    def speed_kt(self) -> int:
        return _knots(self.speed, self.unit)

    @property
    def gust_kt(self) -> Optional[int]:
        if self.gust is None:
            return None
        return _knots(self.gust, self.unit)

    def to_dict(self) -> dict:
        return _to_dict(self)


def _knots(value: int, unit: WindUnit) -> int:
    if unit == WindUnit.MPS:
        return int(round(value * MPS_TO_KT))
    return value


@dataclass(frozen=True)
class Visibility:
    """Видимость: метры для расчётов и строка для отображения"""

    meters: int
    raw: str

    def __post_init__(self):
        if self.meters < 0:
            raise ValueError(f"Отрицательная видимость: {self.meters}")

    def to_dict(self) -> dict:
        return _to_dict(self)


@dataclass(frozen=True)
class CloudLayer:
    """
    Слой облачности

    altitude - высота нижней границы в сотнях футов (030 = 3000 ft).
    convective - CB или TCU.
    """

    coverage: CloudCoverage
    altitude: Optional[int] = None
    convective: Optional[str] = None

    def __post_init__(self):
        if self.coverage.is_clear and self.altitude is not None:
            raise ValueError(f"{self.coverage.value} не может иметь высоту")

    @property
    def altitude_ft(self) -> Optional[int]:
        return None if self.altitude is None else self.altitude * 100

    def to_dict(self) -> dict:
        return _to_dict(self)


@dataclass(frozen=True)
class WeatherPhenomenon:
    """Код явления и его расшифровка (пустая, если код не распознан)"""

    code: str
    description: str = ''

    @property
    def recognized(self) -> bool:
        return bool(self.description)

    def to_dict(self) -> dict:
        return _to_dict(self)


@dataclass(frozen=True)
class Validity:
    """Период действия прогноза DDHH/DDHH"""

    start_day: int = 0
    start_hour: int = 0
    end_day: int = 0
    end_hour: int = 0
    raw: str = 'UNKNOWN'

    @property
    def known(self) -> bool:
        return self.raw != 'UNKNOWN'

    def to_dict(self) -> dict:
        return _to_dict(self)


@dataclass(frozen=True)
class IssueTime:
    """Время выпуска DDHHMMZ"""

    day: int
    hour: int
    minute: int

    def to_dict(self) -> dict:
        return _to_dict(self)


@dataclass(frozen=True)
class GroupFields:
    """
    Извлечённые поля группы до вычисления производных признаков

    Первая фаза построения группы: всё, что читается из текста.
    Вторая фаза (flight_rules.derive_group) создаёт ForecastGroup.
    """

    kind: GroupKind
    raw_text: str
    start_day: Optional[int] = None
    start_hour: Optional[int] = None
    start_minute: Optional[int] = None
    end_day: Optional[int] = None
    end_hour: Optional[int] = None
    end_minute: Optional[int] = None
    probability: Optional[int] = None
    wind: Optional[Wind] = None
    visibility: Optional[Visibility] = None
    clouds: Tuple[CloudLayer, ...] = ()
    weather: Tuple[WeatherPhenomenon, ...] = ()

    def to_dict(self) -> dict:
        return _to_dict(self)


@dataclass(frozen=True)
class ForecastGroup(GroupFields):
    """Группа прогноза с категорией полёта, признаком запасного и влияниями"""

    flight_category: FlightCategory = FlightCategory.VFR
    alternate_required: bool = False
    impacts: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ParsedBulletin:
    """
    Результат декодирования TAF

    flight_category - худшая категория по всем группам,
    alternate_required - хотя бы одна группа требует запасной аэродром,
    impacts - влияния всех групп без повторов, в порядке появления.
    """

    station: str = 'UNKNOWN'
    validity: Validity = field(default_factory=Validity)
    raw_text: str = ''
    groups: Tuple[ForecastGroup, ...] = ()
    flight_category: FlightCategory = FlightCategory.VFR
    alternate_required: bool = False
    issue_time: Optional[IssueTime] = None
    amendment: bool = False
    correction: bool = False
    impacts: Tuple[str, ...] = ()

    @property
    def base(self) -> Optional[ForecastGroup]:
        return self.groups[0] if self.groups else None

    def to_dict(self) -> dict:
        return _to_dict(self)
