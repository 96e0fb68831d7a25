"""
Расшифровка кодов погодных явлений TAF

Код разбирается строго слева направо: интенсивность, не более одного
дескриптора, затем двухбуквенные коды явлений до первого неизвестного.
Результат - Decoded с фразой или Unrecognized, если ничего не распознано.
"""

from dataclasses import dataclass
from typing import Union

WEATHER_INTENSITY = {
    '-': 'Light',
    '+': 'Heavy',
}

# Порядок важен: проверяется по очереди, берётся первый совпавший
WEATHER_DESC = (
    ('VC', 'Vicinity'),
    ('MI', 'Shallow'),
    ('BC', 'Patches Of'),
    ('DR', 'Low Drifting'),
    ('BL', 'Blowing'),
    ('SH', 'Showers Of'),
    ('TS', 'Thunderstorm With'),
    ('FZ', 'Freezing'),
)

WEATHER_TRANSLATION = {
    'RA': 'Rain', 'SN': 'Snow', 'SG': 'Snow Grains', 'DZ': 'Drizzle',
    'GR': 'Hail', 'GS': 'Small Hail', 'PL': 'Ice Pellets',
    'FG': 'Fog', 'BR': 'Mist', 'HZ': 'Haze', 'FU': 'Smoke', 'DU': 'Dust', 'SA': 'Sand',
    'SQ': 'Squall', 'FC': 'Funnel Cloud', 'SS': 'Sandstorm', 'DS': 'Duststorm',
    'VA': 'Volcanic Ash',
}

# Связки, которые отбрасываются, если после них нет явления
_DANGLING = ('With', 'Of')


@dataclass(frozen=True)
class Decoded:
    code: str
    phrase: str


@dataclass(frozen=True)
class Unrecognized:
    code: str


PhenomenonDecode = Union[Decoded, Unrecognized]


def decode_phenomenon(code: str) -> PhenomenonDecode:
    """
    Расшифровывает код явления ('-RA', 'TSRA', '+SHSN')

    Args:
        code: код явления из текста TAF

    Returns:
        Decoded(code, phrase) или Unrecognized(code)
    """
    words = []
    rest = code

    if rest[:1] in WEATHER_INTENSITY:
        words.append(WEATHER_INTENSITY[rest[:1]])
        rest = rest[1:]

    for prefix, phrase in WEATHER_DESC:
        if rest.startswith(prefix):
            words.append(phrase)
            rest = rest[len(prefix):]
            break

    phenomena = 0
    while len(rest) >= 2 and rest[:2] in WEATHER_TRANSLATION:
        words.append(WEATHER_TRANSLATION[rest[:2]])
        rest = rest[2:]
        phenomena += 1

    phrase = ' '.join(words).split()
    if not phenomena and phrase and phrase[-1] in _DANGLING:
        phrase = phrase[:-1]

    if not phrase:
        return Unrecognized(code)
    return Decoded(code, ' '.join(phrase))


def describe_phenomenon(code: str) -> str:
    """Фраза для кода или пустая строка для нераспознанного кода"""
    result = decode_phenomenon(code)
    if isinstance(result, Decoded):
        return result.phrase
    return ''
