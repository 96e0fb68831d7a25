"""Tests for weather phenomenon decoding."""

import pytest

from weather_phenomena import Decoded, Unrecognized, decode_phenomenon, describe_phenomenon


class TestDecodePhenomenon:

    @pytest.mark.parametrize('code,phrase', [
        ('RA', 'Rain'),
        ('-RA', 'Light Rain'),
        ('+RA', 'Heavy Rain'),
        ('BR', 'Mist'),
        ('TSRA', 'Thunderstorm With Rain'),
        ('+TSRAGR', 'Heavy Thunderstorm With Rain Hail'),
        ('SHRA', 'Showers Of Rain'),
        ('FZDZ', 'Freezing Drizzle'),
        ('BLSN', 'Blowing Snow'),
        ('VCFG', 'Vicinity Fog'),
        ('MIFG', 'Shallow Fog'),
        ('BCFG', 'Patches Of Fog'),
        ('DRSA', 'Low Drifting Sand'),
        ('RASN', 'Rain Snow'),
        ('+FC', 'Heavy Funnel Cloud'),
        ('VA', 'Volcanic Ash'),
    ])
    def test_known_codes(self, code, phrase):
        assert decode_phenomenon(code) == Decoded(code, phrase)

    def test_lone_thunderstorm_drops_with(self):
        assert describe_phenomenon('TS') == 'Thunderstorm'

    def test_intensity_thunderstorm_drops_with(self):
        assert describe_phenomenon('+TS') == 'Heavy Thunderstorm'

    def test_only_one_descriptor_consumed(self):
        # SH after VC is not a phenomenon code, decoding stops there
        assert describe_phenomenon('VCSH') == 'Vicinity'

    def test_stops_at_unknown_chunk(self):
        assert describe_phenomenon('RAXXSN') == 'Rain'

    def test_unrecognized_code(self):
        result = decode_phenomenon('XYZ')
        assert isinstance(result, Unrecognized)
        assert result.code == 'XYZ'
        assert describe_phenomenon('XYZ') == ''

    def test_empty_input(self):
        assert decode_phenomenon('') == Unrecognized('')
        assert describe_phenomenon('') == ''

    def test_deterministic(self):
        assert decode_phenomenon('-SHSN') == decode_phenomenon('-SHSN')

    def test_single_spaced_and_trimmed(self):
        phrase = describe_phenomenon('+SHRASN')
        assert phrase == phrase.strip()
        assert '  ' not in phrase
        assert phrase == 'Heavy Showers Of Rain Snow'
