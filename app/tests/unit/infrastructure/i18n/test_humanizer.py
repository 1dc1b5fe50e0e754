"""Tests for infrastructure.i18n.humanizer module."""

import pytest

from infrastructure.i18n.humanizer import Humanizer, HumanizerOptions
from infrastructure.i18n.models import DurationUnit


def _unit(name):
    def render(amount):
        return f"{amount} {name}" if amount == 1 else f"{amount} {name}s"

    return render


ENGLISH = {unit: _unit(unit.variable[:-1]) for unit in DurationUnit}

HOUR = 3600000
MINUTE = 60000


@pytest.fixture
def humanizer():
    return Humanizer(ENGLISH)


class TestHumanizerOptions:
    def test_defaults(self):
        options = HumanizerOptions()
        assert options.delimiter == ", "
        assert options.largest is None
        assert DurationUnit.MILLISECONDS not in options.units

    def test_merge_returns_copy(self):
        options = HumanizerOptions()
        merged = options.merge({"largest": 2, "units": ["h", "minutes"]})
        assert merged.largest == 2
        assert merged.units == (DurationUnit.HOURS, DurationUnit.MINUTES)
        assert options.largest is None

    def test_merge_unknown_option(self):
        with pytest.raises(ValueError, match="Unknown humanizer options"):
            HumanizerOptions().merge({"colour": "red"})


class TestHumanizer:
    """Tests for Humanizer."""

    def test_minutes_and_seconds(self, humanizer):
        assert humanizer.humanize(90000) == "1 minute, 30 seconds"

    def test_decompose(self, humanizer):
        assert humanizer.decompose(90000) == [
            (DurationUnit.MINUTES, 1.0),
            (DurationUnit.SECONDS, 30.0),
        ]

    def test_zero_duration(self, humanizer):
        assert humanizer.humanize(0) == "0 seconds"

    def test_negative_duration_uses_magnitude(self, humanizer):
        assert humanizer.humanize(-2000) == "2 seconds"

    def test_fractional_last_unit_truncated(self, humanizer):
        assert humanizer.humanize(1234) == "1.23 seconds"

    def test_round_option(self, humanizer):
        assert humanizer.humanize(1600, {"round": True}) == "2 seconds"

    def test_largest_folds_remainder(self, humanizer):
        duration = 2 * HOUR + 30 * MINUTE + 15000
        assert humanizer.humanize(duration, {"largest": 1}) == "2.5 hours"
        assert humanizer.humanize(duration, {"largest": 2}) == "2 hours, 30.25 minutes"

    def test_custom_units(self, humanizer):
        assert humanizer.humanize(2 * HOUR, {"units": ["m"]}) == "120 minutes"

    def test_conjunction(self, humanizer):
        duration = HOUR + MINUTE + 1000
        assert (
            humanizer.humanize(duration, {"conjunction": " and "})
            == "1 hour, 1 minute, and 1 second"
        )
        assert (
            humanizer.humanize(duration, {"conjunction": " and ", "serial_comma": False})
            == "1 hour, 1 minute and 1 second"
        )
        assert humanizer.humanize(HOUR + MINUTE, {"conjunction": " and "}) == (
            "1 hour and 1 minute"
        )

    def test_default_options_from_mapping(self):
        humanizer = Humanizer(ENGLISH, {"delimiter": " "})
        assert humanizer.humanize(90000) == "1 minute 30 seconds"

    def test_convert_duration(self):
        assert Humanizer.convert_duration(2, "h") == 2 * HOUR
        assert Humanizer.convert_duration(1, DurationUnit.DAYS) == 86400000

    def test_integral_amounts_passed_as_int(self):
        seen = []

        def record(amount):
            seen.append(amount)
            return str(amount)

        Humanizer({DurationUnit.SECONDS: record}, {"units": ["s"]}).humanize(3000)
        assert seen == [3]
        assert isinstance(seen[0], int)

    def test_missing_unit_formatter(self):
        humanizer = Humanizer({DurationUnit.SECONDS: _unit("second")})
        with pytest.raises(ValueError, match="No formatter"):
            humanizer.humanize(2 * HOUR)
