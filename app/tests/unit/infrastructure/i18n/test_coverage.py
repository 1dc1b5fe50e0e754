"""Tests for infrastructure.i18n.coverage module."""

from unittest.mock import patch

import pytest

from infrastructure.i18n.coverage import (
    CoverageCalculator,
    CoverageLogPolicy,
    format_coverage,
)
from infrastructure.i18n.exceptions import UnknownLanguageError


def _untranslated_calls(mock_logger):
    return [
        c
        for c in mock_logger.warning.call_args_list
        if c[0][0] == "string_not_translated"
    ]


class TestCoverageLogPolicy:
    def test_boolean_policy(self):
        assert CoverageLogPolicy(True).is_disabled_for("fr")
        assert not CoverageLogPolicy(False).is_disabled_for("fr")
        assert not CoverageLogPolicy(None).is_disabled_for("fr")

    def test_selective_policy(self):
        policy = CoverageLogPolicy(["fr"])
        assert policy.is_disabled_for("fr")
        assert not policy.is_disabled_for("de")
        assert not policy.is_disabled_for(None)


class TestFormatCoverage:
    @pytest.mark.parametrize(
        "value,expected", [(100.0, "100"), (66.67, "66.67"), (0.0, "0"), (50.5, "50.5")]
    )
    def test_format(self, value, expected):
        assert format_coverage(value) == expected


class TestCoverageCalculator:
    """Tests for CoverageCalculator."""

    def test_source_language_is_full(self, coverage_calculator, registry):
        assert coverage_calculator.coverage("en") == 100.0
        assert registry.get("en")["+COVERAGE"] == "100"

    @patch("infrastructure.i18n.coverage.logger")
    def test_partial_translation(self, mock_logger, coverage_calculator, registry):
        """Empty and missing strings count as untranslated."""
        # +NAME, +COUNTRY, A covered; B empty, C missing
        assert coverage_calculator.coverage("fr") == 60.0
        assert registry.get("fr")["+COVERAGE"] == "60"

        keys = [c[1]["key"] for c in _untranslated_calls(mock_logger)]
        assert keys == ["B", "C"]
        assert _untranslated_calls(mock_logger)[0][1]["language_name"] == "Français"

    @patch("infrastructure.i18n.coverage.logger")
    def test_coverage_key_counts_as_covered(self, mock_logger, coverage_calculator):
        """Once the source carries +COVERAGE it is covered everywhere."""
        results = coverage_calculator.coverage_all()

        # 4 of 6 source keys: +NAME, +COUNTRY, A and +COVERAGE
        assert results == {"en": 100.0, "fr": 66.67}
        keys = [c[1]["key"] for c in _untranslated_calls(mock_logger)]
        assert "+COVERAGE" not in keys

    def test_unknown_language(self, coverage_calculator):
        with pytest.raises(UnknownLanguageError):
            coverage_calculator.coverage("de")

    def test_coverage_all_skips_unknown(self, coverage_calculator):
        assert coverage_calculator.coverage_all(["en", "de"]) == {"en": 100.0}

    @patch("infrastructure.i18n.coverage.logger")
    def test_coverage_all_report(self, mock_logger, coverage_calculator):
        coverage_calculator.coverage_all(["en"], report=True)
        mock_logger.info.assert_called_once_with(
            "language_coverage",
            language="en",
            name="English",
            country="US",
            coverage=100.0,
        )

    def test_full_translation(self, registry, coverage_calculator):
        registry.get("fr").update({"B": "fb", "C": "fc"})
        assert coverage_calculator.coverage("fr") == 100.0
        assert registry.get("fr")["+COVERAGE"] == "100"

    def test_missing_keys(self, coverage_calculator):
        assert coverage_calculator.missing_keys("fr") == ["B", "C"]
        assert coverage_calculator.missing_keys("en") == []

    @patch("infrastructure.i18n.coverage.logger")
    def test_selective_log_suppression(self, mock_logger, registry):
        """Listed languages are silent, others still report."""
        registry.register("de", {"+NAME": "Deutsch", "+COUNTRY": "DE", "A": "da"})
        calculator = CoverageCalculator(registry, "en", CoverageLogPolicy(["fr"]))

        calculator.coverage_all()

        languages = {c[1]["language"] for c in _untranslated_calls(mock_logger)}
        assert languages == {"de"}

    @patch("infrastructure.i18n.coverage.logger")
    def test_global_log_suppression(self, mock_logger, registry):
        calculator = CoverageCalculator(registry, "en", CoverageLogPolicy(True))
        assert calculator.coverage("fr") == 60.0
        assert _untranslated_calls(mock_logger) == []
