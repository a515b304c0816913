"""Tests for unit parsing."""

import pytest

from bibber.errors import ConfigurationError
from bibber.units import (
    Dimension,
    UnitError,
    dimension_of,
    parse_length,
    parse_quantity,
    parse_temperature,
    parse_time,
    split_quantity,
    to_picoseconds,
)


class TestSplitQuantity:
    """Test splitting value:unit."""

    def test_split(self):
        assert split_quantity("10:fs") == (10.0, "fs")

    def test_scientific_notation(self):
        assert split_quantity("1e-3:ns") == (1e-3, "ns")

    def test_missing_unit(self):
        with pytest.raises(UnitError, match="no unit"):
            split_quantity("10")

    def test_empty_unit(self):
        with pytest.raises(UnitError):
            split_quantity("10:")

    def test_bad_number(self):
        with pytest.raises(ConfigurationError, match="cannot parse"):
            split_quantity("ten:fs")


class TestConversion:
    """Test conversion to SI."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("10:fs", 1e-14),
            ("1:ps", 1e-12),
            ("0.01:ns", 1e-11),
            ("2:s", 2.0),
        ],
    )
    def test_time(self, text, expected):
        assert parse_time(text) == pytest.approx(expected)

    @pytest.mark.parametrize(
        "text, expected",
        [("100:nm", 1e-7), ("1:m", 1.0), ("3:um", 3e-6), ("5:pm", 5e-12)],
    )
    def test_length(self, text, expected):
        assert parse_length(text) == pytest.approx(expected)

    def test_kelvin(self):
        assert parse_temperature("300:K") == 300.0

    def test_celsius(self):
        """Celsius is offset by +273.15."""
        assert parse_temperature("25:C") == pytest.approx(298.15)
        assert parse_temperature("0:C") == pytest.approx(273.15)

    def test_helpers(self):
        assert to_picoseconds(1e-11) == pytest.approx(10.0)


class TestUnitErrors:
    """Test rejected units."""

    def test_unknown_unit(self):
        with pytest.raises(UnitError, match="unknown unit 'parsec'"):
            parse_length("1:parsec")

    def test_wrong_dimension(self):
        with pytest.raises(UnitError, match="expected a time unit, got length unit 'nm'"):
            parse_time("10:nm")

    def test_temperature_as_length(self):
        with pytest.raises(UnitError, match="length"):
            parse_quantity("300:K", Dimension.LENGTH)

    def test_unit_error_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            parse_time("10:K")

    def test_dimension_of(self):
        assert dimension_of("fs") is Dimension.TIME
        assert dimension_of("nm") is Dimension.LENGTH
        assert dimension_of("C") is Dimension.TEMPERATURE
        assert dimension_of("furlong") is None
