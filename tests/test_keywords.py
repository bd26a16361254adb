"""
Tests for the shared FITS keyword table and value parsers.
"""

import logging
from datetime import datetime, timezone

import pytest

from astrocore.metadata.keywords import (
    FieldPatch, keyword_patch, known_keywords, parse_bool, parse_date_time,
    parse_declination, parse_float, parse_int, parse_right_ascension, parse_sexagesimal
)


class TestNumbers:
    """Plain decimal notation only."""

    def test_float(self):
        assert parse_float("-12.5") == -12.5
        assert parse_float("1e3") == 1000.0

    def test_int(self):
        assert parse_int("-3") == -3

    @pytest.mark.parametrize("value", ["1_0", " 5", "5 ", "\t5", "", None])
    def test_rejected(self, value):
        assert parse_float(value) is None
        assert parse_int(value) is None

    def test_int_rejects_decimal_point(self):
        assert parse_int("2.0") is None


class TestSexagesimal:
    """Hours/degrees, minutes, seconds notation."""

    def test_negative(self):
        assert parse_sexagesimal("-10 30 0") == pytest.approx(-10.5)

    def test_positive(self):
        assert parse_sexagesimal("10 30 0") == pytest.approx(10.5)

    def test_negative_zero_degrees(self):
        assert parse_sexagesimal("-0 30 0") == pytest.approx(-0.5)

    def test_seconds(self):
        assert parse_sexagesimal("1 0 36") == pytest.approx(1.01)

    def test_too_few_fields(self):
        assert parse_sexagesimal("10 30") is None

    def test_not_numeric(self):
        assert parse_sexagesimal("ten thirty zero") is None

    def test_digit_separator(self):
        assert parse_sexagesimal("1_0 30 0") is None


class TestCoordinates:
    """Right ascension and declination parsing."""

    def test_decimal_ra_is_degrees(self):
        assert parse_right_ascension("10.6847") == pytest.approx(10.6847)

    def test_sexagesimal_ra_is_hours(self):
        assert parse_right_ascension("00 42 44.3") == pytest.approx(10.684583, abs=1e-5)

    def test_decimal_dec(self):
        assert parse_declination("-5.25") == pytest.approx(-5.25)

    def test_sexagesimal_dec_is_degrees(self):
        assert parse_declination("+41 16 09") == pytest.approx(41.269167, abs=1e-5)

    def test_unparseable(self):
        assert parse_right_ascension("north") is None
        assert parse_declination("") is None

    def test_digit_separator(self):
        assert parse_right_ascension("1_80") is None
        assert parse_declination("4_5") is None


class TestParseDateTime:
    """Timestamp formats."""

    @pytest.mark.parametrize("text, expected", [
        ("2024-03-10T02:00:00.500Z", datetime(2024, 3, 10, 2, 0, 0, 500000, tzinfo=timezone.utc)),
        ("2024-03-10T02:00:00Z", datetime(2024, 3, 10, 2, 0, 0, tzinfo=timezone.utc)),
        ("2024-03-10T02:00:00.25", datetime(2024, 3, 10, 2, 0, 0, 250000, tzinfo=timezone.utc)),
        ("2024-03-10T02:00:00", datetime(2024, 3, 10, 2, 0, 0, tzinfo=timezone.utc)),
        ("2024-03-10 02:00:00.125", datetime(2024, 3, 10, 2, 0, 0, 125000, tzinfo=timezone.utc)),
        ("2024-03-10 02:00:00", datetime(2024, 3, 10, 2, 0, 0, tzinfo=timezone.utc)),
    ])
    def test_supported_formats(self, text, expected):
        assert parse_date_time(text) == expected

    def test_long_fraction_is_truncated(self):
        parsed = parse_date_time("2024-03-10T02:00:00.1234567Z")
        assert parsed == datetime(2024, 3, 10, 2, 0, 0, 123456, tzinfo=timezone.utc)

    def test_failure_is_logged_not_raised(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert parse_date_time("10/03/2024") is None

        assert "Failed to parse date string: 10/03/2024" in caplog.text


class TestKeywordPatch:
    """Keyword to record-field mapping."""

    def test_object(self):
        assert keyword_patch("OBJECT", "M31") == FieldPatch("exposure", "object_name", "M31")

    def test_exposure_time(self):
        assert keyword_patch("EXPTIME", "300.0") == FieldPatch("exposure", "exposure_time", 300.0)

    def test_aliases_share_a_field(self):
        assert keyword_patch("CCD-TEMP", "-10").field == keyword_patch("CCDTEMP", "-10").field == "temperature"

    def test_unknown_keyword(self):
        assert keyword_patch("BAYERPAT", "RGGB") is None

    def test_names_are_case_sensitive(self):
        assert keyword_patch("object", "M31") is None

    def test_bad_number_maps_to_none(self):
        assert keyword_patch("GAIN", "high").value is None

    def test_padded_number_maps_to_none(self):
        assert keyword_patch("EXPTIME", "300.0 ").value is None
        assert keyword_patch("OFFSET", " 30").value is None

    def test_binning_defaults_to_one(self):
        assert keyword_patch("XBINNING", "n/a").value == 1
        assert keyword_patch("YBINNING", "2").value == 2

    def test_site_fields_go_to_mount(self):
        assert keyword_patch("SITELONG", "-75.5") == FieldPatch("mount", "longitude", -75.5)

    def test_software_versions(self):
        assert keyword_patch("NINA-VERSION", "3.0").value == "NINA 3.0"
        assert keyword_patch("EKOS-VERSION", "3.6").value == "EKOS 3.6"

    def test_flags(self):
        assert keyword_patch("MFLIP", "T").value is True
        assert parse_bool("false") is False

    def test_wcs_section(self):
        assert keyword_patch("CRVAL1", "10.5") == FieldPatch("wcs", "crval1", 10.5)

    def test_date_obs(self):
        patch = keyword_patch("DATE-OBS", "2024-03-10T02:00:00")
        assert patch.section == "exposure"
        assert patch.value.tzinfo is timezone.utc

    def test_known_keywords(self):
        keywords = known_keywords()
        assert "OBJECT" in keywords
        assert "AZ-OBS" in keywords
        assert len(keywords) == len(set(keywords))
