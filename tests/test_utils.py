"""
Unit tests for utility functions.
Tests date ranges, cents conversion and input validation.
"""
import pytest
from datetime import date, datetime, timezone, timedelta


pytestmark = pytest.mark.unit

JAN_1_2024 = 1704067200
FEB_1_2024 = 1706745600
MAR_1_2024 = 1709251200
DEC_1_2023 = 1701388800
JAN_1_2025 = 1735689600


class TestTimestamps:
    """Tests for date to timestamp conversion."""

    def test_date_is_utc_midnight(self):
        from utils import get_unix_timestamp_from_date

        assert get_unix_timestamp_from_date(date(2024, 1, 1)) == JAN_1_2024

    def test_naive_datetime_taken_as_utc(self):
        from utils import get_unix_timestamp_from_date

        assert get_unix_timestamp_from_date(datetime(2024, 1, 1, 0, 0, 30)) == JAN_1_2024 + 30

    def test_aware_datetime_converted_to_utc(self):
        from utils import get_unix_timestamp_from_date

        moment = datetime(2024, 1, 1, 2, 0, tzinfo=timezone(timedelta(hours=2)))
        assert get_unix_timestamp_from_date(moment) == JAN_1_2024

    def test_month_and_year_from_timestamp(self):
        from utils import get_month_and_year_from_timestamp

        assert get_month_and_year_from_timestamp(FEB_1_2024 - 1) == (1, 2024)
        assert get_month_and_year_from_timestamp(FEB_1_2024) == (2, 2024)


class TestMonthBounds:
    """Tests for month and year ranges."""

    def test_regular_month(self):
        from utils import get_month_bounds

        assert get_month_bounds(1, 2024) == (JAN_1_2024, FEB_1_2024)

    def test_leap_february(self):
        from utils import get_month_bounds

        assert get_month_bounds(2, 2024) == (FEB_1_2024, MAR_1_2024)

    def test_december_rolls_over_year(self):
        from utils import get_month_bounds

        assert get_month_bounds(12, 2023) == (DEC_1_2023, JAN_1_2024)

    @pytest.mark.parametrize('month', [0, 13, -1])
    def test_invalid_month_rejected(self, month):
        from utils import get_month_bounds

        with pytest.raises(ValueError):
            get_month_bounds(month, 2024)

    def test_year_bounds(self):
        from utils import get_year_bounds

        assert get_year_bounds(2024) == (JAN_1_2024, JAN_1_2025)

    @pytest.mark.parametrize('year', [0, -5, 9999, 10000])
    def test_year_out_of_date_range_rejected(self, year):
        from utils import get_month_bounds, get_year_bounds

        with pytest.raises(ValueError, match='Year must be between'):
            get_year_bounds(year)
        with pytest.raises(ValueError, match='Year must be between'):
            get_month_bounds(12, year)

    def test_last_supported_year(self):
        from utils import get_month_bounds, get_year_bounds

        start, end = get_year_bounds(9998)
        assert get_month_bounds(12, 9998)[1] == end
        assert start < end

    def test_first_day_of_month_n_months_ago(self):
        from utils import get_first_day_of_month_n_months_ago

        now = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)
        assert get_first_day_of_month_n_months_ago(12, now=now) == \
            get_first_day_of_month_n_months_ago(0, now=datetime(2023, 3, 2, tzinfo=timezone.utc))
        assert get_first_day_of_month_n_months_ago(3, now=now) == DEC_1_2023
        assert get_first_day_of_month_n_months_ago(0, now=now) == MAR_1_2024


class TestAmountConversion:
    """Tests for cents <-> currency unit conversion."""

    def test_cents_to_float(self):
        from utils import convert_big_integer_to_float

        assert convert_big_integer_to_float(12345) == 123.45
        assert convert_big_integer_to_float(-50) == -0.5
        assert convert_big_integer_to_float(None) == 0.0

    def test_float_to_cents(self):
        from utils import convert_float_to_big_integer

        assert convert_float_to_big_integer(123.45) == 12345
        assert convert_float_to_big_integer('0.1') == 10
        assert convert_float_to_big_integer('12,50') == 1250
        assert convert_float_to_big_integer(0) == 0

    def test_float_to_cents_rounds_half_up(self):
        from utils import convert_float_to_big_integer

        assert convert_float_to_big_integer('1.005') == 101
        assert convert_float_to_big_integer('1.004') == 100

    @pytest.mark.parametrize('value', ['abc', None, 'nan', 'inf'])
    def test_float_to_cents_rejects_non_numbers(self, value):
        from utils import convert_float_to_big_integer

        with pytest.raises(ValueError):
            convert_float_to_big_integer(value)

    def test_truncate_cents_to_float(self):
        from utils import truncate_cents_to_float

        assert truncate_cents_to_float(12345) == 123.45
        assert truncate_cents_to_float(12345.9) == 123.45
        assert truncate_cents_to_float(None) == 0.0


class TestValidation:
    """Tests for email, password and boolean parsing."""

    def test_valid_emails(self):
        from utils import is_valid_email

        assert is_valid_email('alice@example.com')
        assert is_valid_email('first.last+tag@sub.example.org')

    def test_invalid_emails(self):
        from utils import is_valid_email

        assert not is_valid_email('alice')
        assert not is_valid_email('alice@example')
        assert not is_valid_email('@example.com')

    def test_password_strength(self):
        from utils import validate_password_strength

        assert validate_password_strength('Secure123') == (True, None)

        is_valid, error = validate_password_strength('Short1')
        assert not is_valid
        assert '8 characters' in error

        is_valid, error = validate_password_strength('alllowercase1')
        assert not is_valid
        assert 'uppercase' in error

        is_valid, error = validate_password_strength('NoDigitsHere')
        assert not is_valid
        assert 'number' in error

    def test_parse_bool(self):
        from utils import parse_bool

        assert parse_bool('true')
        assert parse_bool('1')
        assert parse_bool(True)
        assert not parse_bool('false')
        assert not parse_bool('0')
        assert not parse_bool(None)
        assert parse_bool(None, default=True)
