"""
Utility functions for the personal finance API.

Date helpers work in UTC and return unix timestamps in seconds.
"""
import calendar
import re
import time
from datetime import date, datetime, timezone
from decimal import Decimal, ROUND_DOWN, ROUND_HALF_UP


# Email validation regex pattern
EMAIL_REGEX = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')

TWO_PLACES = Decimal('0.01')

# Years whose month and year bounds fit in datetime.date
MIN_YEAR = 1
MAX_YEAR = 9998


# ============================================================================
# Date and time
# ============================================================================

def get_unix_timestamp_from_date(value):
    """
    Convert a date or datetime to a unix timestamp.

    Dates are taken as UTC midnight. Naive datetimes are taken as UTC.

    Args:
        value (date or datetime): The value to convert

    Returns:
        int: Seconds since the epoch
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return calendar.timegm(value.timetuple())
    return calendar.timegm(date(value.year, value.month, value.day).timetuple())


def get_current_unix_timestamp():
    """Return the current time as a unix timestamp."""
    return int(time.time())


def validate_year(year):
    """Raise ValueError unless year is within MIN_YEAR..MAX_YEAR."""
    if year < MIN_YEAR or year > MAX_YEAR:
        raise ValueError(f'Year must be between {MIN_YEAR} and {MAX_YEAR}')


def get_month_bounds(month, year):
    """
    Get the timestamp range covering a calendar month.

    Args:
        month (int): Month, 1-12
        year (int): Year

    Returns:
        tuple: (start, end) where start is the first second of the month and
               end is the first second of the next month
    """
    if month < 1 or month > 12:
        raise ValueError(f'Invalid month: {month}')
    validate_year(year)

    next_month = month + 1 if month < 12 else 1
    next_months_year = year if month < 12 else year + 1

    start = get_unix_timestamp_from_date(date(year, month, 1))
    end = get_unix_timestamp_from_date(date(next_months_year, next_month, 1))
    return start, end


def get_year_bounds(year):
    """Get the (start, end) timestamp range covering a calendar year."""
    validate_year(year)
    start = get_unix_timestamp_from_date(date(year, 1, 1))
    end = get_unix_timestamp_from_date(date(year + 1, 1, 1))
    return start, end


def get_first_day_of_month_n_months_ago(n, now=None):
    """
    Get the timestamp of the first day of the month n months before now.

    For n=12 in March 2024 this is 2023-03-01.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    month_index = now.year * 12 + (now.month - 1) - n
    year, month = divmod(month_index, 12)
    return get_unix_timestamp_from_date(date(year, month + 1, 1))


def get_month_and_year_from_timestamp(timestamp):
    """Return (month, year) of a unix timestamp, in UTC."""
    moment = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    return moment.month, moment.year


# ============================================================================
# Amount conversion
# ============================================================================

def convert_big_integer_to_float(value):
    """
    Convert an amount in cents to a float with two decimals.

    Args:
        value (int or None): Amount in cents

    Returns:
        float: Amount in currency units (0.0 for None)
    """
    if value is None:
        return 0.0
    return float((Decimal(value) / 100).quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


def convert_float_to_big_integer(value):
    """
    Convert an amount in currency units to integer cents.

    Args:
        value (float, str or Decimal): Amount, e.g. 12.34 or "12.34"

    Returns:
        int: Amount in cents (half-up rounding)

    Raises:
        ValueError: If the value is not a number
    """
    try:
        amount = Decimal(str(value).replace(',', '.'))
    except ArithmeticError as exc:
        raise ValueError(f'Invalid amount: {value}') from exc
    if not amount.is_finite():
        raise ValueError(f'Invalid amount: {value}')
    return int((amount * 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def truncate_cents_to_float(value):
    """Convert cents to currency units, truncating past the second decimal."""
    if value is None:
        return 0.0
    return float((Decimal(value) / 100).quantize(TWO_PLACES, rounding=ROUND_DOWN))


# ============================================================================
# Validation
# ============================================================================

def is_valid_email(email):
    """Validate email format using regex."""
    return EMAIL_REGEX.match(email) is not None


def validate_password_strength(password):
    """Validate password meets strength requirements.

    Returns:
        tuple: (is_valid: bool, error_message: str or None)
    """
    if len(password) < 8:
        return False, 'Password must be at least 8 characters'
    if len(password) > 128:
        return False, 'Password is too long (max 128 characters)'
    if not any(c.isupper() for c in password):
        return False, 'Password must contain at least one uppercase letter'
    if not any(c.islower() for c in password):
        return False, 'Password must contain at least one lowercase letter'
    if not any(c.isdigit() for c in password):
        return False, 'Password must contain at least one number'
    return True, None


def parse_bool(value, default=False):
    """Interpret a header/query/body value as a boolean."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ('1', 'true', 'yes', 'on')
