from decimal import Decimal

from fieldfinder.extraction import extract_date, extract_number, extract_value, parse_number
from fieldfinder.extraction.value_parser import DATE_NOT_IDENTIFIED, format_number, month_number
from fieldfinder.models import ValueType


def test_string_value_uses_first_group():
    assert extract_value("Invoice No 123", r"No\s*(\d+)", ValueType.STRING).value == "123"
    assert extract_value("Invoice No 123", r"No\s*\d+", ValueType.STRING).value == "No 123"


def test_no_match_or_empty_value():
    assert extract_value("Invoice", r"(\d+)", ValueType.STRING) is None
    assert extract_value("Total:", r"Total:(\d*)", ValueType.NUMBER) is None


def test_number_value():
    result = extract_value("Total: 450", r"Total:\s*(\d+)", ValueType.NUMBER)
    assert result.value == "450"
    assert result.is_valid


def test_parse_number_separators():
    assert parse_number("1,234.56") == Decimal("1234.56")
    assert parse_number("1.234,56") == Decimal("1234.56")
    assert parse_number("12,5") == Decimal("12.5")
    assert parse_number("1 000") == Decimal("1000")
    assert parse_number("1,000,000") == Decimal("1000000")
    assert parse_number("$ 99.") == Decimal("99")
    assert parse_number("abc") is None
    assert parse_number("") is None


def test_number_rendering():
    assert format_number(Decimal("12.5"), ",") == "12,5"
    result = extract_value("Sum 1 234,50", r"Sum\s*([\d\s,]+)", ValueType.NUMBER, decimal_separator=",")
    assert result.value == "1234,50"


def test_number_placeholder():
    result = extract_number("n/a")
    assert not result.is_valid
    assert result.value == "Number is not identified: n/a"


def test_numeric_date():
    assert extract_date("12.03.2020").value == "03/12/2020"
    assert extract_date("05/11/21").value == "11/05/21"


def test_month_name_dates():
    assert extract_date("15 марта 2021").value == "03/15/2021"
    assert extract_date("5 January 2019").value == "01/05/2019"
    assert extract_date("01 Sep 2020").value == "09/01/2020"
    assert month_number("Декабря") == 12
    assert month_number("Someday") is None


def test_invalid_date_placeholders():
    result = extract_date("45.13.2020")
    assert not result.is_valid
    assert result.value == "Date is identified as 13/45/2020"

    result = extract_date("no date here")
    assert not result.is_valid
    assert result.value == DATE_NOT_IDENTIFIED


def test_date_through_extract_value():
    result = extract_value("Date: 01.02.2020", r"Date:\s*(\S+)", ValueType.DATE)
    assert result.value == "02/01/2020"
