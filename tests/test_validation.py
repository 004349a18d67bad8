from __future__ import annotations

import io
from datetime import date

import pytest

from airline_management.errors import ValidationExhausted
from airline_management.validation import (
    Prompter,
    parse_address,
    parse_city,
    parse_customer_id,
    parse_date,
    parse_flight_number,
    parse_full_name,
    parse_gender,
    parse_phone,
    parse_pilot_id,
    parse_plane_id,
    parse_repair_code,
    parse_reservation_id,
    parse_technician_id,
    parse_zip,
)

BAND = (2025, 2026)


def test_date_is_calendar_aware():
    assert parse_date("2025-05-05", years=BAND) == date(2025, 5, 5)
    with pytest.raises(ValueError):
        parse_date("2025-02-29", years=BAND)
    with pytest.raises(ValueError):
        parse_date("2025-13-01", years=BAND)
    with pytest.raises(ValueError):
        parse_date("2025-5-5", years=BAND)


def test_leap_day_depends_on_year_band():
    with pytest.raises(ValueError):
        parse_date("2024-02-29", years=BAND)
    assert parse_date("2024-02-29", years=(2024, 2026)) == date(2024, 2, 29)


def test_staff_ids_are_padded_and_bounded():
    assert parse_pilot_id("p7") == "P007"
    assert parse_pilot_id(" P010 ") == "P010"
    assert parse_technician_id("t101") == "T101"
    for bad in ("P1000", "P000", "T7", "PL001", ""):
        with pytest.raises(ValueError):
            parse_pilot_id(bad)


def test_codes_are_normalized():
    assert parse_flight_number("f105", band=(100, 120)) == "F105"
    with pytest.raises(ValueError):
        parse_flight_number("F121", band=(100, 120))
    assert parse_reservation_id("r42") == "R0042"
    with pytest.raises(ValueError):
        parse_reservation_id("R10000")
    assert parse_repair_code("rc4") == "RC004"
    with pytest.raises(ValueError):
        parse_repair_code("RC000")
    assert parse_plane_id("pl001") == "PL001"
    with pytest.raises(ValueError):
        parse_plane_id("PL01")


def test_names_and_places_are_capitalized():
    assert parse_city("new  york") == "New York"
    assert parse_full_name("jessica   WANG") == "Jessica Wang"
    with pytest.raises(ValueError):
        parse_full_name("Cher")
    with pytest.raises(ValueError):
        parse_city("Llanfairpwllgwyngyll")


def test_customer_contact_fields():
    assert parse_customer_id("004") == 4
    for bad in ("0", "1000", "-1", "four"):
        with pytest.raises(ValueError):
            parse_customer_id(bad)
    assert parse_gender("o") == "O"
    assert parse_phone("951-555-0100") == "951-555-0100"
    assert parse_zip("92507") == "92507"
    assert parse_address("900 University Ave.") == "900 University Ave."
    for parser, bad in ((parse_gender, "X"), (parse_phone, "9515550100"), (parse_zip, "9250"), (parse_address, "1 A#")):
        with pytest.raises(ValueError):
            parser(bad)


def test_only_ascii_digits_are_accepted():
    arabic = str.maketrans("0123456789", "٠١٢٣٤٥٦٧٨٩")
    cases = (
        (parse_zip, "92507"),
        (parse_phone, "951-555-0100"),
        (parse_customer_id, "4"),
        (parse_pilot_id, "P007"),
        (parse_plane_id, "PL001"),
        (parse_repair_code, "RC004"),
        (parse_reservation_id, "R0042"),
        (lambda raw: parse_date(raw, years=BAND), "2025-05-05"),
    )
    for parser, good in cases:
        parser(good)
        with pytest.raises(ValueError):
            parser(good.translate(arabic))


def test_prompter_retries_until_valid():
    out = io.StringIO()
    prompter = Prompter(io.StringIO("tomorrow\n2025-02-30\n2025-06-01\n"), out)

    assert prompter.ask("date") == date(2025, 6, 1)
    assert out.getvalue().count("Invalid date!") == 2


def test_prompter_gives_up_after_five_attempts():
    out = io.StringIO()
    stdin = io.StringIO("\n".join(["2025-02-29", "2025-13-01", "x", "20250601", "2025/06/01", "2025-06-01"]) + "\n")
    prompter = Prompter(stdin, out)

    with pytest.raises(ValidationExhausted):
        prompter.ask("date")
    assert out.getvalue().count("Invalid date!") == 5
    assert stdin.readline() == "2025-06-01\n"


def test_prompter_treats_end_of_input_as_failed_attempts():
    prompter = Prompter(io.StringIO(""), io.StringIO(), max_attempts=3)
    with pytest.raises(ValidationExhausted):
        prompter.ask("pilot_id")


def test_read_choice():
    out = io.StringIO()
    prompter = Prompter(io.StringIO("abc\n 11 \n"), out)
    assert prompter.read_choice() is None
    assert "Your input is invalid!" in out.getvalue()
    assert prompter.read_choice() == 11
    with pytest.raises(EOFError):
        prompter.read_choice()
