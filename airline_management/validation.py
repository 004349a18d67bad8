"""Parsing and bounded-retry prompting for values typed at the console.

Every ``parse_*`` function takes the raw line, returns the normalized value and
raises :class:`ValueError` when the text is not acceptable. :class:`Prompter`
wraps them with the interactive retry loop.
"""
from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from datetime import date
from functools import partial
from typing import Any, Callable, Dict, Literal, Optional, TextIO, Tuple

from . import config
from .errors import ValidationExhausted

FieldKind = Literal[
    "date",
    "birth_date",
    "city",
    "first_name",
    "last_name",
    "full_name",
    "customer_id",
    "pilot_id",
    "technician_id",
    "flight_number",
    "gender",
    "phone",
    "zip",
    "address",
    "plane_id",
    "repair_code",
    "reservation_id",
]

_DATE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)
_CITY = re.compile(r"[A-Za-z ]{2,15}")
_FIRST_NAME = re.compile(r"[A-Za-z]{2,15}")
_LAST_NAME = re.compile(r"[A-Za-z]{2,30}")
_FULL_NAME = re.compile(r"([A-Za-z]{2,30})\s+([A-Za-z]{2,30})", re.ASCII)
_CUSTOMER_ID = re.compile(r"\d{1,3}", re.ASCII)
_PHONE = re.compile(r"\d{3}-\d{3}-\d{4}", re.ASCII)
_ZIP = re.compile(r"\d{5}", re.ASCII)
_ADDRESS = re.compile(r"[A-Za-z0-9.,'\- ]{5,100}")
_PLANE_ID = re.compile(r"PL\d{3}", re.ASCII)
_GENDERS = ("M", "F", "O")


def _capitalize_words(value: str) -> str:
    return " ".join(word.capitalize() for word in value.split())


def _prefixed_number(raw: str, prefix: str, *, digits: int, low: int, high: int) -> str:
    match = re.fullmatch(rf"{prefix}(\d{{1,{digits}}})", raw.strip().upper(), re.ASCII)
    if not match:
        raise ValueError(f"expected {prefix} followed by up to {digits} digits")
    number = int(match.group(1))
    if not low <= number <= high:
        raise ValueError(f"{prefix} number must be between {low} and {high}")
    return f"{prefix}{number:0{digits}d}"


def parse_date(raw: str, *, years: Tuple[int, int] = config.VALID_YEARS) -> date:
    value = raw.strip()
    if not _DATE.fullmatch(value):
        raise ValueError("expected YYYY-MM-DD")
    year, month, day = (int(part) for part in value.split("-"))
    if not years[0] <= year <= years[1]:
        raise ValueError(f"year must be between {years[0]} and {years[1]}")
    # date() knows month lengths and leap years
    return date(year, month, day)


def parse_city(raw: str) -> str:
    value = raw.strip()
    if not _CITY.fullmatch(value):
        raise ValueError("city must be 2-15 letters or spaces")
    return _capitalize_words(value)


def parse_first_name(raw: str) -> str:
    value = raw.strip()
    if not _FIRST_NAME.fullmatch(value):
        raise ValueError("first name must be 2-15 letters")
    return value.capitalize()


def parse_last_name(raw: str) -> str:
    value = raw.strip()
    if not _LAST_NAME.fullmatch(value):
        raise ValueError("last name must be 2-30 letters")
    return value.capitalize()


def parse_full_name(raw: str) -> str:
    match = _FULL_NAME.fullmatch(raw.strip())
    if not match:
        raise ValueError("full name must be two words of 2-30 letters")
    return " ".join(part.capitalize() for part in match.groups())


def parse_customer_id(raw: str) -> int:
    value = raw.strip()
    if not _CUSTOMER_ID.fullmatch(value) or not 1 <= int(value) <= 999:
        raise ValueError("customer id must be between 1 and 999")
    return int(value)


def parse_pilot_id(raw: str) -> str:
    return _prefixed_number(raw, "P", digits=3, low=1, high=999)


def parse_technician_id(raw: str) -> str:
    return _prefixed_number(raw, "T", digits=3, low=1, high=999)


def parse_flight_number(raw: str, *, band: Tuple[int, int] = config.FLIGHT_NUMBERS) -> str:
    return _prefixed_number(raw, "F", digits=3, low=band[0], high=band[1])


def parse_gender(raw: str) -> str:
    value = raw.strip().upper()
    if value not in _GENDERS:
        raise ValueError("gender must be M, F or O")
    return value


def parse_phone(raw: str) -> str:
    value = raw.strip()
    if not _PHONE.fullmatch(value):
        raise ValueError("phone must look like 123-456-7890")
    return value


def parse_zip(raw: str) -> str:
    value = raw.strip()
    if not _ZIP.fullmatch(value):
        raise ValueError("zip must be 5 digits")
    return value


def parse_address(raw: str) -> str:
    value = raw.strip()
    if not _ADDRESS.fullmatch(value):
        raise ValueError("address must be 5-100 letters, digits or . , ' -")
    return value


def parse_plane_id(raw: str) -> str:
    value = raw.strip().upper()
    if not _PLANE_ID.fullmatch(value):
        raise ValueError("plane id must look like PL001")
    return value


def parse_repair_code(raw: str) -> str:
    return _prefixed_number(raw, "RC", digits=3, low=1, high=999)


def parse_reservation_id(raw: str) -> str:
    return _prefixed_number(raw, "R", digits=4, low=1, high=9999)


@dataclass(frozen=True)
class Field:
    """How to ask for one kind of value and what to say when it is wrong."""

    prompt: str
    hint: str
    parse: Callable[[str], Any]


_YEARS_TEXT = f"{config.VALID_YEARS[0]} and {config.VALID_YEARS[1]}"
_FLIGHTS_TEXT = f"F{config.FLIGHT_NUMBERS[0]:03d}-F{config.FLIGHT_NUMBERS[1]:03d}"

FIELDS: Dict[str, Field] = {
    "date": Field(
        "Enter Date (yyyy-mm-dd) [example: 2025-05-05]: ",
        f"Invalid date! Please use yyyy-mm-dd and a year between {_YEARS_TEXT}. Example: 2025-05-05",
        parse_date,
    ),
    "birth_date": Field(
        "Date of Birth (yyyy-mm-dd) [example: 1990-07-14]: ",
        f"Invalid date of birth! Please use yyyy-mm-dd with a year between 1900 and {date.today().year}.",
        partial(parse_date, years=(1900, date.today().year)),
    ),
    "city": Field(
        "City (letters and spaces only, e.g. 'New York'): ",
        "Invalid city! Example: 'New York'. Use only letters and spaces (2-15 chars).",
        parse_city,
    ),
    "first_name": Field(
        "First Name: ",
        "Invalid first name! Example: 'Kevin'. Use only letters (2-15 characters).",
        parse_first_name,
    ),
    "last_name": Field(
        "Last Name: ",
        "Invalid last name! Example: 'Hall'. Use only letters (2-30 characters).",
        parse_last_name,
    ),
    "full_name": Field(
        "Full Name (e.g. 'Jessica Wang'): ",
        "Invalid name! Enter a first and last name, each 2-30 letters. Example: 'Gina Moore'",
        parse_full_name,
    ),
    "customer_id": Field(
        "Customer ID (1-999): ",
        "Invalid Customer ID! Enter a whole number between 1 and 999 (e.g., 4).",
        parse_customer_id,
    ),
    "pilot_id": Field(
        "Pilot ID (P001-P999): ",
        "Invalid Pilot ID! Use format P001-P999, e.g., P010.",
        parse_pilot_id,
    ),
    "technician_id": Field(
        "Technician ID (T001-T999): ",
        "Invalid Technician ID! Use format T001-T999, e.g., T101.",
        parse_technician_id,
    ),
    "flight_number": Field(
        f"Flight Number ({_FLIGHTS_TEXT}): ",
        f"Invalid Flight Number! Use format {_FLIGHTS_TEXT}, e.g., F105.",
        parse_flight_number,
    ),
    "gender": Field("Gender (M/F/O): ", "Invalid gender! Enter M, F, or O only.", parse_gender),
    "phone": Field(
        "Phone # (format: 123-456-7890): ",
        "Invalid phone number! Use format: 123-456-7890.",
        parse_phone,
    ),
    "zip": Field("Zip Code (5 digits): ", "Invalid zip code! Use exactly 5 digits, e.g., 92507.", parse_zip),
    "address": Field(
        "Address: ",
        "Invalid address! Use letters, numbers, comma, dot, dash, apostrophe and spaces. 5-100 chars.",
        parse_address,
    ),
    "plane_id": Field("Plane ID (e.g., PL001): ", "Invalid Plane ID! Use format PLXXX, e.g., PL001.", parse_plane_id),
    "repair_code": Field(
        "Repair Code (RC001-RC999): ",
        "Invalid Repair Code! Use format RCXXX, e.g., RC004.",
        parse_repair_code,
    ),
    "reservation_id": Field(
        "Reservation ID (R0001-R9999): ",
        "Invalid Reservation ID! Use format RXXXX, e.g., R0042.",
        parse_reservation_id,
    ),
}


class Prompter:
    """Reads answers from an injected input stream with a fixed retry budget."""

    def __init__(
        self,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
        *,
        max_attempts: int = config.MAX_ATTEMPTS,
        fields: Optional[Dict[str, Field]] = None,
    ) -> None:
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.max_attempts = max_attempts
        self.fields = fields if fields is not None else FIELDS

    def say(self, message: str = "") -> None:
        print(message, file=self.stdout)

    def read_line(self, prompt: str) -> Optional[str]:
        """Return the next stripped line, or ``None`` at end of input."""

        print(prompt, end="", file=self.stdout, flush=True)
        line = self.stdin.readline()
        if line == "":
            return None
        return line.strip()

    def ask(self, kind: FieldKind, *, prompt: Optional[str] = None) -> Any:
        field = self.fields[kind]
        for _ in range(self.max_attempts):
            raw = self.read_line(prompt or field.prompt)
            if raw is not None:
                try:
                    return field.parse(raw)
                except ValueError:
                    pass
            self.say(field.hint)
        raise ValidationExhausted(
            f"Too many invalid attempts ({self.max_attempts}) for {kind.replace('_', ' ')}. "
            "Returning to the previous menu."
        )

    def read_choice(self, prompt: str = "Please make your choice: ") -> Optional[int]:
        """Return the integer typed, ``None`` when it is not a number.

        Raises :class:`EOFError` once the input stream is exhausted.
        """

        raw = self.read_line(prompt)
        if raw is None:
            raise EOFError("input closed")
        try:
            return int(raw)
        except ValueError:
            self.say("Your input is invalid!")
            return None
