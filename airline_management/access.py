"""Authentication of console users into role tokens."""
from __future__ import annotations

import enum
import hmac
import logging
from dataclasses import dataclass
from typing import Optional, Union

from sqlalchemy import select
from sqlalchemy.orm import Session

from . import config
from .gateway import Gateway
from .models import Customer, Pilot, Technician
from .validation import Prompter

logger = logging.getLogger(__name__)


class Role(str, enum.Enum):
    CUSTOMER = "Customer"
    PILOT = "Pilot"
    TECHNICIAN = "Technician"
    MANAGER = "Manager"


@dataclass(frozen=True)
class Principal:
    """Who is logged in; the role is the only authorization input."""

    role: Role
    principal_id: Optional[Union[int, str]] = None

    def __str__(self) -> str:
        if self.principal_id is None:
            return self.role.value
        return f"{self.role.value}:{self.principal_id}"


_STAFF_TABLES = {Role.PILOT: Pilot, Role.TECHNICIAN: Technician}

ROLE_SELECTORS = {
    "1": Role.CUSTOMER,
    "2": Role.PILOT,
    "3": Role.TECHNICIAN,
    "4": Role.MANAGER,
}


def authenticate_customer(session: Session, first_name: str, last_name: str, customer_id: int) -> Optional[Principal]:
    match = session.scalar(
        select(Customer.id).where(
            Customer.id == customer_id,
            Customer.first_name == first_name,
            Customer.last_name == last_name,
        )
    )
    if match is None:
        return None
    return Principal(Role.CUSTOMER, match)


def authenticate_staff(session: Session, role: Role, full_name: str) -> Optional[Principal]:
    table = _STAFF_TABLES[role]
    match = session.scalar(select(table.id).where(table.name == full_name).order_by(table.id).limit(1))
    if match is None:
        return None
    return Principal(role, match)


def authenticate_manager(secret: str, *, expected: str = config.MANAGER_SECRET) -> Optional[Principal]:
    if hmac.compare_digest(secret.encode("utf-8"), expected.encode("utf-8")):
        return Principal(Role.MANAGER)
    return None


def login(gateway: Gateway, prompter: Prompter, *, manager_secret: str = config.MANAGER_SECRET) -> Optional[Principal]:
    """Run the interactive login and return a principal, or ``None`` on failure.

    Raises :class:`~airline_management.errors.ValidationExhausted` when the
    credentials could not be typed within the retry budget.
    """

    choice = prompter.read_line("Login as: 1. Customer 2. Pilot 3. Technician 4. Manager\n")
    role = ROLE_SELECTORS.get(choice or "")
    if role is None:
        prompter.say("Unrecognized user type.")
        return None

    if role is Role.MANAGER:
        secret = prompter.read_line("Enter manager password: ")
        principal = authenticate_manager(secret or "", expected=manager_secret)
        if principal is None:
            logger.info("Manager login rejected")
            prompter.say("Incorrect password!")
            return None
        prompter.say("Manager login successful!")
        return principal

    if role is Role.CUSTOMER:
        first_name = prompter.ask("first_name", prompt="Customer First Name: ")
        last_name = prompter.ask("last_name", prompt="Customer Last Name: ")
        customer_id = prompter.ask("customer_id")
        with gateway.transaction() as session:
            principal = authenticate_customer(session, first_name, last_name, customer_id)
    else:
        full_name = prompter.ask("full_name", prompt=f"{role.value} Full Name (e.g. 'Jessica Wang'): ")
        with gateway.transaction() as session:
            principal = authenticate_staff(session, role, full_name)

    if principal is None:
        logger.info("%s login rejected", role.value)
        prompter.say(f"Login failed! {role.value} not found.")
        return None
    prompter.say(f"Login successful as {role.value}!")
    return principal
