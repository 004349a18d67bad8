from __future__ import annotations

import io

import pytest

from airline_management.access import (
    Principal,
    Role,
    authenticate_customer,
    authenticate_manager,
    authenticate_staff,
    login,
)
from airline_management.errors import ValidationExhausted
from airline_management.gateway import Gateway
from airline_management.services import create_customer, create_pilot, create_technician
from airline_management.validation import Prompter


@pytest.fixture
def people(session_factory):
    with session_factory() as session:
        create_customer(session, first_name="Kevin", last_name="Hall")
        create_pilot(session, name="Holly Wood")
        create_technician(session, name="Gina Moore")
        session.commit()
    return session_factory


def test_principal_token_format():
    assert str(Principal(Role.CUSTOMER, 3)) == "Customer:3"
    assert str(Principal(Role.PILOT, "P003")) == "Pilot:P003"
    assert str(Principal(Role.MANAGER)) == "Manager"


def test_direct_authentication(people):
    with people() as session:
        assert authenticate_customer(session, "Kevin", "Hall", 1) == Principal(Role.CUSTOMER, 1)
        assert authenticate_customer(session, "Kevin", "Hall", 2) is None
        assert authenticate_staff(session, Role.PILOT, "Holly Wood") == Principal(Role.PILOT, "P001")
        assert authenticate_staff(session, Role.TECHNICIAN, "Holly Wood") is None
        assert authenticate_staff(session, Role.TECHNICIAN, "Gina Moore") == Principal(Role.TECHNICIAN, "T001")
    assert authenticate_manager("letmein", expected="letmein") == Principal(Role.MANAGER)
    assert authenticate_manager("guess", expected="letmein") is None


def _login(session_factory, script: str, **kwargs):
    out = io.StringIO()
    principal = login(Gateway(session_factory, out=out), Prompter(io.StringIO(script), out), **kwargs)
    return principal, out.getvalue()


def test_interactive_customer_login_normalizes_input(people):
    principal, output = _login(people, "1\nkevin\nHALL\n1\n")
    assert principal == Principal(Role.CUSTOMER, 1)
    assert "Login successful as Customer!" in output


def test_interactive_staff_login(people):
    principal, _ = _login(people, "2\nholly wood\n")
    assert principal == Principal(Role.PILOT, "P001")
    principal, output = _login(people, "3\nNobody Here\n")
    assert principal is None
    assert "Login failed! Technician not found." in output


def test_interactive_manager_login(people):
    principal, _ = _login(people, "4\nopen sesame\n", manager_secret="open sesame")
    assert principal == Principal(Role.MANAGER)
    principal, output = _login(people, "4\nwrong\n", manager_secret="open sesame")
    assert principal is None
    assert "Incorrect password!" in output


def test_unknown_role_selector_is_no_session(people):
    principal, output = _login(people, "7\n")
    assert principal is None
    assert "Unrecognized user type." in output


def test_credentials_retry_budget(people):
    with pytest.raises(ValidationExhausted):
        _login(people, "1\n" + "k\n" * 5)
