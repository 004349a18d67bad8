"""Role-gated menu loop for the airline management console.

The session is either logged out, logged in as a :class:`Principal`, or
terminated. While logged in, a numeric choice is looked up in :data:`ACTIONS`
and only runs when the action's role is the principal's role.
"""
from __future__ import annotations

import enum
import logging
import sys
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, TextIO

from . import reports
from .access import Principal, Role, login
from .errors import AirlineError, StorageFailure
from .gateway import Gateway
from .services import (
    add_repair_record,
    create_customer,
    create_pilot,
    create_technician,
    mark_flown,
    reserve,
    submit_maintenance_request,
)
from .validation import Prompter

logger = logging.getLogger(__name__)

NOT_AUTHORIZED = "You are not authorized to use this function."
LOGOUT = 20


class State(enum.Enum):
    LOGGED_OUT = "logged out"
    LOGGED_IN = "logged in"
    TERMINATED = "terminated"


@dataclass
class Console:
    """Collaborators every menu handler works through."""

    gateway: Gateway
    prompter: Prompter


Handler = Callable[[Console, Principal], Any]


@dataclass(frozen=True)
class Action:
    code: int
    label: str
    role: Role
    handler: Handler


def _flight_and_date(console: Console):
    return console.prompter.ask("flight_number"), console.prompter.ask("date")


def _view_flights(console: Console, principal: Principal) -> None:
    reports.weekly_schedule(console.gateway, console.prompter.ask("flight_number"))


def _view_flight_seats(console: Console, principal: Principal) -> None:
    reports.seat_summary(console.gateway, *_flight_and_date(console))


def _view_flight_status(console: Console, principal: Principal) -> None:
    reports.flight_status(console.gateway, *_flight_and_date(console))


def _view_flights_of_the_day(console: Console, principal: Principal) -> None:
    reports.flights_of_the_day(console.gateway, console.prompter.ask("date"))


def _view_order_history(console: Console, principal: Principal) -> None:
    reports.order_history(console.gateway, *_flight_and_date(console))


def _mark_reservation_flown(console: Console, principal: Principal) -> None:
    reservation_id = console.prompter.ask("reservation_id")
    with console.gateway.transaction() as session:
        mark_flown(session, reservation_id=reservation_id)
    console.prompter.say(f"Reservation {reservation_id} marked as flown.")


def _view_pilot_requests(console: Console, principal: Principal) -> None:
    reports.pilot_maintenance_requests(console.gateway, console.prompter.ask("pilot_id"))


def _view_technician_repairs(console: Console, principal: Principal) -> None:
    reports.technician_repairs(console.gateway, console.prompter.ask("technician_id"))


def _search_flights(console: Console, principal: Principal) -> None:
    prompter = console.prompter
    departure = prompter.ask("city", prompt="Enter Departure City (letters and spaces only, e.g. 'New York'): ")
    arrival = prompter.ask("city", prompt="Enter Arrival City (letters and spaces only, e.g. 'New York'): ")
    reports.search_flights(console.gateway, departure, arrival, prompter.ask("date"))


def _make_reservation(console: Console, principal: Principal) -> None:
    flight_number, flight_date = _flight_and_date(console)
    with console.gateway.transaction() as session:
        reservation = reserve(
            session,
            customer_id=principal.principal_id,
            flight_number=flight_number,
            flight_date=flight_date,
        )
    outcome = " - Confirmed!" if reservation.status == "reserved" else " - Added to waitlist!"
    console.prompter.say(f"Reservation ID: {reservation.id}{outcome}")


def _ticket_cost(console: Console, principal: Principal) -> None:
    reports.ticket_cost(console.gateway, *_flight_and_date(console))


def _plane_type(console: Console, principal: Principal) -> None:
    reports.plane_type(console.gateway, console.prompter.ask("flight_number"))


def _my_reservations(console: Console, principal: Principal) -> None:
    reports.customer_reservations(console.gateway, principal.principal_id)


def _maintenance_request(console: Console, principal: Principal) -> None:
    prompter = console.prompter
    plane_id = prompter.ask("plane_id")
    repair_code = prompter.ask("repair_code")
    request_date = prompter.ask("date")
    with console.gateway.transaction() as session:
        request = submit_maintenance_request(
            session,
            pilot_id=principal.principal_id,
            plane_id=plane_id,
            repair_code=repair_code,
            request_date=request_date,
        )
    prompter.say(f"Maintenance request submitted! Request ID: {request.id}")


def _view_plane_repairs(console: Console, principal: Principal) -> None:
    prompter = console.prompter
    plane_id = prompter.ask("plane_id")
    prompter.say("Enter start date of range:")
    start = prompter.ask("date")
    prompter.say("Enter end date of range:")
    end = prompter.ask("date")
    reports.plane_repairs(console.gateway, plane_id, start, end)


def _add_repair_record(console: Console, principal: Principal) -> None:
    prompter = console.prompter
    plane_id = prompter.ask("plane_id")
    repair_code = prompter.ask("repair_code")
    repair_date = prompter.ask("date")
    with console.gateway.transaction() as session:
        add_repair_record(
            session,
            technician_id=principal.principal_id,
            plane_id=plane_id,
            repair_code=repair_code,
            repair_date=repair_date,
        )
    prompter.say("Repair record added!")


def _view_plane_requests(console: Console, principal: Principal) -> None:
    reports.plane_maintenance_requests(console.gateway, console.prompter.ask("plane_id"))


ACTIONS: Dict[int, Action] = {
    action.code: action
    for action in (
        Action(1, "View Flights", Role.MANAGER, _view_flights),
        Action(2, "View Flight Seats", Role.MANAGER, _view_flight_seats),
        Action(3, "View Flight Status", Role.MANAGER, _view_flight_status),
        Action(4, "View Flights of the day", Role.MANAGER, _view_flights_of_the_day),
        Action(5, "View Full Order ID History", Role.MANAGER, _view_order_history),
        Action(6, "Mark Reservation as Flown", Role.MANAGER, _mark_reservation_flown),
        Action(7, "View Maintenance Requests by Pilot", Role.MANAGER, _view_pilot_requests),
        Action(8, "View Repairs by Technician", Role.MANAGER, _view_technician_repairs),
        Action(10, "Search Flights", Role.CUSTOMER, _search_flights),
        Action(11, "Make Reservation", Role.CUSTOMER, _make_reservation),
        Action(12, "Ticket Cost", Role.CUSTOMER, _ticket_cost),
        Action(13, "Plane Type", Role.CUSTOMER, _plane_type),
        Action(14, "My Reservations", Role.CUSTOMER, _my_reservations),
        Action(15, "Maintenance Request", Role.PILOT, _maintenance_request),
        Action(16, "View Repairs", Role.TECHNICIAN, _view_plane_repairs),
        Action(17, "Add Repair Record", Role.TECHNICIAN, _add_repair_record),
        Action(18, "View Maintenance Requests", Role.TECHNICIAN, _view_plane_requests),
    )
}


def create_user(console: Console) -> None:
    prompter = console.prompter
    choice = prompter.read_line("Select user type:\n1. Customer\n2. Pilot\n3. Technician\nEnter choice: ")
    if choice == "1":
        first_name = prompter.ask("first_name")
        last_name = prompter.ask("last_name")
        gender = prompter.ask("gender")
        dob = prompter.ask("birth_date")
        address = prompter.ask("address")
        phone = prompter.ask("phone")
        zip_code = prompter.ask("zip")
        with console.gateway.transaction() as session:
            customer = create_customer(
                session,
                first_name=first_name,
                last_name=last_name,
                gender=gender,
                dob=dob,
                address=address,
                phone=phone,
                zip_code=zip_code,
            )
        prompter.say(f"Customer created with ID: {customer.id}")
    elif choice in ("2", "3"):
        role = Role.PILOT if choice == "2" else Role.TECHNICIAN
        name = prompter.ask("full_name", prompt=f"{role.value} Full Name (e.g. 'Jessica Wang'): ")
        with console.gateway.transaction() as session:
            if role is Role.PILOT:
                staff = create_pilot(session, name=name)
            else:
                staff = create_technician(session, name=name)
        prompter.say(f"{role.value} created with ID: {staff.id}")
    else:
        prompter.say("Invalid choice. Returning to main menu.")


class Dispatcher:
    """Drives the console session from logged out through to terminated."""

    def __init__(self, gateway: Gateway, prompter: Prompter, *, err: Optional[TextIO] = None) -> None:
        self.console = Console(gateway=gateway, prompter=prompter)
        self.err = err if err is not None else sys.stderr
        self.principal: Optional[Principal] = None
        self.state = State.LOGGED_OUT

    @property
    def prompter(self) -> Prompter:
        return self.console.prompter

    def _guarded(self, func: Callable[..., Any], *args: Any) -> Any:
        try:
            return func(*args)
        except StorageFailure as exc:
            print(f"Error: {exc}", file=self.err)
        except AirlineError as exc:
            self.prompter.say(str(exc))
        return None

    def dispatch(self, code: int) -> bool:
        """Run the action behind ``code`` for the current principal.

        Returns whether a handler was invoked.
        """

        if self.principal is None:
            raise RuntimeError("dispatch requires a logged in principal")
        action = ACTIONS.get(code)
        if action is None:
            self.prompter.say("Unrecognized choice!")
            return False
        if action.role is not self.principal.role:
            logger.warning("%s attempted %s action %d", self.principal, action.role.value, code)
            self.prompter.say(NOT_AUTHORIZED)
            return False
        self._guarded(action.handler, self.console, self.principal)
        return True

    def login(self, principal: Principal) -> None:
        self.principal = principal
        self.state = State.LOGGED_IN
        logger.info("Session opened for %s", principal)

    def logout(self) -> None:
        logger.info("Session closed for %s", self.principal)
        self.principal = None
        self.state = State.LOGGED_OUT

    def _logged_out_step(self) -> None:
        say = self.prompter.say
        say("MAIN MENU")
        say("---------")
        say("1. Create user")
        say("2. Log in")
        say("9. < EXIT")
        choice = self.prompter.read_choice()
        if choice is None:
            return
        if choice == 1:
            self._guarded(create_user, self.console)
        elif choice == 2:
            principal = self._guarded(login, self.console.gateway, self.prompter)
            if principal is not None:
                self.login(principal)
        elif choice == 9:
            self.state = State.TERMINATED
        else:
            say("Unrecognized choice!")

    def _logged_in_step(self) -> None:
        say = self.prompter.say
        role = self.principal.role
        say()
        say(f"MAIN MENU ({role.value})")
        say("----------------------")
        for code, action in sorted(ACTIONS.items()):
            if action.role is role:
                say(f"{code}. {action.label}")
        say(f"{LOGOUT}. Log out")
        choice = self.prompter.read_choice()
        if choice is None:
            return
        if choice == LOGOUT:
            self.logout()
        else:
            self.dispatch(choice)

    def run(self) -> None:
        while self.state is not State.TERMINATED:
            try:
                if self.state is State.LOGGED_OUT:
                    self._logged_out_step()
                else:
                    self._logged_in_step()
            except EOFError:
                logger.info("Input closed, ending session")
                self.state = State.TERMINATED
