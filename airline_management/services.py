"""Business logic for the airline management console."""
from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from .errors import InstanceClosed, InvalidTransition, NotFound
from .identifiers import CUSTOMER, MAINTENANCE_REQUEST, PILOT, RESERVATION, TECHNICIAN, allocate
from .models import (
    Customer,
    FlightInstance,
    MaintenanceRequest,
    Pilot,
    Plane,
    Repair,
    Reservation,
    ReservationStatus,
    Technician,
)

logger = logging.getLogger(__name__)


def create_customer(
    session: Session,
    *,
    first_name: str,
    last_name: str,
    gender: Optional[str] = None,
    dob: Optional[date] = None,
    address: Optional[str] = None,
    phone: Optional[str] = None,
    zip_code: Optional[str] = None,
) -> Customer:
    """Register a customer under the next free customer number."""

    with session.begin_nested():
        customer = Customer(
            id=allocate(session, CUSTOMER),
            first_name=first_name,
            last_name=last_name,
            gender=gender,
            dob=dob,
            address=address,
            phone=phone,
            zip=zip_code,
        )
        session.add(customer)
    return customer


def create_pilot(session: Session, *, name: str) -> Pilot:
    with session.begin_nested():
        pilot = Pilot(id=allocate(session, PILOT), name=name)
        session.add(pilot)
    return pilot


def create_technician(session: Session, *, name: str) -> Technician:
    with session.begin_nested():
        technician = Technician(id=allocate(session, TECHNICIAN), name=name)
        session.add(technician)
    return technician


def find_flight_instance(
    session: Session, flight_number: str, flight_date: date, *, for_update: bool = False
) -> FlightInstance:
    stmt = select(FlightInstance).where(
        FlightInstance.flight_number == flight_number,
        FlightInstance.flight_date == flight_date,
    )
    if for_update:
        stmt = stmt.with_for_update()
    instance = session.scalars(stmt).one_or_none()
    if instance is None:
        raise NotFound(f"No flight instance found for {flight_number} on {flight_date.isoformat()}.")
    return instance


def is_closed(session: Session, instance_id: int) -> bool:
    """An instance is closed once any of its reservations has been flown."""

    flown = session.scalar(
        select(Reservation.id)
        .where(
            Reservation.flight_instance_id == instance_id,
            Reservation.status == ReservationStatus.FLOWN.value,
        )
        .limit(1)
    )
    return flown is not None


def reserve(
    session: Session,
    *,
    customer_id: int,
    flight_number: str,
    flight_date: date,
) -> Reservation:
    """Book ``customer_id`` on a dated flight, confirming a seat or waitlisting.

    The instance row is locked for the rest of the transaction and the seat is
    claimed with a conditional increment, so the sold counter never passes the
    total even when several consoles book the last seat at once. Calling this
    twice books twice.
    """

    with session.begin_nested():
        if session.get(Customer, customer_id) is None:
            raise NotFound(f"No customer with ID {customer_id}.")
        instance = find_flight_instance(session, flight_number, flight_date, for_update=True)
        if is_closed(session, instance.id):
            raise InstanceClosed(
                f"Flight {flight_number} on {flight_date.isoformat()} has already flown. "
                "No further reservations or waitlist entries are allowed."
            )
        claimed = session.execute(
            update(FlightInstance)
            .where(
                FlightInstance.id == instance.id,
                FlightInstance.seats_sold < FlightInstance.seats_total,
            )
            .values(seats_sold=FlightInstance.seats_sold + 1)
            .execution_options(synchronize_session=False)
        ).rowcount
        status = ReservationStatus.RESERVED if claimed else ReservationStatus.WAITLIST
        reservation = Reservation(
            id=allocate(session, RESERVATION),
            customer_id=customer_id,
            flight_instance_id=instance.id,
            status=status.value,
        )
        session.add(reservation)
    session.expire(instance, ["seats_sold"])
    logger.info(
        "Reservation %s for customer %s on %s %s: %s",
        reservation.id,
        customer_id,
        flight_number,
        flight_date.isoformat(),
        status.value,
    )
    return reservation


def mark_flown(session: Session, *, reservation_id: str) -> Reservation:
    """Record that a confirmed passenger travelled, closing the instance."""

    with session.begin_nested():
        reservation = session.get(Reservation, reservation_id, with_for_update=True)
        if not reservation:
            raise NotFound(f"No reservation with ID {reservation_id}.")
        if reservation.status == ReservationStatus.FLOWN.value:
            return reservation
        if reservation.status != ReservationStatus.RESERVED.value:
            raise InvalidTransition(f"Reservation {reservation_id} is on the waitlist and cannot be marked as flown.")
        # Serialize with reserve(), which checks closure under the same lock.
        session.scalars(
            select(FlightInstance).where(FlightInstance.id == reservation.flight_instance_id).with_for_update()
        ).one()
        reservation.status = ReservationStatus.FLOWN.value
    logger.info("Reservation %s marked as flown", reservation_id)
    return reservation


def _require_plane(session: Session, plane_id: str) -> Plane:
    plane = session.get(Plane, plane_id)
    if not plane:
        raise NotFound(f"No plane with ID {plane_id}.")
    return plane


def submit_maintenance_request(
    session: Session,
    *,
    pilot_id: str,
    plane_id: str,
    repair_code: str,
    request_date: date,
) -> MaintenanceRequest:
    with session.begin_nested():
        _require_plane(session, plane_id)
        request = MaintenanceRequest(
            id=allocate(session, MAINTENANCE_REQUEST),
            plane_id=plane_id,
            repair_code=repair_code,
            request_date=request_date,
            pilot_id=pilot_id,
        )
        session.add(request)
    logger.info("Maintenance request %s filed by %s for %s", request.id, pilot_id, plane_id)
    return request


def add_repair_record(
    session: Session,
    *,
    technician_id: str,
    plane_id: str,
    repair_code: str,
    repair_date: date,
) -> Repair:
    """Append a repair and move the plane's last repair date forward."""

    with session.begin_nested():
        plane = _require_plane(session, plane_id)
        repair = Repair(
            plane_id=plane_id,
            repair_code=repair_code,
            repair_date=repair_date,
            technician_id=technician_id,
        )
        session.add(repair)
        if plane.last_repair_date is None or plane.last_repair_date < repair_date:
            plane.last_repair_date = repair_date
    logger.info("Repair %s recorded by %s for %s", repair_code, technician_id, plane_id)
    return repair
