from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import date

import pytest
from sqlalchemy import func, select

from airline_management.errors import CapacityExhausted, InstanceClosed, InvalidTransition, NotFound
from airline_management.models import FlightInstance, IdentifierCounter, Reservation
from airline_management.services import mark_flown, reserve


def _seats_sold(session_factory, instance_id: int) -> int:
    with session_factory() as session:
        return session.get(FlightInstance, instance_id).seats_sold


def test_full_instance_puts_customer_on_waitlist(session_factory, add_flight, add_customers):
    instance_id = add_flight(seats_total=100, seats_sold=100)
    customer_id = add_customers(4)[-1]
    assert customer_id == 4

    with session_factory() as session:
        reservation = reserve(session, customer_id=4, flight_number="F105", flight_date=date(2025, 6, 1))
        session.commit()

    assert reservation.status == "waitlist"
    assert reservation.id == "R0001"
    assert _seats_sold(session_factory, instance_id) == 100


def test_last_seat_is_confirmed_and_counted(session_factory, add_flight, add_customers, flight_date):
    instance_id = add_flight(seats_total=100, seats_sold=99)
    add_customers(4)

    with session_factory() as session:
        reservation = reserve(session, customer_id=4, flight_number="F105", flight_date=flight_date)
        session.commit()

    assert reservation.status == "reserved"
    assert _seats_sold(session_factory, instance_id) == 100


def test_flown_instance_is_closed_to_new_bookings(session_factory, add_flight, add_customers, flight_date):
    instance_id = add_flight(seats_total=10)
    add_customers(2)
    with session_factory() as session:
        first = reserve(session, customer_id=1, flight_number="F105", flight_date=flight_date)
        mark_flown(session, reservation_id=first.id)
        session.commit()

    with session_factory() as session:
        with pytest.raises(InstanceClosed):
            reserve(session, customer_id=2, flight_number="F105", flight_date=flight_date)
        session.commit()

    with session_factory() as session:
        count = session.scalar(select(func.count(Reservation.id)))
    assert count == 1
    assert _seats_sold(session_factory, instance_id) == 1


def test_missing_instance_and_customer_are_not_found(session_factory, add_flight, add_customers, flight_date):
    add_flight()
    add_customers(1)
    with session_factory() as session:
        with pytest.raises(NotFound):
            reserve(session, customer_id=1, flight_number="F105", flight_date=date(2025, 6, 2))
        with pytest.raises(NotFound):
            reserve(session, customer_id=77, flight_number="F105", flight_date=flight_date)


def test_repeated_reserve_creates_independent_reservations(session_factory, add_flight, add_customers, flight_date):
    instance_id = add_flight(seats_total=3)
    add_customers(1)
    with session_factory() as session:
        first = reserve(session, customer_id=1, flight_number="F105", flight_date=flight_date)
        second = reserve(session, customer_id=1, flight_number="F105", flight_date=flight_date)
        session.commit()

    assert (first.id, second.id) == ("R0001", "R0002")
    assert _seats_sold(session_factory, instance_id) == 2


def test_exhausted_reservation_ids_leave_seats_untouched(session_factory, add_flight, add_customers, flight_date):
    instance_id = add_flight(seats_total=100, seats_sold=99)
    add_customers(1)
    with session_factory() as session:
        session.add(IdentifierCounter(space="reservation", last_value=9999))
        session.commit()

    with session_factory() as session:
        with pytest.raises(CapacityExhausted):
            reserve(session, customer_id=1, flight_number="F105", flight_date=flight_date)
        session.commit()

    assert _seats_sold(session_factory, instance_id) == 99


def test_reservation_ids_continue_after_existing_rows(session_factory, add_flight, add_customers, flight_date):
    instance_id = add_flight()
    add_customers(1)
    with session_factory() as session:
        session.add(Reservation(id="R0041", customer_id=1, flight_instance_id=instance_id, status="waitlist"))
        session.commit()

    with session_factory() as session:
        reservation = reserve(session, customer_id=1, flight_number="F105", flight_date=flight_date)
        session.commit()

    assert reservation.id == "R0042"


def test_mark_flown_transitions(session_factory, add_flight, add_customers, flight_date):
    add_flight(seats_total=1)
    add_customers(2)
    with session_factory() as session:
        confirmed = reserve(session, customer_id=1, flight_number="F105", flight_date=flight_date)
        waitlisted = reserve(session, customer_id=2, flight_number="F105", flight_date=flight_date)
        session.commit()
    assert waitlisted.status == "waitlist"

    with session_factory() as session:
        with pytest.raises(InvalidTransition):
            mark_flown(session, reservation_id=waitlisted.id)
        with pytest.raises(NotFound):
            mark_flown(session, reservation_id="R0999")
        assert mark_flown(session, reservation_id=confirmed.id).status == "flown"
        assert mark_flown(session, reservation_id=confirmed.id).status == "flown"
        session.commit()


def test_concurrent_bookings_for_last_seat_confirm_exactly_one(session_factory, add_flight, add_customers, flight_date):
    instance_id = add_flight(seats_total=5, seats_sold=4)
    customer_ids = add_customers(8)

    def attempt(customer_id: int):
        with session_factory() as session:
            reservation = reserve(
                session,
                customer_id=customer_id,
                flight_number="F105",
                flight_date=flight_date,
            )
            session.commit()
            return reservation.id, reservation.status

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(attempt, customer_ids))

    statuses = [status for _, status in results]
    assert statuses.count("reserved") == 1
    assert statuses.count("waitlist") == 7
    assert len({reservation_id for reservation_id, _ in results}) == 8
    assert _seats_sold(session_factory, instance_id) == 5


def test_concurrent_bookings_never_oversell(session_factory, add_flight, add_customers, flight_date):
    instance_id = add_flight(seats_total=3)
    customer_ids = add_customers(10)

    def attempt(customer_id: int) -> str:
        with session_factory() as session:
            reservation = reserve(
                session,
                customer_id=customer_id,
                flight_number="F105",
                flight_date=flight_date,
            )
            session.commit()
            return reservation.status

    with ThreadPoolExecutor(max_workers=5) as pool:
        statuses = list(pool.map(attempt, customer_ids))

    assert statuses.count("reserved") == 3
    with session_factory() as session:
        instance = session.get(FlightInstance, instance_id)
        reserved_rows = session.scalar(
            select(func.count(Reservation.id)).where(
                Reservation.flight_instance_id == instance_id,
                Reservation.status == "reserved",
            )
        )
    assert 0 <= instance.seats_sold <= instance.seats_total
    assert instance.seats_sold == reserved_rows == 3
