from __future__ import annotations

from sqlalchemy import func, select

from airline_management.dataset import generate_sample_data
from airline_management.models import Customer, Flight, FlightInstance, Pilot, Reservation, ReservationStatus


def test_dataset_generator_creates_records(session_factory):
    summary = generate_sample_data(session_factory, flights=5, days=7, customers=20, reservations=25)
    with session_factory() as session:
        flight_count = session.query(Flight).count()
        customer_count = session.query(Customer).count()
        pilot_ids = sorted(session.scalars(select(Pilot.id)))
        instance_count = session.query(FlightInstance).count()
    assert flight_count == 5
    assert customer_count == 20
    assert pilot_ids == ["P001", "P002", "P003", "P004"]
    assert summary["instances"] == instance_count
    assert summary["reservations"] <= 25


def test_generated_seats_match_reservations(session_factory):
    generate_sample_data(session_factory, flights=3, days=7, customers=10, reservations=60)
    holding = (ReservationStatus.RESERVED.value, ReservationStatus.FLOWN.value)
    with session_factory() as session:
        for instance in session.scalars(select(FlightInstance)):
            assert 0 <= instance.seats_sold <= instance.seats_total
            booked = session.scalar(
                select(func.count(Reservation.id)).where(
                    Reservation.flight_instance_id == instance.id,
                    Reservation.status.in_(holding),
                )
            )
            assert booked == instance.seats_sold


def test_generator_leaves_populated_database_alone(session_factory):
    generate_sample_data(session_factory, flights=2, days=7, customers=5, reservations=5)

    summary = generate_sample_data(session_factory, flights=2, days=7, customers=5, reservations=5)

    assert summary["skipped"] == 1
    with session_factory() as session:
        assert session.query(Customer).count() == 5
        assert session.query(Flight).count() == 2
