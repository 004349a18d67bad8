"""Utilities to populate the database with sample data for tests and demos."""
from __future__ import annotations

import logging
import random
from datetime import date, time, timedelta
from decimal import Decimal
from typing import Dict, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from .errors import AirlineError
from .models import Flight, FlightInstance, Plane, Schedule
from .services import (
    add_repair_record,
    create_customer,
    create_pilot,
    create_technician,
    reserve,
    submit_maintenance_request,
)

logger = logging.getLogger(__name__)

CITIES: Sequence[str] = (
    "Los Angeles",
    "New York",
    "Chicago",
    "Houston",
    "Phoenix",
    "Seattle",
    "Denver",
    "Boston",
)
PLANES = (("Boeing", "737"), ("Airbus", "A320"), ("Boeing", "787"), ("Embraer", "E175"))
WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
FIRST_NAMES = ("Ava", "Noah", "Liam", "Mia", "Lucas", "Emma", "Ethan", "Isabella")
LAST_NAMES = ("Johnson", "Williams", "Smith", "Brown", "Garcia", "Lee")


def _departure(rng: random.Random) -> time:
    return time(hour=rng.randint(5, 20), minute=rng.choice((0, 15, 30, 45)))


def _seed_network(
    session: Session,
    rng: random.Random,
    *,
    flights: int,
    days: int,
    start: date,
) -> int:
    for index, (make, model) in enumerate(PLANES, start=1):
        session.add(Plane(id=f"PL{index:03d}", make=make, model=model, year=rng.randint(2005, 2022)))
    session.flush()

    instances = 0
    for index in range(flights):
        flight_number = f"F{100 + index:03d}"
        origin, destination = rng.sample(CITIES, 2)
        session.add(
            Flight(
                flight_number=flight_number,
                plane_id=f"PL{index % len(PLANES) + 1:03d}",
                departure_city=origin,
                arrival_city=destination,
            )
        )
        session.flush()
        weekdays = set(rng.sample(WEEKDAYS, rng.randint(3, 7)))
        departure = _departure(rng)
        arrival = time(hour=min(departure.hour + rng.randint(1, 3), 23), minute=departure.minute)
        for weekday in sorted(weekdays, key=WEEKDAYS.index):
            session.add(
                Schedule(
                    flight_number=flight_number,
                    day_of_week=weekday,
                    departure_time=departure,
                    arrival_time=arrival,
                )
            )
        for offset in range(days):
            flight_date = start + timedelta(days=offset)
            if flight_date.strftime("%A") not in weekdays:
                continue
            session.add(
                FlightInstance(
                    flight_number=flight_number,
                    flight_date=flight_date,
                    departed_on_time=rng.random() < 0.8,
                    arrived_on_time=rng.random() < 0.75,
                    seats_total=rng.choice((4, 8, 12)),
                    seats_sold=0,
                    num_of_stops=rng.choice((0, 0, 1, 2)),
                    ticket_cost=Decimal(rng.choice(("129.00", "189.50", "249.99"))),
                )
            )
            instances += 1
    session.flush()
    return instances


def generate_sample_data(
    session_factory: sessionmaker[Session],
    *,
    flights: int = 10,
    days: int = 14,
    customers: int = 40,
    reservations: int = 120,
    start: date = date(2025, 6, 1),
) -> Dict[str, int]:
    """Populate an empty database with deterministic pseudo-random data.

    A database that already holds planes or flights is left untouched and the
    returned summary has ``skipped`` set.
    """

    rng = random.Random(42)
    with session_factory() as session:
        populated = session.scalar(select(Plane.id).limit(1)) or session.scalar(select(Flight.flight_number).limit(1))
        if populated is not None:
            logger.warning("Sample data not loaded: the database already holds planes or flights")
            return {"instances": 0, "customers": 0, "reservations": 0, "skipped": 1}
        instances = _seed_network(session, rng, flights=flights, days=days, start=start)
        for index in range(customers):
            create_customer(
                session,
                first_name=rng.choice(FIRST_NAMES),
                last_name=rng.choice(LAST_NAMES),
                gender=rng.choice(("M", "F", "O")),
                dob=date(rng.randint(1950, 2005), rng.randint(1, 12), rng.randint(1, 28)),
                address=f"{100 + index} Main St",
                phone=f"555-010-{index:04d}",
                zip_code=f"{90000 + index:05d}",
            )
        pilots = [create_pilot(session, name=f"{first} {last}") for first, last in zip(FIRST_NAMES[:4], LAST_NAMES)]
        technicians = [create_technician(session, name=f"{first} {last}") for first, last in zip(FIRST_NAMES[4:], LAST_NAMES)]
        for pilot in pilots:
            submit_maintenance_request(
                session,
                pilot_id=pilot.id,
                plane_id=f"PL{rng.randint(1, len(PLANES)):03d}",
                repair_code=f"RC{rng.randint(1, 20):03d}",
                request_date=start + timedelta(days=rng.randint(0, max(days - 1, 0))),
            )
        for technician in technicians:
            add_repair_record(
                session,
                technician_id=technician.id,
                plane_id=f"PL{rng.randint(1, len(PLANES)):03d}",
                repair_code=f"RC{rng.randint(1, 20):03d}",
                repair_date=start + timedelta(days=rng.randint(0, max(days - 1, 0))),
            )
        session.commit()

    booked = 0
    with session_factory() as session:
        dated_flights = list(session.execute(select(FlightInstance.flight_number, FlightInstance.flight_date)))
        if not dated_flights or customers == 0:
            return {"instances": instances, "customers": customers, "reservations": 0}
        for _ in range(reservations):
            flight_number, flight_date = rng.choice(dated_flights)
            try:
                reserve(
                    session,
                    customer_id=rng.randint(1, customers),
                    flight_number=flight_number,
                    flight_date=flight_date,
                )
                booked += 1
            except AirlineError:
                continue
        session.commit()
    return {"instances": instances, "customers": customers, "reservations": booked}
