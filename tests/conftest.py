from __future__ import annotations

from datetime import date, time
from decimal import Decimal

import pytest

from airline_management.database import create_session_factory, init_db
from airline_management.models import Flight, FlightInstance, Plane, Schedule
from airline_management.services import create_customer


@pytest.fixture
def session_factory(tmp_path):
    engine, factory = create_session_factory(f"sqlite+pysqlite:///{tmp_path / 'airline.db'}")
    init_db(engine)
    yield factory
    engine.dispose()


@pytest.fixture
def flight_date() -> date:
    return date(2025, 6, 1)  # a Sunday


@pytest.fixture
def add_flight(session_factory, flight_date):
    """Return a helper that stores a dated flight of F105 and returns the instance id."""

    def _add_flight(
        *,
        flight_number: str = "F105",
        on: date = flight_date,
        seats_total: int = 100,
        seats_sold: int = 0,
    ) -> int:
        with session_factory() as session:
            if session.get(Plane, "PL001") is None:
                session.add(Plane(id="PL001", make="Boeing", model="737", year=2015))
            if session.get(Flight, flight_number) is None:
                session.add(
                    Flight(
                        flight_number=flight_number,
                        plane_id="PL001",
                        departure_city="Los Angeles",
                        arrival_city="New York",
                    )
                )
                session.add(
                    Schedule(
                        flight_number=flight_number,
                        day_of_week=on.strftime("%A"),
                        departure_time=time(8, 30),
                        arrival_time=time(16, 45),
                    )
                )
            instance = FlightInstance(
                flight_number=flight_number,
                flight_date=on,
                departed_on_time=True,
                arrived_on_time=False,
                seats_total=seats_total,
                seats_sold=seats_sold,
                num_of_stops=0,
                ticket_cost=Decimal("189.50"),
            )
            session.add(instance)
            session.commit()
            return instance.id

    return _add_flight


@pytest.fixture
def add_customers(session_factory):
    def _add_customers(count: int) -> list[int]:
        with session_factory() as session:
            ids = [
                create_customer(session, first_name="Ava", last_name=f"Tester{chr(ord('a') + index % 26)}").id
                for index in range(count)
            ]
            session.commit()
        return ids

    return _add_customers
