"""SQLAlchemy models mapping the airline operations schema."""
from __future__ import annotations

import enum
from datetime import date, time
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Time,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


class ReservationStatus(str, enum.Enum):
    RESERVED = "reserved"
    WAITLIST = "waitlist"
    FLOWN = "flown"


class Customer(Base):
    __tablename__ = "customer"

    id: Mapped[int] = mapped_column("customerid", Integer, primary_key=True, autoincrement=False)
    first_name: Mapped[str] = mapped_column("firstname", String(30), nullable=False)
    last_name: Mapped[str] = mapped_column("lastname", String(30), nullable=False)
    gender: Mapped[Optional[str]] = mapped_column("gender", String(1))
    dob: Mapped[Optional[date]] = mapped_column("dob", Date)
    address: Mapped[Optional[str]] = mapped_column("address", String(100))
    phone: Mapped[Optional[str]] = mapped_column("phone", String(12))
    zip: Mapped[Optional[str]] = mapped_column("zip", String(5))

    reservations: Mapped[List["Reservation"]] = relationship(back_populates="customer")


class Pilot(Base):
    __tablename__ = "pilot"

    id: Mapped[str] = mapped_column("pilotid", String(4), primary_key=True)
    name: Mapped[str] = mapped_column("name", String(61), nullable=False)


class Technician(Base):
    __tablename__ = "technician"

    id: Mapped[str] = mapped_column("technicianid", String(4), primary_key=True)
    name: Mapped[str] = mapped_column("name", String(61), nullable=False)


class Plane(Base):
    __tablename__ = "plane"

    id: Mapped[str] = mapped_column("planeid", String(5), primary_key=True)
    make: Mapped[str] = mapped_column("make", String(50), nullable=False)
    model: Mapped[str] = mapped_column("model", String(50), nullable=False)
    year: Mapped[int] = mapped_column("year", Integer, nullable=False)
    last_repair_date: Mapped[Optional[date]] = mapped_column("lastrepairdate", Date)


class Flight(Base):
    __tablename__ = "flight"

    flight_number: Mapped[str] = mapped_column("flightnumber", String(4), primary_key=True)
    plane_id: Mapped[str] = mapped_column("planeid", ForeignKey("plane.planeid"), nullable=False)
    departure_city: Mapped[str] = mapped_column("departurecity", String(15), nullable=False)
    arrival_city: Mapped[str] = mapped_column("arrivalcity", String(15), nullable=False)

    plane: Mapped[Plane] = relationship()
    schedules: Mapped[List["Schedule"]] = relationship(back_populates="flight")
    instances: Mapped[List["FlightInstance"]] = relationship(back_populates="flight")


class Schedule(Base):
    __tablename__ = "schedule"

    id: Mapped[int] = mapped_column("scheduleid", Integer, primary_key=True)
    flight_number: Mapped[str] = mapped_column("flightnumber", ForeignKey("flight.flightnumber"), nullable=False)
    day_of_week: Mapped[str] = mapped_column("dayofweek", String(9), nullable=False)
    departure_time: Mapped[time] = mapped_column("departuretime", Time, nullable=False)
    arrival_time: Mapped[time] = mapped_column("arrivaltime", Time, nullable=False)

    flight: Mapped[Flight] = relationship(back_populates="schedules")


class FlightInstance(Base):
    __tablename__ = "flightinstance"
    __table_args__ = (
        UniqueConstraint("flightnumber", "flightdate", name="uq_flightinstance_number_date"),
        CheckConstraint("seatstotal > 0", name="ck_seats_total_positive"),
        CheckConstraint("seatssold >= 0", name="ck_seats_sold_non_negative"),
        CheckConstraint("seatssold <= seatstotal", name="ck_seats_sold_within_total"),
    )

    id: Mapped[int] = mapped_column("flightinstanceid", Integer, primary_key=True)
    flight_number: Mapped[str] = mapped_column("flightnumber", ForeignKey("flight.flightnumber"), nullable=False)
    flight_date: Mapped[date] = mapped_column("flightdate", Date, nullable=False)
    departed_on_time: Mapped[bool] = mapped_column("departedontime", Boolean, default=False, nullable=False)
    arrived_on_time: Mapped[bool] = mapped_column("arrivedontime", Boolean, default=False, nullable=False)
    seats_total: Mapped[int] = mapped_column("seatstotal", Integer, nullable=False)
    seats_sold: Mapped[int] = mapped_column("seatssold", Integer, default=0, nullable=False)
    num_of_stops: Mapped[int] = mapped_column("numofstops", Integer, default=0, nullable=False)
    ticket_cost: Mapped[Decimal] = mapped_column("ticketcost", Numeric(10, 2), nullable=False)

    flight: Mapped[Flight] = relationship(back_populates="instances")
    reservations: Mapped[List["Reservation"]] = relationship(back_populates="flight_instance")


class Reservation(Base):
    __tablename__ = "reservation"
    __table_args__ = (
        CheckConstraint("status IN ('reserved', 'waitlist', 'flown')", name="ck_reservation_status"),
    )

    id: Mapped[str] = mapped_column("reservationid", String(5), primary_key=True)
    customer_id: Mapped[int] = mapped_column("customerid", ForeignKey("customer.customerid"), nullable=False)
    flight_instance_id: Mapped[int] = mapped_column(
        "flightinstanceid", ForeignKey("flightinstance.flightinstanceid"), nullable=False
    )
    status: Mapped[str] = mapped_column("status", String(10), nullable=False)

    customer: Mapped[Customer] = relationship(back_populates="reservations")
    flight_instance: Mapped[FlightInstance] = relationship(back_populates="reservations")


class Repair(Base):
    __tablename__ = "repair"

    id: Mapped[int] = mapped_column("repairid", Integer, primary_key=True)
    plane_id: Mapped[str] = mapped_column("planeid", ForeignKey("plane.planeid"), nullable=False)
    repair_code: Mapped[str] = mapped_column("repaircode", String(5), nullable=False)
    repair_date: Mapped[date] = mapped_column("repairdate", Date, nullable=False)
    technician_id: Mapped[str] = mapped_column("technicianid", ForeignKey("technician.technicianid"), nullable=False)


class MaintenanceRequest(Base):
    __tablename__ = "maintenancerequest"

    id: Mapped[int] = mapped_column("requestid", Integer, primary_key=True, autoincrement=False)
    plane_id: Mapped[str] = mapped_column("planeid", ForeignKey("plane.planeid"), nullable=False)
    repair_code: Mapped[str] = mapped_column("repaircode", String(5), nullable=False)
    request_date: Mapped[date] = mapped_column("requestdate", Date, nullable=False)
    pilot_id: Mapped[str] = mapped_column("pilotid", ForeignKey("pilot.pilotid"), nullable=False)


class IdentifierCounter(Base):
    """Last value handed out per identifier space."""

    __tablename__ = "id_counter"

    space: Mapped[str] = mapped_column("space", String(30), primary_key=True)
    last_value: Mapped[int] = mapped_column("last_value", Integer, nullable=False)
