"""Read-only reports printed through the gateway's output stream."""
from __future__ import annotations

from datetime import date

from sqlalchemy import Select, and_, case, func, select

from .gateway import Gateway, render_table
from .models import (
    Customer,
    Flight,
    FlightInstance,
    MaintenanceRequest,
    Plane,
    Repair,
    Reservation,
    ReservationStatus,
    Schedule,
)

_WEEKDAY_ORDER = {
    "Monday": 1,
    "Tuesday": 2,
    "Wednesday": 3,
    "Thursday": 4,
    "Friday": 5,
    "Saturday": 6,
    "Sunday": 7,
}


def _say(gateway: Gateway, message: str = "") -> None:
    print(message, file=gateway.out)


def _schedule_on(flight_date: date):
    """Join condition picking the weekly schedule row that applies on ``flight_date``."""

    return and_(
        Schedule.flight_number == FlightInstance.flight_number,
        Schedule.day_of_week == flight_date.strftime("%A"),
    )


def weekly_schedule(gateway: Gateway, flight_number: str) -> int:
    stmt = (
        select(
            Schedule.day_of_week.label("DayOfWeek"),
            Schedule.departure_time.label("DepartureTime"),
            Schedule.arrival_time.label("ArrivalTime"),
        )
        .where(Schedule.flight_number == flight_number)
        .order_by(case(_WEEKDAY_ORDER, value=Schedule.day_of_week, else_=8))
    )
    count = gateway.execute_query_print(stmt)
    if count == 0:
        _say(gateway, f"No weekly schedule found for flight {flight_number}.")
    return count


def seat_summary(gateway: Gateway, flight_number: str, flight_date: date) -> int:
    rows = gateway.execute_query(
        select(FlightInstance.seats_total, FlightInstance.seats_sold).where(
            FlightInstance.flight_number == flight_number,
            FlightInstance.flight_date == flight_date,
        )
    )
    if not rows:
        _say(gateway, "No seat information found for this flight and date.")
        return 0
    seats_total, seats_sold = (int(value) for value in rows[0])
    _say(gateway, f"Flight: {flight_number} on {flight_date.isoformat()}")
    _say(gateway, f"Seats Sold: {seats_sold}")
    _say(gateway, f"Seats Still Available: {seats_total - seats_sold}")
    return 1


def flight_status(gateway: Gateway, flight_number: str, flight_date: date) -> int:
    rows = gateway.execute_query(
        select(
            Schedule.departure_time,
            Schedule.arrival_time,
            FlightInstance.departed_on_time,
            FlightInstance.arrived_on_time,
        )
        .select_from(FlightInstance)
        .outerjoin(Schedule, _schedule_on(flight_date))
        .where(
            FlightInstance.flight_number == flight_number,
            FlightInstance.flight_date == flight_date,
        )
    )
    if not rows:
        _say(gateway, "No flight status information found for this flight and date.")
        return 0
    departure, arrival, departed, arrived = rows[0]
    _say(gateway, "-----------------------------------------")
    _say(gateway, f"Scheduled Departure: {departure or '-'}")
    _say(gateway, f"Scheduled Arrival:   {arrival or '-'}")
    _say(gateway, f"Departed On Time:    {departed}")
    _say(gateway, f"Arrived On Time:     {arrived}")
    _say(gateway, "-----------------------------------------")
    return 1


def flights_of_the_day(gateway: Gateway, flight_date: date) -> int:
    stmt = (
        select(
            FlightInstance.id.label("InstanceID"),
            FlightInstance.flight_number.label("FlightNumber"),
            Flight.departure_city.label("From"),
            Flight.arrival_city.label("To"),
            FlightInstance.num_of_stops.label("Stops"),
            Schedule.departure_time.label("Departure"),
            Schedule.arrival_time.label("Arrival"),
            FlightInstance.departed_on_time.label("DepartedOnTime"),
            FlightInstance.arrived_on_time.label("ArrivedOnTime"),
        )
        .join(Flight, Flight.flight_number == FlightInstance.flight_number)
        .outerjoin(Schedule, _schedule_on(flight_date))
        .where(FlightInstance.flight_date == flight_date)
        .order_by(FlightInstance.flight_number, Schedule.departure_time)
    )
    headers = ["InstanceID", "FlightNumber", "From", "To", "Stops", "Departure", "Arrival", "DepartedOnTime", "ArrivedOnTime"]
    rows = gateway.execute_query(stmt)
    if not rows:
        _say(gateway, f"No flights scheduled on {flight_date.isoformat()}.")
        return 0
    _say(gateway, f"Flights scheduled on {flight_date.isoformat()}:")
    _say(gateway, render_table(headers, rows))
    return len(rows)


def _passengers(instance_id: int) -> Select:
    return (
        select(
            Customer.id.label("ID"),
            Customer.first_name.label("First Name"),
            Customer.last_name.label("Last Name"),
        )
        .join(Reservation, Reservation.customer_id == Customer.id)
        .where(Reservation.flight_instance_id == instance_id)
    )


def order_history(gateway: Gateway, flight_number: str, flight_date: date) -> int:
    """Print every reservation of one instance, then its waitlist, then who flew."""

    found = gateway.execute_query(
        select(FlightInstance.id).where(
            FlightInstance.flight_number == flight_number,
            FlightInstance.flight_date == flight_date,
        )
    )
    if not found:
        _say(gateway, f"No flight instance found for {flight_number} on {flight_date.isoformat()}.")
        return 0
    instance_id = int(found[0][0])

    sections = [
        (
            "Passengers who made a reservation:",
            _passengers(instance_id)
            .add_columns(Reservation.status.label("Status"))
            .order_by(Reservation.status, Customer.id),
        ),
        (
            "Passengers on the waiting list:",
            _passengers(instance_id)
            .where(Reservation.status == ReservationStatus.WAITLIST.value)
            .order_by(Reservation.id),
        ),
        (
            "Passengers who actually flew:",
            _passengers(instance_id)
            .where(Reservation.status == ReservationStatus.FLOWN.value)
            .order_by(Customer.id),
        ),
    ]
    total = 0
    for title, stmt in sections:
        _say(gateway)
        _say(gateway, title)
        count = gateway.execute_query_print(stmt)
        if count == 0:
            _say(gateway, "  None.")
        total += count
    return total


def search_flights(gateway: Gateway, departure_city: str, arrival_city: str, flight_date: date) -> int:
    on_time = (
        select(
            FlightInstance.flight_number.label("flight_number"),
            func.round(100.0 * func.avg(case((FlightInstance.departed_on_time, 1), else_=0)), 2).label("percent"),
        )
        .group_by(FlightInstance.flight_number)
        .subquery()
    )
    stmt = (
        select(
            Flight.flight_number.label("FlightNumber"),
            FlightInstance.flight_date.label("FlightDate"),
            Schedule.departure_time.label("DepartureTime"),
            Schedule.arrival_time.label("ArrivalTime"),
            FlightInstance.num_of_stops.label("Stops"),
            (FlightInstance.seats_total - FlightInstance.seats_sold).label("SeatsAvailable"),
            on_time.c.percent.label("OnTimePercent"),
        )
        .join(FlightInstance, FlightInstance.flight_number == Flight.flight_number)
        .outerjoin(Schedule, _schedule_on(flight_date))
        .join(on_time, on_time.c.flight_number == Flight.flight_number)
        .where(
            Flight.departure_city == departure_city,
            Flight.arrival_city == arrival_city,
            FlightInstance.flight_date == flight_date,
        )
        .order_by(Schedule.departure_time, Flight.flight_number)
    )
    count = gateway.execute_query_print(stmt)
    if count == 0:
        _say(gateway, "No flights found for those criteria.")
    return count


def ticket_cost(gateway: Gateway, flight_number: str, flight_date: date) -> int:
    rows = gateway.execute_query(
        select(FlightInstance.ticket_cost).where(
            FlightInstance.flight_number == flight_number,
            FlightInstance.flight_date == flight_date,
        )
    )
    if not rows:
        _say(gateway, f"No flight instance found for {flight_number} on {flight_date.isoformat()}.")
        return 0
    _say(gateway, f"Ticket cost for {flight_number} on {flight_date.isoformat()}: ${rows[0][0]}")
    return 1


def plane_type(gateway: Gateway, flight_number: str) -> int:
    stmt = (
        select(
            Flight.flight_number.label("FlightNumber"),
            Plane.id.label("PlaneID"),
            Plane.make.label("Make"),
            Plane.model.label("Model"),
            Plane.year.label("Year"),
        )
        .join(Plane, Plane.id == Flight.plane_id)
        .where(Flight.flight_number == flight_number)
    )
    count = gateway.execute_query_print(stmt)
    if count == 0:
        _say(gateway, f"No plane found for flight {flight_number}.")
    return count


def customer_reservations(gateway: Gateway, customer_id: int) -> int:
    stmt = (
        select(
            Reservation.id.label("ReservationID"),
            FlightInstance.flight_number.label("FlightNumber"),
            FlightInstance.flight_date.label("FlightDate"),
            Reservation.status.label("Status"),
        )
        .join(FlightInstance, FlightInstance.id == Reservation.flight_instance_id)
        .where(Reservation.customer_id == customer_id)
        .order_by(FlightInstance.flight_date, Reservation.id)
    )
    count = gateway.execute_query_print(stmt)
    if count == 0:
        _say(gateway, "You have no reservations.")
    return count


def plane_repairs(gateway: Gateway, plane_id: str, start: date, end: date) -> int:
    if end < start:
        _say(gateway, "The end date must not be before the start date.")
        return 0
    stmt = (
        select(
            Repair.repair_date.label("RepairDate"),
            Repair.repair_code.label("RepairCode"),
            Repair.technician_id.label("TechnicianID"),
        )
        .where(Repair.plane_id == plane_id, Repair.repair_date.between(start, end))
        .order_by(Repair.repair_date, Repair.id)
    )
    rows = gateway.execute_query(stmt)
    if not rows:
        _say(gateway, f"No repairs found for plane {plane_id} between {start.isoformat()} and {end.isoformat()}.")
        return 0
    _say(gateway, f"Repairs for {plane_id} from {start.isoformat()} to {end.isoformat()}:")
    _say(gateway, render_table(["RepairDate", "RepairCode", "TechnicianID"], rows))
    return len(rows)


def plane_maintenance_requests(gateway: Gateway, plane_id: str) -> int:
    stmt = (
        select(
            MaintenanceRequest.id.label("RequestID"),
            MaintenanceRequest.request_date.label("RequestDate"),
            MaintenanceRequest.repair_code.label("RepairCode"),
            MaintenanceRequest.pilot_id.label("PilotID"),
        )
        .where(MaintenanceRequest.plane_id == plane_id)
        .order_by(MaintenanceRequest.request_date, MaintenanceRequest.id)
    )
    count = gateway.execute_query_print(stmt)
    if count == 0:
        _say(gateway, f"No maintenance requests found for plane {plane_id}.")
    return count


def pilot_maintenance_requests(gateway: Gateway, pilot_id: str) -> int:
    stmt = (
        select(
            MaintenanceRequest.id.label("RequestID"),
            MaintenanceRequest.plane_id.label("PlaneID"),
            MaintenanceRequest.repair_code.label("RepairCode"),
            MaintenanceRequest.request_date.label("RequestDate"),
        )
        .where(MaintenanceRequest.pilot_id == pilot_id)
        .order_by(MaintenanceRequest.request_date, MaintenanceRequest.id)
    )
    count = gateway.execute_query_print(stmt)
    if count == 0:
        _say(gateway, f"No maintenance requests filed by pilot {pilot_id}.")
    return count


def technician_repairs(gateway: Gateway, technician_id: str) -> int:
    stmt = (
        select(
            Repair.id.label("RepairID"),
            Repair.plane_id.label("PlaneID"),
            Repair.repair_code.label("RepairCode"),
            Repair.repair_date.label("RepairDate"),
        )
        .where(Repair.technician_id == technician_id)
        .order_by(Repair.repair_date, Repair.id)
    )
    count = gateway.execute_query_print(stmt)
    if count == 0:
        _say(gateway, f"No repairs recorded by technician {technician_id}.")
    return count
