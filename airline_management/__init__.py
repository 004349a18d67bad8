"""Airline operations console package."""
from .access import Principal, Role, authenticate_customer, authenticate_manager, authenticate_staff, login
from .database import create_session_factory, init_db, session_scope
from .dataset import generate_sample_data
from .errors import (
    AirlineError,
    CapacityExhausted,
    InstanceClosed,
    InvalidTransition,
    NotFound,
    StorageFailure,
    ValidationExhausted,
)
from .gateway import Gateway
from .menu import ACTIONS, Dispatcher
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

__all__ = [
    "ACTIONS",
    "AirlineError",
    "CapacityExhausted",
    "Dispatcher",
    "Gateway",
    "InstanceClosed",
    "InvalidTransition",
    "NotFound",
    "Principal",
    "Prompter",
    "Role",
    "StorageFailure",
    "ValidationExhausted",
    "add_repair_record",
    "authenticate_customer",
    "authenticate_manager",
    "authenticate_staff",
    "create_customer",
    "create_pilot",
    "create_session_factory",
    "create_technician",
    "generate_sample_data",
    "init_db",
    "login",
    "mark_flown",
    "reserve",
    "session_scope",
    "submit_maintenance_request",
]
