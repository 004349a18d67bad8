"""Serialized identifier allocation backed by the ``id_counter`` table."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional, Union

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import InstrumentedAttribute, Session

from .errors import CapacityExhausted
from .models import Customer, IdentifierCounter, MaintenanceRequest, Pilot, Reservation, Technician

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"\d+")


@dataclass(frozen=True, eq=False)
class IdentifierSpace:
    """A family of identifiers such as ``R0001``..``R9999``."""

    name: str
    column: InstrumentedAttribute
    prefix: str = ""
    width: int = 0
    ceiling: Optional[int] = None

    def format(self, number: int) -> Union[str, int]:
        if not self.prefix:
            return number
        return f"{self.prefix}{number:0{self.width}d}"

    def number_of(self, identifier: Union[str, int, None]) -> int:
        if identifier is None:
            return 0
        if isinstance(identifier, int):
            return identifier
        match = _DIGITS.search(identifier)
        return int(match.group()) if match else 0


CUSTOMER = IdentifierSpace("customer", Customer.id, ceiling=999)
PILOT = IdentifierSpace("pilot", Pilot.id, prefix="P", width=3, ceiling=999)
TECHNICIAN = IdentifierSpace("technician", Technician.id, prefix="T", width=3, ceiling=999)
RESERVATION = IdentifierSpace("reservation", Reservation.id, prefix="R", width=4, ceiling=9999)
MAINTENANCE_REQUEST = IdentifierSpace("maintenance_request", MaintenanceRequest.id)


def _seed_counter(session: Session, space: IdentifierSpace) -> None:
    # Prefixed ids are zero padded to a fixed width, so MAX() orders them numerically.
    current = session.scalar(select(func.max(space.column)))
    try:
        with session.begin_nested():
            session.add(IdentifierCounter(space=space.name, last_value=space.number_of(current)))
    except IntegrityError:
        logger.debug("Counter %s was seeded concurrently", space.name)


def _bump(session: Session, space: IdentifierSpace) -> int:
    stmt = (
        update(IdentifierCounter)
        .where(IdentifierCounter.space == space.name)
        .values(last_value=IdentifierCounter.last_value + 1)
        .execution_options(synchronize_session=False)
    )
    if space.ceiling is not None:
        stmt = stmt.where(IdentifierCounter.last_value < space.ceiling)
    return session.execute(stmt).rowcount


def _exhausted(space: IdentifierSpace) -> CapacityExhausted:
    return CapacityExhausted(
        f"Maximum number of {space.name.replace('_', ' ')} identifiers reached "
        f"({space.format(space.ceiling or 0)})."
    )


def allocate(session: Session, space: IdentifierSpace) -> Union[str, int]:
    """Hand out the next identifier in ``space``.

    The counter row is incremented before it is read, so the row's write lock
    is held until the caller's transaction ends and no two callers can observe
    the same value.
    """

    if not _bump(session, space):
        seeded = session.scalar(select(IdentifierCounter.space).where(IdentifierCounter.space == space.name))
        if seeded is not None:
            raise _exhausted(space)
        _seed_counter(session, space)
        if not _bump(session, space):
            raise _exhausted(space)
    number = session.scalar(select(IdentifierCounter.last_value).where(IdentifierCounter.space == space.name))
    identifier = space.format(number)
    logger.info("Allocated %s identifier %s", space.name, identifier)
    return identifier
