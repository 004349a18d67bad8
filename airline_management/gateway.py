"""The single channel between the console and the database."""
from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from typing import Any, Iterator, List, Mapping, Optional, Sequence, TextIO, Tuple, Union

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.sql import Executable
from tabulate import tabulate

from .database import session_scope
from .errors import StorageFailure

logger = logging.getLogger(__name__)

Statement = Union[Executable, str]
Params = Optional[Mapping[str, Any]]
Row = List[Optional[str]]


def _as_executable(statement: Statement) -> Executable:
    if isinstance(statement, str):
        return text(statement)
    return statement


def _stringify(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return "Yes" if value else "No"
    return str(value)


def render_table(headers: Sequence[str], rows: Sequence[Sequence[Any]]) -> str:
    return tabulate(
        [["" if cell is None else cell for cell in row] for row in rows],
        headers=list(headers),
        tablefmt="github",
    )


class Gateway:
    """Executes bound statements and converts rows into nullable strings."""

    def __init__(self, session_factory: sessionmaker[Session], *, out: Optional[TextIO] = None) -> None:
        self.session_factory = session_factory
        self.out = out if out is not None else sys.stdout

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Yield a session that commits on success and rolls back on any error."""

        try:
            with session_scope(self.session_factory) as session:
                yield session
        except SQLAlchemyError as exc:
            logger.error("Storage operation failed: %s", exc)
            raise StorageFailure(str(getattr(exc, "orig", None) or exc)) from exc

    def execute_update(self, statement: Statement, params: Params = None) -> int:
        with self.transaction() as session:
            result = session.execute(_as_executable(statement), params or {})
            return result.rowcount

    def _fetch(self, statement: Statement, params: Params) -> Tuple[List[str], List[Row]]:
        with self.transaction() as session:
            result = session.execute(_as_executable(statement), params or {})
            headers = list(result.keys())
            rows = [[_stringify(value) for value in row] for row in result]
        return headers, rows

    def execute_query(self, statement: Statement, params: Params = None) -> List[Row]:
        return self._fetch(statement, params)[1]

    def execute_query_print(self, statement: Statement, params: Params = None) -> int:
        """Print the result set as a table and return how many rows it had."""

        headers, rows = self._fetch(statement, params)
        if rows:
            print(render_table(headers, rows), file=self.out)
        return len(rows)
