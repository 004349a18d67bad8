"""Command line entry point for the airline management console."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Iterable, Optional, TextIO

from sqlalchemy.exc import SQLAlchemyError

from . import config
from .database import create_session_factory, init_db
from .dataset import generate_sample_data
from .gateway import Gateway
from .menu import Dispatcher
from .validation import Prompter

logger = logging.getLogger(__name__)

GREETING = (
    "\n\n*******************************************************\n"
    "              User Interface\n"
    "*******************************************************\n"
)


def parse_args(argv: Iterable[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="airline-management",
        description="Interactive console for flights, reservations and maintenance records.",
    )
    parser.add_argument("dbname", help="Name of the PostgreSQL database.")
    parser.add_argument("port", help="Port the PostgreSQL server listens on.")
    parser.add_argument("user", help="Database user name.")
    parser.add_argument(
        "--host",
        default=config.DB_HOST,
        help="Database host (default: $AIRLINE_DB_HOST or localhost).",
    )
    parser.add_argument(
        "--password",
        default=config.DB_PASSWORD,
        help="Database password (default: $AIRLINE_DB_PASSWORD).",
    )
    parser.add_argument(
        "--url",
        help="Full SQLAlchemy database URL; overrides dbname/port/user (e.g. sqlite:///airline.db).",
    )
    parser.add_argument(
        "--init-schema",
        action="store_true",
        help="Create any missing tables before starting.",
    )
    parser.add_argument(
        "--seed",
        action="store_true",
        help="Load deterministic sample data into an empty database.",
    )
    parser.add_argument("--echo", action="store_true", help="Log every SQL statement.")
    return parser.parse_args(list(argv))


def configure_logging(level: str = config.LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stderr,
    )


def main(
    argv: Iterable[str] | None = None,
    *,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    configure_logging()
    out = stdout if stdout is not None else sys.stdout
    err = stderr if stderr is not None else sys.stderr

    print(GREETING, file=out)
    print("Connecting to database...", end="", file=out)
    try:
        url = args.url or config.postgres_url(args.dbname, args.port, args.user, host=args.host, password=args.password)
        engine, session_factory = create_session_factory(url, echo=args.echo)
        with engine.connect():
            pass
    except (SQLAlchemyError, ImportError, ValueError) as exc:
        print(file=out)
        print(f"Error: Unable to connect to database: {exc}", file=err)
        return 1
    print("Done", file=out)

    try:
        if args.init_schema:
            init_db(engine)
        if args.seed:
            summary = generate_sample_data(session_factory)
            if summary.get("skipped"):
                print("Sample data not loaded: the database is not empty.", file=out)
            else:
                logger.info("Seeded sample data: %s", summary)
    except SQLAlchemyError as exc:
        logger.error("Database preparation failed: %s", exc)
        print(f"Error: Unable to prepare database: {exc}", file=err)

    dispatcher = Dispatcher(Gateway(session_factory, out=out), Prompter(stdin, out), err=err)
    try:
        dispatcher.run()
    finally:
        print("Disconnecting from database...", end="", file=out)
        engine.dispose()
        print("Done\n\nBye !", file=out)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
