"""
PostgreSQL repository adapter - Implements RegistryRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 with raw SQL.

Serialization Design
--------------------
Every unit of work is one database transaction. Mutating calls begin by
incrementing the single row of ``ledger_height``; the row lock taken by
that UPDATE is held until commit, so writers execute one at a time in
height order and the duplicate checks made by the domain layer cannot
race with a concurrent insert. Primary keys on (name), (name, reviewer),
(name, reporter) and (identity) back the same invariants at the schema
level. Domain rows are additionally read with SELECT ... FOR UPDATE.

Any exception inside the unit of work rolls the transaction back,
including the height increment.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from psycopg import Cursor
from psycopg.types.json import Jsonb
from psycopg_pool import ConnectionPool

from src.domain.ports import DomainRecord, Event, Report, Review, Role

logger = logging.getLogger(__name__)

_DOMAIN_COLUMNS = (
    "name, owner, identity_metadata, identity_verified, reputation_score, registered_at, updated_at"
)
_REVIEW_COLUMNS = "name, reviewer, rating, comment, reviewed_at, weight"
_REPORT_COLUMNS = "name, reporter, reason_code, details, reported_at, resolved, upheld, resolved_at"


class PostgresRegistryStore:
    """
    Implements RegistryStore protocol over one transaction's cursor.

    All SQL uses parameterized queries.
    """

    def __init__(self, cursor: Cursor) -> None:
        self._cursor = cursor

    def next_height(self) -> int:
        self._cursor.execute(
            "UPDATE ledger_height SET height = height + 1 WHERE id = 1 RETURNING height"
        )
        return self._cursor.fetchone()[0]

    def get_domain(self, name: str) -> DomainRecord | None:
        self._cursor.execute(
            f"SELECT {_DOMAIN_COLUMNS} FROM domains WHERE name = %s FOR UPDATE", (name,)
        )
        row = self._cursor.fetchone()
        return DomainRecord(*row) if row is not None else None

    def list_domains(self, owner: str | None = None) -> list[DomainRecord]:
        if owner is None:
            self._cursor.execute(f"SELECT {_DOMAIN_COLUMNS} FROM domains ORDER BY name")
        else:
            self._cursor.execute(
                f"SELECT {_DOMAIN_COLUMNS} FROM domains WHERE owner = %s ORDER BY name", (owner,)
            )
        return [DomainRecord(*row) for row in self._cursor.fetchall()]

    def insert_domain(self, record: DomainRecord) -> None:
        self._cursor.execute(
            f"INSERT INTO domains ({_DOMAIN_COLUMNS}) VALUES (%s, %s, %s, %s, %s, %s, %s)",
            (
                record.name,
                record.owner,
                record.identity_metadata,
                record.identity_verified,
                record.reputation_score,
                record.registered_at,
                record.updated_at,
            ),
        )

    def update_domain(self, record: DomainRecord) -> None:
        self._cursor.execute(
            """
            UPDATE domains
            SET owner = %s,
                identity_metadata = %s,
                identity_verified = %s,
                reputation_score = %s,
                updated_at = %s
            WHERE name = %s
            """,
            (
                record.owner,
                record.identity_metadata,
                record.identity_verified,
                record.reputation_score,
                record.updated_at,
                record.name,
            ),
        )
        if self._cursor.rowcount != 1:
            raise KeyError(f"unknown domain: {record.name}")

    def get_role(self, identity: str) -> Role:
        self._cursor.execute("SELECT role FROM roles WHERE identity = %s", (identity,))
        row = self._cursor.fetchone()
        return Role(row[0]) if row is not None else Role.NONE

    def set_role(self, identity: str, role: Role) -> None:
        if role == Role.NONE:
            self._cursor.execute("DELETE FROM roles WHERE identity = %s", (identity,))
            return
        self._cursor.execute(
            """
            INSERT INTO roles (identity, role) VALUES (%s, %s)
            ON CONFLICT (identity) DO UPDATE SET role = EXCLUDED.role
            """,
            (identity, role.value),
        )

    def has_admin(self) -> bool:
        self._cursor.execute("SELECT 1 FROM roles WHERE role = %s LIMIT 1", (Role.ADMIN.value,))
        return self._cursor.fetchone() is not None

    def get_review(self, name: str, reviewer: str) -> Review | None:
        self._cursor.execute(
            f"SELECT {_REVIEW_COLUMNS} FROM reviews WHERE name = %s AND reviewer = %s",
            (name, reviewer),
        )
        row = self._cursor.fetchone()
        return Review(*row) if row is not None else None

    def insert_review(self, review: Review) -> None:
        self._cursor.execute(
            f"INSERT INTO reviews ({_REVIEW_COLUMNS}) VALUES (%s, %s, %s, %s, %s, %s)",
            (
                review.name,
                review.reviewer,
                review.rating,
                review.comment,
                review.reviewed_at,
                review.weight,
            ),
        )

    def list_reviews(self, name: str) -> list[Review]:
        self._cursor.execute(
            f"SELECT {_REVIEW_COLUMNS} FROM reviews WHERE name = %s ORDER BY reviewed_at, reviewer",
            (name,),
        )
        return [Review(*row) for row in self._cursor.fetchall()]

    def get_report(self, name: str, reporter: str) -> Report | None:
        self._cursor.execute(
            f"SELECT {_REPORT_COLUMNS} FROM reports WHERE name = %s AND reporter = %s FOR UPDATE",
            (name, reporter),
        )
        row = self._cursor.fetchone()
        return _report_from_row(row) if row is not None else None

    def insert_report(self, report: Report) -> None:
        self._cursor.execute(
            f"INSERT INTO reports ({_REPORT_COLUMNS}) VALUES (%s, %s, %s, %s, %s, %s, %s, %s)",
            (
                report.name,
                report.reporter,
                report.reason_code,
                report.details,
                report.reported_at,
                report.resolved,
                report.upheld,
                report.resolved_at,
            ),
        )

    def update_report(self, report: Report) -> None:
        self._cursor.execute(
            """
            UPDATE reports
            SET resolved = %s, upheld = %s, resolved_at = %s
            WHERE name = %s AND reporter = %s
            """,
            (report.resolved, report.upheld, report.resolved_at, report.name, report.reporter),
        )
        if self._cursor.rowcount != 1:
            raise KeyError(f"unknown report: {(report.name, report.reporter)}")

    def list_reports(self, name: str) -> list[Report]:
        self._cursor.execute(
            f"SELECT {_REPORT_COLUMNS} FROM reports WHERE name = %s ORDER BY reported_at, reporter",
            (name,),
        )
        return [_report_from_row(row) for row in self._cursor.fetchall()]

    def append_event(self, event: Event) -> None:
        self._cursor.execute(
            "INSERT INTO events (height, name, caller, payload) VALUES (%s, %s, %s, %s)",
            (event.height, event.name, event.caller, Jsonb(event.payload)),
        )

    def list_events(self, after_height: int = 0, limit: int = 100) -> list[Event]:
        self._cursor.execute(
            """
            SELECT height, name, caller, payload FROM events
            WHERE height > %s
            ORDER BY seq
            LIMIT %s
            """,
            (after_height, limit),
        )
        return [Event(*row) for row in self._cursor.fetchall()]


def _report_from_row(row: tuple) -> Report:
    name, reporter, reason_code, details, reported_at, resolved, upheld, resolved_at = row
    return Report(
        name=name,
        reporter=reporter,
        reason_code=reason_code,
        details=details,
        reported_at=reported_at,
        resolved=resolved,
        upheld=upheld,
        resolved_at=resolved_at,
    )


class PostgresRegistryRepository:
    """
    Implements RegistryRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    @contextmanager
    def unit_of_work(self) -> Iterator[PostgresRegistryStore]:
        """
        Run one transaction on a pooled connection.

        Commits when the block exits normally. On exception the pool rolls
        the transaction back before the connection is returned.
        """
        with self._pool.connection() as conn, conn.cursor() as cursor:
            yield PostgresRegistryStore(cursor)
            conn.commit()


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
