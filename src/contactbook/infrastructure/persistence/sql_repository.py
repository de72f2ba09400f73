"""Relational implementation of ContactRepository (SQLModel over SQLAlchemy).
One row per contact in the "contacts" table. Each repository call runs in its own session.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import delete, literal
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DataError, IntegrityError, SQLAlchemyError, StatementError
from sqlmodel import Field, Session, SQLModel, col, create_engine, func, or_, select

from contactbook.application.ports import (
    ConstraintViolationError,
    InvalidArgumentError,
    RecordNotFoundError,
    StorageError,
)
from contactbook.domain import Contact

logger = logging.getLogger(__name__)


class ContactTable(SQLModel, table=True):
    """Database persistence model for contacts."""

    __tablename__ = "contacts"

    id: int | None = Field(default=None, primary_key=True)
    first_name: str = Field(index=True)
    last_name: str
    phone_number: str = Field(unique=True, index=True)
    email: str | None = None
    address: str | None = None
    exists: bool = Field(default=True, index=True)


def create_sql_engine(url: str) -> Engine:
    """Create the shared engine for the given SQLAlchemy URL."""
    connect_args = {}
    if url.startswith("sqlite"):
        # FastAPI runs sync routes on a threadpool.
        connect_args = {"check_same_thread": False, "timeout": 20}
    return create_engine(url, echo=False, pool_pre_ping=True, connect_args=connect_args)


def create_tables(engine: Engine) -> None:
    """Create the contacts table if it does not exist."""
    SQLModel.metadata.create_all(engine)


def _contains(engine: Engine, haystack, needle):
    """Case-sensitive "haystack contains needle" without LIKE wildcards or case folding."""
    if engine.dialect.name == "postgresql":
        return func.strpos(haystack, needle) > 0
    return func.instr(haystack, needle) > 0


def _row_to_contact(row: ContactTable) -> Contact:
    return Contact(
        id=row.id,
        first_name=row.first_name,
        last_name=row.last_name,
        phone_number=row.phone_number,
        email=row.email,
        address=row.address,
        exists=row.exists,
    )


def _translate(e: SQLAlchemyError) -> StorageError:
    if isinstance(e, IntegrityError):
        return ConstraintViolationError(str(e.orig or e))
    if isinstance(e, DataError):
        return InvalidArgumentError(str(e.orig or e))
    if isinstance(e, StatementError) and isinstance(e.orig, OverflowError | TypeError):
        # Parameter could not be bound, e.g. an id beyond the column range.
        return InvalidArgumentError(str(e.orig))
    return StorageError(str(e))


class SqlContactRepository:
    """Stores contacts in a relational database through a shared SQLAlchemy engine."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Commit on success, roll back on any error. SQLAlchemy errors become StorageError."""
        session = Session(self._engine, expire_on_commit=False)
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.warning("Database transaction failed: %s", type(e).__name__)
            raise _translate(e) from e
        except OverflowError as e:
            session.rollback()
            raise InvalidArgumentError(str(e)) from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def _select(self, *criteria) -> list[Contact]:
        statement = select(ContactTable).where(*criteria).order_by(ContactTable.id)
        with self.session_scope() as session:
            return [_row_to_contact(row) for row in session.exec(statement)]

    def list_all(self) -> list[Contact]:
        return self._select()

    def get_by_id(self, contact_id: int) -> Contact | None:
        with self.session_scope() as session:
            row = session.get(ContactTable, contact_id)
            return _row_to_contact(row) if row is not None else None

    def find_by_first_name(self, first_name: str) -> list[Contact]:
        return self._select(ContactTable.first_name == first_name)

    def find_by_phone_number_containing(self, fragment: str) -> list[Contact]:
        return self._select(
            _contains(self._engine, col(ContactTable.phone_number), literal(fragment))
        )

    def find_by_phone_number_overlapping(self, phone_number: str) -> list[Contact]:
        stored = col(ContactTable.phone_number)
        given = literal(phone_number)
        return self._select(
            or_(
                _contains(self._engine, stored, given),
                _contains(self._engine, given, stored),
            )
        )

    def find_by_exists(self, exists: bool) -> list[Contact]:
        return self._select(ContactTable.exists == exists)

    def save(self, contact: Contact) -> Contact:
        with self.session_scope() as session:
            if contact.id is None:
                row = ContactTable(
                    first_name=contact.first_name,
                    last_name=contact.last_name,
                    phone_number=contact.phone_number,
                    email=contact.email,
                    address=contact.address,
                    exists=contact.exists,
                )
            else:
                row = session.get(ContactTable, contact.id)
                if row is None:
                    raise RecordNotFoundError(f"No contact with id {contact.id}")
                row.first_name = contact.first_name
                row.last_name = contact.last_name
                row.phone_number = contact.phone_number
                row.email = contact.email
                row.address = contact.address
                row.exists = contact.exists
            session.add(row)
            session.flush()
            session.refresh(row)
            return _row_to_contact(row)

    def delete_by_id(self, contact_id: int) -> None:
        with self.session_scope() as session:
            row = session.get(ContactTable, contact_id)
            if row is None:
                raise RecordNotFoundError(f"No contact with id {contact_id}")
            session.delete(row)

    def delete_all(self) -> None:
        with self.session_scope() as session:
            session.exec(delete(ContactTable))

    def count(self) -> int:
        with self.session_scope() as session:
            return session.exec(select(func.count()).select_from(ContactTable)).one()
