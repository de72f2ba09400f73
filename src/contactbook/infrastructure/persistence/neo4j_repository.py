"""Neo4j implementation of ContactRepository.
Graph: one (:Contact) node per contact; integer ids come from a (:Sequence {name: "contact"}) counter node.
"""

import logging

from neo4j.exceptions import ConstraintError, DriverError, Neo4jError

from contactbook.application.ports import (
    ConstraintViolationError,
    InvalidArgumentError,
    RecordNotFoundError,
    StorageError,
)
from contactbook.domain import Contact

logger = logging.getLogger(__name__)

_CONSTRAINT_QUERIES = (
    """
    CREATE CONSTRAINT contact_id_unique IF NOT EXISTS
    FOR (c:Contact) REQUIRE c.id IS UNIQUE
    """,
    """
    CREATE CONSTRAINT contact_phone_unique IF NOT EXISTS
    FOR (c:Contact) REQUIRE c.phone_number IS UNIQUE
    """,
)

_RETURN = "RETURN c ORDER BY c.id"

_INSERT_QUERY = """
MERGE (s:Sequence {name: 'contact'})
ON CREATE SET s.value = 0
SET s.value = s.value + 1
WITH s.value AS new_id
CREATE (c:Contact {
    id: new_id,
    first_name: $first_name,
    last_name: $last_name,
    phone_number: $phone_number,
    email: $email,
    address: $address,
    `exists`: $flag
})
RETURN c
"""

_UPDATE_QUERY = """
MATCH (c:Contact {id: $id})
SET c.first_name = $first_name,
    c.last_name = $last_name,
    c.phone_number = $phone_number,
    c.email = $email,
    c.address = $address,
    c.`exists` = $flag
RETURN c
"""


def ensure_contact_constraints(driver: object) -> None:
    """Create uniqueness constraints on Contact.id and Contact.phone_number."""
    with driver.session() as session:
        for query in _CONSTRAINT_QUERIES:
            session.run(query)


def _translate(e: Exception) -> StorageError:
    if isinstance(e, ConstraintError):
        return ConstraintViolationError(e.message or str(e))
    if isinstance(e, Neo4jError) and e.code and ".Statement." in e.code:
        return InvalidArgumentError(e.message or str(e))
    return StorageError(str(e))


class Neo4jContactRepository:
    """Stores contacts as Contact nodes. The driver is shared; each call opens its own session."""

    def __init__(self, driver: object, database: str | None = None) -> None:
        self._driver = driver
        self._database = database

    def _run(self, query: str, **params) -> list:
        try:
            with self._driver.session(database=self._database) as session:
                return list(session.run(query, **params))
        except (Neo4jError, DriverError) as e:
            logger.warning("Neo4j query failed: %s", type(e).__name__)
            raise _translate(e) from e
        except (OverflowError, TypeError) as e:
            # Parameter could not be packed, e.g. an id beyond 64-bit range.
            raise InvalidArgumentError(str(e)) from e

    def _contacts(self, query: str, **params) -> list[Contact]:
        return [_record_to_contact(rec) for rec in self._run(query, **params)]

    def list_all(self) -> list[Contact]:
        return self._contacts(f"MATCH (c:Contact) {_RETURN}")

    def get_by_id(self, contact_id: int) -> Contact | None:
        found = self._contacts("MATCH (c:Contact {id: $id}) RETURN c", id=contact_id)
        return found[0] if found else None

    def find_by_first_name(self, first_name: str) -> list[Contact]:
        return self._contacts(
            f"MATCH (c:Contact) WHERE c.first_name = $first_name {_RETURN}",
            first_name=first_name,
        )

    def find_by_phone_number_containing(self, fragment: str) -> list[Contact]:
        return self._contacts(
            f"MATCH (c:Contact) WHERE c.phone_number CONTAINS $fragment {_RETURN}",
            fragment=fragment,
        )

    def find_by_phone_number_overlapping(self, phone_number: str) -> list[Contact]:
        return self._contacts(
            "MATCH (c:Contact) "
            "WHERE c.phone_number CONTAINS $phone OR $phone CONTAINS c.phone_number "
            f"{_RETURN}",
            phone=phone_number,
        )

    def find_by_exists(self, exists: bool) -> list[Contact]:
        return self._contacts(
            f"MATCH (c:Contact) WHERE c.`exists` = $flag {_RETURN}",
            flag=exists,
        )

    def save(self, contact: Contact) -> Contact:
        params = {
            "first_name": contact.first_name,
            "last_name": contact.last_name,
            "phone_number": contact.phone_number,
            "email": contact.email,
            "address": contact.address,
            "flag": contact.exists,
        }
        if contact.id is None:
            return self._contacts(_INSERT_QUERY, **params)[0]
        found = self._contacts(_UPDATE_QUERY, id=contact.id, **params)
        if not found:
            raise RecordNotFoundError(f"No contact with id {contact.id}")
        return found[0]

    def delete_by_id(self, contact_id: int) -> None:
        records = self._run(
            "MATCH (c:Contact {id: $id}) DELETE c RETURN count(*) AS deleted",
            id=contact_id,
        )
        if not records or records[0]["deleted"] == 0:
            raise RecordNotFoundError(f"No contact with id {contact_id}")

    def delete_all(self) -> None:
        self._run("MATCH (c:Contact) DETACH DELETE c")

    def count(self) -> int:
        records = self._run("MATCH (c:Contact) RETURN count(c) AS total")
        return records[0]["total"] if records else 0


def _record_to_contact(record) -> Contact:
    c = record["c"]
    return Contact(
        id=c["id"],
        first_name=c["first_name"],
        last_name=c["last_name"],
        phone_number=c["phone_number"],
        email=c.get("email"),
        address=c.get("address"),
        exists=c.get("exists", True),
    )
