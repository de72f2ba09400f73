"""
contactbook core: clean-architecture layout.

- domain: the Contact entity. No outer dependencies.
- application: use cases (ContactService), ports (ContactRepository), DTOs and storage errors.
- infrastructure: adapters (InMemoryContactRepository, SqlContactRepository, Neo4jContactRepository).
"""

from contactbook.application import (
    Conflict,
    ContactCreated,
    ContactData,
    ContactFound,
    ContactList,
    ContactRepository,
    ContactService,
    ContactUpdated,
    Deleted,
    Invalid,
    NoContacts,
    NotFound,
    StorageError,
    StorageFailure,
)
from contactbook.domain import Contact
from contactbook.infrastructure import (
    InMemoryContactRepository,
    Neo4jContactRepository,
    SqlContactRepository,
)

__all__ = [
    "Conflict",
    "Contact",
    "ContactCreated",
    "ContactData",
    "ContactFound",
    "ContactList",
    "ContactRepository",
    "ContactService",
    "ContactUpdated",
    "Deleted",
    "InMemoryContactRepository",
    "Invalid",
    "Neo4jContactRepository",
    "NoContacts",
    "NotFound",
    "SqlContactRepository",
    "StorageError",
    "StorageFailure",
]
