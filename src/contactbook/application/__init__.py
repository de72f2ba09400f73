"""Application layer: use cases, ports, and DTOs. Depends only on domain."""

from contactbook.application.contact_service import ContactService, parse_contact_id
from contactbook.application.dto import (
    Conflict,
    ContactCount,
    ContactCreated,
    ContactData,
    ContactFound,
    ContactList,
    ContactUpdated,
    Deleted,
    Invalid,
    NoContacts,
    NotFound,
    StorageFailure,
)
from contactbook.application.ports import (
    ConstraintViolationError,
    ContactRepository,
    InvalidArgumentError,
    RecordNotFoundError,
    StorageError,
)

__all__ = [
    "Conflict",
    "ConstraintViolationError",
    "ContactCount",
    "ContactCreated",
    "ContactData",
    "ContactFound",
    "ContactList",
    "ContactRepository",
    "ContactService",
    "ContactUpdated",
    "Deleted",
    "Invalid",
    "InvalidArgumentError",
    "NoContacts",
    "NotFound",
    "RecordNotFoundError",
    "StorageError",
    "StorageFailure",
    "parse_contact_id",
]
