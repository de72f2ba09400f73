"""Application ports (interfaces). Implemented by infrastructure adapters."""

from typing import Protocol

from contactbook.domain import Contact


class StorageError(Exception):
    """The datastore could not complete the operation."""


class RecordNotFoundError(StorageError):
    """No record exists for the given id."""


class ConstraintViolationError(StorageError):
    """The write violates a uniqueness or integrity constraint of the store."""


class InvalidArgumentError(StorageError):
    """The store rejected an argument as malformed."""


class ContactRepository(Protocol):
    """Persists and queries Contact records.

    Adapters raise only StorageError (or a subclass); driver exceptions are
    translated before they leave the adapter.
    """

    def list_all(self) -> list[Contact]:
        """Return all contacts ordered by id."""
        ...

    def get_by_id(self, contact_id: int) -> Contact | None:
        """Return the contact with the given id, or None."""
        ...

    def find_by_first_name(self, first_name: str) -> list[Contact]:
        """Return contacts whose first name equals first_name exactly."""
        ...

    def find_by_phone_number_containing(self, fragment: str) -> list[Contact]:
        """Return contacts whose phone number contains fragment."""
        ...

    def find_by_phone_number_overlapping(self, phone_number: str) -> list[Contact]:
        """Return contacts whose phone number contains, or is contained in, phone_number."""
        ...

    def find_by_exists(self, exists: bool) -> list[Contact]:
        """Return contacts whose exists flag equals the given value."""
        ...

    def save(self, contact: Contact) -> Contact:
        """Insert when contact.id is None, else update. Returns the stored record."""
        ...

    def delete_by_id(self, contact_id: int) -> None:
        """Delete one contact. Raises RecordNotFoundError when absent."""
        ...

    def delete_all(self) -> None:
        """Delete every contact."""
        ...

    def count(self) -> int:
        """Return the number of stored contacts."""
        ...
