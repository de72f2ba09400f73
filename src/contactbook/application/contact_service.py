"""Contact create, read, update, delete and search. Stateless; one store per service."""

import dataclasses
import logging

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
from contactbook.domain import Contact

logger = logging.getLogger(__name__)


def parse_contact_id(raw: int | str | None) -> int | None:
    """Return raw as a positive int, or None when it is not one.

    Strings must be plain ASCII digits: no sign, no underscores, no surrounding space.
    """
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, str) and raw.isascii() and raw.isdigit():
        value = int(raw)
    else:
        return None
    return value if value > 0 else None


def _build_contact(data: ContactData, contact_id: int | None = None) -> Contact:
    """Build a Contact from client data. Raises ValueError on missing fields."""
    return Contact(
        id=contact_id,
        first_name=data.first_name,
        last_name=data.last_name,
        phone_number=data.phone_number,
        email=data.email,
        address=data.address,
        exists=data.exists,
    )


def _listing(contacts: list[Contact]) -> ContactList | NoContacts:
    if not contacts:
        return NoContacts()
    return ContactList(contacts=contacts)


class ContactService:
    """Request-facing contact operations. Every method returns a result value."""

    def __init__(self, repository: ContactRepository) -> None:
        self._repo = repository

    def list_contacts(
        self, phone_number: str | None = None
    ) -> ContactList | NoContacts | StorageFailure:
        """Return all contacts, or those whose phone number contains phone_number."""
        try:
            if phone_number is None:
                contacts = self._repo.list_all()
            else:
                contacts = self._repo.find_by_phone_number_containing(phone_number)
        except StorageError as e:
            logger.exception("Listing contacts failed")
            return StorageFailure(reason=str(e))
        return _listing(contacts)

    def get_contact(
        self, contact_id: int | str
    ) -> ContactFound | NotFound | Invalid | StorageFailure:
        """Return a contact by id."""
        cid = parse_contact_id(contact_id)
        if cid is None:
            return Invalid(reason="Contact id must be a positive integer.")
        try:
            contact = self._repo.get_by_id(cid)
        except InvalidArgumentError as e:
            return Invalid(reason=str(e))
        except StorageError as e:
            logger.exception("Loading contact %s failed", cid)
            return StorageFailure(reason=str(e))
        if contact is None:
            return NotFound(contact_id=cid)
        return ContactFound(contact=contact)

    def find_by_first_name(
        self, first_name: str | None
    ) -> ContactList | NoContacts | StorageFailure:
        """Return contacts with exactly this first name. A blank name matches nothing."""
        if not first_name or not first_name.strip():
            return NoContacts()
        try:
            contacts = self._repo.find_by_first_name(first_name)
        except StorageError as e:
            logger.exception("Searching contacts by first name failed")
            return StorageFailure(reason=str(e))
        return _listing(contacts)

    def list_published(self) -> ContactList | NoContacts | StorageFailure:
        """Return contacts whose exists flag is set."""
        try:
            contacts = self._repo.find_by_exists(True)
        except StorageError as e:
            logger.exception("Listing published contacts failed")
            return StorageFailure(reason=str(e))
        return _listing(contacts)

    def count_contacts(self) -> ContactCount | StorageFailure:
        try:
            return ContactCount(count=self._repo.count())
        except StorageError as e:
            logger.exception("Counting contacts failed")
            return StorageFailure(reason=str(e))

    def create_contact(
        self, data: ContactData
    ) -> ContactCreated | Invalid | Conflict | StorageFailure:
        """Validate, reject overlapping phone numbers, then store a new contact."""
        try:
            contact = _build_contact(data)
        except ValueError as e:
            return Invalid(reason=str(e))

        try:
            existing = self._repo.find_by_phone_number_overlapping(contact.phone_number)
            if existing:
                logger.info(
                    "Phone number %r conflicts with contacts %s",
                    contact.phone_number,
                    [c.id for c in existing],
                )
                return Conflict(
                    phone_number=contact.phone_number,
                    contact_ids=[c.id for c in existing],
                )
            created = self._repo.save(contact)
        except (InvalidArgumentError, ConstraintViolationError) as e:
            return Invalid(reason=str(e))
        except StorageError as e:
            logger.exception("Creating contact failed")
            return StorageFailure(reason=str(e))
        return ContactCreated(contact=created)

    def update_contact(
        self, contact_id: int | str, data: ContactData
    ) -> ContactUpdated | Invalid | NotFound | StorageFailure:
        """Replace every mutable field of an existing contact. The id never changes."""
        cid = parse_contact_id(contact_id)
        if cid is None:
            return Invalid(reason="Contact id must be a positive integer.")
        try:
            replacement = _build_contact(data, contact_id=cid)
        except ValueError as e:
            return Invalid(reason=str(e))

        try:
            current = self._repo.get_by_id(cid)
            if current is None:
                return NotFound(contact_id=cid)

            others = [
                c
                for c in self._repo.find_by_phone_number_overlapping(replacement.phone_number)
                if c.id != cid
            ]
            if others:
                return Invalid(
                    reason=f"Phone number {replacement.phone_number!r} is already in use."
                )

            updated = self._repo.save(
                dataclasses.replace(
                    current,
                    first_name=replacement.first_name,
                    last_name=replacement.last_name,
                    phone_number=replacement.phone_number,
                    email=replacement.email,
                    address=replacement.address,
                    exists=replacement.exists,
                )
            )
        except RecordNotFoundError:
            return NotFound(contact_id=cid)
        except (InvalidArgumentError, ConstraintViolationError) as e:
            return Invalid(reason=str(e))
        except StorageError as e:
            logger.exception("Updating contact %s failed", cid)
            return StorageFailure(reason=str(e))
        return ContactUpdated(contact=updated)

    def delete_contact(
        self, contact_id: int | str
    ) -> Deleted | Invalid | NotFound | StorageFailure:
        cid = parse_contact_id(contact_id)
        if cid is None:
            return Invalid(reason="Contact id must be a positive integer.")
        try:
            self._repo.delete_by_id(cid)
        except RecordNotFoundError:
            return NotFound(contact_id=cid)
        except InvalidArgumentError as e:
            return Invalid(reason=str(e))
        except StorageError as e:
            logger.exception("Deleting contact %s failed", cid)
            return StorageFailure(reason=str(e))
        return Deleted(contact_id=cid)

    def delete_all_contacts(self) -> Deleted | StorageFailure:
        try:
            self._repo.delete_all()
        except StorageError as e:
            logger.exception("Deleting all contacts failed")
            return StorageFailure(reason=str(e))
        return Deleted()
