"""Input data and operation results for ContactService."""

from dataclasses import dataclass, field

from contactbook.domain import Contact


@dataclass(frozen=True)
class ContactData:
    """Contact fields as received from a client. Nothing validated yet."""

    first_name: str | None = None
    last_name: str | None = None
    phone_number: str | None = None
    email: str | None = None
    address: str | None = None
    exists: bool = True


@dataclass(frozen=True)
class ContactFound:
    contact: Contact


@dataclass(frozen=True)
class ContactList:
    contacts: list[Contact] = field(default_factory=list)


@dataclass(frozen=True)
class NoContacts:
    """A query matched nothing. Not an error."""


@dataclass(frozen=True)
class ContactCreated:
    contact: Contact


@dataclass(frozen=True)
class ContactUpdated:
    contact: Contact


@dataclass(frozen=True)
class Deleted:
    contact_id: int | None = None


@dataclass(frozen=True)
class ContactCount:
    count: int


@dataclass(frozen=True)
class Invalid:
    reason: str


@dataclass(frozen=True)
class Conflict:
    """The phone number overlaps the phone number of existing contacts."""

    phone_number: str
    contact_ids: list[int] = field(default_factory=list)


@dataclass(frozen=True)
class NotFound:
    contact_id: int


@dataclass(frozen=True)
class StorageFailure:
    """The store failed. reason is for logs only, never for clients."""

    reason: str = ""
