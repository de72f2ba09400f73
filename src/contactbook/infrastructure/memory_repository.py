"""In-memory implementation of ContactRepository (no DB)."""

import dataclasses
import itertools
import threading

from contactbook.application.ports import RecordNotFoundError
from contactbook.domain import Contact


class InMemoryContactRepository:
    """Stores contacts in a dict keyed by id. Ids come from a counter and are never reused."""

    def __init__(self) -> None:
        self._by_id: dict[int, Contact] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def _snapshot(self) -> list[Contact]:
        """Contacts ordered by id, copied under the lock."""
        with self._lock:
            contacts = list(self._by_id.values())
        return sorted(contacts, key=lambda c: c.id)

    def list_all(self) -> list[Contact]:
        return self._snapshot()

    def get_by_id(self, contact_id: int) -> Contact | None:
        with self._lock:
            return self._by_id.get(contact_id)

    def find_by_first_name(self, first_name: str) -> list[Contact]:
        return [c for c in self._snapshot() if c.first_name == first_name]

    def find_by_phone_number_containing(self, fragment: str) -> list[Contact]:
        return [c for c in self._snapshot() if fragment in c.phone_number]

    def find_by_phone_number_overlapping(self, phone_number: str) -> list[Contact]:
        return [c for c in self._snapshot() if c.overlaps(phone_number)]

    def find_by_exists(self, exists: bool) -> list[Contact]:
        return [c for c in self._snapshot() if c.exists is exists]

    def save(self, contact: Contact) -> Contact:
        with self._lock:
            if contact.id is None:
                contact = dataclasses.replace(contact, id=next(self._ids))
            elif contact.id not in self._by_id:
                raise RecordNotFoundError(f"No contact with id {contact.id}")
            self._by_id[contact.id] = contact
        return contact

    def delete_by_id(self, contact_id: int) -> None:
        with self._lock:
            if self._by_id.pop(contact_id, None) is None:
                raise RecordNotFoundError(f"No contact with id {contact_id}")

    def delete_all(self) -> None:
        with self._lock:
            self._by_id.clear()

    def count(self) -> int:
        with self._lock:
            return len(self._by_id)
