"""Domain entities: Contact."""

from dataclasses import dataclass

# Fields a Contact cannot exist without.
REQUIRED_FIELDS = ("first_name", "last_name", "phone_number")


@dataclass(frozen=True)
class Contact:
    """
    A person's contact details.
    id is None until the store assigns one; once assigned it never changes.
    """

    first_name: str
    last_name: str
    phone_number: str
    email: str | None = None
    address: str | None = None
    exists: bool = True
    id: int | None = None

    def __post_init__(self):
        for name in REQUIRED_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"Contact {name} must be non-empty.")

        if self.id is not None and self.id <= 0:
            raise ValueError("Contact id must be a positive integer.")

    def overlaps(self, phone_number: str) -> bool:
        """True when either phone number contains the other."""
        return phone_number in self.phone_number or self.phone_number in phone_number
