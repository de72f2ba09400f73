"""Domain layer: entities and value objects. No dependencies on outer layers."""

from contactbook.domain.entities import REQUIRED_FIELDS, Contact

__all__ = ["Contact", "REQUIRED_FIELDS"]
