"""Infrastructure layer: concrete implementations of application ports."""

from contactbook.infrastructure.memory_repository import InMemoryContactRepository
from contactbook.infrastructure.persistence.neo4j_repository import (
    Neo4jContactRepository,
    ensure_contact_constraints,
)
from contactbook.infrastructure.persistence.sql_repository import (
    ContactTable,
    SqlContactRepository,
    create_sql_engine,
    create_tables,
)

__all__ = [
    "ContactTable",
    "InMemoryContactRepository",
    "Neo4jContactRepository",
    "SqlContactRepository",
    "create_sql_engine",
    "create_tables",
    "ensure_contact_constraints",
]
