"""Integration tests for Neo4jContactRepository. Require Docker
(testcontainers); skipped when no container can be started."""

import pytest

from contactbook.application import (
    Conflict,
    ContactData,
    ContactService,
    Invalid,
    RecordNotFoundError,
)
from contactbook.application.ports import ConstraintViolationError, InvalidArgumentError
from contactbook.domain import Contact
from contactbook.infrastructure import Neo4jContactRepository, ensure_contact_constraints


@pytest.fixture(scope="session")
def neo4j_driver():
    from testcontainers.neo4j import Neo4jContainer

    try:
        container = Neo4jContainer()
        container.start()
    except Exception as e:
        pytest.skip(f"Neo4j container unavailable: {e}")
    driver = container.get_driver()
    try:
        ensure_contact_constraints(driver)
        yield driver
    finally:
        driver.close()
        container.stop()


@pytest.fixture
def clean_neo4j(neo4j_driver):
    """Clear the graph before each test so tests are independent."""
    with neo4j_driver.session() as session:
        session.run("MATCH (n) DETACH DELETE n")
    yield neo4j_driver


def _contact(first_name: str = "Alan", phone_number: str = "555-555-1234", **kw) -> Contact:
    return Contact(first_name=first_name, last_name="Wang", phone_number=phone_number, **kw)


def test_save_get_by_id_list_all(clean_neo4j):
    repo = Neo4jContactRepository(clean_neo4j)
    first = repo.save(_contact("First", "111", email="first@example.com"))
    second = repo.save(_contact("Second", "222"))

    assert first.id == 1
    assert second.id == 2
    assert repo.get_by_id(first.id) == first
    assert repo.get_by_id(99) is None
    assert [c.first_name for c in repo.list_all()] == ["First", "Second"]


def test_update_and_delete(clean_neo4j):
    repo = Neo4jContactRepository(clean_neo4j)
    saved = repo.save(_contact())
    changed = Contact(
        id=saved.id, first_name="Alan", last_name="Smith", phone_number="555-9999", exists=False
    )
    assert repo.save(changed) == changed
    assert repo.find_by_exists(False) == [changed]

    repo.delete_by_id(saved.id)
    assert repo.count() == 0
    with pytest.raises(RecordNotFoundError):
        repo.delete_by_id(saved.id)
    with pytest.raises(RecordNotFoundError):
        repo.save(changed)


def test_phone_number_queries(clean_neo4j):
    repo = Neo4jContactRepository(clean_neo4j)
    repo.save(_contact("Long", "555-1234"))
    repo.save(_contact("Short", "999"))

    assert [c.first_name for c in repo.find_by_phone_number_containing("1234")] == ["Long"]
    assert [c.first_name for c in repo.find_by_phone_number_overlapping("555-123")] == ["Long"]
    assert [c.first_name for c in repo.find_by_phone_number_overlapping("0999")] == ["Short"]
    assert [c.first_name for c in repo.find_by_first_name("Short")] == ["Short"]


def test_phone_number_constraint(clean_neo4j):
    repo = Neo4jContactRepository(clean_neo4j)
    repo.save(_contact("A", "111"))
    with pytest.raises(ConstraintViolationError):
        repo.save(_contact("B", "111"))


def test_service_conflict_on_neo4j(clean_neo4j):
    service = ContactService(Neo4jContactRepository(clean_neo4j))
    data = ContactData(first_name="John", last_name="Doe", phone_number="555-1234")
    service.create_contact(data)
    result = service.create_contact(
        ContactData(first_name="Jane", last_name="Doe", phone_number="555-123")
    )
    assert isinstance(result, Conflict)
    service.delete_all_contacts()
    assert Neo4jContactRepository(clean_neo4j).count() == 0


class _UnpackableParamsSession:
    """Session whose run() fails the way the Bolt packer does for an int beyond 64 bits."""

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def run(self, query, **params):
        raise OverflowError("Integer 18446744073709551616 out of range")


class _UnpackableParamsDriver:
    def session(self, **kwargs):
        return _UnpackableParamsSession()


def test_out_of_range_id_is_invalid_argument():
    repo = Neo4jContactRepository(_UnpackableParamsDriver())
    with pytest.raises(InvalidArgumentError):
        repo.get_by_id(2**64)
    with pytest.raises(InvalidArgumentError):
        repo.delete_by_id(2**64)

    service = ContactService(repo)
    assert isinstance(service.get_contact("18446744073709551616"), Invalid)
    assert isinstance(service.delete_contact("18446744073709551616"), Invalid)
