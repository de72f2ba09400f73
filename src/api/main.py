"""
FastAPI backend: contacts REST API.
Run with uvicorn: uvicorn api.main:app --reload
"""

import logging
import os
import threading
from pathlib import Path

from dotenv import load_dotenv

# Load .env from repo root (when run from repo root or from Docker)
for path in (
    Path(__file__).resolve().parent.parent.parent / ".env",
    Path.cwd() / ".env",
):
    if path.exists():
        load_dotenv(path)
        break

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Query, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from contactbook.application import (
    Conflict,
    ContactCount,
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
    StorageFailure,
)
from contactbook.domain import Contact
from contactbook.infrastructure import (
    InMemoryContactRepository,
    Neo4jContactRepository,
    SqlContactRepository,
    create_sql_engine,
    create_tables,
    ensure_contact_constraints,
)

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO",
)
logger = logging.getLogger(__name__)

STORE_SQL = "sql"
STORE_NEO4J = "neo4j"
STORE_MEMORY = "memory"
DEFAULT_DATABASE_URL = "sqlite:///./contacts.db"

# Status code per result type. Error results are answered with an empty body.
_STATUS_BY_RESULT = {
    ContactFound: 200,
    ContactList: 200,
    ContactCount: 200,
    ContactUpdated: 200,
    ContactCreated: 201,
    NoContacts: 204,
    Deleted: 204,
    Invalid: 400,
    NotFound: 404,
    Conflict: 409,
    StorageFailure: 500,
}


def _get_driver():
    from neo4j import GraphDatabase

    uri = os.environ.get("NEO4J_URI", "bolt://localhost:7687").strip()
    user = os.environ.get("NEO4J_USER", "neo4j").strip()
    password = os.environ.get("NEO4J_PASSWORD", "password").strip()
    return GraphDatabase.driver(uri, auth=(user, password))


def _build_repository(app: FastAPI) -> ContactRepository:
    """Create the store named by CONTACTS_STORE. Keeps its engine or driver on app.state.

    If setup fails, the half-built driver or engine is closed and not kept.
    """
    kind = os.environ.get("CONTACTS_STORE", STORE_SQL).strip().lower() or STORE_SQL
    if kind == STORE_MEMORY:
        logger.info("Using in-memory contact store")
        return InMemoryContactRepository()
    if kind == STORE_NEO4J:
        driver = _get_driver()
        try:
            ensure_contact_constraints(driver)
        except Exception:
            driver.close()
            raise
        app.state.driver = driver
        logger.info("Using Neo4j contact store")
        return Neo4jContactRepository(driver)
    if kind != STORE_SQL:
        raise ValueError(f"Unknown CONTACTS_STORE {kind!r}")
    url = os.environ.get("DATABASE_URL", DEFAULT_DATABASE_URL).strip() or DEFAULT_DATABASE_URL
    engine = create_sql_engine(url)
    try:
        create_tables(engine)
    except Exception:
        engine.dispose()
        raise
    app.state.engine = engine
    logger.info("Using SQL contact store (%s)", engine.url.get_backend_name())
    return SqlContactRepository(engine)


_service_lock = threading.Lock()


def _get_cached_service(app: FastAPI) -> ContactService:
    if getattr(app.state, "service", None) is None:
        with _service_lock:
            if getattr(app.state, "service", None) is None:
                app.state.service = ContactService(_build_repository(app))
    return app.state.service


def get_service(request: Request) -> ContactService:
    return _get_cached_service(request.app)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.service = None
    app.state.driver = None
    app.state.engine = None
    _get_cached_service(app)
    try:
        yield
    finally:
        if getattr(app.state, "driver", None) is not None:
            app.state.driver.close()
        if getattr(app.state, "engine", None) is not None:
            app.state.engine.dispose()
        app.state.service = None
        app.state.driver = None
        app.state.engine = None


app = FastAPI(title="Contacts API", lifespan=lifespan)


@app.exception_handler(RequestValidationError)
async def request_validation_error(request: Request, exc: RequestValidationError):
    logger.info("Rejected malformed request to %s: %s", request.url.path, exc.errors())
    return Response(status_code=400)


# --- REST: health ---


@app.get("/health")
def health():
    return {"status": "ok"}


# --- REST: contacts ---


class ContactBody(BaseModel):
    """Request body for create and update. Required fields are checked by the service."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    first_name: str | None = None
    last_name: str | None = None
    phone_number: str | None = None
    email: str | None = None
    address: str | None = None
    exists: bool | None = None

    def to_data(self) -> ContactData:
        return ContactData(
            first_name=self.first_name,
            last_name=self.last_name,
            phone_number=self.phone_number,
            email=self.email,
            address=self.address,
            exists=True if self.exists is None else self.exists,
        )


class ContactItem(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    first_name: str
    last_name: str
    phone_number: str
    email: str | None = None
    address: str | None = None
    exists: bool = True


def _contact_item(contact: Contact) -> dict:
    return ContactItem(
        id=contact.id,
        first_name=contact.first_name,
        last_name=contact.last_name,
        phone_number=contact.phone_number,
        email=contact.email,
        address=contact.address,
        exists=contact.exists,
    ).model_dump(by_alias=True)


def _respond(result) -> Response:
    """Map a service result to its HTTP response."""
    status_code = _STATUS_BY_RESULT[type(result)]
    if isinstance(result, ContactFound | ContactCreated | ContactUpdated):
        return JSONResponse(content=_contact_item(result.contact), status_code=status_code)
    if isinstance(result, ContactList):
        return JSONResponse(
            content=[_contact_item(c) for c in result.contacts],
            status_code=status_code,
        )
    if isinstance(result, ContactCount):
        return JSONResponse(content={"count": result.count}, status_code=status_code)
    if isinstance(result, Invalid):
        logger.info("Bad request: %s", result.reason)
    return Response(status_code=status_code)


@app.get("/api/contacts")
def list_contacts(
    phone_number: str | None = Query(None, alias="phoneNumber"),
    service: ContactService = Depends(get_service),
):
    return _respond(service.list_contacts(phone_number))


@app.get("/api/contacts/getByFirstName")
def get_contacts_by_first_name(
    first_name: str | None = Query(None, alias="firstName"),
    service: ContactService = Depends(get_service),
):
    return _respond(service.find_by_first_name(first_name))


@app.get("/api/contacts/published")
def list_published_contacts(service: ContactService = Depends(get_service)):
    return _respond(service.list_published())


@app.get("/api/contacts/count")
def count_contacts(service: ContactService = Depends(get_service)):
    return _respond(service.count_contacts())


@app.get("/api/contacts/{contact_id}")
def get_contact(contact_id: str, service: ContactService = Depends(get_service)):
    return _respond(service.get_contact(contact_id))


@app.post("/api/contacts")
def create_contact(
    body: ContactBody,
    service: ContactService = Depends(get_service),
):
    return _respond(service.create_contact(body.to_data()))


@app.put("/api/contacts/{contact_id}")
def update_contact(
    contact_id: str,
    body: ContactBody,
    service: ContactService = Depends(get_service),
):
    return _respond(service.update_contact(contact_id, body.to_data()))


@app.delete("/api/contacts/{contact_id}")
def delete_contact(contact_id: str, service: ContactService = Depends(get_service)):
    return _respond(service.delete_contact(contact_id))


@app.delete("/api/contacts")
def delete_all_contacts(service: ContactService = Depends(get_service)):
    return _respond(service.delete_all_contacts())
