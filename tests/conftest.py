"""
Shared fixtures: a throwaway SQLite database per test, fake collaborators,
and an API client authenticated with a test token.
"""

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app.domain.models.base import DownstreamNotificationFailure, UpstreamRenderError, utcnow
from app.domain.models.client import Client
from app.domain.models.invoice import Invoice, InvoiceLineItem
from app.domain.services.document_renderer import DocumentRenderer
from app.domain.services.notification_service import NotificationDispatcher
from app.domain.services.numbering_service import InvoiceNumberGenerator
from app.infrastructure.auth.jwt_handler import JWTHandler
from app.infrastructure.db.database import build_engine, drop_db, get_db, init_db
from app.infrastructure.events.notification_queue import NotificationQueue, get_notification_queue
from app.infrastructure.pdf.pdf_service import get_document_renderer
from app.infrastructure.repositories.client_repository import SQLAlchemyClientRepository
from app.infrastructure.repositories.invoice_repository import SQLAlchemyInvoiceRepository
from app.infrastructure.repositories.invoice_sequence_repository import SQLAlchemyInvoiceSequenceRepository


OWNER_ID = "user-1"
OTHER_OWNER_ID = "user-2"


class FakeDispatcher(NotificationDispatcher):
    """Records notifications; raises DownstreamNotificationFailure when ``fail`` is set."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.quotes = []
        self.invoices = []

    async def send_quote_notification(self, client, quote):
        if self.fail:
            raise DownstreamNotificationFailure("SMTP unavailable")
        self.quotes.append((client, quote))

    async def send_invoice_notification(self, invoice):
        if self.fail:
            raise DownstreamNotificationFailure("SMTP unavailable")
        self.invoices.append(invoice)


class FakeRenderer(DocumentRenderer):
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls = []

    def generate_invoice_pdf(self, invoice, issuing_user):
        if self.fail:
            raise UpstreamRenderError(f"Could not render invoice {invoice.invoice_number}")
        self.calls.append((invoice.invoice_number, issuing_user.user_id))
        return b"%PDF-1.7 fake " + invoice.invoice_number.encode()


def make_invoice(owner_id: str = OWNER_ID, due_in_days: int = 30, invoice_number: str = "", **overrides) -> Invoice:
    """An unsaved, valid invoice. The number is normally assigned on save."""
    fields = dict(
        owner_id=owner_id,
        client_name="Ada Lovelace",
        company_name="Analytical Engines Ltd",
        email="ada@example.com",
        phone="+44 20 7946 0000",
        items=[InvoiceLineItem("Design", 2, 10000), InvoiceLineItem("Hosting", 1, 5000)],
        due_date=utcnow() + timedelta(days=due_in_days),
    )
    fields.update(overrides)
    invoice = Invoice.create(**fields)
    invoice.invoice_number = invoice_number
    return invoice


def make_client(owner_id: str = OWNER_ID, **overrides) -> Client:
    fields = dict(
        owner_id=owner_id,
        company_name="Analytical Engines Ltd",
        client_name="Ada Lovelace",
        email="Ada@Example.com",
        phone="+44 20 7946 0000",
    )
    fields.update(overrides)
    return Client.create(**fields)


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'test.db'}")
    init_db(engine)
    yield engine
    drop_db(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client_repository(session):
    return SQLAlchemyClientRepository(session)


@pytest.fixture
def invoice_repository(session):
    return SQLAlchemyInvoiceRepository(session)


@pytest.fixture
def number_generator(session):
    return InvoiceNumberGenerator(SQLAlchemyInvoiceSequenceRepository(session))


@pytest.fixture
def dispatcher():
    return FakeDispatcher()


@pytest.fixture
def notification_queue(dispatcher):
    return NotificationQueue(dispatcher)


@pytest.fixture
def renderer():
    return FakeRenderer()


@pytest.fixture
def auth_headers():
    token = JWTHandler().generate_test_token(OWNER_ID, name="Test User", email="owner@example.com")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_auth_headers():
    token = JWTHandler().generate_test_token(OTHER_OWNER_ID, name="Someone Else")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def api_client(session_factory, notification_queue, renderer):
    """TestClient against the real app with the database and collaborators swapped."""
    from app.main import app

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notification_queue] = lambda: notification_queue
    app.dependency_overrides[get_document_renderer] = lambda: renderer

    # Not used as a context manager: the lifespan (workers, init_db) stays off
    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def invoice_factory():
    return make_invoice


@pytest.fixture
def client_factory():
    return make_client
