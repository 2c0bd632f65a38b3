"""
Integration tests for converting one quote from parallel requests.
"""

import asyncio
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import Mock

from app.application.dto.client_dto import ConvertQuoteRequestDTO, CreateQuoteRequestDTO, QuoteItemRequestDTO
from app.application.use_cases.invoice_use_cases import CreateInvoiceUseCase
from app.application.use_cases.quote_use_cases import ConvertQuoteToInvoiceUseCase, CreateQuoteUseCase
from app.domain.models.base import DomainException
from app.domain.services.numbering_service import InvoiceNumberGenerator
from app.infrastructure.repositories.client_repository import SQLAlchemyClientRepository
from app.infrastructure.repositories.invoice_repository import SQLAlchemyInvoiceRepository
from app.infrastructure.repositories.invoice_sequence_repository import SQLAlchemyInvoiceSequenceRepository

from conftest import OWNER_ID, make_client


class TestConcurrentQuoteConversion:
    """Test cases for billing the same quote more than once at a time."""

    def test_parallel_conversions_bill_once(self, session_factory, session):
        """Test only one of several simultaneous conversions creates an invoice."""
        clients = SQLAlchemyClientRepository(session)
        client = clients.save(make_client())
        asyncio.run(CreateQuoteUseCase(clients, Mock()).execute(
            OWNER_ID, client.id, CreateQuoteRequestDTO(items=[QuoteItemRequestDTO(name="Design", price="1000")])
        ))

        def convert(_):
            worker_session = session_factory()
            try:
                use_case = ConvertQuoteToInvoiceUseCase(
                    SQLAlchemyClientRepository(worker_session),
                    CreateInvoiceUseCase(
                        SQLAlchemyInvoiceRepository(worker_session),
                        InvoiceNumberGenerator(SQLAlchemyInvoiceSequenceRepository(worker_session)),
                        Mock()
                    )
                )
                try:
                    return asyncio.run(use_case.execute(OWNER_ID, client.id, ConvertQuoteRequestDTO()))
                except DomainException:
                    return None
            finally:
                worker_session.close()

        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(convert, range(4)))

        converted = [invoice for invoice in results if invoice is not None]
        assert len(converted) == 1

        session.expire_all()
        invoices = SQLAlchemyInvoiceRepository(session).find_by_owner_id(OWNER_ID)
        assert [i.invoice_number for i in invoices] == [converted[0].invoice_number]

        quote = clients.find_by_id(client.id, OWNER_ID).quote
        assert quote.invoice_generated is True
        assert quote.invoice_id == converted[0].invoice_number
