"""
Unit tests for the periodic overdue sweep.
"""

import asyncio

import pytest

from app.domain.models.invoice import InvoiceStatus
from app.infrastructure.repositories.invoice_repository import SQLAlchemyInvoiceRepository
from app.infrastructure.scheduling.overdue_sweeper import OverdueSweeper

from conftest import make_invoice


class TestOverdueSweeper:
    """Test cases for OverdueSweeper."""

    @pytest.fixture(autouse=True)
    def setup(self, session_factory, session):
        self.session = session
        self.repository = SQLAlchemyInvoiceRepository(session)
        late = make_invoice(due_in_days=-1, invoice_number="INV-2026-0001")
        current = make_invoice(due_in_days=10, invoice_number="INV-2026-0002")
        self.late = self.repository.save(late)
        self.current = self.repository.save(current)
        self.sweeper = OverdueSweeper(session_factory=session_factory, interval_seconds=0.01)

    def _status(self, invoice):
        # The sweep commits through another session
        self.session.expire_all()
        return self.repository.find_by_number(invoice.invoice_number, invoice.owner_id).status

    @pytest.mark.asyncio
    async def test_run_once(self):
        """Test one sweep marks past-due invoices and is idempotent."""
        assert await self.sweeper.run_once() == 1
        assert await self.sweeper.run_once() == 0

        assert self._status(self.late) == InvoiceStatus.OVERDUE
        assert self._status(self.current) == InvoiceStatus.PENDING

    @pytest.mark.asyncio
    async def test_start_and_stop(self):
        """Test the background task sweeps until stopped."""
        await self.sweeper.start()
        assert self.sweeper.is_running

        for _ in range(100):
            if self._status(self.late) == InvoiceStatus.OVERDUE:
                break
            await asyncio.sleep(0.01)

        await self.sweeper.stop()

        assert not self.sweeper.is_running
        assert self._status(self.late) == InvoiceStatus.OVERDUE

    @pytest.mark.asyncio
    async def test_failed_sweep_keeps_schedule(self):
        """Test an error in one run does not end the task."""
        def broken_session():
            raise RuntimeError("database unavailable")

        sweeper = OverdueSweeper(session_factory=broken_session, interval_seconds=0.01)
        await sweeper.start()
        await asyncio.sleep(0.05)

        assert sweeper.is_running
        await sweeper.stop()
