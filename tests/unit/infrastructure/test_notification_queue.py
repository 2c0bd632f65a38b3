"""
Unit tests for the background notification queue.
"""

import asyncio

import pytest

from app.domain.models.quote import Quote, QuoteItem
from app.infrastructure.events.notification_queue import NotificationQueue

from conftest import FakeDispatcher, make_client, make_invoice


class ExplodingDispatcher(FakeDispatcher):
    async def send_invoice_notification(self, invoice):
        raise RuntimeError("template missing")


class TestNotificationQueue:
    """Test cases for NotificationQueue."""

    def setup_method(self):
        """Set up test fixtures."""
        self.dispatcher = FakeDispatcher()
        self.queue = NotificationQueue(self.dispatcher)
        self.invoice = make_invoice(invoice_number="INV-2026-0001")

    @pytest.mark.asyncio
    async def test_submit_does_not_send(self):
        """Test submitting only enqueues."""
        self.queue.submit_invoice_notification(self.invoice)

        assert self.dispatcher.invoices == []
        assert self.queue.queue.qsize() == 1

    @pytest.mark.asyncio
    async def test_drain_without_worker(self):
        """Test draining delivers queued jobs in order."""
        client = make_client()
        client.attach_quote(Quote.create([QuoteItem("Design", 100000)]))
        self.queue.submit_invoice_notification(self.invoice)
        self.queue.submit_quote_notification(client, client.quote)

        await self.queue.drain()

        assert self.dispatcher.invoices == [self.invoice]
        assert len(self.dispatcher.quotes) == 1
        assert self.queue.delivered == 2
        assert self.queue.failed == 0

    @pytest.mark.asyncio
    async def test_worker_delivers(self):
        """Test the started worker sends queued notifications."""
        await self.queue.start()
        assert self.queue.is_running

        self.queue.submit_invoice_notification(self.invoice)
        await self.queue.stop()

        assert self.dispatcher.invoices == [self.invoice]
        assert not self.queue.is_running

    @pytest.mark.asyncio
    async def test_jobs_queued_before_start_are_kept(self):
        """Test jobs submitted before the worker starts are still delivered."""
        self.queue.submit_invoice_notification(self.invoice)

        await self.queue.start()
        await self.queue.stop()

        assert self.dispatcher.invoices == [self.invoice]

    @pytest.mark.asyncio
    async def test_delivery_failure_is_counted(self):
        """Test downstream failures are logged and counted, never raised."""
        queue = NotificationQueue(FakeDispatcher(fail=True))
        queue.submit_invoice_notification(self.invoice)

        await queue.drain()

        assert queue.failed == 1
        assert queue.delivered == 0

    @pytest.mark.asyncio
    async def test_unexpected_error_is_counted(self):
        """Test any other sender error does not stop the worker."""
        queue = NotificationQueue(ExplodingDispatcher())
        await queue.start()

        queue.submit_invoice_notification(self.invoice)
        queue.submit_invoice_notification(self.invoice)
        await queue.drain()

        assert queue.failed == 2
        assert queue.is_running
        await queue.stop()

    @pytest.mark.asyncio
    async def test_full_queue_drops(self):
        """Test a bounded queue drops jobs instead of blocking the request."""
        queue = NotificationQueue(self.dispatcher, maxsize=1)

        queue.submit_invoice_notification(self.invoice)
        queue.submit_invoice_notification(self.invoice)

        assert queue.failed == 1
        assert queue.queue.qsize() == 1

    @pytest.mark.asyncio
    async def test_stop_without_start(self):
        """Test stopping an idle queue is harmless."""
        await self.queue.stop()
        await asyncio.sleep(0)
        assert not self.queue.is_running
