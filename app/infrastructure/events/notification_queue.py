"""
Background delivery of quote and invoice notifications.
Requests only enqueue; a worker task started with the application sends them.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Tuple

from app.config import settings
from app.domain.models.base import DownstreamNotificationFailure
from app.domain.models.client import Client
from app.domain.models.invoice import Invoice
from app.domain.models.quote import Quote
from app.domain.services.notification_service import NotificationDispatcher
from app.infrastructure.email.email_service import get_email_service

logger = logging.getLogger(__name__)


@dataclass
class NotificationJob:
    """A pending call on the dispatcher."""
    name: str
    send: Callable[..., Awaitable[None]]
    args: Tuple[Any, ...]


class NotificationQueue:
    """
    Fire-and-forget wrapper around a NotificationDispatcher.
    Delivery failures are logged and never reach the caller.
    """

    def __init__(self, dispatcher: NotificationDispatcher, maxsize: int = 0):
        self.dispatcher = dispatcher
        self.maxsize = maxsize
        self._queue: Optional[asyncio.Queue] = None
        self._worker: Optional[asyncio.Task] = None
        self.delivered = 0
        self.failed = 0

    @property
    def queue(self) -> asyncio.Queue:
        if self._queue is None:
            self._queue = asyncio.Queue(maxsize=self.maxsize)
        return self._queue

    @property
    def is_running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    def submit_quote_notification(self, client: Client, quote: Quote) -> None:
        self._submit(
            NotificationJob(f"quote for client {client.id}", self.dispatcher.send_quote_notification, (client, quote))
        )

    def submit_invoice_notification(self, invoice: Invoice) -> None:
        self._submit(
            NotificationJob(f"invoice {invoice.invoice_number}", self.dispatcher.send_invoice_notification, (invoice,))
        )

    def _submit(self, job: NotificationJob) -> None:
        try:
            self.queue.put_nowait(job)
            logger.debug(f"Queued notification: {job.name}")
        except asyncio.QueueFull:
            self.failed += 1
            logger.error(f"Notification queue full, dropping {job.name}")

    async def start(self) -> None:
        """Start the worker on the running event loop."""
        if self.is_running:
            return

        # A queue may only wait on the loop it first waited on; rebuild it and keep pending jobs
        pending = []
        while self._queue is not None and not self._queue.empty():
            pending.append(self._queue.get_nowait())
        self._queue = asyncio.Queue(maxsize=self.maxsize)
        for job in pending:
            self._queue.put_nowait(job)

        self._worker = asyncio.create_task(self._run(), name="notification-worker")
        logger.info("Notification worker started")

    async def stop(self) -> None:
        """Deliver what is queued, then stop the worker."""
        await self.drain()
        if self._worker is not None:
            self._worker.cancel()
            try:
                await self._worker
            except asyncio.CancelledError:
                pass
            self._worker = None
        logger.info("Notification worker stopped")

    async def drain(self) -> None:
        """Wait until every queued notification has been attempted."""
        if self.is_running:
            await self.queue.join()
            return

        while not self.queue.empty():
            job = self.queue.get_nowait()
            try:
                await self._deliver(job)
            finally:
                self.queue.task_done()

    async def _run(self) -> None:
        while True:
            job = await self.queue.get()
            try:
                await self._deliver(job)
            finally:
                self.queue.task_done()

    async def _deliver(self, job: NotificationJob) -> None:
        try:
            await job.send(*job.args)
            self.delivered += 1
            logger.info(f"Notification sent: {job.name}")
        except DownstreamNotificationFailure as e:
            self.failed += 1
            logger.error(f"Notification failed for {job.name}: {e.message}")
        except Exception as e:
            self.failed += 1
            logger.error(f"Unexpected error sending {job.name}: {str(e)}", exc_info=True)


_notification_queue: Optional[NotificationQueue] = None


def get_notification_queue() -> NotificationQueue:
    """Get the application-wide notification queue."""
    global _notification_queue
    if _notification_queue is None:
        _notification_queue = NotificationQueue(get_email_service(), maxsize=settings.notification_queue_size)
    return _notification_queue
