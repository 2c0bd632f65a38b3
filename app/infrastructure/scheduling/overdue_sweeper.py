"""
Periodic overdue sweep.
Runs inside the API process; manage_db.py exposes the same sweep for an external cron.
"""

import asyncio
import logging
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.orm import Session, sessionmaker

from app.config import settings
from app.application.use_cases.invoice_use_cases import SweepOverdueInvoicesUseCase
from app.domain.models.base import utcnow
from app.infrastructure.db.database import SessionLocal
from app.infrastructure.repositories.invoice_repository import SQLAlchemyInvoiceRepository

logger = logging.getLogger(__name__)


class OverdueSweeper:
    """Calls the overdue sweep every ``interval_seconds`` until stopped."""

    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        interval_seconds: float = 3600,
        clock: Callable[[], datetime] = utcnow
    ):
        self.session_factory = session_factory
        self.interval_seconds = interval_seconds
        self.clock = clock
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self, now: Optional[datetime] = None) -> int:
        """One sweep in a fresh session. Returns the number of invoices changed."""
        session = self.session_factory()
        try:
            use_case = SweepOverdueInvoicesUseCase(SQLAlchemyInvoiceRepository(session), clock=self.clock)
            return await use_case.execute(now)
        finally:
            session.close()

    async def start(self) -> None:
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run(), name="overdue-sweeper")
        logger.info(f"Overdue sweeper started (every {self.interval_seconds}s)")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Overdue sweeper stopped")

    async def _run(self) -> None:
        while True:
            try:
                await self.run_once()
            except Exception as e:
                # Keep the schedule alive; the next run retries
                logger.error(f"Overdue sweep failed: {str(e)}", exc_info=True)
            await asyncio.sleep(self.interval_seconds)


def create_overdue_sweeper(session_factory: Optional[sessionmaker] = None) -> OverdueSweeper:
    """Build the sweeper from settings."""
    return OverdueSweeper(
        session_factory=session_factory or SessionLocal,
        interval_seconds=settings.overdue_sweep_interval_seconds
    )
