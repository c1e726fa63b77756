"""
Fire-and-forget SMS dispatch.

Each send runs as a detached asyncio task so a status update never waits
on, or fails because of, the messaging provider. Failed sends are written
to the dead letter queue for inspection.
"""

import asyncio
import logging
from typing import Optional, Set

from sqlalchemy.ext.asyncio import async_sessionmaker

from rapidtransit.app.core.config import settings
from rapidtransit.app.db.session import AsyncSessionLocal
from rapidtransit.app.models.dlq import DeadLetterQueue, DLQStatus
from rapidtransit.app.services.sms import SmsConfig, TextMessageSender

logger = logging.getLogger("rapidtransit.sms")

SEND_SMS_TASK = "send_sms"


class SmsDispatcher:

    def __init__(
        self,
        sender: TextMessageSender,
        session_factory: Optional[async_sessionmaker] = None,
    ):
        self.sender = sender
        self.session_factory = session_factory
        # Strong references; the event loop only keeps weak ones to tasks
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def dispatch(self, to_phone: str, message: str, parcel_id: Optional[int] = None) -> asyncio.Task:
        """Schedule one send and return immediately."""
        task = asyncio.create_task(self._deliver(to_phone, message, parcel_id))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        """Wait for every in-flight send to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _deliver(self, to_phone: str, message: str, parcel_id: Optional[int]) -> bool:
        error = "SMS provider rejected or skipped the message"
        try:
            delivered = await self.sender.send_text(to_phone, message)
        except Exception as exc:
            logger.exception("SMS sender raised for parcel %s", parcel_id)
            delivered = False
            error = f"{type(exc).__name__}: {exc}"

        if delivered:
            return True

        # Unconfigured sender already logged the skip; nothing to dead-letter
        if not getattr(self.sender, "enabled", True):
            return False

        logger.error("Failed to send SMS notification for parcel %s", parcel_id)
        await self._record_failure(to_phone, message, parcel_id, error)
        return False

    async def _record_failure(self, to_phone: str, message: str, parcel_id: Optional[int], error: str) -> None:
        if self.session_factory is None:
            return
        try:
            async with self.session_factory() as session:
                session.add(DeadLetterQueue(
                    task_name=SEND_SMS_TASK,
                    error_message=error,
                    payload={"to": to_phone, "parcel_id": parcel_id, "message": message},
                    status=DLQStatus.FAILED,
                ))
                await session.commit()
        except Exception:
            logger.exception("Could not record failed SMS for parcel %s", parcel_id)


_dispatcher: Optional[SmsDispatcher] = None


def get_sms_dispatcher() -> SmsDispatcher:
    """FastAPI dependency returning the process-wide dispatcher."""
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = SmsDispatcher(
            TextMessageSender(SmsConfig.from_settings(settings)),
            session_factory=AsyncSessionLocal,
        )
    return _dispatcher


async def drain_sms_dispatcher() -> None:
    """Let in-flight sends finish; called on application shutdown."""
    if _dispatcher is not None:
        await _dispatcher.drain()
