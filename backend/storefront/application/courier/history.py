import asyncio
import logging
from typing import Dict, Optional

from storefront.application.checkout.collaborators import CourierHistorySource
from storefront.domain.phone import normalize_phone
from storefront.domain.risk import CourierHistoryRecord

logger = logging.getLogger(__name__)

LOCAL_PHONE_LENGTH = 11


class CourierHistoryCache:
    """
    Per-process courier history keyed by normalized phone.

    Entries are written once and never replaced or evicted; history is
    treated as append-only for the lifetime of the process.
    """

    def __init__(self):
        self._records: Dict[str, CourierHistoryRecord] = {}

    def get(self, phone: str) -> Optional[CourierHistoryRecord]:
        return self._records.get(phone)

    def put(self, phone: str, record: CourierHistoryRecord) -> CourierHistoryRecord:
        return self._records.setdefault(phone, record)

    def __contains__(self, phone: str) -> bool:
        return phone in self._records

    def __len__(self) -> int:
        return len(self._records)


class CourierHistoryService:
    def __init__(self, source: CourierHistorySource, cache: Optional[CourierHistoryCache] = None):
        self.source = source
        self.cache = cache if cache is not None else CourierHistoryCache()
        self._inflight: Dict[str, asyncio.Task] = {}

    async def get_history(self, phone: str) -> Optional[CourierHistoryRecord]:
        """
        Cached lookup; None when the number is malformed or the source fails.

        Callers on the same event loop share one in-flight fetch per number.
        Cancelling a caller does not cancel the shared fetch.
        """
        normalized = normalize_phone(phone)
        if len(normalized) != LOCAL_PHONE_LENGTH:
            return None

        cached = self.cache.get(normalized)
        if cached is not None:
            return cached

        loop = asyncio.get_running_loop()
        task = self._inflight.get(normalized)
        if task is None or task.done() or task.get_loop() is not loop:
            task = loop.create_task(self._fetch(normalized))
            self._inflight[normalized] = task

        return await asyncio.shield(task)

    async def _fetch(self, phone: str) -> Optional[CourierHistoryRecord]:
        try:
            record = await self.source.fetch(phone)
        except Exception:
            logger.warning("Courier history lookup failed for %s", phone, exc_info=True)
            return None
        finally:
            if self._inflight.get(phone) is asyncio.current_task():
                del self._inflight[phone]

        if record is None:
            logger.info("No courier history available for %s", phone)
            return None
        return self.cache.put(phone, record)
