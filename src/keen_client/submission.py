"""Submission pipeline – single-event delivery and cache draining."""
from __future__ import annotations

from typing import Callable

from keen_client.errors import CacheSubmissionError, DeliveryError, NotConfiguredError, TransportError
from keen_client.events import CachedEvent, EventCache
from keen_client.observability import LogEvent, get_logger
from keen_client.transport import Transport, check_response

logger = get_logger(__name__)

ADD_EVENT = "AddEvent"


class SubmissionPipeline:
    """Delivers events through a :class:`Transport`.

    ``credential`` is called at the start of every send or drain so that
    a missing write key fails before any record leaves the cache.
    """

    def __init__(
        self,
        transport: Transport,
        credential: Callable[[], str],
        cache: EventCache | None = None,
    ) -> None:
        self._transport = transport
        self._credential = credential
        self._cache = cache

    @property
    def cache(self) -> EventCache | None:
        return self._cache

    async def deliver(self, event: CachedEvent, credential: str) -> DeliveryError | None:
        """Send *event* once and return its failure, if any. Never raises."""
        try:
            response = await self._transport.post(event.destination, event.as_dict(), credential)
        except DeliveryError as exc:
            exc.with_collection(event.collection)
            return exc
        except Exception as exc:  # noqa: BLE001
            return TransportError(f"{ADD_EVENT} failed: {exc!r}", collection=event.collection, cause=exc)
        return check_response(response, ADD_EVENT, collection=event.collection)

    async def send(self, event: CachedEvent) -> None:
        """Deliver *event* immediately, raising on any failure."""
        response = await self._transport.post(event.destination, event.as_dict(), self._credential())
        error = check_response(response, ADD_EVENT, collection=event.collection)
        if error is not None:
            raise error
        logger.debug(LogEvent.EVENT_SENT, destination=event.destination)

    async def submit_cached(self) -> None:
        """Drain the cache, delivering each record in turn.

        Every record taken is gone from the cache whatever its outcome. A
        record re-added after an earlier failed drain is retried as a
        fresh record, so its new failure (if any) replaces the old one.

        Raises:
            NotConfiguredError: no cache is attached.
            CacheSubmissionError: one or more records failed; lists
                exactly those records, each with its ``error`` attached.
                If the cache itself fails mid-drain, the records that
                already failed are still reported, chained to the cache
                error.
        """
        if self._cache is None:
            raise NotConfiguredError("Event cache", "Event caching is not enabled")
        credential = self._credential()

        failed: list[CachedEvent] = []
        delivered = 0
        logger.info(LogEvent.DRAIN_STARTED)
        try:
            while (taken := self._cache.try_take()) is not None:
                event = taken.without_error()
                error = await self.deliver(event, credential)
                if error is None:
                    delivered += 1
                    continue
                event.attach_error(error)
                failed.append(event)
                logger.warning(LogEvent.DRAIN_RECORD_FAILED, destination=event.destination, error=error)
        except Exception as exc:
            logger.error(LogEvent.DRAIN_CACHE_FAILED, delivered=delivered, failed=len(failed), error=repr(exc))
            if failed:
                raise CacheSubmissionError(failed, cause=exc) from exc
            raise
        logger.info(LogEvent.DRAIN_FINISHED, delivered=delivered, failed=len(failed))

        if failed:
            raise CacheSubmissionError(failed)


__all__ = ["SubmissionPipeline"]
