"""KeenClient – async and blocking entry points over the event pipeline."""
from __future__ import annotations

import asyncio
import concurrent.futures
import functools
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, TypeVar

from keen_client.config import EnvSettingsLoader, ProjectSettings
from keen_client.errors import ConfigurationError, KeenError, ValidationError
from keen_client.events import CachedEvent, EventCache, to_payload
from keen_client.observability import LogEvent, get_logger
from keen_client.properties import GlobalPropertyRegistry
from keen_client.queries import Queries, QueryType
from keen_client.submission import SubmissionPipeline
from keen_client.transport import HttpxTransport, Transport, raise_for_response
from keen_client.validation import validate_collection_name

T = TypeVar("T")
logger = get_logger(__name__)

EVENTS_RESOURCE = "events"


def find_keen_error(exc: BaseException) -> KeenError | None:
    """Return the first :class:`KeenError` found inside *exc*.

    Descends through exception groups and ``__cause__``/``__context__``
    chains of non-domain wrappers; a domain error is returned as soon as
    it is reached, never looked through.
    """
    pending: list[BaseException] = [exc]
    seen: set[int] = set()
    while pending:
        current = pending.pop(0)
        if id(current) in seen:
            continue
        seen.add(id(current))
        if isinstance(current, KeenError):
            return current
        if isinstance(current, BaseExceptionGroup):
            pending.extend(current.exceptions)
        for linked in (current.__cause__, current.__context__):
            if linked is not None:
                pending.append(linked)
    return None


def run_blocking(func: Callable[[], Awaitable[T]]) -> T:
    """Run the coroutine produced by *func* to completion and return its result.

    With no running loop in this thread the coroutine gets a fresh loop
    here; otherwise it runs on a private worker thread, so the caller's
    loop is never asked to service its own waiter. Wrapping errors are
    replaced by the domain error they carry, when there is one.
    """
    async def _main() -> T:
        return await func()

    try:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(_main())
        with concurrent.futures.ThreadPoolExecutor(max_workers=1, thread_name_prefix="keen-sync") as pool:
            return pool.submit(asyncio.run, _main()).result()
    except KeenError:
        raise
    except Exception as exc:
        domain_error = find_keen_error(exc)
        if domain_error is None:
            raise
        raise domain_error


def _blocking(async_method: Callable[..., Awaitable[T]]) -> Callable[..., T]:
    @functools.wraps(async_method)
    def wrapper(self: "KeenClient", *args: Any, **kwargs: Any) -> T:
        return run_blocking(lambda: async_method(self, *args, **kwargs))

    wrapper.__name__ = async_method.__name__.removesuffix("_async")
    wrapper.__qualname__ = async_method.__qualname__.removesuffix("_async")
    wrapper.__doc__ = f"Blocking form of :meth:`{async_method.__name__}`."
    return wrapper


class KeenClient:
    """Client for one analytics project.

    With an ``event_cache`` attached, added events are queued instead of
    sent; :meth:`submit_cached` drains the queue. Each capability comes
    as a coroutine (``*_async``) and a blocking method of the same name
    without the suffix.
    """

    def __init__(
        self,
        settings: ProjectSettings,
        event_cache: EventCache | None = None,
        *,
        transport: Transport | None = None,
    ) -> None:
        if settings is None:
            raise ConfigurationError("A ProjectSettings instance is required.")
        self._settings = settings
        self._transport: Transport = transport or HttpxTransport(timeout=settings.timeout)
        self._properties = GlobalPropertyRegistry()
        self._pipeline = SubmissionPipeline(
            self._transport,
            lambda: settings.require_write_key("AddEvent"),
            event_cache,
        )
        self.queries = Queries(self._transport, settings)

    @classmethod
    def from_env(cls, event_cache: EventCache | None = None, **kwargs: Any) -> "KeenClient":
        return cls(EnvSettingsLoader().load(), event_cache, **kwargs)

    @property
    def settings(self) -> ProjectSettings:
        return self._settings

    @property
    def event_cache(self) -> EventCache | None:
        return self._pipeline.cache

    @property
    def global_properties(self) -> GlobalPropertyRegistry:
        return self._properties

    def collection_url(self, collection: str) -> str:
        return f"{self._settings.project_url}/{EVENTS_RESOURCE}/{validate_collection_name(collection)}"

    # -- global properties ---------------------------------------------------

    def add_global_property(self, name: str, value: Any) -> None:
        """Add a static value, or a zero-argument callable, to every future event."""
        self._properties.register(name, value)

    # -- events --------------------------------------------------------------

    def build_event(self, collection: str, event: Any) -> CachedEvent:
        """Validate, convert and decorate *event* into an immutable record."""
        url = self.collection_url(collection)
        payload = self._properties.materialize(to_payload(event))
        return CachedEvent(url, to_payload(payload))

    async def add_event_async(self, collection: str, event: Any) -> None:
        validate_collection_name(collection)
        if event is None:
            raise ValidationError("Event data is required.")
        self._settings.require_write_key("AddEvent")

        record = self.build_event(collection, event)
        cache = self._pipeline.cache
        if cache is not None:
            cache.add(record)
            logger.debug(LogEvent.EVENT_CACHED, collection=collection)
            return
        await self._pipeline.send(record)

    async def add_events_async(self, collection: str, events: Iterable[Any]) -> None:
        if events is None:
            raise ValidationError("AddEvents events may not be null.")
        for event in events:
            await self.add_event_async(collection, event)

    async def submit_cached_async(self) -> None:
        """Submit every cached event.

        Raises:
            NotConfiguredError: no event cache is attached.
            CacheSubmissionError: lists the events the service rejected,
                each with its own error. The cache is empty either way.
        """
        await self._pipeline.submit_cached()

    # -- collections ---------------------------------------------------------

    async def delete_collection_async(self, collection: str) -> None:
        """Delete *collection*. Requires the master key."""
        url = self.collection_url(collection)
        key = self._settings.require_master_key("DeleteCollection")
        response = await self._transport.delete(url, key)
        raise_for_response(response, "DeleteCollection", collection=collection)
        logger.info(LogEvent.COLLECTION_DELETED, collection=collection)

    async def get_schema_async(self, collection: str) -> Any:
        """Return the property schema of *collection*. Requires the master key."""
        url = self.collection_url(collection)
        key = self._settings.require_master_key("GetSchema")
        response = await self._transport.get(url, key)
        raise_for_response(response, "GetSchema", collection=collection)
        return response.body

    add_event = _blocking(add_event_async)
    add_events = _blocking(add_events_async)
    submit_cached = _blocking(submit_cached_async)
    delete_collection = _blocking(delete_collection_async)
    get_schema = _blocking(get_schema_async)

    # -- queries -------------------------------------------------------------

    def available_queries(self) -> dict[str, str]:
        return run_blocking(self.queries.available_queries)

    def query(
        self, query_type: QueryType | str, collection: str, target_property: str | None = None, **kwargs: Any
    ) -> Any:
        """Run one analysis query and return its ``result``. Blocking form of :meth:`Queries.metric`."""
        return run_blocking(lambda: self.queries.metric(query_type, collection, target_property, **kwargs))

    def metric(self, *args: Any, **kwargs: Any) -> Any:
        return run_blocking(lambda: self.queries.metric(*args, **kwargs))

    def extract(self, *args: Any, **kwargs: Any) -> Any:
        return run_blocking(lambda: self.queries.extract(*args, **kwargs))

    def funnel(self, *args: Any, **kwargs: Any) -> Any:
        return run_blocking(lambda: self.queries.funnel(*args, **kwargs))

    def multi_analysis(self, *args: Any, **kwargs: Any) -> Any:
        return run_blocking(lambda: self.queries.multi_analysis(*args, **kwargs))


__all__ = ["KeenClient", "find_keen_error", "run_blocking"]
