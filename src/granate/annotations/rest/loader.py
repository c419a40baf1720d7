import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, Generic, TypeVar

from granate import log

T = TypeVar("T")


class CoalescingLoader(Generic[T]):
    """Loads each distinct item once and shares the result with every caller.

    Items are identified by ``key_fn``. Loads submitted within the same event loop
    tick are queued and dispatched together on the next tick, each distinct key
    running as its own task. A key's future stays cached for the lifetime of the
    loader, so its item is never loaded twice, and callers of the same key all get
    the same result or the same exception.
    """

    def __init__(self, load_fn: Callable[[T], Awaitable[Any]], key_fn: Callable[[T], str]) -> None:
        self._load_fn = load_fn
        self._key_fn = key_fn
        self._cache: dict[str, asyncio.Future[Any]] = {}
        self._queue: list[tuple[T, asyncio.Future[Any]]] = []
        self._tasks: set[asyncio.Task[None]] = set()

    def __len__(self) -> int:
        return len(self._cache)

    def load(self, item: T) -> "asyncio.Future[Any]":
        """Return the future result of ``item``, queueing its load unless its key is known.

        Must be called while an event loop is running.
        """
        key = self._key_fn(item)
        future = self._cache.get(key)
        if future is not None:
            log.debug(f"Coalescing request '{key}'")
            return future

        loop = asyncio.get_running_loop()
        future = loop.create_future()
        self._cache[key] = future
        self._queue.append((item, future))
        if len(self._queue) == 1:
            loop.call_soon(self._dispatch)
        return future

    def _dispatch(self) -> None:
        batch, self._queue = self._queue, []
        log.debug(f"Dispatching {len(batch)} request(s)")
        for item, future in batch:
            task = asyncio.ensure_future(self._resolve(item, future))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def _resolve(self, item: T, future: "asyncio.Future[Any]") -> None:
        try:
            result = await self._load_fn(item)
        except Exception as e:
            if not future.done():
                future.set_exception(e)
        else:
            if not future.done():
                future.set_result(result)
