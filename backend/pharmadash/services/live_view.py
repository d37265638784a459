"""
LiveView: a view that re-fetches itself whenever its relation changes.

Every notification starts its own refresh; there is no debouncing, so
refreshes can overlap and whichever resolves last sets the value. Always
close() the view (or use it as an async context manager) so its
subscription is released.
"""
import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Generic, Iterable, Optional, Set, TypeVar, Union

from pharmadash.db.changes import ChangeNotification, Subscription
from pharmadash.db.store import PharmacyStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

UpdateCallback = Callable[[Any], Union[None, Awaitable[None]]]


class LiveView(Generic[T]):
    def __init__(
        self,
        store: PharmacyStore,
        relations: Union[str, Iterable[str]],
        fetch: Callable[[PharmacyStore], T],
        row_ids: Optional[Iterable[Any]] = None,
        on_update: Optional[UpdateCallback] = None,
    ):
        self.store = store
        self.relations = [relations] if isinstance(relations, str) else list(relations)
        self.fetch = fetch
        self.row_ids = row_ids
        self.on_update = on_update
        self.value: Optional[T] = None
        self.refresh_count = 0
        self._subscriptions: list[Subscription] = []
        self._listeners: list[asyncio.Task] = []
        self._refreshes: Set[asyncio.Task] = set()
        self._changed = asyncio.Condition()

    async def start(self) -> T:
        """Listen for changes, then do the initial fetch."""
        for relation in self.relations:
            sub = self.store.subscribe(relation, self.row_ids)
            self._subscriptions.append(sub)
            self._listeners.append(asyncio.create_task(self._listen(sub)))
        try:
            self.value = await asyncio.to_thread(self.fetch, self.store)
        except BaseException:
            await self.close()
            raise
        return self.value

    async def _listen(self, subscription: Subscription) -> None:
        async for note in subscription:
            task = asyncio.create_task(self._refresh(note))
            self._refreshes.add(task)
            task.add_done_callback(self._refreshes.discard)

    async def _refresh(self, note: ChangeNotification) -> None:
        logger.debug(f"Refreshing view after {note.event} on {note.relation} (row {note.row_id})")
        try:
            value = await asyncio.to_thread(self.fetch, self.store)
        except Exception as e:
            logger.error(f"Live refresh after change on {note.relation} failed: {e}", exc_info=True)
            return

        self.value = value
        async with self._changed:
            self.refresh_count += 1
            self._changed.notify_all()

        if self.on_update is None:
            return
        try:
            result = self.on_update(value)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error(f"Live update callback after change on {note.relation} failed: {e}", exc_info=True)

    async def wait_until(self, refreshes: int, timeout: float = 5.0) -> T:
        """Block until at least `refreshes` refreshes have completed."""
        async with self._changed:
            await asyncio.wait_for(
                self._changed.wait_for(lambda: self.refresh_count >= refreshes),
                timeout,
            )
        return self.value

    async def close(self) -> None:
        for sub in self._subscriptions:
            sub.unsubscribe()
        tasks = self._listeners + list(self._refreshes)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._subscriptions.clear()
        self._listeners.clear()

    async def __aenter__(self) -> "LiveView[T]":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
