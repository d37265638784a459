"""
In-process change notifications.

Committed inserts, updates and deletes are captured from SQLAlchemy session
events and published to every matching Subscription. A notification only
says that something changed in a relation (and which row); subscribers
re-fetch whatever they display.

Each Subscription is bound to the event loop it was created on and delivers
through an asyncio.Queue, so publishing from a worker thread is safe.
"""
import asyncio
import logging
import threading
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional

from sqlalchemy import event, inspect
from sqlalchemy.orm import Session, sessionmaker

logger = logging.getLogger(__name__)

INSERT = "INSERT"
UPDATE = "UPDATE"
DELETE = "DELETE"

_PENDING_KEY = "pharmadash_pending_changes"


@dataclass(frozen=True)
class ChangeNotification:
    relation: str
    event: str
    row_id: Any = None


_CLOSED = object()


class Subscription:
    """Handle for one relation's change notifications. Iterate it, or await get()."""

    def __init__(
        self,
        feed: "ChangeFeed",
        relation: str,
        row_ids: Optional[Iterable[Any]],
        loop: asyncio.AbstractEventLoop,
    ):
        self.feed = feed
        self.relation = relation
        self.row_ids = frozenset(row_ids) if row_ids is not None else None
        self._loop = loop
        self._queue: asyncio.Queue = asyncio.Queue()
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def matches(self, note: ChangeNotification) -> bool:
        if note.relation != self.relation:
            return False
        return self.row_ids is None or note.row_id in self.row_ids

    def _deliver(self, item) -> None:
        try:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, item)
        except RuntimeError:
            # Loop already closed; nobody is listening any more
            logger.debug(f"Dropping notification for closed subscription on {self.relation}")

    async def get(self) -> ChangeNotification:
        """Wait for the next notification. Raises StopAsyncIteration once unsubscribed."""
        item = await self._queue.get()
        if item is _CLOSED:
            raise StopAsyncIteration
        return item

    def __aiter__(self):
        return self

    async def __anext__(self) -> ChangeNotification:
        return await self.get()

    def unsubscribe(self) -> None:
        if not self._active:
            return
        self._active = False
        self.feed._remove(self)
        self._deliver(_CLOSED)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.unsubscribe()


class ChangeFeed:
    """Fan-out of committed row changes to subscriptions."""

    def __init__(self):
        self._subscriptions: List[Subscription] = []
        self._lock = threading.Lock()

    def subscribe(self, relation: str, row_ids: Optional[Iterable[Any]] = None) -> Subscription:
        """Must be called from a running event loop."""
        sub = Subscription(self, relation, row_ids, asyncio.get_running_loop())
        with self._lock:
            self._subscriptions.append(sub)
        logger.debug(f"Subscribed to {relation} (row filter: {sub.row_ids})")
        return sub

    def _remove(self, sub: Subscription) -> None:
        with self._lock:
            if sub in self._subscriptions:
                self._subscriptions.remove(sub)
        logger.debug(f"Unsubscribed from {sub.relation}")

    def subscriber_count(self, relation: Optional[str] = None) -> int:
        with self._lock:
            if relation is None:
                return len(self._subscriptions)
            return sum(1 for s in self._subscriptions if s.relation == relation)

    def publish(self, notes: Iterable[ChangeNotification]) -> None:
        with self._lock:
            subscriptions = list(self._subscriptions)
        for note in notes:
            for sub in subscriptions:
                if sub.matches(note):
                    sub._deliver(note)

    def bind(self, session_factory: sessionmaker) -> None:
        """Publish committed changes of every session the factory creates."""
        event.listen(session_factory, "after_flush", _collect_changes)
        event.listen(session_factory, "after_commit", self._flush_to_subscribers)
        event.listen(session_factory, "after_rollback", _discard_changes)

    def _flush_to_subscribers(self, session: Session) -> None:
        notes = session.info.pop(_PENDING_KEY, [])
        if notes:
            logger.debug(f"Publishing {len(notes)} change notification(s)")
            self.publish(notes)


def _notification(obj, kind: str) -> Optional[ChangeNotification]:
    relation = getattr(type(obj), "__tablename__", None)
    if relation is None:
        return None
    state = inspect(obj)
    # Inserts get their identity key only after the flush finalizes
    identity = state.identity or tuple(state.mapper.primary_key_from_instance(obj))
    row_id = identity[0] if identity and len(identity) == 1 else identity
    return ChangeNotification(relation=relation, event=kind, row_id=row_id)


def _collect_changes(session: Session, flush_context) -> None:
    # new/dirty/deleted still hold the pre-flush state here; primary keys are assigned
    pending = session.info.setdefault(_PENDING_KEY, [])
    for obj in session.new:
        pending.append(_notification(obj, INSERT))
    for obj in session.dirty:
        if session.is_modified(obj):
            pending.append(_notification(obj, UPDATE))
    for obj in session.deleted:
        pending.append(_notification(obj, DELETE))
    session.info[_PENDING_KEY] = [n for n in pending if n is not None]


def _discard_changes(session: Session) -> None:
    session.info.pop(_PENDING_KEY, None)
