# app/services/live_service.py

from datetime import datetime
from enum import Enum
from typing import Callable, Optional, Sequence

from loguru import logger

from app.core.permissions import has_permission
from app.models.user import UserRole
from app.schemas.auth import Principal
from app.services.document_store import Document, DocumentStore, Filter


class SubscriptionState(str, Enum):
    Idle = "idle"
    Subscribing = "subscribing"
    Live = "live"
    Error = "error"
    Unsubscribed = "unsubscribed"


_CLOSED = (SubscriptionState.Error, SubscriptionState.Unsubscribed)

ChangeListener = Callable[["LiveCollection"], None]


class LiveCollection:
    """
    One consumer's live view of a filtered collection.

    Every snapshot replaces `records` wholesale. Once the view is closed
    (or failed) late snapshots are dropped. Use it as an async context
    manager so the subscription is always released.
    """

    def __init__(
        self,
        store: Optional[DocumentStore],
        name: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        enabled: bool = True,
    ):
        self.store = store
        self.name = name
        self.filters = tuple(filters)
        self.order_by = order_by
        self.enabled = enabled

        self.records: list[Document] = []
        self.loading = enabled
        self.error: Optional[str] = None
        self.state = SubscriptionState.Idle

        self._unsubscribe: Optional[Callable[[], None]] = None
        self._listeners: list[ChangeListener] = []

    # ------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------
    def open(self) -> "LiveCollection":
        if self.state is not SubscriptionState.Idle:
            return self

        if not self.enabled:
            logger.debug("'{}' subscription not permitted; serving empty view", self.name)
            self.state = SubscriptionState.Unsubscribed
            return self

        logger.debug("Setting up live '{}' subscription", self.name)
        self.state = SubscriptionState.Subscribing
        try:
            self._unsubscribe = self.store.subscribe_to_collection(
                self.name,
                self.filters,
                self._on_snapshot,
                self._on_error,
                order_by=self.order_by,
            )
        except Exception as exc:
            self._on_error(exc)
        return self

    def close(self) -> None:
        if self.state is SubscriptionState.Unsubscribed:
            return
        self._release()
        self.state = SubscriptionState.Unsubscribed
        self.loading = False
        logger.debug("Closed live '{}' subscription", self.name)

    def _release(self) -> None:
        if self._unsubscribe:
            unsubscribe, self._unsubscribe = self._unsubscribe, None
            unsubscribe()

    async def __aenter__(self) -> "LiveCollection":
        return self.open()

    async def __aexit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------
    # callbacks from the store
    # ------------------------------------------------------------
    def _on_snapshot(self, records: list[Document]) -> None:
        if self.state in _CLOSED:
            logger.debug("Dropping late '{}' snapshot", self.name)
            return

        self.records = list(records)
        self.loading = False
        self.error = None
        self.state = SubscriptionState.Live
        logger.debug("Live '{}' update: {} records", self.name, len(self.records))
        self._changed()

    def _on_error(self, exc: BaseException) -> None:
        if self.state in _CLOSED:
            return

        logger.warning("Live '{}' subscription failed: {}", self.name, exc)
        self._release()
        self.records = []
        self.loading = False
        self.error = str(exc) or exc.__class__.__name__
        self.state = SubscriptionState.Error
        self._changed()

    # ------------------------------------------------------------
    # consumers
    # ------------------------------------------------------------
    def add_listener(self, listener: ChangeListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def _changed(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def view(self) -> dict:
        return {"records": self.records, "loading": self.loading, "error": self.error}


# ----------------------------------------------------------------------
# Tracked collections and their static filters
# ----------------------------------------------------------------------
def _active() -> tuple[Filter, ...]:
    return (Filter("isActive", "==", True),)


def _upcoming() -> tuple[Filter, ...]:
    return (Filter("scheduledDate", ">=", datetime.utcnow()),)


TRACKED: dict[str, Callable[[], tuple[Filter, ...]]] = {
    "reports": tuple,
    "visitors": _active,
    "notices": _active,
    "campaigns": _active,
    "checklistItems": tuple,
    "drills": _upcoming,
    "users": tuple,
}

# newest first
ORDERING = {"reports": "createdAt", "notices": "createdAt"}


def can_watch_users(principal: Optional[Principal]) -> bool:
    return has_permission(principal, UserRole.Direction)


def live_collection(
    store: DocumentStore,
    entity: str,
    principal: Optional[Principal] = None,
) -> LiveCollection:
    """
    Build the live view for a tracked entity. Everything is visible to every
    role except `users`, which needs Direction level access.
    """
    try:
        filters = TRACKED[entity]()
    except KeyError:
        raise ValueError(f"'{entity}' is not a tracked collection") from None

    enabled = entity != "users" or can_watch_users(principal)
    return LiveCollection(store, entity, filters, order_by=ORDERING.get(entity), enabled=enabled)
