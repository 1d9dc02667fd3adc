# app/services/document_store.py

import asyncio
import operator
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Iterable, Optional, Sequence

from loguru import logger
from pydantic.alias_generators import to_camel, to_snake
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel import SQLModel, select

from app.models.campaign import Campaign
from app.models.checklist import ChecklistItem
from app.models.drill import Drill
from app.models.emergency import EmergencyAlert
from app.models.notice import Notice
from app.models.report import Report
from app.models.user import User
from app.models.visitor import Visitor


# Collection names as the clients know them
COLLECTIONS: dict[str, type[SQLModel]] = {
    "users": User,
    "reports": Report,
    "notices": Notice,
    "visitors": Visitor,
    "checklistItems": ChecklistItem,
    "drills": Drill,
    "campaigns": Campaign,
    "emergencyAlerts": EmergencyAlert,
}

# never leaves the store
HIDDEN_FIELDS = {"password_hash"}

Document = dict[str, Any]
SnapshotCallback = Callable[[list[Document]], None]
ErrorCallback = Callable[[BaseException], None]


class StoreError(Exception):
    pass


class UnknownCollection(StoreError):
    pass


class DocumentNotFound(StoreError):
    def __init__(self, collection: str, doc_id: str):
        super().__init__(f"{collection}/{doc_id} not found")
        self.collection = collection
        self.doc_id = doc_id


_OPS = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


@dataclass(frozen=True)
class Filter:
    """`where(field, op, value)` on a document field (camelCase name)."""
    field: str
    op: str
    value: Any

    def clause(self, model: type[SQLModel]):
        attr = to_snake(self.field)
        if attr in HIDDEN_FIELDS or attr not in model.model_fields:
            raise StoreError(f"Unknown field '{self.field}' on {model.__tablename__}")
        column = getattr(model, attr)
        if self.op == "in":
            return column.in_(list(self.value))
        try:
            return _OPS[self.op](column, self.value)
        except KeyError:
            raise StoreError(f"Unsupported operator '{self.op}'") from None


def to_document(row: SQLModel) -> Document:
    data = row.model_dump(exclude=HIDDEN_FIELDS)
    return {to_camel(key): value for key, value in data.items()}


def _to_columns(model: type[SQLModel], data: dict) -> dict:
    columns = {}
    for key, value in data.items():
        attr = to_snake(key)
        if attr in HIDDEN_FIELDS and key != attr:
            # hidden columns are only writable by their column name
            continue
        if attr not in model.model_fields:
            raise StoreError(f"Unknown field '{key}' on {model.__tablename__}")
        columns[attr] = value
    return columns


@dataclass(eq=False)
class _Listener:
    filters: tuple[Filter, ...]
    on_snapshot: SnapshotCallback
    on_error: Optional[ErrorCallback] = None
    order_by: Optional[str] = None
    active: bool = field(default=True)
    # snapshot queries issued / newest one delivered
    scheduled: int = 0
    delivered: int = 0


class DocumentStore:
    """
    Firestore-style access to the school safety collections.

    Every write to a collection re-runs the queries of its live
    subscriptions and pushes the full result (a snapshot) to each of them.
    Snapshots are delivered from tasks on the running event loop. Each
    subscription only ever moves forward: a snapshot whose query was issued
    before the last delivered one is dropped.
    """

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]):
        self._sessionmaker = sessionmaker
        self._listeners: dict[str, list[_Listener]] = defaultdict(list)
        self._pending: set[asyncio.Task] = set()

    # ------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------
    @staticmethod
    def model_for(name: str) -> type[SQLModel]:
        try:
            return COLLECTIONS[name]
        except KeyError:
            raise UnknownCollection(f"Unknown collection '{name}'") from None

    async def get_documents(
        self,
        name: str,
        filters: Optional[Iterable[Filter]] = None,
        order_by: Optional[str] = None,
        descending: bool = True,
    ) -> list[Document]:
        model = self.model_for(name)
        query = select(model)
        for condition in filters or ():
            query = query.where(condition.clause(model))
        if order_by:
            column = getattr(model, to_snake(order_by))
            query = query.order_by(column.desc() if descending else column.asc())

        async with self._sessionmaker() as session:
            result = await session.execute(query)
            return [to_document(row) for row in result.scalars().all()]

    async def get_document(self, name: str, doc_id: str) -> Optional[Document]:
        model = self.model_for(name)
        async with self._sessionmaker() as session:
            row = await session.get(model, doc_id)
            return to_document(row) if row else None

    async def get_user_profile(self, uid: str) -> Optional[Document]:
        return await self.get_document("users", uid)

    # ------------------------------------------------------------
    # Writes (single document, no multi-document transactions)
    # ------------------------------------------------------------
    async def add_document(self, name: str, data: dict) -> Document:
        model = self.model_for(name)
        row = model(**_to_columns(model, data))
        async with self._sessionmaker() as session:
            session.add(row)
            await session.commit()
            await session.refresh(row)
            document = to_document(row)

        logger.debug("Added {}/{}", name, document["id"])
        self._notify(name)
        return document

    async def update_document(self, name: str, doc_id: str, fields: dict) -> Document:
        model = self.model_for(name)
        changes = _to_columns(model, fields)
        if "updated_at" in model.model_fields:
            changes.setdefault("updated_at", datetime.utcnow())

        async with self._sessionmaker() as session:
            row = await session.get(model, doc_id)
            if row is None:
                raise DocumentNotFound(name, doc_id)
            for attr, value in changes.items():
                setattr(row, attr, value)
            session.add(row)
            await session.commit()
            await session.refresh(row)
            document = to_document(row)

        logger.debug("Updated {}/{} ({})", name, doc_id, ", ".join(changes))
        self._notify(name)
        return document

    async def delete_document(self, name: str, doc_id: str) -> None:
        model = self.model_for(name)
        async with self._sessionmaker() as session:
            row = await session.get(model, doc_id)
            if row is None:
                raise DocumentNotFound(name, doc_id)
            await session.delete(row)
            await session.commit()

        logger.info("Deleted {}/{}", name, doc_id)
        self._notify(name)

    # ------------------------------------------------------------
    # Live subscriptions
    # ------------------------------------------------------------
    def subscribe_to_collection(
        self,
        name: str,
        filters: Sequence[Filter],
        on_snapshot: SnapshotCallback,
        on_error: Optional[ErrorCallback] = None,
        order_by: Optional[str] = None,
    ) -> Callable[[], None]:
        """
        Register a live query. The first snapshot is pushed as soon as the
        initial query finishes. Returns the unsubscribe function.
        """
        self.model_for(name)
        listener = _Listener(tuple(filters), on_snapshot, on_error, order_by)
        self._listeners[name].append(listener)
        self._schedule(name, listener)

        def unsubscribe() -> None:
            if listener.active:
                listener.active = False
                self._listeners[name].remove(listener)

        return unsubscribe

    def subscriber_count(self, name: str) -> int:
        return len(self._listeners.get(name, ()))

    async def flush(self) -> None:
        """Wait until every scheduled snapshot has been delivered."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _notify(self, name: str) -> None:
        for listener in list(self._listeners.get(name, ())):
            self._schedule(name, listener)

    def _schedule(self, name: str, listener: _Listener) -> None:
        listener.scheduled += 1
        task = asyncio.get_running_loop().create_task(self._deliver(name, listener, listener.scheduled))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _deliver(self, name: str, listener: _Listener, seq: int) -> None:
        try:
            documents = await self.get_documents(name, listener.filters, listener.order_by)
        except Exception as exc:
            logger.warning("Snapshot query for '{}' failed: {}", name, exc)
            if listener.active and listener.on_error and seq > listener.delivered:
                listener.delivered = seq
                listener.on_error(exc)
            return

        # queries can finish out of order; never go back to an older snapshot
        if not listener.active or seq < listener.delivered:
            logger.debug("Dropping stale '{}' snapshot #{}", name, seq)
            return

        listener.delivered = seq
        listener.on_snapshot(documents)
