# app/services/stats_service.py

import asyncio
from collections import Counter
from contextlib import AsyncExitStack
from typing import Callable, Mapping, Optional, Sequence

from loguru import logger

from app.models.enums import PENDING_REPORT_STATUSES
from app.schemas.stats import DashboardStats
from app.services.document_store import Document, DocumentStore
from app.services.live_service import TRACKED, LiveCollection, live_collection

DASHBOARD_ENTITIES = ("reports", "visitors", "notices", "campaigns", "checklistItems", "drills")


def reduce_stats(
    records: Mapping[str, Sequence[Document]],
    loading: bool = False,
    error: Optional[str] = None,
) -> DashboardStats:
    """
    Pure reduction of the latest snapshot of each entity. Missing entities
    count as empty.
    """
    reports = records.get("reports", ())
    checklist = records.get("checklistItems", ())
    by_status = Counter(str(r.get("status")) for r in reports)

    return DashboardStats(
        total_reports=len(reports),
        pending_reports=sum(by_status[s] for s in PENDING_REPORT_STATUSES),
        reports_by_status=dict(by_status),
        active_visitors=len(records.get("visitors", ())),
        active_notices=len(records.get("notices", ())),
        active_campaigns=len(records.get("campaigns", ())),
        completed_checklist=sum(1 for item in checklist if item.get("isCompleted")),
        total_checklist_items=len(checklist),
        upcoming_drills=len(records.get("drills", ())),
        loading=loading,
        error=error,
    )


# ============================================================================
# ONE-SHOT
# ============================================================================
async def _fetch_or_empty(store: DocumentStore, entity: str) -> list[Document]:
    try:
        return await store.get_documents(entity, TRACKED[entity]())
    except Exception as exc:
        logger.warning("Dashboard stats: '{}' unavailable ({})", entity, exc)
        return []


async def load_dashboard_stats(store: DocumentStore) -> DashboardStats:
    results = await asyncio.gather(
        *(_fetch_or_empty(store, entity) for entity in DASHBOARD_ENTITIES)
    )
    return reduce_stats(dict(zip(DASHBOARD_ENTITIES, results)))


# ============================================================================
# LIVE
# ============================================================================
StatsListener = Callable[["DashboardStatsView"], None]


class DashboardStatsView:
    """
    Dashboard stats over one live subscription per entity.

    Entities update independently; `stats` always reflects whatever each
    subscription has delivered so far. A failed entity counts as empty
    and does not affect the others.
    """

    def __init__(self, store: DocumentStore, entities: Sequence[str] = DASHBOARD_ENTITIES):
        self.collections: dict[str, LiveCollection] = {
            entity: live_collection(store, entity) for entity in entities
        }
        self._listeners: list[StatsListener] = []
        self._stack: Optional[AsyncExitStack] = None

    async def __aenter__(self) -> "DashboardStatsView":
        async with AsyncExitStack() as stack:
            for collection in self.collections.values():
                collection.add_listener(self._changed)
                await stack.enter_async_context(collection)
            self._stack = stack.pop_all()
        return self

    async def __aexit__(self, *exc_info) -> None:
        if self._stack:
            stack, self._stack = self._stack, None
            await stack.aclose()

    @property
    def stats(self) -> DashboardStats:
        failed = [name for name, c in self.collections.items() if c.error]
        return reduce_stats(
            {name: c.records for name, c in self.collections.items()},
            loading=any(c.loading for c in self.collections.values()),
            error=f"Unavailable: {', '.join(failed)}" if failed else None,
        )

    def add_listener(self, listener: StatsListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def _changed(self, _collection: LiveCollection) -> None:
        for listener in list(self._listeners):
            listener(self)
