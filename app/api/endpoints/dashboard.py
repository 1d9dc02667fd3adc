# app/api/endpoints/dashboard.py

import asyncio

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from loguru import logger

from app.api.deps import get_store
from app.core.permissions import Permission
from app.core.rbac import require_permission
from app.schemas.auth import Principal
from app.schemas.stats import DashboardStats
from app.services.document_store import DocumentStore
from app.services.stats_service import DashboardStatsView, load_dashboard_stats

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])


@router.get("/stats", response_model=DashboardStats)
async def dashboard_stats(
    store: DocumentStore = Depends(get_store),
    _: Principal = Depends(require_permission(Permission.DashboardView)),
):
    return await load_dashboard_stats(store)


# -------------------------------------------------------------------
# Live stats as server-sent events. The subscriptions live exactly as
# long as the response stream.
# -------------------------------------------------------------------
def _put_latest(queue: asyncio.Queue, stats: DashboardStats) -> None:
    # each event is the full state, so a slow client only needs the newest
    if queue.full():
        queue.get_nowait()
    queue.put_nowait(stats)


async def _stats_events(store: DocumentStore):
    queue: asyncio.Queue[DashboardStats] = asyncio.Queue(maxsize=1)

    async with DashboardStatsView(store) as view:
        view.add_listener(lambda v: _put_latest(queue, v.stats))
        yield f"data: {view.stats.model_dump_json(by_alias=True)}\n\n"
        while True:
            stats = await queue.get()
            yield f"data: {stats.model_dump_json(by_alias=True)}\n\n"


@router.get("/live")
async def live_dashboard_stats(
    store: DocumentStore = Depends(get_store),
    principal: Principal = Depends(require_permission(Permission.DashboardView)),
):
    logger.info("Live dashboard stream opened for {}", principal.id)
    return StreamingResponse(_stats_events(store), media_type="text/event-stream")
