import asyncio
import json
from unittest.mock import AsyncMock, patch

import pytest

from app.api.endpoints.dashboard import _put_latest, _stats_events
from app.models.user import UserRole
from app.schemas.stats import DashboardStats
from app.services.stats_service import load_dashboard_stats

REPORT = {"type": "Vandalismo", "title": "Pichação", "description": "Muro dos fundos"}
VISITOR = {"name": "João", "document": "123", "purpose": "Entrega", "hostName": "Secretaria"}


@pytest.mark.asyncio
async def test_stats_endpoint(client, make_user):
    _, student = await make_user()
    _, staff = await make_user(UserRole.Staff)

    reports = []
    for _ in range(3):
        reports.append((await client.post("/api/reports/", json=REPORT, headers=student)).json())
    for report in reports[:2]:
        await client.patch(f"/api/reports/{report['id']}/status", json={"status": "resolved"}, headers=staff)
    await client.post("/api/visitors/", json=VISITOR, headers=staff)
    await client.post("/api/checklist/", json={"title": "Extintores"}, headers=staff)

    res = await client.get("/api/dashboard/stats", headers=student)
    assert res.status_code == 200
    stats = res.json()
    assert stats["totalReports"] == 3
    assert stats["pendingReports"] == 1
    assert stats["reportsByStatus"] == {"pending": 1, "resolved": 2}
    assert stats["activeVisitors"] == 1
    assert stats["totalChecklistItems"] == 1
    assert stats["completedChecklist"] == 0
    assert stats["loading"] is False


@pytest.mark.asyncio
async def test_stats_require_authentication(client):
    assert (await client.get("/api/dashboard/stats")).status_code == 401
    assert (await client.get("/api/dashboard/live")).status_code == 401


@pytest.mark.asyncio
async def test_one_shot_stats_survive_failed_collection(store):
    await store.add_document("reports", {**REPORT, "status": "pending"})

    real = store.get_documents

    async def flaky(name, *args, **kwargs):
        if name == "visitors":
            raise RuntimeError("visitors offline")
        return await real(name, *args, **kwargs)

    with patch.object(store, "get_documents", AsyncMock(side_effect=flaky)):
        stats = await load_dashboard_stats(store)

    assert stats.pending_reports == 1
    assert stats.active_visitors == 0


@pytest.mark.asyncio
async def test_live_stream_follows_writes(store):
    events = _stats_events(store)
    try:
        first = json.loads((await events.__anext__()).removeprefix("data: "))
        assert first["loading"] is True

        await store.flush()
        await store.add_document("reports", {**REPORT, "status": "pending"})
        await store.flush()

        latest = None
        while latest is None or latest["loading"] or latest["pendingReports"] == 0:
            latest = json.loads((await events.__anext__()).removeprefix("data: "))
        assert latest["pendingReports"] == 1
        assert latest["totalReports"] == 1
    finally:
        await events.aclose()

    assert store.subscriber_count("reports") == 0
    assert store.subscriber_count("visitors") == 0


def test_stream_queue_keeps_only_newest_stats():
    queue = asyncio.Queue(maxsize=1)
    for pending in range(5):
        _put_latest(queue, DashboardStats(pending_reports=pending))

    assert queue.qsize() == 1
    assert queue.get_nowait().pending_reports == 4


@pytest.mark.asyncio
async def test_slow_stream_client_gets_latest_state_only(store):
    events = _stats_events(store)
    try:
        await events.__anext__()

        # nobody reads while every subscription settles and two reports land
        await store.flush()
        await store.add_document("reports", {**REPORT, "status": "pending"})
        await store.add_document("reports", {**REPORT, "status": "open"})
        await store.flush()

        latest = json.loads((await events.__anext__()).removeprefix("data: "))
        assert latest["loading"] is False
        assert latest["pendingReports"] == 2

        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(events.__anext__(), timeout=0.1)
    finally:
        await events.aclose()

    assert store.subscriber_count("reports") == 0
