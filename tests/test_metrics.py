import pytest


@pytest.mark.asyncio
async def test_metrics(client):
    res = await client.get("/api/metrics")
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "Online"
    assert body["database"] == "Connected"
    assert "cpu" in body and "ram" in body


@pytest.mark.asyncio
async def test_root(client):
    res = await client.get("/")
    assert res.status_code == 200
    assert res.json()["status"] == "ok"
