from datetime import datetime, timedelta

import pytest

from app.models.user import UserRole

VISITOR = {"name": "João Lima", "document": "12.345.678-9", "purpose": "Reunião de pais", "hostName": "Profa. Ana"}


# ------------------------------------------------------------------
# Visitors
# ------------------------------------------------------------------
@pytest.mark.asyncio
async def test_visitor_check_in_and_out(client, make_user):
    staff_user, staff = await make_user(UserRole.Staff)
    _, student = await make_user()

    assert (await client.post("/api/visitors/", json=VISITOR, headers=student)).status_code == 403

    res = await client.post("/api/visitors/", json=VISITOR, headers=staff)
    assert res.status_code == 201
    visitor = res.json()
    assert visitor["isActive"] is True
    assert visitor["status"] == "checked_in"
    assert visitor["registeredBy"] == staff_user["id"]

    active = await client.get("/api/visitors/active", headers=student)
    assert [v["id"] for v in active.json()] == [visitor["id"]]

    res = await client.patch(
        f"/api/visitors/{visitor['id']}/checkout", json={"checkOutNote": "Saiu às 10h"}, headers=staff
    )
    assert res.status_code == 200
    assert res.json()["isActive"] is False
    assert res.json()["checkOutNote"] == "Saiu às 10h"

    active = await client.get("/api/visitors/active", headers=student)
    assert active.json() == []


# ------------------------------------------------------------------
# Notices
# ------------------------------------------------------------------
@pytest.mark.asyncio
async def test_notices_filtered_by_audience(client, make_user):
    _, staff = await make_user(UserRole.Staff)
    _, student = await make_user()

    await client.post("/api/notices/", json={"title": "Geral", "content": "Para todos"}, headers=staff)
    await client.post(
        "/api/notices/",
        json={"title": "Equipe", "content": "Reunião", "targetAudience": ["funcionario", "direcao"]},
        headers=staff,
    )

    seen_by_student = await client.get("/api/notices/", headers=student)
    assert [n["title"] for n in seen_by_student.json()] == ["Geral"]

    seen_by_staff = await client.get("/api/notices/", headers=staff)
    assert {n["title"] for n in seen_by_staff.json()} == {"Geral", "Equipe"}


@pytest.mark.asyncio
async def test_notice_manage_is_direction_only(client, make_user):
    _, staff = await make_user(UserRole.Staff)
    _, direction = await make_user(UserRole.Direction)
    notice = (await client.post("/api/notices/", json={"title": "A", "content": "B"}, headers=staff)).json()

    assert (await client.patch(f"/api/notices/{notice['id']}", json={"isActive": False}, headers=staff)).status_code == 403

    res = await client.patch(f"/api/notices/{notice['id']}", json={"isActive": False}, headers=direction)
    assert res.status_code == 200
    assert (await client.get("/api/notices/", headers=direction)).json() == []


@pytest.mark.asyncio
async def test_student_cannot_post_notice(client, make_user):
    _, student = await make_user()
    res = await client.post("/api/notices/", json={"title": "A", "content": "B"}, headers=student)
    assert res.status_code == 403


# ------------------------------------------------------------------
# Campaigns
# ------------------------------------------------------------------
@pytest.mark.asyncio
async def test_campaigns(client, make_user):
    _, staff = await make_user(UserRole.Staff)
    _, student = await make_user()

    res = await client.post(
        "/api/campaigns/",
        json={"title": "Internet Segura", "content": "Senhas fortes", "category": "digital_safety"},
        headers=staff,
    )
    assert res.status_code == 201
    campaign = res.json()
    assert (await client.get("/api/campaigns/", headers=student)).json()[0]["id"] == campaign["id"]

    await client.patch(f"/api/campaigns/{campaign['id']}", json={"isActive": False}, headers=staff)
    assert (await client.get("/api/campaigns/", headers=student)).json() == []


# ------------------------------------------------------------------
# Emergency alerts
# ------------------------------------------------------------------
@pytest.mark.asyncio
async def test_emergency_trigger_and_resolve(client, make_user):
    _, student = await make_user()
    _, staff = await make_user(UserRole.Staff)
    director, direction = await make_user(UserRole.Direction)

    alert_body = {"message": "Evacuar bloco B", "type": "fire", "location": "Bloco B"}
    assert (await client.post("/api/emergency-alerts/", json=alert_body, headers=student)).status_code == 403

    res = await client.post("/api/emergency-alerts/", json=alert_body, headers=staff)
    assert res.status_code == 201
    alert = res.json()
    assert alert["isResolved"] is False

    assert len((await client.get("/api/emergency-alerts/", headers=student)).json()) == 1
    assert (await client.patch(f"/api/emergency-alerts/{alert['id']}/resolve", headers=staff)).status_code == 403

    res = await client.patch(f"/api/emergency-alerts/{alert['id']}/resolve", headers=direction)
    assert res.status_code == 200
    assert res.json()["resolvedBy"] == director["id"]
    assert (await client.get("/api/emergency-alerts/", headers=student)).json() == []


# ------------------------------------------------------------------
# Checklist
# ------------------------------------------------------------------
@pytest.mark.asyncio
async def test_checklist_completion(client, make_user):
    staff_user, staff = await make_user(UserRole.Staff)
    _, student = await make_user()

    item = (await client.post("/api/checklist/", json={"title": "Extintores"}, headers=staff)).json()
    assert item["isCompleted"] is False

    res = await client.patch(f"/api/checklist/{item['id']}", json={"isCompleted": True}, headers=student)
    assert res.status_code == 403

    res = await client.patch(f"/api/checklist/{item['id']}", json={"isCompleted": True}, headers=staff)
    assert res.json()["completedBy"] == staff_user["id"]
    assert res.json()["completedAt"] is not None

    res = await client.patch(f"/api/checklist/{item['id']}", json={"isCompleted": False}, headers=staff)
    assert res.json()["completedBy"] is None


# ------------------------------------------------------------------
# Drills
# ------------------------------------------------------------------
@pytest.mark.asyncio
async def test_upcoming_drills(client, make_user):
    _, staff = await make_user(UserRole.Staff)
    _, student = await make_user()

    future = (datetime.utcnow() + timedelta(days=7)).isoformat()
    past = (datetime.utcnow() - timedelta(days=7)).isoformat()
    await client.post("/api/drills/", json={"title": "Incêndio", "scheduledDate": future}, headers=staff)
    await client.post("/api/drills/", json={"title": "Antigo", "scheduledDate": past}, headers=staff)

    upcoming = await client.get("/api/drills/upcoming", headers=student)
    assert [d["title"] for d in upcoming.json()] == ["Incêndio"]
    assert len((await client.get("/api/drills/", headers=student)).json()) == 2

    res = await client.post("/api/drills/", json={"title": "X", "scheduledDate": future}, headers=student)
    assert res.status_code == 403
