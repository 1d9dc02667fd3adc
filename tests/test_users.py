import pytest

from app.models.user import UserRole


@pytest.mark.asyncio
async def test_list_users_direction_only(client, make_user):
    _, direction = await make_user(UserRole.Direction)
    _, staff = await make_user(UserRole.Staff)

    res = await client.get("/api/users/", headers=direction)
    assert res.status_code == 200
    assert len(res.json()) == 2

    res = await client.get("/api/users/", headers=staff)
    assert res.status_code == 403
    assert res.json()["detail"] == "Access denied for role 'funcionario'"


@pytest.mark.asyncio
async def test_direction_creates_staff(client, make_user):
    _, direction = await make_user(UserRole.Direction)
    res = await client.post(
        "/api/users/",
        json={"name": "Bia", "email": "bia@escola.com", "password": "password123", "role": "funcionario"},
        headers=direction,
    )
    assert res.status_code == 201
    assert res.json()["role"] == "funcionario"


@pytest.mark.asyncio
async def test_get_user_self_or_staff(client, make_user):
    student, student_headers = await make_user()
    other, other_headers = await make_user()
    _, staff = await make_user(UserRole.Staff)

    assert (await client.get(f"/api/users/{student['id']}", headers=student_headers)).status_code == 200
    assert (await client.get(f"/api/users/{student['id']}", headers=other_headers)).status_code == 403
    assert (await client.get(f"/api/users/{student['id']}", headers=staff)).status_code == 200
    assert (await client.get("/api/users/missing", headers=staff)).status_code == 404


@pytest.mark.asyncio
async def test_student_cannot_escalate_role(client, make_user):
    student, headers = await make_user()

    res = await client.patch(f"/api/users/{student['id']}", json={"role": "direcao"}, headers=headers)
    assert res.status_code == 403

    res = await client.patch(f"/api/users/{student['id']}", json={"name": "Novo Nome"}, headers=headers)
    assert res.status_code == 200
    assert res.json()["name"] == "Novo Nome"
    assert res.json()["role"] == "aluno"


@pytest.mark.asyncio
async def test_direction_changes_role(client, make_user):
    student, _ = await make_user()
    _, direction = await make_user(UserRole.Direction)

    res = await client.patch(f"/api/users/{student['id']}", json={"role": "funcionario"}, headers=direction)
    assert res.status_code == 200
    assert res.json()["role"] == "funcionario"


@pytest.mark.asyncio
async def test_deactivation_locks_user_out(client, make_user):
    student, student_headers = await make_user()
    director, direction = await make_user(UserRole.Direction)

    res = await client.patch(f"/api/users/{student['id']}/active", json={"isActive": False}, headers=direction)
    assert res.status_code == 200
    assert res.json()["isActive"] is False

    res = await client.get("/api/reports/", headers=student_headers)
    assert res.status_code == 403

    res = await client.patch(f"/api/users/{director['id']}/active", json={"isActive": False}, headers=direction)
    assert res.status_code == 400


@pytest.mark.asyncio
async def test_rejected_values_map_to_400(client, make_user):
    await make_user(email="taken@escola.com")
    director, direction = await make_user(UserRole.Direction)

    res = await client.post(
        "/api/users/",
        json={"name": "Outra", "email": "taken@escola.com", "password": "password123"},
        headers=direction,
    )
    assert res.status_code == 400
    assert res.json()["detail"] == "User with this email already exists"

    res = await client.patch(f"/api/users/{director['id']}/active", json={"isActive": False}, headers=direction)
    assert res.status_code == 400
    assert res.json()["detail"] == "You cannot deactivate your own account"
