"""
Tests for the conversation and message routes.
"""

import pytest

from renoplan.conftest import auth_headers


async def create_conversation(client, token="user-token", **fields) -> dict:
    response = await client.post("/api/conversations", json=fields, headers=auth_headers(token))
    assert response.status_code == 201
    return response.json()


async def add_message(client, conversation_id, role, content, token="user-token", **fields):
    return await client.post(
        f"/api/conversations/{conversation_id}/messages",
        json={"role": role, "content": content, **fields},
        headers=auth_headers(token),
    )


@pytest.mark.asyncio
async def test_create_with_default_title(client):
    conversation = await create_conversation(client)

    assert conversation["title"] == "New conversation"
    assert conversation["project_id"] is None
    assert conversation["user_id"] == "user-123"


@pytest.mark.asyncio
async def test_create_for_another_users_project(client):
    project = (
        await client.post("/api/projects", json={"name": "Bath"}, headers=auth_headers("other-token"))
    ).json()

    response = await client.post(
        "/api/conversations", json={"project_id": project["id"]}, headers=auth_headers()
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_list_is_most_recently_active_first(client):
    older = await create_conversation(client, title="Older")
    await create_conversation(client, title="Newer")
    await add_message(client, older["id"], "user", "bump")

    response = await client.get("/api/conversations", headers=auth_headers())

    titles = [c["title"] for c in response.json()["conversations"]]
    assert titles == ["Older", "Newer"]


@pytest.mark.asyncio
async def test_list_filters_by_project(client):
    project = (
        await client.post("/api/projects", json={"name": "Bath"}, headers=auth_headers())
    ).json()
    await create_conversation(client, project_id=project["id"], title="Bath chat")
    await create_conversation(client, title="Loose chat")

    response = await client.get(
        "/api/conversations", params={"project_id": project["id"]}, headers=auth_headers()
    )

    assert [c["title"] for c in response.json()["conversations"]] == ["Bath chat"]


@pytest.mark.asyncio
async def test_other_users_conversation_is_hidden(client):
    conversation = await create_conversation(client, token="other-token")
    path = f"/api/conversations/{conversation['id']}"

    assert (await client.get(path, headers=auth_headers())).status_code == 404
    assert (await client.get(f"{path}/messages", headers=auth_headers())).status_code == 404
    assert (await add_message(client, conversation["id"], "user", "hi")).status_code == 404
    assert (await client.delete(path, headers=auth_headers())).status_code == 404


@pytest.mark.asyncio
async def test_rename(client):
    conversation = await create_conversation(client)

    response = await client.patch(
        f"/api/conversations/{conversation['id']}",
        json={"title": "Kitchen ideas"},
        headers=auth_headers(),
    )

    assert response.status_code == 200
    assert response.json()["title"] == "Kitchen ideas"


@pytest.mark.asyncio
async def test_messages_in_creation_order(client):
    conversation = await create_conversation(client)
    await add_message(client, conversation["id"], "user", "", image_url="https://img/1.jpg")
    await add_message(client, conversation["id"], "assistant", "Nice tiles")

    response = await client.get(
        f"/api/conversations/{conversation['id']}/messages", headers=auth_headers()
    )

    messages = response.json()["messages"]
    assert [m["role"] for m in messages] == ["user", "assistant"]
    assert messages[0]["image_url"] == "https://img/1.jpg"
    assert messages[1]["content"] == "Nice tiles"


@pytest.mark.asyncio
async def test_invalid_role_is_rejected(client):
    conversation = await create_conversation(client)

    response = await add_message(client, conversation["id"], "system", "nope")

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_delete_removes_conversation_from_list(client):
    conversation = await create_conversation(client)
    await add_message(client, conversation["id"], "user", "hello")

    response = await client.delete(
        f"/api/conversations/{conversation['id']}", headers=auth_headers()
    )

    assert response.status_code == 204
    listed = await client.get("/api/conversations", headers=auth_headers())
    assert listed.json()["total"] == 0
