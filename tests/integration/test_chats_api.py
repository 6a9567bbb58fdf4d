"""
채팅 기록 API 통합 테스트 (메모리 Redis)
"""
import pytest


class TestChatsApi:

    @pytest.mark.asyncio
    async def test_create_defaults_title(self, async_client):
        response = await async_client.post("/api/chats", json={})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["chat"]["title"] == "New Chat"
        assert body["chat"]["messages"] == []
        assert body["chat"]["fileIds"] == []

    @pytest.mark.asyncio
    async def test_full_conversation(self, async_client):
        chat_id = (await async_client.post("/api/chats", json={"title": "Support"})).json()["chat"]["id"]

        for role, content in (("user", "hi"), ("assistant", "hello")):
            response = await async_client.put(
                "/api/chats",
                json={"id": chat_id, "message": {"role": role, "content": content}},
            )
            assert response.status_code == 200

        await async_client.put("/api/chats", json={"id": chat_id, "title": "Renamed", "fileIds": ["f1", "f1"]})

        chat = (await async_client.get("/api/chats", params={"id": chat_id})).json()["chat"]
        assert chat["title"] == "Renamed"
        assert [m["content"] for m in chat["messages"]] == ["hi", "hello"]
        assert chat["fileIds"] == ["f1"]

        chats = (await async_client.get("/api/chats")).json()["chats"]
        assert [c["id"] for c in chats] == [chat_id]

    @pytest.mark.asyncio
    async def test_missing_chat(self, async_client):
        response = await async_client.get("/api/chats", params={"id": "missing"})
        assert response.status_code == 404
        assert response.json() == {"error": "Chat not found"}

        response = await async_client.put("/api/chats", json={"id": "missing", "title": "x"})
        assert response.status_code == 404

        response = await async_client.delete("/api/chats", params={"id": "missing"})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_update_requires_id(self, async_client):
        response = await async_client.put("/api/chats", json={"title": "x"})

        assert response.status_code == 400
        assert response.json() == {"error": "Chat ID is required"}

    @pytest.mark.asyncio
    async def test_invalid_role_rejected(self, async_client):
        chat_id = (await async_client.post("/api/chats", json={})).json()["chat"]["id"]

        response = await async_client.put(
            "/api/chats",
            json={"id": chat_id, "message": {"role": "robot", "content": "beep"}},
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_delete(self, async_client):
        chat_id = (await async_client.post("/api/chats", json={})).json()["chat"]["id"]

        assert (await async_client.delete("/api/chats", params={"id": chat_id})).status_code == 200
        assert (await async_client.get("/api/chats")).json()["chats"] == []
