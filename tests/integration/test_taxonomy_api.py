"""
카테고리/태그/페르소나 API 통합 테스트
"""
import pytest


class TestCategoriesApi:

    @pytest.mark.asyncio
    async def test_crud(self, async_client):
        response = await async_client.post("/api/categories", json={"name": "Billing", "description": "Money"})
        assert response.status_code == 200
        category_id = response.json()["id"]

        response = await async_client.get("/api/categories", params={"id": category_id})
        assert response.json()["category"]["name"] == "Billing"

        response = await async_client.put("/api/categories", json={"id": category_id, "name": "Payments"})
        assert response.status_code == 200

        categories = (await async_client.get("/api/categories")).json()["categories"]
        assert [c["name"] for c in categories] == ["Payments"]

        response = await async_client.delete("/api/categories", params={"id": category_id})
        assert response.status_code == 200

        response = await async_client.get("/api/categories", params={"id": category_id})
        assert response.status_code == 404
        assert response.json() == {"error": "Category not found"}

    @pytest.mark.asyncio
    async def test_create_requires_name(self, async_client):
        response = await async_client.post("/api/categories", json={"description": "no name"})

        assert response.status_code == 400
        assert response.json() == {"error": "Name is required"}

    @pytest.mark.asyncio
    async def test_delete_keeps_items(self, async_client):
        category_id = (await async_client.post("/api/categories", json={"name": "Billing"})).json()["id"]
        item_id = (await async_client.post(
            "/api/knowledge",
            json={"title": "t", "content": "c", "categoryId": category_id},
        )).json()["id"]

        await async_client.delete("/api/categories", params={"id": category_id})

        item = (await async_client.get("/api/knowledge", params={"id": item_id})).json()["item"]
        assert item["categoryId"] is None
        assert item["version"] == 1


class TestTagsApi:

    @pytest.mark.asyncio
    async def test_bulk_create_returns_ids_in_order(self, async_client):
        response = await async_client.post("/api/tags", json={"names": ["x", "y", " x "]})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert len(body["tagIds"]) == 3
        assert body["tagIds"][0] == body["tagIds"][2]

    @pytest.mark.asyncio
    async def test_create_requires_name(self, async_client):
        response = await async_client.post("/api/tags", json={})

        assert response.status_code == 400
        assert response.json() == {"error": "Tag name is required"}

    @pytest.mark.asyncio
    async def test_link_and_unlink_item(self, async_client):
        item_id = (await async_client.post("/api/knowledge", json={"title": "t", "content": "c"})).json()["id"]

        response = await async_client.post("/api/tags", json={"name": "faq", "knowledgeItemId": item_id})
        assert response.status_code == 200
        tag_id = response.json()["id"]

        tags = (await async_client.get("/api/tags", params={"knowledgeItemId": item_id})).json()["tags"]
        assert [t["id"] for t in tags] == [tag_id]

        response = await async_client.delete("/api/tags", params={"id": tag_id, "knowledgeItemId": item_id})
        assert response.status_code == 200
        assert (await async_client.get("/api/tags", params={"knowledgeItemId": item_id})).json()["tags"] == []

        # 연결만 해제되고 태그는 남아 있음
        assert (await async_client.get("/api/tags", params={"id": tag_id})).status_code == 200

    @pytest.mark.asyncio
    async def test_link_to_missing_item(self, async_client):
        response = await async_client.post("/api/tags", json={"name": "faq", "knowledgeItemId": "missing"})

        assert response.status_code == 404
        assert response.json() == {"error": "Knowledge item not found"}

    @pytest.mark.asyncio
    async def test_update_requires_id_and_name(self, async_client):
        response = await async_client.put("/api/tags", json={"id": "only-id"})

        assert response.status_code == 400
        assert response.json() == {"error": "Tag ID and name are required"}

    @pytest.mark.asyncio
    async def test_delete_missing(self, async_client):
        response = await async_client.delete("/api/tags", params={"id": "missing"})

        assert response.status_code == 404
        assert response.json() == {"error": "Tag not found"}

        response = await async_client.delete("/api/tags")
        assert response.status_code == 400


class TestPersonasApi:

    @pytest.mark.asyncio
    async def test_create_and_list(self, async_client):
        response = await async_client.post(
            "/api/personas",
            json={"name": "Pirate", "description": "Arr", "systemPrompt": "Talk like a pirate."},
        )
        assert response.status_code == 200
        persona_id = response.json()["id"]

        personas = (await async_client.get("/api/personas")).json()["personas"]
        assert [p["id"] for p in personas] == [persona_id]
        assert personas[0]["systemPrompt"] == "Talk like a pirate."

    @pytest.mark.asyncio
    async def test_create_requires_prompt(self, async_client):
        response = await async_client.post("/api/personas", json={"name": "Pirate"})

        assert response.status_code == 400
        assert response.json() == {"error": "Name and system prompt are required"}

    @pytest.mark.asyncio
    async def test_update_and_delete_missing(self, async_client):
        response = await async_client.put("/api/personas", json={"id": "missing", "name": "x"})
        assert response.status_code == 404

        response = await async_client.delete("/api/personas", params={"id": "missing"})
        assert response.status_code == 404
        assert response.json() == {"error": "Persona not found"}
