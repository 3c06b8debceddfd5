"""任务 API 测试

测试内容：
1. 创建 / 查询 / 列表筛选
2. 更新保持 id 与 created_at
3. 删除 / 清空，以及 400 / 404 / 422 映射
"""

from httpx import AsyncClient


async def _create_task(client: AsyncClient, **fields) -> dict:
    payload = {"title": "默认标题", **fields}
    resp = await client.post("/api/tasks", json=payload)
    assert resp.status_code == 201
    return resp.json()


class TestTasksApi:
    """/api/tasks"""

    async def test_create_and_get(self, client: AsyncClient):
        created = await _create_task(client, title="写周报", description="本周进展")
        assert created["id"]
        assert created["status"] == "OPEN"
        assert created["created_at"] == created["updated_at"]
        assert created["assignee_id"] is None

        resp = await client.get(f"/api/tasks/{created['id']}")
        assert resp.status_code == 200
        assert resp.json() == created

    async def test_supplied_id_returns_400(self, client: AsyncClient, test_app):
        resp = await client.post(
            "/api/tasks",
            json={"id": "01JFAKE0000000000000000001", "title": "伪造"},
        )
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "MALFORMED_REQUEST"
        assert await test_app.state.store_group.event_store.count_events() == 0

    async def test_validation(self, client: AsyncClient):
        resp = await client.post("/api/tasks", json={"title": ""})
        assert resp.status_code == 422

        resp = await client.post("/api/tasks", json={"title": "x", "status": "BLOCKED"})
        assert resp.status_code == 422

    async def test_list_filters(self, client: AsyncClient):
        a = await _create_task(client, title="a", assignee_id="u1")
        b = await _create_task(client, title="b", status="DONE", assignee_id="u2")
        c = await _create_task(client, title="c", status="DONE", assignee_id="u1")

        resp = await client.get("/api/tasks")
        assert [t["id"] for t in resp.json()] == [a["id"], b["id"], c["id"]]

        resp = await client.get("/api/tasks", params={"status": "DONE"})
        assert [t["id"] for t in resp.json()] == [b["id"], c["id"]]

        resp = await client.get("/api/tasks", params={"assignee_id": "u1"})
        assert [t["id"] for t in resp.json()] == [a["id"], c["id"]]

        resp = await client.get("/api/tasks", params={"status": "DONE", "assignee_id": "u1"})
        assert [t["id"] for t in resp.json()] == [c["id"]]

    async def test_update(self, client: AsyncClient):
        created = await _create_task(client, title="原标题")

        resp = await client.put(
            f"/api/tasks/{created['id']}",
            json={"title": "新标题", "status": "IN_PROGRESS", "assignee_id": "u9"},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["id"] == created["id"]
        assert body["created_at"] == created["created_at"]
        assert body["title"] == "新标题"
        assert body["status"] == "IN_PROGRESS"
        assert body["assignee_id"] == "u9"

    async def test_update_mismatched_id_returns_400(self, client: AsyncClient):
        created = await _create_task(client)
        resp = await client.put(
            f"/api/tasks/{created['id']}",
            json={"id": "01JOTHER000000000000000001", "title": "x"},
        )
        assert resp.status_code == 400

    async def test_update_unknown_returns_404(self, client: AsyncClient):
        resp = await client.put("/api/tasks/01JMISSING0000000000000001", json={"title": "x"})
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "TASK_NOT_FOUND"

    async def test_delete(self, client: AsyncClient):
        created = await _create_task(client)

        resp = await client.delete(f"/api/tasks/{created['id']}")
        assert resp.status_code == 204

        resp = await client.get(f"/api/tasks/{created['id']}")
        assert resp.status_code == 404

        resp = await client.delete(f"/api/tasks/{created['id']}")
        assert resp.status_code == 404

    async def test_clear(self, client: AsyncClient):
        await _create_task(client, title="a")
        await _create_task(client, title="b")

        resp = await client.delete("/api/tasks")
        assert resp.status_code == 204

        resp = await client.get("/api/tasks")
        assert resp.json() == []
