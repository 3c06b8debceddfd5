"""端到端：任务与用户完整生命周期的事件历史

流程：创建用户 -> 创建任务 -> 指派 -> 完成 -> 删除，
每一步通过 API 验证当前状态，最后校验事件日志的顺序与内容。
"""

from datetime import datetime

from httpx import AsyncClient


class TestTaskLifecycle:
    """HTTP 写入 -> 聚合行 + 事件日志"""

    async def test_full_lifecycle_history(self, client: AsyncClient):
        resp = await client.post("/api/users", json={"name": "alice"})
        assert resp.status_code == 201
        user_id = resp.json()["id"]

        resp = await client.post("/api/tasks", json={"title": "修复登录"})
        assert resp.status_code == 201
        task = resp.json()
        task_id = task["id"]

        resp = await client.put(
            f"/api/tasks/{task_id}",
            json={"title": "修复登录", "status": "IN_PROGRESS", "assignee_id": user_id},
        )
        assert resp.status_code == 200

        resp = await client.put(
            f"/api/tasks/{task_id}",
            json={"title": "修复登录", "status": "DONE", "assignee_id": user_id},
        )
        assert resp.status_code == 200
        assert resp.json()["status"] == "DONE"

        resp = await client.delete(f"/api/tasks/{task_id}")
        assert resp.status_code == 204

        resp = await client.get(f"/api/events/Task/{task_id}")
        assert resp.status_code == 200
        history = resp.json()
        assert [e["type"] for e in history] == ["INSERT", "UPDATE", "UPDATE", "DELETE"]

        insert, first_update, second_update, delete = history
        assert insert["body"]["id"] == task_id
        assert insert["body"]["status"] == "OPEN"
        created_at = datetime.fromisoformat(task["created_at"])
        assert datetime.fromisoformat(insert["body"]["created_at"]) == created_at
        assert first_update["body"]["assignee_id"] == user_id
        assert second_update["body"]["status"] == "DONE"
        assert datetime.fromisoformat(second_update["body"]["created_at"]) == created_at
        assert delete["body"] == {"id": task_id}

        for event in history:
            assert event["entity_name"] == "Task"
            assert event["entity_version"] == 1
            assert event["created_by"] is None

        timestamps = [datetime.fromisoformat(e["created_at"]) for e in history]
        assert timestamps == sorted(timestamps)

        # 用户仍在，其历史只有 INSERT
        resp = await client.get(f"/api/events/User/{user_id}")
        assert [e["type"] for e in resp.json()] == ["INSERT"]

    async def test_event_log_matches_live_rows(self, client: AsyncClient):
        ids = []
        for title in ("a", "b", "c"):
            resp = await client.post("/api/tasks", json={"title": title})
            ids.append(resp.json()["id"])

        await client.delete(f"/api/tasks/{ids[1]}")

        resp = await client.get("/api/tasks")
        live = {t["id"] for t in resp.json()}

        resp = await client.get("/api/events", params={"entity": "Task"})
        latest: dict[str, str] = {}
        for event in resp.json():
            latest[event["body"]["id"]] = event["type"]

        assert {i for i, t in latest.items() if t != "DELETE"} == live
        assert latest[ids[1]] == "DELETE"

    async def test_clear_then_recreate(self, client: AsyncClient):
        await client.post("/api/users", json={"name": "bob"})
        await client.post("/api/tasks", json={"title": "x"})

        assert (await client.delete("/api/tasks")).status_code == 204
        assert (await client.delete("/api/users")).status_code == 204

        # 清空后同名用户可再次创建
        resp = await client.post("/api/users", json={"name": "bob"})
        assert resp.status_code == 201

        resp = await client.get("/api/events")
        types = [(e["entity_name"], e["type"]) for e in resp.json()]
        assert types == [
            ("User", "INSERT"),
            ("Task", "INSERT"),
            ("Task", "DELETE"),
            ("User", "DELETE"),
            ("User", "INSERT"),
        ]
