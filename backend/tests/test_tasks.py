"""
Task API tests.
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio

from taskin.metrics import TASKS_COMPLETED, TASKS_CREATED, TASKS_DELETED
from taskin.models import Task, TaskStatus, utcnow


def future(days: int = 7) -> str:
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()


class TestTaskCrud:
    @pytest.mark.asyncio
    async def test_create_and_get(self, client, make_project, metrics):
        project_id = await make_project()

        response = await client.post(
            "/api/tasks/",
            json={"description": "Write tests", "projectId": project_id},
        )
        assert response.status_code == 201
        task_id = response.json()["id"]
        assert response.headers["location"].endswith(f"/api/tasks/{task_id}")
        assert metrics.counter(TASKS_CREATED) == 1

        task = (await client.get(f"/api/tasks/{task_id}")).json()
        assert task["description"] == "Write tests"
        assert task["projectId"] == project_id
        assert task["status"] == "todo"
        assert task["deadline"] is None
        assert task["pomodoros"] == []

    @pytest.mark.asyncio
    async def test_get_includes_pomodoros(self, client, make_project, make_task, make_pomodoro):
        task_id = await make_task(await make_project())
        pomodoro_id = await make_pomodoro(task_id, duration_in_minutes=50)

        task = (await client.get(f"/api/tasks/{task_id}")).json()

        assert [p["id"] for p in task["pomodoros"]] == [pomodoro_id]
        assert task["pomodoros"][0]["durationInMinutes"] == 50

    @pytest.mark.asyncio
    async def test_get_unknown_task_is_404(self, client):
        missing = uuid.uuid4()

        response = await client.get(f"/api/tasks/{missing}")

        assert response.status_code == 404
        assert response.json()["values"] == ["Task", str(missing)]

    @pytest.mark.asyncio
    async def test_create_for_unknown_project_is_500_without_details(self, client):
        response = await client.post(
            "/api/tasks/",
            json={"description": "orphan", "projectId": str(uuid.uuid4())},
        )

        assert response.status_code == 500
        body = response.json()
        assert body["code"] == "INTERNAL_ERROR"
        assert body["message"] == "An error occurred during action handling"
        assert "FOREIGN KEY" not in response.text

    @pytest.mark.asyncio
    async def test_update_keeps_status_and_deadline_when_omitted(self, client, make_project, make_task):
        deadline = future(3)
        task_id = await make_task(await make_project(), status="in_progress", deadline=deadline)

        response = await client.put(f"/api/tasks/{task_id}", json={"description": "Renamed"})
        assert response.status_code == 200

        task = (await client.get(f"/api/tasks/{task_id}")).json()
        assert task["description"] == "Renamed"
        assert task["status"] == "in_progress"
        assert task["deadline"] is not None
        assert task["updatedAt"] is not None

    @pytest.mark.asyncio
    async def test_update_to_done_counts_completion_once(self, client, make_project, make_task, metrics):
        task_id = await make_task(await make_project())

        await client.put(f"/api/tasks/{task_id}", json={"description": "Task", "status": "done"})
        await client.put(f"/api/tasks/{task_id}", json={"description": "Task", "status": "done"})

        assert metrics.counter(TASKS_COMPLETED) == 1

    @pytest.mark.asyncio
    async def test_update_unknown_task_is_404(self, client):
        response = await client.put(f"/api/tasks/{uuid.uuid4()}", json={"description": "x"})

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_removes_pomodoros(self, client, make_project, make_task, make_pomodoro, metrics):
        task_id = await make_task(await make_project())
        pomodoro_id = await make_pomodoro(task_id)

        response = await client.delete(f"/api/tasks/{task_id}")

        assert response.status_code == 204
        assert metrics.counter(TASKS_DELETED) == 1
        assert (await client.get(f"/api/tasks/{task_id}")).status_code == 404
        assert (await client.get(f"/api/pomodoros/{pomodoro_id}")).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_unknown_task_is_404(self, client):
        assert (await client.delete(f"/api/tasks/{uuid.uuid4()}")).status_code == 404


class TestTaskValidation:
    @pytest.mark.asyncio
    async def test_deadline_must_be_in_the_future(self, client, make_project):
        project_id = await make_project()
        yesterday = (datetime.now(timezone.utc) - timedelta(days=1)).isoformat()

        response = await client.post(
            "/api/tasks/",
            json={"description": "late", "projectId": project_id, "deadline": yesterday},
        )

        assert response.status_code == 400
        assert response.json()["values"][0]["loc"] == ["body", "deadline"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("description", ["", "x" * 501])
    async def test_description_length(self, client, make_project, description):
        project_id = await make_project()

        response = await client.post(
            "/api/tasks/",
            json={"description": description, "projectId": project_id},
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_status_is_rejected(self, client, make_project, make_task):
        task_id = await make_task(await make_project())

        response = await client.patch(f"/api/tasks/{task_id}/status", json={"status": "blocked"})

        assert response.status_code == 400


class TestTaskListing:
    @pytest.mark.asyncio
    async def test_paged_list_is_newest_first_within_project(self, client, make_project, make_task):
        project_id = await make_project()
        other_id = await make_project(name="other")
        for i in range(5):
            await make_task(project_id, description=f"t{i}")
        await make_task(other_id)

        page = (
            await client.get("/api/tasks/", params={"projectId": project_id, "page": 2, "size": 2})
        ).json()

        assert page["total"] == 5
        assert [t["description"] for t in page["data"]] == ["t2", "t1"]

    @pytest.mark.asyncio
    async def test_default_page_size(self, client):
        page = (await client.get("/api/tasks/")).json()

        assert page == {"data": [], "total": 0, "page": 1, "size": 25}


class TestTaskStatus:
    @pytest.mark.asyncio
    async def test_patch_status(self, client, make_project, make_task, metrics):
        task_id = await make_task(await make_project())

        response = await client.patch(f"/api/tasks/{task_id}/status", json={"status": "done"})

        assert response.status_code == 200
        task = (await client.get(f"/api/tasks/{task_id}")).json()
        assert task["status"] == "done"
        assert task["updatedAt"] is not None
        assert metrics.counter(TASKS_COMPLETED) == 1

    @pytest.mark.asyncio
    async def test_patch_status_unknown_task_is_404(self, client):
        response = await client.patch(f"/api/tasks/{uuid.uuid4()}/status", json={"status": "done"})

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_bulk_update_ignores_missing_ids(self, client, make_project, make_task):
        project_id = await make_project()
        task_ids = [await make_task(project_id) for _ in range(3)]

        response = await client.post(
            "/api/tasks/bulk-update-status",
            json={"taskIds": task_ids[:2] + [str(uuid.uuid4())], "status": "in_progress"},
        )

        assert response.status_code == 200
        assert response.json() == {"updated": 2}
        statuses = [(await client.get(f"/api/tasks/{t}")).json()["status"] for t in task_ids]
        assert statuses == ["in_progress", "in_progress", "todo"]

    @pytest.mark.asyncio
    async def test_bulk_update_requires_ids(self, client):
        response = await client.post(
            "/api/tasks/bulk-update-status",
            json={"taskIds": [], "status": "done"},
        )

        assert response.status_code == 400


class TestTaskDuplicate:
    @pytest.mark.asyncio
    async def test_copy_is_a_new_todo_in_the_same_project(self, client, make_project, make_task):
        project_id = await make_project()
        deadline = future(10)
        task_id = await make_task(project_id, description="Plan", status="done", deadline=deadline)

        response = await client.post(f"/api/tasks/{task_id}/duplicate")

        assert response.status_code == 201
        copy_id = response.json()["id"]
        assert copy_id != task_id
        original = (await client.get(f"/api/tasks/{task_id}")).json()
        copy = (await client.get(f"/api/tasks/{copy_id}")).json()
        assert copy["description"] == "Copy of Plan"
        assert copy["status"] == "todo"
        assert copy["projectId"] == project_id
        assert copy["deadline"] == original["deadline"]

    @pytest.mark.asyncio
    async def test_copy_with_new_description(self, client, make_project, make_task):
        task_id = await make_task(await make_project())

        response = await client.post(f"/api/tasks/{task_id}/duplicate", json={"description": "Again"})

        copy = (await client.get(f"/api/tasks/{response.json()['id']}")).json()
        assert copy["description"] == "Again"

    @pytest.mark.asyncio
    async def test_duplicate_unknown_task_is_404(self, client):
        response = await client.post(f"/api/tasks/{uuid.uuid4()}/duplicate")

        assert response.status_code == 404


class TestTaskStats:
    @pytest.mark.asyncio
    async def test_counts_by_status(self, client, make_project, make_task):
        project_id = await make_project()
        for status in ["todo", "todo", "in_progress", "done"]:
            await make_task(project_id, status=status)
        await make_task(await make_project(name="other"))

        stats = (await client.get("/api/tasks/stats", params={"projectId": project_id})).json()
        overall = (await client.get("/api/tasks/stats")).json()

        assert stats == {"total": 4, "todo": 2, "inProgress": 1, "done": 1, "overdue": 0}
        assert overall["total"] == 5

    @pytest.mark.asyncio
    async def test_overdue_excludes_done_tasks(self, client, db, uow, make_project):
        project_id = uuid.UUID(await make_project())
        past = utcnow() - timedelta(days=2)
        db.tasks.add(Task(description="late", project_id=project_id, deadline=past))
        db.tasks.add(Task(description="late but done", project_id=project_id, deadline=past, status=TaskStatus.DONE))
        await uow.save_changes()

        stats = (await client.get("/api/tasks/stats")).json()

        assert stats["overdue"] == 1
        assert stats["done"] == 1


class TestTaskSearch:
    @pytest_asyncio.fixture
    async def seeded(self, client, db, uow, make_project, make_task):
        project_id = await make_project()
        other_id = await make_project(name="other")
        await make_task(project_id, description="Write API docs", status="todo")
        await make_task(project_id, description="Review docs", status="done")
        await make_task(other_id, description="Plan sprint", status="in_progress", deadline=future(3))
        db.tasks.add(
            Task(
                description="Fix login bug",
                project_id=uuid.UUID(project_id),
                deadline=utcnow() - timedelta(days=1),
            )
        )
        await uow.save_changes()
        return project_id, other_id

    @staticmethod
    async def search(client, **body):
        response = await client.post("/api/tasks/search", json=body)
        assert response.status_code == 200
        return response.json()

    @pytest.mark.asyncio
    async def test_empty_body_returns_everything_newest_first(self, client, seeded):
        page = await self.search(client)

        assert page["total"] == 4
        assert page["page"] == 1
        assert page["size"] == 25
        assert [t["description"] for t in page["data"]] == [
            "Fix login bug",
            "Plan sprint",
            "Review docs",
            "Write API docs",
        ]

    @pytest.mark.asyncio
    async def test_query_matches_description_case_insensitively(self, client, seeded):
        page = await self.search(client, query="DOCS")

        assert sorted(t["description"] for t in page["data"]) == ["Review docs", "Write API docs"]

    @pytest.mark.asyncio
    async def test_query_treats_wildcards_literally(self, client, seeded):
        page = await self.search(client, query="%")

        assert page["total"] == 0

    @pytest.mark.asyncio
    async def test_filters(self, client, seeded):
        project_id, other_id = seeded

        by_project = await self.search(client, filters={"projectId": other_id})
        by_status = await self.search(client, filters={"status": "done"})
        open_tasks = await self.search(client, filters={"projectId": project_id, "isCompleted": False})
        overdue = await self.search(client, filters={"isOverdue": True})
        not_overdue = await self.search(client, filters={"isOverdue": False})

        assert [t["description"] for t in by_project["data"]] == ["Plan sprint"]
        assert [t["description"] for t in by_status["data"]] == ["Review docs"]
        assert sorted(t["description"] for t in open_tasks["data"]) == ["Fix login bug", "Write API docs"]
        assert [t["description"] for t in overdue["data"]] == ["Fix login bug"]
        assert not_overdue["total"] == 3

    @pytest.mark.asyncio
    async def test_sort_and_page(self, client, seeded):
        page = await self.search(client, sortBy="title", sortDirection="ASC", page=2, size=2)

        assert page["total"] == 4
        assert [t["description"] for t in page["data"]] == ["Review docs", "Write API docs"]

    @pytest.mark.asyncio
    async def test_unknown_sort_key_falls_back_to_creation_time(self, client, seeded):
        page = await self.search(client, sortBy="colour", sortDirection="asc", size=1)

        assert [t["description"] for t in page["data"]] == ["Write API docs"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [{"page": 0}, {"size": 0}, {"sortDirection": "sideways"}, {"filters": {"status": "blocked"}}],
    )
    async def test_invalid_search_is_rejected(self, client, body):
        response = await client.post("/api/tasks/search", json=body)

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"


class TestToggleCompletion:
    @pytest.mark.asyncio
    async def test_toggle_flips_between_done_and_todo(self, client, make_project, make_task, metrics):
        task_id = await make_task(await make_project(), status="in_progress")

        done = await client.post(f"/api/tasks/{task_id}/toggle-completion")
        reopened = await client.post(f"/api/tasks/{task_id}/toggle-completion")

        assert done.status_code == 200
        assert done.json()["id"] == task_id
        assert done.json()["status"] == "done"
        assert done.json()["updatedAt"] is not None
        assert reopened.json()["status"] == "todo"
        assert metrics.counter(TASKS_COMPLETED) == 1

    @pytest.mark.asyncio
    async def test_toggle_unknown_task_returns_404(self, client):
        response = await client.post(f"/api/tasks/{uuid.uuid4()}/toggle-completion")

        assert response.status_code == 404
        assert response.json()["code"] == "ENTITY_NOT_FOUND"
