"""
Unit of work, transactions and entity sets against an in-memory database.
"""

import uuid
from datetime import datetime

import pytest
from sqlalchemy import DateTime
from sqlalchemy.exc import IntegrityError

from taskin.models import Pomodoro, Project, ProjectStatus, Task, utcnow


class TestEntitySet:
    @pytest.mark.asyncio
    async def test_add_save_find(self, db, uow):
        project = Project(name="Persisted")
        db.projects.add(project)

        written = await uow.save_changes()

        assert written == 1
        found = await db.projects.find(project.id)
        assert found is not None
        assert found.name == "Persisted"
        assert found.status == ProjectStatus.ACTIVE
        assert found.updated_at is None

    @pytest.mark.asyncio
    async def test_find_missing_returns_none(self, db):
        assert await db.tasks.find(uuid.uuid4()) is None

    @pytest.mark.asyncio
    async def test_list_count_offset_limit(self, db, uow):
        for i in range(5):
            db.projects.add(Project(name=f"p{i}", status=ProjectStatus.ON_HOLD if i % 2 else ProjectStatus.ACTIVE))
        await uow.save_changes()

        assert await db.projects.count() == 5
        assert await db.projects.count(Project.status == ProjectStatus.ON_HOLD) == 2
        page = await db.projects.list(offset=1, limit=2)
        assert [p.name for p in page] == ["p1", "p2"]
        ordered = await db.projects.list(order_by=[Project.name.desc()], limit=1)
        assert ordered[0].name == "p4"

    @pytest.mark.asyncio
    async def test_delete_where_returns_row_count(self, db, uow):
        project = Project(name="p")
        db.projects.add(project)
        await uow.save_changes()
        for _ in range(3):
            db.tasks.add(Task(description="t", project_id=project.id))
        await uow.save_changes()

        removed = await db.tasks.delete_where(Task.project_id == project.id)
        await uow.save_changes()

        assert removed == 3
        assert await db.tasks.count() == 0

    @pytest.mark.asyncio
    async def test_foreign_keys_are_enforced(self, db, uow):
        db.tasks.add(Task(description="orphan", project_id=uuid.uuid4()))

        with pytest.raises(IntegrityError):
            await uow.save_changes()


class TestTransactions:
    @pytest.mark.asyncio
    async def test_committed_transaction_persists(self, db, uow):
        async with uow.transaction() as transaction:
            assert transaction is not None
            assert transaction.is_active
            db.projects.add(Project(name="kept"))
            await uow.save_changes()
            await uow.commit_transaction(transaction)

        assert not transaction.is_active
        assert await db.projects.count() == 1

    @pytest.mark.asyncio
    async def test_uncommitted_transaction_rolls_back(self, db, uow):
        async with uow.transaction() as transaction:
            db.projects.add(Project(name="discarded"))
            await uow.save_changes()
            assert transaction.is_active

        assert not transaction.is_active
        assert await db.projects.count() == 0

    @pytest.mark.asyncio
    async def test_exception_inside_transaction_rolls_back(self, db, uow):
        with pytest.raises(RuntimeError):
            async with uow.transaction():
                db.projects.add(Project(name="discarded"))
                await uow.save_changes()
                raise RuntimeError("abort")

        assert await db.projects.count() == 0

    @pytest.mark.asyncio
    async def test_begin_adopts_transaction_opened_by_a_read(self, db, uow):
        await db.projects.count()  # autobegins

        transaction = await uow.begin_transaction()
        db.projects.add(Project(name="kept"))
        await uow.save_changes()
        assert transaction.is_active
        await uow.commit_transaction(transaction)

        assert not transaction.is_active
        assert await db.projects.count() == 1

    @pytest.mark.asyncio
    async def test_adopted_transaction_rolls_back_uncommitted_writes(self, db, uow):
        await db.projects.count()

        async with uow.transaction():
            db.projects.add(Project(name="first"))
            await uow.save_changes()
            db.projects.add(Project(name="second"))
            await uow.save_changes()

        assert await db.projects.count() == 0

    @pytest.mark.asyncio
    async def test_transaction_ids_are_unique(self, uow):
        first = await uow.begin_transaction()
        await uow.commit_transaction(first)
        second = await uow.begin_transaction()
        await uow.commit_transaction(second)

        assert first.transaction_id != second.transaction_id


class TestModels:
    def test_mark_modified_sets_updated_at(self):
        task = Task(description="t", project_id=uuid.uuid4())
        assert task.updated_at is None

        task.mark_modified()

        assert task.updated_at is not None
        assert task.updated_at.tzinfo is None

    def test_pomodoro_defaults(self):
        pomodoro = Pomodoro(task_id=uuid.uuid4(), start_time=utcnow())

        assert pomodoro.duration_in_minutes == 25
        assert isinstance(pomodoro.id, uuid.UUID)

    @pytest.mark.parametrize(
        "column",
        [
            Project.__table__.c.created_at,
            Project.__table__.c.updated_at,
            Project.__table__.c.due_date,
            Task.__table__.c.deadline,
            Pomodoro.__table__.c.start_time,
        ],
        ids=lambda column: f"{column.table.name}.{column.name}",
    )
    def test_datetime_columns_are_naive(self, column):
        assert type(column.type) is DateTime
        assert column.type.timezone is False

    @pytest.mark.asyncio
    async def test_naive_datetimes_round_trip(self, db, uow):
        project = Project(name="p", due_date=datetime(2030, 1, 2, 3, 4, 5))
        db.projects.add(project)
        await uow.save_changes()
        task = Task(description="t", project_id=project.id, deadline=datetime(2030, 1, 1))
        db.tasks.add(task)
        await uow.save_changes()
        db.pomodoros.add(Pomodoro(task_id=task.id, start_time=datetime(2029, 12, 31, 23, 30)))
        await uow.save_changes()

        db.session.expunge_all()
        stored = await db.projects.find(project.id)
        stored.mark_modified()
        await uow.save_changes()
        db.session.expunge_all()
        stored = await db.projects.find(project.id)

        assert stored.due_date == datetime(2030, 1, 2, 3, 4, 5)
        assert stored.updated_at.tzinfo is None
        pomodoros = await db.pomodoros.list()
        assert pomodoros[0].start_time == datetime(2029, 12, 31, 23, 30)
