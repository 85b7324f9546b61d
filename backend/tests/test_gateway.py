"""
TaskTrack Backend - Persistence Gateway Tests
=============================================

What:  Gateway CRUD against a real SQLite database, plus fault translation
       with a mocked session.
"""

import pytest
from sqlalchemy.exc import OperationalError

from tasktrack.exceptions import ConflictError, DatabaseError
from tasktrack.services.gateway import PersistenceGateway


class TestUsers:

    @pytest.mark.asyncio
    async def test_create_and_find_user(self, db_session):
        gateway = PersistenceGateway(db_session)

        user = await gateway.create_user(user_name="ana", email="ana@x.com", password="p1")

        assert user.id is not None
        assert user.created_in is not None
        found = await gateway.find_user_by_email("ana@x.com")
        assert found is not None and found.id == user.id
        assert (await gateway.find_user_by_id(user.id)).email == "ana@x.com"

    @pytest.mark.asyncio
    async def test_missing_user_lookups_return_none(self, db_session):
        gateway = PersistenceGateway(db_session)

        assert await gateway.find_user_by_email("nobody@x.com") is None
        assert await gateway.find_user_by_email_with_tasks("nobody@x.com") is None
        assert await gateway.find_user_by_id(12345) is None

    @pytest.mark.asyncio
    async def test_duplicate_email_hits_unique_constraint(self, database):
        async with database.session() as first:
            await PersistenceGateway(first).create_user("ana", "ana@x.com", "p1")

        async with database.session() as second:
            with pytest.raises(ConflictError):
                await PersistenceGateway(second).create_user("ana2", "ana@x.com", "p2")

    @pytest.mark.asyncio
    async def test_find_with_tasks_loads_tasks(self, db_session):
        gateway = PersistenceGateway(db_session)
        user = await gateway.create_user("ana", "ana@x.com", "p1")
        await gateway.create_task(user_id=user.id, task_name="one")
        await gateway.create_task(user_id=user.id, task_name="two")
        db_session.expunge_all()

        loaded = await gateway.find_user_by_email_with_tasks("ana@x.com")

        assert sorted(t.task_name for t in loaded.tasks) == ["one", "two"]


class TestTasks:

    @pytest.mark.asyncio
    async def test_create_task_defaults_state_false(self, db_session):
        gateway = PersistenceGateway(db_session)
        user = await gateway.create_user("ana", "ana@x.com", "p1")

        task = await gateway.create_task(user_id=user.id, task_name="buy milk")

        assert task.id is not None
        assert task.state is False
        assert task.user_id == user.id

    @pytest.mark.asyncio
    async def test_list_is_scoped_to_user(self, db_session):
        gateway = PersistenceGateway(db_session)
        ana = await gateway.create_user("ana", "ana@x.com", "p1")
        bob = await gateway.create_user("bob", "bob@x.com", "p2")
        await gateway.create_task(user_id=ana.id, task_name="a1")
        await gateway.create_task(user_id=bob.id, task_name="b1")
        await gateway.create_task(user_id=ana.id, task_name="a2")

        tasks = await gateway.list_tasks_for_user(ana.id)

        assert sorted(t.task_name for t in tasks) == ["a1", "a2"]
        assert await gateway.list_tasks_for_user(9999) == []

    @pytest.mark.asyncio
    async def test_update_task_state(self, db_session):
        gateway = PersistenceGateway(db_session)
        user = await gateway.create_user("ana", "ana@x.com", "p1")
        task = await gateway.create_task(user_id=user.id, task_name="buy milk")

        updated = await gateway.update_task_state(task.id, True)
        assert updated.state is True

        updated = await gateway.update_task_state(task.id, False)
        assert updated.state is False
        assert (await gateway.find_task(task.id)).state is False

    @pytest.mark.asyncio
    async def test_update_missing_task_returns_none(self, db_session):
        gateway = PersistenceGateway(db_session)

        assert await gateway.update_task_state(404, True) is None

    @pytest.mark.asyncio
    async def test_delete_task(self, db_session):
        gateway = PersistenceGateway(db_session)
        user = await gateway.create_user("ana", "ana@x.com", "p1")
        task = await gateway.create_task(user_id=user.id, task_name="buy milk")

        assert await gateway.delete_task(task.id) is True
        assert await gateway.find_task(task.id) is None
        assert await gateway.delete_task(task.id) is False


class TestFaults:

    @pytest.mark.asyncio
    async def test_store_error_becomes_database_error(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))
        gateway = PersistenceGateway(mock_db_session)

        with pytest.raises(DatabaseError) as exc_info:
            await gateway.list_tasks_for_user(1)

        assert exc_info.value.context["operation"] == "list_tasks_for_user"
        assert "down" not in exc_info.value.message
        mock_db_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failed_commit_on_create_task(self, mock_db_session):
        mock_db_session.commit.side_effect = OperationalError("INSERT", {}, Exception("disk full"))
        gateway = PersistenceGateway(mock_db_session)

        with pytest.raises(DatabaseError):
            await gateway.create_task(user_id=1, task_name="buy milk")

        mock_db_session.rollback.assert_awaited_once()
