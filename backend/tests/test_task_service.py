"""
TaskTrack Backend - Task Service Unit Tests
===========================================

What:  Task rules against a mocked gateway: validation and existence checks
       always happen before the mutation.
"""

import pytest

from conftest import make_task, make_user
from tasktrack.exceptions import NotFoundError, ValidationError
from tasktrack.services.task_service import TaskService


class TestListTasks:

    def setup_method(self):
        self.service = TaskService()

    @pytest.mark.asyncio
    async def test_unknown_user_skips_task_query(self, mock_gateway):
        mock_gateway.find_user_by_id.return_value = None

        with pytest.raises(NotFoundError, match="User not found"):
            await self.service.list_tasks(mock_gateway, 99)

        mock_gateway.list_tasks_for_user.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_user_without_tasks_gets_empty_list(self, mock_gateway):
        mock_gateway.find_user_by_id.return_value = make_user()
        mock_gateway.list_tasks_for_user.return_value = []

        assert await self.service.list_tasks(mock_gateway, 1) == []

    @pytest.mark.asyncio
    async def test_returns_tasks_of_user(self, mock_gateway):
        mock_gateway.find_user_by_id.return_value = make_user()
        mock_gateway.list_tasks_for_user.return_value = [
            make_task(task_id=1), make_task(task_id=2, task_name="walk dog"),
        ]

        result = await self.service.list_tasks(mock_gateway, 1)

        assert [t.id for t in result] == [1, 2]
        assert all(t.user_id == 1 for t in result)
        mock_gateway.list_tasks_for_user.assert_awaited_once_with(1)


class TestCreateTask:

    def setup_method(self):
        self.service = TaskService()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bad_name", [None, "", 42, ["buy milk"]])
    async def test_invalid_task_name_never_reaches_store(self, mock_gateway, bad_name):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.create_task(mock_gateway, 1, bad_name)

        assert exc_info.value.field == "task_name"
        mock_gateway.find_user_by_id.assert_not_awaited()
        mock_gateway.create_task.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_user_creates_nothing(self, mock_gateway):
        mock_gateway.find_user_by_id.return_value = None

        with pytest.raises(NotFoundError):
            await self.service.create_task(mock_gateway, 99, "buy milk")

        mock_gateway.create_task.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_echoes_stored_task(self, mock_gateway):
        mock_gateway.find_user_by_id.return_value = make_user()
        mock_gateway.create_task.return_value = make_task(task_id=5)

        result = await self.service.create_task(mock_gateway, 1, "buy milk")

        assert result.message == "Task created successfully"
        assert result.task.id == 5
        assert result.task.state is False
        mock_gateway.create_task.assert_awaited_once_with(user_id=1, task_name="buy milk")


class TestDeleteTask:

    def setup_method(self):
        self.service = TaskService()

    @pytest.mark.asyncio
    async def test_missing_task_is_not_deleted(self, mock_gateway):
        mock_gateway.find_task.return_value = None

        with pytest.raises(NotFoundError, match="Task not found"):
            await self.service.delete_task(mock_gateway, 3)

        mock_gateway.delete_task.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_existing_task(self, mock_gateway):
        mock_gateway.find_task.return_value = make_task(task_id=3)
        mock_gateway.delete_task.return_value = True

        result = await self.service.delete_task(mock_gateway, 3)

        assert result.message == "Task deleted successfully"

    @pytest.mark.asyncio
    async def test_row_vanishing_before_delete_is_not_found(self, mock_gateway):
        mock_gateway.find_task.return_value = make_task(task_id=3)
        mock_gateway.delete_task.return_value = False

        with pytest.raises(NotFoundError):
            await self.service.delete_task(mock_gateway, 3)


class TestUpdateTaskState:

    def setup_method(self):
        self.service = TaskService()

    @pytest.mark.asyncio
    async def test_missing_state_is_rejected_first(self, mock_gateway):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.update_task_state(mock_gateway, 1, None)

        assert exc_info.value.field == "state"
        mock_gateway.find_task.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_task_is_not_found(self, mock_gateway):
        mock_gateway.find_task.return_value = None

        with pytest.raises(NotFoundError):
            await self.service.update_task_state(mock_gateway, 1, True)

        mock_gateway.update_task_state.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_echoes_new_state(self, mock_gateway):
        mock_gateway.find_task.return_value = make_task(state=False)
        mock_gateway.update_task_state.return_value = make_task(state=True)

        result = await self.service.update_task_state(mock_gateway, 1, True)

        assert result.message == "Task state updated successfully"
        assert result.task.state is True
        mock_gateway.update_task_state.assert_awaited_once_with(1, True)

    @pytest.mark.asyncio
    async def test_row_vanishing_before_update_is_not_found(self, mock_gateway):
        mock_gateway.find_task.return_value = make_task()
        mock_gateway.update_task_state.return_value = None

        with pytest.raises(NotFoundError):
            await self.service.update_task_state(mock_gateway, 1, False)
