"""
TaskTrack Backend - Persistence Gateway
=======================================

What:  The only code that talks SQL. Find / create / update / delete over
       users and tasks, bound to one AsyncSession.
How:   Reads return the record, a list, or None. Mutations commit right away
       so the route's response reflects what is durably stored.
       Every SQLAlchemyError is rolled back, logged with its traceback and
       re-raised as DatabaseError; callers never see driver exceptions.

Race handling:
    Services look a row up before acting on it. The mutation that follows
    is still conditional (`UPDATE/DELETE ... WHERE id = :id`) and reports
    how many rows it touched, so a row deleted between the lookup and the
    mutation comes back as "not found" rather than a store fault.
    Registration relies on the UNIQUE constraint on users.email in the same
    way: a duplicate insert raises ConflictError.
"""

import logging
from typing import List, Optional

from fastapi import Depends
from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from tasktrack.database import get_db_session
from tasktrack.exceptions import ConflictError, DatabaseError
from tasktrack.models.task import Task
from tasktrack.models.user import User

logger = logging.getLogger(__name__)


class PersistenceGateway:
    """CRUD access to User and Task rows for a single request."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _fail(self, operation: str, exc: Exception) -> DatabaseError:
        await self.session.rollback()
        logger.error("Store operation %s failed: %s", operation, str(exc), exc_info=True)
        return DatabaseError(
            context={"operation": operation, "error_type": type(exc).__name__},
        )

    # ── Users ─────────────────────────────────────────────────────────────

    async def find_user_by_email(self, email: str) -> Optional[User]:
        try:
            result = await self.session.execute(select(User).where(User.email == email))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise await self._fail("find_user_by_email", e)

    async def find_user_by_email_with_tasks(self, email: str) -> Optional[User]:
        """Like find_user_by_email, with `tasks` eagerly loaded for serialization."""
        try:
            result = await self.session.execute(
                select(User).where(User.email == email).options(selectinload(User.tasks))
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise await self._fail("find_user_by_email_with_tasks", e)

    async def find_user_by_id(self, user_id: int) -> Optional[User]:
        try:
            return await self.session.get(User, user_id)
        except SQLAlchemyError as e:
            raise await self._fail("find_user_by_id", e)

    async def create_user(self, user_name: str, email: str, password: str) -> User:
        user = User(user_name=user_name, email=email, password=password)
        try:
            self.session.add(user)
            await self.session.commit()
            logger.info("User created: id=%s", user.id)
            return user
        except IntegrityError as e:
            await self.session.rollback()
            logger.info("Duplicate registration rejected by store: %s", type(e).__name__)
            raise ConflictError(context={"constraint": "users.email"})
        except SQLAlchemyError as e:
            raise await self._fail("create_user", e)

    # ── Tasks ─────────────────────────────────────────────────────────────

    async def find_task(self, task_id: int) -> Optional[Task]:
        try:
            return await self.session.get(Task, task_id)
        except SQLAlchemyError as e:
            raise await self._fail("find_task", e)

    async def list_tasks_for_user(self, user_id: int) -> List[Task]:
        # No ORDER BY: rows come back in store order
        try:
            result = await self.session.execute(select(Task).where(Task.user_id == user_id))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise await self._fail("list_tasks_for_user", e)

    async def create_task(self, user_id: int, task_name: str) -> Task:
        task = Task(task_name=task_name, user_id=user_id, state=False)
        try:
            self.session.add(task)
            await self.session.commit()
            logger.info("Task created: id=%s user_id=%s", task.id, user_id)
            return task
        except SQLAlchemyError as e:
            raise await self._fail("create_task", e)

    async def update_task_state(self, task_id: int, state: bool) -> Optional[Task]:
        """Set `state`; returns the refreshed task, or None if no row matched."""
        try:
            result = await self.session.execute(
                update(Task).where(Task.id == task_id).values(state=state)
            )
            if result.rowcount == 0:
                await self.session.rollback()
                return None
            await self.session.commit()
            return await self.session.get(Task, task_id, populate_existing=True)
        except SQLAlchemyError as e:
            raise await self._fail("update_task_state", e)

    async def delete_task(self, task_id: int) -> bool:
        """Delete the task; returns False if no row matched."""
        try:
            result = await self.session.execute(delete(Task).where(Task.id == task_id))
            if result.rowcount == 0:
                await self.session.rollback()
                return False
            await self.session.commit()
            logger.info("Task deleted: id=%s", task_id)
            return True
        except SQLAlchemyError as e:
            raise await self._fail("delete_task", e)


async def get_gateway(session: AsyncSession = Depends(get_db_session)) -> PersistenceGateway:
    """FastAPI dependency: a gateway bound to the request's session."""
    return PersistenceGateway(session)
