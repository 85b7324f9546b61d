"""
TaskTrack Backend - Task SQLAlchemy Model
=========================================

What:  ORM model for the `tasks` table.
Who:   Read and written by PersistenceGateway; tracked by Alembic.

`state` is a plain completion flag. It starts false and may be set to either
value at any time; there is no workflow attached to it.
"""

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Integer, String, false
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tasktrack.database import Base

if TYPE_CHECKING:
    from tasktrack.models.user import User


class Task(Base):
    """A single to-do item owned by exactly one user."""

    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    task_name: Mapped[str] = mapped_column(String(255), nullable=False)

    state: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

    # Indexed: every list query filters on the owner
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    user: Mapped["User"] = relationship(back_populates="tasks")

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, user_id={self.user_id}, state={self.state})>"
