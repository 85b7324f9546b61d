"""
TaskTrack Backend - User SQLAlchemy Model
=========================================

What:  ORM model for the `users` table.
Who:   Read and written by PersistenceGateway; tracked by Alembic.

Table notes:
    - email carries a UNIQUE constraint, which also settles two concurrent
      registrations for the same address (the loser gets an IntegrityError).
    - password is stored as supplied; the login contract only needs
      "compare provided secret with stored secret".
    - created_in is written in UTC. PostgreSQL returns it timezone-aware;
      SQLite drops the offset, and LoginResponse reattaches UTC.
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, List

from sqlalchemy import DateTime, Integer, String, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tasktrack.database import Base

if TYPE_CHECKING:
    from tasktrack.models.task import Task


class User(Base):
    """
    An account that owns tasks.

    Lifecycle: inserted by /register, read by /login and by task routes
    (existence checks). Never updated or deleted by the API.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_name: Mapped[str] = mapped_column(String(100), nullable=False)

    email: Mapped[str] = mapped_column(String(255), nullable=False)

    password: Mapped[str] = mapped_column(String(255), nullable=False)

    created_in: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    tasks: Mapped[List["Task"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
