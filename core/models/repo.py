"""
Tracked repository SQLAlchemy model.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import BigInteger, Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class Repo(Base):
    """
    A GitHub repository a user has chosen to track.

    ``webhook_secret`` signs the issue webhook GitHub delivers to
    ``POST /api/repos/{key}/hook``.
    """

    __tablename__ = "repos"

    # GitHub repository id
    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    owner_id: Mapped[int] = mapped_column(BigInteger, index=True)
    full_name: Mapped[str] = mapped_column(String(255))
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    private: Mapped[bool] = mapped_column(Boolean, default=False)
    model_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("ml_models.id", ondelete="SET NULL"), nullable=True
    )
    hook_id: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    webhook_secret: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    event_count: Mapped[int] = mapped_column(Integer, default=0)
    last_event: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    last_event_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    @property
    def owner(self) -> str:
        return self.full_name.split("/", 1)[0]

    @property
    def name(self) -> str:
        return self.full_name.split("/", 1)[-1]
