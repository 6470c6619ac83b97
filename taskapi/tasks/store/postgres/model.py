from datetime import date, datetime
from sqlalchemy import String, Text, Date, DateTime
from sqlalchemy.orm import declarative_base, Mapped, mapped_column

from taskapi.config import get_settings


settings = get_settings()

Base = declarative_base()


class TaskModel(Base):
    __tablename__ = settings.TASK_STORE_NAMESPACE

    id: Mapped[str] = mapped_column(String, primary_key=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    priority: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    def __init__(
        self,
        id: str,
        title: str,
        status: str,
        created_at: datetime,
        description: str = "",
        priority: str = "",
        due_date: date | None = None,
        updated_at: datetime | None = None,
    ):
        self.id = id
        self.title = title
        self.description = description
        self.status = status
        self.priority = priority
        self.due_date = due_date
        self.created_at = created_at
        self.updated_at = updated_at
