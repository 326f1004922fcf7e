"""
Registros API - Record SQLAlchemy Model
========================================

What:  ORM model for the `registros` table.
Who:   Used by RecordStore for every statement and by Database.create_schema().

Table Layout:
    registros(id, titulo, descricao, concluida)

    The column names are kept as they exist in deployed database files; the
    Python attributes use the API field names (title, description, completed).

    sqlite_autoincrement=True emits `INTEGER PRIMARY KEY AUTOINCREMENT`, so ids
    of deleted rows are never handed out again.
"""

from typing import Optional

from sqlalchemy import Integer, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from registros.database import Base


class Record(Base):
    """
    A single stored record.

    Lifecycle:
        1. Created by POST (completed = 0, id assigned by SQLite)
        2. Overwritten in place by PUT (every column rewritten)
        3. Removed by DELETE (no soft delete)
    """

    __tablename__ = "registros"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column("titulo", Text, nullable=False)

    description: Mapped[Optional[str]] = mapped_column("descricao", Text, nullable=True)

    # 0 = open, 1 = done. Nullable: a PUT without `completed` stores NULL.
    completed: Mapped[Optional[int]] = mapped_column(
        "concluida",
        Integer,
        nullable=True,
        default=0,
        server_default=text("0"),
    )

    def __repr__(self) -> str:
        return f"<Record(id={self.id}, title={self.title!r}, completed={self.completed})>"
