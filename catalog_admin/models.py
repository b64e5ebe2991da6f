from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from catalog_admin.db import utcnow


def _new_id() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    pass


class ProductRecord(Base):
    __tablename__ = "products"

    record_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(512), default="")
    category: Mapped[str] = mapped_column(String(512), default="", index=True)
    ingredients: Mapped[list[str]] = mapped_column(JSON, default=list)
    functions: Mapped[list[str]] = mapped_column(JSON, default=list)
    target_countries: Mapped[list[str]] = mapped_column(JSON, default=list)
    required_documents: Mapped[list[str]] = mapped_column(JSON, default=list)
    description: Mapped[str] = mapped_column(Text, default="")

    created_at: Mapped[datetime] = mapped_column(default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow)


class CountryRecord(Base):
    __tablename__ = "countries"

    record_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(256), default="")
    code: Mapped[str] = mapped_column(String(16), default="", index=True)
    requirements: Mapped[str] = mapped_column(Text, default="")
    documents: Mapped[list[str]] = mapped_column(JSON, default=list)

    created_at: Mapped[datetime] = mapped_column(default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow)


class ReviewSession(Base):
    __tablename__ = "review_sessions"

    review_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    kind: Mapped[str] = mapped_column(String(16), index=True)
    status: Mapped[str] = mapped_column(String(16), default="OPEN", index=True)
    source_text: Mapped[str] = mapped_column(Text, default="")
    # Candidate dicts in review order; always reassigned as a whole list.
    items: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)

    created_at: Mapped[datetime] = mapped_column(default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow)

    tasks: Mapped[list["SaveTask"]] = relationship(back_populates="review", cascade="all, delete-orphan")


class SaveTask(Base):
    __tablename__ = "save_tasks"

    task_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    review_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("review_sessions.review_id"), nullable=True, index=True
    )
    collection: Mapped[str] = mapped_column(String(32))

    status: Mapped[str] = mapped_column(String(24), default="RUNNING", index=True)

    created_at: Mapped[datetime] = mapped_column(default=utcnow)
    started_at: Mapped[Optional[datetime]] = mapped_column(nullable=True)
    finished_at: Mapped[Optional[datetime]] = mapped_column(nullable=True)

    review: Mapped[Optional["ReviewSession"]] = relationship(back_populates="tasks")
    items: Mapped[list["SaveTaskItem"]] = relationship(back_populates="task", cascade="all, delete-orphan")


class SaveTaskItem(Base):
    __tablename__ = "save_task_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    task_id: Mapped[str] = mapped_column(String(36), ForeignKey("save_tasks.task_id"), index=True)
    position: Mapped[int] = mapped_column(Integer)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)

    status: Mapped[str] = mapped_column(String(24), default="QUEUED", index=True)
    record_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    started_at: Mapped[Optional[datetime]] = mapped_column(nullable=True)
    finished_at: Mapped[Optional[datetime]] = mapped_column(nullable=True)

    task: Mapped["SaveTask"] = relationship(back_populates="items")
