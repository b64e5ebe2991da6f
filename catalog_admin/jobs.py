from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import func, select

from catalog_admin import store
from catalog_admin.db import db_session, utcnow
from catalog_admin.models import SaveTask, SaveTaskItem
from catalog_admin.queue import enqueue


DONE_STATUSES = ("SAVED", "ERROR")


def save_item(*, task_id: str, item_id: int) -> None:
    """Write one queued record. A failure is kept on the item and never aborts the task."""
    with db_session() as db:
        item = db.scalar(select(SaveTaskItem).where(SaveTaskItem.task_id == task_id, SaveTaskItem.id == item_id))
        task = db.scalar(select(SaveTask).where(SaveTask.task_id == task_id))
        if not item or not task:
            return

        item.status = "RUNNING"
        item.started_at = utcnow()
        item.message = None
        db.add(item)
        db.commit()

        try:
            record_id = store.create_record(task.collection, dict(item.payload or {}))
            item.status = "SAVED"
            item.record_id = record_id
            item.finished_at = utcnow()
            db.add(item)
            db.commit()
        except Exception as exc:  # noqa: BLE001
            db.rollback()
            print(f"[catalog] save {task.collection} task={task_id} item={item_id} failed: {type(exc).__name__}: {exc!s}")
            item.status = "ERROR"
            item.message = f"{type(exc).__name__}: {exc!s}"[:500]
            item.finished_at = utcnow()
            db.add(item)
            db.commit()


def start_save_task(*, collection: str, payloads: list[dict[str, Any]], review_id: Optional[str] = None) -> tuple[str, int]:
    """
    Create a save task with one item per record and run or enqueue every item.

    Returns (task_id, queued). Items are independent writes; there is no
    atomicity across the batch.
    """
    with db_session() as db:
        task = SaveTask(collection=collection, review_id=review_id, status="RUNNING", started_at=utcnow())
        db.add(task)
        db.commit()
        db.refresh(task)
        task_id = task.task_id

        items = [SaveTaskItem(task_id=task_id, position=i, payload=p, status="QUEUED") for i, p in enumerate(payloads)]
        db.add_all(items)
        db.commit()
        item_ids = [it.id for it in items]

    queued = 0
    for item_id in item_ids:
        job_kwargs = {"task_id": task_id, "item_id": item_id}
        try:
            ref = enqueue("catalog_admin.jobs.save_item", kwargs=job_kwargs)
        except Exception as exc:  # noqa: BLE001
            print(f"[catalog] enqueue task={task_id} item={item_id} failed, saving inline: {type(exc).__name__}: {exc!s}")
            ref = None
        if ref is None:
            save_item(**job_kwargs)
        queued += 1
    return task_id, queued


def task_counts(task_id: str) -> dict[str, int]:
    with db_session() as db:
        rows = db.execute(
            select(SaveTaskItem.status, func.count()).where(SaveTaskItem.task_id == task_id).group_by(SaveTaskItem.status)
        ).all()
    return {str(status): int(n) for status, n in rows}


def summarize(collection: str, counts: dict[str, int]) -> str:
    saved = counts.get("SAVED", 0)
    failed = counts.get("ERROR", 0)
    pending = sum(n for s, n in counts.items() if s not in DONE_STATUSES)
    if pending:
        return f"{saved} {collection} saved so far, {pending} pending."
    if failed:
        return f"{saved} {collection} saved, some failed ({failed})."
    return f"{saved} {collection} saved."
