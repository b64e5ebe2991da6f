from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from catalog_admin.db import db_session, utcnow
from catalog_admin.models import Base, CountryRecord, ProductRecord


COLLECTIONS: dict[str, type[Base]] = {
    "products": ProductRecord,
    "countries": CountryRecord,
}

_RECORD_FIELDS: dict[str, tuple[str, ...]] = {
    "products": (
        "name",
        "category",
        "ingredients",
        "functions",
        "target_countries",
        "required_documents",
        "description",
    ),
    "countries": ("name", "code", "requirements", "documents"),
}


class UnknownCollection(LookupError):
    pass


class RecordNotFound(LookupError):
    pass


def _model(collection: str) -> Any:
    model = COLLECTIONS.get(collection)
    if model is None:
        raise UnknownCollection(collection)
    return model


def _clean_fields(collection: str, fields: dict[str, Any]) -> dict[str, Any]:
    allowed = _RECORD_FIELDS[collection]
    return {k: v for k, v in fields.items() if k in allowed}


def record_to_dict(collection: str, record: Any) -> dict[str, Any]:
    out: dict[str, Any] = {"id": record.record_id}
    for name in _RECORD_FIELDS[collection]:
        out[name] = getattr(record, name)
    out["created_at"] = record.created_at
    out["updated_at"] = record.updated_at
    return out


def _get(db: Session, collection: str, record_id: str) -> Any:
    model = _model(collection)
    record = db.scalar(select(model).where(model.record_id == record_id))
    if record is None:
        raise RecordNotFound(f"{collection}/{record_id}")
    return record


def create_record(collection: str, fields: dict[str, Any]) -> str:
    model = _model(collection)
    with db_session() as db:
        record = model(**_clean_fields(collection, fields))
        db.add(record)
        db.commit()
        db.refresh(record)
        return record.record_id


def list_records(collection: str) -> list[dict[str, Any]]:
    model = _model(collection)
    with db_session() as db:
        rows = db.scalars(select(model).order_by(model.created_at.asc())).all()
        return [record_to_dict(collection, r) for r in rows]


def get_record(collection: str, record_id: str) -> dict[str, Any]:
    with db_session() as db:
        return record_to_dict(collection, _get(db, collection, record_id))


def update_record(collection: str, record_id: str, fields: dict[str, Any]) -> dict[str, Any]:
    with db_session() as db:
        record = _get(db, collection, record_id)
        for name, value in _clean_fields(collection, fields).items():
            setattr(record, name, value)
        record.updated_at = utcnow()
        db.add(record)
        db.commit()
        db.refresh(record)
        return record_to_dict(collection, record)


def delete_record(collection: str, record_id: str) -> None:
    with db_session() as db:
        record = _get(db, collection, record_id)
        db.delete(record)
        db.commit()


def delete_records(collection: str, record_ids: list[str]) -> tuple[int, list[str]]:
    """Delete one by one; returns (deleted, failed ids) instead of stopping at the first miss."""
    _model(collection)
    deleted = 0
    failed: list[str] = []
    for record_id in record_ids:
        try:
            delete_record(collection, record_id)
            deleted += 1
        except Exception as exc:  # noqa: BLE001
            print(f"[catalog] delete {collection}/{record_id} failed: {type(exc).__name__}: {exc!s}")
            failed.append(record_id)
    return deleted, failed
