from __future__ import annotations

import io
import threading
import time
import uuid
from typing import Any, Optional

import pandas as pd
from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from redis import Redis
from redis.exceptions import RedisError
from sqlalchemy import select
from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.orm import Session
from tenacity import RetryError, retry, stop_after_attempt, wait_exponential_jitter

from catalog_admin import store
from catalog_admin.config import settings
from catalog_admin.country_select import is_all_selected, selected_codes, selection_label, toggle_all, toggle_code
from catalog_admin.db import db_session, engine, utcnow
from catalog_admin.jobs import DONE_STATUSES, start_save_task, summarize, task_counts
from catalog_admin.models import Base, ReviewSession, SaveTask
from catalog_admin.schema import (
    BulkDeleteRequest,
    BulkDeleteResponse,
    CountryCandidateView,
    CountryForm,
    CountrySelectRequest,
    CountrySelectResponse,
    CountryView,
    CreateReviewRequest,
    CreateTaskResponse,
    ListCountriesResponse,
    ListProductsResponse,
    ParseCountriesResponse,
    ParseProductsResponse,
    ParseTextRequest,
    ProductCandidateView,
    ProductForm,
    ProductView,
    ReviewView,
    TaskProgress,
    UpdateReviewItemRequest,
)
from text_import.candidates import (
    ParsedCountryCandidate,
    ParsedProductCandidate,
    country_record_fields,
    product_record_fields,
)
from text_import.country_text import COUNTRY_FORMAT_HINT, parse_country_text
from text_import.product_text import PRODUCT_FORMAT_HINT, parse_email_text
from text_import.review import ReviewList


_DB_READY = False
_DB_ERROR: Optional[str] = None
_DB_INIT_LOCK = threading.Lock()
_DB_LAST_TRY_AT = 0.0

_CANDIDATE_TYPES: dict[str, type] = {
    "products": ParsedProductCandidate,
    "countries": ParsedCountryCandidate,
}
_RECORD_FIELDS = {
    "products": product_record_fields,
    "countries": country_record_fields,
}
_FORMAT_HINTS = {
    "products": PRODUCT_FORMAT_HINT,
    "countries": COUNTRY_FORMAT_HINT,
}


def _empty_hint(kind: str) -> str:
    return f"Nothing parsed. Check the text format, e.g.:\n{_FORMAT_HINTS[kind]}"


def _request_id(request: Request) -> str:
    existing = request.headers.get("x-catalog-request-id") or request.headers.get("x-request-id")
    if existing:
        return existing
    return uuid.uuid4().hex[:12]


def _set_db_error(message: str) -> None:
    global _DB_READY  # noqa: PLW0603
    global _DB_ERROR  # noqa: PLW0603
    _DB_READY = False
    _DB_ERROR = (message or "DB error")[:500]


@retry(
    stop=stop_after_attempt(max(1, settings.db_init_attempts)),
    wait=wait_exponential_jitter(initial=1, max=10),
)
def _init_db() -> None:
    Base.metadata.create_all(bind=engine)


def _maybe_init_db() -> None:
    global _DB_READY  # noqa: PLW0603
    global _DB_ERROR  # noqa: PLW0603
    global _DB_LAST_TRY_AT  # noqa: PLW0603

    if _DB_READY:
        return
    now = time.time()
    if now - _DB_LAST_TRY_AT < max(0.0, settings.db_retry_interval_s):
        return
    if not _DB_INIT_LOCK.acquire(blocking=False):
        return
    try:
        _DB_LAST_TRY_AT = now
        Base.metadata.create_all(bind=engine)
        _DB_READY = True
        _DB_ERROR = None
    except Exception as exc:  # noqa: BLE001
        _DB_READY = False
        _DB_ERROR = f"DB init failed: {exc!s}"[:500]
    finally:
        _DB_INIT_LOCK.release()


def _require_db() -> None:
    if _DB_READY:
        return
    _maybe_init_db()
    if _DB_READY:
        return
    msg = _DB_ERROR or "Database not ready."
    raise HTTPException(status_code=503, detail=msg)


app = FastAPI(title="Export Catalog Admin", version="1.0.0")


@app.middleware("http")
async def _request_id_middleware(request: Request, call_next):  # type: ignore[no-untyped-def]
    rid = _request_id(request)
    request.state.request_id = rid  # type: ignore[attr-defined]
    response = await call_next(request)
    response.headers["x-catalog-request-id"] = rid
    return response


@app.exception_handler(store.RecordNotFound)
async def _record_not_found_handler(request: Request, exc: store.RecordNotFound):  # type: ignore[override]
    rid = getattr(request.state, "request_id", "unknown")
    return JSONResponse(status_code=404, content={"detail": f"Record not found: {exc!s}", "request_id": rid})


@app.exception_handler(store.UnknownCollection)
async def _unknown_collection_handler(request: Request, exc: store.UnknownCollection):  # type: ignore[override]
    rid = getattr(request.state, "request_id", "unknown")
    return JSONResponse(status_code=404, content={"detail": f"Unknown collection: {exc!s}", "request_id": rid})


@app.exception_handler(OperationalError)
async def _operational_error_handler(request: Request, exc: OperationalError):  # type: ignore[override]
    rid = getattr(request.state, "request_id", "unknown")
    print(f"[catalog][{rid}] db operational error: {exc!s}")
    _set_db_error(f"DB operational error: {exc!s}")
    return JSONResponse(status_code=503, content={"detail": _DB_ERROR, "request_id": rid})


@app.exception_handler(DBAPIError)
async def _dbapi_error_handler(request: Request, exc: DBAPIError):  # type: ignore[override]
    rid = getattr(request.state, "request_id", "unknown")
    print(f"[catalog][{rid}] db api error: {exc!s}")
    _set_db_error(f"DB error: {exc!s}")
    return JSONResponse(status_code=503, content={"detail": _DB_ERROR, "request_id": rid})


@app.exception_handler(RedisError)
async def _redis_error_handler(request: Request, exc: RedisError):  # type: ignore[override]
    rid = getattr(request.state, "request_id", "unknown")
    print(f"[catalog][{rid}] redis error: {exc!s}")
    return JSONResponse(status_code=503, content={"detail": f"Redis error: {exc!s}"[:500], "request_id": rid})


@app.exception_handler(Exception)
async def _unhandled_exception_handler(request: Request, exc: Exception):  # type: ignore[override]
    rid = getattr(request.state, "request_id", "unknown")
    print(f"[catalog][{rid}] unhandled error: {type(exc).__name__}: {exc!s}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal Server Error",
            "error_type": type(exc).__name__,
            "error": str(exc)[:500],
            "request_id": rid,
        },
    )


origins = settings.cors_origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if origins == ["*"] else origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["x-catalog-request-id"],
)


@app.get("/health")
def health() -> dict[str, Any]:
    redis_ready: Optional[bool] = None
    redis_error: Optional[str] = None
    if settings.redis_url:
        try:
            r = Redis.from_url(settings.redis_url, socket_connect_timeout=1, socket_timeout=1)
            r.ping()
            redis_ready = True
        except Exception as exc:  # noqa: BLE001
            redis_ready = False
            redis_error = str(exc)[:300]
    return {
        "ok": True,
        "queue_mode": settings.queue_mode,
        "has_redis": bool(settings.redis_url),
        "redis_ready": redis_ready,
        "redis_error": redis_error,
        "db_ready": _DB_READY,
        "db_url_scheme": (settings.db_url.split(":", 1)[0] if settings.db_url else None),
        "db_error": _DB_ERROR,
    }


@app.on_event("startup")
def _startup() -> None:
    global _DB_READY  # noqa: PLW0603
    global _DB_ERROR  # noqa: PLW0603
    try:
        _init_db()
        _DB_READY = True
        _DB_ERROR = None
    except RetryError as exc:
        _DB_READY = False
        _DB_ERROR = f"DB init failed after retries: {exc.last_attempt.exception()!s}"[:500]
    except Exception as exc:  # noqa: BLE001
        _DB_READY = False
        _DB_ERROR = f"DB init failed: {exc!s}"[:500]


# --- stateless parsing ---


@app.post("/v1/parser/products", response_model=ParseProductsResponse)
def parse_products(req: ParseTextRequest) -> ParseProductsResponse:
    items = [ProductCandidateView(**c.to_dict()) for c in parse_email_text(req.text)]
    return ParseProductsResponse(total=len(items), items=items, hint=None if items else _empty_hint("products"))


@app.post("/v1/parser/countries", response_model=ParseCountriesResponse)
def parse_countries(req: ParseTextRequest) -> ParseCountriesResponse:
    items = [CountryCandidateView(**c.to_dict()) for c in parse_country_text(req.text)]
    return ParseCountriesResponse(total=len(items), items=items, hint=None if items else _empty_hint("countries"))


# --- review sessions ---


def _review_list(session: ReviewSession) -> ReviewList:
    candidate_type = _CANDIDATE_TYPES[session.kind]
    return ReviewList(candidate_type(**d) for d in (session.items or []))


def _store_review_list(session: ReviewSession, review: ReviewList) -> None:
    session.items = [c.to_dict() for c in review.items]
    session.updated_at = utcnow()


def _review_view(session: ReviewSession) -> ReviewView:
    view_type = ProductCandidateView if session.kind == "products" else CountryCandidateView
    items = [view_type(**d) for d in (session.items or [])]
    return ReviewView(
        review_id=session.review_id,
        kind=session.kind,  # type: ignore[arg-type]
        status=session.status,  # type: ignore[arg-type]
        created_at=session.created_at,
        updated_at=session.updated_at,
        total=len(items),
        selected=sum(1 for it in items if it.selected),
        items=items,
        hint=None if items else _empty_hint(session.kind),
    )


def _get_review(db: Session, review_id: str) -> ReviewSession:
    session = db.scalar(select(ReviewSession).where(ReviewSession.review_id == review_id))
    if not session:
        raise HTTPException(status_code=404, detail="Review not found.")
    return session


def _get_open_review(db: Session, review_id: str) -> ReviewSession:
    session = _get_review(db, review_id)
    if session.status != "OPEN":
        raise HTTPException(status_code=400, detail="Review was already saved.")
    return session


@app.post("/v1/reviews", response_model=ReviewView)
def create_review(req: CreateReviewRequest) -> ReviewView:
    _require_db()
    parse = parse_email_text if req.kind == "products" else parse_country_text
    candidates = parse(req.text)
    with db_session() as db:
        session = ReviewSession(kind=req.kind, source_text=req.text, items=[c.to_dict() for c in candidates])
        db.add(session)
        db.commit()
        db.refresh(session)
        return _review_view(session)


@app.get("/v1/reviews/{review_id}", response_model=ReviewView)
def get_review(review_id: str) -> ReviewView:
    _require_db()
    with db_session() as db:
        return _review_view(_get_review(db, review_id))


@app.patch("/v1/reviews/{review_id}/items/{index}", response_model=ReviewView)
def update_review_item(review_id: str, index: int, req: UpdateReviewItemRequest) -> ReviewView:
    _require_db()
    changes = req.model_dump(exclude_none=True)
    with db_session() as db:
        session = _get_open_review(db, review_id)
        review = _review_list(session)
        try:
            review.update(index, changes)
        except IndexError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except KeyError as exc:
            raise HTTPException(status_code=400, detail=str(exc.args[0] if exc.args else exc)) from exc
        _store_review_list(session, review)
        db.add(session)
        db.commit()
        db.refresh(session)
        return _review_view(session)


@app.post("/v1/reviews/{review_id}/items/{index}/toggle", response_model=ReviewView)
def toggle_review_item(review_id: str, index: int) -> ReviewView:
    _require_db()
    with db_session() as db:
        session = _get_open_review(db, review_id)
        review = _review_list(session)
        try:
            review.toggle(index)
        except IndexError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        _store_review_list(session, review)
        db.add(session)
        db.commit()
        db.refresh(session)
        return _review_view(session)


@app.delete("/v1/reviews/{review_id}/items/{index}", response_model=ReviewView)
def remove_review_item(review_id: str, index: int) -> ReviewView:
    _require_db()
    with db_session() as db:
        session = _get_open_review(db, review_id)
        review = _review_list(session)
        try:
            review.remove(index)
        except IndexError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        _store_review_list(session, review)
        db.add(session)
        db.commit()
        db.refresh(session)
        return _review_view(session)


@app.post("/v1/reviews/{review_id}/select-all", response_model=ReviewView)
def select_all_review_items(review_id: str, selected: bool = Query(default=True)) -> ReviewView:
    _require_db()
    with db_session() as db:
        session = _get_open_review(db, review_id)
        review = _review_list(session)
        review.set_all_selected(selected)
        _store_review_list(session, review)
        db.add(session)
        db.commit()
        db.refresh(session)
        return _review_view(session)


@app.post("/v1/reviews/{review_id}/save", response_model=CreateTaskResponse)
def save_review(review_id: str) -> CreateTaskResponse:
    _require_db()
    with db_session() as db:
        session = _get_open_review(db, review_id)
        kind = session.kind
        to_save = _review_list(session).selected()
        if not to_save:
            raise HTTPException(status_code=400, detail="Select at least one item to save.")

    payloads = [_RECORD_FIELDS[kind](c) for c in to_save]
    task_id, queued = start_save_task(collection=kind, payloads=payloads, review_id=review_id)

    with db_session() as db:
        session = _get_review(db, review_id)
        session.status = "SAVED"
        session.updated_at = utcnow()
        db.add(session)
        db.commit()
    return CreateTaskResponse(task_id=task_id, collection=kind, status="RUNNING", queued=queued)


@app.get("/v1/tasks/{task_id}", response_model=TaskProgress)
def get_task(task_id: str) -> TaskProgress:
    _require_db()
    counts = task_counts(task_id)
    with db_session() as db:
        task = db.scalar(select(SaveTask).where(SaveTask.task_id == task_id))
        if not task:
            raise HTTPException(status_code=404, detail="Task not found.")

        done = sum(counts.get(s, 0) for s in DONE_STATUSES)
        total = sum(counts.values())

        status = task.status
        if status == "RUNNING" and total > 0 and done == total:
            task.status = "COMPLETED"
            task.finished_at = utcnow()
            db.add(task)
            db.commit()
            status = "COMPLETED"

        return TaskProgress(
            task_id=task.task_id,
            collection=task.collection,
            review_id=task.review_id,
            status=status,  # type: ignore[arg-type]
            created_at=task.created_at,
            started_at=task.started_at,
            finished_at=task.finished_at,
            counts=counts,
            saved=counts.get("SAVED", 0),
            failed=counts.get("ERROR", 0),
            summary=summarize(task.collection, counts),
        )


# --- records ---


def _product_fields(form: ProductForm) -> dict[str, Any]:
    if not form.name.strip() or not form.category.strip():
        raise HTTPException(status_code=400, detail="Product name and category are required.")
    return product_record_fields(ParsedProductCandidate(**form.model_dump()))


def _country_fields(form: CountryForm) -> dict[str, Any]:
    if not form.name.strip() or not form.code.strip():
        raise HTTPException(status_code=400, detail="Country name and code are required.")
    return country_record_fields(ParsedCountryCandidate(**form.model_dump()))


@app.get("/v1/products", response_model=ListProductsResponse)
def list_products() -> ListProductsResponse:
    _require_db()
    items = [ProductView(**r) for r in store.list_records("products")]
    return ListProductsResponse(total=len(items), items=items)


@app.post("/v1/products", response_model=ProductView)
def create_product(form: ProductForm) -> ProductView:
    _require_db()
    record_id = store.create_record("products", _product_fields(form))
    return ProductView(**store.get_record("products", record_id))


@app.patch("/v1/products/{record_id}", response_model=ProductView)
def update_product(record_id: str, form: ProductForm) -> ProductView:
    _require_db()
    return ProductView(**store.update_record("products", record_id, _product_fields(form)))


@app.delete("/v1/products/{record_id}")
def delete_product(record_id: str) -> dict[str, Any]:
    _require_db()
    store.delete_record("products", record_id)
    return {"ok": True, "id": record_id}


@app.post("/v1/products/bulk-delete", response_model=BulkDeleteResponse)
def bulk_delete_products(req: BulkDeleteRequest) -> BulkDeleteResponse:
    _require_db()
    if not req.ids:
        raise HTTPException(status_code=400, detail="No products selected.")
    deleted, failed = store.delete_records("products", req.ids)
    return BulkDeleteResponse(deleted=deleted, failed=failed)


@app.get("/v1/countries", response_model=ListCountriesResponse)
def list_countries() -> ListCountriesResponse:
    _require_db()
    items = [CountryView(**r) for r in store.list_records("countries")]
    return ListCountriesResponse(total=len(items), items=items)


@app.post("/v1/countries", response_model=CountryView)
def create_country(form: CountryForm) -> CountryView:
    _require_db()
    record_id = store.create_record("countries", _country_fields(form))
    return CountryView(**store.get_record("countries", record_id))


@app.patch("/v1/countries/{record_id}", response_model=CountryView)
def update_country(record_id: str, form: CountryForm) -> CountryView:
    _require_db()
    return CountryView(**store.update_record("countries", record_id, _country_fields(form)))


@app.delete("/v1/countries/{record_id}")
def delete_country(record_id: str) -> dict[str, Any]:
    _require_db()
    store.delete_record("countries", record_id)
    return {"ok": True, "id": record_id}


@app.post("/v1/country-select", response_model=CountrySelectResponse)
def country_select(req: CountrySelectRequest) -> CountrySelectResponse:
    _require_db()
    countries = store.list_records("countries")
    value = req.value or ""
    if req.toggle and req.toggle.strip():
        value = toggle_code(value, req.toggle.strip())
    if req.toggle_all:
        value = toggle_all(countries, value)
    return CountrySelectResponse(
        value=value,
        selected_codes=selected_codes(value),
        all_selected=is_all_selected(countries, value),
        label=selection_label(countries, value),
    )


@app.get("/v1/exports/{collection}")
def export_collection(collection: str, format: str = Query(default="csv")):
    _require_db()
    fmt = (format or "csv").strip().lower()
    if fmt not in {"csv", "xlsx"}:
        raise HTTPException(status_code=400, detail="format must be csv or xlsx")

    records = store.list_records(collection)
    if not records:
        raise HTTPException(status_code=404, detail=f"No {collection} to export.")
    df = pd.DataFrame(
        [
            {
                k: (", ".join(v) if isinstance(v, list) else (v.isoformat() if hasattr(v, "isoformat") else v))
                for k, v in r.items()
            }
            for r in records
        ]
    )

    if fmt == "csv":
        buf = io.StringIO()
        df.to_csv(buf, index=False)
        data = buf.getvalue().encode("utf-8")
        return StreamingResponse(
            io.BytesIO(data),
            media_type="text/csv; charset=utf-8",
            headers={"Content-Disposition": f'attachment; filename="{collection}.csv"'},
        )

    xbuf = io.BytesIO()
    with pd.ExcelWriter(xbuf, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=collection)
    xbuf.seek(0)
    return StreamingResponse(
        xbuf,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f'attachment; filename="{collection}.xlsx"'},
    )
